import pytest

from ling.environment import Environment
from ling.errors import InternalError, LingRuntimeError
from ling.lexer import Token


def name(text):
    return Token('IDENT', text, None, 1)


def test_get_walks_outward():
    outer = Environment()
    outer.define('a', 1.0)
    inner = Environment(outer)
    assert inner.get(name('a')) == 1.0


def test_define_shadows_in_inner_frame():
    outer = Environment()
    outer.define('a', 'outer')
    inner = Environment(outer)
    inner.define('a', 'inner')
    assert inner.get(name('a')) == 'inner'
    assert outer.get(name('a')) == 'outer'


def test_assign_updates_owning_frame():
    outer = Environment()
    outer.define('a', 1.0)
    inner = Environment(outer)
    inner.assign(name('a'), 2.0)
    assert outer.values == {'a': 2.0}
    assert inner.values == {}


def test_undefined_variable():
    env = Environment(Environment())
    with pytest.raises(LingRuntimeError) as excinfo:
        env.get(name('missing'))
    assert excinfo.value.message == "Undefined variable 'missing'."
    with pytest.raises(LingRuntimeError):
        env.assign(name('missing'), 1.0)


def test_distance_addressing():
    root = Environment()
    root.define('a', 'root')
    middle = Environment(root)
    middle.define('a', 'middle')
    leaf = Environment(middle)
    assert leaf.ancestor(2) is root
    assert leaf.get_at(1, 'a') == 'middle'
    assert leaf.get_at(2, 'a') == 'root'
    leaf.assign_at(2, name('a'), 'changed')
    assert root.values['a'] == 'changed'
    assert middle.values['a'] == 'middle'


def test_distance_miss_is_an_internal_error():
    root = Environment()
    leaf = Environment(root)
    with pytest.raises(InternalError):
        leaf.get_at(1, 'nothing')
    with pytest.raises(InternalError):
        leaf.get_at(5, 'nothing')
