from ling.builtin_function import BuiltinFunction
from ling.environment import Environment
from ling.parser import parse_program
from ling.types import LingClass, LingFunction, LingInstance, format_number, to_string, type_name


def function(source):
    decl = parse_program(source).body[0]
    return LingFunction(decl, Environment())


def test_format_number():
    assert format_number(3.0) == '3'
    assert format_number(2.5) == '2.5'
    assert format_number(-0.0) == '-0'
    assert format_number(0.1 + 0.2) == '0.30000000000000004'
    assert format_number(-6.0) == '-6'
    assert format_number(123456789012345.0) == '123456789012345'
    assert format_number(1e15) == '1E+15'
    assert format_number(1e21) == '1E+21'
    assert format_number(-1.5e300) == '-1.5E+300'
    assert format_number(0.0001) == '0.0001'
    assert format_number(0.00001) == '1E-05'
    assert format_number(1.25e-7) == '1.25E-07'
    assert format_number(float('inf')) == 'Infinity'
    assert format_number(float('nan')) == 'NaN'


def test_to_string():
    assert to_string(None) == 'nil'
    assert to_string(True) == 'true'
    assert to_string(False) == 'false'
    assert to_string('text') == 'text'
    assert to_string(function('fun go() {}')) == '<fn go>'


def test_type_name():
    klass = LingClass('A', None, {})
    assert type_name(None) == 'nil'
    assert type_name(True) == 'boolean'
    assert type_name(1.0) == 'number'
    assert type_name('s') == 'string'
    assert type_name(klass) == 'class'
    assert type_name(LingInstance(klass)) == 'instance'
    assert type_name(BuiltinFunction('clock', 0, lambda args: 0.0)) == 'function'


def test_find_method_walks_superclasses():
    base_m = function('fun m() {}')
    base_n = function('fun n() {}')
    derived_m = function('fun m() {}')
    base = LingClass('Base', None, {'m': base_m, 'n': base_n})
    derived = LingClass('Derived', base, {'m': derived_m})
    assert derived.find_method('m') is derived_m
    assert derived.find_method('n') is base_n
    assert derived.find_method('missing') is None


def test_class_arity_follows_initializer():
    assert LingClass('A', None, {}).arity() == 0
    init = function('fun init(a, b, c) {}')
    base = LingClass('Base', None, {'init': init})
    assert base.arity() == 3
    assert LingClass('Derived', base, {}).arity() == 3


def test_bind_adds_this_frame():
    method = function('fun m() {}')
    instance = LingInstance(LingClass('A', None, {'m': method}))
    bound = method.bind(instance)
    assert bound is not method
    assert bound.closure.get_at(0, 'this') is instance
    assert bound.closure.enclosing is method.closure
    assert repr(instance) == 'A instance'


def test_builtin_identity():
    first = BuiltinFunction('clock', 0, lambda args: 0.0)
    second = BuiltinFunction('clock', 0, lambda args: 0.0)
    assert first != second
    assert first.arity() == 0
    assert repr(first) == '<native fn>'
