import io

from ling.errors import Diagnostics
from ling.interpreter import Interpreter
from ling.parser import parse_program
from ling.resolver import Resolver


def resolve(source):
    diagnostics = Diagnostics(stream=io.StringIO())
    program = parse_program(source, diagnostics)
    assert not diagnostics.had_error
    interp = Interpreter(diagnostics=diagnostics)
    Resolver(interp, diagnostics).resolve(program.body)
    return program, interp, diagnostics


def errors_for(source):
    return resolve(source)[2].messages


def test_local_distances():
    program, interp, diagnostics = resolve('{ var a = 1; { print a; } }')
    assert not diagnostics.had_error
    inner_print = program.body[0].statements[1].statements[0]
    assert interp.locals[inner_print.expression] == 1


def test_globals_get_no_entry():
    program, interp, _ = resolve('var a = 1; print a;')
    assert program.body[1].expression not in interp.locals


def test_function_parameters_and_closures():
    program, interp, _ = resolve('fun f(x) { fun g() { return x; } }')
    g = program.body[0].body[0]
    returned = g.body[0].value
    assert interp.locals[returned] == 1


def test_this_and_super_distances():
    program, interp, _ = resolve('class A { m() {} } class B < A { m() { super.m(); return this; } }')
    method = program.body[1].methods[0]
    super_call = method.body[0].expression
    this_expr = method.body[1].value
    # method body scope -> `this` scope -> `super` scope
    assert interp.locals[super_call.callee] == 2
    assert interp.locals[this_expr] == 1


def test_own_initializer_in_block():
    assert errors_for('var a = 1; { var a = a; }') == [
        "[line 1] Error at 'a': Can't read local variable in its own initializer.",
    ]


def test_own_initializer_at_global_scope():
    assert errors_for('var a = a;') == [
        "[line 1] Error at 'a': Can't read local variable in its own initializer.",
    ]
    assert errors_for('var a = 1; var a = a;') == []
    assert errors_for('var clock = clock;') == []


def test_duplicate_declarations():
    assert errors_for('{ var a = 1; var a = 2; }') == [
        "[line 1] Error at 'a': Already a variable with this name in this scope.",
    ]
    assert errors_for('fun f(a, a) {}') == [
        "[line 1] Error at 'a': Already a variable with this name in this scope.",
    ]
    assert errors_for('var a = 1; var a = 2; { var a = 3; }') == []


def test_return_rules():
    assert errors_for('return 1;') == ["[line 1] Error at 'return': Can't return from top-level code."]
    assert errors_for('class A { init() { return 1; } }') == [
        "[line 1] Error at 'return': Can't return a value from an initializer.",
    ]
    assert errors_for('class A { init() { return; } }') == []


def test_this_and_super_outside_classes():
    assert errors_for('print this;') == ["[line 1] Error at 'this': Can't use 'this' outside of a class."]
    assert errors_for('fun f() { super.x(); }') == [
        "[line 1] Error at 'super': Can't use 'super' outside of a class.",
    ]
    assert errors_for('class A { m() { super.m(); } }') == [
        "[line 1] Error at 'super': Can't use 'super' in a class with no superclass.",
    ]


def test_self_inheritance():
    assert errors_for('class A < A {}') == ["[line 1] Error at 'A': A class can't inherit from itself."]


def test_break_and_continue_need_a_loop():
    assert errors_for('break;') == ["[line 1] Error at 'break': Can't use 'break' outside of a loop."]
    assert errors_for('while (true) { fun f() { continue; } }') == [
        "[line 1] Error at 'continue': Can't use 'continue' outside of a loop.",
    ]
    assert errors_for('while (true) { break; }') == []
    assert errors_for('for (;;) { continue; }') == []


def test_all_errors_are_collected():
    messages = errors_for('return 1;\nprint this;')
    assert messages == [
        "[line 1] Error at 'return': Can't return from top-level code.",
        "[line 2] Error at 'this': Can't use 'this' outside of a class.",
    ]
