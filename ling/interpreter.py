"""Tree-walking evaluator for the Ling language.

This module holds the `Interpreter`, which executes a resolved Ling
program, and the convenience functions that run the whole pipeline:
tokenize, parse, resolve, interpret. Evaluation never starts when the
earlier stages reported an error.

Statements are executed by `Interpreter.execute`, which returns `None`
on normal completion or one of the control-flow signals from
`ling.errors` (`ReturnSignal`, `BreakSignal`, `ContinueSignal`). Every
compound statement inspects the outcome of its children and either
handles the signal (loops handle break/continue, calls handle return)
or hands it upwards unchanged.

Environments are passed explicitly, so leaving a block or a call never
needs to restore anything: the caller still holds its own frame.
"""

from __future__ import annotations

import sys
from typing import Any, Dict, List, Optional, TextIO

from .ast import (
    Program, Expr, Stmt, Assign, BinaryOp, Call, Get, Grouping, Literal,
    Logical, Set, Super, This, UnaryOp, Variable, Block, BreakStmt,
    ContinueStmt, ExprStmt, FuncDecl, ClassDecl, IfStmt, PrintStmt,
    ReturnStmt, VarDecl, WhileStmt,
)
from .environment import Environment
from .errors import (
    BreakSignal, ContinueSignal, Diagnostics, InternalError, LingRuntimeError,
    ReturnSignal,
)
from .lexer import Token, tokenize
from .parser import Parser
from .resolver import Resolver
from .std import populate_native_environment
from .types import LingCallable, LingClass, LingFunction, LingInstance, to_string, type_name

Outcome = Optional[Any]  # None or a control-flow signal

# Each Ling call nests several Python frames
RECURSION_LIMIT = 10000


class Interpreter:
    """Core interpreter that executes a resolved Ling AST."""
    def __init__(self, debug_level: int = 0, debug_file: str = 'debug.txt',
                 out: Optional[TextIO] = None, diagnostics: Optional[Diagnostics] = None):
        self.globals = populate_native_environment(Environment())
        self.locals: Dict[Expr, int] = {}
        self.out = out
        self.diagnostics = diagnostics if diagnostics is not None else Diagnostics()
        self.debug_level = debug_level
        self.debug_fp = open(debug_file, 'w') if debug_level > 0 else None
        if sys.getrecursionlimit() < RECURSION_LIMIT:
            sys.setrecursionlimit(RECURSION_LIMIT)

    def debug(self, msg: str):
        if self.debug_fp:
            self.debug_fp.write(msg + "\n")
            self.debug_fp.flush()

    def close(self):
        if self.debug_fp:
            self.debug_fp.close()
            self.debug_fp = None

    # Public API

    def run_source(self, source: str) -> bool:
        """Tokenize, parse, resolve and execute `source`. Returns success."""
        tokens = tokenize(source, self.diagnostics)
        self.debug(f"scanned {len(tokens)} tokens")
        program = Parser(tokens, self.diagnostics).parse()
        if self.diagnostics.had_error:
            self.debug("syntax errors; not running")
            self.close()
            return False
        return self.run(program)

    def run(self, program: Program) -> bool:
        """Resolve and execute an already parsed program. Returns success."""
        try:
            self.debug(f"resolving {len(program.body)} statements")
            Resolver(self, self.diagnostics).resolve(program.body)
            if self.diagnostics.had_error:
                self.debug("resolution errors; not running")
                return False
            self.debug("interpreting")
            ok = self.interpret(program.body)
            self.debug(f"finished: {'ok' if ok else 'runtime error'}")
            return ok
        finally:
            self.close()

    def interpret(self, statements: List[Stmt]) -> bool:
        try:
            for stmt in statements:
                outcome = self.execute(stmt, self.globals)
                if outcome is not None:
                    raise InternalError(f"{type(outcome).__name__} escaped to top level")
        except LingRuntimeError as error:
            self.diagnostics.runtime_error(error)
            return False
        return True

    def resolve(self, expr: Expr, depth: int):
        self.locals[expr] = depth
        if self.debug_level >= 3:
            self.debug(f"resolve {type(expr).__name__} at line {self.line_of(expr)}: depth {depth}")

    # Statements

    def execute_block(self, statements: List[Stmt], env: Environment) -> Outcome:
        for stmt in statements:
            outcome = self.execute(stmt, env)
            if outcome is not None:
                return outcome
        return None

    def execute(self, node: Stmt, env: Environment) -> Outcome:
        if self.debug_level >= 4:
            self.debug(f"execute {type(node).__name__}")
        if isinstance(node, ExprStmt):
            self.evaluate(node.expression, env)
            return None
        if isinstance(node, PrintStmt):
            value = self.evaluate(node.expression, env)
            print(to_string(value), file=self.out)
            return None
        if isinstance(node, VarDecl):
            value = self.evaluate(node.initializer, env) if node.initializer is not None else None
            env.define(node.name.lexeme, value)
            if self.debug_level >= 2:
                self.debug(f"declare {node.name.lexeme}: {type_name(value)} = {to_string(value)}")
            return None
        if isinstance(node, Block):
            return self.execute_block(node.statements, Environment(env))
        if isinstance(node, IfStmt):
            if self.is_truthy(self.evaluate(node.condition, env)):
                return self.execute(node.then_branch, env)
            if node.else_branch is not None:
                return self.execute(node.else_branch, env)
            return None
        if isinstance(node, WhileStmt):
            return self.execute_while(node, env)
        if isinstance(node, FuncDecl):
            env.define(node.name.lexeme, LingFunction(node, env))
            if self.debug_level >= 2:
                self.debug(f"define function {node.name.lexeme}")
            return None
        if isinstance(node, ClassDecl):
            self.execute_class(node, env)
            return None
        if isinstance(node, ReturnStmt):
            value = self.evaluate(node.value, env) if node.value is not None else None
            return ReturnSignal(value)
        if isinstance(node, BreakStmt):
            return BreakSignal(node.keyword)
        if isinstance(node, ContinueStmt):
            return ContinueSignal(node.keyword)
        raise NotImplementedError(f"execute: unexpected node type {type(node)}")

    def execute_while(self, node: WhileStmt, env: Environment) -> Outcome:
        while self.is_truthy(self.evaluate(node.condition, env)):
            outcome = self.execute(node.body, env)
            if isinstance(outcome, BreakSignal):
                break
            if isinstance(outcome, ContinueSignal):
                continue
            if outcome is not None:
                return outcome
        return None

    def execute_class(self, node: ClassDecl, env: Environment):
        superclass: Optional[LingClass] = None
        if node.superclass is not None:
            value = self.evaluate(node.superclass, env)
            if not isinstance(value, LingClass):
                raise LingRuntimeError(node.superclass.name, 'Superclass must be a class.')
            superclass = value

        # Bound first so methods can refer to the class by name
        env.define(node.name.lexeme, None)
        method_env = env
        if superclass is not None:
            method_env = Environment(env)
            method_env.define('super', superclass)

        methods: Dict[str, LingFunction] = {}
        for method in node.methods:
            methods[method.name.lexeme] = LingFunction(method, method_env, method.name.lexeme == 'init')

        klass = LingClass(node.name.lexeme, superclass, methods)
        env.assign(node.name, klass)
        if self.debug_level >= 2:
            parent = f" < {superclass.name}" if superclass is not None else ''
            self.debug(f"define class {klass.name}{parent} with {len(methods)} methods")

    # Expressions

    def evaluate(self, node: Expr, env: Environment) -> Any:
        if isinstance(node, Literal):
            return node.value
        if isinstance(node, Grouping):
            return self.evaluate(node.expression, env)
        if isinstance(node, Variable):
            return self.look_up_variable(node.name, node, env)
        if isinstance(node, Assign):
            value = self.evaluate(node.value, env)
            distance = self.locals.get(node)
            if distance is not None:
                env.assign_at(distance, node.name, value)
            else:
                self.globals.assign(node.name, value)
            return value
        if isinstance(node, Logical):
            left = self.evaluate(node.left, env)
            if node.operator.type == 'or':
                if self.is_truthy(left):
                    return left
            elif not self.is_truthy(left):
                return left
            return self.evaluate(node.right, env)
        if isinstance(node, UnaryOp):
            right = self.evaluate(node.right, env)
            if node.operator.type == '-':
                self.check_number_operand(node.operator, right)
                return -right
            if node.operator.type == '!':
                return not self.is_truthy(right)
            raise InternalError(f'unknown unary operator {node.operator.lexeme}')
        if isinstance(node, BinaryOp):
            left = self.evaluate(node.left, env)
            right = self.evaluate(node.right, env)
            return self.apply_binary_op(node.operator, left, right)
        if isinstance(node, Call):
            callee = self.evaluate(node.callee, env)
            arguments = [self.evaluate(argument, env) for argument in node.arguments]
            return self.call_function(callee, arguments, node.paren)
        if isinstance(node, Get):
            obj = self.evaluate(node.object, env)
            if isinstance(obj, LingInstance):
                return obj.get(node.name)
            raise LingRuntimeError(node.name, 'Only instances have properties.')
        if isinstance(node, Set):
            obj = self.evaluate(node.object, env)
            if not isinstance(obj, LingInstance):
                raise LingRuntimeError(node.name, 'Only instances have fields.')
            value = self.evaluate(node.value, env)
            obj.set(node.name, value)
            return value
        if isinstance(node, This):
            return self.look_up_variable(node.keyword, node, env)
        if isinstance(node, Super):
            distance = self.locals[node]
            superclass = env.get_at(distance, 'super')
            # `this` lives in the frame just inside the one holding `super`
            instance = env.get_at(distance - 1, 'this')
            method = superclass.find_method(node.method.lexeme)
            if method is None:
                raise LingRuntimeError(node.method, f"Undefined property '{node.method.lexeme}'.")
            return method.bind(instance)
        raise NotImplementedError(f"evaluate: unexpected node type {type(node)}")

    def look_up_variable(self, name: Token, expr: Expr, env: Environment) -> Any:
        distance = self.locals.get(expr)
        if distance is not None:
            return env.get_at(distance, name.lexeme)
        return self.globals.get(name)

    def call_function(self, callee: Any, arguments: List[Any], paren: Token) -> Any:
        if not isinstance(callee, LingCallable):
            raise LingRuntimeError(paren, 'Can only call functions and classes.')
        if len(arguments) != callee.arity():
            raise LingRuntimeError(paren, f"Expected {callee.arity()} arguments but got {len(arguments)}.")
        if self.debug_level >= 3:
            self.debug(f"call {to_string(callee)} with {len(arguments)} arguments at line {paren.line}")
        try:
            return callee.call(self, arguments)
        except RecursionError:
            raise LingRuntimeError(paren, 'Stack overflow.') from None

    # Operators

    def apply_binary_op(self, operator: Token, a: Any, b: Any) -> Any:
        op = operator.type
        if op == '+':
            if isinstance(a, float) and isinstance(b, float):
                return a + b
            if isinstance(a, str) and isinstance(b, str):
                return a + b
            # Mixed string/number concatenates the number's printed form
            if isinstance(a, str) and isinstance(b, float):
                return a + to_string(b)
            if isinstance(a, float) and isinstance(b, str):
                return to_string(a) + b
            raise LingRuntimeError(operator, 'Operands must be two numbers or two strings.')
        if op == '==':
            return self.is_equal(a, b)
        if op == '!=':
            return not self.is_equal(a, b)
        self.check_number_operands(operator, a, b)
        if op == '-':
            return a - b
        if op == '*':
            return a * b
        if op == '/':
            if b == 0:
                raise LingRuntimeError(operator, 'Cannot divide by 0.')
            return a / b
        if op == '>':
            return a > b
        if op == '>=':
            return a >= b
        if op == '<':
            return a < b
        if op == '<=':
            return a <= b
        raise InternalError(f'unknown binary operator {operator.lexeme}')

    def check_number_operand(self, operator: Token, operand: Any):
        if isinstance(operand, float):
            return
        raise LingRuntimeError(operator, 'Operand must be a number.')

    def check_number_operands(self, operator: Token, a: Any, b: Any):
        if isinstance(a, float) and isinstance(b, float):
            return
        raise LingRuntimeError(operator, 'Operands must be numbers.')

    def is_truthy(self, value: Any) -> bool:
        if value is None:
            return False
        if isinstance(value, bool):
            return value
        return True

    def is_equal(self, a: Any, b: Any) -> bool:
        if a is None or b is None:
            return a is b
        # bool is an int subclass in Python; keep true and 1 apart
        if isinstance(a, bool) != isinstance(b, bool):
            return False
        if isinstance(a, (bool, float, str)):
            return type(a) is type(b) and a == b
        return a is b

    def line_of(self, expr: Expr) -> int:
        for attr in ('name', 'keyword'):
            token = getattr(expr, attr, None)
            if isinstance(token, Token):
                return token.line
        return 0


def run_program(source: str, debug_level: int = 0) -> bool:
    """Convenience function to run a Ling program from a source string."""
    interpreter = Interpreter(debug_level=debug_level)
    return interpreter.run_source(source)


def run_file(file_path: str, debug_level: int = 0) -> bool:
    """Read and run a Ling source file."""
    with open(file_path, 'r', encoding='utf-8') as f:
        source = f.read()
    return run_program(source, debug_level=debug_level)
