"""Static resolution pass for Ling programs.

The resolver walks the whole program once before it runs. For every
reference to a local variable (including `this` and `super`) it works out
how many scopes lie between the reference and the scope declaring the
name, and records that distance with the interpreter. References that are
not found in any enclosing local scope get no entry and are looked up in
the globals frame at run time.

Along the way it reports scoping mistakes: reading a variable in its own
initializer, duplicate declarations, `return` outside a function,
returning a value from `init`, `this`/`super` outside a (sub)class,
`break`/`continue` outside a loop and a class inheriting from itself.
None of these stop the pass.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, List, TYPE_CHECKING

from .ast import (
    Node, Expr, Stmt, Assign, BinaryOp, Call, Get, Grouping, Literal, Logical,
    Set, Super, This, UnaryOp, Variable, Block, BreakStmt, ContinueStmt,
    ExprStmt, FuncDecl, ClassDecl, IfStmt, PrintStmt, ReturnStmt, VarDecl,
    WhileStmt,
)
from .errors import Diagnostics
from .lexer import Token

if TYPE_CHECKING:
    from .interpreter import Interpreter


class FunctionKind(Enum):
    NONE = 'none'
    FUNCTION = 'function'
    INITIALIZER = 'initializer'
    METHOD = 'method'


class ClassKind(Enum):
    NONE = 'none'
    CLASS = 'class'
    SUBCLASS = 'subclass'


class Resolver:
    def __init__(self, interpreter: 'Interpreter', diagnostics: Diagnostics):
        self.interpreter = interpreter
        self.diagnostics = diagnostics
        self.scopes: List[Dict[str, bool]] = []
        # Readiness of top-level names; only consulted for `var a = a;` at global scope
        self.globals: Dict[str, bool] = {name: True for name in interpreter.globals.values}
        self.current_function = FunctionKind.NONE
        self.current_class = ClassKind.NONE
        self.loop_depth = 0

    def resolve(self, statements: List[Stmt]):
        for stmt in statements:
            self.resolve_node(stmt)

    def resolve_node(self, node: Node):
        if isinstance(node, Stmt):
            self.resolve_stmt(node)
        else:
            self.resolve_expr(node)

    # Statements

    def resolve_stmt(self, node: Stmt):
        if isinstance(node, Block):
            self.begin_scope()
            self.resolve(node.statements)
            self.end_scope()
            return
        if isinstance(node, VarDecl):
            self.declare(node.name)
            if node.initializer is not None:
                self.resolve_expr(node.initializer)
            self.define(node.name)
            return
        if isinstance(node, FuncDecl):
            # Defined before the body so the function can call itself
            self.declare(node.name)
            self.define(node.name)
            self.resolve_function(node, FunctionKind.FUNCTION)
            return
        if isinstance(node, ClassDecl):
            self.resolve_class(node)
            return
        if isinstance(node, ExprStmt):
            self.resolve_expr(node.expression)
            return
        if isinstance(node, IfStmt):
            self.resolve_expr(node.condition)
            self.resolve_stmt(node.then_branch)
            if node.else_branch is not None:
                self.resolve_stmt(node.else_branch)
            return
        if isinstance(node, PrintStmt):
            self.resolve_expr(node.expression)
            return
        if isinstance(node, ReturnStmt):
            if self.current_function == FunctionKind.NONE:
                self.diagnostics.token_error(node.keyword, "Can't return from top-level code.")
            if node.value is not None:
                if self.current_function == FunctionKind.INITIALIZER:
                    self.diagnostics.token_error(node.keyword, "Can't return a value from an initializer.")
                self.resolve_expr(node.value)
            return
        if isinstance(node, WhileStmt):
            self.resolve_expr(node.condition)
            self.loop_depth += 1
            self.resolve_stmt(node.body)
            self.loop_depth -= 1
            return
        if isinstance(node, BreakStmt):
            if self.loop_depth == 0:
                self.diagnostics.token_error(node.keyword, "Can't use 'break' outside of a loop.")
            return
        if isinstance(node, ContinueStmt):
            if self.loop_depth == 0:
                self.diagnostics.token_error(node.keyword, "Can't use 'continue' outside of a loop.")
            return
        raise NotImplementedError(f"resolve: unexpected node type {type(node)}")

    def resolve_class(self, node: ClassDecl):
        enclosing_class = self.current_class
        self.current_class = ClassKind.CLASS
        self.declare(node.name)
        self.define(node.name)

        if node.superclass is not None:
            if node.superclass.name.lexeme == node.name.lexeme:
                self.diagnostics.token_error(node.superclass.name, "A class can't inherit from itself.")
            self.current_class = ClassKind.SUBCLASS
            self.resolve_expr(node.superclass)
            self.begin_scope()
            self.scopes[-1]['super'] = True

        self.begin_scope()
        self.scopes[-1]['this'] = True
        for method in node.methods:
            kind = FunctionKind.INITIALIZER if method.name.lexeme == 'init' else FunctionKind.METHOD
            self.resolve_function(method, kind)
        self.end_scope()

        if node.superclass is not None:
            self.end_scope()
        self.current_class = enclosing_class

    def resolve_function(self, function: FuncDecl, kind: FunctionKind):
        enclosing_function = self.current_function
        enclosing_loop_depth = self.loop_depth
        self.current_function = kind
        # A loop around the declaration does not contain the body's statements
        self.loop_depth = 0
        self.begin_scope()
        for param in function.params:
            self.declare(param)
            self.define(param)
        self.resolve(function.body)
        self.end_scope()
        self.current_function = enclosing_function
        self.loop_depth = enclosing_loop_depth

    # Expressions

    def resolve_expr(self, node: Expr):
        if isinstance(node, Variable):
            name = node.name.lexeme
            if self.scopes:
                if self.scopes[-1].get(name) is False:
                    self.diagnostics.token_error(node.name, "Can't read local variable in its own initializer.")
            elif self.globals.get(name) is False:
                self.diagnostics.token_error(node.name, "Can't read local variable in its own initializer.")
            self.resolve_local(node, node.name)
            return
        if isinstance(node, Assign):
            self.resolve_expr(node.value)
            self.resolve_local(node, node.name)
            return
        if isinstance(node, (BinaryOp, Logical)):
            self.resolve_expr(node.left)
            self.resolve_expr(node.right)
            return
        if isinstance(node, UnaryOp):
            self.resolve_expr(node.right)
            return
        if isinstance(node, Grouping):
            self.resolve_expr(node.expression)
            return
        if isinstance(node, Literal):
            return
        if isinstance(node, Call):
            self.resolve_expr(node.callee)
            for argument in node.arguments:
                self.resolve_expr(argument)
            return
        if isinstance(node, Get):
            self.resolve_expr(node.object)
            return
        if isinstance(node, Set):
            self.resolve_expr(node.value)
            self.resolve_expr(node.object)
            return
        if isinstance(node, This):
            if self.current_class == ClassKind.NONE:
                self.diagnostics.token_error(node.keyword, "Can't use 'this' outside of a class.")
                return
            self.resolve_local(node, node.keyword)
            return
        if isinstance(node, Super):
            if self.current_class == ClassKind.NONE:
                self.diagnostics.token_error(node.keyword, "Can't use 'super' outside of a class.")
                return
            if self.current_class != ClassKind.SUBCLASS:
                self.diagnostics.token_error(node.keyword, "Can't use 'super' in a class with no superclass.")
                return
            self.resolve_local(node, node.keyword)
            return
        raise NotImplementedError(f"resolve: unexpected node type {type(node)}")

    # Scopes

    def begin_scope(self):
        self.scopes.append({})

    def end_scope(self):
        self.scopes.pop()

    def declare(self, name: Token):
        if not self.scopes:
            # Redeclaring a global is allowed
            if name.lexeme not in self.globals:
                self.globals[name.lexeme] = False
            return
        scope = self.scopes[-1]
        if name.lexeme in scope:
            self.diagnostics.token_error(name, 'Already a variable with this name in this scope.')
        scope[name.lexeme] = False

    def define(self, name: Token):
        if not self.scopes:
            self.globals[name.lexeme] = True
            return
        self.scopes[-1][name.lexeme] = True

    def resolve_local(self, expr: Expr, name: Token):
        for i in range(len(self.scopes) - 1, -1, -1):
            if name.lexeme in self.scopes[i]:
                self.interpreter.resolve(expr, len(self.scopes) - 1 - i)
                return
