"""Recursive-descent parser for the Ling language.

The parser turns the token list produced by `ling.lexer.tokenize` into a
`Program` AST. Expression precedence, from lowest to highest, is:
assignment, `or`, `and`, equality, comparison, term, factor, unary, and
finally call/property chains over primary expressions.

Syntax errors are reported to the shared `Diagnostics` object. After an
error the parser skips ahead to the next statement boundary and resumes,
so one run reports as many independent errors as possible. The failed
declaration is left out of the resulting program, which is never executed
anyway once an error has been reported.

`for` loops have no node of their own; they are rewritten into a block
holding the initializer and a `WhileStmt`.
"""

from __future__ import annotations

from typing import List, Optional, Union

from .ast import (
    Program, Expr, Stmt, Assign, BinaryOp, Call, Get, Grouping, Literal,
    Logical, Set, Super, This, UnaryOp, Variable, Block, BreakStmt,
    ContinueStmt, ExprStmt, FuncDecl, ClassDecl, IfStmt, PrintStmt,
    ReturnStmt, VarDecl, WhileStmt,
)
from .errors import Diagnostics, ParseError
from .lexer import Token, tokenize

MAX_ARGUMENTS = 255

# Tokens that begin a declaration or statement; used to resynchronize.
STATEMENT_KEYWORDS = frozenset({
    'class', 'fun', 'var', 'for', 'if', 'while', 'print', 'return',
    'break', 'continue',
})


class Parser:
    def __init__(self, tokens: List[Token], diagnostics: Diagnostics):
        self.tokens = tokens
        self.diagnostics = diagnostics
        self.pos = 0

    # Token helpers

    def peek(self) -> Token:
        return self.tokens[self.pos]

    def previous(self) -> Token:
        return self.tokens[self.pos - 1]

    def is_at_end(self) -> bool:
        return self.peek().type == 'EOF'

    def advance(self) -> Token:
        if not self.is_at_end():
            self.pos += 1
        return self.previous()

    def match(self, expected: Union[str, List[str]]) -> bool:
        if self.is_at_end():
            return False
        token_type = self.peek().type
        if isinstance(expected, list):
            return token_type in expected
        return token_type == expected

    def consume(self, expected: str, message: str) -> Token:
        if self.match(expected):
            return self.advance()
        raise self.error(self.peek(), message)

    def error(self, token: Token, message: str) -> ParseError:
        self.diagnostics.token_error(token, message)
        return ParseError(message)

    def synchronize(self):
        self.advance()
        while not self.is_at_end():
            if self.previous().type == ';':
                return
            if self.peek().type in STATEMENT_KEYWORDS:
                return
            self.advance()

    # Declarations

    def parse(self) -> Program:
        statements: List[Stmt] = []
        while not self.is_at_end():
            try:
                stmt = self.parse_declaration()
            except RecursionError:
                # No sensible resume point inside the nesting; give up on the rest
                self.diagnostics.token_error(self.peek(), 'Too much nesting.')
                break
            if stmt is not None:
                statements.append(stmt)
        return Program(statements)

    def parse_declaration(self) -> Optional[Stmt]:
        try:
            if self.match('class'):
                self.advance()
                return self.parse_class_decl()
            if self.match('fun'):
                self.advance()
                return self.parse_func_decl('function')
            if self.match('var'):
                self.advance()
                return self.parse_var_decl()
            return self.parse_statement()
        except ParseError:
            self.synchronize()
            return None

    def parse_class_decl(self) -> ClassDecl:
        name = self.consume('IDENT', 'Expect class name.')
        superclass: Optional[Variable] = None
        if self.match('<'):
            self.advance()
            self.consume('IDENT', 'Expect superclass name.')
            superclass = Variable(self.previous())
        self.consume('{', "Expect '{' before class body.")
        methods: List[FuncDecl] = []
        while not self.match('}') and not self.is_at_end():
            methods.append(self.parse_func_decl('method'))
        self.consume('}', "Expect '}' after class body.")
        return ClassDecl(name, superclass, methods)

    def parse_func_decl(self, kind: str) -> FuncDecl:
        name = self.consume('IDENT', f'Expect {kind} name.')
        self.consume('(', f"Expect '(' after {kind} name.")
        params: List[Token] = []
        if not self.match(')'):
            while True:
                if len(params) >= MAX_ARGUMENTS:
                    self.error(self.peek(), f"Can't have more than {MAX_ARGUMENTS} parameters.")
                params.append(self.consume('IDENT', 'Expect parameter name.'))
                if not self.match(','):
                    break
                self.advance()
        self.consume(')', "Expect ')' after parameters.")
        self.consume('{', f"Expect '{{' before {kind} body.")
        body = self.parse_block()
        return FuncDecl(name, params, body)

    def parse_var_decl(self) -> VarDecl:
        name = self.consume('IDENT', 'Expect variable name.')
        initializer: Optional[Expr] = None
        if self.match('='):
            self.advance()
            initializer = self.parse_expression()
        self.consume(';', "Expect ';' after variable declaration.")
        return VarDecl(name, initializer)

    # Statements

    def parse_statement(self) -> Stmt:
        token = self.peek()
        if token.type == 'break':
            return self.parse_break_stmt()
        if token.type == 'continue':
            return self.parse_continue_stmt()
        if token.type == 'for':
            return self.parse_for_stmt()
        if token.type == 'if':
            return self.parse_if_stmt()
        if token.type == 'print':
            return self.parse_print_stmt()
        if token.type == 'return':
            return self.parse_return_stmt()
        if token.type == 'while':
            return self.parse_while_stmt()
        if token.type == '{':
            self.advance()
            return Block(self.parse_block())
        return self.parse_expr_stmt()

    def parse_break_stmt(self) -> BreakStmt:
        keyword = self.advance()
        self.consume(';', "Expect ';' after 'break'.")
        return BreakStmt(keyword)

    def parse_continue_stmt(self) -> ContinueStmt:
        keyword = self.advance()
        self.consume(';', "Expect ';' after 'continue'.")
        return ContinueStmt(keyword)

    def parse_for_stmt(self) -> Stmt:
        self.advance()
        self.consume('(', "Expect '(' after 'for'.")
        initializer: Optional[Stmt]
        if self.match(';'):
            self.advance()
            initializer = None
        elif self.match('var'):
            self.advance()
            initializer = self.parse_var_decl()
        else:
            initializer = self.parse_expr_stmt()

        condition: Optional[Expr] = None
        if not self.match(';'):
            condition = self.parse_expression()
        self.consume(';', "Expect ';' after loop condition.")

        increment: Optional[Expr] = None
        if not self.match(')'):
            increment = self.parse_expression()
        self.consume(')', "Expect ')' after for clauses.")

        body = self.parse_statement()
        if condition is None:
            condition = Literal(True)
        if increment is not None:
            loop: Stmt = WhileStmt(condition, Block([body, ExprStmt(increment)]))
        else:
            loop = WhileStmt(condition, body)
        if initializer is not None:
            return Block([initializer, loop])
        return loop

    def parse_if_stmt(self) -> IfStmt:
        self.advance()
        self.consume('(', "Expect '(' after 'if'.")
        condition = self.parse_expression()
        self.consume(')', "Expect ')' after if condition.")
        then_branch = self.parse_statement()
        else_branch: Optional[Stmt] = None
        # Binds to the nearest if, since the inner if parses its else first
        if self.match('else'):
            self.advance()
            else_branch = self.parse_statement()
        return IfStmt(condition, then_branch, else_branch)

    def parse_print_stmt(self) -> PrintStmt:
        self.advance()
        value = self.parse_expression()
        self.consume(';', "Expect ';' after value.")
        return PrintStmt(value)

    def parse_return_stmt(self) -> ReturnStmt:
        keyword = self.advance()
        value: Optional[Expr] = None
        if not self.match(';'):
            value = self.parse_expression()
        self.consume(';', "Expect ';' after return value.")
        return ReturnStmt(keyword, value)

    def parse_while_stmt(self) -> WhileStmt:
        self.advance()
        self.consume('(', "Expect '(' after 'while'.")
        condition = self.parse_expression()
        self.consume(')', "Expect ')' after condition.")
        body = self.parse_statement()
        return WhileStmt(condition, body)

    def parse_expr_stmt(self) -> ExprStmt:
        expr = self.parse_expression()
        self.consume(';', "Expect ';' after expression.")
        return ExprStmt(expr)

    def parse_block(self) -> List[Stmt]:
        """Parse declarations up to the closing brace; '{' is already consumed."""
        statements: List[Stmt] = []
        while not self.match('}') and not self.is_at_end():
            stmt = self.parse_declaration()
            if stmt is not None:
                statements.append(stmt)
        self.consume('}', "Expect '}' after block.")
        return statements

    # Expressions

    def parse_expression(self) -> Expr:
        return self.parse_assign()

    def parse_assign(self) -> Expr:
        expr = self.parse_logic_or()
        if self.match('='):
            equals = self.advance()
            value = self.parse_assign()
            if isinstance(expr, Variable):
                return Assign(expr.name, value)
            if isinstance(expr, Get):
                return Set(expr.object, expr.name, value)
            # Reported but not raised: the parser is not confused
            self.error(equals, 'Invalid assignment target.')
        return expr

    def parse_logic_or(self) -> Expr:
        expr = self.parse_logic_and()
        while self.match('or'):
            operator = self.advance()
            right = self.parse_logic_and()
            expr = Logical(expr, operator, right)
        return expr

    def parse_logic_and(self) -> Expr:
        expr = self.parse_equality()
        while self.match('and'):
            operator = self.advance()
            right = self.parse_equality()
            expr = Logical(expr, operator, right)
        return expr

    def parse_equality(self) -> Expr:
        expr = self.parse_comparison()
        while self.match(['!=', '==']):
            operator = self.advance()
            right = self.parse_comparison()
            expr = BinaryOp(expr, operator, right)
        return expr

    def parse_comparison(self) -> Expr:
        expr = self.parse_term()
        while self.match(['>', '>=', '<', '<=']):
            operator = self.advance()
            right = self.parse_term()
            expr = BinaryOp(expr, operator, right)
        return expr

    def parse_term(self) -> Expr:
        expr = self.parse_factor()
        while self.match(['-', '+']):
            operator = self.advance()
            right = self.parse_factor()
            expr = BinaryOp(expr, operator, right)
        return expr

    def parse_factor(self) -> Expr:
        expr = self.parse_unary()
        while self.match(['/', '*']):
            operator = self.advance()
            right = self.parse_unary()
            expr = BinaryOp(expr, operator, right)
        return expr

    def parse_unary(self) -> Expr:
        if self.match(['!', '-']):
            operator = self.advance()
            right = self.parse_unary()
            return UnaryOp(operator, right)
        return self.parse_call()

    def parse_call(self) -> Expr:
        expr = self.parse_primary()
        while True:
            if self.match('('):
                self.advance()
                expr = self.finish_call(expr)
            elif self.match('.'):
                self.advance()
                name = self.consume('IDENT', "Expect property name after '.'.")
                expr = Get(expr, name)
            else:
                break
        return expr

    def finish_call(self, callee: Expr) -> Call:
        arguments: List[Expr] = []
        if not self.match(')'):
            while True:
                if len(arguments) >= MAX_ARGUMENTS:
                    self.error(self.peek(), f"Can't have more than {MAX_ARGUMENTS} arguments.")
                arguments.append(self.parse_expression())
                if not self.match(','):
                    break
                self.advance()
        paren = self.consume(')', "Expect ')' after arguments.")
        return Call(callee, paren, arguments)

    def parse_primary(self) -> Expr:
        token = self.peek()
        if token.type == 'false':
            self.advance()
            return Literal(False)
        if token.type == 'true':
            self.advance()
            return Literal(True)
        if token.type == 'nil':
            self.advance()
            return Literal(None)
        if token.type in ('NUMBER', 'STRING'):
            self.advance()
            return Literal(token.literal)
        if token.type == 'super':
            keyword = self.advance()
            self.consume('.', "Expect '.' after 'super'.")
            method = self.consume('IDENT', 'Expect superclass method name.')
            return Super(keyword, method)
        if token.type == 'this':
            return This(self.advance())
        if token.type == 'IDENT':
            return Variable(self.advance())
        if token.type == '(':
            self.advance()
            expr = self.parse_expression()
            self.consume(')', "Expect ')' after expression.")
            return Grouping(expr)
        raise self.error(token, 'Expect expression.')


def parse_program(source: str, diagnostics: Optional[Diagnostics] = None) -> Program:
    """Tokenize and parse Ling source code into a Program AST.

    Errors are reported to `diagnostics`; check `diagnostics.had_error`
    before resolving or running the result.
    """
    if diagnostics is None:
        diagnostics = Diagnostics()
    tokens = tokenize(source, diagnostics)
    return Parser(tokens, diagnostics).parse()
