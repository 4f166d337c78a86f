"""Errors, diagnostics and control-flow signals for the Ling interpreter.

Compile-time problems (lexical, syntax, resolution) are reported through a
`Diagnostics` object that every stage of the pipeline receives explicitly.
Runtime problems are raised as `LingRuntimeError` and reported once by the
interpreter. `return`, `break` and `continue` are not exceptions: they are
outcome values returned from `Interpreter.execute`.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import Any, List, Optional, TextIO, TYPE_CHECKING

if TYPE_CHECKING:
    from .lexer import Token


class LingRuntimeError(Exception):
    """Exception type used to propagate Ling runtime errors."""
    def __init__(self, token: 'Token', message: str):
        super().__init__(message)
        self.token = token
        self.message = message


class ParseError(Exception):
    """Raised inside the parser to unwind to the nearest declaration."""
    pass


class InternalError(Exception):
    """An interpreter invariant was broken; never a user error."""
    pass


@dataclass
class ReturnSignal:
    value: Any


@dataclass
class BreakSignal:
    keyword: 'Token'


@dataclass
class ContinueSignal:
    keyword: 'Token'


class Diagnostics:
    """Collects and prints the errors of one run.

    Messages are written to `stream`, or to whatever `sys.stderr` is at the
    time of reporting when no stream was given. Every line written is also
    kept in `messages`.
    """
    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream
        self.had_error = False
        self.had_runtime_error = False
        self.messages: List[str] = []

    def error(self, line: int, message: str):
        self.report(line, '', message)

    def token_error(self, token: 'Token', message: str):
        if token.type == 'EOF':
            self.report(token.line, ' at end', message)
        else:
            self.report(token.line, f" at '{token.lexeme}'", message)

    def runtime_error(self, error: LingRuntimeError):
        self.write(f"{error.message}\n[line {error.token.line}]")
        self.had_runtime_error = True

    def report(self, line: int, where: str, message: str):
        self.write(f"[line {line}] Error{where}: {message}")
        self.had_error = True

    def write(self, text: str):
        self.messages.append(text)
        print(text, file=self.stream if self.stream is not None else sys.stderr)
