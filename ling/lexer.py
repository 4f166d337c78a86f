"""Tokenizer for the Ling language.

Source text is scanned once, left to right, with a single character of
lookahead. The result is a list of `Token` objects terminated by an `EOF`
token. Problems such as stray characters or an unterminated string are
reported to the `Diagnostics` object and scanning carries on, so a single
run can surface every lexical error in the file.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List

from .errors import Diagnostics


@dataclass(frozen=True)
class Token:
    """A scanned token.

    `type` is a string kind. Operators and punctuation use their own spelling
    (`'('`, `'=='`), keywords use the keyword (`'class'`), and the remaining
    kinds are `'IDENT'`, `'NUMBER'`, `'STRING'` and `'EOF'`.
    """
    type: str
    lexeme: str
    literal: Any
    line: int

    def __str__(self) -> str:
        return f"{self.type} {self.lexeme} {self.literal}"


KEYWORDS = frozenset({
    'and', 'break', 'class', 'continue', 'else', 'false', 'for', 'fun', 'if',
    'nil', 'or', 'print', 'return', 'super', 'this', 'true', 'var', 'while',
})

SINGLE_CHAR_TOKENS = frozenset('(){},.-+;*')

# Characters that may be followed by '=' to form a two-character operator.
EQUAL_SUFFIXED = frozenset('!=<>')


def is_digit(c: str) -> bool:
    return '0' <= c <= '9'


def is_alpha(c: str) -> bool:
    return ('a' <= c <= 'z') or ('A' <= c <= 'Z') or c == '_'


def is_alnum(c: str) -> bool:
    return is_alpha(c) or is_digit(c)


def tokenize(source: str, diagnostics: Diagnostics) -> List[Token]:
    """Convert source code into a list of tokens ending with `EOF`."""
    tokens: List[Token] = []
    i = 0
    line = 1
    length = len(source)

    def peek() -> str:
        return source[i] if i < length else '\0'

    def peek_next() -> str:
        return source[i + 1] if i + 1 < length else '\0'

    while i < length:
        start = i
        c = source[i]
        i += 1
        if c in SINGLE_CHAR_TOKENS:
            tokens.append(Token(c, c, None, line))
            continue
        if c in EQUAL_SUFFIXED:
            if peek() == '=':
                i += 1
            text = source[start:i]
            tokens.append(Token(text, text, None, line))
            continue
        if c == '/':
            if peek() == '/':
                # Line comment runs up to, not including, the newline
                while i < length and source[i] != '\n':
                    i += 1
            else:
                tokens.append(Token('/', '/', None, line))
            continue
        if c in ' \r\t':
            continue
        if c == '\n':
            line += 1
            continue
        if c == '"':
            while i < length and source[i] != '"':
                if source[i] == '\n':
                    line += 1
                i += 1
            if i >= length:
                diagnostics.error(line, 'Unterminated string.')
                continue
            i += 1  # closing quote
            tokens.append(Token('STRING', source[start:i], source[start + 1:i - 1], line))
            continue
        if is_digit(c):
            while is_digit(peek()):
                i += 1
            # A fractional part needs at least one digit after the dot
            if peek() == '.' and is_digit(peek_next()):
                i += 1
                while is_digit(peek()):
                    i += 1
            text = source[start:i]
            tokens.append(Token('NUMBER', text, float(text), line))
            continue
        if is_alpha(c):
            while is_alnum(peek()):
                i += 1
            text = source[start:i]
            kind = text if text in KEYWORDS else 'IDENT'
            tokens.append(Token(kind, text, None, line))
            continue
        diagnostics.error(line, 'Unexpected character.')
    tokens.append(Token('EOF', '', None, line))
    return tokens
