from typing import Any, Dict, Optional

from .errors import InternalError, LingRuntimeError
from .lexer import Token


class Environment:
    """A scope frame mapping names to values, linked to its enclosing frame.

    Frames are shared by reference: a closure keeps the frame it was created
    in alive for as long as the closure itself is reachable.
    """
    def __init__(self, enclosing: Optional['Environment'] = None):
        self.enclosing = enclosing
        self.values: Dict[str, Any] = {}

    def define(self, name: str, value: Any):
        self.values[name] = value

    def get(self, name: Token) -> Any:
        if name.lexeme in self.values:
            return self.values[name.lexeme]
        if self.enclosing is not None:
            return self.enclosing.get(name)
        raise LingRuntimeError(name, f"Undefined variable '{name.lexeme}'.")

    def assign(self, name: Token, value: Any):
        if name.lexeme in self.values:
            self.values[name.lexeme] = value
            return
        if self.enclosing is not None:
            self.enclosing.assign(name, value)
            return
        raise LingRuntimeError(name, f"Undefined variable '{name.lexeme}'.")

    def ancestor(self, distance: int) -> 'Environment':
        environment = self
        for _ in range(distance):
            if environment.enclosing is None:
                raise InternalError(f'no enclosing frame at distance {distance}')
            environment = environment.enclosing
        return environment

    def get_at(self, distance: int, name: str) -> Any:
        values = self.ancestor(distance).values
        if name not in values:
            raise InternalError(f"resolved name '{name}' missing at distance {distance}")
        return values[name]

    def assign_at(self, distance: int, name: Token, value: Any):
        values = self.ancestor(distance).values
        if name.lexeme not in values:
            raise InternalError(f"resolved name '{name.lexeme}' missing at distance {distance}")
        values[name.lexeme] = value
