from dataclasses import dataclass
from typing import Any, Callable, List

from .types import LingCallable


@dataclass(eq=False)
class BuiltinFunction(LingCallable):
    name: str
    fixed_arity: int
    fn: Callable[[List[Any]], Any]

    def arity(self) -> int:
        return self.fixed_arity

    def call(self, interpreter, arguments: List[Any]) -> Any:
        return self.fn(arguments)

    def __repr__(self) -> str:
        return "<native fn>"
