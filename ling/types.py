"""Runtime object model for Ling.

Ling values map directly onto Python objects: `nil` is `None`, booleans
are `bool`, numbers are `float` and strings are `str`. Functions, classes
and instances are represented by the classes below. Everything that can
appear on the left of a call expression derives from `LingCallable`.
"""

from __future__ import annotations

import math
from decimal import Decimal
from typing import Any, Dict, List, Optional, TYPE_CHECKING

from .environment import Environment
from .errors import InternalError, LingRuntimeError, ReturnSignal
from .lexer import Token

if TYPE_CHECKING:
    from .ast import FuncDecl
    from .interpreter import Interpreter


class LingCallable:
    """Anything that can be called: functions, bound methods, classes, natives."""

    def arity(self) -> int:
        raise NotImplementedError

    def call(self, interpreter: 'Interpreter', arguments: List[Any]) -> Any:
        raise NotImplementedError


class LingFunction(LingCallable):
    """A user-defined function or method together with its closure."""
    def __init__(self, declaration: 'FuncDecl', closure: Environment, is_initializer: bool = False):
        self.declaration = declaration
        self.closure = closure
        self.is_initializer = is_initializer

    @property
    def name(self) -> str:
        return self.declaration.name.lexeme

    def bind(self, instance: 'LingInstance') -> 'LingFunction':
        environment = Environment(self.closure)
        environment.define('this', instance)
        return LingFunction(self.declaration, environment, self.is_initializer)

    def arity(self) -> int:
        return len(self.declaration.params)

    def call(self, interpreter: 'Interpreter', arguments: List[Any]) -> Any:
        environment = Environment(self.closure)
        for param, argument in zip(self.declaration.params, arguments):
            environment.define(param.lexeme, argument)
        outcome = interpreter.execute_block(self.declaration.body, environment)
        if self.is_initializer:
            # init always hands back the instance, whatever it returned
            return self.closure.get_at(0, 'this')
        if isinstance(outcome, ReturnSignal):
            return outcome.value
        if outcome is not None:
            raise InternalError(f'{type(outcome).__name__} escaped function {self.name}')
        return None

    def __repr__(self) -> str:
        return f"<fn {self.name}>"


class LingClass(LingCallable):
    """A class value. Calling it constructs an instance."""
    def __init__(self, name: str, superclass: Optional['LingClass'], methods: Dict[str, LingFunction]):
        self.name = name
        self.superclass = superclass
        self.methods = methods

    def find_method(self, name: str) -> Optional[LingFunction]:
        if name in self.methods:
            return self.methods[name]
        if self.superclass is not None:
            return self.superclass.find_method(name)
        return None

    def arity(self) -> int:
        initializer = self.find_method('init')
        if initializer is None:
            return 0
        return initializer.arity()

    def call(self, interpreter: 'Interpreter', arguments: List[Any]) -> Any:
        instance = LingInstance(self)
        initializer = self.find_method('init')
        if initializer is not None:
            initializer.bind(instance).call(interpreter, arguments)
        return instance

    def __repr__(self) -> str:
        return self.name


class LingInstance:
    """An instance of a Ling class. Fields are created on first assignment."""
    def __init__(self, klass: LingClass):
        self.klass = klass
        self.fields: Dict[str, Any] = {}

    def get(self, name: Token) -> Any:
        if name.lexeme in self.fields:
            return self.fields[name.lexeme]
        method = self.klass.find_method(name.lexeme)
        if method is not None:
            return method.bind(self)
        raise LingRuntimeError(name, f"Undefined property '{name.lexeme}'.")

    def set(self, name: Token, value: Any):
        self.fields[name.lexeme] = value

    def __repr__(self) -> str:
        return f"{self.klass.name} instance"


def format_number(value: float) -> str:
    """Shortest round-tripping decimal form of a number.

    Whole numbers lose their '.0'. Numbers at or above 1e15, or below 1e-4,
    use an exponent written as `1E+21` / `1.5E-07`.
    """
    if math.isnan(value):
        return 'NaN'
    if math.isinf(value):
        return '-Infinity' if value < 0 else 'Infinity'
    if value == 0:
        return '-0' if math.copysign(1.0, value) < 0 else '0'
    number = Decimal(repr(value)).normalize()
    exponent = number.adjusted()
    if exponent >= 15 or exponent < -4:
        sign, digits, _ = number.as_tuple()
        mantissa = str(digits[0])
        if len(digits) > 1:
            mantissa += '.' + ''.join(str(d) for d in digits[1:])
        return f"{'-' if sign else ''}{mantissa}E{'+' if exponent >= 0 else '-'}{abs(exponent):02d}"
    return format(number, 'f')


def to_string(value: Any) -> str:
    """Convert a Ling value to the text `print` shows for it."""
    if value is None:
        return 'nil'
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, float):
        return format_number(value)
    if isinstance(value, str):
        return value
    return repr(value)


def type_name(value: Any) -> str:
    """Return the Ling type name of a runtime value."""
    if value is None:
        return 'nil'
    if isinstance(value, bool):
        return 'boolean'
    if isinstance(value, float):
        return 'number'
    if isinstance(value, str):
        return 'string'
    if isinstance(value, LingClass):
        return 'class'
    if isinstance(value, LingCallable):
        return 'function'
    if isinstance(value, LingInstance):
        return 'instance'
    return type(value).__name__
