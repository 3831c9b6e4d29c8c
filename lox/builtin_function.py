import time
from typing import Any, Callable, List

from lox.environment import Environment
from lox.runtime import LoxCallable


class BuiltinFunction(LoxCallable):
    """A callable implemented in Python. `fn` receives the argument list."""
    def __init__(self, name: str, arity: int, fn: Callable[[List[Any]], Any]):
        self.name = name
        self._arity = arity
        self.fn = fn

    def arity(self) -> int:
        return self._arity

    def call(self, interpreter, arguments: List[Any]) -> Any:
        return self.fn(arguments)

    def __repr__(self) -> str:
        return '<native fn>'

    __str__ = __repr__


def std_clock(args: List[Any]) -> float:
    return time.time()


def define_builtins(environment: Environment):
    """Seed a global environment with the native functions."""
    environment.define('clock', BuiltinFunction('clock', 0, std_clock))
