"""Runtime value helpers for Lox.

Lox values map onto Python objects as follows:

    nil      -> None
    boolean  -> bool
    number   -> float
    string   -> str
    callable -> LoxCallable (functions, classes, natives)
    instance -> LoxInstance

Every operator goes through the helpers here so that the tag checks live
in one place. Note that `bool` is a subclass of `int` in Python, never of
`float`, so `isinstance(value, float)` never admits a boolean.
"""

from __future__ import annotations

import math
from decimal import Decimal
from typing import Any


def is_number(value: Any) -> bool:
    return isinstance(value, float)


def is_truthy(value: Any) -> bool:
    """`nil` and `false` are falsy; everything else, including 0 and "", is truthy."""
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    return True


def is_equal(a: Any, b: Any) -> bool:
    """Equality without cross-tag coercion: `0 == false` is false."""
    if a is None and b is None:
        return True
    if a is None or b is None:
        return False
    if type(a) is not type(b):
        return False
    if isinstance(a, (bool, float, str)):
        return a == b
    # functions, classes and instances compare by identity
    return a is b


def divide(a: float, b: float) -> float:
    """IEEE 754 division; Python raises on a zero divisor, Lox does not."""
    try:
        return a / b
    except ZeroDivisionError:
        if a == 0.0 or math.isnan(a):
            return math.nan
        return math.copysign(math.inf, a) * math.copysign(1.0, b)


def format_number(value: float) -> str:
    if math.isnan(value):
        return 'NaN'
    if math.isinf(value):
        return 'Infinity' if value > 0 else '-Infinity'
    text = repr(value)
    if text.endswith('.0'):
        text = text[:-2]
    elif value.is_integer():
        # repr switches to exponent form from 1e16 up
        text = format(Decimal(text), 'f')
    return text


def stringify(value: Any) -> str:
    if value is None:
        return 'nil'
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, float):
        return format_number(value)
    return str(value)


def type_name(value: Any) -> str:
    """Name of a value's tag, used in debug traces."""
    if value is None:
        return 'nil'
    if isinstance(value, bool):
        return 'boolean'
    if isinstance(value, float):
        return 'number'
    if isinstance(value, str):
        return 'string'
    return type(value).__name__
