"""Runtime values and value helpers for Flex.

Flex values map onto Python objects as follows:

    null      -> None
    bool      -> bool
    number    -> float (double precision, NaN and infinities allowed)
    string    -> str
    array     -> ArrayVal
    function  -> FunctionValue (see interpreter) or BuiltinFunction

This module holds the helpers shared by the interpreter and the standard
library: truthiness, equality, type names and the canonical string form
used by printing and concatenation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List
import math


@dataclass(eq=False)
class ArrayVal:
    """A mutable, heterogeneous Flex array.

    Arrays are reference values: two arrays are equal only when they are
    the same object, so ``eq`` is disabled and identity comparison is used.
    """
    items: List[Any] = field(default_factory=list)

    def __repr__(self) -> str:
        return f"Array({self.items!r})"

    def __len__(self) -> int:
        return len(self.items)


def is_number(value: Any) -> bool:
    # bool is a subclass of int in Python; Flex keeps them apart
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_callable(value: Any) -> bool:
    from .builtin_function import BuiltinFunction
    from .interpreter import FunctionValue
    return isinstance(value, (FunctionValue, BuiltinFunction))


def is_truthy(value: Any) -> bool:
    """Return the truthiness of a Flex value.

    null is false, a bool is itself, a number is false only when zero, a
    string or array is false only when empty and everything else is true.
    """
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if is_number(value):
        return value != 0
    if isinstance(value, str):
        return len(value) > 0
    if isinstance(value, ArrayVal):
        return len(value.items) > 0
    return True


def values_equal(a: Any, b: Any) -> bool:
    """Flex equality for ``==`` and ``!=``."""
    if a is None or b is None:
        return a is None and b is None
    if isinstance(a, bool) or isinstance(b, bool):
        return isinstance(a, bool) and isinstance(b, bool) and a == b
    if is_number(a) and is_number(b):
        return a == b
    if isinstance(a, str) and isinstance(b, str):
        return a == b
    return a is b


def format_number(value: float) -> str:
    if math.isnan(value):
        return 'NaN'
    if math.isinf(value):
        return 'Infinity' if value > 0 else '-Infinity'
    if float(value).is_integer() and abs(value) < 1e21:
        return str(int(value))
    return repr(float(value))


def to_string(value: Any) -> str:
    """Convert a Flex value to the text shown by print and concatenation."""
    if value is None:
        return 'null'
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if is_number(value):
        return format_number(value)
    if isinstance(value, str):
        return value
    if isinstance(value, ArrayVal):
        return '[' + ', '.join(to_string(item) for item in value.items) + ']'
    return str(value)


def type_name(value: Any) -> str:
    """Return the name reported by the ``typeof`` native."""
    if value is None:
        return 'null'
    if isinstance(value, bool):
        return 'boolean'
    if is_number(value):
        return 'number'
    if isinstance(value, str):
        return 'string'
    if isinstance(value, ArrayVal):
        return 'array'
    if is_callable(value):
        return 'function'
    return type(value).__name__
