from typing import Any, List

from flexlang.errors import FlexRuntimeError
from flexlang.types import ArrayVal, is_number


def expect_count(name: str, args: List[Any], low: int, high: int) -> None:
    if low <= len(args) <= high:
        return
    if low == high:
        raise FlexRuntimeError(f"{name}() requires exactly {low} argument{'s' if low != 1 else ''}")
    raise FlexRuntimeError(f"{name}() requires {low} to {high} arguments")


def expect_number(name: str, value: Any, what: str = 'argument') -> float:
    if not is_number(value):
        raise FlexRuntimeError(f"{name}() {what} must be a number")
    return float(value)


def expect_string(name: str, value: Any, what: str = 'argument') -> str:
    if not isinstance(value, str):
        raise FlexRuntimeError(f"{name}() {what} must be a string")
    return value


def expect_array(name: str, value: Any, what: str = 'argument') -> ArrayVal:
    if not isinstance(value, ArrayVal):
        raise FlexRuntimeError(f"{name}() {what} must be an array")
    return value
