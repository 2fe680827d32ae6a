from typing import Any, List
import math
import re

from flexlang.errors import FlexRuntimeError
from flexlang.registry import Registry
from flexlang.types import to_string, type_name

from .common import expect_number

DIGITS = '0123456789abcdefghijklmnopqrstuvwxyz'

FLOAT_PREFIX = re.compile(r'[+-]?(Infinity|(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?)')


def parse_int(text: str, radix: int = 10) -> float:
    """Parse the longest integer prefix of ``text``; NaN when there is none."""
    text = text.strip()
    sign = 1.0
    if text[:1] in ('+', '-'):
        sign = -1.0 if text[0] == '-' else 1.0
        text = text[1:]
    if radix == 16 and text[:2].lower() == '0x':
        text = text[2:]
    value = 0
    count = 0
    for ch in text.lower():
        digit = DIGITS.find(ch)
        if digit < 0 or digit >= radix:
            break
        value = value * radix + digit
        count += 1
    if count == 0:
        return math.nan
    return sign * float(value)


def parse_float(text: str) -> float:
    """Parse the longest decimal prefix of ``text``; NaN when there is none."""
    match = FLOAT_PREFIX.match(text.strip())
    if not match:
        return math.nan
    return float(match.group(0).replace('Infinity', 'inf'))


def register_conversions(registry: Registry) -> None:

    def std_typeof(interp, args: List[Any]) -> Any:
        return type_name(args[0])

    def std_parse_int(interp, args: List[Any]) -> Any:
        if len(args) not in (1, 2):
            raise FlexRuntimeError('parseInt() requires 1 or 2 arguments')
        radix = 10
        if len(args) == 2:
            radix = int(expect_number('parseInt', args[1], 'radix'))
            if radix < 2 or radix > 36:
                raise FlexRuntimeError('parseInt() radix must be between 2 and 36')
        text = to_string(args[0])
        if radix == 10 and text.strip()[:2].lower() == '0x':
            radix = 16
        return parse_int(text, radix)

    def std_parse_float(interp, args: List[Any]) -> Any:
        return parse_float(to_string(args[0]))

    def std_to_string(interp, args: List[Any]) -> Any:
        return to_string(args[0])

    registry.register('typeof', 1, std_typeof)
    registry.register('parseInt', None, std_parse_int)
    registry.register('parseFloat', 1, std_parse_float)
    registry.register('toString', 1, std_to_string)
