from typing import Any, List, Optional
import math

from flexlang.errors import FlexRuntimeError
from flexlang.registry import Registry
from flexlang.types import ArrayVal, to_string

from .common import expect_count, expect_number, expect_string


def clamp_index(value: float, length: int) -> int:
    if math.isnan(value):
        return 0
    return int(max(0, min(value, length)))


def substring(text: str, start: float, end: Optional[float] = None) -> str:
    """Slice between two clamped bounds, swapping them if reversed."""
    lo = clamp_index(start, len(text))
    hi = len(text) if end is None else clamp_index(end, len(text))
    if lo > hi:
        lo, hi = hi, lo
    return text[lo:hi]


def pad(text: str, width: float, filler: str, left: bool) -> str:
    missing = int(width) - len(text) if math.isfinite(width) else 0
    if missing <= 0 or filler == '':
        return text
    fill = (filler * (missing // len(filler) + 1))[:missing]
    return fill + text if left else text + fill


def register_strings(registry: Registry) -> None:
    """Register the string natives. Non-string receivers are stringified first,
    except for ``length`` which only accepts strings."""

    def std_length(interp, args: List[Any]) -> Any:
        return float(len(expect_string('length', args[0])))

    def std_to_upper(interp, args: List[Any]) -> Any:
        return to_string(args[0]).upper()

    def std_to_lower(interp, args: List[Any]) -> Any:
        return to_string(args[0]).lower()

    def std_substring(interp, args: List[Any]) -> Any:
        expect_count('substring', args, 2, 3)
        start = expect_number('substring', args[1], 'start')
        end = expect_number('substring', args[2], 'end') if len(args) == 3 else None
        return substring(to_string(args[0]), start, end)

    def std_replace(interp, args: List[Any]) -> Any:
        text, search, replacement = (to_string(a) for a in args)
        return text.replace(search, replacement)

    def std_split(interp, args: List[Any]) -> Any:
        text, delimiter = to_string(args[0]), to_string(args[1])
        if delimiter == '':
            return ArrayVal(list(text))
        return ArrayVal(text.split(delimiter))

    def std_trim(interp, args: List[Any]) -> Any:
        return to_string(args[0]).strip()

    def std_starts_with(interp, args: List[Any]) -> Any:
        return to_string(args[0]).startswith(to_string(args[1]))

    def std_ends_with(interp, args: List[Any]) -> Any:
        return to_string(args[0]).endswith(to_string(args[1]))

    def std_contains(interp, args: List[Any]) -> Any:
        return to_string(args[1]) in to_string(args[0])

    def std_index_of(interp, args: List[Any]) -> Any:
        return float(to_string(args[0]).find(to_string(args[1])))

    def std_repeat(interp, args: List[Any]) -> Any:
        count = expect_number('repeat', args[1], 'count')
        if count < 0 or not math.isfinite(count):
            raise FlexRuntimeError('repeat() count must be a non-negative number')
        return to_string(args[0]) * int(count)

    def std_pad_left(interp, args: List[Any]) -> Any:
        expect_count('padLeft', args, 2, 3)
        width = expect_number('padLeft', args[1], 'length')
        filler = to_string(args[2]) if len(args) == 3 else ' '
        return pad(to_string(args[0]), width, filler, left=True)

    def std_pad_right(interp, args: List[Any]) -> Any:
        expect_count('padRight', args, 2, 3)
        width = expect_number('padRight', args[1], 'length')
        filler = to_string(args[2]) if len(args) == 3 else ' '
        return pad(to_string(args[0]), width, filler, left=False)

    registry.register('length', 1, std_length)
    registry.register('toUpper', 1, std_to_upper)
    registry.register('toLower', 1, std_to_lower)
    registry.register('substring', None, std_substring)
    registry.register('replace', 3, std_replace)
    registry.register('split', 2, std_split)
    registry.register('trim', 1, std_trim)
    registry.register('startsWith', 2, std_starts_with)
    registry.register('endsWith', 2, std_ends_with)
    registry.register('contains', 2, std_contains)
    registry.register('indexOf', 2, std_index_of)
    registry.register('repeat', 2, std_repeat)
    registry.register('padLeft', None, std_pad_left)
    registry.register('padRight', None, std_pad_right)
