from typing import Any, List

from flexlang.errors import FlexRuntimeError
from flexlang.registry import Registry
from flexlang.types import ArrayVal

from .common import expect_array, expect_number


def register_arrays(registry: Registry) -> None:

    def std_array_new(interp, args: List[Any]) -> Any:
        if len(args) > 1:
            raise FlexRuntimeError('arrayNew() accepts at most 1 argument')
        size = expect_number('arrayNew', args[0], 'size') if args else 0.0
        if size < 0 or not size.is_integer():
            raise FlexRuntimeError('arrayNew() size must be a non-negative integer')
        return ArrayVal([None] * int(size))

    def std_array_length(interp, args: List[Any]) -> Any:
        value = args[0]
        if value is None:
            return 0.0
        if isinstance(value, str):
            return float(len(value))
        return float(len(expect_array('arrayLength', value)))

    def std_array_push(interp, args: List[Any]) -> Any:
        array = expect_array('arrayPush', args[0], 'first argument')
        array.items.append(args[1])
        return array

    def std_array_pop(interp, args: List[Any]) -> Any:
        array = expect_array('arrayPop', args[0])
        return array.items.pop() if array.items else None

    registry.register('arrayNew', None, std_array_new)
    registry.register('arrayLength', 1, std_array_length)
    registry.register('arrayPush', 2, std_array_push)
    registry.register('arrayPop', 1, std_array_pop)
