from typing import Any, List
import asyncio

from flexlang.errors import FlexRuntimeError
from flexlang.interpreter import DEFAULT_PROMPT
from flexlang.registry import Registry
from flexlang.types import is_number, is_truthy, to_string

MAX_SLEEP_MS = 10000


def register_io(registry: Registry) -> None:
    """Register the terminal natives. They talk to the host through ``interp.io``."""

    def std_print(interp, args: List[Any]) -> Any:
        interp.io.write(to_string(args[0]))
        return None

    def std_println(interp, args: List[Any]) -> Any:
        interp.io.write_line(to_string(args[0]))
        return None

    async def std_input(interp, args: List[Any]) -> Any:
        if len(args) > 1:
            raise FlexRuntimeError('input() accepts at most 1 argument')
        prompt = to_string(args[0]) if args and is_truthy(args[0]) else DEFAULT_PROMPT
        return await interp.read_input(prompt)

    def std_clear_screen(interp, args: List[Any]) -> Any:
        interp.io.clear()
        return None

    async def std_sleep(interp, args: List[Any]) -> Any:
        ms = args[0] if is_number(args[0]) and args[0] > 0 else 0
        ms = min(ms, MAX_SLEEP_MS)
        await asyncio.sleep(ms / 1000)
        return None

    registry.register('print', 1, std_print)
    registry.register('etb3', 1, std_println, aliases=('printLine', 'println'))
    registry.register('input', None, std_input, aliases=('da5l', 'd5l', 'scan'))
    registry.register('clearScreen', 0, std_clear_screen)
    registry.register('sleep', 1, std_sleep)
