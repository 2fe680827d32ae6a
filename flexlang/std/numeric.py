from typing import Any, Callable, List
import math
import random

from flexlang.errors import FlexRuntimeError
from flexlang.registry import Registry

from .common import expect_number


def round_half_up(x: float) -> float:
    """Round halves toward positive infinity (``round(-2.5)`` is -2)."""
    if not math.isfinite(x):
        return x
    return float(math.floor(x + 0.5))


def register_numeric(registry: Registry) -> None:
    """Register the math natives and the ``PI`` and ``E`` constants."""

    def unary(name: str, op: Callable[[float], float]):
        def std_fn(interp, args: List[Any]) -> Any:
            x = expect_number(name, args[0])
            try:
                return float(op(x))
            except ValueError:
                # math domain errors, e.g. sin(Infinity)
                return math.nan
        registry.register(name, 1, std_fn)

    def std_floor(x: float) -> float:
        return float(math.floor(x)) if math.isfinite(x) else x

    def std_ceil(x: float) -> float:
        return float(math.ceil(x)) if math.isfinite(x) else x

    def std_pow(interp, args: List[Any]) -> Any:
        base = expect_number('pow', args[0])
        exponent = expect_number('pow', args[1])
        try:
            return math.pow(base, exponent)
        except OverflowError:
            return math.inf
        except ValueError:
            return math.nan

    def std_sqrt(interp, args: List[Any]) -> Any:
        x = expect_number('sqrt', args[0])
        if x < 0:
            raise FlexRuntimeError('Cannot calculate square root of negative number')
        return math.sqrt(x)

    def std_random(interp, args: List[Any]) -> Any:
        if len(args) == 0:
            return random.random()
        if len(args) == 1:
            upper = expect_number('random', args[0])
            return float(math.floor(random.random() * upper))
        if len(args) == 2:
            low = expect_number('random', args[0])
            high = expect_number('random', args[1])
            return float(math.floor(random.random() * (high - low)) + low)
        raise FlexRuntimeError('random() accepts 0, 1, or 2 arguments')

    def extreme(name: str, pick: Callable[..., float]):
        def std_fn(interp, args: List[Any]) -> Any:
            if len(args) < 1:
                raise FlexRuntimeError(f"{name}() requires at least 1 argument")
            numbers = [expect_number(name, a) for a in args]
            if any(math.isnan(n) for n in numbers):
                return math.nan
            return pick(numbers)
        registry.register(name, None, std_fn)

    unary('abs', abs)
    unary('round', round_half_up)
    unary('floor', std_floor)
    unary('ceil', std_ceil)
    unary('sin', math.sin)
    unary('cos', math.cos)
    unary('tan', math.tan)
    registry.register('pow', 2, std_pow)
    registry.register('sqrt', 1, std_sqrt)
    registry.register('random', None, std_random)
    extreme('min', min)
    extreme('max', max)

    registry.define('PI', math.pi)
    registry.define('E', math.e)
