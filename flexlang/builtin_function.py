from dataclasses import dataclass
from typing import Any, Callable, Optional


@dataclass(eq=False)
class BuiltinFunction:
    """A native callable installed into the global frame.

    ``fn`` receives ``(interpreter, args)`` and may be a plain function or
    a coroutine function. An ``arity`` of None accepts any number of
    arguments; the function then validates its own argument count.
    """
    name: str
    arity: Optional[int]
    fn: Callable[..., Any]

    def __repr__(self) -> str:
        return f"<native fn: {self.name}>"

    def __str__(self) -> str:
        return f"<native fn: {self.name}>"
