from typing import Any, Callable, Dict, Iterable, Optional

from .builtin_function import BuiltinFunction
from .environment import Environment


class Registry:
    """Name to native mapping installed into every interpreter's global frame.

    A registry is filled once and then only read, so one instance can be
    shared by interpreters running concurrently. Defining a name that is
    already present replaces the earlier entry.
    """
    def __init__(self):
        self.entries: Dict[str, Any] = {}

    def define(self, name: str, value: Any) -> None:
        self.entries[name] = value

    def register(self, name: str, arity: Optional[int], fn: Callable[..., Any],
                 aliases: Iterable[str] = ()) -> BuiltinFunction:
        builtin = BuiltinFunction(name, arity, fn)
        self.entries[name] = builtin
        # Aliases share the implementation but print under their own name
        for alias in aliases:
            self.entries[alias] = BuiltinFunction(alias, arity, fn)
        return builtin

    def install(self, env: Environment) -> None:
        for name, value in self.entries.items():
            env.define(name, value)

    def is_native_binding(self, name: str, value: Any) -> bool:
        """True if ``name`` still holds the value this registry installed."""
        return name in self.entries and self.entries[name] is value

    def __contains__(self, name: str) -> bool:
        return name in self.entries

    def __getitem__(self, name: str) -> Any:
        return self.entries[name]

    def __len__(self) -> int:
        return len(self.entries)
