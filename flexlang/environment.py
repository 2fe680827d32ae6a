from typing import Any, Dict, Optional

from .errors import FlexRuntimeError


class Environment:
    """A scope frame mapping identifiers to values, chained to its parent."""
    def __init__(self, parent: Optional['Environment'] = None):
        self.parent = parent
        self.values: Dict[str, Any] = {}

    def define(self, name: str, value: Any) -> None:
        # Always writes to this frame, shadowing outer bindings
        self.values[name] = value

    def exists(self, name: str) -> bool:
        env: Optional[Environment] = self
        while env is not None:
            if name in env.values:
                return True
            env = env.parent
        return False

    def get(self, name: str) -> Any:
        if name in self.values:
            return self.values[name]
        if self.parent:
            return self.parent.get(name)
        raise FlexRuntimeError(f"Undefined variable '{name}'.")

    def assign(self, name: str, value: Any) -> None:
        if name in self.values:
            self.values[name] = value
            return
        if self.parent:
            self.parent.assign(name, value)
            return
        raise FlexRuntimeError(f"Undefined variable '{name}'.")

    def snapshot(self) -> Dict[str, Any]:
        """Return a copy of this frame's own bindings."""
        return dict(self.values)
