from functools import lru_cache

from flexlang.registry import Registry

from .arrays import register_arrays
from .conversions import register_conversions
from .io import register_io
from .numeric import register_numeric
from .strings import register_strings


def build_standard_registry() -> Registry:
    """Build a fresh registry holding every standard native."""
    registry = Registry()
    register_io(registry)
    register_numeric(registry)
    register_strings(registry)
    register_arrays(registry)
    register_conversions(registry)
    return registry


@lru_cache(maxsize=None)
def default_registry() -> Registry:
    # Shared by every interpreter that is not given its own registry
    return build_standard_registry()
