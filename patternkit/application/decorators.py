"""
Demo registration decorator.

Demonstrations register themselves under the catalog key of the pattern they
show, so the CLI can look them up by name without importing each one.
"""
from typing import Any, Callable, Dict, List, TypeVar

from patternkit.domain.exceptions import PatternNotFoundError

DemoFunc = Callable[..., Dict[str, Any]]
TDemo = TypeVar("TDemo", bound=DemoFunc)

# Demo registry keyed by catalog key, in registration order
_demo_registry: Dict[str, DemoFunc] = {}


def demo(pattern_key: str) -> Callable[[TDemo], TDemo]:
    """
    Mark a function as the demonstration of ``pattern_key``.

    Usage:
        @demo("observer")
        def observer_demo(config: AppConfig) -> Dict[str, Any]:
            ...

    Args:
        pattern_key: Catalog key of the demonstrated pattern

    Returns:
        The function, unchanged apart from registration metadata
    """
    def decorator(func: TDemo) -> TDemo:
        _demo_registry[pattern_key] = func
        func._pattern_key = pattern_key
        return func

    return decorator


def get_demo(pattern_key: str) -> DemoFunc:
    """Get the demo registered for ``pattern_key``."""
    _load_demos()
    try:
        return _demo_registry[pattern_key]
    except KeyError:
        raise PatternNotFoundError("Demo", pattern_key) from None


def list_demos() -> List[str]:
    """Keys of all registered demos."""
    _load_demos()
    return list(_demo_registry)


def _load_demos() -> None:
    # Importing the module runs its @demo decorators
    from patternkit.application import demos  # noqa: F401
