"""Application layer - runnable demonstrations of every pattern."""

from .decorators import demo, get_demo, list_demos

__all__ = ["demo", "get_demo", "list_demos"]
