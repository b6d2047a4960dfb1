from __future__ import annotations

from functools import lru_cache

from .binding import ProxyRegistry
from .constants import flat_constants
from .engine import EngineBook, EngineFont, EngineFormat, EngineSheet
from .entities import Book, Font, Format, Sheet


def build_registry() -> ProxyRegistry:
    """Create a frozen registry with every entity type and flat constant."""
    registry = ProxyRegistry()
    registry.register(Book, EngineBook)
    registry.register(Sheet, EngineSheet)
    registry.register(Format, EngineFormat)
    registry.register(Font, EngineFont)
    registry.register_constants(flat_constants())
    registry.freeze()
    return registry


@lru_cache(maxsize=1)
def default_registry() -> ProxyRegistry:
    """Return the process-wide registry, building it on first use."""
    return build_registry()


__all__ = ["build_registry", "default_registry"]
