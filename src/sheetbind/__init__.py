"""sheetbind: Python proxies over an in-process spreadsheet engine.

Flat enumeration constants such as ``ALIGNH_CENTER`` or ``COLOR_GREEN`` are
module attributes resolved from the process-wide registry.
"""

from __future__ import annotations

from typing import Any

from .constants import AlignH, AlignV, BookType, CellType, Color, FillPattern
from .constants import NumFormat
from .entities import Book, Font, Format, Sheet
from .errors import (
    ArgumentError,
    EngineError,
    ErrorDetail,
    InternalError,
    OwnershipError,
    SheetbindError,
)
from .runtime import default_registry


def __getattr__(name: str) -> Any:
    # PEP 562: flat constants come from the registry.
    constants = default_registry().constants
    if name in constants:
        return constants[name]
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


def __dir__() -> list[str]:
    return sorted([*globals(), *default_registry().constants])


__all__ = [
    "AlignH",
    "AlignV",
    "ArgumentError",
    "Book",
    "BookType",
    "CellType",
    "Color",
    "EngineError",
    "ErrorDetail",
    "FillPattern",
    "Font",
    "Format",
    "InternalError",
    "NumFormat",
    "OwnershipError",
    "Sheet",
    "SheetbindError",
    "default_registry",
]
