"""Engine layer: in-memory document model plus persistence backends."""

from __future__ import annotations

from sheetbind.constants import BookType

from .base import BookBackend, NativeBook, NativeFont, NativeFormat, NativeSheet
from .core import EngineBook, EngineFont, EngineFormat, EngineSheet
from .openpyxl_engine import OpenpyxlBackend
from .xlwings_engine import XlwingsBackend


def backend_for(book_type: BookType) -> BookBackend:
    """Return the persistence backend for a book type."""
    if book_type == BookType.XLS:
        return XlwingsBackend()
    return OpenpyxlBackend()


def create_native_book(
    book_type: BookType, backend: BookBackend | None = None
) -> EngineBook:
    """Create an engine book, choosing the backend from ``book_type`` by default."""
    book_type = BookType(book_type)
    return EngineBook(book_type, backend or backend_for(book_type))


__all__ = [
    "BookBackend",
    "EngineBook",
    "EngineFont",
    "EngineFormat",
    "EngineSheet",
    "NativeBook",
    "NativeFont",
    "NativeFormat",
    "NativeSheet",
    "OpenpyxlBackend",
    "XlwingsBackend",
    "backend_for",
    "create_native_book",
]
