from __future__ import annotations

from typing import NoReturn, TypeVar

from sheetbind.constants import CellType
from sheetbind.engine.base import NativeBook
from sheetbind.errors import EngineError

T = TypeVar("T")


def ensure_ok(result: bool, native_book: NativeBook, operation: str) -> None:
    """Raise ``EngineError`` when a boolean engine call reports failure."""
    if not result:
        _raise_engine_error(native_book, operation)


def ensure_result(result: T | None, native_book: NativeBook, operation: str) -> T:
    """Return ``result`` unless it is the ``None`` failure sentinel."""
    if result is None:
        _raise_engine_error(native_book, operation)
    return result


def ensure_cell_type(result: int, native_book: NativeBook, operation: str) -> CellType:
    """Return the cell type unless it is the ``CellType.ERROR`` sentinel."""
    if result == CellType.ERROR:
        _raise_engine_error(native_book, operation)
    return CellType(result)


def _raise_engine_error(native_book: NativeBook, operation: str) -> NoReturn:
    # Read the slot before anything else can overwrite it.
    message = native_book.error_message()
    raise EngineError.for_operation(operation, message)


__all__ = ["ensure_cell_type", "ensure_ok", "ensure_result"]
