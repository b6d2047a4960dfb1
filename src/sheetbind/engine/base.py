from __future__ import annotations

from pathlib import Path
from typing import Protocol

from sheetbind.constants import BookType


class NativeHandle(Protocol):
    """Common surface of every engine resource handle."""

    @property
    def alive(self) -> bool:
        """Whether the handle may still be used."""


class NativeFont(NativeHandle, Protocol):
    """Protocol for engine font records."""

    @property
    def book(self) -> NativeBook: ...

    def name(self) -> str | None: ...

    def set_name(self, name: str) -> bool: ...

    def size(self) -> float | None: ...

    def set_size(self, size: float) -> bool: ...

    def bold(self) -> bool | None: ...

    def set_bold(self, bold: bool) -> bool: ...

    def italic(self) -> bool | None: ...

    def set_italic(self, italic: bool) -> bool: ...

    def color(self) -> int | None: ...

    def set_color(self, color: int) -> bool: ...


class NativeFormat(NativeHandle, Protocol):
    """Protocol for engine cell format records."""

    @property
    def book(self) -> NativeBook: ...

    def get(self, attribute: str) -> int | bool | None: ...

    def set(self, attribute: str, value: int | bool) -> bool: ...

    def font(self) -> NativeFont | None: ...

    def set_font(self, font: NativeFont) -> bool: ...


class NativeSheet(NativeHandle, Protocol):
    """Protocol for engine sheets; cells are addressed zero-based."""

    @property
    def book(self) -> NativeBook: ...

    def name(self) -> str | None: ...

    def cell_type(self, row: int, col: int) -> int: ...

    def is_formula(self, row: int, col: int) -> bool | None: ...

    def cell_format(self, row: int, col: int) -> NativeFormat | None: ...

    def write_str(
        self, row: int, col: int, value: str, fmt: NativeFormat | None
    ) -> bool: ...

    def write_num(
        self, row: int, col: int, value: float, fmt: NativeFormat | None
    ) -> bool: ...

    def write_bool(
        self, row: int, col: int, value: bool, fmt: NativeFormat | None
    ) -> bool: ...

    def write_blank(self, row: int, col: int, fmt: NativeFormat) -> bool: ...

    def write_formula(
        self, row: int, col: int, expr: str, fmt: NativeFormat | None
    ) -> bool: ...

    def read_str(self, row: int, col: int) -> str | None: ...

    def read_num(self, row: int, col: int) -> float | None: ...

    def read_bool(self, row: int, col: int) -> bool | None: ...

    def read_formula(self, row: int, col: int) -> str | None: ...

    def set_col(
        self,
        first: int,
        last: int,
        width: float,
        fmt: NativeFormat | None,
        hidden: bool,
    ) -> bool: ...

    def set_row(
        self, row: int, height: float, fmt: NativeFormat | None, hidden: bool
    ) -> bool: ...

    def col_width(self, col: int) -> float | None: ...

    def row_height(self, row: int) -> float | None: ...

    def set_merge(
        self, row_first: int, row_last: int, col_first: int, col_last: int
    ) -> bool: ...

    def del_merge(self, row: int, col: int) -> bool: ...

    def first_row(self) -> int: ...

    def last_row(self) -> int: ...

    def first_col(self) -> int: ...

    def last_col(self) -> int: ...

    def used_cells(self) -> list[tuple[int, int]]: ...


class NativeBook(NativeHandle, Protocol):
    """Protocol for engine books; owns every other handle."""

    @property
    def book_type(self) -> BookType: ...

    def error_message(self) -> str: ...

    def add_sheet(
        self, name: str, init: NativeSheet | None = None
    ) -> NativeSheet | None: ...

    def get_sheet(self, index: int) -> NativeSheet | None: ...

    def del_sheet(self, index: int) -> bool: ...

    def sheet_count(self) -> int: ...

    def add_format(self, init: NativeFormat | None = None) -> NativeFormat | None: ...

    def add_font(self, init: NativeFont | None = None) -> NativeFont | None: ...

    def default_format(self) -> NativeFormat | None: ...

    def save(self, path: Path) -> bool: ...

    def load(self, path: Path) -> bool: ...

    def release(self) -> None: ...


class BookBackend(Protocol):
    """Protocol for persistence backends; they may raise, the book traps."""

    def save(self, book: object, path: Path) -> None:
        """Write the book's content to ``path``."""

    def load(self, book: object, path: Path) -> None:
        """Replace the book's content with the workbook at ``path``."""


__all__ = [
    "BookBackend",
    "NativeBook",
    "NativeFont",
    "NativeFormat",
    "NativeHandle",
    "NativeSheet",
]
