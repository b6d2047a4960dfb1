"""In-process spreadsheet engine.

Every resource belongs to exactly one ``EngineBook``, which keeps them in
arena lists and owns the single error slot. Operations never raise: they
return ``False`` / ``None`` / ``CellType.ERROR`` and record a message that
``EngineBook.error_message`` returns until the next operation overwrites it.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, replace
from enum import IntEnum
import logging
import math
from pathlib import Path
import re
from typing import Final, Literal, TypeVar

from sheetbind.config import BookLimits, limits_for
from sheetbind.constants import AlignH, AlignV, BookType, CellType, Color, FillPattern
from sheetbind.constants import NumFormat
from sheetbind.shared.a1 import cell_ref, range_ref

from .base import BookBackend

logger = logging.getLogger(__name__)

T = TypeVar("T")

OK: Final = "ok"
DEFAULT_COL_WIDTH: Final = 8.43
DEFAULT_ROW_HEIGHT: Final = 15.0
DEFAULT_FONT_NAME: Final = "Calibri"
DEFAULT_FONT_SIZE: Final = 11.0
MAX_SHEET_NAME_LENGTH: Final = 31
_INVALID_SHEET_NAME_CHARS = re.compile(r"[\[\]:*?/\\]")

FormatAttribute = Literal[
    "num_format",
    "align_h",
    "align_v",
    "wrap",
    "shrink_to_fit",
    "fill_pattern",
    "pattern_foreground_color",
    "pattern_background_color",
]

FORMAT_ATTRIBUTE_TYPES: Final[dict[str, type[IntEnum] | type[bool]]] = {
    "num_format": NumFormat,
    "align_h": AlignH,
    "align_v": AlignV,
    "wrap": bool,
    "shrink_to_fit": bool,
    "fill_pattern": FillPattern,
    "pattern_foreground_color": Color,
    "pattern_background_color": Color,
}

DEFAULT_FORMAT_VALUES: Final[dict[str, int | bool]] = {
    "num_format": NumFormat.GENERAL,
    "align_h": AlignH.GENERAL,
    "align_v": AlignV.BOTTOM,
    "wrap": False,
    "shrink_to_fit": False,
    "fill_pattern": FillPattern.NONE,
    "pattern_foreground_color": Color.DEFAULT_FOREGROUND,
    "pattern_background_color": Color.DEFAULT_BACKGROUND,
}

CellValue = str | float | bool | None


def is_member(enum_cls: type[IntEnum], value: int) -> bool:
    """Return whether ``value`` is a defined code of ``enum_cls``."""
    try:
        enum_cls(value)
    except ValueError:
        return False
    return True


@dataclass
class CellRecord:
    """Stored content of one cell."""

    kind: CellType
    value: CellValue = None
    formula: str | None = None
    fmt: EngineFormat | None = None


@dataclass
class LineInfo:
    """Width/height metadata for one column or row."""

    size: float
    fmt: EngineFormat | None = None
    hidden: bool = False


class _Handle:
    """Arena entry owned by a book; unusable once retired or released."""

    def __init__(self, book: EngineBook) -> None:
        self._book = book
        self._retired = False

    @property
    def book(self) -> EngineBook:
        return self._book

    @property
    def alive(self) -> bool:
        return not self._retired and self._book.alive

    def retire(self) -> None:
        self._retired = True


class EngineFont(_Handle):
    """Mutable font record shared by every format that references it."""

    def __init__(self, book: EngineBook) -> None:
        super().__init__(book)
        self._name = DEFAULT_FONT_NAME
        self._size = DEFAULT_FONT_SIZE
        self._bold = False
        self._italic = False
        self._color: int = Color.AUTO

    def copy_from(self, other: EngineFont) -> None:
        self._name = other._name
        self._size = other._size
        self._bold = other._bold
        self._italic = other._italic
        self._color = other._color

    def snapshot(self) -> tuple[str, float, bool, bool, int]:
        return (self._name, self._size, self._bold, self._italic, self._color)

    def name(self) -> str | None:
        return self._book.succeed(self._name)

    def set_name(self, name: str) -> bool:
        if not name.strip():
            return self._book.fail("font name must not be empty")
        self._name = name
        return self._book.succeed(True)

    def size(self) -> float | None:
        return self._book.succeed(self._size)

    def set_size(self, size: float) -> bool:
        if not math.isfinite(size) or size <= 0 or size > 409:
            return self._book.fail(f"invalid font size: {size}")
        self._size = float(size)
        return self._book.succeed(True)

    def bold(self) -> bool | None:
        return self._book.succeed(self._bold)

    def set_bold(self, bold: bool) -> bool:
        self._bold = bold
        return self._book.succeed(True)

    def italic(self) -> bool | None:
        return self._book.succeed(self._italic)

    def set_italic(self, italic: bool) -> bool:
        self._italic = italic
        return self._book.succeed(True)

    def color(self) -> int | None:
        return self._book.succeed(self._color)

    def set_color(self, color: int) -> bool:
        if not is_member(Color, color):
            return self._book.fail(f"invalid color code: {color}")
        self._color = Color(color)
        return self._book.succeed(True)


class EngineFormat(_Handle):
    """Mutable cell format record; cells reference it, never copy it."""

    def __init__(self, book: EngineBook, font: EngineFont) -> None:
        super().__init__(book)
        self._values: dict[str, int | bool] = dict(DEFAULT_FORMAT_VALUES)
        self._font = font

    def copy_from(self, other: EngineFormat) -> None:
        self._values = dict(other._values)
        self._font = other._font

    @property
    def values(self) -> dict[str, int | bool]:
        return dict(self._values)

    @property
    def font_record(self) -> EngineFont:
        return self._font

    def get(self, attribute: str) -> int | bool | None:
        if attribute not in self._values:
            return self._book.fail_result(f"unknown format attribute: {attribute}")
        return self._book.succeed(self._values[attribute])

    def set(self, attribute: str, value: int | bool) -> bool:
        expected = FORMAT_ATTRIBUTE_TYPES.get(attribute)
        if expected is None:
            return self._book.fail(f"unknown format attribute: {attribute}")
        if expected is bool:
            self._values[attribute] = bool(value)
            return self._book.succeed(True)
        if not is_member(expected, value):  # type: ignore[arg-type]
            return self._book.fail(f"invalid {attribute} code: {value}")
        self._values[attribute] = expected(value)
        return self._book.succeed(True)

    def font(self) -> EngineFont | None:
        return self._book.succeed(self._font)

    def set_font(self, font: EngineFont) -> bool:
        reason = self._book.foreign_reason(font, "font")
        if reason:
            return self._book.fail(reason)
        self._font = font
        return self._book.succeed(True)


class EngineSheet(_Handle):
    """Sheet with sparse cell storage addressed by zero-based (row, col)."""

    def __init__(self, book: EngineBook, name: str) -> None:
        super().__init__(book)
        self._name = name
        self._cells: dict[tuple[int, int], CellRecord] = {}
        self._cols: dict[int, LineInfo] = {}
        self._rows: dict[int, LineInfo] = {}
        self._merges: list[tuple[int, int, int, int]] = []

    def copy_from(self, other: EngineSheet) -> None:
        self._cells = {key: replace(record) for key, record in other._cells.items()}
        self._cols = {key: replace(info) for key, info in other._cols.items()}
        self._rows = {key: replace(info) for key, info in other._rows.items()}
        self._merges = list(other._merges)

    def cells(self) -> Iterator[tuple[tuple[int, int], CellRecord]]:
        """Yield stored cells in row-major order."""
        for key in sorted(self._cells):
            yield key, self._cells[key]

    def columns(self) -> Iterator[tuple[int, LineInfo]]:
        for key in sorted(self._cols):
            yield key, self._cols[key]

    def rows(self) -> Iterator[tuple[int, LineInfo]]:
        for key in sorted(self._rows):
            yield key, self._rows[key]

    def merges(self) -> list[tuple[int, int, int, int]]:
        return list(self._merges)

    @property
    def title(self) -> str:
        return self._name

    def name(self) -> str | None:
        return self._book.succeed(self._name)

    def cell_type(self, row: int, col: int) -> int:
        reason = self._cell_reason(row, col)
        if reason:
            self._book.fail(reason)
            return CellType.ERROR
        record = self._cells.get((row, col))
        if record is None:
            return self._book.succeed(CellType.EMPTY)
        if record.kind == CellType.ERROR:
            self._book.fail(
                f"cell {cell_ref(row, col)} holds error value {record.value}"
            )
            return CellType.ERROR
        return self._book.succeed(record.kind)

    def is_formula(self, row: int, col: int) -> bool | None:
        reason = self._cell_reason(row, col)
        if reason:
            return self._book.fail_result(reason)
        record = self._cells.get((row, col))
        return self._book.succeed(record is not None and record.formula is not None)

    def cell_format(self, row: int, col: int) -> EngineFormat | None:
        reason = self._cell_reason(row, col)
        if reason:
            return self._book.fail_result(reason)
        record = self._cells.get((row, col))
        if record is not None and record.fmt is not None:
            return self._book.succeed(record.fmt)
        return self._book.default_format()

    def write_str(
        self, row: int, col: int, value: str, fmt: EngineFormat | None
    ) -> bool:
        return self._write(row, col, CellRecord(CellType.STRING, value), fmt)

    def write_num(
        self, row: int, col: int, value: float, fmt: EngineFormat | None
    ) -> bool:
        if not math.isfinite(value):
            return self._book.fail(f"number must be finite: {value}")
        return self._write(row, col, CellRecord(CellType.NUMBER, float(value)), fmt)

    def write_bool(
        self, row: int, col: int, value: bool, fmt: EngineFormat | None
    ) -> bool:
        return self._write(row, col, CellRecord(CellType.BOOLEAN, bool(value)), fmt)

    def write_blank(self, row: int, col: int, fmt: EngineFormat) -> bool:
        return self._write(row, col, CellRecord(CellType.BLANK), fmt)

    def write_formula(
        self, row: int, col: int, expr: str, fmt: EngineFormat | None
    ) -> bool:
        formula = expr.strip().removeprefix("=")
        if not formula:
            return self._book.fail("formula must not be empty")
        record = CellRecord(CellType.NUMBER, 0.0, formula=formula)
        return self._write(row, col, record, fmt)

    def write_error(self, row: int, col: int, code: str) -> bool:
        return self._write(row, col, CellRecord(CellType.ERROR, code), None)

    def read_str(self, row: int, col: int) -> str | None:
        return self._read(row, col, CellType.STRING, str)

    def read_num(self, row: int, col: int) -> float | None:
        return self._read(row, col, CellType.NUMBER, float)

    def read_bool(self, row: int, col: int) -> bool | None:
        return self._read(row, col, CellType.BOOLEAN, bool)

    def read_formula(self, row: int, col: int) -> str | None:
        reason = self._cell_reason(row, col)
        if reason:
            return self._book.fail_result(reason)
        record = self._cells.get((row, col))
        if record is None or record.formula is None:
            return self._book.fail_result(f"cell {cell_ref(row, col)} has no formula")
        return self._book.succeed(record.formula)

    def set_col(
        self,
        first: int,
        last: int,
        width: float,
        fmt: EngineFormat | None,
        hidden: bool,
    ) -> bool:
        limits = self._book.limits
        if first > last or last >= limits.max_cols:
            return self._book.fail(f"invalid column range: {first}..{last}")
        if not math.isfinite(width) or width < 0:
            return self._book.fail(f"invalid column width: {width}")
        reason = self._book.foreign_reason(fmt, "format")
        if reason:
            return self._book.fail(reason)
        for col in range(first, last + 1):
            self._cols[col] = LineInfo(float(width), fmt, hidden)
        return self._book.succeed(True)

    def set_row(
        self, row: int, height: float, fmt: EngineFormat | None, hidden: bool
    ) -> bool:
        if row >= self._book.limits.max_rows:
            return self._book.fail(f"invalid row: {row}")
        if not math.isfinite(height) or height < 0:
            return self._book.fail(f"invalid row height: {height}")
        reason = self._book.foreign_reason(fmt, "format")
        if reason:
            return self._book.fail(reason)
        self._rows[row] = LineInfo(float(height), fmt, hidden)
        return self._book.succeed(True)

    def col_width(self, col: int) -> float | None:
        if col >= self._book.limits.max_cols:
            return self._book.fail_result(f"invalid column: {col}")
        info = self._cols.get(col)
        return self._book.succeed(info.size if info else DEFAULT_COL_WIDTH)

    def row_height(self, row: int) -> float | None:
        if row >= self._book.limits.max_rows:
            return self._book.fail_result(f"invalid row: {row}")
        info = self._rows.get(row)
        return self._book.succeed(info.size if info else DEFAULT_ROW_HEIGHT)

    def set_merge(
        self, row_first: int, row_last: int, col_first: int, col_last: int
    ) -> bool:
        for row, col in ((row_first, col_first), (row_last, col_last)):
            reason = self._cell_reason(row, col)
            if reason:
                return self._book.fail(reason)
        if row_first > row_last or col_first > col_last:
            return self._book.fail(
                f"invalid merge range: {row_first}..{row_last}, {col_first}..{col_last}"
            )
        candidate = (row_first, row_last, col_first, col_last)
        for existing in self._merges:
            if _overlaps(candidate, existing):
                return self._book.fail(
                    f"merge {range_ref(*candidate)} overlaps {range_ref(*existing)}"
                )
        self._merges.append(candidate)
        return self._book.succeed(True)

    def del_merge(self, row: int, col: int) -> bool:
        for existing in self._merges:
            row_first, row_last, col_first, col_last = existing
            if row_first <= row <= row_last and col_first <= col <= col_last:
                self._merges.remove(existing)
                return self._book.succeed(True)
        return self._book.fail(f"no merged range at {cell_ref(row, col)}")

    def first_row(self) -> int:
        return self._book.succeed(min((r for r, _ in self._cells), default=0))

    def last_row(self) -> int:
        return self._book.succeed(max((r + 1 for r, _ in self._cells), default=0))

    def first_col(self) -> int:
        return self._book.succeed(min((c for _, c in self._cells), default=0))

    def last_col(self) -> int:
        return self._book.succeed(max((c + 1 for _, c in self._cells), default=0))

    def used_cells(self) -> list[tuple[int, int]]:
        return self._book.succeed(sorted(self._cells))

    def _cell_reason(self, row: int, col: int) -> str | None:
        limits = self._book.limits
        if not (0 <= row < limits.max_rows and 0 <= col < limits.max_cols):
            return f"invalid cell: row {row}, col {col}"
        return None

    def _write(
        self, row: int, col: int, record: CellRecord, fmt: EngineFormat | None
    ) -> bool:
        reason = self._cell_reason(row, col) or self._book.foreign_reason(
            fmt, "format"
        )
        if reason:
            return self._book.fail(reason)
        record.fmt = fmt
        self._cells[(row, col)] = record
        return self._book.succeed(True)

    def _read(
        self, row: int, col: int, kind: CellType, convert: type[T]
    ) -> T | None:
        reason = self._cell_reason(row, col)
        if reason:
            return self._book.fail_result(reason)
        record = self._cells.get((row, col))
        if record is None or record.kind != kind:
            found = record.kind.name.lower() if record else "empty"
            return self._book.fail_result(
                f"cell {cell_ref(row, col)} is {found}, not {kind.name.lower()}"
            )
        return self._book.succeed(convert(record.value))  # type: ignore[call-arg]


class EngineBook:
    """Root engine resource holding sheets, formats, fonts and the error slot."""

    def __init__(self, book_type: BookType, backend: BookBackend) -> None:
        self._book_type = BookType(book_type)
        self._limits = limits_for(self._book_type)
        self._backend = backend
        self._released = False
        self._error = OK
        self._sheets: list[EngineSheet] = []
        self._fonts: list[EngineFont] = []
        self._formats: list[EngineFormat] = []
        self._reset_styles()
        logger.debug("Created %s engine book.", self._book_type.name)

    @property
    def alive(self) -> bool:
        return not self._released

    @property
    def book_type(self) -> BookType:
        return self._book_type

    @property
    def limits(self) -> BookLimits:
        return self._limits

    def succeed(self, result: T) -> T:
        self._error = OK
        return result

    def fail(self, message: str) -> bool:
        """Record ``message`` in the error slot and return ``False``."""
        self._error = message
        return False

    def fail_result(self, message: str) -> None:
        """Record ``message`` in the error slot and return ``None``."""
        self._error = message
        return None

    def foreign_reason(self, handle: _Handle | None, label: str) -> str | None:
        """Return why ``handle`` cannot be used with this book, if it cannot."""
        if handle is None:
            return None
        if handle.book is not self:
            return f"{label} belongs to another book"
        if not handle.alive:
            return f"{label} is no longer valid"
        return None

    def error_message(self) -> str:
        return self._error

    def sheets(self) -> list[EngineSheet]:
        return list(self._sheets)

    def fonts(self) -> list[EngineFont]:
        return list(self._fonts)

    def formats(self) -> list[EngineFormat]:
        return list(self._formats)

    def add_sheet(
        self, name: str, init: EngineSheet | None = None
    ) -> EngineSheet | None:
        reason = self._sheet_name_reason(name) or self.foreign_reason(init, "sheet")
        if reason:
            return self.fail_result(reason)
        sheet = EngineSheet(self, name)
        if init is not None:
            sheet.copy_from(init)
        self._sheets.append(sheet)
        return self.succeed(sheet)

    def get_sheet(self, index: int) -> EngineSheet | None:
        if not 0 <= index < len(self._sheets):
            return self.fail_result(f"invalid sheet index: {index}")
        return self.succeed(self._sheets[index])

    def del_sheet(self, index: int) -> bool:
        if not 0 <= index < len(self._sheets):
            return self.fail(f"invalid sheet index: {index}")
        self._sheets.pop(index).retire()
        return self.succeed(True)

    def sheet_count(self) -> int:
        return self.succeed(len(self._sheets))

    def add_format(self, init: EngineFormat | None = None) -> EngineFormat | None:
        reason = self.foreign_reason(init, "format")
        if reason:
            return self.fail_result(reason)
        fmt = EngineFormat(self, self._fonts[0])
        if init is not None:
            fmt.copy_from(init)
        self._formats.append(fmt)
        return self.succeed(fmt)

    def add_font(self, init: EngineFont | None = None) -> EngineFont | None:
        reason = self.foreign_reason(init, "font")
        if reason:
            return self.fail_result(reason)
        font = EngineFont(self)
        if init is not None:
            font.copy_from(init)
        self._fonts.append(font)
        return self.succeed(font)

    def default_format(self) -> EngineFormat | None:
        return self.succeed(self._formats[0])

    def default_font(self) -> EngineFont:
        return self._fonts[0]

    def save(self, path: Path) -> bool:
        reason = self._path_reason(path)
        if reason:
            return self.fail(reason)
        try:
            self._backend.save(self, path)
        except Exception as exc:
            return self.fail(f"failed to save {path.name}: {exc}")
        logger.info("Saved %s book to %s", self._book_type.name, path)
        return self.succeed(True)

    def load(self, path: Path) -> bool:
        reason = self._path_reason(path)
        if reason:
            return self.fail(reason)
        if not path.is_file():
            return self.fail(f"file not found: {path}")
        staging = EngineBook(self._book_type, self._backend)
        try:
            self._backend.load(staging, path)
        except Exception as exc:
            staging.release()
            return self.fail(f"failed to load {path.name}: {exc}")
        self._adopt(staging)
        logger.info("Loaded %s book from %s", self._book_type.name, path)
        return self.succeed(True)

    def release(self) -> None:
        if self._released:
            return
        self._released = True
        self._sheets.clear()
        self._formats.clear()
        self._fonts.clear()
        logger.debug("Released %s engine book.", self._book_type.name)

    def _reset_styles(self) -> None:
        font = EngineFont(self)
        self._fonts = [font]
        self._formats = [EngineFormat(self, font)]

    def _sheet_name_reason(self, name: str) -> str | None:
        if not name or len(name) > MAX_SHEET_NAME_LENGTH:
            return f"sheet name must be 1-{MAX_SHEET_NAME_LENGTH} characters"
        if _INVALID_SHEET_NAME_CHARS.search(name):
            return f"sheet name contains invalid characters: {name}"
        if any(sheet.title.casefold() == name.casefold() for sheet in self._sheets):
            return f"sheet already exists: {name}"
        return None

    def _path_reason(self, path: Path) -> str | None:
        expected = self._limits.extension
        if path.suffix.lower() != expected:
            return (
                f"unsupported extension {path.suffix or '<none>'} for "
                f"{self._book_type.name} book; expected {expected}"
            )
        return None

    def _adopt(self, staging: EngineBook) -> None:
        """Take over ``staging``'s resources; previous handles go stale."""
        for handle in [*self._sheets, *self._formats, *self._fonts]:
            handle.retire()
        self._sheets = staging._sheets
        self._formats = staging._formats
        self._fonts = staging._fonts
        for handle in [*self._sheets, *self._formats, *self._fonts]:
            handle._book = self
        staging._sheets, staging._formats, staging._fonts = [], [], []
        staging.release()


def require(result: T | None, book: EngineBook) -> T:
    """Turn an engine sentinel into an exception inside a persistence backend."""
    if result is None or result is False:
        raise RuntimeError(book.error_message())
    return result


def _overlaps(a: tuple[int, int, int, int], b: tuple[int, int, int, int]) -> bool:
    return not (a[1] < b[0] or b[1] < a[0] or a[3] < b[2] or b[3] < a[2])


__all__ = [
    "CellRecord",
    "DEFAULT_COL_WIDTH",
    "DEFAULT_FORMAT_VALUES",
    "DEFAULT_ROW_HEIGHT",
    "EngineBook",
    "EngineFont",
    "EngineFormat",
    "EngineSheet",
    "FORMAT_ATTRIBUTE_TYPES",
    "FormatAttribute",
    "LineInfo",
    "is_member",
    "require",
]
