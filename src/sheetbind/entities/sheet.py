from __future__ import annotations

from typing import Any

from sheetbind.binding import (
    BookBound,
    Param,
    arguments,
    ensure_cell_type,
    ensure_ok,
    ensure_result,
    optional,
    required,
    resolve_dependency,
)
from sheetbind.constants import CellType

from .format import Format


def _row(name: str = "row") -> Param:
    return required(name, "int", ge=0)


def _col(name: str = "col") -> Param:
    return required(name, "int", ge=0)


_FORMAT = optional("format", "object", proxy_type=Format)


class Sheet(BookBound):
    """Worksheet of a book; rows and columns are zero-based."""

    def _format_handle(self, fmt: Format | None, operation: str) -> Any:
        if fmt is None:
            return None
        return resolve_dependency(self.book, fmt, Format, operation)

    def _write(self, operation: str, write: str, args: Any, value: Any) -> Sheet:
        handle = self._native(operation)
        native_format = self._format_handle(args.format, operation)
        ok = getattr(handle, write)(args.row, args.col, value, native_format)
        ensure_ok(ok, self._native_book(), operation)
        return self

    @arguments()
    def name(self, args: Any) -> str:
        handle = self._native("Sheet.name")
        return ensure_result(handle.name(), self._native_book(), "Sheet.name")

    @arguments(_row(), _col())
    def cell_type(self, args: Any) -> CellType:
        handle = self._native("Sheet.cell_type")
        return ensure_cell_type(
            handle.cell_type(args.row, args.col),
            self._native_book(),
            "Sheet.cell_type",
        )

    @arguments(_row(), _col())
    def is_formula(self, args: Any) -> bool:
        handle = self._native("Sheet.is_formula")
        return ensure_result(
            handle.is_formula(args.row, args.col),
            self._native_book(),
            "Sheet.is_formula",
        )

    @arguments(_row(), _col())
    def cell_format(self, args: Any) -> Format:
        handle = self._native("Sheet.cell_format")
        native_format = ensure_result(
            handle.cell_format(args.row, args.col),
            self._native_book(),
            "Sheet.cell_format",
        )
        return Format(self.book, native_format)

    @arguments(_row(), _col(), required("value", "str"), _FORMAT)
    def write_string(self, args: Any) -> Sheet:
        return self._write("Sheet.write_string", "write_str", args, args.value)

    @arguments(_row(), _col(), required("value", "float"), _FORMAT)
    def write_num(self, args: Any) -> Sheet:
        return self._write("Sheet.write_num", "write_num", args, args.value)

    @arguments(_row(), _col(), required("value", "bool"), _FORMAT)
    def write_bool(self, args: Any) -> Sheet:
        return self._write("Sheet.write_bool", "write_bool", args, args.value)

    @arguments(_row(), _col(), required("format", "object", proxy_type=Format))
    def write_blank(self, args: Any) -> Sheet:
        operation = "Sheet.write_blank"
        handle = self._native(operation)
        native_format = self._format_handle(args.format, operation)
        ensure_ok(
            handle.write_blank(args.row, args.col, native_format),
            self._native_book(),
            operation,
        )
        return self

    @arguments(_row(), _col(), required("expr", "str"), _FORMAT)
    def write_formula(self, args: Any) -> Sheet:
        return self._write("Sheet.write_formula", "write_formula", args, args.expr)

    @arguments(_row(), _col())
    def read_string(self, args: Any) -> str:
        handle = self._native("Sheet.read_string")
        return ensure_result(
            handle.read_str(args.row, args.col),
            self._native_book(),
            "Sheet.read_string",
        )

    @arguments(_row(), _col())
    def read_num(self, args: Any) -> float:
        handle = self._native("Sheet.read_num")
        return ensure_result(
            handle.read_num(args.row, args.col),
            self._native_book(),
            "Sheet.read_num",
        )

    @arguments(_row(), _col())
    def read_bool(self, args: Any) -> bool:
        handle = self._native("Sheet.read_bool")
        return ensure_result(
            handle.read_bool(args.row, args.col),
            self._native_book(),
            "Sheet.read_bool",
        )

    @arguments(_row(), _col())
    def read_formula(self, args: Any) -> str:
        handle = self._native("Sheet.read_formula")
        return ensure_result(
            handle.read_formula(args.row, args.col),
            self._native_book(),
            "Sheet.read_formula",
        )

    @arguments(
        _col("first"),
        _col("last"),
        required("width", "float", ge=0),
        _FORMAT,
        optional("hidden", "bool", default=False),
    )
    def set_col(self, args: Any) -> Sheet:
        operation = "Sheet.set_col"
        handle = self._native(operation)
        native_format = self._format_handle(args.format, operation)
        ok = handle.set_col(args.first, args.last, args.width, native_format, args.hidden)
        ensure_ok(ok, self._native_book(), operation)
        return self

    @arguments(
        _row(),
        required("height", "float", ge=0),
        _FORMAT,
        optional("hidden", "bool", default=False),
    )
    def set_row(self, args: Any) -> Sheet:
        operation = "Sheet.set_row"
        handle = self._native(operation)
        native_format = self._format_handle(args.format, operation)
        ok = handle.set_row(args.row, args.height, native_format, args.hidden)
        ensure_ok(ok, self._native_book(), operation)
        return self

    @arguments(_col())
    def col_width(self, args: Any) -> float:
        handle = self._native("Sheet.col_width")
        return ensure_result(
            handle.col_width(args.col), self._native_book(), "Sheet.col_width"
        )

    @arguments(_row())
    def row_height(self, args: Any) -> float:
        handle = self._native("Sheet.row_height")
        return ensure_result(
            handle.row_height(args.row), self._native_book(), "Sheet.row_height"
        )

    @arguments(_row("row_first"), _row("row_last"), _col("col_first"), _col("col_last"))
    def set_merge(self, args: Any) -> Sheet:
        handle = self._native("Sheet.set_merge")
        ok = handle.set_merge(args.row_first, args.row_last, args.col_first, args.col_last)
        ensure_ok(ok, self._native_book(), "Sheet.set_merge")
        return self

    @arguments(_row(), _col())
    def del_merge(self, args: Any) -> Sheet:
        handle = self._native("Sheet.del_merge")
        ensure_ok(
            handle.del_merge(args.row, args.col), self._native_book(), "Sheet.del_merge"
        )
        return self

    @arguments()
    def first_row(self, args: Any) -> int:
        return self._native("Sheet.first_row").first_row()

    @arguments()
    def last_row(self, args: Any) -> int:
        """Return one past the last used row."""
        return self._native("Sheet.last_row").last_row()

    @arguments()
    def first_col(self, args: Any) -> int:
        return self._native("Sheet.first_col").first_col()

    @arguments()
    def last_col(self, args: Any) -> int:
        """Return one past the last used column."""
        return self._native("Sheet.last_col").last_col()

    @arguments()
    def used_cells(self, args: Any) -> list[tuple[int, int]]:
        """Return ``(row, col)`` of every stored cell in row-major order."""
        return self._native("Sheet.used_cells").used_cells()


__all__ = ["Sheet"]
