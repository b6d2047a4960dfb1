from __future__ import annotations

from pathlib import Path

from sheetbind.constants import AlignH, BookType, CellType, Color
from sheetbind.engine import EngineBook, create_native_book
from sheetbind.engine.core import OK, is_member


def _book() -> EngineBook:
    return create_native_book(BookType.XLSX)


def test_error_slot_is_overwritten_by_next_operation() -> None:
    book = _book()
    assert book.get_sheet(3) is None
    assert book.error_message() == "invalid sheet index: 3"
    assert book.sheet_count() == 0
    assert book.error_message() == OK


def test_is_member() -> None:
    assert is_member(AlignH, 2)
    assert not is_member(AlignH, 42)
    assert is_member(Color, 0x7FFF)


def test_formula_prefix_is_stripped() -> None:
    sheet = _book().add_sheet("Data")
    assert sheet is not None
    assert sheet.write_formula(0, 0, " =A2*2", None)
    assert sheet.read_formula(0, 0) == "A2*2"


def test_error_cell_reports_error_sentinel() -> None:
    book = _book()
    sheet = book.add_sheet("Data")
    assert sheet is not None
    sheet.write_error(0, 0, "#DIV/0!")
    assert sheet.cell_type(0, 0) == CellType.ERROR
    assert book.error_message() == "cell A1 holds error value #DIV/0!"


def test_foreign_format_is_rejected() -> None:
    book, other = _book(), _book()
    sheet = book.add_sheet("Data")
    fmt = other.add_format()
    assert sheet is not None and fmt is not None
    assert sheet.write_str(0, 0, "x", fmt) is False
    assert book.error_message() == "format belongs to another book"
    assert sheet.cell_type(0, 0) == CellType.EMPTY


def test_deleted_sheet_is_retired() -> None:
    book = _book()
    sheet = book.add_sheet("Data")
    assert sheet is not None
    assert book.del_sheet(0)
    assert not sheet.alive
    assert book.del_sheet(0) is False


def test_release_kills_every_handle() -> None:
    book = _book()
    sheet = book.add_sheet("Data")
    fmt = book.add_format()
    font = book.add_font()
    book.release()
    assert not book.alive
    assert not any(handle.alive for handle in (sheet, fmt, font))  # type: ignore[union-attr]


def test_default_records_live_at_index_zero() -> None:
    book = _book()
    assert book.default_format() is book.formats()[0]
    assert book.default_font() is book.fonts()[0]
    fmt = book.add_format()
    assert fmt is not None
    assert fmt.font() is book.default_font()


def test_copied_sheet_is_independent() -> None:
    book = _book()
    source = book.add_sheet("Source")
    assert source is not None
    source.write_num(0, 0, 1.0, None)
    source.set_merge(0, 1, 0, 1)
    copy = book.add_sheet("Copy", source)
    assert copy is not None
    copy.write_num(0, 0, 2.0, None)
    assert source.read_num(0, 0) == 1.0
    assert copy.merges() == [(0, 1, 0, 1)]


def test_wrong_extension(tmp_path: Path) -> None:
    book = create_native_book(BookType.XLS)
    assert book.save(tmp_path / "out.xlsx") is False
    assert "expected .xls" in book.error_message()


def test_set_row_limits() -> None:
    book = create_native_book(BookType.XLS)
    sheet = book.add_sheet("Data")
    assert sheet is not None
    assert sheet.set_row(65_536, 10.0, None, False) is False
    assert book.error_message() == "invalid row: 65536"
    assert sheet.set_row(0, -1.0, None, False) is False


def test_non_finite_values_rejected() -> None:
    book = _book()
    sheet = book.add_sheet("Data")
    font = book.add_font()
    assert sheet is not None and font is not None
    assert sheet.write_num(0, 0, float("nan"), None) is False
    assert book.error_message() == "number must be finite: nan"
    assert sheet.cell_type(0, 0) == CellType.EMPTY
    assert font.set_size(float("nan")) is False
    assert font.size() == 11.0
    assert sheet.set_col(0, 0, float("inf"), None, False) is False
    assert sheet.set_row(0, float("-inf"), None, False) is False
