from __future__ import annotations

import pytest

from sheetbind import Book
from sheetbind.binding import ensure_cell_type, ensure_ok, ensure_result
from sheetbind.constants import CellType
from sheetbind.errors import EngineError


class FakeNativeBook:
    def __init__(self, message: str) -> None:
        self.message = message
        self.reads = 0

    def error_message(self) -> str:
        self.reads += 1
        return self.message


def test_ensure_ok_passes_success() -> None:
    native = FakeNativeBook("ok")
    ensure_ok(True, native, "Demo.op")  # type: ignore[arg-type]
    assert native.reads == 0


def test_ensure_ok_raises_error_slot() -> None:
    native = FakeNativeBook("disk full")
    with pytest.raises(EngineError, match="disk full") as excinfo:
        ensure_ok(False, native, "Demo.op")  # type: ignore[arg-type]
    assert excinfo.value.operation == "Demo.op"
    assert excinfo.value.detail.kind == "engine"
    assert native.reads == 1


def test_ensure_result_keeps_falsy_values() -> None:
    native = FakeNativeBook("ok")
    assert ensure_result(0, native, "Demo.op") == 0  # type: ignore[arg-type]
    assert ensure_result("", native, "Demo.op") == ""  # type: ignore[arg-type]
    assert ensure_result(False, native, "Demo.op") is False  # type: ignore[arg-type]


def test_ensure_result_raises_on_none() -> None:
    with pytest.raises(EngineError, match="no such sheet"):
        ensure_result(None, FakeNativeBook("no such sheet"), "Demo.op")  # type: ignore[arg-type]


def test_ensure_cell_type() -> None:
    native = FakeNativeBook("ok")
    assert ensure_cell_type(2, native, "Demo.op") is CellType.STRING  # type: ignore[arg-type]
    with pytest.raises(EngineError, match="bad cell"):
        ensure_cell_type(CellType.ERROR, FakeNativeBook("bad cell"), "Demo.op")  # type: ignore[arg-type]


def test_message_is_captured_at_failure(book: Book) -> None:
    sheet = book.add_sheet("Data")
    with pytest.raises(EngineError) as excinfo:
        sheet.read_num(0, 0)
    sheet.write_num(0, 0, 1.5)
    assert str(excinfo.value) == "cell A1 is empty, not number"
    assert book.error_message() == "ok"
