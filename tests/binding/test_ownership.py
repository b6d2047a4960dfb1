from __future__ import annotations

import gc

import pytest

from sheetbind import AlignH, Book, Format
from sheetbind.binding import ensure_same_book
from sheetbind.engine import EngineFormat, EngineSheet
from sheetbind.errors import InternalError, OwnershipError


def test_ensure_same_book(book: Book, other_book: Book) -> None:
    fmt = book.add_format()
    ensure_same_book(book, fmt, "Demo.op")
    with pytest.raises(OwnershipError, match="Format belongs to a different book"):
        ensure_same_book(other_book, fmt, "Demo.op")


def test_cross_book_argument_never_reaches_engine(
    book: Book, other_book: Book, monkeypatch: pytest.MonkeyPatch
) -> None:
    sheet = book.add_sheet("Data")
    foreign = other_book.add_format()
    calls: list[object] = []
    monkeypatch.setattr(
        EngineSheet, "write_str", lambda *args: calls.append(args) or True
    )
    with pytest.raises(OwnershipError) as excinfo:
        sheet.write_string(0, 0, "x", foreign)
    assert excinfo.value.operation == "Sheet.write_string"
    assert isinstance(excinfo.value, ValueError)
    assert calls == []


def test_cross_book_font(book: Book, other_book: Book) -> None:
    with pytest.raises(OwnershipError):
        book.add_format().set_font(other_book.add_font())


def test_cross_book_init_sheet(book: Book, other_book: Book) -> None:
    with pytest.raises(OwnershipError):
        book.add_sheet("Copy", other_book.add_sheet("Source"))


def test_deleted_sheet_as_argument(book: Book) -> None:
    source = book.add_sheet("Source")
    book.del_sheet(0)
    with pytest.raises(OwnershipError, match="sheet has been deleted"):
        book.add_sheet("Copy", source)


def test_never_wrapped_argument(book: Book) -> None:
    with pytest.raises(InternalError, match="not bound to an engine resource"):
        book.add_format(Format.__new__(Format))
    sheet = book.add_sheet("Data")
    with pytest.raises(InternalError, match="not bound to an engine resource"):
        sheet.write_string(0, 0, "x", Format.__new__(Format))


def test_never_wrapped_argument_claiming_book(book: Book) -> None:
    fake = Format.__new__(Format)
    fake._book = book
    with pytest.raises(InternalError, match="not bound to an engine resource"):
        book.add_format(fake)


def test_never_wrapped_self_fails_closed() -> None:
    with pytest.raises(InternalError, match="Format is not bound") as excinfo:
        Format.__new__(Format).align_h()
    assert excinfo.value.operation == "Format.align_h"
    with pytest.raises(InternalError, match="Book is not bound"):
        Book.__new__(Book).sheet_count()


def test_released_book_fails_closed() -> None:
    book = Book()
    fmt = book.add_format()
    book.release()
    with pytest.raises(InternalError):
        fmt.align_h()
    with pytest.raises(InternalError):
        book.add_sheet("Late")


def test_dependent_keeps_book_alive() -> None:
    fmt = Book().add_format()
    gc.collect()
    assert fmt.book.released is False
    assert fmt.set_align_h(AlignH.CENTER).align_h() == AlignH.CENTER


def test_book_released_when_last_dependent_dropped() -> None:
    fmt = Book().add_format()
    native = fmt.book._native_book
    gc.collect()
    assert native.alive
    del fmt
    gc.collect()
    assert not native.alive


def test_book_released_when_unreachable() -> None:
    book = Book()
    native = book._native_book
    del book
    gc.collect()
    assert not native.alive


def test_wrong_kind_argument_never_reaches_engine(
    book: Book, monkeypatch: pytest.MonkeyPatch
) -> None:
    fmt = book.add_format()
    calls: list[object] = []
    monkeypatch.setattr(EngineFormat, "set_font", lambda *args: calls.append(args) or True)
    with pytest.raises(TypeError, match="must be a Font"):
        fmt.set_font(book.add_sheet("Data"))
    assert calls == []
