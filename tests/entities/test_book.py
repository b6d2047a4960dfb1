from __future__ import annotations

from pathlib import Path

import pytest

from sheetbind import (
    AlignH,
    ArgumentError,
    Book,
    BookType,
    EngineError,
    InternalError,
    NumFormat,
    Sheet,
)


def test_default_book_type() -> None:
    with Book() as book:
        assert book.book_type == BookType.XLSX
    with Book(BookType.XLS) as book:
        assert book.book_type == BookType.XLS


def test_invalid_book_type() -> None:
    with pytest.raises(ArgumentError, match="book_type"):
        Book(7)
    with pytest.raises(ArgumentError, match="must be an integer"):
        Book(True)


def test_add_and_get_sheet(book: Book) -> None:
    first = book.add_sheet("First")
    book.add_sheet("Second")
    assert isinstance(first, Sheet)
    assert first.book is book
    assert book.sheet_count() == 2
    assert book.get_sheet(1).name() == "Second"


def test_get_sheet_out_of_range(book: Book) -> None:
    with pytest.raises(EngineError, match="invalid sheet index: 5"):
        book.get_sheet(5)
    assert book.error_message() == "invalid sheet index: 5"


def test_duplicate_sheet_name_is_case_insensitive(book: Book) -> None:
    book.add_sheet("Data")
    with pytest.raises(EngineError, match="sheet already exists: data"):
        book.add_sheet("data")


def test_invalid_sheet_names(book: Book) -> None:
    with pytest.raises(EngineError, match="invalid characters"):
        book.add_sheet("a/b")
    with pytest.raises(EngineError, match="1-31 characters"):
        book.add_sheet("x" * 32)


def test_add_sheet_copies_init_sheet(book: Book) -> None:
    source = book.add_sheet("Source").write_num(0, 0, 3)
    copy = book.add_sheet("Copy", source)
    assert copy.read_num(0, 0) == 3.0
    copy.write_num(0, 0, 4)
    assert source.read_num(0, 0) == 3.0


def test_del_sheet_makes_proxy_stale(book: Book) -> None:
    sheet = book.add_sheet("Gone")
    assert book.del_sheet(0) is book
    assert book.sheet_count() == 0
    with pytest.raises(InternalError):
        sheet.name()


def test_add_format_copies_init_format(book: Book) -> None:
    source = book.add_format().set_align_h(AlignH.RIGHT)
    copy = book.add_format(source)
    assert copy.align_h() == AlignH.RIGHT
    copy.set_align_h(AlignH.LEFT)
    assert source.align_h() == AlignH.RIGHT


def test_add_font_copies_init_font(book: Book) -> None:
    source = book.add_font().set_name("Arial").set_bold(True)
    copy = book.add_font(source)
    assert copy.name() == "Arial"
    assert copy.bold() is True


def test_default_format(book: Book) -> None:
    fmt = book.default_format()
    assert fmt.align_h() == AlignH.GENERAL
    assert fmt.num_format() == NumFormat.GENERAL


def test_context_manager_releases() -> None:
    with Book() as book:
        book.add_sheet("Data")
        assert not book.released
    assert book.released
    with pytest.raises(InternalError):
        book.sheet_count()


def test_release_is_idempotent() -> None:
    book = Book()
    book.release()
    book.release()
    assert book.released


def test_error_message_reports_ok_after_success(book: Book) -> None:
    with pytest.raises(EngineError):
        book.get_sheet(0)
    book.add_sheet("Data")
    assert book.error_message() == "ok"


def test_write_rejects_mismatched_extension(book: Book, tmp_path: Path) -> None:
    book.add_sheet("Data")
    with pytest.raises(EngineError, match="unsupported extension .xls"):
        book.write(tmp_path / "out.xls")


def test_write_empty_book(book: Book, tmp_path: Path) -> None:
    with pytest.raises(EngineError, match="book has no sheets"):
        book.write(tmp_path / "out.xlsx")


def test_write_accepts_str_and_path(book: Book, tmp_path: Path) -> None:
    book.add_sheet("Data").write_string(0, 0, "x")
    assert book.write(str(tmp_path / "a.xlsx")) is book
    assert book.write(tmp_path / "b.xlsx") is book
    assert (tmp_path / "a.xlsx").is_file()
    assert (tmp_path / "b.xlsx").is_file()


def test_load_missing_file(book: Book, tmp_path: Path) -> None:
    with pytest.raises(EngineError, match="file not found"):
        book.load(tmp_path / "missing.xlsx")


def test_load_replaces_content(book: Book, tmp_path: Path) -> None:
    path = tmp_path / "saved.xlsx"
    with Book() as source:
        source.add_sheet("Loaded").write_string(0, 0, "from disk")
        source.write(path)
    old = book.add_sheet("Old")
    old_format = book.add_format()
    assert book.load(path) is book
    assert book.sheet_count() == 1
    assert book.get_sheet(0).read_string(0, 0) == "from disk"
    with pytest.raises(InternalError):
        old.name()
    with pytest.raises(InternalError):
        old_format.align_h()


def test_failed_load_keeps_content(book: Book, tmp_path: Path) -> None:
    path = tmp_path / "broken.xlsx"
    path.write_bytes(b"not a zip file")
    sheet = book.add_sheet("Kept")
    with pytest.raises(EngineError, match="failed to load broken.xlsx"):
        book.load(path)
    assert sheet.name() == "Kept"


def test_xls_write_without_excel(tmp_path: Path) -> None:
    with Book(BookType.XLS) as book:
        book.add_sheet("Data").write_num(0, 0, 1)
        with pytest.raises(EngineError, match="Excel COM is unavailable"):
            book.write(tmp_path / "out.xls")
