from __future__ import annotations

from types import TracebackType
from typing import Any
import weakref

from sheetbind.binding import (
    ArgumentSpec,
    ProxyRegistry,
    arguments,
    ensure_ok,
    ensure_result,
    optional,
    required,
    resolve_dependency,
)
from sheetbind.constants import BookType
from sheetbind.engine import EngineBook, create_native_book
from sheetbind.errors import InternalError

from .font import Font
from .format import Format
from .sheet import Sheet

_INIT_ARGS = ArgumentSpec(
    "Book",
    [optional("book_type", "int", default=BookType.XLSX, ge=0, le=len(BookType) - 1)],
)


class Book:
    """Workbook document; owns every sheet, format and font created from it.

    The engine book is released when this proxy and every proxy that depends
    on it become unreachable, or earlier through ``release()`` or by leaving
    a ``with`` block. Afterwards every proxy of the book fails closed.

    Args:
        book_type: ``BOOK_TYPE_XLSX`` (default) or ``BOOK_TYPE_XLS``.
        registry: Proxy registry; the process-wide one when omitted.
    """

    def __init__(
        self,
        book_type: int | None = BookType.XLSX,
        *,
        registry: ProxyRegistry | None = None,
    ) -> None:
        args = _INIT_ARGS.bind((book_type,), {})
        if registry is None:
            from sheetbind.runtime import default_registry

            registry = default_registry()
        self._registry = registry
        self._native_book: EngineBook = create_native_book(BookType(args.book_type))
        try:
            registry.wrap(self, self._native_book)
        except InternalError:
            self._native_book.release()
            raise
        self._finalizer = weakref.finalize(self, self._native_book.release)

    def __enter__(self) -> Book:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.release()

    @property
    def registry(self) -> ProxyRegistry:
        return self._registry

    @property
    def book_type(self) -> BookType:
        return self._native_book.book_type

    @property
    def released(self) -> bool:
        return not self._native_book.alive

    def release(self) -> None:
        """Release the engine book now; calling it again does nothing."""
        self._finalizer()

    def _native(self, operation: str) -> Any:
        registry = getattr(self, "_registry", None)
        if registry is None:
            raise InternalError.for_operation(
                operation, "Book is not bound to a live engine resource"
            )
        return registry.get_native(self, Book, operation)

    @arguments(
        required("name", "str"),
        optional("init_sheet", "object", proxy_type=Sheet),
    )
    def add_sheet(self, args: Any) -> Sheet:
        """Append a sheet, optionally copying the content of ``init_sheet``."""
        operation = "Book.add_sheet"
        handle = self._native(operation)
        init = None
        if args.init_sheet is not None:
            init = resolve_dependency(self, args.init_sheet, Sheet, operation)
        native_sheet = ensure_result(
            handle.add_sheet(args.name, init), self._native_book, operation
        )
        return Sheet(self, native_sheet)

    @arguments(required("index", "int", ge=0))
    def get_sheet(self, args: Any) -> Sheet:
        handle = self._native("Book.get_sheet")
        native_sheet = ensure_result(
            handle.get_sheet(args.index), self._native_book, "Book.get_sheet"
        )
        return Sheet(self, native_sheet)

    @arguments(required("index", "int", ge=0))
    def del_sheet(self, args: Any) -> Book:
        """Delete a sheet; proxies of that sheet become unusable."""
        handle = self._native("Book.del_sheet")
        ensure_ok(handle.del_sheet(args.index), self._native_book, "Book.del_sheet")
        return self

    @arguments()
    def sheet_count(self, args: Any) -> int:
        return self._native("Book.sheet_count").sheet_count()

    @arguments(optional("init_format", "object", proxy_type=Format))
    def add_format(self, args: Any) -> Format:
        operation = "Book.add_format"
        handle = self._native(operation)
        init = None
        if args.init_format is not None:
            init = resolve_dependency(self, args.init_format, Format, operation)
        native_format = ensure_result(
            handle.add_format(init), self._native_book, operation
        )
        return Format(self, native_format)

    @arguments(optional("init_font", "object", proxy_type=Font))
    def add_font(self, args: Any) -> Font:
        operation = "Book.add_font"
        handle = self._native(operation)
        init = None
        if args.init_font is not None:
            init = resolve_dependency(self, args.init_font, Font, operation)
        native_font = ensure_result(handle.add_font(init), self._native_book, operation)
        return Font(self, native_font)

    @arguments()
    def default_format(self, args: Any) -> Format:
        handle = self._native("Book.default_format")
        native_format = ensure_result(
            handle.default_format(), self._native_book, "Book.default_format"
        )
        return Format(self, native_format)

    @arguments(required("path", "path"))
    def write(self, args: Any) -> Book:
        """Save the book; the extension must match the book type."""
        handle = self._native("Book.write")
        ensure_ok(handle.save(args.path), self._native_book, "Book.write")
        return self

    @arguments(required("path", "path"))
    def load(self, args: Any) -> Book:
        """Replace the book's content; existing sheet proxies become unusable."""
        handle = self._native("Book.load")
        ensure_ok(handle.load(args.path), self._native_book, "Book.load")
        return self

    @arguments()
    def error_message(self, args: Any) -> str:
        return self._native("Book.error_message").error_message()


__all__ = ["Book"]
