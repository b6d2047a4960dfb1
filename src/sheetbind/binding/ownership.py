from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sheetbind.errors import InternalError, OwnershipError

if TYPE_CHECKING:  # pragma: no cover - typing only
    from sheetbind.entities.book import Book


class BookBound:
    """Proxy for a resource that lives inside a book.

    The strong reference to the owning ``Book`` proxy keeps the book's
    engine resource alive for as long as any dependent proxy is reachable.
    """

    def __init__(self, book: Book, handle: Any) -> None:
        self._book = book
        book.registry.wrap(self, handle)

    @property
    def book(self) -> Book:
        return self._book

    def _native(self, operation: str) -> Any:
        book = getattr(self, "_book", None)
        if book is None:
            raise InternalError.for_operation(
                operation,
                f"{type(self).__name__} is not bound to a live engine resource",
            )
        return book.registry.get_native(self, type(self), operation)

    def _native_book(self) -> Any:
        return self._book._native_book


def ensure_same_book(book: Book, other: BookBound, operation: str) -> None:
    """Raise ``OwnershipError`` unless ``other`` belongs to ``book``."""
    if getattr(other, "_book", None) is not book:
        raise OwnershipError.for_operation(
            operation, f"{type(other).__name__} belongs to a different book"
        )


def resolve_dependency(
    book: Book, other: BookBound, proxy_type: type, operation: str
) -> Any:
    """Return the live handle of an object argument owned by ``book``.

    Raises:
        OwnershipError: ``other`` belongs to another book, or its resource
            went away (released book, deleted sheet, reloaded book).
        InternalError: ``other`` was never bound to an engine resource.
    """
    registry = book.registry
    if getattr(other, "_book", None) is None:
        raise _unbound(proxy_type, operation)
    ensure_same_book(book, other, operation)
    handle = registry.unwrap(other, proxy_type)
    if handle is not None:
        return handle
    if registry.peek(other) is None:
        raise _unbound(proxy_type, operation)
    if book.released:
        raise OwnershipError.for_operation(operation, "document already released")
    raise OwnershipError.for_operation(
        operation, f"{proxy_type.__name__.lower()} has been deleted"
    )


def _unbound(proxy_type: type, operation: str) -> InternalError:
    return InternalError.for_operation(  # type: ignore[return-value]
        operation, f"{proxy_type.__name__} is not bound to an engine resource"
    )


__all__ = ["BookBound", "ensure_same_book", "resolve_dependency"]
