from __future__ import annotations

from typing import Any

from sheetbind.binding import BookBound, arguments, ensure_ok, ensure_result, required
from sheetbind.constants import Color


class Font(BookBound):
    """Font record of a book.

    Getters return the current value; setters return the font itself so calls
    can be chained. A font is shared by every format that references it.
    """

    @arguments()
    def name(self, args: Any) -> str:
        handle = self._native("Font.name")
        return ensure_result(handle.name(), self._native_book(), "Font.name")

    @arguments(required("name", "str"))
    def set_name(self, args: Any) -> Font:
        handle = self._native("Font.set_name")
        ensure_ok(handle.set_name(args.name), self._native_book(), "Font.set_name")
        return self

    @arguments()
    def size(self, args: Any) -> float:
        handle = self._native("Font.size")
        return ensure_result(handle.size(), self._native_book(), "Font.size")

    @arguments(required("size", "float"))
    def set_size(self, args: Any) -> Font:
        handle = self._native("Font.set_size")
        ensure_ok(handle.set_size(args.size), self._native_book(), "Font.set_size")
        return self

    @arguments()
    def bold(self, args: Any) -> bool:
        handle = self._native("Font.bold")
        return ensure_result(handle.bold(), self._native_book(), "Font.bold")

    @arguments(required("bold", "bool"))
    def set_bold(self, args: Any) -> Font:
        handle = self._native("Font.set_bold")
        ensure_ok(handle.set_bold(args.bold), self._native_book(), "Font.set_bold")
        return self

    @arguments()
    def italic(self, args: Any) -> bool:
        handle = self._native("Font.italic")
        return ensure_result(handle.italic(), self._native_book(), "Font.italic")

    @arguments(required("italic", "bool"))
    def set_italic(self, args: Any) -> Font:
        handle = self._native("Font.set_italic")
        ensure_ok(
            handle.set_italic(args.italic), self._native_book(), "Font.set_italic"
        )
        return self

    @arguments()
    def color(self, args: Any) -> Color:
        handle = self._native("Font.color")
        return Color(ensure_result(handle.color(), self._native_book(), "Font.color"))

    @arguments(required("color", "int"))
    def set_color(self, args: Any) -> Font:
        handle = self._native("Font.set_color")
        ensure_ok(handle.set_color(args.color), self._native_book(), "Font.set_color")
        return self


__all__ = ["Font"]
