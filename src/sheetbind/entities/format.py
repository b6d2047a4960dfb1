from __future__ import annotations

from typing import Any

from sheetbind.binding import (
    BookBound,
    arguments,
    ensure_ok,
    ensure_result,
    required,
    resolve_dependency,
)
from sheetbind.constants import AlignH, AlignV, Color, FillPattern, NumFormat

from .font import Font


class Format(BookBound):
    """Cell format record of a book.

    Every cell written with a format references the same record, so changing
    a format after writing restyles those cells too.
    """

    def _get(self, attribute: str, operation: str) -> Any:
        handle = self._native(operation)
        return ensure_result(handle.get(attribute), self._native_book(), operation)

    def _set(self, attribute: str, value: int | bool, operation: str) -> Format:
        handle = self._native(operation)
        ensure_ok(handle.set(attribute, value), self._native_book(), operation)
        return self

    @arguments()
    def num_format(self, args: Any) -> NumFormat:
        return NumFormat(self._get("num_format", "Format.num_format"))

    @arguments(required("num_format", "int"))
    def set_num_format(self, args: Any) -> Format:
        return self._set("num_format", args.num_format, "Format.set_num_format")

    @arguments()
    def align_h(self, args: Any) -> AlignH:
        return AlignH(self._get("align_h", "Format.align_h"))

    @arguments(required("align", "int"))
    def set_align_h(self, args: Any) -> Format:
        return self._set("align_h", args.align, "Format.set_align_h")

    @arguments()
    def align_v(self, args: Any) -> AlignV:
        return AlignV(self._get("align_v", "Format.align_v"))

    @arguments(required("align", "int"))
    def set_align_v(self, args: Any) -> Format:
        return self._set("align_v", args.align, "Format.set_align_v")

    @arguments()
    def wrap(self, args: Any) -> bool:
        return bool(self._get("wrap", "Format.wrap"))

    @arguments(required("wrap", "bool"))
    def set_wrap(self, args: Any) -> Format:
        return self._set("wrap", args.wrap, "Format.set_wrap")

    @arguments()
    def shrink_to_fit(self, args: Any) -> bool:
        return bool(self._get("shrink_to_fit", "Format.shrink_to_fit"))

    @arguments(required("shrink_to_fit", "bool"))
    def set_shrink_to_fit(self, args: Any) -> Format:
        return self._set(
            "shrink_to_fit", args.shrink_to_fit, "Format.set_shrink_to_fit"
        )

    @arguments()
    def fill_pattern(self, args: Any) -> FillPattern:
        return FillPattern(self._get("fill_pattern", "Format.fill_pattern"))

    @arguments(required("pattern", "int"))
    def set_fill_pattern(self, args: Any) -> Format:
        return self._set("fill_pattern", args.pattern, "Format.set_fill_pattern")

    @arguments()
    def pattern_foreground_color(self, args: Any) -> Color:
        return Color(
            self._get("pattern_foreground_color", "Format.pattern_foreground_color")
        )

    @arguments(required("color", "int"))
    def set_pattern_foreground_color(self, args: Any) -> Format:
        return self._set(
            "pattern_foreground_color",
            args.color,
            "Format.set_pattern_foreground_color",
        )

    @arguments()
    def pattern_background_color(self, args: Any) -> Color:
        return Color(
            self._get("pattern_background_color", "Format.pattern_background_color")
        )

    @arguments(required("color", "int"))
    def set_pattern_background_color(self, args: Any) -> Format:
        return self._set(
            "pattern_background_color",
            args.color,
            "Format.set_pattern_background_color",
        )

    @arguments()
    def font(self, args: Any) -> Font:
        handle = self._native("Format.font")
        native_font = ensure_result(handle.font(), self._native_book(), "Format.font")
        return Font(self.book, native_font)

    @arguments(required("font", "object", proxy_type=Font))
    def set_font(self, args: Any) -> Format:
        operation = "Format.set_font"
        handle = self._native(operation)
        native_font = resolve_dependency(self.book, args.font, Font, operation)
        ensure_ok(handle.set_font(native_font), self._native_book(), operation)
        return self


__all__ = ["Format"]
