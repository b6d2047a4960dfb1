from __future__ import annotations

from datetime import date, datetime, time, timedelta
from pathlib import Path
from typing import Any, Final

from openpyxl import Workbook
from openpyxl.cell.cell import MergedCell
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.styles.colors import COLOR_INDEX, Color as OpenpyxlColor
from openpyxl.styles.numbers import BUILTIN_FORMATS
from openpyxl.utils import get_column_letter
from openpyxl.utils.datetime import to_excel

from sheetbind.constants import AlignH, AlignV, CellType, Color, FillPattern, NumFormat
from sheetbind.shared.a1 import column_label_to_index
from sheetbind.utils import ensure_output_dir, warn_once

from .core import (
    DEFAULT_ROW_HEIGHT,
    CellRecord,
    EngineBook,
    EngineFont,
    EngineFormat,
    EngineSheet,
    is_member,
    require,
)
from .workbook import openpyxl_workbook

HORIZONTAL_ALIGN: Final[dict[AlignH, str]] = {
    AlignH.GENERAL: "general",
    AlignH.LEFT: "left",
    AlignH.CENTER: "center",
    AlignH.RIGHT: "right",
    AlignH.FILL: "fill",
    AlignH.JUSTIFY: "justify",
    AlignH.MERGE: "centerContinuous",
    AlignH.DISTRIBUTED: "distributed",
}
VERTICAL_ALIGN: Final[dict[AlignV, str]] = {
    AlignV.TOP: "top",
    AlignV.CENTER: "center",
    AlignV.BOTTOM: "bottom",
    AlignV.JUSTIFY: "justify",
    AlignV.DISTRIBUTED: "distributed",
}
FILL_TYPES: Final[dict[FillPattern, str]] = {
    FillPattern.SOLID: "solid",
    FillPattern.GRAY50: "mediumGray",
    FillPattern.GRAY75: "darkGray",
    FillPattern.GRAY25: "lightGray",
    FillPattern.HORSTRIPE: "darkHorizontal",
    FillPattern.VERSTRIPE: "darkVertical",
    FillPattern.REVDIAGSTRIPE: "darkDown",
    FillPattern.DIAGSTRIPE: "darkUp",
    FillPattern.DIAGCROSSHATCH: "darkGrid",
    FillPattern.THICKDIAGCROSSHATCH: "darkTrellis",
    FillPattern.THINHORSTRIPE: "lightHorizontal",
    FillPattern.THINVERSTRIPE: "lightVertical",
    FillPattern.THINREVDIAGSTRIPE: "lightDown",
    FillPattern.THINDIAGSTRIPE: "lightUp",
    FillPattern.THINHORCROSSHATCH: "lightGrid",
    FillPattern.THINDIAGCROSSHATCH: "lightTrellis",
    FillPattern.GRAY12P5: "gray125",
    FillPattern.GRAY6P25: "gray0625",
}
_HORIZONTAL_CODES = {name: code for code, name in HORIZONTAL_ALIGN.items()}
_VERTICAL_CODES = {name: code for code, name in VERTICAL_ALIGN.items()}
_FILL_CODES = {name: code for code, name in FILL_TYPES.items()}
_NUM_FORMAT_CODES = {
    text: NumFormat(code)
    for code, text in BUILTIN_FORMATS.items()
    if is_member(NumFormat, code)
}
_PALETTE = range(Color.BLACK, Color.GRAY80 + 1)

StyleSet = tuple[Font, Alignment, PatternFill, str]


class OpenpyxlBackend:
    """XLSX persistence through openpyxl."""

    def save(self, book: EngineBook, path: Path) -> None:
        """Write every sheet, style and dimension of ``book`` to ``path``."""
        sheets = book.sheets()
        if not sheets:
            raise ValueError("book has no sheets")
        workbook = Workbook()
        workbook.remove(workbook.active)
        styles = _StyleCache()
        for sheet in sheets:
            _save_sheet(workbook.create_sheet(title=sheet.title), sheet, styles)
        ensure_output_dir(path)
        workbook.save(path)

    def load(self, book: EngineBook, path: Path) -> None:
        """Populate an empty ``book`` from the workbook at ``path``."""
        with openpyxl_workbook(path, data_only=False) as workbook:
            importer = _FormatImporter(book)
            for worksheet in workbook.worksheets:
                sheet = require(book.add_sheet(worksheet.title), book)
                _load_sheet(worksheet, sheet, importer)


class _StyleCache:
    """Build openpyxl style objects once per engine format within one save."""

    def __init__(self) -> None:
        self._styles: dict[int, StyleSet] = {}

    def apply(self, target: Any, fmt: EngineFormat) -> None:
        styles = self._styles.get(id(fmt))
        if styles is None:
            styles = _build_styles(fmt)
            self._styles[id(fmt)] = styles
        target.font, target.alignment, target.fill, target.number_format = styles


def _save_sheet(worksheet: Any, sheet: EngineSheet, styles: _StyleCache) -> None:
    for (row, col), record in sheet.cells():
        cell = worksheet.cell(row=row + 1, column=col + 1)
        _write_cell(cell, record)
        if record.fmt is not None:
            styles.apply(cell, record.fmt)
    for col, info in sheet.columns():
        dimension = worksheet.column_dimensions[get_column_letter(col + 1)]
        dimension.width = info.size
        dimension.hidden = info.hidden
        if info.fmt is not None:
            styles.apply(dimension, info.fmt)
    for row, info in sheet.rows():
        dimension = worksheet.row_dimensions[row + 1]
        dimension.height = info.size
        dimension.hidden = info.hidden
        if info.fmt is not None:
            styles.apply(dimension, info.fmt)
    for row_first, row_last, col_first, col_last in sheet.merges():
        worksheet.merge_cells(
            start_row=row_first + 1,
            start_column=col_first + 1,
            end_row=row_last + 1,
            end_column=col_last + 1,
        )


def _write_cell(cell: Any, record: CellRecord) -> None:
    if record.formula is not None:
        cell.value = f"={record.formula}"
    elif record.kind == CellType.STRING:
        cell.value = record.value
        # Literal text, even when it starts with "=".
        cell.data_type = "s"
    elif record.kind in (CellType.NUMBER, CellType.BOOLEAN, CellType.ERROR):
        cell.value = record.value


def _build_styles(fmt: EngineFormat) -> StyleSet:
    values = fmt.values
    name, size, bold, italic, color = fmt.font_record.snapshot()
    font = Font(name=name, size=size, bold=bold, italic=italic, color=_to_color(color))
    alignment = Alignment(
        horizontal=HORIZONTAL_ALIGN[AlignH(values["align_h"])],
        vertical=VERTICAL_ALIGN[AlignV(values["align_v"])],
        wrap_text=bool(values["wrap"]),
        shrink_to_fit=bool(values["shrink_to_fit"]),
    )
    pattern = FillPattern(values["fill_pattern"])
    fill = PatternFill()
    if pattern != FillPattern.NONE:
        colors: dict[str, OpenpyxlColor] = {}
        for key, attribute in (
            ("fgColor", "pattern_foreground_color"),
            ("bgColor", "pattern_background_color"),
        ):
            converted = _to_color(int(values[attribute]))
            if converted is not None:
                colors[key] = converted
        fill = PatternFill(fill_type=FILL_TYPES[pattern], **colors)
    number_format = BUILTIN_FORMATS.get(int(values["num_format"]), "General")
    return font, alignment, fill, number_format


def _to_color(code: int) -> OpenpyxlColor | None:
    if code == Color.AUTO:
        return None
    return OpenpyxlColor(indexed=code)


def _load_sheet(worksheet: Any, sheet: EngineSheet, importer: _FormatImporter) -> None:
    book = sheet.book
    # iter_rows() materializes the whole bounding box; only stored cells count.
    for _, cell in sorted(worksheet._cells.items()):
        if isinstance(cell, MergedCell):
            continue
        fmt = importer.for_style(cell) if cell.has_style else None
        _read_cell(sheet, cell, fmt)
    for key, dimension in worksheet.column_dimensions.items():
        first = dimension.min or column_label_to_index(key)
        last = dimension.max or first
        require(
            sheet.set_col(
                first - 1,
                last - 1,
                float(dimension.width or 0.0),
                None,
                bool(dimension.hidden),
            ),
            book,
        )
    for index, dimension in worksheet.row_dimensions.items():
        if dimension.height is None and not dimension.hidden:
            continue
        height = dimension.height
        if height is None:
            height = DEFAULT_ROW_HEIGHT
        require(sheet.set_row(index - 1, height, None, bool(dimension.hidden)), book)
    for merged in worksheet.merged_cells.ranges:
        require(
            sheet.set_merge(
                merged.min_row - 1,
                merged.max_row - 1,
                merged.min_col - 1,
                merged.max_col - 1,
            ),
            book,
        )


def _read_cell(sheet: EngineSheet, cell: Any, fmt: EngineFormat | None) -> None:
    row, col = cell.row - 1, cell.column - 1
    value = cell.value
    if cell.data_type == "f":
        ok = sheet.write_formula(row, col, str(getattr(value, "text", value)), fmt)
    elif cell.data_type == "e":
        ok = sheet.write_error(row, col, str(value))
    elif value is None:
        if fmt is None:
            return
        ok = sheet.write_blank(row, col, fmt)
    elif isinstance(value, bool):
        ok = sheet.write_bool(row, col, value, fmt)
    elif isinstance(value, (int, float)):
        ok = sheet.write_num(row, col, float(value), fmt)
    elif isinstance(value, (datetime, date, time, timedelta)):
        ok = sheet.write_num(row, col, float(to_excel(value)), fmt)
    else:
        ok = sheet.write_str(row, col, str(value), fmt)
    require(ok, sheet.book)


class _FormatImporter:
    """Map openpyxl cell styles onto engine formats, one format per style."""

    def __init__(self, book: EngineBook) -> None:
        self._book = book
        self._formats: dict[tuple[object, ...], EngineFormat] = {}
        self._fonts: dict[tuple[object, ...], EngineFont] = {}

    def for_style(self, cell: Any) -> EngineFormat:
        alignment = cell.alignment
        fill = cell.fill
        values: dict[str, int | bool] = {
            "num_format": _num_format_code(cell.number_format),
            "align_h": _HORIZONTAL_CODES.get(alignment.horizontal, AlignH.GENERAL),
            "align_v": _VERTICAL_CODES.get(alignment.vertical, AlignV.BOTTOM),
            "wrap": bool(alignment.wrap_text),
            "shrink_to_fit": bool(alignment.shrink_to_fit),
            **_fill_values(fill),
        }
        font = self._font_for(cell.font)
        key = (tuple(sorted(values.items())), id(font))
        fmt = self._formats.get(key)
        if fmt is None:
            fmt = require(self._book.add_format(), self._book)
            for attribute, value in values.items():
                require(fmt.set(attribute, value), self._book)
            require(fmt.set_font(font), self._book)
            self._formats[key] = fmt
        return fmt

    def _font_for(self, source: Any) -> EngineFont:
        name = str(source.name) if source.name else None
        size = float(source.sz) if source.sz else None
        bold = bool(source.b)
        italic = bool(source.i)
        color = _from_color(source.color)
        key = (name, size, bold, italic, color)
        font = self._fonts.get(key)
        if font is None:
            font = require(self._book.add_font(), self._book)
            if name is not None:
                require(font.set_name(name), self._book)
            if size is not None:
                require(font.set_size(size), self._book)
            require(font.set_bold(bold), self._book)
            require(font.set_italic(italic), self._book)
            require(font.set_color(color), self._book)
            self._fonts[key] = font
        return font


def _fill_values(fill: Any) -> dict[str, int | bool]:
    pattern = getattr(fill, "fill_type", None)
    if pattern is None:
        if not isinstance(fill, PatternFill):
            warn_once("gradient-fill", "Gradient fills are not supported; ignored.")
        return {"fill_pattern": FillPattern.NONE}
    return {
        "fill_pattern": _FILL_CODES.get(pattern, FillPattern.NONE),
        "pattern_foreground_color": _from_color(fill.fgColor),
        "pattern_background_color": _from_color(fill.bgColor),
    }


def _num_format_code(text: str) -> NumFormat:
    code = _NUM_FORMAT_CODES.get(text)
    if code is None:
        warn_once(
            f"num-format:{text}",
            f"Custom number format {text!r} is not supported; using General.",
        )
        return NumFormat.GENERAL
    return code


def _from_color(color: OpenpyxlColor | None) -> Color:
    if color is None:
        return Color.AUTO
    if color.type == "indexed":
        indexed = int(color.indexed)
        return Color(indexed) if is_member(Color, indexed) else Color.AUTO
    if color.type == "rgb" and isinstance(color.rgb, str):
        rgb = color.rgb[-6:].upper()
        for index in _PALETTE:
            if COLOR_INDEX[index][-6:].upper() == rgb:
                return Color(index)
        warn_once(
            f"rgb:{rgb}", f"Color {rgb} is not in the indexed palette; using auto."
        )
    return Color.AUTO


__all__ = ["FILL_TYPES", "HORIZONTAL_ALIGN", "OpenpyxlBackend", "VERTICAL_ALIGN"]
