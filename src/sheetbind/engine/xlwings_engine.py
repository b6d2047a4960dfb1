from __future__ import annotations

from datetime import date, datetime, time, timedelta
import logging
from pathlib import Path
from typing import Any, Final

from openpyxl.styles.numbers import BUILTIN_FORMATS
from openpyxl.utils.datetime import to_excel

from sheetbind.constants import AlignH, AlignV, CellType, Color, FillPattern
from sheetbind.utils import ensure_output_dir

from .core import CellRecord, EngineBook, EngineFormat, EngineSheet, require
from .workbook import xlwings_app

logger = logging.getLogger(__name__)

XL_HORIZONTAL_ALIGN: Final[dict[AlignH, int]] = {
    AlignH.GENERAL: -4105,
    AlignH.LEFT: -4131,
    AlignH.CENTER: -4108,
    AlignH.RIGHT: -4152,
    AlignH.FILL: 5,
    AlignH.JUSTIFY: -4130,
    AlignH.MERGE: 7,
    AlignH.DISTRIBUTED: -4117,
}
XL_VERTICAL_ALIGN: Final[dict[AlignV, int]] = {
    AlignV.TOP: -4160,
    AlignV.CENTER: -4108,
    AlignV.BOTTOM: -4107,
    AlignV.JUSTIFY: -4130,
    AlignV.DISTRIBUTED: -4117,
}
XL_PATTERNS: Final[dict[FillPattern, int]] = {
    FillPattern.NONE: -4142,
    FillPattern.SOLID: 1,
    FillPattern.GRAY50: -4125,
    FillPattern.GRAY75: -4126,
    FillPattern.GRAY25: -4124,
    FillPattern.HORSTRIPE: -4128,
    FillPattern.VERSTRIPE: -4166,
    FillPattern.REVDIAGSTRIPE: -4121,
    FillPattern.DIAGSTRIPE: -4162,
    FillPattern.DIAGCROSSHATCH: 9,
    FillPattern.THICKDIAGCROSSHATCH: 10,
    FillPattern.THINHORSTRIPE: 11,
    FillPattern.THINVERSTRIPE: 12,
    FillPattern.THINREVDIAGSTRIPE: 13,
    FillPattern.THINDIAGSTRIPE: 14,
    FillPattern.THINHORCROSSHATCH: 15,
    FillPattern.THINDIAGCROSSHATCH: 16,
    FillPattern.GRAY12P5: 17,
    FillPattern.GRAY6P25: 18,
}
XL_COLOR_INDEX_AUTOMATIC: Final = -4105
_PLACEHOLDER_SHEET: Final = "__sheetbind__"

class XlwingsBackend:
    """XLS persistence through Excel COM.

    Saving writes values, formulas, formats, column/row metadata and merges.
    Loading imports values and formulas only.
    """

    def __init__(self, *, visible: bool = False) -> None:
        self._visible = visible

    def save(self, book: EngineBook, path: Path) -> None:
        sheets = book.sheets()
        if not sheets:
            raise ValueError("book has no sheets")
        ensure_output_dir(path)
        with xlwings_app(visible=self._visible) as app:
            workbook = app.books.add()
            try:
                placeholder = workbook.sheets[0]
                placeholder.name = _PLACEHOLDER_SHEET
                for sheet in sheets:
                    target = workbook.sheets.add(
                        name=sheet.title, after=workbook.sheets[-1]
                    )
                    _save_sheet(target, sheet)
                placeholder.delete()
                # 56 = xlExcel8
                workbook.api.SaveAs(str(path.resolve()), FileFormat=56)
            finally:
                _close_workbook_safely(workbook)

    def load(self, book: EngineBook, path: Path) -> None:
        with xlwings_app(visible=self._visible) as app:
            workbook = app.books.open(str(path.resolve()))
            try:
                for worksheet in workbook.sheets:
                    sheet = require(book.add_sheet(worksheet.name), book)
                    _load_sheet(worksheet, sheet)
            finally:
                _close_workbook_safely(workbook)

def _close_workbook_safely(workbook: Any) -> None:
    try:
        workbook.close()
    except Exception as exc:
        logger.warning("Failed to close Excel workbook: %s", exc)

def _save_sheet(target: Any, sheet: EngineSheet) -> None:
    for (row, col), record in sheet.cells():
        rng = target.range((row + 1, col + 1))
        _write_cell(rng, record)
        if record.fmt is not None:
            _apply_format(rng.api, record.fmt)
    for col, info in sheet.columns():
        column_api = target.api.Columns(col + 1)
        column_api.ColumnWidth = info.size
        column_api.Hidden = info.hidden
        if info.fmt is not None:
            _apply_format(column_api, info.fmt)
    for row, info in sheet.rows():
        row_api = target.api.Rows(row + 1)
        row_api.RowHeight = info.size
        row_api.Hidden = info.hidden
        if info.fmt is not None:
            _apply_format(row_api, info.fmt)
    for row_first, row_last, col_first, col_last in sheet.merges():
        target.range(
            (row_first + 1, col_first + 1), (row_last + 1, col_last + 1)
        ).merge()

def _write_cell(rng: Any, record: CellRecord) -> None:
    if record.formula is not None:
        rng.formula = f"={record.formula}"
    elif record.kind == CellType.STRING:
        value = str(record.value)
        # Leading quote keeps Excel from parsing text as a formula.
        rng.value = f"'{value}" if value.startswith(("=", "'")) else value
    elif record.kind in (CellType.NUMBER, CellType.BOOLEAN):
        rng.value = record.value
    elif record.kind == CellType.ERROR:
        rng.formula = f"={record.value}"

def _apply_format(target_api: Any, fmt: EngineFormat) -> None:
    values = fmt.values
    target_api.NumberFormat = BUILTIN_FORMATS.get(int(values["num_format"]), "General")
    target_api.HorizontalAlignment = XL_HORIZONTAL_ALIGN[AlignH(values["align_h"])]
    target_api.VerticalAlignment = XL_VERTICAL_ALIGN[AlignV(values["align_v"])]
    target_api.WrapText = bool(values["wrap"])
    target_api.ShrinkToFit = bool(values["shrink_to_fit"])
    pattern = FillPattern(values["fill_pattern"])
    interior = target_api.Interior
    interior.Pattern = XL_PATTERNS[pattern]
    if pattern == FillPattern.SOLID:
        interior.ColorIndex = _color_index(int(values["pattern_foreground_color"]))
    elif pattern != FillPattern.NONE:
        interior.ColorIndex = _color_index(int(values["pattern_background_color"]))
        interior.PatternColorIndex = _color_index(
            int(values["pattern_foreground_color"])
        )
    name, size, bold, italic, color = fmt.font_record.snapshot()
    font_api = target_api.Font
    font_api.Name = name
    font_api.Size = size
    font_api.Bold = bold
    font_api.Italic = italic
    font_api.ColorIndex = _color_index(color)

def _color_index(code: int) -> int:
    """Map an engine color code onto Excel's 1-based palette index."""
    if Color.BLACK <= code <= Color.GRAY80:
        return code - Color.BLACK + 1
    return XL_COLOR_INDEX_AUTOMATIC

def _load_sheet(worksheet: Any, sheet: EngineSheet) -> None:
    used = worksheet.used_range
    formulas = used.formula
    if isinstance(formulas, str):
        formulas = ((formulas,),)
    values = used.options(ndim=2).value
    top, left = used.row - 1, used.column - 1
    for row_offset, (formula_row, value_row) in enumerate(zip(formulas, values)):
        for col_offset, (formula, value) in enumerate(zip(formula_row, value_row)):
            _read_cell(sheet, top + row_offset, left + col_offset, formula, value)

def _read_cell(
    sheet: EngineSheet, row: int, col: int, formula: object, value: object
) -> None:
    if isinstance(formula, str) and formula.startswith("="):
        ok = sheet.write_formula(row, col, formula[1:], None)
    elif value is None:
        return
    elif isinstance(value, bool):
        ok = sheet.write_bool(row, col, value, None)
    elif isinstance(value, (int, float)):
        ok = sheet.write_num(row, col, float(value), None)
    elif isinstance(value, (datetime, date, time, timedelta)):
        ok = sheet.write_num(row, col, float(to_excel(value)), None)
    else:
        ok = sheet.write_str(row, col, str(value), None)
    require(ok, sheet.book)

__all__ = ["XL_HORIZONTAL_ALIGN", "XL_PATTERNS", "XL_VERTICAL_ALIGN", "XlwingsBackend"]
