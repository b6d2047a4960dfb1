from __future__ import annotations

import argparse
from collections.abc import Iterator
import logging
from pathlib import Path
import sys

from .config import LOG_FORMAT, CliConfig, DemoBookType
from .constants import BookType, CellType, Color, FillPattern
from .entities import Book, Sheet
from .errors import ArgumentError, EngineError, SheetbindError
from .shared.a1 import cell_ref

logger = logging.getLogger(__name__)

_DEMO_TYPES: dict[DemoBookType, tuple[BookType, ...]] = {
    "xls": (BookType.XLS,),
    "xlsx": (BookType.XLSX,),
    "both": (BookType.XLSX, BookType.XLS),
}
_EXTENSIONS = {BookType.XLS: ".xls", BookType.XLSX: ".xlsx"}


def main(argv: list[str] | None = None) -> int:
    """Run the ``sheetbind`` command line.

    Args:
        argv: Optional CLI arguments for testing.

    Returns:
        Exit code (0 for success, 1 for failure).
    """
    config = _parse_args(argv)
    _configure_logging(config)
    try:
        if config.command == "demo":
            run_demo(config)
        else:
            run_inspect(config)
    except SheetbindError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="sheetbind", description="Create and inspect spreadsheet workbooks."
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level (DEBUG, INFO, WARNING, ERROR).",
    )
    parser.add_argument("--log-file", type=Path, help="Optional log file path.")
    commands = parser.add_subparsers(dest="command", required=True)

    demo = commands.add_parser("demo", help="Write the demo workbook(s).")
    demo.add_argument("--out-dir", type=Path, default=Path("."), help="Output directory.")
    demo.add_argument(
        "--book-type",
        choices=list(_DEMO_TYPES),
        default="both",
        help="Which workbook type(s) to write.",
    )

    inspect_cmd = commands.add_parser("inspect", help="Print the cells of a workbook.")
    inspect_cmd.add_argument("path", type=Path, help="Workbook to read (.xls/.xlsx).")
    inspect_cmd.add_argument("--sheet", help="Only print this sheet.")
    return parser


def _parse_args(argv: list[str] | None) -> CliConfig:
    args = build_parser().parse_args(argv)
    values: dict[str, object] = {
        "command": args.command,
        "log_file": args.log_file,
    }
    if args.log_level:
        values["log_level"] = args.log_level
    if args.command == "demo":
        values.update(out_dir=args.out_dir, book_type=args.book_type)
    else:
        values.update(path=args.path, sheet=args.sheet)
    return CliConfig.model_validate(values)


def _configure_logging(config: CliConfig) -> None:
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if config.log_file is not None:
        handlers.append(logging.FileHandler(config.log_file))
    logging.basicConfig(
        level=config.log_level.upper(),
        handlers=handlers,
        format=LOG_FORMAT,
    )


def fill_demo_book(book: Book) -> Sheet:
    """Populate ``book`` with the demo content and return its sheet."""
    sheet = book.add_sheet("Sheet 1")
    row = 1
    sheet.write_string(row, 0, "Some string").write_string(
        row, 0, "Unicode - فارسی - Қазақша"
    )
    row += 1
    fmt = book.add_format()
    sheet.write_string(row, 0, "green", fmt)
    sheet.cell_format(row, 0).set_fill_pattern(
        FillPattern.SOLID
    ).set_pattern_foreground_color(Color.GREEN)
    return sheet


def run_demo(config: CliConfig) -> list[Path]:
    """Write one demo workbook per selected book type.

    Returns:
        Paths of the written workbooks.
    """
    out_dir = config.out_dir or Path(".")
    written: list[Path] = []
    for book_type in _DEMO_TYPES[config.book_type]:
        path = out_dir / f"demo{_EXTENSIONS[book_type]}"
        with Book(book_type) as book:
            fill_demo_book(book)
            book.write(path)
        logger.info("Wrote demo workbook %s", path)
        print(path)
        written.append(path)
    return written


def run_inspect(config: CliConfig) -> None:
    """Print ``Sheet!A1<TAB>type<TAB>value`` for every non-empty cell."""
    if config.path is None:
        raise ArgumentError.for_operation("inspect", "a workbook path is required")
    book_type = BookType.XLS if config.path.suffix.lower() == ".xls" else BookType.XLSX
    with Book(book_type) as book:
        book.load(config.path)
        matched = False
        for index in range(book.sheet_count()):
            sheet = book.get_sheet(index)
            name = sheet.name()
            if config.sheet is not None and name != config.sheet:
                continue
            matched = True
            for line in _describe_cells(sheet, name):
                print(line)
        if config.sheet is not None and not matched:
            raise ArgumentError.for_operation(
                "inspect", f"sheet not found: {config.sheet}"
            )


def _describe_cells(sheet: Sheet, name: str) -> Iterator[str]:
    for row, col in sheet.used_cells():
        ref = f"{name}!{cell_ref(row, col)}"
        try:
            kind = sheet.cell_type(row, col)
        except EngineError as exc:
            yield f"{ref}\terror\t{exc}"
            continue
        if kind in (CellType.EMPTY, CellType.BLANK):
            continue
        yield f"{ref}\t{kind.name.lower()}\t{_cell_text(sheet, row, col, kind)}"


def _cell_text(sheet: Sheet, row: int, col: int, kind: CellType) -> str:
    if sheet.is_formula(row, col):
        return f"={sheet.read_formula(row, col)}"
    if kind == CellType.STRING:
        return sheet.read_string(row, col)
    if kind == CellType.BOOLEAN:
        return "TRUE" if sheet.read_bool(row, col) else "FALSE"
    return f"{sheet.read_num(row, col):g}"


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
