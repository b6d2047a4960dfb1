from __future__ import annotations

import os
from pathlib import Path
from typing import Final, Literal

from pydantic import BaseModel, ConfigDict, Field

from .constants import BookType

LOG_LEVEL_ENV: Final = "SHEETBIND_LOG_LEVEL"
LOG_FORMAT: Final = "%(asctime)s %(levelname)s %(name)s: %(message)s"

DemoBookType = Literal["xls", "xlsx", "both"]


class BookLimits(BaseModel):
    """Addressable grid and file extension for one book type."""

    model_config = ConfigDict(frozen=True)

    max_rows: int = Field(..., ge=1)
    max_cols: int = Field(..., ge=1)
    extension: str


BOOK_LIMITS: Final[dict[BookType, BookLimits]] = {
    BookType.XLS: BookLimits(max_rows=65_536, max_cols=256, extension=".xls"),
    BookType.XLSX: BookLimits(max_rows=1_048_576, max_cols=16_384, extension=".xlsx"),
}


def limits_for(book_type: BookType) -> BookLimits:
    """Return grid limits for a book type."""
    return BOOK_LIMITS[book_type]


class CliConfig(BaseModel):
    """Configuration for one ``sheetbind`` command-line invocation."""

    command: Literal["demo", "inspect"]
    log_level: str = Field(
        default_factory=lambda: os.getenv(LOG_LEVEL_ENV, "WARNING"),
        description="Logging level.",
    )
    log_file: Path | None = Field(default=None, description="Optional log file path.")
    out_dir: Path | None = Field(default=None, description="Demo output directory.")
    book_type: DemoBookType = Field(default="both", description="Demo book types.")
    path: Path | None = Field(default=None, description="Workbook to inspect.")
    sheet: str | None = Field(default=None, description="Restrict inspect to a sheet.")


__all__ = [
    "BOOK_LIMITS",
    "BookLimits",
    "CliConfig",
    "DemoBookType",
    "LOG_FORMAT",
    "LOG_LEVEL_ENV",
    "limits_for",
]
