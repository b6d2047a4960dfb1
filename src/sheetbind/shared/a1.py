from __future__ import annotations

import re

_COLUMN_LABEL_PATTERN = re.compile(r"^[A-Za-z]{1,3}$")


def column_label_to_index(label: str) -> int:
    """Convert Excel-style column label (A/AA) to 1-based index."""
    normalized = label.strip().upper()
    if not _COLUMN_LABEL_PATTERN.match(normalized):
        raise ValueError(f"Invalid column label: {label}")
    index = 0
    for char in normalized:
        index = index * 26 + (ord(char) - ord("A") + 1)
    return index


def column_index_to_label(index: int) -> str:
    """Convert 1-based column index to Excel-style column label."""
    if index < 1:
        raise ValueError("Column index must be positive.")
    chunks: list[str] = []
    current = index
    while current > 0:
        current -= 1
        chunks.append(chr(ord("A") + (current % 26)))
        current //= 26
    return "".join(reversed(chunks))


def cell_ref(row: int, col: int) -> str:
    """Format a zero-based (row, col) pair as an A1 reference."""
    return f"{column_index_to_label(col + 1)}{row + 1}"


def range_ref(row_first: int, row_last: int, col_first: int, col_last: int) -> str:
    """Format a zero-based rectangle as an A1 range."""
    return f"{cell_ref(row_first, col_first)}:{cell_ref(row_last, col_last)}"
