from __future__ import annotations

import pytest

from sheetbind.shared.a1 import (
    cell_ref,
    column_index_to_label,
    column_label_to_index,
    range_ref,
)


@pytest.mark.parametrize(
    "label,index",
    [("A", 1), ("Z", 26), ("AA", 27), ("AZ", 52), ("XFD", 16_384)],
)
def test_column_label_round_trip(label: str, index: int) -> None:
    assert column_label_to_index(label) == index
    assert column_index_to_label(index) == label


def test_column_label_is_case_insensitive() -> None:
    assert column_label_to_index(" ab ") == 28


def test_invalid_column_label() -> None:
    with pytest.raises(ValueError, match="Invalid column label"):
        column_label_to_index("A1")


def test_invalid_column_index() -> None:
    with pytest.raises(ValueError, match="must be positive"):
        column_index_to_label(0)


def test_cell_and_range_refs_are_zero_based() -> None:
    assert cell_ref(0, 0) == "A1"
    assert cell_ref(9, 27) == "AB10"
    assert range_ref(0, 1, 0, 2) == "A1:C2"
