from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
import logging
import os
from pathlib import Path
import sys
from typing import TYPE_CHECKING, Any
import warnings

from openpyxl import load_workbook
from pydantic import BaseModel

if TYPE_CHECKING:  # pragma: no cover - typing only
    import xlwings as xw

logger = logging.getLogger(__name__)


class ComAvailability(BaseModel):
    """Whether Excel COM automation can be used in this process."""

    available: bool
    reason: str | None = None


@contextmanager
def openpyxl_workbook(file_path: Path, *, data_only: bool) -> Iterator[Any]:
    """Open an openpyxl workbook and ensure it is closed.

    Args:
        file_path: Workbook path.
        data_only: Whether to read cached formula results instead of formulas.

    Yields:
        openpyxl workbook instance.
    """
    with warnings.catch_warnings():
        warnings.filterwarnings(
            "ignore",
            message="Unknown extension is not supported and will be removed",
            category=UserWarning,
            module="openpyxl",
        )
        warnings.filterwarnings(
            "ignore",
            message="Conditional Formatting extension is not supported and will be removed",
            category=UserWarning,
            module="openpyxl",
        )
        wb = load_workbook(file_path, data_only=data_only)
    try:
        yield wb
    finally:
        wb.close()


def _com_blocked_reason() -> str | None:
    if os.getenv("SKIP_COM_TESTS") == "1":
        return "Excel COM is unavailable: disabled by SKIP_COM_TESTS=1"
    if sys.platform != "win32":
        return "Excel COM is unavailable: requires Windows"
    return None


def get_com_availability() -> ComAvailability:
    """Return whether Excel COM can be driven through xlwings.

    Starts and quits an Excel instance to find out.
    """
    try:
        with xlwings_app():
            pass
    except RuntimeError as exc:
        return ComAvailability(available=False, reason=str(exc))
    return ComAvailability(available=True)


@contextmanager
def xlwings_app(*, visible: bool = False) -> Iterator[xw.App]:
    """Start a private Excel instance and quit it on exit.

    Args:
        visible: Whether to show the Excel application window.

    Yields:
        xlwings application instance.

    Raises:
        RuntimeError: Excel COM is unavailable.
    """
    reason = _com_blocked_reason()
    if reason:
        raise RuntimeError(reason)
    try:
        import xlwings as xw

        app = xw.App(add_book=False, visible=visible)
    except Exception as exc:
        raise RuntimeError(f"Excel COM is unavailable: {exc}") from exc
    app.display_alerts = False
    try:
        yield app
    finally:
        try:
            app.quit()
        except Exception as exc:
            logger.warning("Failed to quit Excel instance: %s", exc)


__all__ = [
    "ComAvailability",
    "get_com_availability",
    "openpyxl_workbook",
    "xlwings_app",
]
