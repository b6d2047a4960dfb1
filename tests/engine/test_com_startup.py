from __future__ import annotations

from pathlib import Path
import sys
import types
from typing import Any

import pytest

from sheetbind.constants import BookType
from sheetbind.engine import XlwingsBackend, create_native_book
from sheetbind.engine.workbook import get_com_availability, xlwings_app


class _FakeApp:
    started = 0
    quit_calls = 0

    def __init__(self, **kwargs: Any) -> None:
        type(self).started += 1
        self.books = self
        self.display_alerts = True

    def add(self) -> Any:
        raise RuntimeError("no workbook")

    def quit(self) -> None:
        type(self).quit_calls += 1


@pytest.fixture
def fake_excel(monkeypatch: pytest.MonkeyPatch) -> type[_FakeApp]:
    _FakeApp.started = 0
    _FakeApp.quit_calls = 0
    monkeypatch.delenv("SKIP_COM_TESTS", raising=False)
    monkeypatch.setattr(sys, "platform", "win32")
    monkeypatch.setitem(sys.modules, "xlwings", types.SimpleNamespace(App=_FakeApp))
    return _FakeApp


def test_save_starts_excel_once(fake_excel: type[_FakeApp], tmp_path: Path) -> None:
    book = create_native_book(BookType.XLS)
    assert book.add_sheet("Data") is not None
    with pytest.raises(RuntimeError, match="no workbook"):
        XlwingsBackend().save(book, tmp_path / "out.xls")
    assert fake_excel.started == 1
    assert fake_excel.quit_calls == 1


def test_availability_probe(fake_excel: type[_FakeApp]) -> None:
    assert get_com_availability().available is True
    assert fake_excel.started == 1


def test_startup_failure_reported(monkeypatch: pytest.MonkeyPatch) -> None:
    def _refuse(**kwargs: Any) -> Any:
        raise OSError("no Excel")

    monkeypatch.delenv("SKIP_COM_TESTS", raising=False)
    monkeypatch.setattr(sys, "platform", "win32")
    monkeypatch.setitem(sys.modules, "xlwings", types.SimpleNamespace(App=_refuse))
    availability = get_com_availability()
    assert availability.available is False
    assert availability.reason == "Excel COM is unavailable: no Excel"


def test_skip_env_blocks_excel(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SKIP_COM_TESTS", "1")
    with pytest.raises(RuntimeError, match="disabled by SKIP_COM_TESTS=1"):
        with xlwings_app():
            pass
