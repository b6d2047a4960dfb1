from __future__ import annotations

import pytest

import sheetbind
from sheetbind import AlignH, Book, Color
from sheetbind.binding import ProxyRegistry
from sheetbind.errors import InternalError
from sheetbind.runtime import build_registry, default_registry


class Handle:
    def __init__(self) -> None:
        self.alive = True


class OtherHandle:
    alive = True


class Proxy:
    pass


class OtherProxy:
    pass


def _registry() -> ProxyRegistry:
    registry = ProxyRegistry()
    registry.register(Proxy, Handle)
    return registry


def test_wrap_then_unwrap() -> None:
    registry = _registry()
    proxy, handle = Proxy(), Handle()
    registry.wrap(proxy, handle)
    assert registry.unwrap(proxy, Proxy) is handle


def test_unwrap_fails_closed_for_foreign_values() -> None:
    registry = _registry()
    registry.wrap(Proxy(), Handle())
    assert registry.unwrap(object(), Proxy) is None
    assert registry.unwrap(Proxy(), Proxy) is None
    assert registry.unwrap([], Proxy) is None
    assert registry.unwrap(None, Proxy) is None
    assert registry.unwrap(OtherProxy(), OtherProxy) is None


def test_unwrap_dead_handle() -> None:
    registry = _registry()
    proxy, handle = Proxy(), Handle()
    registry.wrap(proxy, handle)
    handle.alive = False
    assert registry.unwrap(proxy, Proxy) is None
    assert registry.peek(proxy) is handle


def test_wrap_twice_is_refused() -> None:
    registry = _registry()
    proxy = Proxy()
    registry.wrap(proxy, Handle())
    with pytest.raises(InternalError, match="already wrapped"):
        registry.wrap(proxy, Handle())


def test_wrap_unregistered_type() -> None:
    with pytest.raises(InternalError, match="not a registered proxy type"):
        _registry().wrap(OtherProxy(), Handle())


def test_wrap_wrong_handle_kind() -> None:
    with pytest.raises(InternalError, match="cannot wrap OtherHandle"):
        _registry().wrap(Proxy(), OtherHandle())


def test_get_native_raises_internal_error() -> None:
    registry = _registry()
    with pytest.raises(InternalError) as excinfo:
        registry.get_native(Proxy(), Proxy, "Proxy.op")
    assert excinfo.value.operation == "Proxy.op"
    assert excinfo.value.detail.kind == "internal"


def test_frozen_registry_refuses_registration() -> None:
    registry = _registry()
    registry.freeze()
    with pytest.raises(InternalError, match="frozen"):
        registry.register(OtherProxy, OtherHandle)
    with pytest.raises(InternalError, match="frozen"):
        registry.register_constants({"X": 1})


def test_duplicate_registration() -> None:
    registry = _registry()
    with pytest.raises(InternalError, match="already registered"):
        registry.register(Proxy, Handle)
    registry.register_constants({"X": 1})
    with pytest.raises(InternalError, match="constant X"):
        registry.register_constants({"X": 2})


def test_default_registry_is_shared_and_frozen() -> None:
    registry = default_registry()
    assert registry is default_registry()
    assert registry.frozen
    assert registry.is_registered(Book)
    assert registry.constants["ALIGNH_CENTER"] == AlignH.CENTER
    assert registry.constants["BOOK_TYPE_XLS"] == 0


def test_flat_constants_are_module_attributes() -> None:
    assert sheetbind.COLOR_GREEN == Color.GREEN
    assert sheetbind.FILLPATTERN_SOLID == 1
    assert sheetbind.CELLTYPE_ERROR == 5
    assert "NUMFORMAT_PERCENT" in dir(sheetbind)
    with pytest.raises(AttributeError):
        sheetbind.ALIGNH_NOWHERE  # noqa: B018


def test_book_with_explicit_registry() -> None:
    registry = build_registry()
    with Book(registry=registry) as book:
        sheet = book.add_sheet("Data")
        assert book.registry is registry
        assert registry.unwrap(sheet, type(sheet)) is not None
        assert default_registry().unwrap(book, Book) is None


def test_book_with_unprepared_registry() -> None:
    with pytest.raises(InternalError, match="not a registered proxy type"):
        Book(registry=ProxyRegistry())
