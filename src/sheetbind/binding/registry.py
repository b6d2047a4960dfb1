from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import Any
import weakref

from sheetbind.engine.base import NativeHandle
from sheetbind.errors import InternalError


class ProxyRegistry:
    """Binds proxy objects to engine handles.

    Handles live in a weak-keyed side table, so a proxy carries no engine
    state of its own and an entry disappears with its proxy. Proxy types and
    flat constants are registered once, then the registry is frozen.
    """

    def __init__(self) -> None:
        self._kinds: dict[type, type] = {}
        self._handles: weakref.WeakKeyDictionary[Any, NativeHandle] = (
            weakref.WeakKeyDictionary()
        )
        self._constants: dict[str, int] = {}
        self._frozen = False

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def constants(self) -> Mapping[str, int]:
        return MappingProxyType(self._constants)

    def freeze(self) -> None:
        self._frozen = True

    def register(self, proxy_type: type, kind: type) -> None:
        """Declare that instances of ``proxy_type`` wrap handles of ``kind``."""
        self._ensure_open("register")
        if proxy_type in self._kinds:
            raise InternalError.for_operation(
                "register", f"{proxy_type.__name__} is already registered"
            )
        self._kinds[proxy_type] = kind

    def register_constants(self, constants: Mapping[str, int]) -> None:
        self._ensure_open("register_constants")
        for name, value in constants.items():
            if name in self._constants:
                raise InternalError.for_operation(
                    "register_constants", f"constant {name} is already registered"
                )
            self._constants[name] = value

    def is_registered(self, proxy_type: type) -> bool:
        return proxy_type in self._kinds

    def wrap(self, proxy: Any, handle: NativeHandle) -> None:
        """Attach ``handle`` to a freshly constructed ``proxy``."""
        proxy_type = type(proxy)
        kind = self._kinds.get(proxy_type)
        if kind is None:
            raise InternalError.for_operation(
                "wrap", f"{proxy_type.__name__} is not a registered proxy type"
            )
        if not isinstance(handle, kind):
            raise InternalError.for_operation(
                "wrap",
                f"{proxy_type.__name__} cannot wrap {type(handle).__name__}",
            )
        if proxy in self._handles:
            raise InternalError.for_operation(
                "wrap", f"{proxy_type.__name__} is already wrapped"
            )
        self._handles[proxy] = handle

    def peek(self, value: Any) -> NativeHandle | None:
        """Return the handle bound to ``value`` even if it is no longer alive."""
        try:
            return self._handles.get(value)
        except TypeError:
            # Unhashable or not weak-referenceable: never a proxy.
            return None

    def unwrap(self, value: Any, proxy_type: type) -> NativeHandle | None:
        """Return the live handle behind ``value``, or ``None``.

        ``None`` covers values of the wrong type, unregistered types,
        proxies that were never wrapped, and handles that died with a
        released book or a deleted sheet.
        """
        if proxy_type not in self._kinds or not isinstance(value, proxy_type):
            return None
        handle = self.peek(value)
        if handle is None or not handle.alive:
            return None
        return handle

    def get_native(self, proxy: Any, proxy_type: type, operation: str) -> Any:
        """Checked ``unwrap``; raises ``InternalError`` instead of returning None."""
        handle = self.unwrap(proxy, proxy_type)
        if handle is None:
            raise InternalError.for_operation(
                operation,
                f"{proxy_type.__name__} is not bound to a live engine resource",
            )
        return handle

    def _ensure_open(self, operation: str) -> None:
        if self._frozen:
            raise InternalError.for_operation(operation, "registry is frozen")


__all__ = ["ProxyRegistry"]
