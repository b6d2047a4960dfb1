"""Binding layer between Python proxies and engine handles."""

from .arguments import ArgumentSpec, Param, arguments, optional, required
from .ownership import BookBound, ensure_same_book, resolve_dependency
from .registry import ProxyRegistry
from .translate import ensure_cell_type, ensure_ok, ensure_result

__all__ = [
    "ArgumentSpec",
    "BookBound",
    "Param",
    "ProxyRegistry",
    "arguments",
    "ensure_cell_type",
    "ensure_ok",
    "ensure_result",
    "ensure_same_book",
    "optional",
    "required",
    "resolve_dependency",
]
