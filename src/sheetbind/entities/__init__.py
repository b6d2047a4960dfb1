"""Proxy entities exposed to callers."""

from .book import Book
from .font import Font
from .format import Format
from .sheet import Sheet

__all__ = ["Book", "Font", "Format", "Sheet"]
