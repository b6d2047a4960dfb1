from __future__ import annotations

from typing import ClassVar, Literal

from pydantic import BaseModel

ErrorKind = Literal["argument", "ownership", "engine", "internal"]


class ErrorDetail(BaseModel):
    """Structured description of a failed binding call."""

    kind: ErrorKind
    operation: str
    message: str


class SheetbindError(Exception):
    """Base class for every error raised by the binding layer."""

    kind: ClassVar[ErrorKind]

    def __init__(self, detail: ErrorDetail) -> None:
        super().__init__(detail.message)
        self.detail = detail

    @property
    def operation(self) -> str:
        return self.detail.operation

    @classmethod
    def for_operation(cls, operation: str, message: str) -> SheetbindError:
        """Build an error of this class for one operation.

        Args:
            operation: Qualified operation name, e.g. ``Sheet.write_string``.
            message: Human-readable reason.

        Returns:
            Error instance carrying an ``ErrorDetail``.
        """
        return cls(ErrorDetail(kind=cls.kind, operation=operation, message=message))


class ArgumentError(SheetbindError, TypeError):
    """Missing, malformed or mistyped call arguments."""

    kind = "argument"


class OwnershipError(SheetbindError, ValueError):
    """An object argument belongs to another book, or its book is gone."""

    kind = "ownership"


class EngineError(SheetbindError, RuntimeError):
    """The engine reported failure; the message comes from its error slot."""

    kind = "engine"


class InternalError(SheetbindError, RuntimeError):
    """A proxy could not be resolved to a live engine handle."""

    kind = "internal"


__all__ = [
    "ArgumentError",
    "EngineError",
    "ErrorDetail",
    "ErrorKind",
    "InternalError",
    "OwnershipError",
    "SheetbindError",
]
