from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
import functools
import inspect
import os
from pathlib import Path
from typing import Annotated, Any, Literal, TypeVar

from pydantic import (
    AfterValidator,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    ValidationError,
    create_model,
)
from pydantic_core import ErrorDetails

from sheetbind.errors import ArgumentError

ParamKind = Literal["int", "float", "bool", "str", "path", "object"]
R = TypeVar("R")

_EXPECTED: dict[ParamKind, str] = {
    "int": "an integer",
    "float": "a number",
    "bool": "a boolean",
    "str": "a string",
    "path": "a path",
}


class Param(BaseModel):
    """Declared parameter of a bound operation."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: str
    kind: ParamKind
    required: bool = True
    default: Any = None
    ge: int | None = None
    le: int | None = None
    proxy_type: type | None = None

    def expected(self) -> str:
        if self.kind == "object":
            name = self.proxy_type.__name__ if self.proxy_type else "object"
            return f"a {name}"
        return _EXPECTED[self.kind]


def required(name: str, kind: ParamKind, **options: Any) -> Param:
    """Declare a required parameter."""
    return Param(name=name, kind=kind, required=True, **options)


def optional(name: str, kind: ParamKind, default: Any = None, **options: Any) -> Param:
    """Declare an optional parameter; ``None`` from the caller means ``default``."""
    return Param(name=name, kind=kind, required=False, default=default, **options)


def _utf8_encodable(value: str) -> str:
    try:
        value.encode("utf-8")
    except UnicodeEncodeError as exc:
        raise ValueError("must be encodable as UTF-8") from exc
    return value


def _as_path(value: object) -> object:
    if isinstance(value, (str, os.PathLike)):
        return Path(value)
    return value


def _annotation(param: Param) -> Any:
    """Return the pydantic annotation that enforces one parameter kind."""
    if param.kind == "int":
        return Annotated[int, Field(strict=True, ge=param.ge, le=param.le)]
    if param.kind == "float":
        return Annotated[
            float,
            Field(strict=True, allow_inf_nan=False, ge=param.ge, le=param.le),
            AfterValidator(float),
        ]
    if param.kind == "bool":
        return Annotated[bool, Field(strict=True)]
    if param.kind == "str":
        return Annotated[str, Field(strict=True), AfterValidator(_utf8_encodable)]
    if param.kind == "path":
        return Annotated[Path, BeforeValidator(_as_path)]
    if param.proxy_type is None:
        raise ValueError(f"object parameter {param.name!r} needs a proxy_type")
    return param.proxy_type


class ArgumentSpec:
    """Ordered parameter declarations compiled into a strict pydantic model."""

    def __init__(self, operation: str, params: Sequence[Param]) -> None:
        self.operation = operation
        self.params = tuple(params)
        self._by_name = {param.name: param for param in self.params}
        if len(self._by_name) != len(self.params):
            raise ValueError(f"{operation}: duplicate parameter names")
        fields: dict[str, Any] = {
            param.name: (
                _annotation(param),
                ... if param.required else param.default,
            )
            for param in self.params
        }
        self.model: type[BaseModel] = create_model(  # type: ignore[call-overload]
            f"{operation.replace('.', '_')}_Arguments",
            __config__=ConfigDict(
                strict=True,
                frozen=True,
                extra="forbid",
                arbitrary_types_allowed=True,
            ),
            **fields,
        )

    def bind(self, args: Sequence[Any], kwargs: Mapping[str, Any]) -> BaseModel:
        """Validate actual arguments and return the typed bundle.

        Args:
            args: Positional actuals, in declaration order.
            kwargs: Keyword actuals.

        Returns:
            Frozen model instance whose attributes are the parameter values.

        Raises:
            ArgumentError: For the first violation in declaration order.
        """
        if len(args) > len(self.params):
            raise self._error(
                f"takes at most {len(self.params)} arguments ({len(args)} given)"
            )
        values: dict[str, Any] = {
            param.name: value for param, value in zip(self.params, args)
        }
        for name, value in kwargs.items():
            if name not in self._by_name:
                raise self._error(f"unexpected keyword argument '{name}'")
            if name in values:
                raise self._error(f"got multiple values for argument '{name}'")
            values[name] = value
        present = {name: value for name, value in values.items() if value is not None}
        try:
            return self.model.model_validate(present)
        except ValidationError as exc:
            raise self._error(self._describe(exc.errors()[0])) from None

    def signature(self) -> inspect.Signature:
        """Build the signature of a bound method: ``self`` plus each parameter."""
        parameters = [
            inspect.Parameter("self", inspect.Parameter.POSITIONAL_OR_KEYWORD)
        ]
        for param in self.params:
            parameters.append(
                inspect.Parameter(
                    param.name,
                    inspect.Parameter.POSITIONAL_OR_KEYWORD,
                    default=inspect.Parameter.empty
                    if param.required
                    else param.default,
                )
            )
        return inspect.Signature(parameters)

    def _describe(self, error: ErrorDetails) -> str:
        name = str(error["loc"][0]) if error["loc"] else "?"
        param = self._by_name.get(name)
        if param is None:
            return error["msg"]
        ctx = error.get("ctx") or {}
        if error["type"] == "missing":
            return f"missing required argument '{name}'"
        if error["type"] == "greater_than_equal":
            return f"argument '{name}' must be >= {ctx['ge']}"
        if error["type"] == "less_than_equal":
            return f"argument '{name}' must be <= {ctx['le']}"
        if error["type"] == "finite_number":
            return f"argument '{name}' must be a finite number"
        if error["type"] == "value_error":
            return f"argument '{name}' {ctx['error']}"
        return f"argument '{name}' must be {param.expected()}"

    def _error(self, message: str) -> ArgumentError:
        return ArgumentError.for_operation(self.operation, message)  # type: ignore[return-value]


def arguments(
    *params: Param,
) -> Callable[[Callable[[Any, Any], R]], Callable[..., R]]:
    """Validate a method's actual arguments before it runs.

    The decorated method is called as ``method(self, bundle)`` where
    ``bundle`` carries one attribute per declared parameter.
    """

    def decorate(method: Callable[[Any, Any], R]) -> Callable[..., R]:
        spec = ArgumentSpec(method.__qualname__, params)

        @functools.wraps(method)
        def wrapper(self: Any, *args: Any, **kwargs: Any) -> R:
            return method(self, spec.bind(args, kwargs))

        wrapper.__signature__ = spec.signature()  # type: ignore[attr-defined]
        wrapper.argument_spec = spec  # type: ignore[attr-defined]
        return wrapper

    return decorate


__all__ = [
    "ArgumentSpec",
    "Param",
    "ParamKind",
    "arguments",
    "optional",
    "required",
]
