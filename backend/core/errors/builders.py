"""Validation Error Builders

Ergonomic constructors for the typed errors raised while coercing and
validating parameter values. Each builder creates an ``Err[AppError]``
with the appropriate code and context.
"""
from typing import Any

from .types import AppError, ErrorCode, ErrorContext, Err


def validation_error(
    message: str,
    *,
    code: ErrorCode = ErrorCode.E2000_VALIDATION_GENERIC,
    field: str | None = None,
    value: Any = None,
    origin: str = "",
    cause: Exception | None = None,
    **metadata,
) -> Err[AppError]:
    """Create validation error."""
    meta = {"field": field, "value": value, **metadata}
    return Err(AppError(
        code=code,
        message=message,
        context=ErrorContext(origin=origin),
        metadata={k: v for k, v in meta.items() if v is not None},
        cause=cause,
    ))


def invalid_type(expected: str, value: Any, origin: str = "coercion") -> Err[AppError]:
    return validation_error(
        f"Not a valid {expected}: {value}",
        code=ErrorCode.E2004_INVALID_TYPE,
        value=value,
        expected=expected,
        origin=origin,
    )


def invalid_date(fmt: str, value: Any, origin: str = "coercion") -> Err[AppError]:
    return validation_error(
        f"Not a valid {fmt} string: {value}",
        code=ErrorCode.E2012_INVALID_DATE,
        value=value,
        format=fmt,
        origin=origin,
    )


def invalid_schema_type(type_name: Any, origin: str = "coercion") -> Err[AppError]:
    return validation_error(
        f"Invalid 'type' value: {type_name}",
        code=ErrorCode.E2032_INVALID_SCHEMA_TYPE,
        type=type_name,
        origin=origin,
    )
