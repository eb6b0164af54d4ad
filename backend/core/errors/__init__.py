"""Monadic Error Handling System

Type-safe error handling inspired by Haskell's Either monad and Rust's
Result type.

Key components:
- Result[T, E]: Monadic container for success/failure
- AppError: Base error type with full context
- ErrorCode: Hierarchical error code taxonomy
- Builder functions: Ergonomic error construction

Usage:
    from core.errors import Ok, Err, Result, AppError, invalid_type

    def parse_flag(raw: str) -> Result[bool, AppError]:
        if raw not in ("true", "false"):
            return invalid_type("boolean", raw)
        return Ok(raw == "true")

    match parse_flag("yes"):
        case Ok(flag):
            print(flag)
        case Err(error):
            log.debug(error.message, code=error.code.name)
"""
from .types import (
    Result,
    Ok,
    Err,
    AppError,
    ErrorCode,
    ErrorContext,
    from_exception,
    try_result,
    sequence_results,
)

from .builders import (
    validation_error,
    invalid_type,
    invalid_date,
    invalid_schema_type,
)

__all__ = [
    # Core types
    "Result",
    "Ok",
    "Err",
    "AppError",
    "ErrorCode",
    "ErrorContext",
    # Constructors
    "from_exception",
    "try_result",
    "sequence_results",
    # Builders
    "validation_error",
    "invalid_type",
    "invalid_date",
    "invalid_schema_type",
]
