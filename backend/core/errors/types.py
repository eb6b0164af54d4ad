"""Monadic Error Handling Types

Result/Either types used by every fallible step of parameter processing.
Coercion and schema validation return ``Result`` values instead of raising,
so failures can be captured once and surfaced later as data.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, Generic, TypeVar, Union, final
from uuid import uuid4

T = TypeVar("T")
E = TypeVar("E", bound="AppError")


class ErrorCode(Enum):
    """Error codes raised while processing parameter values.

    E20xx: Coercion of raw values
    E203x: Parameter verdicts
    E9xxx: Unexpected failures
    """
    # Coercion (E20xx)
    E2000_VALIDATION_GENERIC = 2000
    E2004_INVALID_TYPE = 2004
    E2012_INVALID_DATE = 2012

    # Parameter verdicts (E203x)
    E2030_MISSING_REQUIRED_PARAMETER = 2030
    E2031_SCHEMA_VALIDATION_FAILED = 2031
    E2032_INVALID_SCHEMA_TYPE = 2032

    E9001_UNEXPECTED_ERROR = 9001

    @property
    def http_status(self) -> int:
        """HTTP status a request pipeline should answer with."""
        # A bad schema type is the API author's fault, not the client's
        if self is ErrorCode.E2032_INVALID_SCHEMA_TYPE or self.value >= 9000:
            return 500
        return 400

    @property
    def category(self) -> str:
        return "validation" if self.value < 9000 else "internal"


@dataclass(frozen=True, slots=True)
class ErrorContext:
    """Where and when an error was produced."""
    correlation_id: str = field(default_factory=lambda: uuid4().hex[:8])
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    origin: str = ""


@dataclass(frozen=True, slots=True)
class AppError:
    """Typed error with context.

    - code: entry of the ``ErrorCode`` taxonomy
    - message: human-readable description
    - metadata: offending value and what was expected
    - cause: the exception this error was built from, if any
    """
    code: ErrorCode
    message: str
    context: ErrorContext = field(default_factory=ErrorContext)
    metadata: dict = field(default_factory=dict)
    cause: Exception | None = None

    def to_dict(self) -> dict:
        """Serialize error for reporting."""
        return {
            "error": {
                "code": self.code.name,
                "code_num": self.code.value,
                "message": self.message,
                "category": self.code.category,
                "origin": self.context.origin,
                "correlation_id": self.context.correlation_id,
                "timestamp": self.context.timestamp.isoformat(),
                "metadata": self.metadata,
            }
        }

    def __str__(self) -> str:
        return f"[{self.code.name}] {self.message}"


@final
@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Successful step."""
    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap_or(self, default: T) -> T:
        return self.value


@final
@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """Failed step."""
    error: E

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap_or(self, default: T) -> T:
        return default


Result = Union[Ok[T], Err[E]]


def from_exception(
    exc: Exception,
    code: ErrorCode = ErrorCode.E9001_UNEXPECTED_ERROR,
    message: str | None = None,
    origin: str = "",
    **metadata,
) -> Err[AppError]:
    """Convert exception to Err, keeping it as the cause."""
    return Err(AppError(
        code=code,
        message=message or str(exc),
        context=ErrorContext(origin=origin),
        metadata=metadata,
        cause=exc,
    ))


def try_result(
    f: Callable[[], T],
    code: ErrorCode = ErrorCode.E9001_UNEXPECTED_ERROR,
    origin: str = "",
) -> Result[T, AppError]:
    """Run ``f``, turning any exception it raises into an Err."""
    try:
        return Ok(f())
    except Exception as e:
        return from_exception(e, code=code, origin=origin)


def sequence_results(results: list[Result[T, AppError]]) -> Result[list[T], AppError]:
    """Collect Ok values into a list, stopping at the first Err."""
    values: list[T] = []

    for r in results:
        match r:
            case Ok(v):
                values.append(v)
            case Err():
                return r

    return Ok(values)
