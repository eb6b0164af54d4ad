"""Parameter Value Errors

The single failure shape surfaced by ``ParameterValue.error``. Every error is
marked as validation-originated and stamped with the parameter's pointer so
reporting can localize it within the API document.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from core.errors import AppError, ErrorCode
from core.validation.errors import ValidationErrorDetail


class ParameterErrorCode(str, Enum):
    """Kinds of parameter value failures."""
    MISSING_REQUIRED_PARAMETER = "MISSING_REQUIRED_PARAMETER"
    SCHEMA_VALIDATION_FAILED = "SCHEMA_VALIDATION_FAILED"


_APP_ERROR_CODES = {
    ParameterErrorCode.MISSING_REQUIRED_PARAMETER: ErrorCode.E2030_MISSING_REQUIRED_PARAMETER,
    ParameterErrorCode.SCHEMA_VALIDATION_FAILED: ErrorCode.E2031_SCHEMA_VALIDATION_FAILED,
}


@dataclass(eq=False)
class ParameterError(Exception):
    """Why a parameter value is invalid.

    - code: failure kind
    - message: human-readable description
    - schema_path: pointer of the parameter inside its document
    - errors: schema errors, verbatim from the validator (schema failures only)
    - cause: the captured coercion or validator error, if any
    """
    code: ParameterErrorCode
    message: str
    schema_path: str
    errors: list[ValidationErrorDetail] = field(default_factory=list)
    cause: AppError | None = None
    failed_validation: bool = True

    def __post_init__(self):
        super().__init__(self.message)

    def __str__(self) -> str:
        if not self.errors: return self.message
        if len(self.errors) == 1: return f"{self.message}: {self.errors[0].message}"
        return f"{self.message} ({len(self.errors)} errors)"

    @classmethod
    def missing_required(cls, schema_path: str) -> ParameterError:
        return cls(
            code=ParameterErrorCode.MISSING_REQUIRED_PARAMETER,
            message="Value is required but was not provided",
            schema_path=schema_path,
        )

    @classmethod
    def schema_validation_failed(
        cls,
        schema_path: str,
        errors: list[ValidationErrorDetail],
        cause: AppError | None = None,
    ) -> ParameterError:
        return cls(
            code=ParameterErrorCode.SCHEMA_VALIDATION_FAILED,
            message="Value failed JSON Schema validation",
            schema_path=schema_path,
            errors=errors,
            cause=cause,
        )

    @classmethod
    def from_coercion(cls, error: AppError, schema_path: str) -> ParameterError:
        """Wrap a coercion failure; its specific code stays on ``cause``."""
        return cls(
            code=ParameterErrorCode.SCHEMA_VALIDATION_FAILED,
            message=error.message,
            schema_path=schema_path,
            cause=error,
        )

    def to_app_error(self) -> AppError:
        """Convert to AppError for the error handling system."""
        code = _APP_ERROR_CODES[self.code]
        if self.cause is not None:
            code = self.cause.code
        return AppError(
            code=code,
            message=self.message,
            metadata={"schema_path": self.schema_path, "errors": [e.to_dict() for e in self.errors]},
            cause=self.cause.cause if self.cause is not None else None,
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize for reporting."""
        result: dict[str, Any] = {
            "code": self.code.value,
            "message": self.message,
            "failed_validation": self.failed_validation,
            "schema_path": self.schema_path,
        }
        if self.errors:
            result["errors"] = [e.to_dict() for e in self.errors]
        if self.cause is not None:
            result["cause"] = self.cause.to_dict()["error"]
        return result
