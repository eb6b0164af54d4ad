"""Validation Error Details

Structured schema errors with JSON paths, violated constraints, the offending
value and a suggested fix. Supports both fail-fast and
collect-all accumulation modes.

Error Format:
{
    "field": "$[1]",
    "constraint": "maximum",
    "value": 120,
    "message": "120 is greater than the maximum of 100",
    "suggested_fix": "Use a value of 100 or less"
}
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Sequence

from .schema import ValidationMode

if TYPE_CHECKING:
    import jsonschema


@dataclass(frozen=True, slots=True)
class ValidationErrorDetail:
    """Detailed validation error for a single location in a value.

    - field_path: JSON path to offending item (e.g., "$[0].street")
    - constraint: JSON Schema keyword violated (e.g., "maxLength")
    - actual_value: The actual value that failed (may be redacted)
    - message: Human-readable error message
    - suggested_fix: Actionable suggestion to fix the error
    - schema_path: Location of the violated keyword inside the schema
    """
    field_path: str
    constraint: str
    actual_value: Any = None
    message: str = ""
    suggested_fix: str | None = None
    schema_path: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for reporting."""
        result = {"field": self.field_path, "constraint": self.constraint, "message": self.message}
        if self.actual_value is not None: result["value"] = self.actual_value
        if self.suggested_fix: result["suggested_fix"] = self.suggested_fix
        if self.schema_path: result["schema_path"] = self.schema_path
        return result

    @classmethod
    def from_jsonschema_error(cls, error: "jsonschema.ValidationError") -> ValidationErrorDetail:
        """Create from a jsonschema ValidationError."""
        return cls(field_path=cls._format_path(tuple(error.absolute_path)), constraint=str(error.validator),
            actual_value=error.instance, message=error.message,
            suggested_fix=cls._generate_suggested_fix(str(error.validator), error.validator_value),
            schema_path="/".join(str(p) for p in error.absolute_schema_path))

    @staticmethod
    def _format_path(loc: Sequence[str | int]) -> str:
        """Format a jsonschema location as JSON path."""
        if not loc: return "$"
        parts = ["$"]
        for segment in loc:
            if isinstance(segment, int): parts.append(f"[{segment}]")
            else: parts.append(f".{segment}")
        return "".join(parts)

    @staticmethod
    def _generate_suggested_fix(keyword: str, expected: Any) -> str | None:
        """Generate suggested fix from the violated keyword."""
        fix_generators = {
            "minLength": lambda: f"Value must be at least {expected} characters",
            "maxLength": lambda: f"Truncate to {expected} characters or less",
            "pattern": lambda: f"Value must match pattern: {expected}",
            "minimum": lambda: f"Use a value of {expected} or more",
            "maximum": lambda: f"Use a value of {expected} or less",
            "exclusiveMinimum": lambda: "Use a value greater than the minimum",
            "exclusiveMaximum": lambda: "Use a value less than the maximum",
            "multipleOf": lambda: f"Use a multiple of {expected}",
            "minItems": lambda: f"Provide at least {expected} items",
            "maxItems": lambda: f"Provide at most {expected} items",
            "uniqueItems": lambda: "Remove duplicate items",
            "enum": lambda: f"Valid options: {', '.join(str(v) for v in expected)}",
            "type": lambda: f"Provide a value of type {expected}",
            "format": lambda: f"Provide a value in '{expected}' format",
            "required": lambda: f"Provide the properties: {', '.join(str(v) for v in expected)}",
            "additionalProperties": lambda: "Remove properties that are not declared",
        }

        if keyword in fix_generators: return fix_generators[keyword]()
        return None


class ValidationErrorAccumulator(ABC):
    """Abstract base for error accumulation strategies."""

    @abstractmethod
    def add_error(self, detail: ValidationErrorDetail) -> bool:
        """Add error detail. Returns True if should continue, False if should stop."""

    @abstractmethod
    def get_errors(self) -> list[ValidationErrorDetail]:
        """Get accumulated errors."""


@dataclass
class FailFastAccumulator(ValidationErrorAccumulator):
    """Fail-fast accumulator: stops on first error."""
    _error: ValidationErrorDetail | None = None

    def add_error(self, detail: ValidationErrorDetail) -> bool:
        if self._error is None: self._error = detail
        return False

    def get_errors(self) -> list[ValidationErrorDetail]: return [self._error] if self._error else []


@dataclass
class CollectAllAccumulator(ValidationErrorAccumulator):
    """Collect-all accumulator: gathers every error, or up to max_errors when set."""
    _errors: list[ValidationErrorDetail] = field(default_factory=list)
    max_errors: int | None = None

    def add_error(self, detail: ValidationErrorDetail) -> bool:
        if self.max_errors is None:
            self._errors.append(detail)
            return True
        if len(self._errors) < self.max_errors: self._errors.append(detail)
        return len(self._errors) < self.max_errors

    def get_errors(self) -> list[ValidationErrorDetail]: return self._errors.copy()


def create_accumulator(mode: ValidationMode, max_errors: int | None = None) -> ValidationErrorAccumulator:
    """Factory for creating accumulators based on mode."""
    return FailFastAccumulator() if mode == ValidationMode.FAIL_FAST else CollectAllAccumulator(max_errors=max_errors)
