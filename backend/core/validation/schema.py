"""Validation Options

Caller-supplied options for validating a parameter value against its JSON
Schema. Defaults are read from settings so deployments can switch between
fail-fast and collect-all behaviour without code changes.
"""
from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, Callable, Iterable

from pydantic import BaseModel, ConfigDict, Field, field_validator

from core.config import get_settings


class ValidationMode(str, Enum):
    """Validation accumulation strategy."""
    FAIL_FAST = "fail_fast"
    COLLECT_ALL = "collect_all"


# (value, schema) -> error details
CustomValidator = Callable[[Any, dict], Iterable[Any]]


def _default_mode() -> ValidationMode:
    return ValidationMode(get_settings().VALIDATION_MODE)


def _default_max_errors() -> int | None:
    return get_settings().MAX_VALIDATION_ERRORS


class ValidateOptions(BaseModel):
    """Options forwarded to the schema validator."""
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    mode: ValidationMode = Field(default_factory=_default_mode)
    # None keeps every error in collect-all mode
    max_errors: Annotated[int, Field(ge=1)] | None = Field(default_factory=_default_max_errors)
    check_formats: bool = True
    custom_validators: tuple[CustomValidator, ...] = ()

    @field_validator("custom_validators", mode="before")
    @classmethod
    def _as_tuple(cls, v: Any) -> Any:
        if isinstance(v, list):
            return tuple(v)
        return v

    @classmethod
    def coerce(cls, options: ValidateOptions | dict | None) -> ValidateOptions:
        """Accept options as a model, a plain mapping, or nothing."""
        if options is None:
            return cls()
        if isinstance(options, cls):
            return options
        return cls.model_validate(options)
