"""Schema Coercion and Validation

Converts raw values to the types declared by JSON Schema / Swagger 2.0
schema nodes and validates them against schemas located inside an API
document.

Key Features:
- Type-dispatched coercion returning Result values (never raising)
- Collection format splitting and ISO8601 date parsing
- Draft 4 validation with Swagger 2.0 extensions (file type, formats)
- Structured error accumulation (fail-fast or collect-all)

Usage:
    from core.validation import convert_value, validate_against_schema

    convert_value({"type": "array", "items": {"type": "integer"}}, {}, "1,2")
    # Ok([1, 2])
"""
from .schema import ValidationMode, ValidateOptions

from .errors import (
    ValidationErrorDetail,
    ValidationErrorAccumulator,
    FailFastAccumulator,
    CollectAllAccumulator,
    create_accumulator,
)

from .coercion import (
    CoercionRule,
    StringToBool,
    StringToNumber,
    StringToObject,
    ISO8601ToDate,
    DelimitedToList,
    SchemaCoercion,
    DEFAULT_COERCER,
    convert_value,
)

from .json_schema import (
    SchemaValidationResult,
    is_file,
    escape_single_quotes,
    escape_paths,
    construct_schema_path_from_ptr,
    get_format_checker,
    get_json_schema_validator,
    validate_against_schema,
)

__all__ = [
    # Options
    "ValidationMode",
    "ValidateOptions",
    # Errors
    "ValidationErrorDetail",
    "ValidationErrorAccumulator",
    "FailFastAccumulator",
    "CollectAllAccumulator",
    "create_accumulator",
    # Coercion
    "CoercionRule",
    "StringToBool",
    "StringToNumber",
    "StringToObject",
    "ISO8601ToDate",
    "DelimitedToList",
    "SchemaCoercion",
    "DEFAULT_COERCER",
    "convert_value",
    # JSON Schema
    "SchemaValidationResult",
    "is_file",
    "escape_single_quotes",
    "escape_paths",
    "construct_schema_path_from_ptr",
    "get_format_checker",
    "get_json_schema_validator",
    "validate_against_schema",
]
