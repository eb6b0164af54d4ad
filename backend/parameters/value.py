"""Processed Parameter Values

A ``ParameterValue`` pairs one raw input with its parameter descriptor and
exposes three lazily computed facets:

- ``value``: the raw input coerced to the schema type, with defaults applied
- ``valid``: whether the value satisfies the parameter's requirements
- ``error``: the ``ParameterError`` explaining why, when it does not

Nothing runs at construction. Each facet is computed once, on first access,
in the order value -> valid -> error. Failures never raise through the
facets; callers check ``valid`` before trusting ``value``.
"""
from __future__ import annotations

from datetime import date
from functools import cached_property
from typing import TYPE_CHECKING, Any, Mapping

from core.errors import AppError, Err, ErrorCode, Ok, Result, try_result
from core.logging import parameters_logger
from core.validation.coercion import convert_value
from core.validation.json_schema import (
    construct_schema_path_from_ptr,
    escape_paths,
    get_json_schema_validator,
    is_file,
    validate_against_schema,
)
from core.validation.schema import ValidateOptions

from .errors import ParameterError

if TYPE_CHECKING:
    from .descriptor import Parameter

log = parameters_logger()

DATE_FORMATS = ("date", "date-time")


def _is_binary(value: Any) -> bool:
    """Raw byte payloads: bytes-like objects or readable streams."""
    if isinstance(value, (bytes, bytearray, memoryview)):
        return True
    return callable(getattr(value, "read", None))


def _apply_defaults(schema: Mapping[str, Any], value: Any) -> Any:
    """Fall back to schema defaults when coercion produced nothing."""
    if value is not None:
        return value

    if schema.get("type") == "array":
        items = schema.get("items")
        if isinstance(items, list):
            value = [item.get("default") for item in items]
            # A tuple with no defaults at all means there is no default
            if all(item is None for item in value):
                value = None
        elif isinstance(items, Mapping) and items.get("default") is not None:
            value = [items["default"]]

    if value is None and schema.get("default") is not None:
        value = schema["default"]
    return value


class ParameterValue:
    """One raw value processed against one parameter.

    Do not construct directly; use ``Parameter.get_value``.
    """

    def __init__(
        self,
        parameter_object: Parameter,
        raw: Any,
        validate_options: ValidateOptions | dict | None = None,
    ):
        self._parameter_object = parameter_object
        self._raw = raw
        self._validate_options = ValidateOptions.coerce(validate_options)

    @property
    def parameter_object(self) -> Parameter:
        return self._parameter_object

    @property
    def raw(self) -> Any:
        """The original value, without defaults."""
        return self._raw

    @property
    def validate_options(self) -> ValidateOptions:
        return self._validate_options

    @cached_property
    def _processed(self) -> Result[Any, AppError]:
        parameter = self._parameter_object
        schema = parameter.schema

        if schema.get("type") == "file":
            return Ok(self._raw)

        options = {"collectionFormat": parameter.collection_format}
        if schema.get("oneOf"):
            result: Result[Any, AppError] = Ok(None)
            api = parameter.path_object.api
            for alternative in schema["oneOf"]:
                alternative = api.resolve_schema(alternative)
                if alternative.get("type") == "null":
                    continue
                result = convert_value(alternative, options, self._raw)
                if result.is_err():
                    break
                # First alternative that actually converted the value wins
                if result.value is not None and result.value is not self._raw:
                    break
        else:
            result = convert_value(schema, options, self._raw)

        match result:
            case Err(error):
                log.debug(
                    "parameter_coercion_failed",
                    ptr=parameter.ptr,
                    code=error.code.name,
                    reason=error.message,
                )
                return result
            case Ok(value):
                return Ok(_apply_defaults(schema, value))

    @cached_property
    def value(self) -> Any:
        """Coerced value, or None when coercion failed or nothing was provided."""
        return self._processed.unwrap_or(None)

    def _skip_validation(self, value: Any) -> bool:
        parameter = self._parameter_object
        schema = parameter.schema

        if parameter.required in (None, False) and value is None:
            return True
        if schema.get("allowEmptyValue") is True and value == "":
            return True
        if parameter.type == "file":
            return True
        # String schemas are decided by the value alone, never by is_file
        if schema.get("type") == "string":
            if schema.get("format") in DATE_FORMATS and isinstance(value, date):
                return True
            return _is_binary(value)
        return is_file(schema)

    @cached_property
    def _verdict(self) -> Result[None, ParameterError]:
        value = self.value
        parameter = self._parameter_object

        if isinstance(self._processed, Err):
            return Err(ParameterError.from_coercion(self._processed.error, parameter.ptr))

        if parameter.required is True and value is None:
            log.debug("parameter_missing", ptr=parameter.ptr, name=parameter.name)
            return Err(ParameterError.missing_required(parameter.ptr))

        if self._skip_validation(value):
            return Ok(None)

        document = parameter.path_object.api.definition
        schema_path = construct_schema_path_from_ptr(parameter.ptr, parameter.definition.get("schema"))
        outcome = try_result(
            lambda: validate_against_schema(
                get_json_schema_validator(),
                escape_paths(document),
                value,
                schema_path,
                None,
                self._validate_options,
            ),
            code=ErrorCode.E2031_SCHEMA_VALIDATION_FAILED,
            origin="schema",
        )

        match outcome:
            case Err(error):
                log.warning(
                    "schema_validator_raised",
                    ptr=parameter.ptr,
                    schema_path=schema_path,
                    reason=error.message,
                )
                return Err(ParameterError.schema_validation_failed(parameter.ptr, [], cause=error))
            case Ok(result) if result.errors:
                log.debug(
                    "parameter_schema_validation_failed",
                    ptr=parameter.ptr,
                    error_count=len(result.errors),
                )
                return Err(ParameterError.schema_validation_failed(parameter.ptr, result.errors))
        return Ok(None)

    @property
    def valid(self) -> bool:
        """Whether the value passed requiredness, coercion and schema checks."""
        return self._verdict.is_ok()

    @property
    def error(self) -> ParameterError | None:
        """The failure behind ``valid == False``; None when valid."""
        match self._verdict:
            case Err(error):
                return error
        return None

    def to_dict(self) -> dict[str, Any]:
        """Serialize the processed facets for diagnostics."""
        error = self.error
        return {
            "name": self._parameter_object.name,
            "raw": self._raw,
            "value": self.value,
            "valid": self.valid,
            "error": error.to_dict() if error else None,
        }

    def __repr__(self) -> str:
        return f"ParameterValue(parameter={self._parameter_object.name!r}, raw={self._raw!r})"
