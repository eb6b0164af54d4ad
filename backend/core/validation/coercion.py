"""Schema-Driven Coercion System

Converts raw, weakly-typed request values (strings, byte payloads, JSON text)
into the type declared by a JSON Schema / Swagger 2.0 schema node.

Features:
- One rule per schema type, dispatched by ``schema["type"]``
- Collection formats for arrays (csv, ssv, tsv, pipes, multi)
- ISO8601 parsing for ``date`` and ``date-time`` string formats
- Type-safe results: every rule returns ``Result`` instead of raising
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Mapping
import json
import math
import re

from core.config import get_settings
from core.errors import (
    AppError,
    Err,
    Ok,
    Result,
    invalid_date,
    invalid_schema_type,
    invalid_type,
    sequence_results,
)

SCHEMA_TYPES = frozenset({"array", "boolean", "integer", "number", "object", "string", "file"})

COLLECTION_SEPARATORS: dict[str | None, str] = {
    None: ",",
    "csv": ",",
    "ssv": " ",
    "tsv": "\t",
    "pipes": "|",
}

# RFC 3339 full-date / date-time, as used by the Swagger "date" and "date-time" formats
_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_DATE_TIME_RE = re.compile(
    r"^\d{4}-\d{2}-\d{2}[Tt ]\d{2}:\d{2}:\d{2}(\.\d+)?([Zz]|[+-]\d{2}:\d{2})?$"
)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _parse_json(value: Any) -> Any:
    """Return the decoded JSON document, or the value itself when it is not JSON text."""
    if not isinstance(value, str):
        return value
    try:
        return json.loads(value)
    except ValueError:
        return value


@dataclass(frozen=True, slots=True)
class CoercionRule(ABC):
    """Base class for coercion rules.

    Each rule handles exactly one schema type and returns a Result so callers
    decide when a failure is surfaced.
    """

    @property
    @abstractmethod
    def schema_type(self) -> str:
        """Schema ``type`` this rule coerces to."""

    @abstractmethod
    def coerce(self, schema: Mapping[str, Any], options: Mapping[str, Any], value: Any) -> Result[Any, AppError]:
        """Coerce value to the schema's type."""

    def __call__(self, schema: Mapping[str, Any], options: Mapping[str, Any], value: Any) -> Result[Any, AppError]:
        return self.coerce(schema, options, value)


@dataclass(frozen=True, slots=True)
class StringToBool(CoercionRule):
    """Coerce ``"true"``/``"false"`` to boolean."""

    @property
    def schema_type(self) -> str:
        return "boolean"

    def coerce(self, schema, options, value):
        if isinstance(value, bool):
            return Ok(value)
        if value in ("true", "false"):
            return Ok(value == "true")
        return invalid_type("boolean", value)


@dataclass(frozen=True, slots=True)
class StringToNumber(CoercionRule):
    """Coerce numeric strings to int or float.

    Integral literals stay ``int`` so ``"5"`` becomes ``5``; anything else that
    parses becomes ``float`` and is left for schema validation to judge.
    """
    target: str = "number"

    @property
    def schema_type(self) -> str:
        return self.target

    def coerce(self, schema, options, value):
        if _is_number(value):
            return Ok(value)
        if not isinstance(value, str) or not value.strip():
            return invalid_type(self.target, value)

        stripped = value.strip()
        try:
            return Ok(int(stripped))
        except ValueError:
            pass
        try:
            parsed = float(stripped)
        except ValueError:
            return invalid_type(self.target, value)
        if not math.isfinite(parsed):
            return invalid_type(self.target, value)
        return Ok(parsed)


@dataclass(frozen=True, slots=True)
class StringToObject(CoercionRule):
    """Coerce JSON text to an object."""

    @property
    def schema_type(self) -> str:
        return "object"

    def coerce(self, schema, options, value):
        if not isinstance(value, str):
            return Ok(value)
        try:
            return Ok(json.loads(value))
        except ValueError:
            return invalid_type("object", json.dumps(value))


@dataclass(frozen=True, slots=True)
class ISO8601ToDate(CoercionRule):
    """Coerce ``date`` / ``date-time`` formatted strings to native values.

    Strings without a date format pass through unchanged.
    """

    @property
    def schema_type(self) -> str:
        return "string"

    def coerce(self, schema, options, value):
        fmt = schema.get("format")
        if fmt not in ("date", "date-time"):
            return Ok(value)

        if fmt == "date" and isinstance(value, date):
            return Ok(value)
        if fmt == "date-time" and isinstance(value, datetime):
            return Ok(value)
        if not isinstance(value, str):
            return invalid_date(fmt, value)

        try:
            if fmt == "date" and _DATE_RE.match(value):
                return Ok(date.fromisoformat(value))
            if fmt == "date-time" and _DATE_TIME_RE.match(value):
                normalized = value.replace("z", "Z").replace("Z", "+00:00")
                return Ok(datetime.fromisoformat(normalized))
        except ValueError:
            pass
        return invalid_date(fmt, value)


@dataclass(frozen=True, slots=True)
class DelimitedToList(CoercionRule):
    """Coerce delimited strings and scalars to arrays, converting each item.

    The collection format decides how a string is split; a single value that
    is not a list becomes a one-element list. Items are converted with their
    item schema (positionally for tuple-style ``items``).
    """
    coercer: SchemaCoercion | None = None

    @property
    def schema_type(self) -> str:
        return "array"

    def coerce(self, schema, options, value):
        collection_format = options.get("collectionFormat")
        if isinstance(value, str):
            if collection_format == "multi":
                value = [value]
            else:
                value = value.split(COLLECTION_SEPARATORS.get(collection_format, ","))

        if not isinstance(value, list):
            value = [value]

        coercer = self.coercer or DEFAULT_COERCER
        items = schema.get("items")
        results = []
        for index, item in enumerate(value):
            item_schema = items[index] if isinstance(items, list) and index < len(items) else items
            if not isinstance(item_schema, Mapping):
                results.append(Ok(item))
                continue
            item_options: dict[str, Any] = {"encoding": options.get("encoding")}
            if item_schema.get("type") == "array":
                item_options["collectionFormat"] = item_schema.get("collectionFormat")
            results.append(coercer.coerce(item_schema, item_options, item))
        return sequence_results(results)


@dataclass(frozen=True, slots=True)
class SchemaCoercion:
    """Coercion system dispatching on the schema ``type``.

    Usage:
        coercer = SchemaCoercion()
        coercer.coerce({"type": "integer"}, {}, "5")           # Ok(5)
        coercer.coerce({"type": "boolean"}, {}, "maybe")       # Err(AppError)
    """
    rules: dict[str, CoercionRule] = field(default_factory=lambda: {
        "boolean": StringToBool(),
        "integer": StringToNumber(target="integer"),
        "number": StringToNumber(target="number"),
        "object": StringToObject(),
        "string": ISO8601ToDate(),
    })

    def add_rule(self, rule: CoercionRule) -> SchemaCoercion:
        """Add or replace a coercion rule, returning new instance."""
        return SchemaCoercion(rules={**self.rules, rule.schema_type: rule})

    def coerce(self, schema: Mapping[str, Any] | None, options: Mapping[str, Any] | None, value: Any) -> Result[Any, AppError]:
        """Convert ``value`` to the type declared by ``schema``."""
        schema = schema if isinstance(schema, Mapping) else {}
        options = options or {}

        schema_type = schema.get("type")
        if schema_type is not None and (not isinstance(schema_type, str) or schema_type not in SCHEMA_TYPES):
            return invalid_schema_type(schema_type)

        # Without a type there is nothing to convert to
        if value is None or schema_type is None:
            return Ok(value)

        if isinstance(value, (bytes, bytearray)):
            encoding = options.get("encoding") or get_settings().DEFAULT_ENCODING
            try:
                value = bytes(value).decode(encoding)
            except UnicodeDecodeError:
                return invalid_type("string", value)

        if schema.get("allowEmptyValue") and value == "":
            return Ok(value)

        if schema_type in ("array", "object") and not isinstance(value, (list, dict)):
            value = _parse_json(value)

        if schema_type == "array":
            return DelimitedToList(coercer=self).coerce(schema, options, value)

        rule = self.rules.get(schema_type)
        if rule is None:
            return Ok(value)
        return rule.coerce(schema, options, value)


# Default coercion instance
DEFAULT_COERCER = SchemaCoercion()


def convert_value(schema: Mapping[str, Any] | None, options: Mapping[str, Any] | None, value: Any) -> Result[Any, AppError]:
    """Convenience function using default coercer."""
    return DEFAULT_COERCER.coerce(schema, options, value)
