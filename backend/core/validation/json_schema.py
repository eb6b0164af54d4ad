"""JSON Schema Validation Against API Documents

Validates values against a schema located by JSON pointer inside a Swagger
2.0 document. The whole document is registered with ``referencing`` so
internal ``$ref``s (``#/definitions/...``) resolve from any sub-schema.

Also hosts the small helpers parameter processing relies on:
- ``is_file``: file parameter detection (including aliased schemas)
- ``escape_single_quotes`` / ``escape_paths``: path key sanitizing
- ``construct_schema_path_from_ptr``: schema pointer for a parameter
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from functools import lru_cache
from typing import Any, Mapping
from urllib.parse import quote
import base64
import binascii
import re

import jsonschema
from jsonschema import Draft4Validator, FormatChecker
from referencing import Registry, Resource
from referencing.jsonschema import DRAFT4

from core.logging import schema_logger

from .errors import ValidationErrorDetail, create_accumulator
from .schema import ValidateOptions, ValidationMode

log = schema_logger()

ROOT_URI = "urn:api-definition"

_UNESCAPED_QUOTE = re.compile(r"(?<!\\)'")

INT32_RANGE = (-(2**31), 2**31 - 1)
INT64_RANGE = (-(2**63), 2**63 - 1)


@dataclass(frozen=True, slots=True)
class SchemaValidationResult:
    """Outcome of validating one value."""
    errors: list[ValidationErrorDetail] = field(default_factory=list)
    warnings: list[ValidationErrorDetail] = field(default_factory=list)

    @property
    def is_valid(self) -> bool: return not self.errors


def is_file(schema: Any) -> bool:
    """Whether a schema (or the schema it wraps) describes a file."""
    if not isinstance(schema, Mapping):
        return False
    if schema.get("type") == "file":
        return True
    if schema.get("type") == "string" and schema.get("format") == "binary":
        return True
    return is_file(schema.get("schema"))


def escape_single_quotes(key: str) -> str:
    """Backslash-escape single quotes; already escaped quotes are left alone."""
    return _UNESCAPED_QUOTE.sub(r"\\'", key)


def escape_paths(document: Mapping[str, Any]) -> Mapping[str, Any]:
    """Copy of ``document`` whose ``paths`` also hold the escaped form of every key.

    The document passed in is never modified; path items are shared, not
    copied. Escaping an already escaped document adds nothing.
    """
    paths = document.get("paths")
    if not isinstance(paths, Mapping):
        return document
    escaped_paths = dict(paths)
    for key, item in paths.items():
        escaped_paths.setdefault(escape_single_quotes(key), item)
    return {**document, "paths": escaped_paths}


def _encode_segment(segment: str) -> str:
    return segment.replace("~", "~0").replace("/", "~1")


def _decode_segment(segment: str) -> str:
    return segment.replace("~1", "/").replace("~0", "~")


def construct_schema_path_from_ptr(ptr: str, schema_location: Any = None) -> str:
    """JSON pointer of the schema a parameter value is validated against.

    Body parameters carry their schema under ``schema``; every other
    parameter object is its own schema.
    """
    segments = ptr.lstrip("#").split("/")
    if len(segments) > 2 and segments[1] == "paths":
        segments[2] = _encode_segment(escape_single_quotes(_decode_segment(segments[2])))
    path = "#" + "/".join(segments)
    if schema_location is not None:
        path += "/schema"
    return path


def _resolve_pointer(document: Any, pointer: str) -> Any:
    node = document
    for segment in pointer.lstrip("#").split("/")[1:]:
        segment = _decode_segment(segment)
        node = node[int(segment)] if isinstance(node, list) else node[segment]
    return node


def _as_json_instance(value: Any) -> Any:
    """Render native dates, which coercion produces for date formats, as ISO strings."""
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, list):
        return [_as_json_instance(item) for item in value]
    if isinstance(value, dict):
        return {key: _as_json_instance(item) for key, item in value.items()}
    return value


def _is_int32(instance: Any) -> bool:
    if not isinstance(instance, int) or isinstance(instance, bool):
        return True
    return INT32_RANGE[0] <= instance <= INT32_RANGE[1]


def _is_int64(instance: Any) -> bool:
    if not isinstance(instance, int) or isinstance(instance, bool):
        return True
    return INT64_RANGE[0] <= instance <= INT64_RANGE[1]


def _is_byte(instance: Any) -> bool:
    if not isinstance(instance, str):
        return True
    try:
        base64.b64decode(instance, validate=True)
    except (binascii.Error, ValueError):
        return False
    return True


@lru_cache(maxsize=1)
def get_format_checker() -> FormatChecker:
    """Format checker with the Swagger 2.0 data type formats registered."""
    checker = FormatChecker()
    checker.checks("int32")(_is_int32)
    checker.checks("int64")(_is_int64)
    checker.checks("byte")(_is_byte)
    for passthrough in ("float", "double", "password", "binary"):
        checker.checks(passthrough)(lambda instance: True)
    return checker


def _parameter_required(validator, required, instance, schema):
    # Swagger parameter objects use a boolean ``required`` for presence
    if isinstance(required, bool):
        return
    yield from Draft4Validator.VALIDATORS["required"](validator, required, instance, schema)


@lru_cache(maxsize=1)
def get_json_schema_validator() -> type[jsonschema.protocols.Validator]:
    """Draft 4 validator class extended for Swagger 2.0 parameter objects."""
    type_checker = Draft4Validator.TYPE_CHECKER.redefine("file", lambda checker, instance: True)
    return jsonschema.validators.extend(
        Draft4Validator,
        validators={"required": _parameter_required},
        type_checker=type_checker,
    )


def validate_against_schema(
    validator_cls: type[jsonschema.protocols.Validator],
    document: Mapping[str, Any],
    value: Any,
    schema_path: str,
    root_ptr: str | None = None,
    options: ValidateOptions | Mapping[str, Any] | None = None,
) -> SchemaValidationResult:
    """Validate ``value`` against the schema at ``schema_path`` in ``document``.

    ``root_ptr`` selects a sub-document to treat as the root; ``schema_path``
    is then resolved inside it. Unresolvable pointers raise
    ``referencing.exceptions.Unresolvable``.
    """
    opts = ValidateOptions.coerce(options)
    root = _resolve_pointer(document, root_ptr) if root_ptr else document

    registry = Registry().with_resource(
        uri=ROOT_URI,
        resource=Resource.from_contents(root, default_specification=DRAFT4),
    )
    fragment = quote(schema_path.lstrip("#"), safe="/~")
    validator = validator_cls(
        {"$ref": f"{ROOT_URI}#{fragment}"},
        registry=registry,
        format_checker=get_format_checker() if opts.check_formats else None,
    )

    accumulator = create_accumulator(opts.mode, opts.max_errors)
    keep_going = True
    for error in validator.iter_errors(_as_json_instance(value)):
        keep_going = accumulator.add_error(ValidationErrorDetail.from_jsonschema_error(error))
        if not keep_going:
            if opts.mode == ValidationMode.COLLECT_ALL:
                log.info("schema_errors_truncated", schema_path=schema_path, max_errors=opts.max_errors)
            break

    if keep_going and opts.custom_validators:
        schema = _resolve_pointer(root, schema_path)
        for custom in opts.custom_validators:
            for detail in custom(value, schema) or ():
                keep_going = accumulator.add_error(detail)
                if not keep_going:
                    break
            if not keep_going:
                break

    return SchemaValidationResult(errors=accumulator.get_errors())
