"""Tests for JSON Schema helpers and validation against API documents."""

from datetime import date

import pytest

from core.validation.errors import ValidationErrorDetail
from core.validation.json_schema import (
    construct_schema_path_from_ptr,
    escape_paths,
    escape_single_quotes,
    get_json_schema_validator,
    is_file,
    validate_against_schema,
)
from core.validation.schema import ValidateOptions, ValidationMode


DOCUMENT = {
    "swagger": "2.0",
    "paths": {},
    "definitions": {
        "Code": {"type": "string", "maxLength": 3, "pattern": "^[0-9]+$"},
        "Wrapper": {"type": "object", "properties": {"code": {"$ref": "#/definitions/Code"}}},
        "Small": {"type": "integer", "format": "int32"},
        "Blob": {"type": "string", "format": "byte"},
        "Codes": {"type": "array", "items": {"$ref": "#/definitions/Code"}},
        "Dates": {"type": "array", "items": {"type": "string", "format": "date"}},
        "ShortDates": {"type": "array", "items": {"type": "string", "format": "date", "maxLength": 4}},
    },
}


class TestIsFile:
    """File schema detection."""

    @pytest.mark.parametrize("schema, expected", [
        ({"type": "file"}, True),
        ({"type": "string", "format": "binary"}, True),
        ({"name": "upload", "in": "body", "schema": {"type": "file"}}, True),
        ({"type": "string"}, False),
        ({"type": "integer", "format": "binary"}, False),
        (None, False),
    ])
    def test_detection(self, schema, expected):
        assert is_file(schema) is expected


class TestEscaping:
    """Single quote escaping of path keys."""

    def test_escape(self):
        assert escape_single_quotes("/owner's") == "/owner\\'s"

    def test_escape_is_idempotent(self):
        once = escape_single_quotes("/it's/o'clock")
        assert escape_single_quotes(once) == once

    def test_no_quotes(self):
        assert escape_single_quotes("/pets/{id}") == "/pets/{id}"

    def test_escape_paths_keeps_originals(self):
        shared = {"get": {}}
        document = {"swagger": "2.0", "paths": {"/owner's": shared, "/pets": {}}}

        escaped = escape_paths(document)

        assert set(escaped["paths"]) == {"/owner's", "/owner\\'s", "/pets"}
        assert escaped["paths"]["/owner\\'s"] is shared
        assert escaped["swagger"] == "2.0"

    def test_escape_paths_leaves_document_alone(self):
        document = {"paths": {"/owner's": {}}}
        escape_paths(document)
        assert list(document["paths"]) == ["/owner's"]

    def test_escape_paths_twice(self):
        once = escape_paths({"paths": {"/owner's": {}}})
        assert escape_paths(once)["paths"] == once["paths"]

    def test_escape_paths_without_paths(self):
        assert escape_paths({"swagger": "2.0"}) == {"swagger": "2.0"}


class TestSchemaPath:
    """Schema pointers for parameters."""

    def test_non_body_parameter(self):
        ptr = "#/paths/~1pets/get/parameters/0"
        assert construct_schema_path_from_ptr(ptr) == ptr

    def test_body_parameter(self):
        ptr = "#/paths/~1pets/post/parameters/0"
        assert construct_schema_path_from_ptr(ptr, {"$ref": "#/definitions/Pet"}) == ptr + "/schema"

    def test_path_key_is_escaped(self):
        ptr = "#/paths/~1owner's~1{id}/get/parameters/0"
        assert construct_schema_path_from_ptr(ptr) == "#/paths/~1owner\\'s~1{id}/get/parameters/0"

    def test_pointer_outside_paths(self):
        assert construct_schema_path_from_ptr("#/parameters/trace") == "#/parameters/trace"


class TestValidateAgainstSchema:
    """Validation of values against schemas inside a document."""

    def _validate(self, value, path, options=None):
        return validate_against_schema(get_json_schema_validator(), DOCUMENT, value, path, None, options)

    def test_valid_value(self):
        result = self._validate("123", "#/definitions/Code")
        assert result.is_valid
        assert result.errors == []
        assert result.warnings == []

    def test_collect_all(self):
        result = self._validate("abcd", "#/definitions/Code", {"mode": "collect_all"})
        assert sorted(e.constraint for e in result.errors) == ["maxLength", "pattern"]
        assert all(isinstance(e, ValidationErrorDetail) for e in result.errors)

    def test_fail_fast(self):
        result = self._validate("abcd", "#/definitions/Code", ValidateOptions(mode=ValidationMode.FAIL_FAST))
        assert len(result.errors) == 1

    def test_max_errors(self):
        result = self._validate("abcd", "#/definitions/Code", {"max_errors": 1})
        assert len(result.errors) == 1

    def test_collect_all_keeps_every_error_by_default(self):
        values = ["abcd"] * 60
        result = self._validate(values, "#/definitions/Codes")
        assert ValidateOptions().max_errors is None
        assert len(result.errors) == 120

    def test_native_dates_validate_as_strings(self):
        result = self._validate([date(2024, 1, 1), date(2024, 2, 2)], "#/definitions/Dates")
        assert result.is_valid

    def test_native_dates_still_checked(self):
        result = self._validate([date(2024, 1, 1)], "#/definitions/ShortDates")
        assert [e.constraint for e in result.errors] == ["maxLength"]
        assert result.errors[0].actual_value == "2024-01-01"

    def test_internal_refs_resolve(self):
        result = self._validate({"code": "12345"}, "#/definitions/Wrapper")
        assert [e.constraint for e in result.errors] == ["maxLength"]
        assert result.errors[0].field_path == "$.code"
        assert result.errors[0].actual_value == "12345"
        assert result.errors[0].suggested_fix == "Truncate to 3 characters or less"

    def test_swagger_formats(self):
        assert [e.constraint for e in self._validate(2**40, "#/definitions/Small").errors] == ["format"]
        assert self._validate("aGVsbG8=", "#/definitions/Blob").is_valid
        assert not self._validate("not base64!", "#/definitions/Blob").is_valid

    def test_format_checks_can_be_disabled(self):
        assert self._validate(2**40, "#/definitions/Small", {"check_formats": False}).is_valid

    def test_root_pointer(self):
        result = validate_against_schema(
            get_json_schema_validator(), DOCUMENT, "abcd", "#/Code", "#/definitions", None
        )
        assert not result.is_valid


class TestValidatorClass:
    """Swagger 2.0 extensions of the Draft 4 validator."""

    def test_file_type_accepts_anything(self):
        validator = get_json_schema_validator()({"type": "file"})
        assert validator.is_valid(object())

    def test_boolean_required_is_ignored(self):
        validator = get_json_schema_validator()({"type": "object", "required": True})
        assert validator.is_valid({})

    def test_required_list_still_applies(self):
        validator = get_json_schema_validator()({"type": "object", "required": ["a"]})
        assert not validator.is_valid({})

    def test_validator_class_is_cached(self):
        assert get_json_schema_validator() is get_json_schema_validator()
