"""Tests for schema-driven coercion."""

from datetime import date, datetime, timezone

import pytest

from core.errors import Err, ErrorCode, Ok
from core.validation.coercion import SchemaCoercion, StringToBool, convert_value


def _ok(result):
    assert isinstance(result, Ok), result
    return result.value


def _err(result):
    assert isinstance(result, Err), result
    return result.error


class TestArrays:
    """Array coercion and collection formats."""

    @pytest.mark.parametrize("collection_format, raw", [
        (None, "1,2,3"),
        ("csv", "1,2,3"),
        ("ssv", "1 2 3"),
        ("tsv", "1\t2\t3"),
        ("pipes", "1|2|3"),
    ])
    def test_collection_formats(self, collection_format, raw):
        schema = {"type": "array", "items": {"type": "integer"}}
        assert _ok(convert_value(schema, {"collectionFormat": collection_format}, raw)) == [1, 2, 3]

    def test_multi_keeps_string_whole(self):
        schema = {"type": "array", "items": {"type": "string"}}
        assert _ok(convert_value(schema, {"collectionFormat": "multi"}, "a,b")) == ["a,b"]

    def test_json_text(self):
        schema = {"type": "array", "items": {"type": "integer"}}
        assert _ok(convert_value(schema, {}, "[4, 5]")) == [4, 5]

    def test_scalar_becomes_list(self):
        schema = {"type": "array", "items": {"type": "integer"}}
        assert _ok(convert_value(schema, {}, 7)) == [7]

    def test_tuple_items_are_positional(self):
        schema = {"type": "array", "items": [{"type": "integer"}, {"type": "boolean"}]}
        assert _ok(convert_value(schema, {}, "1,true")) == [1, True]

    def test_nested_collection_format(self):
        schema = {
            "type": "array",
            "items": {"type": "array", "items": {"type": "integer"}, "collectionFormat": "pipes"},
        }
        assert _ok(convert_value(schema, {}, "1|2,3|4")) == [[1, 2], [3, 4]]

    def test_item_error_propagates(self):
        schema = {"type": "array", "items": {"type": "integer"}}
        assert _err(convert_value(schema, {}, "1,x")).code == ErrorCode.E2004_INVALID_TYPE

    def test_items_without_schema_pass_through(self):
        assert _ok(convert_value({"type": "array"}, {}, "a,b")) == ["a", "b"]


class TestScalars:
    """Boolean, integer, number and object coercion."""

    @pytest.mark.parametrize("raw, expected", [("true", True), ("false", False), (True, True)])
    def test_boolean(self, raw, expected):
        assert _ok(convert_value({"type": "boolean"}, {}, raw)) is expected

    def test_invalid_boolean(self):
        error = _err(convert_value({"type": "boolean"}, {}, "yes"))
        assert error.code == ErrorCode.E2004_INVALID_TYPE
        assert error.message == "Not a valid boolean: yes"

    @pytest.mark.parametrize("raw, expected", [(" 42 ", 42), ("-3", -3), (8, 8), ("4.5", 4.5)])
    def test_integer(self, raw, expected):
        assert _ok(convert_value({"type": "integer"}, {}, raw)) == expected

    @pytest.mark.parametrize("raw", ["", "   ", "abc", "nan", True, [1]])
    def test_invalid_integer(self, raw):
        assert _err(convert_value({"type": "integer"}, {}, raw)).code == ErrorCode.E2004_INVALID_TYPE

    def test_number(self):
        assert _ok(convert_value({"type": "number"}, {}, "3.25")) == 3.25
        assert _ok(convert_value({"type": "number"}, {}, "3")) == 3

    def test_object(self):
        assert _ok(convert_value({"type": "object"}, {}, '{"a": 1}')) == {"a": 1}
        assert _ok(convert_value({"type": "object"}, {}, {"b": 2})) == {"b": 2}

    def test_invalid_object(self):
        error = _err(convert_value({"type": "object"}, {}, "nope"))
        assert error.message == 'Not a valid object: "nope"'

    @pytest.mark.parametrize("raw", ["hello", '{"a": 1}', b"\xff", 7])
    def test_untyped_schema_returns_raw(self, raw):
        assert _ok(convert_value({"description": "anything"}, {}, raw)) is raw

    def test_string_passes_through(self):
        raw = "hello"
        assert _ok(convert_value({"type": "string"}, {}, raw)) is raw


class TestDates:
    """ISO8601 date and date-time strings."""

    def test_date(self):
        assert _ok(convert_value({"type": "string", "format": "date"}, {}, "2024-01-15")) == date(2024, 1, 15)

    def test_date_time(self):
        value = _ok(convert_value({"type": "string", "format": "date-time"}, {}, "2024-01-15T10:30:00Z"))
        assert value == datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc)

    def test_native_date_passes(self):
        today = date(2024, 1, 15)
        assert _ok(convert_value({"type": "string", "format": "date"}, {}, today)) is today

    @pytest.mark.parametrize("fmt, raw", [
        ("date", "15/01/2024"),
        ("date", "2024-02-30"),
        ("date-time", "2024-01-15"),
        ("date-time", 12),
    ])
    def test_invalid_dates(self, fmt, raw):
        error = _err(convert_value({"type": "string", "format": fmt}, {}, raw))
        assert error.code == ErrorCode.E2012_INVALID_DATE


class TestRawInputs:
    """Absent, empty and binary raw values."""

    def test_none_is_not_converted(self):
        assert _ok(convert_value({"type": "integer"}, {}, None)) is None

    def test_allow_empty_value(self):
        assert _ok(convert_value({"type": "integer", "allowEmptyValue": True}, {}, "")) == ""

    def test_bytes_are_decoded(self):
        assert _ok(convert_value({"type": "integer"}, {}, b"42")) == 42
        assert _ok(convert_value({"type": "string"}, {"encoding": "latin-1"}, b"caf\xe9")) == "café"

    def test_undecodable_bytes(self):
        assert _err(convert_value({"type": "string"}, {}, b"\xff\xfe")).code == ErrorCode.E2004_INVALID_TYPE

    def test_list_schema_type(self):
        assert _err(convert_value({"type": ["string", "null"]}, {}, "1")).code == ErrorCode.E2032_INVALID_SCHEMA_TYPE

    def test_unknown_schema_type(self):
        error = _err(convert_value({"type": "decimal"}, {}, "1"))
        assert error.code == ErrorCode.E2032_INVALID_SCHEMA_TYPE
        assert error.message == "Invalid 'type' value: decimal"


class TestSchemaCoercion:
    """Rule registry."""

    def test_add_rule_replaces_by_type(self):
        class YesNo(StringToBool):
            def coerce(self, schema, options, value):
                return Ok(value == "yes")

        coercer = SchemaCoercion().add_rule(YesNo())
        assert _ok(coercer.coerce({"type": "boolean"}, {}, "yes")) is True
        assert _err(SchemaCoercion().coerce({"type": "boolean"}, {}, "yes"))
