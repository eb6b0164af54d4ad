"""Pytest configuration and fixtures for parameter value tests."""

import copy

import pytest

from parameters import ApiDefinition


PETSTORE = {
    "swagger": "2.0",
    "info": {"title": "Petstore", "version": "1.0.0"},
    "paths": {
        "/pets": {
            "get": {
                "parameters": [
                    {
                        "name": "limit",
                        "in": "query",
                        "type": "integer",
                        "format": "int32",
                        "maximum": 100,
                    },
                    {
                        "name": "tags",
                        "in": "query",
                        "type": "array",
                        "items": {"type": "string"},
                        "collectionFormat": "pipes",
                    },
                    {"$ref": "#/parameters/trace"},
                ],
            },
            "post": {
                "parameters": [
                    {
                        "name": "pet",
                        "in": "body",
                        "required": True,
                        "schema": {"$ref": "#/definitions/Pet"},
                    },
                ],
            },
        },
        "/pets/{petId}": {
            "parameters": [
                {"name": "petId", "in": "path", "required": True, "type": "integer"},
                {"name": "verbose", "in": "query", "type": "boolean"},
            ],
            "get": {
                "parameters": [
                    {"name": "verbose", "in": "query", "type": "boolean", "default": False},
                ],
            },
        },
        "/owner's/{id}": {
            "get": {
                "parameters": [
                    {"name": "id", "in": "path", "required": True, "type": "integer", "maximum": 10},
                ],
            },
        },
    },
    "parameters": {
        "trace": {"name": "trace", "in": "header", "type": "string", "maxLength": 8},
    },
    "definitions": {
        "Pet": {
            "type": "object",
            "required": ["name"],
            "properties": {
                "name": {"type": "string"},
                "age": {"type": "integer", "minimum": 0},
            },
        },
    },
}


@pytest.fixture
def petstore():
    """A fresh copy of the Petstore document."""
    return copy.deepcopy(PETSTORE)


@pytest.fixture
def api(petstore):
    """ApiDefinition over the Petstore document."""
    return ApiDefinition(petstore)


@pytest.fixture
def make_parameter():
    """Build a one-parameter document and return its Parameter.

    Usage:
        param = make_parameter({"name": "q", "in": "query", "type": "integer"})
    """
    def _make(definition, path="/things", method="get", definitions=None):
        document = {
            "swagger": "2.0",
            "info": {"title": "Things", "version": "1.0.0"},
            "paths": {path: {method: {"parameters": [copy.deepcopy(definition)]}}},
            "definitions": copy.deepcopy(definitions or {}),
        }
        return ApiDefinition(document).get_path(path).get_parameters(method)[0]

    return _make
