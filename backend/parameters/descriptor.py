"""Parameter Descriptors

Read-only views over the parameters declared in a Swagger 2.0 document.
A ``Parameter`` knows its schema, requiredness, collection format and the
JSON pointer locating it, which is everything value processing needs.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Mapping

from core.validation.schema import ValidateOptions

if TYPE_CHECKING:
    from .value import ParameterValue

HTTP_METHODS = ("get", "put", "post", "delete", "options", "head", "patch")


def _encode_segment(segment: str) -> str:
    return segment.replace("~", "~0").replace("/", "~1")


@dataclass(frozen=True, slots=True, eq=False)
class ApiDefinition:
    """Root API document."""
    definition: dict

    def get_path(self, path: str) -> PathObject | None:
        if path not in self.definition.get("paths", {}):
            return None
        return PathObject(api=self, path=path)

    def get_parameter(
        self, path: str, method: str, name: str, location: str | None = None
    ) -> Parameter | None:
        """Find a parameter by operation and name (and ``in``, when ambiguous)."""
        path_object = self.get_path(path)
        if path_object is None:
            return None
        for parameter in path_object.get_parameters(method):
            if parameter.name == name and (location is None or parameter.location == location):
                return parameter
        return None

    def get_parameters(self) -> list[Parameter]:
        """All parameters of every operation, in document order."""
        parameters: list[Parameter] = []
        for path in self.definition.get("paths", {}):
            path_object = PathObject(api=self, path=path)
            for method in path_object.methods:
                parameters.extend(path_object.get_parameters(method))
        return parameters

    def resolve(self, ref: str) -> tuple[Any, str]:
        """Resolve a local ``$ref``, returning the target and its pointer."""
        if not ref.startswith("#/"):
            raise ValueError(f"Only local references are supported: {ref}")
        node: Any = self.definition
        for segment in ref[2:].split("/"):
            segment = segment.replace("~1", "/").replace("~0", "~")
            node = node[int(segment)] if isinstance(node, list) else node[segment]
        return node, ref

    def resolve_schema(self, schema: Any) -> Any:
        """Follow local ``$ref``s until reaching a schema that declares itself."""
        seen: set[str] = set()
        while isinstance(schema, Mapping) and isinstance(schema.get("$ref"), str):
            ref = schema["$ref"]
            if not ref.startswith("#/") or ref in seen:
                break
            seen.add(ref)
            try:
                schema, _ = self.resolve(ref)
            except (KeyError, IndexError, ValueError, TypeError):
                # Dangling references are reported by schema validation
                break
        return schema


@dataclass(frozen=True, slots=True, eq=False)
class PathObject:
    """One entry of the document's ``paths``."""
    api: ApiDefinition
    path: str

    @property
    def definition(self) -> dict:
        return self.api.definition["paths"][self.path]

    @property
    def ptr(self) -> str:
        return f"#/paths/{_encode_segment(self.path)}"

    @property
    def methods(self) -> list[str]:
        return [m for m in HTTP_METHODS if m in self.definition]

    def _build(self, raw: Mapping[str, Any], ptr: str, method: str | None) -> Parameter:
        if "$ref" in raw:
            raw, ptr = self.api.resolve(raw["$ref"])
        return Parameter(path_object=self, definition=raw, ptr=ptr, method=method)

    def get_parameters(self, method: str) -> list[Parameter]:
        """Operation parameters merged over path-level ones.

        Operation parameters override path parameters sharing ``name`` and ``in``.
        """
        method = method.lower()
        operation = self.definition.get(method)
        if operation is None:
            return []

        merged: dict[tuple[str | None, str | None], Parameter] = {}
        for index, raw in enumerate(self.definition.get("parameters", [])):
            parameter = self._build(raw, f"{self.ptr}/parameters/{index}", None)
            merged[(parameter.name, parameter.location)] = parameter
        for index, raw in enumerate(operation.get("parameters", [])):
            parameter = self._build(raw, f"{self.ptr}/{method}/parameters/{index}", method)
            merged[(parameter.name, parameter.location)] = parameter
        return list(merged.values())


@dataclass(frozen=True, slots=True, eq=False)
class Parameter:
    """A parameter declared in the document.

    ``definition`` is the raw parameter object. Body parameters keep their
    schema under ``schema``; every other parameter object is its own schema.
    """
    path_object: PathObject
    definition: Mapping[str, Any]
    ptr: str
    method: str | None = None

    @property
    def name(self) -> str | None:
        return self.definition.get("name")

    @property
    def location(self) -> str | None:
        return self.definition.get("in")

    @property
    def type(self) -> str | None:
        return self.definition.get("type")

    @property
    def required(self) -> bool | None:
        return self.definition.get("required")

    @property
    def collection_format(self) -> str | None:
        return self.definition.get("collectionFormat")

    @property
    def schema(self) -> Mapping[str, Any]:
        """Body parameters' ``schema`` with local references resolved, else the definition."""
        if "schema" in self.definition:
            return self.path_object.api.resolve_schema(self.definition["schema"])
        return self.definition

    def get_value(
        self, raw: Any, validate_options: ValidateOptions | dict | None = None
    ) -> ParameterValue:
        """Wrap a raw value for lazy coercion and validation."""
        from .value import ParameterValue

        return ParameterValue(self, raw, validate_options)

    def __repr__(self) -> str:
        return f"Parameter(name={self.name!r}, in={self.location!r}, ptr={self.ptr!r})"
