"""Request Parameter Value Processing

Coerces raw request values to the types declared by a Swagger 2.0 document,
applies schema defaults, and validates the result against the parameter's
JSON Schema, lazily and at most once per value.

Usage:
    from parameters import ApiDefinition

    api = ApiDefinition(document)
    limit = api.get_parameter("/pets", "get", "limit")
    pv = limit.get_value("25")
    if not pv.valid:
        return pv.error.to_dict()
    use(pv.value)  # 25
"""
from .descriptor import ApiDefinition, HTTP_METHODS, Parameter, PathObject
from .errors import ParameterError, ParameterErrorCode
from .value import ParameterValue

__all__ = [
    "ApiDefinition",
    "HTTP_METHODS",
    "Parameter",
    "PathObject",
    "ParameterError",
    "ParameterErrorCode",
    "ParameterValue",
]
