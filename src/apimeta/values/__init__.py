"""Value trees wrapping JSON-like raw values.

Example:
    >>> node = wrap({"name": "Rex"}, pet_schema, definitions, "response")
    >>> errors = Errors()
    >>> node.validate(errors)
    True
    >>> node.serializable_value(jsonify_values=True)
    {'name': 'Rex'}
"""

from .nodes import (
    ArrayValue,
    BooleanValue,
    IntegerValue,
    JsonValue,
    NullValue,
    NumberValue,
    ObjectValue,
    StringValue,
)
from .serialization import jsonify, to_records
from .wrap import DEFAULT_MAX_DEPTH, wrap

__all__ = [
    "DEFAULT_MAX_DEPTH",
    "ArrayValue",
    "BooleanValue",
    "IntegerValue",
    "JsonValue",
    "NullValue",
    "NumberValue",
    "ObjectValue",
    "StringValue",
    "jsonify",
    "to_records",
    "wrap",
]
