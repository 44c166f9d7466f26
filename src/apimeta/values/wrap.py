"""Wrapping raw values into value trees."""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any

import numpy as np
import pandas as pd

from ..errors import InvalidTypeError, RecursionLimitError
from ..meta.existence import Existence
from ..meta.schema import (
    ArraySchema,
    Context,
    ObjectSchema,
    Schema,
    SchemaKind,
    SchemaReference,
    existence_of,
)
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
from .serialization import to_records

if TYPE_CHECKING:
    from ..meta.definitions import Definitions

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 64

_SCALAR_NODES: dict[SchemaKind, type[JsonValue]] = {
    SchemaKind.BOOLEAN: BooleanValue,
    SchemaKind.INTEGER: IntegerValue,
    SchemaKind.NUMBER: NumberValue,
    SchemaKind.STRING: StringValue,
}

_Visited = frozenset[tuple[str, int]]


def is_missing(raw: Any) -> bool:
    """Returns True if ``raw`` is None or a pandas/numpy missing marker."""
    if raw is None or raw is pd.NaT:
        return True
    return isinstance(raw, (float, np.floating)) and math.isnan(raw)


def is_sequence(raw: Any) -> bool:
    return isinstance(raw, Sequence) and not isinstance(raw, (str, bytes, bytearray))


def is_object_like(raw: Any) -> bool:
    """Returns True if attributes can be read from ``raw``."""
    if isinstance(raw, Mapping):
        return True
    return not isinstance(
        raw, (str, bytes, bytearray, bool, int, float, np.generic, Sequence, set, frozenset)
    )


def wrap(
    raw: Any,
    schema: Schema | SchemaReference,
    registry: Definitions | None = None,
    context: Context = None,
    *,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> JsonValue:
    """Wraps ``raw`` into a value tree described by ``schema``.

    Args:
        raw: The raw value, e.g. parsed JSON, a domain object, a pandas
            ``DataFrame`` or a numpy array.
        schema: The schema describing the value.
        registry: The definitions used to resolve references.
        context: ``"request"`` or ``"response"``. Selects the registered
            defaults and drops read-only or write-only properties.
        max_depth: The maximum nesting depth of the value tree.

    Returns:
        The root node of the value tree.

    Raises:
        UnresolvedReferenceError: If a reference can't be resolved or a
            polymorphic object has no matching variant.
        InvalidTypeError: If a schema kind can't be wrapped.
        RecursionLimitError: If the value tree gets too deep or a
            reference is entered twice for the same raw value.
    """
    return _Wrapper(registry, context, max_depth).wrap(raw, schema, 0, frozenset())


class _Wrapper:
    def __init__(self, registry: Definitions | None, context: Context, max_depth: int):
        self.registry = registry
        self.context = context
        self.max_depth = max_depth

    def wrap(
        self,
        raw: Any,
        schema: Schema | SchemaReference,
        depth: int,
        visited: _Visited,
    ) -> JsonValue:
        if depth > self.max_depth:
            raise RecursionLimitError(f"value exceeds the maximum depth of {self.max_depth}")

        existence = existence_of(schema, self.registry)
        if isinstance(schema, SchemaReference):
            key = (schema.ref, id(raw))
            if key in visited:
                raise RecursionLimitError(f"circular value of schema {schema.ref!r}")
            visited = visited | {key}
            schema = schema.resolve(self.registry)

        if is_missing(raw):
            raw = schema.default_value(self.registry, self.context)
            if raw is not None:
                logger.debug(f"Substituted default for absent {schema.kind.value} value")
        raw = to_records(raw)
        if is_missing(raw):
            return NullValue(schema, existence)

        kind = schema.kind
        if kind in _SCALAR_NODES:
            return _SCALAR_NODES[kind](raw, schema, existence)
        if isinstance(schema, ArraySchema):
            return self._wrap_array(raw, schema, depth, visited, existence)
        if isinstance(schema, ObjectSchema):
            return self._wrap_object(raw, schema, depth, visited, existence)
        raise InvalidTypeError(f"can't wrap values of {kind!r} schemas")

    def _wrap_array(
        self,
        raw: Any,
        schema: ArraySchema,
        depth: int,
        visited: _Visited,
        existence: Existence,
    ) -> ArrayValue:
        if not is_sequence(raw):
            return ArrayValue(raw, schema, None, existence)
        if schema.items is None:
            raise InvalidTypeError("array schema has no items")
        items = [self.wrap(item, schema.items, depth + 1, visited) for item in raw]
        return ArrayValue(raw, schema, items, existence)

    def _wrap_object(
        self,
        raw: Any,
        schema: ObjectSchema,
        depth: int,
        visited: _Visited,
        existence: Existence,
    ) -> ObjectValue:
        if not is_object_like(raw):
            return ObjectValue(raw, schema, None, existence=existence)

        schema = schema.resolve_variant(raw, self.registry, self.context)
        properties = schema.resolve_properties(self.registry, self.context)
        attributes = {
            name: self.wrap(prop.read(raw), prop.schema, depth + 1, visited)
            for name, prop in properties.items()
        }

        additional_attributes: dict[str, JsonValue] = {}
        if schema.additional_properties is not None and isinstance(raw, Mapping):
            declared = set()
            for name, prop in schema.resolve_properties(self.registry).items():
                declared.add(name)
                if isinstance(prop.source, str):
                    declared.add(prop.source)
            for key, value in raw.items():
                if str(key) not in declared:
                    additional_attributes[str(key)] = self.wrap(
                        value, schema.additional_properties, depth + 1, visited
                    )
        return ObjectValue(raw, schema, attributes, additional_attributes, existence)
