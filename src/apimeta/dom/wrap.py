"""Wrapping and coercing loosely typed input."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from ..errors import Errors, InvalidTypeError, RecursionLimitError
from ..meta.schema import (
    ArraySchema,
    Context,
    ObjectSchema,
    Schema,
    SchemaKind,
    SchemaReference,
    existence_of,
)
from ..values import JsonValue
from ..values import wrap as wrap_value
from ..values.serialization import to_records
from ..values.wrap import DEFAULT_MAX_DEPTH, is_missing, is_sequence
from .nodes import (
    ArrayNode,
    BooleanNode,
    DomValue,
    IntegerNode,
    NullNode,
    NumberNode,
    ObjectNode,
    StringNode,
    parse_json,
)

if TYPE_CHECKING:
    from ..meta.definitions import Definitions

logger = logging.getLogger(__name__)

_SCALAR_NODES: dict[SchemaKind, type[DomValue]] = {
    SchemaKind.BOOLEAN: BooleanNode,
    SchemaKind.INTEGER: IntegerNode,
    SchemaKind.NUMBER: NumberNode,
    SchemaKind.STRING: StringNode,
}


def wrap(
    raw: Any,
    schema: Schema | SchemaReference,
    registry: Definitions | None = None,
    context: Context = "request",
    *,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> DomValue:
    """Wraps loosely typed input into a coercion tree.

    Strings are accepted for every kind. Arrays accept a scalar as a
    one-element array, arrays and objects accept JSON encoded strings.

    Raises:
        UnresolvedReferenceError: If a reference can't be resolved.
        InvalidTypeError: If a schema kind can't be wrapped.
        RecursionLimitError: If the input is nested too deeply.
    """
    return _wrap(raw, schema, registry, context, max_depth, 0)


def coerce(
    raw: Any,
    schema: Schema | SchemaReference,
    registry: Definitions | None = None,
    errors: Errors | None = None,
    context: Context = "request",
    *,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> JsonValue:
    """Converts loosely typed input and wraps the result into a value tree.

    Input that can't be converted is reported as ``invalid_cast`` error to
    ``errors`` and is wrapped unchanged.
    """
    if errors is None:
        errors = Errors()
    node = wrap(raw, schema, registry, context, max_depth=max_depth)
    value = node.coerce(errors)
    return wrap_value(value, schema, registry, context, max_depth=max_depth)


def _wrap(
    raw: Any,
    schema: Schema | SchemaReference,
    registry: Definitions | None,
    context: Context,
    max_depth: int,
    depth: int,
) -> DomValue:
    if depth > max_depth:
        raise RecursionLimitError(f"input exceeds the maximum depth of {max_depth}")

    existence = existence_of(schema, registry)
    schema = schema.resolve(registry)
    if is_missing(raw):
        return NullNode(schema, existence)

    kind = schema.kind
    if kind in _SCALAR_NODES:
        return _SCALAR_NODES[kind](raw, schema, existence)

    if isinstance(schema, ArraySchema):
        raw = to_records(raw)
        if isinstance(raw, str):
            if not raw:
                return ArrayNode(raw, schema, [], existence)
            parsed = parse_json(raw) if raw.startswith("[") else None
            raw = parsed if isinstance(parsed, list) else [raw]
        elif not is_sequence(raw):
            raw = [raw]
        if schema.items is None:
            raise InvalidTypeError("array schema has no items")
        items = [_wrap(item, schema.items, registry, context, max_depth, depth + 1) for item in raw]
        return ArrayNode(raw, schema, items, existence)

    if isinstance(schema, ObjectSchema):
        value = parse_json(raw) if isinstance(raw, str) and raw else raw
        if not isinstance(value, Mapping):
            logger.debug(f"Can't read object from {raw!r}")
            return ObjectNode(raw, schema, None, existence)
        schema = schema.resolve_variant(value, registry, context)
        attributes: dict[str, DomValue] = {}
        for name, prop in schema.resolve_properties(registry, context).items():
            key = prop.source if isinstance(prop.source, str) else name
            attributes[key] = _wrap(
                prop.read(value), prop.schema, registry, context, max_depth, depth + 1
            )
        if schema.additional_properties is not None:
            for key, item in value.items():
                if str(key) not in attributes:
                    attributes[str(key)] = _wrap(
                        item, schema.additional_properties, registry, context, max_depth, depth + 1
                    )
        return ObjectNode(value, schema, attributes, existence)

    raise InvalidTypeError(f"can't wrap values of {kind!r} schemas")
