"""Coercion of loosely typed input such as query string parameters."""

from .nodes import (
    ArrayNode,
    BooleanNode,
    DomValue,
    IntegerNode,
    NullNode,
    NumberNode,
    ObjectNode,
    StringNode,
)
from .wrap import coerce, wrap

__all__ = [
    "ArrayNode",
    "BooleanNode",
    "DomValue",
    "IntegerNode",
    "NullNode",
    "NumberNode",
    "ObjectNode",
    "StringNode",
    "coerce",
    "wrap",
]
