"""Coercion tree nodes.

Coercion nodes wrap loosely typed input, typically strings taken from a
query string, path or header. :meth:`DomValue.cast` converts the raw input
into a value of the schema's kind::

    IntegerNode("42", schema).cast()      # 42
    BooleanNode("yes", schema).cast()     # True
    IntegerNode("forty", schema).cast()   # raises CastError
"""

from __future__ import annotations

import json
import math
import re
from collections.abc import Mapping, Sequence
from datetime import date, datetime, time
from decimal import Decimal
from typing import Any

import numpy as np

from ..errors import CastError, Errors
from ..meta.existence import Existence
from ..meta.schema import Schema

TRUE_VALUES = frozenset({"true", "1", "yes"})
FALSE_VALUES = frozenset({"false", "0", "no"})

INTEGER = re.compile(r"[+-]?\d+")
NUMBER = re.compile(r"[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?")


class DomValue:
    """Base class of all coercion tree nodes."""

    type_name = "value"

    def __init__(self, raw: Any, schema: Schema, existence: Existence = Existence.ALLOW_EMPTY):
        self.raw = raw
        self.schema = schema
        self.existence = existence

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.raw!r})"

    def is_null(self) -> bool:
        # an empty string stands for an absent value unless a string is expected
        if self.raw is None:
            return True
        return isinstance(self.raw, str) and not self.raw and self.type_name != "string"

    def is_empty(self) -> bool:
        return self.is_null()

    def cast(self) -> Any:
        """Returns the raw value converted to the kind of the schema.

        Raises:
            CastError: If the raw value can't be converted.
        """
        if self.is_null():
            return None
        return self.cast_raw(self.raw)

    def cast_raw(self, raw: Any) -> Any:
        return raw

    def coerce(self, errors: Errors) -> Any:
        """Like :meth:`cast`, but adds an ``invalid_cast`` error instead of
        raising. Values that can't be converted are returned unchanged.
        """
        try:
            return self.cast()
        except CastError as e:
            errors.add("invalid_cast", type=e.type_name)
            return self.raw


class NullNode(DomValue):
    type_name = "null"

    def __init__(self, schema: Schema, existence: Existence = Existence.ALLOW_EMPTY):
        super().__init__(None, schema, existence)


class BooleanNode(DomValue):
    type_name = "boolean"

    def cast_raw(self, raw: Any) -> bool:
        if isinstance(raw, (bool, np.bool_)):
            return bool(raw)
        if isinstance(raw, int) and raw in (0, 1):
            return bool(raw)
        if isinstance(raw, str):
            key = raw.strip().lower()
            if key in TRUE_VALUES:
                return True
            if key in FALSE_VALUES:
                return False
        raise CastError(raw, self.type_name)


class IntegerNode(DomValue):
    type_name = "integer"

    def cast_raw(self, raw: Any) -> int:
        if isinstance(raw, (bool, np.bool_)):
            raise CastError(raw, self.type_name)
        if isinstance(raw, (int, np.integer)):
            return int(raw)
        if isinstance(raw, float) and raw.is_integer():
            return int(raw)
        if isinstance(raw, str) and INTEGER.fullmatch(raw.strip()):
            return int(raw.strip())
        raise CastError(raw, self.type_name)


class NumberNode(DomValue):
    type_name = "number"

    def cast_raw(self, raw: Any) -> Any:
        if isinstance(raw, (bool, np.bool_)):
            raise CastError(raw, self.type_name)
        if isinstance(raw, np.number):
            raw = raw.item()
        if isinstance(raw, str) and NUMBER.fullmatch(raw.strip()):
            value = float(raw.strip())
        elif isinstance(raw, Decimal):
            value = raw if raw.is_finite() else None
        elif isinstance(raw, (int, float)):
            value = raw
        else:
            raise CastError(raw, self.type_name)
        # NaN and infinity have no JSON representation
        if value is None or (isinstance(value, float) and not math.isfinite(value)):
            raise CastError(raw, self.type_name)
        return value


class StringNode(DomValue):
    """A string, converted to a date or time if the schema has a date format."""

    type_name = "string"

    def is_empty(self) -> bool:
        return self.raw is None or (isinstance(self.raw, str) and not self.raw)

    def cast_raw(self, raw: Any) -> Any:
        format_ = getattr(self.schema, "format", None)
        if format_ == "date-time":
            return self._cast_date_time(raw)
        if format_ == "date":
            return self._cast_date(raw)
        if format_ == "time":
            return self._cast_time(raw)
        if isinstance(raw, str):
            return raw
        if isinstance(raw, (int, float, Decimal, np.number)) and not isinstance(raw, bool):
            return str(raw)
        raise CastError(raw, self.type_name)

    def _cast_date_time(self, raw: Any) -> datetime:
        if isinstance(raw, datetime):
            return raw
        if not isinstance(raw, str):
            raise CastError(raw, "date-time")
        try:
            return datetime.fromisoformat(raw.replace("Z", "+00:00"))
        except ValueError:
            raise CastError(raw, "date-time") from None

    def _cast_date(self, raw: Any) -> date:
        if isinstance(raw, datetime):
            return raw.date()
        if isinstance(raw, date):
            return raw
        if not isinstance(raw, str):
            raise CastError(raw, "date")
        try:
            return datetime.strptime(raw, "%Y-%m-%d").date()
        except ValueError:
            raise CastError(raw, "date") from None

    def _cast_time(self, raw: Any) -> time:
        if isinstance(raw, time):
            return raw
        if not isinstance(raw, str):
            raise CastError(raw, "time")
        try:
            return datetime.strptime(raw, "%H:%M:%S").time()
        except ValueError:
            raise CastError(raw, "time") from None


class ArrayNode(DomValue):
    type_name = "array"

    def __init__(
        self,
        raw: Any,
        schema: Schema,
        items: Sequence[DomValue],
        existence: Existence = Existence.ALLOW_EMPTY,
    ):
        super().__init__(raw, schema, existence)
        self.items = list(items)

    def is_empty(self) -> bool:
        return self.is_null() or not self.items

    def cast_raw(self, raw: Any) -> list[Any]:
        return [item.cast() for item in self.items]

    def coerce(self, errors: Errors) -> Any:
        if self.is_null():
            return None
        result = []
        for index, item in enumerate(self.items):
            with errors.nested(index):
                result.append(item.coerce(errors))
        return result


class ObjectNode(DomValue):
    """An object read from a mapping or a JSON string.

    ``attributes`` is None if the raw value isn't a mapping.
    """

    type_name = "object"

    def __init__(
        self,
        raw: Any,
        schema: Schema,
        attributes: Mapping[str, DomValue] | None,
        existence: Existence = Existence.ALLOW_EMPTY,
    ):
        super().__init__(raw, schema, existence)
        self.attributes = dict(attributes) if attributes is not None else None

    def is_empty(self) -> bool:
        if self.is_null():
            return True
        return self.attributes is not None and all(
            node.is_null() for node in self.attributes.values()
        )

    def cast_raw(self, raw: Any) -> dict[str, Any]:
        if self.attributes is None:
            raise CastError(raw, self.type_name)
        return {name: node.cast() for name, node in self.attributes.items()}

    def coerce(self, errors: Errors) -> Any:
        if self.is_null():
            return None
        if self.attributes is None:
            errors.add("invalid_cast", type=self.type_name)
            return self.raw
        result = {}
        for name, node in self.attributes.items():
            with errors.nested(name):
                result[name] = node.coerce(errors)
        return result


def parse_json(raw: str) -> Any:
    """Parses a JSON encoded array or object, returns None if ``raw`` isn't one."""
    try:
        value = json.loads(raw)
    except json.JSONDecodeError:
        return None
    return value if isinstance(value, (list, dict)) else None
