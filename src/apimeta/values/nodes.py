"""Value tree nodes.

Each node pairs a raw value with the schema it was wrapped by. Nodes are
immutable once built; ``value`` is computed lazily and cached.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from datetime import date, time
from decimal import Decimal
from functools import cached_property
from typing import TYPE_CHECKING, Any

import numpy as np

from ..errors import Errors
from ..meta.existence import Existence
from ..meta.schema import Schema
from .serialization import jsonify

if TYPE_CHECKING:
    from ..model import ApiModel


class JsonValue:
    """Base class of all value tree nodes."""

    type_name = "value"

    def __init__(self, raw: Any, schema: Schema, existence: Existence = Existence.ALLOW_EMPTY):
        self.raw = raw
        self.schema = schema
        self.existence = existence

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.raw!r})"

    @cached_property
    def value(self) -> Any:
        """The plain outside representation of the raw value."""
        if not self.is_valid_type():
            return self.raw
        return self.cast(self.raw)

    def cast(self, raw: Any) -> Any:
        return raw

    def is_null(self) -> bool:
        return False

    def is_empty(self) -> bool:
        return False

    def is_valid_type(self) -> bool:
        """Returns False if the raw value doesn't match the schema kind."""
        return True

    def serializable_value(self, jsonify_values: bool = False) -> Any:
        """Returns the value in a form that can be encoded as JSON.

        Args:
            jsonify_values: Whether to convert dates, numpy scalars and
                decimals into JSON native values.
        """
        return jsonify(self.value) if jsonify_values else self.value

    def validate(self, errors: Errors) -> bool:
        """Validates the value and adds all problems found to ``errors``.

        Returns:
            True if the value is valid, False otherwise.
        """
        if not self.existence.reach(self):
            errors.add("blank")
            return False
        if self.is_null():
            return True
        if not self.is_valid_type():
            errors.add("invalid_type", type=self.type_name)
            return False

        valid = True
        for validator in self.schema.validations.values():
            if not validator.validate(self.value, errors):
                valid = False
        return self.validate_children(errors) and valid

    def validate_children(self, errors: Errors) -> bool:
        return True


class NullValue(JsonValue):
    type_name = "null"

    def __init__(self, schema: Schema, existence: Existence = Existence.ALLOW_EMPTY):
        super().__init__(None, schema, existence)

    def is_null(self) -> bool:
        return True

    def is_empty(self) -> bool:
        return True


class BooleanValue(JsonValue):
    type_name = "boolean"

    def is_valid_type(self) -> bool:
        return isinstance(self.raw, (bool, np.bool_))

    def cast(self, raw: Any) -> bool:
        return bool(raw)


class IntegerValue(JsonValue):
    type_name = "integer"

    def is_valid_type(self) -> bool:
        raw = self.raw
        if isinstance(raw, (bool, np.bool_)):
            return False
        if isinstance(raw, (int, np.integer)):
            return True
        return isinstance(raw, float) and raw.is_integer()

    def cast(self, raw: Any) -> int:
        return int(raw)


class NumberValue(JsonValue):
    type_name = "number"

    def is_valid_type(self) -> bool:
        raw = self.raw
        return not isinstance(raw, (bool, np.bool_)) and isinstance(
            raw, (int, float, Decimal, np.number)
        )

    def cast(self, raw: Any) -> Any:
        if isinstance(raw, np.number):
            return raw.item()
        return raw


class StringValue(JsonValue):
    """A string, or a date/time value of a string with a date format."""

    type_name = "string"

    def is_valid_type(self) -> bool:
        return isinstance(self.raw, (str, date, time))

    def is_empty(self) -> bool:
        return isinstance(self.raw, str) and not self.raw

    def serializable_value(self, jsonify_values: bool = False) -> Any:
        if isinstance(self.value, (date, time)):
            # dates are always rendered as strings
            return jsonify(self.value)
        return self.value


class ArrayValue(JsonValue):
    type_name = "array"

    def __init__(
        self,
        raw: Any,
        schema: Schema,
        items: Sequence[JsonValue] | None,
        existence: Existence = Existence.ALLOW_EMPTY,
    ):
        super().__init__(raw, schema, existence)
        self.items = list(items) if items is not None else None

    def __iter__(self):
        return iter(self.items or ())

    def __len__(self) -> int:
        return len(self.items or ())

    def __getitem__(self, index: int) -> JsonValue:
        if self.items is None:
            raise IndexError(index)
        return self.items[index]

    def is_valid_type(self) -> bool:
        return self.items is not None

    def is_empty(self) -> bool:
        return self.items is not None and not self.items

    def cast(self, raw: Any) -> list[Any]:
        return [item.value for item in self.items or ()]

    def serializable_value(self, jsonify_values: bool = False) -> Any:
        if self.items is None:
            return jsonify(self.raw) if jsonify_values else self.raw
        return [item.serializable_value(jsonify_values) for item in self.items]

    def validate_children(self, errors: Errors) -> bool:
        valid = True
        for index, item in enumerate(self.items or ()):
            with errors.nested(index):
                if not item.validate(errors):
                    valid = False
        return valid


class ObjectValue(JsonValue):
    """An object whose attributes are wrapped by the property schemas.

    ``raw_attributes`` holds the declared properties, ``raw_additional_attributes``
    the extra keys governed by the ``additional_properties`` schema.
    """

    type_name = "object"

    def __init__(
        self,
        raw: Any,
        schema: Schema,
        attributes: Mapping[str, JsonValue] | None,
        additional_attributes: Mapping[str, JsonValue] | None = None,
        existence: Existence = Existence.ALLOW_EMPTY,
    ):
        super().__init__(raw, schema, existence)
        self.raw_attributes = dict(attributes) if attributes is not None else None
        self.raw_additional_attributes = dict(additional_attributes or {})

    def __getitem__(self, name: str) -> JsonValue:
        if name in (self.raw_attributes or {}):
            return self.raw_attributes[name]  # type: ignore[index]
        return self.raw_additional_attributes[name]

    def __contains__(self, name: object) -> bool:
        return name in (self.raw_attributes or {}) or name in self.raw_additional_attributes

    def is_valid_type(self) -> bool:
        return self.raw_attributes is not None

    def is_empty(self) -> bool:
        if self.raw_attributes is None:
            return False
        nodes = list(self.raw_attributes.values()) + list(self.raw_additional_attributes.values())
        return all(node.is_null() for node in nodes)

    def cast(self, raw: Any) -> dict[str, Any]:
        return {name: node.value for name, node in self._all_attributes().items()}

    @property
    def model(self) -> ApiModel:
        """The read-only model object of this value."""
        from ..model import ApiModel

        return ApiModel(self)

    def serializable_value(self, jsonify_values: bool = False) -> Any:
        if self.raw_attributes is None:
            return jsonify(self.raw) if jsonify_values else self.raw
        return {
            name: node.serializable_value(jsonify_values)
            for name, node in self._all_attributes().items()
            # omittable attributes without a value are left out
            if not (node.is_null() and node.existence == Existence.NONE)
        }

    def validate_children(self, errors: Errors) -> bool:
        valid = True
        for name, node in self._all_attributes().items():
            with errors.nested(name):
                if not node.validate(errors):
                    valid = False
        return valid

    def _all_attributes(self) -> dict[str, JsonValue]:
        return {**self.raw_additional_attributes, **(self.raw_attributes or {})}
