"""Value-level validators.

Each validator is constructed with a single control argument and checks a
(non-null) value against it. A schema keeps one validator per ``kind``;
registering another validator of the same kind replaces the former one.

Example:
    >>> validator = Minimum(0)
    >>> errors = Errors()
    >>> validator.validate(-1, errors)
    False
    >>> errors.messages()
    ['must be greater than or equal to 0']
"""

from __future__ import annotations

import json
import math
import re
from collections.abc import Iterable, Mapping
from decimal import Decimal
from typing import Any, ClassVar

from jsonschema import FormatChecker

from ..errors import Errors, InvalidArgumentError
from ..openapi.version import V3_1, Version

NUMERIC = frozenset({"integer", "number"})
STRING = frozenset({"string"})
ARRAY = frozenset({"array"})
ANY = frozenset({"string", "integer", "number", "boolean", "array", "object"})

_format_checker = FormatChecker()


class Validator:
    """Base class of all validators."""

    kind: ClassVar[str]
    applies_to: ClassVar[frozenset[str]] = ANY

    def __init__(self, argument: Any):
        self.argument = self.check_argument(argument)

    def __eq__(self, other: object) -> bool:
        return (
            isinstance(other, Validator)
            and other.kind == self.kind
            and other.argument == self.argument
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.argument!r})"

    def check_argument(self, argument: Any) -> Any:
        return argument

    def validate(self, value: Any, errors: Errors) -> bool:
        """Returns True if ``value`` is valid, adds an error otherwise."""
        raise NotImplementedError

    def to_document(self, version: Version) -> dict[str, Any]:
        """Returns the schema keywords contributed by this validator."""
        raise NotImplementedError


def _ordered(argument: Any, name: str) -> Any:
    if argument is None or isinstance(argument, (bool, str)):
        raise InvalidArgumentError(f"invalid {name}: {argument!r}")
    try:
        argument < argument  # noqa: B015
    except TypeError:
        raise InvalidArgumentError(f"invalid {name}: {argument!r}") from None
    return argument


def _count(argument: Any, name: str) -> int:
    if isinstance(argument, bool) or not isinstance(argument, int) or argument < 0:
        raise InvalidArgumentError(f"invalid {name}: {argument!r}")
    return argument


class Minimum(Validator):
    kind = "minimum"
    applies_to = NUMERIC

    def __init__(self, argument: Any, exclusive: bool = False):
        super().__init__(argument)
        self.exclusive = exclusive

    def __eq__(self, other: object) -> bool:
        return super().__eq__(other) and other.exclusive == self.exclusive  # type: ignore

    def check_argument(self, argument: Any) -> Any:
        return _ordered(argument, "minimum")

    def validate(self, value: Any, errors: Errors) -> bool:
        if self.exclusive:
            if value <= self.argument:
                errors.add("greater_than", count=self.argument)
                return False
        elif value < self.argument:
            errors.add("greater_than_or_equal_to", count=self.argument)
            return False
        return True

    def to_document(self, version: Version) -> dict[str, Any]:
        if not self.exclusive:
            return {"minimum": self.argument}
        if version >= V3_1:
            return {"exclusiveMinimum": self.argument}
        return {"minimum": self.argument, "exclusiveMinimum": True}


class Maximum(Validator):
    kind = "maximum"
    applies_to = NUMERIC

    def __init__(self, argument: Any, exclusive: bool = False):
        super().__init__(argument)
        self.exclusive = exclusive

    def __eq__(self, other: object) -> bool:
        return super().__eq__(other) and other.exclusive == self.exclusive  # type: ignore

    def check_argument(self, argument: Any) -> Any:
        return _ordered(argument, "maximum")

    def validate(self, value: Any, errors: Errors) -> bool:
        if self.exclusive:
            if value >= self.argument:
                errors.add("less_than", count=self.argument)
                return False
        elif value > self.argument:
            errors.add("less_than_or_equal_to", count=self.argument)
            return False
        return True

    def to_document(self, version: Version) -> dict[str, Any]:
        if not self.exclusive:
            return {"maximum": self.argument}
        if version >= V3_1:
            return {"exclusiveMaximum": self.argument}
        return {"maximum": self.argument, "exclusiveMaximum": True}


class ExclusiveMinimum(Minimum):
    def __init__(self, argument: Any):
        super().__init__(argument, exclusive=True)


class ExclusiveMaximum(Maximum):
    def __init__(self, argument: Any):
        super().__init__(argument, exclusive=True)


class MultipleOf(Validator):
    kind = "multiple_of"
    applies_to = NUMERIC

    def check_argument(self, argument: Any) -> Any:
        if _ordered(argument, "multiple of") <= 0:
            raise InvalidArgumentError(f"invalid multiple of: {argument!r}")
        return argument

    def validate(self, value: Any, errors: Errors) -> bool:
        if isinstance(value, float) or isinstance(self.argument, float):
            # compare decimals to tolerate binary fractions such as 0.1
            remainder = Decimal(str(value)) % Decimal(str(self.argument))
        else:
            remainder = value % self.argument
        if remainder != 0:
            errors.add("multiple_of", count=self.argument)
            return False
        return True

    def to_document(self, version: Version) -> dict[str, Any]:
        return {"multipleOf": self.argument}


class MinLength(Validator):
    kind = "min_length"
    applies_to = STRING

    def check_argument(self, argument: Any) -> Any:
        return _count(argument, "min length")

    def validate(self, value: Any, errors: Errors) -> bool:
        if isinstance(value, str) and len(value) < self.argument:
            errors.add("too_short", count=self.argument)
            return False
        return True

    def to_document(self, version: Version) -> dict[str, Any]:
        return {"minLength": self.argument}


class MaxLength(Validator):
    kind = "max_length"
    applies_to = STRING

    def check_argument(self, argument: Any) -> Any:
        return _count(argument, "max length")

    def validate(self, value: Any, errors: Errors) -> bool:
        if isinstance(value, str) and len(value) > self.argument:
            errors.add("too_long", count=self.argument)
            return False
        return True

    def to_document(self, version: Version) -> dict[str, Any]:
        return {"maxLength": self.argument}


class Pattern(Validator):
    kind = "pattern"
    applies_to = STRING

    def check_argument(self, argument: Any) -> Any:
        if isinstance(argument, re.Pattern):
            return argument
        if not isinstance(argument, str):
            raise InvalidArgumentError(f"invalid pattern: {argument!r}")
        try:
            return re.compile(argument)
        except re.error as e:
            raise InvalidArgumentError(f"invalid pattern: {argument!r} ({e})") from e

    def validate(self, value: Any, errors: Errors) -> bool:
        if isinstance(value, str) and not self.argument.search(value):
            errors.add("invalid_pattern", pattern=self.argument.pattern)
            return False
        return True

    def to_document(self, version: Version) -> dict[str, Any]:
        return {"pattern": self.argument.pattern}


class Format(Validator):
    """Checks string formats such as ``email`` or ``date-time``.

    Unknown formats are accepted without any check.
    """

    kind = "format"
    applies_to = STRING

    def check_argument(self, argument: Any) -> Any:
        if not isinstance(argument, str) or not argument:
            raise InvalidArgumentError(f"invalid format: {argument!r}")
        return argument

    def validate(self, value: Any, errors: Errors) -> bool:
        if isinstance(value, str) and not _format_checker.conforms(value, self.argument):
            errors.add("invalid_format", format=self.argument)
            return False
        return True

    def to_document(self, version: Version) -> dict[str, Any]:
        return {"format": self.argument}


class Enum(Validator):
    kind = "enum"

    def check_argument(self, argument: Any) -> Any:
        if isinstance(argument, (str, bytes)) or not isinstance(argument, Iterable):
            raise InvalidArgumentError(f"invalid enum: {argument!r}")
        values = list(argument)
        if not values:
            raise InvalidArgumentError("enum can't be empty")
        return values

    def validate(self, value: Any, errors: Errors) -> bool:
        if value not in self.argument:
            errors.add("inclusion")
            return False
        return True

    def to_document(self, version: Version) -> dict[str, Any]:
        return {"enum": list(self.argument)}


class MinItems(Validator):
    kind = "min_items"
    applies_to = ARRAY

    def check_argument(self, argument: Any) -> Any:
        return _count(argument, "min items")

    def validate(self, value: Any, errors: Errors) -> bool:
        if len(value) < self.argument:
            errors.add("too_few_items", count=self.argument)
            return False
        return True

    def to_document(self, version: Version) -> dict[str, Any]:
        return {"minItems": self.argument}


class MaxItems(Validator):
    kind = "max_items"
    applies_to = ARRAY

    def check_argument(self, argument: Any) -> Any:
        return _count(argument, "max items")

    def validate(self, value: Any, errors: Errors) -> bool:
        if len(value) > self.argument:
            errors.add("too_many_items", count=self.argument)
            return False
        return True

    def to_document(self, version: Version) -> dict[str, Any]:
        return {"maxItems": self.argument}


class UniqueItems(Validator):
    kind = "unique_items"
    applies_to = ARRAY

    def check_argument(self, argument: Any) -> Any:
        if not isinstance(argument, bool):
            raise InvalidArgumentError(f"invalid unique items: {argument!r}")
        return argument

    def validate(self, value: Any, errors: Errors) -> bool:
        if self.argument and len({_canonical(item) for item in value}) != len(value):
            errors.add("not_unique")
            return False
        return True

    def to_document(self, version: Version) -> dict[str, Any]:
        return {"uniqueItems": True} if self.argument else {}


def _canonical(item: Any) -> str:
    """Returns the JSON text of ``item`` with sorted keys.

    Items equal as JSON values share the same text, e.g. ``1`` and ``1.0``.
    """
    return json.dumps(_normalized(item), sort_keys=True, default=str)


def _normalized(item: Any) -> Any:
    if isinstance(item, Mapping):
        return {str(k): _normalized(v) for k, v in item.items()}
    if isinstance(item, (list, tuple)):
        return [_normalized(v) for v in item]
    if isinstance(item, bool):
        return item
    if isinstance(item, (float, Decimal)) and math.isfinite(item) and item == int(item):
        return int(item)
    if isinstance(item, Decimal):
        return float(item)
    return item
