"""Existence policies of values."""

from __future__ import annotations

from enum import IntEnum
from typing import Any, Protocol

from ..errors import InvalidArgumentError


class Presence(Protocol):
    def is_null(self) -> bool: ...

    def is_empty(self) -> bool: ...


class Existence(IntEnum):
    """Rules whether a missing, null or empty value is acceptable.

    The members are ordered by strictness, so ``existence > Existence.NONE``
    means "required" and ``existence <= Existence.ALLOW_NIL`` means
    "nullable".
    """

    #: The value can be omitted.
    NONE = 1

    #: The value can be null, but mustn't be empty.
    ALLOW_NIL = 2

    #: The value can be empty, but mustn't be null.
    ALLOW_EMPTY = 3

    #: The value must be neither null nor empty.
    PRESENT = 4

    @classmethod
    def from_value(cls, value: Any) -> Existence:
        """Transforms ``value`` to an existence policy.

        Raises:
            InvalidArgumentError: If ``value`` can't be transformed.
        """
        if isinstance(value, Existence):
            return value
        if value is True:
            return cls.PRESENT
        if value is False or value is None:
            return cls.NONE
        if isinstance(value, str):
            key = value.lower()
            if key == "present":
                return cls.PRESENT
            if key == "allow_empty":
                return cls.ALLOW_EMPTY
            if key in ("allow_nil", "nullable"):
                return cls.ALLOW_NIL
            if key in ("none", "omitted", "allow_omitted"):
                return cls.NONE
        raise InvalidArgumentError(f"invalid existence: {value!r}")

    def reach(self, value: Presence) -> bool:
        """Returns True if ``value`` satisfies the policy."""
        if self is Existence.NONE:
            return True
        if value.is_null():
            return self is Existence.ALLOW_NIL
        if value.is_empty():
            return self is Existence.ALLOW_EMPTY
        return True
