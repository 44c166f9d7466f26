"""Errors raised by apimeta and the error sink used during validation.

apimeta distinguishes two disjoint classes of problems:

- **Configuration errors** are subclasses of :class:`ApiMetaError`. They
  indicate a defect in an API definition (a reference to an undefined
  schema, a validator argument that makes no sense, a write after the
  definitions have been frozen, ...) and are raised immediately.
- **Validation failures** never raise. They are collected in an
  :class:`Errors` sink keyed by attribute path, so that all problems of a
  payload are reported at once.

Example:
    >>> errors = Errors()
    >>> with errors.nested("address"):
    ...     errors.add("blank")
    >>> [issue.full_message for issue in errors]
    ["address can't be blank"]
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from typing import Any

from .models import ApiMetaBaseModel

BASE = "base"

MESSAGES: dict[str, str] = {
    "blank": "can't be blank",
    "greater_than_or_equal_to": "must be greater than or equal to {count}",
    "greater_than": "must be greater than {count}",
    "less_than_or_equal_to": "must be less than or equal to {count}",
    "less_than": "must be less than {count}",
    "multiple_of": "must be a multiple of {count}",
    "too_short": "is too short (minimum is {count})",
    "too_long": "is too long (maximum is {count})",
    "invalid_pattern": "doesn't match pattern {pattern}",
    "invalid_format": "isn't a valid {format}",
    "inclusion": "isn't included in the list",
    "too_few_items": "has too few items (minimum is {count})",
    "too_many_items": "has too many items (maximum is {count})",
    "not_unique": "contains duplicate items",
    "invalid_type": "must be of type {type}",
    "invalid_cast": "can't be converted to {type}",
    "invalid_discriminator": "has no matching variant ({reason})",
    "forbidden": "'{name}' isn't allowed",
}


class ApiMetaError(Exception):
    """Base class of all configuration errors."""


class FrozenModificationError(ApiMetaError):
    """Raised when trying to modify a frozen meta model."""

    def __init__(self, target: object):
        super().__init__(f"can't modify frozen {type(target).__name__}")
        self.target = target


class UnresolvedReferenceError(ApiMetaError):
    """Raised when a named reference can't be resolved."""

    def __init__(self, ref: str, message: str | None = None):
        super().__init__(message or f"reference can't be resolved: {ref!r}")
        self.ref = ref


class DiscriminatorError(UnresolvedReferenceError):
    """Raised when the variant of a polymorphic object can't be determined."""


class InvalidTypeError(ApiMetaError):
    """Raised when a schema kind is unknown."""


class InvalidArgumentError(ApiMetaError, ValueError):
    """Raised when an argument isn't applicable."""


class RecursionLimitError(ApiMetaError):
    """Raised when wrapping a value or exploding a parameter recurses endlessly."""


class ResponseValidationError(ApiMetaError):
    """Raised when a response body doesn't match its declaration."""

    def __init__(self, errors: Errors):
        super().__init__("invalid response body: " + "; ".join(errors.messages()))
        self.errors = errors


class CastError(ValueError):
    """Raised when a loosely typed input value can't be converted.

    Unlike the configuration errors, a cast error originates from request
    input and is reported like a validation failure.
    """

    def __init__(self, value: Any, type_name: str):
        super().__init__(f"can't convert {value!r} to {type_name}")
        self.value = value
        self.type_name = type_name


class ValidationIssue(ApiMetaBaseModel):
    """A single validation failure.

    Attributes:
        path: Attribute path, ``"base"`` for the root.
        kind: Error kind, e.g. ``"blank"`` or ``"less_than"``.
        message: Human-readable message without the path.
    """

    path: str
    kind: str
    message: str

    @property
    def full_message(self) -> str:
        if self.path == BASE:
            return self.message
        return f"{self.path} {self.message}"


class Errors:
    """Collects validation issues keyed by attribute path."""

    def __init__(self) -> None:
        self._issues: list[ValidationIssue] = []
        self._path: list[str | int] = []

    def __bool__(self) -> bool:
        return bool(self._issues)

    def __iter__(self) -> Iterator[ValidationIssue]:
        return iter(self._issues)

    def __len__(self) -> int:
        return len(self._issues)

    def __repr__(self) -> str:
        return f"Errors({self.messages()!r})"

    @property
    def current_path(self) -> str:
        if not self._path:
            return BASE
        path = ""
        for segment in self._path:
            if isinstance(segment, int):
                path += f"[{segment}]"
            else:
                path += f".{segment}" if path else segment
        return path

    def add(self, kind: str, message: str | None = None, **details: Any) -> None:
        """Adds an issue for the current attribute path."""
        self._append(self.current_path, kind, message, details)

    def add_base(self, kind: str, message: str | None = None, **details: Any) -> None:
        """Adds an issue attached to the root."""
        self._append(BASE, kind, message, details)

    def clear(self) -> None:
        self._issues.clear()

    def merge(self, other: Iterable[ValidationIssue]) -> None:
        """Adds the issues of another sink or any other iterable of issues."""
        self._issues.extend(other)

    def messages(self) -> list[str]:
        return [issue.full_message for issue in self._issues]

    @contextmanager
    def nested(self, name: str | int) -> Iterator[Errors]:
        """Extends the current attribute path by ``name`` within the block."""
        self._path.append(name)
        try:
            yield self
        finally:
            self._path.pop()

    def to_list(self) -> list[ValidationIssue]:
        return list(self._issues)

    def _append(self, path: str, kind: str, message: str | None, details: dict[str, Any]) -> None:
        if message is None:
            template = MESSAGES.get(kind, "is invalid")
            try:
                message = template.format(**details)
            except KeyError:
                message = template
        self._issues.append(ValidationIssue(path=path, kind=kind, message=message))
