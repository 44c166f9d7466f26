"""Response statuses.

A response is declared for an exact status code (``404``), a range of codes
(``"4XX"``) or as the default response. When rendering a response, the most
specific declaration matching the concrete status wins::

    >>> declared = [Status.from_value(s) for s in (404, "4XX", "default")]
    >>> select(declared, 409)
    StatusRange('4XX')
"""

from __future__ import annotations

from collections.abc import Iterable
from functools import total_ordering
from http import HTTPStatus
from typing import Any, ClassVar

from .errors import InvalidArgumentError

_RANGES = {
    "1XX": range(100, 200),
    "2XX": range(200, 300),
    "3XX": range(300, 400),
    "4XX": range(400, 500),
    "5XX": range(500, 600),
}


@total_ordering
class Status:
    """Base class of statuses, ordered by priority and then by value."""

    priority: ClassVar[int]

    def __init__(self, value: Any):
        self.value = value

    @classmethod
    def from_value(cls, value: Any) -> Status:
        """Transforms ``value`` to a status.

        Accepts statuses, integers, numeric strings, ranges such as ``"4XX"``,
        ``"default"`` and the names of :class:`http.HTTPStatus` members such
        as ``"not_found"``.

        Raises:
            InvalidArgumentError: If ``value`` isn't a valid status.
        """
        if isinstance(value, Status):
            return value
        if isinstance(value, HTTPStatus):
            return StatusCode(int(value))
        if isinstance(value, int) and not isinstance(value, bool):
            return StatusCode(value)
        if isinstance(value, str):
            key = value.strip()
            if key.lower() == "default":
                return DEFAULT
            if key.upper() in _RANGES:
                return StatusRange(key.upper())
            if key.isdigit():
                return StatusCode(int(key))
            try:
                return StatusCode(int(HTTPStatus[key.upper()]))
            except KeyError:
                pass
        raise InvalidArgumentError(f"invalid status: {value!r}")

    def match(self, code: int) -> bool:
        raise NotImplementedError

    def __eq__(self, other: object) -> bool:
        return type(other) is type(self) and other.value == self.value  # type: ignore[attr-defined]

    def __lt__(self, other: Status) -> bool:
        if not isinstance(other, Status):
            return NotImplemented
        return (self.priority, str(self.value)) < (other.priority, str(other.value))

    def __hash__(self) -> int:
        return hash((self.priority, self.value))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.value!r})"

    def __str__(self) -> str:
        return str(self.value)


class StatusCode(Status):
    priority = 1

    def __init__(self, value: int):
        if not 100 <= value <= 599:
            raise InvalidArgumentError(f"invalid status code: {value!r}")
        super().__init__(value)

    def match(self, code: int) -> bool:
        return self.value == code


class StatusRange(Status):
    priority = 2

    def __init__(self, value: str):
        if value not in _RANGES:
            raise InvalidArgumentError(f"invalid status range: {value!r}")
        super().__init__(value)

    def match(self, code: int) -> bool:
        return code in _RANGES[self.value]


class StatusDefault(Status):
    priority = 3

    def __init__(self) -> None:
        super().__init__("default")

    def match(self, code: int) -> bool:
        return True


DEFAULT = StatusDefault()


def select(statuses: Iterable[Status], code: int | HTTPStatus) -> Status | None:
    """Returns the most specific status of ``statuses`` matching ``code``."""
    code = int(code)
    matching = [status for status in statuses if status.match(code)]
    return min(matching) if matching else None
