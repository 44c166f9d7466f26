"""Supported OpenAPI document versions."""

from __future__ import annotations

from functools import total_ordering
from typing import Any

from ..errors import InvalidArgumentError

_RENDERED = {(2, 0): "2.0", (3, 0): "3.0.3", (3, 1): "3.1.1", (3, 2): "3.2.0"}


@total_ordering
class Version:
    """An OpenAPI version, totally ordered by major and minor number."""

    __slots__ = ("major", "minor")

    def __init__(self, major: int, minor: int):
        if (major, minor) not in _RENDERED:
            raise InvalidArgumentError(f"unsupported OpenAPI version: {major}.{minor}")
        self.major = major
        self.minor = minor

    @classmethod
    def from_value(cls, value: Any) -> Version:
        """Transforms ``value`` to a version.

        ``None`` and ``2`` are taken as 2.0, ``3`` as 3.0.

        Raises:
            InvalidArgumentError: If ``value`` isn't a supported version.
        """
        if isinstance(value, Version):
            return value
        if value is None or value == 2:
            return V2_0
        if value == 3:
            return V3_0
        if isinstance(value, str):
            for version in ALL_VERSIONS:
                if value in (f"{version.major}.{version.minor}", str(version)):
                    return version
        raise InvalidArgumentError(f"unsupported OpenAPI version: {value!r}")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return (self.major, self.minor) == (other.major, other.minor)

    def __lt__(self, other: Version) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return (self.major, self.minor) < (other.major, other.minor)

    def __hash__(self) -> int:
        return hash((self.major, self.minor))

    def __repr__(self) -> str:
        return f"Version({self.major}, {self.minor})"

    def __str__(self) -> str:
        return _RENDERED[(self.major, self.minor)]


V2_0 = Version(2, 0)
V3_0 = Version(3, 0)
V3_1 = Version(3, 1)
V3_2 = Version(3, 2)

ALL_VERSIONS = (V2_0, V3_0, V3_1, V3_2)
