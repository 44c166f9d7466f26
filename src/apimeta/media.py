"""Media types and media ranges."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from typing import Any, TypeVar

from .errors import InvalidArgumentError

logger = logging.getLogger(__name__)

T = TypeVar("T")

_MEDIA_TYPE = re.compile(r"^\s*([\w.+*-]+)/([\w.+*-]+)\s*(?:;.*)?$")

APPLICATION_JSON = "application/json"


class MediaType:
    """A concrete media type such as ``application/json``."""

    def __init__(self, type_: str, subtype: str):
        self.type = type_.lower()
        self.subtype = subtype.lower()

    @classmethod
    def from_value(cls, value: Any) -> MediaType:
        """Parses ``value``, ignoring parameters such as ``charset``.

        Raises:
            InvalidArgumentError: If ``value`` isn't a media type.
        """
        if isinstance(value, cls):
            return value
        match = _MEDIA_TYPE.match(str(value)) if value is not None else None
        if match is None:
            raise InvalidArgumentError(f"invalid media type: {value!r}")
        return cls(match.group(1), match.group(2))

    @property
    def is_json(self) -> bool:
        return self.subtype == "json" or self.subtype.endswith("+json")

    def __eq__(self, other: object) -> bool:
        return isinstance(other, MediaType) and str(other) == str(self)

    def __hash__(self) -> int:
        return hash(str(self))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({str(self)!r})"

    def __str__(self) -> str:
        return f"{self.type}/{self.subtype}"


class MediaRange(MediaType):
    """A media type pattern such as ``application/*`` or ``*/*``.

    The priority is 1 for concrete types, 2 for ``type/*``, 3 for
    ``*/subtype`` and 4 for ``*/*``; lower is more specific.
    """

    @property
    def priority(self) -> int:
        return (2 if self.type == "*" else 0) + (1 if self.subtype == "*" else 0) + 1

    def match(self, media_type: Any) -> bool:
        media_type = MediaType.from_value(media_type)
        return self.type in ("*", media_type.type) and self.subtype in ("*", media_type.subtype)


def best_match(
    candidates: Iterable[tuple[MediaRange, T]], media_type: Any
) -> tuple[MediaRange, T] | None:
    """Selects the candidate whose range matches ``media_type`` best.

    An exact match wins over wildcard matches, and more specific wildcards
    win over less specific ones. Among equally specific ranges the first
    declared one wins. Returns None if no range matches.
    """
    if media_type is None:
        return None
    try:
        media_type = MediaType.from_value(media_type)
    except InvalidArgumentError:
        logger.debug(f"Ignoring invalid media type {media_type!r}")
        return None
    ranked = sorted(
        (c for c in candidates if c[0].match(media_type)),
        key=lambda c: c[0].priority,
    )
    return ranked[0] if ranked else None
