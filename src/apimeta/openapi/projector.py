"""Entry point and helpers of the document projector."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Protocol

from .version import Version

logger = logging.getLogger(__name__)


class Projectable(Protocol):
    def to_document(self, version: Version, registry: Any = None) -> Any: ...


def to_document(entity: Projectable, version: Any = None, registry: Any = None) -> Any:
    """Projects ``entity`` into the document dialect of ``version``.

    Args:
        entity: Any meta model, e.g. a schema, an operation or a complete
            definitions registry.
        version: The target OpenAPI version, see ``Version.from_value``.
        registry: The definitions used to resolve references. Defaults to
            ``entity`` itself if it is a registry.

    Returns:
        A plain nested mapping ready for JSON encoding, or None if the entity
        doesn't exist in the requested version.
    """
    version = Version.from_value(version)
    logger.debug(f"Rendering {type(entity).__name__} as OpenAPI {version}")
    return entity.to_document(version, registry)


def compact(result: dict[str, Any]) -> dict[str, Any]:
    """Removes all keys whose value is None."""
    return {key: value for key, value in result.items() if value is not None}


def project_mapping(
    entities: Mapping[Any, Any], version: Version, registry: Any = None
) -> dict[str, Any] | None:
    """Projects the values of ``entities``, dropping absent ones.

    Returns None instead of an empty mapping.
    """
    result = {}
    for key, entity in entities.items():
        document = entity.to_document(version, registry)
        if document is not None:
            result[str(key)] = document
    return result or None
