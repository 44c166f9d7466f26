"""Links between responses and operations."""

from __future__ import annotations

from typing import Any

from pydantic import Field

from ..openapi.version import V3_0, V3_2, Version
from .extensions import Extensions
from .server import Server


class Link(Extensions):
    """A design-time link from a response to an operation.

    Links are described by OpenAPI 3.0 and higher. The ``name`` is
    emitted from OpenAPI 3.2 on.
    """

    operation_id: str | None = None
    operation_ref: str | None = None
    parameters: dict[str, Any] = Field(default_factory=dict)
    request_body: Any = None
    description: str | None = None
    server: Server | None = None
    name: str | None = None

    def to_document(self, version: Version, registry: Any = None) -> dict[str, Any] | None:
        version = Version.from_value(version)
        if version < V3_0:
            return None
        return self.with_extensions(
            {
                "name": self.name if version >= V3_2 else None,
                "operationRef": self.operation_ref,
                "operationId": self.operation_id,
                "parameters": dict(self.parameters) or None,
                "requestBody": self.request_body,
                "description": self.description,
                "server": self.server.to_document(version) if self.server else None,
            }
        )
