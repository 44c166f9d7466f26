"""Servers providing an API."""

from __future__ import annotations

from typing import Any

from pydantic import Field, field_validator

from ..openapi.version import V3_2, Version
from .attributes import convert_sequence
from .extensions import Extensions


class ServerVariable(Extensions):
    default: str | None = None
    description: str | None = None
    enum: list[str] = Field(default_factory=list)

    @field_validator("enum", mode="before")
    @classmethod
    def _convert_enum(cls, value: Any) -> Any:
        return convert_sequence(value, str)

    def to_document(self, version: Version | None = None, registry: Any = None) -> dict[str, Any]:
        return self.with_extensions(
            {
                "enum": list(self.enum) or None,
                "default": self.default,
                "description": self.description,
            }
        )


class Server(Extensions):
    """A server, described by OpenAPI 3.0 and higher.

    OpenAPI 2.0 documents take ``host``, ``basePath`` and ``schemes`` from
    the URL of the first server instead.
    """

    url: str | None = None
    description: str | None = None

    # OpenAPI 3.2 and higher
    name: str | None = None

    variables: dict[str, ServerVariable] = Field(default_factory=dict)

    def add_variable(self, name: str, **keywords: Any) -> ServerVariable:
        return self._put("variables", name, ServerVariable(**keywords))

    def to_document(self, version: Version, registry: Any = None) -> dict[str, Any]:
        version = Version.from_value(version)
        variables = {name: v.to_document(version) for name, v in self.variables.items()}
        return self.with_extensions(
            {
                "url": self.url,
                "description": self.description,
                "name": self.name if version >= V3_2 else None,
                "variables": variables or None,
            }
        )
