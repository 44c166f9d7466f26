"""General information about an API."""

from __future__ import annotations

from typing import Any

from ..openapi.version import V3_1, V3_2, Version
from .extensions import Extensions


class Contact(Extensions):
    name: str | None = None
    url: str | None = None
    email: str | None = None

    def to_document(self, version: Version, registry: Any = None) -> dict[str, Any]:
        return self.with_extensions({"name": self.name, "url": self.url, "email": self.email})


class License(Extensions):
    name: str | None = None
    url: str | None = None

    # OpenAPI 3.1 and higher
    identifier: str | None = None

    def to_document(self, version: Version, registry: Any = None) -> dict[str, Any]:
        version = Version.from_value(version)
        return self.with_extensions(
            {
                "name": self.name,
                "identifier": self.identifier if version >= V3_1 else None,
                "url": self.url,
            }
        )


class Info(Extensions):
    title: str | None = None
    version: str = "1.0"
    description: str | None = None
    terms_of_service: str | None = None
    contact: Contact | None = None
    license: License | None = None

    # OpenAPI 3.1 and higher
    summary: str | None = None

    def to_document(self, version: Version, registry: Any = None) -> dict[str, Any]:
        version = Version.from_value(version)
        return self.with_extensions(
            {
                "title": self.title or "",
                "version": self.version,
                "summary": self.summary if version >= V3_1 else None,
                "description": self.description,
                "termsOfService": self.terms_of_service,
                "contact": self.contact.to_document(version) if self.contact else None,
                "license": self.license.to_document(version) if self.license else None,
            }
        )


class Tag(Extensions):
    """A tag used to group operations.

    ``summary``, ``parent`` and ``kind`` apply to OpenAPI 3.2 and higher.
    """

    name: str
    description: str | None = None
    summary: str | None = None
    parent: str | None = None
    kind: str | None = None

    def to_document(self, version: Version, registry: Any = None) -> dict[str, Any]:
        version = Version.from_value(version)
        result: dict[str, Any] = {"name": self.name}
        if version >= V3_2:
            result["summary"] = self.summary
        result["description"] = self.description
        if version >= V3_2:
            result["parent"] = self.parent
            result["kind"] = self.kind
        return self.with_extensions(result)
