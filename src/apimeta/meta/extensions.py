"""Vendor extensions of projected objects."""

from __future__ import annotations

from typing import Any

from pydantic import Field

from ..openapi.projector import compact
from .attributes import MetaModel


class Extensions(MetaModel):
    """Base of meta models carrying ``openapi_extensions``.

    Extensions are merged into a projected object last, so they can
    override computed fields. Keys are prefixed by ``x-`` unless they
    already are.
    """

    openapi_extensions: dict[str, Any] = Field(default_factory=dict)

    def add_openapi_extension(self, name: str, value: Any) -> None:
        self._put("openapi_extensions", name, value)

    def with_extensions(self, result: dict[str, Any]) -> dict[str, Any]:
        for key, value in self.openapi_extensions.items():
            result[key if key.startswith("x-") else f"x-{key}"] = value
        return compact(result)
