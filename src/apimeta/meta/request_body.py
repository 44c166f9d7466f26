"""Request bodies."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from pydantic import Field, PrivateAttr, field_validator

from ..media import APPLICATION_JSON, MediaRange, best_match
from ..openapi.version import V2_0, Version
from .attributes import convert_mapping
from .content import Content
from .existence import Existence
from .extensions import Extensions
from .reference import Reference
from .schema import existence_of

if TYPE_CHECKING:
    from .definitions import Definitions


def _as_content(value: Any) -> Content:
    if isinstance(value, Content):
        return value
    return Content(**(value or {}))


class RequestBody(Extensions):
    """A request body with one content per media range.

    Keywords other than ``contents``, ``description`` and
    ``openapi_extensions`` describe the first content; ``content_type``
    selects its media range, ``application/json`` by default.
    """

    contents: dict[str, Content] = Field(default_factory=dict)
    description: str | None = None

    _sorted_contents: list[tuple[MediaRange, Content]] | None = PrivateAttr(default=None)

    def __init__(self, **keywords: Any):
        own, content_keywords = self.split_keywords(keywords)
        if content_keywords:
            content_type = content_keywords.pop("content_type", None) or APPLICATION_JSON
            own["contents"] = {content_type: content_keywords, **(own.get("contents") or {})}
        super().__init__(**own)

    @field_validator("contents", mode="before")
    @classmethod
    def _convert_contents(cls, value: Any) -> Any:
        return convert_mapping(value, _as_content, key=lambda k: str(MediaRange.from_value(k)))

    def attribute_changed(self, name: str) -> None:
        if name == "contents":
            self._sorted_contents = None

    def before_freeze(self) -> None:
        if not self.contents:
            self.add_content()

    @property
    def is_reference(self) -> bool:
        return False

    def resolve(self, registry: Definitions | None = None) -> RequestBody:
        return self

    def add_content(self, media_range: str | None = None, **keywords: Any) -> Content:
        media_range = str(MediaRange.from_value(media_range or APPLICATION_JSON))
        return self._put("contents", media_range, Content(**keywords))

    @property
    def default_media_range(self) -> str | None:
        return next(iter(self.contents), None)

    @property
    def default_content(self) -> Content | None:
        return next(iter(self.contents.values()), None)

    def content_for(self, media_type: Any) -> Content | None:
        """Returns the content that matches ``media_type`` best.

        An exact match wins over wildcard matches, more specific wildcards
        win over less specific ones. Falls back to the first content if no
        media range matches.
        """
        if self._sorted_contents is None:
            self._sorted_contents = [
                (MediaRange.from_value(key), content) for key, content in self.contents.items()
            ]
        match = best_match(self._sorted_contents, media_type)
        return match[1] if match else self.default_content

    def is_required(self, registry: Definitions | None = None) -> bool:
        return all(
            existence_of(content.schema, registry) >= Existence.ALLOW_NIL
            for content in self.contents.values()
        )

    def to_parameter(self, registry: Definitions | None = None) -> dict[str, Any]:
        """Returns the ``in: body`` parameter object of OpenAPI 2.0."""
        content = self.default_content or Content()
        result = {
            "name": "body",
            "in": "body",
            "description": self.description,
            "required": existence_of(content.schema, registry) >= Existence.ALLOW_NIL,
            "schema": content.schema.to_document(V2_0, registry),
        }
        return self.with_extensions(result)

    def to_document(
        self, version: Version, registry: Definitions | None = None
    ) -> dict[str, Any] | None:
        version = Version.from_value(version)
        if version == V2_0:
            # described by a body parameter instead
            return None
        contents = self.contents or {APPLICATION_JSON: Content()}
        result = {
            "description": self.description,
            "content": {
                str(media_range): content.to_document(version, registry, media_range)
                for media_range, content in contents.items()
            },
            "required": self.is_required(registry),
        }
        return self.with_extensions(result)


class RequestBodyReference(Reference):
    component = "request_bodies"

    document_component = "requestBodies"

    def to_document(self, version: Version, registry: Definitions | None = None) -> dict[str, Any]:
        if Version.from_value(version) == V2_0:
            return self.to_parameter(registry)
        return super().to_document(version, registry)

    def to_parameter(self, registry: Definitions | None = None) -> dict[str, Any]:
        return self.resolve(registry).to_parameter(registry)


def new_request_body(
    keywords: Mapping[str, Any] | RequestBody | RequestBodyReference | str | None = None, **kw: Any
) -> RequestBody | RequestBodyReference:
    """Creates a request body, or a reference if ``ref`` is given."""
    if isinstance(keywords, (RequestBody, RequestBodyReference)):
        return keywords
    if isinstance(keywords, str):
        return RequestBodyReference(ref=keywords)
    keywords = {**(keywords or {}), **kw}
    if "ref" in keywords:
        return RequestBodyReference(**keywords)
    return RequestBody(**keywords)
