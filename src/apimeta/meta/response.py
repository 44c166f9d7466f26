"""Responses and response headers."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any

from pydantic import Field, field_validator

from ..errors import InvalidArgumentError
from ..media import APPLICATION_JSON, MediaRange, MediaType
from ..openapi.projector import project_mapping
from ..openapi.version import V2_0, V3_2, Version
from .attributes import convert_mapping
from .content import Content
from .example import Example, ExampleReference, new_example
from .extensions import Extensions
from .link import Link
from .reference import Reference
from .schema import Schema, SchemaReference, new_schema

if TYPE_CHECKING:
    from .definitions import Definitions

_MISSING = object()


class Header(Extensions):
    """A response header. Keywords other than fields describe its schema."""

    extra_keywords = ("example",)

    description: str | None = None
    deprecated: bool = False
    examples: dict[str, Example | ExampleReference] = Field(default_factory=dict)
    schema_: Schema | SchemaReference = Field(alias="schema")

    def __init__(self, **keywords: Any):
        own, schema_keywords = self.split_keywords(keywords)
        example = own.pop("example", _MISSING)
        schema = own.pop("schema", None)
        if schema is not None:
            schema_keywords["schema"] = schema
        elif "ref" not in schema_keywords:
            schema_keywords.setdefault("type", "string")
        super().__init__(schema=new_schema(schema_keywords), **own)
        if example is not _MISSING:
            self._put("examples", "default", {"value": example})

    @field_validator("examples", mode="before")
    @classmethod
    def _convert_examples(cls, value: Any) -> Any:
        return convert_mapping(value, new_example)

    @property
    def schema(self) -> Schema | SchemaReference:
        return self.schema_

    @property
    def is_reference(self) -> bool:
        return False

    def resolve(self, registry: Definitions | None = None) -> Header:
        return self

    def to_document(self, version: Version, registry: Definitions | None = None) -> dict[str, Any]:
        version = Version.from_value(version)
        schema = self.schema.to_document(version, registry)
        if version == V2_0:
            result = {"description": self.description, **schema}
        else:
            schema.pop("deprecated", None)
            result = {
                "description": self.description,
                "schema": schema,
                "deprecated": self.deprecated or None,
                "examples": project_mapping(self.examples, version, registry),
            }
        return self.with_extensions(result)


class HeaderReference(Reference):
    component = "headers"


def new_header(value: Any) -> Header | HeaderReference:
    if isinstance(value, (Header, HeaderReference)):
        return value
    if not isinstance(value, Mapping):
        raise InvalidArgumentError(f"invalid header: {value!r}")
    if "ref" in value:
        return HeaderReference(**value)
    return Header(**value)


def _as_content(value: Any) -> Content:
    if isinstance(value, Content):
        return value
    return Content(**(value or {}))


class Response(Extensions):
    """A response with one content per media type.

    Keywords other than fields describe the first content;
    ``content_type`` selects its media type, ``application/json`` by
    default.
    """

    contents: dict[str, Content] = Field(default_factory=dict)
    description: str | None = None
    headers: dict[str, Header | HeaderReference] = Field(default_factory=dict)
    links: dict[str, Link] = Field(default_factory=dict)

    # Prevents the response from being described by documents
    nodoc: bool = False

    # OpenAPI 3.2 and higher
    summary: str | None = None

    def __init__(self, **keywords: Any):
        own, content_keywords = self.split_keywords(keywords)
        if content_keywords:
            content_type = content_keywords.pop("content_type", None) or APPLICATION_JSON
            own["contents"] = {content_type: content_keywords, **(own.get("contents") or {})}
        super().__init__(**own)

    @field_validator("contents", mode="before")
    @classmethod
    def _convert_contents(cls, value: Any) -> Any:
        return convert_mapping(value, _as_content, key=lambda k: str(MediaType.from_value(k)))

    @field_validator("headers", mode="before")
    @classmethod
    def _convert_headers(cls, value: Any) -> Any:
        return convert_mapping(value, new_header)

    def before_freeze(self) -> None:
        if not self.contents:
            self.add_content()

    @property
    def is_reference(self) -> bool:
        return False

    def resolve(self, registry: Definitions | None = None) -> Response:
        return self

    def add_content(self, media_type: str | None = None, **keywords: Any) -> Content:
        media_type = str(MediaType.from_value(media_type or APPLICATION_JSON))
        return self._put("contents", media_type, Content(**keywords))

    def add_header(self, name: str, **keywords: Any) -> Header | HeaderReference:
        return self._put("headers", name, keywords)

    def add_link(self, name: str, **keywords: Any) -> Link:
        return self._put("links", name, Link(**keywords))

    @property
    def default_media_type(self) -> str | None:
        return next(iter(self.contents), None)

    def media_type_and_content_for(
        self, media_ranges: Iterable[Any] = ()
    ) -> tuple[str, Content] | None:
        """Returns the media type and content matching ``media_ranges`` best.

        The media ranges are tried from the most to the least specific one,
        e.g. ``text/plain`` before ``text/*`` before ``*/*``. Falls back to
        the first content.
        """
        ranges = []
        for value in media_ranges:
            try:
                ranges.append(MediaRange.from_value(value))
            except InvalidArgumentError:
                continue
        ranges.sort(key=lambda r: r.priority)
        for media_range in ranges:
            for media_type, content in self.contents.items():
                if media_range.match(media_type):
                    return media_type, content
        return next(iter(self.contents.items()), None)

    def to_document(self, version: Version, registry: Definitions | None = None) -> dict[str, Any]:
        version = Version.from_value(version)
        contents = self.contents or {APPLICATION_JSON: Content()}
        if version == V2_0:
            media_type, content = next(iter(contents.items()))
            headers = {
                name: header.to_document(version, registry)
                for name, header in self.headers.items()
                if not header.is_reference
            }
            example = next(iter(content.examples.values()), None)
            examples = None
            if example is not None:
                examples = {media_type: example.resolve(registry).value}
            result = {
                "description": self.description or "",
                "schema": content.schema.to_document(version, registry),
                "headers": headers or None,
                "examples": examples,
            }
        else:
            result = {
                "summary": self.summary if version >= V3_2 else None,
                "description": self.description or "",
                "headers": project_mapping(self.headers, version, registry),
                "content": {
                    media_type: content.to_document(version, registry, media_type)
                    for media_type, content in contents.items()
                },
                "links": project_mapping(self.links, version, registry),
            }
        return self.with_extensions(result)


class ResponseReference(Reference):
    component = "responses"


def new_response(
    keywords: Mapping[str, Any] | Response | ResponseReference | str | None = None, **kw: Any
) -> Response | ResponseReference:
    """Creates a response, or a reference if ``ref`` is given."""
    if isinstance(keywords, (Response, ResponseReference)):
        return keywords
    if isinstance(keywords, str):
        return ResponseReference(ref=keywords)
    keywords = {**(keywords or {}), **kw}
    if "ref" in keywords:
        return ResponseReference(**keywords)
    return Response(**keywords)
