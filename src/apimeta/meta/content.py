"""Contents of request bodies and responses."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pydantic import Field, field_validator

from ..openapi.projector import project_mapping
from ..openapi.version import V3_2, Version
from .attributes import convert_mapping
from .example import Example, ExampleReference, new_example
from .extensions import Extensions
from .schema import ArraySchema, Schema, SchemaReference, new_schema

if TYPE_CHECKING:
    from .definitions import Definitions

APPLICATION_JSON_SEQ = "application/json-seq"

_MISSING = object()


class Content(Extensions):
    """The schema and examples of a request body or response content.

    All keywords except ``examples``, ``example`` and ``openapi_extensions``
    describe the schema, e.g. ``Content(type="array", items={"type": "string"})``
    or ``Content(schema="Pet")``.
    """

    schema_: Schema | SchemaReference = Field(alias="schema")
    examples: dict[str, Example | ExampleReference] = Field(default_factory=dict)

    def __init__(self, **keywords: Any):
        example = keywords.pop("example", _MISSING)
        examples = keywords.pop("examples", None)
        extensions = keywords.pop("openapi_extensions", None)
        super().__init__(
            schema=new_schema(keywords), examples=examples, openapi_extensions=extensions
        )
        if example is not _MISSING:
            self.add_example("default", value=example)

    @field_validator("examples", mode="before")
    @classmethod
    def _convert_examples(cls, value: Any) -> Any:
        return convert_mapping(value, new_example)

    @property
    def schema(self) -> Schema | SchemaReference:
        return self.schema_

    def add_example(self, name: str = "default", **keywords: Any) -> Any:
        return self._put("examples", name, keywords)

    def to_document(
        self, version: Version, registry: Definitions | None = None, media_type: Any = None
    ) -> dict[str, Any]:
        version = Version.from_value(version)
        result: dict[str, Any] = {}
        schema = self.schema
        if (
            version >= V3_2
            and str(media_type) == APPLICATION_JSON_SEQ
            and isinstance(schema, ArraySchema)
            and schema.items is not None
        ):
            # sequential media types describe single items
            result["itemSchema"] = schema.items.to_document(version, registry)
        else:
            result["schema"] = schema.to_document(version, registry)
        result["examples"] = project_mapping(self.examples, version, registry)
        return self.with_extensions(result)
