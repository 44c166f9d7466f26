"""Parameters of operations.

Parameters are passed by path, query string or header. Object-valued query
parameters are exploded into one document parameter per property, e.g. a
parameter ``page`` with the properties ``number`` and ``size`` is described
by the parameters ``page[number]`` and ``page[size]``.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Literal, get_args

from pydantic import Field, field_validator

from ..errors import InvalidArgumentError, RecursionLimitError
from ..openapi.projector import project_mapping
from ..openapi.version import V2_0, V3_2, Version
from .attributes import convert_mapping
from .existence import Existence
from .example import Example, ExampleReference, new_example
from .extensions import Extensions
from .reference import Reference
from .schema import ArraySchema, ObjectSchema, Schema, SchemaReference, existence_of, new_schema

if TYPE_CHECKING:
    from .definitions import Definitions

logger = logging.getLogger(__name__)

Location = Literal["header", "path", "query", "querystring"]
LOCATIONS: tuple[str, ...] = get_args(Location)

_MISSING = object()


def _resolved(schema: Schema | SchemaReference, registry: Definitions | None) -> Any:
    if isinstance(schema, SchemaReference) and registry is None:
        return schema
    return schema.resolve(registry)


class Parameter(Extensions):
    """A parameter of an operation.

    All keywords that aren't attributes of the parameter describe its
    schema::

        Parameter("id", location="path", type="integer", minimum=1)
        Parameter("page", schema="Page")
    """

    extra_keywords = ("example",)

    name: str
    location: Location = "query"
    description: str | None = None
    deprecated: bool = False

    # Describes complex parameters by a media type, OpenAPI 3.0 and higher
    content_type: str | None = None

    examples: dict[str, Example | ExampleReference] = Field(default_factory=dict)
    schema_: Schema | SchemaReference = Field(alias="schema")

    def __init__(self, name: str, **keywords: Any):
        if not name:
            raise InvalidArgumentError("parameter name can't be blank")
        if "in" in keywords:
            keywords["location"] = keywords.pop("in")
        own, schema_keywords = self.split_keywords(keywords)
        example = own.pop("example", _MISSING)
        schema = own.pop("schema", None)
        if schema is not None:
            schema_keywords["schema"] = schema
        elif "ref" not in schema_keywords:
            schema_keywords.setdefault("type", "string")
        super().__init__(name=str(name), schema=new_schema(schema_keywords), **own)
        if example is not _MISSING:
            self.add_example("default", value=example)

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

    def add_example(self, name: str = "default", **keywords: Any) -> Any:
        return self._put("examples", name, keywords)

    def resolve(self, registry: Definitions | None = None) -> Parameter:
        return self

    def is_required(self, registry: Definitions | None = None) -> bool:
        return self.location == "path" or existence_of(self.schema, registry) > Existence.NONE

    def allows_empty_value(self, registry: Definitions | None = None) -> bool:
        return self.location == "query" and existence_of(self.schema, registry) < Existence.PRESENT

    def to_document(
        self, version: Version, registry: Definitions | None = None
    ) -> dict[str, Any] | None:
        """Returns the parameter object, not exploded."""
        version = Version.from_value(version)
        content_type = self.content_type
        if content_type is None and self.location == "querystring":
            content_type = "text/plain"
        return self._parameter_object(
            self.name,
            _resolved(self.schema, registry),
            version,
            registry,
            location=self.location,
            content_type=content_type,
            description=self.description,
            required=self.is_required(registry),
            deprecated=self.deprecated,
            allow_empty_value=self.allows_empty_value(registry),
            examples=self.examples,
        )

    def to_documents(
        self, version: Version, registry: Definitions | None = None
    ) -> list[dict[str, Any]]:
        """Returns the parameter objects describing this parameter.

        Object-valued parameters are exploded into one parameter object per
        property. From OpenAPI 3.2 on, ``querystring`` parameters describe
        the whole query string instead.
        """
        version = Version.from_value(version)
        is_querystring = self.location == "querystring"
        schema = _resolved(self.schema, registry)

        if isinstance(schema, ObjectSchema) and (version < V3_2 or not is_querystring):
            documents = self._explode(
                None if is_querystring else self.name,
                schema,
                version,
                registry,
                location="query" if is_querystring else self.location,
                required=self.is_required(registry),
                deprecated=self.deprecated,
            )
        else:
            documents = [self.to_document(version, registry)]
        return [document for document in documents if document is not None]

    def _explode(
        self,
        name: str | None,
        schema: ObjectSchema,
        version: Version,
        registry: Definitions | None,
        *,
        location: str,
        required: bool,
        deprecated: bool,
        path: tuple[ObjectSchema, ...] = (),
    ) -> list[dict[str, Any] | None]:
        if any(schema is seen for seen in path):
            raise RecursionLimitError(
                f"can't explode parameter {self.name!r}, {name!r} refers to itself"
            )
        documents: list[dict[str, Any] | None] = []
        for prop in schema.resolve_properties(registry, "request").values():
            property_schema = _resolved(prop.schema, registry)
            parameter_name = f"{name}[{prop.name}]" if name else prop.name
            property_required = required and prop.is_required(registry)
            property_deprecated = deprecated or prop.deprecated or bool(
                getattr(property_schema, "deprecated", False)
            )
            if isinstance(property_schema, ObjectSchema):
                documents.extend(
                    self._explode(
                        parameter_name,
                        property_schema,
                        version,
                        registry,
                        location=location,
                        required=property_required,
                        deprecated=property_deprecated,
                        path=path + (schema,),
                    )
                )
            else:
                documents.append(
                    self._parameter_object(
                        parameter_name,
                        property_schema,
                        version,
                        registry,
                        location=location,
                        description=getattr(property_schema, "description", None),
                        required=property_required,
                        deprecated=property_deprecated,
                        allow_empty_value=existence_of(prop.schema, registry) < Existence.PRESENT,
                    )
                )
        return documents

    def _parameter_object(
        self,
        name: str,
        schema: Any,
        version: Version,
        registry: Definitions | None,
        *,
        location: str,
        description: str | None,
        required: bool,
        deprecated: bool,
        allow_empty_value: bool,
        content_type: str | None = None,
        examples: Mapping[str, Any] | None = None,
    ) -> dict[str, Any] | None:
        if location == "querystring" and version < V3_2:
            return None
        if isinstance(schema, ObjectSchema) and version == V2_0:
            raise InvalidArgumentError(f"OpenAPI 2.0 doesn't allow object parameters in {location}")
        if isinstance(schema, ArraySchema):
            name = f"{name}[]"

        result: dict[str, Any] = {
            "name": name,
            "in": location,
            "description": description,
            "required": required or None,
            "allowEmptyValue": allow_empty_value or None,
        }
        if version == V2_0:
            result["collectionFormat"] = "multi" if isinstance(schema, ArraySchema) else None
            result.update(schema.to_document(version, registry))
        else:
            schema_document = schema.to_document(version, registry)
            schema_document.pop("deprecated", None)
            example_documents = project_mapping(examples or {}, version, registry)
            result["deprecated"] = deprecated or None
            if content_type is None:
                result["schema"] = schema_document
                result["examples"] = example_documents
            else:
                media_type_object = {"schema": schema_document}
                if example_documents:
                    media_type_object["examples"] = example_documents
                result["content"] = {content_type: media_type_object}
        return self.with_extensions(result)


class ParameterReference(Reference):
    """Refers to a reusable parameter."""

    component = "parameters"

    def to_documents(
        self, version: Version, registry: Definitions | None = None
    ) -> list[dict[str, Any]]:
        """Returns the reference object or, if the referred parameter is
        object-valued, its exploded parameter objects.
        """
        version = Version.from_value(version)
        parameter = self.resolve(registry)
        if isinstance(_resolved(parameter.schema, registry), ObjectSchema):
            logger.debug(f"Exploding referred parameter {self.ref!r}")
            return parameter.to_documents(version, registry)
        return [self.to_document(version, registry)]


def new_parameter(
    name: str, keywords: Mapping[str, Any] | None = None, **kw: Any
) -> Parameter | ParameterReference:
    """Creates a parameter, or a parameter reference if ``ref`` is given."""
    keywords = {**(keywords or {}), **kw}
    if "ref" in keywords:
        return ParameterReference(**keywords)
    return Parameter(keywords.pop("name", None) or name, **keywords)
