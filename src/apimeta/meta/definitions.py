"""The definitions registry.

A :class:`Definitions` instance owns all named objects of an API: schemas,
parameters, request bodies, responses, examples, headers, security schemes
and operations. It is built once at startup and frozen afterwards::

    definitions = Definitions(info={"title": "Pet Store", "version": "1.0"})
    definitions.add_schema("Pet", properties={"name": {"type": "string"}})
    definitions.add_operation(
        "get_pet",
        path="/pets/{id}",
        parameters={"id": {"location": "path", "type": "integer"}},
        responses={200: {"schema": "Pet"}},
    )
    definitions.freeze()

    document = to_document(definitions, "3.1")

After freezing, the registry is read-only and can be shared between
threads.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any
from urllib.parse import urlsplit

from pydantic import Field, field_validator

from ..errors import InvalidArgumentError, UnresolvedReferenceError
from ..openapi.projector import compact, project_mapping
from ..openapi.version import V2_0, Version
from .attributes import convert_mapping, convert_sequence
from .defaults import Defaults
from .example import Example, ExampleReference, new_example
from .extensions import Extensions
from .info import Info, Tag
from .operation import Operation
from .parameter import Parameter, ParameterReference, new_parameter
from .path import Path, ancestors, normalize_path
from .request_body import RequestBody, RequestBodyReference, new_request_body
from .response import (
    Header,
    HeaderReference,
    Response,
    ResponseReference,
    new_header,
    new_response,
)
from .schema import ObjectSchema, Schema, SchemaKind, SchemaReference, new_schema
from .security import SecurityRequirement, SecurityScheme, new_security_scheme
from .server import Server

logger = logging.getLogger(__name__)

_KINDS = tuple(kind.value for kind in SchemaKind if kind is not SchemaKind.REFERENCE)


def _as_parameter(value: Any) -> Parameter | ParameterReference:
    if isinstance(value, (Parameter, ParameterReference)):
        return value
    raise InvalidArgumentError(f"invalid parameter: {value!r}")


def _as_security_scheme(value: Any) -> SecurityScheme:
    if isinstance(value, SecurityScheme):
        return value
    if isinstance(value, Mapping):
        return new_security_scheme(value)
    raise InvalidArgumentError(f"invalid security scheme: {value!r}")


def _as_security_requirement(value: Any) -> SecurityRequirement:
    if isinstance(value, SecurityRequirement):
        return value
    return SecurityRequirement(schemes=value)


def _as_path(value: Any) -> Path:
    if isinstance(value, Path):
        return value
    raise InvalidArgumentError(f"invalid path: {value!r}")


def _as_operation(value: Any) -> Operation:
    if isinstance(value, Operation):
        return value
    raise InvalidArgumentError(f"invalid operation: {value!r}")


class Definitions(Extensions):
    """Owns the named objects of an API and resolves references to them."""

    info: Info | None = None
    servers: list[Server] = Field(default_factory=list)
    tags: list[Tag] = Field(default_factory=list)
    security: list[SecurityRequirement] = Field(default_factory=list)

    schemas: dict[str, Schema | SchemaReference] = Field(default_factory=dict)
    parameters: dict[str, Parameter | ParameterReference] = Field(default_factory=dict)
    request_bodies: dict[str, RequestBody | RequestBodyReference] = Field(default_factory=dict)
    responses: dict[str, Response | ResponseReference] = Field(default_factory=dict)
    examples: dict[str, Example | ExampleReference] = Field(default_factory=dict)
    headers: dict[str, Header | HeaderReference] = Field(default_factory=dict)
    security_schemes: dict[str, SecurityScheme] = Field(default_factory=dict)
    paths: dict[str, Path] = Field(default_factory=dict)
    operations: dict[str, Operation] = Field(default_factory=dict)

    defaults: dict[str, Defaults] = Field(default_factory=dict)

    @field_validator("security", mode="before")
    @classmethod
    def _convert_security(cls, value: Any) -> Any:
        return convert_sequence(value, _as_security_requirement)

    @field_validator("schemas", mode="before")
    @classmethod
    def _convert_schemas(cls, value: Any) -> Any:
        return convert_mapping(value, new_schema)

    @field_validator("parameters", mode="before")
    @classmethod
    def _convert_parameters(cls, value: Any) -> Any:
        return convert_mapping(value, _as_parameter)

    @field_validator("request_bodies", mode="before")
    @classmethod
    def _convert_request_bodies(cls, value: Any) -> Any:
        return convert_mapping(value, new_request_body)

    @field_validator("responses", mode="before")
    @classmethod
    def _convert_responses(cls, value: Any) -> Any:
        return convert_mapping(value, new_response)

    @field_validator("examples", mode="before")
    @classmethod
    def _convert_examples(cls, value: Any) -> Any:
        return convert_mapping(value, new_example)

    @field_validator("headers", mode="before")
    @classmethod
    def _convert_headers(cls, value: Any) -> Any:
        return convert_mapping(value, new_header)

    @field_validator("security_schemes", mode="before")
    @classmethod
    def _convert_security_schemes(cls, value: Any) -> Any:
        return convert_mapping(value, _as_security_scheme)

    @field_validator("paths", mode="before")
    @classmethod
    def _convert_paths(cls, value: Any) -> Any:
        return convert_mapping(value, _as_path, key=normalize_path)

    @field_validator("operations", mode="before")
    @classmethod
    def _convert_operations(cls, value: Any) -> Any:
        return convert_mapping(value, _as_operation)

    # Adding objects

    def add_schema(self, name: str, **keywords: Any) -> Schema | SchemaReference:
        return self._put("schemas", name, new_schema(keywords))

    def add_parameter(self, name: str, **keywords: Any) -> Parameter | ParameterReference:
        return self._put("parameters", name, new_parameter(name, keywords))

    def add_request_body(self, name: str, **keywords: Any) -> RequestBody | RequestBodyReference:
        return self._put("request_bodies", name, new_request_body(keywords))

    def add_response(self, name: str, **keywords: Any) -> Response | ResponseReference:
        return self._put("responses", name, new_response(keywords))

    def add_example(self, name: str, **keywords: Any) -> Example | ExampleReference:
        return self._put("examples", name, new_example(keywords))

    def add_header(self, name: str, **keywords: Any) -> Header | HeaderReference:
        return self._put("headers", name, new_header(keywords))

    def add_security_scheme(self, name: str, **keywords: Any) -> SecurityScheme:
        return self._put("security_schemes", name, new_security_scheme(keywords))

    def add_operation(self, name: str, **keywords: Any) -> Operation:
        if not name:
            raise InvalidArgumentError("operation name can't be blank")
        return self._put("operations", name, Operation(name, **keywords))

    def add_path(self, name: str, **keywords: Any) -> Path:
        """Registers the attributes shared by the operations of path ``name``.

        The attributes also apply to the operations of all sub paths.
        """
        path = Path(name, **keywords)
        return self._put("paths", path.name, path)

    def add_default(self, kind: str, **keywords: Any) -> Defaults:
        """Registers the values standing in for absent values of ``kind``.

        Args:
            kind: A schema kind, e.g. ``"array"``.
            **keywords: ``within_requests`` and ``within_responses``.
        """
        if kind not in _KINDS:
            raise InvalidArgumentError(
                f"invalid default type: {kind!r}, valid types are: {', '.join(_KINDS)}"
            )
        return self._put("defaults", kind, Defaults(**keywords))

    def add_server(self, **keywords: Any) -> Server:
        return self._append("servers", Server(**keywords))

    def add_tag(self, **keywords: Any) -> Tag:
        return self._append("tags", Tag(**keywords))

    def add_security_requirement(self, schemes: Mapping[str, Any]) -> SecurityRequirement:
        return self._append("security", schemes)

    # Looking up objects

    def find(self, component: str, name: Any) -> Any:
        """Returns the object named ``name`` of ``component`` or None."""
        if name is None:
            return None
        return getattr(self, component).get(str(name))

    def resolve(self, component: str, name: Any) -> Any:
        """Returns the object named ``name`` of ``component``.

        Raises:
            UnresolvedReferenceError: If there is no such object.
        """
        value = self.find(component, name)
        if value is None:
            logger.debug(f"Can't resolve {component} reference {name!r}")
            raise UnresolvedReferenceError(
                str(name), f"{component} reference can't be resolved: {name!r}"
            )
        return value

    def find_schema(self, name: Any) -> Schema | SchemaReference | None:
        return self.find("schemas", name)

    def find_parameter(self, name: Any) -> Parameter | ParameterReference | None:
        return self.find("parameters", name)

    def find_request_body(self, name: Any) -> RequestBody | RequestBodyReference | None:
        return self.find("request_bodies", name)

    def find_response(self, name: Any) -> Response | ResponseReference | None:
        return self.find("responses", name)

    def find_example(self, name: Any) -> Example | ExampleReference | None:
        return self.find("examples", name)

    def find_security_scheme(self, name: Any) -> SecurityScheme | None:
        return self.find("security_schemes", name)

    def find_operation(self, name: Any = None) -> Operation | None:
        """Returns the operation named ``name``.

        If no name is given, the one and only operation is returned.
        """
        if name is None:
            if len(self.operations) == 1:
                return next(iter(self.operations.values()))
            return None
        return self.find("operations", name)

    def resolve_schema(self, name: Any) -> Schema:
        return SchemaReference(ref=str(name)).resolve(self)

    def resolve_parameter(self, name: Any) -> Parameter:
        return ParameterReference(ref=str(name)).resolve(self)

    def resolve_request_body(self, name: Any) -> RequestBody:
        return RequestBodyReference(ref=str(name)).resolve(self)

    def resolve_response(self, name: Any) -> Response:
        return ResponseReference(ref=str(name)).resolve(self)

    def resolve_operation(self, name: Any) -> Operation:
        return self.resolve("operations", name)

    def default_value(self, kind: str, context: str | None = None) -> Any:
        """Returns the value standing in for an absent value of ``kind``."""
        defaults = self.defaults.get(kind)
        return defaults.value(context) if defaults is not None else None

    # Attributes shared by path items

    def find_path(self, name: Any) -> Path | None:
        return self.paths.get(normalize_path(name))

    def path_items(self, path: Any) -> list[Path]:
        """Returns the path items of ``path`` and its parents, nearest first."""
        return [self.paths[name] for name in ancestors(path) if name in self.paths]

    def common_parameters(self, path: Any) -> dict[str, Parameter | ParameterReference]:
        parameters: dict[str, Parameter | ParameterReference] = {}
        for item in reversed(self.path_items(path)):
            parameters.update(item.parameters)
        return parameters

    def common_responses(self, path: Any) -> dict[str, Response | ResponseReference]:
        responses: dict[str, Response | ResponseReference] = {}
        for item in reversed(self.path_items(path)):
            responses.update(item.responses)
        return responses

    def common_request_body(self, path: Any) -> RequestBody | RequestBodyReference | None:
        return next(
            (item.request_body for item in self.path_items(path) if item.request_body), None
        )

    def common_servers(self, path: Any) -> list[Server]:
        return next((list(item.servers) for item in self.path_items(path) if item.servers), [])

    def common_summary(self, path: Any) -> str | None:
        return next((item.summary for item in self.path_items(path) if item.summary), None)

    def common_description(self, path: Any) -> str | None:
        return next(
            (item.description for item in self.path_items(path) if item.description), None
        )

    def common_security(self, path: Any) -> list[SecurityRequirement]:
        requirements: list[SecurityRequirement] = []
        for item in self.path_items(path):
            requirements.extend(r for r in item.security if r not in requirements)
        return requirements

    def common_tags(self, path: Any) -> list[str]:
        tags: list[str] = []
        for item in self.path_items(path):
            tags.extend(tag for tag in item.tags if tag not in tags)
        return tags

    # Freezing

    def before_freeze(self) -> None:
        for name, schema in self.schemas.items():
            if isinstance(schema, ObjectSchema) and schema.discriminator is not None:
                discriminator = schema.discriminator
                variants = list(discriminator.mappings.values())
                if discriminator.default_mapping is not None:
                    variants.append(discriminator.default_mapping)
                for variant in variants:
                    if variant not in self.schemas:
                        raise UnresolvedReferenceError(
                            variant, f"variant {variant!r} of schema {name!r} isn't defined"
                        )

    def freeze_nested(self) -> None:
        logger.debug(
            f"Freezing definitions: {len(self.schemas)} schemas, "
            f"{len(self.parameters)} parameters, {len(self.request_bodies)} request bodies, "
            f"{len(self.responses)} responses, {len(self.paths)} paths, "
            f"{len(self.operations)} operations"
        )

    # Projection

    def to_document(self, version: Version, registry: Definitions | None = None) -> dict[str, Any]:
        """Returns the complete API document for ``version``."""
        version = Version.from_value(version)
        operations = list(self.operations.values())

        paths: dict[str, dict[str, Any]] = {}
        for operation in operations:
            path_item = paths.get(operation.path)
            if path_item is None:
                path_item = paths[operation.path] = self._path_item(operation.path, version)
            path_item[operation.method] = operation.to_document(version, self)

        responses = {
            name: response
            for name, response in self.responses.items()
            if not response.resolve(self).nodoc
        }
        info = (self.info or Info()).to_document(version)
        security = [requirement.to_document() for requirement in self.security] or None
        tags = [tag.to_document(version) for tag in self.tags] or None

        if version == V2_0:
            server = self.servers[0] if self.servers else None
            url = urlsplit(server.url) if server is not None and server.url else None
            result: dict[str, Any] = {
                "swagger": "2.0",
                "info": info,
                "host": (url.netloc or None) if url else None,
                "basePath": (url.path or None) if url else None,
                "schemes": [url.scheme] if url and url.scheme else None,
                "consumes": self._media_types(
                    request_body.resolve(self).default_media_range
                    for request_body in (o.effective_request_body(self) for o in operations)
                    if request_body is not None
                ),
                "produces": self._media_types(
                    response.default_media_type
                    for operation in operations
                    for response in (
                        r.resolve(self) for r in operation.effective_responses(self).values()
                    )
                    if not response.nodoc
                ),
                "paths": paths or None,
                "definitions": project_mapping(self.schemas, version, self),
                "parameters": project_mapping(self.parameters, version, self),
                "responses": project_mapping(responses, version, self),
                "securityDefinitions": project_mapping(self.security_schemes, version, self),
            }
        else:
            components = {
                "schemas": project_mapping(self.schemas, version, self),
                "responses": project_mapping(responses, version, self),
                "parameters": project_mapping(self.parameters, version, self),
                "examples": project_mapping(self.examples, version, self),
                "requestBodies": project_mapping(self.request_bodies, version, self),
                "headers": project_mapping(self.headers, version, self),
                "securitySchemes": project_mapping(self.security_schemes, version, self),
            }
            components = {key: value for key, value in components.items() if value is not None}
            result = {
                "openapi": str(version),
                "info": info,
                "servers": [server.to_document(version) for server in self.servers] or None,
                "paths": paths or None,
                "components": components or None,
            }
        result["security"] = security
        result["tags"] = tags
        return self.with_extensions(result)

    def _path_item(self, path: str, version: Version) -> dict[str, Any]:
        """Returns the path item object of ``path`` without its operations."""
        parameters = []
        for parameter in self.common_parameters(path).values():
            parameters.extend(parameter.to_documents(version, self))
        result: dict[str, Any] = {"parameters": parameters or None}
        if version > V2_0:
            result["summary"] = self.common_summary(path)
            result["description"] = self.common_description(path)
            result["servers"] = [
                server.to_document(version) for server in self.common_servers(path)
            ] or None
        return compact(result)

    @staticmethod
    def _media_types(media_types: Any) -> list[str] | None:
        return sorted({media_type for media_type in media_types if media_type}) or None
