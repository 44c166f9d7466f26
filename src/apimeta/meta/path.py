"""Path items.

A path item holds what all operations of a path and its sub paths have in
common, e.g. a ``/pets/{id}`` path declaring the ``id`` parameter once::

    definitions.add_path("/pets/{id}", parameters={"id": {"in": "path", "type": "integer"}})
    definitions.add_operation("get_pet", path="/pets/{id}")
    definitions.add_operation("delete_pet", path="/pets/{id}", method="delete")

The attributes of a path apply to the operations below it as well, the
attributes of the nearest path winning.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import Field, field_validator

from ..errors import InvalidArgumentError
from ..status import Status
from .attributes import convert_mapping, convert_sequence
from .extensions import Extensions
from .parameter import Parameter, ParameterReference, new_parameter
from .request_body import RequestBody, RequestBodyReference, new_request_body
from .response import Response, ResponseReference, new_response
from .security import SecurityRequirement
from .server import Server


def normalize_path(name: Any) -> str:
    """Returns ``name`` with a single leading slash and no trailing one."""
    return "/" + str(name or "").strip("/")


def ancestors(name: Any) -> list[str]:
    """Returns the path ``name`` followed by all of its parents.

    Example:
        >>> ancestors("/pets/{id}")
        ['/pets/{id}', '/pets', '/']
    """
    segments = [segment for segment in normalize_path(name).split("/") if segment]
    return ["/" + "/".join(segments[:i]) for i in range(len(segments), -1, -1)]


def _as_parameter(value: Any) -> Parameter | ParameterReference:
    if isinstance(value, (Parameter, ParameterReference)):
        return value
    raise InvalidArgumentError(f"invalid parameter: {value!r}")


def _as_security_requirement(value: Any) -> SecurityRequirement:
    if isinstance(value, SecurityRequirement):
        return value
    if isinstance(value, Mapping):
        return SecurityRequirement(schemes=value)
    raise InvalidArgumentError(f"invalid security requirement: {value!r}")


class PathAttributes(Extensions):
    """The attributes a path shares with its operations.

    Responses are keyed by status: an exact code, a range such as ``"4XX"``
    or ``"default"``.
    """

    summary: str | None = None
    description: str | None = None
    tags: list[str] = Field(default_factory=list)
    parameters: dict[str, Parameter | ParameterReference] = Field(default_factory=dict)
    request_body: RequestBody | RequestBodyReference | None = None
    responses: dict[str, Response | ResponseReference] = Field(default_factory=dict)
    security: list[SecurityRequirement] = Field(default_factory=list)

    # OpenAPI 3.0 and higher
    servers: list[Server] = Field(default_factory=list)

    def __init__(self, **keywords: Any):
        parameters = keywords.pop("parameters", None) or {}
        responses = keywords.pop("responses", None) or {}
        super().__init__(**keywords)
        for parameter_name, parameter in parameters.items():
            if isinstance(parameter, (Parameter, ParameterReference)):
                self._put("parameters", parameter_name, parameter)
            else:
                self.add_parameter(parameter_name, **(parameter or {}))
        for status, response in responses.items():
            self.add_response(status, response)

    @field_validator("tags", mode="before")
    @classmethod
    def _convert_tags(cls, value: Any) -> Any:
        return convert_sequence(value, str)

    @field_validator("parameters", mode="before")
    @classmethod
    def _convert_parameters(cls, value: Any) -> Any:
        return convert_mapping(value, _as_parameter)

    @field_validator("request_body", mode="before")
    @classmethod
    def _convert_request_body(cls, value: Any) -> Any:
        return None if value is None else new_request_body(value)

    @field_validator("responses", mode="before")
    @classmethod
    def _convert_responses(cls, value: Any) -> Any:
        return convert_mapping(value, new_response, key=lambda k: str(Status.from_value(k)))

    @field_validator("security", mode="before")
    @classmethod
    def _convert_security(cls, value: Any) -> Any:
        return convert_sequence(value, _as_security_requirement)

    def add_parameter(self, name: str, **keywords: Any) -> Parameter | ParameterReference:
        return self._put("parameters", name, new_parameter(name, keywords))

    def add_response(self, status: Any = "default", response: Any = None, **keywords: Any) -> Any:
        if response is None or isinstance(response, Mapping):
            response = new_response(response, **keywords)
        return self._put("responses", str(Status.from_value(status)), response)

    def add_security(self, schemes: Mapping[str, list[str]]) -> SecurityRequirement:
        return self._append("security", schemes)


class Path(PathAttributes):
    """A path item, named by its path relative to the server URL."""

    name: str

    def __init__(self, name: Any, **keywords: Any):
        super().__init__(name=normalize_path(name), **keywords)
