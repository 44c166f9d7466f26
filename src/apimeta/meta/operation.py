"""Operations of an API and the callbacks they make."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from http import HTTPStatus
from typing import TYPE_CHECKING, Any, Literal, get_args

from pydantic import Field, field_validator

from ..errors import InvalidArgumentError
from ..openapi.version import V2_0, V3_0, Version
from ..status import Status, select
from .attributes import convert_mapping
from .extensions import Extensions
from .parameter import Parameter, ParameterReference
from .path import PathAttributes
from .request_body import RequestBody, RequestBodyReference
from .response import Response, ResponseReference
from .security import SecurityRequirement

if TYPE_CHECKING:
    from .definitions import Definitions

logger = logging.getLogger(__name__)

Method = Literal["get", "put", "post", "delete", "options", "head", "patch", "trace"]
METHODS: tuple[str, ...] = get_args(Method)


class Operation(PathAttributes):
    """An operation, i.e. an HTTP method on a path.

    Parameters, responses, the request body, security requirements and tags
    not declared by the operation itself are inherited from the path items
    of its path, see :meth:`Definitions.add_path`.
    """

    name: str | None = None
    path: str | None = None
    method: Method = "get"
    deprecated: bool = False

    # OpenAPI 3.0 and higher
    callbacks: dict[str, Callback] = Field(default_factory=dict)

    def __init__(self, name: str | None = None, **keywords: Any):
        if name is not None:
            name = str(name)
            keywords.setdefault("path", f"/{name}")
        super().__init__(name=name, **keywords)

    @field_validator("callbacks", mode="before")
    @classmethod
    def _convert_callbacks(cls, value: Any) -> Any:
        return convert_mapping(value, _as_callback)

    def add_callback(self, name: str, **keywords: Any) -> Callback:
        return self._put("callbacks", name, Callback(**keywords))

    @property
    def statuses(self) -> list[Status]:
        """The statuses of the declared responses, most specific first."""
        return sorted(Status.from_value(key) for key in self.responses)

    # Attributes including the ones inherited from path items

    def effective_parameters(
        self, registry: Definitions | None = None
    ) -> dict[str, Parameter | ParameterReference]:
        if registry is None or self.path is None:
            return dict(self.parameters)
        return {**registry.common_parameters(self.path), **self.parameters}

    def effective_responses(
        self, registry: Definitions | None = None
    ) -> dict[str, Response | ResponseReference]:
        if registry is None or self.path is None:
            return dict(self.responses)
        return {**registry.common_responses(self.path), **self.responses}

    def effective_request_body(
        self, registry: Definitions | None = None
    ) -> RequestBody | RequestBodyReference | None:
        if self.request_body is not None or registry is None or self.path is None:
            return self.request_body
        return registry.common_request_body(self.path)

    def effective_security(self, registry: Definitions | None = None) -> list[SecurityRequirement]:
        if self.security or registry is None or self.path is None:
            return list(self.security)
        return registry.common_security(self.path)

    def effective_tags(self, registry: Definitions | None = None) -> list[str]:
        tags = list(self.tags)
        if registry is not None and self.path is not None:
            tags.extend(tag for tag in registry.common_tags(self.path) if tag not in tags)
        return tags

    def response_for(
        self, code: int | HTTPStatus, registry: Definitions | None = None
    ) -> tuple[Status, Response] | None:
        """Returns the most specific response declared for ``code``."""
        responses = self.effective_responses(registry)
        status = select(sorted(Status.from_value(key) for key in responses), code)
        if status is None:
            return None
        return status, responses[str(status)].resolve(registry)

    def to_document(self, version: Version, registry: Definitions | None = None) -> dict[str, Any]:
        """Returns the operation object.

        The parameters shared by path items are described by the path item
        objects instead, see :meth:`Definitions.to_document`.
        """
        version = Version.from_value(version)
        declared = self.effective_responses(registry)
        responses = {}
        for status in sorted(Status.from_value(key) for key in declared):
            response = declared[str(status)]
            if isinstance(response, ResponseReference) and registry is None:
                responses[str(status)] = response.to_document(version, registry)
            elif not response.resolve(registry).nodoc:
                responses[str(status)] = response.to_document(version, registry)

        result: dict[str, Any] = {
            "operationId": self.name,
            "tags": self.effective_tags(registry) or None,
            "summary": self.summary,
            "description": self.description,
        }
        parameters = []
        for parameter in self.parameters.values():
            if isinstance(parameter, ParameterReference) and registry is None:
                parameters.append(parameter.to_document(version))
            else:
                parameters.extend(parameter.to_documents(version, registry))

        if version == V2_0:
            request_body = self._resolved_request_body(registry)
            if request_body is not None:
                parameters.append(request_body.to_parameter(registry))
            produces = set()
            for response in declared.values():
                if isinstance(response, ResponseReference) and registry is None:
                    continue
                response = response.resolve(registry)
                if not response.nodoc and response.default_media_type:
                    produces.add(response.default_media_type)
            result["consumes"] = (
                [request_body.default_media_range]
                if request_body is not None and request_body.default_media_range
                else None
            )
            result["produces"] = sorted(produces) or None
            result["parameters"] = parameters or None
        else:
            request_body = self.effective_request_body(registry)
            result["servers"] = [server.to_document(version) for server in self.servers] or None
            result["callbacks"] = {
                name: callback.to_document(version, registry)
                for name, callback in self.callbacks.items()
            } or None
            result["parameters"] = parameters or None
            result["requestBody"] = (
                request_body.to_document(version, registry) if request_body else None
            )

        result["responses"] = responses
        result["deprecated"] = self.deprecated or None
        result["security"] = [
            requirement.to_document() for requirement in self.effective_security(registry)
        ] or None
        return self.with_extensions(result)

    def _resolved_request_body(self, registry: Definitions | None) -> RequestBody | None:
        request_body = self.effective_request_body(registry)
        if request_body is None:
            return None
        if isinstance(request_body, RequestBodyReference) and registry is None:
            logger.debug(f"Can't resolve request body of {self.name!r} without definitions")
            return None
        return request_body.resolve(registry)


class Callback(Extensions):
    """The requests an operation makes to the API client, OpenAPI 3.0 and higher.

    Maps runtime expressions such as ``{$request.body#/callbackUrl}`` to the
    operation called back::

        operation.add_callback(
            "on_event",
            operations={"{$request.body#/callbackUrl}": {"method": "post"}},
        )
    """

    operations: dict[str, Operation] = Field(default_factory=dict)

    def __init__(self, **keywords: Any):
        operations = keywords.pop("operations", None) or {}
        super().__init__(**keywords)
        for expression, operation in operations.items():
            if isinstance(operation, Operation):
                self._put("operations", expression, operation)
            else:
                self.add_operation(expression, **(operation or {}))

    def add_operation(self, expression: str, **keywords: Any) -> Operation:
        """Adds the operation called back at ``expression``.

        Raises:
            InvalidArgumentError: If ``expression`` is blank.
        """
        if not expression:
            raise InvalidArgumentError("expression can't be blank")
        keywords.setdefault("path", None)
        return self._put("operations", expression, Operation(**keywords))

    def to_document(
        self, version: Version, registry: Definitions | None = None
    ) -> dict[str, Any] | None:
        version = Version.from_value(version)
        if version < V3_0:
            return None
        result = {
            expression: {operation.method: operation.to_document(version, registry)}
            for expression, operation in self.operations.items()
        }
        return self.with_extensions(result)


def _as_callback(value: Any) -> Callback:
    if isinstance(value, Callback):
        return value
    if isinstance(value, Mapping):
        return Callback(**value)
    raise InvalidArgumentError(f"invalid callback: {value!r}")


Operation.model_rebuild()
