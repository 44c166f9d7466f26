"""Glue between HTTP requests/responses and operations.

:class:`RequestParameters` turns the raw parameters of a request into a
read-only model, :func:`render_response` turns a result object into a
response body::

    params = RequestParameters(request.args, operation, definitions)
    if not params.validate():
        return 400, params.errors.messages()
    pet = find_pet(params.id)
    status, media_type, body = render_response(pet, operation, 200, definitions)
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Mapping
from http import HTTPStatus
from typing import TYPE_CHECKING, Any
from urllib.parse import urlencode

from .dom import coerce
from .errors import DiscriminatorError, Errors, InvalidArgumentError, ResponseValidationError
from .media import MediaType
from .meta.content import APPLICATION_JSON_SEQ
from .meta.existence import Existence
from .meta.schema import ArraySchema, ObjectSchema, new_schema
from .model import ApiModel
from .values import DEFAULT_MAX_DEPTH, JsonValue, NullValue, ObjectValue, to_records, wrap

if TYPE_CHECKING:
    from .meta.definitions import Definitions
    from .meta.operation import Operation

logger = logging.getLogger(__name__)

RECORD_SEPARATOR = "\x1e"


class RequestParameters(ApiModel):
    """The parameters and the request body of a request.

    Path and query parameters are read from ``params``, header parameters
    from ``headers``. If the request body is an object, its properties are
    read from the parameters that aren't assigned to a parameter and become
    attributes of this model.

    Args:
        params: The path, query and body parameters of the request.
        operation: The operation the request is sent to.
        registry: The definitions used to resolve references.
        headers: The request headers.
        media_type: The media type of the request body.
        strong: Whether parameters that can't be mapped to a parameter or a
            property of the request body make the parameters invalid.
        max_depth: The maximum nesting depth of parameter values.
    """

    def __init__(
        self,
        params: Mapping[str, Any] | None,
        operation: Operation,
        registry: Definitions | None = None,
        headers: Mapping[str, Any] | None = None,
        media_type: Any = None,
        strong: bool = False,
        *,
        max_depth: int = DEFAULT_MAX_DEPTH,
    ):
        params = dict(params or {})
        headers = {str(k).lower(): v for k, v in (headers or {}).items()}
        unassigned = dict(params)
        to_be_checked = dict(params) if strong else {}
        cast_errors = Errors()
        attributes: dict[str, JsonValue] = {}

        for name, parameter in operation.effective_parameters(registry).items():
            parameter = parameter.resolve(registry)
            if parameter.location == "header":
                raw = headers.get(parameter.name.lower())
            elif parameter.location == "querystring":
                if isinstance(parameter.schema.resolve(registry), ObjectSchema):
                    raw = dict(unassigned)
                else:
                    raw = urlencode(unassigned, doseq=True)
                for key in list(unassigned):
                    unassigned.pop(key)
                    to_be_checked.pop(key, None)
            else:
                raw = unassigned.pop(parameter.name, None)
            with cast_errors.nested(name):
                attributes[name] = self._coerce(
                    raw, parameter.schema, registry, cast_errors, max_depth
                )

        additional_attributes: dict[str, JsonValue] = {}
        request_body = operation.effective_request_body(registry)
        if request_body is not None:
            request_body = request_body.resolve(registry)
            content = request_body.content_for(media_type)
            schema = content.schema.resolve(registry) if content is not None else None
            if isinstance(schema, ObjectSchema):
                try:
                    body = wrap(unassigned, schema, registry, "request", max_depth=max_depth)
                except DiscriminatorError as e:
                    cast_errors.add_base("invalid_discriminator", reason=str(e))
                else:
                    if isinstance(body, ObjectValue) and body.raw_attributes is not None:
                        attributes.update(body.raw_attributes)
                        additional_attributes = body.raw_additional_attributes
                        for key in additional_attributes:
                            to_be_checked.pop(key, None)

        node = ObjectValue(
            params,
            new_schema(type="object"),
            attributes,
            additional_attributes,
            existence=Existence.NONE,
        )
        super().__init__(node)
        object.__setattr__(self, "_cast_errors", cast_errors)
        object.__setattr__(self, "_to_be_checked", to_be_checked)
        logger.debug(
            f"Wrapped {len(attributes)} parameters of {operation.name!r}, "
            f"{len(additional_attributes)} additional"
        )

    @staticmethod
    def _coerce(
        raw: Any, schema: Any, registry: Any, errors: Errors, max_depth: int
    ) -> JsonValue:
        try:
            return coerce(raw, schema, registry, errors, "request", max_depth=max_depth)
        except DiscriminatorError as e:
            errors.add("invalid_discriminator", reason=str(e))
            return NullValue(schema.resolve(registry), Existence.NONE)

    def validate(self) -> bool:
        """Validates the parameters. The errors found are available by ``errors``.

        A parameter that couldn't be converted is reported once as
        ``invalid_cast`` error.
        """
        errors = Errors()
        valid = self._node.validate(errors)
        cast_paths = {issue.path for issue in self._cast_errors}

        self._errors.clear()
        self._errors.merge(self._cast_errors)
        self._errors.merge(issue for issue in errors if issue.path not in cast_paths)
        checked = self._check_parameters(self._to_be_checked, self.attributes, ())
        return valid and checked and not self._cast_errors

    def _check_parameters(
        self, params: Mapping[str, Any], attributes: Mapping[str, Any], path: tuple[str, ...]
    ) -> bool:
        valid = True
        for key, value in params.items():
            if key in attributes:
                if isinstance(value, Mapping):
                    nested = attributes[key]
                    nested_attributes = nested.attributes if isinstance(nested, ApiModel) else {}
                    if not self._check_parameters(value, nested_attributes, path + (key,)):
                        valid = False
            else:
                self._errors.add_base("forbidden", name=".".join(path + (key,)))
                valid = False
        return valid


def _media_ranges(accept: str | Iterable[str] | None) -> list[str]:
    if accept is None:
        return []
    if isinstance(accept, str):
        return [part.strip() for part in accept.split(",") if part.strip()]
    return list(accept)


def render_response(
    value: Any,
    operation: Operation,
    status: int | HTTPStatus,
    registry: Definitions | None = None,
    accept: str | Iterable[str] | None = None,
    *,
    validate: bool = False,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> tuple[int, str | None, Any]:
    """Renders ``value`` as the body of the response declared for ``status``.

    Args:
        value: The result object, e.g. a mapping, a domain object or a
            pandas ``DataFrame``.
        operation: The operation the response belongs to.
        status: The concrete status code of the response.
        registry: The definitions used to resolve references.
        accept: The value of the ``Accept`` header or a list of media ranges.
        validate: Whether to validate the body before rendering it.
        max_depth: The maximum nesting depth of the body.

    Returns:
        The status code, the media type and the body. The body is a
        JSON-ready value, or a text in JSON text sequence format if the
        media type is ``application/json-seq``.

    Raises:
        InvalidArgumentError: If no response is declared for ``status``.
        ResponseValidationError: If ``validate`` is set and the body is
            invalid.
    """
    code = int(status)
    declared = operation.response_for(code, registry)
    if declared is None:
        raise InvalidArgumentError(
            f"operation {operation.name!r} has no response for status {code}"
        )
    _, response = declared
    selected = response.media_type_and_content_for(_media_ranges(accept))
    if selected is None:
        return code, None, None

    media_type, content = selected
    logger.debug(f"Rendering {code} response of {operation.name!r} as {media_type}")
    schema = content.schema.resolve(registry)
    if str(MediaType.from_value(media_type)) == APPLICATION_JSON_SEQ:
        if isinstance(schema, ArraySchema) and schema.items is not None and value is not None:
            items = [
                _render(item, schema.items, registry, validate, max_depth)
                for item in to_records(value)
            ]
        else:
            items = [_render(value, content.schema, registry, validate, max_depth)]
        body = "".join(f"{RECORD_SEPARATOR}{json.dumps(item)}\n" for item in items)
        return code, media_type, body
    return code, media_type, _render(value, content.schema, registry, validate, max_depth)


def _render(value: Any, schema: Any, registry: Any, validate: bool, max_depth: int) -> Any:
    node = wrap(value, schema, registry, "response", max_depth=max_depth)
    if validate:
        errors = Errors()
        if not node.validate(errors):
            raise ResponseValidationError(errors)
    return node.serializable_value(jsonify_values=True)
