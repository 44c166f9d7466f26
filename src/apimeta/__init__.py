"""apimeta: meta models of APIs, value validation and OpenAPI documents.

An API is described once by a :class:`Definitions` registry, either in code
or by a YAML/JSON definitions file. The same description is used to

- wrap and validate request and response values,
- coerce loosely typed request parameters,
- render OpenAPI 2.0, 3.0, 3.1 and 3.2 documents.

Example:
    >>> definitions = Definitions(info={"title": "Pet Store", "version": "1.0"})
    >>> definitions.add_schema(
    ...     "Pet", properties={"name": {"type": "string", "existence": "present"}}
    ... )
    >>> node = wrap({"name": "Rex"}, SchemaReference(ref="Pet"), definitions)
    >>> node.validate(Errors())
    True
    >>> to_document(definitions, "3.1")["openapi"]
    '3.1.1'
"""

from .config import ApiMetaConfigModel, load_config
from .dom import coerce
from .errors import (
    ApiMetaError,
    CastError,
    DiscriminatorError,
    Errors,
    FrozenModificationError,
    InvalidArgumentError,
    InvalidTypeError,
    RecursionLimitError,
    ResponseValidationError,
    UnresolvedReferenceError,
    ValidationIssue,
)
from .loader import definitions_from_dict, load_definitions
from .media import MediaRange, MediaType
from .meta import Definitions, Existence, SchemaReference, new_schema
from .model import ApiModel
from .openapi import Version, to_document
from .request import RequestParameters, render_response
from .status import Status
from .values import wrap

__version__ = "0.1.0"

__all__ = [
    "ApiMetaConfigModel",
    "ApiMetaError",
    "ApiModel",
    "CastError",
    "Definitions",
    "DiscriminatorError",
    "Errors",
    "Existence",
    "FrozenModificationError",
    "InvalidArgumentError",
    "InvalidTypeError",
    "MediaRange",
    "MediaType",
    "RecursionLimitError",
    "RequestParameters",
    "ResponseValidationError",
    "SchemaReference",
    "Status",
    "UnresolvedReferenceError",
    "ValidationIssue",
    "Version",
    "coerce",
    "definitions_from_dict",
    "load_config",
    "load_definitions",
    "new_schema",
    "render_response",
    "to_document",
    "wrap",
]
