"""Meta models describing an API.

Meta models are built from keywords, are frozen once the owning
:class:`Definitions` registry is frozen and know how to project themselves
into every supported OpenAPI version.
"""

from .attributes import MetaModel
from .content import Content
from .defaults import Defaults
from .definitions import Definitions
from .example import Example, ExampleReference, new_example
from .existence import Existence
from .extensions import Extensions
from .info import Contact, Info, License, Tag
from .link import Link
from .operation import Callback, Operation
from .parameter import Parameter, ParameterReference, new_parameter
from .path import Path, PathAttributes, ancestors, normalize_path
from .reference import Reference
from .request_body import RequestBody, RequestBodyReference, new_request_body
from .response import (
    Header,
    HeaderReference,
    Response,
    ResponseReference,
    new_header,
    new_response,
)
from .schema import (
    ArraySchema,
    BooleanSchema,
    Discriminator,
    IntegerSchema,
    NumberSchema,
    NumericSchema,
    ObjectSchema,
    Property,
    Schema,
    SchemaKind,
    SchemaReference,
    StringSchema,
    existence_of,
    new_schema,
)
from .security import (
    ApiKeyScheme,
    HttpBasicScheme,
    HttpBearerScheme,
    HttpScheme,
    MutualTlsScheme,
    OAuth2Scheme,
    OAuthFlow,
    OpenIdConnectScheme,
    SecurityRequirement,
    SecurityScheme,
    new_security_scheme,
)
from .server import Server, ServerVariable

__all__ = [
    "ApiKeyScheme",
    "ArraySchema",
    "BooleanSchema",
    "Callback",
    "Contact",
    "Content",
    "Defaults",
    "Definitions",
    "Discriminator",
    "Example",
    "ExampleReference",
    "Existence",
    "Extensions",
    "Header",
    "HeaderReference",
    "HttpBasicScheme",
    "HttpBearerScheme",
    "HttpScheme",
    "Info",
    "IntegerSchema",
    "License",
    "Link",
    "MetaModel",
    "MutualTlsScheme",
    "NumberSchema",
    "NumericSchema",
    "OAuth2Scheme",
    "OAuthFlow",
    "ObjectSchema",
    "OpenIdConnectScheme",
    "Operation",
    "Parameter",
    "ParameterReference",
    "Path",
    "PathAttributes",
    "Property",
    "Reference",
    "RequestBody",
    "RequestBodyReference",
    "Response",
    "ResponseReference",
    "Schema",
    "SchemaKind",
    "SchemaReference",
    "SecurityRequirement",
    "SecurityScheme",
    "Server",
    "ServerVariable",
    "StringSchema",
    "Tag",
    "ancestors",
    "existence_of",
    "new_example",
    "new_header",
    "new_parameter",
    "new_request_body",
    "new_response",
    "new_schema",
    "new_security_scheme",
    "normalize_path",
]
