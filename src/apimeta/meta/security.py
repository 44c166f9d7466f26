"""Security schemes and security requirements.

Only the shapes the schemes contribute to documents are modeled here;
verifying credentials is up to the application.

Some schemes don't exist in every OpenAPI version. Their ``to_document``
returns None for such versions, e.g. bearer authentication is omitted from
OpenAPI 2.0 documents.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, ClassVar, Literal

from pydantic import Field, field_validator

from ..errors import InvalidArgumentError, InvalidTypeError
from ..openapi.version import V3_0, V3_1, V3_2, Version
from ..utils import camelize
from .attributes import MetaModel, convert_mapping
from .extensions import Extensions

OAUTH_FLOWS = (
    "authorization_code",
    "client_credentials",
    "device_authorization",
    "implicit",
    "password",
)

# The flow names of OpenAPI 2.0
_FLOWS_V2 = {
    "authorization_code": "accessCode",
    "client_credentials": "application",
    "implicit": "implicit",
    "password": "password",
}


class SecurityScheme(Extensions):
    """Base class of all security schemes."""

    type_name: ClassVar[str]

    description: str | None = None

    # OpenAPI 3.2 and higher
    deprecated: bool = False

    def base_fields(self, type_: str, version: Version) -> dict[str, Any]:
        return {
            "type": type_,
            "description": self.description,
            "deprecated": True if self.deprecated and version >= V3_2 else None,
        }

    def to_document(self, version: Version, registry: Any = None) -> dict[str, Any] | None:
        raise NotImplementedError


class ApiKeyScheme(SecurityScheme):
    type_name = "api_key"

    name: str | None = None
    location: Literal["cookie", "header", "query"] | None = None

    def __init__(self, **keywords: Any):
        if "in" in keywords:
            keywords["location"] = keywords.pop("in")
        super().__init__(**keywords)

    def to_document(self, version: Version, registry: Any = None) -> dict[str, Any]:
        version = Version.from_value(version)
        result = self.base_fields("apiKey", version)
        result["name"] = self.name
        result["in"] = self.location
        return self.with_extensions(result)


class HttpBasicScheme(SecurityScheme):
    type_name = "basic"

    def to_document(self, version: Version, registry: Any = None) -> dict[str, Any]:
        version = Version.from_value(version)
        if version < V3_0:
            return self.with_extensions(self.base_fields("basic", version))
        result = self.base_fields("http", version)
        result["scheme"] = "basic"
        return self.with_extensions(result)


class HttpBearerScheme(SecurityScheme):
    """Bearer authentication, described by OpenAPI 3.0 and higher."""

    type_name = "bearer"

    bearer_format: str | None = None

    def to_document(self, version: Version, registry: Any = None) -> dict[str, Any] | None:
        version = Version.from_value(version)
        if version < V3_0:
            return None
        result = self.base_fields("http", version)
        result["scheme"] = "bearer"
        result["bearerFormat"] = self.bearer_format
        return self.with_extensions(result)


class HttpScheme(SecurityScheme):
    """Any other HTTP authentication scheme, OpenAPI 3.0 and higher."""

    type_name = "http"

    scheme: str | None = None

    def to_document(self, version: Version, registry: Any = None) -> dict[str, Any] | None:
        version = Version.from_value(version)
        if version < V3_0:
            return None
        result = self.base_fields("http", version)
        result["scheme"] = self.scheme
        return self.with_extensions(result)


class OAuthFlow(Extensions):
    authorization_url: str | None = None
    token_url: str | None = None

    # OpenAPI 3.0 and higher
    refresh_url: str | None = None

    # Maps scope names to descriptions
    scopes: dict[str, str] = Field(default_factory=dict)

    @field_validator("scopes", mode="before")
    @classmethod
    def _convert_scopes(cls, value: Any) -> Any:
        return convert_mapping(value, lambda description: str(description or ""))

    def to_document(self, version: Version, registry: Any = None) -> dict[str, Any]:
        version = Version.from_value(version)
        return self.with_extensions(
            {
                "authorizationUrl": self.authorization_url,
                "tokenUrl": self.token_url,
                "refreshUrl": self.refresh_url if version >= V3_0 else None,
                "scopes": dict(self.scopes),
            }
        )


class OAuth2Scheme(SecurityScheme):
    """OAuth2.

    OpenAPI 2.0 documents describe a single flow only; schemes with more
    than one flow are described without any flow. The device authorization
    flow and ``oauth2_metadata_url`` apply to OpenAPI 3.2 and higher.
    """

    type_name = "oauth2"

    oauth_flows: dict[str, OAuthFlow] = Field(default_factory=dict)
    oauth2_metadata_url: str | None = None

    def __init__(self, **keywords: Any):
        flows = keywords.pop("oauth_flows", None) or keywords.pop("flows", None) or {}
        super().__init__(**keywords)
        for name, flow in flows.items():
            self.add_oauth_flow(name, flow)

    def add_oauth_flow(self, name: str, flow: OAuthFlow | Mapping[str, Any]) -> OAuthFlow:
        if name not in OAUTH_FLOWS:
            raise InvalidArgumentError(
                f"invalid OAuth flow: {name!r}, valid flows are: {', '.join(OAUTH_FLOWS)}"
            )
        return self._put("oauth_flows", name, flow)

    def to_document(self, version: Version, registry: Any = None) -> dict[str, Any]:
        version = Version.from_value(version)
        flows = dict(self.oauth_flows)
        if version < V3_2:
            flows.pop("device_authorization", None)

        result = self.base_fields("oauth2", version)
        if version >= V3_0:
            result["flows"] = {
                camelize(name): flow.to_document(version) for name, flow in flows.items()
            } or None
            result["oauth2MetadataUrl"] = self.oauth2_metadata_url if version >= V3_2 else None
        elif len(flows) == 1:
            name, flow = next(iter(flows.items()))
            result["flow"] = _FLOWS_V2.get(name, name)
            result.update(flow.to_document(version))
        return self.with_extensions(result)


class OpenIdConnectScheme(SecurityScheme):
    """OpenID Connect, described by OpenAPI 3.0 and higher."""

    type_name = "open_id_connect"

    open_id_connect_url: str | None = None

    def to_document(self, version: Version, registry: Any = None) -> dict[str, Any] | None:
        version = Version.from_value(version)
        if version < V3_0:
            return None
        result = self.base_fields("openIdConnect", version)
        result["openIdConnectUrl"] = self.open_id_connect_url
        return self.with_extensions(result)


class MutualTlsScheme(SecurityScheme):
    """Mutual TLS, described by OpenAPI 3.1 and higher."""

    type_name = "mutual_tls"

    def to_document(self, version: Version, registry: Any = None) -> dict[str, Any] | None:
        version = Version.from_value(version)
        if version < V3_1:
            return None
        return self.with_extensions(self.base_fields("mutualTLS", version))


SECURITY_SCHEME_CLASSES: dict[str, type[SecurityScheme]] = {
    klass.type_name: klass
    for klass in (
        ApiKeyScheme,
        HttpBasicScheme,
        HttpBearerScheme,
        HttpScheme,
        OAuth2Scheme,
        OpenIdConnectScheme,
        MutualTlsScheme,
    )
}

# Alternative names as used by OpenAPI documents
_ALIASES = {
    "apiKey": "api_key",
    "openIdConnect": "open_id_connect",
    "mutualTLS": "mutual_tls",
}


def new_security_scheme(keywords: Mapping[str, Any] | None = None, **kw: Any) -> SecurityScheme:
    """Creates a security scheme.

    The ``type`` keyword selects the kind of scheme: ``api_key``, ``basic``,
    ``bearer``, ``http``, ``oauth2``, ``open_id_connect`` or ``mutual_tls``.
    An ``http`` scheme whose ``scheme`` is ``basic`` or ``bearer`` is
    created as the respective specific scheme.

    Raises:
        InvalidTypeError: If ``type`` is missing or unknown.
    """
    keywords = {**(keywords or {}), **kw}
    type_ = keywords.pop("type", None)
    type_ = _ALIASES.get(type_, type_)
    if type_ == "http" and str(keywords.get("scheme", "")).lower() in ("basic", "bearer"):
        type_ = keywords.pop("scheme").lower()
    scheme_class = SECURITY_SCHEME_CLASSES.get(type_) if isinstance(type_, str) else None
    if scheme_class is None:
        raise InvalidTypeError(
            f"invalid security scheme type: {type_!r}, "
            f"valid types are: {', '.join(SECURITY_SCHEME_CLASSES)}"
        )
    return scheme_class(**keywords)


class SecurityRequirement(MetaModel):
    """Maps the names of security schemes to the required scopes.

    Example:
        ``SecurityRequirement(schemes={"oauth": ["read:pets"]})``
    """

    schemes: dict[str, tuple[str, ...]] = Field(default_factory=dict)

    @field_validator("schemes", mode="before")
    @classmethod
    def _convert_schemes(cls, value: Any) -> Any:
        return convert_mapping(value, lambda scopes: tuple(str(s) for s in (scopes or ())))

    def add_scheme(self, name: str, scopes: list[str] | None = None) -> None:
        self._put("schemes", name, scopes or [])

    def to_document(self, version: Version | None = None, registry: Any = None) -> dict[str, Any]:
        return {name: list(scopes) for name, scopes in self.schemes.items()}
