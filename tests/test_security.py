"""Tests for apimeta.meta.security module."""

import pytest

from apimeta.errors import InvalidArgumentError, InvalidTypeError
from apimeta.meta.security import (
    ApiKeyScheme,
    HttpBasicScheme,
    HttpBearerScheme,
    MutualTlsScheme,
    OAuth2Scheme,
    SecurityRequirement,
    new_security_scheme,
)
from apimeta.openapi import V2_0, V3_0, V3_1, V3_2


class TestNewSecurityScheme:
    """Test creating security schemes by type."""

    @pytest.mark.parametrize(
        "keywords,expected",
        [
            ({"type": "api_key", "name": "X-Api-Key", "in": "header"}, ApiKeyScheme),
            ({"type": "apiKey", "name": "key", "in": "query"}, ApiKeyScheme),
            ({"type": "basic"}, HttpBasicScheme),
            ({"type": "http", "scheme": "Bearer"}, HttpBearerScheme),
            ({"type": "mutualTLS"}, MutualTlsScheme),
        ],
    )
    def test_types(self, keywords, expected):
        assert isinstance(new_security_scheme(keywords), expected)

    def test_invalid_type(self):
        with pytest.raises(InvalidTypeError, match="invalid security scheme type: 'token'"):
            new_security_scheme(type="token")
        with pytest.raises(InvalidTypeError):
            new_security_scheme(name="key")

    def test_invalid_location(self):
        with pytest.raises(InvalidArgumentError, match="invalid value for location"):
            new_security_scheme(type="api_key", name="key", location="body")


class TestProjection:
    """Test security scheme objects across versions."""

    def test_api_key(self):
        scheme = new_security_scheme(type="api_key", name="X-Api-Key", location="header")
        expected = {"type": "apiKey", "name": "X-Api-Key", "in": "header"}
        assert scheme.to_document(V2_0) == expected
        assert scheme.to_document(V3_1) == expected

    def test_basic(self):
        scheme = new_security_scheme(type="basic", description="Name and password")
        assert scheme.to_document(V2_0) == {"type": "basic", "description": "Name and password"}
        assert scheme.to_document(V3_0) == {
            "type": "http",
            "scheme": "basic",
            "description": "Name and password",
        }

    def test_schemes_missing_in_older_versions(self):
        assert new_security_scheme(type="bearer").to_document(V2_0) is None
        assert new_security_scheme(type="open_id_connect").to_document(V2_0) is None
        assert new_security_scheme(type="mutual_tls").to_document(V3_0) is None
        assert new_security_scheme(type="mutual_tls").to_document(V3_1) == {"type": "mutualTLS"}

    def test_deprecated(self):
        scheme = new_security_scheme(type="basic", deprecated=True)
        assert "deprecated" not in scheme.to_document(V3_1)
        assert scheme.to_document(V3_2)["deprecated"] is True


class TestOAuth2:
    """Test OAuth2 flows."""

    @pytest.fixture
    def scheme(self):
        return OAuth2Scheme(
            flows={
                "authorization_code": {
                    "authorization_url": "https://example.com/authorize",
                    "token_url": "https://example.com/token",
                    "refresh_url": "https://example.com/refresh",
                    "scopes": {"read:pets": "Read pets"},
                }
            }
        )

    def test_single_flow_in_2_0(self, scheme):
        assert scheme.to_document(V2_0) == {
            "type": "oauth2",
            "flow": "accessCode",
            "authorizationUrl": "https://example.com/authorize",
            "tokenUrl": "https://example.com/token",
            "scopes": {"read:pets": "Read pets"},
        }

    def test_flows_in_3_0(self, scheme):
        document = scheme.to_document(V3_0)
        assert list(document["flows"]) == ["authorizationCode"]
        assert document["flows"]["authorizationCode"]["refreshUrl"] == "https://example.com/refresh"

    def test_several_flows_in_2_0(self, scheme):
        scheme.add_oauth_flow("client_credentials", {"token_url": "https://example.com/token"})
        document = scheme.to_document(V2_0)
        assert "flow" not in document

    def test_device_authorization(self, scheme):
        scheme.add_oauth_flow(
            "device_authorization", {"token_url": "https://example.com/device"}
        )
        assert "deviceAuthorization" not in scheme.to_document(V3_1)["flows"]
        assert "deviceAuthorization" in scheme.to_document(V3_2)["flows"]

    def test_invalid_flow(self, scheme):
        with pytest.raises(InvalidArgumentError, match="invalid OAuth flow: 'magic'"):
            scheme.add_oauth_flow("magic", {})


class TestSecurityRequirement:
    def test_to_document(self):
        requirement = SecurityRequirement(schemes={"oauth": ["read:pets"], "api_key": None})
        assert requirement.to_document() == {"oauth": ["read:pets"], "api_key": []}
