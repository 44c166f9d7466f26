"""Tests for apimeta.media module."""

import pytest

from apimeta.errors import InvalidArgumentError
from apimeta.media import MediaRange, MediaType, best_match
from apimeta.meta import RequestBody


class TestMediaType:
    def test_from_value(self):
        media_type = MediaType.from_value("Application/JSON; charset=utf-8")
        assert str(media_type) == "application/json"
        assert media_type.is_json
        assert MediaType.from_value("application/problem+json").is_json
        assert not MediaType.from_value("text/plain").is_json

    @pytest.mark.parametrize("value", ["json", "", None, "text/"])
    def test_invalid(self, value):
        with pytest.raises(InvalidArgumentError, match="invalid media type"):
            MediaType.from_value(value)


class TestMediaRange:
    """Test matching media types against ranges."""

    @pytest.mark.parametrize(
        "value,priority",
        [("text/plain", 1), ("text/*", 2), ("*/plain", 3), ("*/*", 4)],
    )
    def test_priority(self, value, priority):
        assert MediaRange.from_value(value).priority == priority

    def test_match(self):
        assert MediaRange.from_value("application/*").match("application/xml")
        assert MediaRange.from_value("*/*").match("image/png")
        assert not MediaRange.from_value("text/*").match("application/json")

    def test_best_match(self):
        candidates = [
            (MediaRange.from_value("*/*"), "any"),
            (MediaRange.from_value("application/*"), "application"),
            (MediaRange.from_value("application/json"), "json"),
        ]
        assert best_match(candidates, "application/json")[1] == "json"
        assert best_match(candidates, "application/xml")[1] == "application"
        assert best_match(candidates, "text/plain")[1] == "any"
        assert best_match(candidates, "nonsense") is None
        assert best_match(candidates[1:], "text/plain") is None


class TestRequestBodyContents:
    """Test selecting the content of a request body by media type."""

    @pytest.fixture
    def request_body(self):
        return RequestBody(
            contents={
                "application/json": {"type": "object"},
                "application/*": {"type": "string"},
            }
        )

    def test_content_for(self, request_body):
        assert request_body.content_for("application/json").schema.kind.value == "object"
        assert request_body.content_for("application/xml").schema.kind.value == "string"

    def test_fallback_to_first_content(self, request_body):
        assert request_body.content_for("text/plain") is request_body.default_content
        assert request_body.content_for(None) is request_body.default_content

    def test_added_contents_are_considered(self, request_body):
        request_body.content_for("text/plain")
        request_body.add_content("text/*", type="string", max_length=10)
        content = request_body.content_for("text/plain")
        assert content is request_body.contents["text/*"]
