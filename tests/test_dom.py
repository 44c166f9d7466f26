"""Tests for apimeta.dom module."""

from datetime import date, datetime, time, timezone

import pytest

from apimeta.dom import ArrayNode, BooleanNode, IntegerNode, NumberNode, ObjectNode, StringNode
from apimeta.dom import coerce, wrap
from apimeta.errors import CastError, Errors
from apimeta.meta import new_schema
from apimeta.values import IntegerValue, NullValue

INTEGER = new_schema(type="integer")


class TestCast:
    """Test converting loosely typed input."""

    @pytest.mark.parametrize(
        "raw,expected",
        [("true", True), ("Yes", True), ("1", True), ("false", False), ("no", False), (0, False)],
    )
    def test_boolean(self, raw, expected):
        assert BooleanNode(raw, new_schema(type="boolean")).cast() is expected

    def test_invalid_boolean(self):
        with pytest.raises(CastError, match="can't convert 'maybe' to boolean"):
            BooleanNode("maybe", new_schema(type="boolean")).cast()

    def test_integer(self):
        assert IntegerNode("42", INTEGER).cast() == 42
        assert IntegerNode(" 7 ", INTEGER).cast() == 7
        assert IntegerNode(3.0, INTEGER).cast() == 3
        with pytest.raises(CastError):
            IntegerNode("forty", INTEGER).cast()
        with pytest.raises(CastError):
            IntegerNode("4.5", INTEGER).cast()

    def test_number(self):
        assert NumberNode("1.5", new_schema(type="number")).cast() == 1.5
        with pytest.raises(CastError):
            NumberNode("heavy", new_schema(type="number")).cast()

    @pytest.mark.parametrize("raw", ["1_000", "0x10", "1e3", "+-1"])
    def test_integer_digits_only(self, raw):
        with pytest.raises(CastError, match="to integer"):
            IntegerNode(raw, INTEGER).cast()

    def test_signed_integer(self):
        assert IntegerNode("-12", INTEGER).cast() == -12
        assert IntegerNode("+3", INTEGER).cast() == 3

    @pytest.mark.parametrize(
        "raw", ["NaN", "nan", "inf", "-Infinity", "1e999", "1_000.5", float("nan")]
    )
    def test_non_finite_number(self, raw):
        """NaN, infinity and Python-only literals aren't numbers."""
        with pytest.raises(CastError, match="to number"):
            NumberNode(raw, new_schema(type="number")).cast()

    def test_number_notations(self):
        schema = new_schema(type="number")
        assert NumberNode("-2", schema).cast() == -2.0
        assert NumberNode(".5", schema).cast() == 0.5
        assert NumberNode("1e3", schema).cast() == 1000.0
        assert NumberNode(3, schema).cast() == 3

    def test_empty_string_is_absent(self):
        """An empty string isn't a cast failure for non-string kinds."""
        node = IntegerNode("", INTEGER)
        assert node.is_null()
        assert node.cast() is None
        assert StringNode("", new_schema(type="string")).cast() == ""

    def test_dates(self):
        assert StringNode("2024-03-20", new_schema(type="string", format="date")).cast() == date(
            2024, 3, 20
        )
        assert StringNode("12:30:00", new_schema(type="string", format="time")).cast() == time(
            12, 30
        )
        assert StringNode(
            "2024-03-20T10:00:00Z", new_schema(type="string", format="date-time")
        ).cast() == datetime(2024, 3, 20, 10, tzinfo=timezone.utc)
        with pytest.raises(CastError, match="to date"):
            StringNode("2024-13-45", new_schema(type="string", format="date")).cast()

    def test_string_from_number(self):
        assert StringNode(12, new_schema(type="string")).cast() == "12"


class TestWrap:
    """Test building coercion trees."""

    def test_array(self):
        schema = new_schema(type="array", items={"type": "integer"})
        assert wrap(["1", "2"], schema).cast() == [1, 2]
        assert wrap("3", schema).cast() == [3]
        assert wrap("[4, 5]", schema).cast() == [4, 5]
        assert wrap("", schema).cast() is None
        assert isinstance(wrap(("1",), schema), ArrayNode)

    def test_object(self):
        schema = new_schema(
            type="object",
            properties={"page": {"type": "integer"}, "sort": {"type": "string"}},
        )
        node = wrap({"page": "2", "sort": "name"}, schema)
        assert isinstance(node, ObjectNode)
        assert node.cast() == {"page": 2, "sort": "name"}
        assert wrap('{"page": "3"}', schema).cast() == {"page": 3, "sort": None}

    def test_object_from_scalar(self):
        node = wrap("page", new_schema(type="object"))
        assert node.attributes is None
        with pytest.raises(CastError):
            node.cast()


class TestCoerce:
    """Test casting and wrapping in one step."""

    def test_coerce(self):
        errors = Errors()
        node = coerce("42", INTEGER, errors=errors)
        assert isinstance(node, IntegerValue)
        assert node.value == 42
        assert not errors

    def test_cast_errors_are_collected(self):
        schema = new_schema(
            type="object",
            properties={"age": {"type": "integer"}, "tags": {"type": "array", "items": INTEGER}},
        )
        errors = Errors()
        coerce({"age": "old", "tags": ["1", "x"]}, schema, errors=errors)
        assert [(issue.path, issue.kind) for issue in errors] == [
            ("age", "invalid_cast"),
            ("tags[1]", "invalid_cast"),
        ]
        assert errors.messages()[0] == "age can't be converted to integer"

    def test_unconvertible_values_are_wrapped_unchanged(self):
        node = coerce("old", INTEGER, errors=Errors())
        assert node.raw == "old"
        assert not node.is_valid_type()

    def test_validation_after_coercion(self):
        schema = new_schema(type="integer", maximum=5, existence="present")
        errors = Errors()
        assert not coerce("7", schema).validate(errors)
        assert errors.messages() == ["must be less than or equal to 5"]

        node = coerce("", schema)
        assert isinstance(node, NullValue)
        assert not node.validate(Errors())
