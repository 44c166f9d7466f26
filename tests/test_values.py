"""Tests for apimeta.values module."""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

import numpy as np
import pandas as pd
import pytest

from apimeta.errors import (
    DiscriminatorError,
    Errors,
    InvalidTypeError,
    RecursionLimitError,
)
from apimeta.meta import Definitions, SchemaReference, new_schema
from apimeta.values import (
    ArrayValue,
    IntegerValue,
    NullValue,
    NumberValue,
    ObjectValue,
    StringValue,
    jsonify,
    wrap,
)

PET = SchemaReference(ref="Pet")


def validate(node):
    errors = Errors()
    valid = node.validate(errors)
    return valid, errors


@dataclass
class Pet:
    name: str
    id: int | None = None
    tags: list[str] = field(default_factory=list)


class TestWrap:
    """Test wrapping raw values."""

    def test_scalars(self):
        assert isinstance(wrap(1, new_schema(type="integer")), IntegerValue)
        assert isinstance(wrap(1.5, new_schema(type="number")), NumberValue)
        assert isinstance(wrap("a", new_schema(type="string")), StringValue)
        assert isinstance(wrap(None, new_schema(type="string")), NullValue)

    def test_object(self, definitions):
        node = wrap({"name": "Rex", "tags": ["good"]}, PET, definitions, "response")
        assert isinstance(node, ObjectValue)
        assert node["name"].value == "Rex"
        assert node["tags"].value == ["good"]
        assert node.value == {"id": None, "name": "Rex", "tags": ["good"], "birthday": None}

    def test_domain_object(self, definitions):
        node = wrap(Pet(name="Rex", id=1), PET, definitions, "response")
        assert node.serializable_value() == {"id": 1, "name": "Rex", "tags": []}

    def test_read_only_dropped_within_requests(self, definitions):
        node = wrap({"id": 1, "name": "Rex"}, PET, definitions, "request")
        assert "id" not in node
        assert "id" in wrap({"id": 1, "name": "Rex"}, PET, definitions, "response")

    def test_extra_keys_are_ignored(self, definitions):
        node = wrap({"name": "Rex", "color": "brown"}, PET, definitions)
        assert "color" not in node
        assert node.raw_additional_attributes == {}

    def test_additional_properties(self):
        schema = new_schema(
            type="object",
            properties={"name": {"type": "string"}},
            additional_properties={"type": "integer"},
        )
        node = wrap({"name": "Rex", "age": 3, "weight": "heavy"}, schema)
        assert set(node.raw_additional_attributes) == {"age", "weight"}

        valid, errors = validate(node)
        assert not valid
        assert errors.messages() == ["weight must be of type integer"]

    def test_dataframe(self, definitions):
        frame = pd.DataFrame({"id": [1, 2], "name": ["Rex", "Fido"]})
        schema = new_schema(type="array", items="Pet")
        node = wrap(frame, schema, definitions, "response")
        assert isinstance(node, ArrayValue)
        assert len(node) == 2
        assert node.serializable_value(jsonify_values=True) == [
            {"id": 1, "name": "Rex"},
            {"id": 2, "name": "Fido"},
        ]

    def test_numpy_and_missing_values(self):
        schema = new_schema(type="array", items={"type": "number", "existence": "allow_nil"})
        node = wrap(pd.Series([1.5, np.nan]), schema)
        assert isinstance(node[1], NullValue)
        assert validate(node)[0]

        node = wrap(np.array([1, 2]), new_schema(type="array", items={"type": "integer"}))
        assert node.value == [1, 2]

    def test_array_without_items(self):
        with pytest.raises(InvalidTypeError, match="array schema has no items"):
            wrap([1], new_schema(type="array"))

    def test_invalid_raw_types(self):
        assert not wrap("Rex", new_schema(type="array", items={"type": "string"})).is_valid_type()
        assert not wrap(["Rex"], new_schema(type="object")).is_valid_type()
        assert not wrap(True, new_schema(type="integer")).is_valid_type()
        assert wrap(2.0, new_schema(type="integer")).value == 2


class TestDefaults:
    """Test values standing in for absent values."""

    def test_schema_default(self):
        node = wrap(None, new_schema(type="integer", default=10))
        assert node.value == 10

    def test_registered_default(self):
        definitions = Definitions()
        definitions.add_default("array", within_requests=[])
        schema = new_schema(type="array", items={"type": "string"})

        assert wrap(None, schema, definitions, "request").value == []
        assert isinstance(wrap(None, schema, definitions, "response"), NullValue)


class TestPolymorphism:
    """Test selecting variants by discriminator."""

    def test_variant(self, definitions):
        node = wrap({"kind": "dog", "bark": True}, SchemaReference(ref="Animal"), definitions)
        assert node.schema is definitions.resolve_schema("Dog")
        assert node["bark"].value is True

    def test_unknown_variant(self, definitions):
        with pytest.raises(DiscriminatorError, match="no variant registered for 'fish'"):
            wrap({"kind": "fish"}, SchemaReference(ref="Animal"), definitions)

    def test_missing_discriminating_value(self, definitions):
        with pytest.raises(DiscriminatorError, match="'kind' is missing"):
            wrap({"bark": True}, SchemaReference(ref="Animal"), definitions)


class TestRecursion:
    """Test the bounds of recursive schemas."""

    def test_recursive_schema(self, definitions):
        tree = {"value": 1, "children": [{"value": 2, "children": [{"value": 3}]}]}
        node = wrap(tree, SchemaReference(ref="Node"), definitions)
        assert node["children"][0]["children"][0]["value"].value == 3
        assert validate(node)[0]

    def test_max_depth(self, definitions):
        tree = {"value": 0}
        for value in range(1, 10):
            tree = {"value": value, "children": [tree]}
        with pytest.raises(RecursionLimitError, match="maximum depth of 3"):
            wrap(tree, SchemaReference(ref="Node"), definitions, max_depth=3)

    def test_circular_value(self, definitions):
        tree = {"value": 1}
        tree["children"] = [tree]
        with pytest.raises(RecursionLimitError, match="circular value of schema 'Node'"):
            wrap(tree, SchemaReference(ref="Node"), definitions)


class TestValidate:
    """Test validating value trees."""

    def test_valid(self, definitions):
        node = wrap({"name": "Rex", "tags": ["good"]}, PET, definitions, "response")
        valid, errors = validate(node)
        assert valid
        assert not errors

    def test_all_errors_are_collected(self, definitions):
        node = wrap({"name": "", "tags": ["good", 1]}, PET, definitions, "response")
        valid, errors = validate(node)
        assert not valid
        assert [(issue.path, issue.kind) for issue in errors] == [
            ("name", "blank"),
            ("tags[1]", "invalid_type"),
        ]
        assert errors.messages() == ["name can't be blank", "tags[1] must be of type string"]

    def test_validators_run_on_present_values(self, definitions):
        node = wrap({"name": "R" * 21}, PET, definitions)
        assert validate(node)[1].messages() == ["name is too long (maximum is 20)"]

    def test_blank_root(self):
        valid, errors = validate(wrap(None, new_schema(type="string", existence="present")))
        assert not valid
        assert [(issue.path, issue.kind) for issue in errors] == [("base", "blank")]

    def test_null_skips_validators(self):
        schema = new_schema(type="integer", existence="allow_nil", minimum=1)
        valid, errors = validate(wrap(None, schema))
        assert valid
        assert not errors
        assert not validate(wrap(0, schema))[0]

    def test_result_matches_errors(self, definitions):
        """A value is invalid if and only if errors were added."""
        for raw in ({"name": "Rex"}, {"name": ""}, {"tags": "x"}, {"name": "Rex", "id": "1"}):
            valid, errors = validate(wrap(raw, PET, definitions, "response"))
            assert valid is not bool(errors)

    def test_validate_twice(self, definitions):
        node = wrap({"name": "", "tags": [1]}, PET, definitions)
        first, second = Errors(), Errors()
        node.validate(first)
        node.validate(second)
        assert first.to_list() == second.to_list()


class TestSerialization:
    """Test serializable values."""

    def test_omittable_nulls_are_dropped(self, definitions):
        node = wrap({"name": "Rex"}, PET, definitions, "response")
        assert node.serializable_value() == {"name": "Rex"}

    def test_jsonify_values(self):
        schema = new_schema(
            type="object",
            properties={
                "born": {"type": "string", "format": "date"},
                "weight": {"type": "number"},
                "count": {"type": "integer"},
            },
        )
        raw = {"born": date(2020, 1, 2), "weight": Decimal("1.5"), "count": np.int64(3)}
        result = wrap(raw, schema).serializable_value(jsonify_values=True)
        assert result == {"born": "2020-01-02", "weight": 1.5, "count": 3}
        assert type(result["count"]) is int

    def test_jsonify(self):
        assert jsonify({"a": [np.float64(1.5), pd.NaT]}) == {"a": [1.5, None]}
