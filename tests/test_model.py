"""Tests for apimeta.model module."""

import pytest

from apimeta.errors import FrozenModificationError
from apimeta.meta import SchemaReference, new_schema
from apimeta.model import ApiModel, model_value
from apimeta.values import wrap


@pytest.fixture
def person():
    schema = new_schema(
        type="object",
        properties={
            "firstName": {"type": "string", "existence": "present"},
            "address": {
                "type": "object",
                "properties": {"city": {"type": "string"}},
                "existence": "none",
            },
            "nickNames": {"type": "array", "items": {"type": "string"}, "existence": "none"},
        },
        additional_properties={"type": "string"},
    )
    raw = {"firstName": "Ada", "address": {"city": "London"}, "nickNames": ["A"], "title": "Dr"}
    return ApiModel(wrap(raw, schema))


class TestApiModel:
    """Test read access to object values."""

    def test_attributes(self, person):
        assert person.first_name == "Ada"
        assert person["firstName"] == "Ada"
        assert isinstance(person.address, ApiModel)
        assert person.address.city == "London"
        assert person.nick_names == ["A"]

    def test_additional_attributes(self, person):
        assert person.title == "Dr"
        assert person.additional_attributes == {"title": "Dr"}
        assert "title" not in person.attributes

    def test_unknown_attribute(self, person):
        with pytest.raises(AttributeError, match="no attribute 'age'"):
            person.age

    def test_read_only(self, person):
        with pytest.raises(FrozenModificationError):
            person.first_name = "Grace"

    def test_serializable_dict(self, person):
        assert person.serializable_dict(only=["firstName", "title"]) == {
            "firstName": "Ada",
            "title": "Dr",
        }
        assert "address" not in person.serializable_dict(exclude=["address"])

    def test_validate(self, definitions):
        model = model_value(wrap({"name": ""}, SchemaReference(ref="Pet"), definitions))
        assert not model.validate()
        assert model.errors.messages() == ["name can't be blank"]

    def test_equality(self, person):
        assert person == ApiModel(person.node)
        assert person != ApiModel(wrap({"firstName": "Grace"}, person.node.schema))
