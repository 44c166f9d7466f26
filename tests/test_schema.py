"""Tests for apimeta.meta.schema module."""

import pytest

from apimeta.errors import (
    FrozenModificationError,
    InvalidArgumentError,
    InvalidTypeError,
    UnresolvedReferenceError,
)
from apimeta.meta import (
    ArraySchema,
    Definitions,
    Discriminator,
    Existence,
    IntegerSchema,
    ObjectSchema,
    SchemaReference,
    StringSchema,
    existence_of,
    new_schema,
)
from apimeta.meta.validation import Maximum
from apimeta.openapi import V3_0


class TestNewSchema:
    """Test creating schemas by keywords."""

    def test_kinds(self):
        assert isinstance(new_schema(type="string"), StringSchema)
        assert isinstance(new_schema(type="integer"), IntegerSchema)
        assert isinstance(new_schema(), ObjectSchema)

    def test_references(self):
        assert new_schema("Pet") == SchemaReference(ref="Pet")
        assert new_schema(ref="Pet") == SchemaReference(ref="Pet")
        assert new_schema(schema="Pet") == SchemaReference(ref="Pet")

    def test_unknown_type(self):
        with pytest.raises(InvalidTypeError, match="invalid schema type: 'date'"):
            new_schema(type="date")

    def test_items(self):
        schema = new_schema(type="array", items={"type": "string"})
        assert isinstance(schema, ArraySchema)
        assert isinstance(schema.items, StringSchema)

        schema.add_items(type="integer")
        assert isinstance(schema.items, IntegerSchema)

    def test_example(self):
        assert new_schema(type="string", example="Rex").examples == ["Rex"]


class TestValidations:
    """Test validators registered by schema keywords."""

    def test_keywords_register_validators(self):
        schema = new_schema(type="integer", minimum=1, maximum=5)
        assert set(schema.validations) == {"minimum", "maximum"}

    def test_last_registration_wins(self):
        """A later bound of the same kind replaces the former one."""
        schema = new_schema(type="integer", maximum=5, exclusive_maximum=3)
        assert schema.validations["maximum"] == Maximum(3, exclusive=True)

    def test_validator_not_applicable(self):
        with pytest.raises(InvalidArgumentError, match="minimum doesn't apply to string schemas"):
            new_schema(type="string", minimum=1)

    def test_invalid_argument(self):
        with pytest.raises(InvalidArgumentError, match="invalid max length"):
            new_schema(type="string", max_length="long")

    def test_none_drops_validator(self):
        schema = new_schema(type="string", max_length=3, min_length=1)
        schema.max_length = None
        assert set(schema.validations) == {"min_length"}
        assert schema.max_length is None
        assert "maxLength" not in schema.to_document(V3_0)

    def test_none_keeps_validator_of_other_keyword(self):
        """Clearing ``maximum`` keeps the bound set by ``exclusive_maximum``."""
        schema = new_schema(type="integer", maximum=5, exclusive_maximum=3)
        schema.maximum = None
        assert schema.validations["maximum"] == Maximum(3, exclusive=True)
        schema.exclusive_maximum = None
        assert schema.validations == {}

    def test_assignment_replaces_validator(self):
        schema = new_schema(type="string", max_length=3)
        schema.max_length = 5
        assert schema.validations["max_length"].argument == 5


class TestObjectSchema:
    """Test properties, all_of and discriminators."""

    def test_add_property(self):
        schema = new_schema(type="object")
        prop = schema.add_property("name", type="string", existence="present")
        assert prop.name == "name"
        assert isinstance(prop.schema, StringSchema)
        assert prop.schema.existence is Existence.PRESENT
        assert prop.is_required()

    def test_add_property_after_freeze(self):
        schema = new_schema(type="object").freeze()
        with pytest.raises(FrozenModificationError):
            schema.add_property("name", type="string")

    def test_blank_property_name(self):
        with pytest.raises(InvalidArgumentError, match="property name can't be blank"):
            new_schema(type="object", properties={"": {"type": "string"}})

    def test_all_of(self, definitions):
        dog = definitions.resolve_schema("Dog")
        assert list(dog.resolve_properties(definitions)) == ["kind", "bark"]

    def test_circular_all_of(self):
        definitions = Definitions()
        definitions.add_schema("A", all_of=["B"])
        definitions.add_schema("B", all_of=["A"])
        with pytest.raises(UnresolvedReferenceError, match="circular all_of reference"):
            definitions.resolve_schema("A").resolve_properties(definitions)

    def test_read_only_and_write_only(self):
        schema = new_schema(
            type="object",
            properties={
                "id": {"type": "integer", "read_only": True},
                "password": {"type": "string", "write_only": True},
                "name": {"type": "string"},
            },
        )
        assert list(schema.resolve_properties(context="request")) == ["password", "name"]
        assert list(schema.resolve_properties(context="response")) == ["id", "name"]
        assert list(schema.resolve_properties()) == ["id", "password", "name"]

    def test_property_source(self):
        class Pet:
            nick_name = "Rex"

        schema = new_schema(
            type="object",
            properties={
                "nickName": {"type": "string"},
                "title": {"type": "string", "source": lambda pet: pet.nick_name.upper()},
            },
        )
        properties = schema.resolve_properties()
        assert properties["nickName"].read(Pet()) == "Rex"
        assert properties["title"].read(Pet()) == "REX"
        assert properties["nickName"].read({"nickName": "Fido"}) == "Fido"

    def test_duplicate_discriminator_mapping(self):
        discriminator = Discriminator(property_name="kind", mappings={"dog": "Dog"})
        with pytest.raises(InvalidArgumentError, match="already mapped"):
            discriminator.add_mapping("dog", "Hound")

    def test_resolve_variant(self, definitions):
        animal = definitions.resolve_schema("Animal")
        variant = animal.resolve_variant({"kind": "cat"}, definitions)
        assert variant is definitions.resolve_schema("Cat")


class TestReferences:
    """Test resolving reference schemas."""

    def test_resolve(self, definitions):
        assert SchemaReference(ref="Pet").resolve(definitions) is definitions.schemas["Pet"]

    def test_unresolvable(self, definitions):
        with pytest.raises(UnresolvedReferenceError, match="'Unicorn'") as exc_info:
            SchemaReference(ref="Unicorn").resolve(definitions)
        assert exc_info.value.ref == "Unicorn"

    def test_without_definitions(self):
        with pytest.raises(UnresolvedReferenceError, match="without definitions"):
            SchemaReference(ref="Pet").resolve(None)

    def test_chained_references(self):
        definitions = Definitions()
        definitions.add_schema("Name", type="string")
        definitions.add_schema("Alias", ref="Name")
        assert isinstance(SchemaReference(ref="Alias").resolve(definitions), StringSchema)

    def test_circular_references(self):
        definitions = Definitions()
        definitions.add_schema("A", ref="B")
        definitions.add_schema("B", ref="A")
        with pytest.raises(UnresolvedReferenceError, match="circular reference"):
            SchemaReference(ref="A").resolve(definitions)

    def test_existence_of(self, definitions):
        """A reference inherits the existence of the referred schema unless overridden."""
        assert existence_of(SchemaReference(ref="Pet"), definitions) is Existence.ALLOW_EMPTY
        assert (
            existence_of(SchemaReference(ref="Pet", existence="none"), definitions)
            is Existence.NONE
        )
