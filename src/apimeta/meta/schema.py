"""Schemas describing typed values.

A schema is one of the kinds listed in :class:`SchemaKind`. Schemas are
created by :func:`new_schema`, which picks the class matching the ``type``
keyword or creates a :class:`SchemaReference` if a ``ref`` is given::

    address = new_schema(type="object")
    address.add_property("street", type="string", max_length=80)
    address.add_property("zip", type="string", pattern=r"^\\d{5}$")

    tags = new_schema(type="array", items={"type": "string"}, max_items=10)
    pet = new_schema(ref="Pet")

Keywords that correspond to a validator (``minimum``, ``pattern``, ...)
register that validator with the schema. A schema keeps only the latest
validator per kind, so ``maximum`` and ``exclusive_maximum`` replace each
other. Assigning ``None`` drops the validator again.

References are resolved against a definitions registry on demand. Schemas
may therefore be mutually recursive, e.g. a tree node whose ``children``
are tree nodes.
"""

from __future__ import annotations

import enum
import logging
import re
from collections.abc import Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, ClassVar, Literal

from pydantic import Field, PrivateAttr, field_validator

from ..errors import (
    DiscriminatorError,
    InvalidArgumentError,
    InvalidTypeError,
    UnresolvedReferenceError,
)
from ..openapi.projector import compact
from ..openapi.version import V2_0, V3_0, V3_1, V3_2, Version
from ..utils import underscore
from . import validation
from .attributes import MetaModel, convert_mapping, convert_sequence
from .existence import Existence
from .extensions import Extensions
from .reference import Reference

if TYPE_CHECKING:
    from .definitions import Definitions

logger = logging.getLogger(__name__)

Context = Literal["request", "response"] | None

_MISSING = object()


class SchemaKind(str, enum.Enum):
    ARRAY = "array"
    BOOLEAN = "boolean"
    INTEGER = "integer"
    NUMBER = "number"
    OBJECT = "object"
    STRING = "string"
    REFERENCE = "reference"


class Schema(Extensions):
    """Base class of all non-reference schemas."""

    kind: ClassVar[SchemaKind]
    extra_keywords = ("example", "type")
    # Fields registering a validator whenever they are assigned
    validation_classes: ClassVar[dict[str, type[validation.Validator]]] = {
        "enum": validation.Enum,
    }

    title: str | None = None
    description: str | None = None
    default: Any = None
    deprecated: bool = False
    examples: list[Any] = Field(default_factory=list)
    existence: Existence = Existence.ALLOW_EMPTY
    enum: list[Any] | None = None

    _validations: dict[str, validation.Validator] = PrivateAttr(default_factory=dict)

    def __init__(self, **keywords: Any):
        keywords.pop("type", None)
        example = keywords.pop("example", _MISSING)
        validations = {
            name: keywords.pop(name)
            for name in list(keywords)
            if name in type(self).validation_classes
        }
        super().__init__(**keywords)
        for name, value in validations.items():
            setattr(self, name, value)
        if example is not _MISSING:
            self.add_example(example)

    def __setattr__(self, name: str, value: Any) -> None:
        validator_class = type(self).validation_classes.get(name)
        if validator_class is not None:
            self._check_modifiable()
            if value is not None:
                self.add_validation(validator_class(value))
            elif type(self._validations.get(validator_class.kind)) is validator_class:
                del self._validations[validator_class.kind]
        super().__setattr__(name, value)

    @field_validator("existence", mode="before")
    @classmethod
    def _convert_existence(cls, value: Any) -> Existence:
        return Existence.from_value(value)

    @property
    def nullable(self) -> bool:
        return self.existence <= Existence.ALLOW_NIL

    @property
    def required(self) -> bool:
        return self.existence > Existence.NONE

    @property
    def validations(self) -> Mapping[str, validation.Validator]:
        return MappingProxyType(self._validations)

    def add_example(self, value: Any) -> None:
        self._append("examples", value)

    def add_validation(self, validator: validation.Validator) -> None:
        """Registers ``validator``, replacing any validator of the same kind.

        Raises:
            InvalidArgumentError: If the validator doesn't apply to the kind
                of this schema.
        """
        self._check_modifiable()
        if self.kind.value not in validator.applies_to:
            raise InvalidArgumentError(
                f"{validator.kind} doesn't apply to {self.kind.value} schemas"
            )
        self._validations.pop(validator.kind, None)
        self._validations[validator.kind] = validator

    def default_value(self, registry: Definitions | None = None, context: Context = None) -> Any:
        """Returns the value that stands in for an absent value."""
        if self.default is not None:
            return self.default
        if registry is None:
            return None
        return registry.default_value(self.kind.value, context)

    def resolve(self, registry: Definitions | None = None) -> Schema:
        return self

    def to_document(self, version: Version, registry: Definitions | None = None) -> dict[str, Any]:
        version = Version.from_value(version)
        kind = self.kind.value
        if version == V2_0:
            result: dict[str, Any] = {"type": kind, "example": self._first_example()}
        elif version == V3_0:
            result = {
                "type": kind,
                "nullable": True if self.nullable else None,
                "example": self._first_example(),
                "deprecated": self.deprecated or None,
            }
        else:
            result = {
                "type": [kind, "null"] if self.nullable else kind,
                "examples": list(self.examples) or None,
                "deprecated": self.deprecated or None,
            }
        result["title"] = self.title
        result["description"] = self.description
        result["default"] = self.default
        for validator in self._validations.values():
            result.update(validator.to_document(version))
        result.update(self.document_fields(version, registry))
        return self.with_extensions(result)

    def document_fields(self, version: Version, registry: Definitions | None) -> dict[str, Any]:
        """Returns the kind-specific fields of the projected schema."""
        return {}

    def _first_example(self) -> Any:
        return self.examples[0] if self.examples else None


class StringSchema(Schema):
    kind = SchemaKind.STRING
    validation_classes = {
        **Schema.validation_classes,
        "format": validation.Format,
        "min_length": validation.MinLength,
        "max_length": validation.MaxLength,
        "pattern": validation.Pattern,
    }

    format: str | None = None
    min_length: int | None = None
    max_length: int | None = None
    pattern: str | re.Pattern[str] | None = None


class BooleanSchema(Schema):
    kind = SchemaKind.BOOLEAN


class NumericSchema(Schema):
    """Base class of integer and number schemas."""

    validation_classes = {
        **Schema.validation_classes,
        "minimum": validation.Minimum,
        "maximum": validation.Maximum,
        "exclusive_minimum": validation.ExclusiveMinimum,
        "exclusive_maximum": validation.ExclusiveMaximum,
        "multiple_of": validation.MultipleOf,
    }

    minimum: int | float | None = None
    maximum: int | float | None = None
    exclusive_minimum: int | float | None = None
    exclusive_maximum: int | float | None = None
    multiple_of: int | float | None = None


class IntegerSchema(NumericSchema):
    kind = SchemaKind.INTEGER


class NumberSchema(NumericSchema):
    kind = SchemaKind.NUMBER


class ArraySchema(Schema):
    kind = SchemaKind.ARRAY
    validation_classes = {
        **Schema.validation_classes,
        "min_items": validation.MinItems,
        "max_items": validation.MaxItems,
        "unique_items": validation.UniqueItems,
    }

    items: Schema | SchemaReference | None = None
    min_items: int | None = None
    max_items: int | None = None
    unique_items: bool | None = None

    @field_validator("items", mode="before")
    @classmethod
    def _convert_items(cls, value: Any) -> Any:
        return None if value is None else new_schema(value)

    def add_items(self, **keywords: Any) -> Schema | SchemaReference:
        self.items = new_schema(keywords)
        return self.items

    def document_fields(self, version: Version, registry: Definitions | None) -> dict[str, Any]:
        items = self.items.to_document(version, registry) if self.items is not None else {}
        return {"items": items}


class Discriminator(Extensions):
    """Selects the variant of a polymorphic object by a property value."""

    property_name: str | None = None
    mappings: dict[str, str] = Field(default_factory=dict)
    # OpenAPI 3.2 and higher
    default_mapping: str | None = None

    def __init__(self, **keywords: Any):
        mappings = keywords.pop("mappings", None) or keywords.pop("mapping", None) or {}
        super().__init__(**keywords)
        for value, schema_name in mappings.items():
            self.add_mapping(value, schema_name)

    def add_mapping(self, value: Any, schema_name: str) -> None:
        """Maps a discriminator value to the name of a schema.

        Raises:
            InvalidArgumentError: If ``value`` is already mapped.
        """
        if str(value) in self.mappings:
            raise InvalidArgumentError(f"discriminator value {value!r} is already mapped")
        self._put("mappings", value, schema_name)

    def schema_name_for(self, value: Any) -> str | None:
        return self.mappings.get(str(value))

    def to_document(self, version: Version, registry: Definitions | None = None) -> Any:
        version = Version.from_value(version)
        if version == V2_0:
            return self.property_name
        result = {
            "propertyName": self.property_name,
            "mapping": dict(self.mappings) or None,
            "defaultMapping": self.default_mapping if version >= V3_2 else None,
        }
        return self.with_extensions(result) if version >= V3_1 else compact(result)


def _as_discriminator(value: Any) -> Discriminator:
    if isinstance(value, Discriminator):
        return value
    if isinstance(value, str):
        return Discriminator(property_name=value)
    if isinstance(value, Mapping):
        return Discriminator(**value)
    raise InvalidArgumentError(f"invalid discriminator: {value!r}")


def _as_reference(value: Any) -> SchemaReference:
    if isinstance(value, SchemaReference):
        return value
    if isinstance(value, str):
        return SchemaReference(ref=value)
    if isinstance(value, Mapping):
        return SchemaReference(**value)
    raise InvalidArgumentError(f"invalid schema reference: {value!r}")


class ObjectSchema(Schema):
    kind = SchemaKind.OBJECT

    properties: dict[str, Property] = Field(default_factory=dict)
    additional_properties: Schema | SchemaReference | None = None
    discriminator: Discriminator | None = None
    all_of: list[SchemaReference] = Field(default_factory=list)

    @field_validator("properties", mode="before")
    @classmethod
    def _convert_properties(cls, value: Any) -> Any:
        return convert_mapping(value, _as_property)

    @field_validator("additional_properties", mode="before")
    @classmethod
    def _convert_additional_properties(cls, value: Any) -> Any:
        return None if value is None else new_schema(value)

    @field_validator("discriminator", mode="before")
    @classmethod
    def _convert_discriminator(cls, value: Any) -> Any:
        return None if value is None else _as_discriminator(value)

    @field_validator("all_of", mode="before")
    @classmethod
    def _convert_all_of(cls, value: Any) -> Any:
        return convert_sequence(value, _as_reference)

    def __init__(self, **keywords: Any):
        properties = keywords.pop("properties", None) or {}
        super().__init__(**keywords)
        for name, property_keywords in properties.items():
            if isinstance(property_keywords, Property):
                self._put("properties", name, property_keywords)
            else:
                self.add_property(name, **property_keywords)

    def add_property(self, name: str, **keywords: Any) -> Property:
        return self._put("properties", name, Property(name, **keywords))

    def add_all_of(self, ref: str | SchemaReference) -> None:
        self._append("all_of", ref)

    def resolve_properties(
        self, registry: Definitions | None = None, context: Context = None
    ) -> dict[str, Property]:
        """Returns all properties including the ones inherited by ``all_of``.

        Within requests, read-only properties are dropped. Within responses,
        write-only properties are dropped.
        """
        properties = self._merge_properties(registry, ())
        if context == "request":
            return {k: v for k, v in properties.items() if not v.read_only}
        if context == "response":
            return {k: v for k, v in properties.items() if not v.write_only}
        return properties

    def _merge_properties(
        self, registry: Definitions | None, path: tuple[ObjectSchema, ...]
    ) -> dict[str, Property]:
        if not self.all_of:
            return dict(self.properties)
        merged: dict[str, Property] = {}
        for reference in self.all_of:
            schema = reference.resolve(registry)
            if schema is self or any(schema is seen for seen in path):
                raise UnresolvedReferenceError(
                    reference.ref, f"circular all_of reference: {reference.ref!r}"
                )
            if not isinstance(schema, ObjectSchema):
                raise InvalidTypeError(f"all_of reference {reference.ref!r} isn't an object schema")
            merged.update(schema._merge_properties(registry, path + (self,)))
        merged.update(self.properties)
        return merged

    def resolve_variant(
        self, raw: Any, registry: Definitions | None, context: Context = None
    ) -> ObjectSchema:
        """Returns the schema that applies to ``raw``.

        If the schema has a discriminator, the variant is selected by the
        value of the discriminating property of ``raw``.

        Raises:
            DiscriminatorError: If the discriminating value is missing or no
                variant is registered for it.
        """
        schema = self
        seen: set[str] = set()
        while schema.discriminator is not None:
            if registry is None:
                raise UnresolvedReferenceError(
                    "", "can't select a variant of a polymorphic object without definitions"
                )
            discriminator = schema.discriminator
            property_name = discriminator.property_name
            discriminating = schema.resolve_properties(registry, context).get(property_name)
            if discriminating is None:
                raise InvalidArgumentError(
                    f"discriminator property {property_name!r} isn't defined"
                )

            value = discriminating.read(raw)
            if value is None:
                value = discriminating.schema.resolve(registry).default_value(registry, context)
            if value is None:
                if discriminator.default_mapping is None:
                    raise DiscriminatorError(
                        property_name, f"discriminating value of {property_name!r} is missing"
                    )
                name = discriminator.default_mapping
            else:
                name = discriminator.schema_name_for(value) or str(value)

            variant = registry.find_schema(name)
            if variant is None and discriminator.default_mapping is not None:
                variant = registry.find_schema(discriminator.default_mapping)
            if variant is None:
                raise DiscriminatorError(name, f"no variant registered for {value!r}")

            variant = variant.resolve(registry)
            if not isinstance(variant, ObjectSchema):
                raise InvalidTypeError(f"variant {name!r} isn't an object schema")
            logger.debug(f"Selected variant {name!r} by {property_name}={value!r}")
            if variant is schema:
                break
            if name in seen:
                raise DiscriminatorError(name, f"circular discriminator mapping: {name!r}")
            seen.add(name)
            schema = variant
        return schema

    def document_fields(self, version: Version, registry: Definitions | None) -> dict[str, Any]:
        properties = {
            name: prop.to_document(version, registry) for name, prop in self.properties.items()
        }
        required = [name for name, prop in self.properties.items() if prop.is_required(registry)]
        return {
            "allOf": [ref.to_document(version, registry) for ref in self.all_of] or None,
            "discriminator": (
                self.discriminator.to_document(version, registry) if self.discriminator else None
            ),
            "properties": properties or None,
            "additionalProperties": (
                self.additional_properties.to_document(version, registry)
                if self.additional_properties is not None
                else None
            ),
            "required": required or None,
        }


class SchemaReference(Reference):
    """Refers to a reusable schema."""

    kind: ClassVar[SchemaKind] = SchemaKind.REFERENCE
    component = "schemas"
    component_v2 = "definitions"

    # Overrides the existence of the referred schema if set.
    existence: Existence | None = None

    @field_validator("existence", mode="before")
    @classmethod
    def _convert_existence(cls, value: Any) -> Existence | None:
        return None if value is None else Existence.from_value(value)

    def default_value(self, registry: Definitions | None = None, context: Context = None) -> Any:
        return self.resolve(registry).default_value(registry, context)


class Property(MetaModel):
    """A named property of an object schema."""

    name: str
    schema_: Schema | SchemaReference = Field(alias="schema")
    read_only: bool = False
    write_only: bool = False
    deprecated: bool = False

    # An attribute name or callable used to read the value from an object
    source: Any = None

    def __init__(self, name: str, **keywords: Any):
        if not name:
            raise InvalidArgumentError("property name can't be blank")
        own, schema_keywords = self.split_keywords(keywords)
        schema = own.pop("schema", None)
        if isinstance(schema, str):
            schema = SchemaReference(ref=schema, **schema_keywords)
        elif not isinstance(schema, (Schema, SchemaReference)):
            schema = new_schema({**(schema or {}), **schema_keywords})
        super().__init__(name=str(name), schema=schema, **own)

    @property
    def schema(self) -> Schema | SchemaReference:
        return self.schema_

    def is_required(self, registry: Definitions | None = None) -> bool:
        return existence_of(self.schema, registry) > Existence.NONE

    def read(self, obj: Any) -> Any:
        """Reads the value of this property from ``obj``.

        ``obj`` may be a mapping or any other object. Attributes of other
        objects are looked up by name and by its snake_case form.
        """
        if obj is None:
            return None
        if callable(self.source):
            return self.source(obj)
        key = self.source or self.name
        if isinstance(obj, Mapping):
            return obj.get(key)
        if hasattr(obj, key):
            return getattr(obj, key)
        return getattr(obj, underscore(key), None)

    def to_document(self, version: Version, registry: Definitions | None = None) -> dict[str, Any]:
        version = Version.from_value(version)
        result = self.schema.to_document(version, registry)
        if "$ref" in result:
            return result
        if self.read_only:
            result["readOnly"] = True
        if self.write_only and version >= V3_0:
            result["writeOnly"] = True
        if self.deprecated and version >= V3_0:
            result["deprecated"] = True
        return result


def _as_property(value: Any) -> Property:
    if not isinstance(value, Property):
        raise InvalidArgumentError(f"invalid property: {value!r}")
    return value


SCHEMA_CLASSES: dict[str, type[Schema]] = {
    SchemaKind.ARRAY.value: ArraySchema,
    SchemaKind.BOOLEAN.value: BooleanSchema,
    SchemaKind.INTEGER.value: IntegerSchema,
    SchemaKind.NUMBER.value: NumberSchema,
    SchemaKind.OBJECT.value: ObjectSchema,
    SchemaKind.STRING.value: StringSchema,
}


def new_schema(
    keywords: Mapping[str, Any] | Schema | SchemaReference | str | None = None, **kw: Any
) -> Schema | SchemaReference:
    """Creates a schema.

    Args:
        keywords: The schema keywords. A schema is returned unchanged, a
            string is taken as the name of a referred schema.
        **kw: Further keywords.

    The ``type`` keyword selects the kind of the schema, ``"object"`` by
    default. A ``ref`` (or a string ``schema``) keyword creates a reference.

    Raises:
        InvalidTypeError: If ``type`` is unknown.
    """
    if isinstance(keywords, (Schema, SchemaReference)):
        return keywords
    if isinstance(keywords, str):
        return SchemaReference(ref=keywords, **kw)
    keywords = {**(keywords or {}), **kw}
    if "schema" in keywords:
        target = keywords.pop("schema")
        if isinstance(target, (Schema, SchemaReference)):
            return target
        keywords["ref"] = target
    if "ref" in keywords:
        return SchemaReference(**keywords)
    type_ = keywords.pop("type", None) or SchemaKind.OBJECT.value
    if isinstance(type_, SchemaKind):
        type_ = type_.value
    schema_class = SCHEMA_CLASSES.get(str(type_))
    if schema_class is None:
        raise InvalidTypeError(
            f"invalid schema type: {type_!r}, valid types are: {', '.join(SCHEMA_CLASSES)}"
        )
    return schema_class(**keywords)


def existence_of(
    schema: Schema | SchemaReference, registry: Definitions | None = None
) -> Existence:
    """Returns the effective existence of ``schema``.

    A reference without an own existence inherits the existence of the
    referred schema.
    """
    if isinstance(schema, SchemaReference):
        if schema.existence is not None:
            return schema.existence
        if registry is None:
            return Existence.ALLOW_EMPTY
        return schema.resolve(registry).existence
    return schema.existence


for _model in (ArraySchema, ObjectSchema, Property):
    _model.model_rebuild()
