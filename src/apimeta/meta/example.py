"""Examples of values."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from pydantic import ValidationInfo, field_validator

from ..errors import InvalidArgumentError
from ..openapi.version import V3_0, V3_2, Version
from .extensions import Extensions
from .reference import Reference

if TYPE_CHECKING:
    from .definitions import Definitions


class Example(Extensions):
    """A sample value.

    ``serialized_value`` and ``external_value`` are mutually exclusive.
    """

    summary: str | None = None
    description: str | None = None
    value: Any = None
    serialized_value: Any = None
    external_value: str | None = None

    @field_validator("serialized_value", "external_value")
    @classmethod
    def _check_exclusive(cls, value: Any, info: ValidationInfo) -> Any:
        other = "external_value" if info.field_name == "serialized_value" else "serialized_value"
        if value is not None and info.data.get(other) is not None:
            raise InvalidArgumentError("external value and serialized value are mutually exclusive")
        return value

    @property
    def is_reference(self) -> bool:
        return False

    def resolve(self, registry: Definitions | None = None) -> Example:
        return self

    def to_document(self, version: Version, registry: Definitions | None = None) -> dict[str, Any]:
        version = Version.from_value(version)
        result: dict[str, Any] = {"summary": self.summary, "description": self.description}
        if version < V3_2:
            result["value"] = self.value
        else:
            result["dataValue"] = self.value
            result["serializedValue"] = self.serialized_value
        if version >= V3_0:
            result["externalValue"] = self.external_value
        return self.with_extensions(result)


class ExampleReference(Reference):
    component = "examples"


def new_example(value: Any) -> Example | ExampleReference:
    """Creates an example or an example reference from keywords."""
    if isinstance(value, (Example, ExampleReference)):
        return value
    if not isinstance(value, Mapping):
        raise InvalidArgumentError(f"invalid example: {value!r}")
    if "ref" in value:
        return ExampleReference(**value)
    return Example(**value)
