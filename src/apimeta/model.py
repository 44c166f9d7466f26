"""Read-only model objects backed by value trees."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from .errors import Errors, FrozenModificationError
from .utils import underscore
from .values.nodes import ArrayValue, JsonValue, ObjectValue


def model_value(node: JsonValue) -> Any:
    """Returns the model representation of ``node``.

    Objects become :class:`ApiModel` instances, arrays become lists.
    """
    if isinstance(node, ObjectValue) and node.is_valid_type():
        return ApiModel(node)
    if isinstance(node, ArrayValue) and node.is_valid_type():
        return [model_value(item) for item in node]
    return node.value


class ApiModel:
    """Gives attribute-style read access to an object value.

    Attributes can be read by their snake_case names or by subscription
    with the original names::

        model = ApiModel(node)
        model.first_name       # same as model["firstName"]
        model.validate()       # False
        model.errors.messages()
    """

    def __init__(self, node: ObjectValue):
        object.__setattr__(self, "_node", node)
        object.__setattr__(self, "_errors", Errors())
        names = {}
        for name in self._all_nodes():
            names.setdefault(underscore(name), name)
            names.setdefault(name, name)
        object.__setattr__(self, "_names", names)

    def __getattr__(self, name: str) -> Any:
        names = object.__getattribute__(self, "_names")
        if name in names:
            return self[names[name]]
        raise AttributeError(f"{type(self).__name__!r} object has no attribute {name!r}")

    def __setattr__(self, name: str, value: Any) -> None:
        raise FrozenModificationError(self)

    def __delattr__(self, name: str) -> None:
        raise FrozenModificationError(self)

    def __getitem__(self, name: str) -> Any:
        return model_value(self._node[name])

    def __contains__(self, name: object) -> bool:
        return name in self._node

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ApiModel):
            return NotImplemented
        return self.serializable_dict() == other.serializable_dict()

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        attributes = ", ".join(f"{name}={value!r}" for name, value in self.attributes.items())
        return f"{type(self).__name__}({attributes})"

    @property
    def node(self) -> ObjectValue:
        return self._node

    @property
    def attributes(self) -> dict[str, Any]:
        """The values of the declared properties."""
        return {name: model_value(node) for name, node in (self._node.raw_attributes or {}).items()}

    @property
    def additional_attributes(self) -> dict[str, Any]:
        return {
            name: model_value(node) for name, node in self._node.raw_additional_attributes.items()
        }

    @property
    def errors(self) -> Errors:
        """The errors found by the last :meth:`validate` call."""
        return self._errors

    def serializable_dict(
        self,
        only: Iterable[str] | None = None,
        exclude: Iterable[str] | None = None,
        jsonify_values: bool = False,
    ) -> dict[str, Any]:
        """Returns the attributes as a dictionary that can be encoded as JSON.

        Args:
            only: The names of the attributes to include.
            exclude: The names of the attributes to leave out.
            jsonify_values: Whether dates, numpy scalars and decimals are
                converted to JSON native values.
        """
        result = self._node.serializable_value(jsonify_values)
        if only is not None:
            names = set(only)
            result = {k: v for k, v in result.items() if k in names}
        if exclude is not None:
            names = set(exclude)
            result = {k: v for k, v in result.items() if k not in names}
        return result

    def validate(self) -> bool:
        """Validates the model. The errors found are available by ``errors``."""
        self._errors.clear()
        return self._node.validate(self._errors)

    def _all_nodes(self) -> dict[str, JsonValue]:
        node = self._node
        return {**node.raw_additional_attributes, **(node.raw_attributes or {})}
