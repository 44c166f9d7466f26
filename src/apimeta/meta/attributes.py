"""Pydantic base of the meta models with a build-then-freeze lifecycle.

Every meta model (schemas, parameters, responses, the definitions registry,
...) is a pydantic model validated on construction and on every assignment.
Instances are *open* while an API definition is being built and *frozen*
afterwards::

    class Tag(MetaModel):
        name: str
        description: str | None = None

    tag = Tag(name="pets")
    tag.description = "Everything about pets"
    tag.freeze()
    tag.description = "..."  # raises FrozenModificationError

Freezing is idempotent and recursive: nested models and models held by
dict or list fields are frozen first. Dict fields become read-only
``MappingProxyType`` views and list fields become tuples.

Assigning ``None`` restores the default of a field.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from types import MappingProxyType
from typing import Any, ClassVar, get_origin

from pydantic import BaseModel, ConfigDict, PrivateAttr, ValidationError

from ..errors import ApiMetaError, FrozenModificationError, InvalidArgumentError

logger = logging.getLogger(__name__)


class MetaModel(BaseModel):
    """Base class of all meta models."""

    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    #: Keyword names that are accepted by ``__init__`` besides fields.
    extra_keywords: ClassVar[tuple[str, ...]] = ()

    _frozen: bool = PrivateAttr(default=False)

    def __init__(self, **keywords: Any):
        try:
            super().__init__(**{k: v for k, v in keywords.items() if v is not None})
        except ValidationError as e:
            raise argument_error(type(self), e) from None

    def __setattr__(self, name: str, value: Any) -> None:
        if name.startswith("_"):
            super().__setattr__(name, value)
            return
        self._check_modifiable()
        field = type(self).model_fields.get(name)
        if value is None and field is not None:
            value = field.get_default(call_default_factory=True)
        try:
            super().__setattr__(name, value)
        except ValidationError as e:
            raise argument_error(type(self), e) from None
        self.attribute_changed(name)

    @classmethod
    def keyword_names(cls) -> set[str]:
        """Returns the keywords accepted by ``__init__``."""
        names = {field.alias or name for name, field in cls.model_fields.items()}
        names.update(cls.extra_keywords)
        return names

    @classmethod
    def split_keywords(cls, keywords: Mapping[str, Any]) -> tuple[dict[str, Any], dict[str, Any]]:
        """Splits ``keywords`` into own fields and the rest."""
        names = cls.keyword_names()
        own = {k: v for k, v in keywords.items() if k in names}
        rest = {k: v for k, v in keywords.items() if k not in names}
        return own, rest

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> MetaModel:
        """Freezes itself and all nested models. Idempotent."""
        if self._frozen:
            return self
        self.before_freeze()
        for name, field in type(self).model_fields.items():
            value = self.__dict__.get(name)
            origin = get_origin(field.annotation)
            if origin is dict and isinstance(value, dict):
                for item in value.values():
                    _freeze(item)
                self.__dict__[name] = MappingProxyType(value)
            elif origin is list and isinstance(value, list):
                for item in value:
                    _freeze(item)
                self.__dict__[name] = tuple(value)
            else:
                _freeze(value)
        self.freeze_nested()
        self._frozen = True
        return self

    # Hooks

    def attribute_changed(self, name: str) -> None:
        """Invoked whenever a field has been assigned."""

    def before_freeze(self) -> None:
        """Invoked before the fields are frozen."""

    def freeze_nested(self) -> None:
        """Freezes nested state that isn't held by fields."""

    # Helpers for subclasses

    def _check_modifiable(self) -> None:
        if getattr(self, "_frozen", False):
            raise FrozenModificationError(self)

    def _put(self, name: str, key: Any, value: Any) -> Any:
        """Adds ``key`` and ``value`` to the dict field ``name``."""
        self._check_modifiable()
        mapping = dict(getattr(self, name))
        key = str(key)
        if key in mapping:
            logger.debug(f"Replacing {name} entry {key!r} of {type(self).__name__}")
        mapping[key] = value
        setattr(self, name, mapping)
        return getattr(self, name)[key]

    def _append(self, name: str, value: Any) -> Any:
        """Appends ``value`` to the list field ``name``."""
        self._check_modifiable()
        setattr(self, name, [*getattr(self, name), value])
        return getattr(self, name)[-1]


def argument_error(model: type, error: ValidationError) -> ApiMetaError:
    """Turns a pydantic ``ValidationError`` into the error to raise.

    Errors raised by converters are passed through unchanged.
    """
    details = error.errors()[0]
    cause = details.get("ctx", {}).get("error")
    if isinstance(cause, ApiMetaError):
        return cause
    field = ".".join(str(part) for part in details["loc"])
    if details["type"] == "extra_forbidden":
        return InvalidArgumentError(f"unknown keyword for {model.__name__}: {field!r}")
    return InvalidArgumentError(
        f"invalid value for {field}: {details['input']!r} ({details['msg']})"
    )


def convert_mapping(
    value: Any, convert: Callable[[Any], Any], key: Callable[[Any], str] = str
) -> Any:
    """Converts the keys and values of a mapping.

    Anything else is left to pydantic, which rejects it.
    """
    if not isinstance(value, Mapping):
        return value
    return {key(k): convert(v) for k, v in value.items()}


def convert_sequence(value: Any, convert: Callable[[Any], Any]) -> Any:
    """Converts the items of a sequence, wrapping a single item into a list."""
    if isinstance(value, (str, bytes, Mapping, BaseModel)) or not isinstance(value, Iterable):
        value = [value]
    return [convert(item) for item in value]


def _freeze(value: Any) -> None:
    if isinstance(value, MetaModel):
        value.freeze()
