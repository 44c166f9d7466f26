"""References to reusable objects of a definitions registry."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, ClassVar

from ..errors import UnresolvedReferenceError
from ..openapi.projector import compact
from ..openapi.version import V2_0, V3_1, Version
from .attributes import MetaModel

if TYPE_CHECKING:
    from .definitions import Definitions


class Reference(MetaModel):
    """Refers to a reusable object by name.

    Subclasses set ``component``, the registry attribute holding the
    referred objects, e.g. ``"parameters"``.
    """

    component: ClassVar[str]
    # The names of the document sections, if different from ``component``
    component_v2: ClassVar[str | None] = None
    document_component: ClassVar[str | None] = None

    ref: str | None = None

    # Displayed instead of the summary/description of the referred object,
    # OpenAPI 3.1 and higher.
    summary: str | None = None
    description: str | None = None

    def __init__(self, ref: str | None = None, **keywords: Any):
        super().__init__(ref=ref, **keywords)
        if not self.ref:
            raise UnresolvedReferenceError("", f"{type(self).__name__} requires a name")

    def __eq__(self, other: object) -> bool:
        return type(other) is type(self) and other.__dict__ == self.__dict__

    def __hash__(self) -> int:
        return hash((type(self), self.ref))

    @property
    def is_reference(self) -> bool:
        return True

    def resolve(self, registry: Definitions | None) -> Any:
        """Looks up the referred object, following chained references.

        Raises:
            UnresolvedReferenceError: If the name isn't defined, no registry is
                given or the references are circular.
        """
        if registry is None:
            raise UnresolvedReferenceError(
                self.ref, f"can't resolve {self.ref!r} without definitions"
            )
        seen: set[str] = set()
        target: Any = self
        while isinstance(target, Reference):
            if target.ref in seen:
                raise UnresolvedReferenceError(target.ref, f"circular reference: {target.ref!r}")
            seen.add(target.ref)
            target = registry.resolve(self.component, target.ref)
        return target

    def to_document(self, version: Version, registry: Definitions | None = None) -> dict[str, Any]:
        version = Version.from_value(version)
        if version == V2_0:
            path = self.component_v2 or self.component
        else:
            path = f"components/{self.document_component or self.component}"
        result: dict[str, Any] = {"$ref": f"#/{path}/{self.ref}"}
        if version >= V3_1:
            result["summary"] = self.summary
            result["description"] = self.description
        return compact(result)
