"""Per-kind default values."""

from __future__ import annotations

import copy
from typing import Any

from .attributes import MetaModel

REQUEST = "request"
RESPONSE = "response"


class Defaults(MetaModel):
    """The values standing in for absent values of a primitive kind.

    Example:
        Absent arrays within requests are taken as empty arrays::

            definitions.add_default("array", within_requests=[])
    """

    within_requests: Any = None
    within_responses: Any = None

    def value(self, context: str | None) -> Any:
        """Returns a copy of the default value for ``context``."""
        if context == REQUEST:
            value = self.within_requests
        elif context == RESPONSE:
            value = self.within_responses
        else:
            return None
        # mutable defaults such as [] must not be shared by value trees
        return copy.deepcopy(value)
