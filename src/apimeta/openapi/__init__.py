"""Projection of meta models into OpenAPI documents.

Every meta model owns its version-dispatch logic in a
``to_document(version, registry)`` method. :func:`to_document` is the
common entry point::

    from apimeta.openapi import to_document

    to_document(schema, "2.0")  # {"type": "string"}
    to_document(definitions, "3.1")  # the complete OpenAPI 3.1 document
"""

from .projector import to_document
from .version import ALL_VERSIONS, V2_0, V3_0, V3_1, V3_2, Version

__all__ = ["ALL_VERSIONS", "V2_0", "V3_0", "V3_1", "V3_2", "Version", "to_document"]
