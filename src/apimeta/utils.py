"""Small helpers shared across apimeta."""

import re

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


def underscore(name: str) -> str:
    """Converts a camelCase or dashed name to snake_case.

    >>> underscore("firstName")
    'first_name'
    >>> underscore("HTTPStatus")
    'http_status'
    """
    return _CAMEL_BOUNDARY.sub("_", name).replace("-", "_").lower()


def camelize(name: str) -> str:
    """Converts a snake_case name to lower camelCase.

    >>> camelize("authorization_code")
    'authorizationCode'
    """
    head, *tail = name.split("_")
    return head + "".join(part.capitalize() for part in tail)
