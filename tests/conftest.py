"""
Global pytest configuration and fixtures.
"""

import os
from pathlib import Path

import pytest

from apimeta.meta import Definitions

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Remove APIMETA_* variables so that tests don't depend on the shell."""
    for name in list(os.environ):
        if name.startswith("APIMETA_"):
            monkeypatch.delenv(name)


@pytest.fixture
def petstore_file() -> Path:
    return FIXTURES / "petstore.yml"


def build_definitions() -> Definitions:
    definitions = Definitions(info={"title": "Pet Store", "version": "1.0"})
    definitions.add_server(url="https://api.example.com/v1")
    definitions.add_schema(
        "Pet",
        properties={
            "id": {"type": "integer", "read_only": True, "existence": "none"},
            "name": {"type": "string", "existence": "present", "max_length": 20},
            "tags": {"type": "array", "items": {"type": "string"}, "existence": "none"},
            "birthday": {"type": "string", "format": "date", "existence": "none"},
        },
    )
    definitions.add_schema(
        "Animal",
        properties={"kind": {"type": "string", "existence": "present"}},
        discriminator={"property_name": "kind", "mappings": {"dog": "Dog", "cat": "Cat"}},
    )
    definitions.add_schema(
        "Dog", all_of=["Animal"], properties={"bark": {"type": "boolean", "existence": "none"}}
    )
    definitions.add_schema(
        "Cat", all_of=["Animal"], properties={"lives": {"type": "integer", "existence": "none"}}
    )
    definitions.add_schema(
        "Node",
        properties={
            "value": {"type": "integer"},
            "children": {"type": "array", "items": "Node", "existence": "none"},
        },
    )
    definitions.add_operation(
        "find_pets",
        path="/pets",
        parameters={
            "limit": {"type": "integer", "existence": "none", "maximum": 100},
            "tags": {"type": "array", "items": {"type": "string"}, "existence": "none"},
            "X-Request-Id": {"location": "header", "existence": "none"},
        },
        responses={200: {"type": "array", "items": "Pet"}},
    )
    definitions.add_operation(
        "get_pet",
        path="/pets/{id}",
        parameters={"id": {"location": "path", "type": "integer"}},
        responses={200: {"schema": "Pet"}, 404: {"description": "Not found", "nodoc": True}},
    )
    definitions.add_operation(
        "create_pet",
        path="/pets",
        method="post",
        request_body={"schema": "Pet"},
        responses={201: {"schema": "Pet"}},
    )
    return definitions


@pytest.fixture
def definitions() -> Definitions:
    """A frozen pet store registry."""
    return build_definitions().freeze()


@pytest.fixture
def open_definitions() -> Definitions:
    """The pet store registry before it has been frozen."""
    return build_definitions()
