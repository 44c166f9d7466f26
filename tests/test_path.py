"""Tests for apimeta.meta.path module and callbacks."""

import pytest

from apimeta.errors import InvalidArgumentError
from apimeta.meta import Callback, Definitions, Operation, Path, ancestors, normalize_path
from apimeta.openapi import to_document


def build_pets() -> Definitions:
    definitions = Definitions(info={"title": "Pet Store", "version": "1.0"})
    definitions.add_path(
        "/",
        tags=["store"],
        security=[{"api_key": []}],
        responses={"default": {"description": "Unexpected error"}},
    )
    definitions.add_path(
        "pets/{id}/",
        summary="A single pet",
        parameters={"id": {"location": "path", "type": "integer"}},
        responses={404: {"description": "Not found"}},
        servers=[{"url": "https://pets.example.com"}],
        tags=["pets"],
    )
    definitions.add_operation("get_pet", path="/pets/{id}", responses={200: {"type": "object"}})
    definitions.add_operation(
        "delete_pet",
        path="/pets/{id}",
        method="delete",
        responses={204: {}, 404: {"description": "No such pet"}},
    )
    definitions.add_operation("list_orders", path="/orders", security=[{"oauth": ["read"]}])
    return definitions


@pytest.fixture
def pets() -> Definitions:
    return build_pets().freeze()


class TestPathNames:
    """Test normalizing path names."""

    @pytest.mark.parametrize(
        "name,expected",
        [("pets", "/pets"), ("/pets/", "/pets"), ("", "/"), (None, "/"), ("/", "/")],
    )
    def test_normalize_path(self, name, expected):
        assert normalize_path(name) == expected

    def test_ancestors(self):
        assert ancestors("/pets/{id}") == ["/pets/{id}", "/pets", "/"]
        assert ancestors("/") == ["/"]

    def test_paths_are_keyed_by_normalized_name(self, pets):
        assert set(pets.paths) == {"/", "/pets/{id}"}
        assert isinstance(pets.find_path("pets/{id}"), Path)
        assert pets.find_path("/unknown") is None


class TestCommonAttributes:
    """Test attributes inherited from path items."""

    def test_path_items_nearest_first(self, pets):
        assert [item.name for item in pets.path_items("/pets/{id}/photos")] == ["/pets/{id}", "/"]

    def test_parameters(self, pets):
        operation = pets.resolve_operation("get_pet")
        assert operation.parameters == {}
        assert list(operation.effective_parameters(pets)) == ["id"]
        assert operation.effective_parameters() == {}

    def test_own_parameter_wins(self):
        definitions = build_pets()
        operation = definitions.add_operation(
            "put_pet", path="/pets/{id}", method="put", parameters={"id": {"location": "path"}}
        )
        parameter = operation.effective_parameters(definitions)["id"]
        assert parameter is operation.parameters["id"]

    def test_responses(self, pets):
        operation = pets.resolve_operation("delete_pet")
        responses = operation.effective_responses(pets)
        assert set(responses) == {"204", "404", "default"}
        assert responses["404"].description == "No such pet"

    def test_response_for_inherited_status(self, pets):
        status, response = pets.resolve_operation("get_pet").response_for(500, pets)
        assert str(status) == "default"
        assert response.description == "Unexpected error"

    def test_security(self, pets):
        get_pet = pets.resolve_operation("get_pet")
        assert [r.to_document() for r in get_pet.effective_security(pets)] == [{"api_key": []}]
        list_orders = pets.resolve_operation("list_orders")
        assert [r.to_document() for r in list_orders.effective_security(pets)] == [
            {"oauth": ["read"]}
        ]

    def test_tags(self, pets):
        assert pets.resolve_operation("get_pet").effective_tags(pets) == ["pets", "store"]
        assert pets.resolve_operation("list_orders").effective_tags(pets) == ["store"]

    def test_request_body(self):
        definitions = Definitions()
        definitions.add_path("/uploads", request_body={"type": "object"})
        operation = definitions.add_operation("upload", path="/uploads/{id}", method="post")
        assert operation.request_body is None
        assert operation.effective_request_body(definitions) is not None

    def test_freeze(self, pets):
        assert pets.find_path("/pets/{id}").frozen


class TestPathDocuments:
    """Test path item objects of complete documents."""

    def test_shared_parameters_in_path_item(self, pets):
        path_item = to_document(pets, "3.0")["paths"]["/pets/{id}"]
        assert path_item["summary"] == "A single pet"
        assert path_item["servers"] == [{"url": "https://pets.example.com"}]
        assert path_item["parameters"] == [
            {"name": "id", "in": "path", "required": True, "schema": {"type": "integer"}}
        ]
        assert set(path_item) == {"summary", "servers", "parameters", "get", "delete"}
        assert "parameters" not in path_item["get"]

    def test_inherited_responses_in_operation(self, pets):
        operation = to_document(pets, "3.0")["paths"]["/pets/{id}"]["get"]
        assert list(operation["responses"]) == ["200", "404", "default"]
        assert operation["tags"] == ["pets", "store"]
        assert operation["security"] == [{"api_key": []}]

    def test_path_item_in_2_0(self, pets):
        path_item = to_document(pets, "2.0")["paths"]["/pets/{id}"]
        assert path_item["parameters"] == [
            {"name": "id", "in": "path", "required": True, "type": "integer"}
        ]
        assert "servers" not in path_item
        assert "summary" not in path_item

    def test_paths_without_path_items(self, definitions):
        path_item = to_document(definitions, "3.0")["paths"]["/pets"]
        assert set(path_item) == {"get", "post"}


class TestCallbacks:
    """Test callbacks of operations."""

    def build_operation(self) -> Operation:
        operation = Operation("subscribe", method="post")
        operation.add_callback(
            "on_event",
            operations={
                "{$request.body#/callbackUrl}": {
                    "method": "post",
                    "request_body": {"type": "object"},
                    "responses": {200: {}},
                }
            },
        )
        return operation

    def test_callback_operations(self):
        callback = self.build_operation().callbacks["on_event"]
        assert isinstance(callback, Callback)
        (operation,) = callback.operations.values()
        assert operation.path is None
        assert operation.method == "post"

    def test_callbacks_in_3_0(self):
        document = to_document(self.build_operation(), "3.0")
        callback = document["callbacks"]["on_event"]["{$request.body#/callbackUrl}"]["post"]
        assert callback["requestBody"]["content"]["application/json"]["schema"]["type"] == "object"
        assert list(callback["responses"]) == ["200"]

    def test_no_callbacks_in_2_0(self):
        assert "callbacks" not in to_document(self.build_operation(), "2.0")

    def test_blank_expression(self):
        with pytest.raises(InvalidArgumentError, match="expression can't be blank"):
            Callback().add_operation("")

    def test_callbacks_from_keywords(self):
        operation = Operation(
            "subscribe", callbacks={"on_event": {"operations": {"{$request.body#/url}": {}}}}
        )
        assert operation.callbacks["on_event"].to_document("3.1") == {
            "{$request.body#/url}": {"get": {"responses": {}}}
        }

    def test_callbacks_are_frozen(self):
        operation = self.build_operation().freeze()
        assert operation.callbacks["on_event"].frozen
