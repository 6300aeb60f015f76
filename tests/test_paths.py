import json

import pytest

from openapi_synth.document.document import Document
from openapi_synth.document.paths import (
    from_nested_form,
    parse_status,
    route_to_dict,
    to_nested_form,
)
from openapi_synth.document.route import Route, new_route
from openapi_synth.errors import DocumentLoadError


def _round_trip(routes: dict) -> dict:
    return from_nested_form(json.loads(json.dumps(to_nested_form(routes))))


class TestNestedForm:
    def test_grouped_by_path(self):
        routes = {
            "my/path|get": Route(path="my/path", method="get"),
            "my/path|put": Route(path="my/path", method="put"),
            "my/path|delete": Route(path="my/path", method="delete"),
        }
        assert to_nested_form(routes) == {"my/path": {"delete": {}, "get": {}, "put": {}}}

    def test_round_trip(self):
        doc = Document.new("test", "1.0.0")
        route = doc.get_route("/pets/{id}", "put")
        route.with_details("pets", "Update a pet")
        route.path_param("id", 7).query_param("dry_run", [True, False])
        route.add_request({"name": "rex", "tags": ["a"]})
        route.add_response(200, {"id": 7, "name": "rex"}, description="Updated")
        route.add_response(400, {"error": "bad"})
        route.add_response("default", {"error": "oops"})
        doc.get_route("/pets/{id}", "get")

        assert _round_trip(doc.routes) == doc.routes

    def test_round_trip_after_compile(self):
        doc = Document.new("test", "1.0.0")
        doc.get_route("/a", "get").add_response(200, {"id": 1})
        doc.get_route("/b", "post").add_request_json("{bad")
        doc.compile()
        assert _round_trip(doc.routes) == doc.routes

    def test_seeded_param_error_survives_round_trip(self):
        routes = {"/x/{id}|get": new_route("/x/{id}", "get")}
        loaded = _round_trip(routes)
        assert loaded["/x/{id}|get"].parameters["path|id"].error is not None

    def test_non_method_keys_skipped(self):
        routes = from_nested_form({"/a": {"parameters": [], "summary": "x", "get": {}}})
        assert list(routes) == ["/a|get"]

    def test_bad_operation(self):
        with pytest.raises(DocumentLoadError):
            from_nested_form({"/a": {"get": {"parameters": [{"in": "query"}]}}})

    def test_bad_path_item(self):
        with pytest.raises(DocumentLoadError):
            from_nested_form({"/a": ["get"]})


class TestRouteToDict:
    def test_statuses_in_order(self):
        route = new_route("/a", "get").add_response("default").add_response(404).add_response(200)
        assert list(route_to_dict(route)["responses"]) == ["200", "404", "default"]

    def test_parameters_list(self):
        route = new_route("/a", "get").query_param("limit", 10)
        assert route_to_dict(route)["parameters"] == [
            {
                "name": "limit",
                "in": "query",
                "required": False,
                "schema": {"type": "integer"},
                "examples": {"10": {"value": 10}},
            }
        ]


class TestParseStatus:
    def test_values(self):
        assert parse_status("200") == 200
        assert parse_status(404) == 404
        assert parse_status("default") == "default"

    def test_invalid(self):
        with pytest.raises(DocumentLoadError):
            parse_status("ok")
