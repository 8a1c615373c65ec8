"""Tests for schmock.routing.router: definitions, compilation and first-match lookup."""

import pytest

from schmock.errors import RouteDefinitionError, RouteParseError
from schmock.routing.route import MISSING, RouteDefinition
from schmock.routing.router import Router, coerce_definition, compile_routes


class TestCoerceDefinition:
    def test_dict_is_static_data(self) -> None:
        definition = coerce_definition("GET /x", {"ok": True, "response": [1]})
        assert definition.response == {"ok": True, "response": [1]}
        assert definition.extra == {}

    def test_function(self) -> None:
        def handler(ctx):
            return "hi"

        assert coerce_definition("GET /x", handler).response is handler

    def test_list_is_static(self) -> None:
        assert coerce_definition("GET /x", [1, 2]).response == [1, 2]

    def test_empty_dict_is_static_data(self) -> None:
        definition = coerce_definition("GET /x", {})
        assert definition.response == {}
        assert definition.has_response is True

    def test_definition_without_response(self) -> None:
        definition = coerce_definition("GET /x", RouteDefinition())
        assert definition.response is MISSING
        assert definition.has_response is False

    def test_none_is_missing_definition(self) -> None:
        with pytest.raises(RouteDefinitionError, match="missing"):
            coerce_definition("GET /x", None)

    def test_route_definition_passes_through(self) -> None:
        definition = RouteDefinition(response="x")
        assert coerce_definition("GET /x", definition) is definition


class TestRouterCompile:
    def test_content_type_detection(self) -> None:
        router = compile_routes({"GET /text": "hello", "GET /json": {"a": 1}})
        by_key = {route.key: route for route in router.routes}
        assert by_key["GET /text"].definition.content_type == "text/plain"
        assert by_key["GET /json"].definition.content_type == "application/json"

    def test_explicit_content_type_kept(self) -> None:
        router = compile_routes({"GET /x": RouteDefinition(response="<p/>", content_type="text/html")})
        assert router.routes[0].definition.content_type == "text/html"

    def test_unserializable_static_json_rejected(self) -> None:
        with pytest.raises(RouteDefinitionError, match="not valid JSON"):
            compile_routes({"GET /x": {1, 2}})

    def test_negative_delay_rejected(self) -> None:
        with pytest.raises(RouteDefinitionError):
            compile_routes({"GET /x": RouteDefinition(response=1, delay=-1)})

    def test_reversed_delay_range_rejected(self) -> None:
        with pytest.raises(RouteDefinitionError):
            compile_routes({"GET /x": RouteDefinition(response=1, delay=[5, 1])})

    def test_delay_range_normalized_to_tuple(self) -> None:
        router = compile_routes({"GET /x": RouteDefinition(response=1, delay=[0, 0.01])})
        assert router.routes[0].definition.delay == (0, 0.01)

    def test_bad_key_raises_parse_error(self) -> None:
        with pytest.raises(RouteParseError):
            compile_routes({"get /x": 1})

    def test_no_adds_after_compile(self) -> None:
        router = compile_routes({"GET /x": 1})
        with pytest.raises(RuntimeError, match="after compilation"):
            router.add("GET /y", 2)

    def test_on_route_callback(self) -> None:
        seen: list[str] = []
        compile_routes({"GET /a": 1, "GET /b": 2}, on_route=lambda route: seen.append(route.key))
        assert seen == ["GET /a", "GET /b"]

    def test_namespace_applied(self) -> None:
        router = compile_routes({"GET /users": []}, "/api")
        assert router.routes[0].path == "/api/users"
        assert router.match("GET", "/api/users") is not None
        assert router.match("GET", "/users") is None


class TestRouterMatch:
    def test_params_extracted(self) -> None:
        router = compile_routes({"GET /a/:x/b/:y": 1})
        match = router.match("GET", "/a/V1/b/V2")
        assert match is not None
        assert match.params == {"x": "V1", "y": "V2"}

    def test_method_must_match(self) -> None:
        router = compile_routes({"GET /users": 1})
        assert router.match("POST", "/users") is None

    def test_empty_param_segment_never_matches(self) -> None:
        router = compile_routes({"GET /users/:id": 1})
        assert router.match("GET", "/users/") is None

    def test_first_registered_wins(self) -> None:
        router = compile_routes({"GET /users/:id": "param", "GET /users/me": "literal"})
        match = router.match("GET", "/users/me")
        assert match is not None
        assert match.route.key == "GET /users/:id"

    def test_literal_registered_first_wins(self) -> None:
        router = compile_routes({"GET /users/me": "literal", "GET /users/:id": "param"})
        match = router.match("GET", "/users/me")
        assert match is not None
        assert match.route.key == "GET /users/me"

    def test_matching_is_idempotent(self) -> None:
        router = compile_routes({"GET /users/:id": 1})
        first = router.match("GET", "/users/9")
        second = router.match("GET", "/users/9")
        assert first is not None and second is not None
        assert first.route is second.route
        assert first.params == second.params

    def test_no_routes(self) -> None:
        assert Router().match("GET", "/anything") is None
