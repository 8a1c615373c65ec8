"""Tests for schmock.routing.parser: route key parsing and matcher compilation."""

import pytest

from schmock.errors import ROUTE_PARSE_ERROR, RouteParseError
from schmock.routing.parser import HTTP_METHODS, apply_namespace, compile_matcher, parse_route_key


class TestParseRouteKey:
    def test_simple_route(self) -> None:
        parsed = parse_route_key("GET /users")
        assert parsed.method == "GET"
        assert parsed.path == "/users"
        assert parsed.param_names == ()
        assert parsed.key == "GET /users"

    def test_param_names_in_order(self) -> None:
        parsed = parse_route_key("GET /a/:x/b/:y")
        assert parsed.param_names == ("x", "y")

    def test_matcher_captures_params(self) -> None:
        parsed = parse_route_key("GET /a/:x/b/:y")
        found = parsed.matcher.match("/a/V1/b/V2")
        assert found is not None
        assert dict(zip(parsed.param_names, found.groups(), strict=True)) == {"x": "V1", "y": "V2"}

    def test_matcher_is_anchored(self) -> None:
        parsed = parse_route_key("GET /a/:x/b/:y")
        assert parsed.matcher.match("/a/V1/b/V2/extra") is None
        assert parsed.matcher.match("/prefix/a/V1/b/V2") is None

    def test_param_never_crosses_segments(self) -> None:
        parsed = parse_route_key("GET /files/:name")
        assert parsed.matcher.match("/files/a/b") is None

    def test_root_path(self) -> None:
        parsed = parse_route_key("GET /")
        assert parsed.matcher.match("/") is not None
        assert parsed.matcher.match("/x") is None

    @pytest.mark.parametrize("method", HTTP_METHODS)
    def test_all_methods_accepted(self, method: str) -> None:
        assert parse_route_key(f"{method} /x").method == method

    def test_literal_dot_is_not_a_wildcard(self) -> None:
        parsed = parse_route_key("GET /data.json")
        assert parsed.matcher.match("/data.json") is not None
        assert parsed.matcher.match("/dataxjson") is None

    def test_regex_metacharacters_are_literal(self) -> None:
        parsed = parse_route_key("GET /a+b/(c)")
        assert parsed.matcher.match("/a+b/(c)") is not None
        assert parsed.matcher.match("/aab/c") is None

    def test_lone_colon_is_literal(self) -> None:
        parsed = parse_route_key("GET /time/:")
        assert parsed.param_names == ()
        assert parsed.matcher.match("/time/:") is not None


class TestParseRouteKeyErrors:
    def test_lowercase_method(self) -> None:
        with pytest.raises(RouteParseError) as exc_info:
            parse_route_key("get /users")
        assert "uppercase" in str(exc_info.value)
        assert exc_info.value.code == ROUTE_PARSE_ERROR

    def test_unknown_method(self) -> None:
        with pytest.raises(RouteParseError, match="Unknown HTTP method"):
            parse_route_key("FETCH /users")

    def test_missing_separator(self) -> None:
        with pytest.raises(RouteParseError, match="Missing space"):
            parse_route_key("GET")

    def test_missing_method(self) -> None:
        with pytest.raises(RouteParseError, match="Missing HTTP method"):
            parse_route_key(" /users")

    def test_empty_path(self) -> None:
        with pytest.raises(RouteParseError, match="Path is empty"):
            parse_route_key("GET ")

    def test_path_without_slash(self) -> None:
        with pytest.raises(RouteParseError, match='must start with "/"'):
            parse_route_key("GET users")

    def test_message_names_the_key(self) -> None:
        with pytest.raises(RouteParseError) as exc_info:
            parse_route_key("GET users")
        assert exc_info.value.message.startswith('Invalid route key format: "GET users".')

    def test_non_string_key(self) -> None:
        with pytest.raises(RouteParseError):
            parse_route_key(42)  # type: ignore[arg-type]


class TestNamespace:
    def test_prefix_applied(self) -> None:
        parsed = apply_namespace(parse_route_key("GET /users/:id"), "/api")
        assert parsed.path == "/api/users/:id"
        assert parsed.key == "GET /users/:id"
        found = parsed.matcher.match("/api/users/7")
        assert found is not None
        assert found.groups() == ("7",)
        assert parsed.matcher.match("/users/7") is None

    def test_empty_namespace_is_identity(self) -> None:
        parsed = parse_route_key("GET /users")
        assert apply_namespace(parsed, "") is parsed

    def test_namespace_never_adds_params(self) -> None:
        parsed = apply_namespace(parse_route_key("GET /users"), "/:tenant")
        assert parsed.param_names == ()
        assert parsed.matcher.match("/:tenant/users") is not None
        assert parsed.matcher.match("/acme/users") is None

    def test_compile_matcher_escapes_prefix(self) -> None:
        matcher, names = compile_matcher("/x", prefix="/v1.0")
        assert names == ()
        assert matcher.match("/v1.0/x") is not None
        assert matcher.match("/v1x0/x") is None
