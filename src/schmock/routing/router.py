"""Compiled route table with first-registered-first-matched lookup.

Route keys are parsed and bound to their definitions when the mock is
built. The table is immutable afterwards; matching only reads it.
"""

import json
from collections.abc import Callable, Mapping
from typing import Any

from schmock.config import validate_delay
from schmock.errors import RouteDefinitionError
from schmock.routing.parser import apply_namespace, parse_route_key
from schmock.routing.route import CompiledRoute, RouteDefinition, RouteMatch


def coerce_definition(route_key: str, value: Any) -> RouteDefinition:
    """Turn a route-table value into a ``RouteDefinition``.

    A ``RouteDefinition`` is used as-is; use ``RouteDefinition()`` to let
    plugins generate the payload. Any other value, dicts included, is the
    response: a callable is a response function, anything else static data.

    ``None`` is a missing definition.
    """
    if value is None:
        raise RouteDefinitionError(route_key, "Route definition is missing")
    if isinstance(value, RouteDefinition):
        return value
    return RouteDefinition(response=value)


def _detect_content_type(definition: RouteDefinition) -> str:
    if isinstance(definition.response, str):
        return "text/plain"
    return "application/json"


def _normalize_delay(route_key: str, delay: Any) -> Any:
    if delay is None:
        return None
    try:
        return validate_delay(delay)
    except ValueError as exc:
        raise RouteDefinitionError(route_key, str(exc)) from exc


def _validate_definition(route_key: str, definition: RouteDefinition) -> RouteDefinition:
    """Check a definition and fill in its content type.

    Raises ``RouteDefinitionError`` for a negative or malformed delay, or
    static data that cannot be serialized as the declared JSON.
    """
    delay = _normalize_delay(route_key, definition.delay)

    content_type = definition.content_type or _detect_content_type(definition)
    response = definition.response
    if (
        definition.has_response
        and not callable(response)
        and content_type == "application/json"
    ):
        try:
            json.dumps(response)
        except (TypeError, ValueError) as exc:
            msg = f"Static response is not valid JSON but content type is application/json ({exc})"
            raise RouteDefinitionError(route_key, msg) from exc

    if content_type == definition.content_type and delay == definition.delay:
        return definition
    return RouteDefinition(
        response=definition.response,
        delay=delay,
        content_type=content_type,
        extra=definition.extra,
    )


class Router:
    """Compiled route table.

    Usage::

        router = Router(namespace="/api")
        router.add("GET /users/:id", lambda ctx: {"id": ctx.params["id"]})
        router.compile()
        match = router.match("GET", "/api/users/42")
    """

    __slots__ = ("_compiled", "_namespace", "_routes")

    def __init__(self, namespace: str = "") -> None:
        self._namespace = namespace
        self._routes: list[CompiledRoute] = []
        self._compiled = False

    def add(self, route_key: str, definition: Any) -> CompiledRoute:
        """Parse, namespace and validate a route. Must be called before compile()."""
        if self._compiled:
            msg = "Cannot add routes after compilation."
            raise RuntimeError(msg)

        parsed = apply_namespace(parse_route_key(route_key), self._namespace)
        checked = _validate_definition(route_key, coerce_definition(route_key, definition))
        route = CompiledRoute.from_parsed(parsed, checked)
        self._routes.append(route)
        return route

    def compile(self) -> None:
        """Freeze the router. No more routes can be added."""
        self._compiled = True

    @property
    def routes(self) -> tuple[CompiledRoute, ...]:
        """All compiled routes in registration order."""
        return tuple(self._routes)

    def match(self, method: str, path: str) -> RouteMatch | None:
        """Find the first registered route accepting *method* and *path*.

        Returns ``None`` when nothing matches. Capture group *i* becomes
        ``params[param_names[i]]``; a capture that matched an empty string
        disqualifies the route.
        """
        for route in self._routes:
            if route.method != method:
                continue
            found = route.matcher.match(path)
            if found is None:
                continue
            values = found.groups()
            if any(not value for value in values):
                continue
            return RouteMatch(route=route, params=dict(zip(route.param_names, values, strict=True)))
        return None


def compile_routes(
    routes: Mapping[str, Any] | list[tuple[str, Any]],
    namespace: str = "",
    *,
    on_route: Callable[[CompiledRoute], None] | None = None,
) -> Router:
    """Build a compiled ``Router`` from ``(key, definition)`` pairs.

    Parse and definition errors surface here, at build time.
    """
    router = Router(namespace)
    items = routes.items() if isinstance(routes, Mapping) else routes
    for route_key, definition in items:
        route = router.add(route_key, definition)
        if on_route is not None:
            on_route(route)
    router.compile()
    return router
