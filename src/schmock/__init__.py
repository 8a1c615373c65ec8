"""Schmock: an in-process HTTP mock for tests.

Declare routes, optionally add plugins, build, and call ``handle()``.
No server, no sockets.

Basic usage::

    from schmock import schmock

    mock = (
        schmock(namespace="/api")
        .routes({
            "GET /users/:id": lambda ctx: {"id": ctx.params["id"]},
            "POST /users": lambda ctx: (201, ctx.body),
        })
        .build()
    )

    response = await mock.handle("GET", "/api/users/42")
    assert response.status == 200

Over ``httpx``::

    from schmock.testing import SchmockTransport
    client = httpx.AsyncClient(transport=SchmockTransport(mock), base_url="http://mock")
"""

__version__ = "0.1.0.dev0"
__all__ = [
    "HTTP_METHODS",
    "Event",
    "EventBus",
    "MockBuilder",
    "MockConfig",
    "MockInstance",
    "Plugin",
    "PluginError",
    "RequestContext",
    "RequestRecord",
    "Response",
    "ResponseContext",
    "ResponseGenerationError",
    "RouteDefinition",
    "RouteDefinitionError",
    "RouteNotFoundError",
    "RouteParseError",
    "SchmockError",
    "generator_plugin",
    "get_context",
    "schmock",
    "transformer_plugin",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import schmock`` fast while providing a clean top-level API.
    """
    if name in ("schmock", "MockBuilder", "MockInstance"):
        from schmock import mock as _mock

        return getattr(_mock, name)

    if name == "MockConfig":
        from schmock.config import MockConfig

        return MockConfig

    if name in ("Plugin", "generator_plugin", "transformer_plugin"):
        from schmock import plugins as _plugins

        return getattr(_plugins, name)

    if name == "Response":
        from schmock.http.response import Response

        return Response

    if name in ("RequestContext", "ResponseContext"):
        from schmock.http import request as _request

        return getattr(_request, name)

    if name == "RouteDefinition":
        from schmock.routing.route import RouteDefinition

        return RouteDefinition

    if name == "HTTP_METHODS":
        from schmock.routing.parser import HTTP_METHODS

        return HTTP_METHODS

    if name in ("Event", "EventBus"):
        from schmock import events as _events

        return getattr(_events, name)

    if name == "RequestRecord":
        from schmock.history import RequestRecord

        return RequestRecord

    if name == "get_context":
        from schmock.context import get_context

        return get_context

    if name in (
        "PluginError",
        "ResponseGenerationError",
        "RouteDefinitionError",
        "RouteNotFoundError",
        "RouteParseError",
        "SchmockError",
    ):
        from schmock import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
