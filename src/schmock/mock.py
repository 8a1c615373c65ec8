"""Mock builder and built mock instance.

``MockBuilder`` is mutable during setup (routes, plugins, config, state).
``build()`` compiles everything into a ``MockInstance`` whose routes and
plugin order are frozen; only its persistent state and call history
change afterwards.

Build-time failures (bad route keys, bad definitions, failing plugin
factories) raise from ``build()`` / ``use()``. Request-time failures never
raise from ``handle()``; they come back as error responses.
"""

from __future__ import annotations

import copy
import functools
import logging
from collections.abc import Callable, Mapping
from dataclasses import replace
from typing import Any

import anyio

from schmock._internal.types import EventHandler, ResponseFunction
from schmock.config import MockConfig
from schmock.dispatch.handler import Dispatcher
from schmock.events import EventBus
from schmock.history import CallHistory, RequestRecord
from schmock.http.request import RequestOptions
from schmock.http.response import Response
from schmock.plugins.protocol import Plugin
from schmock.plugins.registry import PluginRegistry
from schmock.routing.route import MISSING, CompiledRoute, RouteDefinition
from schmock.routing.router import Router, compile_routes

logger = logging.getLogger("schmock.build")


def _log_route(route: CompiledRoute) -> None:
    logger.debug("Route defined: %s -> %s", route.key, route.path)


class MockBuilder:
    """Fluent setup surface for a mock.

    Usage::

        mock = (
            schmock(namespace="/api")
            .state({"users": []})
            .routes({"GET /users": lambda ctx: ctx.state["users"]})
            .use(auth_plugin)
            .build()
        )

    Routes can also be registered with a decorator::

        builder = schmock()

        @builder.route("GET /users/:id")
        def get_user(ctx):
            return {"id": ctx.params["id"]}
    """

    __slots__ = ("_config", "_plugins", "_routes")

    def __init__(self, config: MockConfig | None = None) -> None:
        self._config: MockConfig = config or MockConfig()
        self._routes: list[tuple[str, Any]] = []
        self._plugins = PluginRegistry()

    # -- Configuration --

    def config(self, **overrides: Any) -> MockBuilder:
        """Override config fields (``namespace``, ``delay``, ``debug``, ``state``)."""
        self._config = replace(self._config, **overrides)
        return self

    def state(self, initial: Mapping[str, Any]) -> MockBuilder:
        """Set the initial persistent state shared by every request."""
        self._config = replace(self._config, state=initial)
        return self

    # -- Route registration --

    def route(
        self,
        route_key: str,
        response: Any = MISSING,
        *,
        delay: Any = None,
        content_type: str | None = None,
        **extra: Any,
    ) -> Any:
        """Register one route.

        With *response* given, registers it and returns the builder. Without
        it, returns a decorator that registers the decorated function::

            builder.route("GET /health", {"ok": True})

            @builder.route("POST /users", content_type="application/json")
            async def create_user(ctx): ...
        """
        if response is MISSING:

            def decorator(func: ResponseFunction) -> ResponseFunction:
                self._add_route(route_key, func, delay, content_type, extra)
                return func

            return decorator

        self._add_route(route_key, response, delay, content_type, extra)
        return self

    def routes(self, routes: Mapping[str, Any]) -> MockBuilder:
        """Register a table of ``{route_key: definition}``.

        Values are response functions or static data (a dict is served as
        the body). Per-route options go through ``RouteDefinition``, and
        ``RouteDefinition()`` with no response leaves generation to plugins.
        """
        self._routes.extend(routes.items())
        return self

    def _add_route(
        self,
        route_key: str,
        response: Any,
        delay: Any,
        content_type: str | None,
        extra: dict[str, Any],
    ) -> None:
        definition = RouteDefinition(
            response=response,
            delay=delay,
            content_type=content_type,
            extra=extra,
        )
        self._routes.append((route_key, definition))

    # -- Plugins --

    def use(self, plugin: Plugin | Mapping[str, Any] | Callable[[], Any]) -> MockBuilder:
        """Register a plugin or a plugin factory (invoked immediately)."""
        self._plugins.register(plugin)
        return self

    # -- Build --

    def build(self) -> MockInstance:
        """Compile routes and plugin order into a new ``MockInstance``.

        Raises ``RouteParseError`` / ``RouteDefinitionError`` for bad routes.
        With ``debug`` on, logs the compiled routes and plugin order on the
        ``schmock.build`` logger.
        """
        config = self._config
        router = compile_routes(
            self._routes,
            config.normalized_namespace,
            on_route=_log_route if config.debug else None,
        )
        plugins = self._plugins.ordered()
        if config.debug:
            for plugin in plugins:
                logger.debug(
                    "Plugin %s (enforce=%s, hooks=%s)",
                    plugin.label,
                    plugin.enforce,
                    ", ".join(plugin.hooks()) or "none",
                )
        return MockInstance(config=config, router=router, plugins=plugins)


class MockInstance:
    """A built mock. Answers ``handle()`` calls like an HTTP service would.

    Thread safety:
        Routes and plugin order are immutable. Persistent state is one
        dict shared by every call with no locking; concurrent
        read-modify-write across an ``await`` can race between
        interleaved calls. Call history appends under a lock.
    """

    __slots__ = ("_config", "_dispatcher", "_events", "_history", "_initial_state", "_router", "_state")

    def __init__(self, *, config: MockConfig, router: Router, plugins: tuple[Plugin, ...]) -> None:
        self._config = config
        self._router = router
        self._initial_state: dict[str, Any] = copy.deepcopy(dict(config.state or {}))
        self._state: dict[str, Any] = copy.deepcopy(self._initial_state)
        self._events = EventBus()
        self._history = CallHistory()
        self._dispatcher = Dispatcher(
            router=router,
            plugins=plugins,
            events=self._events,
            state=self._state,
            config=config,
            history=self._history,
        )

    # -- Requests --

    async def handle(
        self,
        method: str,
        path: str,
        *,
        headers: Mapping[str, str] | None = None,
        body: Any = None,
        query: Mapping[str, str] | None = None,
    ) -> Response:
        """Handle one request and return its ``Response``.

        Usage::

            response = await mock.handle("GET", "/users/1", headers={"Authorization": "Bearer t"})
            assert response.status == 200
        """
        options = RequestOptions(headers=headers, body=body, query=query)
        return await self._dispatcher.handle(method, path, options)

    def handle_sync(
        self,
        method: str,
        path: str,
        *,
        headers: Mapping[str, str] | None = None,
        body: Any = None,
        query: Mapping[str, str] | None = None,
    ) -> Response:
        """Blocking ``handle()`` for synchronous code. Not for use inside an event loop."""
        call = functools.partial(self.handle, method, path, headers=headers, body=body, query=query)
        return anyio.run(call)

    # -- Events --

    def on(self, event_type: str, handler: EventHandler) -> None:
        """Listen for ``request:start``, ``request:end`` or ``error``."""
        self._events.on(event_type, handler)

    def off(self, event_type: str, handler: EventHandler) -> None:
        self._events.off(event_type, handler)

    # -- Introspection --

    @property
    def config(self) -> MockConfig:
        return self._config

    @property
    def routes(self) -> tuple[CompiledRoute, ...]:
        """Compiled routes in matching order."""
        return self._router.routes

    @property
    def state(self) -> dict[str, Any]:
        """The persistent state dict (the live object, not a copy)."""
        return self._state

    # -- Call history --

    def history(self, method: str | None = None, path: str | None = None) -> list[RequestRecord]:
        """Recorded requests, optionally filtered by method and path (request path or route pattern)."""
        return self._history.entries(method, path)

    def called(self, method: str | None = None, path: str | None = None) -> bool:
        return bool(self._history.entries(method, path))

    def call_count(self, method: str | None = None, path: str | None = None) -> int:
        return len(self._history.entries(method, path))

    def last_request(self, method: str | None = None, path: str | None = None) -> RequestRecord | None:
        return self._history.last(method, path)

    # -- Reset --

    def reset_history(self) -> None:
        self._history.clear()

    def reset_state(self) -> None:
        """Restore the initial state in place; the dict object stays the same."""
        self._state.clear()
        self._state.update(copy.deepcopy(self._initial_state))

    def reset(self) -> None:
        """Clear history and restore the initial state."""
        self.reset_history()
        self.reset_state()


def schmock(config: MockConfig | None = None, **overrides: Any) -> MockBuilder:
    """Create a new ``MockBuilder``.

    Usage::

        mock = schmock(debug=True).routes({"GET /ping": "pong"}).build()
        response = await mock.handle("GET", "/ping")
    """
    base = config or MockConfig()
    if overrides:
        base = replace(base, **overrides)
    return MockBuilder(base)
