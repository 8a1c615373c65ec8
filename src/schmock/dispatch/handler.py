"""Dispatch engine: answers one ``handle()`` call.

The only component that knows the pipeline order. Every call walks the
same fixed sequence:

1. ``request:start`` event
2. route match (no match: 404, no hooks run)
3. ``before_request`` hooks: may replace the context
4. ``before_generate`` hooks: first non-``None`` return short-circuits 5
5. generate: the route's response, else plugins' ``generate`` hooks
6. ``after_generate`` hooks: each return replaces the payload
7. normalize payload → ``Response``
8. ``before_response`` hooks: each return replaces the response
9. ``request:end`` event

Any exception in 2-8 is caught once, at the outer boundary, and handed to
the ``on_error`` hooks (see ``schmock.dispatch.errors``). Request-time
failures always come back as a ``Response``; ``handle()`` does not raise
for them.
"""

import copy
import logging
import random
import uuid
from typing import Any

import anyio

from schmock._internal.invoke import invoke
from schmock.config import Delay, MockConfig
from schmock.context import context_var
from schmock.dispatch.errors import not_found_response, recover
from schmock.errors import PluginError, ResponseGenerationError, RouteNotFoundError
from schmock.events import ERROR, REQUEST_END, REQUEST_START, EventBus
from schmock.history import CallHistory
from schmock.http.request import RequestContext, RequestOptions
from schmock.http.response import Response, coerce_response, normalize_payload
from schmock.plugins.protocol import Plugin
from schmock.routing.route import CompiledRoute
from schmock.routing.router import Router

logger = logging.getLogger("schmock.dispatch")


class Dispatcher:
    """Runs the request pipeline against a built mock's frozen parts.

    Holds no per-request state: everything for one call lives in its
    ``RequestContext``. ``state`` is the instance's persistent state and
    is shared, unlocked, by every call.
    """

    __slots__ = ("_config", "_events", "_history", "_plugins", "_router", "_state")

    def __init__(
        self,
        *,
        router: Router,
        plugins: tuple[Plugin, ...],
        events: EventBus,
        state: dict[str, Any],
        config: MockConfig,
        history: CallHistory | None = None,
    ) -> None:
        self._router = router
        self._plugins = plugins
        self._events = events
        self._state = state
        self._config = config
        self._history = history

    async def handle(
        self,
        method: str,
        path: str,
        options: RequestOptions | None = None,
    ) -> Response:
        """Process a single request through the full pipeline."""
        options = options or RequestOptions()
        request_id = uuid.uuid4().hex[:7]
        self._log(request_id, "%s %s", method, path)
        self._events.emit(REQUEST_START, {"method": method, "path": path})

        context: RequestContext | None = None
        token = None
        try:
            match = self._router.match(method, path)
            if match is None:
                return self._not_found(method, path, request_id)

            self._log(request_id, "Matched route %s", match.route.key)
            context = RequestContext.create(
                method,
                path,
                options,
                route=match.route,
                params=match.params,
                route_state=self._state,
            )
            token = context_var.set(context)

            context = await self._before_request(context, request_id)
            context_var.set(context)

            payload = await self._before_generate(context, request_id)
            if payload is None:
                payload = await self._generate(context, match.route, request_id)
            payload = await self._after_generate(payload, context, request_id)

            response = normalize_payload(payload)
            response = await self._before_response(response, context)

            await self._apply_delay(match.route, request_id)
        except Exception as exc:
            self._log(request_id, "Pipeline failed: %s", exc)
            if context is None:
                context = RequestContext.create(method, path, options, route_state=self._state)
            response, _ = await recover(exc, context, self._plugins, debug=self._config.debug)
            self._events.emit(ERROR, {"error": exc, "method": method, "path": path})
            self._record(context, response)
            self._finish(method, path, response, request_id)
            return response
        finally:
            if token is not None:
                context_var.reset(token)

        self._record(context, response)
        self._finish(method, path, response, request_id)
        return response

    # -- Pipeline stages --

    async def _before_request(self, context: RequestContext, request_id: str) -> RequestContext:
        for plugin in self._plugins:
            if plugin.before_request is None:
                continue
            self._log(request_id, "before_request: %s", plugin.label)
            result = await self._call(plugin, plugin.before_request, context)
            if result is None:
                continue
            if not isinstance(result, RequestContext):
                cause = TypeError(
                    f"before_request must return a RequestContext or None, got {type(result).__name__}"
                )
                raise PluginError(plugin.name, cause)
            context = result
        return context

    async def _before_generate(self, context: RequestContext, request_id: str) -> Any:
        for plugin in self._plugins:
            if plugin.before_generate is None:
                continue
            payload = await self._call(plugin, plugin.before_generate, context)
            if payload is not None:
                self._log(request_id, "before_generate short-circuit by %s", plugin.label)
                return payload
        return None

    async def _generate(self, context: RequestContext, route: CompiledRoute, request_id: str) -> Any:
        definition = route.definition

        if definition.has_response:
            producer = definition.response
            if callable(producer):
                return await invoke(producer, context.to_response_context())
            # Static data is shared by every call; hand out a copy
            return copy.deepcopy(producer)

        for plugin in self._plugins:
            if plugin.generate is None:
                continue
            payload = await self._call(plugin, plugin.generate, context)
            if payload is not None:
                self._log(request_id, "Payload generated by %s", plugin.label)
                return payload

        raise ResponseGenerationError(
            route.key, "route has no response and no plugin generated one"
        )

    async def _after_generate(self, payload: Any, context: RequestContext, request_id: str) -> Any:
        for plugin in self._plugins:
            if plugin.after_generate is None:
                continue
            self._log(request_id, "after_generate: %s", plugin.label)
            payload = await self._call(plugin, plugin.after_generate, payload, context)
        return payload

    async def _before_response(self, response: Response, context: RequestContext) -> Response:
        for plugin in self._plugins:
            if plugin.before_response is None:
                continue
            result = await self._call(plugin, plugin.before_response, response, context)
            try:
                replacement = coerce_response(result)
            except (TypeError, ValueError) as exc:
                raise PluginError(plugin.name, exc) from exc
            if replacement is None:
                cause = TypeError(
                    f"before_response must return a response, got {type(result).__name__}"
                )
                raise PluginError(plugin.name, cause)
            response = replacement
        return response

    # -- Helpers --

    async def _call(self, plugin: Plugin, hook: Any, *args: Any) -> Any:
        """Invoke one hook, wrapping whatever it raises as ``PluginError``."""
        try:
            return await invoke(hook, *args)
        except PluginError:
            raise
        except Exception as exc:
            raise PluginError(plugin.name, exc) from exc

    async def _apply_delay(self, route: CompiledRoute | None, request_id: str) -> None:
        delay: Delay = self._config.delay
        if route is not None and route.definition.delay is not None:
            delay = route.definition.delay
        seconds = random.uniform(*delay) if isinstance(delay, tuple) else delay
        if seconds > 0:
            self._log(request_id, "Delaying response %.3fs", seconds)
            await anyio.sleep(seconds)

    def _not_found(self, method: str, path: str, request_id: str) -> Response:
        error = RouteNotFoundError(method, path)
        self._log(request_id, "No route for %s %s", method, path)
        response = not_found_response(error)
        self._events.emit(ERROR, {"error": error, "method": method, "path": path})
        self._finish(method, path, response, request_id)
        return response

    def _record(self, context: RequestContext, response: Response) -> None:
        if self._history is not None and context.route is not None:
            self._history.record(context, response)

    def _finish(self, method: str, path: str, response: Response, request_id: str) -> None:
        self._log(request_id, "Responding %s", response.status)
        self._events.emit(REQUEST_END, {"method": method, "path": path, "status": response.status})

    def _log(self, request_id: str, message: str, *args: Any) -> None:
        if self._config.debug:
            logger.debug(f"[{request_id}] {message}", *args)
