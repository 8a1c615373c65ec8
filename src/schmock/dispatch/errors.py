"""Error path for the dispatch engine.

Maps failures raised anywhere in the pipeline to a ``Response``, giving
each plugin's ``on_error`` hook a chance to recover first.
"""

import logging
from typing import Any

from schmock._internal.invoke import invoke
from schmock.errors import INTERNAL_ERROR, PluginError, RouteNotFoundError, SchmockError
from schmock.http.request import RequestContext
from schmock.http.response import Response, coerce_response, error_body
from schmock.plugins.protocol import Plugin

logger = logging.getLogger("schmock.dispatch")


def describe_error(error: Any) -> tuple[str, str]:
    """Return ``(message, code)`` for any error value.

    ``SchmockError`` keeps its own code; everything else, including
    non-exception values handed back by ``on_error`` hooks, reports
    ``INTERNAL_ERROR``.
    """
    if isinstance(error, SchmockError):
        return error.message, error.code
    return str(error), INTERNAL_ERROR


def internal_error_response(error: Any) -> Response:
    message, code = describe_error(error)
    return Response(status=500, body=error_body(message, code), headers={})


def not_found_response(error: RouteNotFoundError) -> Response:
    return Response(status=404, body=error_body(error.message, error.code), headers={})


async def recover(
    error: BaseException,
    context: RequestContext,
    plugins: tuple[Plugin, ...],
    *,
    debug: bool = False,
) -> tuple[Response, Any]:
    """Run ``on_error`` hooks in plugin order and build the final response.

    Returns ``(response, last_error)``. The first hook returning a
    response-shaped value wins and its response is returned as-is. Any
    other non-``None`` return replaces the current error. A hook that
    raises, or returns a mapping that cannot become a ``Response``, is
    wrapped as ``PluginError`` and becomes the current error.
    Without a recovery the last error seen is reported as a 500.
    """
    current: Any = error
    for plugin in plugins:
        if plugin.on_error is None:
            continue
        try:
            result = await invoke(plugin.on_error, current, context)
            response = coerce_response(result)
        except Exception as exc:
            if debug:
                logger.debug("on_error of %s raised: %s", plugin.label, exc)
            current = exc if isinstance(exc, PluginError) else PluginError(plugin.name, exc)
            continue

        if response is not None:
            if debug:
                logger.debug("%s recovered with status %s", plugin.label, response.status)
            return response, current
        if result is not None:
            current = result

    return internal_error_response(current), current
