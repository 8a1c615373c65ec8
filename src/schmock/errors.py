"""Schmock exception hierarchy.

Shared across the parser, router, plugin registry, and dispatch engine so
every module raises and catches the same types. Every error carries a
machine-readable ``code`` that ends up in the ``code`` field of error
response bodies.
"""

from typing import Any

ROUTE_PARSE_ERROR = "ROUTE_PARSE_ERROR"
ROUTE_DEFINITION_ERROR = "ROUTE_DEFINITION_ERROR"
ROUTE_NOT_FOUND = "ROUTE_NOT_FOUND"
RESPONSE_GENERATION_ERROR = "RESPONSE_GENERATION_ERROR"
PLUGIN_ERROR = "PLUGIN_ERROR"
INTERNAL_ERROR = "INTERNAL_ERROR"


class SchmockError(Exception):
    """Base for all schmock-specific errors."""

    def __init__(self, message: str, code: str, context: Any = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.context = context


class RouteParseError(SchmockError):
    """Raised when a route key is not in ``"METHOD /path"`` form.

    Raised at registration time; never reaches a request.
    """

    def __init__(self, route_key: str, reason: str) -> None:
        super().__init__(
            f'Invalid route key format: "{route_key}". {reason}',
            ROUTE_PARSE_ERROR,
            {"route_key": route_key, "reason": reason},
        )
        self.route_key = route_key
        self.reason = reason


class RouteDefinitionError(SchmockError):
    """Raised at build time when a route definition is missing or invalid."""

    def __init__(self, route_key: str, reason: str) -> None:
        super().__init__(
            f'Invalid route definition for "{route_key}": {reason}',
            ROUTE_DEFINITION_ERROR,
            {"route_key": route_key, "reason": reason},
        )
        self.route_key = route_key
        self.reason = reason


class RouteNotFoundError(SchmockError):
    """No compiled route matched the request method and path."""

    def __init__(self, method: str, path: str) -> None:
        super().__init__(
            f"Route not found: {method} {path}",
            ROUTE_NOT_FOUND,
            {"method": method, "path": path},
        )
        self.method = method
        self.path = path


class ResponseGenerationError(SchmockError):
    """Neither the route nor any ``generate`` hook produced a payload."""

    def __init__(self, route_key: str, reason: str) -> None:
        super().__init__(
            f"Failed to generate response for route {route_key}: {reason}",
            RESPONSE_GENERATION_ERROR,
            {"route_key": route_key, "reason": reason},
        )
        self.route_key = route_key


class PluginError(SchmockError):
    """A plugin hook (or plugin factory) raised.

    Wraps the original exception, which is also chained as ``__cause__``.
    """

    def __init__(self, plugin_name: str, cause: BaseException) -> None:
        super().__init__(
            f'Plugin "{plugin_name}" failed: {cause}',
            PLUGIN_ERROR,
            {"plugin_name": plugin_name, "original_error": cause},
        )
        self.plugin_name = plugin_name
        self.cause = cause
        self.__cause__ = cause
