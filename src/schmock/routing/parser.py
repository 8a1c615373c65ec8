"""Route key parsing.

A route key is ``"METHOD /path"``: an uppercase HTTP verb, one space, and
a path starting with ``/``. Segments written ``:name`` capture exactly one
non-empty path segment; every other character is literal.

Examples::

    parse_route_key("GET /users")
    # ParsedRoute(method="GET", path="/users", param_names=())

    parse_route_key("DELETE /posts/:post_id/comments/:comment_id")
    # ParsedRoute(..., param_names=("post_id", "comment_id"))
"""

import re
from dataclasses import replace

from schmock.errors import RouteParseError
from schmock.routing.route import ParsedRoute

HTTP_METHODS: tuple[str, ...] = ("GET", "POST", "PUT", "DELETE", "PATCH", "HEAD", "OPTIONS")

_FORMAT_HINT = 'Expected format: "METHOD /path" (e.g., "GET /users")'

# One path segment, never empty, never crossing a "/"
_PARAM_PATTERN = "([^/]+)"


def is_http_method(method: str) -> bool:
    return method in HTTP_METHODS


def parse_route_key(route_key: str) -> ParsedRoute:
    """Parse a ``"METHOD /path"`` route key into a ``ParsedRoute``.

    Raises ``RouteParseError`` for an empty, lowercase, or unknown method,
    a missing separator, or an empty path or one not starting with ``/``.
    """
    if not isinstance(route_key, str):
        raise RouteParseError(repr(route_key), "Route key must be a string")

    method, sep, path = route_key.partition(" ")
    if not method:
        raise RouteParseError(route_key, f"Missing HTTP method. {_FORMAT_HINT}")
    if not sep:
        raise RouteParseError(route_key, f"Missing space between method and path. {_FORMAT_HINT}")
    if method not in HTTP_METHODS:
        if method.upper() in HTTP_METHODS:
            raise RouteParseError(
                route_key, f'HTTP method must be uppercase: "{method.upper()}". {_FORMAT_HINT}'
            )
        allowed = ", ".join(HTTP_METHODS)
        raise RouteParseError(route_key, f'Unknown HTTP method "{method}". Allowed: {allowed}')
    if not path:
        raise RouteParseError(route_key, f"Path is empty. {_FORMAT_HINT}")
    if not path.startswith("/"):
        raise RouteParseError(route_key, f'Path must start with "/". {_FORMAT_HINT}')

    matcher, param_names = compile_matcher(path)
    return ParsedRoute(
        method=method,
        path=path,
        matcher=matcher,
        param_names=param_names,
        key=route_key,
    )


def compile_matcher(path: str, prefix: str = "") -> tuple[re.Pattern[str], tuple[str, ...]]:
    """Build the anchored pattern for *path*, with *prefix* matched literally.

    Literal segments are escaped so ``.``, ``+``, ``(`` and friends never
    act as wildcards. Duplicate parameter names are kept; the later
    capture wins when params are extracted.
    """
    param_names: list[str] = []
    parts: list[str] = []
    for segment in path.split("/"):
        if len(segment) > 1 and segment.startswith(":"):
            param_names.append(segment[1:])
            parts.append(_PARAM_PATTERN)
        else:
            parts.append(re.escape(segment))
    body = re.escape(prefix) + "/".join(parts)
    return re.compile(rf"\A{body}\Z"), tuple(param_names)


def apply_namespace(parsed: ParsedRoute, namespace: str) -> ParsedRoute:
    """Prefix *parsed* with an already-normalized *namespace*.

    The namespace is escaped on its own, so it can never introduce
    parameters. An empty namespace returns *parsed* unchanged.
    """
    if not namespace:
        return parsed
    matcher, param_names = compile_matcher(parsed.path, prefix=namespace)
    return replace(
        parsed,
        path=namespace + parsed.path,
        matcher=matcher,
        param_names=param_names,
    )
