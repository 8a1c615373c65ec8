"""Mock response with chainable .with_*() transformation API.

Each transformation returns a new Response; hooks replace responses rather
than edit them.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from typing import Any


@dataclass(frozen=True, slots=True)
class Response:
    """The normalized response every pipeline stage works with.

    ``body`` is whatever the route or plugins produced; it is never
    serialized here.
    """

    status: int = 200
    body: Any = None
    headers: dict[str, str] = field(default_factory=dict)

    # -- Chainable transformations --

    def with_status(self, status: int) -> Response:
        """Return a new Response with a different status code."""
        return replace(self, status=status)

    def with_body(self, body: Any) -> Response:
        """Return a new Response with a different body."""
        return replace(self, body=body)

    def with_header(self, name: str, value: str) -> Response:
        """Return a new Response with an additional header."""
        return replace(self, headers={**self.headers, name: value})

    def with_headers(self, headers: Mapping[str, str]) -> Response:
        """Return a new Response with additional headers."""
        return replace(self, headers={**self.headers, **headers})


def is_status_tuple(value: Any) -> bool:
    """True if *value* is a ``[status, body]`` or ``[status, body, headers]`` tuple.

    The status must be an ``int`` in 100-599, so plain numeric data such
    as ``[1, 2, 3]`` is never mistaken for a tuple.
    """
    if not isinstance(value, (list, tuple)) or len(value) not in (2, 3):
        return False
    status = value[0]
    return isinstance(status, int) and not isinstance(status, bool) and 100 <= status <= 599


def normalize_payload(payload: Any) -> Response:
    """Convert a generated payload into a ``Response``.

    - ``Response``: returned unchanged
    - status tuple: ``Response(status, body, headers or {})``
    - anything else: ``Response(200, payload, {})``
    """
    if isinstance(payload, Response):
        return payload
    if is_status_tuple(payload):
        status, body, *rest = payload
        headers = rest[0] if rest else None
        return Response(status=status, body=body, headers=dict(headers or {}))
    return Response(status=200, body=payload, headers={})


def coerce_response(value: Any) -> Response | None:
    """Return *value* as a ``Response`` if it is response-shaped, else ``None``.

    Response-shaped means a ``Response`` instance or a mapping with a
    ``status`` key; missing ``body``/``headers`` default to ``None``/``{}``.
    """
    if isinstance(value, Response):
        return value
    if isinstance(value, Mapping) and "status" in value:
        return Response(
            status=value["status"],
            body=value.get("body"),
            headers=dict(value.get("headers") or {}),
        )
    return None


def error_body(message: str, code: str) -> dict[str, str]:
    """The ``{"error", "code"}`` body shared by every error response."""
    return {"error": message, "code": code}
