"""Per-call request context passed through the plugin pipeline.

A ``RequestContext`` is created fresh for every ``handle()`` call and
dropped when the call ends. Two stores hang off it:

- ``state``: a transient dict private to this call (plugins use it to
  hand values from one hook to the next)
- ``route_state``: the mock instance's persistent state, the *same*
  dict object for every call

Concurrency:
    ``route_state`` is shared by reference across interleaved ``handle()``
    calls with no locking. Read-modify-write sequences that span an
    ``await`` can race; that is the caller's concern.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from schmock.routing.route import CompiledRoute


@dataclass(frozen=True, slots=True)
class RequestOptions:
    """Optional request data accepted by ``handle()``."""

    headers: Mapping[str, str] | None = None
    body: Any = None
    query: Mapping[str, str] | None = None


@dataclass(slots=True)
class RequestContext:
    """Everything a plugin hook sees about the in-flight request.

    Mutable: hooks may edit it in place, or ``before_request`` may return
    a replacement (``dataclasses.replace(context, headers=...)``).
    """

    method: str
    path: str
    route: CompiledRoute | None
    params: dict[str, str] = field(default_factory=dict)
    query: dict[str, str] = field(default_factory=dict)
    headers: dict[str, str] = field(default_factory=dict)
    body: Any = None
    state: dict[str, Any] = field(default_factory=dict)
    route_state: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def create(
        cls,
        method: str,
        path: str,
        options: RequestOptions,
        *,
        route: CompiledRoute | None = None,
        params: Mapping[str, str] | None = None,
        route_state: dict[str, Any] | None = None,
    ) -> RequestContext:
        """Build a fresh context. ``route_state`` is kept by reference."""
        return cls(
            method=method,
            path=path,
            route=route,
            params=dict(params or {}),
            query=dict(options.query or {}),
            headers=dict(options.headers or {}),
            body=options.body,
            state={},
            route_state=route_state if route_state is not None else {},
        )

    def to_response_context(self) -> ResponseContext:
        return ResponseContext(
            state=self.route_state,
            params=self.params,
            query=self.query,
            body=self.body,
            headers=self.headers,
            method=self.method,
            path=self.path,
        )


@dataclass(frozen=True, slots=True)
class ResponseContext:
    """What a route response function receives.

    ``state`` is the persistent per-instance state, shared across calls.
    """

    state: dict[str, Any]
    params: dict[str, str]
    query: dict[str, str]
    body: Any
    headers: dict[str, str]
    method: str
    path: str
