"""Call history: what a mock instance was asked, and what it answered.

Only requests that matched a route are recorded; 404s never reach the
history.
"""

import threading
import time
from dataclasses import dataclass, field
from typing import Any

from schmock.http.request import RequestContext
from schmock.http.response import Response


@dataclass(frozen=True, slots=True)
class RequestRecord:
    """One handled request and the response it produced."""

    method: str
    path: str
    route_key: str | None
    route_path: str | None
    params: dict[str, str]
    query: dict[str, str]
    headers: dict[str, str]
    body: Any
    response: Response
    timestamp: float = field(default_factory=time.time)

    def matches(self, method: str | None = None, path: str | None = None) -> bool:
        """Filter helper. *path* may be the request path or the route pattern."""
        if method is not None and self.method != method:
            return False
        if path is not None and path not in (self.path, self.route_path):
            return False
        return True


class CallHistory:
    """Append-only request log with filtered queries."""

    __slots__ = ("_lock", "_records")

    def __init__(self) -> None:
        self._records: list[RequestRecord] = []
        self._lock = threading.Lock()

    def record(self, context: RequestContext, response: Response) -> RequestRecord:
        route = context.route
        entry = RequestRecord(
            method=context.method,
            path=context.path,
            route_key=route.key if route is not None else None,
            route_path=route.path if route is not None else None,
            params=dict(context.params),
            query=dict(context.query),
            headers=dict(context.headers),
            body=context.body,
            response=response,
        )
        with self._lock:
            self._records.append(entry)
        return entry

    def entries(self, method: str | None = None, path: str | None = None) -> list[RequestRecord]:
        with self._lock:
            records = list(self._records)
        return [r for r in records if r.matches(method, path)]

    def last(self, method: str | None = None, path: str | None = None) -> RequestRecord | None:
        records = self.entries(method, path)
        return records[-1] if records else None

    def clear(self) -> None:
        with self._lock:
            self._records.clear()
