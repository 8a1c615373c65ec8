"""Request-scoped context via ContextVar.

Provides ``context_var``, the ``RequestContext`` of the ``handle()`` call
currently running in this task. It is set by the dispatch engine once a
route has matched and reset when the call finishes, so helpers called from
deep inside a response function can reach the request without threading
it through every signature.

Thread safety:
    ``ContextVar`` is task-local under asyncio and thread-local otherwise.
    Interleaved ``handle()`` calls each see their own context.
"""

from contextvars import ContextVar

from schmock.http.request import RequestContext

context_var: ContextVar[RequestContext] = ContextVar("schmock_request_context")
"""The in-flight request context. Set by the dispatch engine."""


def get_context() -> RequestContext:
    """Return the current request context.

    Raises ``LookupError`` if called outside a ``handle()`` call.
    """
    return context_var.get()
