"""Uniform calling of user callables.

Route response functions, plugin hooks and plugin-helper transforms may
each be ``def`` or ``async def``. The dispatch engine never checks which;
it always goes through ``invoke`` and awaits.
"""

import inspect
from typing import Any


async def invoke(handler: Any, *args: Any, **kwargs: Any) -> Any:
    """Call *handler* with the given arguments and return its value.

    A returned awaitable (coroutine, future, task) is awaited first, so
    ``lambda ctx: {"ok": True}`` and ``async def generate(ctx): ...`` are
    interchangeable as hooks. Exceptions propagate unchanged; wrapping them
    is the caller's job.
    """
    result = handler(*args, **kwargs)
    if inspect.isawaitable(result):
        return await result
    return result
