"""Helpers to create single-purpose plugins with less boilerplate."""

from typing import Any

from schmock._internal.invoke import invoke
from schmock._internal.types import Hook
from schmock.plugins.protocol import Enforce, Plugin


def transformer_plugin(
    name: str,
    transform: Hook,
    *,
    version: str | None = None,
    enforce: Enforce = "normal",
) -> Plugin:
    """A plugin that rewrites generated payloads.

    ``transform(payload, context)`` is skipped while the payload is
    ``None``::

        mock.use(transformer_plugin("envelope", lambda data, ctx: {"data": data}))
    """

    async def after_generate(payload: Any, context: Any) -> Any:
        if payload is None:
            return payload
        return await invoke(transform, payload, context)

    return Plugin(name=name, version=version, enforce=enforce, after_generate=after_generate)


def generator_plugin(
    name: str,
    generate: Hook,
    *,
    version: str | None = None,
    enforce: Enforce = "normal",
) -> Plugin:
    """A plugin that produces payloads for routes declared without a response."""
    return Plugin(name=name, version=version, enforce=enforce, generate=generate)
