"""Plugin registry: registration plus a single stable execution order.

Mirrors the ``Router`` pattern from ``schmock.routing``: plugins are
appended during setup and ``ordered()`` is computed once at build time,
then reused for every hook stage of every request.
"""

from collections.abc import Callable, Mapping
from typing import Any

from schmock.errors import PluginError
from schmock.plugins.protocol import ENFORCE_ORDER, Plugin


def _factory_name(factory: Any) -> str:
    return getattr(factory, "__name__", None) or type(factory).__name__


def coerce_plugin(value: Any) -> Plugin:
    """Accept a ``Plugin`` or a mapping of ``Plugin`` fields.

    Mappings may spell hooks in camelCase (``beforeRequest``) or
    snake_case (``before_request``).
    """
    if isinstance(value, Plugin):
        return value
    if isinstance(value, Mapping):
        fields = {_snake_case(key): hook for key, hook in value.items()}
        return Plugin(**fields)
    msg = f"Expected a Plugin, a mapping, or a plugin factory, got {type(value).__name__}"
    raise TypeError(msg)


def _snake_case(name: str) -> str:
    return "".join(f"_{c.lower()}" if c.isupper() else c for c in name)


class PluginRegistry:
    """Ordered plugin list.

    Usage::

        registry = PluginRegistry()
        registry.register(Plugin(name="auth", enforce="pre", before_request=check))
        registry.register(make_logging_plugin)   # factory, invoked now
        for plugin in registry.ordered():
            ...
    """

    __slots__ = ("_plugins",)

    def __init__(self) -> None:
        self._plugins: list[Plugin] = []

    def __len__(self) -> int:
        return len(self._plugins)

    def register(self, plugin: Plugin | Mapping[str, Any] | Callable[[], Any]) -> Plugin:
        """Append a plugin, invoking it first if it is a factory.

        Any failure (the factory raising, or a malformed plugin) is raised
        as ``PluginError`` so the mock fails to build instead of failing on
        its first request.
        """
        if isinstance(plugin, (Plugin, Mapping)):
            name = plugin.name if isinstance(plugin, Plugin) else str(plugin.get("name", "<anonymous>"))
            source: Any = plugin
        elif callable(plugin):
            name = _factory_name(plugin)
            try:
                source = plugin()
            except Exception as exc:
                raise PluginError(name, exc) from exc
        else:
            source = plugin
            name = type(plugin).__name__

        try:
            resolved = coerce_plugin(source)
        except (TypeError, ValueError) as exc:
            raise PluginError(name, exc) from exc

        self._plugins.append(resolved)
        return resolved

    def ordered(self) -> tuple[Plugin, ...]:
        """Plugins partitioned pre → normal → post, registration order kept within each group."""
        return tuple(sorted(self._plugins, key=lambda p: ENFORCE_ORDER[p.enforce]))
