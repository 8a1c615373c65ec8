"""Plugins: optional hooks invoked at fixed stages of the request pipeline.

    from schmock.plugins import Plugin, generator_plugin, transformer_plugin
"""

from schmock.plugins.factory import generator_plugin, transformer_plugin
from schmock.plugins.protocol import Plugin
from schmock.plugins.registry import PluginRegistry

__all__ = [
    "Plugin",
    "PluginRegistry",
    "generator_plugin",
    "transformer_plugin",
]
