"""Shared type aliases used across schmock modules."""

from collections.abc import Awaitable, Callable
from typing import Any, TypeAlias

# Route response function: receives a ResponseContext, returns a payload
ResponseFunction: TypeAlias = Callable[..., Any | Awaitable[Any]]

# Plugin hook: sync or async, stage-specific signature
Hook: TypeAlias = Callable[..., Any | Awaitable[Any]]

# Event bus listener: receives an Event, return value ignored
EventHandler: TypeAlias = Callable[..., Any]
