"""ParsedRoute, RouteDefinition, CompiledRoute and RouteMatch frozen dataclasses."""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from schmock.config import Delay


class _Missing:
    """Sentinel type for a route without a response producer."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "MISSING"


MISSING: Any = _Missing()


@dataclass(frozen=True, slots=True)
class ParsedRoute:
    """A route key parsed into a matchable pattern.

    ``matcher`` is anchored at both ends; ``param_names`` lines up 1:1
    with the capture groups of ``matcher``.
    """

    method: str
    path: str
    matcher: re.Pattern[str]
    param_names: tuple[str, ...]
    key: str


@dataclass(frozen=True, slots=True)
class RouteDefinition:
    """What a route responds with, plus its per-route options.

    ``response`` is a static value or a (sync or async) function taking a
    ``ResponseContext``. Left as ``MISSING``, plugins' ``generate`` hooks
    produce the payload instead.
    """

    response: Any = MISSING
    delay: Delay | None = None
    content_type: str | None = None
    extra: Mapping[str, Any] = field(default_factory=dict)

    @property
    def has_response(self) -> bool:
        return self.response is not MISSING


@dataclass(frozen=True, slots=True)
class CompiledRoute:
    """A parsed route bound to its definition.

    Created once when the mock is built, never mutated afterwards.
    """

    method: str
    path: str
    matcher: re.Pattern[str]
    param_names: tuple[str, ...]
    key: str
    definition: RouteDefinition

    @classmethod
    def from_parsed(cls, parsed: ParsedRoute, definition: RouteDefinition) -> CompiledRoute:
        return cls(
            method=parsed.method,
            path=parsed.path,
            matcher=parsed.matcher,
            param_names=parsed.param_names,
            key=parsed.key,
            definition=definition,
        )


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """Result of a successful route match."""

    route: CompiledRoute
    params: dict[str, str]
