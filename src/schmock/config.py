"""Mock configuration.

One frozen dataclass per mock. Builders derive new configs with
``dataclasses.replace``; built instances never see later changes.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, TypeAlias

Delay: TypeAlias = float | tuple[float, float]


@dataclass(frozen=True, slots=True)
class MockConfig:
    """Mock instance configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = MockConfig(namespace="/api/v1", delay=(0.01, 0.05), debug=True)
    """

    # Path prefix applied to every route key at compile time
    namespace: str = ""

    # Seconds before a successful response is returned, or a (low, high) range
    delay: Delay = 0

    # Debug-level pipeline logging on the "schmock.dispatch" logger
    debug: bool = False

    # Initial persistent state; each built instance gets its own deep copy
    state: Mapping[str, Any] | None = None

    @property
    def normalized_namespace(self) -> str:
        """The namespace with a leading ``/`` and no trailing ``/``.

        Returns ``""`` when no namespace is configured.
        """
        namespace = self.namespace.strip()
        if not namespace or namespace == "/":
            return ""
        if not namespace.startswith("/"):
            namespace = "/" + namespace
        return namespace.rstrip("/")

    def __post_init__(self) -> None:
        # Frozen dataclass: normalize through object.__setattr__
        object.__setattr__(self, "delay", validate_delay(self.delay))


def validate_delay(delay: object) -> Delay:
    """Return *delay* as a number or a ``(low, high)`` tuple.

    Raises ``ValueError`` for negative, reversed, or non-numeric delays.
    """
    bounds = tuple(delay) if isinstance(delay, (list, tuple)) else (delay, delay)
    numeric = all(isinstance(b, (int, float)) and not isinstance(b, bool) for b in bounds)
    if len(bounds) != 2 or not numeric or bounds[0] < 0 or bounds[0] > bounds[1]:
        msg = f"Invalid delay {delay!r}: expected seconds >= 0 or a (low, high) pair"
        raise ValueError(msg)
    if isinstance(delay, (list, tuple)):
        return bounds  # type: ignore[return-value]
    return delay  # type: ignore[return-value]
