"""Plugin record and hook contracts.

A plugin is a ``Plugin`` record whose hook fields are optional. The
dispatch engine checks a field for ``None`` rather than probing objects
for methods::

    timing = Plugin(
        name="timing",
        enforce="pre",
        before_request=lambda ctx: ctx.state.update(start=time.monotonic()),
        before_response=lambda response, ctx: response.with_header("X-Time", "..."),
    )

Every hook may be ``def`` or ``async def``. Per-stage contracts:

- ``before_request(context)``: return a replacement context, or ``None``
  to keep the (possibly mutated) current one
- ``before_generate(context)``: return a payload to skip generation,
  or ``None`` to continue
- ``generate(context)``: only consulted for routes without a response;
  the first non-``None`` return becomes the payload
- ``after_generate(payload, context)``: the return value, ``None``
  included, replaces the payload
- ``before_response(response, context)``: must return a ``Response``
  or a mapping with ``status``
- ``on_error(error, context)``: return a response to recover, another
  error (or value) to replace the current one, or ``None`` to pass
"""

from dataclasses import dataclass
from typing import Literal, TypeAlias

from schmock._internal.types import Hook

Enforce: TypeAlias = Literal["pre", "normal", "post"]

ENFORCE_ORDER: dict[str, int] = {"pre": 0, "normal": 1, "post": 2}

HOOK_NAMES: tuple[str, ...] = (
    "before_request",
    "before_generate",
    "generate",
    "after_generate",
    "before_response",
    "on_error",
)


@dataclass(frozen=True, slots=True)
class Plugin:
    """A named bundle of optional pipeline hooks.

    Read-only once registered. Hooks may close over shared mutable state;
    the record itself never changes.
    """

    name: str
    version: str | None = None
    enforce: Enforce = "normal"
    before_request: Hook | None = None
    before_generate: Hook | None = None
    generate: Hook | None = None
    after_generate: Hook | None = None
    before_response: Hook | None = None
    on_error: Hook | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name:
            msg = "Plugin name must be a non-empty string"
            raise ValueError(msg)
        if self.enforce not in ENFORCE_ORDER:
            msg = f"Plugin enforce must be one of 'pre', 'normal', 'post', got {self.enforce!r}"
            raise ValueError(msg)
        for hook_name in HOOK_NAMES:
            hook = getattr(self, hook_name)
            if hook is not None and not callable(hook):
                msg = f"Plugin hook {hook_name!r} must be callable"
                raise TypeError(msg)

    @property
    def label(self) -> str:
        return f"{self.name}@{self.version or 'unknown'}"

    def hooks(self) -> tuple[str, ...]:
        """Names of the hooks this plugin implements."""
        return tuple(name for name in HOOK_NAMES if getattr(self, name) is not None)
