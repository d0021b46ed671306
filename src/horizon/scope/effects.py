"""
Effect Binding — Run a callback when its dependencies change.

The callback may return a cleanup. The cleanup runs before the next
run and when the binding is disposed. This is the primitive that a
horizon subscription is wired into: subscribing is the effect and the
returned unsubscribe is its cleanup.
"""

import logging
from collections.abc import Mapping
from typing import Any, Callable

from horizon.bus import EventHorizon, Handler
from horizon.vocabulary import EffectPhase

logger = logging.getLogger(__name__)


Cleanup = Callable[[], Any]
Snapshot = Mapping[str, Any]
EffectHandler = Callable[[Snapshot | None, Snapshot], Cleanup | None]


def diff_snapshot(prev: Snapshot | None, current: Snapshot) -> list[tuple[str, Any, Any]]:
    """Keys whose values differ between two dependency snapshots."""
    if prev is None:
        return [(key, None, value) for key, value in current.items()]

    changes = []
    for key in dict.fromkeys([*prev, *current]):
        before = prev.get(key)
        after = current.get(key)
        if before is not after and before != after:
            changes.append((key, before, after))
    return changes


class EffectBinding:
    """
    A named effect that remembers its previous dependency snapshot.

    The handler receives (previous, current); previous is None on the
    first run. When ``when`` is false the snapshot is still recorded and
    the old cleanup still runs, but the handler is skipped.
    """

    def __init__(
        self,
        name: str,
        handler: EffectHandler,
        when: bool = True,
        on_error: Callable[[Exception], None] | None = None,
        debug: bool = False,
    ):
        self.name = name
        self.when = when
        self.debug = debug
        self._handler = handler
        self._on_error = on_error
        self._prev: Snapshot | None = None
        self._cleanup: Cleanup | None = None
        self._started = False
        self._disposed = False

    def __repr__(self) -> str:
        return f"EffectBinding(name={self.name!r}, active={self.is_active})"

    @property
    def is_active(self) -> bool:
        """True while a cleanup is pending."""
        return self._cleanup is not None

    def update(self, snapshot: Snapshot, when: bool | None = None) -> bool:
        """
        Feed the latest dependency values.

        Returns:
            True if the handler ran.
        """
        if self._disposed:
            raise RuntimeError(f"effect {self.name!r} is disposed")
        if when is not None:
            self.when = when

        current = dict(snapshot)
        changes = diff_snapshot(self._prev, current)
        if self._started and not changes:
            return False

        if self.debug:
            self._trace(EffectPhase.SCHEDULE, self._describe(changes))

        self._run_cleanup()
        prev = self._prev
        self._prev = current
        self._started = True

        if not self.when:
            return False

        if self.debug:
            self._trace(EffectPhase.RUN)
        result = self._safe_call(lambda: self._handler(prev, current))
        self._cleanup = result if callable(result) else None
        return True

    def dispose(self) -> None:
        """Run the pending cleanup. Safe to call more than once."""
        if self._disposed:
            return
        self._disposed = True
        self._run_cleanup()

    def _run_cleanup(self) -> None:
        cleanup, self._cleanup = self._cleanup, None
        if cleanup is None:
            return
        if self.debug:
            self._trace(EffectPhase.CLEANUP)
        self._safe_call(cleanup)

    def _safe_call(self, fn: Callable[[], Any]) -> Any:
        if self._on_error is None:
            return fn()
        try:
            return fn()
        except Exception as exc:
            self._on_error(exc)
            return None

    def _describe(self, changes: list[tuple[str, Any, Any]]) -> str:
        if not self._started:
            return "initial run"
        return "changes: " + ", ".join(
            f"[{key}] {before!r} -> {after!r}" for key, before, after in changes
        )

    def _trace(self, phase: EffectPhase, info: str = "") -> None:
        logger.debug(
            "[named-effect] %s -> %s (when=%s)%s",
            phase.value,
            self.name,
            self.when,
            f" | {info}" if info else "",
        )


def subscription(
    horizon: EventHorizon,
    type: str,
    handler: Handler,
    name: str | None = None,
    debug: bool = False,
) -> EffectBinding:
    """
    Bind a handler to a horizon through an effect.

    Calling ``update`` with a different horizon, type or handler
    unsubscribes the old registration before subscribing the new one;
    ``dispose`` unsubscribes for good.
    """
    binding = EffectBinding(
        name or f"on:{type}",
        lambda prev, current: current["horizon"].on(current["type"], current["handler"]),
        debug=debug,
    )
    binding.update({"horizon": horizon, "type": type, "handler": handler})
    return binding
