"""
Metrics — Simple metrics collection for event horizons.

Process-wide counters for traffic through every bus plus the number of
names currently bound in the existence index.
"""

from dataclasses import dataclass, field
from threading import Lock
from typing import Any


class Counter:
    """Monotonically increasing counter."""

    def __init__(self, name: str, description: str = ""):
        self.name = name
        self.description = description
        self._value = 0.0
        self._lock = Lock()

    def inc(self, amount: float = 1.0) -> None:
        """Increment counter."""
        with self._lock:
            self._value += amount

    @property
    def value(self) -> float:
        return self._value

    def reset(self) -> None:
        """Reset counter (for testing)."""
        with self._lock:
            self._value = 0.0


class Gauge:
    """Value that can go up and down."""

    def __init__(self, name: str, description: str = ""):
        self.name = name
        self.description = description
        self._value = 0.0
        self._lock = Lock()

    def set(self, value: float) -> None:
        """Set gauge value."""
        with self._lock:
            self._value = value

    def inc(self, amount: float = 1.0) -> None:
        with self._lock:
            self._value += amount

    def dec(self, amount: float = 1.0) -> None:
        with self._lock:
            self._value -= amount

    @property
    def value(self) -> float:
        return self._value

    def reset(self) -> None:
        with self._lock:
            self._value = 0.0


class Histogram:
    """
    Simple histogram for tracking distributions.

    Tracks count, sum, min, max for calculating stats.
    """

    def __init__(self, name: str, description: str = ""):
        self.name = name
        self.description = description
        self._count = 0
        self._sum = 0.0
        self._min = float("inf")
        self._max = float("-inf")
        self._lock = Lock()

    def observe(self, value: float) -> None:
        """Record an observation."""
        with self._lock:
            self._count += 1
            self._sum += value
            self._min = min(self._min, value)
            self._max = max(self._max, value)

    @property
    def count(self) -> int:
        return self._count

    @property
    def avg(self) -> float:
        if self._count == 0:
            return 0.0
        return self._sum / self._count

    @property
    def max(self) -> float:
        return self._max if self._count > 0 else 0.0

    def reset(self) -> None:
        with self._lock:
            self._count = 0
            self._sum = 0.0
            self._min = float("inf")
            self._max = float("-inf")

    def to_dict(self) -> dict[str, float]:
        return {
            "count": self._count,
            "sum": self._sum,
            "avg": self.avg,
            "min": self._min if self._count > 0 else 0.0,
            "max": self.max,
        }


@dataclass
class MetricsRegistry:
    """
    Registry for all horizon metrics.
    """
    # Traffic
    messages_emitted: Counter = field(
        default_factory=lambda: Counter("messages_emitted", "Messages accepted by emit()")
    )
    messages_delivered: Counter = field(
        default_factory=lambda: Counter("messages_delivered", "Messages handed to at least one handler")
    )
    messages_unhandled: Counter = field(
        default_factory=lambda: Counter("messages_unhandled", "Messages dequeued with no handlers")
    )
    messages_dropped: Counter = field(
        default_factory=lambda: Counter("messages_dropped", "Messages lost to overflow")
    )
    handler_errors: Counter = field(
        default_factory=lambda: Counter("handler_errors", "Handlers that raised")
    )

    # Timing
    handler_duration_seconds: Histogram = field(
        default_factory=lambda: Histogram("handler_duration_seconds", "Handler run time")
    )

    # Active state
    queued_messages: Gauge = field(
        default_factory=lambda: Gauge("queued_messages", "Messages waiting across all buses")
    )
    live_names: Gauge = field(
        default_factory=lambda: Gauge("live_names", "Names bound in the existence index")
    )

    def to_dict(self) -> dict[str, Any]:
        """Export all metrics as dict."""
        return {
            "messages": {
                "emitted": self.messages_emitted.value,
                "delivered": self.messages_delivered.value,
                "unhandled": self.messages_unhandled.value,
                "dropped": self.messages_dropped.value,
                "queued": self.queued_messages.value,
            },
            "handlers": {
                "errors": self.handler_errors.value,
                "duration": self.handler_duration_seconds.to_dict(),
            },
            "scopes": {
                "live_names": self.live_names.value,
            },
        }

    def reset(self) -> None:
        """Reset all metrics (for testing)."""
        self.messages_emitted.reset()
        self.messages_delivered.reset()
        self.messages_unhandled.reset()
        self.messages_dropped.reset()
        self.handler_errors.reset()
        self.handler_duration_seconds.reset()
        self.queued_messages.reset()
        self.live_names.reset()


# Global metrics registry
_metrics = MetricsRegistry()


def get_metrics() -> MetricsRegistry:
    """Get global metrics registry."""
    return _metrics


def reset_metrics() -> None:
    """Reset all metrics (for testing)."""
    _metrics.reset()
