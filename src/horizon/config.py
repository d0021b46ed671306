"""
Configuration — Tunables for event horizon instances.
"""

from dataclasses import dataclass

from horizon.vocabulary import OverflowPolicy


@dataclass
class HorizonConfig:
    """Configuration for a single event horizon."""
    # Tracing
    log: bool = False  # Per-bus debug lines for on/off/emit

    # Queueing
    max_queue_size: int | None = None  # None = unbounded
    overflow: OverflowPolicy = OverflowPolicy.ERROR

    # Diagnostics
    failure_log_size: int = 100  # Recent DeliveryFailure records kept

    def __post_init__(self):
        if self.max_queue_size is not None and self.max_queue_size < 1:
            raise ValueError("max_queue_size must be at least 1 or None")
        if self.failure_log_size < 0:
            raise ValueError("failure_log_size cannot be negative")
        self.overflow = OverflowPolicy(self.overflow)
