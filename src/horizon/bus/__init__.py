"""
Bus — The event horizon engine.

- EventHorizon: ordered, error-isolated pub/sub with pause/resume
- QueuedMessage / DeliveryFailure: queue entries and failure records
"""

from horizon.bus.messages import QueuedMessage, DeliveryFailure
from horizon.bus.engine import (
    EventHorizon,
    Handler,
    Unsubscribe,
    ErrorSink,
    create_event_horizon,
    log_handler_error,
)

__all__ = [
    "EventHorizon",
    "Handler",
    "Unsubscribe",
    "ErrorSink",
    "create_event_horizon",
    "log_handler_error",
    "QueuedMessage",
    "DeliveryFailure",
]
