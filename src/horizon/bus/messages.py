"""
Bus Messages — Queue entries and delivery failure records.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from horizon.errors import HandlerError


@dataclass(frozen=True)
class QueuedMessage:
    """
    A pending {type, payload} pair.

    FIFO relative to other messages on the same horizon only.
    """
    type: str
    payload: Any = None


@dataclass
class DeliveryFailure:
    """Record of a handler that raised while receiving a message."""
    message: QueuedMessage
    error: HandlerError
    timestamp: datetime = field(default_factory=datetime.now)

    @property
    def message_type(self) -> str:
        return self.message.type

    @property
    def exception(self) -> BaseException | None:
        """The exception raised by the handler."""
        return self.error.exception
