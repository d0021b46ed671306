"""
Logging — Records tagged with the delivery in progress.

While a horizon hands a message to its handlers, every record logged
from that task (handler output, failures reported to the diagnostic
sink) carries the horizon label, the message type and how many messages
were still queued behind it.
"""

import logging
import json
import sys
from contextvars import ContextVar
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any


@dataclass(frozen=True)
class Delivery:
    """The message a horizon is currently delivering."""
    horizon: str
    message_type: str
    pending: int  # Messages still queued behind this one


_delivery: ContextVar[Delivery | None] = ContextVar("horizon_delivery", default=None)


def current_delivery() -> Delivery | None:
    """Delivery in progress for the running context, if any."""
    return _delivery.get()


class DeliveryContext:
    """
    Marks the running context as delivering one message.

    Usage:
        with DeliveryContext("sidebar", "refresh", pending=2):
            handler(payload)  # records carry sidebar/refresh/2
    """

    def __init__(self, horizon: str, message_type: str, pending: int = 0):
        self.delivery = Delivery(horizon, message_type, pending)
        self._token = None

    def __enter__(self) -> Delivery:
        self._token = _delivery.set(self.delivery)
        return self.delivery

    def __exit__(self, *args):
        if self._token is not None:
            _delivery.reset(self._token)
            self._token = None


class DeliveryFilter(logging.Filter):
    """Copies the current delivery onto log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        delivery = current_delivery()
        record.horizon = delivery.horizon if delivery else None
        record.message_type = delivery.message_type if delivery else None
        record.pending = delivery.pending if delivery else None
        return True


def _delivery_fields(record: logging.LogRecord) -> dict[str, Any]:
    if getattr(record, "horizon", None) is None:
        return {}
    return {
        "horizon": record.horizon,
        "message_type": record.message_type,
        "pending": record.pending,
    }


class JSONFormatter(logging.Formatter):
    """One JSON object per record; delivery fields only during delivery."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **_delivery_fields(record),
        }
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


class ReadableFormatter(logging.Formatter):
    """
    Single-line development format.

    ``INFO    [sidebar:refresh +2] horizon.x: text`` during delivery,
    ``[-]`` otherwise.
    """

    def format(self, record: logging.LogRecord) -> str:
        fields = _delivery_fields(record)
        where = (
            f"{fields['horizon']}:{fields['message_type']} +{fields['pending']}"
            if fields
            else "-"
        )
        line = f"{record.levelname:<7} [{where}] {record.name}: {record.getMessage()}"
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


def configure_logging(
    level: int = logging.INFO,
    json_format: bool = False,
    stream: Any = None,
    trace: bool = False,
) -> None:
    """
    Configure horizon logging.

    Args:
        level: Level for the "horizon" logger
        json_format: Use JSON format (for production)
        stream: Output stream (default: stderr)
        trace: Show the [EH] on/off/emit lines of horizons created with
            log=True, without lowering the level elsewhere
    """
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.addFilter(DeliveryFilter())
    handler.setFormatter(JSONFormatter() if json_format else ReadableFormatter())

    horizon_logger = logging.getLogger("horizon")
    horizon_logger.setLevel(level)
    horizon_logger.handlers.clear()
    horizon_logger.addHandler(handler)
    horizon_logger.propagate = False

    logging.getLogger("horizon.bus").setLevel(logging.DEBUG if trace else logging.NOTSET)


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the "horizon" namespace."""
    return logging.getLogger(f"horizon.{name}")
