"""
Observability — Logging and metrics for event horizons.

Provides:
- Log records tagged with the horizon, message type and queue depth
  of the delivery in progress
- Metrics collection (counters, gauges, histograms)
"""

from horizon.observability.logging import (
    Delivery,
    DeliveryContext,
    DeliveryFilter,
    current_delivery,
    configure_logging,
    get_logger,
    JSONFormatter,
    ReadableFormatter,
)
from horizon.observability.metrics import (
    Counter,
    Gauge,
    Histogram,
    MetricsRegistry,
    get_metrics,
    reset_metrics,
)

__all__ = [
    # Logging
    "Delivery",
    "DeliveryContext",
    "DeliveryFilter",
    "current_delivery",
    "configure_logging",
    "get_logger",
    "JSONFormatter",
    "ReadableFormatter",
    # Metrics
    "Counter",
    "Gauge",
    "Histogram",
    "MetricsRegistry",
    "get_metrics",
    "reset_metrics",
]
