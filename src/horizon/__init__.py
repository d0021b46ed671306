"""
Event Horizon — Scoped in-process publish/subscribe.

Independent buses with ordered, error-isolated delivery, addressable by
name through a tree of scopes where a name can be visible in one branch
and out of scope in another.
"""

__version__ = "0.1.0"

from horizon.vocabulary import ScopeErrorCode, OverflowPolicy
from horizon.config import HorizonConfig
from horizon.errors import (
    HorizonError,
    NotFoundError,
    NotInScopeError,
    NoActiveScopeError,
    HandlerError,
    QueueFullError,
)
from horizon.bus import EventHorizon, create_event_horizon
from horizon.observability import configure_logging
from horizon.scope import (
    Scope,
    EmitResult,
    current_horizon,
    use_horizon,
    emit_to_named_safe,
    get_existence_index,
)

__all__ = [
    "__version__",
    "ScopeErrorCode",
    "OverflowPolicy",
    "HorizonConfig",
    "HorizonError",
    "NotFoundError",
    "NotInScopeError",
    "NoActiveScopeError",
    "HandlerError",
    "QueueFullError",
    "EventHorizon",
    "create_event_horizon",
    "configure_logging",
    "Scope",
    "EmitResult",
    "current_horizon",
    "use_horizon",
    "emit_to_named_safe",
    "get_existence_index",
]
