"""
Vocabulary enums — the shared language of event horizons.

Error codes surfaced by scoped lookups and the queue overflow policies
understood by the bus engine.
"""

from enum import Enum


# =============================================================================
# SCOPE RESOLUTION
# =============================================================================

class ScopeErrorCode(str, Enum):
    """
    Classification of a failed horizon lookup or delivery.

    NOT_FOUND and NOT_IN_SCOPE are the two tiers of a named lookup:
    the name is unknown everywhere, or it is bound somewhere in the
    process but not reachable from the caller's scope.
    """
    NOT_FOUND = "NOT_FOUND"
    NOT_IN_SCOPE = "NOT_IN_SCOPE"
    NO_ACTIVE_SCOPE = "NO_ACTIVE_SCOPE"
    HANDLER_ERROR = "HANDLER_ERROR"
    QUEUE_FULL = "QUEUE_FULL"


# =============================================================================
# QUEUEING
# =============================================================================

class OverflowPolicy(str, Enum):
    """
    What emit() does when a bounded queue is already full.
    """
    ERROR = "ERROR"                # Raise QueueFullError, message not queued
    DROP_NEWEST = "DROP_NEWEST"    # Discard the message being emitted
    DROP_OLDEST = "DROP_OLDEST"    # Evict the head of the queue


class EffectPhase(str, Enum):
    """Lifecycle step reported by effect binding debug logs."""
    SCHEDULE = "schedule"
    RUN = "run"
    CLEANUP = "cleanup"
