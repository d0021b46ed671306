"""
Existence Index — Process-wide reference counts of bound names.

Answers "is this name bound anywhere right now", independent of
whether the caller can see it. Each scope that declares a name
registers once when established and unregisters once on teardown.
"""

import logging
from threading import Lock

from horizon.observability import get_metrics

logger = logging.getLogger(__name__)


class ExistenceIndex:
    """Reference-counted set of names bound in any registry tree."""

    def __init__(self):
        self._counts: dict[str, int] = {}
        self._lock = Lock()

    def register(self, name: str | None) -> None:
        """Count one more live scope binding name. Empty names are ignored."""
        if not name:
            return
        with self._lock:
            count = self._counts.get(name, 0) + 1
            self._counts[name] = count
            if count == 1:
                get_metrics().live_names.inc()
        logger.debug("register %s count=%d", name, count)

    def unregister(self, name: str | None) -> None:
        """Count one fewer live binding. Absent names are ignored."""
        if not name:
            return
        with self._lock:
            count = self._counts.get(name, 0) - 1
            if count > 0:
                self._counts[name] = count
            elif self._counts.pop(name, None) is not None:
                get_metrics().live_names.dec()
        logger.debug("unregister %s count=%d", name, max(count, 0))

    def exists(self, name: str) -> bool:
        return self._counts.get(name, 0) > 0

    def count(self, name: str) -> int:
        return self._counts.get(name, 0)

    def names(self) -> frozenset[str]:
        with self._lock:
            return frozenset(self._counts)

    def clear(self) -> None:
        """Forget every name (for testing)."""
        with self._lock:
            get_metrics().live_names.dec(len(self._counts))
            self._counts.clear()


# Global existence index
_index = ExistenceIndex()


def get_existence_index() -> ExistenceIndex:
    """Get the process-wide existence index."""
    return _index


def reset_existence_index() -> None:
    """Drop all registrations (for testing)."""
    _index.clear()
