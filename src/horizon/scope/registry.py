"""
Name Registry — Immutable name→horizon mappings, one per scope.

A child registry is a copy of its parent plus at most one local
binding. Parents never see child bindings, and a deeper binding of the
same name shadows the outer one for everything derived below it.
"""

from collections.abc import Iterator, Mapping
from types import MappingProxyType

from horizon.bus import EventHorizon


class Registry(Mapping[str, EventHorizon]):
    """Read-only snapshot of the horizons visible from one scope."""

    __slots__ = ("_entries",)

    def __init__(self, entries: Mapping[str, EventHorizon] | None = None):
        self._entries = MappingProxyType(dict(entries or {}))

    def __getitem__(self, name: str) -> EventHorizon:
        return self._entries[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"Registry({sorted(self._entries)})"


EMPTY_REGISTRY = Registry()


def derive(
    parent: Registry | None,
    local_name: str | None,
    local_bus: EventHorizon,
) -> Registry:
    """
    Build a child registry from a parent.

    Args:
        parent: Registry in effect above the new scope (None at a root)
        local_name: Name the new scope declares, if any
        local_bus: Horizon bound to local_name

    Returns:
        A new registry; parent is left untouched.
    """
    entries = dict(parent) if parent else {}
    if local_name:
        entries[local_name] = local_bus
    return Registry(entries)


def lookup(registry: Registry | None, name: str) -> EventHorizon | None:
    """Horizon bound to name in registry, or None."""
    if registry is None:
        return None
    return registry.get(name)
