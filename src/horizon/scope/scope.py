"""
Scope — A position in the horizon tree.

A scope owns (or is handed) one horizon, optionally declares a name for
it, and derives the registry its descendants see exactly once. Opening
a scope records its name in the existence index; closing it removes
that record again. Entering a scope with ``with`` also makes it the
current scope for the running context, which is what unqualified
lookups resolve against.
"""

import logging
from contextvars import ContextVar, Token
from typing import Any

from horizon.bus import EventHorizon, Handler, Unsubscribe, create_event_horizon
from horizon.scope.existence import ExistenceIndex, get_existence_index
from horizon.scope.registry import Registry, derive, lookup
from horizon.scope.resolver import EmitResult, resolve, resolve_current, resolve_safe

logger = logging.getLogger(__name__)


_current_scope: ContextVar["Scope | None"] = ContextVar("horizon_scope", default=None)


def _noop() -> None:
    return None


class Scope:
    """
    One node of the scope tree.

    Usage:
        with Scope("app") as app:
            with app.child("sidebar") as sidebar:
                sidebar.emit_to("app", "ready", {"from": "sidebar"})
    """

    def __init__(
        self,
        name: str | None = None,
        horizon: EventHorizon | None = None,
        parent: "Scope | None" = None,
        log: bool = False,
        index: ExistenceIndex | None = None,
        isolated: bool = False,
    ):
        """
        Initialize a scope.

        Args:
            name: Name this scope declares for its horizon, if any
            horizon: Horizon to expose; a new one is created when omitted
            parent: Enclosing scope; defaults to the current scope
            log: Debug tracing for a newly created horizon
            index: Existence index to register in (default: process-wide)
            isolated: Start a new tree even when a scope is current
        """
        if parent is None and not isolated:
            parent = current_scope()
        self.name = name or None
        self.parent = parent
        self.horizon = horizon or create_event_horizon(log=log, name=self.name)
        self.index = index or (parent.index if parent else get_existence_index())
        self.registry: Registry = derive(
            parent.registry if parent else None,
            self.name,
            self.horizon,
        )
        self._established = False
        self._token: Token | None = None

    def __repr__(self) -> str:
        return f"Scope(name={self.name!r}, established={self._established})"

    # -------------------------------------------------------------------------
    # Establishment / teardown
    # -------------------------------------------------------------------------

    @property
    def is_established(self) -> bool:
        return self._established

    def open(self) -> "Scope":
        """Establish the scope. Registers the name once; repeated calls are no-ops."""
        if not self._established:
            self.index.register(self.name)
            self._established = True
            logger.debug("scope %s established", self.name or "<anonymous>")
        return self

    def close(self) -> None:
        """Tear the scope down. Unregisters the name once; idempotent."""
        if self._established:
            self.index.unregister(self.name)
            self._established = False
            logger.debug("scope %s torn down", self.name or "<anonymous>")

    def __enter__(self) -> "Scope":
        if self._token is not None:
            raise RuntimeError(f"{self!r} is already entered")
        self.open()
        self._token = _current_scope.set(self)
        return self

    def __exit__(self, *args) -> None:
        try:
            if self._token is not None:
                _current_scope.reset(self._token)
                self._token = None
        finally:
            self.close()

    def child(
        self,
        name: str | None = None,
        horizon: EventHorizon | None = None,
        log: bool = False,
    ) -> "Scope":
        """Create a scope nested directly under this one."""
        return Scope(name=name, horizon=horizon, parent=self, log=log, index=self.index)

    # -------------------------------------------------------------------------
    # Lookup
    # -------------------------------------------------------------------------

    def horizon_for(self, name: str | None = None) -> EventHorizon:
        """
        Own horizon for an unqualified lookup, otherwise the named one.

        Raises:
            NotInScopeError: name is bound elsewhere but not visible here
            NotFoundError: name is bound nowhere
        """
        if name is None:
            return self.horizon
        return resolve(self.registry, name, self.index)

    # -------------------------------------------------------------------------
    # Messaging
    # -------------------------------------------------------------------------

    def emit(self, type: str, payload: Any = None) -> None:
        self.horizon.emit(type, payload)

    def on(self, type: str, handler: Handler) -> Unsubscribe:
        return self.horizon.on(type, handler)

    def emit_to(self, name: str, type: str, payload: Any = None) -> None:
        """Emit to a named horizon, raising if it can't be reached."""
        self.horizon_for(name).emit(type, payload)

    def emit_to_safe(self, name: str, type: str, payload: Any = None) -> EmitResult:
        """Emit to a named horizon, returning the failure instead of raising."""
        return resolve_safe(self.registry, name, type, payload, self.index)

    def on_named(self, name: str, type: str, handler: Handler) -> Unsubscribe:
        """Subscribe on a named horizon, raising if it can't be reached."""
        return self.horizon_for(name).on(type, handler)

    def on_named_safe(self, name: str, type: str, handler: Handler) -> Unsubscribe:
        """Subscribe on a named horizon if visible; otherwise do nothing."""
        target = lookup(self.registry, name)
        if target is None:
            return _noop
        return target.on(type, handler)


# =============================================================================
# CURRENT-SCOPE ACCESSORS
# =============================================================================

def current_scope() -> Scope | None:
    """Innermost scope entered in the running context."""
    return _current_scope.get()


def current_registry() -> Registry | None:
    """Registry in effect for the running context, or None outside all scopes."""
    scope = current_scope()
    return scope.registry if scope else None


def current_horizon() -> EventHorizon:
    """
    Nearest enclosing horizon.

    Raises:
        NoActiveScopeError: called outside every scope
    """
    scope = current_scope()
    return resolve_current(scope.horizon if scope else None)


def use_horizon(name: str | None = None) -> EventHorizon:
    """Current horizon, or the named horizon visible from the current scope."""
    if name is None:
        return current_horizon()
    scope = current_scope()
    if scope is not None:
        return scope.horizon_for(name)
    return resolve(None, name)


def emit_to_named_safe(name: str, type: str, payload: Any = None) -> EmitResult:
    """Non-throwing emit to a named horizon from the current scope."""
    scope = current_scope()
    if scope is not None:
        return scope.emit_to_safe(name, type, payload)
    return resolve_safe(None, name, type, payload)


def defines_horizon(
    value: bool | str | None,
    name: str | None = None,
    log: bool = False,
) -> Scope | None:
    """
    Scope for a "defines a horizon" flag.

    True creates an anonymous scope (or one named by ``name``), a string
    creates a scope with that name, and a falsy value creates none.
    """
    if not value:
        return None
    scope_name = value if isinstance(value, str) else name
    return Scope(name=scope_name, log=log)
