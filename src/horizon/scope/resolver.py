"""
Scope Resolver — Find a horizon by name, or explain why it can't be found.

The registry decides visibility; the existence index is consulted only
to tell NOT_IN_SCOPE (bound somewhere else) from NOT_FOUND (bound
nowhere).
"""

from typing import Any

from pydantic import BaseModel, Field

from horizon.bus import EventHorizon
from horizon.errors import (
    HorizonError,
    NoActiveScopeError,
    NotFoundError,
    NotInScopeError,
    QueueFullError,
)
from horizon.scope.existence import ExistenceIndex, get_existence_index
from horizon.scope.registry import Registry, lookup
from horizon.vocabulary import ScopeErrorCode


class ScopeErrorInfo(BaseModel):
    """Structured form of a lookup failure."""

    code: ScopeErrorCode = Field(..., description="Failure classification")
    message: str = Field(..., description="Human-readable explanation")


class EmitResult(BaseModel):
    """
    Outcome of a non-throwing emit to a named horizon.

    ok is True when the message was queued on the resolved horizon;
    otherwise error says why the name could not be reached.
    """

    ok: bool = Field(..., description="True if the message was queued")
    error: ScopeErrorInfo | None = Field(
        default=None,
        description="Set when ok is False",
    )

    @classmethod
    def success(cls) -> "EmitResult":
        return cls(ok=True)

    @classmethod
    def failure(cls, error: HorizonError) -> "EmitResult":
        return cls(ok=False, error=ScopeErrorInfo(code=error.code, message=error.message))


def classify_missing(name: str, index: ExistenceIndex | None = None) -> HorizonError:
    """Error for a name absent from the caller's registry."""
    index = index or get_existence_index()
    if index.exists(name):
        return NotInScopeError(name)
    return NotFoundError(name)


def resolve(
    registry: Registry | None,
    name: str,
    index: ExistenceIndex | None = None,
) -> EventHorizon:
    """
    Look up a named horizon from the caller's registry.

    The nearest binding wins when a name is declared more than once
    along the ancestor chain.

    Raises:
        NotInScopeError: name is bound elsewhere in the process
        NotFoundError: name is bound nowhere
    """
    target = lookup(registry, name)
    if target is None:
        raise classify_missing(name, index)
    return target


def resolve_safe(
    registry: Registry | None,
    name: str,
    type: str,
    payload: Any = None,
    index: ExistenceIndex | None = None,
) -> EmitResult:
    """Emit to a named horizon, reporting scoping failures as a value."""
    target = lookup(registry, name)
    if target is None:
        return EmitResult.failure(classify_missing(name, index))
    try:
        target.emit(type, payload)
    except QueueFullError as exc:
        return EmitResult.failure(exc)
    return EmitResult.success()


def resolve_current(current: EventHorizon | None) -> EventHorizon:
    """
    Return the enclosing horizon for an unqualified lookup.

    Raises:
        NoActiveScopeError: there is no enclosing scope at all
    """
    if current is None:
        raise NoActiveScopeError()
    return current
