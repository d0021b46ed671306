"""
Errors — Failure taxonomy for horizon lookups and delivery.

Lookup failures (NotFound, NotInScope, NoActiveScope) are raised
synchronously to the caller. HandlerError is never raised to an
emitter; the engine builds it at dispatch time and hands it to the
diagnostic sink.
"""

from typing import Any, Callable

from horizon.vocabulary import ScopeErrorCode


class HorizonError(Exception):
    """Base class for all horizon errors. Carries a stable code."""

    code: ScopeErrorCode

    def __init__(self, code: ScopeErrorCode, message: str):
        super().__init__(message)
        self.code = code
        self.message = message


class NotFoundError(HorizonError):
    """Raised when a name is bound nowhere in the process."""

    def __init__(self, name: str):
        super().__init__(
            ScopeErrorCode.NOT_FOUND,
            f'Horizon "{name}" does not exist.',
        )
        self.name = name


class NotInScopeError(HorizonError):
    """Raised when a name is bound elsewhere but not visible from here."""

    def __init__(self, name: str):
        super().__init__(
            ScopeErrorCode.NOT_IN_SCOPE,
            f'Horizon "{name}" exists but is out of scope here.',
        )
        self.name = name


class NoActiveScopeError(HorizonError):
    """Raised when an unqualified lookup runs outside every scope."""

    def __init__(self, message: str = "No event horizon is active in the current scope."):
        super().__init__(ScopeErrorCode.NO_ACTIVE_SCOPE, message)


class QueueFullError(HorizonError):
    """Raised by emit() on a full bounded queue under OverflowPolicy.ERROR."""

    def __init__(self, message_type: str, capacity: int):
        super().__init__(
            ScopeErrorCode.QUEUE_FULL,
            f"Queue full ({capacity} pending), dropped {message_type!r}",
        )
        self.message_type = message_type
        self.capacity = capacity


class HandlerError(HorizonError):
    """A subscriber raised while a message was being delivered."""

    def __init__(
        self,
        message_type: str,
        handler: Callable[[Any], Any],
        exception: BaseException,
    ):
        super().__init__(
            ScopeErrorCode.HANDLER_ERROR,
            f"Handler {handler_name(handler)} failed on {message_type!r}: {exception}",
        )
        self.message_type = message_type
        self.handler = handler
        self.__cause__ = exception

    @property
    def exception(self) -> BaseException | None:
        """The original exception raised by the handler."""
        return self.__cause__


def handler_name(handler: Callable[..., Any]) -> str:
    """Best-effort printable name for a handler."""
    return getattr(handler, "__qualname__", None) or repr(handler)
