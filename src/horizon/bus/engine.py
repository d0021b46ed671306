"""
Bus Engine — One event horizon: a FIFO queue and a type→handlers map.

emit() only enqueues. Delivery happens in a drain task scheduled on the
running asyncio loop, one message at a time, one handler at a time.
Handlers added while a message is in flight do not see that message,
and messages emitted from inside a handler wait for the current
message's handlers to finish (breadth-first, never recursive).
"""

import asyncio
import inspect
import logging
import time
from collections import deque
from typing import Any, Awaitable, Callable

from horizon.bus.messages import DeliveryFailure, QueuedMessage
from horizon.config import HorizonConfig
from horizon.errors import HandlerError, QueueFullError
from horizon.observability import DeliveryContext, get_metrics
from horizon.vocabulary import OverflowPolicy

logger = logging.getLogger(__name__)


Handler = Callable[[Any], Awaitable[None] | None]
Unsubscribe = Callable[[], None]
ErrorSink = Callable[[HandlerError], None]


def log_handler_error(error: HandlerError) -> None:
    """Default diagnostic sink: log the failure with its traceback."""
    logger.error(
        "[EH] handler error on %s: %s",
        error.message_type,
        error.exception,
        exc_info=error.exception,
    )


class EventHorizon:
    """
    In-process pub/sub bus with ordered, error-isolated delivery.

    At most one drain task is active per instance. pause() stops the
    drain from pulling further messages; the handler currently running
    is never interrupted.
    """

    def __init__(
        self,
        name: str | None = None,
        config: HorizonConfig | None = None,
        on_error: ErrorSink | None = None,
        log: bool | None = None,
    ):
        """
        Initialize an event horizon.

        Args:
            name: Optional label used in logs (not a scope binding)
            config: Queue and diagnostics configuration
            on_error: Diagnostic sink for handler failures
            log: Overrides config.log for per-bus debug tracing
        """
        self.name = name
        self.config = config or HorizonConfig()
        self._log = self.config.log if log is None else log
        self._on_error = on_error or log_handler_error
        self._listeners: dict[str, dict[Handler, object]] = {}
        self._queue: deque[QueuedMessage] = deque()
        self._processing = False
        self._paused = False
        self._task: asyncio.Task | None = None
        self._failures: deque[DeliveryFailure] = deque(maxlen=self.config.failure_log_size)
        self._metrics = get_metrics()

    def __repr__(self) -> str:
        return (
            f"EventHorizon(label={self.label!r}, types={len(self._listeners)}, "
            f"pending={len(self._queue)}, paused={self._paused})"
        )

    @property
    def label(self) -> str:
        """Name if given, otherwise a stable per-instance id."""
        return self.name or f"horizon-{id(self):x}"

    # -------------------------------------------------------------------------
    # Subscription
    # -------------------------------------------------------------------------

    def on(self, type: str, handler: Handler) -> Unsubscribe:
        """
        Register handler for messages of the given type.

        Returns a zero-argument callable that removes exactly this
        registration. Calling it again is a no-op.
        """
        handlers = self._listeners.setdefault(type, {})
        token = handlers.setdefault(handler, object())
        if self._log:
            logger.debug("[EH] on %s count=%d", type, len(handlers))

        def unsubscribe() -> None:
            current = self._listeners.get(type)
            if current is None or current.get(handler) is not token:
                return
            del current[handler]
            if not current:
                del self._listeners[type]
            if self._log:
                logger.debug("[EH] off %s", type)

        return unsubscribe

    # -------------------------------------------------------------------------
    # Emission
    # -------------------------------------------------------------------------

    def emit(self, type: str, payload: Any = None) -> None:
        """
        Queue a message and make sure a drain is scheduled.

        Never runs handlers inline. While paused the message is only queued.

        Raises:
            QueueFullError: bounded queue is full under OverflowPolicy.ERROR
        """
        capacity = self.config.max_queue_size
        if capacity is not None and len(self._queue) >= capacity:
            if not self._make_room(type, capacity):
                return

        self._queue.append(QueuedMessage(type, payload))
        self._metrics.messages_emitted.inc()
        self._metrics.queued_messages.inc()
        self._schedule()

    def _make_room(self, type: str, capacity: int) -> bool:
        """Apply the overflow policy. Returns False if the new message is dropped."""
        policy = self.config.overflow
        self._metrics.messages_dropped.inc()

        if policy == OverflowPolicy.ERROR:
            raise QueueFullError(type, capacity)

        if policy == OverflowPolicy.DROP_NEWEST:
            logger.warning("[EH] %s queue full (%d), dropped new %s", self.label, capacity, type)
            return False

        evicted = self._queue.popleft()
        self._metrics.queued_messages.dec()
        logger.warning("[EH] %s queue full (%d), evicted %s", self.label, capacity, evicted.type)
        return True

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def pause(self) -> None:
        """Stop pulling messages off the queue. In-flight delivery completes."""
        self._paused = True
        if self._log:
            logger.debug("[EH] pause %s pending=%d", self.label, len(self._queue))

    def resume(self) -> None:
        """Clear the paused flag and drain anything queued meanwhile."""
        self._paused = False
        if self._log:
            logger.debug("[EH] resume %s pending=%d", self.label, len(self._queue))
        self._schedule()

    async def flush(self) -> None:
        """
        Wait until the queue is empty or the horizon is paused.

        Starts a drain if messages were emitted with no running loop.

        Raises:
            RuntimeError: awaited from inside this horizon's own drain
        """
        if self._task is not None and asyncio.current_task() is self._task:
            raise RuntimeError(f"flush() awaited from a handler of {self.label}")

        self._schedule()
        while self._task is not None:
            await asyncio.shield(self._task)

    # -------------------------------------------------------------------------
    # Draining
    # -------------------------------------------------------------------------

    def _schedule(self) -> None:
        if self._processing or self._paused or not self._queue:
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            if self._log:
                logger.debug("[EH] %s has no running loop, holding %d", self.label, len(self._queue))
            return

        self._processing = True
        self._task = loop.create_task(self._drain())

    async def _drain(self) -> None:
        reschedule = True
        try:
            while not self._paused and self._queue:
                message = self._queue.popleft()
                self._metrics.queued_messages.dec()

                handlers = self._listeners.get(message.type)
                if self._log:
                    logger.debug(
                        "[EH] emit-> %s %r handlers=%d",
                        message.type,
                        message.payload,
                        len(handlers) if handlers else 0,
                    )
                if not handlers:
                    self._metrics.messages_unhandled.inc()
                    continue

                self._metrics.messages_delivered.inc()
                with DeliveryContext(self.label, message.type, len(self._queue)):
                    for handler in list(handlers):
                        await self._deliver(message, handler)
        except asyncio.CancelledError:
            reschedule = False
            raise
        finally:
            self._processing = False
            self._task = None
            if reschedule and not self._paused and self._queue:
                self._schedule()

    async def _deliver(self, message: QueuedMessage, handler: Handler) -> None:
        started = time.perf_counter()
        try:
            result = handler(message.payload)
            if inspect.isawaitable(result):
                await result
        except asyncio.CancelledError as exc:
            # Only a cancel() aimed at the drain task stops the drain
            task = asyncio.current_task()
            if task is not None and task.cancelling():
                raise
            self._report(message, HandlerError(message.type, handler, exc))
        except Exception as exc:
            self._report(message, HandlerError(message.type, handler, exc))
        finally:
            self._metrics.handler_duration_seconds.observe(time.perf_counter() - started)

    def _report(self, message: QueuedMessage, error: HandlerError) -> None:
        self._failures.append(DeliveryFailure(message=message, error=error))
        self._metrics.handler_errors.inc()
        try:
            self._on_error(error)
        except Exception:
            logger.exception("[EH] diagnostic sink failed for %s", message.type)

    # -------------------------------------------------------------------------
    # Introspection
    # -------------------------------------------------------------------------

    def listener_count(self, type: str) -> int:
        """Number of handlers registered for a type."""
        return len(self._listeners.get(type, ()))

    def types(self) -> list[str]:
        """Message types with at least one handler."""
        return list(self._listeners)

    @property
    def pending(self) -> int:
        """Messages waiting in the queue."""
        return len(self._queue)

    @property
    def is_paused(self) -> bool:
        return self._paused

    @property
    def is_processing(self) -> bool:
        """True while a drain task is scheduled or running."""
        return self._processing

    @property
    def failures(self) -> list[DeliveryFailure]:
        """Most recent handler failures, oldest first."""
        return list(self._failures)

    def clear_failures(self) -> None:
        self._failures.clear()


def create_event_horizon(
    log: bool = False,
    name: str | None = None,
    config: HorizonConfig | None = None,
    on_error: ErrorSink | None = None,
) -> EventHorizon:
    """Factory for event horizons."""
    return EventHorizon(name=name, config=config, on_error=on_error, log=log or None)
