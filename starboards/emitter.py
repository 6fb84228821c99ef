"""
Typed publish/subscribe for starboard domain events.

Listeners run synchronously, in registration order. A listener that raises is
logged and skipped; the remaining listeners still run. Listeners that are
coroutine functions are scheduled as tasks on the running loop.
"""

import asyncio
import inspect
from collections import defaultdict
from collections.abc import Callable
from typing import Any

from starboards.exceptions import ValidationError
from starboards.logging import get_logger
from starboards.types.events import StarboardEvent

logger = get_logger("emitter")

Listener = Callable[[Any], Any]
ListenerErrorCallback = Callable[[StarboardEvent, Listener, BaseException], None]


def _coerce_event(event: "StarboardEvent | str") -> StarboardEvent:
    if isinstance(event, StarboardEvent):
        return event
    try:
        return StarboardEvent(event)
    except ValueError:
        raise ValidationError("UNKNOWN_EVENT", f"Unknown starboard event: {event!r}") from None


class EventEmitter:
    """Publish/subscribe over the fixed set of :class:`StarboardEvent` kinds."""

    def __init__(self, on_listener_error: ListenerErrorCallback | None = None) -> None:
        self._listeners: dict[StarboardEvent, list[Listener]] = defaultdict(list)
        self._once: set[tuple[StarboardEvent, int]] = set()
        self._on_listener_error = on_listener_error
        self._error_counts: dict[StarboardEvent, int] = defaultdict(int)
        self._tasks: set[asyncio.Task[Any]] = set()

    def on(self, event: "StarboardEvent | str", listener: Listener) -> Listener:
        """Register ``listener`` for ``event``. Returns the listener (usable as a decorator)."""
        self._listeners[_coerce_event(event)].append(listener)
        return listener

    def once(self, event: "StarboardEvent | str", listener: Listener) -> Listener:
        """Register ``listener`` to run for the next ``event`` only."""
        kind = _coerce_event(event)
        self._listeners[kind].append(listener)
        self._once.add((kind, id(listener)))
        return listener

    def off(self, event: "StarboardEvent | str", listener: Listener) -> None:
        """Remove the first registration of ``listener``; unknown listeners are ignored."""
        kind = _coerce_event(event)
        try:
            self._listeners[kind].remove(listener)
        except ValueError:
            return
        self._once.discard((kind, id(listener)))

    def listeners(self, event: "StarboardEvent | str") -> list[Listener]:
        return list(self._listeners.get(_coerce_event(event), []))

    def emit(self, event: "StarboardEvent | str", payload: Any) -> int:
        """
        Publish ``payload`` to every listener of ``event``.

        Args:
            event: The event kind (enum member or its name, e.g. "starboardCreate")
            payload: Instance of the event's payload type

        Returns:
            Number of listeners that completed (or were scheduled) without raising

        Raises:
            ValidationError: If the event is unknown or the payload has the wrong type
        """
        kind = _coerce_event(event)
        if not isinstance(payload, kind.payload_type):
            raise ValidationError(
                "INVALID_PAYLOAD",
                f"{kind.value} expects {kind.payload_type.__name__}, got {type(payload).__name__}",
            )

        delivered = 0
        for listener in list(self._listeners.get(kind, [])):
            if (kind, id(listener)) in self._once:
                self.off(kind, listener)
            try:
                result = listener(payload)
                if inspect.isawaitable(result):
                    self._schedule(kind, listener, result)
                delivered += 1
            except Exception as exc:
                self._handle_listener_error(kind, listener, exc)

        return delivered

    def get_error_counts(self) -> dict[str, int]:
        """Return per-event listener failure counts."""
        return {kind.value: count for kind, count in self._error_counts.items()}

    async def drain(self) -> None:
        """Wait for scheduled coroutine listeners to finish."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def _schedule(self, kind: StarboardEvent, listener: Listener, awaitable: Any) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            if inspect.iscoroutine(awaitable):
                awaitable.close()
            raise
        task = asyncio.ensure_future(awaitable, loop=loop)
        self._tasks.add(task)

        def _done(done: "asyncio.Task[Any]") -> None:
            self._tasks.discard(done)
            if done.cancelled():
                return
            exc = done.exception()
            if exc is not None:
                self._handle_listener_error(kind, listener, exc)

        task.add_done_callback(_done)

    def _handle_listener_error(
        self, kind: StarboardEvent, listener: Listener, exc: BaseException
    ) -> None:
        self._error_counts[kind] += 1
        logger.error(
            "Listener %s failed on %s",
            getattr(listener, "__qualname__", repr(listener)),
            kind.value,
            exc_info=(type(exc), exc, exc.__traceback__),
        )

        if self._on_listener_error is not None:
            try:
                self._on_listener_error(kind, listener, exc)
            except Exception:
                logger.warning("on_listener_error callback failed", exc_info=True)


__all__ = ["EventEmitter", "Listener", "ListenerErrorCallback"]
