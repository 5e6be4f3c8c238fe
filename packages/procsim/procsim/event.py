"""Event - one-shot occurrence settled by the simulation."""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from procsim.types import EventState, Handler

if TYPE_CHECKING:
    from procsim.simulation import Simulation

logger = logging.getLogger(__name__)


class Event:
    """A one-shot occurrence: pending, then processed or aborted.

    ``trigger`` schedules processing at the current simulated time and
    ``trigger_delayed`` at a later one; the simulation processes the event
    when it reaches that point in its queue. ``abort`` settles it at once.
    Either way the matching handlers run synchronously, in registration
    order, exactly once.
    """

    def __init__(self, sim: Simulation) -> None:
        self._sim = sim
        self._state = EventState.PENDING
        self._handlers: list[Handler] = []
        self._abort_handlers: list[Handler] = []

    @property
    def state(self) -> EventState:
        return self._state

    def pending(self) -> bool:
        return self._state is EventState.PENDING

    def triggered(self) -> bool:
        """True once the event left the pending state, whatever the outcome."""
        return self._state is not EventState.PENDING

    def processed(self) -> bool:
        return self._state is EventState.PROCESSED

    def aborted(self) -> bool:
        return self._state is EventState.ABORTED

    def add_handler(self, handler: Handler) -> None:
        """Call ``handler(event)`` when the event is processed."""
        if self._state is EventState.PENDING or self._state is EventState.TRIGGERED:
            self._handlers.append(handler)

    def add_abort_handler(self, handler: Handler) -> None:
        """Call ``handler(event)`` when the event is aborted."""
        if self._state is EventState.PENDING:
            self._abort_handlers.append(handler)

    def trigger(self) -> bool:
        """Schedule the event for processing now. False if not pending."""
        if self._state is not EventState.PENDING:
            return False
        self._state = EventState.TRIGGERED
        self._sim._schedule(self, 0.0)
        return True

    def trigger_delayed(self, delay: float) -> bool:
        """Schedule the event for processing after ``delay``.

        The event stays pending, and can still be aborted, until then.
        """
        if delay < 0:
            raise ValueError(f"delay must be non-negative, got {delay}")
        if self._state is not EventState.PENDING:
            return False
        self._sim._schedule(self, delay)
        return True

    def abort(self) -> bool:
        """Abort a pending event and run its abort handlers. False otherwise."""
        if self._state is not EventState.PENDING:
            return False
        self._state = EventState.ABORTED
        handlers = self._abort_handlers
        self._handlers = []
        self._abort_handlers = []
        self._fire(handlers)
        return True

    def _process(self) -> bool:
        """Settle as processed. Called by the simulation only."""
        if self._state is not EventState.PENDING and self._state is not EventState.TRIGGERED:
            return False
        self._state = EventState.PROCESSED
        handlers = self._handlers
        self._handlers = []
        self._abort_handlers = []
        self._fire(handlers)
        return True

    def _fire(self, handlers: list[Handler]) -> None:
        # All handlers run; the first error is re-raised after the last one.
        error: Exception | None = None
        for handler in handlers:
            try:
                handler(self)
            except Exception as exc:
                if error is None:
                    error = exc
                else:
                    logger.error("handler %r on %r raised %r", handler, self, exc)
        if error is not None:
            raise error

    def __repr__(self) -> str:
        return f"<Event {self._state.value} at {id(self):#x}>"
