"""Process - sequential simulation logic running on its own thread.

A process runs its runner on a dedicated thread but never concurrently with
the simulation: control moves between the two as a baton over the process's
handoff channel. The process gives the baton away when it waits on a pending
occurrence or finishes; the occurrence's handlers give it back when the
occurrence settles, and block until the process yields again.

    def customer(proc):
        print("arrives at", proc.now)
        proc.wait(proc.timeout(5))
        print("leaves at", proc.now)

    sim.process(customer)
"""
from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING, Any

from procsim.baton import Baton
from procsim.event import Event
from procsim.types import (
    Awaitable,
    Handler,
    ProcessAborted,
    ProcessCrashed,
    Runner,
    SimulationError,
    SimulationShutdown,
)

if TYPE_CHECKING:
    from procsim.simulation import Simulation

logger = logging.getLogger(__name__)

_RESUME = True
_ABORT = False


class Process:
    """A process in a discrete-event simulation.

    Also an ``Awaitable``: other processes can wait on it. Its completion
    occurrence is processed when the runner returns and aborted when the
    process is aborted or crashes.
    """

    def __init__(
        self,
        sim: Simulation,
        runner: Runner,
        name: str,
        args: tuple[Any, ...] = (),
        kwargs: dict[str, Any] | None = None,
    ) -> None:
        self._sim = sim
        self._runner = runner
        self._args = args
        self._kwargs = kwargs if kwargs is not None else {}
        self._name = name
        self._ev = Event(sim)
        self._baton = Baton(sim._shutdown)
        self._thread: threading.Thread | None = None
        self._error: Exception | None = None

    @property
    def name(self) -> str:
        return self._name

    @property
    def sim(self) -> Simulation:
        return self._sim

    @property
    def now(self) -> float:
        return self._sim.now

    @property
    def thread(self) -> threading.Thread | None:
        return self._thread

    # --- Waiting ---

    def wait(self, ev: Awaitable) -> None:
        """Yield to the simulation until ``ev`` is processed.

        Returns at once if ``ev`` is already processed. If ``ev`` is or
        becomes aborted, this process is aborted too: its completion is
        aborted and ProcessAborted unwinds the runner. If the simulation
        shuts down meanwhile, SimulationShutdown unwinds it instead.
        """
        if threading.current_thread() is not self._thread:
            raise SimulationError(f"{self._name}.wait() called outside its own thread")
        if ev is self:
            raise SimulationError(f"{self._name} cannot wait on itself")

        if ev.processed():
            return

        if ev.aborted():
            self._abort_completion()
            raise ProcessAborted(self)

        if self._sim.is_shut_down:
            raise SimulationShutdown

        ev.add_handler(self._resume)
        ev.add_abort_handler(self._interrupt)

        # yield to whoever handed us the baton, then wait for a handler
        self._baton.send(True)
        if self._baton.receive() is _ABORT:
            self._abort_completion()
            raise ProcessAborted(self)

    # --- Awaitable ---

    def pending(self) -> bool:
        return self._ev.pending()

    def triggered(self) -> bool:
        return self._ev.triggered()

    def processed(self) -> bool:
        return self._ev.processed()

    def aborted(self) -> bool:
        return self._ev.aborted()

    def add_handler(self, handler: Handler) -> None:
        self._ev.add_handler(handler)

    def add_abort_handler(self, handler: Handler) -> None:
        self._ev.add_abort_handler(handler)

    # --- Simulation shortcuts ---

    def event(self) -> Event:
        return self._sim.event()

    def timeout(self, delay: float) -> Event:
        return self._sim.timeout(delay)

    def process(self, runner: Runner, *args: Any, **kwargs: Any) -> Process:
        return self._sim.process(runner, *args, **kwargs)

    def any_of(self, *events: Awaitable) -> Event:
        return self._sim.any_of(*events)

    def all_of(self, *events: Awaitable) -> Event:
        return self._sim.all_of(*events)

    # --- Handoff (simulation side) ---

    def _start(self, _ev: Event) -> None:
        self._thread = threading.Thread(target=self._main, name=self._name, daemon=True)
        self._thread.start()
        logger.debug("%s started at %s", self._name, self._sim.now)
        self._hand_off(_RESUME)

    def _resume(self, _ev: Event) -> None:
        self._hand_off(_RESUME)

    def _interrupt(self, _ev: Event) -> None:
        self._hand_off(_ABORT)

    def _hand_off(self, token: bool) -> None:
        """Give the baton to the process and block until it yields back."""
        try:
            self._baton.send(token)
            self._baton.receive()
        except SimulationShutdown:
            return
        error, self._error = self._error, None
        if error is not None:
            raise ProcessCrashed(self, error) from error

    # --- Process thread ---

    def _main(self) -> None:
        try:
            self._baton.receive()
            self._runner(self, *self._args, **self._kwargs)
        except SimulationShutdown:
            logger.debug("%s terminated by shutdown", self._name)
        except ProcessAborted:
            logger.debug("%s aborted at %s", self._name, self._sim.now)
        except Exception as exc:
            logger.debug("%s crashed at %s: %r", self._name, self._sim.now, exc)
            self._record_error(exc)
            self._abort_completion()
        else:
            logger.debug("%s finished at %s", self._name, self._sim.now)
            self._ev.trigger()
        finally:
            # after shutdown this raises at once and nothing is handed back
            try:
                self._baton.send(True)
            except SimulationShutdown:
                pass

    def _abort_completion(self) -> None:
        """Abort the completion occurrence; handler errors go to ``_error``."""
        try:
            self._ev.abort()
        except Exception as exc:
            self._record_error(exc)

    def _record_error(self, exc: Exception) -> None:
        # the first error is the one reported to the simulation
        if self._error is None:
            self._error = exc
        else:
            logger.error("%s: further error after %r: %r", self._name, self._error, exc)

    def __repr__(self) -> str:
        return f"<Process {self._name} {self._ev.state.value}>"
