"""Simulation - event queue, clock advancement, and process lifecycle."""
from __future__ import annotations

import heapq
import itertools
import logging
import os
import random
import threading
import weakref
from typing import Any

from procsim import conditions
from procsim.baton import ShutdownSignal
from procsim.clock import Clock
from procsim.config import SimulationConfig
from procsim.event import Event
from procsim.process import Process
from procsim.types import Awaitable, Runner, SimulationError

logger = logging.getLogger(__name__)


class Simulation:
    """Drives a discrete-event simulation.

    Events are settled one at a time in order of (time, scheduling order).
    Processing an event runs its handlers, which is how waiting processes
    get resumed.
    """

    def __init__(self, config: SimulationConfig | None = None) -> None:
        self._config = config if config is not None else SimulationConfig()
        self._clock = Clock(self._config.start_time)
        self._queue: list[tuple[float, int, Event]] = []
        self._sequence = itertools.count()
        self._process_ids = itertools.count(1)
        self._processes: weakref.WeakSet[Process] = weakref.WeakSet()
        self._shutdown = ShutdownSignal()

        seed = self._config.seed
        if seed is None:
            seed = int.from_bytes(os.urandom(8))
        self._seed = seed
        self._rng = random.Random(seed)

    def __enter__(self) -> Simulation:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.shutdown()

    @property
    def config(self) -> SimulationConfig:
        return self._config

    @property
    def clock(self) -> Clock:
        return self._clock

    @property
    def now(self) -> float:
        return self._clock.now

    @property
    def seed(self) -> int:
        return self._seed

    @property
    def random(self) -> random.Random:
        return self._rng

    @property
    def is_shut_down(self) -> bool:
        return self._shutdown.is_set()

    # --- Factories ---

    def event(self) -> Event:
        return Event(self)

    def timeout(self, delay: float) -> Event:
        """Return an event processed ``delay`` time units from now."""
        ev = Event(self)
        ev.trigger_delayed(delay)
        return ev

    def process(self, runner: Runner, *args: Any, **kwargs: Any) -> Process:
        """Start ``runner(proc, *args, **kwargs)`` as a new process.

        The runner begins executing when the simulation reaches the current
        time in its queue, not during this call.
        """
        self._check_running()
        name = f"{self._config.thread_name_prefix}-{next(self._process_ids)}"
        proc = Process(self, runner, name, args, kwargs)
        self._processes.add(proc)
        self.timeout(0).add_handler(proc._start)
        return proc

    def any_of(self, *events: Awaitable) -> Event:
        return conditions.any_of(self, *events)

    def all_of(self, *events: Awaitable) -> Event:
        return conditions.all_of(self, *events)

    # --- Running ---

    def peek(self) -> float | None:
        """Time of the next queued event, or None if the queue is empty."""
        self._discard_settled()
        if not self._queue:
            return None
        return self._queue[0][0]

    def step(self) -> bool:
        """Process the next event. Returns False if there was none."""
        self._check_running()
        self._discard_settled()
        if not self._queue:
            return False
        time, _, ev = heapq.heappop(self._queue)
        self._clock.advance_to(time)
        ev._process()
        return True

    def run(self) -> None:
        """Process events until the queue is empty or the simulation shuts down."""
        self._check_running()
        while not self._shutdown.is_set() and self.step():
            pass

    def run_until(self, target: float) -> None:
        """Process all events before ``target``, then move the clock to it."""
        if target < self._clock.now:
            raise ValueError(f"target {target} is before current time {self._clock.now}")
        self._check_running()
        while not self._shutdown.is_set():
            at = self.peek()
            if at is None or at >= target:
                break
            self.step()
        self._clock.advance_to(target)

    def shutdown(self) -> bool:
        """Terminate all suspended processes. Returns False if already shut down.

        Waits for each process thread to unwind, up to
        ``config.join_timeout`` seconds each.
        """
        if not self._shutdown.fire():
            return False
        logger.debug("shutting down at %s", self._clock.now)

        current = threading.current_thread()
        for proc in list(self._processes):
            thread = proc.thread
            if thread is None or thread is current:
                continue
            thread.join(self._config.join_timeout)
            if thread.is_alive():
                logger.warning("%s did not exit after shutdown", proc.name)
        return True

    def _schedule(self, ev: Event, delay: float) -> None:
        heapq.heappush(
            self._queue, (self._clock.now + delay, next(self._sequence), ev)
        )

    def _discard_settled(self) -> None:
        # aborted events, and repeated delayed triggers, leave stale entries
        while self._queue:
            ev = self._queue[0][2]
            if not (ev.processed() or ev.aborted()):
                return
            heapq.heappop(self._queue)

    def _check_running(self) -> None:
        if self._shutdown.is_set():
            raise SimulationError("simulation has been shut down")
