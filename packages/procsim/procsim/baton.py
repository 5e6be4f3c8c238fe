"""Baton - unbuffered handoff channel and the shutdown broadcast."""
from __future__ import annotations

import threading
import weakref

from procsim.types import SimulationShutdown


class ShutdownSignal:
    """Broadcast, idempotent cancellation flag shared by all batons."""

    def __init__(self) -> None:
        self._flag = threading.Event()
        self._lock = threading.Lock()
        self._listeners: weakref.WeakSet[threading.Condition] = weakref.WeakSet()

    def is_set(self) -> bool:
        return self._flag.is_set()

    def register(self, condition: threading.Condition) -> None:
        """Wake ``condition`` waiters when the signal fires."""
        with self._lock:
            self._listeners.add(condition)

    def fire(self) -> bool:
        """Raise the signal. Returns False if it was already raised."""
        with self._lock:
            if self._flag.is_set():
                return False
            self._flag.set()
            listeners = list(self._listeners)
        for condition in listeners:
            with condition:
                condition.notify_all()
        return True


class Baton:
    """Rendezvous channel passing a bool token between two threads.

    ``send`` returns only once the other side has taken the token, so one
    channel can carry traffic both ways without a side reading its own
    token back.
    """

    def __init__(self, shutdown: ShutdownSignal) -> None:
        self._shutdown = shutdown
        self._cond = threading.Condition()
        self._slot: bool | None = None
        self._sent = 0
        self._taken = 0
        shutdown.register(self._cond)

    def send(self, token: bool) -> None:
        """Hand ``token`` over and block until it is received.

        Raises SimulationShutdown if the shutdown signal fires first.
        """
        with self._cond:
            self._cond.wait_for(lambda: self._slot is None or self._shutdown.is_set())
            if self._shutdown.is_set():
                raise SimulationShutdown
            self._slot = token
            self._sent += 1
            ticket = self._sent
            self._cond.notify_all()
            self._cond.wait_for(lambda: self._taken >= ticket or self._shutdown.is_set())
            if self._taken < ticket:
                raise SimulationShutdown

    def receive(self) -> bool:
        """Block until a token arrives and return it.

        Raises SimulationShutdown if the shutdown signal fires first; the
        signal wins over a token that is already waiting.
        """
        with self._cond:
            self._cond.wait_for(lambda: self._slot is not None or self._shutdown.is_set())
            if self._shutdown.is_set():
                raise SimulationShutdown
            token = self._slot
            self._slot = None
            self._taken += 1
            self._cond.notify_all()
            return token
