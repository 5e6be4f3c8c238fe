"""Shared type aliases, protocols, and exceptions for procsim."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Protocol, runtime_checkable

if TYPE_CHECKING:
    from procsim.event import Event
    from procsim.process import Process


class EventState(Enum):
    PENDING = "pending"
    TRIGGERED = "triggered"
    PROCESSED = "processed"
    ABORTED = "aborted"


Handler = Callable[["Event"], None]
Runner = Callable[..., Any]


@runtime_checkable
class Awaitable(Protocol):
    """Anything a process can wait on.

    Settles exactly once, into processed or aborted. Handlers are invoked
    synchronously, in registration order, by whoever settles it.
    """

    def pending(self) -> bool: ...

    def triggered(self) -> bool: ...

    def processed(self) -> bool: ...

    def aborted(self) -> bool: ...

    def add_handler(self, handler: Handler) -> None: ...

    def add_abort_handler(self, handler: Handler) -> None: ...


class ProcessExit(BaseException):
    """Unwinds a process without returning to its logic.

    Derives from BaseException so ``except Exception`` in model code lets it
    through; ``finally`` blocks and context managers still run.
    """


class ProcessAborted(ProcessExit):
    """Raised out of ``Process.wait`` when the awaited occurrence aborted."""

    def __init__(self, process: Process) -> None:
        self.process = process
        super().__init__(f"{process.name} aborted")


class SimulationShutdown(ProcessExit):
    """Raised in a suspended process once the simulation shuts down."""


class ProcessCrashed(Exception):
    """Raised by the driver when process logic raised an ordinary exception."""

    def __init__(self, process: Process, error: BaseException) -> None:
        self.process = process
        self.error = error
        super().__init__(f"{process.name} crashed: {error!r}")


class SimulationError(RuntimeError):
    """Raised on misuse of a simulation or process."""
