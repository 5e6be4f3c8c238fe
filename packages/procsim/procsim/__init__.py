"""procsim - process-based discrete-event simulation in Python."""

import logging

from procsim.clock import Clock
from procsim.config import SimulationConfig
from procsim.event import Event
from procsim.process import Process
from procsim.simulation import Simulation
from procsim.types import (
    Awaitable,
    EventState,
    ProcessAborted,
    ProcessCrashed,
    ProcessExit,
    SimulationError,
    SimulationShutdown,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "Simulation",
    "SimulationConfig",
    "Process",
    "Event",
    "EventState",
    "Awaitable",
    "Clock",
    "ProcessExit",
    "ProcessAborted",
    "ProcessCrashed",
    "SimulationShutdown",
    "SimulationError",
]
