"""Simulation configuration dataclass."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class SimulationConfig:
    """Immutable configuration for a simulation run.

    Attributes:
        start_time: Simulated time the clock starts at.
        seed: Seed for ``Simulation.random``. Drawn from the OS when None.
        join_timeout: Seconds to wait for each process thread on shutdown.
            None waits indefinitely.
        thread_name_prefix: Prefix for process names and their threads.
    """

    start_time: float = 0.0
    seed: int | None = None
    join_timeout: float | None = 5.0
    thread_name_prefix: str = "procsim"
