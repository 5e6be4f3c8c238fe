"""Composite events over several awaitables."""
from __future__ import annotations

from typing import TYPE_CHECKING

from procsim.event import Event
from procsim.types import Awaitable

if TYPE_CHECKING:
    from procsim.simulation import Simulation


def any_of(sim: Simulation, *events: Awaitable) -> Event:
    """Return an event processed as soon as any of ``events`` is.

    Triggered at once when ``events`` is empty or one is already processed.
    Aborted once every one of ``events`` has aborted.
    """
    result = sim.event()
    if not events or any(ev.processed() for ev in events):
        result.trigger()
        return result

    live = [ev for ev in events if not ev.aborted()]
    if not live:
        result.abort()
        return result

    remaining = len(live)

    def on_processed(_ev: Event) -> None:
        result.trigger()

    def on_aborted(_ev: Event) -> None:
        nonlocal remaining
        remaining -= 1
        if remaining == 0:
            result.abort()

    for ev in live:
        ev.add_handler(on_processed)
        ev.add_abort_handler(on_aborted)
    return result


def all_of(sim: Simulation, *events: Awaitable) -> Event:
    """Return an event processed once all of ``events`` are.

    Triggered at once when ``events`` is empty or all are already processed.
    Aborted as soon as any of ``events`` aborts.
    """
    result = sim.event()
    if any(ev.aborted() for ev in events):
        result.abort()
        return result

    waiting = [ev for ev in events if not ev.processed()]
    if not waiting:
        result.trigger()
        return result

    remaining = len(waiting)

    def on_processed(_ev: Event) -> None:
        nonlocal remaining
        remaining -= 1
        if remaining == 0:
            result.trigger()

    def on_aborted(_ev: Event) -> None:
        result.abort()

    for ev in waiting:
        ev.add_handler(on_processed)
        ev.add_abort_handler(on_aborted)
    return result
