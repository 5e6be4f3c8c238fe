"""Tests for Event state transitions and handler dispatch."""

import pytest
from procsim import Awaitable, EventState, Simulation, SimulationConfig


def make_sim():
    return Simulation(SimulationConfig(seed=0))


# --- States ---


def test_new_event_is_pending():
    sim = make_sim()
    ev = sim.event()
    assert ev.state is EventState.PENDING
    assert ev.pending()
    assert not ev.triggered()
    assert not ev.processed()
    assert not ev.aborted()


def test_event_satisfies_awaitable():
    sim = make_sim()
    assert isinstance(sim.event(), Awaitable)


def test_trigger_then_process():
    sim = make_sim()
    ev = sim.event()
    assert ev.trigger() is True
    assert ev.state is EventState.TRIGGERED
    assert not ev.pending()
    assert ev.triggered()
    assert not ev.processed()

    sim.run()
    assert ev.processed()
    assert ev.triggered()


def test_trigger_twice_returns_false():
    sim = make_sim()
    ev = sim.event()
    assert ev.trigger() is True
    assert ev.trigger() is False


def test_abort_pending_event():
    sim = make_sim()
    ev = sim.event()
    assert ev.abort() is True
    assert ev.aborted()
    assert ev.triggered()
    assert not ev.processed()
    assert not ev.pending()


def test_triggered_event_cannot_be_aborted():
    sim = make_sim()
    ev = sim.event()
    ev.trigger()
    assert ev.abort() is False
    sim.run()
    assert ev.processed()


def test_aborted_event_is_never_processed():
    sim = make_sim()
    ev = sim.timeout(3)
    calls = []
    ev.add_handler(lambda e: calls.append("processed"))
    ev.abort()
    sim.run()
    assert ev.aborted()
    assert calls == []
    assert sim.now == 0


# --- trigger_delayed ---


def test_trigger_delayed_keeps_event_pending():
    sim = make_sim()
    ev = sim.event()
    assert ev.trigger_delayed(4) is True
    assert ev.pending()
    sim.run()
    assert ev.processed()
    assert sim.now == 4


def test_trigger_delayed_negative_raises():
    sim = make_sim()
    with pytest.raises(ValueError, match="non-negative"):
        sim.event().trigger_delayed(-1)


def test_delayed_event_can_be_aborted_before_it_fires():
    sim = make_sim()
    ev = sim.event()
    ev.trigger_delayed(2)
    assert ev.abort() is True
    sim.run()
    assert ev.aborted()


# --- Handlers ---


def test_handlers_run_in_registration_order():
    sim = make_sim()
    ev = sim.event()
    order = []
    ev.add_handler(lambda e: order.append("a"))
    ev.add_handler(lambda e: order.append("b"))
    ev.add_handler(lambda e: order.append("c"))
    ev.trigger()
    sim.run()
    assert order == ["a", "b", "c"]


def test_handler_receives_event():
    sim = make_sim()
    ev = sim.event()
    received = []
    ev.add_handler(received.append)
    ev.trigger()
    sim.run()
    assert received == [ev]


def test_abort_handlers_run_synchronously_in_order():
    sim = make_sim()
    ev = sim.event()
    order = []
    ev.add_abort_handler(lambda e: order.append("first"))
    ev.add_abort_handler(lambda e: order.append("second"))
    ev.abort()
    assert order == ["first", "second"]


def test_handlers_fire_exactly_once():
    sim = make_sim()
    ev = sim.event()
    calls = []
    ev.add_handler(lambda e: calls.append(1))
    ev.trigger_delayed(1)
    ev.trigger_delayed(2)
    sim.run()
    assert calls == [1]


def test_abort_handlers_do_not_fire_on_processing():
    sim = make_sim()
    ev = sim.event()
    calls = []
    ev.add_abort_handler(lambda e: calls.append("abort"))
    ev.trigger()
    sim.run()
    ev.abort()
    assert calls == []


def test_handler_added_after_processing_is_dropped():
    sim = make_sim()
    ev = sim.event()
    ev.trigger()
    sim.run()
    calls = []
    ev.add_handler(lambda e: calls.append(1))
    ev.trigger()
    sim.run()
    assert calls == []


def test_failing_handler_does_not_stop_later_handlers():
    sim = make_sim()
    ev = sim.event()
    calls = []

    def boom(e):
        raise ValueError("boom")

    ev.add_handler(boom)
    ev.add_handler(lambda e: calls.append("after"))
    ev.trigger()
    with pytest.raises(ValueError, match="boom"):
        sim.step()
    assert calls == ["after"]
    assert ev.processed()
