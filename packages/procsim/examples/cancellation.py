"""Cancellation -- aborts cascading through processes that wait on each other.

Demonstrates:
- Processes waiting on other processes
- Aborting an event and watching every waiter unwind
- Cleanup with try/finally, which runs even on abort
- Composite events with any_of

Run: python -m examples.cancellation
"""

from procsim import Event, Process, Simulation


def courier(proc: Process, road: Event) -> None:
    try:
        print(f"  t={proc.now:.0f}  courier sets off")
        proc.wait(road)
        print(f"  t={proc.now:.0f}  courier delivered")  # never reached
    finally:
        print(f"  t={proc.now:.0f}  courier returns the van")


def customer(proc: Process, road: Event) -> None:
    delivery = proc.process(courier, road)
    proc.wait(delivery)
    print(f"  t={proc.now:.0f}  customer got the parcel")  # never reached


def weather(proc: Process, road: Event) -> None:
    proc.wait(proc.timeout(3))
    print(f"  t={proc.now:.0f}  storm closes the road")
    road.abort()


def impatient(proc: Process) -> None:
    # Whichever comes first: a call back, or giving up after 2 time units.
    callback = proc.event()
    proc.wait(proc.any_of(callback, proc.timeout(2)))
    print(f"  t={proc.now:.0f}  impatient caller hangs up")


def main() -> None:
    print("=== Cancellation ===\n")

    with Simulation() as sim:
        road = sim.event()
        shopper = sim.process(customer, road)
        sim.process(weather, road)
        sim.process(impatient)
        sim.run()

        print(f"\nCustomer aborted: {shopper.aborted()}")


if __name__ == "__main__":
    main()
