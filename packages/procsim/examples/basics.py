"""Hello World -- the simplest possible procsim program.

Demonstrates:
- Writing a process as a plain function taking its Process handle
- Suspending with proc.wait() on a timeout
- Starting processes and running the simulation to completion

Run: python -m examples.basics
"""

from procsim import Process, Simulation


# A process is just a function whose first argument is the Process.
def clock(proc: Process, name: str, tick: float) -> None:
    for _ in range(3):
        print(f"  {name:>5}  |  t={proc.now:.1f}")
        proc.wait(proc.timeout(tick))


def main() -> None:
    print("=== Hello World ===\n")

    with Simulation() as sim:
        sim.process(clock, "fast", 0.5)
        sim.process(clock, "slow", 1.0)

        # Run until no events remain.
        sim.run()

        print(f"\nDone. Clock stopped at t={sim.now:.1f}.")


if __name__ == "__main__":
    main()
