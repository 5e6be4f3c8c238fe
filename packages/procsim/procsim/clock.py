"""Clock for simulated time."""


class Clock:
    def __init__(self, start: float = 0.0) -> None:
        self._start = start
        self._now = start

    @property
    def start(self) -> float:
        return self._start

    @property
    def now(self) -> float:
        return self._now

    @property
    def elapsed(self) -> float:
        return self._now - self._start

    def advance_to(self, time: float) -> float:
        if time < self._now:
            raise ValueError(f"cannot move clock backwards from {self._now} to {time}")
        self._now = time
        return self._now
