"""Clocks — Clock protocol implementations (integer epoch seconds)."""

import time


class SystemClock:
    """Wall clock, truncated to whole seconds."""

    def now(self) -> int:
        return int(time.time())


class FixedClock:
    """Manually advanced clock for tests and replay tooling."""

    def __init__(self, start: int = 1_700_000_000):
        self._now = start

    def now(self) -> int:
        return self._now

    def advance(self, seconds: int) -> None:
        self._now += seconds

    def set(self, timestamp: int) -> None:
        self._now = timestamp
