"""Clock: time source injected into every component that reads time.

Invariants:
    - now() returns seconds as a float and never goes backwards
    - Core modules never call time.* directly

Design Decisions:
    - Protocol over ABC: tests pass any object with a now() method
"""

import time
from typing import Protocol


class Clock(Protocol):
    """Structural contract for time sources."""
    def now(self) -> float: ...


class MonotonicClock:
    """Production clock backed by time.monotonic()."""

    def now(self) -> float:
        return time.monotonic()


class ManualClock:
    """Clock advanced explicitly. Used to make window expiry deterministic."""

    def __init__(self, start: float = 0.0):
        self._now = start

    def now(self) -> float:
        return self._now

    def advance(self, seconds: float) -> None:
        if seconds < 0:
            raise ValueError("ManualClock cannot go backwards")
        self._now += seconds
