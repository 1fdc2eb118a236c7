"""
Clock implementations.

Polling and dedup windows take a clock instead of calling time directly,
so tests can run an hour of readiness polling in simulated time.
"""

import threading
import time
from abc import ABC, abstractmethod
from typing import List


class Clock(ABC):
    """Monotonic time source with a blocking sleep."""

    @abstractmethod
    def now(self) -> float:
        pass

    @abstractmethod
    def sleep(self, seconds: float) -> None:
        pass


class SystemClock(Clock):
    def now(self) -> float:
        return time.monotonic()

    def sleep(self, seconds: float) -> None:
        if seconds > 0:
            time.sleep(seconds)


class ManualClock(Clock):
    """
    Simulated time source.

    sleep() does not block: it advances now() by the requested amount and
    records the call, so tests can assert on elapsed time and sleep history.
    """

    def __init__(self, current: float = 0.0):
        self._current = float(current)
        self._lock = threading.Lock()
        self.sleeps: List[float] = []

    def now(self) -> float:
        with self._lock:
            return self._current

    def sleep(self, seconds: float) -> None:
        with self._lock:
            self.sleeps.append(seconds)
            if seconds > 0:
                self._current += seconds

    def advance(self, seconds: float) -> None:
        """Move time forward without recording a sleep."""
        with self._lock:
            self._current += seconds
