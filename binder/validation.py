"""
Event validation and short-term deduplication.

EventValidator is a pure predicate over a single event. RecentEventWindow
keeps a small, time-bounded memory of accepted events so that a replayed
event whose counter was reset is not dispatched twice.
"""

import threading
from datetime import datetime
from typing import Dict, Hashable

from .core.clock import Clock, SystemClock
from .core.events import LifecycleEvent, parse_timestamp


class EventValidator:
    """
    Accepts only first occurrences observed since the controller started.

    On startup the watch replays every cached event, including old ones;
    comparing against started_at filters that replay out, and count == 1
    filters events that already fired repeatedly.
    """

    def __init__(self, started_at: datetime):
        # lastTimestamp has whole-second precision
        self.started_at = parse_timestamp(started_at).replace(microsecond=0)

    def is_valid(self, event: LifecycleEvent) -> bool:
        if event.count != 1:
            return False
        if event.last_timestamp is None:
            return False
        return event.last_timestamp >= self.started_at


class RecentEventWindow:
    """
    Thread-safe set of keys remembered for window_seconds.

    A window of 0 disables deduplication.
    """

    def __init__(self, window_seconds: float, clock: Clock = None):
        self.window_seconds = window_seconds
        self.clock = clock or SystemClock()
        self._seen: Dict[Hashable, float] = {}
        self._lock = threading.Lock()

    def check_and_record(self, key: Hashable) -> bool:
        """
        Record key and report whether it was already seen in the window.

        Returns:
            True if key is a duplicate (caller should drop the event)
        """
        if self.window_seconds <= 0:
            return False
        now = self.clock.now()
        with self._lock:
            self._prune(now)
            if key in self._seen:
                return True
            self._seen[key] = now
            return False

    def forget(self, key: Hashable) -> None:
        """Drop key so a redelivery of the same event is accepted again."""
        with self._lock:
            self._seen.pop(key, None)

    def __len__(self) -> int:
        with self._lock:
            self._prune(self.clock.now())
            return len(self._seen)

    def _prune(self, now: float) -> None:
        expired = [k for k, seen_at in self._seen.items() if now - seen_at >= self.window_seconds]
        for k in expired:
            del self._seen[k]
