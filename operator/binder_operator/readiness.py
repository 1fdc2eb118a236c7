"""
Bounded readiness polling.

Polls a pod until its Ready condition is true or the time budget runs out.
The first check happens immediately; later checks follow a fixed interval.
"""

import enum
import logging
from dataclasses import dataclass

from binder.core.clock import Clock, SystemClock
from .cluster import ClusterApi

logger = logging.getLogger(__name__)


class Readiness(enum.Enum):
    READY = "ready"
    TIMED_OUT = "timed_out"


@dataclass(frozen=True)
class ReadinessResult:
    outcome: Readiness
    elapsed: float
    polls: int

    @property
    def ready(self) -> bool:
        return self.outcome is Readiness.READY


class ReadinessWaiter:
    def __init__(
        self,
        cluster: ClusterApi,
        clock: Clock = None,
        interval: float = 5,
        timeout: float = 3600,
    ):
        self.cluster = cluster
        self.clock = clock or SystemClock()
        self.interval = interval
        self.timeout = timeout

    def wait(self, namespace: str, name: str) -> ReadinessResult:
        """
        Block until the pod is ready or timeout seconds have elapsed.

        Fetch errors count as "not ready yet" and never end the wait early.
        """
        start = self.clock.now()
        polls = 0
        while True:
            polls += 1
            if self._is_ready(namespace, name):
                return ReadinessResult(Readiness.READY, self.clock.now() - start, polls)

            elapsed = self.clock.now() - start
            if elapsed >= self.timeout:
                return ReadinessResult(Readiness.TIMED_OUT, elapsed, polls)
            self.clock.sleep(min(self.interval, self.timeout - elapsed))

    def _is_ready(self, namespace: str, name: str) -> bool:
        try:
            return self.cluster.get_instance(namespace, name).ready
        except Exception as e:
            logger.debug(f"readiness check for {namespace}/{name} failed: {e}")
            return False
