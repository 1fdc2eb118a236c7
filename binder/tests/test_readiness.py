"""
Tests for readiness polling in simulated time.
"""

import pytest

from binder.core.clock import Clock, ManualClock
from binder.core.errors import InstanceNotFound
from binder_operator.readiness import Readiness, ReadinessWaiter
from binder.tests.fakes import FakeCluster, pod


def test_ready_immediately_does_not_sleep():
    cluster = FakeCluster()
    cluster.add_pod(pod(ready=True))
    clock = ManualClock()

    result = ReadinessWaiter(cluster, clock=clock).wait("prod", "api-7")

    assert result.ready
    assert result.polls == 1
    assert clock.sleeps == []


def test_ready_after_three_not_ready_polls():
    cluster = FakeCluster()
    cluster.add_pod(pod(ready=False), pod(ready=False), pod(ready=False), pod(ready=True))
    clock = ManualClock()

    result = ReadinessWaiter(cluster, clock=clock, interval=5, timeout=3600).wait("prod", "api-7")

    assert result.outcome is Readiness.READY
    assert result.polls == 4
    assert result.elapsed >= 3 * 5
    assert clock.sleeps == [5, 5, 5]


def test_never_ready_times_out_at_budget_not_earlier():
    cluster = FakeCluster()
    cluster.add_pod(pod(ready=False))
    clock = ManualClock()

    result = ReadinessWaiter(cluster, clock=clock, interval=5, timeout=3600).wait("prod", "api-7")

    assert result.outcome is Readiness.TIMED_OUT
    assert not result.ready
    assert result.elapsed == 3600
    assert clock.now() == 3600
    assert result.polls == 3600 // 5 + 1


def test_last_sleep_clipped_to_remaining_budget():
    cluster = FakeCluster()
    cluster.add_pod(pod(ready=False))
    clock = ManualClock()

    result = ReadinessWaiter(cluster, clock=clock, interval=5, timeout=12).wait("prod", "api-7")

    assert result.outcome is Readiness.TIMED_OUT
    assert clock.sleeps == [5, 5, 2]
    assert result.elapsed == 12


def test_fetch_errors_count_as_not_ready():
    cluster = FakeCluster()
    cluster.add_pod(
        ConnectionError("reset by peer"),
        InstanceNotFound("prod", "api-7"),
        pod(ready=True),
    )
    clock = ManualClock()

    result = ReadinessWaiter(cluster, clock=clock, interval=5).wait("prod", "api-7")

    assert result.ready
    assert result.polls == 3
    assert clock.now() == 10


def test_clock_must_implement_now_and_sleep():
    class NowOnly(Clock):
        def now(self):
            return 0.0

    with pytest.raises(TypeError):
        Clock()
    with pytest.raises(TypeError):
        NowOnly()
