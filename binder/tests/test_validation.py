"""
Tests for event validation and the dedup window.
"""

from datetime import timedelta

from binder.core.clock import ManualClock
from binder.core.events import LifecycleEvent
from binder.validation import EventValidator, RecentEventWindow
from binder.tests.fakes import STARTED_AT, raw_event


def _event(count=1, ts="2024-05-01T10:00:05Z"):
    return LifecycleEvent.from_raw(raw_event(count=count, ts=ts))


def test_first_occurrence_after_start_is_valid():
    assert EventValidator(STARTED_AT).is_valid(_event()) is True


def test_event_at_exact_start_time_is_valid():
    assert EventValidator(STARTED_AT).is_valid(_event(ts=STARTED_AT.isoformat())) is True


def test_count_other_than_one_is_invalid():
    validator = EventValidator(STARTED_AT)
    for count in (0, 2, 3, 50):
        assert validator.is_valid(_event(count=count)) is False


def test_event_before_start_is_invalid_regardless_of_count():
    validator = EventValidator(STARTED_AT)
    before = (STARTED_AT - timedelta(seconds=1)).isoformat()
    for count in (1, 2):
        assert validator.is_valid(_event(count=count, ts=before)) is False


def test_event_without_timestamp_is_invalid():
    raw = raw_event()
    raw["lastTimestamp"] = None
    assert EventValidator(STARTED_AT).is_valid(LifecycleEvent.from_raw(raw)) is False


def test_window_suppresses_repeat_within_window():
    clock = ManualClock()
    window = RecentEventWindow(600, clock)

    assert window.check_and_record(("uid-1", "Started")) is False
    clock.advance(599)
    assert window.check_and_record(("uid-1", "Started")) is True
    assert window.check_and_record(("uid-1", "Killing")) is False


def test_window_forgets_after_expiry():
    clock = ManualClock()
    window = RecentEventWindow(600, clock)

    window.check_and_record(("uid-1", "Started"))
    clock.advance(600)

    assert len(window) == 0
    assert window.check_and_record(("uid-1", "Started")) is False


def test_zero_window_disables_dedup():
    window = RecentEventWindow(0, ManualClock())
    assert window.check_and_record("k") is False
    assert window.check_and_record("k") is False


def test_event_in_same_second_as_subsecond_start_is_valid():
    # lastTimestamp carries whole seconds; startup time does not
    validator = EventValidator(STARTED_AT.replace(microsecond=500000))

    assert validator.started_at == STARTED_AT
    assert validator.is_valid(_event(ts="2024-05-01T10:00:00Z")) is True
    assert validator.is_valid(_event(ts="2024-05-01T09:59:59Z")) is False


def test_forgotten_key_is_accepted_again():
    window = RecentEventWindow(600, ManualClock())

    assert window.check_and_record(("uid-1", "Killing")) is False
    window.forget(("uid-1", "Killing"))
    window.forget(("uid-2", "Killing"))

    assert len(window) == 0
    assert window.check_and_record(("uid-1", "Killing")) is False
    assert window.check_and_record(("uid-1", "Killing")) is True
