from datetime import datetime, timedelta, timezone as dt_timezone
from types import SimpleNamespace

from assessments.timer import effective_deadline, is_expired, remaining_seconds

START = datetime(2026, 3, 2, 8, 0, tzinfo=dt_timezone.utc)


def attempt(extra_time=0):
    return SimpleNamespace(start_time=START, extra_time=extra_time)


def exam(duration=60, end_time=None):
    return SimpleNamespace(duration_minutes=duration, end_time=end_time)


def test_duration_deadline_without_hard_end():
    assert effective_deadline(attempt(), exam()) == START + timedelta(minutes=60)


def test_hard_end_wins_when_earlier():
    end = START + timedelta(minutes=20)
    assert effective_deadline(attempt(), exam(end_time=end)) == end


def test_hard_end_later_than_duration_is_ignored():
    end = START + timedelta(hours=3)
    assert effective_deadline(attempt(), exam(end_time=end)) == START + timedelta(minutes=60)


def test_extra_time_extends_duration():
    assert effective_deadline(attempt(extra_time=15), exam()) == START + timedelta(minutes=75)


def test_extra_time_never_passes_hard_end():
    end = START + timedelta(minutes=65)
    assert effective_deadline(attempt(extra_time=15), exam(end_time=end)) == end


def test_remaining_seconds_counts_down():
    assert remaining_seconds(attempt(), exam(), START + timedelta(minutes=10)) == 50 * 60


def test_remaining_is_zero_one_second_after_deadline():
    now = START + timedelta(minutes=60, seconds=1)
    assert remaining_seconds(attempt(), exam(), now) == 0
    assert is_expired(attempt(), exam(), now)


def test_remaining_is_zero_at_deadline():
    assert remaining_seconds(attempt(), exam(), START + timedelta(minutes=60)) == 0


def test_remaining_is_never_negative():
    assert remaining_seconds(attempt(), exam(), START + timedelta(days=2)) == 0
