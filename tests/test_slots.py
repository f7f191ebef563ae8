from datetime import date, datetime, time

import pytest

from airtime.services.slots import (
    compute_end_time,
    parse_clock,
    parse_duration_minutes,
    slot_window,
)


@pytest.mark.parametrize(
    "duration,minutes",
    [("30 sec", 1), ("90 sec", 2), ("60sec", 1), ("1 min", 1), ("15 MIN", 15), ("2 min spot", 2)],
)
def test_parse_duration_minutes(duration, minutes):
    assert parse_duration_minutes(duration) == minutes


def test_unparseable_duration_is_none():
    assert parse_duration_minutes("half an hour") is None
    assert parse_duration_minutes("") is None


def test_parse_clock_accepts_seconds():
    assert parse_clock("09:05:30") == time(9, 5, 30)
    assert parse_clock("9:05") == time(9, 5)
    with pytest.raises(ValueError):
        parse_clock("25:00")


def test_compute_end_time():
    assert compute_end_time("09:00", "5 min") == "09:05"
    assert compute_end_time("09:59", "30 sec") == "10:00"
    assert compute_end_time("23:58", "5 min") == "00:03"


@pytest.mark.parametrize("duration", ["1440 min", "1500 min", "86400 sec"])
def test_compute_end_time_rejects_day_long_durations(duration):
    with pytest.raises(ValueError):
        compute_end_time("09:00", duration)


def test_slot_window_same_day():
    start, end = slot_window(date(2024, 5, 1), "09:00", "09:05")
    assert start == datetime(2024, 5, 1, 9, 0)
    assert end == datetime(2024, 5, 1, 9, 5)


def test_slot_window_crossing_midnight():
    start, end = slot_window(date(2024, 5, 1), "23:58", "00:03")
    assert start == datetime(2024, 5, 1, 23, 58)
    assert end == datetime(2024, 5, 2, 0, 3)
