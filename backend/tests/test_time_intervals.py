import pytest

from app.services.time_intervals import (
    TimeInterval,
    format_minutes,
    is_valid_day,
    overlaps,
    parse_time_to_minutes,
)


@pytest.mark.parametrize(
    ("value", "expected"),
    [("00:00", 0), ("08:30", 510), ("9:05", 545), ("23:59", 1439)],
)
def test_parse_time_to_minutes_accepts_24_hour_values(value, expected):
    assert parse_time_to_minutes(value) == expected


@pytest.mark.parametrize("value", ["24:00", "8:5", "08:60", "noon", "", None, "08:00:00"])
def test_parse_time_to_minutes_returns_none_for_malformed_values(value):
    assert parse_time_to_minutes(value) is None


def test_format_minutes_pads_hours_and_minutes():
    assert format_minutes(545) == "09:05"
    assert format_minutes(18 * 60) == "18:00"


def test_interval_parse_rejects_empty_or_inverted_windows():
    assert TimeInterval.parse("10:00", "10:00") is None
    assert TimeInterval.parse("11:00", "10:00") is None
    assert TimeInterval.parse("10:00", "bad") is None
    assert TimeInterval.parse("10:00", "11:30") == TimeInterval(600, 690)


def test_overlap_is_half_open_and_symmetric():
    morning = TimeInterval.parse("08:00", "10:00")
    after = TimeInterval.parse("10:00", "12:00")
    straddling = TimeInterval.parse("09:00", "11:00")

    assert not overlaps(morning, after)
    assert not overlaps(after, morning)
    assert overlaps(morning, straddling) and overlaps(straddling, morning)
    assert overlaps(after, straddling) and overlaps(straddling, after)


def test_overlap_symmetry_over_a_grid():
    points = range(0, 6 * 60, 45)
    intervals = [TimeInterval(start, end) for start in points for end in points if start < end]
    for first in intervals:
        for second in intervals:
            assert overlaps(first, second) == overlaps(second, first)


def test_contained_interval_overlaps():
    outer = TimeInterval.parse("08:00", "12:00")
    inner = TimeInterval.parse("09:00", "10:00")
    assert outer.overlaps(inner)
    assert inner.duration == 60
    assert inner.as_strings() == ("09:00", "10:00")


def test_day_of_week_range():
    assert is_valid_day(1) and is_valid_day(7)
    assert not is_valid_day(0)
    assert not is_valid_day(8)
    assert not is_valid_day(None)
    assert not is_valid_day(True)
