from __future__ import annotations

from collections.abc import Iterable

from app.schemas.availability import AvailableWindow
from app.schemas.time_slot import TimeSlotRecord
from app.services.bookings import bookings_from_records, normalize_semester
from app.services.time_intervals import TimeInterval, format_minutes

DEFAULT_WORKING_HOURS = ("08:00", "18:00")
DEFAULT_MIN_DURATION = 60


def occupied_intervals(
    day: int,
    existing: Iterable[TimeSlotRecord],
    academic_year: str,
    semester: int | str,
    year_level: int | str | None = None,
    window: TimeInterval | None = None,
) -> list[TimeInterval]:
    """Merged, chronologically ordered busy intervals, clipped to `window` when given."""
    semester_number = normalize_semester(semester)
    level = str(year_level).strip() if year_level is not None and str(year_level).strip() else None

    intervals = []
    for booking in bookings_from_records(existing):
        if booking.day_of_week != day or not booking.same_scope(academic_year, semester_number):
            continue
        if level is not None and str(booking.year_level) != level:
            continue
        start, end = booking.interval.start, booking.interval.end
        if window is not None:
            start, end = max(start, window.start), min(end, window.end)
        if start < end:
            intervals.append(TimeInterval(start, end))

    merged: list[TimeInterval] = []
    for interval in sorted(intervals, key=lambda item: (item.start, item.end)):
        if merged and interval.start <= merged[-1].end:
            merged[-1] = TimeInterval(merged[-1].start, max(merged[-1].end, interval.end))
        else:
            merged.append(interval)
    return merged


def find_available_slots(
    day: int,
    existing: Iterable[TimeSlotRecord],
    academic_year: str,
    semester: int | str,
    year_level: int | str | None = None,
    min_duration: int = DEFAULT_MIN_DURATION,
    working_hours: tuple[str, str] = DEFAULT_WORKING_HOURS,
) -> list[AvailableWindow]:
    window = TimeInterval.parse(*working_hours)
    if window is None:
        return []

    free: list[AvailableWindow] = []
    cursor = window.start
    for busy in occupied_intervals(day, existing, academic_year, semester, year_level, window):
        if busy.start - cursor >= min_duration:
            free.append(AvailableWindow(start=format_minutes(cursor), end=format_minutes(busy.start)))
        cursor = max(cursor, busy.end)
    if window.end - cursor >= min_duration:
        free.append(AvailableWindow(start=format_minutes(cursor), end=format_minutes(window.end)))
    return free
