from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from app.models.time_slot import GroupType
from app.schemas.time_slot import TimeSlotDraft, TimeSlotRecord
from app.services.time_intervals import TimeInterval, is_valid_day

logger = logging.getLogger(__name__)

CANDIDATE_ID = "candidate"


@dataclass(frozen=True)
class Booking:
    """A fully resolved occupation of a room, a faculty member and a cohort."""

    id: str
    course_id: str | None
    faculty_id: str | None
    room_id: str | None
    department_id: str | None
    day_of_week: int
    interval: TimeInterval
    year_level: int | None
    academic_year: str
    semester: int
    group_id: str | None = None
    group_type: GroupType | None = None
    group_name: str | None = None
    max_students: int | None = None

    @property
    def start_time(self) -> str:
        return self.interval.as_strings()[0]

    @property
    def end_time(self) -> str:
        return self.interval.as_strings()[1]

    def same_scope(self, academic_year: str, semester: int) -> bool:
        return self.academic_year == academic_year and self.semester == semester


def normalize_semester(value: int | str | None) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return None


def booking_from_record(record: TimeSlotRecord) -> Booking | None:
    interval = TimeInterval.parse(record.start_time, record.end_time)
    if interval is None or not is_valid_day(record.day_of_week):
        logger.debug("Skipping unschedulable slot %s (%s-%s)", record.id, record.start_time, record.end_time)
        return None
    return Booking(
        id=record.id,
        course_id=record.course_id,
        faculty_id=record.faculty_id,
        room_id=record.room_id,
        department_id=record.department_id,
        day_of_week=record.day_of_week,
        interval=interval,
        year_level=record.year_level,
        academic_year=record.academic_year,
        semester=record.semester,
        group_id=record.group_id,
        group_type=record.group_type,
        group_name=record.group_name,
        max_students=record.max_students,
    )


def bookings_from_records(records: Iterable[TimeSlotRecord]) -> list[Booking]:
    bookings = []
    for record in records:
        booking = booking_from_record(record)
        if booking is not None:
            bookings.append(booking)
    return bookings


def booking_from_draft(draft: TimeSlotDraft) -> Booking | None:
    """Resolve a form draft, or None when it lacks what a conflict check needs."""
    semester = normalize_semester(draft.semester)
    interval = TimeInterval.parse(draft.start_time, draft.end_time)
    if interval is None or semester is None or not draft.academic_year or not is_valid_day(draft.day_of_week):
        return None
    return Booking(
        id=draft.id or CANDIDATE_ID,
        course_id=draft.course_id,
        faculty_id=draft.faculty_id,
        room_id=draft.room_id,
        department_id=draft.department_id,
        day_of_week=draft.day_of_week,
        interval=interval,
        year_level=draft.year_level,
        academic_year=draft.academic_year,
        semester=semester,
        group_id=draft.group_id,
        group_type=draft.group_type,
        group_name=draft.group_name,
        max_students=draft.max_students,
    )
