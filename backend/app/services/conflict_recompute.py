from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Callable, Iterable, Sequence
from datetime import datetime, timezone

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from app.models.conflict import ConflictRecord, ConflictSeverity, ConflictType
from app.schemas.conflict import ConflictDetail
from app.schemas.time_slot import TimeSlotRecord
from app.services.bookings import Booking, bookings_from_records
from app.services.group_semantics import is_exempt, is_partial_cohort
from app.services.reference_labels import ReferenceLabels

logger = logging.getLogger(__name__)

TYPE_ORDER = {
    ConflictType.room: 0,
    ConflictType.faculty: 1,
    ConflictType.student_group: 2,
    ConflictType.capacity: 3,
    ConflictType.time: 4,
}


def _group_by(bookings: Iterable[Booking], key: Callable[[Booking], tuple]) -> dict[tuple, list[Booking]]:
    groups: dict[tuple, list[Booking]] = defaultdict(list)
    for booking in bookings:
        groups[key(booking)].append(booking)
    return groups


def _non_exempt_members(members: Sequence[Booking], conflict_type: ConflictType) -> list[Booking]:
    """Drop members that only share the slot with their own joint/split siblings."""
    return [
        member
        for member in members
        if any(not is_exempt(member, other, conflict_type) for other in members if other.id != member.id)
    ]


def _room_conflicts(bookings: Sequence[Booking], labels: ReferenceLabels) -> list[ConflictDetail]:
    conflicts = []
    groups = _group_by(bookings, lambda b: (b.room_id, b.day_of_week, b.interval.start))
    for (room_id, _day, _start), members in groups.items():
        if not room_id or len(members) < 2:
            continue
        remaining = _non_exempt_members(members, ConflictType.room)
        if len(remaining) < 2:
            continue
        first = remaining[0]
        conflicts.append(
            ConflictDetail(
                type=ConflictType.room,
                severity=ConflictSeverity.high,
                description="Room conflict: Multiple classes scheduled in the same room at the same time",
                details=f"Room {labels.room_name(room_id)} is already booked from {first.start_time} to {first.end_time}",
                affected_slots=[member.id for member in remaining],
            )
        )
    return conflicts


def _faculty_conflicts(bookings: Sequence[Booking], labels: ReferenceLabels) -> list[ConflictDetail]:
    conflicts = []
    groups = _group_by(bookings, lambda b: (b.faculty_id, b.day_of_week, b.interval.start))
    for (faculty_id, _day, _start), members in groups.items():
        if not faculty_id or len(members) < 2:
            continue
        remaining = _non_exempt_members(members, ConflictType.faculty)
        if len(remaining) < 2:
            continue
        first = remaining[0]
        conflicts.append(
            ConflictDetail(
                type=ConflictType.faculty,
                severity=ConflictSeverity.high,
                description="Faculty conflict: Faculty member scheduled for multiple classes at the same time",
                details=(
                    f"Faculty member {labels.faculty_name(faculty_id)} is already scheduled "
                    f"from {first.start_time} to {first.end_time}"
                ),
                affected_slots=[member.id for member in remaining],
            )
        )
    return conflicts


def _student_group_conflicts(bookings: Sequence[Booking], labels: ReferenceLabels) -> list[ConflictDetail]:
    conflicts = []
    groups = _group_by(bookings, lambda b: (b.year_level, b.day_of_week, b.interval.start))
    for (year_level, _day, _start), members in groups.items():
        if year_level is None or len(members) < 2:
            continue
        remaining = _non_exempt_members(members, ConflictType.student_group)
        if len(remaining) < 2:
            continue
        first = remaining[0]
        courses = " and ".join(labels.course_label(member.course_id) for member in remaining)
        severity = (
            ConflictSeverity.warning if all(is_partial_cohort(member) for member in remaining) else ConflictSeverity.high
        )
        conflicts.append(
            ConflictDetail(
                type=ConflictType.student_group,
                severity=severity,
                description=f"Course conflict: Year {year_level} students have more than one class at this time",
                details=(
                    f"Year {year_level} students have conflicting courses from "
                    f"{first.start_time} to {first.end_time}: {courses}"
                ),
                affected_slots=[member.id for member in remaining],
            )
        )
    return conflicts


def _capacity_warnings(bookings: Sequence[Booking], labels: ReferenceLabels) -> list[ConflictDetail]:
    conflicts = []
    for booking in bookings:
        capacity = labels.room_capacity(booking.room_id)
        if capacity is None or booking.max_students is None or booking.max_students <= capacity:
            continue
        conflicts.append(
            ConflictDetail(
                type=ConflictType.capacity,
                severity=ConflictSeverity.warning,
                description=f"Room {labels.room_name(booking.room_id)} may be too small for this class",
                details=f"Capacity {capacity} < expected students {booking.max_students}",
                affected_slots=[booking.id],
            )
        )
    return conflicts


def _canonical(conflicts: Iterable[ConflictDetail], position: dict[str, tuple[int, int]]) -> list[ConflictDetail]:
    unique: dict[tuple[ConflictType, tuple[str, ...]], ConflictDetail] = {}
    for conflict in conflicts:
        key = (conflict.type, tuple(sorted(conflict.affected_slots)))
        unique.setdefault(key, conflict)

    def sort_key(conflict: ConflictDetail) -> tuple:
        first = min(position[slot_id] for slot_id in conflict.affected_slots)
        return first, TYPE_ORDER[conflict.type], sorted(conflict.affected_slots)

    return sorted(unique.values(), key=sort_key)


def recompute_conflicts(
    slots: Iterable[TimeSlotRecord],
    labels: ReferenceLabels | None = None,
    *,
    academic_year: str,
    semester: int,
) -> list[ConflictDetail]:
    """Derive the complete conflict set of one semester.

    Slots are bucketed on exact start time rather than true interval overlap;
    single-slot edits go through the pairwise classifier instead.
    """
    labels = labels or ReferenceLabels()
    scoped = [
        booking for booking in bookings_from_records(slots) if booking.same_scope(academic_year, semester)
    ]
    position = {booking.id: (booking.day_of_week, booking.interval.start) for booking in scoped}
    conflicts = [
        *_room_conflicts(scoped, labels),
        *_faculty_conflicts(scoped, labels),
        *_student_group_conflicts(scoped, labels),
        *_capacity_warnings(scoped, labels),
    ]
    return _canonical(conflicts, position)


def replace_conflict_records(
    db: Session,
    *,
    academic_year: str,
    semester: int,
    conflicts: Sequence[ConflictDetail],
) -> list[ConflictRecord]:
    """Swap the persisted records of a scope for a freshly computed set; caller commits."""
    db.execute(
        delete(ConflictRecord).where(
            ConflictRecord.academic_year == academic_year,
            ConflictRecord.semester == semester,
        )
    )
    records = [
        ConflictRecord(
            academic_year=academic_year,
            semester=semester,
            type=conflict.type,
            severity=conflict.severity,
            description=conflict.description,
            details=conflict.details,
            affected_slots=list(conflict.affected_slots),
        )
        for conflict in conflicts
        if conflict.affected_slots
    ]
    db.add_all(records)
    logger.info(
        "Replaced conflict records for %s semester %s: %d conflict(s)",
        academic_year,
        semester,
        len(records),
    )
    return records


def invalidate_conflicts_for_slot(db: Session, slot_id: str) -> int:
    """Delete persisted records that reference a slot; caller commits."""
    stale = [
        record
        for record in db.execute(select(ConflictRecord)).scalars()
        if slot_id in (record.affected_slots or [])
    ]
    for record in stale:
        db.delete(record)
    if stale:
        logger.debug("Invalidated %d conflict record(s) referencing slot %s", len(stale), slot_id)
    return len(stale)


def resolve_conflict_record(
    db: Session,
    record: ConflictRecord,
    *,
    resolved_by: str | None = None,
    notes: str | None = None,
) -> ConflictRecord:
    record.resolved = True
    record.resolved_by = resolved_by
    record.resolution_notes = notes
    record.resolved_at = datetime.now(timezone.utc)
    return record
