from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import replace

from app.models.conflict import ConflictSeverity, ConflictType
from app.models.time_slot import GroupType
from app.schemas.conflict import ConflictCheckResult, ConflictDetail
from app.schemas.reference import CourseRef, FacultyRef, RoomRef
from app.schemas.time_slot import JointSessionDraft, SplitClassDraft, TimeSlotDraft, TimeSlotRecord
from app.services.bookings import (
    CANDIDATE_ID,
    Booking,
    booking_from_draft,
    bookings_from_records,
    normalize_semester,
)
from app.services.conflict_policy import build_check_result, empty_result
from app.services.group_semantics import describe_context, exempt_conflict_types, is_partial_cohort
from app.services.reference_labels import ReferenceLabels
from app.services.time_intervals import TimeInterval, format_minutes, is_valid_day

logger = logging.getLogger(__name__)

DEFAULT_SHORT_SESSION_MINUTES = 30
DEFAULT_LONG_SESSION_MINUTES = 240

# Placeholder group id so that the groups of a new split class recognise each other.
PENDING_SPLIT_GROUP_ID = "pending-split"


class ConflictDetector:
    """Classifies candidate bookings against one snapshot of existing slots.

    The snapshot and labels are captured at construction and never mutated, so
    a detector can be shared by concurrent readers of the same snapshot.
    """

    def __init__(
        self,
        existing_slots: Iterable[TimeSlotRecord],
        labels: ReferenceLabels | None = None,
        *,
        short_session_minutes: int = DEFAULT_SHORT_SESSION_MINUTES,
        long_session_minutes: int = DEFAULT_LONG_SESSION_MINUTES,
    ):
        self.bookings: tuple[Booking, ...] = tuple(bookings_from_records(existing_slots))
        self.labels = labels or ReferenceLabels()
        self.short_session_minutes = short_session_minutes
        self.long_session_minutes = long_session_minutes

    # ------------------------------------------------------------------ scope

    def _relevant(self, candidate: Booking, excluded_ids: set[str]) -> list[Booking]:
        return [
            booking
            for booking in self.bookings
            if booking.id not in excluded_ids
            and booking.day_of_week == candidate.day_of_week
            and booking.same_scope(candidate.academic_year, candidate.semester)
        ]

    # --------------------------------------------------------------- pairwise

    def _pair_conflicts(
        self,
        candidate: Booking,
        existing: Booking,
        *,
        course_ids: frozenset[str] | None = None,
        prefix: str = "",
        track_existing: bool = True,
    ) -> list[ConflictDetail]:
        if not candidate.interval.overlaps(existing.interval):
            return []

        exempt = exempt_conflict_types(candidate, existing)
        affected = [existing.id] if track_existing else []
        context = describe_context(existing)
        window = f"from {existing.start_time} to {existing.end_time}"
        existing_course = self.labels.course_code(existing.course_id)
        conflicts: list[ConflictDetail] = []

        if (
            ConflictType.faculty not in exempt
            and candidate.faculty_id
            and candidate.faculty_id == existing.faculty_id
        ):
            faculty_name = self.labels.faculty_name(existing.faculty_id)
            conflicts.append(
                ConflictDetail(
                    type=ConflictType.faculty,
                    severity=ConflictSeverity.high,
                    description=f"{prefix}{faculty_name} is already scheduled for {context} ({existing_course}) {window}",
                    details=f"Faculty {faculty_name} cannot teach two classes at once",
                    affected_slots=affected,
                )
            )

        if ConflictType.room not in exempt and candidate.room_id and candidate.room_id == existing.room_id:
            room_name = self.labels.room_name(existing.room_id)
            conflicts.append(
                ConflictDetail(
                    type=ConflictType.room,
                    severity=ConflictSeverity.high,
                    description=f"{prefix}{room_name} is already booked for {context} ({existing_course}) {window}",
                    details=f"Room {room_name} cannot host two classes at once",
                    affected_slots=affected,
                )
            )

        if course_ids is None:
            course_ids = frozenset({candidate.course_id}) if candidate.course_id else frozenset()
        if (
            ConflictType.student_group not in exempt
            and course_ids
            and candidate.year_level is not None
            and candidate.year_level == existing.year_level
        ):
            conflicts.append(
                self._student_group_conflict(candidate, existing, course_ids, prefix=prefix, affected=affected)
            )

        return conflicts

    def _student_group_conflict(
        self,
        candidate: Booking,
        existing: Booking,
        course_ids: frozenset[str],
        *,
        prefix: str,
        affected: list[str],
    ) -> ConflictDetail:
        year = candidate.year_level
        window = f"from {existing.start_time} to {existing.end_time}"
        existing_course = self.labels.course_code(existing.course_id)
        candidate_courses = " and ".join(self.labels.course_code(course_id) for course_id in sorted(course_ids))
        # Only an existing split group leaves part of the cohort free.
        partial = is_partial_cohort(existing)

        if existing.course_id in course_ids:
            if candidate.group_type == GroupType.split and existing.group_type == GroupType.split:
                description = (
                    f"{prefix}Another split class session of {existing_course} already runs {window} "
                    f"for Year {year}; verify this is intentional"
                )
                severity = ConflictSeverity.warning
            else:
                description = f"{prefix}Year {year} students already have {existing_course} scheduled {window}"
                severity = ConflictSeverity.high
        else:
            severity = ConflictSeverity.warning if partial else ConflictSeverity.high
            if partial:
                description = (
                    f"{prefix}Some Year {year} students may be unavailable - "
                    f"{describe_context(existing)} of {existing_course} runs {window}"
                )
            else:
                description = (
                    f"{prefix}Year {year} students are unavailable - they have {existing_course} scheduled {window}"
                )
        return ConflictDetail(
            type=ConflictType.student_group,
            severity=severity,
            description=description,
            details=f"Year {year} courses overlap {window}: {candidate_courses} and {existing_course}",
            affected_slots=affected,
        )

    def _duration_advisories(self, candidate: Booking, prefix: str = "") -> list[ConflictDetail]:
        minutes = candidate.interval.duration
        if minutes < self.short_session_minutes:
            message = f"{prefix}Class duration is less than {self.short_session_minutes} minutes. Is this intentional?"
        elif minutes > self.long_session_minutes:
            message = (
                f"{prefix}Class duration is more than {self.long_session_minutes // 60} hours. "
                "Consider splitting into multiple sessions."
            )
        else:
            return []
        return [
            ConflictDetail(
                type=ConflictType.time,
                severity=ConflictSeverity.warning,
                description=message,
                details=f"Duration {minutes} minutes",
            )
        ]

    def _suggestions(self, candidate: Booking, relevant: Sequence[Booking], conflicts: Sequence[ConflictDetail]) -> list[str]:
        suggestions: list[str] = []
        types = {conflict.type for conflict in conflicts}
        if ConflictType.room in types or ConflictType.faculty in types:
            clashing = [booking.interval.end for booking in relevant if booking.interval.overlaps(candidate.interval)]
            if clashing:
                suggestions.append(f"Try scheduling after {format_minutes(max(clashing))}")
        if ConflictType.room in types:
            suggestions.append("Consider using a different room")
        if ConflictType.faculty in types:
            suggestions.append("Consider assigning a different faculty member or scheduling at a different time")
        if ConflictType.student_group in types:
            suggestions.append(f"Year {candidate.year_level} students cannot attend two classes at the same time")
        return suggestions

    # ------------------------------------------------------------ entry points

    def check_time_slot(self, draft: TimeSlotDraft, exclude_id: str | None = None) -> ConflictCheckResult:
        candidate = booking_from_draft(draft)
        if candidate is None:
            return empty_result()

        excluded = {item for item in (exclude_id, draft.id) if item}
        relevant = self._relevant(candidate, excluded)
        conflicts: list[ConflictDetail] = []
        for existing in relevant:
            conflicts.extend(self._pair_conflicts(candidate, existing))
        conflicts.extend(self._duration_advisories(candidate))
        return build_check_result(conflicts, self._suggestions(candidate, relevant, conflicts))

    def check_joint_session(self, draft: JointSessionDraft) -> ConflictCheckResult:
        semester = normalize_semester(draft.semester)
        interval = TimeInterval.parse(draft.start_time, draft.end_time)
        if interval is None or semester is None or not draft.academic_year or not is_valid_day(draft.day_of_week):
            return empty_result()

        # The session occupies its room and faculty once, whatever the number of courses.
        session = Booking(
            id=CANDIDATE_ID,
            course_id=None,
            faculty_id=draft.faculty_id,
            room_id=draft.room_id,
            department_id=draft.department_id,
            day_of_week=draft.day_of_week,
            interval=interval,
            year_level=draft.year_level,
            academic_year=draft.academic_year,
            semester=semester,
            group_id=draft.group_id,
            group_type=GroupType.joint,
        )
        siblings = {
            booking.id
            for booking in self.bookings
            if draft.group_id and booking.group_id == draft.group_id and booking.group_type == GroupType.joint
        }
        relevant = self._relevant(session, siblings)
        course_ids = frozenset(draft.course_ids)

        conflicts: list[ConflictDetail] = []
        for existing in relevant:
            conflicts.extend(self._pair_conflicts(session, existing, course_ids=course_ids))
        conflicts.extend(self._joint_compatibility(draft))
        conflicts.extend(self._duration_advisories(session))

        suggestions = self._suggestions(session, relevant, conflicts)
        if any(conflict.type == ConflictType.student_group for conflict in conflicts):
            suggestions.append("Ensure all courses in the joint session have available students")
        return build_check_result(conflicts, suggestions)

    def _joint_compatibility(self, draft: JointSessionDraft) -> list[ConflictDetail]:
        conflicts = []
        year_levels = {self.labels.course_year_level(course_id) for course_id in draft.course_ids} - {None}
        if len(year_levels) > 1:
            conflicts.append(
                ConflictDetail(
                    type=ConflictType.student_group,
                    severity=ConflictSeverity.high,
                    description="All courses in a joint session must be for the same year level",
                    details=f"Year levels found: {', '.join(str(level) for level in sorted(year_levels))}",
                )
            )
        departments = {self.labels.course_department(course_id) for course_id in draft.course_ids} - {None}
        if len(departments) > 1:
            conflicts.append(
                ConflictDetail(
                    type=ConflictType.student_group,
                    severity=ConflictSeverity.warning,
                    description="Joint session includes courses from different departments. Verify compatibility.",
                    details=f"{len(departments)} departments involved",
                )
            )
        return conflicts

    def check_split_class(self, draft: SplitClassDraft) -> ConflictCheckResult:
        semester = normalize_semester(draft.semester)
        if semester is None or not draft.academic_year or not is_valid_day(draft.day_of_week):
            return empty_result()

        group_id = draft.group_id or PENDING_SPLIT_GROUP_ID
        groups: list[tuple[str, Booking]] = []
        for index, group in enumerate(draft.groups, start=1):
            interval = TimeInterval.parse(group.start_time or draft.start_time, group.end_time or draft.end_time)
            if interval is None:
                logger.debug("Split group %s has no usable time window; skipped", group.name)
                continue
            groups.append(
                (
                    group.name,
                    Booking(
                        id=f"{CANDIDATE_ID}-{index}",
                        course_id=draft.course_id,
                        faculty_id=group.faculty_id or draft.faculty_id,
                        room_id=group.room_id or draft.room_id,
                        department_id=draft.department_id,
                        day_of_week=draft.day_of_week,
                        interval=interval,
                        year_level=draft.year_level,
                        academic_year=draft.academic_year,
                        semester=semester,
                        group_id=group_id,
                        group_type=GroupType.split,
                        group_name=group.name,
                        max_students=group.max_students,
                    ),
                )
            )
        if not groups:
            return empty_result()

        siblings = {
            booking.id
            for booking in self.bookings
            if draft.group_id and booking.group_id == draft.group_id and booking.group_type == GroupType.split
        }
        conflicts: list[ConflictDetail] = []
        suggestions: list[str] = []
        for name, booking in groups:
            relevant = self._relevant(booking, siblings)
            group_conflicts: list[ConflictDetail] = []
            for existing in relevant:
                group_conflicts.extend(self._pair_conflicts(booking, existing, prefix=f"{name}: "))
            group_conflicts.extend(self._duration_advisories(booking, prefix=f"{name}: "))
            suggestions.extend(self._suggestions(booking, relevant, group_conflicts))
            conflicts.extend(group_conflicts)

        for position, (name, booking) in enumerate(groups):
            for other_name, other in groups[position + 1:]:
                for conflict in self._pair_conflicts(booking, other, track_existing=False):
                    conflicts.append(
                        conflict.model_copy(
                            update={
                                "description": f"{name} and {other_name} overlap: {conflict.description}",
                            }
                        )
                    )

        suggestions.append("Verify that each split group has unique resources or non-overlapping times")
        return build_check_result(conflicts, suggestions)

    def check_batch(
        self,
        intended: Sequence[TimeSlotDraft],
        remove_ids: Iterable[str] = (),
    ) -> ConflictCheckResult:
        """Classify a whole set of intended writes before any of them is committed."""
        candidates: list[Booking] = []
        for index, draft in enumerate(intended, start=1):
            booking = booking_from_draft(draft)
            if booking is None:
                continue
            if not draft.id:
                booking = replace(booking, id=f"{CANDIDATE_ID}-{index}")
            candidates.append(booking)
        if not candidates:
            return empty_result()

        excluded = set(remove_ids) | {candidate.id for candidate in candidates}
        label_for = {candidate.id: f"Slot {index}: " for index, candidate in enumerate(candidates, start=1)}
        multiple = len(candidates) > 1

        conflicts: list[ConflictDetail] = []
        suggestions: list[str] = []
        for position, candidate in enumerate(candidates):
            prefix = label_for[candidate.id] if multiple else ""
            relevant = self._relevant(candidate, excluded)
            slot_conflicts: list[ConflictDetail] = []
            for existing in relevant:
                slot_conflicts.extend(self._pair_conflicts(candidate, existing, prefix=prefix))
            for earlier in candidates[:position]:
                if earlier.day_of_week != candidate.day_of_week or not earlier.same_scope(
                    candidate.academic_year, candidate.semester
                ):
                    continue
                slot_conflicts.extend(
                    self._pair_conflicts(
                        candidate,
                        earlier,
                        prefix=f"{prefix}conflicts with {label_for[earlier.id].rstrip(': ')}: ",
                        track_existing=False,
                    )
                )
            slot_conflicts.extend(self._duration_advisories(candidate, prefix=prefix))
            suggestions.extend(self._suggestions(candidate, relevant, slot_conflicts))
            conflicts.extend(slot_conflicts)
        return build_check_result(conflicts, suggestions)


def _detector(
    existing: Iterable[TimeSlotRecord],
    faculty: Iterable[FacultyRef],
    rooms: Iterable[RoomRef],
    courses: Iterable[CourseRef],
) -> ConflictDetector:
    return ConflictDetector(existing, ReferenceLabels(faculty=faculty, rooms=rooms, courses=courses))


def check_time_slot_conflicts(
    candidate: TimeSlotDraft,
    existing: Iterable[TimeSlotRecord],
    exclude_id: str | None = None,
    faculty: Iterable[FacultyRef] = (),
    rooms: Iterable[RoomRef] = (),
    courses: Iterable[CourseRef] = (),
) -> ConflictCheckResult:
    return _detector(existing, faculty, rooms, courses).check_time_slot(candidate, exclude_id)


def check_joint_session_conflicts(
    candidate: JointSessionDraft,
    existing: Iterable[TimeSlotRecord],
    faculty: Iterable[FacultyRef] = (),
    rooms: Iterable[RoomRef] = (),
    courses: Iterable[CourseRef] = (),
) -> ConflictCheckResult:
    return _detector(existing, faculty, rooms, courses).check_joint_session(candidate)


def check_split_class_conflicts(
    candidate: SplitClassDraft,
    existing: Iterable[TimeSlotRecord],
    faculty: Iterable[FacultyRef] = (),
    rooms: Iterable[RoomRef] = (),
    courses: Iterable[CourseRef] = (),
) -> ConflictCheckResult:
    return _detector(existing, faculty, rooms, courses).check_split_class(candidate)
