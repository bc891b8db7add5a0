"""Rules for intentional sharing between bookings.

Joint sessions put several courses in one room with one faculty member at one
time; split classes run parallel groups of one course. Both are recognised
pairwise by a shared group id, so a member of a joint session still collides
normally with anything outside its own group.
"""

from __future__ import annotations

from typing import Protocol

from app.models.conflict import ConflictType
from app.models.time_slot import GroupType

JOINT_EXEMPTIONS = frozenset({ConflictType.room, ConflictType.faculty, ConflictType.student_group})
SPLIT_EXEMPTIONS = frozenset({ConflictType.student_group})
NO_EXEMPTIONS: frozenset[ConflictType] = frozenset()


class Grouped(Protocol):
    group_id: str | None
    group_type: GroupType | None


def _same_group(first: Grouped, second: Grouped, group_type: GroupType) -> bool:
    return (
        first.group_type == group_type
        and second.group_type == group_type
        and bool(first.group_id)
        and first.group_id == second.group_id
    )


def are_in_joint_session(first: Grouped, second: Grouped) -> bool:
    return _same_group(first, second, GroupType.joint)


def are_in_split_group(first: Grouped, second: Grouped) -> bool:
    return _same_group(first, second, GroupType.split)


def exempt_conflict_types(first: Grouped, second: Grouped) -> frozenset[ConflictType]:
    if are_in_joint_session(first, second):
        return JOINT_EXEMPTIONS
    if are_in_split_group(first, second):
        # Split siblings must still use different rooms and faculty time.
        return SPLIT_EXEMPTIONS
    return NO_EXEMPTIONS


def is_exempt(first: Grouped, second: Grouped, conflict_type: ConflictType) -> bool:
    return conflict_type in exempt_conflict_types(first, second)


def is_partial_cohort(slot: Grouped) -> bool:
    """A split group only occupies part of its year level."""
    return slot.group_type == GroupType.split


def describe_context(slot: Grouped) -> str:
    if slot.group_type == GroupType.joint:
        return "a joint session"
    if slot.group_type == GroupType.split:
        return "a split class"
    return "a regular class"
