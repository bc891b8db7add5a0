from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Sequence

from app.models.conflict import ConflictSeverity, ConflictType
from app.schemas.conflict import ConflictCheckResult, ConflictDetail

TYPE_LABELS = {
    ConflictType.room: "room",
    ConflictType.faculty: "faculty",
    ConflictType.student_group: "student group",
    ConflictType.time: "duration",
    ConflictType.capacity: "capacity",
}


def is_blocking(conflict: ConflictDetail) -> bool:
    return conflict.severity == ConflictSeverity.high


def can_proceed(conflicts: Iterable[ConflictDetail]) -> bool:
    return not any(is_blocking(conflict) for conflict in conflicts)


def summarize(conflicts: Sequence[ConflictDetail]) -> str:
    if not conflicts:
        return "No conflicts detected."
    blocking = Counter(TYPE_LABELS[c.type] for c in conflicts if is_blocking(c))
    advisory = Counter(TYPE_LABELS[c.type] for c in conflicts if not is_blocking(c))
    parts = []
    if blocking:
        listed = ", ".join(f"{count} {label}" for label, count in sorted(blocking.items()))
        parts.append(f"Blocked by {listed} conflict(s).")
    if advisory:
        listed = ", ".join(f"{count} {label}" for label, count in sorted(advisory.items()))
        parts.append(f"{listed} warning(s); saving is allowed.")
    return " ".join(parts)


def dedupe_suggestions(suggestions: Iterable[str]) -> list[str]:
    return list(dict.fromkeys(item for item in suggestions if item))


def build_check_result(
    conflicts: Sequence[ConflictDetail],
    suggestions: Iterable[str] = (),
) -> ConflictCheckResult:
    return ConflictCheckResult(
        has_conflicts=bool(conflicts),
        conflicts=list(conflicts),
        can_proceed=can_proceed(conflicts),
        suggestions=dedupe_suggestions(suggestions),
        summary=summarize(conflicts),
    )


def empty_result() -> ConflictCheckResult:
    return build_check_result([])
