from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.models.time_slot import TimeSlot
from app.schemas.time_slot import TimeSlotRecord


def load_slot_snapshot(
    db: Session,
    *,
    academic_year: str | None = None,
    semester: int | None = None,
) -> list[TimeSlotRecord]:
    """Read the active slots once so every check in a request sees the same state."""
    query = select(TimeSlot).where(TimeSlot.is_active.is_(True))
    if academic_year is not None:
        query = query.where(TimeSlot.academic_year == academic_year)
    if semester is not None:
        query = query.where(TimeSlot.semester == semester)
    query = query.order_by(TimeSlot.day_of_week, TimeSlot.start_time, TimeSlot.id)
    return [TimeSlotRecord.model_validate(slot) for slot in db.execute(query).scalars()]
