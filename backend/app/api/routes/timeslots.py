import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.api.deps import build_detector, get_db, get_labels
from app.core.config import Settings, get_settings
from app.core.exceptions import SchedulingBlockedError
from app.models.time_slot import GroupType, TimeSlot
from app.schemas.conflict import ConflictCheckResult
from app.schemas.time_slot import (
    TimeSlotBatchOut,
    TimeSlotBatchRequest,
    TimeSlotCreate,
    TimeSlotDraft,
    TimeSlotOut,
)
from app.services.conflict_recompute import (
    invalidate_conflicts_for_slot,
    recompute_conflicts,
    replace_conflict_records,
)
from app.services.group_ids import allocate_group_id
from app.services.reference_labels import ReferenceLabels
from app.services.slot_snapshot import load_slot_snapshot

logger = logging.getLogger(__name__)

router = APIRouter()


def _ensure_can_proceed(result: ConflictCheckResult, action: str) -> None:
    if result.can_proceed:
        return
    logger.info("Blocked %s: %s", action, result.summary)
    raise SchedulingBlockedError(
        f"Cannot {action}: {result.summary}",
        details=result.model_dump(by_alias=True, mode="json"),
    )


@router.get("/", response_model=list[TimeSlotOut])
def list_time_slots(
    academic_year: str | None = Query(default=None, alias="academicYear"),
    semester: int | None = Query(default=None, ge=1, le=2),
    day: int | None = Query(default=None, ge=1, le=7),
    db: Session = Depends(get_db),
) -> list[TimeSlotOut]:
    query = select(TimeSlot).where(TimeSlot.is_active.is_(True))
    if academic_year is not None:
        query = query.where(TimeSlot.academic_year == academic_year)
    if semester is not None:
        query = query.where(TimeSlot.semester == semester)
    if day is not None:
        query = query.where(TimeSlot.day_of_week == day)
    query = query.order_by(TimeSlot.day_of_week, TimeSlot.start_time)
    return list(db.execute(query).scalars())


@router.post("/", response_model=TimeSlotOut, status_code=status.HTTP_201_CREATED)
def create_time_slot(
    payload: TimeSlotCreate,
    db: Session = Depends(get_db),
    labels: ReferenceLabels = Depends(get_labels),
    settings: Settings = Depends(get_settings),
) -> TimeSlotOut:
    detector = build_detector(db, labels, settings)
    result = detector.check_time_slot(TimeSlotDraft(**payload.model_dump()))
    _ensure_can_proceed(result, "create time slot")

    slot = TimeSlot(**payload.model_dump())
    db.add(slot)
    db.commit()
    db.refresh(slot)
    return slot


@router.put("/{slot_id}", response_model=TimeSlotOut)
def update_time_slot(
    slot_id: str,
    payload: TimeSlotCreate,
    db: Session = Depends(get_db),
    labels: ReferenceLabels = Depends(get_labels),
    settings: Settings = Depends(get_settings),
) -> TimeSlotOut:
    slot = db.get(TimeSlot, slot_id)
    if slot is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Time slot not found")

    detector = build_detector(db, labels, settings)
    result = detector.check_time_slot(TimeSlotDraft(id=slot_id, **payload.model_dump()), exclude_id=slot_id)
    _ensure_can_proceed(result, "update time slot")

    for key, value in payload.model_dump().items():
        setattr(slot, key, value)
    invalidate_conflicts_for_slot(db, slot_id)
    db.commit()
    db.refresh(slot)
    return slot


@router.delete("/{slot_id}")
def delete_time_slot(slot_id: str, db: Session = Depends(get_db)) -> dict:
    slot = db.get(TimeSlot, slot_id)
    if slot is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Time slot not found")
    invalidate_conflicts_for_slot(db, slot_id)
    db.delete(slot)
    db.commit()
    return {"success": True}


@router.post("/batch", response_model=TimeSlotBatchOut, status_code=status.HTTP_201_CREATED)
def apply_time_slot_batch(
    payload: TimeSlotBatchRequest,
    db: Session = Depends(get_db),
    labels: ReferenceLabels = Depends(get_labels),
    settings: Settings = Depends(get_settings),
) -> TimeSlotBatchOut:
    """Create a joint session, a split class or any bulk change in one transaction."""
    rows = [item.model_dump() for item in payload.slots]
    group_id = None
    if payload.group_type in {GroupType.joint, GroupType.split}:
        existing_group_ids = db.execute(select(TimeSlot.group_id).distinct()).scalars()
        group_id = allocate_group_id(
            payload.group_type,
            existing_group_ids,
            max_attempts=settings.group_id_max_attempts,
        )
        for row in rows:
            row["group_id"] = group_id
            row["group_type"] = payload.group_type

    missing = [slot_id for slot_id in payload.remove_ids if db.get(TimeSlot, slot_id) is None]
    if missing:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Time slot(s) not found: {', '.join(missing)}",
        )

    detector = build_detector(db, labels, settings)
    result = detector.check_batch([TimeSlotDraft(**row) for row in rows], payload.remove_ids)
    _ensure_can_proceed(result, "apply time slot batch")

    scopes = {(row["academic_year"], row["semester"]) for row in rows}
    for slot_id in payload.remove_ids:
        slot = db.get(TimeSlot, slot_id)
        scopes.add((slot.academic_year, slot.semester))
        invalidate_conflicts_for_slot(db, slot_id)
        db.delete(slot)
    created = [TimeSlot(**row) for row in rows]
    db.add_all(created)
    db.flush()

    # Bulk writes refresh the persisted conflict set of every touched semester.
    for academic_year, semester in sorted(scopes):
        snapshot = load_slot_snapshot(db, academic_year=academic_year, semester=semester)
        conflicts = recompute_conflicts(snapshot, labels, academic_year=academic_year, semester=semester)
        replace_conflict_records(db, academic_year=academic_year, semester=semester, conflicts=conflicts)
    db.commit()
    for slot in created:
        db.refresh(slot)
    return TimeSlotBatchOut(
        slots=[TimeSlotOut.model_validate(slot) for slot in created],
        removed_ids=list(payload.remove_ids),
        group_id=group_id,
    )
