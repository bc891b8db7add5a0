from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.api.deps import get_db, get_detector, get_labels
from app.models.conflict import ConflictRecord, ConflictSeverity
from app.schemas.conflict import (
    BatchCheckRequest,
    ConflictCheckResult,
    ConflictRecordOut,
    RecomputeRequest,
    RecomputeResponse,
    ResolveConflictRequest,
    TimeSlotCheckRequest,
)
from app.schemas.time_slot import JointSessionDraft, SplitClassDraft
from app.services.conflict_recompute import recompute_conflicts, replace_conflict_records, resolve_conflict_record
from app.services.conflict_service import ConflictDetector
from app.services.reference_labels import ReferenceLabels
from app.services.slot_snapshot import load_slot_snapshot

router = APIRouter()


@router.post("/check", response_model=ConflictCheckResult)
def check_time_slot(
    payload: TimeSlotCheckRequest,
    detector: ConflictDetector = Depends(get_detector),
) -> ConflictCheckResult:
    return detector.check_time_slot(payload.slot, payload.exclude_id)


@router.post("/check-joint", response_model=ConflictCheckResult)
def check_joint_session(
    payload: JointSessionDraft,
    detector: ConflictDetector = Depends(get_detector),
) -> ConflictCheckResult:
    return detector.check_joint_session(payload)


@router.post("/check-split", response_model=ConflictCheckResult)
def check_split_class(
    payload: SplitClassDraft,
    detector: ConflictDetector = Depends(get_detector),
) -> ConflictCheckResult:
    return detector.check_split_class(payload)


@router.post("/check-batch", response_model=ConflictCheckResult)
def check_batch(
    payload: BatchCheckRequest,
    detector: ConflictDetector = Depends(get_detector),
) -> ConflictCheckResult:
    return detector.check_batch(payload.slots, payload.remove_ids)


@router.post("/recompute", response_model=RecomputeResponse)
def recompute(
    payload: RecomputeRequest,
    db: Session = Depends(get_db),
    labels: ReferenceLabels = Depends(get_labels),
) -> RecomputeResponse:
    snapshot = load_slot_snapshot(db, academic_year=payload.academic_year, semester=payload.semester)
    conflicts = recompute_conflicts(
        snapshot,
        labels,
        academic_year=payload.academic_year,
        semester=payload.semester,
    )
    records = replace_conflict_records(
        db,
        academic_year=payload.academic_year,
        semester=payload.semester,
        conflicts=conflicts,
    )
    db.commit()
    for record in records:
        db.refresh(record)
    return RecomputeResponse(
        academic_year=payload.academic_year,
        semester=payload.semester,
        total=len(records),
        blocking=sum(1 for record in records if record.severity == ConflictSeverity.high),
        conflicts=[ConflictRecordOut.model_validate(record) for record in records],
    )


@router.get("/", response_model=list[ConflictRecordOut])
def list_conflicts(
    academic_year: str | None = Query(default=None, alias="academicYear"),
    semester: int | None = Query(default=None, ge=1, le=2),
    include_resolved: bool = Query(default=True, alias="includeResolved"),
    db: Session = Depends(get_db),
) -> list[ConflictRecordOut]:
    query = select(ConflictRecord).order_by(ConflictRecord.created_at, ConflictRecord.id)
    if academic_year is not None:
        query = query.where(ConflictRecord.academic_year == academic_year)
    if semester is not None:
        query = query.where(ConflictRecord.semester == semester)
    if not include_resolved:
        query = query.where(ConflictRecord.resolved.is_(False))
    return list(db.execute(query).scalars())


@router.put("/{conflict_id}/resolve", response_model=ConflictRecordOut)
def resolve_conflict(
    conflict_id: str,
    payload: ResolveConflictRequest,
    db: Session = Depends(get_db),
) -> ConflictRecordOut:
    record = db.get(ConflictRecord, conflict_id)
    if record is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Conflict not found")
    resolve_conflict_record(db, record, resolved_by=payload.resolved_by, notes=payload.resolution_notes)
    db.commit()
    db.refresh(record)
    return record
