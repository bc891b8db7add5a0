from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.api.deps import get_db
from app.core.config import Settings, get_settings
from app.schemas.availability import AvailableWindow
from app.services.availability import find_available_slots
from app.services.slot_snapshot import load_slot_snapshot

router = APIRouter()


@router.get("/", response_model=list[AvailableWindow])
def list_available_windows(
    day: int = Query(ge=1, le=7),
    academic_year: str = Query(alias="academicYear", min_length=1, max_length=20),
    semester: int = Query(ge=1, le=2),
    year_level: int | None = Query(default=None, alias="yearLevel", ge=1),
    min_duration: int | None = Query(default=None, alias="minDuration", ge=1, le=24 * 60),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> list[AvailableWindow]:
    snapshot = load_slot_snapshot(db, academic_year=academic_year, semester=semester)
    return find_available_slots(
        day,
        snapshot,
        academic_year,
        semester,
        year_level,
        min_duration=min_duration or settings.min_available_minutes,
        working_hours=(settings.day_start_time, settings.day_end_time),
    )
