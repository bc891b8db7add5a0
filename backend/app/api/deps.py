from collections.abc import Generator

from fastapi import Depends
from sqlalchemy.orm import Session

from app.core.config import Settings, get_settings
from app.db.session import SessionLocal
from app.services.conflict_service import ConflictDetector
from app.services.reference_labels import ReferenceLabels, load_reference_labels
from app.services.slot_snapshot import load_slot_snapshot


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_labels(db: Session = Depends(get_db)) -> ReferenceLabels:
    return load_reference_labels(db)


def build_detector(db: Session, labels: ReferenceLabels, settings: Settings) -> ConflictDetector:
    return ConflictDetector(
        load_slot_snapshot(db),
        labels,
        short_session_minutes=settings.short_session_minutes,
        long_session_minutes=settings.long_session_minutes,
    )


def get_detector(
    db: Session = Depends(get_db),
    labels: ReferenceLabels = Depends(get_labels),
    settings: Settings = Depends(get_settings),
) -> ConflictDetector:
    return build_detector(db, labels, settings)
