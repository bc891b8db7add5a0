import uuid
from datetime import datetime
from enum import Enum

from sqlalchemy import Boolean, DateTime, Enum as SAEnum, Integer, JSON, String, Text
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from app.db.base import Base


class ConflictType(str, Enum):
    room = "room"
    faculty = "faculty"
    student_group = "student_group"
    time = "time"
    capacity = "capacity"


class ConflictSeverity(str, Enum):
    high = "high"
    warning = "warning"


class ConflictRecord(Base):
    __tablename__ = "conflicts"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    academic_year: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    semester: Mapped[int] = mapped_column(Integer, nullable=False)
    type: Mapped[ConflictType] = mapped_column(SAEnum(ConflictType, name="conflict_type"), nullable=False)
    severity: Mapped[ConflictSeverity] = mapped_column(
        SAEnum(ConflictSeverity, name="conflict_severity"),
        nullable=False,
        default=ConflictSeverity.high,
    )
    description: Mapped[str] = mapped_column(Text, nullable=False)
    details: Mapped[str] = mapped_column(Text, nullable=False, default="")
    affected_slots: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    resolved: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    resolved_by: Mapped[str | None] = mapped_column(String(36), nullable=True)
    resolved_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    resolution_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
