import uuid
from datetime import datetime
from enum import Enum

from sqlalchemy import Boolean, DateTime, Enum as SAEnum, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from app.db.base import Base


class GroupType(str, Enum):
    regular = "regular"
    joint = "joint"
    split = "split"


class LessonType(str, Enum):
    lecture = "lecture"
    tutorial = "tutorial"
    lab = "lab"
    workshop = "workshop"
    exam = "exam"
    seminar = "seminar"
    meeting = "meeting"
    other = "other"


class TimeSlot(Base):
    __tablename__ = "time_slots"
    __table_args__ = (Index("ix_time_slots_scope", "academic_year", "semester", "day_of_week"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    course_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    faculty_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    room_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    department_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
    day_of_week: Mapped[int] = mapped_column(Integer, nullable=False)
    start_time: Mapped[str] = mapped_column(String(5), nullable=False)
    end_time: Mapped[str] = mapped_column(String(5), nullable=False)
    year_level: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    academic_year: Mapped[str] = mapped_column(String(20), nullable=False)
    semester: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    type: Mapped[LessonType] = mapped_column(
        SAEnum(LessonType, name="lesson_type"),
        nullable=False,
        default=LessonType.lecture,
    )
    group_id: Mapped[str | None] = mapped_column(String(64), nullable=True, index=True)
    group_type: Mapped[GroupType | None] = mapped_column(SAEnum(GroupType, name="group_type"), nullable=True)
    group_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    max_students: Mapped[int | None] = mapped_column(Integer, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), onupdate=func.now())
