from __future__ import annotations

from collections.abc import Iterable

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.models.course import Course
from app.models.faculty import Faculty
from app.models.room import Room
from app.schemas.reference import CourseRef, FacultyRef, RoomRef


class ReferenceLabels:
    """Display labels for ids found in slots; unknown ids never fail a check."""

    def __init__(
        self,
        faculty: Iterable[FacultyRef] = (),
        rooms: Iterable[RoomRef] = (),
        courses: Iterable[CourseRef] = (),
    ):
        self.faculty_map = {item.id: item for item in faculty}
        self.room_map = {item.id: item for item in rooms}
        self.course_map = {item.id: item for item in courses}

    def faculty_name(self, faculty_id: str | None) -> str:
        faculty = self.faculty_map.get(faculty_id or "")
        if faculty is None:
            return "Unknown faculty member"
        return f"{faculty.first_name} {faculty.last_name}".strip()

    def room_name(self, room_id: str | None) -> str:
        room = self.room_map.get(room_id or "")
        return room.name if room is not None else "Unknown room"

    def room_capacity(self, room_id: str | None) -> int | None:
        room = self.room_map.get(room_id or "")
        return room.capacity if room is not None else None

    def course_code(self, course_id: str | None) -> str:
        course = self.course_map.get(course_id or "")
        return course.code if course is not None else "Unknown course"

    def course_label(self, course_id: str | None) -> str:
        course = self.course_map.get(course_id or "")
        if course is None:
            return "Unknown course"
        return f"{course.code} ({course.name})"

    def course_year_level(self, course_id: str | None) -> int | None:
        course = self.course_map.get(course_id or "")
        return course.year_level if course is not None else None

    def course_department(self, course_id: str | None) -> str | None:
        course = self.course_map.get(course_id or "")
        return course.department_id if course is not None else None


def load_reference_labels(db: Session) -> ReferenceLabels:
    return ReferenceLabels(
        faculty=[FacultyRef.model_validate(item) for item in db.execute(select(Faculty)).scalars()],
        rooms=[RoomRef.model_validate(item) for item in db.execute(select(Room)).scalars()],
        courses=[CourseRef.model_validate(item) for item in db.execute(select(Course)).scalars()],
    )
