from __future__ import annotations

from pydantic import BaseModel, Field, field_validator, model_validator

from app.models.time_slot import GroupType, LessonType
from app.services.time_intervals import format_minutes, parse_time_to_minutes


class TimeSlotRecord(BaseModel):
    """One booked slot as seen by the conflict engine.

    Times are kept as plain strings so that a malformed row in storage is
    skipped by the engine instead of failing the whole snapshot.
    """

    id: str = Field(min_length=1, max_length=36)
    course_id: str = Field(alias="courseId")
    faculty_id: str = Field(alias="facultyId")
    room_id: str = Field(alias="roomId")
    department_id: str | None = Field(default=None, alias="departmentId")
    day_of_week: int = Field(alias="dayOfWeek")
    start_time: str = Field(alias="startTime")
    end_time: str = Field(alias="endTime")
    year_level: int = Field(default=1, alias="yearLevel")
    academic_year: str = Field(alias="academicYear")
    semester: int
    type: LessonType = LessonType.lecture
    group_id: str | None = Field(default=None, alias="groupId")
    group_type: GroupType | None = Field(default=None, alias="groupType")
    group_name: str | None = Field(default=None, alias="groupName")
    max_students: int | None = Field(default=None, alias="maxStudents")

    model_config = {
        "populate_by_name": True,
        "from_attributes": True,
    }


class TimeSlotDraft(BaseModel):
    """A single slot from a create/edit form; any field may still be missing."""

    id: str | None = None
    course_id: str | None = Field(default=None, alias="courseId")
    faculty_id: str | None = Field(default=None, alias="facultyId")
    room_id: str | None = Field(default=None, alias="roomId")
    department_id: str | None = Field(default=None, alias="departmentId")
    day_of_week: int | None = Field(default=None, alias="dayOfWeek")
    start_time: str | None = Field(default=None, alias="startTime")
    end_time: str | None = Field(default=None, alias="endTime")
    year_level: int | None = Field(default=None, alias="yearLevel")
    academic_year: str | None = Field(default=None, alias="academicYear")
    semester: int | str | None = None
    type: LessonType = LessonType.lecture
    group_id: str | None = Field(default=None, alias="groupId")
    group_type: GroupType | None = Field(default=None, alias="groupType")
    group_name: str | None = Field(default=None, alias="groupName")
    max_students: int | None = Field(default=None, alias="maxStudents", ge=1)

    model_config = {
        "populate_by_name": True,
        "from_attributes": True,
    }


class JointSessionDraft(BaseModel):
    """Several courses taught together by one faculty member in one room."""

    group_id: str | None = Field(default=None, alias="groupId")
    course_ids: list[str] = Field(alias="courseIds", min_length=2, max_length=20)
    faculty_id: str = Field(alias="facultyId", min_length=1)
    room_id: str = Field(alias="roomId", min_length=1)
    department_id: str | None = Field(default=None, alias="departmentId")
    day_of_week: int | None = Field(default=None, alias="dayOfWeek")
    start_time: str | None = Field(default=None, alias="startTime")
    end_time: str | None = Field(default=None, alias="endTime")
    year_level: int | None = Field(default=None, alias="yearLevel")
    academic_year: str | None = Field(default=None, alias="academicYear")
    semester: int | str | None = None
    type: LessonType = LessonType.lecture

    model_config = {"populate_by_name": True}

    @field_validator("course_ids")
    @classmethod
    def validate_distinct_courses(cls, value: list[str]) -> list[str]:
        cleaned = [item.strip() for item in value if item.strip()]
        if len(set(cleaned)) != len(cleaned):
            raise ValueError("Joint session courses must be distinct")
        if len(cleaned) < 2:
            raise ValueError("Joint sessions require at least 2 courses")
        return cleaned


class SplitGroupDraft(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    faculty_id: str | None = Field(default=None, alias="facultyId")
    room_id: str | None = Field(default=None, alias="roomId")
    start_time: str | None = Field(default=None, alias="startTime")
    end_time: str | None = Field(default=None, alias="endTime")
    max_students: int | None = Field(default=None, alias="maxStudents", ge=1)

    model_config = {"populate_by_name": True}


class SplitClassDraft(BaseModel):
    """One course divided into parallel groups; groups override the base values."""

    group_id: str | None = Field(default=None, alias="groupId")
    course_id: str = Field(alias="courseId", min_length=1)
    faculty_id: str | None = Field(default=None, alias="facultyId")
    room_id: str | None = Field(default=None, alias="roomId")
    department_id: str | None = Field(default=None, alias="departmentId")
    day_of_week: int | None = Field(default=None, alias="dayOfWeek")
    start_time: str | None = Field(default=None, alias="startTime")
    end_time: str | None = Field(default=None, alias="endTime")
    year_level: int | None = Field(default=None, alias="yearLevel")
    academic_year: str | None = Field(default=None, alias="academicYear")
    semester: int | str | None = None
    type: LessonType = LessonType.lecture
    groups: list[SplitGroupDraft] = Field(min_length=2, max_length=20)

    model_config = {"populate_by_name": True}

    @model_validator(mode="after")
    def validate_groups(self) -> "SplitClassDraft":
        names = [group.name.strip() for group in self.groups]
        if len(set(names)) != len(names):
            raise ValueError("Split group names must be unique")
        for group in self.groups:
            if not (group.room_id or self.room_id):
                raise ValueError(f"{group.name}: each split group requires a room")
        return self


class TimeSlotCreate(BaseModel):
    course_id: str = Field(alias="courseId", min_length=1, max_length=36)
    faculty_id: str = Field(alias="facultyId", min_length=1, max_length=36)
    room_id: str = Field(alias="roomId", min_length=1, max_length=36)
    department_id: str | None = Field(default=None, alias="departmentId", max_length=36)
    day_of_week: int = Field(alias="dayOfWeek", ge=1, le=7)
    start_time: str = Field(alias="startTime")
    end_time: str = Field(alias="endTime")
    year_level: int = Field(alias="yearLevel", ge=1, le=10)
    academic_year: str = Field(alias="academicYear", min_length=1, max_length=20)
    semester: int = Field(ge=1, le=2)
    type: LessonType = LessonType.lecture
    group_id: str | None = Field(default=None, alias="groupId", max_length=64)
    group_type: GroupType | None = Field(default=None, alias="groupType")
    group_name: str | None = Field(default=None, alias="groupName", max_length=100)
    max_students: int | None = Field(default=None, alias="maxStudents", ge=1, le=2000)

    model_config = {"populate_by_name": True}

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_time_format(cls, value: str) -> str:
        minutes = parse_time_to_minutes(value)
        if minutes is None:
            raise ValueError("Time must be in HH:MM 24-hour format")
        return format_minutes(minutes)

    @model_validator(mode="after")
    def validate_time_order(self) -> "TimeSlotCreate":
        if parse_time_to_minutes(self.end_time) <= parse_time_to_minutes(self.start_time):
            raise ValueError("End time must be after start time")
        if self.group_type in {GroupType.joint, GroupType.split} and not self.group_id:
            raise ValueError("Joint and split slots require a groupId")
        return self


class TimeSlotOut(TimeSlotRecord):
    is_active: bool = Field(default=True, alias="isActive")


class TimeSlotBatchRequest(BaseModel):
    """Slots to write together; `group_type` on the request assigns a fresh group id."""

    slots: list[TimeSlotCreate] = Field(min_length=1, max_length=200)
    remove_ids: list[str] = Field(default_factory=list, alias="removeIds")
    group_type: GroupType | None = Field(default=None, alias="groupType")

    model_config = {"populate_by_name": True}


class TimeSlotBatchOut(BaseModel):
    slots: list[TimeSlotOut]
    removed_ids: list[str] = Field(alias="removedIds")
    group_id: str | None = Field(default=None, alias="groupId")

    model_config = {"populate_by_name": True}
