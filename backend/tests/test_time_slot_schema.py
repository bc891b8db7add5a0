import pytest
from pydantic import ValidationError

from app.schemas.time_slot import TimeSlotCreate


def payload(**overrides):
    values = {
        "courseId": "COMP101",
        "facultyId": "F1",
        "roomId": "CS-Lab-1",
        "dayOfWeek": 1,
        "startTime": "08:00",
        "endTime": "10:00",
        "yearLevel": 1,
        "academicYear": "2026-2027",
        "semester": 1,
    }
    values.update(overrides)
    return values


def test_times_are_normalized_with_the_engine_parser():
    slot = TimeSlotCreate.model_validate(payload(startTime="9:05", endTime="10:30"))

    assert (slot.start_time, slot.end_time) == ("09:05", "10:30")


@pytest.mark.parametrize("value", ["24:00", "9.00", "08:60", ""])
def test_malformed_times_are_rejected(value):
    with pytest.raises(ValidationError):
        TimeSlotCreate.model_validate(payload(startTime=value))


def test_grouped_slots_need_a_group_id():
    with pytest.raises(ValidationError):
        TimeSlotCreate.model_validate(payload(groupType="joint"))
