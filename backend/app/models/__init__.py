from app.models.conflict import ConflictRecord, ConflictSeverity, ConflictType  # noqa: F401
from app.models.course import Course  # noqa: F401
from app.models.faculty import Faculty  # noqa: F401
from app.models.room import Room  # noqa: F401
from app.models.time_slot import GroupType, LessonType, TimeSlot  # noqa: F401
