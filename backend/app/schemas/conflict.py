from datetime import datetime

from pydantic import BaseModel, Field

from app.models.conflict import ConflictSeverity, ConflictType
from app.schemas.time_slot import TimeSlotDraft


class ConflictDetail(BaseModel):
    type: ConflictType
    severity: ConflictSeverity
    description: str
    details: str = ""
    # Ids of the booked slots involved; the candidate itself is not listed.
    affected_slots: list[str] = Field(default_factory=list, alias="affectedSlots")

    model_config = {"populate_by_name": True}


class ConflictCheckResult(BaseModel):
    has_conflicts: bool = Field(alias="hasConflicts")
    conflicts: list[ConflictDetail] = Field(default_factory=list)
    can_proceed: bool = Field(alias="canProceed")
    suggestions: list[str] = Field(default_factory=list)
    summary: str = ""

    model_config = {"populate_by_name": True}


class TimeSlotCheckRequest(BaseModel):
    slot: TimeSlotDraft
    exclude_id: str | None = Field(default=None, alias="excludeId")

    model_config = {"populate_by_name": True}


class BatchCheckRequest(BaseModel):
    slots: list[TimeSlotDraft] = Field(min_length=1, max_length=200)
    remove_ids: list[str] = Field(default_factory=list, alias="removeIds")

    model_config = {"populate_by_name": True}


class RecomputeRequest(BaseModel):
    academic_year: str = Field(alias="academicYear", min_length=1, max_length=20)
    semester: int = Field(ge=1, le=2)

    model_config = {"populate_by_name": True}


class ResolveConflictRequest(BaseModel):
    resolved_by: str | None = Field(default=None, alias="resolvedBy", max_length=36)
    resolution_notes: str | None = Field(default=None, alias="resolutionNotes", max_length=5000)

    model_config = {"populate_by_name": True}


class ConflictRecordOut(BaseModel):
    id: str
    academic_year: str = Field(alias="academicYear")
    semester: int
    type: ConflictType
    severity: ConflictSeverity
    description: str
    details: str
    affected_slots: list[str] = Field(alias="affectedSlots")
    resolved: bool
    resolved_by: str | None = Field(default=None, alias="resolvedBy")
    resolved_at: datetime | None = Field(default=None, alias="resolvedAt")
    resolution_notes: str | None = Field(default=None, alias="resolutionNotes")
    created_at: datetime | None = Field(default=None, alias="createdAt")

    model_config = {"populate_by_name": True, "from_attributes": True}


class RecomputeResponse(BaseModel):
    academic_year: str = Field(alias="academicYear")
    semester: int
    total: int
    blocking: int
    conflicts: list[ConflictRecordOut]

    model_config = {"populate_by_name": True}
