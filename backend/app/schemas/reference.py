from pydantic import BaseModel, Field


class FacultyRef(BaseModel):
    id: str
    first_name: str = Field(alias="firstName")
    last_name: str = Field(default="", alias="lastName")
    department_id: str | None = Field(default=None, alias="departmentId")

    model_config = {"populate_by_name": True, "from_attributes": True}


class RoomRef(BaseModel):
    id: str
    name: str
    capacity: int | None = None

    model_config = {"populate_by_name": True, "from_attributes": True}


class CourseRef(BaseModel):
    id: str
    code: str
    name: str
    year_level: int | None = Field(default=None, alias="yearLevel")
    department_id: str | None = Field(default=None, alias="departmentId")

    model_config = {"populate_by_name": True, "from_attributes": True}
