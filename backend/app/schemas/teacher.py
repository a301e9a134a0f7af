from pydantic import BaseModel, Field


class TeacherOut(BaseModel):
    teacher_id: str
    teacher_name: str | None = None
    attendance: str | None = None

    model_config = {"from_attributes": True}


class AttendanceUpdate(BaseModel):
    teacher_id: str | None = Field(default=None, alias="teacherId")
    status: str | None = None

    model_config = {"populate_by_name": True}


class AttendanceUpdateOut(BaseModel):
    message: str


class FreeTeacherOut(BaseModel):
    teacher_id: str
    teacher_name: str | None = None

    model_config = {"from_attributes": True}


class TimetableEntryOut(BaseModel):
    teacher_id: str
    slot_id: int
    activity_description: str | None = None
    room_location: str | None = None
    is_free: bool
    day_of_week: str

    model_config = {"from_attributes": True}
