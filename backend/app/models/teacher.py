from enum import Enum

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base


class AttendanceStatus(str, Enum):
    present = "PRESENT"
    absent = "ABSENT"


class TeacherAttendance(Base):
    __tablename__ = "teacher_attendance"

    teacher_id: Mapped[str] = mapped_column(String(50), primary_key=True)
    teacher_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    # Free text; anything other than PRESENT/ABSENT is stored and echoed verbatim.
    attendance: Mapped[str | None] = mapped_column(String(50), nullable=True, default=AttendanceStatus.present.value)
