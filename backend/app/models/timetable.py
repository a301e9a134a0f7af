from sqlalchemy import Boolean, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base


class TimeSlot(Base):
    __tablename__ = "time_slots"

    slot_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    time_range: Mapped[str] = mapped_column(String(50), nullable=False)


class TeacherTimetable(Base):
    __tablename__ = "teacher_timetable"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    teacher_id: Mapped[str] = mapped_column(String(50), index=True, nullable=False)
    day_of_week: Mapped[str] = mapped_column(String(10), index=True, nullable=False)
    slot_id: Mapped[int] = mapped_column(ForeignKey("time_slots.slot_id"), nullable=False)
    activity_description: Mapped[str | None] = mapped_column(Text, nullable=True)
    room_location: Mapped[str | None] = mapped_column(String(100), nullable=True)
    is_free: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    __table_args__ = (
        UniqueConstraint("teacher_id", "day_of_week", "slot_id", name="uq_teacher_timetable_slot"),
    )
