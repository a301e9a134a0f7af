from sqlalchemy import Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base


class Subject(Base):
    __tablename__ = "subjects"

    subject_code: Mapped[str] = mapped_column(String(50), primary_key=True)
    subject_name: Mapped[str | None] = mapped_column(String(200), nullable=True)


class TeacherSubjectAssignment(Base):
    __tablename__ = "teacher_subject_assignment"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    teacher_id: Mapped[str] = mapped_column(String(50), index=True, nullable=False)
    # Not a foreign key: assignments may reference codes missing from `subjects`.
    subject_code: Mapped[str] = mapped_column(String(50), nullable=False)

    __table_args__ = (
        UniqueConstraint("teacher_id", "subject_code", name="uq_teacher_subject_assignment"),
    )
