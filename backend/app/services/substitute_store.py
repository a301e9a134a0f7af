from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Protocol

from sqlalchemy import and_, func, or_, select, update
from sqlalchemy.orm import Session, aliased

from app.models.subject import Subject, TeacherSubjectAssignment
from app.models.teacher import AttendanceStatus, TeacherAttendance
from app.models.timetable import TeacherTimetable, TimeSlot
from app.services.normalizer import SUBJECT_SEPARATOR, normalize_subject_code


@dataclass(frozen=True)
class TeacherRecord:
    teacher_id: str
    teacher_name: str | None
    attendance: str | None


@dataclass(frozen=True)
class SubjectSummary:
    codes: str = ""
    detail: str = ""
    subject_codes: frozenset[str] = field(default_factory=frozenset)


@dataclass(frozen=True)
class CoverageEntry:
    slot_id: int
    time_range: str
    activity_description: str | None
    room_location: str | None


@dataclass(frozen=True)
class CandidateRow:
    slot_id: int
    class_description: str | None
    teacher_id: str
    teacher_name: str | None
    subjects: SubjectSummary = field(default_factory=SubjectSummary)


class SubstituteStore(Protocol):
    """Read interface the substitution resolver depends on.

    Implementations report a failed lookup by raising ``SQLAlchemyError``,
    which the resolver wraps in ``CollaboratorFailureError``. Any other
    exception is treated as a programming error and propagates unchanged.
    """

    def get_teacher(self, teacher_id: str) -> TeacherRecord | None: ...

    def get_subject_summary(self, teacher_id: str) -> SubjectSummary | None: ...

    def list_coverage_entries(self, teacher_id: str, day: str) -> list[CoverageEntry]: ...

    def list_candidate_rows(self, teacher_id: str, day: str) -> list[CandidateRow]: ...


def _same_teacher(column, teacher_id):
    return func.lower(column) == func.lower(teacher_id)


def _is_present(column):
    return func.upper(func.trim(column)) == AttendanceStatus.present.value


def _available_at(teacher_column, day, slot_id):
    # No busy row counts as free; an explicit free row is sufficient but not required.
    free_tt = aliased(TeacherTimetable)
    busy_tt = aliased(TeacherTimetable)
    free_row = (
        select(free_tt.id)
        .where(
            _same_teacher(free_tt.teacher_id, teacher_column),
            func.upper(free_tt.day_of_week) == func.upper(day),
            free_tt.slot_id == slot_id,
            free_tt.is_free.is_(True),
        )
        .exists()
    )
    busy_row = (
        select(busy_tt.id)
        .where(
            _same_teacher(busy_tt.teacher_id, teacher_column),
            func.upper(busy_tt.day_of_week) == func.upper(day),
            busy_tt.slot_id == slot_id,
            busy_tt.is_free.is_(False),
        )
        .exists()
    )
    return or_(free_row, ~busy_row)


def summarize_subjects(rows: Iterable[tuple[str, str | None]]) -> SubjectSummary:
    """Aggregate ``(subject_code, subject_name)`` pairs into sorted, de-duplicated strings."""
    codes: set[str] = set()
    details: set[tuple[str, str]] = set()
    for code, name in rows:
        if code is None:
            continue
        codes.add(code)
        details.add((code, f"{code}{SUBJECT_SEPARATOR}{name or ''}"))
    if not codes:
        return SubjectSummary()
    return SubjectSummary(
        codes=", ".join(sorted(codes)),
        detail=" | ".join(item[1] for item in sorted(details)),
        subject_codes=frozenset(normalize_subject_code(code) for code in codes),
    )


class SqlSubstituteStore:
    def __init__(self, db: Session) -> None:
        self.db = db

    def get_teacher(self, teacher_id: str) -> TeacherRecord | None:
        row = self.db.execute(
            select(TeacherAttendance)
            .where(_same_teacher(TeacherAttendance.teacher_id, teacher_id))
            .order_by(TeacherAttendance.teacher_id)
            .limit(1)
        ).scalar_one_or_none()
        if row is None:
            return None
        return TeacherRecord(teacher_id=row.teacher_id, teacher_name=row.teacher_name, attendance=row.attendance)

    def _subject_summaries(self, teacher_ids: Iterable[str]) -> dict[str, SubjectSummary]:
        lowered = sorted({item.lower() for item in teacher_ids})
        if not lowered:
            return {}
        rows = self.db.execute(
            select(TeacherSubjectAssignment.teacher_id, TeacherSubjectAssignment.subject_code, Subject.subject_name)
            .outerjoin(Subject, Subject.subject_code == TeacherSubjectAssignment.subject_code)
            .where(func.lower(TeacherSubjectAssignment.teacher_id).in_(lowered))
        ).all()
        grouped: dict[str, list[tuple[str, str | None]]] = defaultdict(list)
        for teacher_id, code, name in rows:
            grouped[teacher_id.lower()].append((code, name))
        return {key: summarize_subjects(items) for key, items in grouped.items()}

    def get_subject_summary(self, teacher_id: str) -> SubjectSummary | None:
        return self._subject_summaries([teacher_id]).get(teacher_id.lower())

    def list_coverage_entries(self, teacher_id: str, day: str) -> list[CoverageEntry]:
        rows = self.db.execute(
            select(
                TeacherTimetable.slot_id,
                TimeSlot.time_range,
                TeacherTimetable.activity_description,
                TeacherTimetable.room_location,
            )
            .join(TimeSlot, TimeSlot.slot_id == TeacherTimetable.slot_id)
            .where(
                _same_teacher(TeacherTimetable.teacher_id, teacher_id),
                func.upper(TeacherTimetable.day_of_week) == func.upper(day),
                TeacherTimetable.is_free.is_(False),
            )
            .order_by(TeacherTimetable.slot_id, TeacherTimetable.id)
        ).all()
        return [
            CoverageEntry(
                slot_id=row.slot_id,
                time_range=row.time_range,
                activity_description=row.activity_description,
                room_location=row.room_location,
            )
            for row in rows
        ]

    def list_candidate_rows(self, teacher_id: str, day: str) -> list[CandidateRow]:
        classes = (
            select(
                TeacherTimetable.teacher_id.label("absent_teacher_id"),
                TeacherTimetable.day_of_week,
                TeacherTimetable.slot_id,
                TeacherTimetable.activity_description,
            )
            .where(
                _same_teacher(TeacherTimetable.teacher_id, teacher_id),
                func.upper(TeacherTimetable.day_of_week) == func.upper(day),
                TeacherTimetable.is_free.is_(False),
            )
            .subquery("classes")
        )
        candidate = aliased(TeacherAttendance, name="candidate")
        rows = self.db.execute(
            select(
                classes.c.slot_id,
                classes.c.activity_description,
                candidate.teacher_id,
                candidate.teacher_name,
            )
            .select_from(classes)
            .join(
                candidate,
                and_(
                    _is_present(candidate.attendance),
                    func.lower(candidate.teacher_id) != func.lower(classes.c.absent_teacher_id),
                ),
            )
            .where(_available_at(candidate.teacher_id, classes.c.day_of_week, classes.c.slot_id))
            .order_by(classes.c.slot_id, candidate.teacher_name, candidate.teacher_id)
        ).all()

        summaries = self._subject_summaries(row.teacher_id for row in rows)
        return [
            CandidateRow(
                slot_id=row.slot_id,
                class_description=row.activity_description,
                teacher_id=row.teacher_id,
                teacher_name=row.teacher_name,
                subjects=summaries.get(row.teacher_id.lower(), SubjectSummary()),
            )
            for row in rows
        ]

    def list_teachers(self) -> list[TeacherAttendance]:
        return list(self.db.execute(select(TeacherAttendance).order_by(TeacherAttendance.teacher_id)).scalars())

    def list_free_teachers(self, day: str, slot_id: int) -> list[TeacherRecord]:
        rows = self.db.execute(
            select(TeacherAttendance)
            .where(
                _is_present(TeacherAttendance.attendance),
                _available_at(TeacherAttendance.teacher_id, day, slot_id),
            )
            .order_by(TeacherAttendance.teacher_id)
        ).scalars()
        return [
            TeacherRecord(teacher_id=row.teacher_id, teacher_name=row.teacher_name, attendance=row.attendance)
            for row in rows
        ]

    def list_timetable_for_day(self, day_prefix: str) -> list[TeacherTimetable]:
        pattern = f"{day_prefix.upper()}%"
        return list(
            self.db.execute(
                select(TeacherTimetable)
                .where(func.upper(TeacherTimetable.day_of_week).like(pattern))
                .order_by(TeacherTimetable.teacher_id, TeacherTimetable.slot_id)
            ).scalars()
        )

    def update_attendance(self, teacher_id: str, status: str) -> bool:
        result = self.db.execute(
            update(TeacherAttendance)
            .where(TeacherAttendance.teacher_id == teacher_id)
            .values(attendance=status)
        )
        return result.rowcount > 0
