"""Seed a small demo school (slots, subjects, teachers, timetable) for local runs.

Run:
  PYTHONPATH=backend python scripts/seed_demo_data.py

Safe to re-run: existing rows are updated in place.
"""

from __future__ import annotations

import os

from sqlalchemy import select

from app.db.bootstrap import ensure_runtime_schema_compatibility
from app.db.session import SessionLocal
from app.models.subject import Subject, TeacherSubjectAssignment
from app.models.teacher import AttendanceStatus, TeacherAttendance
from app.models.timetable import TeacherTimetable, TimeSlot

ABSENT_TEACHER_ID = os.getenv("DEMO_ABSENT_TEACHER_ID", "T001").strip().upper()

TIME_SLOTS = {
    1: "08:00-08:45",
    2: "08:45-09:30",
    3: "09:45-10:30",
    4: "10:30-11:15",
    5: "11:30-12:15",
    6: "12:15-13:00",
}

SUBJECTS = {
    "MATH101": "Algebra",
    "PHY201": "Physics",
    "CHEM110": "Chemistry",
    "ENG100": "English",
    "CS150": "Computer Science",
}

TEACHERS = [
    ("T001", "Anita Rao", ["MATH101"]),
    ("T002", "Bilal Khan", ["MATH101", "PHY201"]),
    ("T003", "Chitra Iyer", ["CHEM110"]),
    ("T004", "Dev Mehta", ["ENG100"]),
    ("T005", "Esha Nair", ["CS150", "MATH101"]),
    ("T006", "Farhan Ali", []),
]

# (teacher_id, day, slot_id, activity, room, is_free)
TIMETABLE = [
    ("T001", "MON", 1, "MATH101 - Algebra (9A)", "R101", False),
    ("T001", "MON", 2, "MATH101 - Algebra Lab (9B)", "LAB2", False),
    ("T001", "MON", 3, "Free", None, True),
    ("T001", "MON", 4, "MATH101 - Algebra (10A)", "R103", False),
    ("T001", "THUR", 2, "MATH101 - Algebra (9A)", "R101", False),
    ("T002", "MON", 1, "PHY201 - Physics (11A)", "R201", False),
    ("T002", "MON", 2, "Free", None, True),
    ("T002", "THUR", 2, "Free", None, True),
    ("T003", "MON", 1, "Free", None, True),
    ("T003", "MON", 4, "CHEM110 - Chemistry (10B)", "LAB1", False),
    ("T004", "MON", 2, "ENG100 - English (9C)", "R104", False),
    ("T005", "MON", 1, "Free", None, True),
    ("T005", "MON", 4, "Free", None, True),
]


def _upsert_reference_data(session) -> None:
    for slot_id, time_range in TIME_SLOTS.items():
        slot = session.get(TimeSlot, slot_id)
        if slot is None:
            session.add(TimeSlot(slot_id=slot_id, time_range=time_range))
        else:
            slot.time_range = time_range
    for code, name in SUBJECTS.items():
        subject = session.get(Subject, code)
        if subject is None:
            session.add(Subject(subject_code=code, subject_name=name))
        else:
            subject.subject_name = name


def _upsert_teachers(session) -> None:
    for teacher_id, name, subject_codes in TEACHERS:
        status = AttendanceStatus.absent if teacher_id == ABSENT_TEACHER_ID else AttendanceStatus.present
        teacher = session.get(TeacherAttendance, teacher_id)
        if teacher is None:
            session.add(TeacherAttendance(teacher_id=teacher_id, teacher_name=name, attendance=status.value))
        else:
            teacher.teacher_name = name
            teacher.attendance = status.value

        existing_codes = set(
            session.execute(
                select(TeacherSubjectAssignment.subject_code).where(TeacherSubjectAssignment.teacher_id == teacher_id)
            ).scalars()
        )
        for code in subject_codes:
            if code not in existing_codes:
                session.add(TeacherSubjectAssignment(teacher_id=teacher_id, subject_code=code))


def _upsert_timetable(session) -> None:
    for teacher_id, day, slot_id, activity, room, is_free in TIMETABLE:
        entry = session.execute(
            select(TeacherTimetable).where(
                TeacherTimetable.teacher_id == teacher_id,
                TeacherTimetable.day_of_week == day,
                TeacherTimetable.slot_id == slot_id,
            )
        ).scalar_one_or_none()
        if entry is None:
            entry = TeacherTimetable(teacher_id=teacher_id, day_of_week=day, slot_id=slot_id)
            session.add(entry)
        entry.activity_description = activity
        entry.room_location = room
        entry.is_free = is_free


def main() -> None:
    ensure_runtime_schema_compatibility()
    with SessionLocal() as session:
        _upsert_reference_data(session)
        session.flush()
        _upsert_teachers(session)
        _upsert_timetable(session)
        session.commit()

    print(f"Seeded {len(TEACHERS)} teachers, {len(TIME_SLOTS)} slots and {len(TIMETABLE)} timetable rows.")
    print(f"{ABSENT_TEACHER_ID} is marked ABSENT. Try:")
    print(f"  GET /api/substitute/{ABSENT_TEACHER_ID}/MON")


if __name__ == "__main__":
    main()
