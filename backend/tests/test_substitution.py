from dataclasses import asdict

import pytest
from sqlalchemy.exc import OperationalError

from app.core.exceptions import CollaboratorFailureError, InvalidInputError
from app.services.substitute_store import CandidateRow, CoverageEntry, SubjectSummary, TeacherRecord
from app.services.substitution import (
    BEST_FIT,
    GOOD_FIT,
    NOTE_TEACHER_NOT_ABSENT,
    NOTE_TEACHER_NOT_FOUND,
    SUBJECTS_NOT_ASSIGNED,
    CoverageSlot,
    SubstitutionResolver,
    aggregate_schedule,
    rank_candidates,
)


def summary(*codes):
    return SubjectSummary(
        codes=", ".join(sorted(codes)),
        detail=" | ".join(f"{code} - " for code in sorted(codes)),
        subject_codes=frozenset(code.upper() for code in codes),
    )


class FakeStore:
    def __init__(self, *, teachers=None, summaries=None, entries=None, candidates=None, fail_on=None):
        self.teachers = teachers or {}
        self.summaries = summaries or {}
        self.entries = entries or []
        self.candidates = candidates or []
        self.fail_on = fail_on
        self.calls = []

    def _record(self, name):
        self.calls.append(name)
        if self.fail_on == name:
            raise OperationalError("SELECT 1", {}, Exception("connection lost"))

    def get_teacher(self, teacher_id):
        self._record("get_teacher")
        return self.teachers.get(teacher_id.lower())

    def get_subject_summary(self, teacher_id):
        self._record("get_subject_summary")
        return self.summaries.get(teacher_id.lower())

    def list_coverage_entries(self, teacher_id, day):
        self._record("list_coverage_entries")
        return list(self.entries)

    def list_candidate_rows(self, teacher_id, day):
        self._record("list_candidate_rows")
        return list(self.candidates)


def absent_teacher_store(**kwargs):
    teachers = {
        "t001": TeacherRecord("T001", "Anita Rao", " absent "),
        "t002": TeacherRecord("T002", "Bilal Khan", "PRESENT"),
    }
    return FakeStore(teachers=teachers, summaries={"t001": summary("MATH101")}, **kwargs)


def test_invalid_input_raised_before_store_access():
    store = FakeStore()
    resolver = SubstitutionResolver(store)

    with pytest.raises(InvalidInputError, match="teacher ID"):
        resolver.resolve_substitutes("   ", "MON")
    with pytest.raises(InvalidInputError, match="day"):
        resolver.resolve_substitutes("T001", "  ")
    with pytest.raises(InvalidInputError):
        resolver.resolve_substitutes(None, None)
    assert store.calls == []


def test_unknown_teacher_returns_note_without_error():
    store = FakeStore()
    report = SubstitutionResolver(store).resolve_substitutes(" T404 ", "monday")

    assert report.absent_teacher_name == "Teacher ID: T404"
    assert report.absent_teacher_subject_detail == "N/A"
    assert report.schedule == []
    assert report.note == NOTE_TEACHER_NOT_FOUND
    assert store.calls == ["get_teacher"]


def test_teacher_not_absent_skips_timetable_lookup():
    store = absent_teacher_store(entries=[CoverageEntry(1, "08:00-08:45", "MATH101 - Algebra", "R1")])
    report = SubstitutionResolver(store).resolve_substitutes("T002", "MON")

    assert report.absent_teacher_name == "Bilal Khan"
    assert report.absent_teacher_subject_detail == SUBJECTS_NOT_ASSIGNED
    assert report.schedule == []
    assert report.note == NOTE_TEACHER_NOT_ABSENT
    assert "list_coverage_entries" not in store.calls


def test_missing_name_falls_back_to_identifier():
    store = FakeStore(teachers={"t009": TeacherRecord("T009", None, "Sick leave")})
    report = SubstitutionResolver(store).resolve_substitutes("T009", "MON")

    assert report.absent_teacher_name == "Teacher ID: T009"
    assert report.note == NOTE_TEACHER_NOT_ABSENT


def test_absent_teacher_without_classes_returns_empty_schedule_and_no_note():
    store = absent_teacher_store()
    report = SubstitutionResolver(store).resolve_substitutes("t001", "Thursday")

    assert report.absent_teacher_name == "Anita Rao"
    assert report.absent_teacher_subject_detail == "MATH101 - "
    assert report.schedule == []
    assert report.note is None
    assert "list_candidate_rows" not in store.calls


def test_schedule_has_one_slot_per_class_ordered_by_slot():
    store = absent_teacher_store(
        entries=[
            CoverageEntry(4, "10:30-11:15", "MATH101 - Algebra (10A)", "R103"),
            CoverageEntry(1, "08:00-08:45", "MATH101 - Algebra (9A)", "R101"),
            CoverageEntry(2, "08:45-09:30", "Algebra Lab", ""),
        ]
    )
    report = SubstitutionResolver(store).resolve_substitutes("T001", "MON")

    assert [item.slot_id for item in report.schedule] == [1, 2, 4]
    lab_slot = report.schedule[1]
    assert lab_slot.is_lab is True
    assert lab_slot.subject == "ALGEBRA"
    assert lab_slot.room is None
    assert report.schedule[0].subject == "MATH101"
    assert report.schedule[0].is_lab is False


def test_candidates_are_ranked_best_fit_first_then_by_name():
    store = absent_teacher_store(
        entries=[CoverageEntry(1, "08:00-08:45", "MATH101 - Algebra", "R101")],
        candidates=[
            CandidateRow(1, "MATH101 - Algebra", "T006", "Zara", summary("MATH101")),
            CandidateRow(1, "MATH101 - Algebra", "T003", "Chitra", summary("CHEM110")),
            CandidateRow(1, "MATH101 - Algebra", "T002", "Bilal", summary("math101", "PHY201")),
            CandidateRow(1, "MATH101 - Algebra", "T004", "Ahmed", SubjectSummary()),
        ],
    )
    report = SubstitutionResolver(store).resolve_substitutes("T001", "MON")
    candidates = report.schedule[0].available_substitutes

    assert [item.substitute_name for item in candidates] == ["Bilal", "Zara", "Ahmed", "Chitra"]
    assert [item.priority for item in candidates] == [BEST_FIT, BEST_FIT, GOOD_FIT, GOOD_FIT]
    assert candidates[2].subjects_codes == ""
    assert candidates[0].subjects_codes == "PHY201, math101"


def test_absent_teacher_never_listed_as_candidate():
    store = absent_teacher_store(
        entries=[CoverageEntry(1, "08:00-08:45", "MATH101 - Algebra", "R101")],
        candidates=[
            CandidateRow(1, "MATH101 - Algebra", "t001", "Anita Rao", summary("MATH101")),
            CandidateRow(1, "MATH101 - Algebra", "T002", "Bilal", SubjectSummary()),
        ],
    )
    report = SubstitutionResolver(store).resolve_substitutes("T001", "MON")

    assert [item.substitute_id for item in report.schedule[0].available_substitutes] == ["T002"]


def test_candidates_are_attached_to_their_own_slot_only():
    store = absent_teacher_store(
        entries=[
            CoverageEntry(1, "08:00-08:45", "MATH101 - Algebra (9A)", "R101"),
            CoverageEntry(2, "08:45-09:30", "MATH101 - Algebra (9B)", "R102"),
        ],
        candidates=[
            CandidateRow(1, "MATH101 - Algebra (9A)", "T002", "Bilal", SubjectSummary()),
            CandidateRow(2, "MATH101 - Algebra (9B)", "T003", "Chitra", SubjectSummary()),
            CandidateRow(3, "Unrelated", "T004", "Dev", SubjectSummary()),
        ],
    )
    report = SubstitutionResolver(store).resolve_substitutes("T001", "MON")

    assert [item.substitute_id for item in report.schedule[0].available_substitutes] == ["T002"]
    assert [item.substitute_id for item in report.schedule[1].available_substitutes] == ["T003"]


def test_store_failure_is_wrapped_without_partial_report():
    store = absent_teacher_store(
        entries=[CoverageEntry(1, "08:00-08:45", "MATH101 - Algebra", "R101")],
        fail_on="list_candidate_rows",
    )
    with pytest.raises(CollaboratorFailureError) as excinfo:
        SubstitutionResolver(store).resolve_substitutes("T001", "MON")

    assert excinfo.value.status_code == 500
    assert excinfo.value.message == "Database query failed during substitution search."
    assert excinfo.value.details == {"teacher_id": "T001", "day": "MON"}
    assert isinstance(excinfo.value.__cause__, OperationalError)


def test_store_failure_during_lookup_is_wrapped():
    store = FakeStore(fail_on="get_teacher")
    with pytest.raises(CollaboratorFailureError):
        SubstitutionResolver(store).resolve_substitutes("T001", "MON")


def test_non_database_errors_are_not_wrapped():
    class BrokenStore(FakeStore):
        def get_teacher(self, teacher_id):
            raise KeyError(teacher_id)

    with pytest.raises(KeyError):
        SubstitutionResolver(BrokenStore()).resolve_substitutes("T001", "MON")


def test_resolution_is_deterministic():
    def build():
        return absent_teacher_store(
            entries=[
                CoverageEntry(2, "08:45-09:30", "PHY201 - Physics", None),
                CoverageEntry(1, "08:00-08:45", "MATH101 - Algebra", "R101"),
            ],
            candidates=[
                CandidateRow(2, "PHY201 - Physics", "T005", "Esha", summary("PHY201")),
                CandidateRow(1, "MATH101 - Algebra", "T003", "Chitra", SubjectSummary()),
                CandidateRow(1, "MATH101 - Algebra", "T002", "Bilal", summary("MATH101")),
            ],
        )

    first = SubstitutionResolver(build()).resolve_substitutes("T001", "MON")
    second = SubstitutionResolver(build()).resolve_substitutes("T001", "MON")
    assert asdict(first) == asdict(second)


def test_aggregate_collapses_duplicate_slot_keys():
    seeds = [
        CoverageSlot(1, "08:00-08:45", "MATH101 - Algebra", "MATH101", "R101", False),
        CoverageSlot(1, "08:00-08:45", " math101 -  algebra", "MATH101", "R999", False),
    ]
    rows = [
        CandidateRow(1, "MATH101 - Algebra", "T002", "Bilal", SubjectSummary()),
        CandidateRow(1, " math101 -  algebra", "T002", "Bilal", SubjectSummary()),
    ]
    schedule = aggregate_schedule(seeds, rows)

    assert len(schedule) == 1
    assert schedule[0].room == "R101"
    assert [item.substitute_id for item in schedule[0].available_substitutes] == ["T002"]


def test_rank_candidates_breaks_name_ties_by_identifier():
    rows = [
        CandidateRow(1, "X", "T010", "Sam", SubjectSummary()),
        CandidateRow(1, "X", "T002", "Sam", SubjectSummary()),
    ]
    ranked = rank_candidates("X", rows)
    assert [item.substitute_id for item in ranked] == ["T002", "T010"]
