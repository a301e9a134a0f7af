from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable
from dataclasses import dataclass, field
import logging

from sqlalchemy.exc import SQLAlchemyError

from app.core.exceptions import CollaboratorFailureError, InvalidInputError
from app.models.teacher import AttendanceStatus
from app.services.normalizer import (
    UNKNOWN_SUBJECT,
    extract_subject_code,
    is_lab_activity,
    normalize_day,
    normalize_description,
)
from app.services.substitute_store import CandidateRow, CoverageEntry, SubjectSummary, SubstituteStore

logger = logging.getLogger(__name__)

BEST_FIT = "BEST FIT (Same Subject)"
GOOD_FIT = "GOOD FIT (Free, Any Subject)"
FITNESS_ORDER = {BEST_FIT: 0, GOOD_FIT: 1}

NOTE_TEACHER_NOT_FOUND = "Teacher not found"
NOTE_TEACHER_NOT_ABSENT = "Teacher is not marked as ABSENT in attendance table"
SUBJECTS_NOT_ASSIGNED = "Subject(s) Not Assigned"


@dataclass(frozen=True)
class SubstituteCandidate:
    substitute_id: str
    substitute_name: str | None
    priority: str
    subjects_codes: str
    subjects_detail: str


@dataclass
class CoverageSlot:
    slot_id: int
    time_range: str
    class_info: str | None
    subject: str
    room: str | None
    is_lab: bool
    available_substitutes: list[SubstituteCandidate] = field(default_factory=list)

    @property
    def key(self) -> tuple[int, str]:
        return slot_key(self.slot_id, self.class_info)


@dataclass
class SubstitutionReport:
    absent_teacher_name: str
    absent_teacher_subject_detail: str
    schedule: list[CoverageSlot] = field(default_factory=list)
    note: str | None = None


def slot_key(slot_id: int, description: str | None) -> tuple[int, str]:
    return slot_id, normalize_description(description)


def fallback_teacher_name(teacher_id: str) -> str:
    return f"Teacher ID: {teacher_id}"


def subject_detail_text(summary: SubjectSummary | None) -> str:
    if summary is None:
        return SUBJECTS_NOT_ASSIGNED
    return summary.detail or summary.codes or SUBJECTS_NOT_ASSIGNED


def fitness_tier(subject_code: str, candidate_codes: Iterable[str]) -> str:
    if subject_code != UNKNOWN_SUBJECT and subject_code in set(candidate_codes):
        return BEST_FIT
    return GOOD_FIT


def coverage_slot_from_entry(entry: CoverageEntry) -> CoverageSlot:
    return CoverageSlot(
        slot_id=entry.slot_id,
        time_range=entry.time_range,
        class_info=entry.activity_description,
        subject=extract_subject_code(entry.activity_description),
        room=entry.room_location or None,
        is_lab=is_lab_activity(entry.activity_description),
    )


def rank_candidates(
    subject_code: str,
    rows: Iterable[CandidateRow],
    *,
    exclude_teacher_id: str | None = None,
) -> list[SubstituteCandidate]:
    excluded = (exclude_teacher_id or "").lower()
    seen: set[str] = set()
    candidates: list[SubstituteCandidate] = []
    for row in rows:
        identity = row.teacher_id.lower()
        if identity == excluded or identity in seen:
            continue
        seen.add(identity)
        candidates.append(
            SubstituteCandidate(
                substitute_id=row.teacher_id,
                substitute_name=row.teacher_name,
                priority=fitness_tier(subject_code, row.subjects.subject_codes),
                subjects_codes=row.subjects.codes,
                subjects_detail=row.subjects.detail,
            )
        )
    candidates.sort(key=lambda item: (FITNESS_ORDER[item.priority], item.substitute_name or "", item.substitute_id))
    return candidates


def aggregate_schedule(
    seeds: Iterable[CoverageSlot],
    rows: Iterable[CandidateRow],
    *,
    absent_teacher_id: str | None = None,
) -> list[CoverageSlot]:
    by_key: dict[tuple[int, str], CoverageSlot] = {}
    for seed in seeds:
        by_key.setdefault(seed.key, seed)

    rows_by_key: dict[tuple[int, str], list[CandidateRow]] = defaultdict(list)
    for row in rows:
        key = slot_key(row.slot_id, row.class_description)
        if key in by_key:
            rows_by_key[key].append(row)

    for key, slot in by_key.items():
        slot.available_substitutes = rank_candidates(
            slot.subject,
            rows_by_key.get(key, []),
            exclude_teacher_id=absent_teacher_id,
        )
    return sorted(by_key.values(), key=lambda item: item.slot_id)


class SubstitutionResolver:
    """Works out who can cover an absent teacher's classes on one day."""

    def __init__(self, store: SubstituteStore) -> None:
        self.store = store

    def resolve_substitutes(self, teacher_id: str | None, day: str | None) -> SubstitutionReport:
        absent_teacher_id = str(teacher_id or "").strip()
        target_day = normalize_day(day or "")

        if not absent_teacher_id:
            raise InvalidInputError("Invalid absent teacher ID.")
        if not target_day:
            raise InvalidInputError("Invalid or missing day.")

        logger.info(
            "Resolving substitutes for %s, day %r -> %s",
            absent_teacher_id,
            day,
            target_day,
        )
        try:
            return self._resolve(absent_teacher_id, target_day)
        except SQLAlchemyError as exc:
            logger.exception("Database error while resolving substitutes for %s on %s", absent_teacher_id, target_day)
            raise CollaboratorFailureError(details={"teacher_id": absent_teacher_id, "day": target_day}) from exc

    def _resolve(self, absent_teacher_id: str, target_day: str) -> SubstitutionReport:
        teacher = self.store.get_teacher(absent_teacher_id)
        if teacher is None:
            return SubstitutionReport(
                absent_teacher_name=fallback_teacher_name(absent_teacher_id),
                absent_teacher_subject_detail=UNKNOWN_SUBJECT,
                note=NOTE_TEACHER_NOT_FOUND,
            )

        absent_name = teacher.teacher_name or fallback_teacher_name(absent_teacher_id)
        subject_detail = subject_detail_text(self.store.get_subject_summary(absent_teacher_id))
        is_absent = (teacher.attendance or "").strip().upper() == AttendanceStatus.absent.value
        if not is_absent:
            return SubstitutionReport(
                absent_teacher_name=absent_name,
                absent_teacher_subject_detail=subject_detail,
                note=NOTE_TEACHER_NOT_ABSENT,
            )

        seeds = self.build_coverage_set(absent_teacher_id, target_day)
        logger.debug("Classes to cover for %s on %s: %d", absent_teacher_id, target_day, len(seeds))
        if not seeds:
            return SubstitutionReport(absent_teacher_name=absent_name, absent_teacher_subject_detail=subject_detail)

        rows = self.store.list_candidate_rows(absent_teacher_id, target_day)
        logger.debug("Candidate rows for %s on %s: %d", absent_teacher_id, target_day, len(rows))
        return SubstitutionReport(
            absent_teacher_name=absent_name,
            absent_teacher_subject_detail=subject_detail,
            schedule=aggregate_schedule(seeds, rows, absent_teacher_id=absent_teacher_id),
        )

    def build_coverage_set(self, absent_teacher_id: str, target_day: str) -> list[CoverageSlot]:
        entries = self.store.list_coverage_entries(absent_teacher_id, target_day)
        return [coverage_slot_from_entry(entry) for entry in entries]
