from pydantic import BaseModel, model_serializer

from app.services.substitution import CoverageSlot, SubstitutionReport


class SubstituteCandidateOut(BaseModel):
    substitute_id: str
    substitute_name: str | None = None
    priority: str
    subjects_codes: str
    subjects_detail: str

    model_config = {"from_attributes": True}


class CoverageSlotOut(BaseModel):
    slot_id: int
    slot: str
    class_info: str | None = None
    subject: str
    room: str | None = None
    is_lab: bool
    available_substitutes: list[SubstituteCandidateOut]

    @classmethod
    def from_slot(cls, item: CoverageSlot) -> "CoverageSlotOut":
        return cls(
            slot_id=item.slot_id,
            slot=item.time_range,
            class_info=item.class_info,
            subject=item.subject,
            room=item.room,
            is_lab=item.is_lab,
            available_substitutes=[
                SubstituteCandidateOut.model_validate(candidate) for candidate in item.available_substitutes
            ],
        )


class SubstitutionReportOut(BaseModel):
    absent_teacher: str
    absent_teacher_subject: str
    schedule_to_cover: list[CoverageSlotOut]
    note: str | None = None

    # Reports without a note leave the key out entirely.
    @model_serializer(mode="wrap")
    def _omit_empty_note(self, handler):
        data = handler(self)
        if data.get("note") is None:
            data.pop("note", None)
        return data

    @classmethod
    def from_report(cls, report: SubstitutionReport, *, teacher_id: str) -> "SubstitutionReportOut":
        return cls(
            absent_teacher=report.absent_teacher_name or f"Teacher ID: {teacher_id}",
            absent_teacher_subject=report.absent_teacher_subject_detail or "N/A",
            schedule_to_cover=[CoverageSlotOut.from_slot(item) for item in report.schedule],
            note=report.note,
        )
