import logging

from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.api.deps import get_db, get_substitute_store
from app.core.config import get_settings
from app.core.exceptions import AppError, InvalidInputError, ResourceNotFoundError
from app.schemas.teacher import AttendanceUpdate, AttendanceUpdateOut, TeacherOut
from app.services.substitute_store import SqlSubstituteStore

router = APIRouter()

logger = logging.getLogger(__name__)


@router.get("/teachers", response_model=list[TeacherOut])
def list_teachers(store: SqlSubstituteStore = Depends(get_substitute_store)) -> list[TeacherOut]:
    try:
        return store.list_teachers()
    except SQLAlchemyError as exc:
        logger.exception("GET /teachers failed")
        raise AppError("Error fetching teachers.", status_code=500) from exc


@router.post("/attendance", response_model=AttendanceUpdateOut)
def update_attendance(
    payload: AttendanceUpdate,
    store: SqlSubstituteStore = Depends(get_substitute_store),
    db: Session = Depends(get_db),
) -> AttendanceUpdateOut:
    if not payload.teacher_id or not payload.status:
        raise InvalidInputError("Missing teacherId or status.")
    if len(payload.teacher_id) > get_settings().max_teacher_id_length:
        raise InvalidInputError("Invalid teacherId.")

    normalized = payload.status.strip()
    try:
        updated = store.update_attendance(payload.teacher_id, normalized)
        if not updated:
            db.rollback()
            raise ResourceNotFoundError("Teacher", payload.teacher_id)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("POST /attendance failed for %s", payload.teacher_id)
        raise AppError("Error updating attendance.", status_code=500) from exc

    logger.info("Teacher %s marked as %s", payload.teacher_id, normalized)
    return AttendanceUpdateOut(message=f"Teacher {payload.teacher_id} marked as {normalized}.")
