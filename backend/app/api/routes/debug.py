import logging
import math

from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError

from app.api.deps import get_substitute_store
from app.core.exceptions import AppError, InvalidInputError
from app.schemas.teacher import FreeTeacherOut, TimetableEntryOut
from app.services.normalizer import normalize_day
from app.services.substitute_store import SqlSubstituteStore

router = APIRouter()

logger = logging.getLogger(__name__)


def _parse_slot(value: str) -> float | None:
    try:
        parsed = float(value.strip())
    except ValueError:
        return None
    if not math.isfinite(parsed):
        return None
    return parsed


@router.get("/free/{day}/{slot}", response_model=list[FreeTeacherOut])
def list_free_teachers(
    day: str,
    slot: str,
    store: SqlSubstituteStore = Depends(get_substitute_store),
) -> list[FreeTeacherOut]:
    target_day = normalize_day(day)
    slot_number = _parse_slot(slot)
    if not target_day or slot_number is None:
        raise InvalidInputError("Provide day and numeric slot.")
    # Slot ids are integers, so a fractional slot matches nothing.
    if not slot_number.is_integer():
        return []
    try:
        return store.list_free_teachers(target_day, int(slot_number))
    except SQLAlchemyError as exc:
        logger.exception("GET /debug/free failed for %s slot %s", target_day, slot)
        raise AppError("Debug query failed.", status_code=500) from exc


@router.get("/timetable/{day}", response_model=list[TimetableEntryOut])
def list_timetable_for_day(
    day: str,
    store: SqlSubstituteStore = Depends(get_substitute_store),
) -> list[TimetableEntryOut]:
    try:
        return store.list_timetable_for_day(day.strip())
    except SQLAlchemyError as exc:
        logger.exception("GET /debug/timetable failed for %r", day)
        raise AppError("Query failed.", status_code=500) from exc
