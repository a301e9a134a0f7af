import logging

from fastapi import APIRouter, Depends

from app.api.deps import get_substitution_resolver
from app.core.exceptions import AppError, CollaboratorFailureError
from app.schemas.substitute import SubstitutionReportOut
from app.services.normalizer import normalize_day
from app.services.substitution import SubstitutionResolver

router = APIRouter()

logger = logging.getLogger(__name__)


@router.get("/substitute/{teacher_id}/{day}", response_model=SubstitutionReportOut)
def get_substitutes(
    teacher_id: str,
    day: str,
    resolver: SubstitutionResolver = Depends(get_substitution_resolver),
) -> SubstitutionReportOut:
    absent_teacher_id = teacher_id.strip().upper()
    target_day = normalize_day(day)
    try:
        report = resolver.resolve_substitutes(absent_teacher_id, target_day)
    except CollaboratorFailureError as exc:
        logger.error("GET /substitute failed for %s on %s: %s", absent_teacher_id, target_day, exc.message)
        raise AppError(
            f"Error fetching substitution data: {exc.message}",
            status_code=exc.status_code,
            details=exc.details,
        ) from exc
    return SubstitutionReportOut.from_report(report, teacher_id=absent_teacher_id)
