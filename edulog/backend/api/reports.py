import logging
from fastapi import APIRouter, Depends, Query
from datetime import date
from typing import List, Optional

from ..db.report_client import ReportFilters
from ..models.enums import Role
from ..services.exceptions import ValidationError
from ..services.report_service import ReportService
from .schemas.common import ApiResponse
from .schemas.report import ReportResponse

from .auth import require_role
from .dependencies import get_report_service

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/reports",
    tags=["Reports"],
    dependencies=[Depends(require_role(Role.ADMIN))]
)


def parse_date_filter(value: Optional[str], name: str) -> Optional[date]:
    """'' and missing both mean no bound; anything else must be YYYY-MM-DD."""
    if not value:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError as e:
        logger.warning(f"Rejected report filter {name}='{value}'.")
        raise ValidationError(f"{name} must be a date in YYYY-MM-DD format.") from e


@router.get("", response_model=ApiResponse[List[ReportResponse]])
async def get_reports(
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
    role: Optional[str] = Query(None, alias="roleFilter"),
    course: Optional[str] = Query(None, alias="courseFilter"),
    status: Optional[str] = Query(None, alias="statusFilter"),
    student_name: Optional[str] = Query(None, alias="studentNameFilter"),
    service: ReportService = Depends(get_report_service)
):
    """Each filter that is present narrows the result; empty strings count as absent."""
    filters = ReportFilters(
        start_date=parse_date_filter(start_date, "startDate"),
        end_date=parse_date_filter(end_date, "endDate"),
        role=role or None,
        course=course or None,
        status=status or None,
        student_name=student_name or None,
    )
    return ApiResponse(data=await service.get_reports(filters))
