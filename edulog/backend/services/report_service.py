import logging
from typing import List

from ..db.report_client import ReportDBClient, ReportFilters
from ..models.db_models import Report
from .exceptions import ValidationError

logger = logging.getLogger(__name__)


class ReportService:
    def __init__(self, report_client: ReportDBClient):
        self.report_client = report_client

    async def get_reports(self, filters: ReportFilters) -> List[Report]:
        if filters.start_date and filters.end_date and filters.start_date > filters.end_date:
            raise ValidationError("startDate cannot be after endDate.")
        reports = await self.report_client.get_reports(filters)
        logger.info(f"Report query with {filters.model_dump(exclude_none=True)} returned {len(reports)} rows.")
        return reports
