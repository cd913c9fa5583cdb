import logging
from datetime import date
from typing import Any, List, Optional, Tuple
from pydantic import BaseModel

from .db_client import AsyncPostgresClient
from ..models.db_models import Report

logger = logging.getLogger(__name__)

_REPORT_SELECT = """
    SELECT
        r.report_id,
        r.date,
        r.user_id,
        r.user_name,
        r.role,
        r.category,
        r.amount,
        r.description,
        a.status,
        c.course_name,
        s.name AS student_name,
        u.role AS user_role
    FROM reports r
    LEFT JOIN students s ON r.user_id = s.student_id
    LEFT JOIN courses c ON s.course_id = c.course_id
    LEFT JOIN users u ON r.user_id = u.user_id
    LEFT JOIN LATERAL (
        SELECT status FROM attendance
        WHERE student_id = r.user_id AND date = r.date
        ORDER BY attendance_id DESC
        LIMIT 1
    ) a ON TRUE
    WHERE 1=1
"""


class ReportFilters(BaseModel):
    """Optional report filters; a None field adds no condition."""
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    role: Optional[str] = None
    course: Optional[str] = None
    status: Optional[str] = None
    student_name: Optional[str] = None


def build_report_query(filters: ReportFilters) -> Tuple[str, List[Any]]:
    """
    Builds the report statement, appending one numbered placeholder per present filter.
    Returns the SQL text and its parameters in placeholder order.
    """
    query = _REPORT_SELECT
    params: List[Any] = []

    def add(condition: str, value: Any):
        nonlocal query
        params.append(value)
        query += f" AND {condition.format(n=len(params))}"

    if filters.start_date:
        add("r.date >= ${n}", filters.start_date)
    if filters.end_date:
        add("r.date <= ${n}", filters.end_date)
    if filters.role:
        add("u.role = ${n}", filters.role)
    if filters.course:
        add("c.course_name = ${n}", filters.course)
    if filters.status:
        add("a.status = ${n}", filters.status)
    if filters.student_name:
        add("s.name ILIKE ${n}", f"%{filters.student_name}%")

    query += " ORDER BY r.date DESC, r.report_id DESC;"
    return query, params


class ReportDBClient(AsyncPostgresClient):
    """Queries over the 'reports' table."""

    async def get_reports(self, filters: ReportFilters) -> List[Report]:
        query, params = build_report_query(filters)
        async with self._pool.acquire() as connection:
            records = await connection.fetch(query, *params)
            return [Report(**record) for record in records]
