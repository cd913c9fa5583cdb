import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List

from ..db.dashboard_client import DashboardDBClient
from ..tools.clock import local_today

logger = logging.getLogger(__name__)


def attendance_percentage(present: int, total: int) -> int:
    """Whole-number share of present students; 0 when there are no students."""
    if total <= 0:
        return 0
    # Integer form of round-half-up, so 12.5 becomes 13.
    return (present * 200 + total) // (2 * total)


@dataclass
class DashboardData:
    total_students: int
    attendance_today: int
    absent_students: int
    department_stats: List[Dict[str, Any]] = field(default_factory=list)
    recent_logs: List[Dict[str, Any]] = field(default_factory=list)


class DashboardService:
    """Aggregates the admin dashboard from independent read queries."""

    def __init__(self, dashboard_client: DashboardDBClient):
        self.dashboard_client = dashboard_client

    async def get_dashboard(self) -> DashboardData:
        today = local_today()
        # The reads do not depend on each other; each takes its own pooled connection.
        total, present, absent, departments, logs = await asyncio.gather(
            self.dashboard_client.total_students(),
            self.dashboard_client.present_today(today),
            self.dashboard_client.absent_today(today),
            self.dashboard_client.department_stats(),
            self.dashboard_client.recent_logs(today),
        )
        logger.info(f"Dashboard for {today}: {present}/{total} present, {absent} absent.")
        return DashboardData(
            total_students=total,
            attendance_today=attendance_percentage(present, total),
            absent_students=absent,
            department_stats=[dict(row) for row in departments],
            recent_logs=[dict(row) for row in logs],
        )
