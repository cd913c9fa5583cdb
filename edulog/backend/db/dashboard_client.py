import logging
from datetime import date
from typing import List
import asyncpg

from .db_client import AsyncPostgresClient

logger = logging.getLogger(__name__)


class DashboardDBClient(AsyncPostgresClient):
    """
    The independent read queries behind the admin dashboard.
    Each one acquires its own connection so they can run concurrently.
    """

    async def total_students(self) -> int:
        async with self._pool.acquire() as connection:
            return await connection.fetchval("SELECT COUNT(*) FROM students;")

    async def present_today(self, today: date) -> int:
        """Distinct students with at least one Present row today."""
        query = "SELECT COUNT(DISTINCT student_id) FROM attendance WHERE date = $1 AND status = 'Present';"
        async with self._pool.acquire() as connection:
            return await connection.fetchval(query, today)

    async def absent_today(self, today: date) -> int:
        """Students without any Present row today."""
        query = """
            SELECT COUNT(*)
            FROM students s
            WHERE NOT EXISTS (
                SELECT 1 FROM attendance a
                WHERE a.student_id = s.student_id AND a.date = $1 AND a.status = 'Present'
            );
        """
        async with self._pool.acquire() as connection:
            return await connection.fetchval(query, today)

    async def absent_marked_today(self, today: date) -> int:
        """Rows explicitly marked Absent today."""
        query = "SELECT COUNT(*) FROM attendance WHERE date = $1 AND status = 'Absent';"
        async with self._pool.acquire() as connection:
            return await connection.fetchval(query, today)

    async def department_stats(self) -> List[asyncpg.Record]:
        query = """
            SELECT department, COUNT(*) AS student_count
            FROM students
            GROUP BY department
            ORDER BY department;
        """
        async with self._pool.acquire() as connection:
            return await connection.fetch(query)

    async def recent_logs(self, today: date, limit: int = 5) -> List[asyncpg.Record]:
        query = """
            SELECT s.name, a.status, a.date, c.course_name
            FROM attendance a
            JOIN students s ON a.student_id = s.student_id
            LEFT JOIN sessions se ON a.session_id = se.session_id
            LEFT JOIN courses c ON c.course_id = COALESCE(se.course_id, s.course_id)
            WHERE a.date = $1
            ORDER BY a.clock_in_time DESC NULLS LAST, a.attendance_id DESC
            LIMIT $2;
        """
        async with self._pool.acquire() as connection:
            return await connection.fetch(query, today, limit)
