import logging
from typing import List

from .db_client import AsyncPostgresClient, rows_affected
from ..models.db_models import Course

logger = logging.getLogger(__name__)


class EnrollmentDBClient(AsyncPostgresClient):
    """Queries over the 'student_courses' table."""

    async def enroll(self, student_id: int, course_id: int) -> int:
        """Creates the enrollment, or reactivates a dropped one for the same pair."""
        query = """
            INSERT INTO student_courses (student_id, course_id, enrollment_date, status)
            VALUES ($1, $2, CURRENT_DATE, 'active')
            ON CONFLICT (student_id, course_id) DO UPDATE SET
                status = 'active',
                enrollment_date = EXCLUDED.enrollment_date;
        """
        async with self._pool.acquire() as connection:
            status = await connection.execute(query, student_id, course_id)
            return rows_affected(status)

    async def is_enrolled(self, student_id: int, course_id: int) -> bool:
        query = """
            SELECT EXISTS (
                SELECT 1 FROM student_courses
                WHERE student_id = $1 AND course_id = $2 AND status = 'active'
            );
        """
        async with self._pool.acquire() as connection:
            return await connection.fetchval(query, student_id, course_id)

    async def get_enrolled_courses(self, student_id: int) -> List[dict]:
        query = """
            SELECT c.*, sc.enrollment_date, sc.status
            FROM student_courses sc
            JOIN courses c ON sc.course_id = c.course_id
            WHERE sc.student_id = $1 AND sc.status = 'active'
            ORDER BY c.course_name ASC;
        """
        async with self._pool.acquire() as connection:
            records = await connection.fetch(query, student_id)
            return [dict(record) for record in records]

    async def get_available_courses(self, student_id: int) -> List[Course]:
        """Courses the student is not actively enrolled in."""
        query = """
            SELECT c.*
            FROM courses c
            WHERE c.course_id NOT IN (
                SELECT course_id FROM student_courses
                WHERE student_id = $1 AND status = 'active'
            )
            ORDER BY c.course_name ASC;
        """
        async with self._pool.acquire() as connection:
            records = await connection.fetch(query, student_id)
            return [Course(**record) for record in records]

    async def update_status(self, student_id: int, course_id: int, status: str) -> int:
        query = "UPDATE student_courses SET status = $1 WHERE student_id = $2 AND course_id = $3;"
        async with self._pool.acquire() as connection:
            status_msg = await connection.execute(query, status, student_id, course_id)
            return rows_affected(status_msg)
