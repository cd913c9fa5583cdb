import logging
from datetime import date, time
from typing import List, Optional

from .db_client import AsyncPostgresClient, rows_affected
from ..models.db_models import Session

logger = logging.getLogger(__name__)

# Course and teacher columns every session read carries.
_SESSION_SELECT = """
    SELECT s.*, c.course_code, c.course_name, t.name AS teacher_name, t.email AS teacher_email
    FROM sessions s
    JOIN courses c ON s.course_id = c.course_id
    JOIN teachers t ON s.teacher_id = t.teacher_id
"""


class SessionDBClient(AsyncPostgresClient):
    """Queries over the 'sessions' table."""

    async def get_all(self) -> List[Session]:
        query = _SESSION_SELECT + " ORDER BY s.session_date DESC, s.start_time DESC;"
        async with self._pool.acquire() as connection:
            records = await connection.fetch(query)
            return [Session(**record) for record in records]

    async def get_by_id(self, session_id: str) -> Optional[Session]:
        query = _SESSION_SELECT + " WHERE s.session_id = $1;"
        async with self._pool.acquire() as connection:
            record = await connection.fetchrow(query, session_id)
            return Session(**record) if record else None

    async def get_by_teacher(self, teacher_id: int) -> List[Session]:
        query = _SESSION_SELECT + " WHERE s.teacher_id = $1 ORDER BY s.session_date DESC;"
        async with self._pool.acquire() as connection:
            records = await connection.fetch(query, teacher_id)
            return [Session(**record) for record in records]

    async def get_by_course(self, course_id: int) -> List[Session]:
        query = _SESSION_SELECT + " WHERE s.course_id = $1 ORDER BY s.session_date DESC;"
        async with self._pool.acquire() as connection:
            records = await connection.fetch(query, course_id)
            return [Session(**record) for record in records]

    async def create(self, session_id: str, course_id: int, teacher_id: int, session_date: date,
                     start_time: time, end_time: time, location: str, status: str) -> int:
        query = """
            INSERT INTO sessions (session_id, course_id, teacher_id, session_date, start_time, end_time, location, status)
            VALUES ($1, $2, $3, $4, $5, $6, $7, $8);
        """
        async with self._pool.acquire() as connection:
            status_msg = await connection.execute(
                query, session_id, course_id, teacher_id, session_date, start_time, end_time, location, status
            )
            return rows_affected(status_msg)

    async def update(self, session_id: str, course_id: int, teacher_id: int, session_date: date,
                     start_time: time, end_time: time, location: str, status: str) -> int:
        """Updates everything but the id; session ids are never regenerated."""
        query = """
            UPDATE sessions
            SET course_id = $1, teacher_id = $2, session_date = $3, start_time = $4,
                end_time = $5, location = $6, status = $7
            WHERE session_id = $8;
        """
        async with self._pool.acquire() as connection:
            status_msg = await connection.execute(
                query, course_id, teacher_id, session_date, start_time, end_time, location, status, session_id
            )
            return rows_affected(status_msg)

    async def delete(self, session_id: str) -> int:
        async with self._pool.acquire() as connection:
            status = await connection.execute("DELETE FROM sessions WHERE session_id = $1;", session_id)
            return rows_affected(status)
