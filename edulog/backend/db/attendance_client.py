import logging
from datetime import date, datetime
from typing import List, Optional
import asyncpg

from .db_client import AsyncPostgresClient, rows_affected
from ..models.db_models import Attendance

logger = logging.getLogger(__name__)


class AttendanceDBClient(AsyncPostgresClient):
    """Queries over the 'attendance' table."""

    # ===== Clock in / clock out =====

    async def clock_in_day(self, student_id: int, day: date, clock_in_time: datetime) -> Attendance:
        """
        Records today's session-less attendance as Present.
        A second clock-in on the same day reopens the existing row instead of adding one.
        """
        query = """
            INSERT INTO attendance (student_id, session_id, date, status, clock_in_time)
            VALUES ($1, NULL, $2, 'Present', $3)
            ON CONFLICT (student_id, date) WHERE session_id IS NULL DO UPDATE SET
                clock_in_time = EXCLUDED.clock_in_time,
                clock_out_time = NULL
            RETURNING *;
        """
        async with self._pool.acquire() as connection:
            record = await connection.fetchrow(query, student_id, day, clock_in_time)
            return Attendance(**record)

    async def clock_out_day(self, student_id: int, day: date, clock_out_time: datetime) -> Optional[Attendance]:
        """Closes the open session-less row of the day. The status is left as recorded."""
        query = """
            UPDATE attendance
            SET clock_out_time = $3
            WHERE student_id = $1
              AND date = $2
              AND session_id IS NULL
              AND clock_out_time IS NULL
            RETURNING *;
        """
        async with self._pool.acquire() as connection:
            record = await connection.fetchrow(query, student_id, day, clock_out_time)
            return Attendance(**record) if record else None

    async def clock_in_session(self, student_id: int, session_id: str, day: date, clock_in_time: datetime) -> Attendance:
        """Marks the student Present for a session; repeating it only refreshes the clock-in time."""
        query = """
            INSERT INTO attendance (student_id, session_id, date, status, clock_in_time)
            VALUES ($1, $2, $3, 'Present', $4)
            ON CONFLICT (student_id, session_id) DO UPDATE SET
                clock_in_time = EXCLUDED.clock_in_time,
                status = EXCLUDED.status
            RETURNING *;
        """
        async with self._pool.acquire() as connection:
            record = await connection.fetchrow(query, student_id, session_id, day, clock_in_time)
            return Attendance(**record)

    # ===== CRUD =====

    async def get_all(self) -> List[Attendance]:
        query = "SELECT * FROM attendance ORDER BY date DESC, attendance_id DESC;"
        async with self._pool.acquire() as connection:
            records = await connection.fetch(query)
            return [Attendance(**record) for record in records]

    async def get_by_id(self, attendance_id: int) -> Optional[Attendance]:
        async with self._pool.acquire() as connection:
            record = await connection.fetchrow("SELECT * FROM attendance WHERE attendance_id = $1;", attendance_id)
            return Attendance(**record) if record else None

    async def get_by_student(self, student_id: int) -> List[Attendance]:
        query = "SELECT * FROM attendance WHERE student_id = $1 ORDER BY date DESC, attendance_id DESC;"
        async with self._pool.acquire() as connection:
            records = await connection.fetch(query, student_id)
            return [Attendance(**record) for record in records]

    async def create(self, student_id: int, session_id: Optional[str], day: date, status: str,
                     clock_in_time: Optional[datetime], clock_out_time: Optional[datetime]) -> Attendance:
        query = """
            INSERT INTO attendance (student_id, session_id, date, status, clock_in_time, clock_out_time)
            VALUES ($1, $2, $3, $4, $5, $6)
            RETURNING *;
        """
        async with self._pool.acquire() as connection:
            record = await connection.fetchrow(query, student_id, session_id, day, status, clock_in_time, clock_out_time)
            return Attendance(**record)

    async def update(self, attendance_id: int, student_id: int, session_id: Optional[str], day: date, status: str,
                     clock_in_time: Optional[datetime], clock_out_time: Optional[datetime]) -> int:
        query = """
            UPDATE attendance
            SET student_id = $1, session_id = $2, date = $3, status = $4, clock_in_time = $5, clock_out_time = $6
            WHERE attendance_id = $7;
        """
        async with self._pool.acquire() as connection:
            status_msg = await connection.execute(
                query, student_id, session_id, day, status, clock_in_time, clock_out_time, attendance_id
            )
            return rows_affected(status_msg)

    async def delete(self, attendance_id: int) -> int:
        async with self._pool.acquire() as connection:
            status = await connection.execute("DELETE FROM attendance WHERE attendance_id = $1;", attendance_id)
            return rows_affected(status)

    # ===== Aggregates =====

    async def get_stats(self) -> asyncpg.Record:
        query = """
            SELECT
                COUNT(*) FILTER (WHERE status = 'Present') AS present,
                COUNT(*) FILTER (WHERE status = 'Absent') AS absent,
                COUNT(*) FILTER (WHERE status = 'Late') AS late
            FROM attendance;
        """
        async with self._pool.acquire() as connection:
            return await connection.fetchrow(query)
