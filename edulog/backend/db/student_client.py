import logging
from datetime import date
from typing import List, Optional
import asyncpg

from .db_client import AsyncPostgresClient, rows_affected
from ..models.db_models import Student

logger = logging.getLogger(__name__)


class StudentDBClient(AsyncPostgresClient):
    """Queries over the 'students' table and the per-student attendance views."""

    # ===== CRUD =====

    async def get_all(self) -> List[Student]:
        query = """
            SELECT s.*, c.course_name
            FROM students s
            LEFT JOIN courses c ON s.course_id = c.course_id
            ORDER BY s.name;
        """
        async with self._pool.acquire() as connection:
            records = await connection.fetch(query)
            return [Student(**record) for record in records]

    async def get_by_id(self, student_id: int) -> Optional[Student]:
        query = """
            SELECT s.*, c.course_name
            FROM students s
            LEFT JOIN courses c ON s.course_id = c.course_id
            WHERE s.student_id = $1;
        """
        async with self._pool.acquire() as connection:
            record = await connection.fetchrow(query, student_id)
            return Student(**record) if record else None

    async def get_by_user_id(self, user_id: int) -> Optional[Student]:
        """Resolves the student row linked to a login account."""
        query = """
            SELECT s.*, c.course_name
            FROM users u
            JOIN students s ON s.student_id = u.student_id
            LEFT JOIN courses c ON s.course_id = c.course_id
            WHERE u.user_id = $1;
        """
        async with self._pool.acquire() as connection:
            record = await connection.fetchrow(query, user_id)
            return Student(**record) if record else None

    async def create(self, name: str, email: str, department: str, course_id: Optional[int],
                     year_of_study: int, phone: Optional[str] = None) -> Student:
        query = """
            INSERT INTO students (name, email, department, course_id, year_of_study, phone)
            VALUES ($1, $2, $3, $4, $5, $6)
            RETURNING *;
        """
        async with self._pool.acquire() as connection:
            record = await connection.fetchrow(query, name, email, department, course_id, year_of_study, phone)
            return Student(**record)

    async def update(self, student_id: int, name: str, email: str, department: str,
                     course_id: Optional[int], year_of_study: int, phone: Optional[str] = None) -> int:
        query = """
            UPDATE students
            SET name = $1, email = $2, department = $3, course_id = $4, year_of_study = $5, phone = $6
            WHERE student_id = $7;
        """
        async with self._pool.acquire() as connection:
            status = await connection.execute(query, name, email, department, course_id, year_of_study, phone, student_id)
            return rows_affected(status)

    async def delete(self, student_id: int) -> int:
        async with self._pool.acquire() as connection:
            status = await connection.execute("DELETE FROM students WHERE student_id = $1;", student_id)
            return rows_affected(status)

    async def update_profile(self, student_id: int, user_id: int, email: str, phone: Optional[str],
                             password_hash: Optional[str] = None) -> int:
        """
        Updates the student's contact details and, when given, the linked account's password.
        Runs as a single transaction.
        """
        async with self._pool.acquire() as connection:
            async with connection.transaction():
                if password_hash is not None:
                    await connection.execute(
                        "UPDATE users SET password = $1 WHERE user_id = $2;", password_hash, user_id
                    )
                status = await connection.execute(
                    "UPDATE students SET email = $1, phone = $2 WHERE student_id = $3;",
                    email, phone, student_id
                )
                return rows_affected(status)

    # ===== Attendance views =====

    async def get_attendance_stats(self, student_id: int) -> asyncpg.Record:
        query = """
            SELECT
                COUNT(*) AS total_sessions,
                COALESCE(SUM(CASE WHEN status = 'Present' THEN 1 ELSE 0 END), 0) AS present_count,
                COALESCE(SUM(CASE WHEN status = 'Absent' THEN 1 ELSE 0 END), 0) AS absent_count,
                COALESCE(SUM(CASE WHEN status = 'Late' THEN 1 ELSE 0 END), 0) AS late_count,
                COALESCE(ROUND(100.0 * SUM(CASE WHEN status = 'Present' THEN 1 ELSE 0 END)
                               / NULLIF(COUNT(*), 0), 2), 0)::float8 AS attendance_percentage
            FROM attendance
            WHERE student_id = $1;
        """
        async with self._pool.acquire() as connection:
            return await connection.fetchrow(query, student_id)

    async def get_streak_and_trend(self, student_id: int, today: date) -> asyncpg.Record:
        """
        current_streak: consecutive Present rows counting back from the newest one.
        attendance_trend: present rate of the last 30 days minus the 30 days before, in points.
        """
        query = """
            WITH ordered AS (
                SELECT status,
                       ROW_NUMBER() OVER (
                           ORDER BY date DESC, clock_in_time DESC NULLS LAST, attendance_id DESC
                       ) AS rn
                FROM attendance
                WHERE student_id = $1
            ),
            first_break AS (
                SELECT MIN(rn) AS rn FROM ordered WHERE status <> 'Present'
            ),
            windows AS (
                SELECT
                    100.0 * SUM(CASE WHEN date > $2::date - 30 AND status = 'Present' THEN 1 ELSE 0 END)
                        / NULLIF(SUM(CASE WHEN date > $2::date - 30 THEN 1 ELSE 0 END), 0) AS recent_rate,
                    100.0 * SUM(CASE WHEN date <= $2::date - 30 AND status = 'Present' THEN 1 ELSE 0 END)
                        / NULLIF(SUM(CASE WHEN date <= $2::date - 30 THEN 1 ELSE 0 END), 0) AS previous_rate
                FROM attendance
                WHERE student_id = $1 AND date > $2::date - 60 AND date <= $2::date
            )
            SELECT
                COALESCE((SELECT rn FROM first_break) - 1, (SELECT COUNT(*) FROM ordered))::int AS current_streak,
                ROUND(COALESCE(w.recent_rate, 0) - COALESCE(w.previous_rate, 0), 2)::float8 AS attendance_trend
            FROM windows w;
        """
        async with self._pool.acquire() as connection:
            return await connection.fetchrow(query, student_id, today)

    async def get_upcoming_sessions(self, student_id: int, today: date) -> List[asyncpg.Record]:
        """Scheduled sessions from today on, for courses the student is actively enrolled in."""
        query = """
            SELECT
                s.session_id,
                s.session_date,
                s.start_time,
                s.end_time,
                s.location,
                s.status,
                c.course_id,
                c.course_name,
                c.course_code,
                t.name AS teacher_name,
                COALESCE(a.status, 'Not Recorded') AS attendance_status
            FROM sessions s
            JOIN courses c ON s.course_id = c.course_id
            JOIN teachers t ON s.teacher_id = t.teacher_id
            JOIN student_courses sc ON sc.course_id = c.course_id
            LEFT JOIN attendance a ON a.session_id = s.session_id AND a.student_id = $1
            WHERE sc.student_id = $1
              AND sc.status = 'active'
              AND s.session_date >= $2
              AND s.status = 'scheduled'
            ORDER BY s.session_date ASC, s.start_time ASC;
        """
        async with self._pool.acquire() as connection:
            return await connection.fetch(query, student_id, today)

    async def get_attendance_history(self, student_id: int, limit: int, offset: int) -> List[asyncpg.Record]:
        query = """
            SELECT
                a.attendance_id,
                a.session_id,
                a.date,
                a.status,
                a.clock_in_time,
                a.clock_out_time,
                s.session_date,
                s.start_time,
                s.end_time,
                c.course_name,
                c.course_code,
                t.name AS teacher_name
            FROM attendance a
            LEFT JOIN sessions s ON a.session_id = s.session_id
            LEFT JOIN courses c ON s.course_id = c.course_id
            LEFT JOIN teachers t ON s.teacher_id = t.teacher_id
            WHERE a.student_id = $1
            ORDER BY COALESCE(s.session_date, a.date) DESC, a.attendance_id DESC
            LIMIT $2 OFFSET $3;
        """
        async with self._pool.acquire() as connection:
            return await connection.fetch(query, student_id, limit, offset)

    async def count_attendance(self, student_id: int) -> int:
        async with self._pool.acquire() as connection:
            return await connection.fetchval("SELECT COUNT(*) FROM attendance WHERE student_id = $1;", student_id)

    # ===== Aggregates =====

    async def department_counts(self) -> List[asyncpg.Record]:
        query = """
            SELECT department, COUNT(*) AS student_count
            FROM students
            GROUP BY department
            ORDER BY department;
        """
        async with self._pool.acquire() as connection:
            return await connection.fetch(query)

    async def get_percentages(self) -> List[asyncpg.Record]:
        """Per-student attendance percentage computed from the attendance rows."""
        query = """
            SELECT
                s.student_id,
                s.name,
                COUNT(a.attendance_id) AS total_classes,
                COALESCE(SUM(CASE WHEN a.status = 'Present' THEN 1 ELSE 0 END), 0) AS classes_attended,
                COALESCE(ROUND(100.0 * SUM(CASE WHEN a.status = 'Present' THEN 1 ELSE 0 END)
                               / NULLIF(COUNT(a.attendance_id), 0), 2), 0)::float8 AS attendance_percentage
            FROM students s
            LEFT JOIN attendance a ON a.student_id = s.student_id
            GROUP BY s.student_id, s.name
            ORDER BY s.name;
        """
        async with self._pool.acquire() as connection:
            return await connection.fetch(query)
