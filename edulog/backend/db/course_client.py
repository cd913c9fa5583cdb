import logging
from typing import List, Optional

from .db_client import AsyncPostgresClient, rows_affected
from ..models.db_models import Course

logger = logging.getLogger(__name__)


class CourseDBClient(AsyncPostgresClient):
    """Queries over the 'courses' table."""

    async def get_all(self) -> List[Course]:
        async with self._pool.acquire() as connection:
            records = await connection.fetch("SELECT * FROM courses ORDER BY course_name ASC;")
            return [Course(**record) for record in records]

    async def get_by_id(self, course_id: int) -> Optional[Course]:
        async with self._pool.acquire() as connection:
            record = await connection.fetchrow("SELECT * FROM courses WHERE course_id = $1;", course_id)
            return Course(**record) if record else None

    async def get_by_code(self, course_code: str) -> Optional[Course]:
        async with self._pool.acquire() as connection:
            record = await connection.fetchrow("SELECT * FROM courses WHERE course_code = $1;", course_code)
            return Course(**record) if record else None

    async def code_exists(self, course_code: str) -> bool:
        async with self._pool.acquire() as connection:
            return await connection.fetchval(
                "SELECT EXISTS (SELECT 1 FROM courses WHERE course_code = $1);", course_code
            )

    async def create(self, course_code: str, course_name: str, department: str) -> Course:
        query = """
            INSERT INTO courses (course_code, course_name, department)
            VALUES ($1, $2, $3)
            RETURNING *;
        """
        async with self._pool.acquire() as connection:
            record = await connection.fetchrow(query, course_code, course_name, department)
            return Course(**record)

    async def update(self, course_id: int, course_code: str, course_name: str, department: str) -> int:
        query = "UPDATE courses SET course_code = $1, course_name = $2, department = $3 WHERE course_id = $4;"
        async with self._pool.acquire() as connection:
            status = await connection.execute(query, course_code, course_name, department, course_id)
            return rows_affected(status)

    async def delete(self, course_id: int) -> int:
        """Raises ForeignKeyViolationError while sessions still reference the course."""
        async with self._pool.acquire() as connection:
            status = await connection.execute("DELETE FROM courses WHERE course_id = $1;", course_id)
            return rows_affected(status)

    async def search(self, term: str) -> List[Course]:
        query = """
            SELECT * FROM courses
            WHERE course_name ILIKE $1 OR course_code ILIKE $1 OR department ILIKE $1
            ORDER BY course_name ASC;
        """
        async with self._pool.acquire() as connection:
            records = await connection.fetch(query, f"%{term}%")
            return [Course(**record) for record in records]

    async def get_by_department(self, department: str) -> List[Course]:
        query = "SELECT * FROM courses WHERE department = $1 ORDER BY course_name ASC;"
        async with self._pool.acquire() as connection:
            records = await connection.fetch(query, department)
            return [Course(**record) for record in records]
