import logging
from typing import List, Optional

from .db_client import AsyncPostgresClient, rows_affected
from ..models.db_models import Teacher

logger = logging.getLogger(__name__)


class TeacherDBClient(AsyncPostgresClient):
    """Queries over the 'teachers' table."""

    async def get_all(self) -> List[Teacher]:
        async with self._pool.acquire() as connection:
            records = await connection.fetch("SELECT * FROM teachers ORDER BY name ASC;")
            return [Teacher(**record) for record in records]

    async def get_by_id(self, teacher_id: int) -> Optional[Teacher]:
        async with self._pool.acquire() as connection:
            record = await connection.fetchrow("SELECT * FROM teachers WHERE teacher_id = $1;", teacher_id)
            return Teacher(**record) if record else None

    async def get_by_email(self, email: str) -> Optional[Teacher]:
        async with self._pool.acquire() as connection:
            record = await connection.fetchrow("SELECT * FROM teachers WHERE email = $1;", email)
            return Teacher(**record) if record else None

    async def create(self, name: str, email: str, department: str) -> Teacher:
        query = """
            INSERT INTO teachers (name, email, department)
            VALUES ($1, $2, $3)
            RETURNING *;
        """
        async with self._pool.acquire() as connection:
            record = await connection.fetchrow(query, name, email, department)
            return Teacher(**record)

    async def update(self, teacher_id: int, name: str, email: str, department: str) -> int:
        query = "UPDATE teachers SET name = $1, email = $2, department = $3 WHERE teacher_id = $4;"
        async with self._pool.acquire() as connection:
            status = await connection.execute(query, name, email, department, teacher_id)
            return rows_affected(status)

    async def delete(self, teacher_id: int) -> int:
        async with self._pool.acquire() as connection:
            status = await connection.execute("DELETE FROM teachers WHERE teacher_id = $1;", teacher_id)
            return rows_affected(status)

    async def search(self, term: str) -> List[Teacher]:
        """Case-insensitive match on name, email or department."""
        query = """
            SELECT * FROM teachers
            WHERE name ILIKE $1 OR email ILIKE $1 OR department ILIKE $1
            ORDER BY name ASC;
        """
        async with self._pool.acquire() as connection:
            records = await connection.fetch(query, f"%{term}%")
            return [Teacher(**record) for record in records]
