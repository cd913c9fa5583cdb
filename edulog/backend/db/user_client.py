import logging
from typing import Optional
import asyncpg

from .db_client import AsyncPostgresClient, rows_affected
from ..models.db_models import User

logger = logging.getLogger(__name__)


class UserDBClient(AsyncPostgresClient):
    """Queries over the 'users' table."""

    async def get_by_username(self, username: str) -> Optional[User]:
        query = "SELECT * FROM users WHERE username = $1;"
        async with self._pool.acquire() as connection:
            record = await connection.fetchrow(query, username)
            return User(**record) if record else None

    async def get_by_id(self, user_id: int) -> Optional[User]:
        query = "SELECT * FROM users WHERE user_id = $1;"
        async with self._pool.acquire() as connection:
            record = await connection.fetchrow(query, user_id)
            return User(**record) if record else None

    async def create_user(self, username: str, email: str, role: str, password_hash: str,
                          student_id: Optional[int] = None) -> User:
        """Inserts a new account. A duplicate username or email raises UniqueViolationError."""
        query = """
            INSERT INTO users (username, email, role, password, student_id)
            VALUES ($1, $2, $3, $4, $5)
            RETURNING *;
        """
        async with self._pool.acquire() as connection:
            record = await connection.fetchrow(query, username, email, role, password_hash, student_id)
            return User(**record)

    async def get_admin_profile(self, user_id: int) -> Optional[asyncpg.Record]:
        query = """
            SELECT user_id, username AS name, email, role, created_at
            FROM users
            WHERE user_id = $1 AND role = 'admin';
        """
        async with self._pool.acquire() as connection:
            return await connection.fetchrow(query, user_id)

    async def update_email_and_password(self, user_id: int, email: str, password_hash: Optional[str] = None) -> int:
        """
        Updates the account email and, when given, the password hash.
        Both statements run in one transaction so they land together or not at all.
        """
        async with self._pool.acquire() as connection:
            async with connection.transaction():
                if password_hash is not None:
                    await connection.execute(
                        "UPDATE users SET password = $1 WHERE user_id = $2;", password_hash, user_id
                    )
                status = await connection.execute(
                    "UPDATE users SET email = $1 WHERE user_id = $2;", email, user_id
                )
                return rows_affected(status)
