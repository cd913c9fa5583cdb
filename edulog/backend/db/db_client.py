import logging
from pathlib import Path
import asyncpg

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).with_name("schema.sql")


def rows_affected(status: str) -> int:
    """Turns an asyncpg command tag such as 'UPDATE 1' or 'INSERT 0 1' into a row count."""
    try:
        return int(str(status).split()[-1])
    except (ValueError, IndexError):
        return 0


async def apply_schema(pool: asyncpg.Pool):
    """Creates every table and index that does not exist yet."""
    ddl = SCHEMA_PATH.read_text(encoding="utf-8")
    async with pool.acquire() as connection:
        await connection.execute(ddl)
    logger.info("Database schema applied.")


class AsyncPostgresClient:
    """
    Base class of the per-entity database clients.

    Each method acquires its own connection from the shared pool, runs one
    parameterized statement and releases the connection. asyncpg errors are
    passed up unmodified; the service layer decides what they mean.
    """
    def __init__(self, pool: asyncpg.Pool):
        self._pool = pool
