import asyncio
import logging
import sys
from typing import Any, Mapping
from urllib.parse import urlsplit, urlunsplit

import asyncpg

from app.clients.postgres import get_pg_connection
from app.clients.settings import PG_DSN, USERS_TABLE

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def mask_password(dsn: str) -> str:
    parts = urlsplit(dsn)
    if not parts.password:
        return dsn

    netloc = parts.netloc.replace(f":{parts.password}@", ":****@", 1)
    return urlunsplit(parts._replace(netloc=netloc))


async def check_database(conn: asyncpg.Connection) -> Mapping[str, Any]:
    """Connectivity check plus a look at the users table"""
    await conn.fetchval("SELECT 1")

    table_exists = await conn.fetchval(
        """
        SELECT EXISTS (
            SELECT 1 FROM information_schema.tables
            WHERE table_name = $1
        )
        """,
        USERS_TABLE,
    )

    row_count = None
    if table_exists:
        row_count = await conn.fetchval(f"SELECT COUNT(*) FROM {USERS_TABLE}")

    return {"table_exists": table_exists, "row_count": row_count}


async def main() -> int:
    logger.info(f"Database URL: {mask_password(PG_DSN)}")

    try:
        async with get_pg_connection() as conn:
            report = await check_database(conn)
    except (OSError, asyncpg.PostgresError) as e:
        logger.error(f"Database check failed: {e}")
        return 1

    if report["table_exists"]:
        logger.info(f"{USERS_TABLE} table has {report['row_count']} rows")
    else:
        logger.warning(f"{USERS_TABLE} table does not exist")

    logger.info("Database connection check completed successfully")
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
