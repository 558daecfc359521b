from contextlib import asynccontextmanager
from typing import AsyncGenerator

import asyncpg

from app.clients import settings


async def create_pg_pool() -> asyncpg.Pool:
    return await asyncpg.create_pool(
        settings.PG_DSN,
        min_size=settings.PG_POOL_MIN_SIZE,
        max_size=settings.PG_POOL_MAX_SIZE,
    )


@asynccontextmanager
async def get_pg_connection() -> AsyncGenerator[asyncpg.Connection, None]:
    """Single connection outside the application pool (scripts, tests)."""
    connection: asyncpg.Connection = await asyncpg.connect(settings.PG_DSN)

    try:
        yield connection
    finally:
        await connection.close()
