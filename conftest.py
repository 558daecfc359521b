import asyncio
from contextlib import AsyncExitStack
from datetime import datetime, timezone
from typing import Generator
from unittest.mock import AsyncMock

import asyncpg
import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from httpx import ASGITransport, AsyncClient

from app.clients.postgres import get_pg_connection
from app.main import app
from app.models.users import UserModel
from app.repositories.users import UserRepository
from app.routers.utils import get_user_repository

CREATE_USERS_TABLE = """
    CREATE TABLE IF NOT EXISTS users (
        id SERIAL PRIMARY KEY,
        name VARCHAR(255) NOT NULL,
        email VARCHAR(255) NOT NULL UNIQUE,
        active BOOLEAN NOT NULL DEFAULT true,
        created_at TIMESTAMP WITH TIME ZONE NOT NULL DEFAULT NOW()
    )
"""


def make_user(**overrides) -> UserModel:
    values = dict(
        id=1,
        name="Jane Doe",
        email="jane@example.com",
        active=True,
        created_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
    )
    values.update(overrides)
    return UserModel(**values)


@pytest.fixture
def user_factory():
    return make_user


@pytest.fixture
def app_client() -> Generator[TestClient, None, None]:
    yield TestClient(app)


@pytest.fixture
def mock_user_repository():
    repository = AsyncMock(spec=UserRepository)
    app.dependency_overrides[get_user_repository] = lambda: repository
    yield repository
    app.dependency_overrides.pop(get_user_repository, None)


class MockPool:
    """Hands out one connection and counts checkouts that were not released"""

    def __init__(self, conn):
        self._conn = conn
        self.in_use = 0
        self.acquired = 0

    def acquire(self):
        pool = self

        class MockConnection:
            def __init__(self, conn):
                self._conn = conn

            async def __aenter__(self):
                pool.in_use += 1
                pool.acquired += 1
                return self._conn

            async def __aexit__(self, *args):
                pool.in_use -= 1

        return MockConnection(self._conn)


@pytest.fixture
def mock_connection():
    conn = AsyncMock()
    conn.fetchrow = AsyncMock(return_value=None)
    conn.fetch = AsyncMock(return_value=[])
    conn.fetchval = AsyncMock(return_value=None)
    return conn


@pytest.fixture
def mock_pool(mock_connection):
    return MockPool(mock_connection)


@pytest_asyncio.fixture
async def db_connection():
    stack = AsyncExitStack()
    try:
        conn = await stack.enter_async_context(get_pg_connection())
    except (OSError, asyncio.TimeoutError, asyncpg.PostgresError) as e:
        pytest.skip(f"PostgreSQL is not available: {e}")

    try:
        await conn.execute(CREATE_USERS_TABLE)
        await conn.execute("DELETE FROM users")

        yield conn

        await conn.execute("DELETE FROM users")
    finally:
        await stack.aclose()


@pytest.fixture
def db_pool(db_connection):
    return MockPool(db_connection)


@pytest_asyncio.fixture
async def async_client(db_pool):
    app.state.pg_pool = db_pool

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.state.pg_pool = None
