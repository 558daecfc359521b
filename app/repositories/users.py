import logging
from dataclasses import dataclass
from typing import Any, List, Mapping, Optional, Sequence, Tuple

import asyncpg

from app.clients.settings import USERS_TABLE
from app.models.users import UserModel, UpdateUserRequest

logger = logging.getLogger(__name__)

USER_COLUMNS = "id, name, email, active, created_at"
UPDATABLE_COLUMNS = ("name", "email", "active")


def build_update_query(user_id: int, changes: Mapping[str, Any]) -> Tuple[str, List[Any]]:
    """UPDATE touching exactly the columns present in ``changes``.

    ``$1`` is always the user id, the new values follow in column order.
    """
    if not changes:
        raise ValueError("update needs at least one column")

    unknown = set(changes) - set(UPDATABLE_COLUMNS)
    if unknown:
        raise ValueError(f"columns not updatable: {', '.join(sorted(unknown))}")

    keys = [key for key in UPDATABLE_COLUMNS if key in changes]
    args: List[Any] = [user_id, *(changes[key] for key in keys)]

    fields_str = ", ".join([f"{key} = ${i + 2}" for i, key in enumerate(keys)])

    query = f"""
        UPDATE {USERS_TABLE}
        SET {fields_str}
        WHERE id = $1::INTEGER
        RETURNING {USER_COLUMNS}
    """

    return query, args


@dataclass(frozen=True)
class UserPostgresStorage:
    pool: asyncpg.Pool

    async def create(self, name: str, email: str) -> Mapping[str, Any]:
        query = f"""
            INSERT INTO {USERS_TABLE} (name, email)
            VALUES ($1, $2)
            RETURNING {USER_COLUMNS}
        """

        async with self.pool.acquire() as connection:
            return dict(await connection.fetchrow(query, name, email))

    async def select(self, id: int) -> Optional[Mapping[str, Any]]:
        query = f"""
            SELECT {USER_COLUMNS}
            FROM {USERS_TABLE}
            WHERE id = $1::INTEGER
            LIMIT 1
        """

        async with self.pool.acquire() as connection:
            row = await connection.fetchrow(query, id)
            return dict(row) if row else None

    async def select_many(self) -> Sequence[Mapping[str, Any]]:
        query = f"""
            SELECT {USER_COLUMNS}
            FROM {USERS_TABLE}
            ORDER BY created_at DESC
        """

        async with self.pool.acquire() as connection:
            rows = await connection.fetch(query)
            return [dict(row) for row in rows]

    async def update(self, id: int, **updates: Any) -> Optional[Mapping[str, Any]]:
        query, args = build_update_query(id, updates)

        async with self.pool.acquire() as connection:
            row = await connection.fetchrow(query, *args)
            return dict(row) if row else None

    async def delete(self, id: int) -> bool:
        query = f"""
            DELETE FROM {USERS_TABLE}
            WHERE id = $1::INTEGER
            RETURNING id
        """

        async with self.pool.acquire() as connection:
            deleted_id = await connection.fetchval(query, id)
            return deleted_id is not None


@dataclass(frozen=True)
class UserRepository:
    user_postgres_storage: UserPostgresStorage

    async def create(self, name: str, email: str) -> UserModel:
        raw_user = await self.user_postgres_storage.create(name, email)
        return UserModel(**raw_user)

    async def get(self, user_id: int) -> Optional[UserModel]:
        raw_user = await self.user_postgres_storage.select(user_id)
        return UserModel(**raw_user) if raw_user else None

    async def get_many(self) -> Sequence[UserModel]:
        return [UserModel(**raw_user) for raw_user in await self.user_postgres_storage.select_many()]

    async def update(self, user_id: int, changes: UpdateUserRequest) -> Optional[UserModel]:
        """Apply only the fields set on ``changes``; with none set, fetch the user as is."""
        updates = changes.changes()

        if not updates:
            logger.info(f"Empty update for user {user_id}, returning stored row")
            return await self.get(user_id)

        raw_user = await self.user_postgres_storage.update(user_id, **updates)
        return UserModel(**raw_user) if raw_user else None

    async def delete(self, user_id: int) -> bool:
        return await self.user_postgres_storage.delete(user_id)
