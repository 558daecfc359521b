import logging

from fastapi import Depends, Request

from app.errors import INVALID_USER_ID, BadRequestError
from app.repositories.users import UserPostgresStorage, UserRepository
from app.services.users import UserService

logger = logging.getLogger(__name__)

# users.id is a SERIAL (int4) column
MAX_USER_ID = 2_147_483_647


def parse_user_id(raw_user_id: str) -> int:
    if not raw_user_id.isascii() or not raw_user_id.isdigit():
        logger.warning(f"Rejected user id: {raw_user_id!r}")
        raise BadRequestError(INVALID_USER_ID)

    user_id = int(raw_user_id)
    if not 0 < user_id <= MAX_USER_ID:
        logger.warning(f"User id out of range: {raw_user_id!r}")
        raise BadRequestError(INVALID_USER_ID)

    return user_id


def get_user_repository(request: Request) -> UserRepository:
    return UserRepository(user_postgres_storage=UserPostgresStorage(pool=request.app.state.pg_pool))


def get_user_service(user_repo: UserRepository = Depends(get_user_repository)) -> UserService:
    return UserService(user_repo=user_repo)
