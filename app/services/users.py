import logging
from dataclasses import dataclass
from typing import Sequence

from app.errors import AppError, ErrorKind, UserNotFoundError, ValidationFailed, classify
from app.models.users import CreateUserRequest, UpdateUserRequest, UserModel
from app.repositories.users import UserRepository
from app.validation import validate_create, validate_update

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UserService:
    user_repo: UserRepository

    async def register(self, data: CreateUserRequest) -> UserModel:
        logger.info(f"Creating new user: {data.email}")
        try:
            result = validate_create(data)
            if not result.is_valid:
                raise ValidationFailed(result)

            user = await self.user_repo.create(data.name, data.email)
        except Exception as e:
            raise self._to_app_error(e, "Failed to create user") from e

        logger.info(f"User created successfully with ID: {user.id}")
        return user

    async def get(self, user_id: int) -> UserModel:
        logger.info(f"Getting user by ID: {user_id}")
        try:
            user = await self.user_repo.get(user_id)
            if user is None:
                raise UserNotFoundError()
        except Exception as e:
            raise self._to_app_error(e, "Failed to get user") from e

        return user

    async def get_many(self) -> Sequence[UserModel]:
        try:
            users = await self.user_repo.get_many()
        except Exception as e:
            raise self._to_app_error(e, "Failed to list users") from e

        logger.info(f"Retrieved {len(users)} users")
        return users

    async def update(self, user_id: int, data: UpdateUserRequest) -> UserModel:
        logger.info(f"Updating user ID: {user_id}")
        try:
            result = validate_update(data)
            if not result.is_valid:
                raise ValidationFailed(result)

            user = await self.user_repo.update(user_id, data)
            if user is None:
                raise UserNotFoundError()
        except Exception as e:
            raise self._to_app_error(e, "Failed to update user") from e

        logger.info(f"User updated successfully: {user.id}")
        return user

    async def delete(self, user_id: int) -> None:
        logger.info(f"Deleting user ID: {user_id}")
        try:
            deleted = await self.user_repo.delete(user_id)
            if not deleted:
                raise UserNotFoundError()
        except Exception as e:
            raise self._to_app_error(e, "Failed to delete user") from e

        logger.info(f"User deleted successfully: ID {user_id}")

    @staticmethod
    def _to_app_error(exc: Exception, fallback_message: str) -> AppError:
        classified = classify(exc, fallback_message)
        if classified.kind is not ErrorKind.INTERNAL:
            logger.warning(f"{classified.kind.value}: {classified.message}")
        return classified.to_exception()
