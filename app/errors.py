import enum
import logging
from dataclasses import dataclass

import asyncpg
from fastapi import status

from app.validation import ValidationResult

logger = logging.getLogger(__name__)

EMAIL_EXISTS = "Email address already exists"
USER_NOT_FOUND = "User not found"
INVALID_USER_ID = "Invalid user ID format"

_UNIQUE_VIOLATION_MARKERS = ("duplicate key", "unique constraint")


class UserNotFoundError(Exception):
    pass


class ValidationFailed(Exception):
    def __init__(self, result: ValidationResult):
        super().__init__(result.message)
        self.result = result


class AppError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class BadRequestError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND


class InternalError(AppError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class ErrorKind(enum.Enum):
    BAD_REQUEST = "bad_request"
    NOT_FOUND = "not_found"
    INTERNAL = "internal"


_ERRORS_BY_KIND = {
    ErrorKind.BAD_REQUEST: BadRequestError,
    ErrorKind.NOT_FOUND: NotFoundError,
    ErrorKind.INTERNAL: InternalError,
}


@dataclass(frozen=True)
class ClassifiedError:
    kind: ErrorKind
    message: str

    def to_exception(self) -> AppError:
        return _ERRORS_BY_KIND[self.kind](self.message)


def is_unique_violation(exc: BaseException) -> bool:
    if isinstance(exc, asyncpg.UniqueViolationError):
        return True
    text = str(exc)
    return any(marker in text for marker in _UNIQUE_VIOLATION_MARKERS)


def classify(exc: BaseException, fallback_message: str) -> ClassifiedError:
    """Map a failure to BadRequest / NotFound / Internal.

    Any unique violation is reported as a duplicate email: email is the only
    unique column of the users table.
    """
    if isinstance(exc, AppError):
        return ClassifiedError(_kind_of(exc), exc.message)

    if isinstance(exc, ValidationFailed):
        return ClassifiedError(ErrorKind.BAD_REQUEST, exc.result.message)

    if isinstance(exc, UserNotFoundError):
        return ClassifiedError(ErrorKind.NOT_FOUND, USER_NOT_FOUND)

    if is_unique_violation(exc):
        return ClassifiedError(ErrorKind.BAD_REQUEST, EMAIL_EXISTS)

    logger.error(f"{fallback_message}: {exc!r}", exc_info=exc)
    return ClassifiedError(ErrorKind.INTERNAL, fallback_message)


def _kind_of(exc: AppError) -> ErrorKind:
    for kind, error_cls in _ERRORS_BY_KIND.items():
        if isinstance(exc, error_cls):
            return kind
    return ErrorKind.INTERNAL
