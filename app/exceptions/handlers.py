import logging
from typing import Mapping, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.errors import AppError, InternalError, NotFoundError
from app.models.users import ErrorResponse

logger = logging.getLogger(__name__)


def error_response(
    status_code: int,
    message: str,
    headers: Optional[Mapping[str, str]] = None,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(message=message).model_dump(),
        headers=headers,
    )


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    # internal failures are logged with their traceback when classified
    if isinstance(exc, NotFoundError):
        logger.info(f"Not found: {exc.message}")
    elif not isinstance(exc, InternalError):
        logger.warning(f"Bad request: {exc.message}")

    return error_response(exc.status_code, exc.message)


def _error_field(error: dict) -> str:
    if error["type"] == "json_invalid":
        return "body"
    return ".".join(str(part) for part in error["loc"] if part != "body") or "body"


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    first_errors = {}
    for error in exc.errors():
        first_errors.setdefault(_error_field(error), error["msg"])

    message = "Validation errors: " + ", ".join(
        f"{field}: {msg}" for field, msg in first_errors.items()
    )
    logger.warning(f"Bad request: {message}")

    return error_response(status.HTTP_400_BAD_REQUEST, message)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return error_response(exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"Unhandled exception on {request.method} {request.url.path}: {exc!r}", exc_info=exc)
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, global_exception_handler)
