"""Exception → JSON error response mapping, registered on the FastAPI app."""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from jobmonitor.core.errors import AuthError, UserServiceError
from jobmonitor.schemas.common import ErrorResponse

logger = logging.getLogger(__name__)


def error_response(
    status: int,
    error: str,
    message: str,
    path: str,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    body = ErrorResponse(status=status, error=error, message=message, path=path)
    return JSONResponse(status_code=status, content=body.model_dump(), headers=headers)


def auth_error_response(exc: AuthError, path: str) -> JSONResponse:
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return error_response(exc.status_code, exc.error, exc.message, path, headers=headers)


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(AuthError)
    async def handle_auth_error(request: Request, exc: AuthError) -> JSONResponse:
        return auth_error_response(exc, request.url.path)

    @app.exception_handler(UserServiceError)
    async def handle_user_service_error(request: Request, exc: UserServiceError) -> JSONResponse:
        return error_response(exc.status_code, exc.error, exc.message, request.url.path)

    # Catch-all: log with traceback, never leak internals to the client
    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(
            "Unhandled error on %s %s", request.method, request.url.path, exc_info=exc
        )
        return error_response(
            500, "Internal Server Error", "An unexpected error occurred", request.url.path
        )
