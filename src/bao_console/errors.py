"""Error taxonomy and the gateway's ``{"error": message}`` envelope."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class ConsoleError(Exception):
    """Base error; carries the HTTP status the gateway answers with."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(ConsoleError):
    """A required request field is missing."""

    status_code = status.HTTP_400_BAD_REQUEST


class AuthError(ConsoleError):
    """Missing caller token, or credentials the upstream rejected."""

    status_code = status.HTTP_401_UNAUTHORIZED


class UpstreamError(ConsoleError):
    """The secrets server answered with a non-2xx status."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, upstream_status: int | None = None) -> None:
        super().__init__(message)
        self.upstream_status = upstream_status


def error_response(status_code: int, message: str, **extra: object) -> JSONResponse:
    """Build the gateway error envelope."""
    return JSONResponse(status_code=status_code, content={"error": message, **extra})


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(ConsoleError)
    async def console_error_handler(request: Request, exc: ConsoleError) -> JSONResponse:
        logger.warning(
            "%s %s -> %d: %s", request.method, request.url.path, exc.status_code, exc.message
        )
        return error_response(exc.status_code, exc.message)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error"
        )
