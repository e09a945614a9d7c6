# tarball_service/middleware/error_handlers.py
from __future__ import annotations
import logging
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from tarball_service.errors import TarballError
from tarball_service.middleware.correlation import get_correlation_id
from tarball_service.services.request_interpreter import INVALID_JSON

logger = logging.getLogger("tarball_service.errors")


def add_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(TarballError)
    async def tarball_error_handler(request: Request, exc: TarballError):
        # Full context (URLs, paths, upstream status) stays in the log; the caller gets the short message
        level = logging.ERROR if exc.status_code >= 500 else logging.WARNING
        logger.log(
            level,
            "%s %s failed: %s: %s | context=%s",
            request.method,
            request.url.path,
            type(exc).__name__,
            exc.detail,
            exc.context,
            extra={"correlation_id": get_correlation_id(request)},
        )
        return PlainTextResponse(exc.message, status_code=exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        logger.warning(
            "%s %s rejected: %s",
            request.method,
            request.url.path,
            exc.errors(),
            extra={"correlation_id": get_correlation_id(request)},
        )
        return PlainTextResponse(INVALID_JSON, status_code=400)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(_, exc: StarletteHTTPException):
        message = "Method not allowed" if exc.status_code == 405 else str(exc.detail)
        return PlainTextResponse(message, status_code=exc.status_code, headers=exc.headers)

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        logger.exception(
            "Unhandled exception during %s %s: %s",
            request.method,
            request.url.path,
            exc,
            extra={"correlation_id": get_correlation_id(request)},
        )
        return PlainTextResponse("Internal Server Error", status_code=500)
