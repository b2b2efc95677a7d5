"""
Error types raised by the routes and the handlers that turn them into
``{"message": ...}`` responses.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "Internal server error"
INVALID_REQUEST_MESSAGE = "Invalid request"


class ValidationError(Exception):
    """Client request is missing required fields."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InternalError(Exception):
    """Store or unexpected fault; the detail is logged, never returned."""

    status_code = 500

    def __init__(self, operation: str):
        super().__init__(operation)
        self.operation = operation


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError):
        return JSONResponse(
            status_code=exc.status_code, content={"message": exc.message}
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ):
        # Wrong-typed fields and malformed ids share the 400 envelope.
        logger.info(
            "Rejected %s %s: %s", request.method, request.url.path, exc.errors()
        )
        return JSONResponse(
            status_code=400, content={"message": INVALID_REQUEST_MESSAGE}
        )

    @app.exception_handler(InternalError)
    async def internal_error_handler(request: Request, exc: InternalError):
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": INTERNAL_ERROR_MESSAGE},
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.error(
            "Unhandled exception on %s %s",
            request.method,
            request.url.path,
            exc_info=exc,
        )
        return JSONResponse(
            status_code=500, content={"message": INTERNAL_ERROR_MESSAGE}
        )
