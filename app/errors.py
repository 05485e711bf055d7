"""
Error types raised by the store and the catalog query engine, plus the
FastAPI handlers that turn them into JSON responses.

All domain errors derive from ``StoreError`` so a single handler can
render them with a uniform shape::

    {"error": {"code": "NOT_FOUND", "message": "Product not found"}}
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse


logger = logging.getLogger(__name__)


class StoreError(Exception):
    """Base class for recoverable, user-facing errors."""

    code = "STORE_ERROR"
    http_status = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_response(self) -> dict:
        return {"error": {"code": self.code, "message": self.message}}


class InvalidQueryParameter(StoreError):
    """Malformed or out-of-range query input (page, page size, price bounds...)."""

    code = "INVALID_QUERY_PARAMETER"
    http_status = status.HTTP_400_BAD_REQUEST


class NotFoundError(StoreError):
    code = "NOT_FOUND"
    http_status = status.HTTP_404_NOT_FOUND


class ConflictError(StoreError):
    code = "CONFLICT"
    http_status = status.HTTP_409_CONFLICT


class AuthenticationError(StoreError):
    code = "NOT_AUTHENTICATED"
    http_status = status.HTTP_401_UNAUTHORIZED


def register_error_handlers(app: FastAPI) -> None:
    """Install the domain, validation and catch-all handlers on ``app``."""

    @app.exception_handler(StoreError)
    async def store_error_handler(request: Request, exc: StoreError):
        logger.warning("%s on %s: %s", exc.code, request.url.path, exc.message)
        return JSONResponse(status_code=exc.http_status, content=exc.to_response())

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        logger.warning("Validation error on %s: %s", request.url.path, exc.errors())
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={
                "error": {
                    "code": "VALIDATION_ERROR",
                    "message": "Invalid request data",
                    "details": [
                        {
                            "field": ".".join(str(loc) for loc in e["loc"]),
                            "message": e["msg"],
                        }
                        for e in exc.errors()
                    ],
                }
            },
        )

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        logger.error("Unhandled exception on %s: %s", request.url.path, exc, exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": {
                    "code": "INTERNAL_ERROR",
                    "message": "An unexpected error occurred",
                }
            },
        )
