"""
One error envelope for every endpoint.

Bodies look like `{"error": ..., "details": [...]}` for client errors that
carry a list of reasons, or `{"error": ..., "message": ...}` otherwise.
"""

from __future__ import annotations

import logging
import traceback
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .settings import Settings

logger = logging.getLogger(__name__)

GENERIC_SERVER_MESSAGE = "An unexpected error occurred."


class ApiError(RuntimeError):
    def __init__(
        self,
        status_code: int,
        error: str,
        *,
        message: str | None = None,
        details: list[str] | None = None,
        stack: str | None = None,
    ) -> None:
        super().__init__(message or error)
        self.status_code = status_code
        self.error = error
        self.message = message
        self.details = details
        self.stack = stack

    def to_body(self) -> dict[str, Any]:
        body: dict[str, Any] = {"error": self.error}
        if self.details is not None:
            body["details"] = list(self.details)
        if self.message is not None:
            body["message"] = self.message
        if self.stack is not None:
            body["stack"] = self.stack
        return body


def validation_failed(details: list[str]) -> ApiError:
    return ApiError(status.HTTP_400_BAD_REQUEST, "Validation Failed", details=details)


def upload_rejected(message: str) -> ApiError:
    return ApiError(status.HTTP_400_BAD_REQUEST, "Upload Rejected", message=message)


def setup_failed(exc: BaseException) -> ApiError:
    return ApiError(status.HTTP_500_INTERNAL_SERVER_ERROR, "Server Setup Error", message=str(exc))


def internal_error(exc: BaseException, settings: Settings) -> ApiError:
    """
    500 for anything unexpected. Diagnostic detail depends on APP_ENV.
    """
    message = GENERIC_SERVER_MESSAGE if settings.is_production else (str(exc) or type(exc).__name__)
    stack = None
    if settings.is_development:
        stack = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    return ApiError(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "Internal Server Error",
        message=message,
        stack=stack,
    )


async def api_error_handler(_: Request, exc: ApiError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


async def http_exception_handler(_: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


def install(app: FastAPI) -> None:
    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
