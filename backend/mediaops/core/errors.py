from __future__ import annotations

import logging

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_404_NOT_FOUND,
    HTTP_500_INTERNAL_SERVER_ERROR,
)

logger = logging.getLogger(__name__)


class AppError(Exception):
    code = "APP_ERROR"
    status_code = HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(AppError):
    code = "NOT_FOUND"
    status_code = HTTP_404_NOT_FOUND


class ValidationError(AppError):
    code = "VALIDATION_ERROR"
    status_code = HTTP_400_BAD_REQUEST


class DependencyError(AppError):
    """A backing service (database, S3) failed to answer."""

    code = "DEPENDENCY_ERROR"


class StoreError(DependencyError):
    pass


class InternalError(AppError):
    code = "INTERNAL_ERROR"


def err(code: str, message: str, status: int, details: dict | None = None, request_id: str = ""):
    payload = {"error": {"code": code, "message": message}}
    if details is not None:
        payload["error"]["details"] = details
    return JSONResponse(status_code=status, content=payload, headers={"x-request-id": request_id})


async def app_error_handler(request: Request, exc: AppError):
    rid = getattr(request.state, "request_id", "")
    if exc.status_code >= 500:
        logger.error("%s on %s: %s (request_id=%s)", exc.code, request.url.path, exc.message, rid)
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": exc.message},
        headers={"x-request-id": rid},
    )
