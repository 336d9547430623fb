import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError

logger = logging.getLogger(__name__)


class ApiError(HTTPException):
    def __init__(self, status_code: int, detail: str, extra: Optional[dict] = None):
        super().__init__(status_code=status_code, detail=detail)
        # extra fields merged into the error envelope
        self.extra = extra

    @classmethod
    def bad_request(cls, message: str) -> "ApiError":
        return cls(400, message)

    @classmethod
    def unauthorized(cls, message: str) -> "ApiError":
        return cls(401, message)

    @classmethod
    def forbidden(cls, message: str) -> "ApiError":
        return cls(403, message)

    @classmethod
    def not_found(cls, message: str) -> "ApiError":
        return cls(404, message)

    @classmethod
    def internal(cls, message: str) -> "ApiError":
        return cls(500, message)


def create_error_response(message: str, status_code: int, extra: Optional[dict] = None) -> dict:
    """Create the standard error envelope"""
    body = {
        "message": message,
        "status": status_code,
        "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
    }
    if extra:
        body.update(extra)
    return body


def error_response(message: str, status_code: int, headers: Optional[dict] = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=create_error_response(message, status_code),
        headers=headers,
    )


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Custom exception handler for HTTPException"""
    # Convert 403 from HTTPBearer to 401 for missing authentication
    if exc.status_code == 403 and "Not authenticated" in str(exc.detail):
        return error_response("Authentication required", 401)

    return JSONResponse(
        status_code=exc.status_code,
        content=create_error_response(str(exc.detail), exc.status_code, getattr(exc, "extra", None)),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.info(f"Validation error on {request.method} {request.url.path}: {exc.errors()}")
    return error_response("Validation error", 400)


async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    logger.warning(f"Integrity error on {request.method} {request.url.path}: {exc.orig}")
    return error_response("Database validation error", 400)
