"""Exception handlers rendering every failure as one JSON error envelope."""

from typing import Any

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from core.config import settings
from core.exceptions import AppException, ErrorCode

logger = structlog.get_logger()

# Seconds a client should wait before retrying a 503.
RETRY_AFTER_SECONDS = 5


def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", "unknown")


def error_response(
    status_code: int,
    error_code: str,
    message: str,
    details: Any | None = None,
) -> JSONResponse:
    """Build the ``{error_code, message, details}`` body shared by all errors."""
    headers = None
    if status_code == 503:
        headers = {"Retry-After": str(RETRY_AFTER_SECONDS)}
    return JSONResponse(
        status_code=status_code,
        content={"error_code": error_code, "message": message, "details": details},
        headers=headers,
    )


def _field_errors(exc: RequestValidationError) -> list[dict[str, str]]:
    return [
        {
            "field": ".".join(str(part) for part in error["loc"]),
            "message": error["msg"],
            "type": error["type"],
        }
        for error in exc.errors()
    ]


def setup_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers on the FastAPI app."""

    @app.exception_handler(AppException)
    async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
        """Domain errors: not found, validation, catalog outages."""
        logger.warning(
            "app_exception",
            error_code=exc.error_code.value,
            message=exc.message,
            status_code=exc.status_code,
        )
        return error_response(exc.status_code, exc.error_code.value, exc.message, exc.details)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        """Routing-level errors (unknown path, wrong method)."""
        return error_response(exc.status_code, "HTTP_ERROR", exc.detail)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Malformed bodies, path or query parameters."""
        details = _field_errors(exc)
        logger.info("validation_error", errors=details)
        return error_response(
            422,
            ErrorCode.VALIDATION_ERROR.value,
            "Request validation failed",
            details,
        )

    @app.exception_handler(SQLAlchemyError)
    async def database_exception_handler(
        request: Request, exc: SQLAlchemyError
    ) -> JSONResponse:
        """Store failures the services did not translate."""
        request_id = _request_id(request)
        logger.error(
            "database_error",
            error=str(exc),
            error_type=type(exc).__name__,
            request_id=request_id,
        )
        return error_response(
            503,
            ErrorCode.DATABASE_ERROR.value,
            "The data store is temporarily unavailable",
            {"request_id": request_id},
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        request_id = _request_id(request)
        logger.error(
            "unhandled_exception",
            error=str(exc),
            error_type=type(exc).__name__,
            request_id=request_id,
            exc_info=True,
        )
        message = str(exc) if not settings.is_production else "An unexpected error occurred"
        return error_response(
            500,
            ErrorCode.INTERNAL_ERROR.value,
            message,
            {"request_id": request_id},
        )
