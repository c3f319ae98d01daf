"""Error handling and consistent error response format."""

from typing import Any, Literal

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field
from sqlalchemy.exc import DBAPIError, SQLAlchemyError
from starlette.exceptions import HTTPException

from quizflow.common.dates import utcnow
from quizflow.common.envelope import request_path
from quizflow.core.app_exceptions import AppError
from quizflow.core.logging import get_logger

logger = get_logger(__name__)

# Fallback codes for HTTP errors raised without an application code
ERROR_CODES_BY_STATUS: dict[int, str] = {
    status.HTTP_400_BAD_REQUEST: "BAD_REQUEST",
    status.HTTP_401_UNAUTHORIZED: "UNAUTHORIZED",
    status.HTTP_403_FORBIDDEN: "FORBIDDEN",
    status.HTTP_404_NOT_FOUND: "NOT_FOUND",
    status.HTTP_409_CONFLICT: "CONFLICT",
    status.HTTP_422_UNPROCESSABLE_ENTITY: "UNPROCESSABLE_ENTITY",
    status.HTTP_429_TOO_MANY_REQUESTS: "TOO_MANY_REQUESTS",
    status.HTTP_500_INTERNAL_SERVER_ERROR: "INTERNAL_ERROR",
    status.HTTP_503_SERVICE_UNAVAILABLE: "SERVICE_UNAVAILABLE",
}

# SQLSTATE classes reported by Postgres drivers
SQLSTATE_UNIQUE_VIOLATION = "23505"
SQLSTATE_FOREIGN_KEY_VIOLATION = "23503"
SQLSTATE_NOT_NULL_VIOLATION = "23502"


class ApiError(BaseModel):
    """Error body carried inside the error envelope."""

    code: str
    message: str
    status: int
    details: dict[str, Any] | None = None


class ErrorResponse(BaseModel):
    """Standard error envelope.

    Format: {success: false, error: {code, message, status, details?}, timestamp, path}
    """

    success: Literal[False] = False
    error: ApiError
    timestamp: str = Field(default_factory=lambda: utcnow().isoformat())
    path: str


def error_code_for_status(status_code: int) -> str:
    """Map an HTTP status to a machine-readable code."""
    return ERROR_CODES_BY_STATUS.get(status_code, f"HTTP_{status_code}")


def error_response(
    request: Request,
    error: ApiError,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    """Serialize an ApiError into the error envelope."""
    body = ErrorResponse(error=error, path=request_path(request))
    return JSONResponse(
        status_code=error.status,
        content=body.model_dump(mode="json", exclude_none=True),
        headers=headers,
    )


def _sqlstate(exc: BaseException) -> str | None:
    """Return the SQLSTATE reported by the DBAPI driver, if any."""
    orig = exc.orig if isinstance(exc, DBAPIError) else None
    if orig is None:
        return None
    # psycopg2 exposes pgcode, psycopg 3 exposes sqlstate
    return getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)


def classify_database_error(exc: BaseException) -> ApiError:
    """Approximate the semantic category of a persistence failure.

    Typed SQLSTATE codes are used when the driver reports them; message
    substrings are only a fallback for opaque errors.
    """
    sqlstate = _sqlstate(exc)
    if sqlstate == SQLSTATE_UNIQUE_VIOLATION:
        return ApiError(code="DUPLICATE_ENTRY", message="Record already exists", status=409)
    if sqlstate == SQLSTATE_FOREIGN_KEY_VIOLATION:
        return ApiError(
            code="FOREIGN_KEY_VIOLATION", message="Referenced record does not exist", status=400
        )
    if sqlstate == SQLSTATE_NOT_NULL_VIOLATION:
        return ApiError(code="NULL_VIOLATION", message="Required field is missing", status=400)

    message = str(exc) or ""
    lowered = message.lower()

    if "duplicate key" in lowered or "already exists" in lowered or "unique constraint" in lowered:
        return ApiError(code="DUPLICATE_ENTRY", message="Record already exists", status=409)
    if "foreign key" in lowered:
        return ApiError(
            code="FOREIGN_KEY_VIOLATION", message="Referenced record does not exist", status=400
        )
    if "not-null" in lowered or "null value" in lowered or "not null constraint" in lowered:
        return ApiError(code="NULL_VIOLATION", message="Required field is missing", status=400)
    # PostgREST error codes leak through when a hosted data API is in front of the database
    if "PGRST" in message:
        return ApiError(code="DATABASE_ERROR", message="Database operation failed", status=400)

    return ApiError(code="INTERNAL_ERROR", message="An internal server error occurred", status=500)


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Handle request validation errors (400 with field-level details)."""
    errors: list[dict[str, Any]] = []
    for error in exc.errors():
        ctx = error.get("ctx") or {}
        entry: dict[str, Any] = {
            "field": ".".join(str(loc) for loc in error.get("loc", [])),
            "issue": error.get("msg", "Validation error"),
            "type": error.get("type", "validation_error"),
        }
        limit = ctx.get("max_length") or ctx.get("min_length") or ctx.get("le") or ctx.get("ge")
        if isinstance(limit, (int, float)):
            entry["limit"] = limit
        errors.append(entry)

    return error_response(
        request,
        ApiError(
            code="VALIDATION_ERROR",
            message="Invalid request data",
            status=status.HTTP_400_BAD_REQUEST,
            details={"errors": errors},
        ),
    )


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Handle application errors and plain HTTP exceptions."""
    headers = dict(exc.headers) if exc.headers else {}

    if isinstance(exc, AppError):
        error = ApiError(
            code=exc.code,
            message=exc.message,
            status=exc.status_code,
            details=exc.details,
        )
        if exc.status_code == status.HTTP_429_TOO_MANY_REQUESTS and exc.details:
            retry_after = exc.details.get("retry_after_seconds")
            if retry_after:
                headers["Retry-After"] = str(retry_after)
        return error_response(request, error, headers or None)

    code = error_code_for_status(exc.status_code)
    details = None
    if isinstance(exc.detail, dict):
        detail = dict(exc.detail)
        code = detail.pop("code", code)
        message = detail.pop("message", None) or "An error occurred"
        details = detail.pop("details", None) or (detail or None)
    elif isinstance(exc.detail, str):
        message = exc.detail
    else:
        message = str(exc.detail)

    return error_response(
        request,
        ApiError(code=code, message=message, status=exc.status_code, details=details),
        headers or None,
    )


async def database_exception_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Handle persistence failures that escaped the service layer."""
    error = classify_database_error(exc)
    if error.status >= 500:
        logger.error(
            f"{request.method} {request_path(request)} - {exc}",
            extra={"request_id": getattr(request.state, "request_id", None)},
            exc_info=exc,
        )
    else:
        logger.warning(
            f"Database constraint failure: {error.code}",
            extra={"request_id": getattr(request.state, "request_id", None)},
        )
    return error_response(request, error)


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unhandled exceptions (500 unless the message reveals a known DB failure)."""
    error = classify_database_error(exc)
    if error.status >= 500:
        logger.error(
            f"{request.method} {request_path(request)} - {exc}",
            extra={"request_id": getattr(request.state, "request_id", None)},
            exc_info=exc,
        )
    return error_response(request, error)
