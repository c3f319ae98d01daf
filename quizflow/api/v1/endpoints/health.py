"""Health and readiness endpoints."""

from typing import Literal

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from quizflow.common.request_id import get_request_id
from quizflow.core.config import settings
from quizflow.core.redis_client import is_redis_available
from quizflow.db.session import get_db

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response."""

    status: Literal["ok"] = "ok"


class ReadinessCheck(BaseModel):
    """Individual readiness check result."""

    status: Literal["ok", "degraded", "down"]
    message: str | None = None


class ReadinessResponse(BaseModel):
    """Readiness check response."""

    status: Literal["ok", "degraded", "down"]
    checks: dict[str, ReadinessCheck]
    request_id: str


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Simple health check endpoint. Returns 200 if the API is running.",
)
async def health_check() -> HealthResponse:
    """Health check endpoint - just checks if the process is alive."""
    return HealthResponse(status="ok")


@router.get(
    "/ready",
    response_model=ReadinessResponse,
    summary="Readiness check",
    description="Verifies database connectivity and, when enabled, Redis.",
)
async def readiness_check(request: Request, db: Session = Depends(get_db)):
    """Readiness check endpoint - 503 when a required dependency is down."""
    checks: dict[str, ReadinessCheck] = {}
    overall_status: Literal["ok", "degraded", "down"] = "ok"

    try:
        db.execute(text("SELECT 1"))
        checks["db"] = ReadinessCheck(status="ok")
    except SQLAlchemyError as e:
        checks["db"] = ReadinessCheck(status="down", message=str(e))
        overall_status = "down"

    if settings.REDIS_ENABLED:
        if is_redis_available():
            checks["redis"] = ReadinessCheck(status="ok")
        elif settings.REDIS_REQUIRED:
            checks["redis"] = ReadinessCheck(status="down", message="Redis unavailable")
            overall_status = "down"
        else:
            checks["redis"] = ReadinessCheck(status="degraded", message="Redis unavailable")
            if overall_status == "ok":
                overall_status = "degraded"

    body = ReadinessResponse(status=overall_status, checks=checks, request_id=get_request_id(request))
    if overall_status == "down":
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, content=body.model_dump()
        )
    return body
