"""Request ID propagation and the access log."""

import time
import uuid
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from quizflow.core.logging import get_logger, request_id_ctx

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


def get_request_id(request: Request) -> str:
    return getattr(request.state, "request_id", None) or "unknown"


def get_request_user_id(request: Request) -> str:
    """User id recorded by the auth dependency, or anonymous."""
    return getattr(request.state, "user_id", None) or "anonymous"


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Reuse the caller's X-Request-ID (or mint one) and log one line per request."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        request.state.request_id = request_id
        token = request_id_ctx.set(request_id)
        started = time.perf_counter()
        try:
            try:
                response = await call_next(request)
            except Exception:
                logger.exception(
                    "Unhandled error while serving request",
                    extra=_access_fields(request, 500, started),
                )
                raise
            response.headers[REQUEST_ID_HEADER] = request_id
            logger.info(
                f"{request.method} {request.url.path} {response.status_code}",
                extra=_access_fields(request, response.status_code, started),
            )
            return response
        finally:
            request_id_ctx.reset(token)


def _access_fields(request: Request, status_code: int, started: float) -> dict:
    return {
        "method": request.method,
        "path": request.url.path,
        "status_code": status_code,
        "latency_ms": round((time.perf_counter() - started) * 1000, 1),
        "user_id": get_request_user_id(request),
        "client_ip": request.client.host if request.client else None,
    }
