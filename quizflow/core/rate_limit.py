"""Fixed-window rate limiting backed by Redis."""

from fastapi import Request
from redis.exceptions import RedisError

from quizflow.core.app_exceptions import TooManyRequestsError
from quizflow.core.config import settings
from quizflow.core.logging import get_logger
from quizflow.core.redis_client import get_redis_client

logger = get_logger(__name__)


def rate_limit(key: str, limit: int, window_seconds: int) -> tuple[bool, int, int]:
    """
    Count one request against a fixed window.

    The counter is incremented and its expiry set in one MULTI/EXEC block, so
    concurrent requests cannot lose a count or leave a counter without a TTL.

    Returns:
        Tuple of (allowed, remaining, reset_seconds)
    """
    redis_client = get_redis_client()
    if redis_client is None:
        if settings.REDIS_REQUIRED:
            logger.error("Redis unavailable but required for rate limiting")
            return False, 0, window_seconds
        return True, limit, window_seconds

    try:
        pipe = redis_client.pipeline(transaction=True)
        pipe.incr(key)
        pipe.expire(key, window_seconds, nx=True)
        pipe.ttl(key)
        count, _, ttl = pipe.execute()
    except RedisError as e:
        logger.error("Rate limit check failed", extra={"key": key, "error": str(e)})
        if settings.REDIS_REQUIRED:
            return False, 0, window_seconds
        return True, limit, window_seconds

    reset_seconds = ttl if ttl > 0 else window_seconds
    return count <= limit, max(0, limit - count), reset_seconds


def check_rate_limit_and_raise(key: str, limit: int, window_seconds: int, request: Request) -> None:
    """Count the request and raise 429 once the window is exhausted."""
    allowed, _remaining, reset_seconds = rate_limit(key, limit, window_seconds)

    if not allowed:
        logger.warning(
            "Rate limit exceeded",
            extra={
                "request_id": getattr(request.state, "request_id", None),
                "key": key,
                "path": request.url.path,
            },
        )
        raise TooManyRequestsError(retry_after_seconds=reset_seconds)


def get_client_ip(request: Request) -> str:
    """Peer address of the connection.

    Forwarded headers are client-controlled, so they are only consulted when
    the server has no peer address (uvicorn fills it from ``--proxy-headers``
    when running behind a trusted proxy).
    """
    if request.client:
        return request.client.host
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()
    real_ip = request.headers.get("X-Real-IP")
    if real_ip:
        return real_ip
    return "unknown"
