"""Shared Redis connection used by the rate limiter."""

import redis
from redis.exceptions import RedisError

from quizflow.core.config import settings
from quizflow.core.logging import get_logger

logger = get_logger(__name__)

_client: redis.Redis | None = None


def _connect() -> redis.Redis:
    client = redis.from_url(
        settings.REDIS_URL,
        decode_responses=True,
        socket_connect_timeout=1,
        socket_timeout=1,
        health_check_interval=30,
    )
    client.ping()
    return client


def get_redis_client() -> redis.Redis | None:
    """Return the shared client, or None when Redis is off or unreachable.

    When ``REDIS_REQUIRED`` is set a missing URL or a failed connection raises
    instead, so misconfiguration is not hidden behind fail-open rate limits.
    """
    global _client

    if not settings.REDIS_ENABLED:
        return None
    if _client is not None:
        return _client

    if not settings.REDIS_URL:
        if settings.REDIS_REQUIRED:
            raise RuntimeError("REDIS_URL must be set when REDIS_REQUIRED is true")
        logger.warning("REDIS_ENABLED is set without REDIS_URL; rate limits are not enforced")
        return None

    try:
        _client = _connect()
    except RedisError as e:
        if settings.REDIS_REQUIRED:
            raise
        logger.warning("Redis unreachable, rate limits are not enforced", extra={"error": str(e)})
        return None

    logger.info("Connected to Redis")
    return _client


def is_redis_available() -> bool:
    client = get_redis_client()
    if client is None:
        return False
    try:
        return bool(client.ping())
    except RedisError:
        return False


def init_redis() -> None:
    """Connect eagerly at startup; only fatal when Redis is required."""
    if not settings.REDIS_ENABLED:
        return
    try:
        get_redis_client()
    except (RedisError, RuntimeError):
        if settings.REDIS_REQUIRED:
            raise
        logger.warning("Redis initialization failed", exc_info=True)


def close_redis() -> None:
    global _client
    if _client is not None:
        _client.close()
        _client = None
