# ruff: noqa: PLW0603
"""Redis client for comment rate limiting.

The only keys this service writes are the per-author windows
``comments:rate:{user_id}:minute`` and ``comments:rate:{user_id}:hour`` that
``CommentService`` checks before a comment is stored. Posts, reactions and
their counters live in Cassandra alone. The lifespan stores the client on
``app.state.redis``, or None when the ping fails. Readiness reports which,
and without it comments go unthrottled.
"""

import redis.asyncio as redis

from socialfeed.config import get_settings
from socialfeed.core.logging import get_logger


logger = get_logger(__name__)

_redis_client: redis.Redis | None = None


async def init_redis() -> redis.Redis:
    """Open the pool for the comment rate-limit counters and ping it.

    Raises:
        redis.ConnectionError: Redis is unreachable; the caller runs unthrottled
    """
    global _redis_client

    settings = get_settings()

    _redis_client = redis.from_url(
        settings.redis_url,
        max_connections=settings.redis_max_connections,
        socket_timeout=settings.redis_socket_timeout,
        socket_connect_timeout=settings.redis_socket_connect_timeout,
        retry_on_timeout=settings.redis_retry_on_timeout,
        health_check_interval=settings.redis_health_check_interval,
        decode_responses=True,
    )

    try:
        await _redis_client.ping()
        logger.info("redis_connected", url=settings.redis_url)
    except redis.ConnectionError as e:
        logger.warning("redis_connection_failed", error=str(e))
        _redis_client = None
        raise

    return _redis_client


async def shutdown_redis() -> None:
    """Close the rate-limit pool on shutdown."""
    global _redis_client

    if _redis_client:
        await _redis_client.aclose()
        logger.info("redis_disconnected")
        _redis_client = None

