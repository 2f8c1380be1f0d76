"""Redis connection holding failed-login counters."""

import redis.asyncio as redis
import structlog

from app.core.config import settings

logger = structlog.get_logger()

redis_client: redis.Redis | None = None  # type: ignore[type-arg]


async def init_redis(url: str | None = None) -> redis.Redis:  # type: ignore[type-arg]
    """Open the shared client and fail fast if the server is unreachable."""
    global redis_client  # noqa: PLW0603
    client = redis.from_url(url or settings.redis.url, decode_responses=True)
    try:
        await client.ping()
    except redis.ConnectionError:
        logger.error("Redis unreachable")
        await client.aclose()
        raise
    redis_client = client
    return client


async def close_redis() -> None:
    global redis_client  # noqa: PLW0603
    if redis_client is not None:
        await redis_client.aclose()
        redis_client = None


def get_redis() -> redis.Redis:  # type: ignore[type-arg]
    """Return the shared client; raises before startup has run."""
    if redis_client is None:
        raise RuntimeError("Redis client not initialized")
    return redis_client
