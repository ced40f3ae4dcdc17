# app/core/redis_lifecycle.py
import redis.asyncio as redis
from fastapi_limiter import FastAPILimiter
from app.core.config import settings
from app.core.logger import logger
from typing import Optional

_redis_client: Optional[redis.Redis] = None


async def init_redis_client() -> Optional[redis.Redis]:
    """Initialize the Redis client used by the rate limiter (for startup)."""
    global _redis_client

    if not settings.REDIS_URL:
        logger.warning("REDIS_URL is not set; rate limiting is disabled")
        return None

    if _redis_client is None:
        _redis_client = redis.from_url(settings.REDIS_URL, encoding="utf-8", decode_responses=True)
        try:
            await _redis_client.ping()
        except redis.ConnectionError:
            raise Exception("Could not connect to Redis server") from None

        await FastAPILimiter.init(_redis_client)
        logger.info("Rate limiter connected to Redis")

    return _redis_client


async def close_redis():
    """Close the Redis connection on application shutdown."""
    global _redis_client
    if _redis_client:
        # FastAPILimiter.close() closes the shared client
        await FastAPILimiter.close()
        _redis_client = None
