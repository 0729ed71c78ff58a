"""Shared Redis connection backing admin sessions.

The ``redis_connected`` gauge follows the connection: set on connect and
close, and re-checked by ``check_redis`` on every ``/health`` call.
"""
import logging
from typing import Optional
from redis.asyncio import Redis
from detailing_admin.core.config import settings
from detailing_admin.core.metrics import redis_connected

logger = logging.getLogger(__name__)

redis: Optional[Redis] = None

async def init_redis() -> Redis:
    global redis
    try:
        redis = Redis.from_url(settings.REDIS_URL, decode_responses=True)
        await redis.ping()
        redis_connected.set(1)
        logger.info("Connected to Redis for session storage")
        return redis
    except Exception as e:
        logger.error(f"Failed to connect to Redis at {settings.REDIS_URL}: {e}")
        redis = None
        redis_connected.set(0)
        raise

async def close_redis():
    global redis
    if redis:
        await redis.aclose()
        redis = None
        logger.info("Redis connection closed")
    redis_connected.set(0)

async def check_redis() -> bool:
    """Ping the session store and record the result in the gauge."""
    if redis is None:
        redis_connected.set(0)
        return False
    try:
        await redis.ping()
    except Exception as e:
        logger.warning(f"Redis health check failed: {e}")
        redis_connected.set(0)
        return False
    redis_connected.set(1)
    return True

def get_redis() -> Redis:
    if redis is None:
        raise RuntimeError("Redis not initialized. Call init_redis() first.")
    return redis
