from typing import Optional

from loguru import logger
from redis.asyncio import Redis
from redis.exceptions import RedisError

from drawguard.config.settings import AppSettings


async def init_redis(settings: AppSettings) -> Optional[Redis]:
    if settings.rate_limit_backend != "redis":
        return None
    if not settings.redis_dsn:
        logger.warning("REDIS_DSN is not set, running without Redis")
        return None

    redis = Redis.from_url(settings.redis_dsn, decode_responses=True)
    try:
        await redis.ping()
        logger.info("Connected to Redis")
    except (RedisError, OSError) as e:
        logger.error(f"Failed to connect to Redis: {e!r}")
        await redis.aclose()
        return None
    return redis
