# config/cache.py
import logging
from typing import Optional
from redis.asyncio import Redis, from_url
from config.settings import settings

logger = logging.getLogger(__name__)

_client: Optional[Redis] = None


async def get_redis() -> Redis:
    """
    Shared client for the rate limiter and the report repository.
    Created lazily; the first call pings so startup fails on a dead Redis.
    """
    global _client
    if _client is None:
        client = from_url(
            settings.REDIS_URL,
            encoding="utf-8",
            decode_responses=False,  # reports are stored as raw JSON bytes
            socket_keepalive=True,
            health_check_interval=30,
        )
        await client.ping()
        logger.info("redis.connected")
        _client = client
    return _client


async def close_redis() -> None:
    global _client
    if _client is not None:
        await _client.aclose()
        _client = None
        logger.info("redis.closed")
