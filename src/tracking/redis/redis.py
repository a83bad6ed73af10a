import logging
from typing import Optional

import redis.asyncio as redis

from src.tracking.config import get_settings

logger = logging.getLogger(__name__)


class RedisManager:
    """Holds the shared Redis client used to deduplicate queued positions."""

    def __init__(self):
        self.redis_client: Optional[redis.Redis] = None

    @property
    def is_ready(self) -> bool:
        return self.redis_client is not None

    async def init_redis(self):
        settings = get_settings()
        self.redis_client = await redis.Redis(
            host=settings.REDIS_HOST,
            port=settings.REDIS_PORT,
            encoding="utf-8",
            decode_responses=True,
        )
        logger.info(
            f"Redis connection initialized ({settings.REDIS_HOST}:{settings.REDIS_PORT})"
        )

    async def claim_key(self, key: str, ttl_seconds: int) -> bool:
        """
        Atomically mark ``key`` as seen for ``ttl_seconds``.

        Returns True for the first caller and False while the key lives.
        Redis errors propagate.
        """
        claimed = await self.redis_client.set(key, "processed", nx=True, ex=ttl_seconds)
        return bool(claimed)

    async def release_key(self, key: str):
        await self.redis_client.delete(key)

    async def close_redis(self):
        if self.redis_client:
            await self.redis_client.aclose()
            logger.info("Redis connection closed")
            self.redis_client = None


redis_manager = RedisManager()
