from typing import Optional, Any
import logging
from redis import asyncio as aioredis
from redis.exceptions import RedisError
from fastapi.encoders import jsonable_encoder
from app.core.config import settings
import json

logger = logging.getLogger(__name__)


def camp_analytics_key(clinic_id: str) -> str:
    return f"camps:analytics:{clinic_id}"


class RedisCache:
    def __init__(self):
        self.redis_url = settings.REDIS_URL
        self.redis: Optional[aioredis.Redis] = None

    @property
    def enabled(self) -> bool:
        return settings.CACHE_ENABLED

    async def connect(self):
        if not self.redis:
            self.redis = aioredis.from_url(
                self.redis_url,
                encoding="utf-8",
                decode_responses=True
            )
            logger.info("Connected to Redis cache.")

    async def get(self, key: str) -> Optional[str]:
        if not self.enabled:
            return None
        await self.connect()
        try:
            return await self.redis.get(key)
        except RedisError as e:
            logger.error(f"Redis get error for key {key}: {e}")
            return None

    async def set(self, key: str, value: str, ttl: int = 3600):
        if not self.enabled:
            return
        await self.connect()
        try:
            await self.redis.set(key, value, ex=ttl)
        except RedisError as e:
            logger.error(f"Redis set error for key {key}: {e}")

    async def get_json(self, key: str) -> Optional[Any]:
        cached = await self.get(key)
        return json.loads(cached) if cached else None

    async def set_json(self, key: str, value: Any, ttl: Optional[int] = None):
        await self.set(key, json.dumps(jsonable_encoder(value)), ttl or settings.CACHE_TTL_SECONDS)

    async def delete(self, key: str):
        if not self.enabled:
            return
        await self.connect()
        try:
            await self.redis.delete(key)
        except RedisError as e:
            logger.error(f"Redis delete error for key {key}: {e}")

    async def invalidate_camp_analytics(self, clinic_id: str):
        await self.delete(camp_analytics_key(clinic_id))

    async def close(self):
        if self.redis:
            await self.redis.close()
            self.redis = None

# Singleton instance
redis_cache = RedisCache()
