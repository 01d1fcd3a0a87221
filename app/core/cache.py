# app/core/cache.py
"""Redis caching implementation."""
import json
import logging
from typing import Any, Optional, Union
from datetime import timedelta
from fastapi import Request
import redis.asyncio as redis

logger = logging.getLogger(__name__)


class CacheManager:
    """Thin JSON cache over Redis. Without a URL every call is a miss/no-op."""

    def __init__(self, url: Optional[str] = None, prefix: str = "perf"):
        self.url = url
        self.prefix = prefix
        self.redis: Optional[redis.Redis] = None

    @property
    def enabled(self) -> bool:
        return bool(self.url)

    def make_key(self, *parts: Any) -> str:
        return ":".join([self.prefix, *[str(p) for p in parts]])

    async def connect(self):
        """Initialize Redis connection."""
        if self.enabled and not self.redis:
            self.redis = redis.from_url(
                self.url,
                encoding="utf-8",
                decode_responses=True
            )

    async def disconnect(self):
        """Close Redis connection."""
        if self.redis:
            await self.redis.aclose()
            self.redis = None

    async def get(self, key: str) -> Optional[Any]:
        """Get value from cache."""
        if not self.enabled:
            return None
        await self.connect()

        try:
            value = await self.redis.get(key)
            if value is not None:
                return json.loads(value)
        except (redis.RedisError, ValueError) as e:
            logger.warning(f"Cache get failed for {key}: {e}")
        return None

    async def set(
        self,
        key: str,
        value: Any,
        expire: Optional[Union[int, timedelta]] = None
    ) -> bool:
        """Set value in cache."""
        if not self.enabled:
            return False
        await self.connect()

        try:
            serialized = json.dumps(value)
            if expire:
                if isinstance(expire, timedelta):
                    expire = int(expire.total_seconds())
                return bool(await self.redis.setex(key, expire, serialized))
            return bool(await self.redis.set(key, serialized))
        except redis.RedisError as e:
            logger.warning(f"Cache set failed for {key}: {e}")
            return False

    async def delete_pattern(self, pattern: str) -> int:
        """Delete every key matching a glob pattern."""
        if not self.enabled:
            return 0
        await self.connect()

        deleted = 0
        try:
            async for key in self.redis.scan_iter(match=pattern):
                deleted += await self.redis.delete(key)
        except redis.RedisError as e:
            logger.warning(f"Cache invalidation failed for {pattern}: {e}")
        return deleted


def get_cache(request: Request) -> CacheManager:
    """Dependency to get the application cache."""
    return request.app.state.cache
