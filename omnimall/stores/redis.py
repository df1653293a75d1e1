"""Redis store for rendered page payloads.

Handles:
- Caching UI payloads per page path with a short TTL
- Marking page paths stale after mutations (revalidation)

TTL policies:
- UI payload cache: 60 seconds
"""

import json
import logging
from typing import Any

import redis.asyncio as redis
from redis.exceptions import RedisError

from omnimall.settings import get_settings

# TTL constants (in seconds)
TTL_UI_PAYLOAD = 60  # 1 minute

# Key prefixes
PREFIX_UI_PAYLOAD = "ui:"

# Redis client (initialized on startup)
_redis: redis.Redis | None = None
logger = logging.getLogger("uvicorn.error")


async def init_redis() -> None:
    """Initialize Redis connection."""
    global _redis
    settings = get_settings()
    _redis = redis.from_url(
        settings.redis_url,
        encoding="utf-8",
        decode_responses=True,
        socket_connect_timeout=5,
        socket_timeout=5,
    )
    # Validate connectivity early (especially for `rediss://` in production).
    await _redis.ping()
    logger.info("Redis connected")


async def close_redis() -> None:
    """Close Redis connection."""
    global _redis
    if _redis:
        await _redis.aclose()
        _redis = None


def _get_redis() -> redis.Redis:
    """Get Redis client instance."""
    if _redis is None:
        raise RuntimeError("Redis not initialized. Call init_redis() first.")
    return _redis


def page_key(path: str) -> str:
    """Cache key for a page path ("/profile" -> "ui:/profile")."""
    return f"{PREFIX_UI_PAYLOAD}{path}"


class PageCache:
    """Page payload cache with path-scoped invalidation.

    Every operation degrades to a no-op when Redis is unavailable: a cache
    outage must never fail the mutation that triggered it.
    """

    def __init__(self, client: redis.Redis | None = None):
        self._client = client

    def _conn(self) -> redis.Redis:
        return self._client if self._client is not None else _get_redis()

    async def get(self, path: str) -> Any | None:
        try:
            value = await self._conn().get(page_key(path))
        except (RuntimeError, RedisError) as e:
            logger.warning(f"Page cache read failed for {path}: {e}")
            return None
        if value:
            return json.loads(value)
        return None

    async def set(self, path: str, payload: Any, ttl: int = TTL_UI_PAYLOAD) -> None:
        try:
            await self._conn().setex(page_key(path), ttl, json.dumps(payload))
        except (RuntimeError, RedisError) as e:
            logger.warning(f"Page cache write failed for {path}: {e}")

    async def invalidate(self, *paths: str) -> None:
        """Mark page paths stale so the next request recomputes them."""
        if not paths:
            return
        try:
            await self._conn().delete(*(page_key(p) for p in paths))
        except (RuntimeError, RedisError) as e:
            logger.warning(f"Page cache invalidation failed for {list(paths)}: {e}")
            return
        logger.info(f"Revalidated paths: {', '.join(paths)}")
