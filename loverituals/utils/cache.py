import json
import hashlib
import logging
from typing import Any, Optional, Tuple

import redis.asyncio as aioredis
from redis.exceptions import RedisError

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 60


def create_redis_client(url: str) -> aioredis.Redis:
    """Build the async Redis client; connections open lazily on first command."""
    return aioredis.from_url(url, decode_responses=True)


class Cache:
    """JSON values in Redis with a fixed TTL.

    Reads and writes degrade to a miss when Redis is unavailable;
    invalidation errors propagate so stale entries are not silently kept.
    """

    def __init__(self, client: aioredis.Redis, ttl_seconds: int = DEFAULT_TTL_SECONDS):
        self._client = client
        self.ttl = ttl_seconds
        self.hits = 0
        self.misses = 0

    @staticmethod
    def build_key(prefix: str, payload: dict) -> str:
        raw = json.dumps(payload, sort_keys=True, default=str)
        digest = hashlib.sha256(raw.encode()).hexdigest()
        return f"{prefix}:{digest}"

    async def get_json(self, key: str) -> Optional[Any]:
        try:
            data = await self._client.get(key)
        except RedisError as e:
            logger.warning(f"cache read failed for {key}: {e}")
            data = None
        if not data:
            self.misses += 1
            return None
        self.hits += 1
        return json.loads(data)

    async def set_json(self, key: str, value: Any) -> None:
        try:
            await self._client.setex(key, self.ttl, json.dumps(value, default=str))
        except RedisError as e:
            logger.warning(f"cache write failed for {key}: {e}")

    async def invalidate_prefix(self, prefix: str) -> int:
        """Scan-based invalidation of every key under prefix."""
        cursor = 0
        total = 0
        pattern = f"{prefix}:*"
        while True:
            cursor, keys = await self._client.scan(cursor=cursor, match=pattern, count=500)
            if keys:
                total += len(keys)
                await self._client.delete(*keys)
            if cursor == 0:
                break
        return total

    async def ping(self) -> bool:
        return bool(await self._client.ping())

    async def close(self) -> None:
        await self._client.aclose()

    def stats(self) -> Tuple[int, int]:
        return self.hits, self.misses
