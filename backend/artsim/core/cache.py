"""Redis-backed cache for computed similarity data."""
import json
import logging
from typing import Any, Iterable, Optional

import redis

from artsim.core.config import settings

logger = logging.getLogger(__name__)


class Cache:
    """Thin key/value wrapper over a Redis client storing JSON payloads."""

    def __init__(self, client: redis.Redis, default_ttl: int = 3600):
        """Initialize cache.

        Args:
            client: Redis client (decoded or raw responses are both accepted)
            default_ttl: Expiry in seconds applied when none is given
        """
        self.client = client
        self.default_ttl = default_ttl

    def get_value(self, key: str) -> Optional[Any]:
        """Return the decoded value stored under key, or None on a miss."""
        raw = self.client.get(key)
        if raw is None:
            logger.debug(f"Cache miss for {key}")
            return None
        return json.loads(raw)

    def cache_value(self, key: str, value: Any, ttl: Optional[int] = None) -> None:
        """Store value under key as JSON."""
        self.client.set(key, json.dumps(value), ex=ttl or self.default_ttl)

    def delete_multi(self, keys: Iterable[str]) -> int:
        """Delete several keys at once.

        Returns:
            Number of keys that existed
        """
        keys = list(keys)
        if not keys:
            return 0
        return self.client.delete(*keys)


_cache: Optional[Cache] = None


def get_cache() -> Cache:
    """Dependency returning the process-wide cache."""
    global _cache
    if _cache is None:
        client = redis.Redis(
            host=settings.REDIS_HOST,
            port=settings.REDIS_PORT,
            db=settings.REDIS_DB,
        )
        _cache = Cache(client, default_ttl=settings.SIMILAR_CACHE_TTL)
    return _cache
