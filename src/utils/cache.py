"""
Read-through cache store backed by Redis.

Values are stored as JSON text with a per-entry TTL. When the connection
manager reports the cache as unavailable, get() misses and set() does nothing.
"""

import json
from collections.abc import Mapping
from typing import Any

from adapters.redis_manager import CacheAvailability, RedisConnectionManager
from utils.get_logger import get_logger

logger = get_logger(__name__)


def _stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    return str(value)


def cache_key(prefix: str, parts: Mapping[str, Any]) -> str:
    """
    Build a stable cache key.

    Keys of `parts` are sorted and each pair is rendered as `k:v`; pairs are
    joined with `|` and prefixed by `prefix:`. The same mapping always yields
    the same key regardless of insertion order.

    Args:
        prefix: Key namespace, e.g. "resolveEntity"
        parts: Values that identify the cached computation

    Returns:
        The cache key string
    """
    stable = "|".join(f"{k}:{_stringify(parts[k])}" for k in sorted(parts))
    return f"{prefix}:{stable}"


class CacheStore:
    """JSON cache over the shared Redis connection."""

    def __init__(self, manager: RedisConnectionManager):
        self.manager = manager

    @staticmethod
    def key(prefix: str, parts: Mapping[str, Any]) -> str:
        return cache_key(prefix, parts)

    @property
    def availability(self) -> CacheAvailability:
        return self.manager.availability

    async def get(self, key: str) -> Any | None:
        client = await self.manager.get_client()
        if client is None:
            return None

        raw = await client.get(key)
        if raw is None:
            logger.debug(f"Cache miss: {key}")
            return None

        logger.debug(f"Cache hit: {key}")
        try:
            return json.loads(raw)
        except ValueError:
            return raw

    async def set(self, key: str, value: Any, ttl_seconds: int) -> None:
        client = await self.manager.get_client()
        if client is None:
            return

        payload = value if isinstance(value, str) else json.dumps(value)
        await client.set(key, payload, ex=ttl_seconds)
