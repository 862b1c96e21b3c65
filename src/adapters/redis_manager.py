"""
Redis connection manager.

Holds a single lazily-created connection. The first failed connection attempt
marks the cache permanently unavailable for the life of the process, after
which every cache operation becomes a no-op.
"""

import asyncio
from collections.abc import Callable
from enum import Enum

from redis.asyncio import Redis
from redis.exceptions import RedisError

from adapters.config import get_redis_url
from utils.get_logger import get_logger

logger = get_logger(__name__)


class CacheAvailability(str, Enum):
    UNKNOWN = "unknown"
    AVAILABLE = "available"
    UNAVAILABLE = "unavailable"


def _default_client_factory(url: str) -> Redis:
    return Redis.from_url(
        url,
        decode_responses=True,
        socket_timeout=5.0,
        socket_connect_timeout=5.0,
    )


class RedisConnectionManager:
    """Connect-once manager for the cache connection."""

    def __init__(
        self,
        url: str | None = None,
        client_factory: Callable[[str], Redis] | None = None,
    ):
        self._url = url if url is not None else get_redis_url()
        self._client_factory = client_factory or _default_client_factory
        self._client: Redis | None = None
        self._availability = CacheAvailability.UNKNOWN
        self._lock = asyncio.Lock()

    @property
    def availability(self) -> CacheAvailability:
        return self._availability

    async def get_client(self) -> Redis | None:
        """Return the shared client, connecting on first use.

        Returns:
            The connected client, or None once the cache is unavailable
        """
        if self._availability == CacheAvailability.UNAVAILABLE:
            return None
        if self._client is not None:
            return self._client

        async with self._lock:
            if self._availability == CacheAvailability.UNAVAILABLE:
                return None
            if self._client is not None:
                return self._client

            if not self._url:
                logger.warning("No Redis URL configured; caching disabled")
                self._availability = CacheAvailability.UNAVAILABLE
                return None

            try:
                client = self._client_factory(self._url)
                await client.ping()  # type: ignore[misc]
            except (RedisError, OSError, ValueError) as e:
                logger.warning(f"Redis unavailable, caching disabled: {e}")
                self._availability = CacheAvailability.UNAVAILABLE
                return None

            self._client = client
            self._availability = CacheAvailability.AVAILABLE
            logger.info("Connected to Redis")
            return client

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
