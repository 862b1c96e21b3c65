"""
Rate Limiter Utility - Per-event-loop rate limiting per API.

Each upstream API (TMDB, SerpApi, DuckDuckGo, the chat-completion providers)
gets its own limiter with its own configuration. Limiters are scoped to the
running event loop so a limiter created under one loop is never awaited from
another.

Usage:
    from utils.rate_limiter import get_rate_limiter

    limiter = get_rate_limiter(max_rate=35, time_period=1)
    async with limiter:
        # Make your API request
        pass
"""

from __future__ import annotations

import asyncio
import threading

from aiolimiter import AsyncLimiter

from utils.get_logger import get_logger

logger = get_logger(__name__)

# Module-level lock for thread safety
_lock = threading.Lock()

# Key: (max_rate, time_period, loop_id)
_limiters: dict[tuple[int, float, int], AsyncLimiter] = {}


def get_rate_limiter(max_rate: int, time_period: float = 1.0) -> AsyncLimiter:
    """
    Get or create the limiter for an API configuration on the running loop.

    Args:
        max_rate: Maximum number of requests allowed
        time_period: Time period in seconds (default: 1.0)

    Returns:
        AsyncLimiter shared by every caller with the same configuration on this loop
    """
    loop = asyncio.get_running_loop()
    cache_key = (max_rate, time_period, id(loop))

    # Double-checked locking pattern for thread safety
    if cache_key not in _limiters:
        with _lock:
            if cache_key not in _limiters:
                _limiters[cache_key] = AsyncLimiter(max_rate, time_period)
                logger.debug(
                    f"Created rate limiter for loop {id(loop)}: "
                    f"{max_rate} requests per {time_period}s"
                )

    return _limiters[cache_key]


def reset_rate_limiters() -> None:
    """Drop every cached limiter (used between event loops in tests)."""
    with _lock:
        _limiters.clear()
