"""
Base API Client - Shared request handling for every upstream provider.
All API services inherit from this and call its _core_async_request method.

Requests are made exactly once (no retries). Any transport failure, timeout,
non-2xx status or undecodable body is raised as APIRequestError so callers can
decide whether the failure is fatal (entity resolution) or soft (search and
enrichment fan-out).
"""

import asyncio
import os
import sys
from typing import Any, Protocol

import aiohttp

from utils.get_logger import get_logger
from utils.rate_limiter import get_rate_limiter

logger = get_logger(__name__)


def _skip_rate_limiting() -> bool:
    # Unit tests mock every call; integration tests talk to the real APIs
    is_test_env = os.getenv("ENVIRONMENT", "").lower() == "test"
    is_integration = any("integration" in arg.lower() for arg in sys.argv if "test" in arg.lower())
    return is_test_env and not is_integration


class APIRequestError(Exception):
    """Raised when an upstream request fails, times out or returns a non-2xx status."""

    def __init__(self, url: str, status: int | None = None, message: str = ""):
        self.url = url
        self.status = status
        self.message = message
        detail = f"status {status}" if status is not None else "no response"
        text = f"Request to {url} failed ({detail})"
        super().__init__(f"{text}: {message}" if message else text)


class RateLimiterProtocol(Protocol):
    """Protocol for rate limiters (both real and no-op)."""

    async def __aenter__(self) -> Any: ...

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None: ...


class NoOpRateLimiter:
    async def __aenter__(self) -> Any:
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        return None


class BaseAPIClient:
    """
    Base class for API clients with shared request handling.
    Provides rate limiting, explicit timeouts and uniform error reporting.
    """

    # Subclasses override these to match the provider's published limits
    rate_limit_max: int = 10
    rate_limit_period: float = 1.0
    default_timeout: float = 10.0

    def _rate_limiter(self) -> RateLimiterProtocol:
        if _skip_rate_limiting():
            return NoOpRateLimiter()
        return get_rate_limiter(self.rate_limit_max, self.rate_limit_period)

    async def _core_async_request(
        self,
        url: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, Any] | None = None,
        timeout: float | None = None,
        method: str = "GET",
        json_body: dict[str, Any] | None = None,
        response_type: str = "json",
    ) -> Any:
        """
        Core async HTTP request with rate limiting and a single attempt.

        Args:
            url: Full URL to request
            params: Optional query parameters
            headers: Optional HTTP headers
            timeout: Request timeout in seconds (default: the client's default_timeout)
            method: HTTP method, GET or POST
            json_body: JSON payload for POST requests
            response_type: "json" to decode the body as JSON, "text" to return it raw

        Returns:
            Decoded JSON (dict, list, ...) or the body text

        Raises:
            APIRequestError: On transport errors, timeouts, non-2xx statuses and bad JSON
        """
        request_timeout = aiohttp.ClientTimeout(total=timeout or self.default_timeout)

        try:
            async with (  # noqa: SIM117
                self._rate_limiter(),
                aiohttp.ClientSession(timeout=request_timeout) as session,
                session.request(
                    method,
                    url,
                    params=params,
                    headers=headers,
                    json=json_body,
                ) as response,
            ):
                status = response.status
                if status < 200 or status >= 300:
                    body = await response.text()
                    if status == 404:
                        logger.debug(f"API returned status {status} for {url} (resource not found)")
                    else:
                        logger.warning(f"API returned status {status} for {url}")
                    raise APIRequestError(url, status, body[:200])

                if response_type == "text":
                    return await response.text()
                return await response.json(content_type=None)

        except APIRequestError:
            raise
        except asyncio.CancelledError:
            raise
        except TimeoutError as e:
            logger.warning(f"Request to {url} timed out")
            raise APIRequestError(url, None, "timed out") from e
        except aiohttp.ClientError as e:
            logger.error(f"Error making request to {url}: {e}")
            raise APIRequestError(url, None, str(e)) from e
        except ValueError as e:
            logger.error(f"Invalid JSON from {url}: {e}")
            raise APIRequestError(url, None, "invalid JSON body") from e
