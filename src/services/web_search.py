"""
Web search - grouped context lookups across web, Wikipedia and IMDb.

Unlike the hybrid search, every selected source runs concurrently and its
results are reported under the source's own group name. A failing or slow
source contributes an empty group.
"""

import asyncio

from adapters.config import SEARCH_PROVIDER_TIMEOUT_SECONDS, WEB_SEARCH_CACHE_TTL
from contracts.models import WebSearchResponse
from services.hybrid_search import SearchSourceProtocol, search_source
from utils.cache import CacheStore
from utils.get_logger import get_logger

logger = get_logger(__name__)

CACHE_PREFIX = "websearch"
MIN_QUERY_LENGTH = 2

# group name -> result limit, in response order
GROUP_LIMITS = {"web": 5, "wikipedia": 3, "imdb": 3}


def selected_groups(sources: str | None) -> list[str]:
    """Parse a `sources` value like "wikipedia,imdb"; "all" (the default) selects every group."""
    names = [s.strip().lower() for s in (sources or "all").split(",") if s.strip()]
    if not names or "all" in names:
        return list(GROUP_LIMITS)
    return [group for group in GROUP_LIMITS if group in names]


class WebSearchService:
    def __init__(
        self,
        sources: dict[str, SearchSourceProtocol],
        cache: CacheStore | None = None,
        timeout: float = SEARCH_PROVIDER_TIMEOUT_SECONDS,
    ):
        self.sources = sources
        self.cache = cache
        self.timeout = timeout

    async def search(self, query: str, sources: str | None = "all") -> WebSearchResponse:
        """
        Search the selected groups concurrently, reading through the cache.

        Args:
            query: Free-text query
            sources: Comma-separated group names (web, wikipedia, imdb) or "all"

        Returns:
            WebSearchResponse with one entry per selected, configured group

        Raises:
            ValueError: If the query is blank or shorter than two characters
        """
        q = (query or "").strip()
        if len(q) < MIN_QUERY_LENGTH:
            raise ValueError("query is too short")

        sources = sources or "all"
        key = CacheStore.key(CACHE_PREFIX, {"q": q.lower(), "sources": sources})
        if self.cache is not None:
            cached = await self.cache.get(key)
            if isinstance(cached, dict):
                response = WebSearchResponse.model_validate(cached)
                return response.model_copy(update={"cached": True})

        groups = [g for g in selected_groups(sources) if g in self.sources]
        found = await asyncio.gather(
            *(
                search_source(self.sources[group], q, GROUP_LIMITS[group], self.timeout)
                for group in groups
            )
        )
        results = dict(zip(groups, found, strict=True))
        response = WebSearchResponse(
            query=q,
            results=results,
            total=sum(len(r) for r in found),
        )
        logger.info(f"Web search for '{q}' over {groups}: {response.total} results")

        if self.cache is not None:
            await self.cache.set(key, response.to_dict(), WEB_SEARCH_CACHE_TTL)
        return response

    async def context(self, query: str, groups: str, limit: int) -> str:
        """Up to `limit` `title: snippet` lines from the given groups, in group order."""
        response = await self.search(query, groups)
        lines = [
            f"{r.title}: {r.snippet}"
            for group in response.results.values()
            for r in group
        ]
        return "\n".join(lines[:limit])
