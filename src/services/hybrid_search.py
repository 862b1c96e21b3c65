"""
Hybrid search - primary metadata search with web-search fallbacks.

Cascade:
    1. TMDB multi search with the cleaned title, preceded by TVMaze season or
       episode results when the query names a season
    2. secondary web search (first configured source with results wins) when
       TMDB found nothing or the query names a regional language
    3. AI web search when everything before came back empty

Results are ranked by composite score and truncated. A failing source counts
as zero results; only a blank query is an error.
"""

import asyncio
from typing import Protocol

from adapters.config import (
    SEARCH_CACHE_TTL,
    SEARCH_PROVIDER_TIMEOUT_SECONDS,
    SEARCH_RESULT_LIMIT,
)
from api.tmdb.core import TMDBService
from api.tmdb.models import search_result_from_multi
from api.tvmaze.core import TVMazeService
from contracts.models import ParsedQuery, SearchResponse, SearchResult, SearchSource
from core.query_parser import build_search_query, parse
from core.ranking import DEFAULT_WEIGHTS, RankingWeights, rank_results
from utils.base_api_client import APIRequestError
from utils.cache import CacheStore
from utils.get_logger import get_logger

logger = get_logger(__name__)

CACHE_PREFIX = "duckduckgo_search"


class SearchSourceProtocol(Protocol):
    name: str | SearchSource

    async def search(
        self, query: str, limit: int = 6, timeout: float | None = None
    ) -> list[SearchResult]: ...


def _label(source: SearchSourceProtocol) -> str:
    return getattr(source.name, "value", source.name)


async def search_source(
    source: SearchSourceProtocol, query: str, limit: int, timeout: float
) -> list[SearchResult]:
    """Run one source with a deadline; any failure becomes an empty list."""
    try:
        return await asyncio.wait_for(
            source.search(query, limit=limit, timeout=timeout), timeout=timeout
        )
    except (APIRequestError, TimeoutError) as e:
        logger.warning(f"{_label(source)} search failed for '{query}': {e}")
    except Exception as e:
        logger.error(f"Unexpected {_label(source)} search error for '{query}': {e}")
    return []


async def first_with_results(
    sources: list[SearchSourceProtocol], query: str, limit: int, timeout: float
) -> list[SearchResult]:
    """Try sources in order and return the first non-empty result list."""
    for source in sources:
        results = await search_source(source, query, limit, timeout)
        if results:
            logger.info(f"{_label(source)} returned {len(results)} results for '{query}'")
            return results
    return []


def merge_by_url(primary: list[SearchResult], extra: list[SearchResult]) -> list[SearchResult]:
    seen = {r.url for r in primary}
    merged = list(primary)
    for result in extra:
        if result.url not in seen:
            seen.add(result.url)
            merged.append(result)
    return merged


class TMDBSearchSource:
    """TMDB multi search adapted to the search-source interface."""

    name = SearchSource.TMDB

    def __init__(self, tmdb: TMDBService):
        self.tmdb = tmdb

    async def search(
        self, query: str, limit: int = 6, timeout: float | None = None
    ) -> list[SearchResult]:
        items = await self.tmdb.search_multi(query)
        results = [r for r in (search_result_from_multi(item) for item in items) if r]
        return results[:limit]


class EpisodeSearchSource:
    """TVMaze season/episode lookup for one parsed query."""

    name = SearchSource.TVMAZE

    def __init__(self, tvmaze: TVMazeService, parsed: ParsedQuery):
        self.tvmaze = tvmaze
        self.parsed = parsed

    async def search(
        self, query: str, limit: int = 6, timeout: float | None = None
    ) -> list[SearchResult]:
        return await self.tvmaze.search_episodes(
            query,
            season=self.parsed.season,
            episode=self.parsed.episode,
            year=self.parsed.year,
            limit=limit,
            timeout=timeout,
        )


class HybridSearchService:
    def __init__(
        self,
        tmdb: TMDBService,
        secondary: list[SearchSourceProtocol],
        tertiary: SearchSourceProtocol | None = None,
        cache: CacheStore | None = None,
        weights: RankingWeights = DEFAULT_WEIGHTS,
        limit: int = SEARCH_RESULT_LIMIT,
        timeout: float = SEARCH_PROVIDER_TIMEOUT_SECONDS,
        tvmaze: TVMazeService | None = None,
    ):
        self.primary = TMDBSearchSource(tmdb)
        self.tvmaze = tvmaze
        self.secondary = secondary
        self.tertiary = tertiary
        self.cache = cache
        self.weights = weights
        self.limit = limit
        self.timeout = timeout

    async def gather_results(self, parsed: ParsedQuery) -> list[SearchResult]:
        """Run the cascade and return the merged, unranked results."""
        title = parsed.search_title
        results = await search_source(self.primary, title, self.limit, self.timeout)

        if parsed.season is not None and self.tvmaze is not None:
            episodes = await search_source(
                EpisodeSearchSource(self.tvmaze, parsed), title, self.limit, self.timeout
            )
            results = merge_by_url(episodes, results)

        if not results or parsed.language:
            decorated = build_search_query(parsed)
            secondary = await first_with_results(
                self.secondary, decorated, self.limit, self.timeout
            )
            results = merge_by_url(results, secondary) if results else secondary

        if not results and self.tertiary is not None:
            logger.info(f"No results for '{title}'; falling back to AI web search")
            results = await search_source(
                self.tertiary, build_search_query(parsed), self.limit, self.timeout
            )

        return results

    async def search(self, query: str) -> SearchResponse:
        """
        Search across sources, reading through the cache.

        Raises:
            ValueError: If the query is blank
        """
        q = (query or "").strip()
        if not q:
            raise ValueError("query must not be empty")

        key = CacheStore.key(CACHE_PREFIX, {"q": q.lower()})
        if self.cache is not None:
            cached = await self.cache.get(key)
            if isinstance(cached, dict):
                response = SearchResponse.model_validate(cached)
                return response.model_copy(update={"cached": True})

        parsed = parse(q)
        results = await self.gather_results(parsed)
        ranked = rank_results(results, parsed.search_title, self.limit, self.weights)
        response = SearchResponse(
            query=q,
            total=len(results),
            results=ranked,
            parsed_query=parsed,
        )

        if self.cache is not None:
            await self.cache.set(key, response.to_dict(), SEARCH_CACHE_TTL)
        return response
