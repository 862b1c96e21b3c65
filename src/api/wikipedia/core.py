"""
Wikipedia Core Service - article lookup through the opensearch endpoint.

The opensearch payload is a four-element array:
    [query, [titles...], [descriptions...], [urls...]]
"""

from typing import Any

from api.duckduckgo.core import classify_result
from contracts.models import SearchResult, SearchSource
from core.query_parser import extract_language
from core.ranking import domain_confidence, extract_year
from utils.base_api_client import BaseAPIClient
from utils.get_logger import get_logger

logger = get_logger(__name__)

WIKIPEDIA_API_URL = "https://en.wikipedia.org/w/api.php"


def parse_opensearch(data: Any, limit: int) -> list[SearchResult]:
    """Convert an opensearch array into SearchResults, skipping entries without a url."""
    if not isinstance(data, list) or len(data) < 4:
        return []

    _, titles, descriptions, urls = data[:4]
    results: list[SearchResult] = []
    for idx, title in enumerate(titles or []):
        if len(results) >= limit:
            break
        url = urls[idx] if idx < len(urls) else ""
        if not title or not url:
            continue
        snippet = (descriptions[idx] if idx < len(descriptions) else "") or ""
        results.append(
            SearchResult(
                title=title,
                snippet=snippet,
                url=url,
                kind=classify_result(title, snippet, url),
                confidence=domain_confidence(url),
                year=extract_year(f"{title} {snippet}"),
                language=extract_language(title),
                source=SearchSource.WIKIPEDIA,
            )
        )
    return results


class WikipediaService(BaseAPIClient):
    """English Wikipedia article search. No credentials needed."""

    rate_limit_max = 10
    rate_limit_period = 1.0
    default_timeout = 8.0

    name = SearchSource.WIKIPEDIA

    def is_configured(self) -> bool:
        return True

    async def search(
        self, query: str, limit: int = 3, timeout: float | None = None
    ) -> list[SearchResult]:
        """Search article titles.

        Raises:
            APIRequestError: If the request fails
        """
        data = await self._core_async_request(
            url=WIKIPEDIA_API_URL,
            params={
                "action": "opensearch",
                "search": query,
                "limit": limit,
                "namespace": 0,
                "format": "json",
            },
            timeout=timeout,
        )
        results = parse_opensearch(data, limit)
        logger.debug(f"Wikipedia returned {len(results)} results for '{query}'")
        return results
