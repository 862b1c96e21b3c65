"""
SerpApi Core Service - Google search results API.
Uses the knowledge graph and organic results to find movies, persons and reviews.
"""

import os
from typing import Any

from contracts.models import ResultKind, SearchResult, SearchSource
from core.query_parser import extract_language
from core.ranking import domain_confidence, extract_year
from utils.base_api_client import BaseAPIClient
from utils.get_logger import get_logger

logger = get_logger(__name__)

SERPAPI_URL = "https://serpapi.com/search.json"


def kind_from_knowledge_graph(kg_type: str | None) -> ResultKind:
    t = (kg_type or "").lower()
    if "film" in t or "movie" in t:
        return ResultKind.MOVIE
    if "tv" in t or "series" in t or "show" in t:
        return ResultKind.MOVIE
    if any(word in t for word in ("actor", "actress", "person", "director")):
        return ResultKind.PERSON
    return ResultKind.MOVIE


def kind_from_snippet(text: str) -> ResultKind:
    t = text.lower()
    if "imdb" in t and "rating" in t:
        return ResultKind.REVIEW
    return ResultKind.MOVIE


class SerpApiService(BaseAPIClient):
    """
    SerpApi client. Disabled (returns no results) when no key is configured.
    """

    rate_limit_max = 5
    rate_limit_period = 1.0
    default_timeout = 10.0

    name = SearchSource.SERPAPI

    def __init__(self, api_key: str | None = None):
        self._api_key = api_key

    @property
    def api_key(self) -> str | None:
        if self._api_key is None:
            self._api_key = os.getenv("SERPAPI_KEY") or os.getenv("SERPAPI_API_KEY") or None
        return self._api_key

    def is_configured(self) -> bool:
        return bool(self.api_key)

    def parse_results(self, data: dict[str, Any], limit: int) -> list[SearchResult]:
        """
        Convert a SerpApi payload into SearchResults.

        The knowledge graph entry (when it has a link) comes first. Organic
        results follow until `limit` is reached, skipping titles already taken
        by an earlier entry (case-insensitive).
        """
        results: list[SearchResult] = []

        kg = data.get("knowledge_graph") or {}
        kg_title = kg.get("title")
        kg_link = kg.get("website") or (kg.get("source") or {}).get("link")
        if kg_title and kg_link:
            header_images = kg.get("header_images") or []
            description = kg.get("description") or ""
            results.append(
                SearchResult(
                    title=kg_title,
                    snippet=description or kg.get("type") or "",
                    url=kg_link,
                    image=(header_images[0].get("image") if header_images else None)
                    or kg.get("image"),
                    kind=kind_from_knowledge_graph(kg.get("type")),
                    confidence=domain_confidence(kg_link),
                    year=extract_year(f"{kg_title} {description}"),
                    language=extract_language(kg_title),
                    source=SearchSource.SERPAPI,
                )
            )

        for item in data.get("organic_results") or []:
            if len(results) >= limit:
                break
            title = item.get("title")
            link = item.get("link")
            if not title or not link:
                continue
            if any(r.title.lower() == title.lower() for r in results):
                continue

            snippet = item.get("snippet") or ""
            results.append(
                SearchResult(
                    title=title,
                    snippet=snippet,
                    url=link,
                    image=item.get("thumbnail"),
                    kind=kind_from_snippet(f"{title} {snippet}"),
                    confidence=domain_confidence(link),
                    year=extract_year(f"{title} {snippet}"),
                    language=extract_language(title),
                    source=SearchSource.SERPAPI,
                )
            )

        return results[:limit]

    async def search(
        self, query: str, limit: int = 6, timeout: float | None = None
    ) -> list[SearchResult]:
        """Search Google through SerpApi.

        Returns:
            Up to `limit` results, or [] when no key is configured

        Raises:
            APIRequestError: If the request fails
        """
        if not self.is_configured():
            logger.debug("SERPAPI_KEY not configured; skipping SerpApi")
            return []

        data = await self._core_async_request(
            url=SERPAPI_URL,
            params={
                "api_key": self.api_key,
                "q": query,
                "engine": "google",
                "num": 10,
                "hl": "en",
                "gl": "in",
            },
            timeout=timeout,
        )
        if not isinstance(data, dict):
            return []

        results = self.parse_results(data, limit)
        logger.debug(f"SerpApi returned {len(results)} results for '{query}'")
        return results
