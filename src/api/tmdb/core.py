"""
TMDB Core Service - Primary metadata provider.
Handles API communication, text search (movie, person, multi) and details fetching.
"""

from __future__ import annotations

import asyncio
from typing import Any

from api.tmdb.auth import Auth
from api.tmdb.tmdb_models import (
    TMDBMovieDetailsResult,
    TMDBMultiSearchItem,
    TMDBPersonDetailsResult,
    TMDBPersonMovieCredits,
    TMDBSearchMovie,
    TMDBSearchPerson,
    TMDBSearchResponse,
)
from utils.base_api_client import APIRequestError, BaseAPIClient
from utils.get_logger import get_logger

logger = get_logger(__name__)

MOVIE_APPEND_TO_RESPONSE = "credits,videos,watch/providers,external_ids"


class TMDBService(Auth, BaseAPIClient):
    """
    Core TMDB service for API communication and media details.
    Every method raises APIRequestError when TMDB cannot be reached or answers
    with an error status; callers decide whether that is fatal.
    """

    # TMDB allows roughly 40 requests per second; stay under it
    rate_limit_max = 35
    rate_limit_period = 1.0
    default_timeout = 10.0

    def __init__(self, read_token: str | None = None, api_key: str | None = None):
        """Initialize TMDB service; credentials default to the environment."""
        super().__init__(read_token=read_token, api_key=api_key)

    async def _make_request(
        self, endpoint: str, params: dict[str, Any] | None = None
    ) -> dict[str, Any]:
        """Make async HTTP request to TMDB API.

        Args:
            endpoint: API endpoint (e.g., 'movie/123')
            params: Optional query parameters

        Returns:
            JSON response dict

        Raises:
            APIRequestError: If credentials are missing or the request fails
        """
        url = f"{self.base_url}/{endpoint}"
        if not self.has_credentials:
            logger.error("TMDB_READ_TOKEN / TMDB_API_KEY not available in environment")
            raise APIRequestError(url, None, "TMDB credentials not configured")

        request_params = {**self.auth_params(), **(params or {})}
        result = await self._core_async_request(
            url=url,
            params=request_params,
            headers=self.auth_headers(),
        )
        if not isinstance(result, dict):
            raise APIRequestError(url, None, "unexpected TMDB payload")
        return result

    @staticmethod
    def _search_params(query: str) -> dict[str, Any]:
        return {
            "query": query,
            "include_adult": "false",
            "language": "en-US",
            "page": 1,
        }

    async def _search(self, scope: str, query: str) -> list[dict[str, Any]]:
        data = await self._make_request(f"search/{scope}", self._search_params(query))
        return TMDBSearchResponse.model_validate(data).results

    async def search_movies(self, query: str) -> list[TMDBSearchMovie]:
        """Movie-scoped text search (first page)."""
        results = await self._search("movie", query)
        return [TMDBSearchMovie.model_validate(item) for item in results]

    async def search_people(self, query: str) -> list[TMDBSearchPerson]:
        """Person-scoped text search (first page)."""
        results = await self._search("person", query)
        return [TMDBSearchPerson.model_validate(item) for item in results]

    async def search_multi(self, query: str) -> list[TMDBMultiSearchItem]:
        """Mixed movie/tv/person text search used by the hybrid search."""
        results = await self._search("multi", query)
        return [TMDBMultiSearchItem.model_validate(item) for item in results]

    async def search_entities(
        self, query: str
    ) -> tuple[list[TMDBSearchMovie], list[TMDBSearchPerson]]:
        """Run the movie and person searches concurrently.

        Raises:
            APIRequestError: If either search fails
        """
        movies, people = await asyncio.gather(
            self.search_movies(query),
            self.search_people(query),
        )
        return movies, people

    async def get_movie_details(self, movie_id: int) -> TMDBMovieDetailsResult:
        """Movie details with credits, videos, watch providers and external ids appended."""
        data = await self._make_request(
            f"movie/{movie_id}",
            {"append_to_response": MOVIE_APPEND_TO_RESPONSE, "language": "en-US"},
        )
        return TMDBMovieDetailsResult.model_validate(data)

    async def get_person_details(self, person_id: int) -> TMDBPersonDetailsResult:
        data = await self._make_request(f"person/{person_id}", {"language": "en-US"})
        return TMDBPersonDetailsResult.model_validate(data)

    async def get_person_movie_credits(self, person_id: int) -> TMDBPersonMovieCredits:
        data = await self._make_request(
            f"person/{person_id}/movie_credits", {"language": "en-US"}
        )
        return TMDBPersonMovieCredits.model_validate(data)

