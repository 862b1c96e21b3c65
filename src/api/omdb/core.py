"""
OMDB Core Service - ratings lookup by IMDb id.
"""

import os
from typing import Any

from contracts.models import Rating
from utils.base_api_client import BaseAPIClient
from utils.get_logger import get_logger

logger = get_logger(__name__)

OMDB_URL = "https://www.omdbapi.com/"


def ratings_from_payload(data: dict[str, Any]) -> list[Rating]:
    """
    Extract ratings from an OMDB title payload.

    imdbRating becomes "IMDb x/10"; every entry of the Ratings array follows,
    skipping sources already present. A payload with Response "False" has none.
    """
    if not data or data.get("Response") == "False":
        return []

    ratings: list[Rating] = []
    imdb_rating = data.get("imdbRating")
    if imdb_rating and imdb_rating != "N/A":
        ratings.append(Rating(source="IMDb", score=f"{imdb_rating}/10"))

    for entry in data.get("Ratings") or []:
        source = entry.get("Source")
        value = entry.get("Value")
        if not source or not value:
            continue
        if source == "Internet Movie Database":
            source = "IMDb"
        if any(r.source == source for r in ratings):
            continue
        ratings.append(Rating(source=source, score=value))

    return ratings


class OMDBService(BaseAPIClient):
    """OMDB client. Disabled (returns no ratings) when OMDB_API_KEY is missing."""

    rate_limit_max = 10
    rate_limit_period = 1.0
    default_timeout = 8.0

    def __init__(self, api_key: str | None = None):
        self._api_key = api_key

    @property
    def api_key(self) -> str | None:
        if self._api_key is None:
            self._api_key = os.getenv("OMDB_API_KEY") or None
        return self._api_key

    def is_configured(self) -> bool:
        return bool(self.api_key)

    async def get_ratings(self, imdb_id: str | None) -> list[Rating]:
        """Ratings for a title.

        Raises:
            APIRequestError: If the request fails
        """
        if not imdb_id or not self.is_configured():
            return []

        data = await self._core_async_request(
            url=OMDB_URL,
            params={"i": imdb_id, "apikey": self.api_key},
        )
        if not isinstance(data, dict):
            return []
        if data.get("Response") == "False":
            logger.debug(f"OMDB has no entry for {imdb_id}: {data.get('Error')}")
        return ratings_from_payload(data)
