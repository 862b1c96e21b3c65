"""
TVMaze Core Service - show search, season episode lists and single episodes.
No credentials needed.
"""

from typing import Any

from api.tvmaze.models import (
    TVMazeEpisode,
    TVMazeShow,
    episode_result,
    show_result,
)
from contracts.models import SearchResult, SearchSource
from utils.base_api_client import APIRequestError, BaseAPIClient
from utils.get_logger import get_logger

logger = get_logger(__name__)

TVMAZE_BASE_URL = "https://api.tvmaze.com"


class TVMazeService(BaseAPIClient):
    """TVMaze client. Used for queries that name a season or an episode."""

    # TVMaze allows 20 calls every 10 seconds per IP
    rate_limit_max = 20
    rate_limit_period = 10.0
    default_timeout = 8.0

    name = SearchSource.TVMAZE

    async def _make_request(
        self, endpoint: str, params: dict[str, Any] | None = None, timeout: float | None = None
    ) -> Any:
        return await self._core_async_request(
            url=f"{TVMAZE_BASE_URL}/{endpoint}", params=params, timeout=timeout
        )

    async def search_shows(self, query: str, timeout: float | None = None) -> list[TVMazeShow]:
        """Shows matching `query`, best match first.

        Raises:
            APIRequestError: If the request fails
        """
        data = await self._make_request("search/shows", {"q": query}, timeout)
        if not isinstance(data, list):
            return []
        return [TVMazeShow.model_validate(item["show"]) for item in data if item.get("show")]

    async def find_best_show(
        self, query: str, year: str | None = None, timeout: float | None = None
    ) -> TVMazeShow | None:
        """First search hit, preferring one that premiered in `year`."""
        shows = await self.search_shows(query, timeout)
        if not shows:
            return None
        if year:
            for show in shows:
                if show.premiered and show.premiered.startswith(year):
                    return show
        return shows[0]

    async def get_season_episodes(
        self, show_id: int, season: int, timeout: float | None = None
    ) -> list[TVMazeEpisode]:
        data = await self._make_request(f"shows/{show_id}/episodes", timeout=timeout)
        if not isinstance(data, list):
            return []
        episodes = [TVMazeEpisode.model_validate(item) for item in data]
        return [e for e in episodes if e.season == season]

    async def get_episode(
        self, show_id: int, season: int, number: int, timeout: float | None = None
    ) -> TVMazeEpisode | None:
        """One episode, or None when TVMaze has no such episode (404).

        Raises:
            APIRequestError: For any other failure
        """
        try:
            data = await self._make_request(
                f"shows/{show_id}/episodebynumber",
                {"season": season, "number": number},
                timeout,
            )
        except APIRequestError as e:
            if e.status == 404:
                return None
            raise
        return TVMazeEpisode.model_validate(data) if isinstance(data, dict) else None

    async def search_episodes(
        self,
        title: str,
        season: int,
        episode: int | None = None,
        year: str | None = None,
        limit: int = 6,
        timeout: float | None = None,
    ) -> list[SearchResult]:
        """
        Results for a season or episode query.

        With an episode number the episode comes first, followed by the show.
        Without one, the show is followed by the season's episodes in order.

        Args:
            title: Show title
            season: Season number
            episode: Episode number, if the query named one
            year: Premiere year used to pick between same-named shows
            limit: Maximum number of results

        Returns:
            SearchResults, or [] when no show matches

        Raises:
            APIRequestError: If a TVMaze request fails
        """
        show = await self.find_best_show(title, year, timeout)
        if show is None:
            logger.debug(f"TVMaze found no show for '{title}'")
            return []

        if episode is not None:
            found = await self.get_episode(show.id, season, episode, timeout)
            results = [episode_result(show, found) if found else None, show_result(show)]
        else:
            episodes = await self.get_season_episodes(show.id, season, timeout)
            results = [show_result(show)] + [episode_result(show, e) for e in episodes]

        return [r for r in results if r is not None][:limit]
