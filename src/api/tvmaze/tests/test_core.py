"""
Unit tests for the TVMaze client and its result conversion.
"""

import json
import os

os.environ["ENVIRONMENT"] = "test"

from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest

from api.tvmaze.core import TVMAZE_BASE_URL, TVMazeService
from api.tvmaze.models import (
    TVMazeEpisode,
    TVMazeShow,
    episode_code,
    episode_result,
    show_result,
    strip_html,
)
from contracts.models import ResultKind, SearchSource
from utils.base_api_client import APIRequestError

pytestmark = pytest.mark.unit

FIXTURES_DIR = Path(__file__).parent / "fixtures"


def load_fixture(name: str):
    with open(FIXTURES_DIR / name) as f:
        return json.load(f)


@pytest.fixture
def breaking_bad() -> TVMazeShow:
    return TVMazeShow.model_validate(load_fixture("search_shows.json")[0]["show"])


class TestModels:
    def test_strip_html(self):
        assert strip_html("<p><b>Breaking Bad</b> follows Walter.</p>") == "Breaking Bad follows Walter."
        assert strip_html(None) == ""

    @pytest.mark.parametrize("season, number, code", [(3, 2, "S03E02"), (1, None, "S01"), (12, 10, "S12E10")])
    def test_episode_code(self, season, number, code):
        assert episode_code(season, number) == code

    def test_show_result(self, breaking_bad):
        result = show_result(breaking_bad)

        assert result.title == "Breaking Bad"
        assert result.snippet.startswith("Breaking Bad follows")
        assert result.url == "https://www.tvmaze.com/shows/169/breaking-bad"
        assert result.kind == ResultKind.MOVIE
        assert result.confidence == 0.95
        assert result.year == "2008"
        assert result.language is None
        assert result.source == SearchSource.TVMAZE

    def test_episode_result(self, breaking_bad):
        episode = TVMazeEpisode.model_validate(load_fixture("season_episodes.json")[2])
        result = episode_result(breaking_bad, episode)

        assert result.title == "Breaking Bad - S02E02: Grilled"
        assert result.snippet == "Walt and Jesse are held captive."
        assert result.year == "2009"

    def test_long_summary_is_shortened(self, breaking_bad):
        show = breaking_bad.model_copy(update={"summary": "<p>" + "word " * 100 + "</p>"})
        assert show_result(show).snippet.endswith("...")
        assert len(show_result(show).snippet) <= 203


class TestService:
    @pytest.mark.asyncio
    async def test_search_shows(self):
        service = TVMazeService()
        mock_request = AsyncMock(return_value=load_fixture("search_shows.json"))
        with patch.object(service, "_core_async_request", new=mock_request):
            shows = await service.search_shows("Breaking Bad")

        kwargs = mock_request.call_args.kwargs
        assert kwargs["url"] == f"{TVMAZE_BASE_URL}/search/shows"
        assert kwargs["params"] == {"q": "Breaking Bad"}
        assert [s.id for s in shows] == [169, 40052]

    @pytest.mark.asyncio
    async def test_find_best_show_prefers_year(self):
        service = TVMazeService()
        mock_request = AsyncMock(return_value=load_fixture("search_shows.json"))
        with patch.object(service, "_core_async_request", new=mock_request):
            assert (await service.find_best_show("Breaking Bad", "2019")).id == 40052
            assert (await service.find_best_show("Breaking Bad", "1990")).id == 169
            assert (await service.find_best_show("Breaking Bad")).id == 169

    @pytest.mark.asyncio
    async def test_season_query_lists_the_season(self):
        service = TVMazeService()
        mock_request = AsyncMock(
            side_effect=[load_fixture("search_shows.json"), load_fixture("season_episodes.json")]
        )
        with patch.object(service, "_core_async_request", new=mock_request):
            results = await service.search_episodes("Breaking Bad", season=2)

        assert mock_request.call_args.kwargs["url"] == f"{TVMAZE_BASE_URL}/shows/169/episodes"
        assert [r.title for r in results] == [
            "Breaking Bad",
            "Breaking Bad - S02E01: Seven Thirty-Seven",
            "Breaking Bad - S02E02: Grilled",
        ]

    @pytest.mark.asyncio
    async def test_episode_query_puts_episode_first(self):
        service = TVMazeService()
        episode = load_fixture("season_episodes.json")[2]
        mock_request = AsyncMock(side_effect=[load_fixture("search_shows.json"), episode])
        with patch.object(service, "_core_async_request", new=mock_request):
            results = await service.search_episodes("Breaking Bad", season=2, episode=2)

        kwargs = mock_request.call_args.kwargs
        assert kwargs["url"] == f"{TVMAZE_BASE_URL}/shows/169/episodebynumber"
        assert kwargs["params"] == {"season": 2, "number": 2}
        assert [r.title for r in results] == ["Breaking Bad - S02E02: Grilled", "Breaking Bad"]

    @pytest.mark.asyncio
    async def test_missing_episode_falls_back_to_show(self):
        service = TVMazeService()
        not_found = APIRequestError(f"{TVMAZE_BASE_URL}/shows/169/episodebynumber", 404, "Not Found")
        mock_request = AsyncMock(side_effect=[load_fixture("search_shows.json"), not_found])
        with patch.object(service, "_core_async_request", new=mock_request):
            results = await service.search_episodes("Breaking Bad", season=9, episode=1)

        assert [r.title for r in results] == ["Breaking Bad"]

    @pytest.mark.asyncio
    async def test_no_show(self):
        service = TVMazeService()
        with patch.object(service, "_core_async_request", new=AsyncMock(return_value=[])):
            assert await service.search_episodes("Nothing", season=1) == []

    @pytest.mark.asyncio
    async def test_other_errors_propagate(self):
        service = TVMazeService()
        error = APIRequestError(f"{TVMAZE_BASE_URL}/search/shows", 500, "oops")
        with patch.object(service, "_core_async_request", new=AsyncMock(side_effect=error)):
            with pytest.raises(APIRequestError):
                await service.search_episodes("Breaking Bad", season=1)
