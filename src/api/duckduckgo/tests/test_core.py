"""
Unit tests for the DuckDuckGo HTML scraper.
"""

import os

os.environ["ENVIRONMENT"] = "test"

from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest

from api.duckduckgo.core import (
    DUCKDUCKGO_URL,
    DuckDuckGoService,
    classify_result,
    imdb_search,
    unwrap_redirect,
)
from contracts.models import ResultKind, SearchSource
from utils.base_api_client import APIRequestError

pytestmark = pytest.mark.unit

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def results_html() -> str:
    return (FIXTURES_DIR / "results.html").read_text()


class TestUnwrapRedirect:
    def test_uddg_redirect(self):
        href = "//duckduckgo.com/l/?uddg=https%3A%2F%2Fwww.imdb.com%2Ftitle%2Ftt8178634%2F&rut=abc"
        assert unwrap_redirect(href) == "https://www.imdb.com/title/tt8178634/"

    def test_relative_redirect(self):
        href = "/l/?uddg=https%3A%2F%2Fletterboxd.com%2Ffilm%2Frrr%2F"
        assert unwrap_redirect(href) == "https://letterboxd.com/film/rrr/"

    def test_direct_link_is_kept(self):
        assert unwrap_redirect("https://example.com/a") == "https://example.com/a"

    def test_empty(self):
        assert unwrap_redirect("") == ""


class TestClassifyResult:
    def test_imdb_name_page_is_person(self):
        assert classify_result("Someone", "Known for", "https://www.imdb.com/name/nm1/") == (
            ResultKind.PERSON
        )

    def test_actor_title_is_person(self):
        assert classify_result("Jr NTR - Indian actor", "Known for RRR", "https://x.com") == (
            ResultKind.PERSON
        )

    def test_review_title(self):
        assert classify_result("RRR user rating", "8/10", "https://x.com") == ResultKind.REVIEW

    def test_snippet_mentioning_cast_stays_movie(self):
        kind = classify_result(
            "RRR (film) - Wikipedia",
            "RRR is a 2022 epic action drama film. The cast includes N. T. Rama Rao Jr.",
            "https://en.wikipedia.org/wiki/RRR_(film)",
        )
        assert kind == ResultKind.MOVIE

    def test_snippet_mentioning_rating_stays_movie(self):
        assert classify_result("RRR", "User rating 8/10", "https://x.com") == ResultKind.MOVIE

    def test_review_path(self):
        assert classify_result("RRR", "Our take", "https://x.com/review/rrr") == ResultKind.REVIEW

    def test_default_movie(self):
        assert classify_result("RRR", "An epic", "https://x.com") == ResultKind.MOVIE


class TestParseResults:
    def test_parses_classifies_and_skips_incomplete_hits(self, results_html):
        results = DuckDuckGoService().parse_results(results_html, limit=10)

        assert [r.url for r in results] == [
            "https://www.imdb.com/title/tt8178634/",
            "https://en.wikipedia.org/wiki/RRR_(film)",
            "https://www.imdb.com/name/nm2508807/",
            "https://www.rottentomatoes.com/m/rrr",
            "https://www.filmcompanion.in/reviews/rrr",
        ]
        assert [r.kind for r in results] == [
            ResultKind.MOVIE,
            ResultKind.MOVIE,
            ResultKind.PERSON,
            ResultKind.MOVIE,
            ResultKind.REVIEW,
        ]
        assert [r.confidence for r in results] == [0.95, 0.9, 0.95, 0.85, 0.7]
        assert results[0].title == "RRR (2022) - IMDb"
        assert results[0].year == "2022"
        assert all(r.source == SearchSource.DUCKDUCKGO for r in results)

    def test_language_comes_from_title(self):
        html = (
            '<div class="result"><a class="result__a" href="https://example.com/kaathal">'
            "Kaathal - Malayalam movie</a>"
            '<a class="result__snippet" href="https://example.com/kaathal">A Tamil-dubbed drama</a></div>'
            '<div class="result"><a class="result__a" href="https://example.com/rrr">RRR</a>'
            '<a class="result__snippet" href="https://example.com/rrr">Telugu epic</a></div>'
        )
        results = DuckDuckGoService().parse_results(html, limit=6)

        assert [r.language for r in results] == ["Malayalam", None]

    def test_limit(self, results_html):
        assert len(DuckDuckGoService().parse_results(results_html, limit=2)) == 2

    def test_empty_page(self):
        assert DuckDuckGoService().parse_results("<html><body></body></html>", limit=6) == []


class TestSearch:
    @pytest.mark.asyncio
    async def test_search_requests_html_endpoint(self, results_html):
        service = DuckDuckGoService()
        mock_request = AsyncMock(return_value=results_html)
        with patch.object(service, "_core_async_request", new=mock_request):
            results = await service.search("RRR Telugu 2022 movie cast", limit=3, timeout=5)

        kwargs = mock_request.call_args.kwargs
        assert kwargs["url"] == DUCKDUCKGO_URL
        assert kwargs["params"] == {"q": "RRR Telugu 2022 movie cast"}
        assert kwargs["response_type"] == "text"
        assert kwargs["timeout"] == 5
        assert "User-Agent" in kwargs["headers"]
        assert len(results) == 3

    @pytest.mark.asyncio
    async def test_imdb_site_search(self, results_html):
        duckduckgo = DuckDuckGoService()
        mock_request = AsyncMock(return_value=results_html)
        with patch.object(duckduckgo, "_core_async_request", new=mock_request):
            results = await imdb_search(duckduckgo).search("RRR movie actor director")

        assert mock_request.call_args.kwargs["params"] == {"q": "site:imdb.com RRR movie actor director"}
        assert len(results) == 3
        assert all(r.source == SearchSource.IMDB for r in results)

    @pytest.mark.asyncio
    async def test_search_propagates_request_errors(self):
        service = DuckDuckGoService()
        error = APIRequestError(DUCKDUCKGO_URL, 403, "blocked")
        with patch.object(service, "_core_async_request", new=AsyncMock(side_effect=error)):
            with pytest.raises(APIRequestError):
                await service.search("anything")
