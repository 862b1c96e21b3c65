"""
Unit tests for WebSearchService (the /websearch operation).
"""

import pytest

from contracts.models import ResultKind, SearchResult, SearchSource
from services.tests.conftest import FakeSource, upstream_error
from services.web_search import WebSearchService, selected_groups

pytestmark = pytest.mark.unit


def result(title, url, source):
    return SearchResult(
        title=title,
        snippet=f"{title} snippet",
        url=url,
        kind=ResultKind.MOVIE,
        confidence=0.9,
        source=source,
    )


def make_sources(web_error=None):
    return {
        "web": FakeSource(
            "duckduckgo",
            [result(f"Web {i}", f"https://example.com/{i}", SearchSource.DUCKDUCKGO) for i in range(7)],
            error=web_error,
        ),
        "wikipedia": FakeSource(
            "wikipedia",
            [result("Kaathal - The Core", "https://en.wikipedia.org/wiki/Kaathal", SearchSource.WIKIPEDIA)],
        ),
        "imdb": FakeSource(
            "imdb",
            [result("Kaathal (2023) - IMDb", "https://www.imdb.com/title/tt1/", SearchSource.IMDB)],
        ),
    }


@pytest.mark.parametrize(
    "sources, groups",
    [
        ("all", ["web", "wikipedia", "imdb"]),
        (None, ["web", "wikipedia", "imdb"]),
        ("", ["web", "wikipedia", "imdb"]),
        ("imdb,wikipedia", ["wikipedia", "imdb"]),
        (" Web , unknown", ["web"]),
        ("web,all", ["web", "wikipedia", "imdb"]),
    ],
)
def test_selected_groups(sources, groups):
    assert selected_groups(sources) == groups


class TestSearch:
    @pytest.mark.asyncio
    async def test_all_groups_with_limits(self):
        sources = make_sources()
        response = await WebSearchService(sources).search("Kaathal")

        assert list(response.results) == ["web", "wikipedia", "imdb"]
        assert len(response.results["web"]) == 5
        assert response.total == 7
        assert sources["imdb"].queries == ["Kaathal"]
        assert response.cached is False

    @pytest.mark.asyncio
    async def test_only_requested_groups_run(self):
        sources = make_sources()
        response = await WebSearchService(sources).search("Kaathal", sources="wikipedia")

        assert list(response.results) == ["wikipedia"]
        assert sources["web"].queries == []
        assert sources["imdb"].queries == []

    @pytest.mark.asyncio
    async def test_failing_group_is_empty(self):
        sources = make_sources(web_error=upstream_error("https://html.duckduckgo.com/html/"))
        response = await WebSearchService(sources).search("Kaathal")

        assert response.results["web"] == []
        assert response.total == 2

    @pytest.mark.asyncio
    @pytest.mark.parametrize("query", ["", "   ", "k"])
    async def test_short_query_rejected(self, query):
        sources = make_sources()
        with pytest.raises(ValueError):
            await WebSearchService(sources).search(query)
        assert sources["web"].queries == []

    @pytest.mark.asyncio
    async def test_cached_per_query_and_sources(self, cache_store, fake_redis):
        sources = make_sources()
        service = WebSearchService(sources, cache=cache_store)

        await service.search("Kaathal", sources="wikipedia,imdb")
        again = await service.search("KAATHAL ", sources="wikipedia,imdb")

        assert again.cached is True
        assert [r.title for r in again.results["imdb"]] == ["Kaathal (2023) - IMDb"]
        assert len(sources["wikipedia"].queries) == 1
        assert fake_redis.ttls["websearch:q:kaathal|sources:wikipedia,imdb"] == 3600

    @pytest.mark.asyncio
    async def test_context_lines_follow_group_order(self):
        context = await WebSearchService(make_sources()).context("Kaathal", "imdb,wikipedia", limit=5)

        assert context == (
            "Kaathal - The Core: Kaathal - The Core snippet\n"
            "Kaathal (2023) - IMDb: Kaathal (2023) - IMDb snippet"
        )
