"""
DuckDuckGo Core Service - keyless web search by HTML scraping.
Fetches the html.duckduckgo.com results page and parses it with BeautifulSoup.
"""

from urllib.parse import parse_qs, urlparse

from bs4 import BeautifulSoup

from contracts.models import ResultKind, SearchResult, SearchSource
from core.query_parser import extract_language
from core.ranking import domain_confidence, extract_year
from utils.base_api_client import BaseAPIClient
from utils.get_logger import get_logger

logger = get_logger(__name__)

DUCKDUCKGO_URL = "https://html.duckduckgo.com/html/"
USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)

PERSON_HINTS = ("actor", "actress", "director", "cast")
REVIEW_HINTS = ("review", "rating")


def unwrap_redirect(href: str) -> str:
    """
    Resolve DuckDuckGo's `//duckduckgo.com/l/?uddg=<encoded>` redirect links.

    Args:
        href: The raw anchor href

    Returns:
        The destination URL (unchanged when the href is not a redirect)
    """
    if not href:
        return ""
    if href.startswith("//"):
        href = f"https:{href}"

    parsed = urlparse(href)
    is_ddg_host = not parsed.netloc or parsed.netloc.endswith("duckduckgo.com")
    if is_ddg_host and parsed.path.startswith("/l/"):
        target = parse_qs(parsed.query).get("uddg")
        if target:
            return target[0]
    return href


def classify_result(title: str, snippet: str, url: str) -> ResultKind:
    """
    person for IMDb name pages or actor/director/cast titles, review for
    review/rating titles or /review paths, else movie.

    The snippet is not inspected.
    """
    text = title.lower()
    lowered_url = url.lower()
    if "imdb.com/name/" in lowered_url or any(hint in text for hint in PERSON_HINTS):
        return ResultKind.PERSON
    if "/review" in lowered_url or any(hint in text for hint in REVIEW_HINTS):
        return ResultKind.REVIEW
    return ResultKind.MOVIE


class DuckDuckGoService(BaseAPIClient):
    """
    Pure DuckDuckGo scraper service.
    Never needs credentials, so it is always available as a fallback.
    """

    rate_limit_max = 2
    rate_limit_period = 1.0
    default_timeout = 10.0

    name = SearchSource.DUCKDUCKGO

    def is_configured(self) -> bool:
        return True

    def parse_results(self, html: str, limit: int) -> list[SearchResult]:
        """
        Parse the results page.

        Each hit is an `a.result__a` anchor (title and href) followed by an
        `a.result__snippet` anchor inside the same result container. Hits
        missing a title, url or snippet are skipped.

        Args:
            html: Raw HTML of the results page
            limit: Maximum number of results

        Returns:
            Classified SearchResults with domain-based confidence
        """
        soup = BeautifulSoup(html, "html.parser")
        results: list[SearchResult] = []

        for anchor in soup.select("a.result__a"):
            if len(results) >= limit:
                break

            container = anchor.find_parent(class_="result") or anchor.find_parent("div")
            snippet_tag = container.select_one(".result__snippet") if container else None

            title = anchor.get_text(" ", strip=True)
            url = unwrap_redirect(anchor.get("href", ""))
            snippet = snippet_tag.get_text(" ", strip=True) if snippet_tag else ""
            if not (title and url and snippet):
                continue

            results.append(
                SearchResult(
                    title=title,
                    snippet=snippet,
                    url=url,
                    kind=classify_result(title, snippet, url),
                    confidence=domain_confidence(url),
                    year=extract_year(f"{title} {snippet}"),
                    language=extract_language(title),
                    source=SearchSource.DUCKDUCKGO,
                )
            )

        return results

    async def search(
        self, query: str, limit: int = 6, timeout: float | None = None
    ) -> list[SearchResult]:
        """Search DuckDuckGo.

        Raises:
            APIRequestError: If the page cannot be fetched
        """
        html = await self._core_async_request(
            url=DUCKDUCKGO_URL,
            params={"q": query},
            headers={"User-Agent": USER_AGENT},
            timeout=timeout,
            response_type="text",
        )
        results = self.parse_results(html or "", limit)
        logger.debug(f"DuckDuckGo returned {len(results)} results for '{query}'")
        return results


class DuckDuckGoSiteSearch:
    """DuckDuckGo restricted to one site with a `site:` operator, e.g. IMDb."""

    def __init__(
        self,
        site: str,
        name: SearchSource,
        duckduckgo: DuckDuckGoService | None = None,
    ):
        self.site = site
        self.name = name
        self.duckduckgo = duckduckgo or DuckDuckGoService()

    async def search(
        self, query: str, limit: int = 3, timeout: float | None = None
    ) -> list[SearchResult]:
        results = await self.duckduckgo.search(f"site:{self.site} {query}", limit=limit, timeout=timeout)
        return [r.model_copy(update={"source": self.name}) for r in results]


def imdb_search(duckduckgo: DuckDuckGoService | None = None) -> DuckDuckGoSiteSearch:
    return DuckDuckGoSiteSearch("imdb.com", SearchSource.IMDB, duckduckgo)
