"""
AI web search - last-resort search stage backed by Perplexity's online models.

The model is asked for a JSON object {"results": [...]} describing web pages
about the query; the answer is parsed leniently and turned into SearchResults.
"""

from typing import Any

from api.llm.providers import PerplexityProvider
from contracts.models import ResultKind, SearchResult, SearchSource
from utils.get_logger import get_logger
from utils.parse_json import parse_json

logger = get_logger(__name__)

DEFAULT_AI_CONFIDENCE = 0.6

SYSTEM_PROMPT = (
    "You are a movie database expert with live web access. "
    "Return ONLY valid JSON, no markdown."
)

USER_PROMPT = """Search the web for: {query}

Return up to {limit} relevant pages about the movie, show or person as JSON:
{{"results": [{{"title": "string", "snippet": "string", "url": "string",
"type": "movie|person|review", "year": "string", "confidence": 0.0}}]}}

If nothing relevant exists, return {{"results": []}}"""


def _coerce_kind(value: Any) -> ResultKind:
    try:
        return ResultKind(str(value).lower())
    except ValueError:
        return ResultKind.MOVIE


def _coerce_confidence(value: Any) -> float:
    try:
        confidence = float(value)
    except (TypeError, ValueError):
        return DEFAULT_AI_CONFIDENCE
    return min(max(confidence, 0.0), 1.0)


def results_from_answer(answer: str, limit: int) -> list[SearchResult]:
    """Parse the model's answer; entries without a title or an http(s) url are dropped."""
    parsed = parse_json(answer)
    if isinstance(parsed, dict):
        items = parsed.get("results") or []
    elif isinstance(parsed, list):
        items = parsed
    else:
        return []

    results: list[SearchResult] = []
    for item in items:
        if len(results) >= limit:
            break
        if not isinstance(item, dict):
            continue
        title = str(item.get("title") or "").strip()
        url = str(item.get("url") or "").strip()
        if not title or not url.startswith(("http://", "https://")):
            continue
        year = item.get("year")
        results.append(
            SearchResult(
                title=title,
                snippet=str(item.get("snippet") or ""),
                url=url,
                kind=_coerce_kind(item.get("type")),
                confidence=_coerce_confidence(item.get("confidence")),
                year=str(year)[:4] if year else None,
                source=SearchSource.PERPLEXITY,
            )
        )
    return results


class PerplexitySearchService:
    """Tertiary search stage. Returns no results when Perplexity is not configured."""

    name = SearchSource.PERPLEXITY

    def __init__(self, provider: PerplexityProvider | None = None):
        self.provider = provider or PerplexityProvider()

    def is_configured(self) -> bool:
        return self.provider.is_configured()

    async def search(
        self, query: str, limit: int = 6, timeout: float | None = None
    ) -> list[SearchResult]:
        """
        Ask the online model for pages about the query.

        Raises:
            APIRequestError: If the request fails
        """
        if not self.is_configured():
            logger.debug("PERPLEXITY_API_KEY not configured; skipping AI web search")
            return []

        answer = await self.provider.complete(
            [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": USER_PROMPT.format(query=query, limit=limit)},
            ],
            timeout=timeout,
            temperature=0.1,
        )
        results = results_from_answer(answer, limit)
        logger.debug(f"Perplexity returned {len(results)} results for '{query}'")
        return results
