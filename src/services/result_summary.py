"""
Result summaries - AI summaries of a single search result the user picked.

Facts are lifted from the result snippet (year, genres or role) and the IMDb
id is read from the url. The evidence goes through the creative enrichment
chain, starting with the provider chosen for the result: the caller's
`selectedModel`, or the model selector's pick when none is given.
"""

import re

from adapters.config import PARSE_CACHE_TTL
from contracts.models import (
    ParseRequest,
    ParseResponse,
    ResultDetails,
    ResultKind,
    ResultSummary,
)
from core.ranking import extract_year
from services.enrichment import CreativeEnrichmentService
from services.model_selector import select_model
from utils.cache import CacheStore
from utils.get_logger import get_logger

logger = get_logger(__name__)

CACHE_PREFIX = "parse_result"
DETAIL_CHARS = 500
MAX_GENRES = 3

_IMDB_ID = re.compile(r"imdb\.com/(?:title|name)/([^/?#]+)")
_ROLE = re.compile(r"\b(actor|actress|director|writer|producer|composer)\b", re.IGNORECASE)

SNIPPET_GENRES = [
    "action",
    "comedy",
    "drama",
    "thriller",
    "horror",
    "romance",
    "sci-fi",
    "fantasy",
    "animation",
    "adventure",
]


class SummaryUnavailableError(Exception):
    """Every creative provider failed or returned nothing usable."""


def imdb_id_from_url(url: str) -> str | None:
    match = _IMDB_ID.search(url or "")
    return match.group(1) if match else None


def extract_role(text: str) -> str | None:
    match = _ROLE.search(text or "")
    return match.group(1).lower() if match else None


def extract_genres(text: str) -> list[str]:
    lowered = (text or "").lower()
    return [genre for genre in SNIPPET_GENRES if genre in lowered][:MAX_GENRES]


def snippet_details(snippet: str, kind: ResultKind) -> ResultDetails:
    """person: bio and role; movie: plot, genres and year; review: content."""
    flat = " ".join(line.strip() for line in snippet.splitlines() if line.strip())
    flat = flat[:DETAIL_CHARS]
    if kind == ResultKind.PERSON:
        return ResultDetails(bio=flat, role=extract_role(snippet))
    if kind == ResultKind.MOVIE:
        return ResultDetails(
            plot=flat, genres=extract_genres(snippet), year=extract_year(snippet)
        )
    return ResultDetails(content=flat)


def result_evidence(request: ParseRequest, details: ResultDetails) -> str:
    evidence = (
        f"Title: {request.title}\n"
        f"Source: {request.url}\n"
        f"Type: {request.kind.value}\n\n"
        f"Content: {request.snippet}\n"
    )
    if details.year:
        evidence += f"Year: {details.year}\n"
    if details.genres:
        evidence += f"Genres: {', '.join(details.genres)}\n"
    if details.role:
        evidence += f"Role: {details.role}\n"
    return evidence


class ResultSummaryService:
    def __init__(
        self,
        enrichment: CreativeEnrichmentService,
        cache: CacheStore | None = None,
    ):
        self.enrichment = enrichment
        self.cache = cache

    async def summarize(self, request: ParseRequest) -> ParseResponse:
        """
        Summarise one search result, reading through the cache.

        Args:
            request: url, title, snippet, type and an optional selectedModel

        Returns:
            ParseResponse with short and long summaries and snippet details

        Raises:
            ValueError: If url, title, snippet or type is missing
            SummaryUnavailableError: If no provider produced a summary
        """
        if not (request.url and request.title and request.snippet and request.kind):
            raise ValueError("Missing required fields: url, title, snippet, type")

        model = request.selected_model.value if request.selected_model else None
        key = CacheStore.key(
            CACHE_PREFIX, {"url": request.url, "type": request.kind.value, "model": model}
        )
        if self.cache is not None:
            cached = await self.cache.get(key)
            if isinstance(cached, dict):
                response = ParseResponse.model_validate(cached)
                return response.model_copy(update={"cached": True})

        preferred = request.selected_model
        if preferred is None:
            preferred = select_model(
                request.kind.value, request.title, self.enrichment.available()
            ).selected

        details = snippet_details(request.snippet, request.kind)
        details.imdb_id = imdb_id_from_url(request.url)

        fields, provider = await self.enrichment.generate(
            result_evidence(request, details),
            query=request.title,
            kind=request.kind.value,
            preferred=preferred,
        )
        if provider is None:
            raise SummaryUnavailableError(f"No summary produced for {request.url}")

        response = ParseResponse(
            title=request.title,
            kind=request.kind,
            summary=ResultSummary(
                short=fields.summary_short,
                long=fields.summary_medium or fields.summary_long_spoilers,
            ),
            details=details,
            provider=provider,
        )
        logger.info(f"Summarised '{request.title}' with {provider.value}")

        if self.cache is not None:
            await self.cache.set(key, response.to_dict(), PARSE_CACHE_TTL)
        return response
