"""
Record building - the composite /query and /person operations.

A query is resolved first. A confident movie or person is expanded into a
full record from TMDB (plus OMDB ratings for movies); ambiguous and empty
resolutions return the candidates only. In detailed mode the record's facts,
optionally followed by web-search snippets, are handed to the creative
enrichment service. Creative output only ever lands in `record.creative`.
"""

import asyncio

from adapters.config import (
    METADATA_TIMEOUT_SECONDS,
    PERSON_CACHE_TTL,
    QUERY_CACHE_TTL,
    WEB_CONTEXT_SNIPPETS,
)
from api.omdb.core import OMDBService
from api.tmdb.core import TMDBService
from api.tmdb.models import movie_record_from_details, person_record_from_details
from api.tmdb.tmdb_models import TMDBPersonMovieCredits
from contracts.models import (
    DecisionKind,
    MovieRecord,
    PersonRecord,
    ProviderId,
    QueryMode,
    QueryResponse,
    Rating,
)
from core.query_parser import parse
from services.enrichment import CreativeEnrichmentService
from services.entity_resolver import EntityResolver
from services.web_search import WebSearchService
from utils.base_api_client import APIRequestError
from utils.cache import CacheStore
from utils.get_logger import get_logger

logger = get_logger(__name__)

SHORT_TEXT_LIMIT = 280
WEB_CONTEXT_GROUPS = "wikipedia,imdb"
BIOGRAPHY_EVIDENCE_CHARS = 1200
EVIDENCE_ITEMS = 8


def truncate(text: str, limit: int = SHORT_TEXT_LIMIT) -> str:
    """Cut to `limit` characters, ending with an ellipsis when shortened."""
    text = (text or "").strip()
    if len(text) <= limit:
        return text
    return text[: limit - 3].rstrip() + "…"


def movie_evidence(record: MovieRecord) -> str:
    title = f"{record.title} ({record.year})" if record.year else record.title
    cast = "\n".join(
        f"{c.name} as {c.role}" if c.role else c.name for c in record.cast[:EVIDENCE_ITEMS]
    )
    return (
        f"Title: {title}\n"
        f"Genres: {', '.join(record.genres)}\n\n"
        f"Overview:\n{record.overview}\n\n"
        f"Key Cast:\n{cast}\n\n"
        "Crew:\n"
        f"Director: {', '.join(record.crew.director)}\n"
        f"Writer: {', '.join(record.crew.writer)}\n"
        f"Music: {', '.join(record.crew.music)}"
    )


def person_evidence(record: PersonRecord) -> str:
    films = []
    for entry in record.filmography[:EVIDENCE_ITEMS]:
        line = f"{entry.year or 'n/a'} • {entry.title}"
        if entry.character:
            line += f" (as {entry.character})"
        films.append(line)
    return (
        f"Biography:\n{record.biography[:BIOGRAPHY_EVIDENCE_CHARS]}\n\n"
        "Selected Filmography:\n" + "\n".join(films)
    )


class RecordBuilder:
    def __init__(
        self,
        resolver: EntityResolver,
        tmdb: TMDBService,
        omdb: OMDBService,
        enrichment: CreativeEnrichmentService,
        web_search: WebSearchService | None = None,
        cache: CacheStore | None = None,
    ):
        self.resolver = resolver
        self.tmdb = tmdb
        self.omdb = omdb
        self.enrichment = enrichment
        self.web_search = web_search
        self.cache = cache

    async def _ratings(self, imdb_id: str | None) -> list[Rating]:
        try:
            return await asyncio.wait_for(
                self.omdb.get_ratings(imdb_id), timeout=METADATA_TIMEOUT_SECONDS
            )
        except (APIRequestError, TimeoutError) as e:
            logger.warning(f"OMDB ratings unavailable for {imdb_id}: {e}")
            return []

    async def _person_credits(self, person_id: int) -> TMDBPersonMovieCredits | None:
        try:
            return await self.tmdb.get_person_movie_credits(person_id)
        except APIRequestError as e:
            logger.warning(f"Movie credits unavailable for person {person_id}: {e}")
            return None

    async def web_context(self, query: str) -> str:
        """Up to WEB_CONTEXT_SNIPPETS `title: snippet` lines from Wikipedia and IMDb."""
        if self.web_search is None:
            return ""
        return await self.web_search.context(
            f"{query} movie actor director", WEB_CONTEXT_GROUPS, WEB_CONTEXT_SNIPPETS
        )

    async def movie_record(self, movie_id: int) -> MovieRecord:
        """
        Factual movie record: TMDB details plus OMDB ratings.

        Raises:
            APIRequestError: If the TMDB details request fails
        """
        details = await self.tmdb.get_movie_details(movie_id)
        record = movie_record_from_details(details)
        record.ratings = await self._ratings(record.imdb_id)
        record.overview_short = truncate(record.overview)
        return record

    async def person_record(self, person_id: int) -> PersonRecord:
        """
        Factual person record from TMDB details and movie credits.

        Raises:
            APIRequestError: If the TMDB details request fails
        """
        details, credits = await asyncio.gather(
            self.tmdb.get_person_details(person_id),
            self._person_credits(person_id),
        )
        record = person_record_from_details(details, credits)
        record.biography_short = truncate(record.biography)
        return record

    async def person(self, person_id: int) -> PersonRecord:
        """Person record read through the cache.

        Raises:
            ValueError: If the id is not positive
            APIRequestError: If TMDB fails
        """
        if person_id <= 0:
            raise ValueError("person id must be positive")

        key = CacheStore.key("person", {"id": person_id})
        if self.cache is not None:
            cached = await self.cache.get(key)
            if isinstance(cached, dict):
                return PersonRecord.model_validate(cached)

        record = await self.person_record(person_id)
        if self.cache is not None:
            await self.cache.set(key, record.to_dict(), PERSON_CACHE_TTL)
        return record

    async def query(
        self,
        query: str,
        mode: QueryMode = QueryMode.DETAILED,
        provider: ProviderId | None = None,
    ) -> QueryResponse:
        """
        Resolve a query and build the matching record.

        Args:
            query: Raw user query
            mode: short (facts only) or detailed (facts plus creative fields)
            provider: Chat provider to try first in detailed mode

        Returns:
            QueryResponse; `data` is None unless the resolution was confident

        Raises:
            ValueError: If the query is blank
            APIRequestError: If TMDB fails
        """
        q = (query or "").strip()
        if not q:
            raise ValueError("query must not be empty")

        key = CacheStore.key("hybridQuery", {"q": q.lower(), "mode": mode.value})
        if self.cache is not None:
            cached = await self.cache.get(key)
            if isinstance(cached, dict):
                response = QueryResponse.model_validate(cached)
                return response.model_copy(update={"cached": True})

        resolution = await self.resolver.resolve(q)
        if resolution.chosen is None:
            return QueryResponse(
                kind=resolution.kind,
                query=q,
                mode=mode,
                candidates=resolution.candidates,
            )

        record: MovieRecord | PersonRecord
        if resolution.kind == DecisionKind.MOVIE:
            record = await self.movie_record(resolution.chosen.id)
            evidence = movie_evidence(record)
        else:
            record = await self.person_record(resolution.chosen.id)
            evidence = person_evidence(record)

        used_provider = None
        if mode == QueryMode.DETAILED:
            if parse(q).language:
                context = await self.web_context(q)
                if context:
                    evidence += f"\n\nAdditional Web Context:\n{context}"
            record.creative, used_provider = await self.enrichment.generate(
                evidence, query=q, kind=resolution.kind.value, preferred=provider
            )

        response = QueryResponse(
            kind=resolution.kind,
            query=q,
            mode=mode,
            data=record,
            candidates=resolution.candidates,
            provider=used_provider,
        )
        if self.cache is not None:
            await self.cache.set(key, response.to_dict(), QUERY_CACHE_TTL)
        return response
