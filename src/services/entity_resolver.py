"""
Entity resolution - decide whether a free-text query names a movie or a person.

The movie-scoped and person-scoped TMDB searches run concurrently, every hit is
scored against the raw query, and the decision policy in core.ranking picks a
confident winner or reports the query as ambiguous. TMDB failures propagate:
there is no degraded resolution.
"""

from adapters.config import CANDIDATE_LIMIT, RESOLVE_CACHE_TTL
from api.tmdb.core import TMDBService
from api.tmdb.tmdb_models import TMDBSearchMovie, TMDBSearchPerson
from contracts.models import Candidate, EntityKind, ResolveResponse
from core.ranking import (
    DEFAULT_THRESHOLDS,
    DEFAULT_WEIGHTS,
    RankingWeights,
    ResolutionThresholds,
    decide,
    score_movie,
    score_person,
)
from utils.cache import CacheStore
from utils.get_logger import get_logger

logger = get_logger(__name__)

CACHE_PREFIX = "resolveEntity"


def movie_candidates(
    movies: list[TMDBSearchMovie], query: str, weights: RankingWeights = DEFAULT_WEIGHTS
) -> list[Candidate]:
    candidates = []
    for movie in movies:
        title = movie.display_title
        if not title:
            continue
        candidates.append(
            Candidate(
                id=movie.id,
                name=title,
                kind=EntityKind.MOVIE,
                score=score_movie(title, movie.popularity, movie.release_date, query, weights),
                popularity=movie.popularity,
                extra={"release_date": movie.release_date},
            )
        )
    return candidates


def person_candidates(
    people: list[TMDBSearchPerson], query: str, weights: RankingWeights = DEFAULT_WEIGHTS
) -> list[Candidate]:
    candidates = []
    for person in people:
        name = person.name or person.original_name
        if not name:
            continue
        candidates.append(
            Candidate(
                id=person.id,
                name=name,
                kind=EntityKind.PERSON,
                score=score_person(name, person.popularity, query, weights),
                popularity=person.popularity,
                extra={"known_for_department": person.known_for_department},
            )
        )
    return candidates


class EntityResolver:
    """Resolve a query to a movie, a person, an ambiguous list, or nothing."""

    def __init__(
        self,
        tmdb: TMDBService,
        cache: CacheStore | None = None,
        thresholds: ResolutionThresholds = DEFAULT_THRESHOLDS,
        weights: RankingWeights = DEFAULT_WEIGHTS,
        candidate_limit: int = CANDIDATE_LIMIT,
    ):
        self.tmdb = tmdb
        self.cache = cache
        self.thresholds = thresholds
        self.weights = weights
        self.candidate_limit = candidate_limit

    async def resolve(self, query: str) -> ResolveResponse:
        """
        Resolve a query, reading through the cache.

        Args:
            query: Raw user query

        Returns:
            ResolveResponse; `cached` is True when served from the cache

        Raises:
            ValueError: If the query is blank
            APIRequestError: If either TMDB search fails
        """
        q = (query or "").strip()
        if not q:
            raise ValueError("query must not be empty")

        key = CacheStore.key(CACHE_PREFIX, {"q": q.lower()})
        if self.cache is not None:
            cached = await self.cache.get(key)
            if isinstance(cached, dict):
                response = ResolveResponse.model_validate(cached)
                return response.model_copy(update={"cached": True})

        movies, people = await self.tmdb.search_entities(q)
        candidates = movie_candidates(movies, q, self.weights)
        candidates += person_candidates(people, q, self.weights)
        decision = decide(candidates, self.thresholds, limit=self.candidate_limit)

        logger.info(
            f"Resolved '{q}' as {decision.kind.value} "
            f"({len(movies)} movies, {len(people)} people)"
        )
        response = ResolveResponse(
            kind=decision.kind,
            query=q,
            candidates=decision.candidates,
            chosen=decision.chosen,
        )
        if self.cache is not None:
            await self.cache.set(key, response.to_dict(), RESOLVE_CACHE_TTL)
        return response
