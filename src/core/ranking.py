"""
Candidate scoring and result ranking.

Entity resolution (higher = better):
    movie:  similarity(title, query) * 0.6 + popularity / 100 * 0.3 + year boost (0.2)
    person: similarity(name, query) * 0.7 + popularity / 100 * 0.3

    The year boost applies when the 4-digit year found in the query prefixes
    the candidate's release date. Popularity is not clamped here.

Decision policy over candidates sorted by score:
    - no candidates                               -> none
    - top >= 0.8                                  -> confident
    - second exists and top - second >= 0.15      -> confident
    - no second and top >= 0.6                    -> confident
    - otherwise                                   -> ambiguous

Hybrid search composite (higher = better):
    confidence + 10 if the url is on the primary provider's domain
               + 20 if the normalized title equals the normalized query title
"""

import re
from collections.abc import Iterable

from pydantic import BaseModel

from contracts.models import (
    Candidate,
    ChosenEntity,
    DecisionKind,
    EntityKind,
    ResolutionDecision,
    SearchResult,
)
from utils.soft_comparison import is_exact_match, similarity

PRIMARY_DOMAIN = "themoviedb.org"

DEFAULT_CONFIDENCE = 0.7

# Sequential rules; a later matching rule overrides an earlier one
DOMAIN_CONFIDENCE_RULES: list[tuple[tuple[str, ...], float]] = [
    (("imdb.com",), 0.95),
    (("wikipedia.org",), 0.9),
    (("rottentomatoes.com", "letterboxd.com"), 0.85),
]

_YEAR = re.compile(r"\b(19|20)\d{2}\b")


class ResolutionThresholds(BaseModel):
    confident_score: float = 0.8
    min_gap: float = 0.15
    single_candidate_score: float = 0.6


class RankingWeights(BaseModel):
    title_similarity: float = 0.6
    movie_popularity: float = 0.3
    year_boost: float = 0.2
    name_similarity: float = 0.7
    person_popularity: float = 0.3
    primary_domain_boost: float = 10.0
    exact_title_boost: float = 20.0


DEFAULT_THRESHOLDS = ResolutionThresholds()
DEFAULT_WEIGHTS = RankingWeights()


def extract_year(query: str) -> str | None:
    match = _YEAR.search(query or "")
    return match.group(0) if match else None


def score_movie(
    title: str,
    popularity: float | None,
    release_date: str | None,
    query: str,
    weights: RankingWeights = DEFAULT_WEIGHTS,
) -> float:
    """
    Score a movie candidate against the raw query.

    Args:
        title: Candidate title
        popularity: Provider popularity (unclamped)
        release_date: "YYYY-MM-DD" or None
        query: Raw query text
        weights: Scoring weights

    Returns:
        The unrounded score
    """
    score = similarity(title, query) * weights.title_similarity
    score += (popularity or 0.0) / 100 * weights.movie_popularity
    year = extract_year(query)
    if year and release_date and release_date.startswith(year):
        score += weights.year_boost
    return score


def score_person(
    name: str,
    popularity: float | None,
    query: str,
    weights: RankingWeights = DEFAULT_WEIGHTS,
) -> float:
    score = similarity(name, query) * weights.name_similarity
    return score + (popularity or 0.0) / 100 * weights.person_popularity


def is_confident(
    top: float,
    second: float | None,
    thresholds: ResolutionThresholds = DEFAULT_THRESHOLDS,
) -> bool:
    if top >= thresholds.confident_score:
        return True
    if second is not None:
        return top - second >= thresholds.min_gap
    return top >= thresholds.single_candidate_score


def decide(
    candidates: Iterable[Candidate],
    thresholds: ResolutionThresholds = DEFAULT_THRESHOLDS,
    limit: int = 10,
) -> ResolutionDecision:
    """
    Turn scored candidates into a resolution decision.

    Candidates are sorted by score (descending, stable), the decision is made
    on the unrounded scores, then the list is capped at `limit` and each score
    is rounded to 3 decimals.

    Args:
        candidates: Scored movie and person candidates, in any order
        thresholds: Confidence thresholds
        limit: Maximum number of candidates returned

    Returns:
        ResolutionDecision; `chosen` is set only for a confident movie/person
    """
    ranked = sorted(candidates, key=lambda c: c.score, reverse=True)
    capped = [c.model_copy(update={"score": round(c.score, 3)}) for c in ranked[:limit]]

    if not ranked:
        return ResolutionDecision(kind=DecisionKind.NONE, candidates=[])

    top = ranked[0]
    second = ranked[1].score if len(ranked) > 1 else None
    if not is_confident(top.score, second, thresholds):
        return ResolutionDecision(kind=DecisionKind.AMBIGUOUS, candidates=capped)

    kind = DecisionKind.MOVIE if top.kind == EntityKind.MOVIE else DecisionKind.PERSON
    return ResolutionDecision(
        kind=kind,
        chosen=ChosenEntity(id=top.id, name=top.name, kind=top.kind),
        candidates=capped,
    )


def primary_confidence(popularity: float | None) -> float:
    """min(popularity / 100, 1) for primary results, 0.7 when popularity is missing or zero."""
    if not popularity:
        return DEFAULT_CONFIDENCE
    return min(popularity / 100, 1.0)


def domain_confidence(url: str) -> float:
    """A-priori confidence of a web result from the domain it lives on."""
    url = (url or "").lower()
    confidence = DEFAULT_CONFIDENCE
    for domains, value in DOMAIN_CONFIDENCE_RULES:
        if any(domain in url for domain in domains):
            confidence = value
    return confidence


def composite_score(
    result: SearchResult,
    query_title: str,
    weights: RankingWeights = DEFAULT_WEIGHTS,
) -> float:
    score = result.confidence
    if PRIMARY_DOMAIN in result.url.lower():
        score += weights.primary_domain_boost
    if is_exact_match(result.title, query_title):
        score += weights.exact_title_boost
    return score


def rank_results(
    results: list[SearchResult],
    query_title: str,
    limit: int = 6,
    weights: RankingWeights = DEFAULT_WEIGHTS,
) -> list[SearchResult]:
    """Sort by composite score (descending, stable) and keep the top `limit`."""
    ranked = sorted(results, key=lambda r: composite_score(r, query_title, weights), reverse=True)
    return ranked[:limit]
