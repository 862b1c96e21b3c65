"""
TMDB Models - Pydantic models for raw TMDB payloads.
These models represent the actual structure returned by the TMDB v3 API.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# ============================================================================
# Search endpoints
# ============================================================================


class TMDBSearchMovie(BaseModel):
    """Model for a movie result from TMDB search API."""

    id: int
    title: str | None = None
    original_title: str | None = None
    original_language: str | None = None
    overview: str = ""
    poster_path: str | None = None
    backdrop_path: str | None = None
    popularity: float = 0.0
    release_date: str | None = None

    @property
    def display_title(self) -> str | None:
        return self.title or self.original_title or None


class TMDBSearchPerson(BaseModel):
    """Model for a person result from TMDB search API."""

    id: int
    name: str | None = None
    original_name: str | None = None
    known_for_department: str | None = None
    popularity: float = 0.0
    profile_path: str | None = None
    known_for: list[dict[str, Any]] = Field(default_factory=list)


class TMDBMultiSearchItem(BaseModel):
    """Model for a mixed movie/tv/person result from TMDB multi search."""

    id: int
    media_type: str = "movie"
    title: str | None = None
    name: str | None = None
    overview: str | None = None
    known_for_department: str | None = None
    popularity: float | None = None
    release_date: str | None = None
    first_air_date: str | None = None
    poster_path: str | None = None
    profile_path: str | None = None
    original_language: str | None = None


class TMDBSearchResponse(BaseModel):
    page: int = 1
    results: list[dict[str, Any]] = Field(default_factory=list)
    total_pages: int = 0
    total_results: int = 0


# ============================================================================
# Movie details (append_to_response=credits,videos,watch/providers,external_ids)
# ============================================================================


class TMDBGenre(BaseModel):
    id: int
    name: str


class TMDBCastCredit(BaseModel):
    id: int
    name: str
    character: str | None = None
    order: int = 0
    profile_path: str | None = None


class TMDBCrewCredit(BaseModel):
    id: int
    name: str
    job: str | None = None
    department: str | None = None


class TMDBCredits(BaseModel):
    cast: list[TMDBCastCredit] = Field(default_factory=list)
    crew: list[TMDBCrewCredit] = Field(default_factory=list)


class TMDBVideo(BaseModel):
    key: str
    site: str | None = None
    type: str | None = None
    official: bool = False
    name: str | None = None


class TMDBVideos(BaseModel):
    results: list[TMDBVideo] = Field(default_factory=list)


class TMDBWatchProvider(BaseModel):
    provider_id: int | None = None
    provider_name: str
    display_priority: int = 0
    logo_path: str | None = None


class TMDBRegionProviders(BaseModel):
    link: str | None = None
    flatrate: list[TMDBWatchProvider] = Field(default_factory=list)
    free: list[TMDBWatchProvider] = Field(default_factory=list)
    ads: list[TMDBWatchProvider] = Field(default_factory=list)
    rent: list[TMDBWatchProvider] = Field(default_factory=list)
    buy: list[TMDBWatchProvider] = Field(default_factory=list)


class TMDBProvidersResponse(BaseModel):
    results: dict[str, TMDBRegionProviders] = Field(default_factory=dict)


class TMDBExternalIds(BaseModel):
    imdb_id: str | None = None


class TMDBMovieDetailsResult(BaseModel):
    """Model for TMDB movie details with appended credits, videos, providers and ids."""

    model_config = ConfigDict(populate_by_name=True)

    id: int
    title: str | None = None
    original_title: str | None = None
    overview: str | None = None
    release_date: str | None = None
    runtime: int | None = None
    genres: list[TMDBGenre] = Field(default_factory=list)
    poster_path: str | None = None
    backdrop_path: str | None = None
    imdb_id: str | None = None
    popularity: float = 0.0
    credits: TMDBCredits = Field(default_factory=TMDBCredits)
    videos: TMDBVideos = Field(default_factory=TMDBVideos)
    watch_providers: TMDBProvidersResponse = Field(
        default_factory=TMDBProvidersResponse, alias="watch/providers"
    )
    external_ids: TMDBExternalIds = Field(default_factory=TMDBExternalIds)


# ============================================================================
# Person endpoints
# ============================================================================


class TMDBPersonDetailsResult(BaseModel):
    """Model for TMDB person details API response."""

    id: int
    name: str
    biography: str | None = None
    birthday: str | None = None
    deathday: str | None = None
    place_of_birth: str | None = None
    profile_path: str | None = None
    known_for_department: str | None = None
    imdb_id: str | None = None
    popularity: float = 0.0


class TMDBPersonMovieCastCredit(BaseModel):
    id: int
    title: str | None = None
    original_title: str | None = None
    character: str | None = None
    release_date: str | None = None
    poster_path: str | None = None
    popularity: float = 0.0


class TMDBPersonMovieCredits(BaseModel):
    id: int | None = None
    cast: list[TMDBPersonMovieCastCredit] = Field(default_factory=list)
