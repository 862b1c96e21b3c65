"""
TMDB Models - conversion from raw TMDB payloads to the shared contracts.
"""

from __future__ import annotations

from api.tmdb.tmdb_models import (
    TMDBMovieDetailsResult,
    TMDBMultiSearchItem,
    TMDBPersonDetailsResult,
    TMDBPersonMovieCredits,
    TMDBRegionProviders,
    TMDBVideos,
)
from contracts.models import (
    CastMember,
    Crew,
    FilmographyEntry,
    MovieRecord,
    PersonRecord,
    ResultKind,
    SearchResult,
    SearchSource,
    SourceLink,
    WatchOption,
)
from core.query_parser import LANGUAGE_CODES
from core.ranking import primary_confidence

IMAGE_BASE_URL = "https://image.tmdb.org/t/p/"
SITE_URL = "https://www.themoviedb.org"

CAST_LIMIT = 12
WATCH_OPTION_LIMIT = 8
WATCH_REGION = "US"

DIRECTOR_JOBS = {"Director"}
WRITER_JOBS = {"Screenplay", "Writer", "Story", "Novel"}
MUSIC_JOBS = {"Original Music Composer", "Music"}


def image_url(path: str | None, size: str = "w500") -> str | None:
    if not path:
        return None
    return f"{IMAGE_BASE_URL}{size}{path}"


def page_url(media_type: str, tmdb_id: int) -> str:
    return f"{SITE_URL}/{media_type}/{tmdb_id}"


def imdb_url(imdb_id: str, kind: str = "title") -> str:
    return f"https://www.imdb.com/{kind}/{imdb_id}/"


def search_result_from_multi(item: TMDBMultiSearchItem) -> SearchResult | None:
    """
    Convert a multi-search hit into a SearchResult.

    Persons become `person` results and everything else (movies and tv) becomes
    `movie`. Hits without a title or name are dropped.
    """
    title = item.title or item.name
    if not title:
        return None

    is_person = item.media_type == "person"
    date = item.release_date or item.first_air_date
    return SearchResult(
        title=title,
        snippet=item.overview or item.known_for_department or "",
        url=page_url(item.media_type, item.id),
        image=image_url(item.profile_path if is_person else item.poster_path),
        kind=ResultKind.PERSON if is_person else ResultKind.MOVIE,
        confidence=primary_confidence(item.popularity),
        year=date[:4] if date else None,
        language=LANGUAGE_CODES.get(item.original_language or ""),
        source=SearchSource.TMDB,
    )


def _names_for_jobs(details: TMDBMovieDetailsResult, jobs: set[str]) -> list[str]:
    names: list[str] = []
    for member in details.credits.crew:
        if member.job in jobs and member.name not in names:
            names.append(member.name)
    return names


def _trailer_url(videos: TMDBVideos) -> str | None:
    trailers = [v for v in videos.results if v.site == "YouTube" and v.type == "Trailer"]
    if not trailers:
        return None
    # Official trailers first, otherwise provider order
    trailers.sort(key=lambda v: not v.official)
    return f"https://www.youtube.com/watch?v={trailers[0].key}"


def _watch_options(region: TMDBRegionProviders | None) -> list[WatchOption]:
    if region is None:
        return []

    options: list[WatchOption] = []
    seen: set[str] = set()
    groups = (
        ("subscription", region.flatrate),
        ("free", region.free),
        ("free", region.ads),
        ("rent", region.rent),
        ("buy", region.buy),
    )
    for kind, providers in groups:
        for provider in providers:
            if provider.provider_name in seen:
                continue
            seen.add(provider.provider_name)
            options.append(WatchOption(platform=provider.provider_name, kind=kind, link=region.link))
    return options[:WATCH_OPTION_LIMIT]


def movie_record_from_details(details: TMDBMovieDetailsResult) -> MovieRecord:
    """Build the factual part of a MovieRecord. Ratings and creative fields are added later."""
    imdb_id = details.imdb_id or details.external_ids.imdb_id
    sources = [SourceLink(name="TMDB", url=page_url("movie", details.id))]
    if imdb_id:
        sources.append(SourceLink(name="IMDb", url=imdb_url(imdb_id)))

    cast = sorted(details.credits.cast, key=lambda c: c.order)[:CAST_LIMIT]
    return MovieRecord(
        id=details.id,
        title=details.title or details.original_title or "",
        year=details.release_date[:4] if details.release_date else None,
        genres=[g.name for g in details.genres],
        overview=details.overview or "",
        runtime=details.runtime or None,
        poster_url=image_url(details.poster_path),
        backdrop_url=image_url(details.backdrop_path, size="w1280"),
        trailer_url=_trailer_url(details.videos),
        imdb_id=imdb_id,
        cast=[
            CastMember(
                name=c.name,
                role=c.character or "",
                profile_url=image_url(c.profile_path, size="w185"),
            )
            for c in cast
        ],
        crew=Crew(
            director=_names_for_jobs(details, DIRECTOR_JOBS),
            writer=_names_for_jobs(details, WRITER_JOBS),
            music=_names_for_jobs(details, MUSIC_JOBS),
        ),
        where_to_watch=_watch_options(details.watch_providers.results.get(WATCH_REGION)),
        sources=sources,
    )


def person_record_from_details(
    details: TMDBPersonDetailsResult, credits: TMDBPersonMovieCredits | None
) -> PersonRecord:
    """Build a PersonRecord; the filmography is deduplicated and sorted by year, newest first."""
    filmography: list[FilmographyEntry] = []
    seen: set[int] = set()
    for credit in credits.cast if credits else []:
        title = credit.title or credit.original_title
        if credit.id in seen or not title:
            continue
        seen.add(credit.id)
        year = credit.release_date[:4] if credit.release_date else ""
        filmography.append(
            FilmographyEntry(
                id=credit.id,
                title=title,
                year=int(year) if year.isdigit() else None,
                character=credit.character or None,
                poster_url=image_url(credit.poster_path, size="w185"),
            )
        )
    filmography.sort(key=lambda f: f.year if f.year is not None else -1, reverse=True)

    sources = [SourceLink(name="TMDB", url=page_url("person", details.id))]
    if details.imdb_id:
        sources.append(SourceLink(name="IMDb", url=imdb_url(details.imdb_id, kind="name")))

    return PersonRecord(
        id=details.id,
        name=details.name,
        biography=details.biography or "",
        birthday=details.birthday,
        place_of_birth=details.place_of_birth,
        known_for_department=details.known_for_department,
        profile_url=image_url(details.profile_path),
        filmography=filmography,
        sources=sources,
    )
