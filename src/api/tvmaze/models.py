"""
TVMaze Models - raw show/episode payloads and their conversion to SearchResults.
"""

from __future__ import annotations

from bs4 import BeautifulSoup
from pydantic import BaseModel

from contracts.models import ResultKind, SearchResult, SearchSource
from core.query_parser import extract_language

TVMAZE_CONFIDENCE = 0.95
SNIPPET_CHARS = 200


class TVMazeImage(BaseModel):
    medium: str | None = None
    original: str | None = None


class TVMazeShow(BaseModel):
    id: int
    name: str
    url: str | None = None
    type: str | None = None
    language: str | None = None
    genres: list[str] = []
    status: str | None = None
    premiered: str | None = None
    image: TVMazeImage | None = None
    summary: str | None = None


class TVMazeEpisode(BaseModel):
    id: int
    name: str | None = None
    url: str | None = None
    season: int
    number: int | None = None
    airdate: str | None = None
    runtime: int | None = None
    image: TVMazeImage | None = None
    summary: str | None = None


def strip_html(text: str | None) -> str:
    """TVMaze summaries are HTML fragments like `<p>...</p>`."""
    if not text:
        return ""
    return BeautifulSoup(text, "html.parser").get_text(" ", strip=True)


def _snippet(html: str | None) -> str:
    text = strip_html(html)
    if len(text) <= SNIPPET_CHARS:
        return text
    return text[:SNIPPET_CHARS].rstrip() + "..."


def episode_code(season: int, number: int | None) -> str:
    code = f"S{season:02d}"
    return f"{code}E{number:02d}" if number is not None else code


def show_result(show: TVMazeShow) -> SearchResult | None:
    if not show.url:
        return None
    return SearchResult(
        title=show.name,
        snippet=_snippet(show.summary),
        url=show.url,
        image=show.image.medium if show.image else None,
        kind=ResultKind.MOVIE,
        confidence=TVMAZE_CONFIDENCE,
        year=show.premiered[:4] if show.premiered else None,
        language=extract_language(show.language),
        source=SearchSource.TVMAZE,
    )


def episode_result(show: TVMazeShow, episode: TVMazeEpisode) -> SearchResult | None:
    """'Show - S01E02: Episode name' result for one episode."""
    if not episode.url:
        return None
    title = f"{show.name} - {episode_code(episode.season, episode.number)}"
    if episode.name:
        title += f": {episode.name}"
    return SearchResult(
        title=title,
        snippet=_snippet(episode.summary),
        url=episode.url,
        image=episode.image.medium if episode.image else None,
        kind=ResultKind.MOVIE,
        confidence=TVMAZE_CONFIDENCE,
        year=episode.airdate[:4] if episode.airdate else None,
        language=extract_language(show.language),
        source=SearchSource.TVMAZE,
    )
