"""
Query hint parsing for free-text movie/person queries.

"RRR Telugu 2022" -> title "RRR", year "2022", language "Telugu".
"Breaking Bad S03E02" -> title "Breaking Bad", season 3, episode 2.

Year, regional language (including industry nicknames such as tollywood) and
genre hints mark the query as complex, which makes the hybrid search consult
the secondary web search even when the primary provider has results.
Season/episode hints are extracted and stripped but do not change complexity.
"""

import re

from contracts.models import ParsedQuery

_YEAR = re.compile(r"\b(19|20)\d\d\b")

_SEASON_EPISODE = re.compile(r"\bS(\d{1,2})E(\d{1,2})\b", re.IGNORECASE)
_SEASON_LONG = re.compile(r"\bseason\s+(\d{1,2})\b", re.IGNORECASE)
_SEASON_SHORT = re.compile(r"\bs(\d{1,2})\b", re.IGNORECASE)
_EPISODE = re.compile(r"\bepisode\s+(\d{1,2})\b", re.IGNORECASE)

_NOISE_WORDS = re.compile(r"\b(movie|film|series|show)\b", re.IGNORECASE)

# keyword (lowercase) -> language; dictionary order decides ties
REGIONAL_LANGUAGES: dict[str, str] = {
    "malayalam": "Malayalam",
    "tamil": "Tamil",
    "telugu": "Telugu",
    "kannada": "Kannada",
    "hindi": "Hindi",
    "bengali": "Bengali",
    "marathi": "Marathi",
    "gujarati": "Gujarati",
    "punjabi": "Punjabi",
    "mollywood": "Malayalam",
    "kollywood": "Tamil",
    "tollywood": "Telugu",
    "sandalwood": "Kannada",
    "bollywood": "Hindi",
}

# ISO 639-1 code -> language, for providers that report original_language
LANGUAGE_CODES: dict[str, str] = {
    "ml": "Malayalam",
    "ta": "Tamil",
    "te": "Telugu",
    "kn": "Kannada",
    "hi": "Hindi",
    "bn": "Bengali",
    "mr": "Marathi",
    "gu": "Gujarati",
    "pa": "Punjabi",
}

GENRE_KEYWORDS = [
    "action",
    "comedy",
    "drama",
    "thriller",
    "horror",
    "romance",
    "sci-fi",
    "fantasy",
    "animation",
    "documentary",
]


def extract_language(text: str | None) -> str | None:
    """First regional language whose keyword appears in `text`, else None."""
    lowered = (text or "").lower()
    for keyword, lang in REGIONAL_LANGUAGES.items():
        if keyword in lowered:
            return lang
    return None


def _strip_all(text: str, keyword: str) -> str:
    return re.sub(re.escape(keyword), "", text, flags=re.IGNORECASE).strip()


def _extract_season_episode(title: str) -> tuple[str, int | None, int | None]:
    match = _SEASON_EPISODE.search(title)
    if match:
        season, episode = int(match.group(1)), int(match.group(2))
        return title.replace(match.group(0), "", 1).strip(), season, episode

    season = None
    for pattern in (_SEASON_LONG, _SEASON_SHORT):
        match = pattern.search(title)
        if match:
            season = int(match.group(1))
            title = title.replace(match.group(0), "", 1).strip()
            break

    if season is None:
        return title, None, None

    episode = None
    match = _EPISODE.search(title)
    if match:
        episode = int(match.group(1))
        title = title.replace(match.group(0), "", 1).strip()
    return title, season, episode


def parse(raw: str) -> ParsedQuery:
    """
    Parse a raw query into structured hints.

    Pure function: never raises, never performs I/O. The resulting title may be
    empty; callers fall back to the raw query (see ParsedQuery.search_title).

    Args:
        raw: The user's query text

    Returns:
        ParsedQuery with title, year, language, genre, season, episode and is_complex

    Examples:
        "RRR Telugu 2022" -> title "RRR", year "2022", language "Telugu"
        "Inception movie" -> title "Inception", is_complex False
    """
    original = (raw or "").strip()
    title = original
    year = language = genre = None
    is_complex = False

    match = _YEAR.search(title)
    if match:
        year = match.group(0)
        title = title.replace(year, "", 1).strip()
        is_complex = True

    title, season, episode = _extract_season_episode(title)

    for keyword, lang in REGIONAL_LANGUAGES.items():
        if keyword in title.lower():
            language = lang
            title = _strip_all(title, keyword)
            is_complex = True
            break

    for keyword in GENRE_KEYWORDS:
        if keyword in title.lower():
            genre = keyword
            title = _strip_all(title, keyword)
            is_complex = True
            break

    title = _NOISE_WORDS.sub("", title)
    title = " ".join(title.split())

    return ParsedQuery(
        title=title,
        year=year,
        language=language,
        genre=genre,
        is_complex=is_complex,
        season=season,
        episode=episode,
        original=original,
    )


def build_search_query(parsed: ParsedQuery) -> str:
    """Decorated web-search string: title, language, year, genre, then " movie cast"."""
    search_query = parsed.search_title
    for hint in (parsed.language, parsed.year, parsed.genre):
        if hint:
            search_query += f" {hint}"
    return f"{search_query} movie cast"
