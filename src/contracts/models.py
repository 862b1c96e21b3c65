from enum import Enum

from pydantic import Field, model_validator

from utils.pydantic_tools import BaseModelWithMethods

"""
These are the known types and are the contract for every HTTP response and cache payload.
"""


class EntityKind(str, Enum):
    MOVIE = "movie"
    PERSON = "person"


class ResultKind(str, Enum):
    """What a search result points at."""

    MOVIE = "movie"
    PERSON = "person"
    REVIEW = "review"


class DecisionKind(str, Enum):
    """Outcome of entity resolution."""

    MOVIE = "movie"
    PERSON = "person"
    AMBIGUOUS = "ambiguous"
    NONE = "none"


class SearchSource(str, Enum):
    TMDB = "tmdb"
    SERPAPI = "serpapi"
    DUCKDUCKGO = "duckduckgo"
    PERPLEXITY = "perplexity"
    WIKIPEDIA = "wikipedia"
    IMDB = "imdb"
    TVMAZE = "tvmaze"


class ProviderId(str, Enum):
    """Chat-completion providers, in canonical fallback order."""

    GROQ = "groq"
    MISTRAL = "mistral"
    OPENROUTER = "openrouter"
    PERPLEXITY = "perplexity"


CANONICAL_PROVIDER_ORDER = [
    ProviderId.GROQ,
    ProviderId.MISTRAL,
    ProviderId.OPENROUTER,
    ProviderId.PERPLEXITY,
]


class QueryMode(str, Enum):
    SHORT = "short"
    DETAILED = "detailed"


class ParsedQuery(BaseModelWithMethods):
    """Structured hints extracted from a raw query."""

    title: str = ""
    year: str | None = None
    language: str | None = None
    genre: str | None = None
    is_complex: bool = Field(default=False, alias="isComplex")
    season: int | None = None
    episode: int | None = None
    original: str = ""

    @property
    def search_title(self) -> str:
        """The cleaned title, or the trimmed raw query when nothing is left."""
        return self.title or self.original


class Candidate(BaseModelWithMethods):
    id: int
    name: str
    kind: EntityKind = Field(alias="type")
    score: float
    popularity: float = 0.0
    extra: dict[str, str | None] = Field(default_factory=dict)


class ChosenEntity(BaseModelWithMethods):
    id: int
    name: str
    kind: EntityKind = Field(alias="type")


class ResolutionDecision(BaseModelWithMethods):
    kind: DecisionKind = Field(alias="type")
    chosen: ChosenEntity | None = None
    candidates: list[Candidate] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_chosen(self) -> "ResolutionDecision":
        confident = self.kind in (DecisionKind.MOVIE, DecisionKind.PERSON)
        if confident and self.chosen is None:
            raise ValueError(f"chosen is required when type is {self.kind.value}")
        if not confident and self.chosen is not None:
            raise ValueError(f"chosen must be empty when type is {self.kind.value}")
        return self


class SearchResult(BaseModelWithMethods):
    title: str
    snippet: str = ""
    url: str
    image: str | None = None
    kind: ResultKind = Field(alias="type")
    confidence: float
    year: str | None = None
    language: str | None = None
    source: SearchSource | None = None


class ResolveResponse(BaseModelWithMethods):
    ok: bool = True
    kind: DecisionKind = Field(alias="type")
    query: str
    candidates: list[Candidate] = Field(default_factory=list)
    chosen: ChosenEntity | None = None
    cached: bool = False


class SearchResponse(BaseModelWithMethods):
    ok: bool = True
    query: str
    total: int = 0
    results: list[SearchResult] = Field(default_factory=list)
    parsed_query: ParsedQuery = Field(alias="parsedQuery")
    cached: bool = False


class WebSearchResponse(BaseModelWithMethods):
    """Web-search results grouped by source name (web, wikipedia, imdb)."""

    ok: bool = True
    query: str
    results: dict[str, list[SearchResult]] = Field(default_factory=dict)
    total: int = 0
    cached: bool = False


class ParseRequest(BaseModelWithMethods):
    """A search result picked by the user, to be summarised."""

    url: str = ""
    title: str = ""
    snippet: str = ""
    kind: ResultKind | None = Field(default=None, alias="type")
    selected_model: ProviderId | None = Field(default=None, alias="selectedModel")


class ResultSummary(BaseModelWithMethods):
    short: str = ""
    long: str = ""


class ResultDetails(BaseModelWithMethods):
    """Facts pulled out of a result snippet; which fields are set depends on the result type."""

    plot: str | None = None
    genres: list[str] | None = None
    year: str | None = None
    bio: str | None = None
    role: str | None = None
    content: str | None = None
    imdb_id: str | None = Field(default=None, alias="imdbId")


class ParseResponse(BaseModelWithMethods):
    ok: bool = True
    title: str
    kind: ResultKind = Field(alias="type")
    summary: ResultSummary = Field(default_factory=ResultSummary)
    details: ResultDetails = Field(default_factory=ResultDetails)
    provider: ProviderId | None = None
    cached: bool = False


class CreativeFields(BaseModelWithMethods):
    """AI-generated prose. Only the creative enrichment adapter fills these."""

    summary_short: str = ""
    summary_medium: str = ""
    summary_long_spoilers: str = ""
    suspense_breaker: str = ""
    ai_notes: str = ""

    @classmethod
    def from_payload(cls, payload: dict | None) -> "CreativeFields":
        """Keep only the creative keys that hold non-empty strings."""
        if not isinstance(payload, dict):
            return cls()
        values = {
            name: value.strip()
            for name in cls.model_fields
            if isinstance(value := payload.get(name), str) and value.strip()
        }
        return cls(**values)

    def is_empty(self) -> bool:
        return not any(getattr(self, name) for name in type(self).model_fields)


class Rating(BaseModelWithMethods):
    source: str
    score: str


class CastMember(BaseModelWithMethods):
    name: str
    role: str = ""
    profile_url: str | None = None


class Crew(BaseModelWithMethods):
    director: list[str] = Field(default_factory=list)
    writer: list[str] = Field(default_factory=list)
    music: list[str] = Field(default_factory=list)


class WatchOption(BaseModelWithMethods):
    platform: str
    kind: str = Field(alias="type")
    link: str | None = None


class SourceLink(BaseModelWithMethods):
    name: str
    url: str


class MovieRecord(BaseModelWithMethods):
    id: int
    title: str
    year: str | None = None
    media_type: EntityKind = EntityKind.MOVIE
    genres: list[str] = Field(default_factory=list)
    overview: str = ""
    overview_short: str = ""
    runtime: int | None = None
    poster_url: str | None = None
    backdrop_url: str | None = None
    trailer_url: str | None = None
    imdb_id: str | None = None
    ratings: list[Rating] = Field(default_factory=list)
    cast: list[CastMember] = Field(default_factory=list)
    crew: Crew = Field(default_factory=Crew)
    where_to_watch: list[WatchOption] = Field(default_factory=list)
    sources: list[SourceLink] = Field(default_factory=list)
    creative: CreativeFields = Field(default_factory=CreativeFields)


class FilmographyEntry(BaseModelWithMethods):
    id: int
    title: str
    year: int | None = None
    character: str | None = None
    poster_url: str | None = None


class PersonRecord(BaseModelWithMethods):
    id: int
    name: str
    media_type: EntityKind = EntityKind.PERSON
    biography: str = ""
    biography_short: str = ""
    birthday: str | None = None
    place_of_birth: str | None = None
    known_for_department: str | None = None
    profile_url: str | None = None
    filmography: list[FilmographyEntry] = Field(default_factory=list)
    sources: list[SourceLink] = Field(default_factory=list)
    creative: CreativeFields = Field(default_factory=CreativeFields)


class QueryResponse(BaseModelWithMethods):
    ok: bool = True
    kind: DecisionKind = Field(alias="type")
    query: str
    mode: QueryMode = QueryMode.SHORT
    data: MovieRecord | PersonRecord | None = None
    candidates: list[Candidate] = Field(default_factory=list)
    provider: ProviderId | None = None
    cached: bool = False


class ModelSelection(BaseModelWithMethods):
    ok: bool = True
    query_type: str = Field(alias="queryType")
    selected: ProviderId = Field(alias="selectedModel")
    alternatives: list[ProviderId] = Field(default_factory=list)
    reason: str = ""
