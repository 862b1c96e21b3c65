import os
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from adapters.config import load_env
from adapters.redis_manager import RedisConnectionManager
from api.duckduckgo.core import DuckDuckGoService, imdb_search
from api.llm.perplexity_search import PerplexitySearchService
from api.llm.providers import build_providers
from api.omdb.core import OMDBService
from api.serpapi.core import SerpApiService
from api.tmdb.core import TMDBService
from api.tvmaze.core import TVMazeService
from api.wikipedia.core import WikipediaService
from contracts.models import ParseRequest, ProviderId, QueryMode
from services.enrichment import CreativeEnrichmentService
from services.entity_resolver import EntityResolver
from services.hybrid_search import HybridSearchService
from services.model_selector import select_model
from services.record_builder import RecordBuilder
from services.result_summary import ResultSummaryService, SummaryUnavailableError
from services.web_search import WebSearchService
from utils.base_api_client import APIRequestError
from utils.cache import CacheStore
from utils.get_logger import get_logger

logger = get_logger(__name__)


class Services:
    """Everything the endpoints need, wired once per process."""

    def __init__(
        self,
        resolver: EntityResolver,
        search: HybridSearchService,
        records: RecordBuilder,
        enrichment: CreativeEnrichmentService,
        web_search: WebSearchService,
        summaries: ResultSummaryService,
        cache: CacheStore | None = None,
    ):
        self.resolver = resolver
        self.search = search
        self.records = records
        self.enrichment = enrichment
        self.web_search = web_search
        self.summaries = summaries
        self.cache = cache


def build_services() -> Services:
    load_env()
    cache = CacheStore(RedisConnectionManager())
    tmdb = TMDBService()
    duckduckgo = DuckDuckGoService()
    web_search = WebSearchService(
        {"web": duckduckgo, "wikipedia": WikipediaService(), "imdb": imdb_search(duckduckgo)},
        cache=cache,
    )
    providers = build_providers()
    enrichment = CreativeEnrichmentService(providers)
    resolver = EntityResolver(tmdb, cache)
    return Services(
        resolver=resolver,
        search=HybridSearchService(
            tmdb,
            secondary=[SerpApiService(), duckduckgo],
            tertiary=PerplexitySearchService(providers[ProviderId.PERPLEXITY]),
            cache=cache,
            tvmaze=TVMazeService(),
        ),
        records=RecordBuilder(
            resolver, tmdb, OMDBService(), enrichment, web_search=web_search, cache=cache
        ),
        enrichment=enrichment,
        web_search=web_search,
        summaries=ResultSummaryService(enrichment, cache=cache),
        cache=cache,
    )


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"ok": False, "error": message})


def create_app(services: Services | None = None) -> FastAPI:
    services = services or build_services()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        if services.cache is not None:
            logger.info("Shutting down; closing the Redis connection")
            await services.cache.manager.close()

    app = FastAPI(
        title="CineResolve API",
        description="Movie and person resolution, hybrid search and enrichment",
        version="1.0.0",
        lifespan=lifespan,
    )

    # CORS - allow all origins for public API
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )

    @app.exception_handler(APIRequestError)
    async def upstream_error_handler(request: Request, exc: APIRequestError):
        logger.error(f"Upstream failure on {request.url.path}: {exc}")
        return _error(500, "Upstream provider request failed")

    @app.exception_handler(SummaryUnavailableError)
    async def summary_error_handler(request: Request, exc: SummaryUnavailableError):
        logger.error(f"Summarization failed on {request.url.path}: {exc}")
        return _error(500, "AI summarization failed")

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled error on {request.url.path}: {exc!r}")
        return _error(500, "Internal server error")

    @app.get("/resolve")
    async def resolve_endpoint(q: str = Query("")):
        if not q.strip():
            return _error(400, "Query parameter 'q' is required")
        response = await services.resolver.resolve(q)
        return response.to_dict()

    @app.get("/search")
    async def search_endpoint(q: str = Query("")):
        if not q.strip():
            return _error(400, "Query parameter 'q' is required")
        response = await services.search.search(q)
        return response.to_dict()

    @app.get("/query")
    async def query_endpoint(
        q: str = Query(""),
        mode: QueryMode = Query(QueryMode.DETAILED),
        provider: ProviderId | None = Query(None),
    ):
        if not q.strip():
            return _error(400, "Query parameter 'q' is required")
        response = await services.records.query(q, mode=mode, provider=provider)
        return response.to_dict()

    @app.get("/websearch")
    async def websearch_endpoint(q: str = Query(""), sources: str = Query("all")):
        try:
            response = await services.web_search.search(q, sources)
        except ValueError:
            return _error(400, "Query parameter 'q' must be at least 2 characters")
        return response.to_dict()

    @app.post("/parse")
    async def parse_endpoint(body: ParseRequest):
        try:
            response = await services.summaries.summarize(body)
        except ValueError as e:
            return _error(400, str(e))
        return response.to_dict()

    @app.get("/person/{person_id}")
    async def person_endpoint(person_id: int):
        if person_id <= 0:
            return _error(400, "Person id must be a positive integer")
        record = await services.records.person(person_id)
        return {"ok": True, "data": record.to_dict()}

    @app.get("/select-model")
    async def select_model_endpoint(
        type: str = Query("movie"), title: str = Query("")
    ):
        selection = select_model(type, title, services.enrichment.available())
        return selection.to_dict()

    @app.get("/health")
    async def health():
        cache = services.cache.availability.value if services.cache else "unavailable"
        return {"status": "ok", "cache": cache}

    return app


if __name__ == "__main__":
    port = int(os.getenv("PORT", "8080"))
    uvicorn.run(
        "search_api.main:create_app", factory=True, host="0.0.0.0", port=port
    )
