"""
Shared fakes for service tests.

TMDB is replaced by a fake whose search/details methods return pre-built
pydantic models; Redis is replaced by an in-memory client plugged into the
real connection manager so the cache code path is exercised.
"""

import os

os.environ["ENVIRONMENT"] = "test"

import pytest

from adapters.redis_manager import RedisConnectionManager
from api.tmdb.tmdb_models import (
    TMDBMultiSearchItem,
    TMDBSearchMovie,
    TMDBSearchPerson,
)
from utils.base_api_client import APIRequestError
from utils.cache import CacheStore


def pytest_configure(config):
    """Pytest hook to configure test environment before any tests run."""
    os.environ["ENVIRONMENT"] = "test"


class FakeRedis:
    """In-memory stand-in for redis.asyncio.Redis."""

    def __init__(self):
        self.store: dict[str, str] = {}
        self.ttls: dict[str, int] = {}

    async def ping(self):
        return True

    async def get(self, key):
        return self.store.get(key)

    async def set(self, key, value, ex=None):
        self.store[key] = value
        self.ttls[key] = ex
        return True

    async def aclose(self):
        return None


class FakeTMDB:
    """Records calls; raises `error` from every method when set."""

    def __init__(self, movies=None, people=None, multi=None, error=None):
        self.movies = [TMDBSearchMovie.model_validate(m) for m in movies or []]
        self.people = [TMDBSearchPerson.model_validate(p) for p in people or []]
        self.multi = [TMDBMultiSearchItem.model_validate(m) for m in multi or []]
        self.error = error
        self.calls: list[tuple[str, object]] = []
        self.movie_details = None
        self.person_details = None
        self.person_credits = None

    def _record(self, name, arg):
        self.calls.append((name, arg))
        if self.error is not None:
            raise self.error

    async def search_entities(self, query):
        self._record("search_entities", query)
        return self.movies, self.people

    async def search_multi(self, query):
        self._record("search_multi", query)
        return self.multi

    async def get_movie_details(self, movie_id):
        self._record("get_movie_details", movie_id)
        return self.movie_details

    async def get_person_details(self, person_id):
        self._record("get_person_details", person_id)
        return self.person_details

    async def get_person_movie_credits(self, person_id):
        self._record("get_person_movie_credits", person_id)
        return self.person_credits


class FakeSource:
    """Search source returning canned results (or raising `error`)."""

    def __init__(self, name, results=None, error=None):
        self.name = name
        self.results = results or []
        self.error = error
        self.queries: list[str] = []

    async def search(self, query, limit=6, timeout=None):
        self.queries.append(query)
        if self.error is not None:
            raise self.error
        return self.results[:limit]


def upstream_error(url="https://api.themoviedb.org/3/search/movie"):
    return APIRequestError(url, 503, "Service Unavailable")


@pytest.fixture
def fake_redis():
    return FakeRedis()


@pytest.fixture
def cache_store(fake_redis):
    manager = RedisConnectionManager(url="redis://fake:6379/0", client_factory=lambda url: fake_redis)
    return CacheStore(manager)
