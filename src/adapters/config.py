import os

from dotenv import load_dotenv

# Result and candidate caps
SEARCH_RESULT_LIMIT = 6
CANDIDATE_LIMIT = 10
WEB_CONTEXT_SNIPPETS = 5

# Timeouts (seconds)
ENRICHMENT_TIMEOUT_SECONDS = 9.0
SEARCH_PROVIDER_TIMEOUT_SECONDS = 10.0
METADATA_TIMEOUT_SECONDS = 10.0

# Cache TTLs (seconds)
RESOLVE_CACHE_TTL = 60 * 60
SEARCH_CACHE_TTL = 6 * 60 * 60
QUERY_CACHE_TTL = 60 * 60
PERSON_CACHE_TTL = 24 * 60 * 60
WEB_SEARCH_CACHE_TTL = 60 * 60
PARSE_CACHE_TTL = 24 * 60 * 60


def load_env():
    """Load environment variables from env file.

    Defaults to config/local.env for local development.
    Set ENV_FILE environment variable to override.
    """
    env = os.getenv("ENV_FILE", "config/local.env")
    load_dotenv(env)


def get_redis_url() -> str | None:
    """Build the Redis URL from REDIS_URL or REDIS_HOST/REDIS_PORT/REDIS_PASSWORD."""
    url = os.getenv("REDIS_URL")
    if url:
        return url

    host = os.getenv("REDIS_HOST")
    if not host:
        return None
    port = os.getenv("REDIS_PORT", "6379")
    password = os.getenv("REDIS_PASSWORD") or None
    auth = f":{password}@" if password else ""
    return f"redis://{auth}{host}:{port}/0"
