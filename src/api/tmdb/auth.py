"""
TMDB Auth Service - Base service with authentication utilities.
Supports a v4 read access token (bearer header) or a v3 API key (query param).
"""

import os

from utils.get_logger import get_logger

logger = get_logger(__name__)


class Auth:
    """
    Base TMDB service with authentication utilities.
    Credentials are read lazily from the environment.
    """

    _tmdb_read_token: str | None = None
    _tmdb_api_key: str | None = None
    base_url: str | None = None

    def __init__(self, read_token: str | None = None, api_key: str | None = None):
        self.base_url = "https://api.themoviedb.org/3"
        self._tmdb_read_token = read_token
        self._tmdb_api_key = api_key

    @property
    def tmdb_read_token(self) -> str | None:
        """Lazy-load the TMDB read token from the environment."""
        if self._tmdb_read_token is None:
            self._tmdb_read_token = os.getenv("TMDB_READ_TOKEN") or None
        return self._tmdb_read_token

    @property
    def tmdb_api_key(self) -> str | None:
        if self._tmdb_api_key is None:
            self._tmdb_api_key = os.getenv("TMDB_API_KEY") or None
        return self._tmdb_api_key

    @property
    def has_credentials(self) -> bool:
        return bool(self.tmdb_read_token or self.tmdb_api_key)

    def auth_headers(self) -> dict[str, str]:
        """Return the authorization headers for TMDB API requests."""
        headers = {"Accept": "application/json"}
        if self.tmdb_read_token:
            headers["Authorization"] = f"Bearer {self.tmdb_read_token}"
        return headers

    def auth_params(self) -> dict[str, str]:
        """Return the api_key query param when no read token is configured."""
        if not self.tmdb_read_token and self.tmdb_api_key:
            return {"api_key": self.tmdb_api_key}
        return {}
