"""
DuckDuckGo Services - keyless web search, the always-available secondary source.
"""

from api.duckduckgo.core import DuckDuckGoService, DuckDuckGoSiteSearch, imdb_search

__all__ = ["DuckDuckGoService", "DuckDuckGoSiteSearch", "imdb_search"]
