"""
SerpApi Services - Google search results used as the preferred secondary source.
"""

from api.serpapi.core import SerpApiService

__all__ = ["SerpApiService"]
