"""
OMDB Services - IMDb, Rotten Tomatoes and Metacritic ratings by IMDb id.
"""

from api.omdb.core import OMDBService

__all__ = ["OMDBService"]
