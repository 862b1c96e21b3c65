"""
TMDB Services - primary metadata provider.
"""

from api.tmdb.core import TMDBService
from api.tmdb.models import (
    movie_record_from_details,
    person_record_from_details,
    search_result_from_multi,
)

__all__ = [
    "TMDBService",
    "movie_record_from_details",
    "person_record_from_details",
    "search_result_from_multi",
]
