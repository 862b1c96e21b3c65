"""
TVMaze Services - keyless TV show, season and episode data.
"""

from api.tvmaze.core import TVMazeService

__all__ = ["TVMazeService"]
