"""
Wikipedia Services - keyless title search through the MediaWiki opensearch API.
"""

from api.wikipedia.core import WikipediaService

__all__ = ["WikipediaService"]
