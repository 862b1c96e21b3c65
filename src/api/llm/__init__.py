"""
LLM Services - chat-completion providers and the AI web search stage.
"""

from api.llm.perplexity_search import PerplexitySearchService
from api.llm.providers import (
    ChatProvider,
    GroqProvider,
    MistralProvider,
    OpenRouterProvider,
    PerplexityProvider,
    build_providers,
)

__all__ = [
    "ChatProvider",
    "GroqProvider",
    "MistralProvider",
    "OpenRouterProvider",
    "PerplexityProvider",
    "PerplexitySearchService",
    "build_providers",
]
