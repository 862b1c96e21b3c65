"""
Chat-completion providers.

Every provider speaks the OpenAI-compatible chat-completions protocol: a POST
with `model` and `messages`, answered by `choices[0].message.content`. Keys
are read lazily from the environment; a provider without a key is skipped by
its callers.
"""

import os
from typing import Any

from contracts.models import CANONICAL_PROVIDER_ORDER, ProviderId
from utils.base_api_client import APIRequestError, BaseAPIClient
from utils.get_logger import get_logger

logger = get_logger(__name__)


class ChatProvider(BaseAPIClient):
    """Base OpenAI-compatible chat-completions client."""

    provider_id: ProviderId
    url: str = ""
    default_model: str = ""
    env_key: str = ""
    env_model: str = ""
    json_mode: bool = True

    rate_limit_max = 5
    rate_limit_period = 1.0
    default_timeout = 30.0

    def __init__(self, api_key: str | None = None, model: str | None = None):
        self._api_key = api_key
        self._model = model

    @property
    def api_key(self) -> str | None:
        if self._api_key is None:
            self._api_key = os.getenv(self.env_key) or None
        return self._api_key

    @property
    def model(self) -> str:
        if self._model is None:
            self._model = os.getenv(self.env_model) or self.default_model
        return self._model

    def is_configured(self) -> bool:
        return bool(self.api_key)

    def headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    def build_payload(
        self, messages: list[dict[str, str]], temperature: float, max_tokens: int
    ) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
        }
        if self.json_mode:
            payload["response_format"] = {"type": "json_object"}
        return payload

    async def complete(
        self,
        messages: list[dict[str, str]],
        timeout: float | None = None,
        temperature: float = 0.2,
        max_tokens: int = 2000,
    ) -> str:
        """
        Send a chat completion and return the first choice's text.

        Args:
            messages: Chat messages ({"role", "content"})
            timeout: Request timeout in seconds
            temperature: Sampling temperature
            max_tokens: Completion length cap

        Returns:
            The message content ("" when the provider returned no choices)

        Raises:
            APIRequestError: If the key is missing or the request fails
        """
        if not self.is_configured():
            raise APIRequestError(self.url, None, f"{self.env_key} not configured")

        data = await self._core_async_request(
            url=self.url,
            method="POST",
            headers=self.headers(),
            json_body=self.build_payload(messages, temperature, max_tokens),
            timeout=timeout,
        )
        try:
            return data["choices"][0]["message"]["content"] or ""
        except (KeyError, IndexError, TypeError):
            logger.warning(f"{self.provider_id.value} returned no choices")
            return ""


class GroqProvider(ChatProvider):
    provider_id = ProviderId.GROQ
    url = "https://api.groq.com/openai/v1/chat/completions"
    default_model = "llama-3.1-8b-instant"
    env_key = "GROQ_API_KEY"
    env_model = "GROQ_MODEL"
    rate_limit_max = 10


class MistralProvider(ChatProvider):
    provider_id = ProviderId.MISTRAL
    url = "https://api.mistral.ai/v1/chat/completions"
    default_model = "mistral-small-latest"
    env_key = "MISTRAL_API_KEY"
    env_model = "MISTRAL_MODEL"


class OpenRouterProvider(ChatProvider):
    provider_id = ProviderId.OPENROUTER
    url = "https://openrouter.ai/api/v1/chat/completions"
    default_model = "meta-llama/llama-3.1-8b-instruct"
    env_key = "OPENROUTER_API_KEY"
    env_model = "OPENROUTER_MODEL"

    def headers(self) -> dict[str, str]:
        headers = super().headers()
        headers["X-Title"] = os.getenv("OPENROUTER_APP_TITLE", "CineResolve")
        return headers


class PerplexityProvider(ChatProvider):
    """Online (web-grounded) models; no JSON response mode."""

    provider_id = ProviderId.PERPLEXITY
    url = "https://api.perplexity.ai/chat/completions"
    default_model = "sonar"
    env_key = "PERPLEXITY_API_KEY"
    env_model = "PERPLEXITY_MODEL"
    json_mode = False


PROVIDER_CLASSES: dict[ProviderId, type[ChatProvider]] = {
    ProviderId.GROQ: GroqProvider,
    ProviderId.MISTRAL: MistralProvider,
    ProviderId.OPENROUTER: OpenRouterProvider,
    ProviderId.PERPLEXITY: PerplexityProvider,
}


def build_providers() -> dict[ProviderId, ChatProvider]:
    """One provider instance per known provider, in canonical order."""
    return {provider_id: PROVIDER_CLASSES[provider_id]() for provider_id in CANONICAL_PROVIDER_ORDER}
