"""
Unit tests for CreativeEnrichmentService.
"""

import asyncio
from unittest.mock import AsyncMock, patch

import pytest

from api.llm.providers import GroqProvider, MistralProvider, OpenRouterProvider, PerplexityProvider
from contracts.models import ProviderId
from services.enrichment import CreativeEnrichmentService, provider_order
from utils.base_api_client import APIRequestError

pytestmark = pytest.mark.unit

GOOD_ANSWER = '{"summary_short": "A heist inside dreams.", "ai_notes": ""}'


def make_providers(configured=True):
    key = "key" if configured else ""
    return {
        ProviderId.GROQ: GroqProvider(api_key=key),
        ProviderId.MISTRAL: MistralProvider(api_key=key),
        ProviderId.OPENROUTER: OpenRouterProvider(api_key=key),
        ProviderId.PERPLEXITY: PerplexityProvider(api_key=key),
    }


class TestProviderOrder:
    def test_canonical_without_preference(self):
        assert provider_order(list(make_providers())) == [
            ProviderId.GROQ,
            ProviderId.MISTRAL,
            ProviderId.OPENROUTER,
            ProviderId.PERPLEXITY,
        ]

    def test_preferred_first_and_deduplicated(self):
        assert provider_order(list(make_providers()), ProviderId.OPENROUTER) == [
            ProviderId.OPENROUTER,
            ProviderId.GROQ,
            ProviderId.MISTRAL,
            ProviderId.PERPLEXITY,
        ]

    def test_unknown_preference_is_ignored(self):
        known = [ProviderId.MISTRAL, ProviderId.GROQ]
        assert provider_order(known, ProviderId.PERPLEXITY) == [ProviderId.GROQ, ProviderId.MISTRAL]


class TestGenerate:
    @pytest.mark.asyncio
    async def test_first_useful_answer_wins(self):
        providers = make_providers()
        groq = AsyncMock(side_effect=APIRequestError("https://api.groq.com", 429, "Too Many Requests"))
        mistral = AsyncMock(return_value='```json\n{"summary_short": "   "}\n```')
        openrouter = AsyncMock(return_value=GOOD_ANSWER)
        perplexity = AsyncMock(return_value=GOOD_ANSWER)

        with (
            patch.object(providers[ProviderId.GROQ], "complete", new=groq),
            patch.object(providers[ProviderId.MISTRAL], "complete", new=mistral),
            patch.object(providers[ProviderId.OPENROUTER], "complete", new=openrouter),
            patch.object(providers[ProviderId.PERPLEXITY], "complete", new=perplexity),
        ):
            fields, used = await CreativeEnrichmentService(providers).generate(
                "Title: Inception (2010)", query="Inception"
            )

        assert used == ProviderId.OPENROUTER
        assert fields.summary_short == "A heist inside dreams."
        assert fields.ai_notes == ""
        groq.assert_awaited_once()
        mistral.assert_awaited_once()
        perplexity.assert_not_called()
        messages = openrouter.call_args.args[0]
        assert "Title: Inception (2010)" in messages[1]["content"]
        assert "Query: Inception" in messages[1]["content"]

    @pytest.mark.asyncio
    async def test_preferred_provider_is_tried_first(self):
        providers = make_providers()
        mistral = AsyncMock(return_value=GOOD_ANSWER)
        groq = AsyncMock(return_value=GOOD_ANSWER)
        with (
            patch.object(providers[ProviderId.MISTRAL], "complete", new=mistral),
            patch.object(providers[ProviderId.GROQ], "complete", new=groq),
        ):
            _, used = await CreativeEnrichmentService(providers).generate(
                "evidence", preferred=ProviderId.MISTRAL
            )

        assert used == ProviderId.MISTRAL
        groq.assert_not_called()

    @pytest.mark.asyncio
    async def test_slow_provider_times_out_and_falls_through(self):
        providers = make_providers()

        async def hang(*args, **kwargs):
            await asyncio.sleep(5)
            return GOOD_ANSWER

        with (
            patch.object(providers[ProviderId.GROQ], "complete", new=hang),
            patch.object(
                providers[ProviderId.MISTRAL], "complete", new=AsyncMock(return_value=GOOD_ANSWER)
            ),
        ):
            _, used = await CreativeEnrichmentService(providers, timeout=0.01).generate("evidence")

        assert used == ProviderId.MISTRAL

    @pytest.mark.asyncio
    async def test_all_exhausted_returns_empty_fields(self):
        providers = make_providers()
        patches = [
            patch.object(provider, "complete", new=AsyncMock(return_value="I cannot help with that."))
            for provider in providers.values()
        ]
        for p in patches:
            p.start()
        try:
            fields = await CreativeEnrichmentService(providers).enrich("evidence")
        finally:
            for p in patches:
                p.stop()

        assert fields.is_empty()

    @pytest.mark.asyncio
    async def test_unconfigured_providers_are_not_called(self, monkeypatch):
        for env in ("GROQ_API_KEY", "MISTRAL_API_KEY", "OPENROUTER_API_KEY", "PERPLEXITY_API_KEY"):
            monkeypatch.delenv(env, raising=False)
        providers = make_providers(configured=False)
        service = CreativeEnrichmentService(providers)
        mock_request = AsyncMock()
        with patch.object(providers[ProviderId.GROQ], "_core_async_request", new=mock_request):
            fields, used = await service.generate("evidence")

        assert used is None
        assert fields.is_empty()
        assert service.available() == []
        mock_request.assert_not_called()
