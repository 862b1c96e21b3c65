"""
Creative enrichment - AI-written summaries layered over provider facts.

Providers are tried strictly one at a time: the preferred one first, then the
remaining known providers in canonical order. Each call gets its own deadline.
The first answer holding at least one non-empty creative field wins; errors,
timeouts and empty answers fall through to the next provider. When every
provider is exhausted the result is an empty CreativeFields.
"""

import asyncio

from adapters.config import ENRICHMENT_TIMEOUT_SECONDS
from api.llm.providers import ChatProvider
from contracts.models import CANONICAL_PROVIDER_ORDER, CreativeFields, ProviderId
from utils.base_api_client import APIRequestError
from utils.get_logger import get_logger
from utils.parse_json import parse_json

logger = get_logger(__name__)

SYSTEM_PROMPT = (
    "You are a film expert. Produce strictly valid JSON only. "
    "Match the schema exactly. Do not include markdown fences."
)

USER_PROMPT = """Write creative notes about the {kind} below using only the evidence.

Schema:
{{
  "summary_short": "one or two sentences, no spoilers",
  "summary_medium": "a paragraph, no spoilers",
  "summary_long_spoilers": "a detailed summary, spoilers allowed",
  "suspense_breaker": "the key twist or ending in one sentence",
  "ai_notes": "trivia, themes or context worth knowing"
}}

Query: {query}

Evidence:
{evidence}"""


def provider_order(
    known: list[ProviderId], preferred: ProviderId | None = None
) -> list[ProviderId]:
    """[preferred] + the other known providers in canonical order, without duplicates."""
    ordered = [p for p in CANONICAL_PROVIDER_ORDER if p in known]
    if preferred is not None and preferred in known:
        ordered.remove(preferred)
        ordered.insert(0, preferred)
    return ordered


class CreativeEnrichmentService:
    def __init__(
        self,
        providers: dict[ProviderId, ChatProvider],
        timeout: float = ENRICHMENT_TIMEOUT_SECONDS,
    ):
        self.providers = providers
        self.timeout = timeout

    def available(self) -> list[ProviderId]:
        """Providers with a configured key, in canonical order."""
        return [
            provider_id
            for provider_id in CANONICAL_PROVIDER_ORDER
            if provider_id in self.providers and self.providers[provider_id].is_configured()
        ]

    async def _ask(self, provider: ChatProvider, messages: list[dict[str, str]]) -> CreativeFields:
        try:
            answer = await asyncio.wait_for(
                provider.complete(messages, timeout=self.timeout), timeout=self.timeout
            )
        except TimeoutError:
            logger.warning(f"{provider.provider_id.value} timed out after {self.timeout}s")
            return CreativeFields()
        except APIRequestError as e:
            logger.warning(f"{provider.provider_id.value} enrichment failed: {e}")
            return CreativeFields()
        return CreativeFields.from_payload(parse_json(answer))

    async def generate(
        self,
        evidence: str,
        query: str = "",
        kind: str = "movie",
        preferred: ProviderId | None = None,
    ) -> tuple[CreativeFields, ProviderId | None]:
        """
        Ask providers in order until one produces creative text.

        Args:
            evidence: Factual text the model may draw on
            query: The user's query, for context
            kind: "movie" or "person"
            preferred: Provider to try first

        Returns:
            (creative fields, provider that produced them or None)
        """
        messages = [
            {"role": "system", "content": SYSTEM_PROMPT},
            {
                "role": "user",
                "content": USER_PROMPT.format(kind=kind, query=query, evidence=evidence),
            },
        ]

        for provider_id in provider_order(list(self.providers), preferred):
            provider = self.providers[provider_id]
            if not provider.is_configured():
                continue
            fields = await self._ask(provider, messages)
            if not fields.is_empty():
                logger.info(f"Creative fields produced by {provider_id.value}")
                return fields, provider_id
            logger.debug(f"{provider_id.value} produced no creative fields")

        logger.warning("All enrichment providers exhausted; returning empty creative fields")
        return CreativeFields(), None

    async def enrich(
        self, evidence: str, preferred: ProviderId | None = None, query: str = "", kind: str = "movie"
    ) -> CreativeFields:
        fields, _ = await self.generate(evidence, query=query, kind=kind, preferred=preferred)
        return fields
