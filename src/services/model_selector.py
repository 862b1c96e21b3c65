"""
Model selection - pick the chat provider best suited to a chosen search result.
"""

from contracts.models import ModelSelection, ProviderId

COMPLEX_KEYWORDS = (
    "production",
    "budget",
    "box office",
    "awards",
    "analysis",
    "breakdown",
    "comparison",
)

PREFERENCES: dict[str, list[ProviderId]] = {
    "movie": [ProviderId.GROQ, ProviderId.MISTRAL, ProviderId.OPENROUTER, ProviderId.PERPLEXITY],
    "person": [ProviderId.MISTRAL, ProviderId.GROQ, ProviderId.OPENROUTER, ProviderId.PERPLEXITY],
    "review": [ProviderId.PERPLEXITY, ProviderId.OPENROUTER, ProviderId.MISTRAL, ProviderId.GROQ],
    "complex": [ProviderId.OPENROUTER, ProviderId.PERPLEXITY, ProviderId.MISTRAL, ProviderId.GROQ],
}

REASONS = {
    "movie": "Fast model for plot and cast summaries",
    "person": "Balanced model for biographies and filmographies",
    "review": "Web-grounded model for current reviews and ratings",
    "complex": "Larger model for production, box office and awards analysis",
}


def classify(result_type: str | None, title: str | None) -> str:
    """movie | person | review | complex; complex wins over the result's own type."""
    text = (title or "").lower()
    if any(keyword in text for keyword in COMPLEX_KEYWORDS):
        return "complex"
    result_type = (result_type or "").lower()
    return result_type if result_type in PREFERENCES else "movie"


def select_model(
    result_type: str | None, title: str | None, available: list[ProviderId]
) -> ModelSelection:
    """
    Apply the preference matrix, skipping providers without a configured key.

    `selected` is the first available preference, or the first preference when
    nothing is configured; `alternatives` are the other available providers.
    """
    query_type = classify(result_type, title)
    preferences = PREFERENCES[query_type]
    usable = [p for p in preferences if p in available]
    selected = usable[0] if usable else preferences[0]
    return ModelSelection(
        query_type=query_type,
        selected=selected,
        alternatives=[p for p in usable if p != selected],
        reason=REASONS[query_type],
    )
