from __future__ import annotations

from ..search.config import DEFAULT_SEARCH_CONFIG
from .config import DEFAULT_RECOMMENDATION_CONFIG, RecommendationConfig
from .models import Activity, Taste


def base_phrases(
    target_calories: int,
    config: RecommendationConfig = DEFAULT_RECOMMENDATION_CONFIG,
) -> tuple[str, ...]:
    """Lighter dishes up to the threshold, higher-protein dishes above it."""
    if target_calories <= config.lighter_threshold:
        return config.lighter_phrases
    return config.protein_phrases


def build_queries(
    target_calories: int,
    activity: Activity,
    taste: Taste,
    marketplaces: tuple[str, ...] = DEFAULT_SEARCH_CONFIG.marketplaces,
    config: RecommendationConfig = DEFAULT_RECOMMENDATION_CONFIG,
) -> list[str]:
    """
    Build marketplace-scoped search queries.

    Phrases form the outer loop and marketplaces the inner one. Callers only
    consume a prefix, so this order matters. ``activity`` does not appear in
    the query text.
    """
    boost = Taste(taste).value
    return [
        f"{phrase} {boost} site:{marketplace} {config.city}"
        for phrase in base_phrases(target_calories, config)
        for marketplace in marketplaces
    ]
