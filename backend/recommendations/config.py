from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ScoringConfig:
    """
    Hand-tuned heuristic vocabulary and weights for dish titles.

    Tokens are scanned in the order listed here; that order fixes the order
    of the recorded reasons.
    """

    positive_tokens: tuple[str, ...] = (
        "salad",
        "grilled",
        "bowl",
        "protein",
        "steamed",
        "lean",
        "soup",
        "dal",
        "sprouts",
        "millet",
        "oats",
        "tandoori",
    )
    negative_tokens: tuple[str, ...] = (
        "fried",
        "butter",
        "cream",
        "cheese",
        "biryani",
        "burger",
        "pizza",
        "fries",
        "sweet",
    )
    flavor_tokens: tuple[str, ...] = ("tikka", "peri", "tangy", "masala", "grill")
    positive_weight: int = 2
    negative_weight: int = 2
    flavor_bonus: int = 1
    healthy_bonus: int = 1


@dataclass(frozen=True)
class RecommendationConfig:
    min_calories: int = 300
    max_calories: int = 800
    default_calories: int = 500
    lighter_threshold: int = 450
    city: str = "Bangalore"
    lighter_phrases: tuple[str, ...] = (
        "healthy salad",
        "low calorie wrap",
        "steamed momos",
        "clear soup",
        "sprouts chaat",
    )
    protein_phrases: tuple[str, ...] = (
        "protein bowl",
        "grilled chicken",
        "paneer tikka",
        "egg bhurji",
        "chicken breast meal",
    )
    max_picks: int = 5
    max_reasons: int = 3
    reason_separator: str = ", "
    default_reason: str = "overall balance"
    fallback_search_url: str = "https://www.google.com/search?q="
    fallback_source: str = "Fallback web search"


DEFAULT_SCORING_CONFIG = ScoringConfig()
DEFAULT_RECOMMENDATION_CONFIG = RecommendationConfig()
