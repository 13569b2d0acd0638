from __future__ import annotations

import re

from .config import DEFAULT_SCORING_CONFIG, ScoringConfig
from .models import Taste

_WORD_PATTERN = re.compile(r"[a-z]+")


def score_title(
    title: str,
    taste: Taste,
    config: ScoringConfig = DEFAULT_SCORING_CONFIG,
) -> tuple[int, list[str]]:
    """
    Score a dish title against the diet vocabulary.

    Positive and negative tokens match as case-insensitive substrings and
    record a reason each. Flavor tokens match whole words, optionally
    plural, so "grill" fires on "grills" but not on "grilled". Returns
    ``(score, reasons)``; the score is not clamped.
    """
    text = (title or "").lower()
    score = 0
    reasons: list[str] = []

    for token in config.positive_tokens:
        if token in text:
            score += config.positive_weight
            reasons.append(f"has {token}")

    for token in config.negative_tokens:
        if token in text:
            score -= config.negative_weight
            reasons.append(f"avoids {token}")

    taste = Taste(taste)
    if taste in (Taste.tasty, Taste.balanced):
        words = set(_WORD_PATTERN.findall(text))
        for token in config.flavor_tokens:
            if token in words or token + "s" in words:
                score += config.flavor_bonus
    elif taste is Taste.healthy:
        score += config.healthy_bonus

    return score, reasons
