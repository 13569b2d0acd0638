from __future__ import annotations

import math
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .config import DEFAULT_RECOMMENDATION_CONFIG as _CFG


class Activity(str, Enum):
    light = "light"
    moderate = "moderate"
    high = "high"


class Taste(str, Enum):
    healthy = "healthy"
    tasty = "tasty"
    balanced = "balanced"


def _coerce_calories(value: Any) -> int:
    if isinstance(value, bool):
        value = None
    if isinstance(value, str):
        value = value.strip()
    try:
        number = float(value)
    except (TypeError, ValueError):
        number = float(_CFG.default_calories)
    if not math.isfinite(number):
        number = float(_CFG.default_calories)
    # Halves round up: "450.5" -> 451
    return max(_CFG.min_calories, min(_CFG.max_calories, math.floor(number + 0.5)))


def _coerce_choice(value: Any, enum_cls: type[Enum], default: Enum) -> Enum:
    if isinstance(value, enum_cls):
        return value
    text = str(value).strip().lower() if value is not None else ""
    try:
        return enum_cls(text)
    except ValueError:
        return default


class RecommendationTarget(BaseModel):
    """Resolved request parameters. Invalid input is defaulted, never rejected."""

    model_config = ConfigDict(frozen=True)

    target_calories: int = Field(default=_CFG.default_calories)
    activity: Activity = Activity.moderate
    taste: Taste = Taste.balanced

    @field_validator("target_calories", mode="before")
    @classmethod
    def _clamp_calories(cls, value: Any) -> int:
        return _coerce_calories(value)

    @field_validator("activity", mode="before")
    @classmethod
    def _default_activity(cls, value: Any) -> Activity:
        return _coerce_choice(value, Activity, Activity.moderate)

    @field_validator("taste", mode="before")
    @classmethod
    def _default_taste(cls, value: Any) -> Taste:
        return _coerce_choice(value, Taste, Taste.balanced)

    @classmethod
    def from_query(
        cls,
        calories: Any = None,
        activity: Any = None,
        taste: Any = None,
    ) -> "RecommendationTarget":
        return cls(target_calories=calories, activity=activity, taste=taste)


class ScoredResult(BaseModel):
    name: str
    link: str
    snippet: str = ""
    score: int
    reasons: list[str] = Field(default_factory=list)


class Pick(BaseModel):
    name: str
    link: str
    reason: str
    source: str


class RecommendationResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    picks: list[Pick]
    target_calories: int = Field(..., alias="targetCalories")
    activity: Activity
    taste: Taste
    used_cse: bool = Field(..., alias="usedCSE")
