from __future__ import annotations

import logging
import re
import time
from urllib.parse import quote

import pandas as pd

from ..analytics.store import EventStore
from ..search.client import MarketplaceSearchGateway
from ..search.models import RawResult
from .cache import ResponseCache, make_key
from .config import (
    DEFAULT_RECOMMENDATION_CONFIG,
    DEFAULT_SCORING_CONFIG,
    RecommendationConfig,
    ScoringConfig,
)
from .models import (
    Pick,
    RecommendationResponse,
    RecommendationTarget,
    ScoredResult,
    Taste,
)
from .queries import build_queries
from .scoring import score_title

logger = logging.getLogger(__name__)

_SITE_TOKEN = re.compile(r"\bsite:\S+", re.IGNORECASE)


def _display_label(query: str, city: str) -> str:
    """Strip the site restriction and city token from a generated query."""
    label = _SITE_TOKEN.sub(" ", query)
    label = re.sub(rf"\b{re.escape(city)}\b", " ", label, flags=re.IGNORECASE)
    return " ".join(label.split())


def build_fallback_picks(
    queries: list[str],
    target: RecommendationTarget,
    config: RecommendationConfig = DEFAULT_RECOMMENDATION_CONFIG,
) -> list[Pick]:
    """Generic web-search picks, one per query, in query order."""
    return [
        Pick(
            name=_display_label(query, config.city),
            link=config.fallback_search_url + quote(query, safe=""),
            reason=(
                f"Search idea for your ~{target.target_calories} kcal target "
                f"with a {target.taste.value} taste preference."
            ),
            source=config.fallback_source,
        )
        for query in queries[: config.max_picks]
    ]


def rank_results(
    results: list[RawResult],
    taste: Taste,
    limit: int = DEFAULT_RECOMMENDATION_CONFIG.max_picks,
    scoring: ScoringConfig = DEFAULT_SCORING_CONFIG,
) -> list[ScoredResult]:
    """
    Deduplicate by link (first seen wins), score every title and return the
    top *limit* by score. Equal scores keep their gather order.
    """
    if not results:
        return []

    candidates = pd.DataFrame(
        [{"name": r.title, "link": r.link, "snippet": r.snippet} for r in results]
    )
    candidates = candidates.drop_duplicates(subset="link", keep="first").reset_index(drop=True)

    scored = [score_title(name, taste, scoring) for name in candidates["name"]]
    candidates["_score"] = [score for score, _ in scored]
    candidates["_reasons"] = pd.Series(
        [reasons for _, reasons in scored], index=candidates.index, dtype=object
    )

    top = candidates.sort_values("_score", ascending=False, kind="stable").head(limit)

    return [
        ScoredResult(
            name=row["name"],
            link=row["link"],
            snippet=row["snippet"],
            score=int(row["_score"]),
            reasons=list(row["_reasons"]),
        )
        for _, row in top.iterrows()
    ]


def build_scored_picks(
    ranked: list[ScoredResult],
    target: RecommendationTarget,
    config: RecommendationConfig = DEFAULT_RECOMMENDATION_CONFIG,
) -> list[Pick]:
    picks: list[Pick] = []
    for result in ranked:
        because = config.reason_separator.join(result.reasons[: config.max_reasons])
        picks.append(Pick(
            name=result.name,
            link=result.link,
            reason=f"{because or config.default_reason}; fits ~{target.target_calories} kcal target",
            source=f"Google CSE ({target.activity.value} activity)",
        ))
    return picks


def get_recommendations(
    target: RecommendationTarget,
    gateway: MarketplaceSearchGateway,
    cache: ResponseCache,
    events: EventStore | None = None,
    config: RecommendationConfig = DEFAULT_RECOMMENDATION_CONFIG,
    scoring: ScoringConfig = DEFAULT_SCORING_CONFIG,
) -> RecommendationResponse:
    start_time = time.time()

    # --- Cache check ---
    key = make_key(target)
    cached = cache.get(key)
    if cached is not None:
        logger.debug("Cache hit for %s", key)
        _record(events, target, cached, start_time, cache_hit=True)
        return cached

    queries = build_queries(target.target_calories, target.activity, target.taste, config=config)
    outcome = gateway.search_many(queries)

    # --- Path selection ---
    results = outcome.items if outcome.configured else []
    if results:
        ranked = rank_results(results, target.taste, limit=config.max_picks, scoring=scoring)
        picks = build_scored_picks(ranked, target, config)
        used_cse = True
    else:
        picks = build_fallback_picks(outcome.queries, target, config)
        used_cse = False

    logger.info(
        "Recommendation run: %s kcal, %s, %s -> %s path (%d picks, %d failed queries)",
        target.target_calories,
        target.activity.value,
        target.taste.value,
        "scored" if used_cse else "fallback",
        len(picks),
        len(outcome.failures),
    )

    response = RecommendationResponse(
        picks=picks,
        target_calories=target.target_calories,
        activity=target.activity,
        taste=target.taste,
        used_cse=used_cse,
    )

    cache.set(key, response)
    _record(events, target, response, start_time, cache_hit=False)

    return response


def _record(
    events: EventStore | None,
    target: RecommendationTarget,
    response: RecommendationResponse,
    start_time: float,
    cache_hit: bool,
) -> None:
    if events is None:
        return
    elapsed_ms = round((time.time() - start_time) * 1000, 1)
    events.record_event("recommendation", {
        "target_calories": target.target_calories,
        "activity": target.activity.value,
        "taste": target.taste.value,
        "used_cse": response.used_cse,
        "picks_returned": len(response.picks),
        "response_time_ms": elapsed_ms,
        "cache_hit": cache_hit,
    })
