from __future__ import annotations

from collections import Counter
from typing import Any


def compute_analytics(events: list[dict[str, Any]]) -> dict[str, Any]:
    runs = [e for e in events if e["type"] == "recommendation"]
    total = len(runs)

    # Average response time
    times = [r["response_time_ms"] for r in runs if "response_time_ms" in r]
    avg_time = round(sum(times) / len(times), 1) if times else 0.0

    # Average requested calories
    calories = [r["target_calories"] for r in runs if "target_calories" in r]
    avg_calories = round(sum(calories) / len(calories), 1) if calories else 0.0

    taste_counts = dict(Counter(r.get("taste", "unknown") for r in runs))
    activity_counts = dict(Counter(r.get("activity", "unknown") for r in runs))

    # Cache stats
    cache_hits = sum(1 for r in runs if r.get("cache_hit"))
    cache_misses = total - cache_hits

    # Provider usage, counted over pipeline runs that were not served from cache
    fresh = [r for r in runs if not r.get("cache_hit")]
    used_cse = sum(1 for r in fresh if r.get("used_cse"))

    return {
        "total_searches": total,
        "avg_response_time_ms": avg_time,
        "avg_target_calories": avg_calories,
        "taste_counts": taste_counts,
        "activity_counts": activity_counts,
        "cache_stats": {
            "hits": cache_hits,
            "misses": cache_misses,
            "hit_rate": round(cache_hits / total * 100, 1) if total else 0.0,
        },
        "provider_usage_rate": round(used_cse / len(fresh) * 100, 1) if fresh else 0.0,
    }
