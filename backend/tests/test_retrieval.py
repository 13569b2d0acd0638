from __future__ import annotations

from unittest.mock import MagicMock
from urllib.parse import unquote

from backend.recommendations.cache import ResponseCache
from backend.recommendations.models import RecommendationTarget, Taste
from backend.recommendations.retrieval import (
    build_fallback_picks,
    get_recommendations,
    rank_results,
)
from backend.search.client import MarketplaceSearchGateway
from backend.search.models import GatewayOutcome, QueryOutcome, RawResult, SearchStatus


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


def _mock_gateway(outcome_factory) -> MagicMock:
    gateway = MagicMock(spec=MarketplaceSearchGateway)

    def search_many(queries):
        return outcome_factory(list(queries[:6]))

    gateway.search_many.side_effect = search_many
    return gateway


def _not_configured(queries):
    return GatewayOutcome(status=SearchStatus.not_configured, queries=queries)


def _completed(items_by_query):
    def factory(queries):
        outcomes = []
        for q in queries:
            items = items_by_query.get(q)
            if items is None:
                outcomes.append(QueryOutcome(query=q, error="HTTP 500"))
            else:
                outcomes.append(QueryOutcome(query=q, items=items))
        return GatewayOutcome(status=SearchStatus.completed, queries=queries, outcomes=outcomes)
    return factory


def _swiggy(title: str, slug: str) -> RawResult:
    return RawResult(title=title, link=f"https://www.swiggy.com/{slug}")


# ── Ranking ──────────────────────────────────────────────────────────────


def test_dedup_keeps_first_seen():
    results = [
        _swiggy("Plain Rice", "same"),
        _swiggy("Grilled Chicken Salad", "same"),
        _swiggy("Lemon Rice", "other"),
    ]
    ranked = rank_results(results, Taste.balanced)
    assert [r.name for r in ranked] == ["Plain Rice", "Lemon Rice"]


def test_sort_is_stable_for_equal_scores():
    results = [
        _swiggy("Alpha Rice", "a"),
        _swiggy("Protein Bowl", "b"),
        _swiggy("Beta Rice", "c"),
        _swiggy("Gamma Rice", "d"),
    ]
    ranked = rank_results(results, Taste.balanced)
    assert [r.name for r in ranked] == ["Protein Bowl", "Alpha Rice", "Beta Rice", "Gamma Rice"]
    assert ranked[0].score == 4


def test_rank_truncates_to_limit():
    results = [_swiggy(f"Dish {i}", str(i)) for i in range(9)]
    assert len(rank_results(results, Taste.tasty)) == 5


def test_rank_keeps_negative_scores():
    ranked = rank_results([_swiggy("Fried Cheese Pizza", "p")], Taste.tasty)
    assert ranked[0].score == -6
    assert ranked[0].reasons == ["avoids fried", "avoids cheese", "avoids pizza"]


# ── Fallback path ────────────────────────────────────────────────────────


def test_fallback_when_not_configured():
    target = RecommendationTarget.from_query(500, "moderate", "balanced")
    gateway = _mock_gateway(_not_configured)

    response = get_recommendations(target, gateway, ResponseCache())

    assert response.used_cse is False
    assert response.target_calories == 500
    assert len(response.picks) == 5
    for pick in response.picks:
        assert pick.link.startswith("https://www.google.com/search?q=")
        assert "500" in pick.reason
        assert "balanced" in pick.reason
        assert pick.source == "Fallback web search"


def test_fallback_labels_and_links_follow_query_order():
    target = RecommendationTarget.from_query(400, "light", "healthy")
    queries = [
        "healthy salad healthy site:swiggy.com Bangalore",
        "healthy salad healthy site:zomato.com Bangalore",
        "low calorie wrap healthy site:swiggy.com Bangalore",
        "low calorie wrap healthy site:zomato.com Bangalore",
        "steamed momos healthy site:swiggy.com Bangalore",
        "steamed momos healthy site:zomato.com Bangalore",
    ]
    picks = build_fallback_picks(queries, target)
    assert [p.name for p in picks] == [
        "healthy salad healthy",
        "healthy salad healthy",
        "low calorie wrap healthy",
        "low calorie wrap healthy",
        "steamed momos healthy",
    ]
    assert unquote(picks[0].link.split("q=", 1)[1]) == queries[0]


def test_fallback_when_configured_but_empty():
    target = RecommendationTarget.from_query(600, "high", "tasty")
    gateway = _mock_gateway(_completed({}))

    response = get_recommendations(target, gateway, ResponseCache())

    assert response.used_cse is False
    assert len(response.picks) == 5


def test_fallback_is_idempotent():
    target = RecommendationTarget.from_query(500, "moderate", "balanced")
    first = get_recommendations(target, _mock_gateway(_not_configured), ResponseCache())
    second = get_recommendations(target, _mock_gateway(_not_configured), ResponseCache())
    assert first.model_dump_json(by_alias=True) == second.model_dump_json(by_alias=True)


# ── Scored path ──────────────────────────────────────────────────────────


def test_scored_path_with_partial_failures():
    target = RecommendationTarget.from_query(600, "high", "tasty")
    first_query = "protein bowl tasty site:swiggy.com Bangalore"
    gateway = _mock_gateway(_completed({
        first_query: [
            _swiggy("Butter Naan Combo", "naan"),
            _swiggy("Grilled Paneer Tikka Salad", "paneer"),
        ],
    }))

    response = get_recommendations(target, gateway, ResponseCache())

    assert response.used_cse is True
    assert [p.name for p in response.picks] == ["Grilled Paneer Tikka Salad", "Butter Naan Combo"]
    assert response.picks[0].reason == "has salad, has grilled; fits ~600 kcal target"
    assert response.picks[0].source == "Google CSE (high activity)"
    assert response.picks[1].reason == "avoids butter; fits ~600 kcal target"


def test_scored_reason_defaults_to_overall_balance():
    target = RecommendationTarget.from_query(500, "light", "balanced")
    gateway = _mock_gateway(lambda queries: GatewayOutcome(
        status=SearchStatus.completed,
        queries=queries,
        outcomes=[QueryOutcome(query=queries[0], items=[_swiggy("Lemon Rice", "lemon")])],
    ))

    response = get_recommendations(target, gateway, ResponseCache())

    assert response.picks[0].reason == "overall balance; fits ~500 kcal target"


def test_scored_reason_lists_at_most_three():
    target = RecommendationTarget.from_query(500, "moderate", "healthy")
    gateway = _mock_gateway(lambda queries: GatewayOutcome(
        status=SearchStatus.completed,
        queries=queries,
        outcomes=[QueryOutcome(query=queries[0], items=[
            _swiggy("Lean Grilled Protein Salad Bowl", "bowl"),
        ])],
    ))

    response = get_recommendations(target, gateway, ResponseCache())

    assert response.picks[0].reason == "has salad, has grilled, has bowl; fits ~500 kcal target"


def test_dedup_across_queries_in_gather_order():
    target = RecommendationTarget.from_query(600, "moderate", "balanced")
    q1 = "protein bowl balanced site:swiggy.com Bangalore"
    q2 = "protein bowl balanced site:zomato.com Bangalore"
    gateway = _mock_gateway(_completed({
        q1: [_swiggy("First Title", "shared")],
        q2: [_swiggy("Second Title", "shared")],
    }))

    response = get_recommendations(target, gateway, ResponseCache())

    assert [p.name for p in response.picks] == ["First Title"]


# ── Caching ──────────────────────────────────────────────────────────────


def test_cache_round_trip_and_expiry():
    clock = FakeClock()
    cache = ResponseCache(clock=clock)
    target = RecommendationTarget.from_query("500", "moderate", "balanced")
    gateway = _mock_gateway(_not_configured)

    first = get_recommendations(target, gateway, cache)
    clock.now += 300
    second = get_recommendations(RecommendationTarget.from_query(500), gateway, cache)

    assert gateway.search_many.call_count == 1
    assert first.model_dump_json(by_alias=True) == second.model_dump_json(by_alias=True)

    clock.now += 300.001
    get_recommendations(target, gateway, cache)
    assert gateway.search_many.call_count == 2
