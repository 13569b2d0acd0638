from __future__ import annotations

import logging

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .analytics.aggregator import compute_analytics
from .analytics.store import EventStore
from .config import DEFAULT_SERVER_CONFIG
from .dependencies import get_event_store, get_response_cache, get_search_gateway
from .recommendations.cache import ResponseCache
from .recommendations.models import RecommendationResponse, RecommendationTarget
from .recommendations.retrieval import get_recommendations
from .search.client import MarketplaceSearchGateway

logger = logging.getLogger(__name__)

app = FastAPI(title="Healthy Dish Recommendation API", version="1.0.0")
app.add_middleware(
    CORSMiddleware,
    allow_origins=list(DEFAULT_SERVER_CONFIG.cors_origins),
    allow_methods=["*"],
    allow_headers=["*"],
)

app.state.response_cache = ResponseCache()
app.state.search_gateway = MarketplaceSearchGateway()
app.state.event_store = EventStore()


@app.exception_handler(Exception)
async def unhandled_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s", request.url.path)
    return JSONResponse(status_code=500, content={"error": str(exc) or "Internal server error"})


# ── Public endpoints ─────────────────────────────────────────────────────


@app.get("/")
def root() -> dict[str, bool]:
    return {"ok": True}


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/recommend", response_model=RecommendationResponse)
def recommend(
    calories: str | None = None,
    activity: str | None = None,
    taste: str | None = None,
    cache: ResponseCache = Depends(get_response_cache),
    gateway: MarketplaceSearchGateway = Depends(get_search_gateway),
    events: EventStore = Depends(get_event_store),
) -> RecommendationResponse:
    # Raw strings so bad input is defaulted rather than rejected with 422
    target = RecommendationTarget.from_query(calories, activity, taste)
    return get_recommendations(target, gateway, cache, events)


# ── Operational endpoints ────────────────────────────────────────────────


@app.get("/cache/stats")
def cache_stats(cache: ResponseCache = Depends(get_response_cache)) -> dict:
    return cache.stats()


# Unauthenticated like /cache/stats; this service has no login surface.
@app.get("/analytics")
def analytics(events: EventStore = Depends(get_event_store)) -> dict:
    return compute_analytics(events.get_events())
