from __future__ import annotations

from fastapi import Request

from .analytics.store import EventStore
from .recommendations.cache import ResponseCache
from .search.client import MarketplaceSearchGateway


def get_response_cache(request: Request) -> ResponseCache:
    """Return the cache owned by the running application."""
    return request.app.state.response_cache


def get_search_gateway(request: Request) -> MarketplaceSearchGateway:
    """Return the search gateway owned by the running application."""
    return request.app.state.search_gateway


def get_event_store(request: Request) -> EventStore:
    """Return the analytics event log owned by the running application."""
    return request.app.state.event_store
