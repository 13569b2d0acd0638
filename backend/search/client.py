from __future__ import annotations

import logging
from typing import Any, Callable, Iterable
from urllib.parse import urlparse

import httpx

from .config import DEFAULT_SEARCH_CONFIG, SearchConfig
from .exceptions import ProviderError
from .models import GatewayOutcome, QueryOutcome, RawResult, SearchStatus

logger = logging.getLogger(__name__)


def _link_host(link: str) -> str:
    try:
        return (urlparse(link).hostname or "").lower()
    except ValueError:
        return ""


def is_marketplace_link(link: str, marketplaces: Iterable[str]) -> bool:
    """True when *link* points at one of the marketplace domains or a subdomain."""
    host = _link_host(link)
    if not host:
        return False
    for domain in marketplaces:
        domain = domain.lower()
        if host == domain or host.endswith("." + domain):
            return True
    return False


def parse_items(payload: Any, marketplaces: Iterable[str]) -> list[RawResult]:
    """Normalise a Custom Search JSON payload into marketplace-only results."""
    if not isinstance(payload, dict):
        raise ProviderError("Search payload is not a JSON object")
    entries = payload.get("items")
    if entries is None:
        return []
    if not isinstance(entries, list):
        raise ProviderError("Search payload 'items' is not a list")

    marketplaces = tuple(marketplaces)
    results: list[RawResult] = []
    for entry in entries:
        if not isinstance(entry, dict):
            continue
        link = entry.get("link")
        if not isinstance(link, str) or not link.strip():
            continue
        link = link.strip()
        if not is_marketplace_link(link, marketplaces):
            continue
        results.append(RawResult(
            title=str(entry.get("title") or "").strip(),
            link=link,
            snippet=str(entry.get("snippet") or "").strip(),
        ))
    return results


class MarketplaceSearchGateway:
    """HTTPX-backed Google Programmable Search gateway scoped to the marketplaces."""

    def __init__(
        self,
        config: SearchConfig = DEFAULT_SEARCH_CONFIG,
        client_factory: Callable[[], httpx.Client] | None = None,
    ) -> None:
        self.config = config
        self.client_factory = client_factory

    @property
    def configured(self) -> bool:
        return self.config.configured

    def _client(self) -> tuple[httpx.Client, bool]:
        if self.client_factory is None:
            return httpx.Client(base_url=self.config.base_url, timeout=self.config.timeout), True
        return self.client_factory(), False

    def search(self, query: str, client: httpx.Client | None = None) -> list[RawResult]:
        """
        Run a single provider query.

        Raises ``ProviderError`` on a non-success status or malformed payload;
        transport errors and timeouts surface as ``httpx.HTTPError``.
        """
        params = {
            "key": self.config.api_key.strip(),
            "cx": self.config.cse_id.strip(),
            "q": query,
            "num": self.config.results_per_query,
        }
        manage_client = client is None
        if client is None:
            client, manage_client = self._client()
        try:
            response = client.get(self.config.endpoint, params=params)
        finally:
            if manage_client:
                client.close()

        if not response.is_success:
            raise ProviderError(
                f"Search provider returned HTTP {response.status_code}",
                status_code=response.status_code,
            )
        try:
            payload = response.json()
        except ValueError as exc:
            raise ProviderError("Search payload is not valid JSON") from exc
        return parse_items(payload, self.config.marketplaces)

    def search_many(self, queries: list[str]) -> GatewayOutcome:
        """
        Run up to ``max_queries`` queries sequentially.

        Returns a ``not_configured`` outcome without touching the network when
        credentials are missing. A failing query becomes a failed
        ``QueryOutcome`` and the remaining queries still run.
        """
        attempted = list(queries[: self.config.max_queries])
        if not self.configured:
            logger.info("Search provider not configured, skipping %d queries", len(attempted))
            return GatewayOutcome(status=SearchStatus.not_configured, queries=attempted)

        outcomes: list[QueryOutcome] = []
        client, manage_client = self._client()
        try:
            for query in attempted:
                try:
                    items = self.search(query, client=client)
                except (ProviderError, httpx.HTTPError) as exc:
                    logger.warning("Search query failed, skipping: %r (%s)", query, exc)
                    outcomes.append(QueryOutcome(query=query, error=str(exc) or type(exc).__name__))
                    continue
                logger.debug("Search query %r returned %d marketplace results", query, len(items))
                outcomes.append(QueryOutcome(query=query, items=items))
        finally:
            if manage_client:
                client.close()

        return GatewayOutcome(
            status=SearchStatus.completed,
            queries=attempted,
            outcomes=outcomes,
        )
