from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


@dataclass(frozen=True)
class RawResult:
    title: str
    link: str
    snippet: str = ""


@dataclass(frozen=True)
class QueryOutcome:
    """Result of one provider call: items on success, a reason on failure."""

    query: str
    items: list[RawResult] = field(default_factory=list)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class SearchStatus(str, Enum):
    not_configured = "not_configured"
    completed = "completed"


@dataclass(frozen=True)
class GatewayOutcome:
    status: SearchStatus
    queries: list[str] = field(default_factory=list)
    outcomes: list[QueryOutcome] = field(default_factory=list)

    @property
    def configured(self) -> bool:
        return self.status is SearchStatus.completed

    @property
    def items(self) -> list[RawResult]:
        """Successful items merged in original query order."""
        merged: list[RawResult] = []
        for outcome in self.outcomes:
            if outcome.ok:
                merged.extend(outcome.items)
        return merged

    @property
    def failures(self) -> list[QueryOutcome]:
        return [o for o in self.outcomes if not o.ok]
