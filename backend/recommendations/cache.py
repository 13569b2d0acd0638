from __future__ import annotations

import hashlib
import json
import threading
import time
from typing import Any, Callable

from .models import RecommendationTarget

_DEFAULT_TTL = 600  # 10 minutes


def make_key(target: RecommendationTarget) -> str:
    normalized = json.dumps(
        {
            "targetCalories": int(target.target_calories),
            "activity": target.activity.value,
            "taste": target.taste.value,
        },
        sort_keys=True,
    )
    return hashlib.sha256(normalized.encode()).hexdigest()[:16]


class ResponseCache:
    """
    In-process TTL cache for finished recommendation payloads.

    Expired entries are evicted lazily when their key is read. There is no
    capacity bound and no background sweep, so memory grows with the number
    of distinct keys over the process lifetime.
    """

    def __init__(
        self,
        ttl_seconds: float = _DEFAULT_TTL,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[str, dict[str, Any]] = {}
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0

    def get(self, key: str) -> Any | None:
        with self._lock:
            entry = self._entries.get(key)
            if entry and self._clock() - entry["stored_at"] < self.ttl_seconds:
                self._hits += 1
                return entry["value"]
            if entry:
                del self._entries[key]
            self._misses += 1
            return None

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            self._entries[key] = {"value": value, "stored_at": self._clock()}

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def stats(self) -> dict:
        with self._lock:
            total = self._hits + self._misses
            return {
                "size": len(self._entries),
                "hits": self._hits,
                "misses": self._misses,
                "hit_rate": round(self._hits / total * 100, 1) if total > 0 else 0.0,
            }

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self._hits = 0
            self._misses = 0
