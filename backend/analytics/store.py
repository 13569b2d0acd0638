from __future__ import annotations

import threading
import time
from collections import deque
from typing import Any

_DEFAULT_MAX_EVENTS = 1000


class EventStore:
    """In-process log of the most recent ``max_events`` request events."""

    def __init__(self, max_events: int = _DEFAULT_MAX_EVENTS) -> None:
        self._events: deque[dict[str, Any]] = deque(maxlen=max_events)
        self._lock = threading.Lock()

    @property
    def max_events(self) -> int:
        return self._events.maxlen or 0

    def record_event(self, event_type: str, data: dict[str, Any]) -> None:
        with self._lock:
            self._events.append({
                "type": event_type,
                "timestamp": time.time(),
                **data,
            })

    def get_events(self) -> list[dict[str, Any]]:
        with self._lock:
            return list(self._events)

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)

    def clear_events(self) -> None:
        with self._lock:
            self._events.clear()
