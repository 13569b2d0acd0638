from __future__ import annotations


class ProviderError(Exception):
    """A single search provider call failed.

    ``status_code`` is set when the provider answered with a non-success
    status, and ``None`` for malformed payloads.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
