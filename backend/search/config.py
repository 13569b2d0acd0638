from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")


@dataclass(frozen=True)
class SearchConfig:
    api_key: str = os.getenv("GOOGLE_API_KEY", "")
    cse_id: str = os.getenv("GOOGLE_CSE_ID", "")
    base_url: str = "https://www.googleapis.com"
    endpoint: str = "/customsearch/v1"
    timeout: float = 10.0
    max_queries: int = 6
    results_per_query: int = 10
    marketplaces: tuple[str, ...] = ("swiggy.com", "zomato.com")

    @property
    def configured(self) -> bool:
        return bool(self.api_key.strip() and self.cse_id.strip())


DEFAULT_SEARCH_CONFIG = SearchConfig()
