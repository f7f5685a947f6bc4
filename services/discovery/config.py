"""
Discovery configuration.
"""

import os
from typing import List

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field

load_dotenv()


SEARCH_TERMS = [
    "music venues",
    "concert halls",
    "live music bars",
    "nightclubs with live music",
    "performance spaces",
    "theaters with concerts",
    "music clubs",
    "jazz clubs",
    "blues clubs",
    "rock venues",
    "acoustic venues",
    "coffee shops with live music",
    "breweries with live music",
    "outdoor music venues",
]


class DiscoveryConfig(BaseModel):
    """Tunables for search-driven venue discovery."""

    model_config = ConfigDict(frozen=True)

    search_terms: List[str] = Field(default_factory=lambda: list(SEARCH_TERMS))
    results_per_search: int = Field(default=10, ge=1, description="Result elements read per query")
    max_results: int = Field(default=50, ge=1, description="New venues per discovery run")
    search_timeout_ms: int = Field(default=15000, ge=1000)
    results_wait_ms: int = Field(default=5000, ge=0, description="How long to wait for result elements")
    search_delay: float = Field(default=2.0, ge=0, description="Seconds between searches")
    headless: bool = True

    @classmethod
    def from_env(cls) -> "DiscoveryConfig":
        delay = os.getenv("DISCOVERY_SEARCH_DELAY")
        headless = os.getenv("BROWSER_HEADLESS")
        overrides = {}
        if delay:
            overrides["search_delay"] = float(delay)
        if headless:
            overrides["headless"] = headless.strip().lower() in ("1", "true", "yes", "on")
        return cls(**overrides)
