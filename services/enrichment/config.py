"""
Enrichment configuration.
"""

import os

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field

load_dotenv()


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    return int(value) if value not in (None, "") else default


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    return float(value) if value not in (None, "") else default


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value in (None, ""):
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class EnrichmentConfig(BaseModel):
    """Tunables for an enrichment run."""

    model_config = ConfigDict(frozen=True)

    # Batching
    batch_size: int = Field(default=3, ge=1, description="Venues per batch")
    venue_delay: float = Field(default=0.5, ge=0, description="Seconds to pause after each venue")
    batch_delay: float = Field(default=5.0, ge=0, description="Seconds to pause between batches")
    flush_every: int = Field(default=5, ge=1, description="Save the store after this many updated venues")
    quick_limit: int = Field(default=10, ge=1, description="Venue cap for quick runs")

    # Fetching
    max_attempts: int = Field(default=3, ge=1, description="Crawl attempts per venue")
    retry_delay: float = Field(default=1.0, ge=0, description="Seconds between crawl attempts")
    page_timeout_ms: int = Field(default=10000, ge=1000)
    secondary_timeout_ms: int = Field(default=8000, ge=1000)
    headless: bool = True

    # Scheduling
    interval_hours: float = Field(default=6.0, gt=0, description="Hours between scheduled runs")
    initial_delay: float = Field(default=5.0, ge=0, description="Seconds before the first scheduled run")

    @classmethod
    def from_env(cls) -> "EnrichmentConfig":
        """Build config from ENRICH_* environment variables, falling back to defaults."""
        defaults = cls()
        return cls(
            batch_size=_env_int("ENRICH_BATCH_SIZE", defaults.batch_size),
            venue_delay=_env_float("ENRICH_VENUE_DELAY", defaults.venue_delay),
            batch_delay=_env_float("ENRICH_BATCH_DELAY", defaults.batch_delay),
            flush_every=_env_int("ENRICH_FLUSH_EVERY", defaults.flush_every),
            quick_limit=_env_int("ENRICH_QUICK_LIMIT", defaults.quick_limit),
            max_attempts=_env_int("ENRICH_MAX_ATTEMPTS", defaults.max_attempts),
            retry_delay=_env_float("ENRICH_RETRY_DELAY", defaults.retry_delay),
            page_timeout_ms=_env_int("ENRICH_PAGE_TIMEOUT_MS", defaults.page_timeout_ms),
            secondary_timeout_ms=_env_int("ENRICH_SECONDARY_TIMEOUT_MS", defaults.secondary_timeout_ms),
            headless=_env_bool("BROWSER_HEADLESS", defaults.headless),
            interval_hours=_env_float("ENRICH_INTERVAL_HOURS", defaults.interval_hours),
            initial_delay=_env_float("ENRICH_INITIAL_DELAY", defaults.initial_delay),
        )
