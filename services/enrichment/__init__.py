"""Enrichment service.

Fills in missing venue contact facts by crawling venue websites.

Components:
- Fetcher: Page sessions over a browser engine (fetcher.py)
- Enricher: Crawl one venue, extract missing facts (enricher.py)
- Repo: Venue CSV persistence and the in-memory collection (repo.py)
- Service: Batches, pacing, and incremental saves (service.py)
"""

from services.enrichment.service import (
    Service,
    IService,
    EnrichRunResult,
    EnrichmentStatus,
)
from services.enrichment.config import EnrichmentConfig
from services.enrichment.enricher import (
    VenueEnricher,
    RetryPolicy,
)
from services.enrichment.fetcher import (
    IFetchClient,
    IPageSession,
    PlaywrightFetchClient,
    MockFetchClient,
    FetchError,
)
from services.enrichment.repo import (
    IVenueRepo,
    VenueRepo,
    MockVenueRepo,
    VenueCollection,
)

__all__ = [
    # Service
    "Service",
    "IService",
    "EnrichRunResult",
    "EnrichmentStatus",
    "EnrichmentConfig",
    # Enricher
    "VenueEnricher",
    "RetryPolicy",
    # Fetcher
    "IFetchClient",
    "IPageSession",
    "PlaywrightFetchClient",
    "MockFetchClient",
    "FetchError",
    # Repo
    "IVenueRepo",
    "VenueRepo",
    "MockVenueRepo",
    "VenueCollection",
]
