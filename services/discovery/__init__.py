"""Discovery service.

Finds new music venues through web search and tracks their review status.

Components:
- Search: Result scraping and classification (search.py)
- Repo: Discovered venue CSV persistence (repo.py)
- Service: Search runs and review decisions (service.py)
"""

from services.discovery.service import DiscoveryService, IDiscoveryService
from services.discovery.config import DiscoveryConfig, SEARCH_TERMS
from services.discovery.search import (
    ISearchScraper,
    SearchScraper,
    MockSearchScraper,
    SearchHit,
    classify_venue_type,
    extract_address,
)
from services.discovery.repo import DiscoveredRepo, IDiscoveredRepo, MockDiscoveredRepo

__all__ = [
    "DiscoveryService",
    "IDiscoveryService",
    "DiscoveryConfig",
    "SEARCH_TERMS",
    "ISearchScraper",
    "SearchScraper",
    "MockSearchScraper",
    "SearchHit",
    "classify_venue_type",
    "extract_address",
    "DiscoveredRepo",
    "IDiscoveredRepo",
    "MockDiscoveredRepo",
]
