"""Discovery Service.

Finds candidate venues for a city through web search and manages their
review status.
Uses dependency injection for repo, browser engine, and search scraper.
"""

from abc import ABC, abstractmethod
from typing import Callable, List, Optional
import asyncio

from loguru import logger

from db.models.discovered_venue import DiscoveredVenue, DiscoveryStatus
from db.models.venue import identity_key
from lib.browser import BrowserEngine
from services.discovery.config import DiscoveryConfig
from services.discovery.repo import DiscoveredRepo, IDiscoveredRepo
from services.discovery.search import ISearchScraper, SearchScraper, build_query, hit_to_candidate


REVIEW_STATUSES = {DiscoveryStatus.APPROVED.value, DiscoveryStatus.REJECTED.value}


class IDiscoveryService(ABC):
    """Interface for the discovery service."""

    @abstractmethod
    async def discover_in_city(self, city: str, max_results: Optional[int] = None) -> List[DiscoveredVenue]:
        """Search for venues in a city and store the new candidates."""
        pass

    @abstractmethod
    def set_status(self, name: str, location: str, status: str) -> bool:
        """Approve or reject a candidate. Returns False if it does not exist."""
        pass

    @abstractmethod
    def candidates(self, status: Optional[str] = None) -> List[DiscoveredVenue]:
        """List candidates, optionally filtered by status."""
        pass


class DiscoveryService(IDiscoveryService):
    """Implementation of the discovery service."""

    def __init__(
        self,
        repo: Optional[IDiscoveredRepo] = None,
        config: Optional[DiscoveryConfig] = None,
        engine_factory: Optional[Callable[[], BrowserEngine]] = None,
        scraper_factory: Optional[Callable[[BrowserEngine], ISearchScraper]] = None,
    ):
        self._repo = repo or DiscoveredRepo()
        self.config = config or DiscoveryConfig()
        self._engine_factory = engine_factory or (lambda: BrowserEngine(headless=self.config.headless))
        self._scraper_factory = scraper_factory or (
            lambda engine: SearchScraper(
                engine,
                timeout_ms=self.config.search_timeout_ms,
                wait_ms=self.config.results_wait_ms,
            )
        )

    async def discover_in_city(self, city: str, max_results: Optional[int] = None) -> List[DiscoveredVenue]:
        """Run every search term for the city until max_results new venues are found.

        Candidates already in the store (same name and location, any status)
        are skipped. A failing search term is logged and skipped. The store is
        only written when something new was found.
        """
        city = city.strip()
        if not city:
            raise ValueError("city is required")
        max_results = max_results or self.config.max_results

        existing = self._repo.load_candidates()
        seen = {c.identity_key for c in existing}
        found: List[DiscoveredVenue] = []
        terms = self.config.search_terms

        logger.info(f"Discovering venues in {city} (max {max_results}, {len(terms)} search terms)")

        async with self._engine_factory() as engine:
            scraper = self._scraper_factory(engine)

            for i, term in enumerate(terms):
                if len(found) >= max_results:
                    break

                query = build_query(term, city)
                logger.info(f"Searching: {query}")
                try:
                    hits = await scraper.search(query, self.config.results_per_search)
                except Exception as e:
                    logger.warning(f"Error searching for '{term}': {e}")
                    continue

                added = 0
                for hit in hits:
                    candidate = hit_to_candidate(hit, term, city)
                    if candidate is None or candidate.identity_key in seen:
                        continue
                    seen.add(candidate.identity_key)
                    found.append(candidate)
                    added += 1
                    if len(found) >= max_results:
                        break

                logger.info(f"Found {added} new venues from '{term}'")

                if i < len(terms) - 1 and len(found) < max_results:
                    await asyncio.sleep(self.config.search_delay)

        if found:
            self._repo.save_candidates(existing + found)
            logger.success(f"Discovered {len(found)} new venues in {city}")
        else:
            logger.info(f"No new venues found in {city}")

        return found

    def set_status(self, name: str, location: str, status: str) -> bool:
        """Record a review decision. The last call for a venue wins.

        Raises:
            ValueError: If status is not approved or rejected
        """
        status = (status or "").strip().lower()
        if status not in REVIEW_STATUSES:
            raise ValueError(f"Invalid status: '{status}'. Must be 'approved' or 'rejected'")

        candidates = self._repo.load_candidates()
        key = identity_key(name, location)
        match = next((c for c in candidates if c.identity_key == key), None)
        if match is None:
            logger.warning(f"Venue not found: {name} ({location})")
            return False

        match.status = DiscoveryStatus(status)
        self._repo.save_candidates(candidates)
        logger.info(f"Marked {match.name} ({match.location}) as {status}")
        return True

    def candidates(self, status: Optional[str] = None) -> List[DiscoveredVenue]:
        candidates = self._repo.load_candidates()
        if status is None:
            return candidates
        return [c for c in candidates if c.status.value == status]

    def pending(self) -> List[DiscoveredVenue]:
        return self.candidates(DiscoveryStatus.PENDING.value)

    def approved(self) -> List[DiscoveredVenue]:
        return self.candidates(DiscoveryStatus.APPROVED.value)
