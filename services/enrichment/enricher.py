"""Venue enricher - crawl one venue's website for missing contact facts."""

import asyncio
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, Tuple, Type, TypeVar

from loguru import logger

from db.models.venue import Venue
from lib.extractors.pipeline import ExtractionResult, extract_facts
from services.enrichment.fetcher import (
    CONTACT_LINK_PATTERN,
    PRIMARY_TIMEOUT_MS,
    SECONDARY_TIMEOUT_MS,
    FetchError,
    IFetchClient,
    open_session,
)


T = TypeVar("T")


@dataclass(frozen=True)
class RetryPolicy:
    """Attempt an operation up to max_attempts times with a fixed delay."""
    max_attempts: int = 3
    delay: float = 1.0
    retry_on: Tuple[Type[BaseException], ...] = (Exception,)

    async def run(self, operation: Callable[[], Awaitable[T]], label: str = "operation") -> T:
        """Run operation, retrying on failure. Re-raises the last error."""
        attempt = 0
        while True:
            attempt += 1
            try:
                return await operation()
            except self.retry_on as e:
                if attempt >= self.max_attempts:
                    logger.warning(f"{label} failed after {attempt} attempts: {e}")
                    raise
                logger.debug(f"{label} attempt {attempt}/{self.max_attempts} failed: {e}")
                await asyncio.sleep(self.delay)


class VenueEnricher:
    """Finds missing email/phone/capacity/genres for a venue.

    Reads the venue's homepage and, if facts are still missing, at most one
    contact-like page linked from it. Never modifies the venue.

    failures counts venues whose crawl was given up after every retry.
    """

    def __init__(
        self,
        client: IFetchClient,
        retry: Optional[RetryPolicy] = None,
        primary_timeout_ms: int = PRIMARY_TIMEOUT_MS,
        secondary_timeout_ms: int = SECONDARY_TIMEOUT_MS,
    ):
        self._client = client
        self._retry = retry or RetryPolicy()
        self.primary_timeout_ms = primary_timeout_ms
        self.secondary_timeout_ms = secondary_timeout_ms
        self.failures = 0

    async def enrich(self, venue: Venue) -> Optional[ExtractionResult]:
        """Return newly found facts for the venue, or None if nothing was found."""
        missing = venue.missing_facts()
        if not venue.has_website or not missing:
            return None

        url = normalize_url(venue.website)
        try:
            result = await self._retry.run(
                lambda: self._crawl(url, missing),
                label=f"Crawl {venue.name}",
            )
        except Exception as e:
            logger.warning(f"Giving up on {venue.name} ({url}): {e}")
            self.failures += 1
            return None

        if result.is_empty():
            logger.debug(f"No facts found for {venue.name}")
            return None
        return result

    async def _crawl(self, url: str, missing: list) -> ExtractionResult:
        async with open_session(self._client) as page:
            content = await page.navigate(url, self.primary_timeout_ms)
            result = extract_facts(content, url, missing)

            still_missing = [fact for fact in missing if getattr(result, fact) is None]
            if not still_missing:
                return result

            links = await page.find_links(CONTACT_LINK_PATTERN)
            if not links:
                return result

            contact_url = links[0]
            try:
                contact_content = await page.navigate(contact_url, self.secondary_timeout_ms)
            except FetchError as e:
                logger.debug(f"Contact page failed {contact_url}: {e}")
                return result

            return result.merge_missing(extract_facts(contact_content, contact_url, still_missing))


def normalize_url(website: str) -> str:
    """Add a scheme to bare domains ("bluenote.test" -> "https://bluenote.test")."""
    website = website.strip()
    if "://" not in website:
        return f"https://{website}"
    return website
