"""Venue Enrichment Service.

Runs enrichment passes over the venue directory: picks venues with a website
and missing facts, crawls them in small sequential batches, applies what was
found, and saves the directory as it goes.
Uses dependency injection for repo, browser engine, and fetch client.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional
import asyncio

from loguru import logger

from db.client import StoreError
from lib.browser import BrowserEngine
from services.enrichment.config import EnrichmentConfig
from services.enrichment.enricher import RetryPolicy, VenueEnricher
from services.enrichment.fetcher import IFetchClient, PlaywrightFetchClient
from services.enrichment.repo import IVenueRepo, VenueCollection, VenueRepo


@dataclass
class EnrichRunResult:
    """Result of one enrichment pass."""
    processed: int
    updated: int
    failed: int
    remaining: int
    flushes: int = 0
    message: str = ""


@dataclass
class EnrichmentStatus:
    """Snapshot of how complete the venue directory is."""
    total: int
    with_website: int
    needing_enrichment: int
    missing: Dict[str, int] = field(default_factory=dict)


class IService(ABC):
    """Interface for the enrichment service."""

    @abstractmethod
    async def enrich_now(self, quick: bool = False, limit: Optional[int] = None) -> EnrichRunResult:
        """Load the directory, start a browser, and run one full pass."""
        pass

    @abstractmethod
    async def run_pass(
        self,
        collection: VenueCollection,
        enricher: VenueEnricher,
        quick: bool = False,
        limit: Optional[int] = None,
    ) -> EnrichRunResult:
        """Enrich the venues of an already loaded collection."""
        pass

    @abstractmethod
    def status(self) -> EnrichmentStatus:
        """Summarize directory completeness."""
        pass


class Service(IService):
    """Implementation of the enrichment service."""

    def __init__(
        self,
        repo: Optional[IVenueRepo] = None,
        config: Optional[EnrichmentConfig] = None,
        engine_factory: Optional[Callable[[], BrowserEngine]] = None,
        client_factory: Optional[Callable[[BrowserEngine], IFetchClient]] = None,
    ):
        self._repo = repo or VenueRepo()
        self.config = config or EnrichmentConfig()
        self._engine_factory = engine_factory or (lambda: BrowserEngine(headless=self.config.headless))
        self._client_factory = client_factory or PlaywrightFetchClient

    def _make_enricher(self, client: IFetchClient) -> VenueEnricher:
        return VenueEnricher(
            client,
            retry=RetryPolicy(max_attempts=self.config.max_attempts, delay=self.config.retry_delay),
            primary_timeout_ms=self.config.page_timeout_ms,
            secondary_timeout_ms=self.config.secondary_timeout_ms,
        )

    def _working_limit(self, quick: bool, limit: Optional[int]) -> Optional[int]:
        if quick:
            return min(self.config.quick_limit, limit) if limit else self.config.quick_limit
        return limit

    # =========================================================================
    # Trigger
    # =========================================================================

    async def enrich_now(self, quick: bool = False, limit: Optional[int] = None) -> EnrichRunResult:
        """Run one pass end to end.

        The browser engine lives exactly as long as the pass. If it cannot be
        launched, BrowserLaunchError propagates and nothing is processed.
        """
        collection = VenueCollection.load(self._repo)
        pending = collection.needing_enrichment()
        if not pending:
            logger.info("No venues need enrichment")
            return EnrichRunResult(
                processed=0, updated=0, failed=0, remaining=0,
                message="No venues need enrichment",
            )

        logger.info(f"{len(pending)} venues need enrichment")
        async with self._engine_factory() as engine:
            enricher = self._make_enricher(self._client_factory(engine))
            return await self.run_pass(collection, enricher, quick=quick, limit=limit)

    # =========================================================================
    # Batch processing
    # =========================================================================

    async def run_pass(
        self,
        collection: VenueCollection,
        enricher: VenueEnricher,
        quick: bool = False,
        limit: Optional[int] = None,
    ) -> EnrichRunResult:
        """Enrich venues batch by batch, flushing the collection every few updates.

        Unflushed updates are saved before any abnormal exit (errors and
        cancellation). A failed save aborts the run; the collection keeps its
        in-memory changes so flush() can be retried.
        """
        cfg = self.config
        working = collection.needing_enrichment(self._working_limit(quick, limit))
        batches: List[list] = [
            working[i:i + cfg.batch_size] for i in range(0, len(working), cfg.batch_size)
        ]
        flushes_before = collection.flush_count
        gave_up_before = enricher.failures

        logger.info(f"Enriching {len(working)} venues in {len(batches)} batches of {cfg.batch_size}")

        processed = 0
        updated = 0
        failed = 0

        try:
            for batch_idx, batch in enumerate(batches):
                logger.info(f"Batch {batch_idx + 1}/{len(batches)}")

                for venue in batch:
                    processed += 1
                    try:
                        result = await enricher.enrich(venue)
                    except Exception as e:
                        failed += 1
                        logger.error(f"Failed to process {venue.name}: {e}")
                        result = None

                    if result is not None:
                        changed = venue.apply_facts(result)
                        if changed:
                            updated += 1
                            collection.mark_updated()
                            logger.success(f"Updated {venue.name}: {', '.join(changed)}")

                            if collection.pending_updates >= cfg.flush_every:
                                collection.flush()

                    await asyncio.sleep(cfg.venue_delay)

                if batch_idx < len(batches) - 1:
                    await asyncio.sleep(cfg.batch_delay)

            if collection.has_unflushed_changes:
                collection.flush()

        except StoreError:
            logger.error("Failed to save venues; in-memory updates kept")
            raise
        except BaseException as e:
            if collection.has_unflushed_changes:
                logger.warning(f"Run interrupted ({type(e).__name__}), saving {collection.pending_updates} pending updates")
                try:
                    collection.flush()
                except StoreError as flush_error:
                    logger.error(f"Emergency save failed: {flush_error}")
            raise

        # Crawls that exhausted their retries return None but still count as failed
        failed += enricher.failures - gave_up_before
        remaining = len(collection.needing_enrichment())
        message = f"Processed {processed} venues, updated {updated}, failed {failed}, {remaining} still need enrichment"
        logger.info(message)

        return EnrichRunResult(
            processed=processed,
            updated=updated,
            failed=failed,
            remaining=remaining,
            flushes=collection.flush_count - flushes_before,
            message=message,
        )

    # =========================================================================
    # Status
    # =========================================================================

    def status(self) -> EnrichmentStatus:
        collection = VenueCollection.load(self._repo)
        return EnrichmentStatus(
            total=len(collection),
            with_website=sum(1 for v in collection if v.has_website),
            needing_enrichment=len(collection.needing_enrichment()),
            missing=collection.gap_counts(),
        )
