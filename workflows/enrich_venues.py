"""
Workflow: Enrich Venues
=======================
One enrichment pass over the venue directory: crawl the website of every
venue that is missing an email, phone, capacity, or genres, and save what
was found.

USAGE:
    # Full pass
    uv run python -m workflows.enrich_venues

    # Quick pass (first 10 venues needing work)
    uv run python -m workflows.enrich_venues --quick

    # Cap the number of venues
    uv run python -m workflows.enrich_venues --limit 25

    # Show how complete the directory is
    uv run python -m workflows.enrich_venues --status
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

import asyncio
import argparse
from typing import Optional

from loguru import logger

from infra import slack
from infra.run_log import capture_run_logs
from services.enrichment.config import EnrichmentConfig
from services.enrichment.service import EnrichRunResult, Service


RUN_LOG_NAME = "scraper"


async def run(
    quick: bool = False,
    limit: Optional[int] = None,
    notify: bool = False,
    service: Optional[Service] = None,
) -> EnrichRunResult:
    """Run one enrichment pass with run logging and optional Slack summary."""
    service = service or Service(config=EnrichmentConfig.from_env())

    with capture_run_logs(RUN_LOG_NAME):
        try:
            result = await service.enrich_now(quick=quick, limit=limit)
        except Exception as e:
            logger.error(f"Enrichment run failed: {e}")
            if notify:
                slack.send_error("Venue enrichment", f"{type(e).__name__}: {e}")
            raise

        logger.info("")
        logger.info("=" * 60)
        logger.info("ENRICHMENT COMPLETE")
        logger.info("=" * 60)
        logger.info(f"Processed: {result.processed}")
        logger.info(f"Updated:   {result.updated}")
        logger.info(f"Failed:    {result.failed}")
        logger.info(f"Remaining: {result.remaining}")
        logger.info(f"Saves:     {result.flushes}")

    if notify and result.processed:
        slack.send_enrichment_summary(
            processed=result.processed,
            updated=result.updated,
            remaining=result.remaining,
            failed=result.failed,
        )
    return result


def show_status() -> None:
    status = Service().status()

    logger.info("=" * 60)
    logger.info("VENUE DIRECTORY STATUS")
    logger.info("=" * 60)
    logger.info(f"Venues:             {status.total}")
    logger.info(f"With website:       {status.with_website}")
    logger.info(f"Needing enrichment: {status.needing_enrichment}")
    for fact, count in status.missing.items():
        logger.info(f"  missing {fact:<9} {count}")


def main():
    parser = argparse.ArgumentParser(description="Enrich venue contact data from venue websites")
    parser.add_argument("--quick", action="store_true", help="Only process the first few venues needing work")
    parser.add_argument("--limit", type=int, default=None, help="Max venues to process")
    parser.add_argument("--status", action="store_true", help="Show directory completeness and exit")
    parser.add_argument("--notify", action="store_true", help="Post a run summary to Slack")
    parser.add_argument("--debug", action="store_true", help="Verbose logging")
    args = parser.parse_args()

    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if args.debug else "INFO", format="<level>{level: <8}</level> | {message}")

    if args.status:
        show_status()
        return

    asyncio.run(run(quick=args.quick, limit=args.limit, notify=args.notify))


if __name__ == "__main__":
    main()
