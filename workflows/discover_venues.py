"""
Workflow: Discover Venues
=========================
Search the web for music venues in a city and add new candidates to the
discovered venues store with status 'pending'.

USAGE:
    uv run python -m workflows.discover_venues --city "Durham, NC"
    uv run python -m workflows.discover_venues --city "Austin, TX" --max-results 20
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

import asyncio
import argparse
from typing import List, Optional

from loguru import logger

from db.models.discovered_venue import DiscoveredVenue
from infra import slack
from infra.run_log import capture_run_logs
from services.discovery.config import DiscoveryConfig
from services.discovery.service import DiscoveryService


async def run(city: str, max_results: Optional[int] = None, notify: bool = False) -> List[DiscoveredVenue]:
    service = DiscoveryService(config=DiscoveryConfig.from_env())

    with capture_run_logs("discovery"):
        found = await service.discover_in_city(city, max_results=max_results)

        logger.info("")
        logger.info("=" * 60)
        logger.info(f"DISCOVERY COMPLETE: {city}")
        logger.info("=" * 60)
        for venue in found:
            logger.info(f"  {venue.name} [{venue.venue_type}] {venue.website}")
        logger.info(f"New venues pending review: {len(found)}")

    if notify:
        slack.send_discovery_summary(city, len(found))
    return found


def main():
    parser = argparse.ArgumentParser(description="Discover music venues in a city via web search")
    parser.add_argument("--city", required=True, help='City to search, e.g. "Durham, NC"')
    parser.add_argument("--max-results", type=int, default=None, help="Max new venues (default: 50)")
    parser.add_argument("--notify", action="store_true", help="Post a summary to Slack")
    args = parser.parse_args()

    logger.remove()
    logger.add(sys.stderr, level="INFO", format="<level>{level: <8}</level> | {message}")

    asyncio.run(run(args.city, max_results=args.max_results, notify=args.notify))


if __name__ == "__main__":
    main()
