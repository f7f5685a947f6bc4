"""
Workflow: Enrichment Scheduler
==============================
Runs an enrichment pass shortly after start-up and then every N hours
(default: 6). A failed pass is logged and the schedule keeps going.

USAGE:
    # Run forever (first pass after 5s, then every 6 hours)
    uv run python -m workflows.scheduler

    # Single pass now, then exit
    uv run python -m workflows.scheduler --once

    # Custom interval
    uv run python -m workflows.scheduler --interval-hours 12
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

import asyncio
import argparse
from typing import Optional

from loguru import logger

from services.enrichment.config import EnrichmentConfig
from workflows import enrich_venues


async def run_forever(
    interval_hours: float = 6.0,
    initial_delay: float = 5.0,
    quick: bool = False,
    notify: bool = False,
    max_runs: Optional[int] = None,
) -> int:
    """Trigger enrichment passes on a fixed interval.

    Returns:
        Number of passes started (only reached when max_runs is set)
    """
    interval_seconds = interval_hours * 3600
    logger.info(f"Scheduler started: every {interval_hours}h, first run in {initial_delay}s")
    await asyncio.sleep(initial_delay)

    runs = 0
    while True:
        runs += 1
        logger.info(f"--- Scheduled run {runs} ---")
        try:
            await enrich_venues.run(quick=quick, notify=notify)
        except Exception as e:
            logger.error(f"Scheduled run {runs} failed: {type(e).__name__}: {e}")

        if max_runs is not None and runs >= max_runs:
            return runs

        logger.info(f"Next run in {interval_hours}h")
        await asyncio.sleep(interval_seconds)


def main():
    config = EnrichmentConfig.from_env()

    parser = argparse.ArgumentParser(description="Run venue enrichment on a schedule")
    parser.add_argument("--once", action="store_true", help="Run a single pass immediately and exit")
    parser.add_argument("--quick", action="store_true", help="Quick passes (first few venues only)")
    parser.add_argument(
        "--interval-hours", type=float, default=config.interval_hours,
        help=f"Hours between runs (default: {config.interval_hours})",
    )
    parser.add_argument("--notify", action="store_true", help="Post run summaries to Slack")
    args = parser.parse_args()

    logger.remove()
    logger.add(sys.stderr, level="INFO", format="<level>{level: <8}</level> | {message}")

    if args.once:
        asyncio.run(enrich_venues.run(quick=args.quick, notify=args.notify))
        return

    try:
        asyncio.run(run_forever(
            interval_hours=args.interval_hours,
            initial_delay=config.initial_delay,
            quick=args.quick,
            notify=args.notify,
        ))
    except KeyboardInterrupt:
        logger.info("Scheduler stopped")


if __name__ == "__main__":
    main()
