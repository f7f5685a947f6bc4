"""
Workflow: Review Venues
=======================
Review discovered venues and maintain the master directory.

USAGE:
    # List candidates waiting for review
    uv run python -m workflows.review_venues pending

    # Approve / reject a candidate
    uv run python -m workflows.review_venues approve "Motorco Music Hall" "Durham, NC"
    uv run python -m workflows.review_venues reject "Ticket Barn" "Durham, NC"

    # Add approved candidates to the master directory
    uv run python -m workflows.review_venues promote

    # Import venues from a CSV file (validate only with --dry-run)
    uv run python -m workflows.review_venues import venues.csv --dry-run
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

import argparse

from loguru import logger

from services.directory.service import DirectoryService
from services.discovery.service import DiscoveryService


def list_pending() -> None:
    pending = DiscoveryService().pending()
    logger.info(f"{len(pending)} venues pending review")
    for venue in pending:
        logger.info(f"  {venue.name} | {venue.location} | {venue.venue_type} | {venue.website}")


def set_status(name: str, location: str, status: str) -> int:
    if DiscoveryService().set_status(name, location, status):
        return 0
    logger.error(f"Venue not found: {name} ({location})")
    return 1


def promote() -> None:
    result = DirectoryService().promote_approved()
    logger.info(f"Added {result.added} venues, skipped {result.duplicates} duplicates, directory now {result.total_venues}")


def import_file(path: str, dry_run: bool = False) -> int:
    content = Path(path).read_text(encoding="utf-8")
    result = DirectoryService().import_csv(content, apply=not dry_run)

    if not result.ok:
        for error in result.errors:
            logger.error(error)
        return 1

    action = "Would add" if dry_run else "Added"
    logger.info(f"{action} {result.added} of {result.processed} venues ({result.duplicates} duplicates)")
    return 0


def main():
    parser = argparse.ArgumentParser(description="Review discovered venues and maintain the directory")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("pending", help="List venues pending review")

    for command in ("approve", "reject"):
        sub = subparsers.add_parser(command, help=f"Mark a discovered venue as {command}d")
        sub.add_argument("name", help="Venue name")
        sub.add_argument("location", help="Venue location")

    subparsers.add_parser("promote", help="Add approved venues to the master directory")

    import_parser = subparsers.add_parser("import", help="Import venues from a CSV file")
    import_parser.add_argument("path", help="CSV file to import")
    import_parser.add_argument("--dry-run", action="store_true", help="Validate without saving")

    args = parser.parse_args()

    logger.remove()
    logger.add(sys.stderr, level="INFO", format="<level>{level: <8}</level> | {message}")

    if args.command == "pending":
        list_pending()
    elif args.command in ("approve", "reject"):
        sys.exit(set_status(args.name, args.location, f"{args.command}d"))
    elif args.command == "promote":
        promote()
    elif args.command == "import":
        sys.exit(import_file(args.path, dry_run=args.dry_run))
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
