"""Directory Service.

Maintains the master venue directory outside of enrichment runs: promotes
approved discoveries and imports venue lists from uploaded CSV.
"""

import csv
import io
from dataclasses import dataclass, field
from typing import List, Optional

from loguru import logger

from db.models.discovered_venue import DiscoveryStatus
from db.models.venue import Venue, parse_capacity
from services.discovery.repo import DiscoveredRepo, IDiscoveredRepo
from services.enrichment.repo import IVenueRepo, VenueCollection, VenueRepo


PROMOTION_BACKUP_SUFFIX = "_backup_before_additions"
REQUIRED_FIELDS = ["name", "location", "venue_type"]
MAX_IMPORT_CAPACITY = 1_000_000


@dataclass
class PromotionResult:
    """Result of adding approved discoveries to the directory."""
    added: int
    duplicates: int
    total_venues: int


@dataclass
class ImportResult:
    """Result of a CSV upload."""
    processed: int
    added: int = 0
    duplicates: int = 0
    errors: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


def validate_row(row: dict, row_number: int) -> List[str]:
    """Validation errors for one uploaded row. row_number is the spreadsheet row."""
    errors = []
    for name in REQUIRED_FIELDS:
        if not (row.get(name) or "").strip():
            errors.append(f"Row {row_number}: Missing required field '{name}'")

    email = (row.get("contact_email") or "").strip()
    if email and "@" not in email:
        errors.append(f"Row {row_number}: Invalid email format")

    capacity = (row.get("capacity") or "").strip()
    if capacity:
        value = parse_capacity(capacity)
        if value is None or value < 0 or value > MAX_IMPORT_CAPACITY:
            errors.append(f"Row {row_number}: Capacity must be a number between 0 and {MAX_IMPORT_CAPACITY:,}")
    return errors


class DirectoryService:
    """Adds venues to the master directory."""

    def __init__(
        self,
        venue_repo: Optional[IVenueRepo] = None,
        discovered_repo: Optional[IDiscoveredRepo] = None,
    ):
        self._venue_repo = venue_repo or VenueRepo()
        self._discovered_repo = discovered_repo or DiscoveredRepo()

    def promote_approved(self) -> PromotionResult:
        """Copy approved candidates into the directory as empty-contact venues.

        Candidates whose name and location already exist are skipped. Approved
        candidates stay in the discovered store.
        """
        approved = [
            c for c in self._discovered_repo.load_candidates()
            if c.status == DiscoveryStatus.APPROVED
        ]
        collection = VenueCollection.load(self._venue_repo)
        if not approved:
            logger.info("No approved venues to add")
            return PromotionResult(added=0, duplicates=0, total_venues=len(collection))

        known = set(collection.index())
        added = 0
        duplicates = 0
        for candidate in approved:
            if candidate.identity_key in known:
                duplicates += 1
                logger.debug(f"Already in directory: {candidate.name} ({candidate.location})")
                continue
            collection.venues.append(candidate.to_venue())
            known.add(candidate.identity_key)
            added += 1

        if added:
            self._venue_repo.save_venues(collection.venues, backup_suffix=PROMOTION_BACKUP_SUFFIX)
            logger.success(f"Added {added} approved venues ({duplicates} already present)")
        else:
            logger.info(f"All {duplicates} approved venues already in directory")

        return PromotionResult(added=added, duplicates=duplicates, total_venues=len(collection))

    def import_csv(self, csv_content: str, apply: bool = True) -> ImportResult:
        """Validate an uploaded venue CSV and append its new venues.

        Any validation error rejects the whole upload. Venues whose name and
        location already exist are counted as duplicates and skipped.
        """
        reader = csv.DictReader(io.StringIO((csv_content or "").lstrip("\ufeff")))
        rows = [
            {(k or "").strip(): (v or "").strip() for k, v in row.items() if k is not None}
            for row in reader
        ]
        rows = [row for row in rows if any(row.values())]
        result = ImportResult(processed=len(rows))

        for i, row in enumerate(rows):
            result.errors.extend(validate_row(row, i + 2))

        if result.errors:
            logger.warning(f"Upload rejected: {len(result.errors)} validation errors")
            return result

        collection = VenueCollection.load(self._venue_repo)
        known = set(collection.index())
        for row in rows:
            venue = Venue.from_row({k: v for k, v in row.items() if k in Venue.model_fields})
            if venue.identity_key in known:
                result.duplicates += 1
                continue
            known.add(venue.identity_key)
            collection.venues.append(venue)
            result.added += 1

        if apply and result.added:
            self._venue_repo.save_venues(collection.venues)
        logger.info(f"Upload: {result.added} new venues, {result.duplicates} duplicates skipped")
        return result
