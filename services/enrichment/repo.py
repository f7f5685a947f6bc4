"""Repository for venue records.

The whole directory is loaded into a VenueCollection, mutated in memory by
the enrichment run, and flushed back to the CSV store as a unit.
"""

from typing import Dict, List, Optional, Protocol, Tuple, runtime_checkable

from loguru import logger

from db.client import CSVStore, StoreError, get_venue_store
from db.models.venue import FACT_FIELDS, Venue, identity_key


@runtime_checkable
class IVenueRepo(Protocol):
    """Protocol for venue persistence."""

    def load_venues(self) -> List[Venue]:
        ...

    def save_venues(self, venues: List[Venue], backup_suffix: Optional[str] = None) -> int:
        ...


class VenueRepo(IVenueRepo):
    """Venue persistence over the master CSV store.

    Rows without a name or location cannot be identified, so they are never
    handed out as venues. They are kept as raw rows and written back after
    the venues on every save.
    """

    def __init__(self, store: Optional[CSVStore] = None):
        self.store = store or get_venue_store()
        self._unidentified: Optional[List[Dict[str, str]]] = None

    def _split_rows(self) -> List[Venue]:
        venues = []
        self._unidentified = []
        for i, row in enumerate(self.store.load()):
            if not row.get("name") or not row.get("location"):
                logger.warning(f"Row {i + 2} in {self.store.path} has no name or location, keeping it as is")
                self._unidentified.append(row)
                continue
            venues.append(Venue.from_row(row))
        return venues

    def load_venues(self) -> List[Venue]:
        return self._split_rows()

    def save_venues(self, venues: List[Venue], backup_suffix: Optional[str] = None) -> int:
        if self._unidentified is None:
            self._split_rows()
        rows = [v.to_row() for v in venues] + self._unidentified
        return self.store.save(rows, backup_suffix=backup_suffix)


class VenueCollection:
    """In-memory venue directory owned by a single run.

    Updates are applied to the Venue objects in place; flush() writes the
    whole collection back through the repo.
    """

    def __init__(self, repo: IVenueRepo, venues: Optional[List[Venue]] = None):
        self._repo = repo
        self.venues: List[Venue] = venues if venues is not None else []
        self.pending_updates = 0
        self.flush_count = 0

    @classmethod
    def load(cls, repo: Optional[IVenueRepo] = None) -> "VenueCollection":
        repo = repo or VenueRepo()
        venues = repo.load_venues()
        logger.info(f"Loaded {len(venues)} venues")
        return cls(repo, venues)

    def __len__(self) -> int:
        return len(self.venues)

    def __iter__(self):
        return iter(self.venues)

    @property
    def has_unflushed_changes(self) -> bool:
        return self.pending_updates > 0

    def needing_enrichment(self, limit: Optional[int] = None) -> List[Venue]:
        """Venues with a website and at least one empty fact, in directory order."""
        venues = [v for v in self.venues if v.needs_enrichment]
        return venues[:limit] if limit is not None else venues

    def mark_updated(self) -> None:
        self.pending_updates += 1

    def flush(self) -> int:
        """Write every venue back to the store. Raises StoreError on failure."""
        written = self._repo.save_venues(self.venues)
        self.pending_updates = 0
        self.flush_count += 1
        logger.info(f"Saved {written} venues")
        return written

    def index(self) -> Dict[Tuple[str, str], Venue]:
        return {v.identity_key: v for v in self.venues}

    def find(self, name: str, location: str) -> Optional[Venue]:
        return self.index().get(identity_key(name, location))

    def gap_counts(self) -> Dict[str, int]:
        """Number of venues missing each fact."""
        counts = {fact: 0 for fact in FACT_FIELDS}
        for venue in self.venues:
            for fact in venue.missing_facts():
                counts[fact] += 1
        return counts


class MockVenueRepo(IVenueRepo):
    """Mock repository for testing."""

    def __init__(self, venues: Optional[List[Venue]] = None, fail_on_save: bool = False):
        self.venues = [v.model_copy() for v in venues or []]
        self.fail_on_save = fail_on_save
        self.saves: List[List[Dict[str, str]]] = []

    def load_venues(self) -> List[Venue]:
        return [v.model_copy() for v in self.venues]

    def save_venues(self, venues: List[Venue], backup_suffix: Optional[str] = None) -> int:
        if self.fail_on_save:
            raise StoreError("disk full")
        self.venues = [v.model_copy() for v in venues]
        self.saves.append([v.to_row() for v in venues])
        return len(venues)
