"""Repository for discovered venue candidates."""

from typing import Dict, List, Optional, Protocol, runtime_checkable

from loguru import logger

from db.client import CSVStore, StoreError, get_discovered_store
from db.models.discovered_venue import DiscoveredVenue


@runtime_checkable
class IDiscoveredRepo(Protocol):
    """Protocol for discovered venue persistence."""

    def load_candidates(self) -> List[DiscoveredVenue]:
        ...

    def save_candidates(self, candidates: List[DiscoveredVenue]) -> int:
        ...


class DiscoveredRepo(IDiscoveredRepo):
    """Discovered venues over their CSV store.

    Rows without a name or location are kept aside and written back as is.
    """

    def __init__(self, store: Optional[CSVStore] = None):
        self.store = store or get_discovered_store()
        self._unidentified: Optional[List[Dict[str, str]]] = None

    def load_candidates(self) -> List[DiscoveredVenue]:
        candidates = []
        self._unidentified = []
        for i, row in enumerate(self.store.load()):
            if not row.get("name") or not row.get("location"):
                logger.warning(f"Row {i + 2} in {self.store.path} has no name or location, keeping it as is")
                self._unidentified.append(row)
                continue
            candidates.append(DiscoveredVenue.from_row(row))
        return candidates

    def save_candidates(self, candidates: List[DiscoveredVenue]) -> int:
        if self._unidentified is None:
            self.load_candidates()
        return self.store.save([c.to_row() for c in candidates] + self._unidentified)


class MockDiscoveredRepo(IDiscoveredRepo):
    """Mock repository for testing."""

    def __init__(self, candidates: Optional[List[DiscoveredVenue]] = None, fail_on_save: bool = False):
        self.candidates = [c.model_copy() for c in candidates or []]
        self.fail_on_save = fail_on_save
        self.saves: List[List[DiscoveredVenue]] = []

    def load_candidates(self) -> List[DiscoveredVenue]:
        return [c.model_copy() for c in self.candidates]

    def save_candidates(self, candidates: List[DiscoveredVenue]) -> int:
        if self.fail_on_save:
            raise StoreError("disk full")
        self.candidates = [c.model_copy() for c in candidates]
        self.saves.append(list(self.candidates))
        return len(candidates)
