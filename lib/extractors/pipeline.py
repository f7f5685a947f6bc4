"""Run the registered extractors over one page of content."""

from typing import Iterable, List, Optional

from loguru import logger
from pydantic import BaseModel

from lib.extractors.registry import get_extractor, list_extractors

# Importing the modules registers their extractors
from lib.extractors import contact, capacity, genre  # noqa: F401


FACT_TYPES = ("email", "phone", "capacity", "genres")


class ExtractionResult(BaseModel):
    """Facts found for one venue. Absent facts stay None."""

    email: Optional[str] = None
    phone: Optional[str] = None
    capacity: Optional[int] = None
    genres: Optional[str] = None

    def found(self) -> List[str]:
        """Fact types that have a value."""
        return [fact for fact in FACT_TYPES if getattr(self, fact) is not None]

    def is_empty(self) -> bool:
        return not self.found()

    def merge_missing(self, other: Optional["ExtractionResult"]) -> "ExtractionResult":
        """Fill this result's gaps from another result. Existing values win."""
        if other is None:
            return self
        updates = {
            fact: getattr(other, fact)
            for fact in FACT_TYPES
            if getattr(self, fact) is None and getattr(other, fact) is not None
        }
        return self.model_copy(update=updates)


def extract_facts(
    content: str,
    url: str = "",
    facts: Optional[Iterable[str]] = None,
) -> ExtractionResult:
    """Run extractors for the requested fact types (all registered types by default)."""
    wanted = list(facts) if facts is not None else list_extractors()
    values = {}
    for fact in wanted:
        value = get_extractor(fact)(content, url)
        if value is not None:
            values[fact] = value

    if values:
        logger.debug(f"Extracted {sorted(values)} from {url or 'content'}")
    return ExtractionResult(**values)
