from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, field_validator


# Fact type -> venue column it fills
FACT_FIELDS: Dict[str, str] = {
    "email": "contact_email",
    "phone": "contact_phone",
    "capacity": "capacity",
    "genres": "typical_genres",
}


def identity_key(name: str, location: str) -> Tuple[str, str]:
    """Case-insensitive (name, location) pair identifying a venue."""
    return ((name or "").strip().lower(), (location or "").strip().lower())


def parse_capacity(value) -> Optional[int]:
    """Parse a capacity cell ("1,200", "300", "") into an int or None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    text = str(value).replace(",", "").strip()
    if not text:
        return None
    try:
        return int(float(text))
    except ValueError:
        return None


class Venue(BaseModel):
    """Venue record matching the master CSV columns."""

    name: str
    location: str
    address: str = ""
    venue_type: str = ""
    # Raw cell text ("300", "1,200", "300-450"); see capacity_value
    capacity: str = ""

    # Contact
    contact_email: str = ""
    contact_phone: str = ""
    contact_name: str = ""
    website: str = ""

    # "Blues; Jazz"
    typical_genres: str = ""

    model_config = ConfigDict(from_attributes=True)

    @field_validator("address", "venue_type", "capacity", "contact_email", "contact_phone",
                     "contact_name", "website", "typical_genres", mode="before")
    @classmethod
    def none_to_empty(cls, v):
        return "" if v is None else str(v).strip()

    @property
    def identity_key(self) -> Tuple[str, str]:
        return identity_key(self.name, self.location)

    @property
    def has_website(self) -> bool:
        return bool(self.website.strip())

    @property
    def capacity_value(self) -> Optional[int]:
        """Capacity as a number, or None when the cell is blank or not a plain number."""
        return parse_capacity(self.capacity)

    def missing_facts(self) -> List[str]:
        """Fact types whose column is still empty."""
        missing = []
        for fact, field in FACT_FIELDS.items():
            if not getattr(self, field):
                missing.append(fact)
        return missing

    @property
    def needs_enrichment(self) -> bool:
        return self.has_website and bool(self.missing_facts())

    def apply_facts(self, result) -> List[str]:
        """Copy found facts into empty columns. Populated columns are never touched.

        Returns:
            Names of the columns that were filled
        """
        changed = []
        for fact, field in FACT_FIELDS.items():
            value = getattr(result, fact, None)
            if value is None or getattr(self, field):
                continue
            if fact == "email" and "@" not in str(value):
                continue
            setattr(self, field, str(value) if fact == "capacity" else value)
            changed.append(field)
        return changed

    @classmethod
    def from_row(cls, row: Dict[str, str]) -> "Venue":
        return cls(**row)

    def to_row(self) -> Dict[str, str]:
        return self.model_dump()
