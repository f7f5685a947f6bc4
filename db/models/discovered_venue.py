from datetime import date
from enum import Enum
from typing import Dict, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from db.models.venue import Venue, identity_key


class DiscoveryStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class DiscoveredVenue(BaseModel):
    """Venue candidate found through web search, awaiting review."""

    name: str
    location: str
    address: str = ""
    venue_type: str = ""
    website: str = ""
    discovered_from: str = ""  # search term that surfaced it
    discovery_date: str = Field(default_factory=lambda: date.today().isoformat())
    status: DiscoveryStatus = DiscoveryStatus.PENDING

    model_config = ConfigDict(from_attributes=True)

    @field_validator("status", mode="before")
    @classmethod
    def unknown_status_to_pending(cls, v):
        """Blank or unrecognised status cells load as pending."""
        if isinstance(v, DiscoveryStatus):
            return v
        value = (v or "").strip().lower()
        if value not in {s.value for s in DiscoveryStatus}:
            return DiscoveryStatus.PENDING
        return value

    @property
    def identity_key(self) -> Tuple[str, str]:
        return identity_key(self.name, self.location)

    def to_venue(self) -> Venue:
        """Convert to a master venue record with empty contact fields."""
        return Venue(
            name=self.name,
            location=self.location,
            address=self.address,
            venue_type=self.venue_type,
            website=self.website,
        )

    @classmethod
    def from_row(cls, row: Dict[str, str]) -> "DiscoveredVenue":
        data = dict(row)
        if not data.get("discovery_date"):
            data.pop("discovery_date", None)
        return cls(**data)

    def to_row(self) -> Dict[str, str]:
        row = self.model_dump()
        row["status"] = self.status.value
        return row
