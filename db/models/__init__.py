from db.models.venue import Venue, FACT_FIELDS, identity_key
from db.models.discovered_venue import DiscoveredVenue, DiscoveryStatus

__all__ = [
    "Venue",
    "FACT_FIELDS",
    "identity_key",
    "DiscoveredVenue",
    "DiscoveryStatus",
]
