"""Tests for venue record models."""

from db.models.venue import Venue, parse_capacity
from db.models.discovered_venue import DiscoveredVenue, DiscoveryStatus
from lib.extractors.pipeline import ExtractionResult


class TestVenue:
    """Tests for Venue."""

    def test_identity_key_is_case_insensitive(self):
        a = Venue(name="The Blue Note", location="Durham, NC")
        b = Venue(name="the blue note ", location="DURHAM, NC")
        assert a.identity_key == b.identity_key

    def test_missing_facts(self):
        venue = Venue(name="A", location="B", contact_email="a@b.com", capacity="300")
        assert venue.missing_facts() == ["phone", "genres"]

    def test_needs_enrichment_requires_website(self):
        venue = Venue(name="A", location="B")
        assert venue.needs_enrichment is False

        venue.website = "https://a.test"
        assert venue.needs_enrichment is True

    def test_complete_venue_needs_nothing(self):
        venue = Venue(
            name="A", location="B", website="https://a.test",
            contact_email="a@a.test", contact_phone="(919) 555-0134",
            capacity=300, typical_genres="Jazz",
        )
        assert venue.needs_enrichment is False

    def test_apply_facts_fills_only_empty_fields(self):
        """Populated columns are never overwritten."""
        venue = Venue(name="A", location="B", contact_email="owner@a.test")
        result = ExtractionResult(email="booking@a.test", phone="(919) 555-0134", capacity=300)

        changed = venue.apply_facts(result)

        assert changed == ["contact_phone", "capacity"]
        assert venue.contact_email == "owner@a.test"
        assert venue.contact_phone == "(919) 555-0134"
        assert venue.capacity == "300"

    def test_apply_facts_rejects_email_without_at(self):
        venue = Venue(name="A", location="B")
        assert venue.apply_facts(ExtractionResult(email="not-an-email")) == []
        assert venue.contact_email == ""

    def test_row_round_trip(self):
        row = {
            "name": "The Blue Note", "location": "Durham, NC", "address": "",
            "venue_type": "Jazz Club", "capacity": "1,200", "contact_email": "",
            "contact_phone": "", "contact_name": "", "website": "https://bluenote.test",
            "typical_genres": "",
        }
        venue = Venue.from_row(row)

        assert venue.capacity_value == 1200
        assert venue.to_row()["capacity"] == "1,200"
        assert venue.to_row()["website"] == "https://bluenote.test"


class TestParseCapacity:
    """Tests for parse_capacity()."""

    def test_values(self):
        assert parse_capacity("300") == 300
        assert parse_capacity("1,200") == 1200
        assert parse_capacity("") is None
        assert parse_capacity("lots") is None
        assert parse_capacity(None) is None


class TestDiscoveredVenue:
    """Tests for DiscoveredVenue."""

    def test_defaults(self):
        candidate = DiscoveredVenue(name="Motorco", location="Durham, NC")
        assert candidate.status == DiscoveryStatus.PENDING
        assert len(candidate.discovery_date) == 10

    def test_unknown_status_loads_as_pending(self):
        candidate = DiscoveredVenue.from_row({"name": "A", "location": "B", "status": "maybe"})
        assert candidate.status == DiscoveryStatus.PENDING

    def test_status_is_case_insensitive(self):
        candidate = DiscoveredVenue.from_row({"name": "A", "location": "B", "status": "Approved"})
        assert candidate.status == DiscoveryStatus.APPROVED

    def test_to_row_writes_status_value(self):
        candidate = DiscoveredVenue(name="A", location="B", status="rejected")
        assert candidate.to_row()["status"] == "rejected"

    def test_to_venue_has_empty_contacts(self):
        candidate = DiscoveredVenue(
            name="Motorco", location="Durham, NC", venue_type="Bar/Restaurant",
            website="https://motorco.test", address="723 Rigsbee Ave",
        )
        venue = candidate.to_venue()

        assert venue.identity_key == candidate.identity_key
        assert venue.website == "https://motorco.test"
        assert venue.capacity == ""
        assert venue.contact_email == ""
        assert venue.missing_facts() == ["email", "phone", "capacity", "genres"]


class TestCapacityCell:
    """Capacity cells are kept as written."""

    def test_range_counts_as_filled(self):
        venue = Venue(name="A", location="B", capacity="300-450")
        assert "capacity" not in venue.missing_facts()
        assert venue.capacity_value is None

    def test_apply_facts_keeps_unparsed_capacity(self):
        venue = Venue(name="A", location="B", capacity="~500")
        result = ExtractionResult(capacity=999)

        assert venue.apply_facts(result) == []
        assert venue.to_row()["capacity"] == "~500"

    def test_found_capacity_written_as_text(self):
        venue = Venue(name="A", location="B")
        venue.apply_facts(ExtractionResult(capacity=300))

        assert venue.to_row()["capacity"] == "300"
        assert venue.capacity_value == 300
