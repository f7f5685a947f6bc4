"""Tests for extract_facts() and ExtractionResult."""

from lib.extractors.pipeline import ExtractionResult, extract_facts


BLUE_NOTE_PAGE = (
    "<html><body><h1>The Blue Note</h1>"
    "<p>Booking: booking@bluenote.test</p>"
    "<p>Phone: (919) 555-0134</p>"
    "<p>Capacity: 300 people</p>"
    "<p>Genres: jazz, blues</p>"
    "</body></html>"
    " The Blue Note\nBooking: booking@bluenote.test\nPhone: (919) 555-0134\n"
    "Capacity: 300 people\nGenres: jazz, blues"
)


class TestExtractFacts:
    """Tests for extract_facts()."""

    def test_extracts_all_facts(self):
        result = extract_facts(BLUE_NOTE_PAGE, "https://bluenote.test")

        assert result.email == "booking@bluenote.test"
        assert result.phone == "(919) 555-0134"
        assert result.capacity == 300
        assert result.genres == "Blues; Jazz"

    def test_only_requested_facts(self):
        """Facts that were not asked for are not extracted."""
        result = extract_facts(BLUE_NOTE_PAGE, facts=["email", "capacity"])

        assert result.found() == ["email", "capacity"]
        assert result.phone is None
        assert result.genres is None

    def test_nothing_found(self):
        result = extract_facts("<html><body>Coming soon</body></html>")
        assert result.is_empty()


class TestExtractionResult:
    """Tests for ExtractionResult merging."""

    def test_merge_missing_keeps_existing_values(self):
        """Values already present are never overridden."""
        primary = ExtractionResult(email="info@a.com")
        secondary = ExtractionResult(email="booking@a.com", phone="(919) 555-0134")

        merged = primary.merge_missing(secondary)

        assert merged.email == "info@a.com"
        assert merged.phone == "(919) 555-0134"

    def test_merge_missing_with_none(self):
        primary = ExtractionResult(capacity=300)
        assert primary.merge_missing(None) is primary
