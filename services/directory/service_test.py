"""Unit tests for the directory service."""

from db.client import CSVStore, VENUE_FIELDS
from db.models.discovered_venue import DiscoveredVenue
from db.models.venue import Venue
from services.directory.service import DirectoryService, validate_row
from services.discovery.repo import MockDiscoveredRepo
from services.enrichment.repo import MockVenueRepo, VenueRepo


def _candidates():
    return [
        DiscoveredVenue(name="Motorco Music Hall", location="Durham, NC", status="approved",
                        website="https://motorco.test", venue_type="Concert Hall"),
        DiscoveredVenue(name="The Pinhook", location="Durham, NC", status="approved"),
        DiscoveredVenue(name="Ticket Barn", location="Durham, NC", status="rejected"),
        DiscoveredVenue(name="Sharp Nine", location="Durham, NC"),
    ]


class TestPromoteApproved:
    """Tests for DirectoryService.promote_approved()."""

    def test_adds_approved_only(self):
        venue_repo = MockVenueRepo()
        discovered = MockDiscoveredRepo(_candidates())

        result = DirectoryService(venue_repo, discovered).promote_approved()

        assert result.added == 2
        assert result.duplicates == 0
        assert [v.name for v in venue_repo.venues] == ["Motorco Music Hall", "The Pinhook"]
        assert venue_repo.venues[0].website == "https://motorco.test"
        assert venue_repo.venues[0].contact_email == ""
        # approved candidates stay in the discovered store
        assert len(discovered.candidates) == 4

    def test_skips_existing_identity(self):
        """A venue with the same name but another city is not a duplicate."""
        venue_repo = MockVenueRepo([
            Venue(name="the pinhook", location="durham, nc"),
            Venue(name="Motorco Music Hall", location="Raleigh, NC"),
        ])

        result = DirectoryService(venue_repo, MockDiscoveredRepo(_candidates())).promote_approved()

        assert result.added == 1
        assert result.duplicates == 1
        assert result.total_venues == 3

    def test_backs_up_before_additions(self, tmp_path):
        store = CSVStore(tmp_path / "venues_master.csv", VENUE_FIELDS)
        VenueRepo(store).save_venues([Venue(name="Cat's Cradle", location="Carrboro, NC")])

        DirectoryService(VenueRepo(store), MockDiscoveredRepo(_candidates())).promote_approved()

        backup = tmp_path / "venues_master_backup_before_additions.csv"
        assert backup.exists()
        assert len(VenueRepo(store).load_venues()) == 3

    def test_nothing_approved(self):
        venue_repo = MockVenueRepo()
        result = DirectoryService(venue_repo, MockDiscoveredRepo()).promote_approved()

        assert result.added == 0
        assert venue_repo.saves == []


class TestImportCsv:
    """Tests for DirectoryService.import_csv()."""

    def test_imports_valid_rows(self):
        venue_repo = MockVenueRepo([Venue(name="Cat's Cradle", location="Carrboro, NC")])
        result = DirectoryService(venue_repo, MockDiscoveredRepo()).import_csv(
            'name,location,venue_type,capacity,contact_email\n'
            'Motorco,Durham NC,Music Venue,500,info@motorco.test\n'
            '"cat\'s cradle","carrboro, nc",Music Venue,,\n'
        )

        assert result.ok
        assert result.processed == 2
        assert result.added == 1
        assert result.duplicates == 1
        assert venue_repo.venues[1].capacity == "500"
        assert len(venue_repo.saves) == 1

    def test_any_error_rejects_upload(self):
        venue_repo = MockVenueRepo()
        result = DirectoryService(venue_repo, MockDiscoveredRepo()).import_csv(
            "name,location,venue_type,capacity,contact_email\n"
            "Motorco,Durham NC,Music Venue,500,info@motorco.test\n"
            "Bad Venue,,Bar,lots,nope\n"
        )

        assert not result.ok
        assert result.added == 0
        assert venue_repo.saves == []
        assert "Row 3: Missing required field 'location'" in result.errors
        assert "Row 3: Invalid email format" in result.errors
        assert any("Row 3: Capacity" in e for e in result.errors)

    def test_dry_run_does_not_save(self):
        venue_repo = MockVenueRepo()
        result = DirectoryService(venue_repo, MockDiscoveredRepo()).import_csv(
            "name,location,venue_type\nMotorco,Durham NC,Music Venue\n", apply=False,
        )

        assert result.added == 1
        assert venue_repo.saves == []


class TestValidateRow:
    """Tests for validate_row()."""

    def test_capacity_bounds(self):
        row = {"name": "A", "location": "B", "venue_type": "Bar"}
        assert validate_row({**row, "capacity": "1000000"}, 2) == []
        assert validate_row({**row, "capacity": "1000001"}, 2) != []
        assert validate_row({**row, "capacity": "-5"}, 2) != []
