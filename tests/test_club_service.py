"""
Unit tests for the club catalog service.
"""

import json
from unittest.mock import MagicMock, patch

import pytest

from clubhours.core.config import settings
from clubhours.core.models import HoursStatus, StatusThresholds
from clubhours.services.club_service import ClubService

VALID_CLUB = {
    "id": "flatiron",
    "slug": "flatiron",
    "name": "Flatiron",
    "address": {"line1": "897 Broadway", "city": "New York", "state": "NY", "postalCode": "10003"},
    "timezone": "EST",
    "amenities": ["Pool"],
    "hours": {
        "club": {"spans": [{"day": 3, "open": "06:00", "close": "22:00"}]},
        "amenities": {"pool": {"spans": [{"day": 3, "open": "07:00", "close": "12:00"}]}},
    },
    "source": {"url": "https://example.com/clubs/flatiron", "lastFetchedAt": "2026-01-10T12:00:00Z"},
}


@pytest.fixture
def catalog_file(tmp_path):
    invalid = dict(VALID_CLUB, slug="broken", hours={"club": {"spans": [{"day": 3, "open": "22:00", "close": "06:00"}]}})
    path = tmp_path / "clubs.json"
    path.write_text(json.dumps([VALID_CLUB, invalid]), encoding="utf-8")
    return path


class TestLoad:
    """Tests for catalog loading."""

    def test_load_skips_invalid_entries(self, catalog_file):
        """Wrapping intervals are not canonical and the entry is skipped."""
        service = ClubService(clubs_file=catalog_file)
        assert [c.slug for c in service.clubs] == ["flatiron"]

    def test_missing_file_falls_back_to_sample(self, tmp_path):
        service = ClubService(clubs_file=tmp_path / "missing.json")
        assert len(service.clubs) == 3

    def test_no_catalog_at_all(self, tmp_path):
        with patch.object(settings, "SAMPLE_CLUBS_FILE", tmp_path / "nothing.json"):
            service = ClubService(clubs_file=tmp_path / "missing.json")
        assert service.clubs == []

    def test_round_trip(self, catalog_file):
        """Loaded clubs dump back to the same hours JSON."""
        club = ClubService(clubs_file=catalog_file).clubs[0]
        dumped = club.model_dump(mode="json", by_alias=True)

        assert dumped["hours"]["club"]["spans"] == VALID_CLUB["hours"]["club"]["spans"]
        assert dumped["hours"]["amenities"]["pool"]["spans"] == VALID_CLUB["hours"]["amenities"]["pool"]["spans"]


class TestQueries:
    """Tests for status queries."""

    def test_get_club(self, catalog_file):
        service = ClubService(clubs_file=catalog_file)
        assert service.get_club("flatiron").name == "Flatiron"
        assert service.get_club("nope") is None

    def test_status_for_amenity(self, catalog_file, ny_time):
        service = ClubService(clubs_file=catalog_file)
        club = service.get_club("flatiron")
        at = ny_time("2026-01-14 11:00")

        assert service.status_for(club, at).status == HoursStatus.OPEN
        pool = service.status_for(club, at, "pool")
        assert pool.status == HoursStatus.CLOSING_SOON
        assert pool.minutes_until_close == 60

    def test_open_clubs(self, catalog_file, ny_time):
        service = ClubService(clubs_file=catalog_file)

        assert len(service.open_clubs(ny_time("2026-01-14 12:00"))) == 1
        assert service.open_clubs(ny_time("2026-01-14 23:00")) == []
        assert service.open_clubs(ny_time("2026-01-14 12:00"), amenity="sauna") == []

    def test_open_clubs_by_status(self, catalog_file, ny_time):
        service = ClubService(clubs_file=catalog_file)
        thresholds = StatusThresholds(opening_soon_minutes=120)

        matches = service.open_clubs(
            ny_time("2026-01-14 04:30"), thresholds=thresholds, status=HoursStatus.OPENING_SOON
        )
        assert [(club.slug, result.minutes_until_open) for club, result in matches] == [("flatiron", 90)]


class TestUpdate:
    """Tests for catalog refresh."""

    def test_update_replaces_catalog(self, catalog_file):
        scraper = MagicMock()
        service = ClubService(clubs_file=catalog_file, scraper=scraper)
        scraper.scrape_club.side_effect = [None, service.clubs[0]]

        with patch.object(settings, "REQUEST_DELAY", 0):
            result = service.update(["https://example.com/a", "https://example.com/b"])

        assert result == ["flatiron"]
        assert service.last_updated is not None
        assert scraper.scrape_club.call_count == 2

    def test_update_nothing_scraped(self, catalog_file):
        scraper = MagicMock()
        scraper.scrape_club.return_value = None
        service = ClubService(clubs_file=catalog_file, scraper=scraper)

        assert service.update(["https://example.com/a"]) is None
        assert len(service.clubs) == 1
        assert service.last_updated is None

    def test_update_survives_failing_page(self, catalog_file):
        """An error on one page does not abort the rest of the refresh."""
        scraper = MagicMock()
        service = ClubService(clubs_file=catalog_file, scraper=scraper)
        scraper.scrape_club.side_effect = [AttributeError("boom"), service.clubs[0]]

        with patch.object(settings, "REQUEST_DELAY", 0):
            result = service.update(["https://example.com/a", "https://example.com/b"])

        assert result == ["flatiron"]
        assert scraper.scrape_club.call_count == 2
