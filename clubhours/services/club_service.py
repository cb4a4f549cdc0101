"""
Club catalog and hours queries.

Loads clubs from the catalog JSON file (read-only) and answers status
queries against their canonical hours.
"""

import json
import logging
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from clubhours.core.config import settings
from clubhours.core.models import Club, HoursStatus, StatusResult, StatusThresholds
from clubhours.logic.amenities import club_has_amenity, hours_set_for_club
from clubhours.logic.scraper import Scraper
from clubhours.logic.status import compute_status

logger = logging.getLogger(__name__)


class ClubService:
    """
    In-memory club catalog.

    The club list is replaced as a whole on update; Club models are frozen,
    so readers never see a partially updated catalog.
    """

    def __init__(self, clubs_file: Optional[Path] = None, scraper: Optional[Scraper] = None) -> None:
        self.clubs_file = clubs_file or settings.CLUBS_FILE
        self.scraper = scraper or Scraper()
        self.clubs: list[Club] = self.load()
        self.last_updated: Optional[str] = None

    def load(self) -> list[Club]:
        """
        Load clubs from the catalog file, or the bundled sample.

        Entries that fail validation are skipped.
        """
        for path in (Path(self.clubs_file), settings.SAMPLE_CLUBS_FILE):
            if not path.exists():
                continue
            try:
                payload = json.loads(path.read_text(encoding="utf-8"))
            except (OSError, json.JSONDecodeError) as e:
                logger.error(f"Cannot read {path}: {e}")
                continue
            if not isinstance(payload, list):
                logger.error(f"Expected a list of clubs in {path}")
                continue

            clubs = []
            for entry in payload:
                try:
                    clubs.append(Club.model_validate(entry))
                except ValidationError as e:
                    logger.warning(f"Skipping invalid club entry: {e}")
            logger.info(f"Loaded {len(clubs)} clubs from {path}")
            return clubs

        logger.warning("No club catalog found")
        return []

    def update(self, urls: Optional[list[str]] = None) -> Optional[list[str]]:
        """
        Scrape club pages and replace the in-memory catalog.

        Args:
            urls: Club page URLs (defaults to settings.CLUB_URLS)

        Returns:
            Slugs of scraped clubs, or None if nothing could be scraped.
        """
        urls = urls if urls is not None else settings.CLUB_URLS
        clubs = []

        for index, url in enumerate(urls):
            if index:
                time.sleep(settings.REQUEST_DELAY)
            logger.info(f"Scraping {url}")
            try:
                club = self.scraper.scrape_club(url)
            except Exception:
                logger.exception(f"Failed to scrape {url}")
                continue
            if club:
                clubs.append(club)

        if not clubs:
            return None

        self.clubs = clubs
        self.last_updated = datetime.now(timezone.utc).isoformat()
        return [club.slug for club in clubs]

    def get_club(self, slug: str) -> Optional[Club]:
        return next((club for club in self.clubs if club.slug == slug), None)

    def status_for(
        self,
        club: Club,
        at: datetime,
        amenity: Optional[str] = None,
        thresholds: Optional[StatusThresholds] = None,
    ) -> StatusResult:
        """Status of a club (or the selected amenity's hours) at an instant."""
        hours = hours_set_for_club(club, amenity)
        return compute_status(hours.intervals, at, club.timezone, thresholds)

    def open_clubs(
        self,
        at: datetime,
        amenity: Optional[str] = None,
        thresholds: Optional[StatusThresholds] = None,
        status: Optional[HoursStatus] = None,
    ) -> list[tuple[Club, StatusResult]]:
        """
        Clubs offering the amenity that are open at an instant.

        With status given, clubs in exactly that status are returned instead.
        """
        result = []
        for club in self.clubs:
            if not club_has_amenity(club, amenity):
                continue
            club_status = self.status_for(club, at, amenity, thresholds)
            matches = club_status.status == status if status else club_status.is_open
            if matches:
                result.append((club, club_status))
        return result
