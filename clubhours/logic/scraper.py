"""
Web scraper for club detail pages.

Extracts club address, amenities and hours from a club page. Hours come
from the embedded page data (__NEXT_DATA__ facility) when present, and
from "... Hours" page sections otherwise.
"""

import json
import logging
import re
from datetime import datetime, timezone
from typing import Any, Optional
from urllib.parse import urlparse

import requests
from bs4 import BeautifulSoup, Tag

from clubhours.core.config import settings
from clubhours.core.models import Address, Club, ClubSource, GeoPoint, HoursBundle, IntervalSet
from clubhours.logic.amenities import slugify_amenity
from clubhours.logic.parser import parser
from clubhours.logic.structured import parse_service_hours_list, parse_service_hours_map
from clubhours.logic.time_utils import normalize_time_zone

logger = logging.getLogger(__name__)

HEADINGS = ["h1", "h2", "h3", "h4", "h5"]


def slugify(value: str) -> str:
    """Page slug, e.g. "Club Hours" -> "club-hours"."""
    return re.sub(r"[^a-z0-9]+", "-", value.lower()).strip("-")


class Scraper:
    """
    Scraper for club detail pages.

    Page structure:
        <script id="__NEXT_DATA__"> - props.pageProps.facility (preferred)
        <script type="application/ld+json"> - address and geo
        <h3>Club Hours</h3><ul>...</ul> - hours sections
        <h3>Amenities</h3><ul>...</ul> - amenity list

    Attributes:
        HEADERS: HTTP headers for requests
        TIMEOUT: Request timeout in seconds
        LIST_SOURCES: Facility keys with {days, hours} lists per amenity
    """

    HEADERS = {
        "User-Agent": settings.SCRAPER_USER_AGENT,
        "Accept": "text/html,application/xml;q=0.9,*/*;q=0.8",
    }
    TIMEOUT = settings.REQUEST_TIMEOUT

    LIST_SOURCES = [
        ("spa", "spaServiceHours"),
        ("kids_club", "kidsClubServiceHours"),
        ("shop", "shopServiceHours"),
        ("sales", "salesServiceHours"),
    ]

    def fetch(self, url: str) -> Optional[str]:
        """
        Fetch HTML content of a page.

        Returns:
            HTML content as string, or None if request failed.
        """
        try:
            response = requests.get(url, headers=self.HEADERS, timeout=self.TIMEOUT)
            response.raise_for_status()
            logger.info(f"Fetched {url} ({len(response.text)} bytes)")
            return response.text
        except requests.RequestException as e:
            logger.error(f"Error fetching {url}: {e}")
            return None

    def scrape_club(self, url: str, html: Optional[str] = None) -> Optional[Club]:
        """
        Build a Club from its detail page.

        Args:
            url: Club page URL (also the source of the slug)
            html: Page HTML; fetched when not given

        Returns:
            Club, or None if the page could not be fetched or has no address.
        """
        html = html if html is not None else self.fetch(url)
        if not html:
            return None

        soup = BeautifulSoup(html, "html.parser")
        path_parts = [p for p in urlparse(url).path.split("/") if p]
        slug = slugify(path_parts[-1] if path_parts else "club")

        json_ld = self.extract_json_ld(soup)
        facility = self.extract_next_data_facility(soup)

        address = self.extract_address_from_facility(facility) or self.extract_address(json_ld, soup)
        if not address:
            logger.warning(f"No address found for {url}, skipping")
            return None

        sections = self.extract_sections(soup)
        amenities = self.extract_amenities_from_facility(facility) or self.extract_amenities(sections)
        name = (facility or {}).get("name") or self._first_text(soup) or slug

        return Club(
            id=slug,
            slug=slug,
            name=name,
            address=address,
            geo=self.extract_geo_from_facility(facility) or self.extract_geo(json_ld, soup),
            timezone=normalize_time_zone((facility or {}).get("timeZone")),
            amenities=amenities,
            hours=self.extract_hours(facility, sections),
            source=ClubSource(url=url, last_fetched_at=datetime.now(timezone.utc).isoformat()),
        )

    # --- Hours ---

    def extract_hours(self, facility: Optional[dict], sections: dict[str, list[str]]) -> HoursBundle:
        """
        Build club and amenity hours.

        Precedence for club hours: facility "club" service map, facility
        serviceHours list, then the page's hours sections.
        """
        club_hours = IntervalSet()
        services: dict[str, IntervalSet] = {}

        if facility:
            service_entries = facility.get("facilityServiceHours")
            if not isinstance(service_entries, list):
                service_entries = []

            for entry in service_entries:
                if not isinstance(entry, dict):
                    continue
                label = entry.get("serviceType")
                if not isinstance(label, str) or not entry.get("hours"):
                    continue
                if label.lower() == "club":
                    club_hours = parse_service_hours_map(entry["hours"])
                else:
                    services[slugify_amenity(label)] = parse_service_hours_map(entry["hours"])

            if not club_hours.intervals and facility.get("serviceHours"):
                club_hours = parse_service_hours_list(facility["serviceHours"])

            for key, source in self.LIST_SOURCES:
                entries = facility.get(source)
                if not entries:
                    continue
                if key not in services or not services[key].intervals:
                    services[key] = parse_service_hours_list(entries)

        if not club_hours.intervals:
            hours_sections = self.find_hours_sections(sections)
            club_key = self.pick_club_hours(hours_sections)
            club_hours = parser.build_interval_set(hours_sections.get(club_key, []))
            services.update(self.extract_amenity_hours(hours_sections, club_key))

        return HoursBundle(primary=club_hours, services=services)

    def find_hours_sections(self, sections: dict[str, list[str]]) -> dict[str, list[str]]:
        """Sections whose heading mentions hours."""
        return {key: lines for key, lines in sections.items() if "hour" in key}

    def pick_club_hours(self, hours_sections: dict[str, list[str]]) -> Optional[str]:
        """Key of the section holding the club's own hours."""
        for key in hours_sections:
            if "club" in key:
                return key
        for key in hours_sections:
            if key == "hours" or key.endswith("hours"):
                return key
        return next(iter(hours_sections), None)

    def extract_amenity_hours(
        self, hours_sections: dict[str, list[str]], club_key: Optional[str]
    ) -> dict[str, IntervalSet]:
        """Hours sections other than the club's, keyed by amenity key."""
        amenity_hours = {}
        for key, lines in hours_sections.items():
            if key == club_key:
                continue
            label = re.sub(r"-?hours?$", "", key)
            if not label or label == "club":
                continue
            amenity_hours[slugify_amenity(label)] = parser.build_interval_set(lines)
        return amenity_hours

    # --- Page sections ---

    def extract_sections(self, soup: BeautifulSoup) -> dict[str, list[str]]:
        """
        Collect text lines under each heading.

        Returns:
            {"club-hours": ["Mon-Fri 5:00am - 11:00pm", ...], ...}
        """
        sections = {}
        for heading in soup.find_all(HEADINGS):
            title = heading.get_text(strip=True)
            if not title:
                continue
            lines = self._section_lines(heading)
            if lines:
                sections[slugify(title)] = lines
        return sections

    def extract_amenities(self, sections: dict[str, list[str]]) -> list[str]:
        """Amenity names from an "Amenities" section."""
        key = next((k for k in sections if "amenit" in k), None)
        if not key:
            return []
        stripped = (re.sub(r"^[-*]\s*", "", line) for line in sections[key])
        return [line for line in stripped if line]

    def _section_lines(self, heading: Tag) -> list[str]:
        """De-duplicated lines between a heading and the next heading."""
        lines = []
        for sibling in heading.find_next_siblings():
            if sibling.name in HEADINGS:
                break
            for line in sibling.get_text("\n").splitlines():
                line = line.strip()
                if line and line not in lines:
                    lines.append(line)
        return lines

    def _first_text(self, soup: BeautifulSoup) -> str:
        h1 = soup.find("h1")
        if h1 and h1.get_text(strip=True):
            return h1.get_text(strip=True)
        og_title = soup.find("meta", attrs={"property": "og:title"})
        return (og_title.get("content") or "").strip() if og_title else ""

    # --- Structured page data ---

    def extract_json_ld(self, soup: BeautifulSoup) -> list[dict]:
        """All JSON-LD nodes on the page; malformed blocks are skipped."""
        nodes = []
        for script in soup.find_all("script", attrs={"type": "application/ld+json"}):
            raw = script.string or script.get_text()
            if not raw or not raw.strip():
                continue
            try:
                parsed = json.loads(raw)
            except json.JSONDecodeError:
                logger.debug("Skipping malformed JSON-LD block")
                continue
            if isinstance(parsed, list):
                nodes.extend(n for n in parsed if isinstance(n, dict))
            elif isinstance(parsed, dict):
                nodes.append(parsed)
        return nodes

    def extract_next_data_facility(self, soup: BeautifulSoup) -> Optional[dict]:
        """props.pageProps.facility from the __NEXT_DATA__ script, if any."""
        script = soup.find("script", id="__NEXT_DATA__")
        if not script:
            return None
        raw = script.string or script.get_text()
        try:
            data = json.loads(raw)
        except (json.JSONDecodeError, TypeError):
            logger.debug("Skipping malformed __NEXT_DATA__")
            return None
        node = data
        for key in ("props", "pageProps", "facility"):
            if not isinstance(node, dict):
                return None
            node = node.get(key)
        return node if isinstance(node, dict) else None

    def extract_address(self, json_ld: list[dict], soup: BeautifulSoup) -> Optional[Address]:
        """Address from JSON-LD, or from the first <address> element."""
        for node in json_ld:
            address = node.get("address")
            if isinstance(address, dict) and address.get("addressLocality") and address.get("streetAddress"):
                return Address(
                    line1=address["streetAddress"],
                    city=address["addressLocality"],
                    state=address.get("addressRegion") or "NY",
                    postal_code=address.get("postalCode") or "",
                )

        element = soup.find("address")
        text = element.get_text(" ", strip=True) if element else ""
        parts = [p.strip() for p in text.split(",")]
        if len(parts) < 2:
            return None

        state_zip = parts[2].split() if len(parts) > 2 else []
        return Address(
            line1=parts[0],
            city=parts[1] or "New York",
            state=state_zip[0] if state_zip else "NY",
            postal_code=state_zip[1] if len(state_zip) > 1 else "",
        )

    def extract_geo(self, json_ld: list[dict], soup: BeautifulSoup) -> Optional[GeoPoint]:
        """Coordinates from JSON-LD, or from place:location meta tags."""
        for node in json_ld:
            geo = node.get("geo")
            if isinstance(geo, dict):
                point = self._geo_point(geo.get("latitude"), geo.get("longitude"))
                if point:
                    return point

        lat = soup.find("meta", attrs={"property": "place:location:latitude"})
        lng = soup.find("meta", attrs={"property": "place:location:longitude"})
        if lat and lng:
            return self._geo_point(lat.get("content"), lng.get("content"))
        return None

    def extract_address_from_facility(self, facility: Optional[dict]) -> Optional[Address]:
        if not facility:
            return None
        contact = (
            facility.get("contactInformation")
            or facility.get("facilityContact")
            or facility.get("salesOfficeAddress")
        )
        if not isinstance(contact, dict) or not contact.get("address"):
            return None
        return Address(
            line1=contact["address"],
            city=contact.get("city") or "New York",
            state=contact.get("state") or "NY",
            postal_code=contact.get("zip") or "",
        )

    def extract_geo_from_facility(self, facility: Optional[dict]) -> Optional[GeoPoint]:
        if not facility:
            return None
        contact = facility.get("contactInformation") or facility.get("facilityContact")
        if not isinstance(contact, dict):
            contact = {}
        lat = contact.get("latitude") or facility.get("latitude")
        lng = contact.get("longitude") or facility.get("longitude")
        return self._geo_point(lat, lng)

    def extract_amenities_from_facility(self, facility: Optional[dict]) -> list[str]:
        """Amenity titles from the facility's amenity lists, de-duplicated."""
        if not facility:
            return []

        titles = []
        for key in ("facilityAmenities", "facilityFeaturedAmenities", "featuredAmenities", "amenities"):
            items = facility.get(key)
            if not isinstance(items, list):
                continue
            for item in items:
                title = item.get("title") if isinstance(item, dict) else item
                if isinstance(title, str) and title.strip() and title.strip() not in titles:
                    titles.append(title.strip())
        return titles

    def _geo_point(self, lat: Any, lng: Any) -> Optional[GeoPoint]:
        if not lat or not lng:
            return None
        try:
            return GeoPoint(lat=float(lat), lng=float(lng))
        except (TypeError, ValueError):
            return None
