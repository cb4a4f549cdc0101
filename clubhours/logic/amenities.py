"""
Amenity keys and hours selection.
"""

import re
from typing import Iterable, Optional

from clubhours.core.models import Club, IntervalSet


def slugify_amenity(value: str) -> str:
    """Service key for a label, e.g. "Kids' Club" -> "kids_club"."""
    return re.sub(r"[^a-z0-9]+", "_", value.lower()).strip("_")


def build_amenity_keys(amenity: str) -> list[str]:
    """Candidate service keys for an amenity label, most specific first."""
    normalized = amenity.lower()
    keys = []
    if "pool" in normalized:
        keys.append("pool")
    if "spa" in normalized:
        keys.append("spa")
    if "kids" in normalized:
        keys.append("kids_club")
    slug = slugify_amenity(amenity)
    if slug not in keys:
        keys.append(slug)
    return keys


def hours_set_for_club(club: Club, amenity: Optional[str] = None) -> IntervalSet:
    """
    Hours of the requested amenity, or the club's own hours.

    Falls back to the club hours when the amenity is absent, unknown,
    or has no intervals.
    """
    if not amenity:
        return club.hours.primary

    for key in build_amenity_keys(amenity):
        service_hours = club.hours.services.get(key)
        if service_hours and service_hours.intervals:
            return service_hours

    return club.hours.primary


def club_has_amenity(club: Club, amenity: Optional[str] = None) -> bool:
    """Loose match of an amenity label against the club's amenities."""
    if not amenity:
        return True
    normalized = amenity.lower().strip()
    if not normalized:
        return True
    return any(normalized in item.lower() for item in club.amenities)


def amenity_options(clubs: Iterable[Club]) -> list[str]:
    """Sorted distinct amenity labels across clubs."""
    return sorted({amenity for club in clubs for amenity in club.amenities})
