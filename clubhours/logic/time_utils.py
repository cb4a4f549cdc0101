"""
Time zone helpers.

Decomposes instants into (weekday, minutes since midnight) in a club's
local time zone. Weekdays use Sunday=0 ... Saturday=6 throughout.
"""

import logging
import re
from datetime import datetime, timezone
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

logger = logging.getLogger(__name__)

NYC_TIMEZONE = "America/New_York"

TIMEZONE_ALIASES = {
    "Eastern Standard Time",
    "Eastern Daylight Time",
    "EST",
    "EDT",
    "US/Eastern",
}

MINUTES_PER_DAY = 24 * 60

# Trailing "Z", "+HH:MM" or "-HHMM" offset
OFFSET_PATTERN = re.compile(r"(?:Z|([+-]\d{2}):?(\d{2}))$")


def to_minutes(value: str) -> int:
    """Convert HH:MM to minutes since midnight ("24:00" -> 1440)."""
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)


def normalize_time_zone(value: Optional[str] = None) -> str:
    """Map Eastern time aliases to the IANA name; empty input means New York."""
    if not value:
        return NYC_TIMEZONE

    trimmed = value.strip()
    if not trimmed or trimmed in TIMEZONE_ALIASES:
        return NYC_TIMEZONE

    return trimmed


def get_zone(time_zone: str) -> ZoneInfo:
    """Resolve a zone name, falling back to New York for unknown names."""
    try:
        return ZoneInfo(time_zone)
    except (ZoneInfoNotFoundError, ValueError, OSError):
        # OSError: names of tzdata directories such as "America"
        logger.warning(f"Unknown time zone {time_zone!r}, using {NYC_TIMEZONE}")
        return ZoneInfo(NYC_TIMEZONE)


def zoned_parts(instant: datetime, time_zone: str) -> tuple[int, int]:
    """
    Local weekday and minutes since midnight of an instant.

    Args:
        instant: Aware datetime (naive values are taken as UTC).
        time_zone: IANA zone name.

    Returns:
        (day, minutes) with day 0=Sunday and minutes 0..1439.
    """
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=timezone.utc)
    local = instant.astimezone(get_zone(time_zone))
    return local.isoweekday() % 7, local.hour * 60 + local.minute


def parse_local_datetime(value: str, time_zone: str = NYC_TIMEZONE) -> Optional[datetime]:
    """Parse a "YYYY-MM-DDTHH:MM" wall-clock time in the given zone."""
    if not value:
        return None
    try:
        parsed = datetime.strptime(value, "%Y-%m-%dT%H:%M")
    except ValueError:
        return None
    return parsed.replace(tzinfo=get_zone(time_zone))


def parse_at_param(value: Optional[str], now: Optional[datetime] = None) -> datetime:
    """
    Resolve the query instant passed by a caller.

    Accepts ISO timestamps with an offset or "Z", or a New York wall-clock
    time ("2026-01-14T21:45" or "2026-01-14 21:45"). Anything else falls
    back to the current instant.
    """
    current = now or datetime.now(timezone.utc)
    if not value or not value.strip():
        return current

    normalized = value.strip().replace(" ", "T", 1)

    offset = OFFSET_PATTERN.search(normalized)
    if offset:
        # fromisoformat on 3.10 only accepts "+HH:MM" offsets
        suffix = f"{offset.group(1)}:{offset.group(2)}" if offset.group(1) else "+00:00"
        iso = normalized[:offset.start()] + suffix
        try:
            return datetime.fromisoformat(iso)
        except ValueError:
            pass

    local = parse_local_datetime(normalized)
    if local:
        return local

    try:
        parsed = datetime.fromisoformat(normalized)
    except ValueError:
        logger.debug(f"Unparseable query instant {value!r}, using now")
        return current
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=ZoneInfo(NYC_TIMEZONE))
    return parsed
