"""
Normalizer for structured service hours found in page data.

Both shapes are rendered back into hours lines and parsed by HoursParser,
so structured and free-text hours share one set of rules:

    [{"days": "Mon-Fri", "hours": "5:00am - 11:00pm"}, ...]
    {"Monday": [{"startTime": "5:0", "endTime": "23:00"}], ...}

Fragments of any other shape are skipped.
"""

from typing import Optional

from clubhours.core.models import IntervalSet
from clubhours.logic.parser import parser


def normalize_service_time(value: Optional[str]) -> Optional[str]:
    """Pad "H:M[:S]" to "HH:MM". None if there is no minute part."""
    if not value or not isinstance(value, str):
        return None
    parts = value.split(":")
    if len(parts) < 2:
        return None
    return f"{parts[0].strip().zfill(2)}:{parts[1].strip().zfill(2)}"


def parse_service_hours_list(entries: Optional[list[dict]]) -> IntervalSet:
    """Parse a list of {"days": ..., "hours": ...} entries."""
    if not entries or not isinstance(entries, list):
        return parser.build_interval_set([])

    lines = []
    for entry in entries:
        if not isinstance(entry, dict):
            continue
        days = entry.get("days")
        hours = entry.get("hours")
        if not isinstance(days, str) or not isinstance(hours, str):
            continue
        if days.strip() and hours.strip():
            lines.append(f"{days.strip()} {hours.strip()}")

    return parser.build_interval_set(lines)


def parse_service_hours_map(mapping: Optional[dict[str, list[dict]]]) -> IntervalSet:
    """Parse a weekday -> [{"startTime": ..., "endTime": ...}] mapping."""
    if not mapping or not isinstance(mapping, dict):
        return parser.build_interval_set([])

    lines = []
    for day, ranges in mapping.items():
        if not isinstance(day, str) or not isinstance(ranges, list):
            continue
        for time_range in ranges:
            if not isinstance(time_range, dict):
                continue
            start = normalize_service_time(time_range.get("startTime"))
            end = normalize_service_time(time_range.get("endTime"))
            if start and end:
                lines.append(f"{day} {start} - {end}")

    return parser.build_interval_set(lines)
