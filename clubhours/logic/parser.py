"""
Parser for club opening hours text.

Parses free-text hours lines into canonical weekday intervals.
Handles day ranges, 12/24-hour clocks and intervals that cross midnight.
"""

import logging
import re
from typing import Iterable, Optional

from clubhours.core.models import Interval, IntervalSet
from clubhours.logic.time_utils import to_minutes

logger = logging.getLogger(__name__)

DAY_TOKEN = (
    r"sun(?:day)?|mon(?:day)?|tue(?:sday|s)?|wed(?:nesday|s)?"
    r"|thu(?:rsday|rs|r)?|fri(?:day)?|sat(?:urday)?"
)

DAY_MAP = {
    "sun": 0, "sunday": 0,
    "mon": 1, "monday": 1,
    "tue": 2, "tues": 2, "tuesday": 2,
    "wed": 3, "weds": 3, "wednesday": 3,
    "thu": 4, "thur": 4, "thurs": 4, "thursday": 4,
    "fri": 5, "friday": 5,
    "sat": 6, "saturday": 6,
}

ALL_DAYS = [0, 1, 2, 3, 4, 5, 6]


class HoursParser:
    """
    Parser for opening hours lines.

    Handles:
        - Day ranges: "Mon-Fri 6:00am - 10:00pm", "Fri to Mon 9 - 17"
        - Day lists: "Sat, Sun 8am - 8pm"
        - Every day: "Daily 5:30am - 11pm", "Everyday 24 hours"
        - Overnight: "Tue 10:00pm - 2:00am" (split at midnight)
        - Closed days: "Sunday Closed" (skipped)
    """

    DAY_PATTERN = re.compile(DAY_TOKEN)
    DAY_RANGE_PATTERN = re.compile(rf"({DAY_TOKEN})\s*(?:-|to)\s*({DAY_TOKEN})")

    # Time range: "6:00am - 10:00pm", "9 - 17"
    TIME_RANGE_PATTERN = re.compile(
        r"(\d{1,2}(?::\d{2})?\s*(?:am|pm)?)\s*-\s*(\d{1,2}(?::\d{2})?\s*(?:am|pm)?)",
        re.IGNORECASE,
    )
    CLOCK_PATTERN = re.compile(r"^(\d{1,2})(?::(\d{2}))?(am|pm)?$")
    ALL_DAY_PATTERN = re.compile(r"24\s*hours?|open\s*24", re.IGNORECASE)
    CLOSED_PATTERN = re.compile(r"closed", re.IGNORECASE)

    def parse_clock_time(self, text: str) -> Optional[str]:
        """
        Parse a single time token into 24-hour HH:MM.

        "9" -> "09:00", "9:30am" -> "09:30", "11 pm" -> "23:00",
        "12am" -> "00:00", "24" -> "24:00". Returns None if invalid.
        """
        cleaned = re.sub(r"[\s.]+", "", text.lower())
        match = self.CLOCK_PATTERN.match(cleaned)
        if not match:
            return None

        hour = int(match.group(1))
        minute = int(match.group(2)) if match.group(2) else 0
        meridiem = match.group(3)

        if minute > 59:
            return None

        if meridiem:
            if not 1 <= hour <= 12:
                return None
            if meridiem == "am":
                hour = 0 if hour == 12 else hour
            else:
                hour = 12 if hour == 12 else hour + 12
        elif hour > 24:
            return None

        if hour == 24 and minute != 0:
            return None

        return f"{hour:02d}:{minute:02d}"

    def parse_day_spec(self, text: str) -> list[int]:
        """
        Parse a weekday phrase into weekday indices (0=Sun).

        "Daily" -> all days, "Fri-Mon" -> [5, 6, 0, 1],
        "Sat, Sun" -> [6, 0]. Empty list if no day is recognized.
        """
        normalized = self._normalize_dash(text.lower()).strip()
        if not normalized:
            return []

        if "daily" in normalized or "every day" in normalized or "everyday" in normalized:
            return list(ALL_DAYS)

        match = self.DAY_RANGE_PATTERN.search(normalized)
        if match:
            return self._expand_day_range(DAY_MAP[match.group(1)], DAY_MAP[match.group(2)])

        days = []
        for token in self.DAY_PATTERN.findall(normalized):
            day = DAY_MAP[token]
            if day not in days:
                days.append(day)
        return days

    def parse_lines(self, lines: Iterable[str]) -> list[Interval]:
        """
        Parse hours lines into canonical intervals.

        Args:
            lines: Raw lines, e.g. ["Mon-Fri 6:00am - 10:00pm", "Sun Closed"]

        Returns:
            Intervals in line order; lines that cannot be understood are skipped.
        """
        intervals = []

        for raw_line in lines:
            line = raw_line.strip()
            if not line:
                continue

            if self.CLOSED_PATTERN.search(line):
                continue

            time_range = self._parse_time_range(line)
            if not time_range:
                logger.debug(f"No time range in line: {line!r}")
                continue

            days = self.parse_day_spec(self._days_part(line))
            if not days:
                logger.debug(f"No days in line: {line!r}")
                continue

            open_time, close_time = time_range
            for day in days:
                intervals.extend(self._split_overnight(day, open_time, close_time))

        return intervals

    def build_interval_set(self, lines: list[str]) -> IntervalSet:
        """Parse lines into an IntervalSet that keeps the raw lines."""
        return IntervalSet(intervals=self.parse_lines(lines), raw=list(lines))

    def _normalize_dash(self, text: str) -> str:
        """Replace en/em dashes with a plain hyphen."""
        return text.replace("–", "-").replace("—", "-")

    def _parse_time_range(self, line: str) -> Optional[tuple[str, str]]:
        """Extract (open, close) from a line, or None."""
        normalized = self._normalize_dash(line)
        if self.ALL_DAY_PATTERN.search(normalized):
            return "00:00", "24:00"

        match = self.TIME_RANGE_PATTERN.search(normalized)
        if not match:
            return None

        open_time = self.parse_clock_time(match.group(1))
        close_time = self.parse_clock_time(match.group(2))
        if not open_time or not close_time:
            return None

        return open_time, close_time

    def _days_part(self, line: str) -> str:
        """Text before the first digit; the whole line when it starts with one."""
        normalized = self._normalize_dash(line)
        match = re.search(r"\d", normalized)
        if match and match.start() > 0:
            return normalized[:match.start()]
        return normalized

    def _expand_day_range(self, start: int, end: int) -> list[int]:
        """Inclusive range walking forward through the week."""
        days = [start]
        current = start
        while current != end:
            current = (current + 1) % 7
            days.append(current)
        return days

    def _split_overnight(self, day: int, open_time: str, close_time: str) -> list[Interval]:
        """Build intervals for one day, splitting ranges that cross midnight."""
        open_minutes, close_minutes = to_minutes(open_time), to_minutes(close_time)

        if open_minutes == close_minutes:
            return []

        if open_minutes < close_minutes:
            return [Interval(day=day, open=open_time, close=close_time)]

        # "24:00" opens and "00:00" closes leave an empty half
        parts = []
        if open_time != "24:00":
            parts.append(Interval(day=day, open=open_time, close="24:00"))
        if close_time != "00:00":
            parts.append(Interval(day=(day + 1) % 7, open="00:00", close=close_time))
        return parts


parser = HoursParser()


def parse_hours_lines(lines: Iterable[str]) -> list[Interval]:
    """Parse hours lines with the shared parser."""
    return parser.parse_lines(lines)
