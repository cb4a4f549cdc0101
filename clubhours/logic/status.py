"""
Open/closed status of canonical hours at an instant.

All functions are pure: the result depends only on the intervals, the
instant, the time zone and the thresholds passed in.
"""

from datetime import datetime
from typing import Optional, Sequence

from clubhours.core.models import HoursStatus, Interval, StatusResult, StatusThresholds
from clubhours.logic.time_utils import (
    MINUTES_PER_DAY,
    NYC_TIMEZONE,
    normalize_time_zone,
    zoned_parts,
)


def _intervals_on(intervals: Sequence[Interval], day: int) -> list[Interval]:
    return [i for i in intervals if i.day == day]


def _containing(day_intervals: Sequence[Interval], minutes: int) -> Optional[Interval]:
    """First interval (in order) whose [open, close) contains minutes."""
    for interval in day_intervals:
        if interval.open_minutes <= minutes < interval.close_minutes:
            return interval
    return None


def is_open_at(
    intervals: Sequence[Interval],
    instant: datetime,
    time_zone: str = NYC_TIMEZONE,
) -> bool:
    """True if any interval contains the local time of the instant."""
    if not intervals:
        return False
    day, minutes = zoned_parts(instant, normalize_time_zone(time_zone))
    return _containing(_intervals_on(intervals, day), minutes) is not None


def intervals_for_date(
    intervals: Sequence[Interval],
    instant: datetime,
    time_zone: str = NYC_TIMEZONE,
) -> list[Interval]:
    """Intervals on the local weekday of the instant, sorted by open time."""
    if not intervals:
        return []
    day, _ = zoned_parts(instant, normalize_time_zone(time_zone))
    return sorted(_intervals_on(intervals, day), key=lambda i: i.open_minutes)


def compute_status(
    intervals: Sequence[Interval],
    instant: datetime,
    time_zone: str = NYC_TIMEZONE,
    thresholds: Optional[StatusThresholds] = None,
) -> StatusResult:
    """
    Compute open / closing soon / opening soon / closed at an instant.

    Args:
        intervals: Canonical intervals (already split at midnight).
        instant: Query instant.
        time_zone: Zone of the facility (aliases accepted).
        thresholds: Closing/opening soon windows; defaults 90/60 minutes.

    Returns:
        StatusResult with the countdown to the next transition when known.
    """
    if not intervals:
        return StatusResult(status=HoursStatus.CLOSED)

    thresholds = thresholds or StatusThresholds()
    day, minutes = zoned_parts(instant, normalize_time_zone(time_zone))
    next_day = (day + 1) % 7
    today = _intervals_on(intervals, day)

    current = _containing(today, minutes)
    if current:
        if current.all_day:
            return StatusResult(status=HoursStatus.OPEN)

        minutes_until_close = current.close_minutes - minutes
        if current.close == "24:00":
            # Overnight hours continue in tomorrow's 00:00 interval
            continuation = next(
                (i for i in _intervals_on(intervals, next_day) if i.open == "00:00"),
                None,
            )
            if continuation:
                minutes_until_close = MINUTES_PER_DAY - minutes + continuation.close_minutes

        if minutes_until_close <= thresholds.closing_soon_minutes:
            return StatusResult(
                status=HoursStatus.CLOSING_SOON, minutes_until_close=minutes_until_close
            )
        return StatusResult(status=HoursStatus.OPEN, minutes_until_close=minutes_until_close)

    later_today = [i.open_minutes for i in today if i.open_minutes > minutes]
    tomorrow = [i.open_minutes for i in _intervals_on(intervals, next_day)]

    minutes_until_open = None
    if later_today:
        minutes_until_open = min(later_today) - minutes
    elif tomorrow:
        minutes_until_open = MINUTES_PER_DAY - minutes + min(tomorrow)

    if minutes_until_open is not None and minutes_until_open <= thresholds.opening_soon_minutes:
        return StatusResult(status=HoursStatus.OPENING_SOON, minutes_until_open=minutes_until_open)
    return StatusResult(status=HoursStatus.CLOSED, minutes_until_open=minutes_until_open)
