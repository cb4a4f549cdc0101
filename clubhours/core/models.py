"""
Pydantic models for club hours and API responses.

The hours models are the exchanged shape of the catalog: a weekday index
(Sunday=0) and two canonical "HH:MM" strings per interval, with "24:00"
allowed only as a closing time.
"""

from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from clubhours.logic.time_utils import to_minutes

DAY_ABBREVIATIONS = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]

CLOCK_TIME_PATTERN = r"^(?:[01]\d|2[0-3]):[0-5]\d$|^24:00$"


class Interval(BaseModel):
    """Single non-wrapping opening interval on one weekday."""
    model_config = ConfigDict(frozen=True)

    day: int = Field(ge=0, le=6)  # 0=Sun, 6=Sat
    open: str = Field(pattern=CLOCK_TIME_PATTERN)   # HH:MM
    close: str = Field(pattern=CLOCK_TIME_PATTERN)  # HH:MM, 24:00 allowed

    @model_validator(mode="after")
    def check_order(self) -> "Interval":
        if to_minutes(self.open) >= to_minutes(self.close):
            raise ValueError(f"open {self.open} must be earlier than close {self.close}")
        return self

    @property
    def open_minutes(self) -> int:
        return to_minutes(self.open)

    @property
    def close_minutes(self) -> int:
        return to_minutes(self.close)

    @property
    def all_day(self) -> bool:
        return self.open == "00:00" and self.close == "24:00"

    def __str__(self) -> str:
        return f"{DAY_ABBREVIATIONS[self.day]} {self.open} - {self.close}"


class IntervalSet(BaseModel):
    """Intervals of one facility or service, plus the raw lines they came from."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    intervals: List[Interval] = Field(default_factory=list, alias="spans")
    raw: Optional[List[str]] = None


class HoursBundle(BaseModel):
    """Primary club hours plus per-service hours keyed by amenity key."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    primary: IntervalSet = Field(default_factory=IntervalSet, alias="club")
    services: Dict[str, IntervalSet] = Field(default_factory=dict, alias="amenities")


class StatusThresholds(BaseModel):
    """Look-ahead windows (minutes) for the closing/opening soon states."""
    model_config = ConfigDict(frozen=True)

    closing_soon_minutes: int = Field(default=90, ge=0)
    opening_soon_minutes: int = Field(default=60, ge=0)


class HoursStatus(str, Enum):
    OPEN = "open"
    CLOSING_SOON = "closing_soon"
    OPENING_SOON = "opening_soon"
    CLOSED = "closed"


class StatusResult(BaseModel):
    """
    Status at a query instant.

    open:          minutes_until_close set unless the interval spans the whole day
    closing_soon:  minutes_until_close always set
    opening_soon:  minutes_until_open always set
    closed:        minutes_until_open set when the next opening is known
    """
    model_config = ConfigDict(frozen=True)

    status: HoursStatus
    minutes_until_close: Optional[int] = None
    minutes_until_open: Optional[int] = None

    @property
    def is_open(self) -> bool:
        return self.status in (HoursStatus.OPEN, HoursStatus.CLOSING_SOON)


# --- Club catalog ---

class Address(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    line1: str
    line2: Optional[str] = None
    city: str
    state: str
    postal_code: str = Field(default="", alias="postalCode")


class GeoPoint(BaseModel):
    lat: float
    lng: float


class ClubSource(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    url: str
    last_fetched_at: str = Field(alias="lastFetchedAt")


class Club(BaseModel):
    """Club with its address, amenities and canonical hours."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    slug: str
    name: str
    address: Address
    geo: Optional[GeoPoint] = None
    timezone: str = "America/New_York"
    amenities: List[str] = Field(default_factory=list)
    hours: HoursBundle = Field(default_factory=HoursBundle)
    source: ClubSource


# --- API responses ---

class ClubStatusResponse(BaseModel):
    """Status of one club (or one of its amenities) at an instant."""
    slug: str
    name: str
    at: str
    amenity: Optional[str] = None
    timezone: str
    status: HoursStatus
    minutes_until_close: Optional[int] = None
    minutes_until_open: Optional[int] = None
    today: List[Interval]


class OpenClubsResponse(BaseModel):
    """Response for the open-now filter."""
    count: int
    at: str
    amenity: Optional[str] = None
    clubs: List[dict]


class StatusResponse(BaseModel):
    """Health check response."""
    status: str
    last_updated: Optional[str] = None
    total_clubs: int
