"""
Club Hours API

FastAPI application answering "which clubs are open" queries from scraped
club opening hours.

Usage:
    python main.py              # Run server on port 8000
    uvicorn main:app --reload   # Development with auto-reload
"""

import logging
from typing import Optional

import uvicorn
from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware

from clubhours.core.config import settings
from clubhours.core.models import (
    Club,
    ClubStatusResponse,
    HoursStatus,
    OpenClubsResponse,
    StatusResponse,
    StatusResult,
    StatusThresholds,
)
from clubhours.logic.amenities import amenity_options, hours_set_for_club
from clubhours.logic.status import intervals_for_date
from clubhours.logic.time_utils import parse_at_param
from clubhours.services.club_service import ClubService

# --- Logging Configuration ---

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


# --- Utility Functions ---

def build_thresholds(closing_soon: Optional[int], opening_soon: Optional[int]) -> StatusThresholds:
    """Configured thresholds with optional per-request overrides."""
    return StatusThresholds(
        closing_soon_minutes=settings.CLOSING_SOON_MINUTES if closing_soon is None else closing_soon,
        opening_soon_minutes=settings.OPENING_SOON_MINUTES if opening_soon is None else opening_soon,
    )


def club_payload(club: Club, status: Optional[StatusResult] = None) -> dict:
    """Club in its exchange (camelCase) shape, with status if computed."""
    payload = club.model_dump(mode="json", by_alias=True)
    if status:
        payload["status"] = status.model_dump(mode="json")
    return payload


# --- App Configuration ---

app = FastAPI(
    title="Club Hours API",
    description="API for club and amenity opening hours and open-now status",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS - allow all origins for the map frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- Dependencies ---

service = ClubService()


# --- API Endpoints ---

@app.get("/")
def root() -> dict:
    """Return API info."""
    return {"name": "Club Hours API", "version": "1.0.0", "docs": "/docs"}


@app.get("/status", response_model=StatusResponse)
def health_check() -> dict:
    """
    Health check endpoint.

    Returns:
        System status, last scrape time and number of clubs in the catalog.
    """
    return {
        "status": "healthy",
        "last_updated": service.last_updated,
        "total_clubs": len(service.clubs),
    }


@app.get("/update")
def update_data() -> dict:
    """
    Scrape the configured club pages and refresh the catalog.

    Returns:
        Status, list of scraped club slugs and last_updated timestamp.
    """
    try:
        result = service.update()
        if result:
            return {
                "status": "success",
                "clubs": result,
                "message": f"Updated hours for {len(result)} clubs",
                "last_updated": service.last_updated,
            }
        return {"status": "error", "message": "No club pages could be scraped"}
    except Exception:
        logger.exception("Error updating clubs")
        return {"status": "error", "message": "Internal server error"}


@app.get("/clubs")
def get_clubs(
    at: Optional[str] = None,
    amenity: Optional[str] = None,
    closing_soon: Optional[int] = Query(None, ge=0),
    opening_soon: Optional[int] = Query(None, ge=0),
) -> list[dict]:
    """
    List all clubs.

    **Parameters:**
    - at: Instant (ISO with offset, or New York local "YYYY-MM-DDTHH:MM")
    - amenity: Amenity whose hours drive the status (e.g. "pool")

    When at or amenity is given, each club carries a "status" object.
    """
    if at is None and amenity is None:
        return [club_payload(club) for club in service.clubs]

    query_date = parse_at_param(at)
    thresholds = build_thresholds(closing_soon, opening_soon)
    return [
        club_payload(club, service.status_for(club, query_date, amenity, thresholds))
        for club in service.clubs
    ]


@app.get("/clubs/{slug}")
def get_club(slug: str) -> dict:
    """Get one club with its canonical hours."""
    club = service.get_club(slug)
    if not club:
        raise HTTPException(status_code=404, detail="Club not found")
    return club_payload(club)


@app.get("/clubs/{slug}/status", response_model=ClubStatusResponse)
def get_club_status(
    slug: str,
    at: Optional[str] = None,
    amenity: Optional[str] = None,
    closing_soon: Optional[int] = Query(None, ge=0),
    opening_soon: Optional[int] = Query(None, ge=0),
) -> dict:
    """
    Get open/closed status of a club or one of its amenities.

    **Response format:**
    ```json
    {
      "slug": "hudson-yards",
      "status": "closing_soon",
      "minutes_until_close": 15,
      "today": [{"day": 3, "open": "05:00", "close": "22:00"}]
    }
    ```
    """
    club = service.get_club(slug)
    if not club:
        raise HTTPException(status_code=404, detail="Club not found")

    query_date = parse_at_param(at)
    result = service.status_for(club, query_date, amenity, build_thresholds(closing_soon, opening_soon))
    hours = hours_set_for_club(club, amenity)

    return {
        "slug": club.slug,
        "name": club.name,
        "at": query_date.isoformat(),
        "amenity": amenity or None,
        "timezone": club.timezone,
        "status": result.status,
        "minutes_until_close": result.minutes_until_close,
        "minutes_until_open": result.minutes_until_open,
        "today": intervals_for_date(hours.intervals, query_date, club.timezone),
    }


@app.get("/open", response_model=OpenClubsResponse)
def get_open_clubs(
    at: Optional[str] = None,
    amenity: Optional[str] = None,
    status: Optional[HoursStatus] = None,
    closing_soon: Optional[int] = Query(None, ge=0),
    opening_soon: Optional[int] = Query(None, ge=0),
) -> dict:
    """
    Clubs open at an instant.

    **Parameters:**
    - at: Instant (defaults to now; unparseable values also mean now)
    - amenity: Only clubs with this amenity, judged by its hours
    - status: Return clubs in this exact status instead of open ones
    """
    query_date = parse_at_param(at)
    matches = service.open_clubs(
        query_date, amenity or None, build_thresholds(closing_soon, opening_soon), status
    )
    return {
        "count": len(matches),
        "at": query_date.isoformat(),
        "amenity": amenity or None,
        "clubs": [club_payload(club, result) for club, result in matches],
    }


@app.get("/amenities")
def get_amenities() -> dict:
    """Get the sorted list of amenities offered across clubs."""
    return {"amenities": amenity_options(service.clubs)}


# --- Entry Point ---

def run() -> None:
    """Run the API server (entry point for CLI)."""
    uvicorn.run(app, host="0.0.0.0", port=8000)


if __name__ == "__main__":
    run()
