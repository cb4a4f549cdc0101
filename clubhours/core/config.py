import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent


class Settings:
    DATA_DIR = Path(os.getenv("DATA_DIR", str(PROJECT_ROOT / "data")))
    CLUBS_FILE = Path(os.getenv("CLUBS_FILE", str(DATA_DIR / "clubs.json")))
    SAMPLE_CLUBS_FILE = PROJECT_ROOT / "data" / "clubs.sample.json"

    DEFAULT_TIMEZONE = os.getenv("DEFAULT_TIMEZONE", "America/New_York")
    CLOSING_SOON_MINUTES = int(os.getenv("CLOSING_SOON_MINUTES", "90"))
    OPENING_SOON_MINUTES = int(os.getenv("OPENING_SOON_MINUTES", "60"))

    BASE_URL = os.getenv("BASE_URL", "https://www.equinox.com")
    CLUB_URLS = [u.strip() for u in os.getenv("CLUB_URLS", "").split(",") if u.strip()]
    SCRAPER_USER_AGENT = os.getenv(
        "SCRAPER_USER_AGENT",
        "ClubHoursScraper/1.0 (+contact: ops@example.com; respectful fetch)",
    )
    REQUEST_TIMEOUT = int(os.getenv("REQUEST_TIMEOUT", "15"))
    REQUEST_DELAY = float(os.getenv("REQUEST_DELAY", "1.2"))

settings = Settings()
