"""
Pytest configuration and shared fixtures.

Reference week (America/New_York, EST):
    2026-01-11 Sun, 12 Mon, 13 Tue, 14 Wed, 15 Thu, 16 Fri, 17 Sat
"""

import os
import sys
from datetime import datetime
from zoneinfo import ZoneInfo

import pytest

# Add project root to Python path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

NYC = ZoneInfo("America/New_York")


@pytest.fixture
def ny_time():
    """Build a New York wall-clock instant: ny_time("2026-01-14 21:45")."""
    def build(value: str) -> datetime:
        return datetime.strptime(value, "%Y-%m-%d %H:%M").replace(tzinfo=NYC)
    return build
