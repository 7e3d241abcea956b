"""
Pytest configuration and shared fixtures.
"""

import sys
from datetime import date, datetime, time
from pathlib import Path
from zoneinfo import ZoneInfo

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from models.availability import CalendarCategory, TimeConfig  # noqa: E402

NEW_YORK = ZoneInfo("America/New_York")


@pytest.fixture
def time_config():
    """One working week, Monday 2025-11-03 through Sunday 2025-11-09, in New York."""
    return TimeConfig(
        start_date=date(2025, 11, 3),
        end_date=date(2025, 11, 9),
        weekday_start=time(9, 0),
        weekday_end=time(17, 0),
        weekend_start=time(10, 0),
        weekend_end=time(12, 0),
        timezone="America/New_York",
        buffer_factor=0.8,
    )


@pytest.fixture
def calendars():
    return [
        {"calendar_id": "cal-meetings", "calendar_name": "Meetings", "category": CalendarCategory.FUNGIBLE},
        {"calendar_id": "cal-work", "calendar_name": "Work Log", "category": CalendarCategory.TASK},
        {"calendar_id": "cal-birthdays", "calendar_name": "Birthdays", "category": CalendarCategory.INACTIVE},
    ]


@pytest.fixture
def make_event():
    """Factory for events given local New York wall-clock times."""

    def _make(summary, day, start, end, calendar_id="cal-work", category=CalendarCategory.TASK):
        return {
            "summary": summary,
            "start": datetime.combine(day, start, tzinfo=NEW_YORK),
            "end": datetime.combine(day, end, tzinfo=NEW_YORK),
            "calendar_id": calendar_id,
            "category": category,
        }

    return _make
