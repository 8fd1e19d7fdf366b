"""Shared fixtures: a calendar config, an entry factory and a throwaway database."""

from datetime import date, datetime, timezone
from itertools import count

import pytest

from event_calendar_api.app.calendar.geometry import CalendarConfig
from event_calendar_api.app.core import db
from event_calendar_api.app.core.config import settings
from event_calendar_api.app.schemas.calendar import CalendarStyle
from event_calendar_api.app.schemas.entry import CalendarEntry

# A Monday; the week view around it runs 2026-10-19 .. 2026-10-25.
MONDAY = date(2026, 10, 19)


def at(day: date, hour: int, minute: int = 0) -> datetime:
    return datetime(day.year, day.month, day.day, hour, minute, tzinfo=timezone.utc)


@pytest.fixture
def config() -> CalendarConfig:
    return CalendarConfig(hour_height=64, snap_minutes=15, timezone="UTC")


@pytest.fixture
def make_entry():
    ids = count(1)

    def _make(start, end, title="Entry", entry_id=None, calendar_id=None, is_all_day=False):
        return CalendarEntry(
            id=entry_id if entry_id is not None else next(ids),
            title=title,
            start_time=start,
            end_time=end,
            calendar_id=calendar_id,
            is_all_day=is_all_day,
        )

    return _make


@pytest.fixture
def styles():
    return {
        1: CalendarStyle(id=1, color="#3b82f6", is_visible=True),
        2: CalendarStyle(id=2, color="#ef4444", is_visible=False),
    }


@pytest.fixture
def temp_db(tmp_path, monkeypatch):
    """Point the service layer at a fresh sqlite file with migrations applied."""
    monkeypatch.setattr(settings, "database_url", str(tmp_path / "calendar.db"))
    monkeypatch.setattr(settings, "timezone", "UTC")
    monkeypatch.setattr(settings, "hour_height_px", 64)
    monkeypatch.setattr(settings, "snap_minutes", 15)
    monkeypatch.setattr(settings, "month_overflow_cap", 3)
    db.init_db()
    yield db.get_database_path()
