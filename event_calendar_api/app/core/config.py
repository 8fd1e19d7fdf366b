"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables.  Defaults are provided for all fields.  In a
production deployment you should override these via environment
variables or a dedicated configuration service.

Calendar tuning constants (row heights, snap granularity, overflow cap)
live here as well so the host can adjust the scheduling views without
touching the layout engine.
"""

import os
from dataclasses import dataclass


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "Event Calendar API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    debug: bool = os.getenv("DEBUG", "false").lower() in {"1", "true", "yes"}
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: str = os.getenv("LOG_FILE", "")
    # Level for the scheduling core logger; empty means inherit LOG_LEVEL.
    calendar_log_level: str = os.getenv("CALENDAR_LOG_LEVEL", "")

    # Path or connection string for the SQLite database.  Can be
    # overridden via the ``DATABASE_URL`` environment variable.  If a
    # relative path is provided, it will be resolved relative to the
    # project root by the ``db`` module.
    database_url: str = os.getenv("DATABASE_URL", "event_calendar.db")

    # IANA timezone used for local wall-clock day boundaries.  All
    # "same day" comparisons and multi-day detection use this zone.
    timezone: str = os.getenv("CALENDAR_TIMEZONE", "UTC")

    # Pixel height of one hour row in the day and week grids.
    hour_height_px: int = int(os.getenv("CALENDAR_HOUR_HEIGHT_PX", "64"))
    # Gesture previews are rounded to this many minutes.  0 disables snapping.
    snap_minutes: int = int(os.getenv("CALENDAR_SNAP_MINUTES", "15"))
    # Entries shown per month cell before the "+N more" counter.
    month_overflow_cap: int = int(os.getenv("CALENDAR_MONTH_OVERFLOW_CAP", "3"))
    min_entry_minutes: int = int(os.getenv("CALENDAR_MIN_ENTRY_MINUTES", "15"))
    all_day_row_height_px: int = int(os.getenv("CALENDAR_ALL_DAY_ROW_HEIGHT_PX", "24"))
    # Length of the preview a drag-to-create starts with before any movement.
    default_create_minutes: int = int(os.getenv("CALENDAR_DEFAULT_CREATE_MINUTES", "30"))


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.  Because the dataclass
# computes values at instantiation time, environment variables should
# be set before importing this module.
settings = Settings()
