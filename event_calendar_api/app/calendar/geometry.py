"""
Pixel <-> time conversion for the timed grid.

A day column is ``24 * hour_height`` pixels tall and its top edge is
local midnight.  Positions are floats; snapping rounds through the
minute domain so every preview lands on a grid line.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime, timedelta, tzinfo
from typing import Optional

from .time_utils import day_start, get_timezone

MINUTES_PER_DAY = 24 * 60


@dataclass(frozen=True)
class CalendarConfig:
    """Host-tunable constants of the scheduling views."""

    hour_height: float = 64
    snap_minutes: int = 15
    month_overflow_cap: int = 3
    min_entry_minutes: int = 15
    all_day_row_height: float = 24
    default_create_minutes: int = 30
    timezone: str = "UTC"

    @property
    def tz(self) -> tzinfo:
        return get_timezone(self.timezone)

    @property
    def day_height(self) -> float:
        return 24 * self.hour_height

    @classmethod
    def from_settings(cls, settings) -> "CalendarConfig":
        return cls(
            hour_height=settings.hour_height_px,
            snap_minutes=settings.snap_minutes,
            month_overflow_cap=settings.month_overflow_cap,
            min_entry_minutes=settings.min_entry_minutes,
            all_day_row_height=settings.all_day_row_height_px,
            default_create_minutes=settings.default_create_minutes,
            timezone=settings.timezone,
        )


def minutes_from_top(px: float, hour_height: float) -> float:
    return px * 60 / hour_height


def pixels_from_minutes(minutes: float, hour_height: float) -> float:
    return minutes * hour_height / 60


def snap_to_minutes(minutes: float, snap_minutes: int) -> float:
    """Round half up to the nearest multiple of ``snap_minutes`` (0: no-op)."""
    if not snap_minutes:
        return minutes
    return math.floor(minutes / snap_minutes + 0.5) * snap_minutes


def snap(px: float, hour_height: float, snap_minutes: int = 15) -> float:
    """Snap a vertical offset to the nearest time-grid line."""
    minutes = snap_to_minutes(minutes_from_top(px, hour_height), snap_minutes)
    return pixels_from_minutes(minutes, hour_height)


def minute_of_day(instant: datetime, day: Optional[date] = None) -> float:
    """Wall-clock minutes from the start of ``day`` (default: the instant's own day).

    Instants on later days yield values past ``MINUTES_PER_DAY``.
    """
    minutes = instant.hour * 60 + instant.minute + instant.second / 60 + instant.microsecond / 60_000_000
    if day is not None:
        minutes += (instant.date() - day).days * MINUTES_PER_DAY
    return minutes


def time_at_minutes(day: date, minutes: float, tz: Optional[tzinfo] = None) -> datetime:
    return day_start(day, tz) + timedelta(minutes=minutes)


def time_from_pixel(px: float, day: date, config: CalendarConfig) -> datetime:
    """Instant at offset ``px`` of ``day``'s column, snapped to the grid."""
    minutes = snap_to_minutes(minutes_from_top(px, config.hour_height), config.snap_minutes)
    return time_at_minutes(day, minutes, config.tz)


def pixel_from_time(instant: datetime, day: date, config: CalendarConfig) -> float:
    return pixels_from_minutes(minute_of_day(instant, day), config.hour_height)


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))
