"""
Scheduling core: time utilities, layout engine, pixel/time mapping,
gesture controller and view renderers.

Nothing in this package touches the database or the network.  It
receives entry snapshots and a calendar style table and hands back
rectangles and proposed time ranges.
"""

from .geometry import CalendarConfig, pixel_from_time, snap, time_from_pixel
from .gestures import Commit, GestureCallbacks, GestureController, Preview
from .layout import pack_multi_day, pack_overlapping
from .time_utils import InvalidTimestamp, navigate, parse_entry_time
from .views import render_view

__all__ = [
    "CalendarConfig",
    "Commit",
    "GestureCallbacks",
    "GestureController",
    "InvalidTimestamp",
    "Preview",
    "navigate",
    "pack_multi_day",
    "pack_overlapping",
    "parse_entry_time",
    "pixel_from_time",
    "render_view",
    "snap",
    "time_from_pixel",
]
