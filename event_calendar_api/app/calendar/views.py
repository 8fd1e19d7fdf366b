"""
Day, week and month renderers.

Each renderer is a pure function of the anchor date, the entry
snapshot, the calendar style table and the current gesture, returning
positioned rectangles.  Pixel values are absolute within the timed
grid (or the banner band); horizontal values are fractions of the
column (timed entries) or of the whole period (banner bars) so the
host can scale them to any width.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import List, Optional, Sequence

from event_calendar_api.app.schemas.entry import CalendarEntry

from .gestures import IDLE, MOVE, GestureState, Moving, Preview, Resizing
from .geometry import CalendarConfig, minute_of_day, pixels_from_minutes
from .layout import (
    StyleTable,
    categorize_entries,
    color_for,
    entry_bounds,
    entry_days,
    entry_occurs_on_day,
    entry_sort_id,
    entry_starts_on,
    filter_visible,
    is_multi_day,
    pack_multi_day,
    pack_overlapping,
    row_count,
)
from .time_utils import DAY, MONTH, WEEK, DateLike, days_in_visible_range, format_hour, to_date


@dataclass(frozen=True)
class TimedRect:
    entry: CalendarEntry
    day_index: int
    top: float
    height: float
    left: float
    width: float
    column: int
    column_count: int
    color: Optional[str] = None
    is_dragging: bool = False
    is_resizing: bool = False


@dataclass(frozen=True)
class AllDayBar:
    entry: CalendarEntry
    start_day_index: int
    end_day_index: int
    row: int
    left: float
    width: float
    top: float
    height: float
    color: Optional[str] = None
    continues_before: bool = False
    continues_after: bool = False
    is_dragging: bool = False


@dataclass(frozen=True)
class TimeGridLayout:
    view: str
    anchor: date
    days: List[date]
    today_index: Optional[int]
    hours: List[str]
    hour_height: float
    timed: List[TimedRect]
    all_day: List[AllDayBar]
    all_day_rows: int
    all_day_height: float
    preview: Optional[Preview] = None


@dataclass(frozen=True)
class MonthChip:
    entry: CalendarEntry
    color: Optional[str]
    is_multi_day: bool
    starts_today: bool
    continues_from_previous: bool
    continues_to_next: bool
    is_dragging: bool = False


@dataclass(frozen=True)
class MonthCell:
    day: date
    in_month: bool
    is_today: bool
    chips: List[MonthChip]
    overflow: int
    is_drop_target: bool = False


@dataclass(frozen=True)
class MonthLayout:
    view: str
    anchor: date
    days: List[date]
    weeks: List[List[MonthCell]]
    preview: Optional[Preview] = None


def _dragged_id(state: GestureState) -> Optional[int]:
    return state.entry.id if isinstance(state, Moving) else None


def render_time_grid(
    view: str,
    anchor: DateLike,
    entries: Sequence[CalendarEntry],
    styles: StyleTable,
    config: Optional[CalendarConfig] = None,
    state: GestureState = IDLE,
    preview: Optional[Preview] = None,
    today: Optional[date] = None,
) -> TimeGridLayout:
    """Lay out a day or week view."""
    config = config or CalendarConfig()
    tz = config.tz
    anchor = to_date(anchor)
    days = days_in_visible_range(view, anchor)
    timed_entries, multi_day_entries = categorize_entries(filter_visible(entries, styles), tz)
    dragged = _dragged_id(state)
    resized = state.entry.id if isinstance(state, Resizing) else None

    bars = []
    positions = pack_multi_day(multi_day_entries, days, tz)
    for pos in positions:
        bars.append(
            AllDayBar(
                entry=pos.entry,
                start_day_index=pos.start_day_index,
                end_day_index=pos.end_day_index,
                row=pos.row,
                left=pos.start_day_index / len(days),
                width=pos.span / len(days),
                top=pos.row * config.all_day_row_height,
                height=config.all_day_row_height,
                color=color_for(pos.entry, styles),
                continues_before=pos.continues_before,
                continues_after=pos.continues_after,
                is_dragging=pos.entry.id == dragged,
            )
        )

    rects = []
    for day_index, day in enumerate(days):
        todays = [e for e in timed_entries if entry_starts_on(e, day, tz)]
        for placed in pack_overlapping(todays, tz):
            start, end = entry_bounds(placed.entry, tz)
            top = pixels_from_minutes(minute_of_day(start), config.hour_height)
            height = pixels_from_minutes((end - start).total_seconds() / 60, config.hour_height)
            is_resizing = placed.entry.id == resized and preview is not None
            if is_resizing:
                top, height = preview.top, preview.height
            rects.append(
                TimedRect(
                    entry=placed.entry,
                    day_index=day_index,
                    top=top,
                    height=height,
                    left=placed.left,
                    width=placed.width,
                    column=placed.column,
                    column_count=placed.column_count,
                    color=color_for(placed.entry, styles),
                    is_dragging=placed.entry.id == dragged,
                    is_resizing=is_resizing,
                )
            )

    rows = row_count(positions)
    return TimeGridLayout(
        view=view,
        anchor=anchor,
        days=days,
        today_index=days.index(today) if today in days else None,
        hours=[format_hour(h) for h in range(24)],
        hour_height=config.hour_height,
        timed=rects,
        all_day=bars,
        all_day_rows=rows,
        all_day_height=rows * config.all_day_row_height,
        preview=preview,
    )


def render_day(anchor, entries, styles, config=None, state=IDLE, preview=None, today=None) -> TimeGridLayout:
    return render_time_grid(DAY, anchor, entries, styles, config, state, preview, today)


def render_week(anchor, entries, styles, config=None, state=IDLE, preview=None, today=None) -> TimeGridLayout:
    return render_time_grid(WEEK, anchor, entries, styles, config, state, preview, today)


def render_month(
    anchor: DateLike,
    entries: Sequence[CalendarEntry],
    styles: StyleTable,
    config: Optional[CalendarConfig] = None,
    state: GestureState = IDLE,
    preview: Optional[Preview] = None,
    today: Optional[date] = None,
) -> MonthLayout:
    """Lay out a month grid, capping the chips shown per day."""
    config = config or CalendarConfig()
    tz = config.tz
    anchor = to_date(anchor)
    days = days_in_visible_range(MONTH, anchor)
    visible = filter_visible(entries, styles)
    dragged = _dragged_id(state)
    drop_index = preview.day_index if preview is not None and preview.kind == MOVE else None
    cap = max(config.month_overflow_cap, 0)

    def order(entry: CalendarEntry):
        # Banner-like entries first so continuing bars stay aligned.
        return (not is_multi_day(entry, tz), entry_bounds(entry, tz)[0], entry_sort_id(entry))

    cells = []
    for index, day in enumerate(days):
        occurring = sorted((e for e in visible if entry_occurs_on_day(e, day, tz)), key=order)
        chips = []
        for entry in occurring[:cap]:
            first, last = entry_days(entry, tz)
            chips.append(
                MonthChip(
                    entry=entry,
                    color=color_for(entry, styles),
                    is_multi_day=is_multi_day(entry, tz),
                    starts_today=first == day,
                    continues_from_previous=first < day,
                    continues_to_next=last > day,
                    is_dragging=entry.id == dragged,
                )
            )
        cells.append(
            MonthCell(
                day=day,
                in_month=day.month == anchor.month,
                is_today=day == today,
                chips=chips,
                overflow=max(len(occurring) - cap, 0),
                is_drop_target=index == drop_index,
            )
        )

    return MonthLayout(
        view=MONTH,
        anchor=anchor,
        days=days,
        weeks=[cells[i:i + 7] for i in range(0, len(cells), 7)],
        preview=preview,
    )


def render_view(view: str, anchor, entries, styles, config=None, state=IDLE, preview=None, today=None):
    """Dispatch to the renderer for ``view``."""
    if view == MONTH:
        return render_month(anchor, entries, styles, config, state, preview, today)
    if view in (DAY, WEEK):
        return render_time_grid(view, anchor, entries, styles, config, state, preview, today)
    raise ValueError(f"Unknown view {view!r}")
