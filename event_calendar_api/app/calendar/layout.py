"""
Layout engine for the scheduling views.

Two packers live here:

* ``pack_overlapping`` lays out the timed entries of one day column.
  Entries are assigned the lowest free column; all entries of an
  overlap cluster (a connected group of mutually chained overlaps)
  share one ``column_count`` so their horizontal slices never
  intersect.
* ``pack_multi_day`` assigns all-day and multi-day entries to rows of
  the banner band above the grid.

Both are pure and recompute everything on each call.  Calendar
visibility and colour come from a ``{calendar_id: CalendarStyle}``
side table; ``filter_visible`` is the pre-pass that drops hidden
calendars.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta, tzinfo
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from event_calendar_api.app.schemas.calendar import CalendarStyle
from event_calendar_api.app.schemas.entry import CalendarEntry

from .time_utils import is_same_day, parse_entry_time, start_of_day

StyleTable = Mapping[int, CalendarStyle]


@dataclass(frozen=True)
class PositionedEntry:
    """A timed entry placed in a day column."""

    entry: CalendarEntry
    column: int
    column_count: int

    @property
    def left(self) -> float:
        return self.column / self.column_count

    @property
    def width(self) -> float:
        return 1 / self.column_count


@dataclass(frozen=True)
class MultiDayPosition:
    """A banner bar clipped to the visible days."""

    entry: CalendarEntry
    start_day_index: int
    end_day_index: int
    row: int
    continues_before: bool = False
    continues_after: bool = False

    @property
    def span(self) -> int:
        return self.end_day_index - self.start_day_index + 1


def entry_bounds(entry: CalendarEntry, tz: Optional[tzinfo] = None) -> Tuple[datetime, datetime]:
    """Local start and end of an entry."""
    return parse_entry_time(entry.start_time, tz), parse_entry_time(entry.end_time, tz)


def entry_sort_id(entry: CalendarEntry) -> str:
    return str(entry.id)


def entry_days(entry: CalendarEntry, tz: Optional[tzinfo] = None) -> Tuple[date, date]:
    """First and last local date an entry occupies.

    The end is exclusive: an entry ending exactly at local midnight
    does not occupy the following day.
    """
    start, end = entry_bounds(entry, tz)
    last = end.date()
    if end > start and end == start_of_day(end):
        last -= timedelta(days=1)
    return start.date(), last


def is_multi_day(entry: CalendarEntry, tz: Optional[tzinfo] = None) -> bool:
    if entry.is_all_day:
        return True
    start, _ = entry_bounds(entry, tz)
    return not is_same_day(start, entry_days(entry, tz)[1])


def categorize_entries(
    entries: Iterable[CalendarEntry], tz: Optional[tzinfo] = None
) -> Tuple[List[CalendarEntry], List[CalendarEntry]]:
    """Split entries into ``(timed, multi_day)`` keeping input order."""
    timed: List[CalendarEntry] = []
    multi_day: List[CalendarEntry] = []
    for entry in entries:
        (multi_day if is_multi_day(entry, tz) else timed).append(entry)
    return timed, multi_day


def entry_starts_on(entry: CalendarEntry, day: date, tz: Optional[tzinfo] = None) -> bool:
    return is_same_day(entry_bounds(entry, tz)[0], day)


def entry_occurs_on_day(entry: CalendarEntry, day: date, tz: Optional[tzinfo] = None) -> bool:
    first, last = entry_days(entry, tz)
    return first <= day <= last


def ranges_overlap(a_start, a_end, b_start, b_end) -> bool:
    """Half-open overlap test; back-to-back ranges do not overlap."""
    return a_start < b_end and b_start < a_end


def filter_visible(entries: Iterable[CalendarEntry], styles: StyleTable) -> List[CalendarEntry]:
    """Drop entries whose calendar is hidden.  Unknown calendars stay visible."""
    visible = []
    for entry in entries:
        style = styles.get(entry.calendar_id) if entry.calendar_id is not None else None
        if style is not None and not style.is_visible:
            continue
        visible.append(entry)
    return visible


def color_for(entry: CalendarEntry, styles: StyleTable) -> Optional[str]:
    if entry.calendar_id is None:
        return None
    style = styles.get(entry.calendar_id)
    return style.color if style else None


def pack_overlapping(entries: Sequence[CalendarEntry], tz: Optional[tzinfo] = None) -> List[PositionedEntry]:
    """Assign columns to the timed entries of one day.

    Order is by start, then longer duration first, then id, so the
    output is deterministic for a given entry set.  The result follows
    that order.
    """
    bounded = []
    for entry in entries:
        start, end = entry_bounds(entry, tz)
        bounded.append((start, end, entry))
    bounded.sort(key=lambda item: (item[0], -(item[1] - item[0]), entry_sort_id(item[2])))

    columns: List[List[Tuple[datetime, datetime]]] = []
    assigned: List[int] = []
    for start, end, _ in bounded:
        for index, occupied in enumerate(columns):
            if not any(ranges_overlap(start, end, s, e) for s, e in occupied):
                occupied.append((start, end))
                assigned.append(index)
                break
        else:
            columns.append([(start, end)])
            assigned.append(len(columns) - 1)

    # Union overlapping entries into clusters; a cluster is as wide as
    # its highest column.
    parent = list(range(len(bounded)))

    def find(i: int) -> int:
        while parent[i] != i:
            parent[i] = parent[parent[i]]
            i = parent[i]
        return i

    for i in range(len(bounded)):
        for j in range(i + 1, len(bounded)):
            if ranges_overlap(bounded[i][0], bounded[i][1], bounded[j][0], bounded[j][1]):
                parent[find(j)] = find(i)

    widest: Dict[int, int] = {}
    for i, column in enumerate(assigned):
        root = find(i)
        widest[root] = max(widest.get(root, 0), column + 1)

    return [
        PositionedEntry(entry=item[2], column=assigned[i], column_count=widest[find(i)])
        for i, item in enumerate(bounded)
    ]


def pack_multi_day(
    entries: Sequence[CalendarEntry],
    days: Sequence[date],
    tz: Optional[tzinfo] = None,
) -> List[MultiDayPosition]:
    """Assign banner rows to entries spanning the visible ``days``.

    Entries are clipped to the visible range for placement only; their
    stored times are untouched.  Entries entirely outside the range are
    skipped.
    """
    if not days:
        return []
    first, last = days[0], days[-1]
    index_of = {day: i for i, day in enumerate(days)}

    spans = []
    for entry in entries:
        start_day, end_day = entry_days(entry, tz)
        if end_day < first or start_day > last:
            continue
        start_index = index_of.get(max(start_day, first), 0)
        end_index = index_of.get(min(end_day, last), len(days) - 1)
        spans.append((start_index, end_index, entry, start_day < first, end_day > last))
    spans.sort(key=lambda s: (s[0], -(s[1] - s[0]), entry_sort_id(s[2])))

    row_ends: List[int] = []
    positions: List[MultiDayPosition] = []
    for start_index, end_index, entry, before, after in spans:
        for row, row_end in enumerate(row_ends):
            if row_end < start_index:
                row_ends[row] = end_index
                break
        else:
            row_ends.append(end_index)
            row = len(row_ends) - 1
        positions.append(
            MultiDayPosition(
                entry=entry,
                start_day_index=start_index,
                end_day_index=end_index,
                row=row,
                continues_before=before,
                continues_after=after,
            )
        )
    return positions


def row_count(positions: Sequence[MultiDayPosition]) -> int:
    if not positions:
        return 0
    return max(p.row for p in positions) + 1
