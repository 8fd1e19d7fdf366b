"""
Pointer gesture state machine for the scheduling views.

One ``GestureController`` serves one rendered view.  It is fed pointer
events already resolved to grid coordinates (a day index and a
vertical offset in pixels within that day's column) and keeps exactly
one ``GestureState`` value:

    Idle --down on entry body--> Moving
    Idle --down on resize handle--> Resizing
    Idle --down on empty cell--> Creating
    Moving | Resizing | Creating --move--> same state, new preview
    Moving | Resizing | Creating --up--> Idle, commit emitted
    any --leave--> Idle, nothing emitted

Commits are handed to callbacks; the controller never persists
anything.  Handlers run synchronously and return before the next event
is processed, so transitions need no locking.

Internally every preview is computed in minutes from the start of the
target day and converted to pixels last, so the minimum-duration floor
is exact regardless of the hour height.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Union

from event_calendar_api.app.schemas.entry import CalendarEntry

from .geometry import (
    MINUTES_PER_DAY,
    CalendarConfig,
    clamp,
    minute_of_day,
    minutes_from_top,
    pixels_from_minutes,
    snap_to_minutes,
    time_at_minutes,
)
from .layout import entry_bounds, is_multi_day
from .time_utils import MONTH, VIEWS, add_days

logger = logging.getLogger(__name__)

TOP = "top"
BOTTOM = "bottom"
EDGES = (TOP, BOTTOM)

MOVE = "move"
RESIZE = "resize"
CREATE = "create"


@dataclass(frozen=True)
class Idle:
    name = "idle"


@dataclass(frozen=True)
class Moving:
    entry: CalendarEntry
    origin_day: int
    # Pointer offset from the entry's top edge; 0 for whole-day moves.
    origin_offset: float
    whole_days: bool = False
    name = "moving"


@dataclass(frozen=True)
class Resizing:
    entry: CalendarEntry
    edge: str
    name = "resizing"


@dataclass(frozen=True)
class Creating:
    anchor_day: int
    # Snapped minute offset of the press; the fixed edge of the new entry.
    anchor_offset: float
    name = "creating"


GestureState = Union[Idle, Moving, Resizing, Creating]
IDLE = Idle()


@dataclass(frozen=True)
class Preview:
    """Where the gesture would put its entry if released now."""

    kind: str
    day_index: int
    top: float
    height: float
    start: datetime
    end: datetime
    whole_days: bool = False
    entry_id: Optional[int] = None


@dataclass(frozen=True)
class Commit:
    kind: str
    start: datetime
    end: datetime
    entry: Optional[CalendarEntry] = None


EntryCallback = Callable[[CalendarEntry, datetime, datetime], None]


@dataclass
class GestureCallbacks:
    on_entry_moved: Optional[EntryCallback] = None
    on_entry_resized: Optional[EntryCallback] = None
    on_entry_create_requested: Optional[Callable[[datetime, datetime], None]] = None
    on_entry_selected: Optional[Callable[[CalendarEntry], None]] = None
    on_day_selected: Optional[Callable[[date], None]] = None


@dataclass
class _Session:
    preview: Optional[Preview] = None
    # Set once a gesture commits; swallows the click that trails the release.
    suppress_click: bool = False
    history: List[str] = field(default_factory=list)


class GestureController:
    """Interaction state for one day, week or month view."""

    def __init__(
        self,
        view: str,
        days: Sequence[date],
        entries: Iterable[CalendarEntry] = (),
        config: Optional[CalendarConfig] = None,
        callbacks: Optional[GestureCallbacks] = None,
    ) -> None:
        if view not in VIEWS:
            raise ValueError(f"Unknown view {view!r}")
        if not days:
            raise ValueError("A view needs at least one visible day")
        self.view = view
        self.days = list(days)
        self.config = config or CalendarConfig()
        self.callbacks = callbacks or GestureCallbacks()
        self._entries: Dict[int, CalendarEntry] = {}
        self._state: GestureState = IDLE
        self._session = _Session()
        self.set_entries(entries)

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    @property
    def state(self) -> GestureState:
        return self._state

    @property
    def preview(self) -> Optional[Preview]:
        return self._session.preview

    @property
    def is_active(self) -> bool:
        return not isinstance(self._state, Idle)

    @property
    def history(self) -> List[str]:
        """Names of the gesture states entered so far."""
        return list(self._session.history)

    def set_entries(self, entries: Iterable[CalendarEntry]) -> None:
        """Replace the entry snapshot.

        Callers should not refresh mid-gesture; if they do and the
        gesture's entry is gone, the gesture ends quietly on the next
        event.
        """
        self._entries = {entry.id: entry for entry in entries}

    # ------------------------------------------------------------------
    # Gesture starts (only from Idle)
    # ------------------------------------------------------------------

    def pointer_down_entry(self, entry_id: int, day_index: int, offset_y: float = 0.0) -> bool:
        """Press on an entry body: start moving it.

        ``day_index`` is the column (or month cell, or banner day) that
        was pressed.  ``offset_y`` is the pointer offset within the day
        column and only matters for timed entries.
        """
        if not self._begin():
            return False
        entry = self._entries.get(entry_id)
        if entry is None:
            return False
        day_index = self._clamp_day(day_index)
        whole_days = self.view == MONTH or is_multi_day(entry, self.config.tz)
        grab = 0.0
        if not whole_days:
            start, _ = entry_bounds(entry, self.config.tz)
            grab = offset_y - pixels_from_minutes(minute_of_day(start), self.config.hour_height)
        self._transition(Moving(entry=entry, origin_day=day_index, origin_offset=grab, whole_days=whole_days))
        return True

    def pointer_down_handle(self, entry_id: int, edge: str) -> bool:
        """Press on a resize handle of a timed entry."""
        if edge not in EDGES:
            raise ValueError(f"Unknown edge {edge!r}")
        if self.view == MONTH or not self._begin():
            return False
        entry = self._entries.get(entry_id)
        if entry is None or is_multi_day(entry, self.config.tz):
            return False
        self._transition(Resizing(entry=entry, edge=edge))
        return True

    def pointer_down_cell(self, day_index: int, offset_y: float) -> bool:
        """Press on empty grid: start drawing a new entry."""
        if self.view == MONTH or not self._begin():
            return False
        day_index = self._clamp_day(day_index)
        cfg = self.config
        anchor = clamp(
            self._snapped_minutes(offset_y),
            0,
            MINUTES_PER_DAY - max(cfg.min_entry_minutes, 0),
        )
        self._transition(Creating(anchor_day=day_index, anchor_offset=anchor))
        length = min(max(cfg.default_create_minutes, cfg.min_entry_minutes), MINUTES_PER_DAY - anchor)
        self._session.preview = self._timed_preview(CREATE, day_index, anchor, anchor + length)
        return True

    # ------------------------------------------------------------------
    # Pointer tracking
    # ------------------------------------------------------------------

    def pointer_move(self, day_index: int, offset_y: float = 0.0) -> Optional[Preview]:
        state = self._state
        if isinstance(state, Idle):
            return None
        if not self._target_present(state):
            return None
        day_index = self._clamp_day(day_index)
        if isinstance(state, Moving):
            preview = self._move_preview(state, day_index, offset_y)
        elif isinstance(state, Resizing):
            preview = self._resize_preview(state, offset_y)
        else:
            preview = self._create_preview(state, offset_y)
        self._session.preview = preview
        return preview

    def pointer_up(self, day_index: Optional[int] = None, offset_y: Optional[float] = None) -> Optional[Commit]:
        """Release: emit the last preview as a commit and return to Idle.

        A release position, when known, counts as a final move.  When it
        is not (released over something that is not a drop target), the
        last preview is committed unchanged.
        """
        state = self._state
        if isinstance(state, Idle):
            return None
        if day_index is not None and offset_y is not None:
            self.pointer_move(day_index, offset_y)
            state = self._state
            if isinstance(state, Idle):
                return None
        if not self._target_present(state):
            return None

        preview = self._session.preview
        self._reset()
        if preview is None:
            # Press and release without movement is a click.
            return None

        if isinstance(state, Creating):
            commit = Commit(kind=CREATE, start=preview.start, end=preview.end)
            callback = self.callbacks.on_entry_create_requested
            args = (commit.start, commit.end)
        else:
            kind = MOVE if isinstance(state, Moving) else RESIZE
            commit = Commit(kind=kind, start=preview.start, end=preview.end, entry=state.entry)
            callback = self.callbacks.on_entry_moved if kind == MOVE else self.callbacks.on_entry_resized
            args = (state.entry, commit.start, commit.end)

        self._session.suppress_click = True
        logger.info("%s gesture committed: %s -> %s", commit.kind, commit.start, commit.end)
        if callback is not None:
            callback(*args)
        return commit

    def pointer_leave(self) -> None:
        """The pointer left the tracking surface: drop the gesture."""
        if self.is_active:
            logger.debug("%s gesture cancelled by pointer leave", self._state.name)
        self._reset()

    # ------------------------------------------------------------------
    # Clicks
    # ------------------------------------------------------------------

    def click_entry(self, entry_id: int) -> bool:
        """Open an entry unless the click belongs to a drag."""
        if self._swallow_click():
            return False
        entry = self._entries.get(entry_id)
        if entry is None:
            return False
        if self.callbacks.on_entry_selected is not None:
            self.callbacks.on_entry_selected(entry)
        return True

    def click_cell(self, day_index: int) -> bool:
        """Click on an empty month cell selects that day."""
        if self.view != MONTH or self._swallow_click():
            return False
        day = self.days[self._clamp_day(day_index)]
        if self.callbacks.on_day_selected is not None:
            self.callbacks.on_day_selected(day)
        return True

    # ------------------------------------------------------------------
    # Previews
    # ------------------------------------------------------------------

    def _move_preview(self, state: Moving, day_index: int, offset_y: float) -> Preview:
        cfg = self.config
        start, end = entry_bounds(state.entry, cfg.tz)
        if state.whole_days:
            shift = day_index - state.origin_day
            new_start, new_end = add_days(start, shift), add_days(end, shift)
            target = self._day_index_of(new_start.date(), day_index)
            return Preview(
                kind=MOVE,
                day_index=target,
                top=0.0,
                height=cfg.all_day_row_height,
                start=new_start,
                end=new_end,
                whole_days=True,
                entry_id=state.entry.id,
            )

        duration = end - start
        duration_minutes = duration.total_seconds() / 60
        top = self._snapped_minutes(offset_y - state.origin_offset)
        latest = MINUTES_PER_DAY - duration_minutes
        if cfg.snap_minutes:
            latest = (latest // cfg.snap_minutes) * cfg.snap_minutes
        top = clamp(top, 0, max(latest, 0))
        day = self.days[day_index]
        new_start = time_at_minutes(day, top, cfg.tz)
        return Preview(
            kind=MOVE,
            day_index=day_index,
            top=pixels_from_minutes(top, cfg.hour_height),
            height=pixels_from_minutes(duration_minutes, cfg.hour_height),
            start=new_start,
            end=new_start + duration,
            entry_id=state.entry.id,
        )

    def _resize_preview(self, state: Resizing, offset_y: float) -> Preview:
        cfg = self.config
        start, end = entry_bounds(state.entry, cfg.tz)
        day = start.date()
        start_m = minute_of_day(start)
        end_m = minute_of_day(end, day)
        pointer = self._snapped_minutes(offset_y)
        floor = cfg.min_entry_minutes
        # The floor wins over the pointer; when it would cross a day edge
        # the fixed edge gives way instead so the range stays on its day.
        if state.edge == TOP:
            start_m = min(max(pointer, 0), end_m - floor)
            if start_m < 0:
                start_m, end_m = 0, max(end_m, floor)
        else:
            end_m = max(min(pointer, MINUTES_PER_DAY), start_m + floor)
            if end_m > MINUTES_PER_DAY:
                start_m, end_m = min(start_m, MINUTES_PER_DAY - floor), MINUTES_PER_DAY
        return self._timed_preview(
            RESIZE, self._day_index_of(day, 0), start_m, end_m, day=day, entry_id=state.entry.id
        )

    def _create_preview(self, state: Creating, offset_y: float) -> Preview:
        pointer = clamp(self._snapped_minutes(offset_y), 0, MINUTES_PER_DAY)
        anchor = state.anchor_offset
        floor = self.config.min_entry_minutes
        if pointer >= anchor:
            top = anchor
            length = max(pointer - anchor, floor)
        else:
            length = max(anchor - pointer, floor)
            top = anchor - length
            if top < 0:
                # Anchor closer to midnight than the floor: grow downward.
                top, length = 0, max(anchor, floor)
        return self._timed_preview(CREATE, state.anchor_day, top, top + length)

    def _timed_preview(
        self,
        kind: str,
        day_index: int,
        start_m: float,
        end_m: float,
        day: Optional[date] = None,
        entry_id: Optional[int] = None,
    ) -> Preview:
        cfg = self.config
        day = day or self.days[day_index]
        return Preview(
            kind=kind,
            day_index=day_index,
            top=pixels_from_minutes(start_m, cfg.hour_height),
            height=pixels_from_minutes(end_m - start_m, cfg.hour_height),
            start=time_at_minutes(day, start_m, cfg.tz),
            end=time_at_minutes(day, end_m, cfg.tz),
            entry_id=entry_id,
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _begin(self) -> bool:
        if self.is_active:
            logger.debug("Ignoring gesture start while %s", self._state.name)
            return False
        self._session.suppress_click = False
        return True

    def _transition(self, state: GestureState) -> None:
        logger.debug("Gesture %s -> %s", self._state.name, state.name)
        self._session.history.append(state.name)
        self._session.preview = None
        self._state = state

    def _reset(self) -> None:
        if self.is_active:
            logger.debug("Gesture %s -> idle", self._state.name)
        self._state = IDLE
        self._session.preview = None

    def _swallow_click(self) -> bool:
        if self.is_active or self._session.suppress_click:
            self._session.suppress_click = False
            return True
        return False

    def _target_present(self, state: GestureState) -> bool:
        if isinstance(state, (Moving, Resizing)) and state.entry.id not in self._entries:
            logger.debug("Entry %s vanished during %s; dropping gesture", state.entry.id, state.name)
            self._reset()
            return False
        return True

    def _snapped_minutes(self, offset_y: float) -> float:
        return snap_to_minutes(
            minutes_from_top(offset_y, self.config.hour_height), self.config.snap_minutes
        )

    def _clamp_day(self, day_index: int) -> int:
        return int(clamp(day_index, 0, len(self.days) - 1))

    def _day_index_of(self, day: date, default: int) -> int:
        try:
            return self.days.index(day)
        except ValueError:
            return default
