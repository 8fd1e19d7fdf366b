"""
Replay of recorded pointer sessions.

Clients that render the calendar themselves record the pointer events
of a drag and post them here.  The service runs them through a fresh
``GestureController`` for the requested view and acts as the
controller's caller: commits arrive through the callbacks, are queued,
and are persisted once the event that produced them has been handled.
After each persisted commit the controller's snapshot is refreshed so
later gestures in the same session see the new times.
"""

import logging
from datetime import date
from typing import List, Optional

from event_calendar_api.app.calendar.gestures import (
    CREATE,
    MOVE,
    RESIZE,
    Commit,
    GestureCallbacks,
    GestureController,
)
from event_calendar_api.app.calendar.layout import filter_visible
from event_calendar_api.app.calendar.time_utils import days_in_visible_range, visible_period
from event_calendar_api.app.schemas.entry import CalendarEntry, EntryCreate
from event_calendar_api.app.schemas.gesture import (
    CommitRead,
    GestureReplay,
    GestureReplayResult,
    PointerEvent,
)
from event_calendar_api.app.schemas.view import PreviewRead
from event_calendar_api.app.services.calendar_service import CalendarService
from event_calendar_api.app.services.entry_service import EntryService
from event_calendar_api.app.services.view_service import current_config

logger = logging.getLogger(__name__)


class _Recorder:
    """Collects what the controller emits during one replay."""

    def __init__(self) -> None:
        self.pending: List[Commit] = []
        self.selected_entry_id: Optional[int] = None
        self.selected_day: Optional[date] = None

    def callbacks(self) -> GestureCallbacks:
        return GestureCallbacks(
            on_entry_moved=lambda entry, start, end: self.pending.append(
                Commit(kind=MOVE, start=start, end=end, entry=entry)
            ),
            on_entry_resized=lambda entry, start, end: self.pending.append(
                Commit(kind=RESIZE, start=start, end=end, entry=entry)
            ),
            on_entry_create_requested=lambda start, end: self.pending.append(
                Commit(kind=CREATE, start=start, end=end)
            ),
            on_entry_selected=self._select_entry,
            on_day_selected=self._select_day,
        )

    def _select_entry(self, entry: CalendarEntry) -> None:
        self.selected_entry_id = entry.id

    def _select_day(self, day: date) -> None:
        self.selected_day = day


def _dispatch(controller: GestureController, event: PointerEvent) -> None:
    day_index = event.day_index if event.day_index is not None else 0
    y = event.y if event.y is not None else 0.0
    if event.type == "down":
        if event.target == "entry":
            controller.pointer_down_entry(event.entry_id, day_index, y)
        elif event.target == "handle":
            controller.pointer_down_handle(event.entry_id, event.edge)
        else:
            controller.pointer_down_cell(day_index, y)
    elif event.type == "move":
        controller.pointer_move(day_index, y)
    elif event.type == "up":
        controller.pointer_up(event.day_index, event.y)
    elif event.type == "leave":
        controller.pointer_leave()
    elif event.target == "cell":
        controller.click_cell(day_index)
    else:
        controller.click_entry(event.entry_id)


class GestureService:
    """Runs pointer sessions through the gesture state machine."""

    @classmethod
    async def replay(cls, request: GestureReplay) -> GestureReplayResult:
        """Replay ``request.events`` and persist the resulting commits.

        With ``dry_run`` the commits are reported but nothing is
        written.  Entries of hidden calendars are not part of the
        snapshot and cannot be grabbed.
        """
        config = current_config()
        period_start, period_end = visible_period(request.view, request.anchor, config.tz)
        styles = await CalendarService.get_calendar_styles()
        entries = filter_visible(await EntryService.get_visible_entries(period_start, period_end), styles)
        snapshot = {entry.id: entry for entry in entries}

        recorder = _Recorder()
        controller = GestureController(
            request.view,
            days_in_visible_range(request.view, request.anchor),
            entries,
            config,
            recorder.callbacks(),
        )

        commits: List[CommitRead] = []
        for event in request.events:
            _dispatch(controller, event)
            while recorder.pending:
                commit = recorder.pending.pop(0)
                persisted = None
                if not request.dry_run:
                    persisted = await cls._persist(commit, request)
                    snapshot[persisted.id] = persisted
                    controller.set_entries(snapshot.values())
                commits.append(
                    CommitRead(
                        kind=commit.kind,
                        start=commit.start,
                        end=commit.end,
                        entry_id=commit.entry.id if commit.entry else None,
                        persisted=persisted,
                    )
                )

        preview = controller.preview
        return GestureReplayResult(
            state=controller.state.name,
            transitions=controller.history,
            preview=PreviewRead.model_validate(preview) if preview else None,
            commits=commits,
            selected_entry_id=recorder.selected_entry_id,
            selected_day=recorder.selected_day,
        )

    @classmethod
    async def _persist(cls, commit: Commit, request: GestureReplay) -> CalendarEntry:
        if commit.kind == CREATE:
            logger.info("Creating '%s' from drag %s - %s", request.title, commit.start, commit.end)
            return await EntryService.create_entry(
                EntryCreate(
                    title=request.title,
                    start_time=commit.start,
                    end_time=commit.end,
                    calendar_id=request.calendar_id,
                )
            )
        return await EntryService.reschedule_entry(commit.entry.id, commit.start, commit.end)
