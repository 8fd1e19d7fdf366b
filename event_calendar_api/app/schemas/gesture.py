"""
Pydantic models for replaying pointer gestures.

A replay request carries the view being interacted with and the
recorded pointer events, already resolved by the client to grid
coordinates: the day column (or month cell) index and the vertical
offset in pixels inside that column.
"""

from datetime import date, datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, model_validator

from .entry import CalendarEntry
from .view import PreviewRead, ViewName


class PointerEvent(BaseModel):
    type: Literal["down", "move", "up", "leave", "click"] = Field(..., example="down")
    target: Literal["entry", "handle", "cell"] = Field("cell", example="entry")
    entry_id: Optional[int] = Field(None, example=1)
    edge: Optional[Literal["top", "bottom"]] = Field(None, example="bottom")
    day_index: Optional[int] = Field(None, ge=0, example=0)
    y: Optional[float] = Field(None, example=600)

    @model_validator(mode="after")
    def _check_target(self):
        if self.type in ("down", "click") and self.target in ("entry", "handle") and self.entry_id is None:
            raise ValueError(f"{self.target} events need an entry_id")
        if self.type == "down" and self.target == "handle" and self.edge is None:
            raise ValueError("handle events need an edge")
        if self.type == "move" and self.day_index is None:
            raise ValueError("move events need a day_index")
        return self


class GestureReplay(BaseModel):
    """A recorded pointer session for one view."""

    view: ViewName = Field("week", example="week")
    anchor: date = Field(..., example="2026-10-19")
    events: List[PointerEvent] = Field(..., min_length=1)
    # Title and calendar for entries drawn with drag-to-create.
    title: str = Field("New Event", min_length=1)
    calendar_id: Optional[int] = None
    # Compute commits without persisting them.
    dry_run: bool = False


class CommitRead(BaseModel):
    kind: Literal["move", "resize", "create"]
    start: datetime
    end: datetime
    entry_id: Optional[int] = None
    persisted: Optional[CalendarEntry] = None


class GestureReplayResult(BaseModel):
    state: str
    transitions: List[str]
    preview: Optional[PreviewRead] = None
    commits: List[CommitRead]
    selected_entry_id: Optional[int] = None
    selected_day: Optional[date] = None
