"""
Response models for rendered calendar views.

They mirror the frozen dataclasses produced by the renderers in
``app.calendar.views`` and are validated straight from those objects
(``from_attributes``), so the renderers stay free of pydantic.
"""

from datetime import date, datetime
from typing import List, Literal, Optional

from pydantic import BaseModel

from .entry import CalendarEntry

ViewName = Literal["day", "week", "month"]
Direction = Literal["prev", "next", "today"]

_ORM = {"from_attributes": True}


class PreviewRead(BaseModel):
    kind: str
    day_index: int
    top: float
    height: float
    start: datetime
    end: datetime
    whole_days: bool = False
    entry_id: Optional[int] = None

    model_config = _ORM


class TimedRectRead(BaseModel):
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

    model_config = _ORM


class AllDayBarRead(BaseModel):
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

    model_config = _ORM


class TimeGridRead(BaseModel):
    """Day or week view."""

    view: ViewName
    anchor: date
    days: List[date]
    today_index: Optional[int] = None
    hours: List[str]
    hour_height: float
    timed: List[TimedRectRead]
    all_day: List[AllDayBarRead]
    all_day_rows: int
    all_day_height: float
    preview: Optional[PreviewRead] = None

    model_config = _ORM


class MonthChipRead(BaseModel):
    entry: CalendarEntry
    color: Optional[str] = None
    is_multi_day: bool
    starts_today: bool
    continues_from_previous: bool
    continues_to_next: bool
    is_dragging: bool = False

    model_config = _ORM


class MonthCellRead(BaseModel):
    day: date
    in_month: bool
    is_today: bool
    chips: List[MonthChipRead]
    overflow: int
    is_drop_target: bool = False

    model_config = _ORM


class MonthRead(BaseModel):
    view: Literal["month"]
    anchor: date
    days: List[date]
    weeks: List[List[MonthCellRead]]
    preview: Optional[PreviewRead] = None

    model_config = _ORM


class NavigationRead(BaseModel):
    """Result of stepping a view to the previous/next period or today."""

    view: ViewName
    anchor: date
    period_start: datetime
    period_end: datetime
    header: str
