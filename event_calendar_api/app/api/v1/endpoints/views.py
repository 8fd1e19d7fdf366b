"""
Rendered view endpoints for API v1.

``GET /views/{view}`` returns the positioned rectangles of a day, week
or month view; clients only paint them.  ``GET /views/{view}/navigate``
steps the anchor to the previous or next period (or today) and returns
the new visible range with its header label.
"""

from datetime import date
from typing import Union

from fastapi import APIRouter, Query

from event_calendar_api.app.schemas.view import (
    Direction,
    MonthRead,
    NavigationRead,
    TimeGridRead,
    ViewName,
)
from event_calendar_api.app.services.view_service import ViewService

router = APIRouter()


@router.get("/{view}", response_model=Union[TimeGridRead, MonthRead])
async def render_view(
    view: ViewName,
    anchor: date = Query(..., description="Any date inside the period to show."),
) -> Union[TimeGridRead, MonthRead]:
    layout = await ViewService.render(view, anchor)
    if view == "month":
        return MonthRead.model_validate(layout)
    return TimeGridRead.model_validate(layout)


@router.get("/{view}/navigate", response_model=NavigationRead)
async def navigate_view(
    view: ViewName,
    anchor: date = Query(...),
    direction: Direction = Query(..., description="prev, next or today"),
) -> NavigationRead:
    return await ViewService.navigate(view, anchor, direction)
