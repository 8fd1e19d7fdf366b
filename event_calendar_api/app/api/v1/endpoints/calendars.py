"""
Calendar endpoints for API v1.

Calendars group entries and own the colour and visibility flag the
scheduling views read.  Hiding a calendar removes its entries from
every rendered view without touching the entries themselves.
"""

from typing import List

from fastapi import APIRouter, HTTPException, status

from event_calendar_api.app.core.errors import NotFoundError
from event_calendar_api.app.schemas.calendar import CalendarCreate, CalendarRead, CalendarUpdate
from event_calendar_api.app.services.calendar_service import CalendarService

router = APIRouter()


@router.get("/", response_model=List[CalendarRead])
async def list_calendars() -> List[CalendarRead]:
    return await CalendarService.list_calendars()


@router.post("/", response_model=CalendarRead, status_code=status.HTTP_201_CREATED)
async def create_calendar(calendar: CalendarCreate) -> CalendarRead:
    """Create a calendar.  ``is_default`` moves the default flag to it."""
    return await CalendarService.create_calendar(calendar)


@router.put("/{calendar_id}", response_model=CalendarRead)
async def update_calendar(calendar_id: int, updates: CalendarUpdate) -> CalendarRead:
    """Partially update a calendar (name, colour, visibility, default flag)."""
    update_dict = {k: v for k, v in updates.model_dump().items() if v is not None}
    try:
        return await CalendarService.update_calendar(calendar_id, update_dict)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e


@router.delete("/{calendar_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_calendar(calendar_id: int) -> None:
    """Delete a calendar; its entries stay and lose their calendar."""
    try:
        await CalendarService.delete_calendar(calendar_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    return None
