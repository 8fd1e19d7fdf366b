"""
Calendar entry endpoints for API v1.

CRUD for entries plus the period query the views are built from.  The
``start``/``end`` filters are parsed with the same strict timestamp
parser the scheduling core uses; an unparsable value is a 422, never
silently ignored.
"""

from typing import List, Optional

from fastapi import APIRouter, HTTPException, Query, status

from event_calendar_api.app.calendar.time_utils import InvalidTimestamp, parse_entry_time
from event_calendar_api.app.core.errors import NotFoundError
from event_calendar_api.app.schemas.entry import CalendarEntry, EntryCreate, EntryUpdate
from event_calendar_api.app.services.entry_service import EntryService, local_tz

router = APIRouter()


@router.get("/", response_model=List[CalendarEntry])
async def list_entries(
    start: str = Query(..., description="Period start (ISO-8601); naive values are local time."),
    end: str = Query(..., description="Period end, exclusive (ISO-8601)."),
    calendar_id: Optional[int] = Query(None),
) -> List[CalendarEntry]:
    """Entries intersecting ``[start, end)``, ordered by start time."""
    try:
        period_start = parse_entry_time(start, local_tz())
        period_end = parse_entry_time(end, local_tz())
    except InvalidTimestamp as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e)) from e
    if period_end < period_start:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="end must not be earlier than start",
        )
    return await EntryService.get_visible_entries(period_start, period_end, calendar_id)


@router.post("/", response_model=CalendarEntry, status_code=status.HTTP_201_CREATED)
async def create_entry(entry: EntryCreate) -> CalendarEntry:
    try:
        return await EntryService.create_entry(entry)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e


@router.get("/{entry_id}", response_model=CalendarEntry)
async def get_entry(entry_id: int) -> CalendarEntry:
    try:
        return await EntryService.get_entry(entry_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e


@router.put("/{entry_id}", response_model=CalendarEntry)
async def update_entry(entry_id: int, updates: EntryUpdate) -> CalendarEntry:
    """Partially update an entry.

    This is also the endpoint a client calls to persist a move or
    resize it computed locally.
    """
    update_dict = {k: v for k, v in updates.model_dump().items() if v is not None}
    try:
        return await EntryService.update_entry(entry_id, update_dict)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e)) from e


@router.delete("/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_entry(entry_id: int) -> None:
    try:
        await EntryService.delete_entry(entry_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    return None
