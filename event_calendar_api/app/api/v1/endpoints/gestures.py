"""
Gesture replay endpoint for API v1.

A client posts the pointer events of one interaction (press, moves,
release) in grid coordinates.  The server runs them through the same
state machine the views are designed around and persists the
resulting move, resize or create.  ``dry_run`` returns the commits
without writing them, which clients use for live previews.
"""

from fastapi import APIRouter, HTTPException, status

from event_calendar_api.app.core.errors import NotFoundError
from event_calendar_api.app.schemas.gesture import GestureReplay, GestureReplayResult
from event_calendar_api.app.services.gesture_service import GestureService

router = APIRouter()


@router.post("/replay", response_model=GestureReplayResult)
async def replay_gesture(request: GestureReplay) -> GestureReplayResult:
    try:
        return await GestureService.replay(request)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
