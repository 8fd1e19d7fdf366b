"""
Information endpoint for API v1.

Returns the service name and version together with the calendar
tuning constants, so a client can size its grid to match the pixel
math the server uses when replaying gestures.
"""

from typing import Any, Dict

from fastapi import APIRouter

from event_calendar_api.app.core.config import settings
from event_calendar_api.app.services.view_service import current_config

router = APIRouter()


@router.get("/", response_model=Dict[str, Any])
async def get_info() -> Dict[str, Any]:
    config = current_config()
    return {
        "name": settings.project_name,
        "version": settings.api_version,
        "calendar": {
            "timezone": config.timezone,
            "hour_height": config.hour_height,
            "snap_minutes": config.snap_minutes,
            "month_overflow_cap": config.month_overflow_cap,
            "min_entry_minutes": config.min_entry_minutes,
            "all_day_row_height": config.all_day_row_height,
            "default_create_minutes": config.default_create_minutes,
        },
    }
