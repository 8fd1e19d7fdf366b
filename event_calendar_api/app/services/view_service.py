"""
Rendering of calendar views from stored data.

The service wires the data layer to the scheduling core: it fetches
the entries of the visible period and the calendar style table, then
hands both to the pure renderers.
"""

from datetime import date, datetime
from typing import Optional

from event_calendar_api.app.calendar.geometry import CalendarConfig
from event_calendar_api.app.calendar.time_utils import (
    format_period_header,
    navigate,
    visible_period,
)
from event_calendar_api.app.calendar.views import render_view
from event_calendar_api.app.core.config import settings
from event_calendar_api.app.schemas.view import NavigationRead
from event_calendar_api.app.services.calendar_service import CalendarService
from event_calendar_api.app.services.entry_service import EntryService


def current_config() -> CalendarConfig:
    return CalendarConfig.from_settings(settings)


class ViewService:
    """Builds day, week and month layouts for the HTTP layer."""

    @classmethod
    async def render(cls, view: str, anchor: date, today: Optional[date] = None):
        """Return the layout dataclass for ``view`` around ``anchor``."""
        config = current_config()
        period_start, period_end = visible_period(view, anchor, config.tz)
        entries = await EntryService.get_visible_entries(period_start, period_end)
        styles = await CalendarService.get_calendar_styles()
        today = today or datetime.now(config.tz).date()
        return render_view(view, anchor, entries, styles, config, today=today)

    @classmethod
    async def navigate(
        cls, view: str, anchor: date, direction: str, today: Optional[date] = None
    ) -> NavigationRead:
        config = current_config()
        new_anchor = navigate(anchor, view, direction, tz=config.tz, today=today)
        period_start, period_end = visible_period(view, new_anchor, config.tz)
        return NavigationRead(
            view=view,
            anchor=new_anchor,
            period_start=period_start,
            period_end=period_end,
            header=format_period_header(new_anchor, view),
        )
