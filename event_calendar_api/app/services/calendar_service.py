"""
Business logic for calendars.

Calendars carry the colour and visibility flag the scheduling views
read through ``get_calendar_styles``.  Exactly one calendar is marked
as the default; entries created without an explicit calendar land
there.
"""

import logging
from typing import Dict, List, Optional

from event_calendar_api.app.core.db import get_connection
from event_calendar_api.app.core.errors import NotFoundError
from event_calendar_api.app.schemas.calendar import (
    CalendarCreate,
    CalendarRead,
    CalendarStyle,
)

logger = logging.getLogger(__name__)

CALENDAR_COLUMNS = "id, name, color, is_visible, is_default"
UPDATABLE_FIELDS = {"name", "color", "is_visible", "is_default"}


def _row_to_calendar(row) -> CalendarRead:
    return CalendarRead(
        id=row["id"],
        name=row["name"],
        color=row["color"],
        is_visible=bool(row["is_visible"]),
        is_default=bool(row["is_default"]),
    )


class CalendarService:
    """Сервис для управления календарями мероприятия."""

    @classmethod
    async def list_calendars(cls) -> List[CalendarRead]:
        conn = get_connection()
        try:
            rows = conn.execute(f"SELECT {CALENDAR_COLUMNS} FROM calendars ORDER BY id").fetchall()
            return [_row_to_calendar(row) for row in rows]
        finally:
            conn.close()

    @classmethod
    async def get_calendar(cls, calendar_id: int) -> CalendarRead:
        """Return a calendar or raise ``NotFoundError``."""
        conn = get_connection()
        try:
            row = conn.execute(
                f"SELECT {CALENDAR_COLUMNS} FROM calendars WHERE id = ?", (calendar_id,)
            ).fetchone()
            if not row:
                raise NotFoundError("calendar", calendar_id)
            return _row_to_calendar(row)
        finally:
            conn.close()

    @classmethod
    async def create_calendar(cls, data: CalendarCreate) -> CalendarRead:
        """Insert a calendar.  Marking it default clears the previous default."""
        logger.info("Creating calendar '%s'", data.name)
        conn = get_connection()
        try:
            cursor = conn.cursor()
            if data.is_default:
                cursor.execute("UPDATE calendars SET is_default = 0 WHERE is_default = 1")
            cursor.execute(
                "INSERT INTO calendars (name, color, is_visible, is_default) VALUES (?, ?, ?, ?)",
                (data.name, data.color, int(data.is_visible), int(data.is_default)),
            )
            calendar_id = cursor.lastrowid
            conn.commit()
            return CalendarRead(id=calendar_id, **data.model_dump())
        finally:
            conn.close()

    @classmethod
    async def update_calendar(cls, calendar_id: int, updates: dict) -> CalendarRead:
        """Update the provided fields of a calendar.

        Typical use is toggling ``is_visible`` from the sidebar or
        changing ``color``.  Unknown keys are ignored.
        """
        fields = {k: v for k, v in updates.items() if k in UPDATABLE_FIELDS}
        conn = get_connection()
        try:
            cursor = conn.cursor()
            if not cursor.execute("SELECT id FROM calendars WHERE id = ?", (calendar_id,)).fetchone():
                raise NotFoundError("calendar", calendar_id)
            if fields:
                if fields.get("is_default"):
                    cursor.execute("UPDATE calendars SET is_default = 0 WHERE id != ?", (calendar_id,))
                assignments = ", ".join(f"{key} = ?" for key in fields)
                values = [int(v) if isinstance(v, bool) else v for v in fields.values()]
                cursor.execute(
                    f"UPDATE calendars SET {assignments}, updated_at = CURRENT_TIMESTAMP WHERE id = ?",
                    (*values, calendar_id),
                )
                conn.commit()
                logger.info("Updated calendar %s: %s", calendar_id, sorted(fields))
            row = cursor.execute(
                f"SELECT {CALENDAR_COLUMNS} FROM calendars WHERE id = ?", (calendar_id,)
            ).fetchone()
            return _row_to_calendar(row)
        finally:
            conn.close()

    @classmethod
    async def delete_calendar(cls, calendar_id: int) -> None:
        """Delete a calendar.  Its entries are kept and lose their calendar."""
        conn = get_connection()
        try:
            cursor = conn.cursor()
            if not cursor.execute("SELECT id FROM calendars WHERE id = ?", (calendar_id,)).fetchone():
                raise NotFoundError("calendar", calendar_id)
            cursor.execute("DELETE FROM calendars WHERE id = ?", (calendar_id,))
            conn.commit()
            logger.info("Deleted calendar %s", calendar_id)
        finally:
            conn.close()

    @classmethod
    async def get_default_calendar_id(cls) -> Optional[int]:
        conn = get_connection()
        try:
            row = conn.execute(
                "SELECT id FROM calendars WHERE is_default = 1 ORDER BY id LIMIT 1"
            ).fetchone()
            return row["id"] if row else None
        finally:
            conn.close()

    @classmethod
    async def get_calendar_styles(cls) -> Dict[int, CalendarStyle]:
        """Side table ``calendar_id -> CalendarStyle`` for the renderers."""
        conn = get_connection()
        try:
            rows = conn.execute("SELECT id, color, is_visible FROM calendars").fetchall()
            return {
                row["id"]: CalendarStyle(id=row["id"], color=row["color"], is_visible=bool(row["is_visible"]))
                for row in rows
            }
        finally:
            conn.close()
