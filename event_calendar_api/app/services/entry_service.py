"""
Business logic for calendar entries.

This service is the data layer the scheduling views consume:
``get_visible_entries`` supplies a fresh snapshot per render and
``reschedule_entry`` persists the ranges proposed by drag gestures.
Timestamps are validated with ``parse_entry_time`` on the way in and
on the way out, so a corrupt row fails loudly instead of being coerced.
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional

from event_calendar_api.app.calendar.time_utils import get_timezone, parse_entry_time
from event_calendar_api.app.core.config import settings
from event_calendar_api.app.core.db import get_connection
from event_calendar_api.app.core.errors import NotFoundError
from event_calendar_api.app.schemas.entry import CalendarEntry, EntryCreate

logger = logging.getLogger(__name__)

ENTRY_COLUMNS = (
    "id, calendar_id, title, description, location, start_time, end_time, is_all_day"
)
UPDATABLE_FIELDS = {
    "title", "description", "location", "start_time", "end_time", "is_all_day", "calendar_id",
}


def local_tz():
    return get_timezone(settings.timezone)


def to_storage(value) -> str:
    """Normalise a timestamp to UTC ISO text for storage and range queries."""
    return parse_entry_time(value, local_tz()).astimezone(timezone.utc).isoformat(timespec="microseconds")


def _row_to_entry(row) -> CalendarEntry:
    tz = local_tz()
    return CalendarEntry(
        id=row["id"],
        calendar_id=row["calendar_id"],
        title=row["title"],
        description=row["description"],
        location=row["location"],
        start_time=parse_entry_time(row["start_time"], tz),
        end_time=parse_entry_time(row["end_time"], tz),
        is_all_day=bool(row["is_all_day"]),
    )


def _fetch(cursor, entry_id: int) -> CalendarEntry:
    row = cursor.execute(
        f"SELECT {ENTRY_COLUMNS} FROM calendar_entries WHERE id = ?", (entry_id,)
    ).fetchone()
    if not row:
        raise NotFoundError("entry", entry_id)
    return _row_to_entry(row)


def _check_calendar(cursor, calendar_id: Optional[int]) -> None:
    if calendar_id is None:
        return
    if not cursor.execute("SELECT id FROM calendars WHERE id = ?", (calendar_id,)).fetchone():
        raise NotFoundError("calendar", calendar_id)


class EntryService:
    """Сервис для записей календаря: CRUD и выборка по видимому периоду."""

    @classmethod
    async def create_entry(cls, data: EntryCreate) -> CalendarEntry:
        """Insert an entry and return it.

        Entries sent without ``calendar_id`` are filed under the default
        calendar when there is one.
        """
        logger.info("Creating entry '%s' (%s - %s)", data.title, data.start_time, data.end_time)
        conn = get_connection()
        try:
            cursor = conn.cursor()
            calendar_id = data.calendar_id
            if calendar_id is None:
                row = cursor.execute(
                    "SELECT id FROM calendars WHERE is_default = 1 ORDER BY id LIMIT 1"
                ).fetchone()
                calendar_id = row["id"] if row else None
            _check_calendar(cursor, calendar_id)
            cursor.execute(
                """
                INSERT INTO calendar_entries
                    (calendar_id, title, description, location, start_time, end_time, is_all_day)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    calendar_id,
                    data.title,
                    data.description,
                    data.location,
                    to_storage(data.start_time),
                    to_storage(data.end_time),
                    int(data.is_all_day),
                ),
            )
            entry_id = cursor.lastrowid
            conn.commit()
            return _fetch(cursor, entry_id)
        finally:
            conn.close()

    @classmethod
    async def get_entry(cls, entry_id: int) -> CalendarEntry:
        conn = get_connection()
        try:
            return _fetch(conn.cursor(), entry_id)
        finally:
            conn.close()

    @classmethod
    async def get_visible_entries(
        cls,
        period_start: datetime,
        period_end: datetime,
        calendar_id: Optional[int] = None,
    ) -> List[CalendarEntry]:
        """Entries intersecting ``[period_start, period_end)``, ordered by start.

        Zero-length entries sitting exactly on ``period_start`` are
        included.
        """
        query = (
            f"SELECT {ENTRY_COLUMNS} FROM calendar_entries "
            "WHERE start_time < ? AND end_time >= ?"
        )
        params: list = [to_storage(period_end), to_storage(period_start)]
        if calendar_id is not None:
            query += " AND calendar_id = ?"
            params.append(calendar_id)
        query += " ORDER BY start_time, id"
        conn = get_connection()
        try:
            rows = conn.execute(query, tuple(params)).fetchall()
            return [_row_to_entry(row) for row in rows]
        finally:
            conn.close()

    @classmethod
    async def update_entry(cls, entry_id: int, updates: dict) -> CalendarEntry:
        """Update the provided fields of an entry.

        A change to only one end of the time range is checked against
        the stored other end; an inverted range raises ``ValueError``.
        """
        fields = {k: v for k, v in updates.items() if k in UPDATABLE_FIELDS}
        conn = get_connection()
        try:
            cursor = conn.cursor()
            current = _fetch(cursor, entry_id)
            if not fields:
                return current
            start = parse_entry_time(fields.get("start_time", current.start_time), local_tz())
            end = parse_entry_time(fields.get("end_time", current.end_time), local_tz())
            if end < start:
                raise ValueError("end_time must not be earlier than start_time")
            if "calendar_id" in fields:
                _check_calendar(cursor, fields["calendar_id"])

            values = []
            for key, value in fields.items():
                if key in ("start_time", "end_time"):
                    value = to_storage(value)
                elif isinstance(value, bool):
                    value = int(value)
                values.append(value)
            assignments = ", ".join(f"{key} = ?" for key in fields)
            cursor.execute(
                f"UPDATE calendar_entries SET {assignments}, updated_at = CURRENT_TIMESTAMP WHERE id = ?",
                (*values, entry_id),
            )
            conn.commit()
            logger.info("Updated entry %s: %s", entry_id, sorted(fields))
            return _fetch(cursor, entry_id)
        finally:
            conn.close()

    @classmethod
    async def reschedule_entry(cls, entry_id: int, new_start: datetime, new_end: datetime) -> CalendarEntry:
        """Persist a moved or resized range."""
        return await cls.update_entry(entry_id, {"start_time": new_start, "end_time": new_end})

    @classmethod
    async def delete_entry(cls, entry_id: int) -> None:
        conn = get_connection()
        try:
            cursor = conn.cursor()
            if not cursor.execute("SELECT id FROM calendar_entries WHERE id = ?", (entry_id,)).fetchone():
                raise NotFoundError("entry", entry_id)
            cursor.execute("DELETE FROM calendar_entries WHERE id = ?", (entry_id,))
            conn.commit()
            logger.info("Deleted entry %s", entry_id)
        finally:
            conn.close()
