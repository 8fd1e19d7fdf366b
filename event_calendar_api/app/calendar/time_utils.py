"""
Date and time helpers for the scheduling views.

Every entry timestamp that reaches the layout engine goes through
``parse_entry_time`` first, which pins it to the configured local
timezone.  From then on all "same day" questions are answered with
local wall-clock dates: a multi-day entry spans dates, not a number of
elapsed hours.

Days in a visible range are plain ``datetime.date`` values; the
instant at which a day begins is obtained with ``day_start``.
"""

from __future__ import annotations

import calendar
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from functools import lru_cache
from typing import List, Optional, Tuple, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

DAY = "day"
WEEK = "week"
MONTH = "month"
VIEWS = (DAY, WEEK, MONTH)

PREV = "prev"
NEXT = "next"
TODAY = "today"
DIRECTIONS = (PREV, NEXT, TODAY)

DateLike = Union[date, datetime]


class InvalidTimestamp(ValueError):
    """Raised when an entry timestamp cannot be parsed."""

    def __init__(self, raw: object) -> None:
        super().__init__(f"Invalid timestamp: {raw!r}")
        self.raw = raw


@lru_cache(maxsize=32)
def get_timezone(name: str) -> tzinfo:
    """Resolve an IANA timezone name.  ``UTC`` never needs tzdata."""
    if name.upper() in {"UTC", "Z"}:
        return timezone.utc
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ValueError(f"Unknown timezone {name!r}") from exc


def parse_entry_time(raw: Union[str, datetime], tz: Optional[tzinfo] = None) -> datetime:
    """Return ``raw`` as an aware datetime in the local timezone ``tz``.

    Accepts ``datetime`` objects and ISO-8601 strings; a trailing ``Z``
    means UTC.  Naive values are taken to be local wall-clock time
    already.  Anything else raises ``InvalidTimestamp``; values are
    never coerced.
    """
    tz = tz or timezone.utc
    if isinstance(raw, datetime):
        value = raw
    elif isinstance(raw, str):
        text = raw.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            value = datetime.fromisoformat(text)
        except ValueError as exc:
            raise InvalidTimestamp(raw) from exc
    else:
        raise InvalidTimestamp(raw)

    if value.tzinfo is None:
        return value.replace(tzinfo=tz)
    return value.astimezone(tz)


def to_date(value: DateLike) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def day_start(day: date, tz: Optional[tzinfo] = None) -> datetime:
    """Local midnight at the beginning of ``day``."""
    return datetime.combine(day, time.min, tzinfo=tz or timezone.utc)


def start_of_day(instant: datetime) -> datetime:
    return instant.replace(hour=0, minute=0, second=0, microsecond=0)


def is_same_day(a: datetime, b: DateLike) -> bool:
    """Compare local calendar dates.  ``b`` may be a plain date."""
    return to_date(a) == to_date(b)


def add_days(instant: datetime, days: int) -> datetime:
    # Aware arithmetic keeps the wall-clock time across DST changes.
    return instant + timedelta(days=days)


def add_months(day: date, months: int) -> date:
    """Shift by calendar months, clamping to the target month's length."""
    month_index = day.month - 1 + months
    year = day.year + month_index // 12
    month = month_index % 12 + 1
    last = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last))


def start_of_week(day: date) -> date:
    """Monday of the week containing ``day``."""
    return day - timedelta(days=day.weekday())


def days_in_visible_range(view: str, anchor: DateLike) -> List[date]:
    """Ordered days shown by ``view`` around ``anchor``.

    Day view shows the anchor alone, week view the Monday-based week,
    and month view whole Monday..Sunday weeks covering the anchor's
    month (28 to 42 days).
    """
    anchor = to_date(anchor)
    if view == DAY:
        return [anchor]
    if view == WEEK:
        first = start_of_week(anchor)
        return [first + timedelta(days=i) for i in range(7)]
    if view == MONTH:
        month_first = anchor.replace(day=1)
        month_last = anchor.replace(day=calendar.monthrange(anchor.year, anchor.month)[1])
        first = start_of_week(month_first)
        last = month_last + timedelta(days=6 - month_last.weekday())
        return [first + timedelta(days=i) for i in range((last - first).days + 1)]
    raise ValueError(f"Unknown view {view!r}")


def visible_period(view: str, anchor: DateLike, tz: Optional[tzinfo] = None) -> Tuple[datetime, datetime]:
    """Half-open instant range ``[first day 00:00, day after last 00:00)``."""
    days = days_in_visible_range(view, anchor)
    return day_start(days[0], tz), day_start(days[-1] + timedelta(days=1), tz)


def navigate(
    anchor: DateLike,
    view: str,
    direction: str,
    tz: Optional[tzinfo] = None,
    today: Optional[date] = None,
) -> date:
    """Return the anchor of the previous/next period, or today's date."""
    anchor = to_date(anchor)
    if direction == TODAY:
        return today or datetime.now(tz or timezone.utc).date()
    if direction not in (PREV, NEXT):
        raise ValueError(f"Unknown direction {direction!r}")
    step = 1 if direction == NEXT else -1
    if view == DAY:
        return anchor + timedelta(days=step)
    if view == WEEK:
        return anchor + timedelta(days=7 * step)
    if view == MONTH:
        return add_months(anchor, step)
    raise ValueError(f"Unknown view {view!r}")


def format_time(instant: datetime) -> str:
    """``9:30 AM`` style label used on entries and previews."""
    hour = instant.hour % 12 or 12
    suffix = "AM" if instant.hour < 12 else "PM"
    return f"{hour}:{instant.minute:02d} {suffix}"


def format_hour(hour: int) -> str:
    """Row label for the hour gutter (``12 AM``, ``1 PM``...)."""
    return f"{hour % 12 or 12} {'AM' if hour % 24 < 12 else 'PM'}"


def format_period_header(anchor: DateLike, view: str) -> str:
    anchor = to_date(anchor)
    if view == MONTH:
        return anchor.strftime("%B %Y")
    if view == DAY:
        return f"{anchor.strftime('%A, %B')} {anchor.day}, {anchor.year}"
    days = days_in_visible_range(WEEK, anchor)
    first, last = days[0], days[-1]
    if first.year != last.year:
        return (
            f"{first.strftime('%b')} {first.day}, {first.year} - "
            f"{last.strftime('%b')} {last.day}, {last.year}"
        )
    if first.month != last.month:
        return f"{first.strftime('%b')} {first.day} - {last.strftime('%b')} {last.day}, {last.year}"
    return f"{first.strftime('%b')} {first.day} - {last.day}, {last.year}"
