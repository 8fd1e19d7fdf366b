from datetime import date, datetime, timedelta, timezone

import pytest

from event_calendar_api.app.calendar.time_utils import (
    DAY,
    MONTH,
    NEXT,
    PREV,
    TODAY,
    WEEK,
    InvalidTimestamp,
    add_months,
    days_in_visible_range,
    format_hour,
    format_period_header,
    format_time,
    get_timezone,
    is_same_day,
    navigate,
    parse_entry_time,
    start_of_day,
    visible_period,
)


def test_parse_utc_suffix():
    parsed = parse_entry_time("2026-10-19T09:00:00Z")
    assert parsed == datetime(2026, 10, 19, 9, 0, tzinfo=timezone.utc)
    assert parsed.utcoffset() == timedelta(0)


def test_parse_naive_is_local_wall_clock():
    berlin = get_timezone("Europe/Berlin")
    parsed = parse_entry_time("2026-10-19T09:00", berlin)
    assert parsed.hour == 9
    assert parsed.tzinfo is berlin


def test_parse_aware_converts_to_local():
    parsed = parse_entry_time("2026-10-19T09:00:00+02:00", timezone.utc)
    assert parsed.hour == 7


def test_parse_accepts_datetime():
    value = datetime(2026, 10, 19, 9, 0)
    assert parse_entry_time(value) == datetime(2026, 10, 19, 9, 0, tzinfo=timezone.utc)


@pytest.mark.parametrize("raw", ["not a date", "", "2026-13-40T00:00", 12345, None])
def test_parse_rejects_garbage(raw):
    with pytest.raises(InvalidTimestamp) as exc_info:
        parse_entry_time(raw)
    assert exc_info.value.raw == raw


def test_unknown_timezone():
    with pytest.raises(ValueError):
        get_timezone("Mars/Olympus_Mons")


def test_local_day_boundaries_follow_timezone():
    tokyo = get_timezone("Asia/Tokyo")
    # 23:30 UTC is already the next morning in Tokyo.
    instant = parse_entry_time("2026-10-19T23:30:00Z", tokyo)
    assert is_same_day(instant, date(2026, 10, 20))
    assert not is_same_day(instant, date(2026, 10, 19))
    assert start_of_day(instant).hour == 0


def test_week_range_is_monday_based():
    days = days_in_visible_range(WEEK, date(2026, 10, 21))
    assert days[0] == date(2026, 10, 19)
    assert days[-1] == date(2026, 10, 25)
    assert len(days) == 7


def test_day_range_is_anchor_only():
    assert days_in_visible_range(DAY, datetime(2026, 10, 21, 15, 0)) == [date(2026, 10, 21)]


def test_month_range_covers_whole_weeks():
    days = days_in_visible_range(MONTH, date(2026, 10, 19))
    assert days[0] == date(2026, 9, 28)
    assert days[-1] == date(2026, 11, 1)
    assert len(days) == 35


def test_month_range_can_be_exactly_four_weeks():
    days = days_in_visible_range(MONTH, date(2027, 2, 10))
    assert days[0] == date(2027, 2, 1)
    assert len(days) == 28


def test_visible_period_is_half_open():
    start, end = visible_period(DAY, date(2026, 10, 19), timezone.utc)
    assert start == datetime(2026, 10, 19, tzinfo=timezone.utc)
    assert end == datetime(2026, 10, 20, tzinfo=timezone.utc)


def test_navigate_steps_by_view():
    anchor = date(2026, 10, 19)
    assert navigate(anchor, DAY, NEXT) == date(2026, 10, 20)
    assert navigate(anchor, WEEK, PREV) == date(2026, 10, 12)
    assert navigate(anchor, MONTH, NEXT) == date(2026, 11, 19)


def test_navigate_month_clamps_short_months():
    assert navigate(date(2026, 1, 31), MONTH, NEXT) == date(2026, 2, 28)
    assert add_months(date(2024, 1, 31), 1) == date(2024, 2, 29)
    assert add_months(date(2026, 1, 15), -1) == date(2025, 12, 15)


def test_navigate_today():
    assert navigate(date(2020, 1, 1), WEEK, TODAY, today=date(2026, 10, 19)) == date(2026, 10, 19)


def test_navigate_rejects_unknown_direction():
    with pytest.raises(ValueError):
        navigate(date(2026, 10, 19), WEEK, "sideways")


def test_format_time():
    assert format_time(datetime(2026, 10, 19, 9, 30)) == "9:30 AM"
    assert format_time(datetime(2026, 10, 19, 0, 5)) == "12:05 AM"
    assert format_time(datetime(2026, 10, 19, 13, 0)) == "1:00 PM"


def test_format_hour():
    assert format_hour(0) == "12 AM"
    assert format_hour(12) == "12 PM"
    assert format_hour(15) == "3 PM"


def test_period_headers():
    assert format_period_header(date(2026, 10, 19), MONTH) == "October 2026"
    assert format_period_header(date(2026, 10, 19), DAY) == "Monday, October 19, 2026"
    assert format_period_header(date(2026, 10, 21), WEEK) == "Oct 19 - 25, 2026"
    assert format_period_header(date(2026, 10, 28), WEEK) == "Oct 26 - Nov 1, 2026"
    assert format_period_header(date(2026, 12, 31), WEEK) == "Dec 28, 2026 - Jan 3, 2027"


def test_start_of_day_on_dst_change():
    berlin = get_timezone("Europe/Berlin")
    # Clocks jump from 02:00 to 03:00 on 2026-03-29.
    noon = parse_entry_time("2026-03-29T10:00:00Z", berlin)
    midnight = start_of_day(noon)

    assert noon.hour == 12
    assert noon.utcoffset() == timedelta(hours=2)
    assert (midnight.date(), midnight.hour, midnight.minute) == (date(2026, 3, 29), 0, 0)
    assert midnight.utcoffset() == timedelta(hours=1)
    assert is_same_day(midnight, noon)


def test_is_same_day_uses_local_dates():
    berlin = get_timezone("Europe/Berlin")
    # 23:30 UTC on the 28th is already 00:30 on the 29th in Berlin.
    late = parse_entry_time("2026-03-28T23:30:00Z", berlin)

    assert is_same_day(late, date(2026, 3, 29))
    assert not is_same_day(late, parse_entry_time("2026-03-28T12:00:00Z", berlin))
    assert not is_same_day(parse_entry_time("2026-03-28T23:30:00Z"), date(2026, 3, 29))
