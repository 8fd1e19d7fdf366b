import random
from datetime import timedelta

from event_calendar_api.app.calendar.layout import (
    categorize_entries,
    entry_bounds,
    entry_days,
    entry_occurs_on_day,
    entry_starts_on,
    filter_visible,
    is_multi_day,
    pack_multi_day,
    pack_overlapping,
    ranges_overlap,
    row_count,
)
from event_calendar_api.app.calendar.time_utils import WEEK, days_in_visible_range, get_timezone

from tests.conftest import MONDAY, at


def _by_title(positions):
    return {p.entry.title: p for p in positions}


def test_overlap_packing_shares_columns(make_entry):
    a = make_entry(at(MONDAY, 9), at(MONDAY, 10), "A")
    b = make_entry(at(MONDAY, 9, 30), at(MONDAY, 10, 30), "B")
    c = make_entry(at(MONDAY, 11), at(MONDAY, 12), "C")

    placed = _by_title(pack_overlapping([c, b, a]))

    assert (placed["A"].column, placed["A"].column_count) == (0, 2)
    assert (placed["B"].column, placed["B"].column_count) == (1, 2)
    assert placed["A"].width == placed["B"].width == 0.5
    assert placed["B"].left == 0.5
    assert (placed["C"].column, placed["C"].column_count) == (0, 1)
    assert placed["C"].width == 1


def test_back_to_back_entries_do_not_overlap(make_entry):
    first = make_entry(at(MONDAY, 9), at(MONDAY, 10), "first")
    second = make_entry(at(MONDAY, 10), at(MONDAY, 11), "second")

    placed = pack_overlapping([first, second])

    assert [p.column for p in placed] == [0, 0]
    assert [p.column_count for p in placed] == [1, 1]


def test_chained_overlaps_share_one_width(make_entry):
    long = make_entry(at(MONDAY, 9), at(MONDAY, 11), "long")
    early = make_entry(at(MONDAY, 9, 30), at(MONDAY, 10), "early")
    late = make_entry(at(MONDAY, 10, 30), at(MONDAY, 11, 30), "late")

    placed = _by_title(pack_overlapping([late, early, long]))

    assert placed["long"].column == 0
    assert placed["early"].column == 1
    assert placed["late"].column == 1
    assert {p.column_count for p in placed.values()} == {2}


def test_longer_entry_wins_ties(make_entry):
    short = make_entry(at(MONDAY, 9), at(MONDAY, 9, 30), "short")
    long = make_entry(at(MONDAY, 9), at(MONDAY, 12), "long")

    placed = pack_overlapping([short, long])

    assert [p.entry.title for p in placed] == ["long", "short"]
    assert placed[0].column == 0


def _random_day(make_entry, seed, count=25):
    rng = random.Random(seed)
    entries = []
    for _ in range(count):
        start = at(MONDAY, 0) + timedelta(minutes=15 * rng.randrange(0, 88))
        length = timedelta(minutes=15 * rng.randrange(1, 12))
        entries.append(make_entry(start, start + length))
    return entries


def test_overlapping_entries_never_share_space(make_entry):
    for seed in range(5):
        placed = pack_overlapping(_random_day(make_entry, seed))
        for i, p in enumerate(placed):
            assert 0 <= p.column < p.column_count
            for q in placed[i + 1:]:
                if ranges_overlap(*entry_bounds(p.entry), *entry_bounds(q.entry)):
                    assert p.column != q.column
                    assert p.column_count == q.column_count
                    assert p.left + p.width <= q.left + 1e-9 or q.left + q.width <= p.left + 1e-9


def test_packing_is_order_independent(make_entry):
    entries = _random_day(make_entry, seed=42)
    expected = [(p.entry.id, p.column, p.column_count) for p in pack_overlapping(entries)]
    shuffled = list(entries)
    random.Random(7).shuffle(shuffled)
    assert [(p.entry.id, p.column, p.column_count) for p in pack_overlapping(shuffled)] == expected


def test_multi_day_rows(make_entry):
    days = days_in_visible_range(WEEK, MONDAY)
    wed, thu, fri, sat = (MONDAY + timedelta(days=n) for n in (2, 3, 4, 5))
    tue = MONDAY + timedelta(days=1)
    entries = [
        make_entry(at(MONDAY, 9), at(wed, 17), "mon-wed"),
        make_entry(at(tue, 9), at(thu, 17), "tue-thu"),
        make_entry(at(thu, 8), at(fri, 12), "thu-fri"),
        make_entry(at(sat, 0), at(sat, 23, 59), "sat", is_all_day=True),
    ]

    positions = _by_title(pack_multi_day(entries, days))

    assert positions["mon-wed"].row == 0
    assert positions["tue-thu"].row == 1
    assert positions["thu-fri"].row == 0
    assert positions["sat"].row == 0
    assert positions["mon-wed"].span == 3
    assert row_count(positions.values()) == 2


def test_multi_day_rows_never_collide(make_entry):
    days = days_in_visible_range(WEEK, MONDAY)
    rng = random.Random(3)
    entries = []
    for _ in range(20):
        start = at(MONDAY, 8) + timedelta(days=rng.randrange(-2, 7))
        entries.append(make_entry(start, start + timedelta(days=rng.randrange(1, 4))))

    positions = pack_multi_day(entries, days)

    for i, p in enumerate(positions):
        assert 0 <= p.start_day_index <= p.end_day_index < len(days)
        for q in positions[i + 1:]:
            if p.row == q.row:
                assert p.end_day_index < q.start_day_index or q.end_day_index < p.start_day_index


def test_multi_day_clipping(make_entry):
    days = days_in_visible_range(WEEK, MONDAY)
    prev_friday = MONDAY - timedelta(days=3)
    next_tuesday = MONDAY + timedelta(days=8)
    entries = [
        make_entry(at(prev_friday, 9), at(MONDAY + timedelta(days=1), 9), "from-last-week"),
        make_entry(at(MONDAY + timedelta(days=5), 9), at(next_tuesday, 9), "into-next-week"),
        make_entry(at(prev_friday, 9), at(prev_friday + timedelta(days=1), 9), "outside"),
    ]

    positions = _by_title(pack_multi_day(entries, days))

    assert "outside" not in positions
    assert positions["from-last-week"].start_day_index == 0
    assert positions["from-last-week"].end_day_index == 1
    assert positions["from-last-week"].continues_before
    assert not positions["from-last-week"].continues_after
    assert positions["into-next-week"].end_day_index == 6
    assert positions["into-next-week"].continues_after


def test_categorize_entries(make_entry):
    timed = make_entry(at(MONDAY, 9), at(MONDAY, 10))
    overnight = make_entry(at(MONDAY, 22), at(MONDAY + timedelta(days=1), 2))
    all_day = make_entry(at(MONDAY, 0), at(MONDAY, 23, 59), is_all_day=True)

    assert not is_multi_day(timed)
    assert categorize_entries([timed, overnight, all_day]) == ([timed], [overnight, all_day])


def test_filter_visible(make_entry, styles):
    shown = make_entry(at(MONDAY, 9), at(MONDAY, 10), calendar_id=1)
    hidden = make_entry(at(MONDAY, 9), at(MONDAY, 10), calendar_id=2)
    unknown = make_entry(at(MONDAY, 9), at(MONDAY, 10), calendar_id=99)
    loose = make_entry(at(MONDAY, 9), at(MONDAY, 10))

    assert filter_visible([shown, hidden, unknown, loose], styles) == [shown, unknown, loose]


def test_midnight_end_is_exclusive(make_entry):
    tuesday = MONDAY + timedelta(days=1)
    late = make_entry(at(MONDAY, 23), at(tuesday, 0), "late")
    two_nights = make_entry(at(MONDAY, 22), at(MONDAY + timedelta(days=2), 0), "two-nights")
    marker = make_entry(at(tuesday, 0), at(tuesday, 0), "marker")

    assert entry_days(late) == (MONDAY, MONDAY)
    assert not is_multi_day(late)
    assert entry_occurs_on_day(late, MONDAY)
    assert not entry_occurs_on_day(late, tuesday)
    assert entry_days(marker) == (tuesday, tuesday)

    timed, multi_day = categorize_entries([late, two_nights])
    assert timed == [late]
    positions = pack_multi_day(multi_day, days_in_visible_range(WEEK, MONDAY))
    assert [(p.entry.title, p.start_day_index, p.end_day_index) for p in positions] == [
        ("two-nights", 0, 1)
    ]


def test_local_days_follow_the_timezone(make_entry):
    tokyo = get_timezone("Asia/Tokyo")
    # 14:00-15:00 UTC is 23:00-00:00 in Tokyo: a timed entry there.
    entry = make_entry(at(MONDAY, 14), at(MONDAY, 15))

    assert entry_days(entry, tokyo) == (MONDAY, MONDAY)
    assert entry_starts_on(entry, MONDAY, tokyo)
    assert not is_multi_day(entry, tokyo)
    assert is_multi_day(make_entry(at(MONDAY, 14), at(MONDAY, 16)), tokyo)
