from datetime import date, timedelta

from planning_engine.cycles import (
    available_cycle_starts,
    current_week_index,
    cycle_window,
    days_remaining,
    generate_weeks,
    week_index_for,
)
from planning_engine.schema import Cycle, DateWindow


def test_generate_weeks_is_contiguous_and_aligned():
    weeks = generate_weeks(Cycle(date(2024, 1, 3)))
    assert len(weeks) == 12
    assert weeks[0].start == date(2023, 12, 31)
    assert [w.index for w in weeks] == list(range(12))
    for week in weeks:
        assert (week.end - week.start).days == 6
    for current, following in zip(weeks, weeks[1:]):
        assert current.end + timedelta(days=1) == following.start


def test_generate_weeks_monday_start_and_custom_length():
    weeks = generate_weeks(Cycle(date(2024, 1, 3), week_start="monday", week_count=4))
    assert len(weeks) == 4
    assert weeks[0].start == date(2024, 1, 1)
    assert weeks[-1].end == date(2024, 1, 28)
    assert generate_weeks(Cycle(date(2024, 1, 3), week_count=0)) == []


def test_generate_weeks_is_pure():
    cycle = Cycle(date(2024, 5, 17), week_start="monday")
    assert generate_weeks(cycle) == generate_weeks(cycle)


def test_week_lookups():
    weeks = generate_weeks(Cycle(date(2024, 1, 1), week_start="monday", week_count=2))
    assert week_index_for(weeks, date(2024, 1, 10)) == 1
    assert week_index_for(weeks, date(2024, 1, 15)) is None
    assert current_week_index(weeks, date(2024, 1, 7)) == 0
    assert current_week_index(weeks, date(2023, 6, 1)) == 0
    assert current_week_index(weeks, date(2024, 6, 1)) == 1
    assert current_week_index([], date(2024, 1, 1)) is None
    assert cycle_window(weeks) == DateWindow(date(2024, 1, 1), date(2024, 1, 14))
    assert cycle_window([]) is None


def test_days_remaining():
    weeks = generate_weeks(Cycle(date(2024, 1, 1), week_start="monday", week_count=2))
    assert days_remaining(weeks, date(2024, 1, 10)) == 5
    assert days_remaining(weeks, date(2024, 1, 14)) == 1
    assert days_remaining(weeks, date(2024, 1, 15)) == 0
    assert days_remaining(weeks, date(2023, 12, 25)) == 14
    assert days_remaining([], date(2024, 1, 1)) == 0


def test_available_cycle_starts():
    options = available_cycle_starts(date(2024, 1, 7))
    assert len(options) == 8
    assert options[0] == DateWindow(date(2024, 1, 7), date(2024, 3, 30))
    assert options[1].start == date(2024, 1, 14)

    later = available_cycle_starts(date(2024, 1, 3), week_start="monday", count=2)
    assert [o.start for o in later] == [date(2024, 1, 8), date(2024, 1, 15)]
