"""Cycle week generation and week lookups."""

from __future__ import annotations

from datetime import date, timedelta
from typing import Optional

from planning_engine.schema import Cycle, DateWindow, WeekWindow
from planning_engine.windows import week_start_of


def generate_weeks(cycle: Cycle) -> list[WeekWindow]:
    """Split a cycle into contiguous 7-day week windows, starting from the aligned anchor."""

    first = week_start_of(cycle.anchor_date, cycle.week_start)
    weeks = []
    for index in range(max(0, cycle.week_count)):
        start = first + timedelta(days=7 * index)
        weeks.append(WeekWindow(index=index, start=start, end=start + timedelta(days=6)))
    return weeks


def week_index_for(weeks: list[WeekWindow], day: date) -> Optional[int]:
    """Index of the week containing ``day``, or ``None`` outside the cycle."""

    for week in weeks:
        if week.contains(day):
            return week.index
    return None


def current_week_index(weeks: list[WeekWindow], today: date) -> Optional[int]:
    """Week containing ``today``, clamped to the first/last week outside the cycle."""

    if not weeks:
        return None
    index = week_index_for(weeks, today)
    if index is not None:
        return index
    if today > weeks[-1].end:
        return weeks[-1].index
    return weeks[0].index


def cycle_window(weeks: list[WeekWindow]) -> Optional[DateWindow]:
    if not weeks:
        return None
    return DateWindow(weeks[0].start, weeks[-1].end)


def days_remaining(weeks: list[WeekWindow], today: date) -> int:
    """Days left in the cycle counting ``today``; 0 once the cycle is over."""

    window = cycle_window(weeks)
    if window is None or today > window.end:
        return 0
    start = max(today, window.start)
    return (window.end - start).days + 1


def available_cycle_starts(
    today: date,
    week_start: str = "sunday",
    count: int = 8,
    week_count: int = 12,
) -> list[DateWindow]:
    """Upcoming cycle start options; today counts when it already is a week start."""

    first = week_start_of(today, week_start)
    if first != today:
        first += timedelta(days=7)

    options = []
    for i in range(max(0, count)):
        start = first + timedelta(days=7 * i)
        options.append(DateWindow(start, start + timedelta(days=7 * week_count - 1)))
    return options
