"""Visible date windows for day, week and month calendar views."""

from __future__ import annotations

from collections.abc import Iterator
from datetime import date, timedelta

from dateutil.relativedelta import relativedelta

from planning_engine.schema import WEEK_STARTS, DateWindow

VIEW_MODES = ("day", "week", "month")


def _start_weekday(week_start: str) -> int:
    if week_start not in WEEK_STARTS:
        raise ValueError(f"Unknown week start '{week_start}'")
    # date.weekday(): Monday == 0, Sunday == 6
    return 6 if week_start == "sunday" else 0


def week_start_of(day: date, week_start: str = "sunday") -> date:
    """Align a date backward to the configured first day of its week."""

    offset = (day.weekday() - _start_weekday(week_start)) % 7
    return day - timedelta(days=offset)


def week_end_of(day: date, week_start: str = "sunday") -> date:
    """Last day of the week containing ``day``."""

    return week_start_of(day, week_start) + timedelta(days=6)


def compute_window(
    mode: str,
    anchor: date,
    week_start: str = "sunday",
    month_padding_days: int = 0,
) -> DateWindow:
    """Compute the inclusive date range shown by a calendar view."""

    if mode == "day":
        return DateWindow(anchor, anchor)
    if mode == "week":
        start = week_start_of(anchor, week_start)
        return DateWindow(start, start + timedelta(days=6))
    if mode == "month":
        first = anchor + relativedelta(day=1)
        last = anchor + relativedelta(day=31)
        padding = timedelta(days=max(0, month_padding_days))
        return DateWindow(first - padding, last + padding)
    raise ValueError(f"Unknown view mode '{mode}', expected one of {VIEW_MODES}")


def dates_in(window: DateWindow) -> Iterator[date]:
    """Yield every date of a window in order; nothing for a degenerate window."""

    day = window.start
    while day <= window.end:
        yield day
        day += timedelta(days=1)
