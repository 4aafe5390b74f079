"""Overlap-free column layout for same-day timed occurrences."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import time

from planning_engine.schema import LayoutSlot, Occurrence


class InvalidOccurrenceError(ValueError):
    """Raised when an occurrence cannot be placed on a day timeline."""


def _seconds(value: time) -> int:
    return value.hour * 3600 + value.minute * 60 + value.second


def _interval(occurrence: Occurrence, position: int) -> tuple[int, int]:
    if occurrence.start_time is None or occurrence.end_time is None:
        raise InvalidOccurrenceError(
            f"Occurrence {position} ({occurrence.activity_id} on {occurrence.date}) is missing start or end time"
        )
    start, end = _seconds(occurrence.start_time), _seconds(occurrence.end_time)
    if end < start:
        raise InvalidOccurrenceError(
            f"Occurrence {position} ({occurrence.activity_id} on {occurrence.date}) ends before it starts"
        )
    return start, end


def timed_only(occurrences: Iterable[Occurrence]) -> list[Occurrence]:
    """Drop untimed or partially timed occurrences ahead of layout."""

    return [
        occurrence
        for occurrence in occurrences
        if not occurrence.is_untimed
        and occurrence.start_time is not None
        and occurrence.end_time is not None
        and occurrence.end_time >= occurrence.start_time
    ]


def layout_day(occurrences: Iterable[Occurrence], min_display_minutes: int = 30) -> list[LayoutSlot]:
    """Assign columns by greedy interval partitioning and size each slot's column group."""

    items = list(occurrences)
    intervals = [_interval(occurrence, position) for position, occurrence in enumerate(items)]

    # sorted() is stable, so equal starts keep input order
    order = sorted(range(len(items)), key=lambda i: intervals[i][0])

    column_ends: list[int] = []
    columns: dict[int, int] = {}
    for i in order:
        start, end = intervals[i]
        for column, column_end in enumerate(column_ends):
            if column_end <= start:
                column_ends[column] = end
                columns[i] = column
                break
        else:
            columns[i] = len(column_ends)
            column_ends.append(end)

    slots: list[LayoutSlot] = []
    for i in order:
        start, end = intervals[i]
        widest = columns[i]
        for j in order:
            other_start, other_end = intervals[j]
            if j != i and start < other_end and other_start < end:
                widest = max(widest, columns[j])
        slots.append(
            LayoutSlot(
                occurrence=items[i],
                column=columns[i],
                column_count=widest + 1,
                display_start_minute=start // 60,
                display_duration_minutes=max(end // 60 - start // 60, min_display_minutes),
            )
        )
    return slots
