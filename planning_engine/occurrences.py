"""Occurrence materialization and de-duplicating merge."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import date

from planning_engine.recurrence import expand
from planning_engine.schema import Activity, DateWindow, Occurrence

logger = logging.getLogger(__name__)


def merge(recurring: Iterable[Occurrence], untimed: Iterable[Occurrence]) -> list[Occurrence]:
    """Concatenate occurrence lists, keeping the first occurrence per ``(activity_id, date)``."""

    seen: set[tuple[str, date]] = set()
    merged: list[Occurrence] = []
    for source in (recurring, untimed):
        for occurrence in source:
            if occurrence.key in seen:
                continue
            seen.add(occurrence.key)
            merged.append(occurrence)
    return merged


def _materialize(activity: Activity, day: date) -> Occurrence:
    untimed = activity.schedule_kind == "untimed"
    return Occurrence(
        activity_id=activity.id,
        date=day,
        start_time=None if untimed else activity.start_time,
        end_time=None if untimed else activity.end_time,
        is_untimed=untimed,
        title=activity.title,
    )


def expand_activity(activity: Activity, window: DateWindow) -> list[Occurrence]:
    """Materialize the occurrences of one activity inside ``window``."""

    days = expand(activity.recurrence, activity.anchor_date, window)
    return [_materialize(activity, day) for day in days]


def expand_activities(activities: Iterable[Activity], window: DateWindow) -> list[Occurrence]:
    """Materialize every activity's occurrences, ordered by date then input order."""

    expanded: list[Occurrence] = []
    for activity in activities:
        try:
            expanded.extend(expand_activity(activity, window))
        except (TypeError, ValueError, AttributeError) as exc:
            logger.warning("Skipping activity %s with unreadable schedule: %s", activity.id, exc)
    expanded.sort(key=lambda occurrence: occurrence.date)
    return merge(expanded, [])


def occurrences_for_date(
    activities: Iterable[Activity],
    day: date,
    untimed: Iterable[Occurrence] = (),
) -> list[Occurrence]:
    """All occurrences on ``day``: expanded activities first, then extra untimed entries."""

    return merge(expand_activities(activities, DateWindow(day, day)), untimed)


def marked_dates(activities: Iterable[Activity], window: DateWindow) -> list[date]:
    """Distinct dates in ``window`` that carry at least one occurrence."""

    return sorted({occurrence.date for occurrence in expand_activities(activities, window)})
