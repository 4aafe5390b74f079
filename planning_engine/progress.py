"""Weekly and cycle progress aggregation over completion records."""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date

from planning_engine.rounding import percentage
from planning_engine.schema import (
    Activity,
    CompletionRecord,
    CycleProgress,
    GoalProgress,
    WeeklyProgress,
    WeekWindow,
)

logger = logging.getLogger(__name__)


@dataclass
class ProgressReport:
    """Per (activity, week) progress plus the capped cycle rollup."""

    weekly: dict[tuple[str, int], WeeklyProgress] = field(default_factory=dict)
    cycle: CycleProgress = field(default_factory=lambda: CycleProgress(0, 0, 0))


def _dates_by_activity(completions: Iterable[CompletionRecord]) -> dict[str, list[date]]:
    by_activity: dict[str, list[date]] = defaultdict(list)
    for record in completions:
        by_activity[record.activity_id].append(record.date)
    return by_activity


def _week_progress(activity: Activity, week: WeekWindow, dates: list[date]) -> WeeklyProgress | None:
    target = activity.target_for_week(week.index)
    if target is None:
        return None
    target = max(0, int(target))
    raw = sum(1 for day in dates if week.contains(day))
    return WeeklyProgress(
        activity_id=activity.id,
        week_index=week.index,
        actual=min(raw, target),
        target=target,
        raw_actual=raw,
    )


def aggregate(
    activities: Iterable[Activity],
    completions: Iterable[CompletionRecord],
    weeks: list[WeekWindow],
) -> ProgressReport:
    """Count completions per activity and week, capping each count at its target before summing."""

    activities = list(activities)
    by_activity = _dates_by_activity(completions)

    unknown = set(by_activity) - {activity.id for activity in activities}
    if unknown:
        logger.debug("Ignoring completions for unknown activities: %s", sorted(unknown))

    report = ProgressReport()
    total_actual = 0
    total_target = 0
    for activity in activities:
        dates = by_activity.get(activity.id, [])
        tracked = False
        for week in weeks:
            progress = _week_progress(activity, week, dates)
            if progress is None:
                continue
            tracked = True
            report.weekly[(activity.id, week.index)] = progress
            total_actual += progress.actual
            total_target += progress.target
        if not tracked and weeks:
            logger.debug("Activity %s has no weekly target, skipping", activity.id)

    report.cycle = CycleProgress(
        total_actual_capped=total_actual,
        total_target=total_target,
        percentage=percentage(total_actual, total_target),
    )
    return report


def goal_progress(
    activities: Iterable[Activity],
    completions: Iterable[CompletionRecord],
    weeks: list[WeekWindow],
    week_index: int,
) -> dict[str, GoalProgress]:
    """Leading (this week) and lagging (whole cycle) progress per goal."""

    by_goal: dict[str, list[Activity]] = defaultdict(list)
    for activity in activities:
        if activity.goal_id is not None:
            by_goal[activity.goal_id].append(activity)

    completions = list(completions)
    result = {}
    for goal_id, goal_activities in by_goal.items():
        report = aggregate(goal_activities, completions, weeks)
        this_week = [p for (_, index), p in report.weekly.items() if index == week_index]
        result[goal_id] = GoalProgress(
            goal_id=goal_id,
            week_index=week_index,
            weekly_actual=sum(p.actual for p in this_week),
            weekly_target=sum(p.target for p in this_week),
            overall_actual=report.cycle.total_actual_capped,
            overall_target=report.cycle.total_target,
            overall_percentage=report.cycle.percentage,
        )
    return result


def remaining_this_week(
    activities: Iterable[Activity],
    completions: Iterable[CompletionRecord],
    week: WeekWindow,
) -> dict[str, int]:
    """Completions still needed this week, for activities below target."""

    by_activity = _dates_by_activity(completions)
    remaining = {}
    for activity in activities:
        progress = _week_progress(activity, week, by_activity.get(activity.id, []))
        if progress is None:
            continue
        left = progress.target - progress.raw_actual
        if left > 0:
            remaining[activity.id] = left
    return remaining


def record_completion(
    completions: Iterable[CompletionRecord], record: CompletionRecord
) -> tuple[CompletionRecord, ...]:
    """Append a completion record."""

    return (*completions, record)


def undo_completion(
    completions: Iterable[CompletionRecord], activity_id: str, day: date
) -> tuple[CompletionRecord, ...]:
    """Remove every record for ``(activity_id, day)``."""

    return tuple(r for r in completions if (r.activity_id, r.date) != (activity_id, day))


def toggle_completion(
    completions: Iterable[CompletionRecord], activity_id: str, day: date
) -> tuple[CompletionRecord, ...]:
    """Undo the day's completion when present, otherwise record one."""

    completions = tuple(completions)
    if any((r.activity_id, r.date) == (activity_id, day) for r in completions):
        return undo_completion(completions, activity_id, day)
    return record_completion(completions, CompletionRecord(activity_id=activity_id, date=day))
