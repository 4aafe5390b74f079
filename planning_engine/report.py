"""Cycle report assembled from every engine stage."""

from __future__ import annotations

import logging
from dataclasses import asdict, is_dataclass
from datetime import date, time
from typing import Any, Optional

from planning_engine.config import EngineConfig
from planning_engine.cycles import current_week_index, days_remaining, generate_weeks
from planning_engine.layout import layout_day, timed_only
from planning_engine.occurrences import marked_dates, occurrences_for_date
from planning_engine.progress import aggregate, goal_progress, remaining_this_week
from planning_engine.schema import Activity, CompletionRecord, Cycle, Withdrawal
from planning_engine.scoring import score
from planning_engine.windows import compute_window

logger = logging.getLogger(__name__)


def to_jsonable(value: Any) -> Any:
    """Convert engine records into JSON-serializable structures."""

    if is_dataclass(value) and not isinstance(value, type):
        return to_jsonable(asdict(value))
    if isinstance(value, (date, time)):
        return value.isoformat()
    if isinstance(value, dict):
        return {_key(k): to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        items = sorted(value) if isinstance(value, (set, frozenset)) else value
        return [to_jsonable(v) for v in items]
    return value


def _key(key: Any) -> str:
    if isinstance(key, tuple):
        return ":".join(str(to_jsonable(part)) for part in key)
    return str(to_jsonable(key))


def build_cycle_report(
    activities: list[Activity],
    completions: list[CompletionRecord],
    withdrawals: list[Withdrawal],
    cycle: Cycle,
    today: date,
    config: Optional[EngineConfig] = None,
) -> dict:
    """Run weeks, progress, goals, analytics and today's layout for one cycle."""

    config = config or EngineConfig()
    weeks = generate_weeks(cycle)
    progress = aggregate(activities, completions, weeks)

    week_index = current_week_index(weeks, today)
    goals = {}
    remaining = {}
    if week_index is not None:
        goals = goal_progress(activities, completions, weeks, week_index)
        remaining = remaining_this_week(activities, completions, weeks[week_index])

    metrics = score(
        completions,
        withdrawals,
        window_weeks=config.analytics_window_weeks,
        today=today,
        week_start=cycle.week_start,
        authentic_weekly_cap=config.authentic_weekly_cap,
        streak_lookback_weeks=config.streak_lookback_weeks,
    )

    todays = occurrences_for_date(activities, today)
    slots = layout_day(timed_only(todays), min_display_minutes=config.min_display_minutes)
    month = compute_window("month", today, cycle.week_start, config.month_padding_days)

    logger.info(
        "Built report for cycle starting %s: %d weeks, %d occurrences today",
        weeks[0].start if weeks else cycle.anchor_date,
        len(weeks),
        len(todays),
    )

    return {
        "today": today.isoformat(),
        "weeks": to_jsonable(weeks),
        "current_week_index": week_index,
        "days_remaining": days_remaining(weeks, today),
        "weekly_progress": to_jsonable(progress.weekly),
        "cycle_progress": to_jsonable(progress.cycle),
        "goals": to_jsonable(goals),
        "remaining_this_week": remaining,
        "analytics": to_jsonable(metrics),
        "today_untimed": to_jsonable([o for o in todays if o.is_untimed]),
        "today_layout": to_jsonable(slots),
        "marked_dates": to_jsonable(marked_dates(activities, month)),
    }
