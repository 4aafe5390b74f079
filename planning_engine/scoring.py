"""Deposit points and composite analytics scores."""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Iterable
from datetime import date, timedelta

import numpy as np

from planning_engine.rounding import percentage, round_half_up
from planning_engine.schema import AnalyticsMetrics, CompletionRecord, DateWindow, Withdrawal
from planning_engine.windows import week_start_of

logger = logging.getLogger(__name__)

AUTHENTIC_WEEKLY_CAP = 14
STREAK_LOOKBACK_WEEKS = 52
AUTHENTIC_BONUS = 2.0
CYCLE_GOAL_BONUS = 2.0
MAX_QUADRANT_POINTS = 3.0

# net balance, consistency, authentic, quality, relationship distribution
COMPOSITE_WEIGHTS = np.array([30.0, 20.0, 20.0, 20.0, 10.0])
QUADRANT_POINTS = {"q1": 1.5, "q2": 3.0, "q3": 1.0, "q4": 0.5}


def quadrant(record: CompletionRecord) -> str:
    """Priority quadrant: q1 urgent+important, q2 important, q3 urgent, q4 neither."""

    if record.is_important and record.is_urgent:
        return "q1"
    if record.is_important:
        return "q2"
    if record.is_urgent:
        return "q3"
    return "q4"


def task_points(record: CompletionRecord) -> float:
    """Points earned by one completion, rounded to one decimal."""

    points = float(len(record.roles) + len(record.domains))
    if record.is_authentic:
        points += AUTHENTIC_BONUS
    points += QUADRANT_POINTS[quadrant(record)]
    if record.is_cycle_goal:
        points += CYCLE_GOAL_BONUS
    return round_half_up(points, 1)


def _capped_authentic(deposits: list[CompletionRecord], week_start: str, cap: int) -> int:
    per_week = Counter(week_start_of(d.date, week_start) for d in deposits if d.is_authentic)
    return sum(min(count, cap) for count in per_week.values())


def _weekly_streak(deposit_weeks: set[date], current_week: date, lookback: int) -> int:
    streak = 0
    for i in range(lookback):
        if current_week - timedelta(days=7 * i) not in deposit_weeks:
            break
        streak += 1
    return streak


def _relationship_distribution(deposits: list[CompletionRecord]) -> tuple[int | None, list[dict]]:
    counts = Counter(kr for d in deposits for kr in d.key_relationships)
    if len(counts) <= 1:
        return None, []
    total = sum(counts.values())
    distribution = [
        {"name": name, "count": count, "percentage": percentage(count, total)} for name, count in counts.items()
    ]
    return 100 - max(item["percentage"] for item in distribution), distribution


def composite_score(
    net_balance: int,
    consistency: int,
    authentic_deposit: int,
    quality: int,
    relationship_distribution: int | None = None,
) -> int:
    """Weighted average of the metrics; the distribution weight is spread proportionally when absent."""

    values = np.array([net_balance, consistency, authentic_deposit, quality, relationship_distribution or 0], dtype=float)
    weights = COMPOSITE_WEIGHTS
    if relationship_distribution is None:
        values, weights = values[:4], weights[:4]
    return round_half_up(float(np.dot(values, weights) / weights.sum()))


def score(
    completions: Iterable[CompletionRecord],
    withdrawals: Iterable[Withdrawal],
    window_weeks: int,
    today: date,
    week_start: str = "sunday",
    authentic_weekly_cap: int = AUTHENTIC_WEEKLY_CAP,
    streak_lookback_weeks: int = STREAK_LOOKBACK_WEEKS,
    relationship_scope: bool = False,
) -> AnalyticsMetrics:
    """Recompute every analytics metric for the ``window_weeks`` weeks ending with today's week."""

    current_week = week_start_of(today, week_start)
    window = DateWindow(current_week - timedelta(days=7 * (window_weeks - 1)), current_week + timedelta(days=6))

    deposits = [record for record in completions if window.contains(record.date)]
    spent = [w for w in withdrawals if window.contains(w.date)]
    logger.debug("Scoring %d deposits and %d withdrawals between %s and %s", len(deposits), len(spent), window.start, window.end)

    total_deposits = round_half_up(sum(task_points(d) for d in deposits), 1)
    total_withdrawals = round_half_up(sum(float(w.amount) for w in spent), 1)
    net_balance = percentage(total_deposits, total_deposits + total_withdrawals)

    deposit_weeks = {week_start_of(d.date, week_start) for d in deposits}
    consistency = percentage(len(deposit_weeks), window_weeks)
    weekly_streak = _weekly_streak(deposit_weeks, current_week, streak_lookback_weeks)

    authentic_count = _capped_authentic(deposits, week_start, authentic_weekly_cap)
    authentic_deposit = percentage(authentic_count, len(deposits))
    this_week = [d for d in deposits if d.date >= current_week]
    authentic_usage = min(sum(1 for d in this_week if d.is_authentic), authentic_weekly_cap)

    quadrants = Counter(quadrant(d) for d in deposits)
    quality_points = sum(QUADRANT_POINTS[q] * n for q, n in quadrants.items())
    quality = percentage(quality_points, len(deposits) * MAX_QUADRANT_POINTS)
    breakdown = {q: percentage(quadrants.get(q, 0), len(deposits)) for q in ("q1", "q2", "q3", "q4")}

    distribution, kr_distribution = (None, [])
    if relationship_scope:
        distribution, kr_distribution = _relationship_distribution(deposits)

    return AnalyticsMetrics(
        net_balance=net_balance,
        consistency=consistency,
        authentic_deposit=authentic_deposit,
        quality=quality,
        relationship_distribution=distribution,
        composite_score=composite_score(net_balance, consistency, authentic_deposit, quality, distribution),
        total_deposits=total_deposits,
        total_withdrawals=total_withdrawals,
        authentic_deposits_count=authentic_count,
        authentic_usage_this_week=authentic_usage,
        weekly_streak=weekly_streak,
        quadrant_breakdown=breakdown,
        kr_distribution=kr_distribution,
    )
