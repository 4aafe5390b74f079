"""Core data schema for activities, occurrences and progress records."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, time
from typing import Optional

WEEKDAY_CODES = ("MO", "TU", "WE", "TH", "FR", "SA", "SU")
WEEK_STARTS = ("sunday", "monday")
FREQUENCIES = ("DAILY", "WEEKLY", "MONTHLY", "YEARLY")
SCHEDULE_KINDS = ("timed", "untimed")


def weekday_code(day: date) -> str:
    """Return the two-letter weekday code of a date."""

    return WEEKDAY_CODES[day.weekday()]


@dataclass(frozen=True)
class RecurrenceSpec:
    """Compact recurrence rule attached to an activity."""

    frequency: str
    by_day: frozenset[str] = frozenset()
    interval: int = 1
    until: Optional[date] = None


@dataclass
class Activity:
    """Planned activity, either one-off or recurring."""

    id: str
    title: str
    anchor_date: date
    schedule_kind: str = "timed"
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    recurrence: Optional[RecurrenceSpec] = None
    goal_id: Optional[str] = None
    weekly_target: Optional[int] = None
    week_targets: dict[int, int] = field(default_factory=dict)

    def target_for_week(self, week_index: int) -> Optional[int]:
        if week_index in self.week_targets:
            return self.week_targets[week_index]
        return self.weekly_target


@dataclass(frozen=True)
class Occurrence:
    """One concrete calendar instance of an activity, equal by ``(activity_id, date)``."""

    activity_id: str
    date: date
    start_time: Optional[time] = field(default=None, compare=False)
    end_time: Optional[time] = field(default=None, compare=False)
    is_untimed: bool = field(default=False, compare=False)
    title: str = field(default="", compare=False)

    @property
    def key(self) -> tuple[str, date]:
        return (self.activity_id, self.date)


@dataclass(frozen=True)
class DateWindow:
    """Inclusive date range."""

    start: date
    end: date

    @property
    def is_empty(self) -> bool:
        return self.end < self.start

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end


@dataclass(frozen=True)
class WeekWindow:
    """One 7-day slice of a cycle."""

    index: int
    start: date
    end: date

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end


@dataclass(frozen=True)
class Cycle:
    """Fixed-length multi-week planning period."""

    anchor_date: date
    week_start: str = "sunday"
    week_count: int = 12


@dataclass(frozen=True)
class CompletionRecord:
    """One completed occurrence of an activity."""

    activity_id: str
    date: date
    is_authentic: bool = False
    is_urgent: bool = False
    is_important: bool = False
    roles: tuple[str, ...] = ()
    domains: tuple[str, ...] = ()
    key_relationships: tuple[str, ...] = ()
    is_cycle_goal: bool = False


@dataclass(frozen=True)
class Withdrawal:
    """Journal entry that counts against the deposit balance."""

    date: date
    amount: float


@dataclass
class WeeklyProgress:
    """Actual vs target for one activity in one week.

    ``actual`` is the displayed value, already capped at ``target``.
    """

    activity_id: str
    week_index: int
    actual: int
    target: int
    raw_actual: int = 0


@dataclass
class CycleProgress:
    """Capped cycle totals."""

    total_actual_capped: int
    total_target: int
    percentage: int


@dataclass
class GoalProgress:
    """Weekly (leading) and overall (lagging) progress of one goal."""

    goal_id: str
    week_index: int
    weekly_actual: int
    weekly_target: int
    overall_actual: int
    overall_target: int
    overall_percentage: int


@dataclass
class LayoutSlot:
    """Day-view geometry for one timed occurrence."""

    occurrence: Occurrence
    column: int
    column_count: int
    display_start_minute: int
    display_duration_minutes: int


@dataclass
class AnalyticsMetrics:
    """Derived analytics read model, recomputed on every call."""

    net_balance: int
    consistency: int
    authentic_deposit: int
    quality: int
    relationship_distribution: Optional[int]
    composite_score: int
    total_deposits: float
    total_withdrawals: float
    authentic_deposits_count: int
    authentic_usage_this_week: int
    weekly_streak: int
    quadrant_breakdown: dict[str, int]
    kr_distribution: list[dict] = field(default_factory=list)
