"""JSON adapter for activities, completions and withdrawals."""

from __future__ import annotations

import json
from dataclasses import dataclass, field

from planning_engine.adapters.fields import parse_bool, parse_date, parse_tags, parse_time
from planning_engine.recurrence import parse_rrule
from planning_engine.schema import (
    SCHEDULE_KINDS,
    WEEKDAY_CODES,
    Activity,
    CompletionRecord,
    RecurrenceSpec,
    Withdrawal,
)

_ACTIVITY_FIELDS = {"id", "title", "anchor_date"}
_COMPLETION_FIELDS = {"activity_id", "date"}
_WITHDRAWAL_FIELDS = {"date", "amount"}
_UNUSABLE_FREQUENCY = ""


@dataclass
class PlanningData:
    """Everything the engine needs, as loaded from one payload."""

    activities: list[Activity] = field(default_factory=list)
    completions: list[CompletionRecord] = field(default_factory=list)
    withdrawals: list[Withdrawal] = field(default_factory=list)


def _require(item: dict, fields: set[str], label: str) -> None:
    if not isinstance(item, dict):
        raise ValueError(f"{label}: expected an object")
    missing = sorted(name for name in fields if item.get(name) in (None, ""))
    if missing:
        raise ValueError(f"{label}: missing required fields {missing}")


def _parse_recurrence(raw, anchor_date, label: str):
    if raw in (None, ""):
        return None
    if isinstance(raw, str):
        # an unusable rule keeps a frequency expand() rejects, so the activity yields nothing
        return parse_rrule(raw, anchor_date) or RecurrenceSpec(frequency=_UNUSABLE_FREQUENCY)
    if not isinstance(raw, dict):
        raise ValueError(f"{label}: recurrence must be an RRULE string or an object")

    try:
        interval = int(raw.get("interval", 1))
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{label}: invalid recurrence interval") from exc

    until = raw.get("until")
    try:
        until = parse_date(until) if until else None
    except Exception as exc:  # noqa: BLE001
        raise ValueError(f"{label}: malformed recurrence until date") from exc

    # unknown frequencies expand to nothing; unknown weekday codes are dropped
    by_day = frozenset(str(code).strip().upper() for code in raw.get("by_day") or [])
    return RecurrenceSpec(
        frequency=str(raw.get("frequency", "")).strip().upper(),
        by_day=by_day & set(WEEKDAY_CODES),
        interval=interval,
        until=until,
    )


def _parse_activity(item: dict, index: int) -> Activity:
    label = f"Activity {index}"
    _require(item, _ACTIVITY_FIELDS, label)

    try:
        anchor_date = parse_date(item["anchor_date"])
        start_time = parse_time(item.get("start_time"))
        end_time = parse_time(item.get("end_time"))
    except Exception as exc:  # noqa: BLE001
        raise ValueError(f"{label}: malformed date or time") from exc

    schedule_kind = str(item.get("schedule_kind") or ("timed" if start_time else "untimed")).strip().lower()
    if schedule_kind not in SCHEDULE_KINDS:
        raise ValueError(f"{label}: invalid schedule_kind '{schedule_kind}'")

    try:
        weekly_target = item.get("weekly_target")
        weekly_target = int(weekly_target) if weekly_target is not None else None
        week_targets = {int(week): int(target) for week, target in (item.get("week_targets") or {}).items()}
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{label}: invalid targets") from exc

    return Activity(
        id=str(item["id"]).strip(),
        title=str(item["title"]).strip(),
        anchor_date=anchor_date,
        schedule_kind=schedule_kind,
        start_time=start_time,
        end_time=end_time,
        recurrence=_parse_recurrence(item.get("recurrence"), anchor_date, label),
        goal_id=item.get("goal_id"),
        weekly_target=weekly_target,
        week_targets=week_targets,
    )


def _parse_completion(item: dict, index: int) -> CompletionRecord:
    label = f"Completion {index}"
    _require(item, _COMPLETION_FIELDS, label)

    try:
        day = parse_date(item["date"])
    except Exception as exc:  # noqa: BLE001
        raise ValueError(f"{label}: malformed date") from exc

    try:
        return CompletionRecord(
            activity_id=str(item["activity_id"]).strip(),
            date=day,
            is_authentic=parse_bool(item.get("is_authentic")),
            is_urgent=parse_bool(item.get("is_urgent")),
            is_important=parse_bool(item.get("is_important")),
            roles=parse_tags(item.get("roles")),
            domains=parse_tags(item.get("domains")),
            key_relationships=parse_tags(item.get("key_relationships")),
            is_cycle_goal=parse_bool(item.get("is_cycle_goal")),
        )
    except ValueError as exc:
        raise ValueError(f"{label}: {exc}") from exc


def _parse_withdrawal(item: dict, index: int) -> Withdrawal:
    label = f"Withdrawal {index}"
    _require(item, _WITHDRAWAL_FIELDS, label)

    try:
        return Withdrawal(date=parse_date(item["date"]), amount=float(item["amount"]))
    except Exception as exc:  # noqa: BLE001
        raise ValueError(f"{label}: malformed date or amount") from exc


def parse(file_path: str) -> PlanningData:
    """Parse a JSON file into activities, completions and withdrawals."""

    with open(file_path, encoding="utf-8") as handle:
        payload = json.load(handle)

    if not isinstance(payload, dict):
        raise ValueError("JSON payload must be an object with activities/completions/withdrawals lists")

    sections = {}
    for name in ("activities", "completions", "withdrawals"):
        items = payload.get(name, [])
        if not isinstance(items, list):
            raise ValueError(f"'{name}' must be a list of objects")
        sections[name] = items

    return PlanningData(
        activities=[_parse_activity(item, i) for i, item in enumerate(sections["activities"], start=1)],
        completions=[_parse_completion(item, i) for i, item in enumerate(sections["completions"], start=1)],
        withdrawals=[_parse_withdrawal(item, i) for i, item in enumerate(sections["withdrawals"], start=1)],
    )
