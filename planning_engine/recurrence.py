"""Recurrence rule parsing and expansion into occurrence dates."""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional

from dateutil import rrule as du

from planning_engine.schema import FREQUENCIES, WEEKDAY_CODES, DateWindow, RecurrenceSpec, weekday_code

logger = logging.getLogger(__name__)

_FREQ_MAP = {
    "DAILY": du.DAILY,
    "WEEKLY": du.WEEKLY,
    "MONTHLY": du.MONTHLY,
    "YEARLY": du.YEARLY,
}
_WEEKDAY_MAP = dict(zip(WEEKDAY_CODES, (du.MO, du.TU, du.WE, du.TH, du.FR, du.SA, du.SU)))


def _as_datetime(day: date) -> datetime:
    return datetime(day.year, day.month, day.day)


def _parse_until(value: str) -> Optional[date]:
    if len(value) < 8:
        return None
    try:
        return datetime.strptime(value[:8], "%Y%m%d").date()
    except ValueError:
        return None


def parse_rrule(text: Optional[str], anchor_date: Optional[date] = None) -> Optional[RecurrenceSpec]:
    """Parse an ``RRULE:`` string into a recurrence spec, or ``None`` when unusable."""

    if not text or not text.startswith("RRULE:"):
        return None

    frequency = None
    by_day = None
    interval = 1
    until = None
    for part in text[len("RRULE:"):].split(";"):
        key, _, value = part.partition("=")
        key = key.strip().upper()
        value = value.strip()
        if key == "FREQ":
            if value.upper() in FREQUENCIES:
                frequency = value.upper()
        elif key == "INTERVAL":
            try:
                parsed = int(value)
            except ValueError:
                parsed = 0
            if parsed > 0:
                interval = parsed
        elif key == "BYDAY":
            by_day = frozenset(code for code in value.upper().split(",") if code in WEEKDAY_CODES)
        elif key == "UNTIL":
            until = _parse_until(value)

    if frequency is None:
        logger.warning("Ignoring recurrence rule without a usable FREQ: %s", text)
        return None

    if frequency == "WEEKLY" and by_day is None and anchor_date is not None:
        by_day = frozenset({weekday_code(anchor_date)})

    return RecurrenceSpec(frequency=frequency, by_day=by_day or frozenset(), interval=interval, until=until)


def expand(spec: Optional[RecurrenceSpec], anchor_date: date, window: DateWindow) -> list[date]:
    """Expand a recurrence spec into ordered occurrence dates inside ``window``."""

    if window.is_empty or window.end < anchor_date:
        return []

    if spec is None:
        return [anchor_date] if window.contains(anchor_date) else []

    freq = _FREQ_MAP.get(spec.frequency)
    if freq is None or spec.interval < 1:
        logger.warning("Skipping malformed recurrence %r", spec)
        return []

    options = {"dtstart": _as_datetime(anchor_date), "interval": spec.interval, "wkst": du.SU}
    if spec.until is not None:
        options["until"] = _as_datetime(spec.until)
    if spec.frequency == "WEEKLY":
        weekdays = [_WEEKDAY_MAP[code] for code in WEEKDAY_CODES if code in spec.by_day]
        if not weekdays:
            return []
        options["byweekday"] = weekdays

    rule = du.rrule(freq, **options)
    start = max(window.start, anchor_date)
    return [dt.date() for dt in rule.between(_as_datetime(start), _as_datetime(window.end), inc=True)]
