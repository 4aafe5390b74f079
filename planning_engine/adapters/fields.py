"""Field coercion shared by the input adapters."""

from __future__ import annotations

from datetime import date, datetime, time
from typing import Any, Optional

_TRUE = {"1", "true", "yes", "y", "t"}
_FALSE = {"0", "false", "no", "n", "f", ""}


def parse_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    # tolerate full ISO timestamps, keeping the calendar date as written
    return date.fromisoformat(str(value).strip()[:10])


def parse_time(value: Any) -> Optional[time]:
    if value in (None, ""):
        return None
    if isinstance(value, time):
        return value
    return time.fromisoformat(str(value).strip())


def parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    text = str(value).strip().lower()
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise ValueError(f"invalid boolean '{value}'")


def parse_tags(value: Any) -> tuple[str, ...]:
    if value in (None, ""):
        return ()
    if isinstance(value, (list, tuple)):
        items = value
    else:
        items = str(value).split("|")
    return tuple(str(item).strip() for item in items if str(item).strip())
