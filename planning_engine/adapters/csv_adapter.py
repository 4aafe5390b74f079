"""CSV adapter for completion logs."""

from __future__ import annotations

import csv

from planning_engine.adapters.fields import parse_bool, parse_date, parse_tags
from planning_engine.schema import CompletionRecord

_REQUIRED_FIELDS = {"activity_id", "date"}
_FLAG_FIELDS = ("is_authentic", "is_urgent", "is_important", "is_cycle_goal")
_TAG_FIELDS = ("roles", "domains", "key_relationships")


def _parse_row(row: dict, row_number: int) -> CompletionRecord:
    missing = sorted(field for field in _REQUIRED_FIELDS if not (row.get(field) or "").strip())
    if missing:
        raise ValueError(f"Row {row_number}: missing required fields {missing}")

    try:
        day = parse_date(row["date"])
    except Exception as exc:  # noqa: BLE001
        raise ValueError(f"Row {row_number}: malformed date") from exc

    flags = {}
    for field in _FLAG_FIELDS:
        try:
            flags[field] = parse_bool(row.get(field))
        except ValueError as exc:
            raise ValueError(f"Row {row_number}: invalid {field}") from exc

    return CompletionRecord(
        activity_id=row["activity_id"].strip(),
        date=day,
        **flags,
        **{field: parse_tags(row.get(field)) for field in _TAG_FIELDS},
    )


def parse(file_path: str) -> list[CompletionRecord]:
    """Parse a CSV file into completion records."""

    with open(file_path, newline="", encoding="utf-8") as handle:
        reader = csv.DictReader(handle)
        if not reader.fieldnames:
            return []

        records: list[CompletionRecord] = []
        for row_number, row in enumerate(reader, start=2):
            records.append(_parse_row(row, row_number))
        return records
