import json
from datetime import date, time

import pytest

from planning_engine.adapters.csv_adapter import parse as parse_csv
from planning_engine.adapters.json_adapter import parse as parse_json
from planning_engine.occurrences import expand_activities
from planning_engine.schema import DateWindow, RecurrenceSpec


def test_csv_parse_success(tmp_path):
    path = tmp_path / "completions.csv"
    path.write_text(
        "activity_id,date,is_authentic,is_urgent,is_important,roles,domains\n"
        "run,2024-01-01,true,0,yes,athlete|parent,health\n"
        "run,2024-01-02T07:30:00,,,,,\n",
        encoding="utf-8",
    )
    records = parse_csv(str(path))
    assert len(records) == 2
    assert records[0].is_authentic and records[0].is_important and not records[0].is_urgent
    assert records[0].roles == ("athlete", "parent")
    assert records[1].date == date(2024, 1, 2)
    assert records[1].roles == ()


def test_csv_parse_invalid_rows(tmp_path):
    path = tmp_path / "completions.csv"
    path.write_text("activity_id,date\nrun,bad\n", encoding="utf-8")
    with pytest.raises(ValueError):
        parse_csv(str(path))

    path.write_text("activity_id,date,is_urgent\nrun,2024-01-01,maybe\n", encoding="utf-8")
    with pytest.raises(ValueError, match="Row 2"):
        parse_csv(str(path))

    path.write_text("activity_id,date\n,2024-01-01\n", encoding="utf-8")
    with pytest.raises(ValueError, match="missing required fields"):
        parse_csv(str(path))


def test_json_parse_success(tmp_path):
    path = tmp_path / "plan.json"
    payload = {
        "activities": [
            {
                "id": "run",
                "title": "Run",
                "anchor_date": "2024-01-01",
                "start_time": "07:00",
                "end_time": "07:45",
                "recurrence": "RRULE:FREQ=WEEKLY;BYDAY=MO,WE",
                "weekly_target": 2,
                "week_targets": {"3": 1},
            },
            {
                "id": "read",
                "title": "Read",
                "anchor_date": "2024-01-02",
                "recurrence": {"frequency": "daily", "until": "2024-02-01"},
            },
        ],
        "completions": [{"activity_id": "run", "date": "2024-01-01", "is_authentic": True, "roles": ["athlete"]}],
        "withdrawals": [{"date": "2024-01-03", "amount": "1.5"}],
    }
    path.write_text(json.dumps(payload), encoding="utf-8")
    data = parse_json(str(path))

    run, read = data.activities
    assert run.recurrence == RecurrenceSpec("WEEKLY", frozenset({"MO", "WE"}))
    assert run.start_time == time(7, 0)
    assert run.week_targets == {3: 1}
    assert run.target_for_week(3) == 1 and run.target_for_week(0) == 2
    assert read.schedule_kind == "untimed"
    assert read.recurrence == RecurrenceSpec("DAILY", until=date(2024, 2, 1))
    assert data.completions[0].roles == ("athlete",)
    assert data.withdrawals[0].amount == 1.5


def test_json_parse_malformed(tmp_path):
    path = tmp_path / "plan.json"
    path.write_text(json.dumps([{"id": "a"}]), encoding="utf-8")
    with pytest.raises(ValueError):
        parse_json(str(path))

    path.write_text(json.dumps({"activities": [{"id": "a", "title": "A", "anchor_date": "bad"}]}), encoding="utf-8")
    with pytest.raises(ValueError, match="Activity 1"):
        parse_json(str(path))

    path.write_text(
        json.dumps({"activities": [{"id": "a", "title": "A", "anchor_date": "2024-01-01", "recurrence": {"frequency": "WEEKLY", "interval": "often"}}]}),
        encoding="utf-8",
    )
    with pytest.raises(ValueError, match="Activity 1: invalid recurrence interval"):
        parse_json(str(path))

    path.write_text(json.dumps({"completions": [{"activity_id": "a", "date": "2024-01-01", "is_urgent": "maybe"}]}), encoding="utf-8")
    with pytest.raises(ValueError, match="Completion 1"):
        parse_json(str(path))


def test_json_unusable_recurrence_yields_no_occurrences(tmp_path):
    path = tmp_path / "plan.json"
    payload = {
        "activities": [
            {"id": "hourly", "title": "Hourly", "anchor_date": "2024-01-01", "recurrence": "RRULE:FREQ=HOURLY"},
            {"id": "loose", "title": "Loose", "anchor_date": "2024-01-01", "recurrence": "every day"},
            {"id": "object", "title": "Object", "anchor_date": "2024-01-01", "recurrence": {"frequency": "HOURLY"}},
            {"id": "odd_days", "title": "Odd", "anchor_date": "2024-01-01", "recurrence": {"frequency": "WEEKLY", "by_day": ["MO", "XX"]}},
            {"id": "once", "title": "Once", "anchor_date": "2024-01-01"},
        ]
    }
    path.write_text(json.dumps(payload), encoding="utf-8")
    data = parse_json(str(path))

    assert [a.id for a in data.activities] == ["hourly", "loose", "object", "odd_days", "once"]
    assert all(a.recurrence is not None for a in data.activities[:4])
    assert data.activities[3].recurrence.by_day == frozenset({"MO"})

    occurrences = expand_activities(data.activities, DateWindow(date(2024, 1, 1), date(2024, 1, 7)))
    assert [(o.activity_id, o.date) for o in occurrences] == [
        ("odd_days", date(2024, 1, 1)),
        ("once", date(2024, 1, 1)),
    ]
