"""Demo script for planning-engine."""

import sys
from datetime import date
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from planning_engine.adapters.json_adapter import parse
from planning_engine.report import build_cycle_report
from planning_engine.schema import Cycle


def main() -> None:
    data = parse("examples/sample_plan.json")
    today = date(2024, 1, 10)
    cycle = Cycle(anchor_date=date(2024, 1, 1), week_start="sunday", week_count=12)
    report = build_cycle_report(data.activities, data.completions, data.withdrawals, cycle, today)
    print("Cycle progress:", report["cycle_progress"])
    print("Goals:", report["goals"])
    print("Analytics:", report["analytics"])
    print("Today's layout:", report["today_layout"])


if __name__ == "__main__":
    main()
