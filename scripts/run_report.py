"""Build a cycle progress report from a JSON planning file."""

from __future__ import annotations

import argparse
import json
import sys
from datetime import date
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from planning_engine.adapters import csv_adapter, json_adapter
from planning_engine.config import EngineConfig, setup_logging
from planning_engine.report import build_cycle_report
from planning_engine.schema import Cycle


def main() -> None:
    parser = argparse.ArgumentParser(description="Build a planning-engine cycle report")
    parser.add_argument("--data", required=True, help="Path to JSON file with activities/completions/withdrawals")
    parser.add_argument("--completions", help="Optional CSV file of extra completion records")
    parser.add_argument("--today", type=date.fromisoformat, default=None, help="Report date (YYYY-MM-DD)")
    parser.add_argument("--anchor", type=date.fromisoformat, default=None, help="Cycle anchor date (YYYY-MM-DD)")
    args = parser.parse_args()

    config = EngineConfig.from_env()
    logger = setup_logging(config)

    data = json_adapter.parse(args.data)
    if args.completions:
        data.completions.extend(csv_adapter.parse(args.completions))

    today = args.today or date.today()
    cycle = Cycle(anchor_date=args.anchor or today, week_start=config.week_start, week_count=config.cycle_week_count)
    report = build_cycle_report(data.activities, data.completions, data.withdrawals, cycle, today, config)

    print(json.dumps(report, indent=2))

    outputs_dir = Path("outputs")
    outputs_dir.mkdir(parents=True, exist_ok=True)
    out_path = outputs_dir / "cycle_report.json"
    out_path.write_text(json.dumps(report, indent=2), encoding="utf-8")
    logger.info("Saved cycle report to %s", out_path)


if __name__ == "__main__":
    main()
