#!/usr/bin/env python
"""
GradingBot - Planning Run Launcher

Loads the pending orders and the employee roster, plans every stage
(grading, certification, preparation, scanning) and prints the run summary.

Usage:
    python run_planning.py --date 2026-03-02 --clean --export

Environment Variables (set in .env file):
    - WORKDAY_START / WORKDAY_END: Working hours, HH:MM (default: 09:00 / 18:00)
    - TASK_BREAK_MINUTES: Break between tasks (default: 5)
    - MINUTES_PER_CARD: Minutes per card (default: 3)
    - SCANNING_MINUTES_PER_ORDER: Fixed scanning time per order (default: 5)
    - DATA_DIR / OUTPUT_DIR / SCHEDULE_FILE: File locations
"""

import argparse
import os
import sys
from datetime import date, datetime

from gradingbot.algorithms.planner import PlanningOrchestrator
from gradingbot.config import PlanningConfig
from gradingbot.data_loader import DataLoader
from gradingbot.exporters import export_schedule, export_workload_report
from gradingbot.schedule_store import ScheduleStore
from gradingbot.validators import validate_planning_data


def _parse_date(value: str) -> date:
    try:
        return datetime.strptime(value, '%Y-%m-%d').date()
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid date {value!r}, expected YYYY-MM-DD")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='GradingBot planning run',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )
    parser.add_argument('--date', type=_parse_date, default=date.today(),
                        help='Planning date (YYYY-MM-DD, default: today)')
    parser.add_argument('--data-dir', type=str,
                        help='Folder with the Orders and Employees files (overrides DATA_DIR; '
                             'the default schedule file moves with it)')
    parser.add_argument('--orders', type=str, help='Explicit orders file (xlsx or csv)')
    parser.add_argument('--employees', type=str, help='Explicit employees file (xlsx or csv)')
    parser.add_argument('--clean', action='store_true',
                        help='Remove existing entries for the planning date first')
    parser.add_argument('--export', action='store_true',
                        help='Export the schedule and workload reports to Excel')
    parser.add_argument('--output-dir', type=str, help='Report folder (overrides OUTPUT_DIR)')
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = PlanningConfig.from_env()
    except ValueError as e:
        print(f"[ERROR] Invalid configuration: {e}")
        return 1

    if args.data_dir:
        config = config.with_data_dir(args.data_dir)
    output_dir = args.output_dir or config.output_dir

    loader = DataLoader(data_dir=config.data_dir)
    if not loader.load_all(orders_file=args.orders, employees_file=args.employees):
        print("\n[ERROR] Data loading failed")
        return 1
    loader.print_summary()

    validation = validate_planning_data(loader.orders, loader.employees)
    validation.print_report()
    if not validation.is_valid:
        return 1

    store = ScheduleStore(config.schedule_file)
    if os.path.exists(config.schedule_file) and not store.load():
        print(f"\n[ERROR] Existing schedule {config.schedule_file} could not be read; "
              f"fix or move it before planning")
        return 1

    orchestrator = PlanningOrchestrator.from_config(loader, store, config)
    report = orchestrator.run(args.date, clean_first=args.clean)
    report.print_summary()

    if args.export and report.entries:
        os.makedirs(output_dir, exist_ok=True)
        timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
        export_schedule(report.entries,
                        os.path.join(output_dir, f"Schedule_{args.date}_{timestamp}.xlsx"))
        export_workload_report(report,
                               os.path.join(output_dir, f"Workload_{args.date}_{timestamp}.xlsx"))

    return 0 if report.success else 1


if __name__ == '__main__':
    sys.exit(main())
