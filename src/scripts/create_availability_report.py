#!/usr/bin/env python3
"""
Create an availability report from a user's MS365 calendars.

Lists the user's calendars, fetches events from those marked as task or
fungible, computes remaining working time per day plus project and fungible
breakdowns, prints a summary and writes an Excel workbook.

Usage:
    uv run python src/scripts/create_availability_report.py \\
        --user someone@example.com \\
        --task-calendar "Projects" --fungible-calendar "Meetings" \\
        --start 2025-11-03 --end 2025-11-09 --timezone America/New_York
"""

import argparse
import asyncio
import sys
import traceback
from datetime import timedelta
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.config import DEFAULT_RANGE_DAYS, OUTPUT_DIR
from core.timeutils import DateRange
from core.validation import (
    default_time_config,
    parse_date,
    parse_time_config,
    validate_time_config,
)
from models.availability import CalendarCategory, TimeConfig
from services.availability import collect_events, compute_availability
from services.calendar import fetch_relevant_events, list_user_calendars
from services.reports import format_console_summary, save_availability_report


def split_window(value: str) -> tuple[str, str]:
    """Split 'HH:MM-HH:MM' into its two clocks."""
    try:
        start, end = value.split("-")
    except ValueError:
        raise argparse.ArgumentTypeError(f"Expected HH:MM-HH:MM, got '{value}'")
    return start.strip(), end.strip()


def build_time_config(args: argparse.Namespace) -> TimeConfig:
    """Overlay command-line options on the default config."""
    defaults = default_time_config(timezone=args.timezone)
    weekday = args.weekday or (defaults.weekday_start, defaults.weekday_end)
    weekend = args.weekend or (defaults.weekend_start, defaults.weekend_end)
    start_date = parse_date(args.start) if args.start else defaults.start_date
    end_date = args.end or start_date + timedelta(days=DEFAULT_RANGE_DAYS)
    return parse_time_config(
        {
            "start_date": start_date,
            "end_date": end_date,
            "weekday_start": weekday[0],
            "weekday_end": weekday[1],
            "weekend_start": weekend[0],
            "weekend_end": weekend[1],
            "timezone": defaults.timezone,
            "buffer_factor": args.buffer if args.buffer is not None else defaults.buffer_factor,
        }
    )


def build_assignments(args: argparse.Namespace) -> dict[str, CalendarCategory]:
    assignments = {name: CalendarCategory.TASK for name in args.task_calendar}
    assignments.update({name: CalendarCategory.FUNGIBLE for name in args.fungible_calendar})
    return assignments


async def main(args: argparse.Namespace):
    """Main entry point."""
    try:
        # 1. Validate config before touching the network
        config = validate_time_config(build_time_config(args))
        dates = DateRange.from_config(config)
        print(f"Computing availability for {config.start_date} to {config.end_date} ({config.timezone})")

        # 2. Categorize the user's calendars
        calendars = await list_user_calendars(args.user, build_assignments(args))
        active = [c for c in calendars if c["category"] != CalendarCategory.INACTIVE]
        if not active:
            print("No task or fungible calendars matched!")
            return

        # 3. Fetch every relevant calendar before aggregating
        print(f"\nFetching events from {len(active)} calendar(s)...")
        events_by_calendar = await fetch_relevant_events(args.user, calendars, dates.fetch_window())
        events = collect_events(calendars, events_by_calendar)
        print(f"\nTotal events: {len(events)}")

        # 4. Compute and report
        report = compute_availability(config, calendars, events)
        print()
        print(format_console_summary(report))

        output_path = (
            OUTPUT_DIR / "reports" / "availability"
            / f"availability_{config.start_date}_{config.end_date}.xlsx"
        )
        save_availability_report(report, output_path)

        print("\nDone!")

    except ValueError as e:
        print(f"\nInvalid configuration: {e}")
        raise SystemExit(2)

    except Exception as e:
        print(f"\nError: {e}")
        traceback.print_exc()
        raise


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Generate calendar availability report")
    parser.add_argument("--user", required=True, help="User principal name or id")
    parser.add_argument(
        "--task-calendar", action="append", default=[],
        help="Calendar whose events are 'Project: Task' work (repeatable)",
    )
    parser.add_argument(
        "--fungible-calendar", action="append", default=[],
        help="Calendar whose events only reduce available time (repeatable)",
    )
    parser.add_argument("--start", help="Start date (YYYY-MM-DD). Defaults to today.")
    parser.add_argument("--end", help="End date (YYYY-MM-DD). Defaults to a week from start.")
    parser.add_argument("--timezone", help="IANA timezone, e.g. America/New_York")
    parser.add_argument("--weekday", type=split_window, help="Weekday window, e.g. 09:00-17:00")
    parser.add_argument("--weekend", type=split_window, help="Weekend window, e.g. 10:00-18:00")
    parser.add_argument("--buffer", type=float, help="Fraction of the window treated as available")
    args = parser.parse_args()

    asyncio.run(main(args))
