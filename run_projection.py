#!/usr/bin/env python3
"""
SkipGenie attendance projection script.

Fetches the current attendance from the portal, optionally resolves
today's per-course status, and projects attendance to a target date.

Usage:
    python run_projection.py [--target-date YYYY-MM-DD] [--mode none|uniform]
                             [--exclude YYYY-MM-DD[:COURSE_ID]] [--today] [--week OFFSET]
                             [--export]

Examples:
    # Project 30 days ahead assuming one lecture per working day
    python run_projection.py --token "your_token"

    # Plan a full-day leave and a single-course absence
    python run_projection.py --target-date 2025-11-28 \\
        --exclude 2025-11-03 --exclude 2025-11-05:1234

    # Show last week's timetable alongside the projection
    python run_projection.py --week -1

    # Use token from environment variable and export the report
    export PORTAL_TOKEN="your_token"
    python run_projection.py --today --export
"""

import sys
import asyncio
import argparse
import logging
from datetime import date, timedelta
from typing import Dict, List, Optional, Tuple

import pandas as pd

from skipgenie.attendance.ledger import ExclusionLedger
from skipgenie.attendance.ratio import compute_ratio
from skipgenie.attendance.session import AttendanceSession
from skipgenie.exceptions import AttendanceError, AuthorizationExpiredError, ValidationError
from skipgenie.models.attendance import (
    ProjectionMode,
    ProjectionReport,
    RiskStatus,
    ScheduleEntry,
    ScheduleKind,
)
from skipgenie.portal.client import PortalClient
from skipgenie.portal.session import TokenSession
from skipgenie.utils.config import config, SecureString
from skipgenie.utils.file_utils import generate_filename, save_csv, save_json
from skipgenie.utils.logger import setup_logger


def parse_arguments():
    """
    Parse command-line arguments.

    Returns:
        Parsed arguments
    """
    parser = argparse.ArgumentParser(
        description="Project attendance against the 75% minimum",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )

    parser.add_argument(
        "--target-date",
        help="Projection target date (default: today + PROJECTION_HORIZON_DAYS)"
    )

    parser.add_argument(
        "--mode",
        choices=[m.value for m in ProjectionMode],
        default=ProjectionMode.UNIFORM.value,
        help="Future lecture assumption (default: uniform)"
    )

    parser.add_argument(
        "--exclude",
        action="append",
        default=[],
        metavar="DATE[:COURSE_ID]",
        help="Planned absence; repeat for several (omit COURSE_ID for a full day)"
    )

    parser.add_argument(
        "--today",
        action="store_true",
        help="Also resolve today's per-course status"
    )

    parser.add_argument(
        "--week",
        type=int,
        metavar="OFFSET",
        help="Also print the timetable of the week OFFSET weeks from this one (0 = current)"
    )

    parser.add_argument(
        "--export",
        action="store_true",
        help="Save the projection as JSON and CSV under OUTPUT_DIR/reports"
    )

    parser.add_argument(
        "--token",
        help="Portal token (overrides PORTAL_TOKEN env var)"
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default=config.log_level,
        help="Logging level (default: LOG_LEVEL or INFO)"
    )

    return parser.parse_args()


def parse_exclusion(value: str) -> Tuple[str, Optional[int]]:
    """
    Parse an --exclude value.

    Args:
        value: "YYYY-MM-DD" or "YYYY-MM-DD:COURSE_ID"

    Returns:
        Tuple of (date text, course id or None)

    Raises:
        ValidationError: If the course id is not an integer
    """
    day, _, course = value.partition(":")
    if not course:
        return day, None
    try:
        return day, int(course)
    except ValueError:
        raise ValidationError(f"Invalid course id in exclusion '{value}'")


def display_breakdown(session: AttendanceSession, today_map: dict):
    """Print the current per-course breakdown and the overall summary."""
    summary = session.summary()

    print("\n" + "=" * 60)
    print("CURRENT ATTENDANCE")
    print("=" * 60)
    for course in session.courses:
        if not course.has_attendance:
            continue
        ratio = compute_ratio(course.present_count, course.total_count)
        status = today_map.get(course.course_id)
        badge = f" [{status.value}]" if status else ""
        if ratio.status == RiskStatus.SAFE:
            tip = f"can miss {ratio.can_miss}"
        else:
            tip = f"attend next {ratio.must_attend}"
        print(
            f"{course.course_name[:30]:30s} {course.present_count:3d}/{course.total_count:<3d} "
            f"{ratio.percentage:5.1f}% {ratio.status.value:6s} {tip}{badge}"
        )
    print("-" * 60)
    print(
        f"Overall: {summary.ratio.percentage:.1f}% over {summary.course_count} subjects, "
        f"{summary.at_risk_count} below 75%"
    )


def display_timetable(days: Dict[date, List[ScheduleEntry]]):
    """Print one week of the timetable, day by day."""
    monday = min(days)
    print("\n" + "=" * 60)
    print(f"TIMETABLE FOR WEEK OF {monday.isoformat()}")
    print("=" * 60)
    for day, entries in days.items():
        print(f"{day.strftime('%a %d/%m')}:")
        if not entries:
            print("  (no classes)")
        for entry in entries:
            if entry.kind == ScheduleKind.HOLIDAY:
                print(f"  Holiday: {entry.title or entry.course_name}")
                continue
            end = entry.end.strftime("%H:%M") if entry.end else "?"
            where = f" @ {entry.venue}" if entry.venue else ""
            print(
                f"  {entry.start.strftime('%H:%M')}-{end} "
                f"{entry.course_code} {entry.course_name}{where}"
            )


def display_projection(report: ProjectionReport):
    """Print the projection table and the at-risk list."""
    print("\n" + "=" * 60)
    print(f"PROJECTION FOR {report.target_date.isoformat()} "
          f"({report.working_days} working days ahead, {report.mode.value})")
    print("=" * 60)
    for r in report.results:
        sign = "+" if r.delta >= 0 else ""
        print(
            f"{r.course_name[:30]:30s} {r.current_percentage:5.1f}% -> "
            f"{r.projected_percentage:5.1f}% ({sign}{r.delta:.1f}%)"
        )

    at_risk = report.at_risk
    print("-" * 60)
    if at_risk:
        print(f"{len(at_risk)} subject(s) will be below 75%:")
        for r in at_risk:
            print(f"  - {r.course_name} -> {r.projected_percentage:.1f}% (attend {r.must_attend} more)")
    else:
        print(f"All subjects will be above 75% on {report.target_date.isoformat()}!")


def export_report(report: ProjectionReport) -> List[str]:
    """
    Save the projection report.

    Returns:
        Paths of the files written
    """
    config.create_output_directories()
    output_dir = config.output_dir / "reports"
    written = []

    json_path = output_dir / generate_filename("projection", "json")
    data = {
        "target_date": report.target_date.isoformat(),
        "mode": report.mode.value,
        "working_days": report.working_days,
        "results": report.to_records(),
    }
    if save_json(data, json_path):
        written.append(str(json_path))

    if report.results:
        csv_path = output_dir / generate_filename("projection", "csv")
        if save_csv(pd.DataFrame(report.to_records()), csv_path):
            written.append(str(csv_path))

    return written


async def run(args, logger: logging.Logger) -> int:
    """Fetch, resolve and project. Returns the process exit code."""
    token = SecureString(args.token) if args.token else config.portal_token
    if token is None:
        print("ERROR: Token is required. Use --token or set PORTAL_TOKEN")
        return 1

    token_session = TokenSession(token, issued_at=config.portal_token_issued_at)
    ledger = ExclusionLedger()

    for value in args.exclude:
        day, course_id = parse_exclusion(value)
        ledger.add(day, course_id=course_id)
        logger.info(f"Planned absence: {value}")

    target = args.target_date or (
        date.today() + timedelta(days=config.projection_horizon_days)
    ).isoformat()

    async with PortalClient(config.portal_url, token_session, timeout=config.request_timeout) as portal:
        session = AttendanceSession(portal, ledger=ledger, token_session=token_session)

        print("\n[1/3] Loading attendance...")
        courses = await session.load_roster()
        print(f"✓ Loaded {len(courses)} courses")

        today_map = {}
        if args.today:
            print("\n[2/3] Resolving today's status...")
            today_map = await session.resolve_today()
            print(f"✓ {len(today_map)} course(s) have a class today")
        else:
            print("\n[2/3] Skipping today's status")

        display_breakdown(session, today_map)

        if args.week is not None:
            display_timetable(await session.week_timetable(args.week))

        print("\n[3/3] Projecting...")
        report = session.project(target, args.mode)
        display_projection(report)

    if args.export:
        for path in export_report(report):
            print(f"Report saved to: {path}")

    return 0


def main():
    """Main execution function."""
    args = parse_arguments()

    logger = setup_logger(
        "skipgenie",
        level=getattr(logging, args.log_level, logging.INFO)
    )

    try:
        config.validate()
        return asyncio.run(run(args, logger))

    except KeyboardInterrupt:
        print("\n\nInterrupted by user")
        logger.info("Interrupted by user")
        return 130

    except AuthorizationExpiredError as e:
        logger.error(f"Authorization expired: {e}")
        print(f"\nERROR: {e}")
        return 2

    except (AttendanceError, ValueError) as e:
        logger.error(f"{type(e).__name__}: {e}")
        print(f"\nERROR: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
