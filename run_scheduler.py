"""
Main Execution Script for the Venue Scheduler.

Loads a data file exported by the planning application, runs one of the two
engine entry points and prints the summary shown by the desktop views:

    python run_scheduler.py schedule data.json [--export schedule.json]
    python run_scheduler.py find-slot data.json --capacity 50 --start-date 2024-03-15 --duration 60 [--time 09:00]

Data file layout: {"venues": [...], "events": [...], "bookings": [...]}
"""

import argparse
import json
import logging
import os
import sys
from collections import defaultdict
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from loaders import RecordLoader, parse_date, parse_positive_int, parse_time
from models import CandidateEvent, DEFAULT_PREFERRED_TIME, ScheduleResult, SlotFound, SlotNotFound
from scheduler import EventScheduler, InvalidEventError, SlotFinder, find_slot

logger = logging.getLogger("Main")

# --- CONFIGURATION ---
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DEFAULT_LOG_LEVEL = os.environ.get("SCHEDULER_LOG_LEVEL", "WARNING")
# ---------------------


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler()]
    )


def format_schedule_report(
    result: ScheduleResult,
    events: Sequence[CandidateEvent],
    stats: Optional[Dict[str, Any]] = None,
    failures: Optional[List[Dict[str, Any]]] = None
) -> str:
    """
    Table of scheduled/unscheduled rows followed by the text summary.
    """
    lines: List[str] = []
    lines.append(f"{'Event':<30} {'Venue':<20} {'Date':<10}  {'Time':<13}  Status")
    lines.append("-" * 90)

    for a in result.scheduled:
        lines.append(
            f"{a.title[:30]:<30} {a.venue_name[:20]:<20} {a.interval.date.isoformat():<10}  "
            f"{a.interval.label():<13}  Scheduled"
        )
    for miss in result.unscheduled:
        lines.append(f"{miss.title[:30]:<30} {'N/A':<20} {'N/A':<10}  {'N/A':<13}  Unscheduled")

    lines.append("")
    lines.append("Schedule Generation Complete")
    lines.append("=" * 40)
    lines.append("")
    lines.append(f"Total events: {len(events)}")
    lines.append(f"Successfully scheduled: {len(result.scheduled)}")
    lines.append(f"Unscheduled: {len(result.unscheduled)}")
    lines.append(f"Conflicts detected: {len(result.conflicts)}")

    if stats:
        lines.append(f"Success rate: {stats['success_rate']}")
        if stats.get("date_range"):
            first, last = stats["date_range"]
            lines.append(f"Date range: {first.isoformat()} to {last.isoformat()}")
        if stats.get("busiest_day"):
            day, count = stats["busiest_day"]
            lines.append(f"Busiest day: {day.isoformat()} ({count} events)")
        if stats.get("venue_usage"):
            usage = ", ".join(f"{vid} x{n}" for vid, n in stats["venue_usage"].items())
            lines.append(f"Venue usage: {usage}")
        if stats.get("unscheduled_breakdown"):
            breakdown = ", ".join(f"{reason} x{n}" for reason, n in stats["unscheduled_breakdown"].items())
            lines.append(f"Unscheduled by reason: {breakdown}")

    if result.conflicts:
        lines.append("")
        lines.append("Conflicts:")
        for message in result.conflicts:
            lines.append(f"• {message}")

    if failures:
        lines.append("")
        lines.append("Failure analysis:")
        for fail in failures:
            lines.append(
                f"✗ {fail['title']} ({fail['event_id']}): {fail['primary_failure_cause']}, "
                f"{fail['total_attempts']} attempt(s)"
            )
            lines.append(f"   Reason: {fail['latest_reason']}")

    if result.rejected:
        lines.append("")
        lines.append("Rejected (invalid input):")
        for r in result.rejected:
            lines.append(f"• {r.event_id}: {r.reason}")

    if result.unscheduled:
        lines.append("")
        lines.append("Some events could not be scheduled.")
        lines.append("Consider adding more venues or adjusting event times.")

    return "\n".join(lines)


def format_slot_result(result) -> str:
    """Found / not-found panel."""
    lines: List[str] = []
    if isinstance(result, SlotFound):
        lines.append("✓ SLOT FOUND!")
        lines.append("=" * 40)
        lines.append("")
        lines.append(f"Venue: {result.venue.name}")
        lines.append(f"Location: {result.venue.location}")
        lines.append(f"Capacity: {result.venue.capacity}")
        lines.append("")
        lines.append(f"Date: {result.date.isoformat()}")
        lines.append(f"Time: {result.interval.label()}")
        lines.append("")
        lines.append("You can now create an event with these details.")
    elif isinstance(result, SlotNotFound):
        lines.append("✗ NO SLOT FOUND")
        lines.append("=" * 40)
        lines.append("")
        lines.append("Could not find an available slot matching your criteria.")
        lines.append(f"Reason: {result.reason.value} ({result.days_searched} days searched)")
        lines.append("")
        lines.append("Suggestions:")
        lines.append("• Try a smaller capacity requirement")
        lines.append("• Try a later start date")
        lines.append("• Try a different preferred time")
        lines.append("• Add more venues with larger capacity")
    return "\n".join(lines)


def export_schedule_data(result: ScheduleResult, filename: str) -> None:
    """
    Serializes the result for other tools: assignments grouped by date,
    plus the unscheduled and rejected lists.
    """
    logger.info(f"Exporting schedule to {filename}...")

    schedule: Dict[str, List[Dict[str, Any]]] = defaultdict(list)
    for a in result.scheduled:
        schedule[a.interval.date.isoformat()].append(a.model_dump(mode='json'))

    data = {
        "schedule": dict(schedule),
        "unscheduled": [u.model_dump(mode='json') for u in result.unscheduled],
        "rejected": [r.model_dump(mode='json') for r in result.rejected],
        "conflicts": list(result.conflicts),
    }

    path = Path(filename)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
    logger.info("Schedule exported.")


def _cmd_schedule(args: argparse.Namespace) -> int:
    loader = RecordLoader(strict=args.strict)
    dataset = loader.load_file(args.data)

    for error in dataset.errors:
        print(f"Skipped record: {error}", file=sys.stderr)

    if not dataset.events:
        print("No events to schedule. Please create events first.")
        return 0
    if not dataset.venues:
        print("No venues available. Please add venues first.")
        return 0

    scheduler = EventScheduler(dataset.events, dataset.venues, dataset.occupied, strict=args.strict)
    result = scheduler.run()

    print(format_schedule_report(
        result,
        dataset.events,
        scheduler.state.get_statistics(),
        scheduler.state.get_failure_report()
    ))

    if args.export:
        export_schedule_data(result, args.export)
    return 0


def _cmd_find_slot(args: argparse.Namespace) -> int:
    capacity = parse_positive_int(args.capacity, "Required capacity")
    start_date = parse_date(args.start_date, "Start date")
    duration = parse_positive_int(args.duration, "Duration")
    preferred = parse_time(args.time, "Preferred time") if args.time else DEFAULT_PREFERRED_TIME

    loader = RecordLoader(strict=args.strict)
    # Existing events keep their venues busy during the search
    dataset = loader.load_file(args.data, events_hold_venues=True)

    for error in dataset.errors:
        print(f"Skipped record: {error}", file=sys.stderr)

    if not dataset.venues:
        print("No venues available. Please add venues first.")
        return 0

    result = find_slot(
        dataset.venues,
        dataset.occupied,
        required_capacity=capacity,
        start_date=start_date,
        duration_minutes=duration,
        preferred_start_time=preferred,
        horizon_days=args.horizon
    )
    print(format_slot_result(result))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="run_scheduler", description="Venue scheduling engine")
    parser.add_argument("--log-level", default=DEFAULT_LOG_LEVEL, help="DEBUG, INFO, WARNING, ...")
    parser.add_argument("--strict", action="store_true", help="Fail on the first invalid record or event")
    sub = parser.add_subparsers(dest="command", required=True)

    p_schedule = sub.add_parser("schedule", help="Assign venues to all events in the data file")
    p_schedule.add_argument("data", help="JSON data file")
    p_schedule.add_argument("--export", help="Write the result as JSON to this file")
    p_schedule.set_defaults(func=_cmd_schedule)

    p_slot = sub.add_parser("find-slot", help="Find the first free venue slot")
    p_slot.add_argument("data", help="JSON data file")
    p_slot.add_argument("--capacity", required=True)
    p_slot.add_argument("--start-date", required=True, help="YYYY-MM-DD")
    p_slot.add_argument("--duration", required=True, help="Minutes")
    p_slot.add_argument("--time", default="", help=f"HH:MM (default {DEFAULT_PREFERRED_TIME.strftime('%H:%M')})")
    p_slot.add_argument("--horizon", type=int, default=SlotFinder.HORIZON_DAYS, help="Days to search")
    p_slot.set_defaults(func=_cmd_find_slot)

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    try:
        return args.func(args)
    except InvalidEventError as e:
        logger.error(f"Invalid events: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 2
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
