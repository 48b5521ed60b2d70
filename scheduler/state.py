"""
Scheduler State Management.

This module acts as the 'Memory' of a single run.
It tracks:
1. The Conflict Index (bookings per venue and date).
2. Committed assignments, unscheduled events and rejected input.
3. Detailed failure reporting (for the final summary).

A fresh state is built for every run; nothing survives between calls.
"""

from datetime import date as date_type
from typing import List, Dict, Any, Iterable, Optional, Tuple
from collections import defaultdict
from dataclasses import dataclass, field

from models import (
    CandidateEvent,
    OccupiedInterval,
    RejectedEvent,
    ScheduledAssignment,
    ScheduleResult,
    TimeInterval,
    UnscheduledEvent,
    UnscheduledReason,
    overlaps
)


@dataclass(frozen=True)
class Booking:
    """One entry in the conflict index."""
    venue_id: str
    interval: TimeInterval
    event_id: Optional[str] = None  # None for bookings that predate the run

    def describe(self) -> str:
        return f"event {self.event_id}" if self.event_id else "an existing booking"


class ConflictIndex:
    """
    Bookings keyed by (venue_id, date).
    Intervals on different venues or dates are never compared.
    """

    def __init__(self, occupied: Iterable[OccupiedInterval] = ()):
        self._bookings: Dict[Tuple[str, date_type], List[Booking]] = defaultdict(list)
        for slot in occupied:
            self.add(Booking(venue_id=slot.venue_id, interval=slot.interval))

    def add(self, booking: Booking) -> None:
        self._bookings[(booking.venue_id, booking.interval.date)].append(booking)

    def find_conflict(self, venue_id: str, interval: TimeInterval) -> Optional[Booking]:
        """First booking on this venue/date that overlaps, in insertion order."""
        for booking in self._bookings.get((venue_id, interval.date), []):
            if overlaps(booking.interval, interval):
                return booking
        return None

    def is_free(self, venue_id: str, interval: TimeInterval) -> bool:
        return self.find_conflict(venue_id, interval) is None


@dataclass
class SchedulingAttempt:
    """Record of failed placement attempts for an event."""
    event: CandidateEvent
    attempts: int = 0
    violations: List[Any] = field(default_factory=list)


class SchedulerState:
    """
    Maintains the mutable state of the scheduler during execution.
    The Scheduler is the only writer; the result is frozen once at the end.
    """

    def __init__(self, occupied: Iterable[OccupiedInterval] = ()):
        """Seed the conflict index with the bookings that already exist."""
        self.index = ConflictIndex(occupied)

        # Outcome accumulators (converted to tuples in to_result)
        self.assignments: List[ScheduledAssignment] = []
        self.unscheduled: List[UnscheduledEvent] = []
        self.conflict_messages: List[str] = []
        self.rejected: List[RejectedEvent] = []

        # Failure Tracking
        self.failed_events: Dict[str, SchedulingAttempt] = {}

        # Per-venue usage (assignments made in this run)
        self.venue_usage: Dict[str, int] = defaultdict(int)

    def add_booking(self, assignment: ScheduledAssignment) -> None:
        """
        Commit a successful assignment.
        Later candidates in the same run see it immediately.
        """
        self.assignments.append(assignment)
        self.index.add(Booking(
            venue_id=assignment.venue_id,
            interval=assignment.interval,
            event_id=assignment.event_id
        ))
        self.venue_usage[assignment.venue_id] += 1

    def mark_unscheduled(self, event: CandidateEvent, reason: UnscheduledReason, detail: str) -> None:
        self.unscheduled.append(UnscheduledEvent(
            event_id=event.id,
            title=event.title,
            reason=reason,
            detail=detail
        ))
        self.conflict_messages.append(f"{event.title} ({event.id}): {reason.value} - {detail}")

    def mark_rejected(self, event_id: str, reason: str) -> None:
        self.rejected.append(RejectedEvent(event_id=event_id, reason=reason))

    def record_failure(self, event: CandidateEvent, violation: Any) -> None:
        """
        Log a failed attempt.
        An event checked against several venues aggregates all the reasons.
        """
        if event.id not in self.failed_events:
            self.failed_events[event.id] = SchedulingAttempt(
                event=event,
                attempts=1,
                violations=[violation]
            )
        else:
            attempt = self.failed_events[event.id]
            attempt.attempts += 1
            attempt.violations.append(violation)

    # --- Query Methods ---

    def get_date_range(self) -> Optional[Tuple[date_type, date_type]]:
        if not self.assignments:
            return None
        dates = [a.interval.date for a in self.assignments]
        return min(dates), max(dates)

    # --- Reporting Methods ---

    def to_result(self) -> ScheduleResult:
        """Freeze the accumulated outcome into the immutable result."""
        return ScheduleResult(
            scheduled=tuple(self.assignments),
            unscheduled=tuple(self.unscheduled),
            conflicts=tuple(self.conflict_messages),
            rejected=tuple(self.rejected)
        )

    def get_statistics(self) -> Dict[str, Any]:
        """Counts for the run summary."""
        placed = len(self.assignments)
        missed = len(self.unscheduled)
        total_valid = placed + missed

        stats: Dict[str, Any] = {
            "total_events": total_valid + len(self.rejected),
            "scheduled": placed,
            "unscheduled": missed,
            "rejected": len(self.rejected),
            "conflicts": len(self.conflict_messages),
            "success_rate": f"{(placed / total_valid * 100) if total_valid else 0.0:.1f}%",
            "venue_usage": dict(sorted(self.venue_usage.items())),
            "date_range": self.get_date_range(),
            "busiest_day": None,
        }

        if self.assignments:
            per_day: Dict[date_type, int] = defaultdict(int)
            for a in self.assignments:
                per_day[a.interval.date] += 1
            # Earliest date wins a tie so the summary is stable
            stats["busiest_day"] = max(sorted(per_day.items()), key=lambda x: x[1])

        breakdown: Dict[str, int] = defaultdict(int)
        for miss in self.unscheduled:
            breakdown[miss.reason.value] += 1
        stats["unscheduled_breakdown"] = dict(breakdown)

        return stats

    def get_failure_report(self) -> List[Dict[str, Any]]:
        """
        What could not be placed and why, in processing order.
        Events that failed on one venue but landed on another are left out.
        """
        placed = {a.event_id for a in self.assignments}
        report = []

        for event_id, attempt in self.failed_events.items():
            if event_id in placed:
                continue

            violation_summary: Dict[str, int] = defaultdict(int)
            for v in attempt.violations:
                violation_summary[v.constraint_type] += 1

            report.append({
                "event_id": event_id,
                "title": attempt.event.title,
                "total_attempts": attempt.attempts,
                "primary_failure_cause": max(violation_summary, key=violation_summary.get),
                "violation_breakdown": dict(violation_summary),
                "latest_reason": attempt.violations[-1].reason,
            })

        return report
