"""
The Venue Scheduling Engine.

This module implements the core "Solver" logic: a greedy, single-pass
assignment of candidate events to venues.

1. Chronological order - events are processed by (date, start time, id).
2. Smallest Adequate Venue - keeps large rooms free for larger events later.
3. Commit Immediately - each accepted event is visible to every later candidate.

There is no backtracking, so an order-dependent miss is possible even when
another assignment would have fit everyone. Callers needing an optimal
schedule must not rely on this engine.
"""

import logging
from typing import Iterable, List, Sequence

from models import (
    CandidateEvent,
    OccupiedInterval,
    ScheduledAssignment,
    ScheduleResult,
    UnscheduledReason,
    Venue
)
from .constraints import ConstraintChecker, ConstraintViolation, InvalidEventError
from .state import SchedulerState

logger = logging.getLogger(__name__)


class EventScheduler:
    """
    Main scheduling engine.
    Ingests Demand (events) and Supply (venues + existing bookings), outputs a ScheduleResult.
    """

    def __init__(
        self,
        events: Iterable[CandidateEvent],
        venues: Iterable[Venue],
        occupied: Iterable[OccupiedInterval] = (),
        strict: bool = False
    ):
        self.events: List[CandidateEvent] = list(events)
        self.venues: List[Venue] = list(venues)
        self.occupied: List[OccupiedInterval] = list(occupied)
        self.strict = strict

        self.checker = ConstraintChecker(self.venues)
        self.state = SchedulerState(self.occupied)

    def run(self) -> ScheduleResult:
        """
        Execute the scheduling pipeline. Safe to call more than once;
        each call starts from a fresh state.
        """
        self.state = SchedulerState(self.occupied)
        logger.info(
            f"Scheduling {len(self.events)} events across {len(self.checker.venues)} available venues "
            f"({len(self.occupied)} existing bookings)"
        )

        # 1. Preconditions: invalid candidates never enter the partition
        candidates = self._validate(self.events)

        # 2. Fixed processing order
        candidates.sort(key=lambda e: e.sort_key())

        # 3. Main Loop
        for event in candidates:
            self._attempt_placement(event)

        result = self.state.to_result()
        logger.info(
            f"Scheduling complete: {len(result.scheduled)} scheduled, "
            f"{len(result.unscheduled)} unscheduled, {len(result.rejected)} rejected"
        )
        return result

    def _validate(self, events: Sequence[CandidateEvent]) -> List[CandidateEvent]:
        valid: List[CandidateEvent] = []
        violations: List[ConstraintViolation] = []
        seen_ids = set()

        for event in events:
            violation = self.checker.validate_event(event)
            if violation is None and event.id in seen_ids:
                violation = ConstraintViolation("Input", "Duplicate event id", event.id)

            if violation is not None:
                violations.append(violation)
                continue

            seen_ids.add(event.id)
            valid.append(event)

        if violations and self.strict:
            raise InvalidEventError(violations)

        for v in violations:
            logger.warning(f"Rejected event {v.event_id}: {v.reason}")
            self.state.mark_rejected(v.event_id, v.reason)

        return valid

    def _attempt_placement(self, event: CandidateEvent) -> bool:
        """
        Tries the adequate venues in order and commits the first free one.
        """
        interval = event.requested_interval()

        # A. Capacity (no room is big enough at all)
        violation = self.checker.check_capacity(event)
        if violation:
            self.state.record_failure(event, violation)
            self.state.mark_unscheduled(event, UnscheduledReason.INSUFFICIENT_CAPACITY, violation.reason)
            logger.debug(f"{event.id}: {violation.reason}")
            return False

        # B. Overlap, smallest adequate venue first
        clashes: List[ConstraintViolation] = []
        for venue in self.checker.adequate_venues(event.required_capacity):
            violation = self.checker.check_overlap(event, venue, interval, self.state.index)
            if violation is None:
                self.state.add_booking(ScheduledAssignment(
                    event_id=event.id,
                    title=event.title,
                    venue_id=venue.id,
                    venue_name=venue.name,
                    interval=interval
                ))
                logger.debug(f"{event.id} -> {venue.name} {interval}")
                return True

            self.state.record_failure(event, violation)
            clashes.append(violation)

        detail = f"{interval} clashes on every adequate venue: " + "; ".join(v.reason for v in clashes)
        self.state.mark_unscheduled(event, UnscheduledReason.ALL_VENUES_CONFLICTED, detail)
        logger.debug(f"{event.id}: {detail}")
        return False


def schedule(
    events: Iterable[CandidateEvent],
    venues: Iterable[Venue],
    occupied: Iterable[OccupiedInterval] = (),
    strict: bool = False
) -> ScheduleResult:
    """
    Assign each event a non-conflicting venue at its preferred date and time.

    Pure and deterministic: identical input always gives an identical result.
    With strict=True, invalid candidates raise InvalidEventError before anything
    is committed; otherwise they are reported in ScheduleResult.rejected.
    """
    return EventScheduler(events, venues, occupied, strict=strict).run()
