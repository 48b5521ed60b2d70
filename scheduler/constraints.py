"""
Hard Constraint Validation Logic.

This module answers the binary question: "Can Event X happen in Venue Y at Time Z?"
It enforces input preconditions, seat capacity and physical reality
(a venue cannot host two things at once).
"""

from datetime import date as date_type, time as time_type
from typing import Iterable, List, Optional
from dataclasses import dataclass

from models import CandidateEvent, TimeInterval, Venue
from .state import ConflictIndex


@dataclass(frozen=True)
class ConstraintViolation:
    """Detailed reason for rejection."""
    constraint_type: str  # "Input", "Capacity" or "Overlap"
    reason: str
    event_id: str
    venue_id: Optional[str] = None


class InvalidEventError(ValueError):
    """Raised in strict mode when candidates violate input preconditions."""

    def __init__(self, violations: List[ConstraintViolation]):
        self.violations = violations
        details = "; ".join(f"{v.event_id}: {v.reason}" for v in violations)
        super().__init__(f"{len(violations)} invalid event(s): {details}")


class ConstraintChecker:
    """
    Validates hard constraints for event placement.
    """

    def __init__(self, venues: Iterable[Venue]):
        # Closed venues are filtered once; the rest keep the fixed allocation order
        self.venues: List[Venue] = sorted(
            (v for v in venues if v.is_available),
            key=lambda v: v.sort_key()
        )
        self.largest_capacity = max((v.capacity for v in self.venues), default=0)

    def adequate_venues(self, required_capacity: int) -> List[Venue]:
        """Venues that can seat the group, smallest first."""
        return [v for v in self.venues if v.can_accommodate(required_capacity)]

    def validate_event(self, event: CandidateEvent) -> Optional[ConstraintViolation]:
        """
        Re-checks preconditions the model normally enforces on construction.
        Catches candidates built with model_construct() or mutated upstream,
        plus requests that would run past midnight.
        """
        event_id = str(getattr(event, "id", "") or "")
        if not event_id:
            return ConstraintViolation("Input", "Event id cannot be blank", "<missing>")

        duration = getattr(event, "duration_minutes", None)
        if not isinstance(duration, int) or isinstance(duration, bool) or duration <= 0:
            return ConstraintViolation("Input", f"Duration must be a positive number of minutes, got {duration!r}", event_id)

        capacity = getattr(event, "required_capacity", None)
        if not isinstance(capacity, int) or isinstance(capacity, bool) or capacity <= 0:
            return ConstraintViolation("Input", f"Required capacity must be positive, got {capacity!r}", event_id)

        if not isinstance(getattr(event, "preferred_date", None), date_type):
            return ConstraintViolation("Input", f"Unparsable preferred date {getattr(event, 'preferred_date', None)!r}", event_id)

        if not isinstance(getattr(event, "preferred_start_time", None), time_type):
            return ConstraintViolation("Input", f"Unparsable preferred start time {getattr(event, 'preferred_start_time', None)!r}", event_id)

        try:
            event.requested_interval()
        except ValueError as e:
            return ConstraintViolation("Input", str(e), event_id)

        return None

    def check_capacity(self, event: CandidateEvent) -> Optional[ConstraintViolation]:
        """Fails when no available venue is large enough."""
        if self.adequate_venues(event.required_capacity):
            return None

        if not self.venues:
            reason = "no venues available"
        else:
            reason = (
                f"needs {event.required_capacity} seats, "
                f"largest available venue holds {self.largest_capacity}"
            )
        return ConstraintViolation("Capacity", reason, event.id)

    def check_overlap(
        self,
        event: CandidateEvent,
        venue: Venue,
        interval: TimeInterval,
        index: ConflictIndex
    ) -> Optional[ConstraintViolation]:
        """
        Ensures the block is free on this venue, against both pre-existing
        bookings and assignments committed earlier in the same run.
        """
        blocking = index.find_conflict(venue.id, interval)
        if blocking is None:
            return None

        return ConstraintViolation(
            "Overlap",
            f"{venue.name} is taken {blocking.interval.label()} by {blocking.describe()}",
            event.id,
            venue_id=venue.id
        )
