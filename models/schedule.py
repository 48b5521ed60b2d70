"""
Schedule data models for the Venue Scheduler.

This module defines the 'Output' of the engine:
1. Per-event outcomes (ScheduledAssignment | UnscheduledEvent | RejectedEvent)
2. The ScheduleResult partition built once at the end of a run
3. The SlotResult tagged union returned by the slot finder
"""

from typing import Annotated, FrozenSet, Literal, Optional, Tuple, Union
from enum import Enum
from datetime import date as date_type
from pydantic import BaseModel, Field, ConfigDict

from .event import SlotQuery
from .interval import TimeInterval
from .venue import Venue


class UnscheduledReason(str, Enum):
    """Why a valid event could not be placed."""
    INSUFFICIENT_CAPACITY = "insufficient-capacity"
    ALL_VENUES_CONFLICTED = "all-venues-conflicted"


class NotFoundReason(str, Enum):
    """Why a slot search came back empty."""
    NO_CAPACITY_FIT = "no-capacity-fit"
    HORIZON_EXHAUSTED = "horizon-exhausted"


class ScheduledAssignment(BaseModel):
    """A committed venue + time block for one event."""

    outcome: Literal["scheduled"] = "scheduled"
    event_id: str
    title: str
    venue_id: str
    venue_name: str
    interval: TimeInterval

    model_config = ConfigDict(frozen=True, json_schema_extra={
        "example": {
            "outcome": "scheduled",
            "event_id": "evt_keynote",
            "title": "Opening Keynote",
            "venue_id": "ven_hall_a",
            "venue_name": "Hall A",
            "interval": {"date": "2024-03-15", "start": "09:00:00", "end": "10:00:00"}
        }
    })


class UnscheduledEvent(BaseModel):
    """A valid event the greedy pass could not place."""

    outcome: Literal["unscheduled"] = "unscheduled"
    event_id: str
    title: str
    reason: UnscheduledReason
    detail: str = Field(default="", description="Human-readable explanation")

    model_config = ConfigDict(frozen=True)


class RejectedEvent(BaseModel):
    """A candidate that violated a precondition and never entered scheduling."""

    event_id: str
    reason: str

    model_config = ConfigDict(frozen=True)


EventOutcome = Annotated[Union[ScheduledAssignment, UnscheduledEvent], Field(discriminator="outcome")]


class ScheduleResult(BaseModel):
    """
    Result of one scheduler run.
    Every valid input event is in exactly one of `scheduled` / `unscheduled`;
    rejected candidates are in neither.
    """

    scheduled: Tuple[ScheduledAssignment, ...] = ()
    unscheduled: Tuple[UnscheduledEvent, ...] = ()
    conflicts: Tuple[str, ...] = ()
    rejected: Tuple[RejectedEvent, ...] = ()

    model_config = ConfigDict(frozen=True)

    @property
    def scheduled_event_ids(self) -> FrozenSet[str]:
        return frozenset(a.event_id for a in self.scheduled)

    @property
    def unscheduled_event_ids(self) -> FrozenSet[str]:
        return frozenset(u.event_id for u in self.unscheduled)

    def outcome_for(self, event_id: str) -> Optional[EventOutcome]:
        """Scheduled or unscheduled outcome of an event, None if it was rejected/unknown."""
        for assignment in self.scheduled:
            if assignment.event_id == event_id:
                return assignment
        for miss in self.unscheduled:
            if miss.event_id == event_id:
                return miss
        return None


class SlotFound(BaseModel):
    """First free slot matching a query."""

    status: Literal["found"] = "found"
    venue: Venue
    date: date_type
    interval: TimeInterval

    model_config = ConfigDict(frozen=True)


class SlotNotFound(BaseModel):
    """No venue/date within the horizon matched."""

    status: Literal["not_found"] = "not_found"
    query: SlotQuery
    days_searched: int = Field(ge=0)
    reason: NotFoundReason

    model_config = ConfigDict(frozen=True)


SlotResult = Annotated[Union[SlotFound, SlotNotFound], Field(discriminator="status")]
