"""
Data models package for the Venue Scheduler.

This package exports the three core pillars of the data architecture:
1. Demand (CandidateEvent, SlotQuery)
2. Supply (Venue, OccupiedInterval)
3. Output (ScheduleResult, SlotResult and their parts)
"""

from .interval import (
    TimeInterval,
    overlaps
)

from .event import (
    CandidateEvent,
    SlotQuery,
    DEFAULT_PREFERRED_TIME
)

from .venue import (
    Venue,
    OccupiedInterval
)

from .schedule import (
    ScheduledAssignment,
    UnscheduledEvent,
    UnscheduledReason,
    RejectedEvent,
    EventOutcome,
    ScheduleResult,
    SlotFound,
    SlotNotFound,
    SlotResult,
    NotFoundReason
)

__all__ = [
    # --- Interval Model ---
    "TimeInterval",
    "overlaps",

    # --- Demand Models ---
    "CandidateEvent",
    "SlotQuery",
    "DEFAULT_PREFERRED_TIME",

    # --- Supply Models ---
    "Venue",
    "OccupiedInterval",

    # --- Output Models ---
    "ScheduledAssignment",
    "UnscheduledEvent",
    "UnscheduledReason",
    "RejectedEvent",
    "EventOutcome",
    "ScheduleResult",
    "SlotFound",
    "SlotNotFound",
    "SlotResult",
    "NotFoundReason",
]
