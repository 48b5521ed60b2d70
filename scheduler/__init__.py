"""
Venue scheduling engine.

Two entry points are consumed by the surrounding application:
1. schedule(events, venues, occupied) -> ScheduleResult
2. find_slot(venues, occupied, ...) -> SlotResult
"""

from .constraints import ConstraintChecker, ConstraintViolation, InvalidEventError
from .engine import EventScheduler, schedule
from .slot_finder import SlotFinder, find_slot
from .state import Booking, ConflictIndex, SchedulerState

__all__ = [
    "schedule",
    "find_slot",
    "EventScheduler",
    "SlotFinder",
    "ConstraintChecker",
    "ConstraintViolation",
    "InvalidEventError",
    "Booking",
    "ConflictIndex",
    "SchedulerState",
]
