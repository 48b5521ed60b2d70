"""
Slot Finder.

Read-only search for the earliest (date, venue) that can host a block of
time at a preferred start time. Only that one start time is probed per date;
dates advance one at a time up to a fixed horizon, so the work is bounded.

The finder builds its own conflict index from the occupied intervals it is
given and never touches a scheduler run.
"""

import logging
from datetime import date as date_type, time as time_type, timedelta
from typing import Iterable, List, Optional, Union

from models import (
    DEFAULT_PREFERRED_TIME,
    NotFoundReason,
    OccupiedInterval,
    SlotFound,
    SlotNotFound,
    SlotQuery,
    SlotResult,
    Venue
)
from .constraints import ConstraintChecker
from .state import ConflictIndex

logger = logging.getLogger(__name__)


class SlotFinder:
    """
    Searches venues x dates for the first free slot.
    """

    # Number of dates probed, starting with the query's start date
    HORIZON_DAYS = 30

    def __init__(
        self,
        venues: Iterable[Venue],
        occupied: Iterable[OccupiedInterval] = (),
        horizon_days: Optional[int] = None
    ):
        if horizon_days is None:
            horizon_days = self.HORIZON_DAYS
        if horizon_days < 1:
            raise ValueError(f"Search horizon must be at least 1 day, got {horizon_days}")

        self.horizon_days = horizon_days
        self.checker = ConstraintChecker(venues)
        self.index = ConflictIndex(occupied)

    def search(self, query: SlotQuery) -> SlotResult:
        candidates: List[Venue] = self.checker.adequate_venues(query.required_capacity)

        if not candidates:
            logger.info(f"No venue seats {query.required_capacity}; skipping date search")
            return SlotNotFound(query=query, days_searched=0, reason=NotFoundReason.NO_CAPACITY_FIT)

        for offset in range(self.horizon_days):
            day = query.start_date + timedelta(days=offset)
            interval = query.interval_on(day)

            for venue in candidates:
                if self.index.is_free(venue.id, interval):
                    logger.info(f"Slot found: {venue.name} {interval}")
                    return SlotFound(venue=venue, date=day, interval=interval)

        logger.info(
            f"No free slot at {query.preferred_start_time.strftime('%H:%M')} "
            f"within {self.horizon_days} days of {query.start_date.isoformat()}"
        )
        return SlotNotFound(
            query=query,
            days_searched=self.horizon_days,
            reason=NotFoundReason.HORIZON_EXHAUSTED
        )


def find_slot(
    venues: Iterable[Venue],
    occupied: Iterable[OccupiedInterval],
    required_capacity: int,
    start_date: Union[date_type, str],
    duration_minutes: int,
    preferred_start_time: Union[time_type, str] = DEFAULT_PREFERRED_TIME,
    horizon_days: Optional[int] = None
) -> SlotResult:
    """
    Earliest venue/date with a free [preferred_start_time, +duration) block.

    Malformed parameters raise pydantic.ValidationError; an empty search
    is a normal SlotNotFound.
    """
    query = SlotQuery(
        required_capacity=required_capacity,
        start_date=start_date,
        duration_minutes=duration_minutes,
        preferred_start_time=preferred_start_time
    )
    return SlotFinder(venues, occupied, horizon_days=horizon_days).search(query)
