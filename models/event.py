"""
Demand-side data models for the Venue Scheduler.

1. CandidateEvent: an event waiting for a venue at its preferred date/time.
2. SlotQuery: an ad-hoc "find me the earliest slot" request.
"""

from datetime import date as date_type, time as time_type
from pydantic import BaseModel, Field, ConfigDict, field_validator, model_validator

from .interval import TimeInterval

# Used when a slot query does not name a start time
DEFAULT_PREFERRED_TIME = time_type(9, 0)


def _check_whole_minutes(v: time_type) -> time_type:
    if v.second or v.microsecond:
        raise ValueError("Times must be whole minutes (HH:MM)")
    return v


class CandidateEvent(BaseModel):
    """
    Read-only scheduler input, projected from an event record.
    The engine only needs identity, size and timing; descriptions,
    participant lists and display metadata stay with the record.
    """

    # --- Core Identity ---
    id: str = Field(min_length=1, description="Unique identifier for the event")
    title: str = Field(min_length=1, description="Human-readable title")

    # --- Demand ---
    duration_minutes: int = Field(ge=1, description="Length of the event")
    required_capacity: int = Field(ge=1, description="Seats the venue must offer")

    # --- Preferred Placement ---
    preferred_date: date_type = Field(description="Date the event should take place")
    preferred_start_time: time_type = Field(description="Start time on that date")

    model_config = ConfigDict(frozen=True, json_schema_extra={
        "example": {
            "id": "evt_keynote",
            "title": "Opening Keynote",
            "duration_minutes": 60,
            "required_capacity": 120,
            "preferred_date": "2024-03-15",
            "preferred_start_time": "09:00:00"
        }
    })

    @field_validator('preferred_start_time')
    @classmethod
    def validate_start_time(cls, v: time_type) -> time_type:
        return _check_whole_minutes(v)

    def requested_interval(self) -> TimeInterval:
        """The exact block this event asks for. Raises ValueError past midnight."""
        return TimeInterval.from_duration(self.preferred_date, self.preferred_start_time, self.duration_minutes)

    def sort_key(self):
        """Fixed processing order: chronological, then by id."""
        return (self.preferred_date, self.preferred_start_time, self.id)


class SlotQuery(BaseModel):
    """Parameters of a single slot search."""

    required_capacity: int = Field(ge=1, description="Minimum venue capacity")
    start_date: date_type = Field(description="First date to probe")
    duration_minutes: int = Field(ge=1, description="Length of the wanted slot")
    preferred_start_time: time_type = Field(
        default=DEFAULT_PREFERRED_TIME,
        description="Start time probed on every date"
    )

    model_config = ConfigDict(frozen=True)

    @field_validator('preferred_start_time')
    @classmethod
    def validate_start_time(cls, v: time_type) -> time_type:
        return _check_whole_minutes(v)

    @model_validator(mode='after')
    def validate_fits_in_day(self):
        # Same check for every probed date, so do it once up front
        TimeInterval.from_duration(self.start_date, self.preferred_start_time, self.duration_minutes)
        return self

    def interval_on(self, day: date_type) -> TimeInterval:
        return TimeInterval.from_duration(day, self.preferred_start_time, self.duration_minutes)
