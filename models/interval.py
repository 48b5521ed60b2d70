"""
Time interval model for the Venue Scheduler.

Every booking, request and search probe in the engine is reduced to a
TimeInterval: one calendar date plus a same-day [start, end) range.
Overlap uses half-open comparison, so back-to-back bookings
(10:00-11:00 followed by 11:00-12:00) never conflict.
"""

from datetime import date as date_type, time as time_type, datetime, timedelta
from pydantic import BaseModel, Field, ConfigDict, field_validator, model_validator


class TimeInterval(BaseModel):
    """
    A same-day block of time at whole-minute resolution.
    """

    date: date_type = Field(description="Calendar date")
    start: time_type = Field(description="Start time (inclusive)")
    end: time_type = Field(description="End time (exclusive)")

    model_config = ConfigDict(frozen=True, json_schema_extra={
        "example": {
            "date": "2024-03-15",
            "start": "09:00:00",
            "end": "10:00:00"
        }
    })

    @field_validator('start', 'end')
    @classmethod
    def validate_whole_minutes(cls, v: time_type) -> time_type:
        """Resolution is whole minutes and times carry no timezone."""
        if v.second or v.microsecond:
            raise ValueError("Times must be whole minutes (HH:MM)")
        if v.tzinfo is not None:
            raise ValueError("Times must not carry a timezone")
        return v

    @model_validator(mode='after')
    def validate_order(self):
        if self.start >= self.end:
            raise ValueError("End time must be strictly after start time")
        return self

    @classmethod
    def from_duration(cls, on: date_type, start: time_type, duration_minutes: int) -> "TimeInterval":
        """
        Build [start, start + duration) on the given date.
        Raises ValueError if the block would spill past midnight.
        """
        if duration_minutes <= 0:
            raise ValueError(f"Duration must be positive, got {duration_minutes}")

        begin = datetime.combine(on, start)
        finish = begin + timedelta(minutes=duration_minutes)
        if finish.date() != on:
            raise ValueError(
                f"{start.strftime('%H:%M')} + {duration_minutes} min runs past midnight on {on.isoformat()}"
            )
        return cls(date=on, start=start, end=finish.time())

    @property
    def duration_minutes(self) -> int:
        start_min = self.start.hour * 60 + self.start.minute
        end_min = self.end.hour * 60 + self.end.minute
        return end_min - start_min

    def overlaps(self, other: "TimeInterval") -> bool:
        return overlaps(self, other)

    def label(self) -> str:
        """Display form, e.g. '09:00 - 10:00'."""
        return f"{self.start.strftime('%H:%M')} - {self.end.strftime('%H:%M')}"

    def __str__(self) -> str:
        return f"{self.date.isoformat()} {self.label()}"


def overlaps(a: TimeInterval, b: TimeInterval) -> bool:
    """
    Standard overlap logic: StartA < EndB and StartB < EndA, on the same date.
    Touching endpoints are not an overlap.
    """
    return a.date == b.date and a.start < b.end and b.start < a.end
