"""
Supply-side data models for the Venue Scheduler.

This module defines what the engine allocates from:
1. Venues (rooms with a seat capacity)
2. Occupied intervals (bookings that exist before a run starts)
"""

from typing import List
from pydantic import BaseModel, Field, ConfigDict

from .interval import TimeInterval


class Venue(BaseModel):
    """
    A bookable room. Immutable for the duration of a scheduling run.
    """
    id: str = Field(min_length=1, description="Unique identifier")
    name: str = Field(min_length=1, description="Display name, also the secondary sort key")
    capacity: int = Field(ge=1, description="Maximum number of attendees")
    location: str = Field(min_length=1, description="Address or building")

    # Carried over from the venue record; not used for allocation
    facilities: List[str] = Field(default_factory=list, description="e.g. 'Projector', 'Stage'")
    hourly_rate: float = Field(default=0.0, ge=0, description="Rental price per hour")

    # Unavailable venues are never offered by the scheduler or the slot finder
    is_available: bool = Field(default=True, description="Closed venues are skipped")

    model_config = ConfigDict(frozen=True, json_schema_extra={
        "example": {
            "id": "ven_hall_a",
            "name": "Hall A",
            "capacity": 150,
            "location": "Main Building",
            "facilities": ["Projector"],
            "hourly_rate": 80.0,
            "is_available": True
        }
    })

    def can_accommodate(self, participants: int) -> bool:
        return participants <= self.capacity

    def sort_key(self):
        """Smallest adequate venue first; name then id break ties."""
        return (self.capacity, self.name, self.id)

    def display_string(self) -> str:
        return f"{self.name} ({self.location}) - Capacity: {self.capacity}"


class OccupiedInterval(BaseModel):
    """A booking on a venue that was confirmed before the current run."""
    venue_id: str = Field(min_length=1)
    interval: TimeInterval

    model_config = ConfigDict(frozen=True)
