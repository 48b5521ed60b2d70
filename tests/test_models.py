"""Tests for input/output model validation."""

from datetime import date, time

import pytest
from pydantic import TypeAdapter, ValidationError

from models import (
    CandidateEvent,
    NotFoundReason,
    ScheduledAssignment,
    ScheduleResult,
    SlotFound,
    SlotNotFound,
    SlotQuery,
    SlotResult,
    TimeInterval,
    UnscheduledEvent,
    UnscheduledReason,
    Venue,
)


def _event(**overrides) -> CandidateEvent:
    fields = dict(
        id="A",
        title="Workshop",
        duration_minutes=60,
        required_capacity=20,
        preferred_date=date(2024, 3, 15),
        preferred_start_time=time(9, 0),
    )
    fields.update(overrides)
    return CandidateEvent(**fields)


def test_event_parses_iso_strings():
    event = _event(preferred_date="2024-03-15", preferred_start_time="09:00")
    assert event.preferred_date == date(2024, 3, 15)
    assert event.preferred_start_time == time(9, 0)


@pytest.mark.parametrize("field,value", [
    ("duration_minutes", 0),
    ("duration_minutes", -15),
    ("required_capacity", 0),
    ("title", ""),
    ("preferred_date", "15-03-2024"),
])
def test_event_rejects_malformed_input(field, value):
    with pytest.raises(ValidationError):
        _event(**{field: value})


def test_requested_interval():
    interval = _event(duration_minutes=45).requested_interval()
    assert interval == TimeInterval(date=date(2024, 3, 15), start=time(9, 0), end=time(9, 45))


def test_venue_capacity_must_be_positive():
    with pytest.raises(ValidationError):
        Venue(id="V1", name="Room", capacity=0, location="HQ")


def test_venue_can_accommodate():
    venue = Venue(id="V1", name="Room", capacity=30, location="HQ")
    assert venue.can_accommodate(30)
    assert not venue.can_accommodate(31)
    assert venue.display_string() == "Room (HQ) - Capacity: 30"


def test_slot_query_defaults_to_nine():
    query = SlotQuery(required_capacity=10, start_date=date(2024, 3, 15), duration_minutes=60)
    assert query.preferred_start_time == time(9, 0)


def test_slot_query_past_midnight_is_invalid():
    with pytest.raises(ValidationError):
        SlotQuery(
            required_capacity=10,
            start_date=date(2024, 3, 15),
            duration_minutes=120,
            preferred_start_time=time(23, 0),
        )


def test_outcome_for_returns_tagged_outcome():
    interval = TimeInterval(date=date(2024, 3, 15), start=time(9, 0), end=time(10, 0))
    result = ScheduleResult(
        scheduled=(ScheduledAssignment(event_id="A", title="A", venue_id="V1", venue_name="V1", interval=interval),),
        unscheduled=(UnscheduledEvent(event_id="B", title="B", reason=UnscheduledReason.ALL_VENUES_CONFLICTED),),
    )
    assert result.outcome_for("A").outcome == "scheduled"
    assert result.outcome_for("B").outcome == "unscheduled"
    assert result.outcome_for("C") is None
    assert result.scheduled_event_ids == frozenset({"A"})
    assert result.unscheduled_event_ids == frozenset({"B"})


def test_slot_result_is_discriminated_on_status():
    adapter = TypeAdapter(SlotResult)
    not_found = adapter.validate_python({
        "status": "not_found",
        "query": {"required_capacity": 10, "start_date": "2024-03-15", "duration_minutes": 60},
        "days_searched": 30,
        "reason": "horizon-exhausted",
    })
    assert isinstance(not_found, SlotNotFound)
    assert not_found.reason is NotFoundReason.HORIZON_EXHAUSTED

    found = adapter.validate_python({
        "status": "found",
        "venue": {"id": "V1", "name": "Room", "capacity": 30, "location": "HQ"},
        "date": "2024-03-15",
        "interval": {"date": "2024-03-15", "start": "09:00", "end": "10:00"},
    })
    assert isinstance(found, SlotFound)
    assert not hasattr(found, "days_searched")
