"""Tests for projecting application records into engine inputs."""

import json
from datetime import date, time

import pytest

from loaders import RecordError, RecordLoader, parse_date, parse_positive_int, parse_time
from models import SlotNotFound
from scheduler import find_slot


def _counter_ids():
    ids = iter(f"gen-{i}" for i in range(1, 100))
    return lambda: next(ids)


def test_parse_date_accepts_unpadded():
    assert parse_date("2024-3-5") == date(2024, 3, 5)
    assert parse_date("2024-03-15") == date(2024, 3, 15)


@pytest.mark.parametrize("value,message", [
    ("", "Date is required"),
    ("15-03-2024", "Date must be in YYYY-MM-DD format"),
    ("2024-02-30", "Date must be in YYYY-MM-DD format"),
])
def test_parse_date_errors(value, message):
    with pytest.raises(RecordError, match=message):
        parse_date(value)


def test_parse_time():
    assert parse_time("9:30") == time(9, 30)
    assert parse_time("09:30") == time(9, 30)


@pytest.mark.parametrize("value", ["25:00", "9:30 AM", "12:60", "noon"])
def test_parse_time_rejects(value):
    with pytest.raises(RecordError, match="must be in HH:MM format"):
        parse_time(value)


def test_parse_positive_int():
    assert parse_positive_int("50", "Test") == 50
    with pytest.raises(RecordError, match="Test must be positive"):
        parse_positive_int("0", "Test")
    with pytest.raises(RecordError, match="Test must be positive"):
        parse_positive_int("-5", "Test")
    with pytest.raises(RecordError, match="Test must be a number"):
        parse_positive_int("abc", "Test")


def test_event_duration_comes_from_start_and_end():
    loader = RecordLoader()
    event = loader.event_from_record({
        "id": "e1",
        "title": "Workshop",
        "description": "ignored",
        "date": "2024-03-15",
        "startTime": "09:00",
        "endTime": "10:30",
        "venueId": "v1",
        "maxParticipants": 25,
        "registeredParticipantIds": ["p1"],
    })

    assert event.id == "e1"
    assert event.duration_minutes == 90
    assert event.required_capacity == 25
    assert event.preferred_date == date(2024, 3, 15)
    assert event.preferred_start_time == time(9, 0)


def test_event_end_before_start_is_rejected():
    with pytest.raises(RecordError, match="End time must be after start time"):
        RecordLoader().event_from_record({
            "title": "Backwards", "date": "2024-03-15",
            "startTime": "10:00", "endTime": "09:00", "maxParticipants": 5,
        })


def test_missing_ids_come_from_the_injected_factory():
    loader = RecordLoader(id_factory=_counter_ids())
    venues = loader.load_venues([
        {"name": "Hall", "capacity": 100, "location": "North"},
        {"name": "Room", "capacity": 10, "location": "South"},
    ])
    assert [v.id for v in venues] == ["gen-1", "gen-2"]


def test_venue_record_fields():
    venue = RecordLoader().venue_from_record({
        "id": "v1", "name": "Hall", "capacity": "120", "location": "North",
        "facilities": ["Stage"], "hourlyRate": 40, "isAvailable": False,
    })
    assert venue.capacity == 120
    assert venue.facilities == ["Stage"]
    assert venue.hourly_rate == 40.0
    assert venue.is_available is False


def test_bad_records_are_collected_not_silently_dropped():
    loader = RecordLoader()
    dataset = loader.load_dataset({
        "venues": [{"id": "v1", "name": "Hall", "capacity": 0, "location": "North"}],
        "events": [
            {"id": "ok", "title": "Fine", "date": "2024-03-15", "startTime": "09:00",
             "durationMinutes": 60, "maxParticipants": 10},
            {"id": "bad", "title": "Broken", "date": "tomorrow", "startTime": "09:00",
             "durationMinutes": 60, "maxParticipants": 10},
        ],
    })

    assert [e.id for e in dataset.events] == ["ok"]
    assert dataset.venues == []
    assert len(dataset.errors) == 2
    assert "venue v1: Capacity must be positive" in dataset.errors
    assert "event bad: Event date must be in YYYY-MM-DD format" in dataset.errors


def test_strict_loader_raises():
    loader = RecordLoader(strict=True)
    with pytest.raises(RecordError, match="event #0"):
        loader.load_events([{"title": "No date", "startTime": "09:00", "maxParticipants": 3}])


def test_events_hold_their_venues_unless_cancelled():
    data = {
        "venues": [{"id": "v1", "name": "Hall", "capacity": 50, "location": "North"}],
        "events": [
            {"id": "e1", "title": "Live", "date": "2024-03-15", "startTime": "09:00",
             "endTime": "10:00", "venueId": "v1", "maxParticipants": 10},
            {"id": "e2", "title": "Off", "date": "2024-03-15", "startTime": "11:00",
             "endTime": "12:00", "venueId": "v1", "maxParticipants": 10, "status": "CANCELLED"},
        ],
        "bookings": [
            {"venueId": "v1", "date": "2024-03-16", "startTime": "13:00", "endTime": "14:00"},
        ],
    }

    plain = RecordLoader().load_dataset(data)
    assert len(plain.occupied) == 1

    held = RecordLoader().load_dataset(data, events_hold_venues=True)
    starts = sorted(o.interval.start for o in held.occupied)
    assert starts == [time(9, 0), time(13, 0)]


def test_load_file(tmp_path):
    path = tmp_path / "data.json"
    path.write_text(json.dumps({
        "venues": [{"id": "v1", "name": "Hall", "capacity": 50, "location": "North"}],
        "events": [],
    }), encoding="utf-8")

    dataset = RecordLoader().load_file(path)
    assert [v.id for v in dataset.venues] == ["v1"]


def test_load_file_missing(tmp_path):
    with pytest.raises(RecordError, match="not found"):
        RecordLoader().load_file(tmp_path / "missing.json")


def test_load_file_not_json(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(RecordError, match="Could not read"):
        RecordLoader().load_file(path)


@pytest.mark.parametrize("flag,expected", [
    ("false", False),
    ("0", False),
    ("true", True),
    (False, False),
])
def test_venue_availability_parses_text_flags(flag, expected):
    venue = RecordLoader().venue_from_record({
        "id": "v1", "name": "Hall", "capacity": 50, "location": "North", "isAvailable": flag,
    })
    assert venue.is_available is expected


def test_venue_availability_rejects_garbage():
    with pytest.raises(RecordError, match="Invalid venue record"):
        RecordLoader().venue_from_record({
            "id": "v1", "name": "Hall", "capacity": 50, "location": "North", "isAvailable": "maybe",
        })


def test_closed_venue_from_text_flag_is_never_offered():
    dataset = RecordLoader().load_dataset({
        "venues": [{"id": "v1", "name": "Hall", "capacity": 50, "location": "North",
                    "isAvailable": "false"}],
        "events": [],
    })
    result = find_slot(dataset.venues, [], required_capacity=10,
                       start_date=date(2024, 3, 15), duration_minutes=60)
    assert isinstance(result, SlotNotFound)


def test_bookings_from_events_ignores_non_objects():
    occupied = RecordLoader().bookings_from_events([
        5,
        "junk",
        {"id": "e1", "date": "2024-03-15", "startTime": "09:00", "endTime": "10:00",
         "venueId": "v1", "maxParticipants": 10},
    ])
    assert [o.venue_id for o in occupied] == ["v1"]
