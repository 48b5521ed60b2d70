"""
Record projection for the Venue Scheduler.

The planning application stores events and venues as JSON records
(camelCase keys, 'YYYY-MM-DD' dates, 'HH:MM' times). This module turns those
records into engine inputs and strips everything the engine does not use
(descriptions, participant lists, event types...).

Validation messages follow the record-entry forms, e.g.
"Start time must be in HH:MM format".
"""

import json
import logging
import re
import uuid
from dataclasses import dataclass, field
from datetime import date, time
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional, Union

from pydantic import ValidationError

from models import CandidateEvent, OccupiedInterval, TimeInterval, Venue

logger = logging.getLogger(__name__)

_DATE_RE = re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})$")
_TIME_RE = re.compile(r"^(\d{1,2}):(\d{2})$")

# Event records in this state no longer hold their venue
INACTIVE_STATUSES = {"CANCELLED"}


class RecordError(ValueError):
    """A record could not be projected into an engine input."""


def _new_id() -> str:
    return str(uuid.uuid4())


def parse_date(value: Any, field_name: str = "Date") -> date:
    """Accepts 'YYYY-M-D' and zero-padded forms."""
    if isinstance(value, date):
        return value
    text = str(value or "").strip()
    if not text:
        raise RecordError(f"{field_name} is required")
    match = _DATE_RE.match(text)
    if not match:
        raise RecordError(f"{field_name} must be in YYYY-MM-DD format")
    try:
        return date(int(match.group(1)), int(match.group(2)), int(match.group(3)))
    except ValueError:
        raise RecordError(f"{field_name} must be in YYYY-MM-DD format") from None


def parse_time(value: Any, field_name: str = "Time") -> time:
    """Accepts 24-hour 'H:MM' / 'HH:MM'."""
    if isinstance(value, time):
        return value
    text = str(value or "").strip()
    if not text:
        raise RecordError(f"{field_name} is required")
    match = _TIME_RE.match(text)
    if not match:
        raise RecordError(f"{field_name} must be in HH:MM format")
    h, m = int(match.group(1)), int(match.group(2))
    if not (0 <= h <= 23 and 0 <= m <= 59):
        raise RecordError(f"{field_name} must be in HH:MM format")
    return time(h, m)


def parse_positive_int(value: Any, field_name: str = "Value") -> int:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise RecordError(f"{field_name} is required")
    if isinstance(value, bool):
        raise RecordError(f"{field_name} must be a number")
    try:
        number = int(str(value).strip())
    except ValueError:
        raise RecordError(f"{field_name} must be a number") from None
    if number <= 0:
        raise RecordError(f"{field_name} must be positive")
    return number


def _pick(record: Dict[str, Any], *keys: str) -> Any:
    """First present key; records come in camelCase or snake_case."""
    for key in keys:
        if key in record and record[key] is not None:
            return record[key]
    return None


def _minutes_between(start: time, end: time) -> int:
    return (end.hour * 60 + end.minute) - (start.hour * 60 + start.minute)


@dataclass
class Dataset:
    """Everything one engine call needs, plus what failed to load."""
    events: List[CandidateEvent] = field(default_factory=list)
    venues: List[Venue] = field(default_factory=list)
    occupied: List[OccupiedInterval] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)


class RecordLoader:
    """
    Projects application records into CandidateEvent / Venue / OccupiedInterval.

    Records without an id get one from `id_factory` (uuid4 by default), so
    tests can pass a deterministic generator.
    """

    def __init__(self, id_factory: Optional[Callable[[], str]] = None, strict: bool = False):
        self.id_factory = id_factory or _new_id
        self.strict = strict
        self.errors: List[str] = []

    # --- Single records ---

    def venue_from_record(self, record: Dict[str, Any]) -> Venue:
        name = str(_pick(record, "name") or "").strip()
        if not name:
            raise RecordError("Venue name cannot be blank")
        location = str(_pick(record, "location") or "").strip()
        if not location:
            raise RecordError("Venue location cannot be blank")

        rate = _pick(record, "hourlyRate", "hourly_rate")
        try:
            hourly_rate = float(rate) if rate is not None else 0.0
        except (TypeError, ValueError):
            raise RecordError("Hourly rate must be a number") from None
        available = _pick(record, "isAvailable", "is_available")
        try:
            return Venue(
                id=str(_pick(record, "id") or self.id_factory()),
                name=name,
                capacity=parse_positive_int(_pick(record, "capacity"), "Capacity"),
                location=location,
                facilities=list(_pick(record, "facilities") or []),
                hourly_rate=hourly_rate,
                is_available=True if available is None else available
            )
        except ValidationError as e:
            raise RecordError(f"Invalid venue record: {e.errors()[0]['msg']}") from e

    def event_from_record(self, record: Dict[str, Any]) -> CandidateEvent:
        """
        Duration comes from 'durationMinutes' or, as on the event form,
        from endTime - startTime. Capacity is 'maxParticipants'.
        """
        title = str(_pick(record, "title") or "").strip()
        if not title:
            raise RecordError("Event title cannot be blank")

        on = parse_date(_pick(record, "date", "preferredDate", "preferred_date"), "Event date")
        start = parse_time(_pick(record, "startTime", "preferredStartTime", "preferred_start_time"), "Start time")

        raw_duration = _pick(record, "durationMinutes", "duration_minutes")
        if raw_duration is not None:
            duration = parse_positive_int(raw_duration, "Duration")
        else:
            end = parse_time(_pick(record, "endTime", "end_time"), "End time")
            duration = _minutes_between(start, end)
            if duration <= 0:
                raise RecordError("End time must be after start time")

        capacity = parse_positive_int(
            _pick(record, "maxParticipants", "requiredCapacity", "required_capacity"),
            "Max participants"
        )

        try:
            return CandidateEvent(
                id=str(_pick(record, "id") or self.id_factory()),
                title=title,
                duration_minutes=duration,
                required_capacity=capacity,
                preferred_date=on,
                preferred_start_time=start
            )
        except ValidationError as e:
            raise RecordError(f"Invalid event record: {e.errors()[0]['msg']}") from e

    def booking_from_record(self, record: Dict[str, Any]) -> OccupiedInterval:
        venue_id = str(_pick(record, "venueId", "venue_id") or "").strip()
        if not venue_id:
            raise RecordError("Venue is required")

        on = parse_date(_pick(record, "date"), "Date")
        start = parse_time(_pick(record, "startTime", "start_time", "start"), "Start time")
        end = parse_time(_pick(record, "endTime", "end_time", "end"), "End time")
        if end <= start:
            raise RecordError("End time must be after start time")

        return OccupiedInterval(venue_id=venue_id, interval=TimeInterval(date=on, start=start, end=end))

    # --- Batches ---

    def load_venues(self, records: Iterable[Dict[str, Any]]) -> List[Venue]:
        return self._load_many(records, self.venue_from_record, "venue")

    def load_events(self, records: Iterable[Dict[str, Any]]) -> List[CandidateEvent]:
        return self._load_many(records, self.event_from_record, "event")

    def load_bookings(self, records: Iterable[Dict[str, Any]]) -> List[OccupiedInterval]:
        return self._load_many(records, self.booking_from_record, "booking")

    def bookings_from_events(self, records: Iterable[Dict[str, Any]]) -> List[OccupiedInterval]:
        """Events that already hold a venue occupy it, unless cancelled."""
        held = [
            r for r in records
            # Non-object entries were already reported by load_events
            if isinstance(r, dict)
            and _pick(r, "venueId", "venue_id")
            and str(_pick(r, "status") or "").upper() not in INACTIVE_STATUSES
        ]
        return self.load_bookings(held)

    def load_dataset(self, data: Dict[str, Any], events_hold_venues: bool = False) -> Dataset:
        """
        Project a whole data file: {"venues": [...], "events": [...], "bookings": [...]}.
        With events_hold_venues, event records carrying a venueId are also
        treated as occupied intervals (how existing events block slot searches).
        """
        if not isinstance(data, dict):
            raise RecordError("Data file must contain a JSON object")

        self.errors = []
        event_records = list(data.get("events") or [])
        dataset = Dataset(
            venues=self.load_venues(data.get("venues") or []),
            events=self.load_events(event_records),
            occupied=self.load_bookings(data.get("bookings") or []),
        )
        if events_hold_venues:
            dataset.occupied.extend(self.bookings_from_events(event_records))

        dataset.errors = list(self.errors)
        logger.info(
            f"Loaded {len(dataset.venues)} venues, {len(dataset.events)} events, "
            f"{len(dataset.occupied)} bookings ({len(dataset.errors)} bad records)"
        )
        return dataset

    def load_file(self, path: Union[str, Path], events_hold_venues: bool = False) -> Dataset:
        path = Path(path)
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            raise RecordError(f"Data file not found: {path}") from None
        except (OSError, json.JSONDecodeError, UnicodeDecodeError) as e:
            raise RecordError(f"Could not read {path}: {e}") from e
        return self.load_dataset(data, events_hold_venues=events_hold_venues)

    def _load_many(self, records: Iterable[Dict[str, Any]], convert: Callable[[Dict[str, Any]], Any], kind: str) -> List[Any]:
        out: List[Any] = []
        for i, record in enumerate(records):
            try:
                if not isinstance(record, dict):
                    raise RecordError(f"Expected an object, got {type(record).__name__}")
                out.append(convert(record))
            except RecordError as e:
                label = record.get("id") if isinstance(record, dict) and record.get("id") else f"#{i}"
                message = f"{kind} {label}: {e}"
                if self.strict:
                    raise RecordError(message) from e
                logger.warning(f"Skipping bad {message}")
                self.errors.append(message)
        return out

