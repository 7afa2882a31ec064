"""
Central data model definitions used across the project.

This module defines the canonical structure of Event, Assignment and
Reminder objects so that:
- all modules share the same field names
- records are validated once, when they are built (from JSON, from the
  Google import or from CLI input), and can be trusted afterwards
- the JSON files on disk use exactly the dataclass field names
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from meetschedule.errors import InvalidFormat
from meetschedule.timeutil import minutes_to_hhmm, to_minutes, validate_date

CATEGORIES = ("lecture", "lab", "personal", "workshop", "break", "meal")


def _require_str(data: Dict[str, Any], key: str, record_id: Optional[str] = None) -> str:
    value = data.get(key)
    if not isinstance(value, str):
        raise InvalidFormat(f"Missing or non-string field {key!r}", field=key, value=value, record_id=record_id)
    return value


def _optional_str(data: Dict[str, Any], key: str, record_id: Optional[str] = None) -> Optional[str]:
    value = data.get(key)
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise InvalidFormat(f"Field {key!r} must be a string", field=key, value=value, record_id=record_id)
    return value


def _str_list(data: Dict[str, Any], key: str, record_id: Optional[str] = None) -> List[str]:
    value = data.get(key) or []
    if not isinstance(value, list) or not all(isinstance(x, str) for x in value):
        raise InvalidFormat(f"Field {key!r} must be a list of strings", field=key, value=value, record_id=record_id)
    return list(value)


def _check_date(value: str, field: str = "date") -> None:
    # stored dates are exactly 'YYYY-MM-DD', no surrounding whitespace
    if validate_date(value, field=field) != value:
        raise InvalidFormat(f"Invalid date format: {value!r} (expected YYYY-MM-DD)", field=field, value=value)


def _check_time(value: str, field: str) -> int:
    minutes = to_minutes(value, field=field)
    if minutes_to_hhmm(minutes) != value:
        raise InvalidFormat(f"Time {value!r} must be zero-padded HH:MM", field=field, value=value)
    return minutes


@dataclass(frozen=True)
class Assignment:
    """
    A gradable/submittable task.

    Assignment content is static. Its per-user status lives in a separate
    map (see meetschedule.assignments.StatusStore).
    """

    id: str
    title: str
    description: str
    due_date: str
    submission_link: Optional[str] = None
    related_event_ids: List[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.id:
            raise InvalidFormat("Assignment id must not be empty", field="id", value=self.id)
        _check_date(self.due_date, field="due_date")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Assignment":
        if not isinstance(data, dict):
            raise InvalidFormat("Assignment record must be an object", value=data)
        aid = _require_str(data, "id")
        try:
            return cls(
                id=aid,
                title=_require_str(data, "title", aid),
                description=data.get("description") or "",
                due_date=_require_str(data, "due_date", aid),
                submission_link=_optional_str(data, "submission_link", aid),
                related_event_ids=_str_list(data, "related_event_ids", aid),
            )
        except InvalidFormat as exc:
            if exc.record_id is None:
                raise exc.for_record(aid) from None
            raise

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "due_date": self.due_date,
            "submission_link": self.submission_link,
            "related_event_ids": list(self.related_event_ids),
        }


@dataclass
class Event:
    """
    Represents one scheduled occurrence on a single day.

    Times are zero-padded 'HH:MM' and end_time >= start_time
    (no events across midnight).
    """

    id: str
    title: str
    category: str
    date: str
    start_time: str
    end_time: str
    location: Optional[str] = None
    meeting_link: Optional[str] = None
    notes: Optional[str] = None
    external_id: Optional[str] = None
    calendar_id: Optional[str] = None
    reminders: List[str] = field(default_factory=list)
    assignments: List[Assignment] = field(default_factory=list)

    def __post_init__(self) -> None:
        rid = self.id or None
        if not isinstance(self.id, str) or not self.id.strip():
            raise InvalidFormat("Event id must not be empty", field="id", value=self.id)
        if self.category not in CATEGORIES:
            raise InvalidFormat(
                f"Unknown category {self.category!r} (expected one of {', '.join(CATEGORIES)})",
                field="category",
                value=self.category,
                record_id=rid,
            )
        try:
            _check_date(self.date)
            start = _check_time(self.start_time, "start_time")
            end = _check_time(self.end_time, "end_time")
        except InvalidFormat as exc:
            raise exc.for_record(rid) from None
        if end < start:
            raise InvalidFormat(
                f"end_time {self.end_time} is before start_time {self.start_time}",
                field="end_time",
                value=self.end_time,
                record_id=rid,
            )

    @property
    def is_break(self) -> bool:
        return self.category == "break"

    @property
    def is_external(self) -> bool:
        return self.external_id is not None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Event":
        """
        Build an Event from a JSON object, validating every field.
        """
        if not isinstance(data, dict):
            raise InvalidFormat("Event record must be an object", value=data)
        eid = _require_str(data, "id")

        raw_assignments = data.get("assignments") or []
        if not isinstance(raw_assignments, list):
            raise InvalidFormat("Field 'assignments' must be a list", field="assignments", record_id=eid)

        return cls(
            id=eid,
            title=_require_str(data, "title", eid),
            category=_require_str(data, "category", eid),
            date=_require_str(data, "date", eid),
            start_time=_require_str(data, "start_time", eid),
            end_time=_require_str(data, "end_time", eid),
            location=_optional_str(data, "location", eid),
            meeting_link=_optional_str(data, "meeting_link", eid),
            notes=_optional_str(data, "notes", eid),
            external_id=_optional_str(data, "external_id", eid),
            calendar_id=_optional_str(data, "calendar_id", eid),
            reminders=_str_list(data, "reminders", eid),
            assignments=[Assignment.from_dict(a) for a in raw_assignments],
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "category": self.category,
            "date": self.date,
            "start_time": self.start_time,
            "end_time": self.end_time,
            "location": self.location,
            "meeting_link": self.meeting_link,
            "notes": self.notes,
            "external_id": self.external_id,
            "calendar_id": self.calendar_id,
            "reminders": list(self.reminders),
            "assignments": [a.to_dict() for a in self.assignments],
        }


@dataclass
class Reminder:
    """
    A standalone reminder, independent of any event.
    """

    id: str
    text: str
    date: str
    time: str
    completed: bool = False

    def __post_init__(self) -> None:
        rid = self.id or None
        if not self.id:
            raise InvalidFormat("Reminder id must not be empty", field="id", value=self.id)
        try:
            _check_date(self.date)
            _check_time(self.time, "time")
        except InvalidFormat as exc:
            raise exc.for_record(rid) from None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Reminder":
        if not isinstance(data, dict):
            raise InvalidFormat("Reminder record must be an object", value=data)
        rid = _require_str(data, "id")
        completed = data.get("completed", False)
        if not isinstance(completed, bool):
            raise InvalidFormat("Field 'completed' must be true or false", field="completed", value=completed, record_id=rid)
        return cls(
            id=rid,
            text=_require_str(data, "text", rid),
            date=_require_str(data, "date", rid),
            time=_require_str(data, "time", rid),
            completed=completed,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "text": self.text, "date": self.date, "time": self.time, "completed": self.completed}


@dataclass
class UserProfile:
    """
    The signed-up user: selects which cohort/group baseline is shown.
    """

    name: str
    cohort: str
    group: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "UserProfile":
        if not isinstance(data, dict):
            raise InvalidFormat("User record must be an object", value=data)
        return cls(
            name=_require_str(data, "name"),
            cohort=_require_str(data, "cohort"),
            group=_require_str(data, "group"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "cohort": self.cohort, "group": self.group}


@dataclass
class LayoutEvent:
    """
    Render-ready view of one event for a single-day timeline. Never persisted.
    """

    event: Event
    column: int
    width_percent: float
    left_offset_percent: float

    @property
    def id(self) -> str:
        return self.event.id
