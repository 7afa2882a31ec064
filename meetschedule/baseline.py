"""
Baseline schedule: the read-only cohort timetable.

The baseline JSON (meetschedule/data/meet_data.json by default) looks like:

    {"cohorts": {"2025": {"aliases": ["Y3", "y3"],
                          "groups": {"GroupA": {"group_mentor": "...",
                                                "schedule": [ ... events ... ],
                                                "general_assignments": [ ... ]}}}}}

Events may give a fixed "date" or a "day_offset" relative to today, and
assignments a "due_date" or a "due_day_offset". Offsets keep the bundled
demo timetable current.
"""

from __future__ import annotations

import json
from datetime import date, timedelta
from pathlib import Path
from typing import Any, Dict, List, NamedTuple, Optional

from meetschedule import config
from meetschedule.errors import InvalidFormat, PersistenceFailure
from meetschedule.model import Assignment, Event
from meetschedule.timeutil import normalize_time


class GroupSchedule(NamedTuple):
    schedule: List[Event]
    general_assignments: List[Assignment]
    mentor: Optional[str]


def load_meet_data(path: str | Path | None = None) -> Dict[str, Any]:
    """
    Load the baseline JSON. A missing file means "no baseline" (no cohorts).
    """
    baseline_file = Path(path) if path is not None else config.baseline_path()
    if not baseline_file.exists():
        return {"cohorts": {}}
    try:
        data = json.loads(baseline_file.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise PersistenceFailure(baseline_file, f"cannot load baseline ({exc})") from exc
    if not isinstance(data, dict) or not isinstance(data.get("cohorts", {}), dict):
        raise PersistenceFailure(baseline_file, "baseline must be an object with a 'cohorts' mapping")
    data.setdefault("cohorts", {})
    return data


def normalize_cohort(cohort: str, meet_data: Dict[str, Any]) -> str:
    """
    Map a cohort alias (e.g. 'Y3') to its cohort key (e.g. '2025').
    Unknown names are returned unchanged.
    """
    cohort = cohort.strip()
    cohorts = meet_data.get("cohorts", {})
    if cohort in cohorts:
        return cohort
    for key, data in cohorts.items():
        if cohort in (data.get("aliases") or []):
            return key
    return cohort


def _offset_date(today: date, offset: Any, field: str, record_id: Optional[str]) -> str:
    if not isinstance(offset, int) or isinstance(offset, bool):
        raise InvalidFormat("Day offset must be an integer", field=field, value=offset, record_id=record_id)
    return (today + timedelta(days=offset)).isoformat()


def _resolve_assignment(raw: Dict[str, Any], today: date) -> Assignment:
    if not isinstance(raw, dict):
        raise InvalidFormat("Baseline assignment must be an object", value=raw)
    item = dict(raw)
    if "due_date" not in item and "due_day_offset" in item:
        item["due_date"] = _offset_date(today, item.pop("due_day_offset"), "due_day_offset", item.get("id"))
    return Assignment.from_dict(item)


def _resolve_event(raw: Dict[str, Any], today: date) -> Event:
    if not isinstance(raw, dict):
        raise InvalidFormat("Baseline event must be an object", value=raw)
    item = dict(raw)
    eid = item.get("id")
    if "date" not in item and "day_offset" in item:
        item["date"] = _offset_date(today, item.pop("day_offset"), "day_offset", eid)
    for key in ("start_time", "end_time"):
        if isinstance(item.get(key), str):
            try:
                item[key] = normalize_time(item[key], field=key)
            except InvalidFormat as exc:
                raise exc.for_record(eid) from None
    item["assignments"] = [_resolve_assignment(a, today).to_dict() for a in item.get("assignments") or []]
    return Event.from_dict(item)


def group_schedule(
    meet_data: Dict[str, Any],
    cohort: str,
    group: str,
    today: Optional[date] = None,
) -> GroupSchedule:
    """
    Return the baseline schedule and general assignments of one group.
    Unknown cohorts or groups give an empty schedule.
    """
    today = today or date.today()
    cohort_data = meet_data.get("cohorts", {}).get(normalize_cohort(cohort, meet_data))
    if not cohort_data:
        return GroupSchedule([], [], None)
    group_data = (cohort_data.get("groups") or {}).get(group)
    if not group_data:
        return GroupSchedule([], [], None)

    schedule = [_resolve_event(ev, today) for ev in group_data.get("schedule") or []]
    general = [_resolve_assignment(a, today) for a in group_data.get("general_assignments") or []]
    return GroupSchedule(schedule, general, group_data.get("group_mentor"))
