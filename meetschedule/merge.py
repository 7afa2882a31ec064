"""
Merge engine.

Combines the read-only baseline schedule with the user's custom records.
Pure functions only: the merged view is recomputed on every read, so
there is no cache that could go stale.

Merge rule (last write wins, keyed by id):
    baseline events are inserted first, in array order, then every custom
    record in storage order overwrites any entry with the same id.
A custom record replaces the baseline record entirely; no field-level
merge is performed.
"""

from __future__ import annotations

import calendar
from datetime import date
from typing import Iterable

from meetschedule.errors import NotFound
from meetschedule.model import Event


def merge_schedule(baseline: Iterable[Event], custom: Iterable[Event]) -> list[Event]:
    """
    Return baseline order with overrides applied in place and
    custom-only events appended.
    """
    # dict keeps the first insertion position when a key is overwritten
    merged: dict[str, Event] = {}
    for ev in baseline:
        merged[ev.id] = ev
    for ev in custom:
        merged[ev.id] = ev
    return list(merged.values())


def new_for_import(existing: Iterable[Event], incoming: Iterable[Event]) -> list[Event]:
    """
    Set-difference import: keep only incoming events whose id is not stored yet.

    A repeated id inside the incoming batch is kept once (first occurrence).
    """
    seen = {ev.id for ev in existing}
    out: list[Event] = []
    for ev in incoming:
        if ev.id in seen:
            continue
        seen.add(ev.id)
        out.append(ev)
    return out


def find_event(schedule: Iterable[Event], event_id: str) -> Event:
    """
    Look up one event of a (merged) schedule by id.
    Raises NotFound if no event carries that id.
    """
    for ev in schedule:
        if ev.id == event_id:
            return ev
    raise NotFound("Event", event_id)


def events_on(schedule: Iterable[Event], date: str) -> list[Event]:
    """
    Return the slice of a schedule that falls on one 'YYYY-MM-DD' date.
    """
    return [ev for ev in schedule if ev.date == date]


def month_days(schedule: Iterable[Event], year: int, month: int) -> list[tuple[str, list[Event]]]:
    """
    Return (date, events) for every day of a month, empty days included.
    Events keep their schedule order, like events_on().
    """
    schedule = list(schedule)
    _, last_day = calendar.monthrange(year, month)
    days = []
    for day in range(1, last_day + 1):
        iso = date(year, month, day).isoformat()
        days.append((iso, events_on(schedule, iso)))
    return days
