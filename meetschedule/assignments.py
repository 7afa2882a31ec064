"""
Assignment worklist.

Assignments come from two places: embedded in schedule events and the
group's list of general assignments. This module flattens both into one
worklist, sorts it for display and summarises progress.

Assignment content is static. The per-user status of each assignment is
kept in a separate map keyed by assignment id (StatusStore). An
assignment without an entry is "not-started".
"""

from __future__ import annotations

import math
from typing import Any, Callable, Iterable, NamedTuple

from meetschedule.errors import InvalidFormat
from meetschedule.model import Assignment, Event

NOT_STARTED = "not-started"
IN_PROGRESS = "in-progress"
DONE = "done"

STATUSES = (NOT_STARTED, IN_PROGRESS, DONE)
STATUS_RANK = {NOT_STARTED: 0, IN_PROGRESS: 1, DONE: 2}

GENERAL_LABEL = "General Task"

StatusOf = Callable[[str], str]


class AssignmentEntry(NamedTuple):
    assignment: Assignment
    source_label: str


class ProgressSummary(NamedTuple):
    completed_count: int
    total_count: int
    percent: int


def collect_all(schedule: Iterable[Event], general_assignments: Iterable[Assignment]) -> list[AssignmentEntry]:
    """
    Walk every event's assignments (labelled with the event title), then
    append the general assignments (labelled "General Task").
    """
    out: list[AssignmentEntry] = []
    for ev in schedule:
        for a in ev.assignments:
            out.append(AssignmentEntry(a, ev.title))
    for a in general_assignments:
        out.append(AssignmentEntry(a, GENERAL_LABEL))
    return out


def sort_for_display(entries: Iterable[AssignmentEntry], status_of: StatusOf) -> list[AssignmentEntry]:
    """
    Incomplete first, then by urgency: stable sort by (status rank, due date).
    """
    return sorted(entries, key=lambda e: (STATUS_RANK[status_of(e.assignment.id)], e.assignment.due_date))


def done_last(entries: Iterable[AssignmentEntry], status_of: StatusOf) -> list[AssignmentEntry]:
    """
    Alternate ordering: everything not done (by due date), then done (by due date).
    """
    by_due = sorted(entries, key=lambda e: e.assignment.due_date)
    todo = [e for e in by_due if status_of(e.assignment.id) != DONE]
    done = [e for e in by_due if status_of(e.assignment.id) == DONE]
    return todo + done


def progress_summary(entries: Iterable[AssignmentEntry], status_of: StatusOf) -> ProgressSummary:
    entries = list(entries)
    total = len(entries)
    completed = sum(1 for e in entries if status_of(e.assignment.id) == DONE)
    if total == 0:
        return ProgressSummary(0, 0, 0)
    # round half up (12.5 -> 13), not Python's banker's rounding
    percent = int(math.floor(100 * completed / total + 0.5))
    return ProgressSummary(completed, total, percent)


def next_status(status: str) -> str:
    """
    Cycle not-started -> in-progress -> done -> not-started.
    """
    if status == NOT_STARTED:
        return IN_PROGRESS
    if status == IN_PROGRESS:
        return DONE
    return NOT_STARTED


def validate_status(status: str, assignment_id: str | None = None) -> str:
    if status not in STATUSES:
        raise InvalidFormat(
            f"Unknown status {status!r} (expected one of {', '.join(STATUSES)})",
            field="status",
            value=status,
            record_id=assignment_id,
        )
    return status


class StatusStore:
    """
    Per-user assignment status map, persisted through a backend
    (see meetschedule.storage).
    """

    def __init__(self, backend: Any) -> None:
        self.backend = backend

    def as_dict(self) -> dict[str, str]:
        raw = self.backend.load()
        if not isinstance(raw, dict):
            raise InvalidFormat("Stored task status must be an object", field="task_status")
        # unknown values (older files, manual edits) read as not started
        return {str(k): v if v in STATUSES else NOT_STARTED for k, v in raw.items()}

    def status_of(self, assignment_id: str) -> str:
        return self.as_dict().get(assignment_id, NOT_STARTED)

    def status_lookup(self) -> StatusOf:
        """
        Snapshot the map once and return a lookup function for sorting.
        """
        snapshot = self.as_dict()
        return lambda aid: snapshot.get(aid, NOT_STARTED)

    def set_status(self, assignment_id: str, status: str) -> dict[str, str]:
        validate_status(status, assignment_id)
        current = self.as_dict()
        current[assignment_id] = status
        self.backend.save(current)
        return current

    def advance(self, assignment_id: str) -> str:
        new = next_status(self.status_of(assignment_id))
        self.set_status(assignment_id, new)
        return new
