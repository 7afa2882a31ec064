"""
Day layout.

Given the events of one day, assign each one a horizontal column so that
events with overlapping time ranges are drawn side by side.

Overlap rule:
    start < other_end AND end > other_start
Touching endpoints (end == start) do not overlap.

Algorithm:
1. sort by start time, longer events first on equal start, then by id
2. greedy column assignment: first column whose last event ends at or
   before this start, otherwise open a new column
3. sweep the sorted events into clusters of transitively overlapping events
4. inside a cluster: width = 100 / (highest column + 1), left = width * column
"""

from __future__ import annotations

from typing import Iterable

from meetschedule.model import Event, LayoutEvent
from meetschedule.timeutil import to_minutes


def _overlaps(a_start: int, a_end: int, b_start: int, b_end: int) -> bool:
    return a_start < b_end and a_end > b_start


def _parsed(events: Iterable[Event]) -> list[tuple[int, int, Event]]:
    return [(to_minutes(ev.start_time), to_minutes(ev.end_time), ev) for ev in events]


def _layout_order(parsed: list[tuple[int, int, Event]]) -> list[tuple[int, int, Event]]:
    # The id tie-break makes the result independent of input order
    return sorted(parsed, key=lambda p: (p[0], -(p[1] - p[0]), p[2].id))


def assign_columns(events: Iterable[Event]) -> list[tuple[Event, int]]:
    """
    Greedy interval partitioning. Returns (event, column) in layout order.
    """
    column_ends: list[int] = []
    out: list[tuple[Event, int]] = []

    for start, end, ev in _layout_order(_parsed(events)):
        for col, col_end in enumerate(column_ends):
            if col_end <= start:
                column_ends[col] = end
                out.append((ev, col))
                break
        else:
            column_ends.append(end)
            out.append((ev, len(column_ends) - 1))

    return out


def layout_day(events: Iterable[Event]) -> list[LayoutEvent]:
    """
    Lay out the events of one day (caller filters by date).

    Events in different clusters are laid out independently, so an event
    that overlaps nothing always gets the full width.
    """
    placed = assign_columns(events)

    clusters: list[list[tuple[Event, int]]] = []
    cluster_end = None
    for ev, col in placed:
        start = to_minutes(ev.start_time)
        end = to_minutes(ev.end_time)
        if cluster_end is None or start >= cluster_end:
            clusters.append([])
            cluster_end = end
        else:
            cluster_end = max(cluster_end, end)
        clusters[-1].append((ev, col))

    out: list[LayoutEvent] = []
    for cluster in clusters:
        width = 100.0 / (max(col for _, col in cluster) + 1)
        for ev, col in cluster:
            out.append(LayoutEvent(event=ev, column=col, width_percent=width, left_offset_percent=width * col))
    return out


def overlapping_pairs(events: Iterable[Event]) -> list[tuple[Event, Event]]:
    """
    Find overlapping event pairs (A, B) on the same date, each pair once.
    Events are reported in layout order.
    """
    parsed = _layout_order(_parsed(events))
    pairs: list[tuple[Event, Event]] = []

    # O(n^2) is fine for a day's worth of events
    for i in range(len(parsed)):
        s1, e1, ev1 = parsed[i]
        for j in range(i + 1, len(parsed)):
            s2, e2, ev2 = parsed[j]
            if ev1.date != ev2.date:
                continue
            if _overlaps(s1, e1, s2, e2):
                pairs.append((ev1, ev2))

    return pairs
