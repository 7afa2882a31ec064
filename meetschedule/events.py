"""
Event store: the user's custom records.

Custom records are user-added events, edits of baseline events (stored as
complete replacement records with the same id) and events imported from
an external calendar. They are kept separately from the baseline schedule
and combined with it on every read (see meetschedule.merge).

Every mutation loads the stored records, modifies them and saves the
full set again before returning.
"""

from __future__ import annotations

from typing import Any, Iterable

from meetschedule.errors import InvalidFormat
from meetschedule.merge import merge_schedule, new_for_import
from meetschedule.model import Event


class EventStore:
    def __init__(self, backend: Any) -> None:
        self.backend = backend

    def records(self) -> list[Event]:
        """
        Return the stored custom records in storage order.
        """
        raw = self.backend.load()
        if not isinstance(raw, list):
            raise InvalidFormat("Stored custom events must be a list", field="custom_events", value=type(raw).__name__)
        return [Event.from_dict(item) for item in raw]

    def _save(self, events: list[Event]) -> None:
        self.backend.save([ev.to_dict() for ev in events])

    def add(self, event: Event) -> None:
        """
        Append a record. Ids are not checked here: callers generate
        collision-resistant ids, and an add that shadows an existing id is
        resolved by the merge (the later record wins).
        """
        events = self.records()
        events.append(event)
        self._save(events)

    def update(self, event: Event) -> None:
        """
        Upsert: drop any record with the same id, then append this one.
        Updating an unknown id therefore behaves like add().
        """
        events = [ev for ev in self.records() if ev.id != event.id]
        events.append(event)
        self._save(events)

    def delete(self, event_id: str) -> bool:
        """
        Remove the record with this id. Unknown ids are a no-op.
        Returns True if a record was removed.
        """
        events = self.records()
        kept = [ev for ev in events if ev.id != event_id]
        if len(kept) == len(events):
            return False
        self._save(kept)
        return True

    def bulk_import(self, events: Iterable[Event]) -> list[Event]:
        """
        Insert only events whose id is not stored yet and return them.

        Importing the same external batch again adds nothing, so sync can
        run any number of times per session.
        """
        stored = self.records()
        fresh = new_for_import(stored, events)
        if fresh:
            self._save(stored + fresh)
        return fresh

    def get_merged(self, baseline: Iterable[Event]) -> list[Event]:
        return merge_schedule(baseline, self.records())

    def clear(self) -> None:
        self._save([])
