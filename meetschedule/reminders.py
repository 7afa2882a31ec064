"""
Standalone reminders (not attached to an event).
"""

from __future__ import annotations

from dataclasses import replace
from typing import Any

from meetschedule.errors import InvalidFormat, NotFound
from meetschedule.model import Reminder
from meetschedule.timeutil import to_minutes


class ReminderStore:
    def __init__(self, backend: Any) -> None:
        self.backend = backend

    def all(self) -> list[Reminder]:
        raw = self.backend.load()
        if not isinstance(raw, list):
            raise InvalidFormat("Stored reminders must be a list", field="reminders")
        return [Reminder.from_dict(item) for item in raw]

    def _save(self, reminders: list[Reminder]) -> None:
        self.backend.save([r.to_dict() for r in reminders])

    def add(self, reminder: Reminder) -> None:
        reminders = self.all()
        reminders.append(reminder)
        self._save(reminders)

    def toggle(self, reminder_id: str) -> Reminder:
        """
        Flip the completed flag. Raises NotFound for an unknown id.
        """
        reminders = self.all()
        for i, r in enumerate(reminders):
            if r.id == reminder_id:
                reminders[i] = replace(r, completed=not r.completed)
                self._save(reminders)
                return reminders[i]
        raise NotFound("Reminder", reminder_id)

    def on_date(self, date: str) -> list[Reminder]:
        return sorted((r for r in self.all() if r.date == date), key=lambda r: to_minutes(r.time))

    def clear(self) -> None:
        self._save([])
