"""
Persistent storage for the user's state.

Each concern lives in its own JSON file inside the data directory:

    custom_events.json   {"custom_events": [ ... ]}
    reminders.json       {"reminders": [ ... ]}
    task_status.json     {"task_status": {assignment_id: status}}
    user.json            {"user": {...} | null}

The baseline timetable is read-only configuration and never written here.

Stores (EventStore, ReminderStore, StatusStore) do not touch files
themselves; they are handed a backend with two methods:

    load() -> payload     empty default if nothing was stored yet
    save(payload) -> None replaces the stored payload completely

JsonFileBackend is the real one, MemoryBackend is the in-memory fake used
by tests.
"""

from __future__ import annotations

import copy
import json
from pathlib import Path
from typing import Any, Callable, Optional

from meetschedule import config
from meetschedule.errors import PersistenceFailure
from meetschedule.model import UserProfile

CUSTOM_EVENTS = "custom_events"
REMINDERS = "reminders"
TASK_STATUS = "task_status"
USER = "user"


class JsonFileBackend:
    """
    Stores one payload under a top-level key of a JSON file.

    A missing file means "nothing stored yet" and loads as the default.
    An unreadable or corrupted file raises PersistenceFailure instead of
    loading as empty, so a following save cannot silently wipe user data.
    """

    def __init__(self, path: str | Path, key: str, default_factory: Callable[[], Any] = list) -> None:
        self.path = Path(path)
        self.key = key
        self.default_factory = default_factory

    def load(self) -> Any:
        # First run: file does not exist yet
        if not self.path.exists():
            return self.default_factory()

        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError) as exc:
            raise PersistenceFailure(self.path, f"cannot read file ({exc})") from exc
        except json.JSONDecodeError as exc:
            raise PersistenceFailure(self.path, f"invalid JSON ({exc})") from exc

        if not isinstance(data, dict):
            raise PersistenceFailure(self.path, "expected a JSON object at top level")
        if self.key not in data:
            return self.default_factory()
        return data[self.key]

    def save(self, payload: Any) -> None:
        text = json.dumps({self.key: payload}, indent=2, ensure_ascii=False)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(text, encoding="utf-8")
        except OSError as exc:
            raise PersistenceFailure(self.path, f"cannot write file ({exc})") from exc

    def clear(self) -> None:
        try:
            self.path.unlink(missing_ok=True)
        except OSError as exc:
            raise PersistenceFailure(self.path, f"cannot delete file ({exc})") from exc


class MemoryBackend:
    """
    In-memory backend with the same contract as JsonFileBackend.

    Payloads are deep-copied on the way in and out, mirroring the
    serialize/deserialize boundary of the file backend.
    """

    def __init__(self, payload: Any = None, default_factory: Callable[[], Any] = list) -> None:
        self.default_factory = default_factory
        self._payload = copy.deepcopy(payload)
        self.saves = 0

    def load(self) -> Any:
        if self._payload is None:
            return self.default_factory()
        return copy.deepcopy(self._payload)

    def save(self, payload: Any) -> None:
        self._payload = copy.deepcopy(payload)
        self.saves += 1

    def clear(self) -> None:
        self._payload = None


def _backend(filename: str, key: str, default_factory: Callable[[], Any], base: Optional[Path]) -> JsonFileBackend:
    # Using a function instead of a constant path makes testing easier,
    # because tests can pass their own directory.
    directory = Path(base) if base is not None else config.data_dir()
    return JsonFileBackend(directory / filename, key, default_factory)


def custom_events_backend(base: Optional[Path] = None) -> JsonFileBackend:
    return _backend("custom_events.json", CUSTOM_EVENTS, list, base)


def reminders_backend(base: Optional[Path] = None) -> JsonFileBackend:
    return _backend("reminders.json", REMINDERS, list, base)


def task_status_backend(base: Optional[Path] = None) -> JsonFileBackend:
    return _backend("task_status.json", TASK_STATUS, dict, base)


def user_backend(base: Optional[Path] = None) -> JsonFileBackend:
    return _backend("user.json", USER, lambda: None, base)


def load_user(base: Optional[Path] = None) -> Optional[UserProfile]:
    """
    Load the signed-up user, or None before the first sign-up.
    """
    data = user_backend(base).load()
    if data is None:
        return None
    return UserProfile.from_dict(data)


def save_user(user: UserProfile, base: Optional[Path] = None) -> None:
    user_backend(base).save(user.to_dict())


def logout(base: Optional[Path] = None) -> None:
    user_backend(base).clear()
