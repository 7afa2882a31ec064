"""
Error types raised by the scheduling core.

Every error carries enough context (record id, field, offending value)
for the CLI to print a message the user can act on.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional


class MeetScheduleError(Exception):
    """Base class for all errors raised by meetschedule."""


class InvalidFormat(MeetScheduleError, ValueError):
    """
    A time, date or record field does not have the expected shape.

    Raised at the ingestion boundary (record construction, JSON loading,
    CLI input), never inside layout or merge logic.
    """

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        value: Any = None,
        record_id: Optional[str] = None,
    ) -> None:
        self.message = message
        self.field = field
        self.value = value
        self.record_id = record_id
        parts = [message]
        if record_id:
            parts.append(f"record={record_id!r}")
        if field:
            parts.append(f"field={field!r}")
        super().__init__(" | ".join(parts))

    def for_record(self, record_id: Optional[str]) -> "InvalidFormat":
        """Same error, attributed to the record that was being built."""
        return InvalidFormat(self.message, field=self.field, value=self.value, record_id=record_id)


class NotFound(MeetScheduleError, KeyError):
    """A lookup referenced an id that does not exist."""

    def __init__(self, kind: str, record_id: str) -> None:
        self.kind = kind
        self.record_id = record_id
        super().__init__(f"{kind} not found: {record_id!r}")

    def __str__(self) -> str:
        # KeyError would quote the whole message again
        return self.args[0]


class PersistenceFailure(MeetScheduleError):
    """Loading or saving a JSON store failed (I/O error, corrupted file)."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Storage failure for {path}: {reason}")
