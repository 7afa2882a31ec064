"""
Configuration: file locations and Google Calendar settings.

Defaults live inside the package so a fresh checkout works without setup.
Each location can be overridden through an environment variable, which is
also how the tests point the CLI at a temporary directory.

    MEETSCHEDULE_HOME          directory for user state (custom events, reminders, ...)
    MEETSCHEDULE_BASELINE      path of the cohort/group baseline JSON
    MEETSCHEDULE_GOOGLE_TOKEN  OAuth access token for the Google Calendar import
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

PACKAGE_DIR = Path(__file__).resolve().parent

GOOGLE_API_BASE = "https://www.googleapis.com/calendar/v3"
DEFAULT_MAX_RESULTS = 20
HTTP_TIMEOUT = 30


def data_dir() -> Path:
    """
    Return the directory holding the user's persisted state.
    """
    override = os.environ.get("MEETSCHEDULE_HOME", "").strip()
    if override:
        return Path(override)
    return PACKAGE_DIR / "data" / "user"


def baseline_path() -> Path:
    """
    Return the path of the baseline (cohort timetable) JSON file.
    """
    override = os.environ.get("MEETSCHEDULE_BASELINE", "").strip()
    if override:
        return Path(override)
    return PACKAGE_DIR / "data" / "meet_data.json"


def google_token(explicit: Optional[str] = None) -> Optional[str]:
    """
    Resolve the access token: explicit argument first, then environment.
    """
    if explicit and explicit.strip():
        return explicit.strip()
    env = os.environ.get("MEETSCHEDULE_GOOGLE_TOKEN", "").strip()
    return env or None
