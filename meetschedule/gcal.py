"""
Google Calendar import.

Fetches events from the Google Calendar REST API (v3) and maps them onto
Event records with external_id set. Authentication is not handled here:
the caller passes an OAuth access token.

Times are taken from the wall-clock part of the API's dateTime values
('2026-02-19T10:15:00+01:00' -> date '2026-02-19', start '10:15'); no
timezone conversion is done.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, NamedTuple, Optional
from urllib.parse import quote

import requests
from bs4 import BeautifulSoup

from meetschedule import config
from meetschedule.errors import InvalidFormat
from meetschedule.events import EventStore
from meetschedule.model import Event
from meetschedule.timeutil import normalize_time, to_minutes, validate_date

ALL_DAY_START = "00:00"
DAY_END = "23:59"


class CalendarInfo(NamedTuple):
    id: str
    summary: str
    background_color: Optional[str]
    selected: bool


def _html_to_text(html: Optional[str]) -> Optional[str]:
    """
    Event descriptions may contain HTML (links, <br>, lists); keep the text.
    """
    if not html:
        return None
    soup = BeautifulSoup(html, "html.parser")
    for br in soup.find_all("br"):
        br.replace_with("\n")
    text = soup.get_text()
    lines = [line.strip() for line in text.splitlines()]
    text = "\n".join(line for line in lines if line)
    return text or None


def _split_when(when: Dict[str, Any], field: str, event_id: str) -> tuple[str, Optional[str]]:
    """
    Return (date, HH:MM) of a start/end object; time is None for all-day values.
    """
    if when.get("dateTime"):
        raw = str(when["dateTime"])
        return validate_date(raw[:10], field=field), normalize_time(raw[11:16], field=field)
    if when.get("date"):
        return validate_date(str(when["date"]), field=field), None
    raise InvalidFormat(f"Google event has no {field}", field=field, record_id=event_id)


def event_from_google(item: Dict[str, Any], calendar_id: Optional[str] = None) -> Event:
    """
    Map one Google Calendar event resource onto an Event.
    """
    gid = str(item.get("id", "")).strip()
    start_date, start_time = _split_when(item.get("start") or {}, "start", gid)
    end_date, end_time = _split_when(item.get("end") or {}, "end", gid)

    if start_time is None:
        # all-day event
        start_time, end_time = ALL_DAY_START, DAY_END
    elif end_time is None or end_date != start_date:
        # ends on a later day: clamp, events never cross midnight
        end_time = DAY_END
    elif to_minutes(end_time) < to_minutes(start_time):
        # start and end in different time zones (flights): wall clocks disagree
        end_time = start_time

    return Event(
        id=gid,
        title=(item.get("summary") or "").strip() or "No Title",
        category="personal",
        date=start_date,
        start_time=start_time,
        end_time=end_time,
        location=(item.get("location") or "").strip() or None,
        meeting_link=item.get("hangoutLink") or item.get("htmlLink") or None,
        notes=_html_to_text(item.get("description")),
        external_id=gid,
        calendar_id=calendar_id,
    )


class GoogleCalendarClient:
    def __init__(
        self,
        access_token: str,
        session: Optional[requests.Session] = None,
        base_url: str = config.GOOGLE_API_BASE,
        timeout: float = config.HTTP_TIMEOUT,
    ) -> None:
        self.session = session if session is not None else requests.Session()
        self.session.headers.update({"Authorization": f"Bearer {access_token}"})
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        resp = self.session.get(f"{self.base_url}{path}", params=params, timeout=self.timeout)
        resp.raise_for_status()
        return resp.json()

    def list_calendars(self) -> List[CalendarInfo]:
        data = self._get("/users/me/calendarList")
        out: List[CalendarInfo] = []
        for cal in data.get("items", []):
            cid = cal.get("id")
            if not cid:
                continue
            out.append(
                CalendarInfo(
                    id=cid,
                    summary=cal.get("summaryOverride") or cal.get("summary") or cid,
                    background_color=cal.get("backgroundColor"),
                    selected=bool(cal.get("selected", False)),
                )
            )
        return out

    def fetch_events(
        self,
        calendar_id: str = "primary",
        time_min: Optional[datetime] = None,
        max_results: int = config.DEFAULT_MAX_RESULTS,
    ) -> List[Event]:
        """
        Fetch upcoming events (recurring events expanded) of one calendar.
        """
        start = time_min or datetime.now(timezone.utc)
        params = {
            "timeMin": start.isoformat(),
            "showDeleted": "false",
            "singleEvents": "true",
            "maxResults": max_results,
            "orderBy": "startTime",
        }
        data = self._get(f"/calendars/{quote(calendar_id, safe='')}/events", params=params)

        events: List[Event] = []
        for item in data.get("items", []):
            if item.get("status") == "cancelled" or not item.get("id"):
                continue
            events.append(event_from_google(item, calendar_id))
        return events


def sync_into(
    store: EventStore,
    client: GoogleCalendarClient,
    calendar_ids: Iterable[str] = ("primary",),
    time_min: Optional[datetime] = None,
    max_results: int = config.DEFAULT_MAX_RESULTS,
) -> List[Event]:
    """
    Fetch the given calendars and bulk-import the result.
    Returns only the events that were not stored before.
    """
    fetched: List[Event] = []
    for cid in calendar_ids:
        fetched.extend(client.fetch_events(cid, time_min=time_min, max_results=max_results))
    return store.bulk_import(fetched)
