"""
CLI (Command Line Interface).

Terminal front end for the schedule, e.g.:

    meetschedule signup Dana Y3 GroupA
    meetschedule day [--date 2026-02-19]
    meetschedule month [--month 2026-02]
    meetschedule add-event --title "Study group" --date 2026-02-19 --start 18:00 --end 19:00
    meetschedule edit-event CS101-LEC-1 --end 11:00
    meetschedule delete-event USER-1760000000000
    meetschedule sync-google --token <access token>
    meetschedule assignments
    meetschedule advance A1
    meetschedule reminder add "Buy notebook" --date 2026-02-19 --time 08:00

User state is stored as JSON in the data directory (see meetschedule.config).
"""

from __future__ import annotations

import argparse
import time
from dataclasses import replace
from datetime import date
from typing import Any, Callable, Optional

import requests
from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from meetschedule import config, storage
from meetschedule.assignments import (
    DONE,
    IN_PROGRESS,
    STATUSES,
    StatusStore,
    collect_all,
    done_last,
    progress_summary,
    sort_for_display,
)
from meetschedule.baseline import GroupSchedule, group_schedule, load_meet_data
from meetschedule.errors import MeetScheduleError
from meetschedule.events import EventStore
from meetschedule.gcal import GoogleCalendarClient, sync_into
from meetschedule.layout import layout_day, overlapping_pairs
from meetschedule.merge import events_on, find_event, month_days
from meetschedule.model import CATEGORIES, Event, Reminder, UserProfile
from meetschedule.reminders import ReminderStore
from meetschedule.timeutil import duration_minutes, normalize_time, validate_date, validate_month

console = Console()


def _new_id(prefix: str) -> str:
    # millisecond timestamp ids, unique enough for one user typing commands
    return f"{prefix}-{int(time.time() * 1000)}"


def _today() -> str:
    return date.today().isoformat()


def _event_store() -> EventStore:
    return EventStore(storage.custom_events_backend())


def _reminder_store() -> ReminderStore:
    return ReminderStore(storage.reminders_backend())


def _status_store() -> StatusStore:
    return StatusStore(storage.task_status_backend())


def _baseline(user: Optional[UserProfile]) -> GroupSchedule:
    """
    Baseline schedule of the signed-up user's group (empty before sign-up).
    """
    if user is None:
        return GroupSchedule([], [], None)
    return group_schedule(load_meet_data(), user.cohort, user.group)


def _merged_schedule() -> tuple[GroupSchedule, list[Event]]:
    base = _baseline(storage.load_user())
    return base, _event_store().get_merged(base.schedule)


def _cmd_signup(args: argparse.Namespace) -> int:
    name = (args.name or "").strip()
    cohort = (args.cohort or "").strip()
    group = (args.group or "").strip()
    if not (name and cohort and group):
        console.print("Please provide name, cohort and group.")
        return 1

    user = UserProfile(name=name, cohort=cohort, group=group)
    storage.save_user(user)
    base = _baseline(user)
    console.print(f"Welcome, [bold]{escape(name)}[/]! Cohort {escape(cohort)}, {escape(group)}.")
    if not base.schedule:
        console.print(f"[yellow]Note:[/] no baseline schedule found for cohort {escape(repr(cohort))} / group {escape(repr(group))}.")
    return 0


def _cmd_whoami(args: argparse.Namespace) -> int:
    user = storage.load_user()
    if user is None:
        console.print("Not signed up. Run: meetschedule signup NAME COHORT GROUP")
        return 1
    mentor = _baseline(user).mentor
    line = f"{user.name} | cohort {user.cohort} | {user.group}"
    if mentor:
        line += f" | mentor {mentor}"
    console.print(escape(line))
    return 0


def _cmd_logout(args: argparse.Namespace) -> int:
    storage.logout()
    console.print("Signed out.")
    return 0


def _cmd_day(args: argparse.Namespace) -> int:
    """
    Show one day: laid-out events, reminders and overlapping events.
    """
    day = validate_date(args.date) if args.date else _today()
    _, schedule = _merged_schedule()
    todays = events_on(schedule, day)
    laid_out = layout_day(todays)

    if not laid_out:
        console.print(f"No events on {day}.")
    else:
        table = Table(title=f"Schedule {day}", box=box.SIMPLE)
        table.add_column("Time")
        table.add_column("Col", justify="right")
        table.add_column("Width %", justify="right")
        table.add_column("Left %", justify="right")
        table.add_column("Event")
        table.add_column("Category")
        table.add_column("Location")
        for item in laid_out:
            ev = item.event
            title = f"[bold]{escape(ev.title)}[/]"
            if ev.is_external:
                title += " [blue](Google)[/]"
            when = f"{ev.start_time}-{ev.end_time}"
            if not ev.is_break:
                when += f" ({duration_minutes(ev.start_time, ev.end_time)} min)"
            table.add_row(
                when,
                str(item.column),
                f"{item.width_percent:.1f}",
                f"{item.left_offset_percent:.1f}",
                title,
                f"[green]{ev.category}[/]",
                escape(ev.location or ""),
            )
        console.print(table)

    clashes = overlapping_pairs(todays)
    for a, b in clashes:
        console.print(
            f"[yellow]Overlap:[/] {a.start_time}-{a.end_time} {escape(a.title)}"
            f"  <->  {b.start_time}-{b.end_time} {escape(b.title)}"
        )

    day_reminders = _reminder_store().on_date(day)
    if day_reminders:
        console.print("\nReminders:")
        for r in day_reminders:
            mark = "[green]✓[/]" if r.completed else "·"
            console.print(f"  {mark} {r.time} {escape(r.text)} [dim]({r.id})[/]")
    return 0


MONTH_PREVIEW = 2


def _cmd_month(args: argparse.Namespace) -> int:
    """
    Show every day of a month with the titles of its first events.
    """
    year, month = validate_month(args.month) if args.month else (date.today().year, date.today().month)
    _, schedule = _merged_schedule()
    today = _today()

    table = Table(title=f"Schedule {year:04d}-{month:02d}", box=box.SIMPLE)
    table.add_column("Date")
    table.add_column("Day")
    table.add_column("Events")
    for day, events in month_days(schedule, year, month):
        titles = [escape(ev.title) for ev in events[:MONTH_PREVIEW]]
        if len(events) > MONTH_PREVIEW:
            titles.append(f"[dim]+{len(events) - MONTH_PREVIEW} more[/]")
        label = f"[bold blue]{day}[/]" if day == today else day
        table.add_row(label, date.fromisoformat(day).strftime("%a"), "; ".join(titles))
    console.print(table)
    return 0


def _cmd_add_event(args: argparse.Namespace) -> int:
    title = (args.title or "").strip() or "Untitled Event"
    event = Event(
        id=_new_id("USER"),
        title=title,
        category=args.category,
        date=validate_date(args.date or _today()),
        start_time=normalize_time(args.start, field="start_time"),
        end_time=normalize_time(args.end, field="end_time"),
        location=args.location,
        meeting_link=args.link,
        notes=args.notes,
        reminders=[r.strip() for r in args.reminder or [] if r.strip()],
    )
    _event_store().add(event)
    console.print(f"Added: {event.id} | {event.date} {event.start_time}-{event.end_time} | {escape(event.title)}")
    return 0


def _event_changes(args: argparse.Namespace) -> dict[str, Any]:
    changes: dict[str, Any] = {}
    if args.title is not None:
        changes["title"] = args.title.strip() or "Untitled Event"
    if args.category is not None:
        changes["category"] = args.category
    if args.date is not None:
        changes["date"] = validate_date(args.date)
    if args.start is not None:
        changes["start_time"] = normalize_time(args.start, field="start_time")
    if args.end is not None:
        changes["end_time"] = normalize_time(args.end, field="end_time")
    if args.location is not None:
        changes["location"] = args.location or None
    if args.link is not None:
        changes["meeting_link"] = args.link or None
    if args.notes is not None:
        changes["notes"] = args.notes or None
    return changes


def _cmd_edit_event(args: argparse.Namespace) -> int:
    """
    Edit any event of the merged schedule. The edited event is stored as a
    complete replacement record under the same id.
    """
    _, schedule = _merged_schedule()
    current = find_event(schedule, args.event_id)
    if current.is_external:
        console.print(f"{current.id} was imported from Google Calendar and cannot be edited here.")
        return 1

    changes = _event_changes(args)
    if not changes:
        console.print("Nothing to change.")
        return 0

    updated = replace(current, **changes)
    _event_store().update(updated)
    console.print(f"Updated: {updated.id} | {updated.date} {updated.start_time}-{updated.end_time} | {escape(updated.title)}")
    return 0


def _cmd_delete_event(args: argparse.Namespace) -> int:
    event_id = args.event_id.strip()
    store = _event_store()
    for ev in store.records():
        if ev.id == event_id and ev.is_external:
            console.print(f"{event_id} was imported from Google Calendar and cannot be deleted here.")
            return 1

    if store.delete(event_id):
        console.print(f"Deleted: {event_id}")
    else:
        console.print(f"No custom event {event_id} (baseline events cannot be deleted).")
    return 0


def _cmd_sync_google(args: argparse.Namespace) -> int:
    token = config.google_token(args.token)
    if not token:
        console.print("No access token. Pass --token or set MEETSCHEDULE_GOOGLE_TOKEN.")
        return 1

    client = GoogleCalendarClient(token)

    if args.list:
        table = Table(title="Google calendars", box=box.SIMPLE)
        table.add_column("ID")
        table.add_column("Name")
        table.add_column("Selected")
        for cal in client.list_calendars():
            table.add_row(escape(cal.id), escape(cal.summary), "yes" if cal.selected else "")
        console.print(table)
        return 0

    calendar_ids = args.calendar or ["primary"]
    with console.status("Syncing Google Calendar..."):
        imported = sync_into(_event_store(), client, calendar_ids, max_results=args.max)

    console.print(f"Imported {len(imported)} new events from {len(calendar_ids)} calendar(s).")
    for ev in imported:
        console.print(f"  + {ev.date} {ev.start_time}-{ev.end_time} {escape(ev.title)}")
    return 0


def _status_label(status: str) -> str:
    if status == DONE:
        return "[green]done[/]"
    if status == IN_PROGRESS:
        return "[yellow]in-progress[/]"
    return "[red]not-started[/]"


def _cmd_assignments(args: argparse.Namespace) -> int:
    base, schedule = _merged_schedule()
    status_of = _status_store().status_lookup()
    entries = collect_all(schedule, base.general_assignments)

    if not entries:
        console.print("No assignments.")
        return 0

    ordered = done_last(entries, status_of) if args.done_last else sort_for_display(entries, status_of)
    summary = progress_summary(entries, status_of)

    table = Table(title="Assignments", box=box.SIMPLE)
    table.add_column("ID")
    table.add_column("Status")
    table.add_column("Due")
    table.add_column("Title")
    table.add_column("From")
    for assignment, source in ordered:
        table.add_row(
            f"[bold cyan]{assignment.id}[/]",
            _status_label(status_of(assignment.id)),
            assignment.due_date,
            escape(assignment.title),
            escape(source),
        )
    console.print(table)
    console.print(f"Progress: {summary.completed_count}/{summary.total_count} done ({summary.percent}%)")
    return 0


def _cmd_status(args: argparse.Namespace) -> int:
    _status_store().set_status(args.assignment_id, args.status)
    console.print(f"{args.assignment_id}: {_status_label(args.status)}")
    return 0


def _cmd_advance(args: argparse.Namespace) -> int:
    new = _status_store().advance(args.assignment_id)
    console.print(f"{args.assignment_id}: {_status_label(new)}")
    return 0


def _cmd_reminder(args: argparse.Namespace) -> int:
    store = _reminder_store()

    if args.reminder_command == "add":
        text = (args.text or "").strip()
        if not text:
            console.print("Please provide a reminder text.")
            return 1
        reminder = Reminder(
            id=_new_id("REM"),
            text=text,
            date=validate_date(args.date or _today()),
            time=normalize_time(args.time),
        )
        store.add(reminder)
        console.print(f"Added reminder {reminder.id}: {reminder.date} {reminder.time} {escape(reminder.text)}")
        return 0

    if args.reminder_command == "toggle":
        reminder = store.toggle(args.reminder_id)
        state = "done" if reminder.completed else "open"
        console.print(f"{reminder.id}: {state}")
        return 0

    reminders = store.on_date(validate_date(args.date)) if args.date else store.all()
    if not reminders:
        console.print("No reminders.")
        return 0
    for r in reminders:
        mark = "✓" if r.completed else "·"
        console.print(f"{mark} {r.id} | {r.date} {r.time} | {escape(r.text)}")
    return 0


def _cmd_reset(args: argparse.Namespace) -> int:
    _event_store().clear()
    _reminder_store().clear()
    console.print("Custom events and reminders cleared.")
    return 0


def _add_event_fields(p: argparse.ArgumentParser, required: bool) -> None:
    p.add_argument("--title", type=str, required=required, default=None)
    p.add_argument("--date", type=str, default=None, help="YYYY-MM-DD (default: today)" if required else "YYYY-MM-DD")
    p.add_argument("--start", type=str, required=required, default=None, help="HH:MM")
    p.add_argument("--end", type=str, required=required, default=None, help="HH:MM")
    p.add_argument("--category", choices=CATEGORIES, default="personal" if required else None)
    p.add_argument("--location", type=str, default=None)
    p.add_argument("--link", type=str, default=None, help="Meeting link")
    p.add_argument("--notes", type=str, default=None)


def build_parser() -> argparse.ArgumentParser:
    """
    Build the argparse CLI parser with sub-commands.
    """
    parser = argparse.ArgumentParser(prog="meetschedule", description="MeetSchedule CLI")
    sub = parser.add_subparsers(dest="command", required=True)

    p_signup = sub.add_parser("signup", help="Sign up with name, cohort and group")
    p_signup.add_argument("name", type=str)
    p_signup.add_argument("cohort", type=str, help="Cohort (e.g. 2025 or Y3)")
    p_signup.add_argument("group", type=str, help="Group (e.g. GroupA)")

    sub.add_parser("whoami", help="Show the signed-up user")
    sub.add_parser("logout", help="Forget the signed-up user")

    p_day = sub.add_parser("day", help="Show the schedule of one day")
    p_day.add_argument("--date", type=str, default=None, help="YYYY-MM-DD (default: today)")

    p_month = sub.add_parser("month", help="Show a month overview")
    p_month.add_argument("--month", type=str, default=None, help="YYYY-MM (default: this month)")

    p_add = sub.add_parser("add-event", help="Add a personal event")
    _add_event_fields(p_add, required=True)
    p_add.add_argument("--reminder", action="append", help="Checklist item (repeatable)")

    p_edit = sub.add_parser("edit-event", help="Edit an event (stored as a full override)")
    p_edit.add_argument("event_id", type=str)
    _add_event_fields(p_edit, required=False)

    p_delete = sub.add_parser("delete-event", help="Delete a custom event")
    p_delete.add_argument("event_id", type=str)

    p_sync = sub.add_parser("sync-google", help="Import events from Google Calendar")
    p_sync.add_argument("--token", type=str, default=None, help="OAuth access token")
    p_sync.add_argument("--calendar", action="append", help="Calendar id (repeatable, default: primary)")
    p_sync.add_argument("--max", type=int, default=config.DEFAULT_MAX_RESULTS, help="Max events per calendar")
    p_sync.add_argument("--list", action="store_true", help="Only list available calendars")

    p_assign = sub.add_parser("assignments", help="Show all assignments with status")
    p_assign.add_argument("--done-last", action="store_true", help="Order by due date, finished ones last")

    p_status = sub.add_parser("status", help="Set the status of an assignment")
    p_status.add_argument("assignment_id", type=str)
    p_status.add_argument("status", choices=STATUSES)

    p_advance = sub.add_parser("advance", help="Move an assignment to its next status")
    p_advance.add_argument("assignment_id", type=str)

    p_rem = sub.add_parser("reminder", help="Manage standalone reminders")
    rem_sub = p_rem.add_subparsers(dest="reminder_command", required=True)
    p_rem_add = rem_sub.add_parser("add", help="Add a reminder")
    p_rem_add.add_argument("text", type=str)
    p_rem_add.add_argument("--date", type=str, default=None, help="YYYY-MM-DD (default: today)")
    p_rem_add.add_argument("--time", type=str, default="09:00", help="HH:MM")
    p_rem_toggle = rem_sub.add_parser("toggle", help="Mark a reminder done / open")
    p_rem_toggle.add_argument("reminder_id", type=str)
    p_rem_list = rem_sub.add_parser("list", help="List reminders")
    p_rem_list.add_argument("--date", type=str, default=None)

    sub.add_parser("reset", help="Delete all custom events and reminders")

    return parser


COMMANDS: dict[str, Callable[[argparse.Namespace], int]] = {
    "signup": _cmd_signup,
    "whoami": _cmd_whoami,
    "logout": _cmd_logout,
    "day": _cmd_day,
    "month": _cmd_month,
    "add-event": _cmd_add_event,
    "edit-event": _cmd_edit_event,
    "delete-event": _cmd_delete_event,
    "sync-google": _cmd_sync_google,
    "assignments": _cmd_assignments,
    "status": _cmd_status,
    "advance": _cmd_advance,
    "reminder": _cmd_reminder,
    "reset": _cmd_reset,
}


def main(argv: list[str] | None = None) -> None:
    """
    CLI entry point. Parses args, dispatches to command handlers,
    and exits via SystemExit with a return code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    handler = COMMANDS.get(args.command)
    if handler is None:
        raise SystemExit(2)

    try:
        code = handler(args)
    except MeetScheduleError as exc:
        console.print(f"[red]Error:[/] {escape(str(exc))}")
        code = 1
    except requests.RequestException as exc:
        console.print(f"[red]Google Calendar request failed:[/] {escape(str(exc))}")
        code = 1

    raise SystemExit(code)
