"""
Tests for CLI entry points.

Every test points the CLI at a temporary data directory and a small
baseline file (via environment variables), so real user data is never
touched.
"""

import json
import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from meetschedule import cli, storage
from meetschedule.assignments import DONE, IN_PROGRESS, StatusStore
from meetschedule.events import EventStore
from meetschedule.model import Event
from meetschedule.reminders import ReminderStore

BASELINE = {
    "cohorts": {
        "2025": {
            "aliases": ["Y3"],
            "groups": {
                "GroupA": {
                    "group_mentor": "Alex Mentor",
                    "schedule": [
                        {
                            "id": "LEC-1",
                            "title": "Intro to Python Logic",
                            "category": "lecture",
                            "date": "2026-02-19",
                            "start_time": "09:00",
                            "end_time": "10:30",
                            "location": "Google Meet",
                            "assignments": [
                                {"id": "A1", "title": "Setup", "description": "", "due_date": "2026-02-20"}
                            ],
                        }
                    ],
                    "general_assignments": [
                        {"id": "GA1", "title": "Reflection", "description": "", "due_date": "2026-02-25"}
                    ],
                }
            },
        }
    }
}


class CLITestCase(unittest.TestCase):
    def setUp(self) -> None:
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        self.home = Path(tmp.name) / "home"
        baseline = Path(tmp.name) / "meet_data.json"
        baseline.write_text(json.dumps(BASELINE), encoding="utf-8")

        env = mock.patch.dict(
            os.environ,
            {"MEETSCHEDULE_HOME": str(self.home), "MEETSCHEDULE_BASELINE": str(baseline), "MEETSCHEDULE_GOOGLE_TOKEN": ""},
        )
        env.start()
        self.addCleanup(env.stop)

    def run_cli(self, *argv: str) -> tuple[int, str]:
        with cli.console.capture() as capture:
            with self.assertRaises(SystemExit) as ctx:
                cli.main(list(argv))
        return ctx.exception.code, capture.get()

    def events(self) -> EventStore:
        return EventStore(storage.custom_events_backend(self.home))


class TestUserCommands(CLITestCase):
    def test_whoami_requires_signup(self) -> None:
        code, _ = self.run_cli("whoami")
        self.assertEqual(code, 1)

    def test_signup_whoami_logout(self) -> None:
        self.assertEqual(self.run_cli("signup", "Dana", "Y3", "GroupA")[0], 0)
        code, out = self.run_cli("whoami")
        self.assertEqual(code, 0)
        self.assertIn("Alex Mentor", out)
        self.assertEqual(self.run_cli("logout")[0], 0)
        self.assertIsNone(storage.load_user(self.home))

    def test_missing_command_is_usage_error(self) -> None:
        with self.assertRaises(SystemExit) as ctx:
            cli.main([])
        self.assertEqual(ctx.exception.code, 2)


class TestEventCommands(CLITestCase):
    def setUp(self) -> None:
        super().setUp()
        self.run_cli("signup", "Dana", "Y3", "GroupA")

    def test_add_event_normalizes_times(self) -> None:
        code, out = self.run_cli("add-event", "--title", "Study group", "--date", "2026-02-19", "--start", "9:00", "--end", "9:45")
        self.assertEqual(code, 0)
        self.assertIn("Added:", out)
        (record,) = self.events().records()
        self.assertTrue(record.id.startswith("USER-"))
        self.assertEqual((record.start_time, record.end_time), ("09:00", "09:45"))
        self.assertEqual(record.category, "personal")

    def test_add_event_rejects_end_before_start(self) -> None:
        code, out = self.run_cli("add-event", "--title", "x", "--date", "2026-02-19", "--start", "11:00", "--end", "10:00")
        self.assertEqual(code, 1)
        self.assertIn("end_time", out)
        self.assertEqual(self.events().records(), [])

    def test_edit_baseline_event_stores_full_override(self) -> None:
        code, _ = self.run_cli("edit-event", "LEC-1", "--end", "11:00", "--title", "Edited")
        self.assertEqual(code, 0)
        (record,) = self.events().records()
        self.assertEqual(record.id, "LEC-1")
        self.assertEqual(record.title, "Edited")
        self.assertEqual(record.end_time, "11:00")
        # untouched fields copied from the baseline record
        self.assertEqual(record.location, "Google Meet")
        self.assertEqual([a.id for a in record.assignments], ["A1"])

    def test_edit_unknown_event_fails(self) -> None:
        code, out = self.run_cli("edit-event", "NOPE", "--title", "x")
        self.assertEqual(code, 1)
        self.assertIn("NOPE", out)

    def test_edit_imported_event_refused(self) -> None:
        self.events().bulk_import(
            [Event(id="g-1", title="Dentist", category="personal", date="2026-02-19",
                   start_time="12:00", end_time="13:00", external_id="g-1")]
        )
        self.assertEqual(self.run_cli("edit-event", "g-1", "--title", "x")[0], 1)
        self.assertEqual(self.run_cli("delete-event", "g-1")[0], 1)
        self.assertEqual(len(self.events().records()), 1)

    def test_delete_event(self) -> None:
        self.run_cli("add-event", "--title", "Gym", "--date", "2026-02-19", "--start", "18:00", "--end", "19:00")
        event_id = self.events().records()[0].id
        self.assertEqual(self.run_cli("delete-event", event_id)[0], 0)
        self.assertEqual(self.events().records(), [])
        # deleting again is a no-op, not an error
        self.assertEqual(self.run_cli("delete-event", event_id)[0], 0)

    def test_day_view(self) -> None:
        self.run_cli("add-event", "--title", "Overlap", "--date", "2026-02-19", "--start", "10:00", "--end", "11:00")
        code, out = self.run_cli("day", "--date", "2026-02-19")
        self.assertEqual(code, 0)
        self.assertIn("Overlap:", out)

    def test_day_view_bad_date(self) -> None:
        self.assertEqual(self.run_cli("day", "--date", "19.02.2026")[0], 1)

    def test_month_view_previews_two_titles_per_day(self) -> None:
        store = self.events()
        for eid, start in (("U1", "11:00"), ("U2", "12:00")):
            store.add(Event(id=eid, title=f"Extra {eid}", category="personal", date="2026-02-19",
                            start_time=start, end_time=start))
        code, out = self.run_cli("month", "--month", "2026-02")
        self.assertEqual(code, 0)
        self.assertIn("2026-02-01", out)
        self.assertIn("2026-02-28", out)
        self.assertNotIn("2026-02-29", out)
        self.assertIn("Intro to Python Logic", out)
        self.assertIn("Extra U1", out)
        self.assertNotIn("Extra U2", out)
        self.assertIn("+1 more", out)

    def test_month_view_bad_month(self) -> None:
        code, out = self.run_cli("month", "--month", "2026-13")
        self.assertEqual(code, 1)
        self.assertIn("month", out)

    def test_reset(self) -> None:
        self.run_cli("add-event", "--title", "Gym", "--date", "2026-02-19", "--start", "18:00", "--end", "19:00")
        self.run_cli("reminder", "add", "Stretch", "--date", "2026-02-19", "--time", "17:00")
        self.assertEqual(self.run_cli("reset")[0], 0)
        self.assertEqual(self.events().records(), [])
        self.assertEqual(ReminderStore(storage.reminders_backend(self.home)).all(), [])


class TestAssignmentCommands(CLITestCase):
    def setUp(self) -> None:
        super().setUp()
        self.run_cli("signup", "Dana", "Y3", "GroupA")

    def status_store(self) -> StatusStore:
        return StatusStore(storage.task_status_backend(self.home))

    def test_assignments_progress(self) -> None:
        self.run_cli("status", "A1", "done")
        code, out = self.run_cli("assignments")
        self.assertEqual(code, 0)
        self.assertIn("1/2 done (50%)", out)

    def test_advance(self) -> None:
        self.assertEqual(self.run_cli("advance", "GA1")[0], 0)
        self.assertEqual(self.status_store().status_of("GA1"), IN_PROGRESS)
        self.run_cli("advance", "GA1")
        self.assertEqual(self.status_store().status_of("GA1"), DONE)

    def test_invalid_status_is_usage_error(self) -> None:
        with self.assertRaises(SystemExit) as ctx:
            cli.main(["status", "A1", "finished"])
        self.assertEqual(ctx.exception.code, 2)


class TestReminderCommands(CLITestCase):
    def test_add_toggle_list(self) -> None:
        self.assertEqual(self.run_cli("reminder", "add", "Buy notebook", "--date", "2026-02-19", "--time", "8:00")[0], 0)
        store = ReminderStore(storage.reminders_backend(self.home))
        (reminder,) = store.all()
        self.assertEqual(reminder.time, "08:00")

        self.assertEqual(self.run_cli("reminder", "toggle", reminder.id)[0], 0)
        self.assertTrue(store.all()[0].completed)

        code, out = self.run_cli("reminder", "list", "--date", "2026-02-19")
        self.assertEqual(code, 0)
        self.assertIn("Buy notebook", out)

    def test_toggle_unknown_fails(self) -> None:
        self.assertEqual(self.run_cli("reminder", "toggle", "REM-0")[0], 1)


class TestSyncCommand(CLITestCase):
    def test_requires_token(self) -> None:
        code, out = self.run_cli("sync-google")
        self.assertEqual(code, 1)
        self.assertIn("No access token", out)


if __name__ == "__main__":
    unittest.main()
