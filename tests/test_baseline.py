"""
Unit tests for loading the cohort/group baseline timetable.
"""

import json
import tempfile
import unittest
from datetime import date
from pathlib import Path

from meetschedule.baseline import group_schedule, load_meet_data, normalize_cohort
from meetschedule.errors import InvalidFormat, PersistenceFailure

TODAY = date(2026, 2, 19)

SAMPLE = {
    "cohorts": {
        "2025": {
            "aliases": ["Y3", "y3"],
            "groups": {
                "GroupA": {
                    "group_mentor": "Alex Mentor",
                    "schedule": [
                        {
                            "id": "LEC-1",
                            "title": "Intro",
                            "category": "lecture",
                            "day_offset": 1,
                            "start_time": "9:00",
                            "end_time": "10:30",
                            "assignments": [
                                {"id": "A1", "title": "Setup", "description": "", "due_day_offset": 2}
                            ],
                        },
                        {
                            "id": "LUNCH",
                            "title": "Lunch",
                            "category": "meal",
                            "date": "2026-03-01",
                            "start_time": "12:30",
                            "end_time": "13:30",
                        },
                    ],
                    "general_assignments": [{"id": "GA1", "title": "Reflect", "description": "", "due_date": "2026-02-28"}],
                }
            },
        }
    }
}


class TestNormalizeCohort(unittest.TestCase):
    def test_aliases(self) -> None:
        self.assertEqual(normalize_cohort("Y3", SAMPLE), "2025")
        self.assertEqual(normalize_cohort("y3", SAMPLE), "2025")
        self.assertEqual(normalize_cohort("2025", SAMPLE), "2025")

    def test_unknown_passes_through(self) -> None:
        self.assertEqual(normalize_cohort("Y9", SAMPLE), "Y9")


class TestGroupSchedule(unittest.TestCase):
    def test_offsets_resolved_against_today(self) -> None:
        base = group_schedule(SAMPLE, "Y3", "GroupA", today=TODAY)
        self.assertEqual([e.id for e in base.schedule], ["LEC-1", "LUNCH"])
        self.assertEqual(base.schedule[0].date, "2026-02-20")
        self.assertEqual(base.schedule[0].assignments[0].due_date, "2026-02-21")
        self.assertEqual(base.schedule[1].date, "2026-03-01")
        self.assertEqual(base.mentor, "Alex Mentor")
        self.assertEqual([a.id for a in base.general_assignments], ["GA1"])

    def test_times_are_zero_padded(self) -> None:
        base = group_schedule(SAMPLE, "2025", "GroupA", today=TODAY)
        self.assertEqual(base.schedule[0].start_time, "09:00")

    def test_unknown_cohort_or_group_is_empty(self) -> None:
        self.assertEqual(group_schedule(SAMPLE, "2030", "GroupA", today=TODAY).schedule, [])
        self.assertEqual(group_schedule(SAMPLE, "Y3", "GroupZ", today=TODAY).schedule, [])

    def test_empty_results_are_not_shared(self) -> None:
        first = group_schedule(SAMPLE, "2030", "GroupA", today=TODAY)
        first.schedule.append("caller data")
        first.general_assignments.append("caller data")
        second = group_schedule(SAMPLE, "2030", "GroupA", today=TODAY)
        self.assertEqual(second.schedule, [])
        self.assertEqual(second.general_assignments, [])

    def test_invalid_entry_raises(self) -> None:
        data = json.loads(json.dumps(SAMPLE))
        data["cohorts"]["2025"]["groups"]["GroupA"]["schedule"][0]["start_time"] = "late"
        with self.assertRaises(InvalidFormat) as ctx:
            group_schedule(data, "Y3", "GroupA", today=TODAY)
        self.assertEqual(ctx.exception.record_id, "LEC-1")
        self.assertEqual(ctx.exception.field, "start_time")
        self.assertEqual(str(ctx.exception).count("field="), 1)


class TestLoadMeetData(unittest.TestCase):
    def test_bundled_data_loads(self) -> None:
        data = load_meet_data(Path(__file__).resolve().parents[1] / "meetschedule" / "data" / "meet_data.json")
        base = group_schedule(data, "Y3", "GroupA", today=TODAY)
        self.assertTrue(base.schedule)
        self.assertEqual(base.schedule[0].date, "2026-02-19")

    def test_missing_file_is_empty(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            self.assertEqual(load_meet_data(Path(d) / "none.json"), {"cohorts": {}})

    def test_corrupted_file_raises(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            p = Path(d) / "meet_data.json"
            p.write_text("{", encoding="utf-8")
            with self.assertRaises(PersistenceFailure):
                load_meet_data(p)


if __name__ == "__main__":
    unittest.main()
