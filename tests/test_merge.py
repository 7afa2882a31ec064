import unittest

from meetschedule.errors import NotFound
from meetschedule.merge import events_on, find_event, merge_schedule, month_days, new_for_import
from meetschedule.model import Event


def ev(eid: str, date: str = "2026-02-19", **kw) -> Event:
    kw.setdefault("title", eid)
    return Event(id=eid, category="lecture", date=date, start_time="09:00", end_time="10:00", **kw)


class TestMergeSchedule(unittest.TestCase):
    def test_custom_replaces_baseline_in_place(self) -> None:
        merged = merge_schedule([ev("B1"), ev("B2")], [ev("B1", title="mine"), ev("U1")])
        self.assertEqual([(e.id, e.title) for e in merged], [("B1", "mine"), ("B2", "B2"), ("U1", "U1")])

    def test_later_custom_record_wins(self) -> None:
        merged = merge_schedule([], [ev("U1", title="first"), ev("U1", title="second")])
        self.assertEqual([e.title for e in merged], ["second"])

    def test_inputs_not_modified(self) -> None:
        baseline = [ev("B1")]
        custom = [ev("B1", title="mine")]
        merge_schedule(baseline, custom)
        self.assertEqual(baseline[0].title, "B1")


class TestHelpers(unittest.TestCase):
    def test_new_for_import(self) -> None:
        fresh = new_for_import([ev("G1")], [ev("G1"), ev("G2"), ev("G2")])
        self.assertEqual([e.id for e in fresh], ["G2"])

    def test_find_event(self) -> None:
        schedule = [ev("A"), ev("B")]
        self.assertIs(find_event(schedule, "B"), schedule[1])
        with self.assertRaises(NotFound) as ctx:
            find_event(schedule, "Z")
        self.assertEqual(ctx.exception.record_id, "Z")

    def test_events_on(self) -> None:
        schedule = [ev("A"), ev("B", date="2026-02-20"), ev("C")]
        self.assertEqual([e.id for e in events_on(schedule, "2026-02-19")], ["A", "C"])

    def test_month_days_covers_every_day(self) -> None:
        schedule = [ev("A"), ev("B", date="2026-02-28"), ev("C"), ev("D", date="2026-03-01")]
        days = month_days(schedule, 2026, 2)
        self.assertEqual(len(days), 28)
        self.assertEqual(days[0], ("2026-02-01", []))
        by_date = dict(days)
        self.assertEqual([e.id for e in by_date["2026-02-19"]], ["A", "C"])
        self.assertEqual([e.id for e in by_date["2026-02-28"]], ["B"])
        self.assertNotIn("2026-03-01", by_date)

    def test_month_days_leap_year(self) -> None:
        self.assertEqual(month_days([], 2028, 2)[-1], ("2028-02-29", []))


if __name__ == "__main__":
    unittest.main()
