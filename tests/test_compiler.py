"""
Unit tests for event compilation (selection -> CompiledEvent list).

Reference date 2026-10-14 is a Wednesday, so Sunday classes start on the
18th and Tuesday classes on the 20th.
"""

import unittest
from datetime import date, datetime

from routinecal.compiler import compile_events
from routinecal.errors import EmptySelection
from routinecal.model import CatalogSession
from routinecal.selection import SelectionStore


WEDNESDAY = date(2026, 10, 14)


def make_session(**overrides) -> CatalogSession:
    data = dict(
        session_id="101",
        course_code="CSE110",
        course_title="Programming Language I",
        instructor="ABC",
        room_name="10B-18C",
        credits=3,
        schedule="SUNDAY(8:00 AM-9:20 AM-10B-18C)\nTUESDAY(8:00 AM-9:20 AM-10B-18C)",
        lab_schedule="THURSDAY(11:00 AM-1:50 PM-09F-24L)",
        section_name="05",
    )
    data.update(overrides)
    return CatalogSession(**data)


class TestCompileEvents(unittest.TestCase):
    def test_two_weekdays_two_events(self) -> None:
        store = SelectionStore()
        store.add(make_session())

        events = compile_events(store.list(), WEDNESDAY)

        self.assertEqual(len(events), 2)
        sunday, tuesday = events
        self.assertEqual(sunday.weekday, "Sunday")
        self.assertEqual(sunday.start, datetime(2026, 10, 18, 8, 0))
        self.assertEqual(sunday.end, datetime(2026, 10, 18, 9, 20))
        self.assertEqual(tuesday.start, datetime(2026, 10, 20, 8, 0))
        self.assertNotEqual(sunday.uid, tuesday.uid)

        self.assertEqual(sunday.title, "CSE110 (10B-18C)")
        self.assertEqual(sunday.location, "10B-18C, BRAC University")
        self.assertEqual(sunday.category, "normal")
        self.assertEqual(sunday.source_session_id, "101")
        self.assertTrue(sunday.uid.startswith("101-lecture-Sunday-"))
        self.assertTrue(sunday.uid.endswith("@routine2calendar.com"))

    def test_description_lines(self) -> None:
        store = SelectionStore()
        store.add(make_session())
        desc = compile_events(store.list(), WEDNESDAY)[0].description
        self.assertEqual(
            desc.split("\n"),
            [
                "Course: Programming Language I",
                "Instructor: ABC",
                "Email: abc@bracu.ac.bd",
                "Room: 10B-18C",
                "Section: 05",
            ],
        )

    def test_category_suffix(self) -> None:
        store = SelectionStore()
        store.add(make_session())
        store.add(make_session(), "lab")
        store.edit(0, category="exam")

        events = compile_events(store.list(), WEDNESDAY)
        self.assertEqual(events[0].title, "CSE110 Exam (10B-18C)")
        self.assertEqual(events[-1].title, "CSE110 Lab (09F-24L)")
        self.assertEqual(events[-1].start, datetime(2026, 10, 15, 11, 0))
        self.assertEqual(events[-1].end, datetime(2026, 10, 15, 13, 50))

    def test_recompiling_is_idempotent(self) -> None:
        store = SelectionStore()
        store.add(make_session())
        store.add(make_session(session_id="202", course_code="MAT120"))

        first = [ev.uid for ev in compile_events(store.list(), WEDNESDAY)]
        second = [ev.uid for ev in compile_events(store.list(), WEDNESDAY)]
        self.assertEqual(first, second)
        self.assertEqual(len(set(first)), 4)

    def test_lecture_and_lab_on_same_slot_do_not_collide(self) -> None:
        session = make_session(lab_schedule=make_session().schedule)
        store = SelectionStore()
        store.add(session)
        store.add(session, "lab")

        uids = [ev.uid for ev in compile_events(store.list(), WEDNESDAY)]
        self.assertEqual(len(uids), 4)
        self.assertEqual(len(set(uids)), 4)

    def test_unparseable_selection_is_skipped(self) -> None:
        store = SelectionStore()
        store.add(make_session(session_id="1", course_code="AAA101", schedule="TBA"))
        store.add(make_session(session_id="2", course_code="BBB101"))
        store.add(make_session(session_id="3", course_code="CCC101", schedule=""))

        with self.assertLogs("routinecal.compiler", level="WARNING"):
            events = compile_events(store.list(), WEDNESDAY)
        self.assertEqual([ev.source_session_id for ev in events], ["2", "2"])

    def test_order_is_selection_then_schedule(self) -> None:
        store = SelectionStore()
        store.add(make_session(session_id="1", schedule="Thursday(9:30 AM-10:50 AM),Monday(9:30 AM-10:50 AM)"))
        store.add(make_session(session_id="2", schedule="Sunday(2:00 PM-3:20 PM)"))

        events = compile_events(store.list(), WEDNESDAY)
        self.assertEqual(
            [(ev.source_session_id, ev.weekday) for ev in events],
            [("1", "Thursday"), ("1", "Monday"), ("2", "Sunday")],
        )

    def test_empty_selection(self) -> None:
        with self.assertRaises(EmptySelection):
            compile_events([], WEDNESDAY)


if __name__ == "__main__":
    unittest.main()
