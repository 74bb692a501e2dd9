import unittest

from routinecal.errors import EmptySelection
from routinecal.model import CatalogSession
from routinecal.selection import SelectionStore
from routinecal.summary import schedule_summary


class TestSummary(unittest.TestCase):
    def test_one_block_per_selection(self) -> None:
        session = CatalogSession(
            session_id="101",
            course_code="CSE110",
            course_title="Programming Language I",
            instructor="ABC",
            room_name="10B-18C",
            credits=3,
            schedule="SUNDAY(8:00 AM-9:20 AM-10B-18C)\nTUESDAY(8:00 AM-9:20 AM-10B-18C)",
            lab_schedule="THURSDAY(11:00 AM-1:50 PM-09F-24L)",
        )
        store = SelectionStore()
        store.add(session)
        store.add(session, "lab")

        text = schedule_summary(store.list())

        self.assertTrue(text.startswith("BRACU Class Schedule\n"))
        self.assertIn("1. CSE110\n   Title: Programming Language I\n", text)
        self.assertIn("   Schedule: Sunday 8:00 AM-9:20 AM, Tuesday 8:00 AM-9:20 AM\n", text)
        self.assertIn("   Type: Normal\n", text)
        self.assertIn("2. CSE110\n", text)
        self.assertIn("   Schedule: Thursday 11:00 AM-1:50 PM\n", text)
        self.assertIn("   Type: Lab\n", text)

    def test_empty(self) -> None:
        with self.assertRaises(EmptySelection):
            schedule_summary([])


if __name__ == "__main__":
    unittest.main()
