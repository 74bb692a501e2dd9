"""
Tests for CLI entry points.

Every test points ROUTINECAL_DATA_DIR at a temporary directory so the real
catalog cache and selection file are never touched.
"""

import io
import os
import tempfile
import unittest
from contextlib import redirect_stdout
from pathlib import Path
from unittest import mock

from routinecal.catalog import save_catalog
from routinecal.cli import main
from routinecal.model import CatalogSession
from routinecal.storage import load_selection


SESSIONS = [
    CatalogSession(
        session_id="101",
        course_code="CSE110",
        course_title="Programming Language I",
        instructor="ABC",
        room_name="10B-18C",
        credits=3,
        schedule="SUNDAY(8:00 AM-9:20 AM-10B-18C)\nTUESDAY(8:00 AM-9:20 AM-10B-18C)",
        lab_schedule="THURSDAY(11:00 AM-1:50 PM-09F-24L)",
        lab_room="09F-24L",
        section_name="05",
    ),
    CatalogSession(
        session_id="202",
        course_code="MAT120",
        course_title="Calculus I",
        instructor="TBA",
        room_name="UB1201",
        credits=3,
        schedule="MONDAY(9:30 AM-10:50 AM-UB1201)",
        section_name="01",
    ),
]


def run(argv: list) -> tuple:
    """
    Run the CLI and return (exit code, stdout).
    """
    out = io.StringIO()
    with redirect_stdout(out):
        with mock.patch("routinecal.cli._setup_logging"):
            try:
                main(argv)
            except SystemExit as exc:
                return exc.code, out.getvalue()
    raise AssertionError("main() did not exit")


class TestCLI(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.data_dir = Path(self._tmp.name)
        self._env = mock.patch.dict(os.environ, {"ROUTINECAL_DATA_DIR": str(self.data_dir)})
        self._env.start()
        save_catalog(SESSIONS)

    def tearDown(self) -> None:
        self._env.stop()
        self._tmp.cleanup()

    def test_cli_search_requires_text(self) -> None:
        code, out = run(["search", ""])
        self.assertNotEqual(code, 0)

    def test_search(self) -> None:
        code, out = run(["search", "cse"])
        self.assertEqual(code, 0)
        self.assertIn("101 | CSE110 Programming Language I", out)
        self.assertIn("Dept CSE", out)
        self.assertNotIn("MAT120", out)

    def test_search_without_catalog(self) -> None:
        (self.data_dir / "catalog.json").unlink()
        code, out = run(["search", "cse"])
        self.assertEqual(code, 1)
        self.assertIn("routinecal fetch", out)

    def test_add_remove_roundtrip(self) -> None:
        self.assertEqual(run(["add", "101"])[0], 0)
        self.assertEqual(run(["add", "101", "--lab"])[0], 0)
        self.assertEqual([s.kind for s in load_selection().list()], ["lecture", "lab"])

        code, out = run(["remove", "1"])
        self.assertEqual(code, 0)
        self.assertEqual([s.kind for s in load_selection().list()], ["lab"])

    def test_add_duplicate_and_unknown(self) -> None:
        run(["add", "101"])
        code, out = run(["add", "101"])
        self.assertEqual(code, 1)
        self.assertIn("already selected", out)
        self.assertEqual(len(load_selection()), 1)

        self.assertEqual(run(["add", "999"])[0], 1)

    def test_edit_and_stale_index(self) -> None:
        run(["add", "101"])
        code, _ = run(["edit", "1", "--room", "UB30101", "--category", "exam"])
        self.assertEqual(code, 0)
        item = load_selection().list()[0]
        self.assertEqual(item.room_number, "UB30101")
        self.assertEqual(item.category, "exam")

        self.assertEqual(run(["edit", "3", "--room", "x"])[0], 1)
        self.assertEqual(run(["remove", "0"])[0], 1)
        self.assertEqual(run(["edit", "1"])[0], 1)

    def test_export_ics(self) -> None:
        run(["add", "101"])
        out_file = self.data_dir / "out.ics"
        code, out = run(["export", str(out_file), "--today", "2026-10-14", "--reminder", "0"])
        self.assertEqual(code, 0)
        self.assertIn("Exported 2 events", out)

        text = out_file.read_bytes().decode("utf-8")
        self.assertEqual(text.count("BEGIN:VEVENT"), 2)
        self.assertIn("DTSTART;TZID=Asia/Dhaka:20261018T080000", text)
        self.assertNotIn("VALARM", text)

    def test_export_empty_selection(self) -> None:
        out_file = self.data_dir / "out.ics"
        code, out = run(["export", str(out_file)])
        self.assertEqual(code, 1)
        self.assertFalse(out_file.exists())

    def test_links(self) -> None:
        run(["add", "101"])
        run(["add", "202"])
        code, out = run(["links", "--today", "2026-10-14"])
        self.assertEqual(code, 0)
        urls = out.strip().splitlines()
        self.assertEqual(len(urls), 3)
        self.assertTrue(all(u.startswith("https://calendar.google.com/calendar/render?") for u in urls))

    def test_summary_and_reset(self) -> None:
        run(["add", "202"])
        code, out = run(["summary"])
        self.assertEqual(code, 0)
        self.assertIn("1. MAT120", out)

        self.assertEqual(run(["reset"])[0], 0)
        self.assertEqual(len(load_selection()), 0)
        self.assertEqual(run(["summary"])[0], 1)

    def test_list(self) -> None:
        self.assertIn("No sessions selected.", run(["list"])[1])
        run(["add", "101"])
        code, out = run(["list"])
        self.assertEqual(code, 0)
        self.assertIn("Selected sessions", out)

    def test_fetch(self) -> None:
        with mock.patch("routinecal.cli.fetch_catalog", return_value=SESSIONS[:1]) as fetch:
            code, out = run(["fetch", "--timeout", "5"])
        self.assertEqual(code, 0)
        fetch.assert_called_once_with(timeout=5.0)
        self.assertIn("Fetched 1 sections", out)


if __name__ == "__main__":
    unittest.main()
