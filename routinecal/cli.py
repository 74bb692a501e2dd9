"""
CLI (Command Line Interface).

This module provides the terminal commands, e.g.:

    routinecal fetch
    routinecal search <text> [--section 05] [--day sunday]
    routinecal add <session_id> [--lab]
    routinecal list
    routinecal edit <n> --room 7A-02C --category exam
    routinecal remove <n>
    routinecal reset
    routinecal export [file.ics] [--reminder 10]
    routinecal links [--reminder 10]
    routinecal summary

Note:
- Selection numbers on the command line are 1-based (as shown by `list`)
- Output is plain text except for the `list` table
"""

from __future__ import annotations

import argparse
import logging
from datetime import date, datetime
from typing import Optional

from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from routinecal.catalog import fetch_catalog, find_session, load_catalog, save_catalog, search_sessions
from routinecal.compiler import compile_events
from routinecal.config import DEFAULT_REMINDER_MINUTES, ICS_FILENAME
from routinecal.deeplink import serialize_links
from routinecal.errors import RoutineCalError
from routinecal.export_ics import export_events_to_ics
from routinecal.model import CATEGORIES, KIND_LAB, KIND_LECTURE
from routinecal.parse import format_schedule
from routinecal.selection import SelectionStore
from routinecal.storage import load_selection, save_selection
from routinecal.summary import schedule_summary


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _reference_date(text: Optional[str]) -> date:
    """
    The date events are anchored to: --today if given, otherwise the real today.
    """
    if not text:
        return date.today()
    return datetime.strptime(text, "%Y-%m-%d").date()


def _iso_date(text: str) -> str:
    try:
        datetime.strptime(text, "%Y-%m-%d")
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected YYYY-MM-DD, got {text!r}")
    return text


def _non_negative(text: str) -> int:
    try:
        n = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a number: {text!r}")
    if n < 0:
        raise argparse.ArgumentTypeError("must be >= 0")
    return n


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


def _cmd_fetch(args: argparse.Namespace) -> int:
    """
    Download the catalog feeds and cache them locally.
    """
    sessions = fetch_catalog(timeout=args.timeout)
    path = save_catalog(sessions)
    print(f"Fetched {len(sessions)} sections into {path}")
    return 0


def _cmd_search(args: argparse.Namespace) -> int:
    """
    Search the cached catalog by code/title, optionally filtered by section and day.
    """
    query = (args.text or "").strip()
    if not query and not args.section and not args.day:
        print("Please provide a search text.")
        return 1

    matches = search_sessions(load_catalog(), query, section=args.section, day=args.day)
    if not matches:
        print("No results.")
        return 0

    # show max 20
    for s in matches[:20]:
        lab = " [lab]" if s.lab_schedule else ""
        print(
            f"{s.session_id} | {s.course_code} {s.course_title} | Section {s.section_name} | Dept {s.department} | "
            f"{format_schedule(s.schedule)} | seats {s.available_seats}{lab}"
        )
    if len(matches) > 20:
        print(f"... and {len(matches) - 20} more results")

    return 0


def _cmd_add(args: argparse.Namespace) -> int:
    """
    Add a catalog section to the selection, as lecture (default) or lab.
    """
    session_id = (args.session_id or "").strip()
    if not session_id:
        print("Please provide a session id.")
        return 1

    session = find_session(load_catalog(), session_id)
    if session is None:
        print(f"Unknown session id: {session_id}")
        return 1

    kind = KIND_LAB if args.lab else KIND_LECTURE
    if kind == KIND_LAB and not session.lab_schedule:
        print(f"Warning: {session.course_code} has no lab schedule (adding anyway).")

    store = load_selection()
    item = store.add(session, kind)
    save_selection(store)
    print(f"Added: {item.name} ({kind}) (selected: {len(store)})")
    return 0


def _print_table(store: SelectionStore) -> None:
    table = Table(title="Selected sessions", box=box.SIMPLE)
    table.add_column("#", justify="right")
    table.add_column("Course", style="bold cyan")
    table.add_column("Title")
    table.add_column("Instructor", style="magenta")
    table.add_column("Room")
    table.add_column("Schedule")
    table.add_column("Type", style="green")

    for i, sel in enumerate(store, start=1):
        table.add_row(
            str(i),
            sel.name,
            sel.title,
            f"{sel.faculty_name} <{sel.instructor_email}>",
            sel.room_number,
            format_schedule(sel.schedule_source),
            f"{sel.category} ({sel.kind})",
        )

    Console().print(table)


def _cmd_list(args: argparse.Namespace) -> int:
    store = load_selection()
    if not len(store):
        print("No sessions selected.")
        return 0
    _print_table(store)
    return 0


def _cmd_edit(args: argparse.Namespace) -> int:
    """
    Change the editable fields of one selected session.
    """
    fields = {
        "name": args.name,
        "title": args.title,
        "faculty_name": args.faculty,
        "room_number": args.room,
        "instructor_email": args.email,
        "category": args.category,
    }
    fields = {k: v for k, v in fields.items() if v is not None}
    if not fields:
        print("Nothing to change.")
        return 1

    store = load_selection()
    item = store.edit(args.number - 1, **fields)
    save_selection(store)
    print(f"Updated: {item.name}")
    return 0


def _cmd_remove(args: argparse.Namespace) -> int:
    store = load_selection()
    item = store.remove(args.number - 1)
    save_selection(store)
    print(f"Removed: {item.name} ({item.kind}) (selected: {len(store)})")
    return 0


def _cmd_reset(args: argparse.Namespace) -> int:
    store = load_selection()
    store.reset()
    save_selection(store)
    print("Selection cleared.")
    return 0


def _cmd_export(args: argparse.Namespace) -> int:
    """
    Export the selection into an iCalendar (.ics) file.
    """
    out_path = (args.out or "").strip()
    if not out_path:
        print("Please provide output .ics path.")
        return 1

    events = compile_events(load_selection().list(), _reference_date(args.today))
    n = export_events_to_ics(events, out_path, args.reminder)
    print(f"Exported {n} events to: {out_path}")
    return 0


def _cmd_links(args: argparse.Namespace) -> int:
    """
    Print one Google Calendar link per weekly event.
    """
    events = compile_events(load_selection().list(), _reference_date(args.today))
    for url in serialize_links(events, args.reminder):
        print(url)
    return 0


def _cmd_summary(args: argparse.Namespace) -> int:
    print(schedule_summary(load_selection().list()))
    return 0


COMMANDS = {
    "fetch": _cmd_fetch,
    "search": _cmd_search,
    "add": _cmd_add,
    "list": _cmd_list,
    "edit": _cmd_edit,
    "remove": _cmd_remove,
    "reset": _cmd_reset,
    "export": _cmd_export,
    "links": _cmd_links,
    "summary": _cmd_summary,
}


def build_parser() -> argparse.ArgumentParser:
    """
    Build the argparse CLI parser with sub-commands.
    """
    parser = argparse.ArgumentParser(prog="routinecal", description="Class routine to calendar")
    parser.add_argument("-v", "--verbose", action="store_true", help="Show debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    p_fetch = sub.add_parser("fetch", help="Download the course catalog")
    p_fetch.add_argument("--timeout", type=float, default=30, help="HTTP timeout in seconds")

    p_search = sub.add_parser("search", help="Search for sections")
    p_search.add_argument("text", type=str, nargs="?", default="", help="Course code or title text")
    p_search.add_argument("--section", type=str, default=None, help="Section name (e.g. 05)")
    p_search.add_argument("--day", type=str, default=None, help="Weekday the class meets on")

    p_add = sub.add_parser("add", help="Add a section by session id")
    p_add.add_argument("session_id", type=str, help="Session id (sectionId in the feed)")
    p_add.add_argument("--lab", action="store_true", help="Add the lab of this section instead")

    sub.add_parser("list", help="Show selected sessions")

    p_edit = sub.add_parser("edit", help="Edit a selected session")
    p_edit.add_argument("number", type=int, help="Number shown by 'list'")
    p_edit.add_argument("--name", type=str)
    p_edit.add_argument("--title", type=str)
    p_edit.add_argument("--faculty", type=str)
    p_edit.add_argument("--room", type=str)
    p_edit.add_argument("--email", type=str)
    p_edit.add_argument("--category", type=str, choices=CATEGORIES)

    p_remove = sub.add_parser("remove", help="Remove a selected session")
    p_remove.add_argument("number", type=int, help="Number shown by 'list'")

    sub.add_parser("reset", help="Clear the whole selection")

    for name, help_text in (("export", "Export selection to .ics"), ("links", "Print Google Calendar links")):
        p = sub.add_parser(name, help=help_text)
        if name == "export":
            p.add_argument("out", type=str, nargs="?", default=ICS_FILENAME, help="Output file path")
        p.add_argument(
            "--reminder",
            type=_non_negative,
            default=DEFAULT_REMINDER_MINUTES,
            help="Reminder minutes before class (0 = none)",
        )
        p.add_argument("--today", type=_iso_date, default=None, help="Reference date YYYY-MM-DD")

    sub.add_parser("summary", help="Print a plain-text summary")

    return parser


def main(argv: list[str] | None = None) -> None:
    """
    CLI entry point. Parses args, dispatches to command handlers,
    and exits via SystemExit with a return code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    _setup_logging(args.verbose)

    handler = COMMANDS.get(args.command)
    if handler is None:
        raise SystemExit(2)

    try:
        code = handler(args)
    except RoutineCalError as exc:
        print(f"Error: {exc}")
        code = 1

    raise SystemExit(code)
