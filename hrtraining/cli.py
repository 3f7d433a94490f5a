"""
CLI (Command Line Interface).

    hrtraining list [--company C] [--status S] [--year Y]
    hrtraining show <id>
    hrtraining add --name <name> [fields...]
    hrtraining edit <id> [fields...]
    hrtraining delete <id>
    hrtraining import <file.json>
    hrtraining stats [--company C] [--status S] [--year Y]
    hrtraining settings show | set-url <url> | clear-url

All commands work on the local store; when a remote URL is configured the
collection is also loaded from / mirrored to it.
"""

from __future__ import annotations

import argparse
import dataclasses
import json
import logging
from pathlib import Path
from typing import Any

from rich import box
from rich.console import Console
from rich.table import Table

from hrtraining.book import CourseBook
from hrtraining.model import CREATORS, STATUSES, Course, decode_collection, new_course_id
from hrtraining.stats import compute_stats, filter_courses
from hrtraining.sync import Synchronizer, default_synchronizer

console = Console()

# CLI option dest -> Course attribute
_FIELD_OPTIONS = {
    "name": "name",
    "company": "company",
    "department": "department",
    "objective": "objective",
    "start_date": "start_date",
    "end_date": "end_date",
    "time": "time",
    "duration": "duration",
    "expected": "expected_attendees",
    "actual": "actual_attendees",
    "instructor": "instructor",
    "instructor_org": "instructor_org",
    "cost": "cost",
    "satisfaction": "satisfaction",
    "status": "status",
    "cancellation_reason": "cancellation_reason",
}


def _fmt_number(x: float) -> str:
    return f"{x:,.0f}" if float(x).is_integer() else f"{x:,.1f}"


def _changes_from_args(args: argparse.Namespace) -> dict[str, Any]:
    changes: dict[str, Any] = {}
    for dest, attr in _FIELD_OPTIONS.items():
        value = getattr(args, dest, None)
        if value is not None:
            changes[attr] = value
    return changes


def _submit(book: CourseBook, course: Course) -> int:
    """
    Validate like the course form does, then save.
    """
    problems = course.validate()
    if problems:
        print("Invalid course:")
        for p in problems:
            print(f"- {p}")
        return 1
    book.upsert(course)
    return 0


def _cmd_list(args: argparse.Namespace, book: CourseBook) -> int:
    courses = filter_courses(book, company=args.company, status=args.status, year=args.year)
    if not courses:
        print("No courses.")
        return 0

    table = Table(title=f"Courses ({len(courses)})", box=box.SIMPLE)
    table.add_column("ID", style="bold cyan")
    table.add_column("Name")
    table.add_column("Company")
    table.add_column("Dates")
    table.add_column("Hours", justify="right")
    table.add_column("Attendees", justify="right")
    table.add_column("Cost", justify="right")
    table.add_column("Status")

    for c in courses:
        dates = c.start_date if c.start_date == c.end_date else f"{c.start_date} ~ {c.end_date}"
        table.add_row(
            c.id,
            c.name or "(no name)",
            c.company,
            dates,
            _fmt_number(c.duration),
            f"{c.actual_attendees}/{c.expected_attendees}",
            _fmt_number(c.cost),
            c.status,
        )
    console.print(table)
    return 0


def _cmd_show(args: argparse.Namespace, book: CourseBook) -> int:
    course = book.get(args.course_id)
    if course is None:
        print(f"Unknown course id: {args.course_id}")
        return 1

    table = Table(box=box.SIMPLE, show_header=False)
    table.add_column("Field", style="bold")
    table.add_column("Value")
    for key, value in course.to_dict().items():
        table.add_row(key, str(value))
    console.print(table)
    return 0


def _cmd_add(args: argparse.Namespace, book: CourseBook) -> int:
    changes = _changes_from_args(args)
    course = Course(id=new_course_id(), created_by=args.created_by, **changes)
    rc = _submit(book, course)
    if rc == 0:
        print(f"Added: {course.id} (courses: {len(book)})")
    return rc


def _cmd_edit(args: argparse.Namespace, book: CourseBook) -> int:
    current = book.get(args.course_id)
    if current is None:
        print(f"Unknown course id: {args.course_id}")
        return 1

    changes = _changes_from_args(args)
    if not changes:
        print("Nothing to change.")
        return 0

    # full-record replacement: id and createdBy never change
    updated = dataclasses.replace(current, **changes)
    if updated.status != "Cancelled" and "cancellation_reason" not in changes:
        updated.cancellation_reason = ""

    rc = _submit(book, updated)
    if rc == 0:
        print(f"Updated: {updated.id}")
    return rc


def _cmd_delete(args: argparse.Namespace, book: CourseBook) -> int:
    if not book.delete(args.course_id):
        print(f"Unknown course id: {args.course_id}")
        return 1
    print(f"Deleted: {args.course_id} (courses: {len(book)})")
    return 0


def _load_import_file(path: Path) -> list[Course]:
    """
    Read a JSON array of course objects. Records without an id get one.
    """
    payload = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(payload, list):
        for item in payload:
            if isinstance(item, dict) and not str(item.get("id") or "").strip():
                item["id"] = new_course_id()
    return decode_collection(payload)


def _cmd_import(args: argparse.Namespace, book: CourseBook) -> int:
    try:
        imported = _load_import_file(Path(args.file))
    except (OSError, ValueError) as exc:
        print(f"Cannot import {args.file}: {exc}")
        return 1

    if not imported:
        print("Nothing to import.")
        return 0

    added = book.batch_import(imported)
    print(f"Imported {len(added)} courses (courses: {len(book)})")
    return 0


def _cmd_stats(args: argparse.Namespace, book: CourseBook) -> int:
    courses = filter_courses(book, company=args.company, status=args.status, year=args.year)
    stats = compute_stats(courses)

    table = Table(title="Dashboard", box=box.SIMPLE, show_header=False)
    table.add_column("Metric", style="bold")
    table.add_column("Value", justify="right")
    table.add_row("Courses", str(stats.total_courses))
    table.add_row("Budget (planned)", _fmt_number(stats.expected_total_cost))
    table.add_row("Budget (spent)", _fmt_number(stats.actual_total_cost))
    table.add_row("Training hours (planned)", _fmt_number(stats.expected_total_hours))
    table.add_row("Training hours (actual)", _fmt_number(stats.actual_total_hours))
    table.add_row("Avg. satisfaction", f"{stats.avg_satisfaction:.2f}")
    table.add_row("Completion rate", f"{stats.completion_rate:.1f}%")
    table.add_row("Opening rate", f"{stats.opening_rate:.1f}%")
    table.add_row("Participation rate", f"{stats.participation_rate:.1f}%")
    console.print(table)
    return 0


def _cmd_settings(args: argparse.Namespace, sync: Synchronizer) -> int:
    store = sync.settings_store
    settings = store.get()

    if args.action == "show":
        print(f"Remote URL: {settings.remote_url or '(disabled)'}")
        return 0

    if args.action == "set-url":
        url = (args.url or "").strip()
        if not url:
            print("Please provide a URL (or use clear-url).")
            return 1
        store.put(dataclasses.replace(settings, remote_url=url))
        print(f"Remote URL set: {url}")
        return 0

    store.put(dataclasses.replace(settings, remote_url=""))
    print("Remote sync disabled.")
    return 0


def _add_filter_options(p: argparse.ArgumentParser) -> None:
    p.add_argument("--company", type=str, default=None, help="Only this company")
    p.add_argument("--status", choices=STATUSES, default=None, help="Only this status")
    p.add_argument("--year", type=str, default=None, help="Only courses starting in this year (e.g. 2023)")


def _add_field_options(p: argparse.ArgumentParser) -> None:
    p.add_argument("--name", type=str)
    p.add_argument("--company", type=str)
    p.add_argument("--department", type=str)
    p.add_argument("--objective", type=str)
    p.add_argument("--start-date", dest="start_date", type=str, help="YYYY-MM-DD")
    p.add_argument("--end-date", dest="end_date", type=str, help="YYYY-MM-DD")
    p.add_argument("--time", type=str, help="e.g. 09:00-17:00")
    p.add_argument("--duration", type=float, help="Hours")
    p.add_argument("--expected", type=int, help="Expected attendees")
    p.add_argument("--actual", type=int, help="Actual attendees")
    p.add_argument("--instructor", type=str)
    p.add_argument("--instructor-org", dest="instructor_org", type=str)
    p.add_argument("--cost", type=float)
    p.add_argument("--satisfaction", type=float, help="0 = not rated, else 1-5")
    p.add_argument("--status", choices=STATUSES)
    p.add_argument("--cancellation-reason", dest="cancellation_reason", type=str)


def build_parser() -> argparse.ArgumentParser:
    """
    Build the argparse CLI parser with sub-commands.
    """
    parser = argparse.ArgumentParser(prog="hrtraining", description="HR training course records")
    parser.add_argument("--data-dir", type=str, default=None, help="Directory for the local data files")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    p_list = sub.add_parser("list", help="List courses")
    _add_filter_options(p_list)

    p_show = sub.add_parser("show", help="Show one course")
    p_show.add_argument("course_id", type=str)

    p_add = sub.add_parser("add", help="Create a course")
    _add_field_options(p_add)
    p_add.add_argument("--created-by", dest="created_by", choices=CREATORS, default="HR")

    p_edit = sub.add_parser("edit", help="Edit a course")
    p_edit.add_argument("course_id", type=str)
    _add_field_options(p_edit)

    p_delete = sub.add_parser("delete", help="Delete a course")
    p_delete.add_argument("course_id", type=str)

    p_import = sub.add_parser("import", help="Batch import courses from a JSON array")
    p_import.add_argument("file", type=str)

    p_stats = sub.add_parser("stats", help="Dashboard statistics")
    _add_filter_options(p_stats)

    p_settings = sub.add_parser("settings", help="Remote sync settings")
    settings_sub = p_settings.add_subparsers(dest="action", required=True)
    settings_sub.add_parser("show", help="Show settings")
    p_url = settings_sub.add_parser("set-url", help="Set the remote webhook URL")
    p_url.add_argument("url", type=str)
    settings_sub.add_parser("clear-url", help="Disable remote sync")

    return parser


def main(argv: list[str] | None = None) -> None:
    """
    CLI entry point. Parses args, dispatches to command handlers,
    and exits via SystemExit with a return code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    sync = default_synchronizer(args.data_dir)

    if args.command == "settings":
        raise SystemExit(_cmd_settings(args, sync))

    book = CourseBook.open(sync)

    handlers = {
        "list": _cmd_list,
        "show": _cmd_show,
        "add": _cmd_add,
        "edit": _cmd_edit,
        "delete": _cmd_delete,
        "import": _cmd_import,
        "stats": _cmd_stats,
    }
    raise SystemExit(handlers[args.command](args, book))
