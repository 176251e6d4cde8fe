"""
CLI (Command Line Interface).

Quick terminal commands around the SDK, e.g.:

    portalsdk semester encode "2013-2014 2"
    portalsdk semester decode 13
    portalsdk semesters 2012019050020
    portalsdk weekday 星期三
    portalsdk search courses --id 2012019050020 --password ... --filter title=math

Note:
- Every handler returns an exit code; main() raises SystemExit with it
- Lists are printed as rich tables, single values as plain text
"""

from __future__ import annotations

import argparse
import getpass
import logging
from typing import Any

from rich.console import Console
from rich.table import Table

from portalsdk.application import Application
from portalsdk.config import load_settings
from portalsdk.encoder import format_semester, get_all_semesters, parse_day_of_week, semester_from_label
from portalsdk.errors import AuthorizationRequired, MalformedSemesterString, NetworkFailure, UnknownLabel
from portalsdk.model import User

console = Console()


def _cmd_semester(args: argparse.Namespace) -> int:
    """
    Convert between a semester label and its SemesterId.
    """
    settings = load_settings()

    if args.action == "encode":
        try:
            print(semester_from_label(args.value, settings=settings))
        except MalformedSemesterString as exc:
            print(exc)
            return 1
        return 0

    try:
        semester_id = int(args.value)
        print(format_semester(semester_id, settings=settings))
    except ValueError as exc:
        print(f"Invalid SemesterId: {exc}")
        return 1
    return 0


def _cmd_semesters(args: argparse.Namespace) -> int:
    """
    Print all semesters a student has attended so far.
    """
    settings = load_settings()
    user = User(args.student_id.strip(), "", settings=settings)

    try:
        semesters = get_all_semesters(user, settings=settings)
    except ValueError as exc:
        print(exc)
        return 1

    if not semesters:
        print("No semesters yet.")
        return 0

    table = Table(title=f"Semesters of {user.student_id} (grade {user.grade})")
    table.add_column("SemesterId", justify="right")
    table.add_column("Label")
    for sid in semesters:
        table.add_row(str(sid), format_semester(sid, settings=settings))
    console.print(table)
    return 0


def _cmd_weekday(args: argparse.Namespace) -> int:
    try:
        print(parse_day_of_week(args.label))
    except UnknownLabel as exc:
        print(exc)
        return 1
    return 0


def _parse_filters(pairs: list[str]) -> dict[str, Any]:
    """
    Turn ['title=math', 'credits=3'] into a SearchOption dict.

    Numeric values are compared as numbers, or as text against text fields
    such as ids.
    """
    option: dict[str, Any] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        key = key.strip()
        if not sep or not key:
            raise ValueError(f"Filter must look like key=value, got {pair!r}")
        value = value.strip()
        try:
            option[key] = float(value) if "." in value else int(value)
        except ValueError:
            option[key] = value
    return option


def _print_results(kind: str, results: list) -> None:
    if not results:
        print("No results.")
        return

    table = Table(title=f"{len(results)} {kind}")
    if kind == "courses":
        for col in ("ID", "Title", "Instructors", "Semester", "Department"):
            table.add_column(col)
        for c in results:
            table.add_row(c.course_id, c.title, ", ".join(c.instructors), c.semester or "", c.department or "")
    else:
        for col in ("ID", "Name", "Department", "Title"):
            table.add_column(col)
        for p in results:
            table.add_row(p.person_id, p.name, p.department or "", p.title or "")
    console.print(table)


def _cmd_search(args: argparse.Namespace, app: Application | None = None) -> int:
    """
    Log in, run one search and print the results.
    """
    try:
        option = _parse_filters(args.filter or [])
    except ValueError as exc:
        print(exc)
        return 1
    if args.sort:
        option["sort_by"] = args.sort

    app = app or Application()
    password = args.password if args.password is not None else getpass.getpass("Password: ")
    user = app.register(args.id.strip(), password)
    if not user.confirmed:
        print(f"Could not confirm user {user.student_id}.")

    try:
        if args.kind == "courses":
            results = app.search_for_courses(option) if args.no_fallback else app.search_for_courses_with_cache(option)
        else:
            results = app.search_for_people(option) if args.no_fallback else app.search_for_people_with_cache(option)
    except AuthorizationRequired as exc:
        print(exc)
        return 1
    except NetworkFailure as exc:
        print(f"Portal not reachable: {exc}")
        return 1

    _print_results(args.kind, results)
    return 0


def build_parser() -> argparse.ArgumentParser:
    """
    Build the argparse CLI parser with sub-commands.
    """
    parser = argparse.ArgumentParser(prog="portalsdk", description="Academic portal SDK CLI")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    p_sem = sub.add_parser("semester", help="Convert between semester label and SemesterId")
    p_sem.add_argument("action", choices=["encode", "decode"])
    p_sem.add_argument("value", type=str, help="Label (e.g. '2013-2014 2') or SemesterId (e.g. 13)")

    p_all = sub.add_parser("semesters", help="List all semesters of a student")
    p_all.add_argument("student_id", type=str, help="Student ID (e.g. 2012019050020)")

    p_day = sub.add_parser("weekday", help="Convert a weekday label to 1..7")
    p_day.add_argument("label", type=str, help="Weekday label (e.g. 星期三)")

    p_search = sub.add_parser("search", help="Search courses or people")
    p_search.add_argument("kind", choices=["courses", "people"])
    p_search.add_argument("--id", required=True, help="Student ID used to log in")
    p_search.add_argument("--password", default=None, help="Portal password (prompted if omitted)")
    p_search.add_argument("--filter", "-f", action="append", metavar="KEY=VALUE", help="Filter, repeatable")
    p_search.add_argument("--sort", default=None, help="Sort field, prefix with '-' for descending")
    p_search.add_argument("--no-fallback", action="store_true", help="Fail instead of using cached results")

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
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "semester":
        raise SystemExit(_cmd_semester(args))
    if args.command == "semesters":
        raise SystemExit(_cmd_semesters(args))
    if args.command == "weekday":
        raise SystemExit(_cmd_weekday(args))
    if args.command == "search":
        raise SystemExit(_cmd_search(args))

    raise SystemExit(2)
