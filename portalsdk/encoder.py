"""
Semester and weekday encoding.

A SemesterId is one integer per academic half-year:

    id = (year - baseline_year) * semesters_per_year + semester_number

With the default settings (baseline 2006, two semesters per year) the first
semester of grade 2012 is id 13. Ids grow with time, so they can be compared
and used as index keys.

All functions here are pure; errors are raised immediately and never replaced
by a default value.
"""

from __future__ import annotations

import re
from datetime import date
from typing import Any, List, Optional, Tuple

from portalsdk.config import DEFAULT_SETTINGS, Settings
from portalsdk.errors import MalformedSemesterString, UnknownLabel


# A first argument at least this large is treated as a calendar year
ABSOLUTE_YEAR_THRESHOLD = 1000

WEEKDAYS = {
    "星期一": 1,
    "星期二": 2,
    "星期三": 3,
    "星期四": 4,
    "星期五": 5,
    "星期六": 6,
    "星期日": 7,
}

_SEMESTER_RE = re.compile(r"^\s*(\d{4})\s*-\s*(\d{4})\s+(\d+)\s*$")


# ---------------------------------------------------------------------------
# SemesterId <-> (year, semester number)
# ---------------------------------------------------------------------------


def _check_semester_number(semester_number: int, settings: Settings) -> None:
    if not 1 <= semester_number <= settings.semesters_per_year:
        raise ValueError(
            f"Semester number must be between 1 and {settings.semesters_per_year}, got {semester_number}"
        )


def get_semester(
    year_or_grade_relative: int,
    semester_number: int,
    user_like: Optional[Any] = None,
    settings: Settings = DEFAULT_SETTINGS,
) -> int:
    """
    Encode a year and semester number as a SemesterId.

    The year is either absolute (e.g. 2012) or relative to the user's grade,
    where 1 is the first year of study. Both forms give the same id:

        get_semester(2012, 1, user) == get_semester(1, 1, user)  # grade 2012
    """
    _check_semester_number(semester_number, settings)

    if year_or_grade_relative >= ABSOLUTE_YEAR_THRESHOLD:
        year = year_or_grade_relative
    else:
        if user_like is None:
            raise ValueError("A relative year needs a user to resolve the grade against")
        year = user_like.get_grade() + (year_or_grade_relative - 1)

    return (year - settings.baseline_year) * settings.semesters_per_year + semester_number


def get_all_semesters(
    user: Any,
    today: Optional[date] = None,
    settings: Settings = DEFAULT_SETTINGS,
) -> List[int]:
    """
    Return every SemesterId from the user's first semester up to now.

    The length is (current year - grade) * semesters_per_year, capped at one
    full program (program_years) when the settings define one.
    """
    today = today or date.today()

    years = max(0, today.year - user.get_grade())
    if settings.program_years:
        years = min(years, settings.program_years)

    first = get_semester(1, 1, user, settings=settings)
    return list(range(first, first + years * settings.semesters_per_year))


def decode_semester(semester_id: int, settings: Settings = DEFAULT_SETTINGS) -> Tuple[int, int, int]:
    """
    Inverse of get_semester: SemesterId -> (start_year, end_year, semester_number).
    """
    if semester_id < 1:
        raise ValueError(f"SemesterId must be >= 1, got {semester_id}")

    offset, index = divmod(semester_id - 1, settings.semesters_per_year)
    start = settings.baseline_year + offset
    return start, start + 1, index + 1


def format_semester(semester_id: int, settings: Settings = DEFAULT_SETTINGS) -> str:
    """
    SemesterId -> portal label, e.g. 13 -> '2012-2013 1'.
    """
    start, end, number = decode_semester(semester_id, settings=settings)
    return f"{start}-{end} {number}"


# ---------------------------------------------------------------------------
# Free-text parsing
# ---------------------------------------------------------------------------


def parse_day_of_week(label: str) -> int:
    """
    Map a weekday label ('星期一' ... '星期日') to 1..7.
    """
    key = label.strip() if isinstance(label, str) else label
    try:
        return WEEKDAYS[key]
    except (KeyError, TypeError):
        raise UnknownLabel(label) from None


def parse_semester(text: str, settings: Settings = DEFAULT_SETTINGS) -> Tuple[int, int, int]:
    """
    Parse '2013-2014 2' into (2013, 2014, 2).

    All-or-nothing: any mismatch raises MalformedSemesterString.
    """
    m = _SEMESTER_RE.match(text) if isinstance(text, str) else None
    if not m:
        raise MalformedSemesterString(str(text), "expected '<start>-<end> <semester>'")

    start, end, number = (int(g) for g in m.groups())

    if end != start + 1:
        raise MalformedSemesterString(text, "years must be consecutive")
    if not 1 <= number <= settings.semesters_per_year:
        raise MalformedSemesterString(text, f"semester must be 1..{settings.semesters_per_year}")

    return start, end, number


def semester_from_label(text: str, settings: Settings = DEFAULT_SETTINGS) -> int:
    """
    Portal label -> SemesterId, e.g. '2012-2013 1' -> 13.
    """
    start, _, number = parse_semester(text, settings=settings)
    return get_semester(start, number, settings=settings)
