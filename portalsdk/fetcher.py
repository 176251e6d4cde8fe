"""
Live portal access (HTTP + HTML scraping).

- Logs a user in to confirm their credentials
- Runs course / people searches against the portal search pages
- Scrapes the result tables into Course / Person objects

The portal has no API, so results are read from the HTML result table. Column
positions are looked up from the table header, not hard-coded.

Every transport problem (connection error, timeout, HTTP error status) is
raised as NetworkFailure; callers never see requests exceptions.
"""

from __future__ import annotations

import logging
import re
from typing import Dict, List, Optional

import requests
from bs4 import BeautifulSoup

from portalsdk.config import DEFAULT_SETTINGS, Settings
from portalsdk.encoder import parse_day_of_week
from portalsdk.errors import NetworkFailure, UnknownLabel
from portalsdk.model import Course, Person, SearchOption, User
from portalsdk.options import apply_option, query_params

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Column headers of the portal result tables
# ---------------------------------------------------------------------------

COURSE_COLUMNS = {
    "课程代码": "course_id",
    "课程名称": "title",
    "教师": "instructors",
    "学期": "semester",
    "开课院系": "department",
    "学分": "credits",
    "上课时间": "weekday",
    "地点": "location",
}

PEOPLE_COLUMNS = {
    "工号": "person_id",
    "姓名": "name",
    "院系": "department",
    "职称": "title",
    "邮箱": "email",
}

# Instructor cells use ASCII or full-width separators
_NAME_SEPARATORS = re.compile(r"[;；,，]")

# "星期三 第3-4节" or "星期三第3-4节" -> "星期三"
_WEEKDAY_LABEL = re.compile(r"星期[一二三四五六日]")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _extract_rows(html: str, columns: Dict[str, str]) -> List[Dict[str, str]]:
    """
    Extracts the result table as a list of {field: cell text} dicts.
    """
    soup = BeautifulSoup(html, "html.parser")

    table = soup.select_one("table[id$='_tblResult']") or soup.select_one("table.result")
    if not table:
        return []

    # Map column index -> field name using the header row
    header = [th.get_text(strip=True) for th in table.select("tr th")]
    index = {i: columns[h] for i, h in enumerate(header) if h in columns}

    rows: List[Dict[str, str]] = []
    for tr in table.select("tr"):
        cells = tr.find_all("td")
        if not cells:
            continue
        row = {}
        for i, cell in enumerate(cells):
            name = index.get(i)
            if name:
                row[name] = cell.get_text(" ", strip=True)
        rows.append(row)

    return rows


def _optional(text: Optional[str]) -> Optional[str]:
    text = (text or "").strip()
    return text or None


def parse_course_row(row: Dict[str, str]) -> Optional[Course]:
    """
    Turns one scraped row into a Course, or None if it has no course id.
    """
    course_id = (row.get("course_id") or "").strip()
    if not course_id:
        return None

    instructors = [x.strip() for x in _NAME_SEPARATORS.split(row.get("instructors") or "") if x.strip()]

    credits: Optional[float] = None
    if _optional(row.get("credits")):
        try:
            credits = float(row["credits"])
        except ValueError:
            logger.warning("course %s: unreadable credits %r", course_id, row["credits"])

    weekday: Optional[int] = None
    when = _optional(row.get("weekday"))
    if when:
        m = _WEEKDAY_LABEL.search(when)
        try:
            weekday = parse_day_of_week(m.group(0) if m else when.split()[0])
        except UnknownLabel:
            logger.warning("course %s: unreadable weekday %r", course_id, when)

    return Course(
        course_id=course_id,
        title=(row.get("title") or "").strip(),
        instructors=instructors,
        semester=_optional(row.get("semester")),
        department=_optional(row.get("department")),
        credits=credits,
        weekday=weekday,
        location=_optional(row.get("location")),
    )


def parse_person_row(row: Dict[str, str]) -> Optional[Person]:
    person_id = (row.get("person_id") or "").strip()
    if not person_id:
        return None

    return Person(
        person_id=person_id,
        name=(row.get("name") or "").strip(),
        department=_optional(row.get("department")),
        title=_optional(row.get("title")),
        email=_optional(row.get("email")),
    )


def parse_courses_html(html: str) -> List[Course]:
    courses = (parse_course_row(r) for r in _extract_rows(html, COURSE_COLUMNS))
    return [c for c in courses if c is not None]


def parse_people_html(html: str) -> List[Person]:
    people = (parse_person_row(r) for r in _extract_rows(html, PEOPLE_COLUMNS))
    return [p for p in people if p is not None]


# ---------------------------------------------------------------------------
# Fetcher
# ---------------------------------------------------------------------------


class Fetcher:
    def __init__(self, settings: Settings = DEFAULT_SETTINGS, session: Optional[requests.Session] = None) -> None:
        self.settings = settings
        self.session = session if session is not None else requests.Session()

    def _request(self, method: str, path: str, **kwargs) -> requests.Response:
        url = self.settings.url(path)
        logger.debug("%s %s", method, url)
        try:
            resp = self.session.request(method, url, timeout=self.settings.timeout, **kwargs)
            resp.raise_for_status()
        except requests.RequestException as exc:
            raise NetworkFailure(f"{method} {url} failed: {exc}") from exc
        return resp

    def confirm(self, user: User) -> bool:
        """
        Log in with the user's credentials. True if the portal accepted them.
        """
        resp = self._request(
            "POST",
            self.settings.login_path,
            data={"username": user.student_id, "password": user.password},
        )
        soup = BeautifulSoup(resp.text, "html.parser")
        ok = soup.select_one("a[href*='logout']") is not None
        logger.info("login %s for %s", "accepted" if ok else "rejected", user.student_id)
        return ok

    def search_for_courses(self, option: Optional[SearchOption] = None) -> List[Course]:
        resp = self._request("GET", self.settings.course_search_path, params=query_params(option))
        courses = parse_courses_html(resp.text)
        # The portal matches loosely; apply the exact same filter as offline search
        return apply_option(courses, option)

    def search_for_people(self, option: Optional[SearchOption] = None) -> List[Person]:
        resp = self._request("GET", self.settings.people_search_path, params=query_params(option))
        people = parse_people_html(resp.text)
        return apply_option(people, option)
