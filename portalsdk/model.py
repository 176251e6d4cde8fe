"""
Central data model definitions used across the project.

All layers (fetcher, cache, seeker, CLI) share these classes, so field names
stay the same whether an entity came from the portal or from the cache.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from portalsdk.config import DEFAULT_SETTINGS, Settings


# Filter specification shared by live and offline search, see options.py
SearchOption = Dict[str, Any]


@dataclass
class User:
    """
    A student identity.

    The grade (entry year) is encoded in the first four digits of the
    student id, e.g. 2012019050020 -> 2012.
    """

    student_id: str
    password: str = field(repr=False)
    confirmed: bool = False
    # Institution constants used for semesters; set by Application.register
    settings: Optional[Settings] = field(default=None, repr=False, compare=False)

    @property
    def grade(self) -> int:
        head = self.student_id.strip()[:4]
        if len(head) != 4 or not head.isdigit():
            raise ValueError(f"Cannot derive grade from student id {self.student_id!r}")
        return int(head)

    def get_grade(self) -> int:
        return self.grade

    @property
    def semesters(self) -> List[int]:
        """
        All SemesterIds attended so far (recomputed on every access).
        """
        from portalsdk.encoder import get_all_semesters

        return get_all_semesters(self, settings=self.settings or DEFAULT_SETTINGS)


@dataclass
class Course:
    """
    One course row from the portal course search.
    """

    course_id: str
    title: str
    instructors: List[str] = field(default_factory=list)
    semester: Optional[str] = None
    department: Optional[str] = None
    credits: Optional[float] = None
    weekday: Optional[int] = None
    location: Optional[str] = None

    @property
    def key(self) -> str:
        return self.course_id


@dataclass
class Person:
    """
    One entry from the portal people (staff/student) search.
    """

    person_id: str
    name: str
    department: Optional[str] = None
    title: Optional[str] = None
    email: Optional[str] = None

    @property
    def key(self) -> str:
        return self.person_id
