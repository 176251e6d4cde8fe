"""
Configuration.

Institution-specific constants live here instead of inside the codec, so a
different school only needs different settings:

- baseline_year / semesters_per_year define how SemesterIds are numbered
  (defaults: grade 2012, semester 1 -> id 13)
- program_years caps how many semesters a student can have attended
- the portal URLs are used by the fetcher only

Every value can be overridden with a PORTALSDK_* environment variable.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, fields
from typing import Mapping, Optional


# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------

BASE_URL = "http://portal.uestc.edu.cn"
LOGIN_PATH = "/login"
COURSE_SEARCH_PATH = "/search/courses"
PEOPLE_SEARCH_PATH = "/search/people"

ENV_PREFIX = "PORTALSDK_"


@dataclass(frozen=True)
class Settings:
    baseline_year: int = 2006
    semesters_per_year: int = 2
    program_years: int = 4
    base_url: str = BASE_URL
    login_path: str = LOGIN_PATH
    course_search_path: str = COURSE_SEARCH_PATH
    people_search_path: str = PEOPLE_SEARCH_PATH
    timeout: float = 30.0

    def __post_init__(self) -> None:
        if self.semesters_per_year < 1:
            raise ValueError(f"semesters_per_year must be >= 1, got {self.semesters_per_year}")
        if self.program_years < 0:
            raise ValueError(f"program_years must be >= 0, got {self.program_years}")

    def url(self, path: str) -> str:
        """
        Join a portal path onto base_url.
        """
        return self.base_url.rstrip("/") + "/" + path.lstrip("/")


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Build Settings from defaults overridden by PORTALSDK_* variables.

    Example: PORTALSDK_BASELINE_YEAR=2010 sets baseline_year to 2010.
    """
    env = os.environ if environ is None else environ

    overrides = {}
    for f in fields(Settings):
        raw = env.get(ENV_PREFIX + f.name.upper())
        if raw is None or not raw.strip():
            continue
        # Cast with the type of the default value
        caster = type(f.default)
        try:
            overrides[f.name] = caster(raw.strip())
        except ValueError as exc:
            raise ValueError(f"Invalid value for {ENV_PREFIX + f.name.upper()}: {raw!r}") from exc

    return Settings(**overrides)


DEFAULT_SETTINGS = Settings()
