"""
Offline search over the record cache.

Uses the same option semantics as the live fetcher (options.apply_option), so
a fallback search answers the same question the live search was asked.
"""

from __future__ import annotations

from typing import List, Optional

from portalsdk.cache import RecordCache
from portalsdk.model import Course, Person, SearchOption
from portalsdk.options import apply_option


class Seeker:
    def __init__(self, cache: RecordCache) -> None:
        self.cache = cache

    def search(self, kind: str, option: Optional[SearchOption] = None) -> list:
        # never raises for an empty cache; [] means "nothing found"
        return apply_option(self.cache.collection(kind), option)

    def search_for_courses(self, option: Optional[SearchOption] = None) -> List[Course]:
        return self.search("courses", option)

    def search_for_people(self, option: Optional[SearchOption] = None) -> List[Person]:
        return self.search("people", option)
