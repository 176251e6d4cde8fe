"""
Application facade, the entry point of the SDK.

Wires the cache, fetcher, seeker and fallback together. Collaborators are
passed in (or created) explicitly, so tests can swap the fetcher for a mock.

Every method returns its result directly or raises; there is no callback
variant.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from portalsdk.cache import RecordCache
from portalsdk.config import Settings, load_settings
from portalsdk.errors import NetworkFailure
from portalsdk.fallback import CacheFallback
from portalsdk.fetcher import Fetcher
from portalsdk.model import Course, Person, SearchOption, User
from portalsdk.seeker import Seeker

logger = logging.getLogger(__name__)


class Application:
    def __init__(
        self,
        cache: Optional[RecordCache] = None,
        fetcher: Optional[Fetcher] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        self.settings = settings if settings is not None else load_settings()
        self.cache = cache if cache is not None else RecordCache()
        self.fetcher = fetcher if fetcher is not None else Fetcher(settings=self.settings)
        self.seeker = Seeker(self.cache)

        # Set once, when the first registered user is confirmed
        self.current_user: Optional[User] = None

        self.searcher = CacheFallback(self.cache, self.fetcher, self.seeker, lambda: self.current_user)

    # -----------------------------------------------------------------------
    # Users
    # -----------------------------------------------------------------------

    def one(self, student_id: str) -> Optional[User]:
        """
        The registered user with this student id, or None.
        """
        value = self.cache.get(student_id)
        return value if isinstance(value, User) else None

    def _confirm(self, user: User) -> bool:
        try:
            ok = self.fetcher.confirm(user)
        except NetworkFailure as exc:
            logger.warning("could not confirm %s: %s", user.student_id, exc)
            return False
        user.confirmed = ok
        return ok

    def register(self, student_id: str, password: str) -> User:
        """
        Register a student. The first user that the portal confirms becomes
        the current user for searches.

        The user is cached even if confirmation fails. Registering the
        current user's id again keeps the current user unless the new
        credentials are confirmed, in which case they replace it.
        """
        current = self.current_user
        if current is not None and current.student_id == student_id:
            if current.password == password:
                return current
            user = User(student_id, password, settings=self.settings)
            if self._confirm(user):
                self.cache.put(student_id, user)
                self.current_user = user
            return user

        user = User(student_id, password, settings=self.settings)
        self.cache.put(student_id, user)

        if current is None and self._confirm(user):
            self.current_user = user

        return user

    def verify(self, student_id: str, password: str) -> bool:
        """
        Check credentials against the portal without registering anything.

        Raises NetworkFailure if the portal cannot be reached.
        """
        return self.fetcher.confirm(User(student_id, password))

    # -----------------------------------------------------------------------
    # Courses
    # -----------------------------------------------------------------------

    def search_for_courses(self, option: Optional[SearchOption] = None) -> List[Course]:
        return self.searcher.live("courses", option)

    def search_for_courses_in_cache(self, option: Optional[SearchOption] = None) -> List[Course]:
        return self.seeker.search_for_courses(option)

    def search_for_courses_with_cache(self, option: Optional[SearchOption] = None) -> List[Course]:
        return self.searcher.search("courses", option)

    # -----------------------------------------------------------------------
    # People
    # -----------------------------------------------------------------------

    def search_for_people(self, option: Optional[SearchOption] = None) -> List[Person]:
        return self.searcher.live("people", option)

    def search_for_people_in_cache(self, option: Optional[SearchOption] = None) -> List[Person]:
        return self.seeker.search_for_people(option)

    def search_for_people_with_cache(self, option: Optional[SearchOption] = None) -> List[Person]:
        return self.searcher.search("people", option)
