"""
Live search with cache fallback.

Per call:

    LIVE_ATTEMPT -> RESOLVED                (fetcher result, written to cache)
    LIVE_ATTEMPT -> FALLBACK -> RESOLVED    (NetworkFailure -> seeker result)

Before the live attempt a confirmed user must exist; otherwise
AuthorizationRequired is raised without touching the network and without
falling back.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

from portalsdk.cache import RecordCache
from portalsdk.errors import AuthorizationRequired, NetworkFailure
from portalsdk.model import SearchOption, User
from portalsdk.options import fingerprint
from portalsdk.seeker import Seeker

logger = logging.getLogger(__name__)

KINDS = ("courses", "people")


class CacheFallback:
    def __init__(
        self,
        cache: RecordCache,
        fetcher,
        seeker: Seeker,
        identity: Callable[[], Optional[User]],
    ) -> None:
        self.cache = cache
        self.fetcher = fetcher
        self.seeker = seeker
        self.identity = identity

    def _fetch(self, kind: str, option: Optional[SearchOption]) -> list:
        if kind == "courses":
            return self.fetcher.search_for_courses(option)
        if kind == "people":
            return self.fetcher.search_for_people(option)
        raise ValueError(f"Unknown search kind {kind!r}, expected one of {KINDS}")

    def live(self, kind: str, option: Optional[SearchOption] = None) -> list:
        """
        Live search only. Results are written through to the cache.
        """
        user = self.identity()
        if user is None or not user.confirmed:
            raise AuthorizationRequired(f"Searching for {kind} requires a confirmed user.")

        results = list(self._fetch(kind, option))
        self.cache.put(fingerprint(kind, option), results)
        logger.info("live %s search: %d result(s)", kind, len(results))
        return results

    def search(self, kind: str, option: Optional[SearchOption] = None) -> list:
        """
        Live search, falling back to the cache if the portal is unreachable.
        """
        try:
            return self.live(kind, option)
        except NetworkFailure as exc:
            logger.warning("live %s search failed (%s), using cache", kind, exc)
            results = self.seeker.search(kind, option)
            logger.info("cached %s search: %d result(s)", kind, len(results))
            return results
