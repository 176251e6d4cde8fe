"""
In-memory record cache.

Key scheme (writers and readers must agree on it):

    <student id>               -> User
    courses:<fingerprint>      -> list[Course]   (one live search result)
    people:<fingerprint>       -> list[Person]

Entries live as long as the session: nothing is evicted, and a key is only
overwritten by another put() on it (last write wins).
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterator, List, Optional

from portalsdk.model import User

logger = logging.getLogger(__name__)


class RecordCache:
    def __init__(self) -> None:
        # dicts keep insertion order, which the seeker relies on
        self._entries: Dict[str, Any] = {}

    def put(self, key: str, value: Any) -> None:
        if key in self._entries:
            logger.debug("cache overwrite: %s", key)
        else:
            logger.debug("cache put: %s", key)
        self._entries[key] = value

    def get(self, key: str, default: Optional[Any] = None) -> Any:
        return self._entries.get(key, default)

    def has(self, key: str) -> bool:
        return key in self._entries

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def keys(self) -> Iterator[str]:
        return iter(list(self._entries))

    def clear(self) -> None:
        self._entries.clear()

    def users(self) -> List[User]:
        """
        All cached users, in registration order.
        """
        return [v for v in self._entries.values() if isinstance(v, User)]

    def collection(self, kind: str) -> List[Any]:
        """
        All entities of one kind ('courses' or 'people') found in cached
        result sets.

        The same entity may appear in several result sets; it is reported
        once, at the position it was first seen, with its most recent value.
        """
        prefix = kind + ":"
        position: Dict[str, int] = {}
        out: List[Any] = []

        for key, value in self._entries.items():
            if not key.startswith(prefix):
                continue
            items = value if isinstance(value, (list, tuple)) else [value]
            for entity in items:
                ident = getattr(entity, "key", None) or id(entity)
                if ident in position:
                    out[position[ident]] = entity
                else:
                    position[ident] = len(out)
                    out.append(entity)

        return out
