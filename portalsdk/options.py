"""
SearchOption semantics.

A SearchOption is a plain dict mapping entity fields to filters. Live search
(fetcher.py) and offline search (seeker.py) both go through apply_option(),
so a filter always means the same thing on both paths:

- None              -> no constraint
- callable          -> predicate on the field value
- str               -> case-insensitive substring match
                       (list fields: any element matches)
- anything else     -> equality (list fields: membership)

The reserved key "sort_by" names a field to sort by ("-field" = descending).
"""

from __future__ import annotations

import hashlib
import json
from typing import Any, Dict, Iterable, List, Optional, TypeVar

from portalsdk.model import SearchOption

T = TypeVar("T")

SORT_KEY = "sort_by"

_MISSING = object()


def _filters(option: Optional[SearchOption]) -> Dict[str, Any]:
    if not option:
        return {}
    return {k: v for k, v in option.items() if k != SORT_KEY and v is not None}


def _match_value(field_value: Any, wanted: Any) -> bool:
    if callable(wanted):
        return bool(wanted(field_value))

    if isinstance(field_value, (list, tuple, set)):
        return any(_match_value(item, wanted) for item in field_value)

    if isinstance(wanted, str):
        if field_value is None:
            return False
        return wanted.strip().lower() in str(field_value).lower()

    # Ids are text even when they look numeric: 2012345 matches "2012345"
    if isinstance(field_value, str) and not isinstance(wanted, bool):
        return field_value.strip() == str(wanted)

    return field_value == wanted


def matches(entity: Any, option: Optional[SearchOption]) -> bool:
    """
    True if the entity satisfies every filter in the option.
    """
    for name, wanted in _filters(option).items():
        value = getattr(entity, name, _MISSING)
        if value is _MISSING:
            return False
        if not _match_value(value, wanted):
            return False
    return True


def apply_option(entities: Iterable[T], option: Optional[SearchOption]) -> List[T]:
    """
    Filter entities by the option and sort them if it asks for it.

    Without sort_by the input order is kept.
    """
    out = [e for e in entities if matches(e, option)]

    sort_by = (option or {}).get(SORT_KEY)
    if sort_by:
        reverse = sort_by.startswith("-")
        name = sort_by.lstrip("-")
        present = [e for e in out if getattr(e, name, None) is not None]
        absent = [e for e in out if getattr(e, name, None) is None]
        present.sort(key=lambda e: getattr(e, name), reverse=reverse)
        # None values always go last, regardless of direction
        out = present + absent

    return out


def _canonical(value: Any) -> Any:
    if callable(value):
        module = getattr(value, "__module__", "")
        qualname = getattr(value, "__qualname__", repr(value))
        return f"<callable {module}.{qualname}>"
    if isinstance(value, (list, tuple)):
        return [_canonical(v) for v in value]
    if isinstance(value, set):
        return sorted(_canonical(v) for v in value)
    if isinstance(value, dict):
        return {str(k): _canonical(v) for k, v in value.items()}
    return value


def fingerprint(kind: str, option: Optional[SearchOption]) -> str:
    """
    Deterministic cache key for a search result set, e.g. 'courses:1a2b...'.

    Key order does not matter; None-valued filters are ignored, same as in
    matches().
    """
    payload = {k: _canonical(v) for k, v in (option or {}).items() if v is not None}
    text = json.dumps(payload, sort_keys=True, ensure_ascii=False, default=str)
    digest = hashlib.sha1(text.encode("utf-8")).hexdigest()[:16]
    return f"{kind}:{digest}"


def query_params(option: Optional[SearchOption]) -> Dict[str, str]:
    """
    Scalar filters that can be sent to the portal search form.

    Callables cannot be sent; they are still applied to the scraped rows.
    """
    params: Dict[str, str] = {}
    for name, wanted in _filters(option).items():
        if isinstance(wanted, bool) or callable(wanted):
            continue
        if isinstance(wanted, (str, int, float)):
            params[name] = str(wanted).strip()
    return params
