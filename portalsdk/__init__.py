"""
Client SDK for a scrape-only academic portal: semester encoding plus live
search with an in-memory cache fallback.
"""

from portalsdk.application import Application
from portalsdk.cache import RecordCache
from portalsdk.config import Settings, load_settings
from portalsdk.errors import AuthorizationRequired, MalformedSemesterString, NetworkFailure, PortalError, UnknownLabel
from portalsdk.model import Course, Person, User

__all__ = [
    "Application",
    "AuthorizationRequired",
    "Course",
    "MalformedSemesterString",
    "NetworkFailure",
    "Person",
    "PortalError",
    "RecordCache",
    "Settings",
    "UnknownLabel",
    "User",
    "load_settings",
]
