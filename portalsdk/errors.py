"""
Exception types raised by the SDK.

Codec errors subclass ValueError as well, so callers that only care about
"bad input" can catch ValueError.
"""

from __future__ import annotations


class PortalError(Exception):
    """Base class for all SDK errors."""

    code = 500


class AuthorizationRequired(PortalError):
    """A privileged search was attempted without a confirmed user."""

    code = 401


class UnknownLabel(PortalError, ValueError):
    """A weekday label outside the known vocabulary."""

    code = 400

    def __init__(self, label: str) -> None:
        super().__init__(f"Unknown weekday label: {label!r}")
        self.label = label


class MalformedSemesterString(PortalError, ValueError):
    """A semester label that does not look like '2013-2014 2'."""

    code = 400

    def __init__(self, text: str, reason: str = "") -> None:
        msg = f"Malformed semester string: {text!r}"
        if reason:
            msg += f" ({reason})"
        super().__init__(msg)
        self.text = text


class NetworkFailure(PortalError):
    """The portal could not be reached or answered with an error status."""

    code = 503
