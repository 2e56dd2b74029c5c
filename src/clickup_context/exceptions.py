"""
Exception hierarchy for the ClickUp context provider.

All errors raised by this package derive from ClickUpContextError so callers
can catch a single base class. Failures are contained at the smallest
possible granularity:

    entry   -> MalformedPayloadError (replaced by a degraded entry)
    kind    -> UpstreamError, TokenResolutionError (inline error section)
    request -> UnsupportedKindError (single-kind mode only)
"""

from __future__ import annotations


class ClickUpContextError(Exception):
    """Base exception for all ClickUp context errors."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class UpstreamError(ClickUpContextError):
    """The ClickUp API returned a non-success status or was unreachable."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code

    def __str__(self) -> str:
        if self.status_code is None:
            return self.message
        return f"{self.message} (HTTP {self.status_code})"


class TokenResolutionError(ClickUpContextError):
    """No ClickUp API token is registered for the user."""

    def __init__(self, user_id: str | None) -> None:
        super().__init__(f"No ClickUp API token found for user '{user_id}'")
        self.user_id = user_id


class InvalidTokenError(ClickUpContextError):
    """A token failed format validation on registration."""


class MalformedPayloadError(ClickUpContextError):
    """A single raw entry has a shape the formatter cannot interpret."""


class UnsupportedKindError(ClickUpContextError):
    """The requested resource kind has no formatter or upstream path."""

    def __init__(self, kind: str) -> None:
        super().__init__(f"Unsupported resource kind: {kind}")
        self.kind = kind
