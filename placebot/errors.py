"""Exception hierarchy. Rate limits and credential expiry are not errors."""
from __future__ import annotations


class PlaceBotError(Exception):
    pass


class BoardFetchError(PlaceBotError):
    """Board snapshot could not be fetched: retries exhausted, rejected, or malformed."""


class PlacementError(PlaceBotError):
    """A single placement attempt failed (transport, malformed response, unexpected status)."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class PatternError(PlaceBotError):
    """Invalid --pattern argument or pattern file."""
