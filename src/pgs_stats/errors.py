"""Exception hierarchy for pgs-stats.

HttpError and FormatError come from the fetch path and are recovered by
the orchestrator. CacheUnavailable is soft: callers degrade to "no cache".
"""

from __future__ import annotations


class PgsStatsError(Exception):
    """Base class for all pgs-stats errors."""


class HttpError(PgsStatsError):
    """A catalog page request returned a non-2xx status."""

    def __init__(self, status_code: int, url: str):
        self.status_code = status_code
        self.url = url
        super().__init__(f"HTTP {status_code} on {url}")


class FormatError(PgsStatsError):
    """A catalog page body is neither a record list nor a results envelope."""

    def __init__(self, message: str, url: str | None = None):
        self.url = url
        if url:
            message = f"{message} ({url})"
        super().__init__(message)


class CacheUnavailable(PgsStatsError):
    """The local cache database could not be read or written."""
