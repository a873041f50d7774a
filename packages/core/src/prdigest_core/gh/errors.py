"""Errors raised by the GitHub fetch layer. All of them abort the run."""

from __future__ import annotations

from datetime import datetime, timezone


class GitHubAPIError(RuntimeError):
    def __init__(self, message: str, status: int | None = None):
        super().__init__(message)
        self.status = status


class SearchError(GitHubAPIError):
    """A search page came back with a non-success status."""


class RateLimitError(GitHubAPIError):
    """The primary rate limit is exhausted; ``reset_at`` is when it refills, if known."""

    def __init__(self, message: str, status: int | None = None, reset_at: datetime | None = None):
        super().__init__(message, status=status)
        self.reset_at = reset_at


def reset_time_from_headers(headers) -> datetime | None:
    """Read X-RateLimit-Reset (epoch seconds) from a header mapping of any key case."""
    if not headers:
        return None
    for key, value in headers.items():
        if key.lower() == "x-ratelimit-reset":
            try:
                return datetime.fromtimestamp(int(value), tz=timezone.utc)
            except (TypeError, ValueError):
                return None
    return None
