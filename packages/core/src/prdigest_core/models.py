"""Pull request data models shared by the fetch and report layers."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Union

_REPO_URL_RE = re.compile(r"/repos/(?P<owner>[^/]+)/(?P<name>[^/]+)/?$")


def parse_timestamp(value) -> datetime | None:
    """Parse a GitHub ISO-8601 timestamp ("2024-06-01T12:00:00Z") into an aware datetime."""
    if not value:
        return None
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    return datetime.fromisoformat(str(value).replace("Z", "+00:00"))


def parse_repository_url(url: str | None) -> tuple[str, str] | None:
    """Return (owner, name) from an API repository URL, or None if it does not parse."""
    if not url:
        return None
    match = _REPO_URL_RE.search(url)
    if not match:
        return None
    return match.group("owner"), match.group("name")


@dataclass(frozen=True)
class SearchItem:
    """One entry from the issue search endpoint; references a PR without its body."""

    number: int
    title: str
    author: str
    created_at: datetime
    html_url: str
    repository_url: str
    merged_at: datetime | None = None

    @classmethod
    def from_api(cls, item: dict) -> SearchItem:
        pull_request = item.get("pull_request") or {}
        return cls(
            number=item["number"],
            title=item.get("title") or "",
            author=(item.get("user") or {}).get("login", ""),
            created_at=parse_timestamp(item["created_at"]),
            html_url=item.get("html_url") or pull_request.get("html_url", ""),
            repository_url=item.get("repository_url", ""),
            merged_at=parse_timestamp(pull_request.get("merged_at")),
        )

    @property
    def owner(self) -> str | None:
        parsed = parse_repository_url(self.repository_url)
        return parsed[0] if parsed else None

    @property
    def repository(self) -> str | None:
        parsed = parse_repository_url(self.repository_url)
        return parsed[1] if parsed else None


@dataclass(frozen=True)
class PullRequestDetail:
    body: str | None
    merged_at: datetime | None
    html_url: str = ""


@dataclass(frozen=True)
class Found:
    detail: PullRequestDetail


@dataclass(frozen=True)
class NotFound:
    pass


@dataclass(frozen=True)
class TransientFailure:
    reason: str


DetailResult = Union[Found, NotFound, TransientFailure]


@dataclass(frozen=True)
class PullRequestRecord:
    """A matched pull request ready for reporting.

    ``detail_status`` is "found", "not_found" or "failed" and mirrors the
    DetailResult the record was built from.
    """

    title: str
    owner: str | None
    repository: str | None
    number: int
    created_at: datetime
    merged_at: datetime | None
    url: str
    description: str | None
    detail_status: str = "found"

    @classmethod
    def from_search_item(cls, item: SearchItem, result: DetailResult) -> PullRequestRecord:
        if isinstance(result, Found):
            merged_at = result.detail.merged_at
            description = result.detail.body
            url = result.detail.html_url or item.html_url
            status = "found"
        else:
            # Without a detail response the search payload is the only merge source.
            merged_at = item.merged_at
            description = None
            url = item.html_url
            status = "not_found" if isinstance(result, NotFound) else "failed"

        return cls(
            title=item.title,
            owner=item.owner,
            repository=item.repository,
            number=item.number,
            created_at=item.created_at,
            merged_at=parse_timestamp(merged_at),
            url=url,
            description=description,
            detail_status=status,
        )

    @property
    def slug(self) -> str:
        if self.owner and self.repository:
            return f"{self.owner}/{self.repository}"
        return "?"


@dataclass
class CollectionResult:
    """Everything the collector gathered in one run."""

    query: str
    records: list[PullRequestRecord] = field(default_factory=list)
    not_found: int = 0
    failed: int = 0
