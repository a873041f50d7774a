"""Sorting, grouping and plain-text rendering of pull request records."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from prdigest_core.config import ReportConfig
from prdigest_core.models import PullRequestRecord
from prdigest_core.utils.text import format_timestamp, wrap_block

logger = logging.getLogger(__name__)

NOT_MERGED = "Not Merged"
NO_DESCRIPTION = "(No description provided)"
NO_RESULTS = "No matching pull requests found."

_RULE_HEAVY = "=" * 80
_RULE_LIGHT = "-" * 80


def _merge_sort_key(record: PullRequestRecord) -> tuple:
    # (False, t) for merged, (True, 0) for unmerged: unmerged always last.
    if record.merged_at is None:
        return (True, 0)
    return (False, record.merged_at.timestamp())


def sort_records(records: list[PullRequestRecord]) -> list[PullRequestRecord]:
    """Return records ordered by merge time, oldest first, unmerged last.

    The sort is stable: unmerged records (and equal merge times) keep the
    order the search returned them in.
    """
    return sorted(records, key=_merge_sort_key)


def group_by_repository(records: list[PullRequestRecord]) -> dict[str, list[PullRequestRecord]]:
    """Partition records by repository name, groups in name order, each group sorted.

    Records whose repository could not be parsed are dropped with a warning.
    """
    groups: dict[str, list[PullRequestRecord]] = {}
    for record in records:
        if not record.repository:
            logger.warning("Dropping PR %r (%s): repository reference could not be parsed.", record.title, record.url)
            continue
        groups.setdefault(record.repository, []).append(record)
    return {name: sort_records(groups[name]) for name in sorted(groups)}


def _format_header(
    config: ReportConfig, count: int, generated_at: datetime, repository: str | None
) -> list[str]:
    lines = [
        _RULE_HEAVY,
        f"Pull Requests by {config.author} in {config.org}",
    ]
    if repository:
        lines.append(f"Repository:  {config.org}/{repository}")
    lines += [
        f"Date Range:  {config.start_date} to {config.end_date}",
        f"Total Found: {count}",
        f"Generated:   {format_timestamp(generated_at)}",
        _RULE_HEAVY,
        "",
    ]
    return lines


def _format_entry(index: int, record: PullRequestRecord, wrap_width: int) -> list[str]:
    merged = format_timestamp(record.merged_at) if record.merged_at else NOT_MERGED
    lines = [
        f"[{index}] {record.title}",
        f"  Created At:  {format_timestamp(record.created_at)}",
        f"  Merged On:   {merged}",
        f"  URL:         {record.url}",
        "  Description:",
    ]
    body = wrap_block(record.description, wrap_width) if record.description else []
    lines += body or [f"    {NO_DESCRIPTION}"]
    lines += [_RULE_LIGHT, ""]
    return lines


def format_report(
    records: list[PullRequestRecord],
    config: ReportConfig,
    generated_at: datetime | None = None,
    repository: str | None = None,
) -> str:
    """Render records (in the given order) as a fixed-width text report."""
    generated_at = generated_at or datetime.now(timezone.utc)
    lines = _format_header(config, len(records), generated_at, repository)
    if not records:
        lines.append(NO_RESULTS)
    for i, record in enumerate(records, 1):
        lines += _format_entry(i, record, config.wrap_width)
    return "\n".join(lines).rstrip() + "\n"


def render_reports(
    records: list[PullRequestRecord],
    config: ReportConfig,
    generated_at: datetime | None = None,
) -> dict[str, str]:
    """Render one report per repository, keyed by repository name."""
    generated_at = generated_at or datetime.now(timezone.utc)
    return {
        name: format_report(group, config, generated_at, repository=name)
        for name, group in group_by_repository(records).items()
    }
