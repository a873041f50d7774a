"""Report document model.

Decoupled from prdigest_core so writers only deal with finished text and
never with GitHub data.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ReportDocument:
    """One rendered report.

    ``repository`` names the group a grouped report belongs to and is None
    for the single all-repositories report.
    """

    content: str
    repository: str | None = None
