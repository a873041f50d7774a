from __future__ import annotations

import textwrap
from datetime import datetime, timezone


def format_timestamp(value: datetime | None) -> str:
    """Render an aware datetime as "YYYY-MM-DD HH:MM:SS UTC"."""
    if value is None:
        return ""
    return value.astimezone(timezone.utc).strftime("%Y-%m-%d %H:%M:%S UTC")


def wrap_block(text: str, width: int, indent: str = "    ") -> list[str]:
    """Wrap text to ``width`` columns, indented, keeping paragraph breaks as blank lines."""
    lines: list[str] = []
    for paragraph in text.replace("\r\n", "\n").split("\n"):
        if not paragraph.strip():
            lines.append("")
            continue
        lines.extend(
            textwrap.wrap(
                paragraph.rstrip(),
                width=max(width, len(indent) + 1),
                initial_indent=indent,
                subsequent_indent=indent,
                break_long_words=True,
                break_on_hyphens=False,
            )
        )
    # Collapse runs of blank lines and drop leading/trailing ones.
    collapsed: list[str] = []
    for line in lines:
        if not line and (not collapsed or not collapsed[-1]):
            continue
        collapsed.append(line)
    while collapsed and not collapsed[-1]:
        collapsed.pop()
    return collapsed
