"""ConsoleWriter — print reports to the terminal instead of writing files."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from rich.console import Console

from prdigest_store.base import BaseWriter

if TYPE_CHECKING:
    from prdigest_store.models import ReportDocument


class ConsoleWriter(BaseWriter):
    """Writes each document to stdout verbatim; nothing touches the filesystem."""

    def __init__(self, console: Console | None = None):
        self._console = console or Console()

    def write(self, documents: list[ReportDocument]) -> list[Path]:
        for document in documents:
            # Titles and descriptions often contain [brackets]; print them as-is.
            self._console.print(document.content, markup=False, highlight=False, soft_wrap=True, end="")
        return []
