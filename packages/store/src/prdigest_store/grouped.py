"""GroupedFileWriter — one report file per repository under an output directory.

Filenames follow ``<repo>_prs_<start>_to_<end>.txt``. Characters that are
reserved on common filesystems are replaced with "-", so distinct repository
names can sanitize to the same filename; those get a numeric suffix instead
of overwriting each other.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import TYPE_CHECKING

from rich.console import Console

from prdigest_store.base import BaseWriter, OutputError

if TYPE_CHECKING:
    from prdigest_store.models import ReportDocument

console = Console(stderr=True)
logger = logging.getLogger(__name__)

_RESERVED_RE = re.compile(r'[/\\?%*:|"<>]')


def sanitize_filename(name: str) -> str:
    """Replace each of / \\ ? % * : | " < > with a hyphen."""
    return _RESERVED_RE.sub("-", name)


class GroupedFileWriter(BaseWriter):
    def __init__(self, output_dir: str | Path, start_date: str, end_date: str):
        self._output_dir = Path(output_dir)
        self._start_date = start_date
        self._end_date = end_date

    def filename_for(self, repository: str) -> str:
        return f"{sanitize_filename(repository)}_prs_{self._start_date}_to_{self._end_date}.txt"

    def _unique_path(self, repository: str, taken: set[str]) -> Path:
        filename = self.filename_for(repository)
        if filename in taken:
            stem = filename.removesuffix(".txt")
            n = 2
            while f"{stem}-{n}.txt" in taken:
                n += 1
            filename = f"{stem}-{n}.txt"
            logger.warning("Repository %r collides with another after sanitizing; writing %s", repository, filename)
        taken.add(filename)
        return self._output_dir / filename

    def write(self, documents: list[ReportDocument]) -> list[Path]:
        """Write each document to its own file.

        Failure to create the output directory raises OutputError. A failure
        writing one file is logged and the remaining files are still written.
        """
        try:
            self._output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise OutputError(f"Could not create output directory {self._output_dir}: {e}") from e

        written: list[Path] = []
        taken: set[str] = set()
        for document in documents:
            path = self._unique_path(document.repository or "unknown", taken)
            try:
                path.write_text(document.content, encoding="utf-8")
            except OSError as e:
                logger.error("Failed to write %s: %s", path, e)
                console.print(f"[red]Could not write {path}: {e}[/red]")
                continue
            written.append(path)
        return written
