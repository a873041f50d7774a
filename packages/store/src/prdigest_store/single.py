"""SingleFileWriter — the whole report in one fixed-name file."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from prdigest_store.base import BaseWriter, OutputError

if TYPE_CHECKING:
    from prdigest_store.models import ReportDocument

logger = logging.getLogger(__name__)


class SingleFileWriter(BaseWriter):
    """Writes all documents, concatenated, to one UTF-8 file.

    There is only one file, so a failed write is fatal.
    """

    def __init__(self, path: str | Path = "pull_requests.txt"):
        self._path = Path(path)

    def write(self, documents: list[ReportDocument]) -> list[Path]:
        content = "\n".join(d.content for d in documents)
        try:
            if self._path.parent != Path("."):
                self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(content, encoding="utf-8")
        except OSError as e:
            raise OutputError(f"Could not write {self._path}: {e}") from e
        logger.debug("Wrote %d bytes to %s", len(content), self._path)
        return [self._path]
