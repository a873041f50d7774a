"""Abstract writer interface.

The CLI depends on BaseWriter, not on a concrete destination, so the single
file, per-repository and console outputs are interchangeable.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from prdigest_store.models import ReportDocument


class OutputError(OSError):
    """A report destination could not be prepared; aborts the run."""


class BaseWriter(ABC):
    """Destination for rendered reports."""

    @abstractmethod
    def write(self, documents: list[ReportDocument]) -> list[Path]:
        """Persist documents and return the paths actually written.

        Paths already written stay on disk if a later document fails.
        """
