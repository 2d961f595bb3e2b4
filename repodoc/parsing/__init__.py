"""Source parser contract and the default Java implementation."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Protocol

from ..models import ClassRecord
from .java import OUTPUT_DIR_NAME, JavaSourceParser


class SourceParser(Protocol):
    """Turns source files into structural class records."""

    def find_source_files(self, root: Path) -> List[Path]:
        """Return the source files below ``root`` in a stable order."""

    def parse_file(self, path: Path) -> Optional[ClassRecord]:
        """Return a record for ``path`` or None when the file cannot be parsed."""


__all__ = ["JavaSourceParser", "OUTPUT_DIR_NAME", "SourceParser"]
