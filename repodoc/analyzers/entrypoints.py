"""Entry-point detection and public API sampling."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence, Tuple

from ..models import ENUM, ClassRecord


@dataclass(frozen=True)
class EntryPoints:
    """Detected runnable classes, or a fallback sample of public classes."""

    names: Tuple[str, ...]
    detected: bool

    def __bool__(self) -> bool:
        return bool(self.names)


def find_main_classes(records: Sequence[ClassRecord]) -> List[str]:
    """Return fully-qualified names of classes declaring a static ``main``."""
    return [record.fully_qualified_name for record in records if record.is_entry_point]


def detect_entry_points(records: Sequence[ClassRecord], fallback_limit: int = 5) -> EntryPoints:
    """Return main classes, falling back to the first public classes when none exist."""
    main_classes = find_main_classes(records)
    if main_classes:
        return EntryPoints(names=tuple(main_classes), detected=True)

    fallback: List[str] = []
    for record in records:
        if len(fallback) >= fallback_limit:
            break
        name = record.fully_qualified_name
        if record.is_public and name not in fallback:
            fallback.append(name)
    return EntryPoints(names=tuple(fallback), detected=False)


def sample_public_api(records: Sequence[ClassRecord], limit: int = 10) -> List[ClassRecord]:
    """Return up to ``limit`` public, non-enum records in input order."""
    return [record for record in records if record.is_public and record.category != ENUM][:limit]


def sample_api_usage(records: Sequence[ClassRecord], limit: int = 3) -> List[ClassRecord]:
    """Return public records that expose at least one public method."""
    return [
        record
        for record in records
        if record.is_public and any(method.is_public for method in record.methods)
    ][:limit]


__all__ = [
    "EntryPoints",
    "detect_entry_points",
    "find_main_classes",
    "sample_api_usage",
    "sample_public_api",
]
