"""Dependency and exception inventories derived from class records."""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence, Tuple

from ..models import ClassRecord

STANDARD_LIBRARY_PREFIXES: Tuple[str, ...] = ("java.",)
ONBOARDING_DEPENDENCY_LIMIT = 15
TROUBLESHOOTING_DEPENDENCY_LIMIT = 10


def is_standard_library(name: str) -> bool:
    return name.startswith(STANDARD_LIBRARY_PREFIXES)


def collect_dependencies(records: Sequence[ClassRecord], limit: Optional[int] = None) -> List[str]:
    """Return distinct non-standard-library dependencies in first-seen order."""
    seen: Dict[str, None] = {}
    for record in records:
        for dependency in record.dependencies:
            if is_standard_library(dependency):
                continue
            seen.setdefault(dependency, None)
    dependencies = list(seen)
    if limit is not None:
        return dependencies[:limit]
    return dependencies


def collect_exceptions(records: Sequence[ClassRecord]) -> List[str]:
    """Return every declared thrown exception name once."""
    seen: Dict[str, None] = {}
    for record in records:
        for method in record.methods:
            for exception in method.exceptions:
                seen.setdefault(exception, None)
    return list(seen)


def exception_methods(records: Sequence[ClassRecord]) -> List[str]:
    """Describe methods that declare thrown exceptions, qualified by their owner."""
    lines: List[str] = []
    for record in records:
        for method in record.methods:
            if method.exceptions:
                lines.append(f"- {record.name}.{method.name}() throws: {', '.join(method.exceptions)}")
    return lines


__all__ = [
    "ONBOARDING_DEPENDENCY_LIMIT",
    "STANDARD_LIBRARY_PREFIXES",
    "TROUBLESHOOTING_DEPENDENCY_LIMIT",
    "collect_dependencies",
    "collect_exceptions",
    "exception_methods",
    "is_standard_library",
]
