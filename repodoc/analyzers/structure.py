"""Type-category, package layout and complexity summaries over class records."""

from __future__ import annotations

from collections import defaultdict
from typing import Dict, List, Sequence

from ..models import CATEGORIES, ClassRecord

DEFAULT_PACKAGE_LABEL = "default package"
COMPLEX_METHOD_THRESHOLD = 10


def count_categories(records: Sequence[ClassRecord]) -> Dict[str, int]:
    """Return how many records fall into each category (every category is present)."""
    counts = {category: 0 for category in CATEGORIES}
    for record in records:
        counts[record.category] += 1
    return counts


def package_histogram(records: Sequence[ClassRecord]) -> List[str]:
    """Return ``"<package> (N classes)"`` lines sorted by package name."""
    sizes: Dict[str, int] = defaultdict(int)
    for record in records:
        sizes[record.package] += 1
    return [
        f"{package or DEFAULT_PACKAGE_LABEL} ({count} classes)"
        for package, count in sorted(sizes.items())
    ]


def summarize_classes(records: Sequence[ClassRecord]) -> List[str]:
    return [
        f"- {record.fully_qualified_name} ({record.category}): {record.description or 'No description available'}"
        for record in records
    ]


def rank_complex_classes(records: Sequence[ClassRecord], limit: int = 5) -> List[str]:
    """Flag classes of interest: many methods or at least one implemented interface."""
    ranked: List[str] = []
    for record in records:
        if len(record.methods) > COMPLEX_METHOD_THRESHOLD or record.interfaces:
            ranked.append(f"- {record.name} ({len(record.methods)} methods)")
        if len(ranked) >= limit:
            break
    return ranked


__all__ = [
    "COMPLEX_METHOD_THRESHOLD",
    "DEFAULT_PACKAGE_LABEL",
    "count_categories",
    "package_histogram",
    "rank_complex_classes",
    "summarize_classes",
]
