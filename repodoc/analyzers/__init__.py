"""Pure aggregation functions over structural class records."""

from __future__ import annotations

from .dependencies import (
    ONBOARDING_DEPENDENCY_LIMIT,
    TROUBLESHOOTING_DEPENDENCY_LIMIT,
    collect_dependencies,
    collect_exceptions,
    exception_methods,
)
from .entrypoints import (
    EntryPoints,
    detect_entry_points,
    find_main_classes,
    sample_api_usage,
    sample_public_api,
)
from .patterns import (
    PATTERN_RULES,
    classify_usage,
    count_patterns,
    infer_technology_stack,
)
from .structure import (
    count_categories,
    package_histogram,
    rank_complex_classes,
    summarize_classes,
)

__all__ = [
    "EntryPoints",
    "ONBOARDING_DEPENDENCY_LIMIT",
    "PATTERN_RULES",
    "TROUBLESHOOTING_DEPENDENCY_LIMIT",
    "classify_usage",
    "collect_dependencies",
    "collect_exceptions",
    "count_categories",
    "count_patterns",
    "detect_entry_points",
    "exception_methods",
    "find_main_classes",
    "infer_technology_stack",
    "package_histogram",
    "rank_complex_classes",
    "sample_api_usage",
    "sample_public_api",
    "summarize_classes",
]
