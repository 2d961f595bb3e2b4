"""Template names and built-in fallback prompts."""

from __future__ import annotations

PROJECT_OVERVIEW = "project-overview.md"
CLASS_DOCUMENTATION = "class-documentation.md"
GETTING_STARTED = "getting-started.md"
FAQ_TROUBLESHOOTING = "faq-troubleshooting.md"

TEMPLATE_NAMES: tuple[str, ...] = (
    PROJECT_OVERVIEW,
    CLASS_DOCUMENTATION,
    GETTING_STARTED,
    FAQ_TROUBLESHOOTING,
)

FALLBACK_TEMPLATES: dict[str, str] = {
    PROJECT_OVERVIEW: "Generate a README.md for {{ repository_name }} with {{ total_classes }} classes.",
    CLASS_DOCUMENTATION: "Document the class {{ class_name }} from package {{ package_name }}.",
    GETTING_STARTED: "Create a getting started guide for {{ repository_name }}.",
    FAQ_TROUBLESHOOTING: "Create FAQ for {{ repository_name }}.",
}

GENERIC_FALLBACK_TEMPLATE = "Generate documentation for {{ repository_name }}."


__all__ = [
    "CLASS_DOCUMENTATION",
    "FALLBACK_TEMPLATES",
    "FAQ_TROUBLESHOOTING",
    "GENERIC_FALLBACK_TEMPLATE",
    "GETTING_STARTED",
    "PROJECT_OVERVIEW",
    "TEMPLATE_NAMES",
]
