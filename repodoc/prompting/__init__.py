"""Prompt templates, variable bindings and rendering."""

from .bindings import class_bindings, faq_bindings, getting_started_bindings, overview_bindings
from .constants import CLASS_DOCUMENTATION, FAQ_TROUBLESHOOTING, GETTING_STARTED, PROJECT_OVERVIEW
from .renderer import PromptRenderError, PromptRenderer

__all__ = [
    "CLASS_DOCUMENTATION",
    "FAQ_TROUBLESHOOTING",
    "GETTING_STARTED",
    "PROJECT_OVERVIEW",
    "PromptRenderError",
    "PromptRenderer",
    "class_bindings",
    "faq_bindings",
    "getting_started_bindings",
    "overview_bindings",
]
