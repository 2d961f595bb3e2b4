"""Loads named prompt templates and binds aggregator output into them."""

from __future__ import annotations

from pathlib import Path
from typing import List, Mapping

from jinja2 import (
    ChainableUndefined,
    Environment,
    FileSystemLoader,
    StrictUndefined,
    Template,
    TemplateError,
    UndefinedError,
)

from ..logging import get_logger
from .constants import FALLBACK_TEMPLATES, GENERIC_FALLBACK_TEMPLATE

DEFAULT_TEMPLATES_DIR = Path(__file__).with_name("templates")


class PromptRenderError(RuntimeError):
    """Raised in strict mode when a template references an unbound placeholder."""


class LiteralUndefined(ChainableUndefined):
    """Renders an unbound placeholder back as its literal ``{{ name }}`` token."""

    __slots__ = ()

    def __str__(self) -> str:
        return "{{ %s }}" % self._undefined_name


class PromptRenderer:
    """Renders prompt templates from disk, falling back to built-in text."""

    def __init__(self, templates_dir: Path | None = None, *, strict: bool = False) -> None:
        self.templates_dir = templates_dir
        self.strict = strict
        self.logger = get_logger("prompting.renderer")
        self._env = self._create_env(templates_dir)

    def load(self, template_name: str) -> Template:
        """Return the named template; any load failure yields the built-in fallback."""
        try:
            return self._env.get_template(template_name)
        except (TemplateError, OSError, UnicodeDecodeError) as exc:
            self.logger.warning("Failed to load prompt template %s (%s); using fallback", template_name, exc)
            return self.fallback(template_name)

    def fallback(self, template_name: str) -> Template:
        text = FALLBACK_TEMPLATES.get(template_name, GENERIC_FALLBACK_TEMPLATE)
        return self._env.from_string(text)

    def render(self, template_name: str, bindings: Mapping[str, object]) -> str:
        """Bind ``bindings`` into the named template and return the prompt text."""
        template = self.load(template_name)
        try:
            return template.render(**dict(bindings))
        except TemplateError as exc:
            if self.strict and isinstance(exc, UndefinedError):
                raise PromptRenderError(f"Template {template_name} has an unbound placeholder: {exc}") from exc
            self.logger.warning("Rendering %s failed (%s); using fallback", template_name, exc)
        try:
            return self.fallback(template_name).render(**dict(bindings))
        except UndefinedError as exc:
            raise PromptRenderError(f"Fallback for {template_name} has an unbound placeholder: {exc}") from exc

    def _create_env(self, templates_dir: Path | None) -> Environment:
        directories: List[str] = []
        if templates_dir:
            directories.append(str(templates_dir))
        default_dir = str(DEFAULT_TEMPLATES_DIR)
        if default_dir not in directories:
            directories.append(default_dir)
        undefined = StrictUndefined if self.strict else LiteralUndefined
        return Environment(
            loader=FileSystemLoader(directories),
            autoescape=False,
            keep_trailing_newline=True,
            undefined=undefined,
        )


__all__ = ["DEFAULT_TEMPLATES_DIR", "LiteralUndefined", "PromptRenderError", "PromptRenderer"]
