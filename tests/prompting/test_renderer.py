"""Tests for prompt template loading and rendering."""

from __future__ import annotations

from pathlib import Path

import pytest

from repodoc.prompting.constants import (
    CLASS_DOCUMENTATION,
    FAQ_TROUBLESHOOTING,
    GETTING_STARTED,
    PROJECT_OVERVIEW,
    TEMPLATE_NAMES,
)
from repodoc.prompting.renderer import DEFAULT_TEMPLATES_DIR, PromptRenderError, PromptRenderer


def _template(directory: Path, name: str, text: str) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / name
    path.write_text(text, encoding="utf-8")
    return directory


def test_packaged_templates_exist_for_every_document() -> None:
    for name in TEMPLATE_NAMES:
        assert (DEFAULT_TEMPLATES_DIR / name).is_file()


def test_custom_template_overrides_packaged_one(tmp_path: Path) -> None:
    templates = _template(tmp_path / "prompts", PROJECT_OVERVIEW, "Custom for {{ repository_name }}")

    rendered = PromptRenderer(templates).render(PROJECT_OVERVIEW, {"repository_name": "demo"})

    assert rendered == "Custom for demo"


def test_missing_custom_template_uses_packaged_default(tmp_path: Path) -> None:
    templates = _template(tmp_path / "prompts", PROJECT_OVERVIEW, "Custom")

    rendered = PromptRenderer(templates).render(FAQ_TROUBLESHOOTING, {"repository_name": "demo"})

    assert "**demo**" in rendered


def test_unknown_template_uses_generic_fallback() -> None:
    rendered = PromptRenderer().render("release-notes.md", {"repository_name": "demo"})

    assert rendered == "Generate documentation for demo."


def test_broken_template_uses_builtin_fallback(tmp_path: Path) -> None:
    templates = _template(tmp_path / "prompts", PROJECT_OVERVIEW, "{% if %}broken")

    rendered = PromptRenderer(templates).render(
        PROJECT_OVERVIEW, {"repository_name": "demo", "total_classes": 3}
    )

    assert rendered == "Generate a README.md for demo with 3 classes."


def test_undecodable_template_uses_builtin_fallback(tmp_path: Path) -> None:
    templates = tmp_path / "prompts"
    templates.mkdir()
    (templates / CLASS_DOCUMENTATION).write_bytes(b"\xff\xfe{{ class_name }}")

    rendered = PromptRenderer(templates).render(
        CLASS_DOCUMENTATION, {"class_name": "App", "package_name": "com.example"}
    )

    assert rendered == "Document the class App from package com.example."


def test_unbound_placeholder_is_left_verbatim(tmp_path: Path) -> None:
    templates = _template(tmp_path / "prompts", GETTING_STARTED, "Guide for {{ repository_name }}: {{ extra }}")

    rendered = PromptRenderer(templates).render(GETTING_STARTED, {"repository_name": "demo"})

    assert rendered == "Guide for demo: {{ extra }}"


def test_strict_mode_rejects_unbound_placeholder(tmp_path: Path) -> None:
    templates = _template(tmp_path / "prompts", GETTING_STARTED, "Guide for {{ repository_name }}: {{ extra }}")

    with pytest.raises(PromptRenderError):
        PromptRenderer(templates, strict=True).render(GETTING_STARTED, {"repository_name": "demo"})


@pytest.mark.parametrize("name", TEMPLATE_NAMES)
def test_rendering_never_fails_with_empty_bindings(name: str) -> None:
    rendered = PromptRenderer().render(name, {})

    assert isinstance(rendered, str)
    assert rendered.strip()
