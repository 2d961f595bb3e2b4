from __future__ import annotations

from pathlib import Path

import pytest

from tests._fixtures.records import JavaTreeBuilder


@pytest.fixture
def java_tree(tmp_path: Path) -> JavaTreeBuilder:
    """Provide a Java source tree builder rooted at the pytest tmp_path."""
    return JavaTreeBuilder(tmp_path)


@pytest.fixture(autouse=True)
def _isolate_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep ambient credentials and destinations out of every test."""
    for key in (
        "REPODOC_DESTINATION",
        "documentdestination",
        "REPODOC_GIT_TOKEN",
        "GITHUB_TOKEN",
        "REPODOC_LLM_MODEL",
        "REPODOC_LLM_BASE_URL",
        "REPODOC_LLM_API_KEY",
        "REPODOC_LLM_API_VERSION",
        "OPENAI_MODEL",
        "OPENAI_BASE_URL",
        "OPENAI_API_KEY",
        "OPENAI_API_VERSION",
    ):
        monkeypatch.delenv(key, raising=False)
