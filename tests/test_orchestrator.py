"""Tests for repodoc.orchestrator."""

from __future__ import annotations

from pathlib import Path

import pytest

from repodoc.config import ConfigError, GenerationConfig, RepoDocConfig
from repodoc.llm.runner import LLMError
from repodoc.orchestrator import GenerationError, Orchestrator
from repodoc.parsing import JavaSourceParser

APP_SOURCE = """
package com.example;

import com.google.gson.Gson;
import java.util.List;

/** Application entry point. */
public class App {
    public static void main(String[] args) {
    }
}
"""

REPOSITORY_SOURCE = """
package com.example.data;

public interface Repository {
    String findAll();
}
"""

COLOR_SOURCE = """
package com.example.data;

public enum Color { RED, GREEN }
"""


class FakeCloner:
    """Writes a canned Java tree instead of running git."""

    def __init__(self, files: dict[str, str]) -> None:
        self.files = files
        self.calls: list[tuple[str, Path]] = []

    def acquire(self, reference, base_dir, *, context=None):
        self.calls.append((reference, Path(base_dir)))
        repo_path = Path(base_dir) / context.repo_name
        for relative, content in self.files.items():
            path = repo_path / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        return repo_path


class RecordingBackend:
    """Backend double that records prompts and echoes a short document."""

    def __init__(self, fail_on: str | None = None) -> None:
        self.prompts: list[str] = []
        self.fail_on = fail_on

    def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.fail_on and self.fail_on in prompt:
            raise LLMError("backend unavailable")
        return f"# Generated {len(self.prompts)}\n"


def _sample_files() -> dict[str, str]:
    return {
        "src/main/java/com/example/App.java": APP_SOURCE,
        "src/main/java/com/example/data/Repository.java": REPOSITORY_SOURCE,
        "src/main/java/com/example/data/Color.java": COLOR_SOURCE,
        "src/main/java/com/example/Broken.java": "public class {",
    }


def _orchestrator(tmp_path: Path, backend, **config_kwargs) -> Orchestrator:
    config = RepoDocConfig(root=tmp_path, destination=tmp_path / "work", **config_kwargs)
    return Orchestrator(config, cloner=FakeCloner(_sample_files()), backend=backend)


def test_run_writes_full_documentation_set(tmp_path: Path) -> None:
    backend = RecordingBackend()
    orchestrator = _orchestrator(tmp_path, backend)

    result = orchestrator.run("https://github.com/owner/demo.git")

    doc_root = tmp_path / "work" / "demo" / "RepoDocAIAgent"
    assert result.doc_root == doc_root
    assert result.overview == doc_root / "README.md"
    assert result.getting_started == doc_root / "getting-started.md"
    assert result.faq == doc_root / "faq.md"
    assert sorted(path.name for path in result.class_docs) == ["App.md", "Color.md", "Repository.md"]
    assert all(path.parent == doc_root / "api" for path in result.class_docs)
    assert result.failures == []
    assert result.overview.read_text(encoding="utf-8") == "# Generated 1\n"
    assert len(backend.prompts) == 6


def test_run_binds_repository_facts_into_prompts(tmp_path: Path) -> None:
    backend = RecordingBackend()

    _orchestrator(tmp_path, backend).run("https://github.com/owner/demo")

    overview, getting_started, faq = backend.prompts[:3]
    assert "**demo**" in overview
    assert "com.example.App" in overview
    assert "3 (1 classes, 1 interfaces, 1 enums)" in overview
    assert "com.google.gson.Gson" in getting_started
    assert "java.util.List" not in getting_started
    assert "Core Java" in faq


def test_run_requires_destination(tmp_path: Path) -> None:
    orchestrator = Orchestrator(
        RepoDocConfig(root=tmp_path),
        cloner=FakeCloner({}),
        backend=RecordingBackend(),
    )

    with pytest.raises(ConfigError):
        orchestrator.run("owner/demo")


def test_explicit_destination_wins_over_config(tmp_path: Path) -> None:
    cloner = FakeCloner(_sample_files())
    orchestrator = Orchestrator(
        RepoDocConfig(root=tmp_path, destination=tmp_path / "configured"),
        cloner=cloner,
        backend=RecordingBackend(),
    )

    orchestrator.run("owner/demo", tmp_path / "explicit")

    assert cloner.calls == [("owner/demo", tmp_path / "explicit")]


def test_class_failures_are_recorded_and_run_continues(tmp_path: Path) -> None:
    backend = RecordingBackend(fail_on="`com.example.data.Repository`")

    result = _orchestrator(tmp_path, backend).run("owner/demo")

    assert [name for name, _reason in result.failures] == ["com.example.data.Repository"]
    assert "backend unavailable" in result.failures[0][1]
    assert sorted(path.name for path in result.class_docs) == ["App.md", "Color.md"]


class UnexpectedErrorBackend(RecordingBackend):
    def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.fail_on and self.fail_on in prompt:
            raise ValueError("malformed completion payload")
        return f"# Generated {len(self.prompts)}\n"


def test_unexpected_backend_errors_are_recorded_per_class(tmp_path: Path) -> None:
    backend = UnexpectedErrorBackend(fail_on="`com.example.data.Repository`")

    result = _orchestrator(tmp_path, backend).run("owner/demo")

    assert [name for name, _reason in result.failures] == ["com.example.data.Repository"]
    assert "malformed completion payload" in result.failures[0][1]
    assert sorted(path.name for path in result.class_docs) == ["App.md", "Color.md"]


def test_class_failures_abort_when_configured(tmp_path: Path) -> None:
    backend = RecordingBackend(fail_on="`com.example.data.Repository`")
    orchestrator = _orchestrator(
        tmp_path, backend, generation=GenerationConfig(continue_on_class_error=False)
    )

    with pytest.raises(GenerationError):
        orchestrator.run("owner/demo")


def test_whole_repository_document_failure_aborts(tmp_path: Path) -> None:
    backend = RecordingBackend(fail_on="README.md")

    with pytest.raises(GenerationError, match="README.md"):
        _orchestrator(tmp_path, backend).run("owner/demo")


def test_collect_records_skips_unparseable_files(java_tree) -> None:
    root = java_tree.write(_sample_files())
    orchestrator = Orchestrator(RepoDocConfig(root=root), parser=JavaSourceParser(), backend=RecordingBackend())

    records = orchestrator.collect_records(root)

    assert sorted(record.name for record in records) == ["App", "Color", "Repository"]


def test_generated_documents_overwrite_previous_output(tmp_path: Path) -> None:
    backend = RecordingBackend()
    orchestrator = _orchestrator(tmp_path, backend)
    doc_root = tmp_path / "docs"
    doc_root.mkdir()
    (doc_root / "faq.md").write_text("stale", encoding="utf-8")

    path = orchestrator.generate_faq([], "demo", doc_root)

    assert path.read_text(encoding="utf-8") == "# Generated 1\n"


def test_write_failure_is_a_generation_error(tmp_path: Path) -> None:
    blocker = tmp_path / "blocked"
    blocker.write_text("not a directory", encoding="utf-8")
    orchestrator = _orchestrator(tmp_path, RecordingBackend())

    with pytest.raises(GenerationError, match="Could not write"):
        orchestrator.generate_overview([], "demo", blocker / "docs")
