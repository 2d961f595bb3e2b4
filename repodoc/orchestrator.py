"""Pipeline orchestration: acquire, parse, aggregate, render, generate, write."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Mapping, Protocol, Tuple

from .config import ConfigError, RepoDocConfig
from .git.clone import RepositoryCloner, extract_repo_name
from .llm.runner import GenerationBackend, LLMRunner
from .logging import RunLoggerAdapter, get_logger, run_logger
from .models import ClassRecord, RunContext
from .parsing import OUTPUT_DIR_NAME, JavaSourceParser, SourceParser
from .prompting.bindings import class_bindings, faq_bindings, getting_started_bindings, overview_bindings
from .prompting.constants import CLASS_DOCUMENTATION, FAQ_TROUBLESHOOTING, GETTING_STARTED, PROJECT_OVERVIEW
from .prompting.renderer import PromptRenderError, PromptRenderer

OVERVIEW_FILENAME = "README.md"
GETTING_STARTED_FILENAME = "getting-started.md"
FAQ_FILENAME = "faq.md"
API_DIR_NAME = "api"


class GenerationError(RuntimeError):
    """Raised when a document cannot be rendered, generated or written."""


class Cloner(Protocol):
    def acquire(self, reference: str, base_dir: Path, *, context: RunContext | None = None) -> Path:
        ...


@dataclass
class SynthesisResult:
    """Paths written by a synthesis run plus any per-class failures."""

    context: RunContext
    repo_path: Path
    doc_root: Path
    overview: Path
    getting_started: Path
    faq: Path
    class_docs: List[Path] = field(default_factory=list)
    failures: List[Tuple[str, str]] = field(default_factory=list)


class Orchestrator:
    """Coordinates a single documentation synthesis run."""

    def __init__(
        self,
        config: RepoDocConfig | None = None,
        *,
        cloner: Cloner | None = None,
        parser: SourceParser | None = None,
        renderer: PromptRenderer | None = None,
        backend: GenerationBackend | None = None,
    ) -> None:
        self.config = config or RepoDocConfig(root=Path.cwd())
        self.cloner = cloner or RepositoryCloner(
            token=self.config.acquisition.token,
            flatten_policy=self.config.acquisition.flatten_policy,
        )
        self.parser = parser or JavaSourceParser()
        self.renderer = renderer or PromptRenderer(
            self.config.prompts.templates_dir,
            strict=self.config.prompts.strict_placeholders,
        )
        self._backend = backend

    @property
    def backend(self) -> GenerationBackend:
        if self._backend is None:
            self._backend = self._build_backend()
        return self._backend

    def run(self, reference: str, destination: Path | None = None) -> SynthesisResult:
        """Clone ``reference`` under ``destination`` and write its documentation set."""
        base_dir = destination or self.config.destination
        if base_dir is None:
            raise ConfigError(
                "No destination configured. Pass --dest, set REPODOC_DESTINATION or add "
                "`destination` to .repodoc.yml."
            )
        context = RunContext(repository=reference).with_repo_name(extract_repo_name(reference))
        log = run_logger("orchestrator", context)
        log.info("Starting synthesis for %s", reference)

        repo_path = self.cloner.acquire(reference, Path(base_dir), context=context)
        log.info("Working tree ready at %s", repo_path)

        records = self.collect_records(repo_path, context)
        if not records:
            log.warning("No classes were parsed from %s; documents will describe an empty project", repo_path)

        doc_root = repo_path / OUTPUT_DIR_NAME
        overview = self.generate_overview(records, context.repo_name, doc_root, context=context)
        getting_started = self.generate_getting_started(records, context.repo_name, doc_root, context=context)
        faq = self.generate_faq(records, context.repo_name, doc_root, context=context)

        result = SynthesisResult(
            context=context,
            repo_path=repo_path,
            doc_root=doc_root,
            overview=overview,
            getting_started=getting_started,
            faq=faq,
        )
        for record in records:
            try:
                result.class_docs.append(self.generate_class_doc(record, doc_root, context=context))
            except GenerationError as exc:
                if not self.config.generation.continue_on_class_error:
                    raise
                self._log_exception(log, f"Skipping documentation for {record.fully_qualified_name}", exc)
                result.failures.append((record.fully_qualified_name, str(exc)))

        log.info(
            "Wrote %d class documents (%d failed) under %s",
            len(result.class_docs),
            len(result.failures),
            doc_root,
        )
        return result

    def collect_records(self, root: Path, context: RunContext | None = None) -> List[ClassRecord]:
        """Parse every source file below ``root``; unparseable files are skipped."""
        log = self._logger(context)
        records: List[ClassRecord] = []
        files = self.parser.find_source_files(root)
        for path in files:
            try:
                record = self.parser.parse_file(path)
            except Exception as exc:  # pragma: no cover - third-party parsers may raise anything
                log.warning("Parser failed on %s: %s", path, exc)
                continue
            if record is None:
                log.debug("Skipping %s: no class declaration", path)
                continue
            records.append(record)
        log.info("Parsed %d classes from %d source files", len(records), len(files))
        return records

    def generate_overview(
        self,
        records: List[ClassRecord],
        repository_name: str,
        doc_root: Path,
        *,
        context: RunContext | None = None,
    ) -> Path:
        return self._generate(
            PROJECT_OVERVIEW,
            overview_bindings(records, repository_name),
            doc_root / OVERVIEW_FILENAME,
            context,
        )

    def generate_getting_started(
        self,
        records: List[ClassRecord],
        repository_name: str,
        doc_root: Path,
        *,
        context: RunContext | None = None,
    ) -> Path:
        return self._generate(
            GETTING_STARTED,
            getting_started_bindings(records, repository_name),
            doc_root / GETTING_STARTED_FILENAME,
            context,
        )

    def generate_faq(
        self,
        records: List[ClassRecord],
        repository_name: str,
        doc_root: Path,
        *,
        context: RunContext | None = None,
    ) -> Path:
        return self._generate(
            FAQ_TROUBLESHOOTING,
            faq_bindings(records, repository_name),
            doc_root / FAQ_FILENAME,
            context,
        )

    def generate_class_doc(
        self,
        record: ClassRecord,
        doc_root: Path,
        *,
        context: RunContext | None = None,
    ) -> Path:
        # Simple names only: same-named classes in different packages share a file.
        return self._generate(
            CLASS_DOCUMENTATION,
            class_bindings(record),
            doc_root / API_DIR_NAME / f"{record.name}.md",
            context,
        )

    def _generate(
        self,
        template_name: str,
        bindings: Mapping[str, object],
        output_path: Path,
        context: RunContext | None,
    ) -> Path:
        log = self._logger(context)
        try:
            prompt = self.renderer.render(template_name, bindings)
        except PromptRenderError as exc:
            raise GenerationError(f"Could not render {template_name}: {exc}") from exc

        log.debug("Generating %s from %s", output_path.name, template_name)
        try:
            content = self.backend.generate(prompt)
        except Exception as exc:
            raise GenerationError(f"Generation failed for {output_path.name}: {exc}") from exc

        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            output_path.write_text(content, encoding="utf-8")
        except OSError as exc:
            raise GenerationError(f"Could not write {output_path}: {exc}") from exc
        log.info("Wrote %s", output_path)
        return output_path

    def _build_backend(self) -> GenerationBackend:
        llm_cfg = self.config.llm
        kwargs: Dict[str, object] = {}
        if llm_cfg.model:
            kwargs["model"] = llm_cfg.model
        if llm_cfg.base_url is not None:
            kwargs["base_url"] = llm_cfg.base_url
        if llm_cfg.api_key is not None:
            kwargs["api_key"] = llm_cfg.api_key
        if llm_cfg.api_version is not None:
            kwargs["api_version"] = llm_cfg.api_version
        if llm_cfg.temperature is not None:
            kwargs["temperature"] = llm_cfg.temperature
        if llm_cfg.max_tokens is not None:
            kwargs["max_tokens"] = llm_cfg.max_tokens
        if llm_cfg.request_timeout is not None:
            kwargs["request_timeout"] = llm_cfg.request_timeout
        return LLMRunner(**kwargs)  # type: ignore[arg-type]

    @staticmethod
    def _logger(context: RunContext | None) -> logging.Logger | RunLoggerAdapter:
        if context is None:
            return get_logger("orchestrator")
        return run_logger("orchestrator", context)

    @staticmethod
    def _log_exception(log: logging.Logger | RunLoggerAdapter, message: str, exc: Exception) -> None:
        if log.isEnabledFor(logging.DEBUG):
            log.exception("%s: %s", message, exc)
        else:
            log.error("%s: %s", message, exc)


__all__ = ["GenerationError", "Orchestrator", "SynthesisResult"]
