"""Repository acquisition: clone into a clean working tree and flatten nesting."""

from __future__ import annotations

import base64
import logging
import os
import re
import shutil
import subprocess
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Tuple
from urllib.parse import urlparse

from ..logging import get_logger, run_logger
from ..models import RunContext

_SSH_REFERENCE = re.compile(r"^[\w.-]+@(?P<host>[\w.-]+):(?P<path>.+)$")
_FLATTEN_POLICIES = ("continue", "abort")


class AcquisitionError(RuntimeError):
    """Raised when a repository cannot be cloned into a usable working tree."""


class FlattenError(AcquisitionError):
    """Raised when flattening aborts on the first failed move."""


@dataclass
class FlattenReport:
    """Outcome of removing a redundant nested directory level."""

    nested: Optional[Path] = None
    moved: int = 0
    failures: List[Tuple[Path, str]] = field(default_factory=list)

    @property
    def flattened(self) -> bool:
        return self.nested is not None


def extract_repo_name(reference: str) -> str:
    """Return the repository short name for a clone reference.

    GitHub references (``https://github.com/owner/repo``, ``github.com/owner/repo``,
    ``git@github.com:owner/repo``) and other hosts followed by exactly
    ``owner/repo`` yield the segment after the owner. Anything else, such as
    nested GitLab groups or local paths, yields the last path segment. A
    ``.git`` suffix is dropped in every case.
    """
    cleaned = reference.strip().rstrip("/")
    host: Optional[str] = None
    ssh = _SSH_REFERENCE.match(cleaned)
    if ssh:
        host = ssh.group("host")
        segments = _segments(ssh.group("path"))
    else:
        parsed = urlparse(cleaned)
        if parsed.scheme and parsed.netloc:
            host = parsed.hostname
            segments = _segments(parsed.path)
        else:
            segments = _segments(cleaned)
            if len(segments) >= 3 and _looks_like_host(segments[0]):
                host, segments = segments[0], segments[1:]

    if host is not None and len(segments) >= 2 and (_is_github(host) or len(segments) == 2):
        name = segments[1]
    else:
        name = segments[-1] if segments else ""
    if name.endswith(".git"):
        name = name[: -len(".git")]
    if not name:
        raise AcquisitionError(f"Unable to derive a repository name from '{reference}'")
    return name


def _looks_like_host(segment: str) -> bool:
    return "." in segment and not segment.startswith(".")


def _is_github(host: str) -> bool:
    lowered = host.lower()
    return lowered == "github.com" or lowered.endswith(".github.com")


def _segments(path: str) -> List[str]:
    return [segment for segment in path.split("/") if segment]


def _epoch_millis() -> int:
    return time.time_ns() // 1_000_000


class RepositoryCloner:
    """Clones remote repositories into deterministic local working trees."""

    def __init__(
        self,
        runner: Callable[..., str] | None = None,
        *,
        token: str | None = None,
        flatten_policy: str = "continue",
        clock: Callable[[], int] | None = None,
    ) -> None:
        if flatten_policy not in _FLATTEN_POLICIES:
            raise ValueError(f"Unknown flatten policy '{flatten_policy}'")
        self._runner = runner or self._default_runner
        self.token = token
        self.flatten_policy = flatten_policy
        self._clock = clock or _epoch_millis

    def acquire(
        self,
        reference: str,
        base_dir: Path,
        *,
        context: RunContext | None = None,
    ) -> Path:
        """Clone ``reference`` under ``base_dir`` and return the flattened working tree."""
        repo_name = extract_repo_name(reference)
        target = self.resolve_target(base_dir, repo_name, context=context)
        repo_path = self.clone(reference, target, context=context).resolve()
        self.flatten(repo_path, repo_name, context=context)
        return repo_path

    def resolve_target(
        self,
        base_dir: Path,
        repo_name: str,
        *,
        context: RunContext | None = None,
    ) -> Path:
        """Return ``base_dir/repo_name``, suffixed with a timestamp when it already exists."""
        target = Path(base_dir).expanduser() / repo_name
        if target.exists():
            # Best effort only: two runs within the same millisecond still collide.
            target = target.with_name(f"{repo_name}-{self._clock()}")
            self._logger(context).info("Target exists, using %s", target)
        return target

    def clone(
        self,
        reference: str,
        target: Path,
        *,
        context: RunContext | None = None,
    ) -> Path:
        """Clone into a sibling temp directory, then move the result into ``target``."""
        log = self._logger(context)
        if target.exists() or target.is_symlink():
            log.info("Target directory exists, removing it: %s", target)
            try:
                _remove_path(target)
            except OSError as exc:
                raise AcquisitionError(f"Unable to clear existing target {target}: {exc}") from exc

        temp_dir = target.parent / f"{target.name}_temp_{self._clock()}"
        try:
            temp_dir.mkdir(parents=True, exist_ok=False)
        except OSError as exc:
            raise AcquisitionError(f"Unable to create temporary clone directory {temp_dir}: {exc}") from exc

        try:
            log.info("Cloning %s into %s", reference, temp_dir)
            self._run_clone(reference, temp_dir)

            target.mkdir(parents=True, exist_ok=True)
            _moved, failures = _move_tree(temp_dir, target, log)
            if failures:
                first, reason = failures[0]
                raise AcquisitionError(
                    f"Failed to move {len(failures)} entries into {target} (first: {first}: {reason})"
                )
        finally:
            self._cleanup(temp_dir, log)

        if not (target / ".git").exists():
            raise AcquisitionError(f"Clone failed: .git folder not found in {target}")
        log.info("Repository ready at %s", target)
        return target

    def flatten(
        self,
        target: Path,
        repo_name: str,
        *,
        policy: str | None = None,
        context: RunContext | None = None,
    ) -> FlattenReport:
        """Move ``target/repo_name/**`` up into ``target`` and remove the emptied folder."""
        effective = policy or self.flatten_policy
        if effective not in _FLATTEN_POLICIES:
            raise ValueError(f"Unknown flatten policy '{effective}'")
        nested = target / repo_name
        if not nested.is_dir() or nested.is_symlink():
            return FlattenReport()

        log = self._logger(context)
        log.info("Detected nested folder %s, flattening", nested)
        report = FlattenReport(nested=nested)
        moved, failures = _move_tree(nested, target, log, abort=effective == "abort")
        report.moved = moved
        report.failures.extend(failures)
        _remove_empty_dirs(nested, log)
        if failures:
            log.warning(
                "Flattening %s left %d entries behind (policy=%s)", nested, len(failures), effective
            )
        return report

    # ------------------------------------------------------------------
    # Helpers

    def _run_clone(self, reference: str, temp_dir: Path) -> None:
        args: List[str] = ["git"]
        args.extend(self._auth_args(reference))
        args.extend(["clone", reference, str(temp_dir)])
        env = os.environ.copy()
        env["GIT_TERMINAL_PROMPT"] = "0"
        try:
            self._runner(args, cwd=temp_dir.parent, env=env, capture_output=True)
        except FileNotFoundError as exc:
            raise AcquisitionError("Unable to locate the 'git' executable") from exc
        except subprocess.CalledProcessError as exc:
            detail = (exc.stderr or "").strip() if isinstance(exc.stderr, str) else ""
            raise AcquisitionError(
                f"git clone failed with exit code {exc.returncode}: {detail or reference}"
            ) from exc
        except OSError as exc:
            raise AcquisitionError(f"git clone failed: {exc}") from exc

    def _auth_args(self, reference: str) -> List[str]:
        if not self.token or not reference.lower().startswith(("http://", "https://")):
            return []
        credentials = base64.b64encode(f"x-access-token:{self.token}".encode("utf-8")).decode("ascii")
        return ["-c", f"http.extraHeader=Authorization: Basic {credentials}"]

    @staticmethod
    def _cleanup(temp_dir: Path, log: logging.Logger | logging.LoggerAdapter) -> None:
        if not temp_dir.exists():
            return
        try:
            shutil.rmtree(temp_dir)
        except OSError as exc:
            log.warning("Failed to delete %s: %s", temp_dir, exc)

    @staticmethod
    def _logger(context: RunContext | None) -> logging.Logger | logging.LoggerAdapter:
        if context is None:
            return get_logger("git.clone")
        return run_logger("git.clone", context)

    @staticmethod
    def _default_runner(
        args: Iterable[str],
        *,
        cwd: Path,
        env: dict[str, str] | None = None,
        capture_output: bool = False,
    ) -> str:
        completed = subprocess.run(
            list(args),
            cwd=str(cwd),
            env=env,
            check=True,
            text=True,
            capture_output=capture_output,
        )
        if capture_output:
            return completed.stdout
        return ""


def _remove_path(path: Path) -> None:
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    else:
        path.unlink()


def _move_tree(
    source_root: Path,
    dest_root: Path,
    log: logging.Logger | logging.LoggerAdapter,
    *,
    abort: bool = False,
) -> Tuple[int, List[Tuple[Path, str]]]:
    """Move every entry below ``source_root`` to the same relative path under ``dest_root``."""
    moved = 0
    failures: List[Tuple[Path, str]] = []
    # Snapshot first: the destination may contain the source.
    walked = list(os.walk(source_root))
    for dirpath, dirnames, filenames in walked:
        current = Path(dirpath)
        relative = current.relative_to(source_root)
        entries = list(filenames) + [name for name in dirnames if (current / name).is_symlink()]
        try:
            (dest_root / relative).mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            if abort:
                raise FlattenError(f"Error creating {dest_root / relative}: {exc}") from exc
            log.error("Error creating %s: %s", dest_root / relative, exc)
            failures.extend((current / name, str(exc)) for name in entries)
            continue
        for name in entries:
            source = current / name
            destination = dest_root / relative / name
            try:
                os.replace(source, destination)
                moved += 1
            except OSError as exc:
                if abort:
                    raise FlattenError(f"Error moving {source} -> {destination}: {exc}") from exc
                log.error("Error moving %s -> %s: %s", source, destination, exc)
                failures.append((source, str(exc)))
    return moved, failures


def _remove_empty_dirs(root: Path, log: logging.Logger | logging.LoggerAdapter) -> int:
    """Delete empty directories under ``root`` bottom-up; returns how many were removed."""
    removed = 0
    for dirpath, _dirnames, _filenames in os.walk(root, topdown=False):
        directory = Path(dirpath)
        try:
            directory.rmdir()
            removed += 1
        except OSError as exc:
            log.debug("Leaving %s in place: %s", directory, exc)
    return removed


__all__ = [
    "AcquisitionError",
    "FlattenError",
    "FlattenReport",
    "RepositoryCloner",
    "extract_repo_name",
]
