"""Logging utilities for repodoc runs."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, MutableMapping, Tuple

from .models import RunContext

_LOGGER_NAME = "repodoc"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a module-scoped logger under the repodoc hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


class RunLoggerAdapter(logging.LoggerAdapter):
    """Prefixes every message with the run id of the active synthesis run."""

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> Tuple[Any, MutableMapping[str, Any]]:
        run_id = self.extra.get("run_id", "-") if self.extra else "-"
        return f"[run {run_id}] {msg}", kwargs


def run_logger(name: str, context: RunContext) -> RunLoggerAdapter:
    """Return a logger bound to the given run context."""
    return RunLoggerAdapter(
        get_logger(name),
        {"run_id": context.run_id, "repository": context.repository},
    )


def configure_logging(
    *, verbose: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Configure the repodoc logger with console output and optional file sink."""
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(logging.DEBUG if log_file is not None else level)
    logger.propagate = False

    # Reset handlers to avoid duplicate output when the CLI runs more than once per process.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(level)
    stream_handler.setFormatter(logging.Formatter("[repodoc] %(levelname)s %(message)s"))
    logger.addHandler(stream_handler)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
        logger.addHandler(file_handler)

    return logger


__all__ = ["RunLoggerAdapter", "configure_logging", "get_logger", "run_logger"]
