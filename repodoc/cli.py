"""CLI entrypoint for repodoc."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .config import ConfigError, load_config
from .logging import configure_logging, get_logger
from .orchestrator import Orchestrator


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="repodoc",
        description="Clone a Java repository and generate Markdown documentation for it.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=False,
        help="Increase log verbosity for troubleshooting.",
    )
    parser.add_argument(
        "--config",
        default=".",
        help="Path to .repodoc.yml or the directory containing it (defaults to current directory).",
    )
    parser.add_argument(
        "--dest",
        default=None,
        help="Base directory for the working tree (overrides configuration).",
    )
    parser.add_argument(
        "--log-file",
        default=None,
        help="Write a detailed log of the run to this file.",
    )
    parser.add_argument(
        "repository",
        help="Repository URL or owner/name reference to document.",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for repodoc."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    log_file = Path(args.log_file).expanduser() if args.log_file else None
    configure_logging(verbose=bool(args.verbose), log_file=log_file)
    logger = get_logger("cli")

    try:
        config = load_config(Path(args.config).expanduser())
    except ConfigError as exc:
        parser.exit(1, f"repodoc failed: {exc}\n")

    destination = Path(args.dest).expanduser() if args.dest else config.destination
    if destination is None:
        parser.exit(
            1,
            "repodoc failed: no destination configured. "
            "Pass --dest, set REPODOC_DESTINATION or add `destination` to .repodoc.yml.\n",
        )

    orchestrator = Orchestrator(config)
    try:
        result = orchestrator.run(args.repository, destination)
    except Exception as exc:
        logger.debug("Run failed", exc_info=True)
        parser.exit(1, f"repodoc failed: {exc} (run with --verbose for details)\n")

    if result.failures:
        logger.warning("%d class documents could not be generated", len(result.failures))
    print(f"View docs at: {_relativize(result.doc_root)}")


def _relativize(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
