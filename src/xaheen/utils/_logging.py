"""Structured file logging for CLI runs.

Every CLI invocation gets its own structlog logger bound to the command name.
Loggers are built with ``structlog.wrap_logger`` so global structlog
configuration is never touched; library components receive the logger
explicitly and log nothing without one.
"""

from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import TYPE_CHECKING, Literal, cast

import structlog

from ._paths import get_xaheen_cli_log_file

if TYPE_CHECKING:
    from collections.abc import Mapping

    from structlog.typing import FilteringBoundLogger, Processor

LogFormatType = Literal["json", "text"]


def resolve_log_level(level: str, environ: Mapping[str, str] | None = None) -> int:
    """Return the effective level for ``level`` after environment overrides.

    ``XAHEEN_DEBUG`` (any non-empty value) wins, then ``XAHEEN_LOG_LEVEL``.
    Unknown names fall back to INFO.
    """
    env = os.environ if environ is None else environ
    if env.get("XAHEEN_DEBUG"):
        return logging.DEBUG
    name = env.get("XAHEEN_LOG_LEVEL") or level
    return logging.getLevelNamesMapping().get(name.upper(), logging.INFO)


def resolve_log_file(project_root: Path, log_file: str = "") -> Path:
    """Return the log file path; relative paths resolve against the project."""
    if not log_file:
        return get_xaheen_cli_log_file(project_root)
    path = Path(log_file)
    return path if path.is_absolute() else project_root / path


def _processors(log_format: LogFormatType) -> list[Processor]:
    processors: list[Processor] = [
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    if log_format == "json":
        processors += [
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))
    return processors


def _rotating_logger(
    path: Path, level: int, max_bytes: int, backup_count: int
) -> logging.Logger:
    # One stdlib logger per file; handlers from an earlier run are replaced
    stdlib_logger = logging.getLogger(f"xaheen.cli.{path}")
    stdlib_logger.handlers.clear()
    stdlib_logger.propagate = False
    stdlib_logger.setLevel(level)
    handler = RotatingFileHandler(
        path, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    stdlib_logger.addHandler(handler)
    return stdlib_logger


def create_cli_logger(  # noqa: PLR0913
    project_root: Path,
    *,
    level: str = "info",
    log_format: LogFormatType = "json",
    log_file: str = "",
    command: str = "",
    max_bytes: int = 0,
    backup_count: int = 0,
    environ: Mapping[str, str] | None = None,
) -> FilteringBoundLogger:
    """Create the logger for one CLI invocation.

    Entries go to ``log_file`` or, when empty, ``.xaheen/logs/cli.log``
    under the project root. The parent directory is created if needed.

    Args:
        project_root: Root of the project being worked on.
        level: Configured threshold; see ``resolve_log_level``.
        log_format: ``json`` lines or plain ``text``.
        log_file: Configured log file, absolute or project-relative.
        command: First CLI token, bound to every entry.
        max_bytes: Rotate the file past this size. 0 disables rotation.
        backup_count: Rotated files to keep.
        environ: Environment consulted for level overrides.

    Returns:
        A FilteringBoundLogger writing to the resolved file.
    """
    path = resolve_log_file(project_root, log_file)
    path.parent.mkdir(parents=True, exist_ok=True)
    effective_level = resolve_log_level(level, environ)

    if max_bytes > 0 and backup_count > 0:
        raw_logger: object = _rotating_logger(
            path, effective_level, max_bytes, backup_count
        )
    else:
        raw_logger = structlog.WriteLogger(path.open("a", encoding="utf-8"))

    logger = cast(
        "FilteringBoundLogger",
        structlog.wrap_logger(
            raw_logger,
            processors=_processors(log_format),
            wrapper_class=structlog.make_filtering_bound_logger(effective_level),
            context_class=dict,
        ),
    )
    return logger.bind(command=command) if command else logger
