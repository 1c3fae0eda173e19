# pyright: reportExplicitAny=false
"""Shared CLI utilities for commands.

This module provides common utilities used across CLI command implementations:
- Standardized exit codes and the exception mapping onto them
- Generic output formatters (JSON, YAML, table)
- Console utilities for error handling
"""

from __future__ import annotations

from enum import IntEnum
from typing import TYPE_CHECKING, Any, Never

if TYPE_CHECKING:
    from collections.abc import Sequence

    from rich.console import Console
    from structlog.typing import FilteringBoundLogger

# Type alias for formattable data - uses Any to match library signatures
FormattableData = dict[str, Any]

__all__ = [
    "ExitCode",
    "FormattableData",
    "exit_code_for_exception",
    "exit_with_error",
    "exit_with_exception",
    "exit_with_success",
    "format_json",
    "format_table",
    "format_yaml",
    "get_error_console",
    "parse_assignments",
]


class ExitCode(IntEnum):
    """Standard exit codes for Xaheen CLI commands."""

    SUCCESS = 0
    LOAD_ERROR = 1
    VALIDATION_ERROR = 2
    NOT_FOUND = 3
    IO_ERROR = 4
    INTERNAL_ERROR = 5


def exit_code_for_exception(exc: BaseException) -> ExitCode:
    """Map an exception to the exit code of the command that raised it.

    Args:
        exc: The exception to map.

    Returns:
        Exit code corresponding to the exception type.
    """
    from xaheen.exceptions import (
        ConfigError,
        ConfigValidationError,
        GenerationError,
        NotFoundError,
        ServiceConflictError,
        ServiceInjectionError,
        TemplateError,
    )

    # Lookups first: TemplateNotFoundError is also a TemplateError
    if isinstance(exc, NotFoundError):
        return ExitCode.NOT_FOUND

    if isinstance(exc, (ConfigValidationError, ServiceConflictError, TemplateError)):
        return ExitCode.VALIDATION_ERROR

    if isinstance(exc, ConfigError):
        return ExitCode.LOAD_ERROR

    if isinstance(exc, (GenerationError, ServiceInjectionError, OSError)):
        return ExitCode.IO_ERROR

    return ExitCode.INTERNAL_ERROR


def format_json(data: FormattableData | list[Any], *, indent: bool = True) -> str:
    """Format data as JSON.

    Args:
        data: Dictionary or list to format as JSON.
        indent: Whether to pretty-print with indentation.

    Returns:
        JSON-formatted string representation.
    """
    import orjson

    options = orjson.OPT_INDENT_2 if indent else 0
    return orjson.dumps(data, option=options).decode("utf-8")


def format_yaml(data: FormattableData | list[Any]) -> str:
    """Format data as YAML.

    Args:
        data: Dictionary or list to format as YAML.

    Returns:
        YAML-formatted string representation.
    """
    import yaml

    return yaml.safe_dump(
        data, default_flow_style=False, allow_unicode=True, sort_keys=False
    )


def format_table(headers: list[str], rows: list[list[str]]) -> str:
    """Format data as a Markdown table.

    Args:
        headers: Column headers for the table.
        rows: List of rows, where each row is a list of cell values.

    Returns:
        Markdown table string representation.
    """
    from pytablewriter import MarkdownTableWriter

    writer = MarkdownTableWriter(
        headers=headers,
        value_matrix=rows,
        margin=1,
    )
    return writer.dumps()


def parse_assignments(assignments: Sequence[str]) -> dict[str, str]:
    """Parse ``key=value`` pairs from repeated ``--set`` options.

    Raises:
        ValueError: If an entry has no ``=`` or an empty key.
    """
    values: dict[str, str] = {}
    for assignment in assignments:
        key, sep, value = assignment.partition("=")
        key = key.strip()
        if not sep or not key:
            msg = f"Expected key=value, got: {assignment!r}"
            raise ValueError(msg)
        values[key] = value
    return values


def get_error_console() -> Console:
    """Get a Rich console configured for error output to stderr.

    Returns:
        Console instance writing to stderr.
    """
    from rich.console import Console

    return Console(stderr=True)


def exit_with_error(
    message: str,
    code: ExitCode = ExitCode.INTERNAL_ERROR,
    *,
    console: Console | None = None,
) -> Never:
    """Print an error message and exit with the specified code.

    Args:
        message: The error message to display.
        code: The exit code to use (defaults to INTERNAL_ERROR).
        console: Optional Rich console for output. If not provided,
            a new stderr console will be created.

    Raises:
        SystemExit: Always raised with the specified exit code.
    """
    from rich.markup import escape

    if console is None:
        console = get_error_console()

    console.print(
        f"[red]Error:[/red] {escape(message)}", highlight=False, soft_wrap=True
    )
    raise SystemExit(code)


def exit_with_exception(
    exc: BaseException,
    *,
    logger: FilteringBoundLogger | None = None,
    console: Console | None = None,
) -> Never:
    """Log ``exc``, print it and exit with the mapped exit code.

    Raises:
        SystemExit: Always raised with ``exit_code_for_exception(exc)``.
    """
    code = exit_code_for_exception(exc)
    if logger is not None:
        logger.error(
            "command_failed",
            error=str(exc),
            error_type=type(exc).__name__,
            exit_code=int(code),
            exc_info=exc,
        )
    exit_with_error(str(exc), code, console=console)


def exit_with_success(
    message: str | None = None,
    *,
    console: Console | None = None,
) -> Never:
    """Print an optional success message and exit with SUCCESS code.

    Args:
        message: Optional success message to display.
        console: Optional Rich console for output. If not provided and a message
            is given, a new stderr console will be created.

    Raises:
        SystemExit: Always raised with ExitCode.SUCCESS (0).
    """
    if message is not None:
        if console is None:
            console = get_error_console()
        console.print(message)
    raise SystemExit(ExitCode.SUCCESS)
