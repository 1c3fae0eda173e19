# pyright: reportUnusedCallResult=false, reportUnusedFunction=false
"""Validate command for Xaheen configuration."""

from typing import Annotated

from cyclopts import Parameter

from xaheen.cli._commands._context import CLIContext, OutputFormat
from xaheen.cli._commands._shared import (
    ExitCode,
    exit_with_exception,
    format_json,
    get_error_console,
)
from xaheen.config import ValidationIssue, read_json_file, validate_config
from xaheen.exceptions import ConfigError
from xaheen.utils import FileSystemGateway

from ._app import app


def _format_text_output(path: str, issues: list[ValidationIssue]) -> str:
    lines = [f"Validating {path}...", ""]
    if not issues:
        lines.append("  OK")
    for issue in issues:
        prefix = "ERROR" if issue.severity == "error" else "WARNING"
        key_info = f"'{issue.key}'" if issue.key else ""
        lines.append(f"  {prefix}: {issue.message} {key_info}".rstrip())
        if issue.expected:
            lines.append(f"         Expected: {issue.expected}")

    errors = sum(1 for i in issues if i.severity == "error")
    warnings = len(issues) - errors
    err = "error" if errors == 1 else "errors"
    warn = "warning" if warnings == 1 else "warnings"
    lines.extend(["", f"Validation complete: {errors} {err}, {warnings} {warn}"])
    return "\n".join(lines)


def _format_json_output(path: str, issues: list[ValidationIssue]) -> str:
    return format_json(
        {
            "path": path,
            "valid": not any(i.severity == "error" for i in issues),
            "issues": [
                {
                    "severity": i.severity,
                    "key": i.key,
                    "message": i.message,
                    "expected": i.expected,
                }
                for i in issues
            ],
        }
    )


@app.command(name="validate")
def validate(
    *,
    strict: Annotated[
        bool, Parameter(help="Treat unknown top-level keys as errors")
    ] = False,
    format: Annotated[  # noqa: A002
        OutputFormat, Parameter(name=["--format", "-f"], help="Output format")
    ] = OutputFormat.TEXT,
) -> None:
    """Validate xaheen.config.json against the schema.

    Exit codes:
        0 - Config is valid
        1 - The file is missing or not valid JSON
        2 - Validation errors found

    Args:
        strict: Reject unknown top-level keys.
        format: Output format (text or json).
    """
    from xaheen.cli._commands._components import get_config_manager

    ctx = CLIContext.get_current()
    console = get_error_console()

    try:
        if ctx.config_path is not None:
            path = ctx.config_path
            data = read_json_file(path, FileSystemGateway())
            issues = validate_config(data, strict=strict, source=str(path))
        else:
            manager = get_config_manager()
            path = manager.unified_path
            issues = manager.validate_file(strict=strict)
    except (ConfigError, OSError) as e:
        exit_with_exception(e, logger=ctx.logger, console=console)

    if format is OutputFormat.JSON:
        print(_format_json_output(str(path), issues))
    else:
        print(_format_text_output(str(path), issues))

    if any(issue.severity == "error" for issue in issues):
        raise SystemExit(ExitCode.VALIDATION_ERROR)
