# pyright: reportUnusedCallResult=false
"""Xaheen add command - injects a catalog service into the project."""

from __future__ import annotations

from typing import TYPE_CHECKING, Annotated

from cyclopts import App, Parameter

from xaheen.cli._commands._context import CLIContext, OutputFormat
from xaheen.cli._commands._shared import (
    ExitCode,
    exit_with_error,
    exit_with_exception,
    format_json,
    format_yaml,
    get_error_console,
    parse_assignments,
)
from xaheen.exceptions import XaheenError
from xaheen.services import InjectionOptions

if TYPE_CHECKING:
    from pathlib import Path

    from rich.console import Console

    from xaheen.services import InjectionResult

app = App(
    name="add",
    help="Add a service (auth, database, payments, ...) to the project",
    help_on_error=True,
)


def _display_path(path: Path, root: Path) -> str:
    return path.relative_to(root).as_posix() if path.is_relative_to(root) else str(path)


def _result_to_dict(result: InjectionResult, root: Path) -> dict[str, object]:
    return {
        "service": result.service,
        "dry_run": result.dry_run,
        "success": result.success,
        "files": [
            {
                "path": _display_path(f.path, root),
                "template": f.template_id,
                "strategy": f.strategy.value,
                "action": f.action,
                "written": f.written,
            }
            for f in result.files
        ],
        "dependencies": result.dependencies,
        "dev_dependencies": result.dev_dependencies,
        "env": result.env_added,
        "post_steps": [
            {
                "name": step.name,
                "command": step.command,
                "success": step.success,
                "exit_code": step.exit_code,
                "error": step.error,
            }
            for step in result.post_steps
        ],
        "warnings": result.warnings,
    }


def _print_text(result: InjectionResult, root: Path, console: Console) -> None:
    for injected in result.files:
        print(f"{injected.action:<10}{_display_path(injected.path, root)}")
    for name, version in {**result.dependencies, **result.dev_dependencies}.items():
        print(f"{'package':<10}{name}@{version}")
    for name in result.env_added:
        print(f"{'env':<10}{name}")
    for step in result.post_steps:
        status = "ok" if step.success else f"failed ({step.error or step.exit_code})"
        print(f"{'run':<10}{' '.join(step.command)}: {status}")
    for warning in result.warnings:
        console.print(f"[yellow]Warning:[/yellow] {warning}", highlight=False)


@app.default
def add(  # noqa: PLR0913
    service_type: Annotated[str, Parameter(help="Service type, e.g. auth")],
    provider: Annotated[str, Parameter(help="Provider, e.g. clerk")],
    /,
    *,
    dry_run: Annotated[
        bool, Parameter(help="Compute every change but write nothing")
    ] = False,
    force: Annotated[
        bool, Parameter(help="Proceed despite conflicts with installed services")
    ] = False,
    run_post_steps: Annotated[
        bool, Parameter(help="Run the service's setup commands afterwards")
    ] = False,
    set_: Annotated[
        list[str] | None,
        Parameter(name="--set", help="Template value as key=value (repeatable)"),
    ] = None,
    format: Annotated[  # noqa: A002
        OutputFormat, Parameter(name=["--format", "-f"], help="Output format")
    ] = OutputFormat.TEXT,
) -> None:
    """Add a service to the project.

    Renders the service's injection points, merges its dependencies into
    package.json, appends its variables to .env.example and records it in
    .xaheen/services.json.

    Args:
        service_type: Service category.
        provider: Provider within the category.
        dry_run: Report the changes without applying them.
        force: Turn conflicts into warnings.
        run_post_steps: Run post steps such as code generation.
        set_: Extra values passed to the templates.
        format: Output format for the report.
    """
    from xaheen.cli._commands._components import get_project_root, get_service_injector

    ctx = CLIContext.get_current()
    console = get_error_console()

    try:
        values = parse_assignments(set_ or [])
    except ValueError as e:
        exit_with_error(str(e), ExitCode.VALIDATION_ERROR, console=console)

    options = InjectionOptions(
        dry_run=dry_run,
        force=force,
        run_post_steps=run_post_steps,
        values=values,
    )
    try:
        result = get_service_injector().inject(service_type, provider, options)
    except (XaheenError, OSError) as e:
        exit_with_exception(e, logger=ctx.logger, console=console)

    root = get_project_root()
    match format:
        case OutputFormat.JSON:
            print(format_json(_result_to_dict(result, root)))
        case OutputFormat.YAML:
            print(format_yaml(_result_to_dict(result, root)), end="")
        case _:
            _print_text(result, root, console)
            if not ctx.quiet:
                verb = "would add" if result.dry_run else "added"
                console.print(
                    f"[green]{result.service} {verb}[/green]", highlight=False
                )

    if not result.success:
        exit_with_error(
            "One or more post steps failed", ExitCode.IO_ERROR, console=console
        )
