# pyright: reportUnusedCallResult=false, reportUnusedFunction=false
"""Write commands for Xaheen configuration."""

from typing import Annotated

from cyclopts import Parameter

from xaheen.cli._commands._context import CLIContext
from xaheen.cli._commands._shared import (
    exit_with_exception,
    format_json,
    get_error_console,
)
from xaheen.config import ConfigOrigin
from xaheen.exceptions import ConfigError

from ._app import app


@app.command(name="migrate")
def migrate(
    *,
    dry_run: Annotated[
        bool, Parameter(help="Print the migrated configuration without writing it")
    ] = False,
    force: Annotated[
        bool, Parameter(help="Overwrite an existing xaheen.config.json")
    ] = False,
) -> None:
    """Migrate legacy configuration to xaheen.config.json.

    Reads .xaheen/config.json or xala.config.js, in that order, falling back
    to defaults detected from package.json.

    Args:
        dry_run: Show the result only.
        force: Replace an existing unified file.
    """
    from xaheen.cli._commands._components import get_config_manager

    ctx = CLIContext.get_current()
    console = get_error_console()
    try:
        result = get_config_manager().migrate(dry_run=dry_run, force=force)
    except (ConfigError, OSError) as e:
        exit_with_exception(e, logger=ctx.logger, console=console)

    if dry_run:
        print(format_json(result.config.to_dict()))

    if not ctx.quiet:
        source = (
            "detected defaults"
            if result.origin is ConfigOrigin.DEFAULTS
            else f"{result.origin.value} config ({result.source})"
        )
        verb = "Would migrate" if dry_run else "Migrated"
        console.print(
            f"[green]{verb}[/green] {source} to {result.target}", highlight=False
        )


@app.command(name="init")
def init(
    *,
    force: Annotated[
        bool, Parameter(help="Overwrite an existing xaheen.config.json")
    ] = False,
) -> None:
    """Create xaheen.config.json from the detected project settings.

    Args:
        force: Replace an existing unified file.
    """
    from xaheen.cli._commands._components import get_config_manager

    ctx = CLIContext.get_current()
    console = get_error_console()
    try:
        loaded = get_config_manager().initialize(force=force)
    except (ConfigError, OSError) as e:
        exit_with_exception(e, logger=ctx.logger, console=console)

    if not ctx.quiet:
        project = loaded.config.project
        console.print(
            f"[green]Created[/green] {loaded.path} "
            f"({project.framework.value}, {project.package_manager.value})",
            highlight=False,
        )
