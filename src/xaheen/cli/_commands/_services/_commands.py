# pyright: reportUnusedCallResult=false, reportUnusedFunction=false
"""Catalog and installed-service commands."""

from typing import Annotated

from cyclopts import Parameter

from xaheen.cli._commands._context import CLIContext, OutputFormat
from xaheen.cli._commands._shared import (
    exit_with_exception,
    format_json,
    format_table,
    format_yaml,
    get_error_console,
)
from xaheen.exceptions import XaheenError

from ._app import app


@app.command(name="list")
def list_services(
    *,
    service_type: Annotated[
        str | None, Parameter(name=["--type", "-t"], help="Only this service type")
    ] = None,
    format: Annotated[  # noqa: A002
        OutputFormat, Parameter(name=["--format", "-f"], help="Output format")
    ] = OutputFormat.TABLE,
) -> None:
    """List the services in the catalog.

    Args:
        service_type: Restrict the listing to one type.
        format: Output format.
    """
    from xaheen.cli._commands._components import get_service_catalog

    ctx = CLIContext.get_current()
    try:
        services = get_service_catalog().list_services()
    except XaheenError as e:
        exit_with_exception(e, logger=ctx.logger, console=get_error_console())

    if service_type is not None:
        services = [s for s in services if s.type == service_type]

    match format:
        case OutputFormat.JSON | OutputFormat.YAML:
            data = [
                {
                    "id": s.key,
                    "name": s.display_name,
                    "description": s.description,
                    "frameworks": [f.value for f in s.frameworks],
                    "conflicts_with": s.conflicts_with,
                }
                for s in services
            ]
            if format is OutputFormat.JSON:
                print(format_json(data))
            else:
                print(format_yaml(data), end="")
        case OutputFormat.TEXT:
            for s in services:
                print(f"{s.key:<24}{s.description}")
        case _:
            rows = [
                [
                    s.key,
                    s.display_name,
                    ", ".join(f.value for f in s.frameworks) or "all",
                    s.description,
                ]
                for s in services
            ]
            print(format_table(["ID", "Name", "Frameworks", "Description"], rows))


@app.command(name="installed")
def installed(
    *,
    format: Annotated[  # noqa: A002
        OutputFormat, Parameter(name=["--format", "-f"], help="Output format")
    ] = OutputFormat.TABLE,
) -> None:
    """List the services recorded in .xaheen/services.json.

    Args:
        format: Output format.
    """
    from xaheen.cli._commands._components import get_service_injector

    ctx = CLIContext.get_current()
    try:
        services = get_service_injector().list_installed()
    except XaheenError as e:
        exit_with_exception(e, logger=ctx.logger, console=get_error_console())

    match format:
        case OutputFormat.JSON:
            print(format_json([s.model_dump() for s in services]))
        case OutputFormat.YAML:
            print(format_yaml([s.model_dump() for s in services]), end="")
        case OutputFormat.TEXT:
            for s in services:
                print(f"{s.key:<24}{s.installed_at}")
        case _:
            rows = [[s.key, s.installed_at, str(len(s.files))] for s in services]
            print(format_table(["ID", "Installed", "Files"], rows))


@app.command(name="remove")
def remove(
    service_id: Annotated[str, Parameter(help="Installed service as type/provider")],
    /,
) -> None:
    """Forget an installed service.

    Only the record in .xaheen/services.json and the services entry of
    xaheen.config.json are dropped; files, packages and variables the
    service added stay in place.

    Args:
        service_id: The service to forget.
    """
    from xaheen.cli._commands._components import get_service_injector

    ctx = CLIContext.get_current()
    console = get_error_console()
    try:
        injector = get_service_injector()
        removed = injector.remove(service_id)
        manager = injector.config_manager
        if manager.fs.is_file(manager.unified_path):
            _ = manager.remove_service(removed.type)
    except (XaheenError, OSError) as e:
        exit_with_exception(e, logger=ctx.logger, console=console)

    if not ctx.quiet:
        console.print(f"[green]Removed {removed.key}[/green]", highlight=False)
