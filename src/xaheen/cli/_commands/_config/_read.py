# pyright: reportUnusedCallResult=false, reportUnusedFunction=false
# pyright: reportExplicitAny=false, reportAny=false
"""Read commands for viewing Xaheen configuration."""

from typing import Annotated, Any

from cyclopts import Parameter

from xaheen.cli._commands._context import CLIContext, OutputFormat
from xaheen.cli._commands._shared import (
    format_json,
    format_table,
    format_yaml,
    get_error_console,
)

from ._app import app


def _flatten(data: dict[str, Any], prefix: str = "") -> list[tuple[str, Any]]:
    """Flatten nested mappings into dotted keys, in document order."""
    items: list[tuple[str, Any]] = []
    for key, value in data.items():
        full_key = f"{prefix}.{key}" if prefix else key
        if isinstance(value, dict) and value:
            items.extend(_flatten(value, full_key))
        else:
            items.append((full_key, value))
    return items


def _format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, list):
        return format_json(value, indent=False)
    if value is None:
        return ""
    return str(value)


@app.command(name="show")
def show(
    *,
    format: Annotated[  # noqa: A002
        OutputFormat, Parameter(name=["--format", "-f"], help="Output format")
    ] = OutputFormat.JSON,
) -> None:
    """Show the effective configuration.

    The source of the configuration (unified file, legacy file, xala config
    or detected defaults) is reported on stderr.

    Args:
        format: Output format.
    """
    ctx = CLIContext.get_current()
    data = ctx.config.to_dict()

    match format:
        case OutputFormat.YAML:
            print(format_yaml(data), end="")
        case OutputFormat.TABLE:
            rows = [[key, _format_value(value)] for key, value in _flatten(data)]
            print(format_table(["Key", "Value"], rows))
        case OutputFormat.TEXT:
            for key, value in _flatten(data):
                print(f"{key} = {_format_value(value)}")
        case _:
            print(format_json(data))

    if not ctx.quiet:
        origin = ctx.loaded.origin.value
        where = f" ({ctx.loaded.path})" if ctx.loaded.path else ""
        console = get_error_console()
        console.print(f"[dim]Source: {origin}{where}[/dim]", soft_wrap=True)
        if ctx.config_error:
            console.print(
                f"[yellow]Warning:[/yellow] {ctx.config_error}", highlight=False
            )
