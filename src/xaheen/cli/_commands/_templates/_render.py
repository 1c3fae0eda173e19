# pyright: reportUnusedCallResult=false, reportUnusedFunction=false
# pyright: reportAny=false, reportExplicitAny=false
"""Render command for templates."""

from pathlib import Path
from typing import Annotated, Any

from cyclopts import Parameter

from xaheen.cli._commands._context import CLIContext
from xaheen.cli._commands._shared import (
    ExitCode,
    exit_with_error,
    exit_with_exception,
    get_error_console,
)
from xaheen.exceptions import XaheenError

from ._app import app

YAML_SUFFIXES = (".yaml", ".yml")


def _parse_data(text: str, *, yaml_syntax: bool = False) -> dict[str, Any]:
    """Parse render data from JSON (or YAML) text.

    Raises:
        ValueError: If the text does not parse or is not a mapping.
    """
    import orjson
    import yaml

    try:
        data: Any = yaml.safe_load(text) if yaml_syntax else orjson.loads(text)
    except (orjson.JSONDecodeError, yaml.YAMLError) as e:
        msg = f"Invalid render data: {e}"
        raise ValueError(msg) from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        msg = "Render data must be an object"
        raise ValueError(msg)
    return data


def load_render_data(data: str | None, data_file: Path | None) -> dict[str, Any]:
    """Merge ``--data-file`` and ``--data``; inline values win.

    Raises:
        ValueError: If either source is invalid.
        OSError: If the data file cannot be read.
    """
    merged: dict[str, Any] = {}
    if data_file is not None:
        text = data_file.read_text(encoding="utf-8")
        merged.update(
            _parse_data(text, yaml_syntax=data_file.suffix.lower() in YAML_SUFFIXES)
        )
    if data is not None:
        merged.update(_parse_data(data))
    return merged


@app.command(name="render")
def render(
    template_id: Annotated[str, Parameter(help="Template ID, e.g. component/react")],
    /,
    *,
    data: Annotated[
        str | None, Parameter(help="Render data as a JSON object")
    ] = None,
    data_file: Annotated[
        Path | None, Parameter(help="JSON or YAML file with render data")
    ] = None,
    output: Annotated[
        Path | None, Parameter(name=["--output", "-o"], help="Write to this file")
    ] = None,
) -> None:
    """Render a template and print the result.

    Args:
        template_id: The template to render.
        data: Inline JSON data.
        data_file: Data file; inline data overrides its keys.
        output: Write the result to a file instead of stdout.
    """
    from xaheen.cli._commands._components import get_template_engine

    ctx = CLIContext.get_current()
    console = get_error_console()

    try:
        context = load_render_data(data, data_file)
    except ValueError as e:
        exit_with_error(str(e), ExitCode.VALIDATION_ERROR, console=console)
    except OSError as e:
        exit_with_exception(e, logger=ctx.logger, console=console)

    try:
        rendered = get_template_engine().render(template_id, context)
        if output is not None:
            output.parent.mkdir(parents=True, exist_ok=True)
            output.write_text(rendered, encoding="utf-8")
    except (XaheenError, OSError) as e:
        exit_with_exception(e, logger=ctx.logger, console=console)

    if output is None:
        print(rendered, end="" if rendered.endswith("\n") else "\n")
    elif not ctx.quiet:
        console.print(f"[green]Wrote[/green] {output}", highlight=False)
