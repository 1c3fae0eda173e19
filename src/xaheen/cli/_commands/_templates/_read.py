# pyright: reportUnusedCallResult=false, reportUnusedFunction=false
"""Read commands for templates: list and resolve."""

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
def list_templates(
    *,
    prefix: Annotated[
        str | None, Parameter(help="Only IDs starting with this prefix")
    ] = None,
    format: Annotated[  # noqa: A002
        OutputFormat, Parameter(name=["--format", "-f"], help="Output format")
    ] = OutputFormat.TABLE,
) -> None:
    """List every template visible from the project.

    Project overrides in .xaheen/templates shadow user and built-in
    templates with the same ID.

    Args:
        prefix: Restrict the listing to IDs with this prefix, e.g. component/.
        format: Output format.
    """
    from xaheen.cli._commands._components import get_template_engine

    ctx = CLIContext.get_current()
    try:
        store = get_template_engine().store
        templates = [
            store.load(template_id)
            for template_id in store.list_ids()
            if prefix is None or template_id.startswith(prefix)
        ]
    except (XaheenError, OSError) as e:
        exit_with_exception(e, logger=ctx.logger, console=get_error_console())

    match format:
        case OutputFormat.JSON | OutputFormat.YAML:
            data = [
                {
                    "id": t.id,
                    "name": t.name,
                    "parent": t.parent,
                    "description": t.description,
                    "path": str(t.path or t.metadata_path or ""),
                }
                for t in templates
            ]
            if format is OutputFormat.JSON:
                print(format_json(data))
            else:
                print(format_yaml(data), end="")
        case OutputFormat.TEXT:
            for t in templates:
                print(t.id)
        case _:
            rows = [
                [t.id, t.name, t.parent or "", t.description or ""] for t in templates
            ]
            print(format_table(["ID", "Name", "Parent", "Description"], rows))


@app.command(name="resolve")
def resolve(
    template_id: Annotated[str, Parameter(help="Template ID, e.g. component/react")],
    /,
) -> None:
    """Print a template's source with its inheritance chain applied.

    Args:
        template_id: The template to resolve.
    """
    from xaheen.cli._commands._components import get_template_engine

    ctx = CLIContext.get_current()
    try:
        source = get_template_engine().resolve(template_id)
    except (XaheenError, OSError) as e:
        exit_with_exception(e, logger=ctx.logger, console=get_error_console())

    print(source, end="" if source.endswith("\n") else "\n")
