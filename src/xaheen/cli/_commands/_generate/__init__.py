# pyright: reportUnusedCallResult=false
"""Xaheen generate command - renders components, pages, services and more."""

from __future__ import annotations

from typing import TYPE_CHECKING, Annotated

from cyclopts import App, Parameter

from xaheen.cli._commands._context import CLIContext, OutputFormat
from xaheen.cli._commands._shared import (
    format_json,
    format_table,
    format_yaml,
    get_error_console,
)
from xaheen.exceptions import XaheenError
from xaheen.generators import GenerateOptions, GeneratorType

if TYPE_CHECKING:
    from pathlib import Path

    from xaheen.generators import GenerationResult

app = App(
    name="generate",
    help="Generate a component, page, service, hook or model",
    help_on_error=True,
)


def _display_path(path: Path, root: Path) -> str:
    return path.relative_to(root).as_posix() if path.is_relative_to(root) else str(path)


def _result_to_dict(result: GenerationResult, root: Path) -> dict[str, object]:
    return {
        "type": result.type.value,
        "name": result.name,
        "dry_run": result.dry_run,
        "files": [
            {
                "path": _display_path(f.path, root),
                "template": f.template_id,
                "stage": f.stage.value,
                "written": f.written,
            }
            for f in result.files
        ],
    }


def _format_text(result: GenerationResult, root: Path) -> str:
    verb = "would create" if result.dry_run else "created"
    return "\n".join(
        f"{verb}  {_display_path(f.path, root)}" for f in result.files
    )


@app.default
def generate(  # noqa: PLR0913
    generator_type: Annotated[
        GeneratorType, Parameter(help="What to generate")
    ],
    name: Annotated[str, Parameter(help="Name in any casing, e.g. user-card")],
    /,
    *,
    dry_run: Annotated[
        bool, Parameter(help="Render everything but write nothing")
    ] = False,
    force: Annotated[bool, Parameter(help="Overwrite existing files")] = False,
    tests: Annotated[
        bool | None,
        Parameter(help="Generate a test file (defaults to generators.tests)"),
    ] = None,
    stories: Annotated[
        bool | None,
        Parameter(help="Generate a story file (defaults to generators.stories)"),
    ] = None,
    output_dir: Annotated[
        str | None,
        Parameter(help="Base directory (defaults to generators.outputDir)"),
    ] = None,
    format: Annotated[  # noqa: A002
        OutputFormat, Parameter(name=["--format", "-f"], help="Output format")
    ] = OutputFormat.TEXT,
) -> None:
    """Generate files from templates.

    Stages run in order (main, test, story). An existing target stops the
    command unless --force is given; files written by earlier stages stay.

    Args:
        generator_type: component, page, service, hook or model.
        name: Artifact name.
        dry_run: List the plan without writing.
        force: Overwrite existing targets.
        tests: Override whether a test file is generated.
        stories: Override whether a story file is generated.
        output_dir: Override the base output directory.
        format: Output format for the file list.
    """
    from xaheen.cli._commands._components import get_generator, get_project_root
    from xaheen.cli._commands._shared import exit_with_exception

    ctx = CLIContext.get_current()
    console = get_error_console()
    root = get_project_root()

    options = GenerateOptions(
        dry_run=dry_run,
        force=force,
        tests=tests,
        stories=stories,
        output_dir=output_dir,
    )
    try:
        result = get_generator().generate(generator_type, name, options)
    except (XaheenError, OSError) as e:
        exit_with_exception(e, logger=ctx.logger, console=console)

    match format:
        case OutputFormat.JSON:
            print(format_json(_result_to_dict(result, root)))
        case OutputFormat.YAML:
            print(format_yaml(_result_to_dict(result, root)), end="")
        case OutputFormat.TABLE:
            rows = [
                [f.stage.value, _display_path(f.path, root), f.template_id]
                for f in result.files
            ]
            print(format_table(["Stage", "Path", "Template"], rows))
        case _:
            print(_format_text(result, root))
            if not ctx.quiet:
                noun = "file" if len(result.files) == 1 else "files"
                action = "planned" if result.dry_run else "generated"
                console.print(
                    f"[green]{len(result.files)} {noun} {action}[/green]",
                    highlight=False,
                )
