# pyright: reportUnusedCallResult=false, reportUnusedFunction=false
"""Watch command for template hot reload."""

from xaheen.cli._commands._context import CLIContext
from xaheen.cli._commands._shared import (
    ExitCode,
    exit_with_error,
    get_error_console,
)

from ._app import app


@app.command(name="watch")
def watch() -> None:
    """Watch the template directories and report changes until interrupted.

    Every change drops the compiled templates built from the changed file,
    so the next render picks up the new source.
    """
    from xaheen.cli._commands._components import get_search_paths, get_template_engine
    from xaheen.templating import TemplateWatcher

    ctx = CLIContext.get_current()
    console = get_error_console()

    engine = get_template_engine(dev_mode=True)

    def _report(line: str, template_ids: list[str]) -> None:
        dropped = f" [dim]({', '.join(template_ids)})[/dim]" if template_ids else ""
        console.print(f"{line}{dropped}", highlight=False)

    watcher = TemplateWatcher(
        engine, get_search_paths().paths, on_change=_report, logger=ctx.logger
    )
    directories = watcher.directories
    if not directories:
        exit_with_error(
            "No template directories to watch", ExitCode.NOT_FOUND, console=console
        )

    if not ctx.quiet:
        for directory in directories:
            console.print(f"[dim]Watching {directory}[/dim]", highlight=False)
    try:
        watcher.run()
    except KeyboardInterrupt:
        watcher.stop()
