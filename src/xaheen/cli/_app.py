"""The command-line interface for Xaheen."""
# ruff: noqa: TC003  # Path needed at runtime for cyclopts parameter parsing

from pathlib import Path
from typing import Annotated, cast

from cyclopts import App, Parameter
from rich.console import Console

from xaheen.config import ConfigManager, safe_load_config
from xaheen.utils import LogFormatType, create_cli_logger, find_project_root

from ._commands import register_commands
from ._commands._context import CLIContext

APP_NAME = "xaheen"
APP_HELP = "Generate code and add services to JavaScript projects."


def _run_with_context(  # noqa: PLR0913
    app: App,
    tokens: tuple[str, ...],
    *,
    verbose: bool,
    quiet: bool,
    no_color: bool,
    config: Path | None,
    project_root: Path | None,
) -> None:
    root = (project_root or find_project_root()).resolve()

    # Load configuration
    loaded_config, config_error = safe_load_config(
        ConfigManager(root), config_path=config
    )

    # Create CLI logger from config settings
    logging = loaded_config.config.logging
    cli_logger = create_cli_logger(
        root,
        level="debug" if verbose else logging.level.value,
        log_format=cast("LogFormatType", logging.format.value),
        log_file=logging.file,
        max_bytes=logging.max_bytes,
        backup_count=logging.backup_count,
        command=tokens[0] if tokens else "",
    )

    # Create and set CLI context
    ctx = CLIContext(
        loaded=loaded_config,
        verbose=verbose,
        quiet=quiet,
        no_color=no_color,
        project_root=root,
        config_path=config,
        config_error=config_error,
        logger=cli_logger,
    )
    CLIContext.set_current(ctx)

    try:
        app(tokens)
    finally:
        CLIContext.reset()


def create_app(
    console: Console | None = None,
    error_console: Console | None = None,
    *,
    exit_on_error: bool = True,
) -> App:
    if console is None:
        console = Console()
    if error_console is None:
        error_console = Console(stderr=True)
    app = App(
        name=APP_NAME,
        help=APP_HELP,
        help_on_error=True,
        console=console,
        error_console=error_console,
        exit_on_error=exit_on_error,
    )

    @app.meta.default
    def _default(  # pyright: ignore[reportUnusedFunction]
        *tokens: Annotated[str, Parameter(show=False, allow_leading_hyphen=True)],
        verbose: Annotated[bool, Parameter(help="Enable verbose output")] = False,
        quiet: Annotated[bool, Parameter(help="Suppress non-essential output")] = False,
        no_color: Annotated[
            bool, Parameter(name="--no-color", help="Disable colored output")
        ] = False,
        config: Annotated[
            Path | None, Parameter(name="--config", help="Path to config file")
        ] = None,
        project_root: Annotated[
            Path | None, Parameter(name="--project-root", help="Path to project root")
        ] = None,
    ) -> None:
        """Launch Xaheen CLI with global options.

        Args:
            tokens: Command tokens to pass to subcommands.
            verbose: Enable verbose output and debug logging.
            quiet: Suppress non-essential output.
            no_color: Disable colored output.
            config: Explicit path to a xaheen.config.json file.
            project_root: Path to project root directory.
        """
        _run_with_context(
            app,
            tokens,
            verbose=verbose,
            quiet=quiet,
            no_color=no_color,
            config=config,
            project_root=project_root,
        )

    register_commands(app)
    return app


app = create_app()


def main() -> None:
    """Default entrypoint for the `xaheen` CLI."""
    app = create_app()
    app.meta()


if __name__ == "__main__":
    main()
