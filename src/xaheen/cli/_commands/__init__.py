"""Xaheen CLI commands."""
# pyright: reportUnusedCallResult=false

from __future__ import annotations

from typing import TYPE_CHECKING

from ._add import app as add_app
from ._config import app as config_app
from ._context import CLIContext, OutputFormat
from ._generate import app as generate_app
from ._services import app as services_app
from ._shared import (
    ExitCode,
    FormattableData,
    exit_code_for_exception,
    exit_with_error,
    exit_with_exception,
    exit_with_success,
    format_json,
    format_table,
    format_yaml,
    get_error_console,
)
from ._templates import app as templates_app

if TYPE_CHECKING:
    from cyclopts import App

__all__ = [
    "CLIContext",
    "ExitCode",
    "FormattableData",
    "OutputFormat",
    "add_app",
    "config_app",
    "exit_code_for_exception",
    "exit_with_error",
    "exit_with_exception",
    "exit_with_success",
    "format_json",
    "format_table",
    "format_yaml",
    "generate_app",
    "get_error_console",
    "register_commands",
    "services_app",
    "templates_app",
]


def register_commands(app: App) -> None:
    app.command(add_app)
    app.command(config_app)
    app.command(generate_app)
    app.command(services_app)
    app.command(templates_app)

    @app.command(name="--prefix")
    def _prefix() -> None:  # pyright: ignore[reportUnusedFunction]
        """Show Xaheen's install path."""
        from xaheen.utils import get_package_dir

        print(get_package_dir())
