# pyright: reportUnusedCallResult=false
"""CLI context for global state management.

The CLIContext is set once at CLI startup and made available to all commands
via contextvars.
"""

from __future__ import annotations

import contextvars
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path

    from structlog.typing import FilteringBoundLogger

    from xaheen.config import LoadedConfig, XaheenConfig


class OutputFormat(StrEnum):
    """Supported output formats for commands."""

    TEXT = "text"
    JSON = "json"
    YAML = "yaml"
    TABLE = "table"


# Thread-safe context variable for CLIContext
_current_cli_context: contextvars.ContextVar[CLIContext | None] = (
    contextvars.ContextVar("cli_context", default=None)
)


@dataclass(frozen=True, slots=True)
class CLIContext:
    """Global CLI context with configuration and options.

    Attributes:
        loaded: Loaded configuration and where it came from.
        verbose: Enable verbose output with additional details.
        quiet: Suppress non-essential output.
        no_color: Disable colored output.
        project_root: Resolved project root path.
        config_path: Explicit config file given with ``--config``.
        config_error: Error message if config loading failed.
        logger: Structured logger for CLI commands (writes to file only).
    """

    loaded: LoadedConfig = field(repr=False)
    verbose: bool = False
    quiet: bool = False
    no_color: bool = False
    project_root: Path | None = None
    config_path: Path | None = None
    config_error: str | None = None
    logger: FilteringBoundLogger | None = field(default=None, repr=False)

    @property
    def config(self) -> XaheenConfig:
        return self.loaded.config

    @classmethod
    def get_current(cls) -> CLIContext:
        """Get current active CLIContext, or create a default if not set.

        Returns:
            The currently active CLIContext, or a default instance with the
            built-in defaults if none is set.
        """
        ctx = _current_cli_context.get()
        if ctx is not None:
            return ctx

        from xaheen.config import ConfigOrigin, LoadedConfig, XaheenConfig

        defaults = LoadedConfig(config=XaheenConfig(), origin=ConfigOrigin.DEFAULTS)
        return cls(loaded=defaults)

    @classmethod
    def set_current(cls, ctx: CLIContext) -> None:
        _current_cli_context.set(ctx)

    @classmethod
    def reset(cls) -> None:
        """Reset to default context.

        This is primarily useful for testing to ensure a clean state between tests.
        """
        _current_cli_context.set(None)
