from collections.abc import Callable, Iterator
from pathlib import Path

import pytest
from rich.console import Console

from xaheen.cli import create_app
from xaheen.cli._commands._context import CLIContext


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        if Path(item.path).is_relative_to(Path(__file__).parent):
            item.add_marker(pytest.mark.integration)


@pytest.fixture
def xaheen_cli(console: Console) -> Iterator[Callable[..., int]]:
    """Create CLI app for testing that returns the exit code.

    The first argument is the project root; the rest are command tokens.
    """

    app = create_app(console=console, error_console=console)

    def _run(root: Path, *args: str) -> int:
        """Run CLI app and return exit code (0 if no SystemExit)."""

        try:
            app.meta(["--project-root", str(root), *args])
        except SystemExit as e:
            if e.code is None:
                return 0
            return e.code if isinstance(e.code, int) else 1
        else:
            return 0

    yield _run
    CLIContext.reset()
