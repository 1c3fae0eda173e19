"""Template hot reload using watchfiles.

A background thread consumes watchfiles change batches and invalidates the
engine's cached entries for every changed template, sidecar or partial.
Invalidation is idempotent, so the thread never needs to coordinate with
renders beyond the cache's own lock.
"""

from __future__ import annotations

import threading
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Sequence

    from structlog.typing import FilteringBoundLogger
    from watchfiles import Change

    from ._engine import TemplateEngine

WATCHED_SUFFIXES: frozenset[str] = frozenset({".hbs", ".json"})


def format_change(change: Change, path: str) -> str:
    """Format a file change event as a string.

    Args:
        change: The type of change (added, modified, deleted).
        path: The path to the changed file.

    Returns:
        A formatted string describing the change.
    """
    from watchfiles import Change as WatchChange  # noqa: PLC0415

    change_names = {
        WatchChange.added: "added",
        WatchChange.modified: "modified",
        WatchChange.deleted: "deleted",
    }
    change_name = change_names.get(change, "unknown")
    return f"{change_name}: {path}"


def is_template_file(_change: Change, changed_path: str) -> bool:
    """watchfiles filter accepting template sources and sidecars."""
    return Path(changed_path).suffix in WATCHED_SUFFIXES


class TemplateWatcher:
    """Watches template directories and invalidates the engine on change.

    Args:
        engine: Engine whose cache entries are invalidated.
        directories: Directories to watch. Missing ones are skipped.
        on_change: Called with each formatted change after invalidation.
        logger: Optional logger.
    """

    def __init__(
        self,
        engine: TemplateEngine,
        directories: Sequence[Path],
        *,
        on_change: Callable[[str, list[str]], None] | None = None,
        logger: FilteringBoundLogger | None = None,
    ) -> None:
        self._engine: TemplateEngine = engine
        self._directories: list[Path] = list(directories)
        self._on_change: Callable[[str, list[str]], None] | None = on_change
        self._logger: FilteringBoundLogger | None = logger
        self._stop_event: threading.Event = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def directories(self) -> list[Path]:
        """Directories that exist and will be watched."""
        return [d for d in self._directories if d.is_dir()]

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def handle_changes(self, changes: Iterable[tuple[Change, str]]) -> list[str]:
        """Invalidate the engine for one batch of changes.

        Returns:
            IDs of the compiled templates that were dropped.
        """
        dropped: list[str] = []
        for change, changed_path in changes:
            path = Path(changed_path)
            if path.suffix not in WATCHED_SUFFIXES:
                continue
            template_ids = self._engine.invalidate_path(path)
            dropped.extend(template_ids)
            line = format_change(change, changed_path)
            if self._logger is not None:
                self._logger.info(
                    "template_file_changed",
                    change=line,
                    template_ids=template_ids,
                )
            if self._on_change is not None:
                self._on_change(line, template_ids)
        return dropped

    def run(self) -> None:
        """Watch until ``stop()`` is called. Blocks the calling thread."""
        from watchfiles import watch  # noqa: PLC0415

        directories = self.directories
        if not directories:
            if self._logger is not None:
                self._logger.warning("template_watch_no_directories")
            return

        for changes in watch(
            *directories,
            watch_filter=is_template_file,
            stop_event=self._stop_event,
        ):
            _ = self.handle_changes(changes)

    def start(self) -> None:
        """Start watching on a daemon thread."""
        if self.running:
            return
        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self.run, name="xaheen-template-watcher", daemon=True
        )
        self._thread.start()

    def stop(self, timeout: float | None = 5.0) -> None:
        """Signal the watch loop to exit and wait for the thread."""
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
