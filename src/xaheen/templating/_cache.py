"""Compiled template cache."""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path

    from ._models import CacheEntry


class CompilationCache:
    """Maps template IDs to compiled entries.

    Entries are replaced wholesale, so a lock around the dict is enough for
    the watcher thread to invalidate while the main thread renders.
    """

    def __init__(self) -> None:
        self._entries: dict[str, CacheEntry] = {}
        self._lock: threading.Lock = threading.Lock()

    def get(self, template_id: str) -> CacheEntry | None:
        with self._lock:
            return self._entries.get(template_id)

    def put(self, template_id: str, entry: CacheEntry) -> None:
        with self._lock:
            self._entries[template_id] = entry

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def invalidate(self, template_id: str) -> bool:
        """Drop one entry. Returns whether it was cached."""
        with self._lock:
            return self._entries.pop(template_id, None) is not None

    def invalidate_path(self, path: Path) -> list[str]:
        """Drop every entry compiled from ``path``.

        Returns:
            IDs of the dropped entries.
        """
        target = path.resolve()
        with self._lock:
            stale = [
                template_id
                for template_id, entry in self._entries.items()
                if any(p.resolve() == target for p in entry.paths)
            ]
            for template_id in stale:
                del self._entries[template_id]
        return stale

    def __contains__(self, template_id: object) -> bool:
        with self._lock:
            return template_id in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
