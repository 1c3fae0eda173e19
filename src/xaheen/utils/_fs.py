"""File system gateway.

All generator, template and configuration I/O goes through this class so
tests can observe or replace it, and so that parent directories are always
created on write.
"""

import shutil
from pathlib import Path
from typing import cast

import orjson


class FileSystemGateway:
    """Thin wrapper around pathlib for reads, writes and listings."""

    def exists(self, path: Path) -> bool:
        return path.exists()

    def is_file(self, path: Path) -> bool:
        return path.is_file()

    def is_dir(self, path: Path) -> bool:
        return path.is_dir()

    def read_text(self, path: Path) -> str:
        """Read a UTF-8 text file.

        Raises:
            FileNotFoundError: If the file does not exist.
        """
        return path.read_text(encoding="utf-8")

    def write_text(self, path: Path, content: str) -> None:
        """Write a UTF-8 text file, creating missing parent directories."""
        self.ensure_dir(path.parent)
        _ = path.write_text(content, encoding="utf-8")

    def append_text(self, path: Path, content: str) -> None:
        """Append to a UTF-8 text file, creating it when missing."""
        self.ensure_dir(path.parent)
        with path.open("a", encoding="utf-8") as f:
            _ = f.write(content)

    def ensure_dir(self, path: Path) -> None:
        path.mkdir(parents=True, exist_ok=True)

    def list_files(
        self,
        path: Path,
        pattern: str = "*",
        *,
        recursive: bool = True,
    ) -> list[Path]:
        """List files under ``path`` matching a glob pattern.

        Args:
            path: Directory to search.
            pattern: Glob pattern matched against file names.
            recursive: Whether to descend into subdirectories.

        Returns:
            Sorted list of matching files. Empty if ``path`` is not a directory.
        """
        if not path.is_dir():
            return []
        matches = path.rglob(pattern) if recursive else path.glob(pattern)
        return sorted(p for p in matches if p.is_file())

    def list_dirs(self, path: Path) -> list[Path]:
        """List the immediate subdirectories of ``path``, sorted by name."""
        if not path.is_dir():
            return []
        return sorted(p for p in path.iterdir() if p.is_dir())

    def mtime(self, path: Path) -> float:
        """Return the modification time of ``path``, or 0.0 if it is gone."""
        try:
            return path.stat().st_mtime
        except FileNotFoundError:
            return 0.0

    def remove(self, path: Path) -> None:
        """Remove a file or directory tree if it exists."""
        if path.is_dir():
            shutil.rmtree(path)
        elif path.exists():
            path.unlink()

    def read_json(self, path: Path) -> dict[str, object] | list[object]:
        """Read and parse a JSON file.

        Raises:
            FileNotFoundError: If the file does not exist.
            orjson.JSONDecodeError: If the file is not valid JSON.
        """
        return cast(
            "dict[str, object] | list[object]",
            orjson.loads(self.read_text(path)),
        )

    def write_json(self, path: Path, data: object) -> None:
        """Write ``data`` as 2-space indented JSON with a trailing newline."""
        content = orjson.dumps(data, option=orjson.OPT_INDENT_2).decode("utf-8")
        self.write_text(path, content + "\n")
