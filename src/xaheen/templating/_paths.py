"""Template search path building utilities."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

import platformdirs

from xaheen.utils import get_templates_dir

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence


@dataclass(slots=True, frozen=True)
class TemplateSearchPaths:
    """Result of search path resolution.

    Attributes:
        paths: Ordered tuple of directories, highest precedence first.
        builtin: The packaged templates directory.
    """

    paths: tuple[Path, ...]
    builtin: Path


def get_user_templates_dir() -> Path:
    r"""Get the platform-specific user template override directory.

    - Linux: ``~/.config/xaheen/templates``
    - macOS: ``~/Library/Application Support/xaheen/templates``
    - Windows: ``%APPDATA%\xaheen\templates``
    """
    return platformdirs.user_config_path("xaheen") / "templates"


def _add_unique_path(path: Path, result_paths: list[Path], seen: set[Path]) -> None:
    resolved = path.resolve()
    if resolved not in seen:
        seen.add(resolved)
        result_paths.append(resolved)


def build_search_paths(
    project_root: Path,
    directories: Sequence[str | Path] = (".xaheen/templates",),
    *,
    user_dir: Path | None = None,
    include_builtin: bool = True,
) -> TemplateSearchPaths:
    """Build template search paths, highest precedence first.

    The order is:
    1. ``directories`` (relative entries resolve against ``project_root``);
       kept even when missing so new overrides can be saved there
    2. the user template directory, when it exists
    3. the packaged built-in templates

    Args:
        project_root: Root of the project being generated into.
        directories: Project template directories from configuration.
        user_dir: User template directory. Defaults to
            ``get_user_templates_dir()``.
        include_builtin: Whether to append the packaged templates.

    Returns:
        TemplateSearchPaths with deduplicated paths.
    """
    result_paths: list[Path] = []
    seen: set[Path] = set()

    for directory in directories:
        path = Path(directory)
        if not path.is_absolute():
            path = project_root / path
        _add_unique_path(path, result_paths, seen)

    user = user_dir if user_dir is not None else get_user_templates_dir()
    if user.is_dir():
        _add_unique_path(user, result_paths, seen)

    builtin = get_templates_dir()
    if include_builtin:
        _add_unique_path(builtin, result_paths, seen)

    return TemplateSearchPaths(paths=tuple(result_paths), builtin=builtin)


def is_dev_environment(environ: Mapping[str, str] | None = None) -> bool:
    """Whether the environment asks for template hot reload.

    True when ``NODE_ENV`` is ``development`` or ``XAHEEN_DEV`` is truthy.
    """
    env = os.environ if environ is None else environ
    if env.get("NODE_ENV", "").lower() == "development":
        return True
    return env.get("XAHEEN_DEV", "").lower() in {"1", "true", "yes", "on"}
