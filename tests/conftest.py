"""Shared test fixtures for Xaheen tests."""

import json
from dataclasses import dataclass
from pathlib import Path

import pytest
from rich.console import Console


@dataclass(frozen=True, slots=True)
class JsProject:
    """Paths for a JavaScript test project."""

    root: Path
    package_json: Path
    templates_dir: Path


def write_package_json(root: Path, **fields: object) -> Path:
    """Write a package.json with the given top-level fields."""
    data: dict[str, object] = {"name": "test-app", "version": "1.0.0", **fields}
    path = root / "package.json"
    _ = path.write_text(json.dumps(data, indent=2), encoding="utf-8")
    return path


@pytest.fixture
def console() -> Console:
    return Console(
        width=70,
        force_terminal=True,
        highlight=False,
        color_system=None,
        legacy_windows=False,
    )


@pytest.fixture
def js_project(tmp_path: Path) -> JsProject:
    """Create a React + TypeScript project using npm.

    Structure:
        tmp_path/
            project/
                package.json       # react + typescript dependencies
                package-lock.json
                src/
    """
    root = tmp_path / "project"
    root.mkdir()
    package_json = write_package_json(
        root,
        dependencies={"react": "^18.2.0", "react-dom": "^18.2.0"},
        devDependencies={"typescript": "^5.4.0"},
    )
    _ = (root / "package-lock.json").write_text("{}", encoding="utf-8")
    (root / "src").mkdir()
    return JsProject(
        root=root,
        package_json=package_json,
        templates_dir=root / ".xaheen" / "templates",
    )


@pytest.fixture(autouse=True)
def _clean_xaheen_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep XAHEEN_* variables of the host out of the tests."""
    import os

    for key in list(os.environ):
        if key.startswith("XAHEEN_"):
            monkeypatch.delenv(key)
