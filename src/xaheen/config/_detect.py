# pyright: reportAny=false, reportExplicitAny=false
"""Project detection used to synthesise a default configuration.

Detection only inspects files: ``package.json`` dependencies decide the
framework, lockfiles decide the package manager, and workspace declarations
or tool marker files decide the monorepo layout.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Literal

import yaml

from xaheen.exceptions import ConfigLoadError
from xaheen.utils import FileSystemGateway

from ._loader import read_json_file
from ._models import (
    Framework,
    MonorepoConfig,
    MonorepoTool,
    PackageManager,
    ProjectConfig,
    XaheenConfig,
)

if TYPE_CHECKING:
    from pathlib import Path

    from structlog.typing import FilteringBoundLogger

# Checked in order; meta-frameworks come before the library they build on
FRAMEWORK_PRIORITY: tuple[tuple[str, Framework], ...] = (
    ("next", Framework.NEXTJS),
    ("nuxt", Framework.NUXT),
    ("@remix-run/react", Framework.REMIX),
    ("@remix-run/node", Framework.REMIX),
    ("@sveltejs/kit", Framework.SVELTEKIT),
    ("@angular/core", Framework.ANGULAR),
    ("@nestjs/core", Framework.NESTJS),
    ("solid-js", Framework.SOLID),
    ("vue", Framework.VUE),
    ("svelte", Framework.SVELTE),
    ("react", Framework.REACT),
    ("hono", Framework.HONO),
    ("fastify", Framework.FASTIFY),
    ("express", Framework.EXPRESS),
)

DEFAULT_FRAMEWORK = Framework.REACT

LOCKFILES: tuple[tuple[str, PackageManager], ...] = (
    ("pnpm-lock.yaml", PackageManager.PNPM),
    ("yarn.lock", PackageManager.YARN),
    ("bun.lockb", PackageManager.BUN),
    ("bun.lock", PackageManager.BUN),
    ("package-lock.json", PackageManager.NPM),
)

MONOREPO_MARKERS: tuple[tuple[str, MonorepoTool], ...] = (
    ("nx.json", MonorepoTool.NX),
    ("turbo.json", MonorepoTool.TURBO),
    ("lerna.json", MonorepoTool.LERNA),
)

DEPENDENCY_SECTIONS = ("dependencies", "devDependencies", "peerDependencies")

type MonorepoStructure = Literal["nx", "turbo", "lerna", "apps-packages", "workspaces"]


@dataclass(frozen=True, slots=True)
class MonorepoInfo:
    """Detected monorepo layout.

    Attributes:
        is_monorepo: Whether any monorepo signal was found.
        tool: Orchestration tool, if a marker file was found.
        structure: Layout name, None for single-package projects.
        workspaces: Workspace globs from package.json or pnpm-workspace.yaml.
        apps: Directory names under ``apps/``.
        packages: Directory names under ``packages/``.
    """

    is_monorepo: bool = False
    tool: MonorepoTool | None = None
    structure: MonorepoStructure | None = None
    workspaces: list[str] = field(default_factory=list)
    apps: list[str] = field(default_factory=list)
    packages: list[str] = field(default_factory=list)

    def to_config(self) -> MonorepoConfig:
        tool = self.tool
        if tool is None and self.workspaces:
            tool = MonorepoTool.WORKSPACES
        return MonorepoConfig(
            enabled=self.is_monorepo, tool=tool, workspaces=list(self.workspaces)
        )


def dependency_names(package: dict[str, Any]) -> set[str]:
    """Return every dependency name declared in a package.json mapping."""
    names: set[str] = set()
    for section in DEPENDENCY_SECTIONS:
        deps = package.get(section)
        if isinstance(deps, dict):
            names.update(str(name) for name in deps)
    return names


class ProjectDetector:
    """Sniffs framework, toolchain and layout from a project directory.

    Args:
        project_root: Directory holding package.json.
        fs: File system gateway.
        logger: Optional logger.
    """

    def __init__(
        self,
        project_root: Path,
        *,
        fs: FileSystemGateway | None = None,
        logger: FilteringBoundLogger | None = None,
    ) -> None:
        self._root: Path = project_root
        self._fs: FileSystemGateway = fs or FileSystemGateway()
        self._logger: FilteringBoundLogger | None = logger

    def read_package_json(self) -> dict[str, Any]:
        """Return package.json as a dict, or ``{}`` if missing or invalid."""
        path = self._root / "package.json"
        if not self._fs.is_file(path):
            return {}
        try:
            return read_json_file(path, self._fs)
        except (ConfigLoadError, OSError) as e:
            if self._logger is not None:
                self._logger.warning(
                    "package_json_unreadable", path=str(path), error=str(e)
                )
            return {}

    def detect_framework(self, package: dict[str, Any]) -> Framework:
        names = dependency_names(package)
        for dependency, framework in FRAMEWORK_PRIORITY:
            if dependency in names:
                return framework
        return DEFAULT_FRAMEWORK

    def detect_package_manager(self, package: dict[str, Any]) -> PackageManager:
        """Detect the package manager from lockfiles, then ``packageManager``."""
        for lockfile, manager in LOCKFILES:
            if self._fs.exists(self._root / lockfile):
                return manager

        declared = package.get("packageManager")
        if isinstance(declared, str):
            name = declared.split("@", 1)[0].strip().lower()
            try:
                return PackageManager(name)
            except ValueError:
                pass
        return PackageManager.NPM

    def detect_typescript(self, package: dict[str, Any]) -> bool:
        if "typescript" in dependency_names(package):
            return True
        return self._fs.exists(self._root / "tsconfig.json")

    def detect_monorepo(self, package: dict[str, Any]) -> MonorepoInfo:
        workspaces = self._workspace_globs(package)

        tool: MonorepoTool | None = None
        for marker, marker_tool in MONOREPO_MARKERS:
            if self._fs.exists(self._root / marker):
                tool = marker_tool
                break

        apps = self._child_dirs("apps")
        packages = self._child_dirs("packages")

        structure: MonorepoStructure | None = None
        if tool is not None:
            structure = tool.value  # pyright: ignore[reportAssignmentType]
        elif self._fs.is_dir(self._root / "apps") and self._fs.is_dir(
            self._root / "packages"
        ):
            structure = "apps-packages"
        elif workspaces:
            structure = "workspaces"

        return MonorepoInfo(
            is_monorepo=structure is not None,
            tool=tool,
            structure=structure,
            workspaces=workspaces,
            apps=apps if structure is not None else [],
            packages=packages if structure is not None else [],
        )

    def detect(self) -> XaheenConfig:
        """Synthesise a configuration from the project files."""
        package = self.read_package_json()
        name = package.get("name")
        project = ProjectConfig(
            name=name if isinstance(name, str) and name else self._root.name,
            framework=self.detect_framework(package),
            package_manager=self.detect_package_manager(package),
            typescript=self.detect_typescript(package),
            monorepo=self.detect_monorepo(package).to_config(),
        )
        if self._logger is not None:
            self._logger.debug(
                "project_detected",
                name=project.name,
                framework=project.framework.value,
                package_manager=project.package_manager.value,
                typescript=project.typescript,
                monorepo=project.monorepo.enabled,
            )
        return XaheenConfig(project=project)

    def _workspace_globs(self, package: dict[str, Any]) -> list[str]:
        declared = package.get("workspaces")
        if isinstance(declared, dict):
            declared = declared.get("packages")
        if isinstance(declared, list):
            return [str(glob) for glob in declared]

        pnpm_workspace = self._root / "pnpm-workspace.yaml"
        if self._fs.is_file(pnpm_workspace):
            try:
                data = yaml.safe_load(self._fs.read_text(pnpm_workspace))
            except (yaml.YAMLError, UnicodeDecodeError) as e:
                if self._logger is not None:
                    self._logger.warning(
                        "pnpm_workspace_unreadable",
                        path=str(pnpm_workspace),
                        error=str(e),
                    )
                return []
            if isinstance(data, dict) and isinstance(data.get("packages"), list):
                return [str(glob) for glob in data["packages"]]
        return []

    def _child_dirs(self, name: str) -> list[str]:
        return [child.name for child in self._fs.list_dirs(self._root / name)]
