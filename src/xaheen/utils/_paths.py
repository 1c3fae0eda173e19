from importlib.resources import files
from pathlib import Path

# Files or directories that mark the root of a project Xaheen can work on
PROJECT_MARKERS: tuple[str, ...] = (
    "xaheen.config.json",
    ".xaheen",
    "xala.config.js",
    "package.json",
)


def find_project_root(start: Path | None = None) -> Path:
    """Find the project root by searching upward for a project marker.

    Searches from the starting directory upward until a directory holding one
    of ``PROJECT_MARKERS`` is found. When the filesystem root is reached
    without a match, the starting directory itself is the project root.

    Args:
        start: Directory to start searching from. Defaults to the current
            working directory.

    Returns:
        Path to the project root directory.
    """
    origin = (start or Path.cwd()).resolve()
    current = origin

    while True:
        if any((current / marker).exists() for marker in PROJECT_MARKERS):
            return current
        parent = current.parent
        if parent == current:  # Reached filesystem root
            return origin
        current = parent


def get_xaheen_dir(project_root: Path) -> Path:
    """Get the path to the .xaheen/ directory of a project."""
    return project_root / ".xaheen"


def get_xaheen_log_dir(project_root: Path) -> Path:
    """Get the path to the logs/ directory inside .xaheen/."""
    return get_xaheen_dir(project_root) / "logs"


def get_xaheen_cli_log_file(project_root: Path) -> Path:
    """Get the path to the CLI log file inside .xaheen/logs/.

    Returns:
        Path to the CLI log file (.xaheen/logs/cli.log).
    """
    return get_xaheen_log_dir(project_root) / "cli.log"


def get_services_state_file(project_root: Path) -> Path:
    """Get the path to the installed-services record (.xaheen/services.json)."""
    return get_xaheen_dir(project_root) / "services.json"


def get_package_dir() -> Path:
    """Get the root directory of the installed xaheen package."""
    return Path(str(files("xaheen")))


def get_templates_dir() -> Path:
    """Get the path to the package's templates/ directory."""
    return get_package_dir() / "templates"


def get_catalog_dir() -> Path:
    """Get the path to the package's built-in service catalog directory."""
    return get_package_dir() / "services" / "catalog"
