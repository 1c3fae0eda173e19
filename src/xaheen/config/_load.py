from __future__ import annotations

import os
import sys
from typing import TYPE_CHECKING

from xaheen.exceptions import ConfigError

from ._loader import read_json_file
from ._manager import LoadedConfig
from ._models import ConfigOrigin, XaheenConfig
from ._validation import parse_config

if TYPE_CHECKING:
    from collections.abc import Mapping
    from pathlib import Path

    from structlog.typing import FilteringBoundLogger

    from xaheen.utils import FileSystemGateway

    from ._manager import ConfigManager


def is_strict_mode(environ: Mapping[str, str] | None = None) -> bool:
    env = os.environ if environ is None else environ
    return env.get("XAHEEN_STRICT_CONFIG", "0") == "1"


def safe_load_config(
    manager: ConfigManager,
    *,
    config_path: Path | None = None,
    logger: FilteringBoundLogger | None = None,
    environ: Mapping[str, str] | None = None,
) -> tuple[LoadedConfig, str | None]:
    """Load configuration with error handling.

    Attempts to load configuration and handles errors based on the
    XAHEEN_STRICT_CONFIG environment variable:
    - If unset or "0": warn to stderr and fall back to detected defaults
    - If "1": fail fast with sys.exit(1)

    When config_path is provided, the file must exist (explicit user request).

    Args:
        manager: Manager of the project whose configuration is loaded.
        config_path: Explicit path to a unified config file (--config flag).
        logger: Optional logger.
        environ: Environment consulted for strict mode.

    Returns:
        Tuple of (LoadedConfig, error_message). On success, error_message is
        None. On failure (non-strict mode), returns the detected defaults
        with the error message.
    """
    strict_mode = is_strict_mode(environ)

    try:
        if config_path is not None:
            # Explicit path - must exist
            if not config_path.exists():
                error_msg = f"Config file not found: {config_path}"
                # Always fail for explicit path
                print(f"Error: {error_msg}", file=sys.stderr)  # noqa: T201
                sys.exit(1)
            return _load_explicit(config_path, manager.fs), None

        return manager.load(), None
    except ConfigError as e:
        error_msg = str(e)
    except OSError as e:
        error_msg = f"Failed to load config: {e}"

    if logger is not None:
        logger.warning("config_load_failed", error=error_msg, strict=strict_mode)
    if strict_mode:
        print(f"Error: {error_msg}", file=sys.stderr)  # noqa: T201
        sys.exit(1)

    print(f"Warning: {error_msg}", file=sys.stderr)  # noqa: T201
    return (
        LoadedConfig(config=manager.detect_defaults(), origin=ConfigOrigin.DEFAULTS),
        error_msg,
    )


def _load_explicit(path: Path, fs: FileSystemGateway) -> LoadedConfig:
    data = read_json_file(path, fs)
    config: XaheenConfig = parse_config(data, source=str(path))
    return LoadedConfig(config=config, origin=ConfigOrigin.UNIFIED, path=path)
