# pyright: reportAny=false, reportUnknownVariableType=false, reportUnknownArgumentType=false
"""JSON configuration file loading, merging and environment overrides."""

from __future__ import annotations

import json
import os
from typing import TYPE_CHECKING, Any

import orjson
from pydantic.alias_generators import to_camel

from xaheen.exceptions import ConfigLoadError

if TYPE_CHECKING:
    from collections.abc import Mapping
    from pathlib import Path

    from xaheen.utils import FileSystemGateway

ENV_PREFIX = "XAHEEN_"

# XAHEEN_* variables that control the CLI rather than override config keys
RESERVED_ENV_VARS: frozenset[str] = frozenset(
    {
        "XAHEEN_DEBUG",
        "XAHEEN_DEV",
        "XAHEEN_LOG_LEVEL",
        "XAHEEN_STRICT_CONFIG",
        "XAHEEN_LOCAL_REGISTRY",
    }
)


def read_json_file(path: Path, fs: FileSystemGateway) -> dict[str, Any]:  # pyright: ignore[reportExplicitAny]
    """Read and parse a JSON object file.

    Args:
        path: Path to the JSON file.
        fs: File system gateway to read with.

    Returns:
        Parsed JSON object.

    Raises:
        FileNotFoundError: If the file does not exist.
        ConfigLoadError: If the file is not UTF-8 or not a valid JSON object.
    """
    try:
        text = fs.read_text(path)
    except UnicodeDecodeError as e:
        msg = f"File {path} is not valid UTF-8: {e.reason} at byte {e.start}"
        raise ConfigLoadError(msg, path=path) from e

    try:
        data = orjson.loads(text)
    except orjson.JSONDecodeError as e:
        msg = f"Failed to parse JSON file {path}: {e.msg}"
        raise ConfigLoadError(msg, path=path, line=e.lineno, column=e.colno) from e

    if not isinstance(data, dict):
        msg = f"Expected a JSON object in {path}, got {type(data).__name__}"
        raise ConfigLoadError(msg, path=path)
    return data


def deep_merge(
    base: dict[str, Any],  # pyright: ignore[reportExplicitAny]
    override: dict[str, Any],  # pyright: ignore[reportExplicitAny]
) -> dict[str, Any]:  # pyright: ignore[reportExplicitAny]
    """Deep merge two configuration dictionaries.

    Merges `override` into `base`, returning a new dictionary. Neither input
    is modified.

    Args:
        base: Base configuration (lower precedence).
        override: Override configuration (higher precedence).

    Returns:
        Merged configuration dictionary.

    Merge rules:
        - Dictionaries are recursively merged
        - Arrays are replaced entirely (no element-wise merge)
        - Scalars are replaced with override value
        - Missing keys in override preserve base values
    """
    result: dict[str, Any] = {}  # pyright: ignore[reportExplicitAny]

    for key in base.keys() | override.keys():
        if key not in override:
            result[key] = copy_value(base[key])
        elif key not in base:
            result[key] = copy_value(override[key])
        else:
            base_val = base[key]
            override_val = override[key]

            if isinstance(base_val, dict) and isinstance(override_val, dict):
                result[key] = deep_merge(base_val, override_val)
            else:
                # Type mismatch or non-dicts - override wins
                result[key] = copy_value(override_val)

    return result


def copy_value(value: Any) -> Any:  # pyright: ignore[reportExplicitAny]
    """Create a deep copy of a configuration value.

    Recursively copies dicts and lists so the returned structure is fully
    independent of the original.
    """
    if isinstance(value, dict):
        return {k: copy_value(v) for k, v in value.items()}
    if isinstance(value, list):
        return [copy_value(item) for item in value]
    return value


def parse_env_vars(
    prefix: str = ENV_PREFIX,
    environ: Mapping[str, str] | None = None,
) -> dict[str, Any]:  # pyright: ignore[reportExplicitAny]
    """Parse environment variables into a config dictionary.

    Args:
        prefix: Environment variable prefix (default: "XAHEEN_").
        environ: Environment to read. Defaults to ``os.environ``.

    Returns:
        Dictionary of parsed config values with nested, camelCase keys.

    Environment variable naming:
        - Add prefix (XAHEEN_)
        - Separate nesting levels with double underscores
        - Use snake case for camelCase keys
        - Example: generators.outputDir -> XAHEEN_GENERATORS__OUTPUT_DIR
    """
    env = os.environ if environ is None else environ
    result: dict[str, Any] = {}  # pyright: ignore[reportExplicitAny]

    for key, value in env.items():
        if not key.startswith(prefix) or key in RESERVED_ENV_VARS:
            continue

        config_key = key[len(prefix) :]
        if not config_key:
            continue

        # XAHEEN_GENERATORS__OUTPUT_DIR -> generators.outputDir
        config_path = ".".join(
            to_camel(part.lower()) for part in config_key.split("__") if part
        )
        set_nested_key(result, config_path, parse_string_value(value))

    return result


def parse_string_value(value: str) -> Any:  # pyright: ignore[reportExplicitAny]
    """Parse a string value with automatic type inference.

    Precedence:
    1. Boolean: true/false (case-insensitive)
    2. Integer: parseable as int (no decimal)
    3. Float: parseable as float (with decimal)
    4. JSON array/object: starts with [ or {
    5. String: fallback

    Examples:
        >>> parse_string_value("true")
        True
        >>> parse_string_value("42")
        42
        >>> parse_string_value('["a", "b"]')
        ['a', 'b']
    """
    lower_value = value.lower()
    if lower_value in ("true", "false"):
        return lower_value == "true"

    if "." not in value:
        try:
            return int(value)
        except ValueError:
            pass
    else:
        try:
            return float(value)
        except ValueError:
            pass

    if (value.startswith("[") and value.endswith("]")) or (
        value.startswith("{") and value.endswith("}")
    ):
        try:
            return json.loads(value)
        except json.JSONDecodeError:
            pass

    return value


def set_nested_key(
    d: dict[str, Any],  # pyright: ignore[reportExplicitAny]
    key_path: str,
    value: Any,  # pyright: ignore[reportExplicitAny]
) -> None:
    """Set a value at a dotted key path in a nested dictionary.

    Creates intermediate dictionaries as needed.

    Example:
        >>> d = {}
        >>> set_nested_key(d, "logging.level", "debug")
        >>> d
        {'logging': {'level': 'debug'}}
    """
    parts = key_path.split(".")
    current = d

    for part in parts[:-1]:
        if not isinstance(current.get(part), dict):
            current[part] = {}
        current = current[part]

    if parts:
        current[parts[-1]] = value
