"""Shared utilities: naming, file system access, paths, logging and exec."""

from ._exec import DEFAULT_TIMEOUT_MS, CommandResult, run_command, truncate_output
from ._fs import FileSystemGateway
from ._logging import (
    LogFormatType,
    create_cli_logger,
    resolve_log_file,
    resolve_log_level,
)
from ._naming import (
    pluralize,
    split_words,
    to_camel_case,
    to_constant_case,
    to_kebab_case,
    to_pascal_case,
    to_snake_case,
    to_title_case,
)
from ._paths import (
    find_project_root,
    get_catalog_dir,
    get_package_dir,
    get_services_state_file,
    get_templates_dir,
    get_xaheen_cli_log_file,
    get_xaheen_dir,
)

__all__ = [
    "DEFAULT_TIMEOUT_MS",
    "CommandResult",
    "FileSystemGateway",
    "LogFormatType",
    "create_cli_logger",
    "find_project_root",
    "get_catalog_dir",
    "get_package_dir",
    "get_services_state_file",
    "get_templates_dir",
    "get_xaheen_cli_log_file",
    "get_xaheen_dir",
    "pluralize",
    "resolve_log_file",
    "resolve_log_level",
    "run_command",
    "split_words",
    "to_camel_case",
    "to_constant_case",
    "to_kebab_case",
    "to_pascal_case",
    "to_snake_case",
    "to_title_case",
    "truncate_output",
]
