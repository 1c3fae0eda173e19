"""Xaheen configuration.

This module provides the public API for Xaheen configuration management:
the unified ``xaheen.config.json`` schema, the migration chain from legacy
formats, project detection and environment overrides.

Example:
    >>> from xaheen.config import ConfigManager
    >>> loaded = ConfigManager(project_root).load()
    >>> loaded.origin
    <ConfigOrigin.DEFAULTS: 'defaults'>
"""

# Re-export exceptions from main exceptions module
from xaheen.exceptions import (
    ConfigError,
    ConfigLoadError,
    ConfigValidationError,
)

# Project detection
from ._detect import (
    DEFAULT_FRAMEWORK,
    FRAMEWORK_PRIORITY,
    LOCKFILES,
    MONOREPO_MARKERS,
    MonorepoInfo,
    ProjectDetector,
    dependency_names,
)

# Legacy format migration
from ._legacy import evaluate_commonjs, migrate_legacy_xaheen, migrate_xala
from ._load import is_strict_mode, safe_load_config

# Loader utilities
from ._loader import (
    ENV_PREFIX,
    deep_merge,
    parse_env_vars,
    parse_string_value,
    read_json_file,
    set_nested_key,
)
from ._manager import (
    CONFIG_FILENAME,
    XALA_CONFIG_FILENAME,
    ConfigManager,
    LoadedConfig,
    MigrationResult,
)

# All models from the _models subpackage
from ._models import (
    CONFIG_VERSION,
    FRAMEWORK_ALIASES,
    Classification,
    ComplianceConfig,
    ConfigOrigin,
    Framework,
    GDPRConfig,
    GeneratorsConfig,
    LogFormat,
    LoggingConfig,
    LogLevel,
    MonorepoConfig,
    MonorepoTool,
    NSMConfig,
    PackageManager,
    ProjectConfig,
    ServiceRef,
    TemplatesConfig,
    UIConfig,
    XaheenConfig,
    normalize_framework,
)

# Validation
from ._validation import (
    ValidationIssue,
    XaheenConfigStrict,
    issues_from_error,
    parse_config,
    validate_config,
)

__all__ = [
    "CONFIG_FILENAME",
    "CONFIG_VERSION",
    "DEFAULT_FRAMEWORK",
    "ENV_PREFIX",
    "FRAMEWORK_ALIASES",
    "FRAMEWORK_PRIORITY",
    "LOCKFILES",
    "MONOREPO_MARKERS",
    "XALA_CONFIG_FILENAME",
    "Classification",
    "ComplianceConfig",
    "ConfigError",
    "ConfigLoadError",
    "ConfigManager",
    "ConfigOrigin",
    "ConfigValidationError",
    "Framework",
    "GDPRConfig",
    "GeneratorsConfig",
    "LoadedConfig",
    "LogFormat",
    "LogLevel",
    "LoggingConfig",
    "MigrationResult",
    "MonorepoConfig",
    "MonorepoInfo",
    "MonorepoTool",
    "NSMConfig",
    "PackageManager",
    "ProjectConfig",
    "ProjectDetector",
    "ServiceRef",
    "TemplatesConfig",
    "UIConfig",
    "ValidationIssue",
    "XaheenConfig",
    "XaheenConfigStrict",
    "deep_merge",
    "dependency_names",
    "evaluate_commonjs",
    "is_strict_mode",
    "issues_from_error",
    "migrate_legacy_xaheen",
    "migrate_xala",
    "normalize_framework",
    "parse_config",
    "parse_env_vars",
    "parse_string_value",
    "read_json_file",
    "safe_load_config",
    "set_nested_key",
    "validate_config",
]
