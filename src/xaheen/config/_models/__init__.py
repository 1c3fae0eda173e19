"""Configuration models."""

from ._common import (
    FRAMEWORK_ALIASES,
    Classification,
    ConfigOrigin,
    Framework,
    LogFormat,
    LogLevel,
    MonorepoTool,
    PackageManager,
    normalize_framework,
)
from ._config import CONFIG_VERSION, XaheenConfig
from ._logging import LoggingConfig
from ._project import MonorepoConfig, ProjectConfig
from ._sections import (
    ComplianceConfig,
    GDPRConfig,
    GeneratorsConfig,
    NSMConfig,
    ServiceRef,
    TemplatesConfig,
    UIConfig,
)

__all__ = [
    "CONFIG_VERSION",
    "FRAMEWORK_ALIASES",
    "Classification",
    "ComplianceConfig",
    "ConfigOrigin",
    "Framework",
    "GDPRConfig",
    "GeneratorsConfig",
    "LogFormat",
    "LogLevel",
    "LoggingConfig",
    "MonorepoConfig",
    "MonorepoTool",
    "NSMConfig",
    "PackageManager",
    "ProjectConfig",
    "ServiceRef",
    "TemplatesConfig",
    "UIConfig",
    "XaheenConfig",
    "normalize_framework",
]
