"""Service injection: catalog, conditions and the injector."""

from ._catalog import (
    CATALOG_PATTERNS,
    LOCAL_REGISTRY_ENV,
    ServiceCatalog,
    catalog_directories,
)
from ._conditions import ConditionEvaluator, build_condition_context
from ._injector import ENV_EXAMPLE_FILENAME, CommandRunner, ServiceInjector
from ._models import (
    DependencySpec,
    EnvVar,
    InjectedFile,
    InjectionOptions,
    InjectionPoint,
    InjectionResult,
    InjectionStrategy,
    InstalledService,
    PostStep,
    PostStepResult,
    ServiceTemplate,
)

__all__ = [
    "CATALOG_PATTERNS",
    "ENV_EXAMPLE_FILENAME",
    "LOCAL_REGISTRY_ENV",
    "CommandRunner",
    "ConditionEvaluator",
    "DependencySpec",
    "EnvVar",
    "InjectedFile",
    "InjectionOptions",
    "InjectionPoint",
    "InjectionResult",
    "InjectionStrategy",
    "InstalledService",
    "PostStep",
    "PostStepResult",
    "ServiceCatalog",
    "ServiceInjector",
    "ServiceTemplate",
    "build_condition_context",
    "catalog_directories",
]
