"""Artifact generators: components, pages, services, hooks and models."""

from ._generator import (
    DEFAULT_FAMILY,
    FRAMEWORK_FAMILIES,
    GENERATOR_SPECS,
    Generator,
    framework_family,
    hook_name,
)
from ._models import (
    GenerateOptions,
    GeneratedFile,
    GenerationResult,
    GeneratorSpec,
    GeneratorType,
    Stage,
)

__all__ = [
    "DEFAULT_FAMILY",
    "FRAMEWORK_FAMILIES",
    "GENERATOR_SPECS",
    "GenerateOptions",
    "GeneratedFile",
    "GenerationResult",
    "Generator",
    "GeneratorSpec",
    "GeneratorType",
    "Stage",
    "framework_family",
    "hook_name",
]
