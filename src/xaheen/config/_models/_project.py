"""Project configuration models."""

from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from ._common import Framework, MonorepoTool, PackageManager, normalize_framework

CAMEL_CONFIG = ConfigDict(
    frozen=True,
    extra="ignore",
    alias_generator=to_camel,
    populate_by_name=True,
)


class MonorepoConfig(BaseModel):
    """Monorepo layout.

    Attributes:
        enabled: Whether the project is a monorepo.
        tool: Orchestration tool, if one was detected.
        workspaces: Workspace globs.
    """

    model_config: ClassVar[ConfigDict] = CAMEL_CONFIG

    enabled: bool = False
    tool: MonorepoTool | None = None
    workspaces: list[str] = Field(default_factory=list)


class ProjectConfig(BaseModel):
    """Project configuration section.

    Attributes:
        name: Project name.
        framework: Target framework. Aliases such as ``next`` are accepted.
        package_manager: Package manager used to install dependencies.
        typescript: Whether generated code is TypeScript.
        monorepo: Monorepo layout.
    """

    model_config: ClassVar[ConfigDict] = CAMEL_CONFIG

    name: str = ""
    framework: Framework = Framework.REACT
    package_manager: PackageManager = PackageManager.NPM
    typescript: bool = True
    monorepo: MonorepoConfig = Field(default_factory=MonorepoConfig)

    @field_validator("framework", mode="before")
    @classmethod
    def _normalize_framework(cls, value: object) -> object:
        return normalize_framework(value)
