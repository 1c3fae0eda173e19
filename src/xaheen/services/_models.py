"""Service catalog and injection models.

Catalog entries are validated with Pydantic when the YAML files are read;
injection results are plain dataclasses.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING, ClassVar

from pydantic import BaseModel, ConfigDict, Field

from xaheen.config import Framework

if TYPE_CHECKING:
    from pathlib import Path


class InjectionStrategy(StrEnum):
    """How rendered content is applied to a target file."""

    REPLACE = "replace"
    APPEND = "append"
    MERGE_JSON = "merge-json"


class InjectionPoint(BaseModel):
    """A file the service writes or modifies.

    Attributes:
        target: Target path relative to the project root. Rendered as a
            Handlebars string against the injection context.
        template: Template ID of the content.
        strategy: How the content is applied.
        condition: rule-engine expression; empty means always.
        priority: Higher priorities are processed first.
        description: Optional human-readable description.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="forbid")

    target: str = Field(..., min_length=1)
    template: str = Field(..., min_length=1)
    strategy: InjectionStrategy = InjectionStrategy.REPLACE
    condition: str = ""
    priority: int = 0
    description: str | None = None


class EnvVar(BaseModel):
    """An environment variable the service reads."""

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(..., pattern=r"^[A-Za-z_][A-Za-z0-9_]*$")
    required: bool = False
    description: str = ""
    default: str | None = None


class DependencySpec(BaseModel):
    """An npm package the service needs."""

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(..., min_length=1)
    version: str = "latest"
    dev: bool = False
    condition: str = ""


class PostStep(BaseModel):
    """A command to run after injection, when requested."""

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(..., min_length=1)
    command: list[str] = Field(..., min_length=1)
    condition: str = ""


class ServiceTemplate(BaseModel):
    """A catalog entry describing how to add one provider of a service type.

    Attributes:
        type: Service category (auth, database, payments, ...).
        provider: Provider within the category (clerk, prisma, ...).
        name: Display name.
        description: One-line description.
        frameworks: Frameworks the service supports; empty means all.
        injection_points: Files to write or modify.
        env: Environment variables appended to ``.env.example``.
        dependencies: Packages merged into ``package.json``.
        conflicts_with: ``type/provider`` keys that cannot be installed
            alongside this service.
        post_steps: Commands to run after injection.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="forbid")

    type: str = Field(..., pattern=r"^[a-z][a-z0-9-]*$")
    provider: str = Field(..., pattern=r"^[a-z][a-z0-9-]*$")
    name: str = ""
    description: str = ""
    frameworks: list[Framework] = Field(default_factory=list)
    injection_points: list[InjectionPoint] = Field(default_factory=list)
    env: list[EnvVar] = Field(default_factory=list)
    dependencies: list[DependencySpec] = Field(default_factory=list)
    conflicts_with: list[str] = Field(default_factory=list)
    post_steps: list[PostStep] = Field(default_factory=list)

    @property
    def key(self) -> str:
        return f"{self.type}/{self.provider}"

    @property
    def display_name(self) -> str:
        return self.name or self.key

    def supports(self, framework: Framework) -> bool:
        return not self.frameworks or framework in self.frameworks


class InstalledService(BaseModel):
    """Metadata recorded in ``.xaheen/services.json`` for one service."""

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    type: str
    provider: str
    installed_at: str
    files: list[str] = Field(default_factory=list)
    env: list[str] = Field(default_factory=list)
    dependencies: list[str] = Field(default_factory=list)

    @property
    def key(self) -> str:
        return f"{self.type}/{self.provider}"


@dataclass(frozen=True, slots=True)
class InjectionOptions:
    """Per-invocation injection options.

    Attributes:
        dry_run: Compute everything without writing.
        force: Proceed despite conflicts.
        run_post_steps: Run the service's post steps.
        values: Extra render values from ``--set key=value``.
    """

    dry_run: bool = False
    force: bool = False
    run_post_steps: bool = False
    values: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class InjectedFile:
    """Outcome for one injection point.

    Attributes:
        path: Absolute target path.
        template_id: Template the content came from.
        strategy: How the content was applied.
        action: ``created``, ``updated``, ``unchanged`` or ``skipped``.
        written: Whether the file was written.
    """

    path: Path
    template_id: str
    strategy: InjectionStrategy
    action: str
    written: bool


@dataclass(frozen=True, slots=True)
class PostStepResult:
    name: str
    command: list[str]
    success: bool
    exit_code: int | None = None
    error: str | None = None


@dataclass(slots=True)
class InjectionResult:
    """Everything one ``inject`` call did or would do.

    Attributes:
        service: ``type/provider`` key.
        files: One entry per injection point, in processing order.
        dependencies: Packages added to ``dependencies``.
        dev_dependencies: Packages added to ``devDependencies``.
        env_added: Variables appended to ``.env.example``.
        post_steps: Results of the post steps that ran.
        warnings: Conflicts overridden by ``force`` and skipped work.
        dry_run: Whether nothing was written.
    """

    service: str
    files: list[InjectedFile] = field(default_factory=list)
    dependencies: dict[str, str] = field(default_factory=dict)
    dev_dependencies: dict[str, str] = field(default_factory=dict)
    env_added: list[str] = field(default_factory=list)
    post_steps: list[PostStepResult] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    dry_run: bool = False

    @property
    def success(self) -> bool:
        return all(step.success for step in self.post_steps)
