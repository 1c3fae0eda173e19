# pyright: reportExplicitAny=false, reportAny=false
"""Root configuration model.

``XaheenConfig`` mirrors ``xaheen.config.json``. Keys are camelCase on disk
and snake_case in Python; both spellings are accepted on input.
"""

from typing import Any, ClassVar, Self

from pydantic import BaseModel, ConfigDict, Field

from ._logging import LoggingConfig
from ._project import CAMEL_CONFIG, ProjectConfig
from ._sections import (
    ComplianceConfig,
    GeneratorsConfig,
    ServiceRef,
    TemplatesConfig,
    UIConfig,
)

CONFIG_VERSION = "1.0.0"


class XaheenConfig(BaseModel):
    """Unified Xaheen configuration.

    Attributes:
        version: Schema version of the file.
        project: Project metadata and toolchain.
        generators: Generator defaults.
        templates: Template lookup settings.
        services: Installed services.
        ui: Design system and localisation.
        compliance: Compliance flags.
        logging: Logging settings.
    """

    model_config: ClassVar[ConfigDict] = CAMEL_CONFIG

    version: str = CONFIG_VERSION
    project: ProjectConfig = Field(default_factory=ProjectConfig)
    generators: GeneratorsConfig = Field(default_factory=GeneratorsConfig)
    templates: TemplatesConfig = Field(default_factory=TemplatesConfig)
    services: list[ServiceRef] = Field(default_factory=list)
    ui: UIConfig = Field(default_factory=UIConfig)
    compliance: ComplianceConfig = Field(default_factory=ComplianceConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        """Validate a configuration dictionary.

        Raises:
            pydantic.ValidationError: If the data violates the schema.
        """
        return cls.model_validate(data)

    def to_dict(self) -> dict[str, Any]:
        """Dump to the camelCase JSON shape written to disk."""
        return self.model_dump(mode="json", by_alias=True)

    def has_service(self, service_type: str, provider: str | None = None) -> bool:
        return any(
            ref.type == service_type and (provider is None or ref.provider == provider)
            for ref in self.services
        )

    def with_service(self, service_type: str, provider: str) -> Self:
        """Return a copy with ``service_type/provider`` recorded as installed."""
        if self.has_service(service_type, provider):
            return self
        services = [
            *(ref for ref in self.services if ref.type != service_type),
            ServiceRef(type=service_type, provider=provider),
        ]
        return self.model_copy(update={"services": services})
