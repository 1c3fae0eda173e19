"""Generator, template, service, UI and compliance configuration models."""

from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field

from ._common import Classification
from ._project import CAMEL_CONFIG


class GeneratorsConfig(BaseModel):
    """Generator defaults.

    Attributes:
        output_dir: Directory generated files are written under.
        tests: Generate a test file alongside each artifact.
        stories: Generate a story file for components and pages.
    """

    model_config: ClassVar[ConfigDict] = CAMEL_CONFIG

    output_dir: str = "src"
    tests: bool = True
    stories: bool = False


class TemplatesConfig(BaseModel):
    """Template lookup settings.

    Attributes:
        directories: Project template directories, highest precedence first.
        dev_mode: Recompile templates when their files change.
    """

    model_config: ClassVar[ConfigDict] = CAMEL_CONFIG

    directories: list[str] = Field(default_factory=lambda: [".xaheen/templates"])
    dev_mode: bool = False


class ServiceRef(BaseModel):
    """An installed service."""

    model_config: ClassVar[ConfigDict] = CAMEL_CONFIG

    type: str = Field(..., min_length=1)
    provider: str = Field(..., min_length=1)

    @property
    def key(self) -> str:
        return f"{self.type}/{self.provider}"


class UIConfig(BaseModel):
    """Design system and localisation.

    Attributes:
        system: Design system package family.
        locale: Default locale of generated UI strings.
        locales: Locales the project supports.
    """

    model_config: ClassVar[ConfigDict] = CAMEL_CONFIG

    system: str = "xala"
    locale: str = "nb-NO"
    locales: list[str] = Field(default_factory=lambda: ["nb-NO", "en-US"])


class NSMConfig(BaseModel):
    """Norwegian NSM security classification settings."""

    model_config: ClassVar[ConfigDict] = CAMEL_CONFIG

    enabled: bool = False
    classification: Classification = Classification.OPEN


class GDPRConfig(BaseModel):
    """GDPR settings."""

    model_config: ClassVar[ConfigDict] = CAMEL_CONFIG

    enabled: bool = False


class ComplianceConfig(BaseModel):
    """Compliance flags passed to templates."""

    model_config: ClassVar[ConfigDict] = CAMEL_CONFIG

    nsm: NSMConfig = Field(default_factory=NSMConfig)
    gdpr: GDPRConfig = Field(default_factory=GDPRConfig)
