"""Logging configuration model."""

from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field

from ._common import LogFormat, LogLevel
from ._project import CAMEL_CONFIG


class LoggingConfig(BaseModel):
    """Logging configuration section.

    Attributes:
        level: Log level threshold.
        format: Log output format.
        file: Path to log file (empty uses .xaheen/logs/cli.log).
        max_bytes: Rotate the log file past this size; 0 never rotates.
        backup_count: Rotated log files to keep.
    """

    model_config: ClassVar[ConfigDict] = CAMEL_CONFIG

    level: LogLevel = LogLevel.INFO
    format: LogFormat = LogFormat.JSON
    file: str = ""
    max_bytes: int = Field(default=0, ge=0)
    backup_count: int = Field(default=0, ge=0)
