"""Xaheen exceptions."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from pathlib import Path


class XaheenError(Exception):
    """Base exception for Xaheen errors."""


class NotFoundError(XaheenError, KeyError):
    """Base exception for lookups that found nothing."""

    def __str__(self) -> str:
        # KeyError quotes its message; keep plain text for CLI output
        return str(self.args[0]) if self.args else ""


# =============================================================================
# Template Exceptions
# =============================================================================


class TemplateError(XaheenError):
    """Base exception for template engine errors.

    Attributes:
        template_id: The ID of the template involved, if known.
    """

    def __init__(self, message: str, *, template_id: str | None = None) -> None:
        super().__init__(message)
        self.template_id: str | None = template_id


class TemplateNotFoundError(TemplateError, NotFoundError):
    """Raised when a template (or one of its parents) cannot be found."""


class CompileError(TemplateError):
    """Raised when template source cannot be compiled.

    Attributes:
        cause: The underlying compiler exception.
    """

    def __init__(
        self,
        message: str,
        *,
        template_id: str | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message, template_id=template_id)
        self.cause: Exception | None = cause


class RenderError(TemplateError):
    """Raised when a compiled template fails while rendering.

    Attributes:
        cause: The exception raised during rendering.
    """

    def __init__(
        self,
        message: str,
        *,
        template_id: str | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message, template_id=template_id)
        self.cause: Exception | None = cause


class CyclicInheritanceError(TemplateError):
    """Raised when a template's parent chain loops back on itself.

    Attributes:
        chain: Template IDs visited, ending with the repeated ID.
    """

    def __init__(
        self,
        message: str,
        *,
        template_id: str | None = None,
        chain: list[str] | None = None,
    ) -> None:
        super().__init__(message, template_id=template_id)
        self.chain: list[str] = chain or []


class BlockNotFoundError(TemplateError):
    """Raised when a child overrides a block no ancestor declares.

    Attributes:
        block_name: The name of the missing block.
    """

    def __init__(
        self,
        message: str,
        *,
        template_id: str | None = None,
        block_name: str,
    ) -> None:
        super().__init__(message, template_id=template_id)
        self.block_name: str = block_name


# =============================================================================
# Configuration Exceptions
# =============================================================================


class ConfigError(XaheenError):
    """Base exception for configuration errors."""


class ConfigLoadError(ConfigError):
    """Raised when configuration cannot be read or parsed."""

    def __init__(
        self,
        message: str,
        *,
        path: Path | None = None,
        line: int | None = None,
        column: int | None = None,
    ) -> None:
        """Initialize with error message and optional location context."""
        super().__init__(message)
        self.path: Path | None = path
        self.line: int | None = line
        self.column: int | None = column


class ConfigValidationError(ConfigError):
    """Raised when configuration fails schema validation.

    Attributes:
        issues: One entry per violated field path.
        source: Where the invalid configuration came from.
    """

    def __init__(
        self,
        message: str,
        *,
        issues: list[Any] | None = None,  # pyright: ignore[reportExplicitAny]
        source: str | None = None,
    ) -> None:
        super().__init__(message)
        self.issues: list[Any] = issues or []  # pyright: ignore[reportExplicitAny]
        self.source: str | None = source

    @property
    def messages(self) -> list[str]:
        """Return one human-readable line per violated field path."""
        return [f"{issue.key}: {issue.message}" for issue in self.issues]


# =============================================================================
# Generator Exceptions
# =============================================================================


class GenerationError(XaheenError):
    """Raised when a generator stage fails.

    Attributes:
        stage: The stage that failed (main, test, story).
        path: The target file of the failing stage.
    """

    def __init__(
        self,
        message: str,
        *,
        stage: str | None = None,
        path: Path | None = None,
    ) -> None:
        super().__init__(message)
        self.stage: str | None = stage
        self.path: Path | None = path


# =============================================================================
# Service Injection Exceptions
# =============================================================================


class ServiceInjectionError(XaheenError):
    """Base exception for service injection errors."""


class ServiceNotFoundError(ServiceInjectionError, NotFoundError):
    """Raised when a service type/provider is not in the catalog.

    Attributes:
        service_key: The ``type/provider`` key that was requested.
    """

    def __init__(self, message: str, *, service_key: str) -> None:
        super().__init__(message)
        self.service_key: str = service_key


class ServiceConflictError(ServiceInjectionError):
    """Raised when a service conflicts with one already installed.

    Attributes:
        conflicts: Human-readable conflict descriptions.
    """

    def __init__(self, message: str, *, conflicts: list[str]) -> None:
        super().__init__(message)
        self.conflicts: list[str] = conflicts
