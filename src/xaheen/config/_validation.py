# pyright: reportAny=false, reportExplicitAny=false, reportUnknownArgumentType=false, reportUnknownMemberType=false, reportUnknownVariableType=false
"""Configuration validation using Pydantic schemas."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, ClassVar, Literal

from pydantic import ConfigDict, ValidationError

from xaheen.exceptions import ConfigValidationError

from ._models import XaheenConfig

if TYPE_CHECKING:
    from pydantic_core import ErrorDetails


@dataclass(frozen=True, slots=True)
class ValidationIssue:
    """Represents a configuration validation issue.

    Attributes:
        key: Dotted path to the configuration key (e.g., "project.framework").
        message: Human-readable description of the issue.
        expected: Description of expected value or type, if available.
        actual: The actual value that caused the issue.
        source: Where the configuration came from, or None.
        severity: Whether this is an error or warning.
    """

    key: str
    message: str
    expected: str | None
    actual: Any
    source: str | None = None
    severity: Literal["error", "warning"] = "error"


class XaheenConfigStrict(XaheenConfig):
    """Root schema that rejects unknown top-level keys."""

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="forbid")


def _pydantic_error_to_issue(
    error: ErrorDetails,
    source: str | None,
) -> ValidationIssue:
    """Convert a Pydantic error dict to a ValidationIssue."""
    loc = error.get("loc", ())
    key = ".".join(str(part) for part in loc)
    message = str(error.get("msg", "Validation error"))

    ctx = error.get("ctx")
    expected: str | None = None
    if ctx is not None:
        if "expected" in ctx:
            expected = str(ctx["expected"])
        elif "pattern" in ctx:
            expected = f"pattern: {ctx['pattern']}"

    return ValidationIssue(
        key=key,
        message=message,
        expected=expected,
        actual=error.get("input"),
        source=source,
    )


def issues_from_error(
    error: ValidationError, source: str | None = None
) -> list[ValidationIssue]:
    """Return one issue per violated field path of a ValidationError."""
    return [_pydantic_error_to_issue(err, source) for err in error.errors()]


def validate_config(
    config: dict[str, Any],
    *,
    strict: bool = False,
    source: str | None = None,
) -> list[ValidationIssue]:
    """Validate a configuration dictionary.

    Args:
        config: The configuration dictionary to validate.
        strict: If True, unknown top-level keys are errors.
        source: Label recorded on each issue.

    Returns:
        List of ValidationIssue objects. Empty list indicates valid config.
    """
    schema_class = XaheenConfigStrict if strict else XaheenConfig

    try:
        _ = schema_class.model_validate(config)
    except ValidationError as e:
        return issues_from_error(e, source)
    else:
        return []


def parse_config(config: dict[str, Any], *, source: str | None = None) -> XaheenConfig:
    """Validate and build a ``XaheenConfig``.

    Raises:
        ConfigValidationError: With one issue per violated field path.
    """
    try:
        return XaheenConfig.model_validate(config)
    except ValidationError as e:
        issues = issues_from_error(e, source)
        where = f" in {source}" if source else ""
        msg = f"Invalid configuration{where}: " + "; ".join(
            f"{issue.key}: {issue.message}" for issue in issues
        )
        raise ConfigValidationError(msg, issues=issues, source=source) from e
