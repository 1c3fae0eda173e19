# pyright: reportAny=false, reportExplicitAny=false
"""Condition evaluation for service catalog entries.

Conditions are rule-engine expressions evaluated against a context with
three mappings, ``service``, ``config`` and ``project``, plus the shortcuts
``framework``, ``typescript`` and ``options``:

    framework == 'nextjs'
    project['monorepo']['enabled'] and typescript
    options['adapter'] == 'prisma'

An empty condition is true. A condition that fails to parse or evaluate is
also treated as true and logged, so a broken catalog entry never silently
drops files.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import rule_engine
from rule_engine import errors as rule_errors

if TYPE_CHECKING:
    from collections.abc import Mapping

    from structlog.typing import FilteringBoundLogger

    from xaheen.config import XaheenConfig

    from ._models import ServiceTemplate


def build_condition_context(
    service: ServiceTemplate,
    config: XaheenConfig,
    options: Mapping[str, str] | None = None,
) -> dict[str, Any]:
    """Build the mapping conditions are evaluated against."""
    data = config.to_dict()
    values = dict(options or {})
    return {
        "service": {
            "type": service.type,
            "provider": service.provider,
            "key": service.key,
            "options": values,
        },
        "config": data,
        "project": data["project"],
        "framework": data["project"]["framework"],
        "typescript": data["project"]["typescript"],
        "options": values,
    }


class ConditionEvaluator:
    """Compiles and evaluates condition expressions.

    Compiled rules are memoised per expression string.

    Args:
        logger: Optional logger for conditions that fail.
    """

    def __init__(self, *, logger: FilteringBoundLogger | None = None) -> None:
        self._logger: FilteringBoundLogger | None = logger
        self._context: rule_engine.Context = rule_engine.Context(default_value=None)
        self._rules: dict[str, rule_engine.Rule] = {}

    def evaluate(self, expression: str, context: Mapping[str, Any]) -> bool:
        """Return whether ``expression`` matches ``context``."""
        if not expression.strip():
            return True

        try:
            rule = self._rules.get(expression)
            if rule is None:
                rule = rule_engine.Rule(expression, context=self._context)
                self._rules[expression] = rule
            return bool(rule.matches(dict(context)))
        except rule_errors.EngineError as e:
            if self._logger is not None:
                self._logger.warning(
                    "service_condition_failed",
                    expression=expression,
                    error=str(e),
                    error_type=type(e).__name__,
                )
            return True
