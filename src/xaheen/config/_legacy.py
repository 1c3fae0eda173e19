# pyright: reportAny=false, reportExplicitAny=false, reportUnknownVariableType=false, reportUnknownArgumentType=false
"""Migration of legacy configuration formats.

Two legacy formats are read, never written:

- ``.xaheen/config.json`` (the earlier Xaheen CLI), either flat
  ``{name, framework, packageManager, typescript, features, outputDir}`` or
  nested under ``project`` with a ``services`` mapping.
- ``xala.config.js`` (the Xala CLI), a CommonJS module exporting
  ``{projectName, platform, componentsDir, ui, compliance}``. It is evaluated
  by ``node`` through ``run_command``.

Each migration overlays the legacy values on the detected defaults, so fields
the legacy file does not mention keep their detected or default values.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import orjson

from xaheen.exceptions import ConfigLoadError
from xaheen.utils import run_command

from ._loader import deep_merge
from ._models import Classification, normalize_framework
from ._validation import parse_config

if TYPE_CHECKING:
    from pathlib import Path

    from ._models import XaheenConfig

NODE_TIMEOUT_MS = 10000

# Prints the module export as JSON; ES module default exports are unwrapped
_NODE_EXPORT_SCRIPT = (
    "const m = require(process.argv[1]);"
    "const c = m && m.__esModule && m.default ? m.default : m;"
    "process.stdout.write(JSON.stringify(c === undefined ? null : c));"
)


def _framework(value: object) -> str | None:
    if not isinstance(value, str) or not value:
        return None
    normalized = normalize_framework(value)
    return str(normalized)


def _services_overlay(services: object) -> list[dict[str, str]]:
    """Convert ``{type: {provider}}`` or ``[{type, provider}]`` to service refs."""
    refs: list[dict[str, str]] = []
    if isinstance(services, dict):
        for service_type, spec in services.items():
            provider = spec.get("provider") if isinstance(spec, dict) else spec
            if isinstance(provider, str) and provider:
                refs.append({"type": str(service_type), "provider": provider})
    elif isinstance(services, list):
        for spec in services:
            if isinstance(spec, dict) and spec.get("type") and spec.get("provider"):
                refs.append(
                    {"type": str(spec["type"]), "provider": str(spec["provider"])}
                )
    return refs


def migrate_legacy_xaheen(data: dict[str, Any], defaults: XaheenConfig) -> XaheenConfig:
    """Migrate a ``.xaheen/config.json`` mapping onto ``defaults``.

    Raises:
        ConfigValidationError: If the migrated values violate the schema.
    """
    nested = data.get("project")
    source: dict[str, Any] = nested if isinstance(nested, dict) else data

    project: dict[str, Any] = {}
    if isinstance(source.get("name"), str) and source["name"]:
        project["name"] = source["name"]
    if (framework := _framework(source.get("framework"))) is not None:
        project["framework"] = framework
    if isinstance(source.get("packageManager"), str):
        project["packageManager"] = source["packageManager"]
    if isinstance(source.get("typescript"), bool):
        project["typescript"] = source["typescript"]

    generators: dict[str, Any] = {}
    output_dir = data.get("outputDir", source.get("outputDir"))
    if isinstance(output_dir, str) and output_dir:
        generators["outputDir"] = output_dir
    features = data.get("features", source.get("features"))
    if isinstance(features, list):
        generators["tests"] = "testing" in features
        generators["stories"] = "storybook" in features

    overlay: dict[str, Any] = {"project": project, "generators": generators}
    if (services := _services_overlay(data.get("services"))):
        overlay["services"] = services

    merged = deep_merge(defaults.to_dict(), overlay)
    return parse_config(merged, source=".xaheen/config.json")


def migrate_xala(data: dict[str, Any], defaults: XaheenConfig) -> XaheenConfig:
    """Migrate an evaluated ``xala.config.js`` export onto ``defaults``.

    Raises:
        ConfigValidationError: If the migrated values violate the schema.
    """
    overlay: dict[str, Any] = {"project": {}, "generators": {}}

    if isinstance(data.get("projectName"), str) and data["projectName"]:
        overlay["project"]["name"] = data["projectName"]
    if (framework := _framework(data.get("platform"))) is not None:
        overlay["project"]["framework"] = framework
    if isinstance(data.get("componentsDir"), str) and data["componentsDir"]:
        overlay["generators"]["outputDir"] = data["componentsDir"]

    ui = data.get("ui")
    if isinstance(ui, dict):
        overlay["ui"] = {
            key: ui[key]
            for key in ("system", "locale", "locales")
            if key in ui
        }

    compliance = data.get("compliance")
    if isinstance(compliance, dict):
        overlay["compliance"] = _compliance_overlay(compliance)

    merged = deep_merge(defaults.to_dict(), overlay)
    return parse_config(merged, source="xala.config.js")


def _compliance_overlay(compliance: dict[str, Any]) -> dict[str, Any]:
    result: dict[str, Any] = {}

    nsm = compliance.get("nsm")
    if isinstance(nsm, bool):
        result["nsm"] = {"enabled": nsm}
    elif isinstance(nsm, dict):
        classification = str(nsm.get("classification", Classification.OPEN)).upper()
        result["nsm"] = {
            "enabled": bool(nsm.get("enabled", True)),
            "classification": classification,
        }

    gdpr = compliance.get("gdpr")
    if isinstance(gdpr, bool):
        result["gdpr"] = {"enabled": gdpr}
    elif isinstance(gdpr, dict):
        result["gdpr"] = {"enabled": bool(gdpr.get("enabled", True))}

    return result


def evaluate_commonjs(path: Path, *, timeout_ms: int = NODE_TIMEOUT_MS) -> dict[str, Any]:
    """Evaluate a CommonJS config module with ``node`` and return its export.

    Raises:
        ConfigLoadError: If node is missing, fails, or the export is not an
            object.
    """
    result = run_command(
        ["node", "-e", _NODE_EXPORT_SCRIPT, str(path.resolve())],
        cwd=path.parent,
        timeout_ms=timeout_ms,
    )
    if result.command_not_found:
        msg = f"Cannot read {path.name}: node is not installed"
        raise ConfigLoadError(msg, path=path)
    if not result.success:
        detail = result.error or result.stderr.strip() or f"exit code {result.exit_code}"
        msg = f"Failed to evaluate {path.name}: {detail}"
        raise ConfigLoadError(msg, path=path)

    try:
        data = orjson.loads(result.stdout or "null")
    except orjson.JSONDecodeError as e:
        msg = f"{path.name} did not export JSON-serialisable data: {e}"
        raise ConfigLoadError(msg, path=path) from e

    if not isinstance(data, dict):
        msg = f"{path.name} must export an object"
        raise ConfigLoadError(msg, path=path)
    return data
