# pyright: reportAny=false, reportExplicitAny=false, reportUnknownVariableType=false, reportUnknownArgumentType=false
"""Service injection into an existing project.

``ServiceInjector.inject`` runs these steps in order:

1. Look up the catalog entry and check it against the installed services.
2. Render and apply each injection point, highest priority first.
3. Merge dependencies into ``package.json``.
4. Append missing variables to ``.env.example``.
5. Record the service in ``.xaheen/services.json``.
6. Run the post steps, when requested.

A dry run performs every computation and skips every write and command.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

import orjson

from xaheen.config import deep_merge
from xaheen.exceptions import (
    ServiceConflictError,
    ServiceInjectionError,
    ServiceNotFoundError,
)
from xaheen.utils import (
    FileSystemGateway,
    get_services_state_file,
    run_command,
    to_camel_case,
    to_pascal_case,
)

from ._conditions import ConditionEvaluator, build_condition_context
from ._models import (
    InjectedFile,
    InjectionOptions,
    InjectionResult,
    InjectionStrategy,
    InstalledService,
    PostStepResult,
)

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

    from structlog.typing import FilteringBoundLogger

    from xaheen.config import ConfigManager, XaheenConfig
    from xaheen.templating import TemplateEngine
    from xaheen.utils import CommandResult

    from ._catalog import ServiceCatalog
    from ._models import InjectionPoint, ServiceTemplate

ENV_EXAMPLE_FILENAME = ".env.example"

type CommandRunner = Callable[..., CommandResult]


def _existing_env_names(content: str) -> set[str]:
    names: set[str] = set()
    for raw_line in content.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        name = line.split("=", 1)[0].strip()
        names.add(name.removeprefix("export ").strip())
    return names


class ServiceInjector:
    """Adds catalog services to a project.

    Args:
        catalog: Service catalog to look entries up in.
        engine: Template engine for injection point content and targets.
        config_manager: Manager of the project's configuration.
        fs: File system gateway.
        logger: Optional logger.
        runner: Runs post step commands. Defaults to ``run_command``.
        conditions: Condition evaluator. A new one is created when omitted.
    """

    def __init__(
        self,
        catalog: ServiceCatalog,
        engine: TemplateEngine,
        config_manager: ConfigManager,
        *,
        fs: FileSystemGateway | None = None,
        logger: FilteringBoundLogger | None = None,
        runner: CommandRunner = run_command,
        conditions: ConditionEvaluator | None = None,
    ) -> None:
        self._catalog: ServiceCatalog = catalog
        self._engine: TemplateEngine = engine
        self._config_manager: ConfigManager = config_manager
        self._fs: FileSystemGateway = fs or FileSystemGateway()
        self._logger: FilteringBoundLogger | None = logger
        self._runner: CommandRunner = runner
        self._conditions: ConditionEvaluator = conditions or ConditionEvaluator(
            logger=logger
        )

    @property
    def config_manager(self) -> ConfigManager:
        return self._config_manager

    @property
    def project_root(self) -> Path:
        return self._config_manager.project_root

    @property
    def state_file(self) -> Path:
        return get_services_state_file(self.project_root)

    # -- installed services -----------------------------------------------------

    def list_installed(self) -> list[InstalledService]:
        """Return the services recorded in ``.xaheen/services.json``.

        Raises:
            ServiceInjectionError: If the record file is malformed.
        """
        path = self.state_file
        if not self._fs.is_file(path):
            return []
        try:
            data = self._fs.read_json(path)
        except orjson.JSONDecodeError as e:
            msg = f"Invalid JSON in {path}: {e}"
            raise ServiceInjectionError(msg) from e
        entries = data.get("services", []) if isinstance(data, dict) else []
        return [InstalledService.model_validate(entry) for entry in entries]

    def remove(self, service_id: str) -> InstalledService:
        """Drop the metadata entry of ``service_id`` (``type/provider``).

        Files, dependencies and variables the service added are left in place.

        Raises:
            ServiceNotFoundError: If the service is not installed.
        """
        installed = self.list_installed()
        removed = next((s for s in installed if s.key == service_id), None)
        if removed is None:
            msg = f"Service is not installed: {service_id}"
            raise ServiceNotFoundError(msg, service_key=service_id)
        self._write_installed([s for s in installed if s.key != service_id])
        if self._logger is not None:
            self._logger.info("service_removed", service=service_id)
        return removed

    def check_compatibility(
        self, service: ServiceTemplate, config: XaheenConfig
    ) -> list[str]:
        """Return a description of every conflict with the current project."""
        conflicts: list[str] = []
        framework = config.project.framework
        if not service.supports(framework):
            supported = ", ".join(f.value for f in service.frameworks)
            conflicts.append(
                f"{service.key} does not support {framework.value} (supports {supported})"
            )

        for installed in self.list_installed():
            if installed.key == service.key:
                continue
            if installed.type == service.type:
                conflicts.append(
                    f"{installed.key} is already installed for {service.type}"
                )
            elif installed.key in service.conflicts_with:
                conflicts.append(f"{service.key} conflicts with {installed.key}")
            else:
                other = self._catalog.find(installed.key)
                if other is not None and service.key in other.conflicts_with:
                    conflicts.append(f"{installed.key} conflicts with {service.key}")
        return conflicts

    # -- injection --------------------------------------------------------------

    def inject(
        self,
        service_type: str,
        provider: str,
        options: InjectionOptions | None = None,
    ) -> InjectionResult:
        """Add ``service_type/provider`` to the project.

        Raises:
            ServiceNotFoundError: If the service is not in the catalog.
            ServiceConflictError: If the service conflicts with the project
                and ``force`` is not set.
            ServiceInjectionError: If a target cannot be merged or written.
            TemplateError: If an injection template fails to render.
        """
        options = options or InjectionOptions()
        service = self._catalog.get(service_type, provider)
        config = self._config_manager.load().config
        result = InjectionResult(service=service.key, dry_run=options.dry_run)

        conflicts = self.check_compatibility(service, config)
        if conflicts and not options.force:
            msg = f"Cannot add {service.key}: " + "; ".join(conflicts)
            raise ServiceConflictError(msg, conflicts=conflicts)
        result.warnings.extend(conflicts)

        condition_context = build_condition_context(service, config, options.values)
        render_context = self._render_context(service, config, options)

        points = sorted(service.injection_points, key=lambda p: p.priority, reverse=True)
        for point in points:
            if not self._conditions.evaluate(point.condition, condition_context):
                result.files.append(
                    InjectedFile(
                        path=self._target_path(point, render_context),
                        template_id=point.template,
                        strategy=point.strategy,
                        action="skipped",
                        written=False,
                    )
                )
                continue
            result.files.append(self._apply_point(point, render_context, options))

        self._merge_dependencies(service, condition_context, result)
        self._append_env(service, options, result)

        if not options.dry_run:
            self._record(service, result)
            if self._fs.is_file(self._config_manager.unified_path):
                _ = self._config_manager.add_service(service.type, service.provider)

        if options.run_post_steps and not options.dry_run:
            for step in service.post_steps:
                if self._conditions.evaluate(step.condition, condition_context):
                    result.post_steps.append(self._run_step(step.name, step.command))

        if self._logger is not None:
            self._logger.info(
                "service_injected",
                service=service.key,
                files=[str(f.path) for f in result.files if f.action != "skipped"],
                dependencies=sorted(result.dependencies),
                dev_dependencies=sorted(result.dev_dependencies),
                env=result.env_added,
                dry_run=options.dry_run,
            )
        return result

    def _render_context(
        self,
        service: ServiceTemplate,
        config: XaheenConfig,
        options: InjectionOptions,
    ) -> dict[str, Any]:
        typescript = config.project.typescript
        return {
            **options.values,
            "serviceType": service.type,
            "provider": service.provider,
            "serviceName": service.display_name,
            "pascalProvider": to_pascal_case(service.provider),
            "pascalName": to_pascal_case(service.provider),
            "camelProvider": to_camel_case(service.provider),
            "projectName": config.project.name,
            "framework": config.project.framework.value,
            "typescript": typescript,
            "scriptExt": "ts" if typescript else "js",
            "jsxExt": "tsx" if typescript else "jsx",
            "outputDir": config.generators.output_dir.rstrip("/"),
            "locale": config.ui.locale,
            "nsm": config.compliance.nsm.enabled,
            "classification": config.compliance.nsm.classification.value,
            "gdpr": config.compliance.gdpr.enabled,
            "env": [var.model_dump() for var in service.env],
            "values": dict(options.values),
            "config": config.to_dict(),
        }

    def _target_path(self, point: InjectionPoint, context: dict[str, Any]) -> Path:
        target = self._engine.render_string(
            point.target, context, template_id=f"target:{point.template}"
        ).strip()
        return self.project_root / target

    def _apply_point(
        self,
        point: InjectionPoint,
        context: dict[str, Any],
        options: InjectionOptions,
    ) -> InjectedFile:
        path = self._target_path(point, context)
        content = self._engine.render(point.template, context)
        exists = self._fs.is_file(path)
        current = self._fs.read_text(path) if exists else ""

        match point.strategy:
            case InjectionStrategy.REPLACE:
                updated = content
            case InjectionStrategy.APPEND:
                if content.strip() and content.strip() in current:
                    updated = current
                elif current and not current.endswith("\n"):
                    updated = f"{current}\n{content}"
                else:
                    updated = current + content
            case InjectionStrategy.MERGE_JSON:
                updated = self._merge_json(path, current, content)

        if exists and updated == current:
            action = "unchanged"
        else:
            action = "updated" if exists else "created"

        written = action != "unchanged" and not options.dry_run
        if written:
            try:
                self._fs.write_text(path, updated)
            except OSError as e:
                msg = f"Failed to write {path}: {e}"
                raise ServiceInjectionError(msg) from e

        return InjectedFile(
            path=path,
            template_id=point.template,
            strategy=point.strategy,
            action=action,
            written=written,
        )

    def _merge_json(self, path: Path, current: str, content: str) -> str:
        try:
            overlay = orjson.loads(content)
        except orjson.JSONDecodeError as e:
            msg = f"Template output for {path.name} is not valid JSON: {e}"
            raise ServiceInjectionError(msg) from e
        try:
            base = orjson.loads(current) if current.strip() else {}
        except orjson.JSONDecodeError as e:
            msg = f"Cannot merge into {path}: invalid JSON ({e})"
            raise ServiceInjectionError(msg) from e
        if not isinstance(base, dict) or not isinstance(overlay, dict):
            msg = f"Cannot merge into {path}: both sides must be JSON objects"
            raise ServiceInjectionError(msg)

        merged = deep_merge(base, overlay)
        return orjson.dumps(merged, option=orjson.OPT_INDENT_2).decode("utf-8") + "\n"

    def _merge_dependencies(
        self,
        service: ServiceTemplate,
        condition_context: dict[str, Any],
        result: InjectionResult,
    ) -> None:
        """Add missing dependencies to package.json; existing versions are kept."""
        wanted = [
            dep
            for dep in service.dependencies
            if self._conditions.evaluate(dep.condition, condition_context)
        ]
        if not wanted:
            return

        path = self._config_manager.package_json_path
        if not self._fs.is_file(path):
            result.warnings.append(
                f"package.json not found; add manually: {', '.join(d.name for d in wanted)}"
            )
            return
        try:
            package = self._fs.read_json(path)
        except orjson.JSONDecodeError as e:
            msg = f"Cannot update {path}: invalid JSON ({e})"
            raise ServiceInjectionError(msg) from e
        if not isinstance(package, dict):
            msg = f"Cannot update {path}: expected a JSON object"
            raise ServiceInjectionError(msg)

        for dep in wanted:
            section = "devDependencies" if dep.dev else "dependencies"
            declared = package.setdefault(section, {})
            if not isinstance(declared, dict) or dep.name in declared:
                continue
            declared[dep.name] = dep.version
            added = result.dev_dependencies if dep.dev else result.dependencies
            added[dep.name] = dep.version

        if (result.dependencies or result.dev_dependencies) and not result.dry_run:
            self._fs.write_json(path, package)

    def _append_env(
        self,
        service: ServiceTemplate,
        options: InjectionOptions,
        result: InjectionResult,
    ) -> None:
        """Append variables missing from .env.example; existing names are kept."""
        if not service.env:
            return
        path = self.project_root / ENV_EXAMPLE_FILENAME
        current = self._fs.read_text(path) if self._fs.is_file(path) else ""
        existing = _existing_env_names(current)

        lines: list[str] = []
        for var in service.env:
            if var.name in existing:
                continue
            if var.description:
                required = " (required)" if var.required else ""
                lines.append(f"# {var.description}{required}")
            value = options.values.get(var.name, var.default or "")
            lines.append(f"{var.name}={value}")
            result.env_added.append(var.name)

        if not lines or options.dry_run:
            return
        title = service.display_name
        header = f"\n# {title}\n" if current else f"# {title}\n"
        prefix = "" if not current or current.endswith("\n") else "\n"
        self._fs.append_text(path, prefix + header + "\n".join(lines) + "\n")

    def _record(self, service: ServiceTemplate, result: InjectionResult) -> None:
        root = self.project_root
        entry = InstalledService(
            type=service.type,
            provider=service.provider,
            installed_at=datetime.now(tz=UTC).isoformat(),
            files=[
                f.path.relative_to(root).as_posix()
                for f in result.files
                if f.action != "skipped" and f.path.is_relative_to(root)
            ],
            env=[var.name for var in service.env],
            dependencies=sorted([*result.dependencies, *result.dev_dependencies]),
        )
        installed = [s for s in self.list_installed() if s.key != service.key]
        self._write_installed([*installed, entry])

    def _write_installed(self, services: list[InstalledService]) -> None:
        self._fs.write_json(
            self.state_file,
            {"services": [s.model_dump(mode="json") for s in services]},
        )

    def _run_step(self, name: str, command: list[str]) -> PostStepResult:
        if self._logger is not None:
            self._logger.info("service_post_step_started", step=name, command=command)
        outcome = self._runner(command, cwd=self.project_root)
        error = outcome.error
        if error is None and not outcome.success:
            error = outcome.stderr.strip() or None
        if not outcome.success and self._logger is not None:
            self._logger.warning(
                "service_post_step_failed",
                step=name,
                exit_code=outcome.exit_code,
                error=error,
            )
        return PostStepResult(
            name=name,
            command=list(command),
            success=outcome.success,
            exit_code=outcome.exit_code,
            error=error,
        )
