# pyright: reportAny=false
import json
from pathlib import Path
from typing import Any

import pytest

from xaheen.exceptions import (
    ServiceConflictError,
    ServiceInjectionError,
    ServiceNotFoundError,
)
from xaheen.services import InjectionOptions, ServiceInjector
from xaheen.utils import CommandResult
from tests.conftest import JsProject

from .conftest import FakeRunner


def read_json(path: Path) -> dict[str, Any]:
    return json.loads(path.read_text(encoding="utf-8"))


class TestInject:
    def test_prisma_writes_files_in_priority_order(
        self, js_project: JsProject, injector: ServiceInjector
    ) -> None:
        result = injector.inject("database", "prisma")

        root = js_project.root
        relative = [f.path.relative_to(root).as_posix() for f in result.files]
        assert relative == ["prisma/schema.prisma", "src/lib/db.ts", "package.json"]
        assert [f.action for f in result.files] == ["created", "created", "updated"]
        assert (js_project.root / "src/lib/db.ts").is_file()

    def test_merges_scripts_and_dependencies(
        self, js_project: JsProject, injector: ServiceInjector
    ) -> None:
        result = injector.inject("database", "prisma")

        package = read_json(js_project.package_json)
        assert package["scripts"]["db:migrate"] == "prisma migrate dev"
        assert package["dependencies"]["@prisma/client"] == "^5.0.0"
        assert package["dependencies"]["react"] == "^18.2.0"
        assert package["devDependencies"]["prisma"] == "^5.0.0"
        assert result.dependencies == {"@prisma/client": "^5.0.0"}
        assert result.dev_dependencies == {"prisma": "^5.0.0"}

    def test_existing_dependency_version_is_kept(
        self, js_project: JsProject, injector: ServiceInjector
    ) -> None:
        package = read_json(js_project.package_json)
        package["dependencies"]["@prisma/client"] = "5.1.0"
        _ = js_project.package_json.write_text(json.dumps(package), encoding="utf-8")

        result = injector.inject("database", "prisma")

        dependencies = read_json(js_project.package_json)["dependencies"]
        assert dependencies["@prisma/client"] == "5.1.0"
        assert "@prisma/client" not in result.dependencies

    def test_appends_env_example_once(
        self, js_project: JsProject, injector: ServiceInjector
    ) -> None:
        env_file = js_project.root / ".env.example"
        _ = env_file.write_text("EXISTING=1", encoding="utf-8")

        result = injector.inject("database", "prisma")

        content = env_file.read_text(encoding="utf-8")
        assert content.startswith("EXISTING=1\n\n# Prisma\n")
        assert "# Connection string of the application database (required)" in content
        assert "DATABASE_URL=postgresql://" in content
        assert result.env_added == ["DATABASE_URL"]

    def test_set_values_fill_env_defaults(
        self, js_project: JsProject, injector: ServiceInjector
    ) -> None:
        options = InjectionOptions(values={"RESEND_API_KEY": "re_test"})

        _ = injector.inject("email", "resend", options)

        content = (js_project.root / ".env.example").read_text(encoding="utf-8")
        assert "RESEND_API_KEY=re_test" in content
        assert "EMAIL_FROM=noreply@example.com" in content

    def test_records_installed_service(
        self, js_project: JsProject, injector: ServiceInjector
    ) -> None:
        _ = injector.inject("database", "prisma")

        installed = injector.list_installed()
        assert [s.key for s in installed] == ["database/prisma"]
        assert "prisma/schema.prisma" in installed[0].files
        assert installed[0].env == ["DATABASE_URL"]
        assert installed[0].dependencies == ["@prisma/client", "prisma"]
        assert (js_project.root / ".xaheen" / "services.json").is_file()

    def test_updates_unified_config_when_present(
        self, js_project: JsProject, injector: ServiceInjector
    ) -> None:
        _ = injector.config_manager.initialize()

        _ = injector.inject("payments", "stripe")

        saved = read_json(js_project.root / "xaheen.config.json")
        assert saved["services"] == [{"type": "payments", "provider": "stripe"}]

    def test_conditions_select_framework_variant(
        self, js_project: JsProject, injector: ServiceInjector
    ) -> None:
        result = injector.inject("auth", "clerk")

        actions = [(f.template_id, f.action) for f in result.files]
        assert actions == [
            ("services/auth/clerk/middleware", "skipped"),
            ("services/auth/clerk/client", "skipped"),
            ("services/auth/clerk/client-react", "created"),
        ]
        assert not (js_project.root / "src/middleware.ts").exists()
        assert "@clerk/clerk-react" in result.dependencies
        assert "@clerk/nextjs" not in result.dependencies

    def test_second_injection_leaves_files_unchanged(
        self, injector: ServiceInjector
    ) -> None:
        _ = injector.inject("payments", "stripe")

        result = injector.inject("payments", "stripe")

        assert [f.action for f in result.files] == ["unchanged"]
        assert result.env_added == []
        assert result.dependencies == {}


class TestDryRun:
    def test_writes_nothing(
        self, js_project: JsProject, injector: ServiceInjector
    ) -> None:
        before = js_project.package_json.read_text(encoding="utf-8")

        result = injector.inject("database", "prisma", InjectionOptions(dry_run=True))

        assert result.dry_run is True
        assert not any(f.written for f in result.files)
        assert result.dependencies == {"@prisma/client": "^5.0.0"}
        assert result.env_added == ["DATABASE_URL"]
        assert js_project.package_json.read_text(encoding="utf-8") == before
        assert not (js_project.root / "prisma").exists()
        assert not (js_project.root / ".env.example").exists()
        assert injector.list_installed() == []


class TestConflicts:
    def test_same_type_conflicts(self, injector: ServiceInjector) -> None:
        _ = injector.inject("database", "prisma")

        with pytest.raises(ServiceConflictError) as exc_info:
            _ = injector.inject("database", "drizzle")

        assert exc_info.value.conflicts == [
            "database/prisma is already installed for database"
        ]

    def test_force_turns_conflicts_into_warnings(
        self, injector: ServiceInjector
    ) -> None:
        _ = injector.inject("database", "prisma")

        result = injector.inject("database", "drizzle", InjectionOptions(force=True))

        assert result.warnings == ["database/prisma is already installed for database"]
        keys = [s.key for s in injector.list_installed()]
        assert keys == ["database/prisma", "database/drizzle"]

    def test_unsupported_framework_conflicts(
        self, js_project: JsProject, injector: ServiceInjector
    ) -> None:
        _ = (js_project.root / "xaheen.config.json").write_text(
            '{"project": {"framework": "vue"}}', encoding="utf-8"
        )

        with pytest.raises(ServiceConflictError, match="does not support vue"):
            _ = injector.inject("auth", "clerk")

    def test_unknown_service(self, injector: ServiceInjector) -> None:
        with pytest.raises(ServiceNotFoundError):
            _ = injector.inject("auth", "okta")


class TestPostSteps:
    def test_run_only_on_request(
        self, injector: ServiceInjector, runner: FakeRunner
    ) -> None:
        _ = injector.inject("database", "prisma")
        assert runner.calls == []

        result = injector.inject(
            "database", "prisma", InjectionOptions(run_post_steps=True)
        )

        assert runner.calls == [["npx", "prisma", "generate"]]
        assert result.success is True

    def test_failed_step_is_reported(
        self, injector: ServiceInjector, runner: FakeRunner
    ) -> None:
        runner.result = CommandResult(success=False, exit_code=1, stderr="boom\n")

        result = injector.inject(
            "database", "prisma", InjectionOptions(run_post_steps=True)
        )

        assert result.success is False
        assert result.post_steps[0].error == "boom"
        assert result.post_steps[0].exit_code == 1


class TestRemove:
    def test_removes_metadata_only(
        self, js_project: JsProject, injector: ServiceInjector
    ) -> None:
        _ = injector.inject("payments", "stripe")

        removed = injector.remove("payments/stripe")

        assert removed.key == "payments/stripe"
        assert injector.list_installed() == []
        assert (js_project.root / "src/lib/stripe.ts").is_file()

    def test_unknown_service_raises(self, injector: ServiceInjector) -> None:
        with pytest.raises(ServiceNotFoundError):
            _ = injector.remove("payments/stripe")

    def test_malformed_record_raises(
        self, js_project: JsProject, injector: ServiceInjector
    ) -> None:
        state = js_project.root / ".xaheen" / "services.json"
        state.parent.mkdir()
        _ = state.write_text("{", encoding="utf-8")

        with pytest.raises(ServiceInjectionError):
            _ = injector.list_installed()
