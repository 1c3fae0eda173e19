import json
from collections.abc import Callable
from pathlib import Path

import pytest

from tests.conftest import JsProject

Cli = Callable[..., int]


class TestGenerateCommand:
    def test_generates_component_and_test(
        self, xaheen_cli: Cli, js_project: JsProject, capsys: pytest.CaptureFixture[str]
    ) -> None:
        exit_code = xaheen_cli(js_project.root, "generate", "component", "user-card")

        out = capsys.readouterr().out
        assert exit_code == 0
        assert "created  src/components/UserCard/UserCard.tsx" in out
        assert "created  src/components/UserCard/UserCard.test.tsx" in out
        component = js_project.root / "src/components/UserCard/UserCard.tsx"
        assert component.is_file()
        assert "UserCard" in component.read_text(encoding="utf-8")

    def test_dry_run_writes_nothing(
        self, xaheen_cli: Cli, js_project: JsProject, capsys: pytest.CaptureFixture[str]
    ) -> None:
        exit_code = xaheen_cli(
            js_project.root, "generate", "component", "Button", "--dry-run"
        )

        out = capsys.readouterr().out
        assert exit_code == 0
        assert "would create  src/components/Button/Button.tsx" in out
        assert not (js_project.root / "src/components").exists()

    def test_json_format(
        self, xaheen_cli: Cli, js_project: JsProject, capsys: pytest.CaptureFixture[str]
    ) -> None:
        exit_code = xaheen_cli(
            js_project.root,
            "generate",
            "hook",
            "auth",
            "--format",
            "json",
        )

        data = json.loads(capsys.readouterr().out)
        assert exit_code == 0
        assert data["type"] == "hook"
        assert data["dry_run"] is False
        assert [f["path"] for f in data["files"]] == [
            "src/hooks/useAuth.ts",
            "src/hooks/useAuth.test.ts",
        ]

    def test_existing_file_is_io_error(
        self, xaheen_cli: Cli, js_project: JsProject, capsys: pytest.CaptureFixture[str]
    ) -> None:
        _ = xaheen_cli(js_project.root, "generate", "component", "Button")
        _ = capsys.readouterr()

        exit_code = xaheen_cli(js_project.root, "generate", "component", "Button")

        assert exit_code == 4
        assert "already exists" in capsys.readouterr().err

    def test_force_overwrites(self, xaheen_cli: Cli, js_project: JsProject) -> None:
        _ = xaheen_cli(js_project.root, "generate", "component", "Button")

        exit_code = xaheen_cli(
            js_project.root, "generate", "component", "Button", "--force"
        )

        assert exit_code == 0

    def test_unknown_type_fails(self, xaheen_cli: Cli, js_project: JsProject) -> None:
        exit_code = xaheen_cli(js_project.root, "generate", "widget", "Button")

        assert exit_code != 0
        assert not (js_project.root / "src/components").exists()


class TestAddCommand:
    def test_dry_run_reports_changes(
        self, xaheen_cli: Cli, js_project: JsProject, capsys: pytest.CaptureFixture[str]
    ) -> None:
        before = js_project.package_json.read_text(encoding="utf-8")

        exit_code = xaheen_cli(
            js_project.root, "add", "database", "prisma", "--dry-run"
        )

        captured = capsys.readouterr()
        assert exit_code == 0
        assert "prisma/schema.prisma" in captured.out
        assert "DATABASE_URL" in captured.out
        assert "database/prisma would add" in captured.err
        assert js_project.package_json.read_text(encoding="utf-8") == before
        assert not (js_project.root / "prisma").exists()

    def test_adds_service(
        self, xaheen_cli: Cli, js_project: JsProject, capsys: pytest.CaptureFixture[str]
    ) -> None:
        exit_code = xaheen_cli(js_project.root, "add", "database", "prisma")

        assert exit_code == 0
        assert "database/prisma added" in capsys.readouterr().err
        assert (js_project.root / "prisma" / "schema.prisma").is_file()
        package = json.loads(js_project.package_json.read_text(encoding="utf-8"))
        assert "@prisma/client" in package["dependencies"]

    def test_conflict_is_validation_error(
        self, xaheen_cli: Cli, js_project: JsProject, capsys: pytest.CaptureFixture[str]
    ) -> None:
        _ = xaheen_cli(js_project.root, "add", "database", "prisma")
        _ = capsys.readouterr()

        exit_code = xaheen_cli(js_project.root, "add", "database", "drizzle")

        assert exit_code == 2
        assert "already installed" in capsys.readouterr().err

    def test_unknown_service_is_not_found(
        self, xaheen_cli: Cli, js_project: JsProject
    ) -> None:
        exit_code = xaheen_cli(js_project.root, "add", "database", "mongoose")

        assert exit_code == 3

    def test_malformed_set_is_validation_error(
        self, xaheen_cli: Cli, js_project: JsProject
    ) -> None:
        exit_code = xaheen_cli(
            js_project.root, "add", "email", "resend", "--set", "novalue"
        )

        assert exit_code == 2


class TestServicesCommands:
    def test_list_text(
        self, xaheen_cli: Cli, js_project: JsProject, capsys: pytest.CaptureFixture[str]
    ) -> None:
        exit_code = xaheen_cli(
            js_project.root, "services", "list", "--type", "database", "-f", "text"
        )

        lines = capsys.readouterr().out.splitlines()
        assert exit_code == 0
        assert [line.split()[0] for line in lines] == [
            "database/drizzle",
            "database/prisma",
        ]

    def test_installed_and_remove(
        self, xaheen_cli: Cli, js_project: JsProject, capsys: pytest.CaptureFixture[str]
    ) -> None:
        _ = xaheen_cli(js_project.root, "add", "database", "prisma")
        _ = capsys.readouterr()

        assert xaheen_cli(js_project.root, "services", "installed", "-f", "json") == 0
        installed = json.loads(capsys.readouterr().out)
        assert [(s["type"], s["provider"]) for s in installed] == [
            ("database", "prisma")
        ]

        assert xaheen_cli(js_project.root, "services", "remove", "database/prisma") == 0
        assert "Removed database/prisma" in capsys.readouterr().err

        _ = xaheen_cli(js_project.root, "services", "installed", "-f", "json")
        assert json.loads(capsys.readouterr().out) == []

    def test_remove_unknown_is_not_found(
        self, xaheen_cli: Cli, js_project: JsProject
    ) -> None:
        exit_code = xaheen_cli(js_project.root, "services", "remove", "auth/clerk")

        assert exit_code == 3


class TestConfigCommands:
    def test_show_defaults(
        self, xaheen_cli: Cli, js_project: JsProject, capsys: pytest.CaptureFixture[str]
    ) -> None:
        exit_code = xaheen_cli(js_project.root, "config", "show")

        captured = capsys.readouterr()
        data = json.loads(captured.out)
        assert exit_code == 0
        assert data["project"]["framework"] == "react"
        assert data["project"]["packageManager"] == "npm"
        assert "Source: defaults" in captured.err

    def test_init_then_init_again(
        self, xaheen_cli: Cli, js_project: JsProject, capsys: pytest.CaptureFixture[str]
    ) -> None:
        assert xaheen_cli(js_project.root, "config", "init") == 0
        assert "(react, npm)" in capsys.readouterr().err
        assert (js_project.root / "xaheen.config.json").is_file()

        assert xaheen_cli(js_project.root, "config", "init") == 1
        assert "already exists" in capsys.readouterr().err

    def test_validate_missing_file(
        self, xaheen_cli: Cli, js_project: JsProject
    ) -> None:
        exit_code = xaheen_cli(js_project.root, "config", "validate")

        assert exit_code == 1

    def test_validate_valid_file(
        self, xaheen_cli: Cli, js_project: JsProject, capsys: pytest.CaptureFixture[str]
    ) -> None:
        _ = xaheen_cli(js_project.root, "config", "init")
        _ = capsys.readouterr()

        exit_code = xaheen_cli(js_project.root, "config", "validate")

        out = capsys.readouterr().out
        assert exit_code == 0
        assert "Validation complete: 0 errors, 0 warnings" in out

    def test_validate_invalid_file(
        self, xaheen_cli: Cli, js_project: JsProject, capsys: pytest.CaptureFixture[str]
    ) -> None:
        config = {"project": {"name": "app", "framework": "cobol"}}
        _ = (js_project.root / "xaheen.config.json").write_text(
            json.dumps(config), encoding="utf-8"
        )

        exit_code = xaheen_cli(js_project.root, "config", "validate", "-f", "json")

        data = json.loads(capsys.readouterr().out)
        assert exit_code == 2
        assert data["valid"] is False
        assert any(i["key"] == "project.framework" for i in data["issues"])

    def test_migrate_legacy_config(
        self, xaheen_cli: Cli, js_project: JsProject, capsys: pytest.CaptureFixture[str]
    ) -> None:
        legacy = js_project.root / ".xaheen" / "config.json"
        legacy.parent.mkdir()
        _ = legacy.write_text(
            json.dumps({"name": "legacy-app", "framework": "vue"}),
            encoding="utf-8",
        )

        exit_code = xaheen_cli(js_project.root, "config", "migrate")

        assert exit_code == 0
        assert "Migrated" in capsys.readouterr().err
        unified = json.loads(
            (js_project.root / "xaheen.config.json").read_text(encoding="utf-8")
        )
        assert unified["project"]["framework"] == "vue"

    def test_migrate_dry_run(
        self, xaheen_cli: Cli, js_project: JsProject, capsys: pytest.CaptureFixture[str]
    ) -> None:
        exit_code = xaheen_cli(js_project.root, "config", "migrate", "--dry-run")

        captured = capsys.readouterr()
        assert exit_code == 0
        assert json.loads(captured.out)["project"]["framework"] == "react"
        assert "Would migrate detected defaults" in captured.err
        assert not (js_project.root / "xaheen.config.json").exists()


class TestTemplatesCommands:
    @pytest.fixture
    def greeting(self, js_project: JsProject) -> Path:
        js_project.templates_dir.mkdir(parents=True)
        path = js_project.templates_dir / "greeting.hbs"
        _ = path.write_text("Hello {{name}}!", encoding="utf-8")
        return path

    def test_list_includes_builtin_and_project_templates(
        self,
        xaheen_cli: Cli,
        js_project: JsProject,
        greeting: Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        exit_code = xaheen_cli(js_project.root, "templates", "list", "-f", "text")

        ids = capsys.readouterr().out.splitlines()
        assert exit_code == 0
        assert "greeting" in ids
        assert "component/react" in ids

    def test_list_with_prefix(
        self, xaheen_cli: Cli, js_project: JsProject, capsys: pytest.CaptureFixture[str]
    ) -> None:
        exit_code = xaheen_cli(
            js_project.root, "templates", "list", "--prefix", "hook/", "-f", "text"
        )

        ids = capsys.readouterr().out.splitlines()
        assert exit_code == 0
        assert ids
        assert all(i.startswith("hook/") for i in ids)

    def test_render_with_data(
        self,
        xaheen_cli: Cli,
        js_project: JsProject,
        greeting: Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        exit_code = xaheen_cli(
            js_project.root,
            "templates",
            "render",
            "greeting",
            "--data",
            '{"name": "Ola"}',
        )

        assert exit_code == 0
        assert capsys.readouterr().out == "Hello Ola!\n"

    def test_render_to_file(
        self, xaheen_cli: Cli, js_project: JsProject, greeting: Path, tmp_path: Path
    ) -> None:
        output = tmp_path / "out" / "greeting.txt"

        exit_code = xaheen_cli(
            js_project.root,
            "templates",
            "render",
            "greeting",
            "--data",
            '{"name": "Kari"}',
            "-o",
            str(output),
        )

        assert exit_code == 0
        assert output.read_text(encoding="utf-8") == "Hello Kari!"

    def test_render_invalid_data(
        self, xaheen_cli: Cli, js_project: JsProject, greeting: Path
    ) -> None:
        exit_code = xaheen_cli(
            js_project.root, "templates", "render", "greeting", "--data", "[1, 2]"
        )

        assert exit_code == 2

    def test_render_missing_template(
        self, xaheen_cli: Cli, js_project: JsProject
    ) -> None:
        exit_code = xaheen_cli(js_project.root, "templates", "render", "nope")

        assert exit_code == 3

    def test_resolve_applies_inheritance(
        self, xaheen_cli: Cli, js_project: JsProject, capsys: pytest.CaptureFixture[str]
    ) -> None:
        exit_code = xaheen_cli(
            js_project.root, "templates", "resolve", "component/react"
        )

        out = capsys.readouterr().out
        assert exit_code == 0
        assert "{{#block" not in out
