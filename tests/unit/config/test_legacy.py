# pyright: reportAny=false
from pathlib import Path

import pytest

from xaheen.config import (
    Classification,
    ConfigLoadError,
    ConfigValidationError,
    Framework,
    PackageManager,
    XaheenConfig,
    evaluate_commonjs,
    migrate_legacy_xaheen,
    migrate_xala,
)
from xaheen.utils import CommandResult


@pytest.fixture
def defaults() -> XaheenConfig:
    return XaheenConfig.from_dict({"project": {"name": "detected"}})


class TestMigrateLegacyXaheen:
    def test_flat_format(self, defaults: XaheenConfig) -> None:
        data = {
            "name": "legacy-app",
            "framework": "next",
            "packageManager": "pnpm",
            "typescript": False,
            "features": ["testing"],
            "outputDir": "app",
        }

        config = migrate_legacy_xaheen(data, defaults)

        assert config.project.name == "legacy-app"
        assert config.project.framework == Framework.NEXTJS
        assert config.project.package_manager == PackageManager.PNPM
        assert config.project.typescript is False
        assert config.generators.output_dir == "app"
        assert config.generators.tests is True
        assert config.generators.stories is False

    def test_nested_format_with_services(self, defaults: XaheenConfig) -> None:
        data = {
            "project": {"name": "nested", "framework": "vue3"},
            "services": {"auth": {"provider": "clerk"}, "database": "prisma"},
        }

        config = migrate_legacy_xaheen(data, defaults)

        assert config.project.framework == Framework.VUE
        assert config.has_service("auth", "clerk")
        assert config.has_service("database", "prisma")

    def test_unmentioned_fields_keep_defaults(self, defaults: XaheenConfig) -> None:
        config = migrate_legacy_xaheen({}, defaults)

        assert config.project.name == "detected"
        assert config.ui.locale == "nb-NO"

    def test_invalid_values_raise(self, defaults: XaheenConfig) -> None:
        with pytest.raises(ConfigValidationError):
            _ = migrate_legacy_xaheen({"packageManager": "pip"}, defaults)


class TestMigrateXala:
    def test_maps_xala_fields(self, defaults: XaheenConfig) -> None:
        data = {
            "projectName": "xala-app",
            "platform": "react",
            "componentsDir": "src/ui",
            "ui": {"system": "xala", "locale": "en-US"},
            "compliance": {
                "nsm": {"enabled": True, "classification": "restricted"},
                "gdpr": True,
            },
        }

        config = migrate_xala(data, defaults)

        assert config.project.name == "xala-app"
        assert config.generators.output_dir == "src/ui"
        assert config.ui.locale == "en-US"
        assert config.compliance.nsm.enabled is True
        assert config.compliance.nsm.classification == Classification.RESTRICTED
        assert config.compliance.gdpr.enabled is True


class TestEvaluateCommonjs:
    def test_returns_exported_object(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        path = tmp_path / "xala.config.js"
        _ = path.write_text("module.exports = {}", encoding="utf-8")
        calls: list[list[str]] = []

        def fake_run(argv: list[str], **_kwargs: object) -> CommandResult:
            calls.append(argv)
            stdout = '{"projectName": "x"}'
            return CommandResult(success=True, exit_code=0, stdout=stdout)

        monkeypatch.setattr("xaheen.config._legacy.run_command", fake_run)

        assert evaluate_commonjs(path) == {"projectName": "x"}
        assert calls[0][0] == "node"
        assert calls[0][-1] == str(path.resolve())

    def test_missing_node_raises(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        path = tmp_path / "xala.config.js"
        monkeypatch.setattr(
            "xaheen.config._legacy.run_command",
            lambda *_a, **_k: CommandResult(success=False, command_not_found=True),
        )

        with pytest.raises(ConfigLoadError, match="node is not installed"):
            _ = evaluate_commonjs(path)

    def test_non_object_export_raises(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        path = tmp_path / "xala.config.js"
        monkeypatch.setattr(
            "xaheen.config._legacy.run_command",
            lambda *_a, **_k: CommandResult(success=True, exit_code=0, stdout="null"),
        )

        with pytest.raises(ConfigLoadError, match="must export an object"):
            _ = evaluate_commonjs(path)

    def test_failed_evaluation_raises(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        path = tmp_path / "xala.config.js"
        monkeypatch.setattr(
            "xaheen.config._legacy.run_command",
            lambda *_a, **_k: CommandResult(
                success=False, exit_code=1, stderr="SyntaxError"
            ),
        )

        with pytest.raises(ConfigLoadError, match="SyntaxError"):
            _ = evaluate_commonjs(path)
