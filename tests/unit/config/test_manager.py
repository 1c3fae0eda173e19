# pyright: reportAny=false
import json
from pathlib import Path

import pytest

from xaheen.config import (
    ConfigError,
    ConfigLoadError,
    ConfigManager,
    ConfigOrigin,
    ConfigValidationError,
    Framework,
    PackageManager,
)
from xaheen.utils import CommandResult
from tests.conftest import JsProject


def write_json(path: Path, data: object) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    _ = path.write_text(json.dumps(data), encoding="utf-8")


@pytest.fixture
def manager(js_project: JsProject) -> ConfigManager:
    return ConfigManager(js_project.root, environ={})


class TestDecisionChain:
    def test_defaults_are_detected_from_project(self, manager: ConfigManager) -> None:
        loaded = manager.load()

        assert loaded.origin == ConfigOrigin.DEFAULTS
        assert loaded.path is None
        assert loaded.config.project.name == "test-app"
        assert loaded.config.project.framework == Framework.REACT
        assert loaded.config.project.package_manager == PackageManager.NPM
        assert loaded.config.project.typescript is True

    def test_unified_file_wins(
        self, js_project: JsProject, manager: ConfigManager
    ) -> None:
        write_json(
            js_project.root / "xaheen.config.json",
            {"project": {"name": "unified", "framework": "vue"}},
        )
        write_json(js_project.root / ".xaheen" / "config.json", {"name": "legacy"})

        loaded = manager.load()

        assert loaded.origin == ConfigOrigin.UNIFIED
        assert loaded.config.project.name == "unified"
        assert loaded.config.project.framework == Framework.VUE

    def test_legacy_xaheen_before_xala(
        self, js_project: JsProject, manager: ConfigManager
    ) -> None:
        write_json(
            js_project.root / ".xaheen" / "config.json",
            {"name": "legacy", "framework": "next"},
        )
        _ = (js_project.root / "xala.config.js").write_text("module.exports = {}")

        loaded = manager.load()

        assert loaded.origin == ConfigOrigin.XAHEEN_LEGACY
        assert loaded.config.project.framework == Framework.NEXTJS
        assert loaded.config.project.package_manager == PackageManager.NPM

    def test_xala_config_is_evaluated(
        self,
        js_project: JsProject,
        manager: ConfigManager,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        _ = (js_project.root / "xala.config.js").write_text("module.exports = {}")
        monkeypatch.setattr(
            "xaheen.config._legacy.run_command",
            lambda *_a, **_k: CommandResult(
                success=True, exit_code=0, stdout='{"projectName": "from-xala"}'
            ),
        )

        loaded = manager.load()

        assert loaded.origin == ConfigOrigin.XALA
        assert loaded.config.project.name == "from-xala"

    def test_broken_legacy_file_is_skipped(
        self, js_project: JsProject, manager: ConfigManager
    ) -> None:
        legacy = js_project.root / ".xaheen" / "config.json"
        legacy.parent.mkdir(parents=True)
        _ = legacy.write_text("{not json", encoding="utf-8")

        assert manager.load().origin == ConfigOrigin.DEFAULTS

    def test_non_utf8_legacy_file_is_skipped(
        self, js_project: JsProject, manager: ConfigManager
    ) -> None:
        legacy = js_project.root / ".xaheen" / "config.json"
        legacy.parent.mkdir(parents=True)
        _ = legacy.write_bytes(b'{"name": "\xff\xfe"}')

        assert manager.load().origin == ConfigOrigin.DEFAULTS

    def test_broken_unified_file_raises(
        self, js_project: JsProject, manager: ConfigManager
    ) -> None:
        _ = (js_project.root / "xaheen.config.json").write_text("{", encoding="utf-8")

        with pytest.raises(ConfigLoadError):
            _ = manager.load()

    def test_invalid_unified_file_raises(
        self, js_project: JsProject, manager: ConfigManager
    ) -> None:
        config_path = js_project.root / "xaheen.config.json"
        write_json(config_path, {"project": {"framework": 1}})

        with pytest.raises(ConfigValidationError):
            _ = manager.load()

    def test_load_is_cached(
        self, js_project: JsProject, manager: ConfigManager
    ) -> None:
        first = manager.load()
        config_path = js_project.root / "xaheen.config.json"
        write_json(config_path, {"project": {"name": "late"}})

        assert manager.load() is first
        manager.clear_cache()
        assert manager.load().config.project.name == "late"


class TestEnvironmentOverrides:
    def test_env_overrides_are_merged(self, js_project: JsProject) -> None:
        environ = {
            "XAHEEN_GENERATORS__OUTPUT_DIR": "app",
            "XAHEEN_PROJECT__TYPESCRIPT": "0",
        }
        manager = ConfigManager(js_project.root, environ=environ)

        config = manager.load().config

        assert config.generators.output_dir == "app"
        assert config.project.typescript is False

    def test_invalid_override_raises(self, js_project: JsProject) -> None:
        environ = {"XAHEEN_PROJECT__PACKAGE_MANAGER": "pip"}
        manager = ConfigManager(js_project.root, environ=environ)

        with pytest.raises(ConfigValidationError):
            _ = manager.load()


class TestMigrate:
    def test_writes_unified_file_from_legacy(
        self, js_project: JsProject, manager: ConfigManager
    ) -> None:
        write_json(js_project.root / ".xaheen" / "config.json", {"name": "legacy"})

        result = manager.migrate()

        assert result.origin == ConfigOrigin.XAHEEN_LEGACY
        assert result.written is True
        saved = json.loads(result.target.read_text(encoding="utf-8"))
        assert saved["project"]["name"] == "legacy"
        assert saved["generators"]["outputDir"] == "src"

    def test_dry_run_writes_nothing(self, manager: ConfigManager) -> None:
        result = manager.migrate(dry_run=True)

        assert result.written is False
        assert result.origin == ConfigOrigin.DEFAULTS
        assert not result.target.exists()

    def test_refuses_to_overwrite_without_force(
        self, js_project: JsProject, manager: ConfigManager
    ) -> None:
        write_json(js_project.root / "xaheen.config.json", {})

        with pytest.raises(ConfigError, match="already exists"):
            _ = manager.migrate()

        assert manager.migrate(force=True).written is True


class TestPersistence:
    def test_initialize_writes_detected_defaults(self, manager: ConfigManager) -> None:
        loaded = manager.initialize()

        assert loaded.origin == ConfigOrigin.UNIFIED
        assert manager.unified_path.exists()
        with pytest.raises(ConfigError):
            _ = manager.initialize()

    def test_update_deep_merges_and_saves(self, manager: ConfigManager) -> None:
        config = manager.update({"generators": {"stories": True}})

        assert config.generators.stories is True
        assert config.generators.output_dir == "src"
        saved = json.loads(manager.unified_path.read_text(encoding="utf-8"))
        assert saved["generators"]["stories"] is True

    def test_add_and_remove_service(self, manager: ConfigManager) -> None:
        _ = manager.add_service("database", "prisma")
        config = manager.add_service("database", "drizzle")

        assert [ref.key for ref in config.services] == ["database/drizzle"]

        config = manager.remove_service("database")

        assert config.services == []

    def test_validate_file_requires_unified_file(self, manager: ConfigManager) -> None:
        with pytest.raises(ConfigLoadError, match="No xaheen.config.json"):
            _ = manager.validate_file()

    def test_validate_file_returns_issues(
        self, js_project: JsProject, manager: ConfigManager
    ) -> None:
        write_json(
            js_project.root / "xaheen.config.json",
            {"project": {"packageManager": "pip"}, "extra": 1},
        )

        assert len(manager.validate_file()) == 1
        assert len(manager.validate_file(strict=True)) == 2
