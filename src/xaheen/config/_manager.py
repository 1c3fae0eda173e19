# pyright: reportAny=false, reportExplicitAny=false
"""Configuration loading, migration and persistence.

``ConfigManager`` walks the migration decision chain:

1. ``xaheen.config.json`` (unified)
2. ``.xaheen/config.json`` (earlier Xaheen CLI)
3. ``xala.config.js`` (Xala CLI, evaluated with node)
4. Defaults synthesised from the project files

The first source present wins. A legacy source that cannot be read or
migrated is logged and skipped; a broken unified file is an error.
``XAHEEN_<SECTION>__<KEY>`` environment variables are deep-merged over
whichever source was used.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from xaheen.exceptions import ConfigError, ConfigLoadError
from xaheen.utils import FileSystemGateway

from ._detect import MonorepoInfo, ProjectDetector
from ._legacy import evaluate_commonjs, migrate_legacy_xaheen, migrate_xala
from ._loader import deep_merge, parse_env_vars, read_json_file
from ._models import ConfigOrigin, ServiceRef, XaheenConfig
from ._validation import ValidationIssue, parse_config, validate_config

if TYPE_CHECKING:
    from collections.abc import Mapping
    from pathlib import Path

    from structlog.typing import FilteringBoundLogger

CONFIG_FILENAME = "xaheen.config.json"
LEGACY_CONFIG_FILENAME = "config.json"
XALA_CONFIG_FILENAME = "xala.config.js"


@dataclass(frozen=True, slots=True)
class LoadedConfig:
    """A configuration together with where it came from.

    Attributes:
        config: The validated configuration.
        origin: Which step of the decision chain produced it.
        path: The file it was read from, None for synthesised defaults.
    """

    config: XaheenConfig
    origin: ConfigOrigin
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class MigrationResult:
    """Outcome of ``ConfigManager.migrate``.

    Attributes:
        config: The migrated configuration.
        origin: The source the configuration was migrated from.
        source: The legacy file, None when defaults were synthesised.
        target: The unified file that was (or would be) written.
        written: Whether the target was written.
    """

    config: XaheenConfig
    origin: ConfigOrigin
    source: Path | None
    target: Path
    written: bool


class ConfigManager:
    """Loads, migrates and saves the configuration of one project.

    The loaded configuration is cached; ``save`` and the update helpers
    refresh the cache, ``clear_cache`` drops it.

    Args:
        project_root: Root directory of the project.
        fs: File system gateway.
        logger: Optional logger.
        environ: Environment to read overrides from. Defaults to ``os.environ``.
    """

    def __init__(
        self,
        project_root: Path,
        *,
        fs: FileSystemGateway | None = None,
        logger: FilteringBoundLogger | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        self._root: Path = project_root
        self._fs: FileSystemGateway = fs or FileSystemGateway()
        self._logger: FilteringBoundLogger | None = logger
        self._environ: Mapping[str, str] | None = environ
        self._detector: ProjectDetector = ProjectDetector(
            project_root, fs=self._fs, logger=logger
        )
        self._loaded: LoadedConfig | None = None

    # -- paths ----------------------------------------------------------------

    @property
    def project_root(self) -> Path:
        return self._root

    @property
    def fs(self) -> FileSystemGateway:
        return self._fs

    @property
    def unified_path(self) -> Path:
        return self._root / CONFIG_FILENAME

    @property
    def legacy_path(self) -> Path:
        return self._root / ".xaheen" / LEGACY_CONFIG_FILENAME

    @property
    def xala_path(self) -> Path:
        return self._root / XALA_CONFIG_FILENAME

    @property
    def package_json_path(self) -> Path:
        return self._root / "package.json"

    # -- loading --------------------------------------------------------------

    def load(self) -> LoadedConfig:
        """Load the configuration through the decision chain.

        Raises:
            ConfigLoadError: If ``xaheen.config.json`` is not valid JSON.
            ConfigValidationError: If ``xaheen.config.json`` or an environment
                override violates the schema.
        """
        if self._loaded is None:
            loaded = self._load_unified() or self._load_legacy()
            self._loaded = self._apply_env(loaded)
            if self._logger is not None:
                self._logger.info(
                    "config_loaded",
                    origin=self._loaded.origin.value,
                    path=str(self._loaded.path) if self._loaded.path else None,
                )
        return self._loaded

    def clear_cache(self) -> None:
        self._loaded = None

    def detect_defaults(self) -> XaheenConfig:
        """Synthesise a configuration from package.json, lockfiles and layout."""
        return self._detector.detect()

    def monorepo_info(self) -> MonorepoInfo:
        return self._detector.detect_monorepo(self._detector.read_package_json())

    def _load_unified(self) -> LoadedConfig | None:
        path = self.unified_path
        if not self._fs.is_file(path):
            return None
        data = read_json_file(path, self._fs)
        config = parse_config(data, source=CONFIG_FILENAME)
        return LoadedConfig(config=config, origin=ConfigOrigin.UNIFIED, path=path)

    def _load_legacy(self) -> LoadedConfig:
        """Walk the legacy steps of the chain, ending at synthesised defaults."""
        defaults = self.detect_defaults()

        if self._fs.is_file(self.legacy_path):
            try:
                data = read_json_file(self.legacy_path, self._fs)
                config = migrate_legacy_xaheen(data, defaults)
            except (ConfigError, OSError) as e:
                self._log_skipped(self.legacy_path, e)
            else:
                return LoadedConfig(
                    config=config,
                    origin=ConfigOrigin.XAHEEN_LEGACY,
                    path=self.legacy_path,
                )

        if self._fs.is_file(self.xala_path):
            try:
                data = evaluate_commonjs(self.xala_path)
                config = migrate_xala(data, defaults)
            except ConfigError as e:
                self._log_skipped(self.xala_path, e)
            else:
                return LoadedConfig(
                    config=config, origin=ConfigOrigin.XALA, path=self.xala_path
                )

        return LoadedConfig(config=defaults, origin=ConfigOrigin.DEFAULTS)

    def _apply_env(self, loaded: LoadedConfig) -> LoadedConfig:
        overrides = parse_env_vars(environ=self._environ)
        if not overrides:
            return loaded
        if self._logger is not None:
            self._logger.debug("config_env_overrides", keys=sorted(overrides))
        merged = deep_merge(loaded.config.to_dict(), overrides)
        config = parse_config(merged, source="environment")
        return LoadedConfig(config=config, origin=loaded.origin, path=loaded.path)

    def _log_skipped(self, path: Path, error: Exception) -> None:
        if self._logger is not None:
            self._logger.warning(
                "legacy_config_skipped",
                path=str(path),
                error=str(error),
                error_type=type(error).__name__,
            )

    # -- migration and persistence ----------------------------------------------

    def migrate(self, *, dry_run: bool = False, force: bool = False) -> MigrationResult:
        """Migrate legacy configuration to ``xaheen.config.json``.

        Args:
            dry_run: Compute the migrated configuration without writing it.
            force: Overwrite an existing ``xaheen.config.json``.

        Raises:
            ConfigError: If the unified file exists and ``force`` is not set.
        """
        target = self.unified_path
        if self._fs.exists(target) and not force:
            msg = f"{CONFIG_FILENAME} already exists; use --force to overwrite it"
            raise ConfigError(msg)

        loaded = self._load_legacy()
        if not dry_run:
            self.save(loaded.config)
        if self._logger is not None:
            self._logger.info(
                "config_migrated",
                origin=loaded.origin.value,
                source=str(loaded.path) if loaded.path else None,
                dry_run=dry_run,
            )
        return MigrationResult(
            config=loaded.config,
            origin=loaded.origin,
            source=loaded.path,
            target=target,
            written=not dry_run,
        )

    def initialize(self, *, force: bool = False) -> LoadedConfig:
        """Write the detected defaults to ``xaheen.config.json``.

        Raises:
            ConfigError: If the unified file exists and ``force`` is not set.
        """
        if self._fs.exists(self.unified_path) and not force:
            msg = f"{CONFIG_FILENAME} already exists; use --force to overwrite it"
            raise ConfigError(msg)
        path = self.save(self.detect_defaults())
        if self._logger is not None:
            self._logger.info("config_initialized", path=str(path))
        return self.load()

    def save(self, config: XaheenConfig) -> Path:
        """Write ``config`` to ``xaheen.config.json`` and cache it."""
        path = self.unified_path
        self._fs.write_json(path, config.to_dict())
        self._loaded = LoadedConfig(config=config, origin=ConfigOrigin.UNIFIED, path=path)
        if self._logger is not None:
            self._logger.debug("config_saved", path=str(path))
        return path

    def validate_file(self, *, strict: bool = False) -> list[ValidationIssue]:
        """Validate ``xaheen.config.json`` without loading it.

        Raises:
            ConfigLoadError: If the file is missing or not valid JSON.
        """
        path = self.unified_path
        if not self._fs.is_file(path):
            msg = f"No {CONFIG_FILENAME} found in {self._root}"
            raise ConfigLoadError(msg, path=path)
        data = read_json_file(path, self._fs)
        return validate_config(data, strict=strict, source=CONFIG_FILENAME)

    def update(self, partial: dict[str, Any]) -> XaheenConfig:
        """Deep-merge ``partial`` (camelCase keys) into the config and save it.

        Raises:
            ConfigValidationError: If the merged configuration is invalid.
        """
        merged = deep_merge(self.load().config.to_dict(), partial)
        config = parse_config(merged, source="update")
        _ = self.save(config)
        return config

    def add_service(self, service_type: str, provider: str) -> XaheenConfig:
        config = self.load().config.with_service(service_type, provider)
        _ = self.save(config)
        return config

    def remove_service(self, service_type: str) -> XaheenConfig:
        """Drop every recorded service of ``service_type`` and save."""
        current = self.load().config
        services: list[ServiceRef] = [
            ref for ref in current.services if ref.type != service_type
        ]
        config = current.model_copy(update={"services": services})
        _ = self.save(config)
        return config

