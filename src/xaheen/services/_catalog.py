# pyright: reportAny=false, reportExplicitAny=false
"""Service catalog loaded from YAML files.

Each ``*.yaml`` or ``*.yml`` file holds one service mapping, or a list of
them under a top-level ``services`` key. The built-in catalog ships with the
package; ``XAHEEN_LOCAL_REGISTRY`` names a directory whose entries are read
after it and replace built-in entries with the same ``type/provider`` key.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import TYPE_CHECKING, Any

import yaml
from pydantic import ValidationError

from xaheen.exceptions import ServiceInjectionError, ServiceNotFoundError
from xaheen.utils import FileSystemGateway, get_catalog_dir

from ._models import ServiceTemplate

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from structlog.typing import FilteringBoundLogger

LOCAL_REGISTRY_ENV = "XAHEEN_LOCAL_REGISTRY"
CATALOG_PATTERNS = ("*.yaml", "*.yml")


def catalog_directories(environ: Mapping[str, str] | None = None) -> list[Path]:
    """Return the catalog directories, lowest precedence first."""
    env = os.environ if environ is None else environ
    directories = [get_catalog_dir()]
    local = env.get(LOCAL_REGISTRY_ENV, "").strip()
    if local:
        directories.append(Path(local).expanduser())
    return directories


class ServiceCatalog:
    """Service templates keyed by ``type/provider``.

    Files are read on first access.

    Args:
        directories: Catalog directories, lowest precedence first. Missing
            directories are skipped.
        fs: File system gateway.
        logger: Optional logger.
    """

    def __init__(
        self,
        directories: Sequence[Path],
        *,
        fs: FileSystemGateway | None = None,
        logger: FilteringBoundLogger | None = None,
    ) -> None:
        self._directories: list[Path] = list(directories)
        self._fs: FileSystemGateway = fs or FileSystemGateway()
        self._logger: FilteringBoundLogger | None = logger
        self._services: dict[str, ServiceTemplate] | None = None

    @classmethod
    def default(
        cls,
        *,
        fs: FileSystemGateway | None = None,
        logger: FilteringBoundLogger | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> ServiceCatalog:
        """Create a catalog over the built-in and local registry directories."""
        return cls(catalog_directories(environ), fs=fs, logger=logger)

    @property
    def directories(self) -> list[Path]:
        return list(self._directories)

    def get(self, service_type: str, provider: str) -> ServiceTemplate:
        """Return the catalog entry for ``service_type/provider``.

        Raises:
            ServiceNotFoundError: If the key is not in the catalog.
        """
        key = f"{service_type}/{provider}"
        service = self._load().get(key)
        if service is None:
            providers = self.providers(service_type)
            hint = f" (available: {', '.join(providers)})" if providers else ""
            msg = f"Unknown service: {key}{hint}"
            raise ServiceNotFoundError(msg, service_key=key)
        return service

    def find(self, key: str) -> ServiceTemplate | None:
        return self._load().get(key)

    def list_services(self) -> list[ServiceTemplate]:
        """Return every entry sorted by key."""
        services = self._load()
        return [services[key] for key in sorted(services)]

    def types(self) -> list[str]:
        return sorted({service.type for service in self._load().values()})

    def providers(self, service_type: str) -> list[str]:
        return sorted(
            service.provider
            for service in self._load().values()
            if service.type == service_type
        )

    def reload(self) -> None:
        self._services = None

    def _load(self) -> dict[str, ServiceTemplate]:
        if self._services is None:
            services: dict[str, ServiceTemplate] = {}
            for directory in self._directories:
                for path in self._catalog_files(directory):
                    for service in self._read_file(path):
                        services[service.key] = service
            self._services = services
            if self._logger is not None:
                self._logger.debug("service_catalog_loaded", count=len(services))
        return self._services

    def _catalog_files(self, directory: Path) -> list[Path]:
        files: set[Path] = set()
        for pattern in CATALOG_PATTERNS:
            files.update(self._fs.list_files(directory, pattern))
        return sorted(files)

    def _read_file(self, path: Path) -> list[ServiceTemplate]:
        """Parse one catalog file.

        Raises:
            ServiceInjectionError: If the file is not valid YAML or an entry
                violates the schema.
        """
        try:
            data: Any = yaml.safe_load(self._fs.read_text(path))
        except (yaml.YAMLError, UnicodeDecodeError) as e:
            msg = f"Invalid YAML in service catalog file {path}: {e}"
            raise ServiceInjectionError(msg) from e

        if data is None:
            return []
        entries: Any = data.get("services", [data]) if isinstance(data, dict) else data
        if not isinstance(entries, list):
            msg = f"Service catalog file {path} must hold a mapping or a list"
            raise ServiceInjectionError(msg)

        services: list[ServiceTemplate] = []
        for index, entry in enumerate(entries):
            try:
                services.append(ServiceTemplate.model_validate(entry))
            except ValidationError as e:
                details = "; ".join(
                    f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}"
                    for err in e.errors()
                )
                msg = f"Invalid service entry #{index} in {path}: {details}"
                raise ServiceInjectionError(msg) from e
        return services
