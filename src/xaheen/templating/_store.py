"""Template storage backed by search directories.

Each template is an ``{id}.hbs`` file with an optional ``{id}.json`` sidecar
holding ``TemplateMetadata``. Directories are searched in order and the first
one holding either file wins, so project overrides listed before the packaged
templates shadow them.
"""

from __future__ import annotations

from pathlib import Path, PurePosixPath
from typing import TYPE_CHECKING

import orjson
from pydantic import ValidationError

from xaheen.exceptions import TemplateError, TemplateNotFoundError
from xaheen.utils import FileSystemGateway

from ._models import Block, Template, TemplateMetadata

if TYPE_CHECKING:
    from collections.abc import Sequence

    from structlog.typing import FilteringBoundLogger

TEMPLATE_SUFFIX = ".hbs"
METADATA_SUFFIX = ".json"
PARTIALS_DIR = "partials"


def _validate_id(template_id: str) -> None:
    parts = PurePosixPath(template_id).parts
    if not parts or template_id.startswith("/") or ".." in parts:
        raise TemplateNotFoundError(
            f"Invalid template id: {template_id!r}",
            template_id=template_id,
        )


class TemplateStore:
    """Loads, memoises and saves templates.

    Args:
        directories: Search directories, highest precedence first.
        fs: File system gateway used for every read and write.
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
        self._templates: dict[str, Template] = {}

    @property
    def directories(self) -> list[Path]:
        """Search directories, highest precedence first."""
        return list(self._directories)

    @property
    def fs(self) -> FileSystemGateway:
        return self._fs

    def load(self, template_id: str) -> Template:
        """Load a template by ID.

        Raises:
            TemplateNotFoundError: If neither ``{id}.hbs`` nor ``{id}.json``
                exists in any search directory.
            TemplateError: If the sidecar file is malformed.
        """
        cached = self._templates.get(template_id)
        if cached is not None:
            return cached

        _validate_id(template_id)
        content_path, metadata_path = self._locate(template_id)
        if content_path is None and metadata_path is None:
            raise TemplateNotFoundError(
                f"Template not found: {template_id}",
                template_id=template_id,
            )

        template = self._read(template_id, content_path, metadata_path)
        self._templates[template_id] = template
        if self._logger is not None:
            self._logger.debug(
                "template_loaded",
                template_id=template_id,
                path=str(content_path or metadata_path),
            )
        return template

    def exists(self, template_id: str) -> bool:
        """Return whether ``load`` would find ``template_id``."""
        if template_id in self._templates:
            return True
        _validate_id(template_id)
        content_path, metadata_path = self._locate(template_id)
        return content_path is not None or metadata_path is not None

    def load_file(self, path: Path, template_id: str | None = None) -> Template:
        """Load an arbitrary ``.hbs`` file, with its sidecar if present.

        Args:
            path: Template file path.
            template_id: ID to register the template under. Defaults to the
                file name without its suffix.

        Raises:
            TemplateNotFoundError: If ``path`` does not exist.
        """
        effective_id = template_id or path.name.removesuffix(TEMPLATE_SUFFIX)
        if not self._fs.is_file(path):
            raise TemplateNotFoundError(
                f"Template file not found: {path}",
                template_id=effective_id,
            )
        sidecar = path.with_suffix(METADATA_SUFFIX)
        metadata_path = sidecar if self._fs.is_file(sidecar) else None

        template = self._read(effective_id, path, metadata_path)
        self._templates[effective_id] = template
        return template

    def register(self, template: Template) -> None:
        """Make ``template`` available to ``load`` without touching disk."""
        self._templates[template.id] = template

    def save(self, template: Template, directory: Path | None = None) -> Template:
        """Write a template and its sidecar, replacing existing files.

        Args:
            template: Template to persist.
            directory: Target directory. Defaults to the first search
                directory.

        Returns:
            The saved template with its file paths set.
        """
        _validate_id(template.id)
        if directory is None:
            if not self._directories:
                msg = "No template directory to save into"
                raise TemplateError(msg, template_id=template.id)
            directory = self._directories[0]

        content_path = directory / f"{template.id}{TEMPLATE_SUFFIX}"
        metadata_path = directory / f"{template.id}{METADATA_SUFFIX}"
        self._fs.write_text(content_path, template.content)
        self._fs.write_json(
            metadata_path,
            template.to_metadata().model_dump(mode="json", exclude_none=True),
        )

        template.path = content_path
        template.metadata_path = metadata_path
        self._templates[template.id] = template
        if self._logger is not None:
            self._logger.info(
                "template_saved", template_id=template.id, path=str(content_path)
            )
        return template

    def invalidate(self, template_id: str | None = None) -> None:
        """Forget one memoised template, or all of them."""
        if template_id is None:
            self._templates.clear()
        else:
            _ = self._templates.pop(template_id, None)

    def invalidate_path(self, path: Path) -> list[str]:
        """Forget every memoised template backed by ``path``.

        Returns:
            IDs of the forgotten templates.
        """
        target = path.resolve()
        stale = [
            template_id
            for template_id, template in list(self._templates.items())
            if any(p.resolve() == target for p in template.source_files)
        ]
        for template_id in stale:
            _ = self._templates.pop(template_id, None)
        return stale

    def list_ids(self) -> list[str]:
        """Return every template ID visible across the search directories."""
        ids: set[str] = set()
        for directory in self._directories:
            for suffix in (TEMPLATE_SUFFIX, METADATA_SUFFIX):
                for path in self._fs.list_files(directory, f"*{suffix}"):
                    relative = path.relative_to(directory).as_posix()
                    if relative.startswith(f"{PARTIALS_DIR}/"):
                        continue
                    ids.add(relative.removesuffix(suffix))
        ids.update(self._templates)
        return sorted(ids)

    def source_paths(self, template_id: str) -> list[Path]:
        """Return the files backing a template (empty for registered ones)."""
        return self.load(template_id).source_files

    def partial_sources(self) -> dict[str, str]:
        """Read every ``partials/**/*.hbs`` file across the search directories.

        Returns:
            Partial source keyed by its path relative to ``partials/``
            without suffix. Partials in subdirectories are also keyed by
            the dotted form, so ``shared/footer`` is ``shared.footer`` too.
            Higher-precedence directories win.
        """
        sources: dict[str, str] = {}
        for directory in reversed(self._directories):
            partials_dir = directory / PARTIALS_DIR
            for path in self._fs.list_files(partials_dir, f"*{TEMPLATE_SUFFIX}"):
                name = path.relative_to(partials_dir).as_posix()
                name = name.removesuffix(TEMPLATE_SUFFIX)
                source = self._fs.read_text(path)
                sources[name] = source
                sources[name.replace("/", ".")] = source
        return sources

    def partial_paths(self) -> list[Path]:
        """Return every partial file across the search directories."""
        return [
            path
            for directory in self._directories
            for path in self._fs.list_files(
                directory / PARTIALS_DIR, f"*{TEMPLATE_SUFFIX}"
            )
        ]

    def _locate(self, template_id: str) -> tuple[Path | None, Path | None]:
        for directory in self._directories:
            content_path = directory / f"{template_id}{TEMPLATE_SUFFIX}"
            metadata_path = directory / f"{template_id}{METADATA_SUFFIX}"
            has_content = self._fs.is_file(content_path)
            has_metadata = self._fs.is_file(metadata_path)
            if has_content or has_metadata:
                return (
                    content_path if has_content else None,
                    metadata_path if has_metadata else None,
                )
        return None, None

    def _read(
        self,
        template_id: str,
        content_path: Path | None,
        metadata_path: Path | None,
    ) -> Template:
        content = self._fs.read_text(content_path) if content_path else ""
        template = Template(id=template_id, content=content, path=content_path)

        if metadata_path is None:
            template.name = template_id
            return template

        metadata = self._read_metadata(template_id, metadata_path)
        template.metadata_path = metadata_path
        template.name = metadata.name
        template.description = metadata.description
        template.parent = metadata.parent
        template.variables = list(metadata.variables)
        template.helpers = list(metadata.helpers)
        template.partials = list(metadata.partials)
        template.blocks = [
            Block(name=b.name, content=b.content, description=b.description)
            for b in metadata.blocks
        ]
        if metadata.id != template_id and self._logger is not None:
            self._logger.warning(
                "template_metadata_id_mismatch",
                template_id=template_id,
                metadata_id=metadata.id,
            )
        return template

    def _read_metadata(self, template_id: str, path: Path) -> TemplateMetadata:
        try:
            return TemplateMetadata.model_validate(self._fs.read_json(path))
        except orjson.JSONDecodeError as e:
            msg = f"Invalid JSON in template metadata {path}: {e}"
            raise TemplateError(msg, template_id=template_id) from e
        except ValidationError as e:
            msg = f"Invalid template metadata {path}: {e.error_count()} error(s)"
            raise TemplateError(msg, template_id=template_id) from e
