"""Template composition engine.

The engine resolves inheritance, compiles with pybars, caches the result and
renders with the registered helpers and partials.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING

from pydantic import BaseModel

from xaheen.exceptions import CompileError, RenderError

from ._cache import CompilationCache
from ._helpers import register_default_helpers
from ._inheritance import InheritanceResolver
from ._models import CacheEntry
from ._registry import HelperRegistry
from ._store import TemplateStore

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from structlog.typing import FilteringBoundLogger

    from xaheen.utils import FileSystemGateway

    from ._models import CompiledTemplate

type RenderContext = Mapping[str, object] | BaseModel | None

STRING_TEMPLATE_ID = "<string>"


def _to_context(data: RenderContext) -> dict[str, object]:
    if data is None:
        return {}
    if isinstance(data, BaseModel):
        return data.model_dump(mode="json", by_alias=True)
    return dict(data)


class TemplateEngine:
    """Loads, resolves, compiles, caches and renders templates.

    Args:
        store: Template store to load from.
        registry: Helper/partial registry. A new one with the default
            helpers is created when omitted.
        cache: Compilation cache. A new one is created when omitted.
        dev_mode: Recompile when a template or ancestor changes on disk.
        logger: Optional logger.
    """

    def __init__(
        self,
        store: TemplateStore,
        *,
        registry: HelperRegistry | None = None,
        cache: CompilationCache | None = None,
        dev_mode: bool = False,
        logger: FilteringBoundLogger | None = None,
    ) -> None:
        if registry is None:
            registry = HelperRegistry()
            register_default_helpers(registry)
        self._store: TemplateStore = store
        self._registry: HelperRegistry = registry
        self._cache: CompilationCache = cache or CompilationCache()
        self._resolver: InheritanceResolver = InheritanceResolver(
            store.load, logger=logger
        )
        self._dev_mode: bool = dev_mode
        self._logger: FilteringBoundLogger | None = logger
        self._disk_partials: set[str] = set()
        self._partials_mtime: float | None = None

    @classmethod
    def from_directories(
        cls,
        directories: Sequence[Path],
        *,
        fs: FileSystemGateway | None = None,
        dev_mode: bool = False,
        logger: FilteringBoundLogger | None = None,
    ) -> TemplateEngine:
        """Create an engine over a fresh store searching ``directories``."""
        store = TemplateStore(directories, fs=fs, logger=logger)
        return cls(store, dev_mode=dev_mode, logger=logger)

    @property
    def store(self) -> TemplateStore:
        return self._store

    @property
    def registry(self) -> HelperRegistry:
        return self._registry

    @property
    def cache(self) -> CompilationCache:
        return self._cache

    @property
    def dev_mode(self) -> bool:
        return self._dev_mode

    @dev_mode.setter
    def dev_mode(self, value: bool) -> None:
        self._dev_mode = value

    # -- resolution and compilation -------------------------------------------

    def resolve(self, template_id: str) -> str:
        """Return the flattened source of a template and its ancestors."""
        return self._resolver.resolve(self._store.load(template_id))

    def get_compiled(self, template_id: str) -> CompiledTemplate:
        """Return the compiled template, compiling on cache miss.

        In dev mode a cached entry is recompiled when the newest modification
        time of its source files differs from the cached one.

        Raises:
            TemplateNotFoundError: If the template or an ancestor is missing.
            CyclicInheritanceError: If the parent chain loops.
            BlockNotFoundError: If a block override has no target.
            CompileError: If the resolved source fails to compile.
        """
        return self._get_entry(template_id).compiled

    def clear_cache(self) -> None:
        """Drop every compiled entry, memoised template and loaded partial."""
        self._cache.clear()
        self._store.invalidate()
        self._partials_mtime = None

    def invalidate(self, template_id: str) -> None:
        """Drop one template from the compilation cache and the store."""
        _ = self._cache.invalidate(template_id)
        self._store.invalidate(template_id)

    def invalidate_path(self, path: Path) -> list[str]:
        """Drop everything derived from the file at ``path``.

        Returns:
            IDs of the compiled entries that were dropped.
        """
        dropped = self._cache.invalidate_path(path)
        for template_id in dropped:
            self._store.invalidate(template_id)
        _ = self._store.invalidate_path(path)
        if path.suffix == ".hbs" and "partials" in path.parts:
            self._partials_mtime = None
        if self._logger is not None and dropped:
            self._logger.debug(
                "template_cache_invalidated", path=str(path), template_ids=dropped
            )
        return dropped

    # -- rendering ------------------------------------------------------------

    def render(self, template_id: str, data: RenderContext = None) -> str:
        """Render a template.

        Args:
            template_id: ID of the template to render.
            data: Render context, a mapping or a pydantic model.

        Raises:
            TemplateNotFoundError: If the template or an ancestor is missing.
            CompileError: If the template or a partial fails to compile.
            RenderError: If rendering raises.
        """
        entry = self._get_entry(template_id)
        return self._run(template_id, entry.compiled, entry.source, data)

    def render_string(
        self,
        source: str,
        data: RenderContext = None,
        *,
        template_id: str = STRING_TEMPLATE_ID,
    ) -> str:
        """Compile and render Handlebars source without caching it.

        Raises:
            CompileError: If the source fails to compile.
            RenderError: If rendering raises.
        """
        compiled = self._compile(template_id, source)
        return self._run(template_id, compiled, source, data)

    # -- internals ------------------------------------------------------------

    def _get_entry(self, template_id: str) -> CacheEntry:
        entry = self._cache.get(template_id)
        if entry is not None:
            if not self._dev_mode or self._newest_mtime(entry.paths) == entry.mtime:
                return entry
            if self._logger is not None:
                self._logger.info("template_changed", template_id=template_id)
            for path in entry.paths:
                _ = self._store.invalidate_path(path)
            self._store.invalidate(template_id)

        entry = self._build_entry(template_id)
        self._cache.put(template_id, entry)
        return entry

    def _build_entry(self, template_id: str) -> CacheEntry:
        template = self._store.load(template_id)
        lineage = self._resolver.lineage(template)
        source = self._resolver.resolve(template)
        paths = tuple(path for item in lineage for path in item.source_files)
        compiled = self._compile(template_id, source)
        if self._logger is not None:
            self._logger.debug(
                "template_compiled",
                template_id=template_id,
                chain=[item.id for item in lineage],
            )
        return CacheEntry(
            compiled=compiled,
            mtime=self._newest_mtime(paths),
            paths=paths,
            source=source,
        )

    def _compile(self, template_id: str, source: str) -> CompiledTemplate:
        try:
            return self._registry.compile(source)
        except Exception as e:
            raise CompileError(
                f"Failed to compile template {template_id}: {e}",
                template_id=template_id,
                cause=e,
            ) from e

    def _run(
        self,
        template_id: str,
        compiled: CompiledTemplate,
        source: str,
        data: RenderContext,
    ) -> str:
        self._refresh_partials()
        partials = self._registry.compiled_partials([source])
        context = _to_context(data)
        try:
            output = compiled(
                context,
                helpers=dict(self._registry.helpers),
                partials=partials,
            )
        except Exception as e:
            if self._logger is not None:
                self._logger.exception("template_render_failed", template_id=template_id)
            raise RenderError(
                f"Failed to render template {template_id}: {e}",
                template_id=template_id,
                cause=e,
            ) from e
        return str(output)

    def _refresh_partials(self) -> None:
        if self._partials_mtime is not None and not self._dev_mode:
            return
        paths = self._store.partial_paths()
        mtime = self._newest_mtime(paths)
        if self._partials_mtime is not None and mtime == self._partials_mtime:
            return

        # Partials registered in code take precedence over partial files
        sources = {
            name: source
            for name, source in self._store.partial_sources().items()
            if name in self._disk_partials or not self._registry.has_partial(name)
        }
        for name in self._disk_partials - sources.keys():
            _ = self._registry.unregister_partial(name)
        self._registry.register_partials(sources)
        self._disk_partials = set(sources)
        self._partials_mtime = mtime

    def _newest_mtime(self, paths: Sequence[Path]) -> float:
        fs = self._store.fs
        return max((fs.mtime(path) for path in paths), default=0.0)
