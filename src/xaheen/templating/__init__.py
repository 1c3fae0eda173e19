r"""Xaheen Template Composition Engine.

Handlebars templates (rendered with pybars3) composed through inheritance,
partials and helpers, with compile caching and development-mode hot reload.

Basic usage:
    from xaheen.templating import TemplateEngine, build_search_paths

    paths = build_search_paths(project_root)
    engine = TemplateEngine.from_directories(paths.paths)
    source = engine.render("component/react", {"name": "UserCard"})

Inheritance:
    A parent declares overridable regions:

        A{{#block "x"}}1{{/block}}B

    A child with ``"parent": "base"`` in its sidecar and a block ``x`` whose
    content is ``2`` resolves to ``A2B``.
"""

from ._cache import CompilationCache
from ._engine import STRING_TEMPLATE_ID, RenderContext, TemplateEngine
from ._helpers import (
    DEFAULT_HELPERS,
    DEFAULT_LOCALE,
    TRANSLATIONS,
    normalize_language,
    register_default_helpers,
    translate,
)
from ._inheritance import (
    BlockSpan,
    InheritanceResolver,
    extract_blocks,
    scan_blocks,
    strip_blocks,
    wrap_block,
)
from ._models import (
    Block,
    BlockMetadata,
    CacheEntry,
    CompiledTemplate,
    Template,
    TemplateMetadata,
)
from ._paths import (
    TemplateSearchPaths,
    build_search_paths,
    get_user_templates_dir,
    is_dev_environment,
)
from ._registry import (
    HelperRegistry,
    LenientPartials,
    check_syntax,
    find_partial_references,
)
from ._store import TemplateStore
from ._watcher import TemplateWatcher, format_change

__all__ = [
    "DEFAULT_HELPERS",
    "DEFAULT_LOCALE",
    "STRING_TEMPLATE_ID",
    "TRANSLATIONS",
    "Block",
    "BlockMetadata",
    "BlockSpan",
    "CacheEntry",
    "CompilationCache",
    "CompiledTemplate",
    "HelperRegistry",
    "InheritanceResolver",
    "LenientPartials",
    "RenderContext",
    "Template",
    "TemplateEngine",
    "TemplateMetadata",
    "TemplateSearchPaths",
    "TemplateStore",
    "TemplateWatcher",
    "build_search_paths",
    "check_syntax",
    "extract_blocks",
    "find_partial_references",
    "format_change",
    "get_user_templates_dir",
    "is_dev_environment",
    "normalize_language",
    "register_default_helpers",
    "scan_blocks",
    "strip_blocks",
    "translate",
    "wrap_block",
]
