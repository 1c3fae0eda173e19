"""Helper and partial registry.

The registry is an explicit object handed to the engine rather than a
module-level singleton. It owns the pybars compiler and compiles partial
sources on demand.
"""

from __future__ import annotations

import re
from types import MappingProxyType
from typing import TYPE_CHECKING

from pybars import Compiler, strlist

from xaheen.exceptions import CompileError

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Mapping

    from ._models import CompiledTemplate

# Partial references such as {{> header}}, {{~> shared/footer}} or {{> "name"}}
_PARTIAL_REF_RE = re.compile(r"""\{\{~?>\s*["']?([\w./-]+)""")


def find_partial_references(source: str) -> set[str]:
    """Return the names of every partial ``source`` refers to."""
    return set(_PARTIAL_REF_RE.findall(source))


def check_syntax(source: str) -> None:
    """Check that mustache tags are terminated and sections are closed.

    pybars stops at the first malformed tag and compiles the text before it,
    so these errors have to be caught up front.

    Raises:
        ValueError: On an unterminated tag, an unclosed section or a closing
            tag that does not match the innermost open section.
    """
    open_sections: list[tuple[str, int]] = []
    pos = 0
    while (start := source.find("{{", pos)) != -1:
        if start > 0 and source[start - 1] == "\\":
            pos = start + 2
            continue
        if source.startswith("{{!--", start):
            end = source.find("--}}", start + 5)
            if end == -1:
                msg = f"Comment opened at offset {start} is never closed"
                raise ValueError(msg)
            pos = end + 4
            continue
        end = source.find("}}", start + 2)
        if end == -1 or "{{" in source[start + 3 : end]:
            msg = f"Tag opened at offset {start} is never terminated"
            raise ValueError(msg)
        pos = end + 2
        triple = source.startswith("{{{", start)
        if triple and source.startswith("}", pos):
            pos += 1
        tag = source[start + (3 if triple else 2) : end].strip("~").strip()

        if tag[:1] in {"#", "^"} and tag[1:].strip():
            words = tag[1:].lstrip("*>").split()
            open_sections.append((words[0] if words else "", start))
        elif tag[:1] == "/":
            name = tag[1:].strip()
            if not open_sections:
                msg = f"Unexpected {{{{/{name}}}}} at offset {start}"
                raise ValueError(msg)
            expected, opened_at = open_sections.pop()
            if name != expected:
                msg = (
                    f"{{{{/{name}}}}} at offset {start} does not close "
                    f"{{{{#{expected}}}}} opened at offset {opened_at}"
                )
                raise ValueError(msg)

    if open_sections:
        name, opened_at = open_sections[-1]
        msg = f"Section {{{{#{name}}}}} opened at offset {opened_at} is never closed"
        raise ValueError(msg)


def _empty_partial(*_args: object, **_kwargs: object) -> strlist:
    return strlist()


class LenientPartials(dict[str, "CompiledTemplate"]):
    """Partial mapping that renders unknown partials as empty output."""

    def __missing__(self, key: str) -> CompiledTemplate:
        return _empty_partial

    def __contains__(self, key: object) -> bool:
        return True

    def __bool__(self) -> bool:
        return True

    def get(  # pyright: ignore[reportIncompatibleMethodOverride]
        self, key: str, default: object = None
    ) -> CompiledTemplate:
        return self[key]


class HelperRegistry:
    """Named helpers and partials available to every compiled template.

    Registration is idempotent and the last registration of a name wins.
    """

    def __init__(self, compiler: Compiler | None = None) -> None:
        self._compiler: Compiler = compiler or Compiler()
        self._helpers: dict[str, Callable[..., object]] = {}
        self._partials: dict[str, str] = {}
        self._compiled_partials: dict[str, CompiledTemplate] = {}

    # -- helpers --------------------------------------------------------------

    def register_helper(self, name: str, fn: Callable[..., object]) -> None:
        self._helpers[name] = fn

    def unregister_helper(self, name: str) -> bool:
        """Remove a helper. Returns whether it was registered."""
        return self._helpers.pop(name, None) is not None

    def has_helper(self, name: str) -> bool:
        return name in self._helpers

    @property
    def helpers(self) -> Mapping[str, Callable[..., object]]:
        """Read-only view of the registered helpers."""
        return MappingProxyType(self._helpers)

    # -- partials -------------------------------------------------------------

    def register_partial(self, name: str, source: str) -> None:
        self._partials[name] = source
        self._compiled_partials.clear()

    def register_partials(self, partials: Mapping[str, str]) -> None:
        for name, source in partials.items():
            self.register_partial(name, source)

    def unregister_partial(self, name: str) -> bool:
        """Remove a partial. Returns whether it was registered."""
        removed = self._partials.pop(name, None) is not None
        if removed:
            self._compiled_partials.clear()
        return removed

    def has_partial(self, name: str) -> bool:
        return name in self._partials

    @property
    def partials(self) -> Mapping[str, str]:
        """Read-only view of the registered partial sources."""
        return MappingProxyType(self._partials)

    # -- compilation ----------------------------------------------------------

    def compile(self, source: str) -> CompiledTemplate:
        """Compile Handlebars source.

        Raises:
            ValueError: If tags are unterminated or sections unbalanced.
            Exception: Whatever the pybars compiler raises for invalid
                source; the engine wraps it in ``CompileError``.
        """
        check_syntax(source)
        return self._compiler.compile(source)

    def compiled_partials(self, sources: Iterable[str] = ()) -> LenientPartials:
        """Compile registered partials into a mapping for rendering.

        Every partial referenced from ``sources`` or from a registered
        partial but not registered itself is bound to an empty partial, and
        any other unknown name also renders empty.

        Raises:
            CompileError: If a registered partial fails to compile.
        """
        for name, source in self._partials.items():
            if name in self._compiled_partials:
                continue
            try:
                self._compiled_partials[name] = self.compile(source)
            except Exception as e:
                raise CompileError(
                    f"Failed to compile partial {name!r}: {e}",
                    template_id=f"partials/{name}",
                    cause=e,
                ) from e

        partials = LenientPartials(self._compiled_partials)
        referenced: set[str] = set()
        for source in (*sources, *self._partials.values()):
            referenced |= find_partial_references(source)
        for name in referenced - self._partials.keys():
            partials[name] = _empty_partial
        return partials
