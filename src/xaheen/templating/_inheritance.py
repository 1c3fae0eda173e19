"""Template inheritance through named override blocks.

A parent declares overridable regions with::

    {{#block "name"}}default content{{/block}}

A child names its parent and supplies replacement content per block, either
in its sidecar ``blocks`` list or inline using the same block syntax. The
resolver splices child blocks into the resolved parent text and, at the top
of the chain, removes the block wrappers so the result is plain Handlebars.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

from xaheen.exceptions import (
    BlockNotFoundError,
    CompileError,
    CyclicInheritanceError,
)

from ._models import Block

if TYPE_CHECKING:
    from collections.abc import Callable

    from structlog.typing import FilteringBoundLogger

    from ._models import Template

_BLOCK_TOKEN_RE = re.compile(
    r"""\{\{\#block\s+(?P<quote>["'])(?P<name>[^"']+)(?P=quote)\s*\}\}"""
    r"""|(?P<close>\{\{/block\s*\}\})"""
)


@dataclass(frozen=True, slots=True)
class BlockSpan:
    """Location of one ``{{#block}}...{{/block}}`` region.

    Attributes:
        name: Block name.
        start: Offset of the opening tag.
        end: Offset just past the closing tag.
        body_start: Offset of the first body character.
        body_end: Offset of the closing tag.
        depth: Nesting depth, 0 for top-level blocks.
    """

    name: str
    start: int
    end: int
    body_start: int
    body_end: int
    depth: int


def scan_blocks(content: str) -> list[BlockSpan]:
    """Find every block region in ``content``, ordered by start offset.

    Raises:
        ValueError: If block tags are unbalanced.
    """
    spans: list[BlockSpan] = []
    stack: list[tuple[str, int, int]] = []

    for match in _BLOCK_TOKEN_RE.finditer(content):
        if match.group("close") is None:
            stack.append((match.group("name"), match.start(), match.end()))
            continue
        if not stack:
            msg = f"Unexpected {{{{/block}}}} at offset {match.start()}"
            raise ValueError(msg)
        name, start, body_start = stack.pop()
        spans.append(
            BlockSpan(
                name=name,
                start=start,
                end=match.end(),
                body_start=body_start,
                body_end=match.start(),
                depth=len(stack),
            )
        )

    if stack:
        name, start, _ = stack[-1]
        msg = f"Block {name!r} opened at offset {start} is never closed"
        raise ValueError(msg)

    spans.sort(key=lambda span: span.start)
    return spans


def extract_blocks(content: str) -> list[Block]:
    """Return the top-level blocks declared inline in ``content``.

    Raises:
        ValueError: If block tags are unbalanced.
    """
    return [
        Block(name=span.name, content=content[span.body_start : span.body_end])
        for span in scan_blocks(content)
        if span.depth == 0
    ]


def wrap_block(name: str, content: str) -> str:
    """Wrap ``content`` in block tags named ``name``."""
    return f'{{{{#block "{name}"}}}}{content}{{{{/block}}}}'


def strip_blocks(content: str) -> str:
    """Remove every block wrapper, keeping the wrapped content.

    Raises:
        ValueError: If block tags are unbalanced.
    """
    _ = scan_blocks(content)
    return _BLOCK_TOKEN_RE.sub("", content)


class InheritanceResolver:
    """Flattens a template and its ancestors into a single source text.

    Args:
        loader: Looks up a template by ID; raises ``TemplateNotFoundError``
            for unknown IDs.
        logger: Optional logger.
    """

    def __init__(
        self,
        loader: Callable[[str], Template],
        *,
        logger: FilteringBoundLogger | None = None,
    ) -> None:
        self._loader: Callable[[str], Template] = loader
        self._logger: FilteringBoundLogger | None = logger

    def resolve(self, template: Template) -> str:
        """Return the full source text of ``template``.

        A template without a parent is returned unchanged. Otherwise the
        parent chain is resolved depth first, each child block replaces the
        matching region of its resolved parent, and block wrappers are removed
        from the final text.

        Raises:
            TemplateNotFoundError: If an ancestor cannot be loaded.
            CyclicInheritanceError: If the parent chain repeats a template.
            BlockNotFoundError: If a child overrides an undeclared block.
            CompileError: If block tags in a template are unbalanced.
        """
        if template.parent is None:
            return template.content

        resolved = self._resolve_wrapped(template, [])
        try:
            return strip_blocks(resolved)
        except ValueError as e:
            raise CompileError(
                f"Unbalanced block tags in {template.id}: {e}",
                template_id=template.id,
                cause=e,
            ) from e

    def lineage(self, template: Template) -> list[Template]:
        """Return ``template`` followed by each of its ancestors.

        Raises:
            TemplateNotFoundError: If an ancestor cannot be loaded.
            CyclicInheritanceError: If the parent chain repeats a template.
        """
        chain: list[Template] = [template]
        seen: list[str] = [template.id]
        current = template
        while current.parent is not None:
            if current.parent in seen:
                raise self._cycle(template.id, [*seen, current.parent])
            current = self._loader(current.parent)
            seen.append(current.id)
            chain.append(current)
        return chain

    def _resolve_wrapped(self, template: Template, visited: list[str]) -> str:
        if template.id in visited:
            raise self._cycle(visited[0], [*visited, template.id])
        visited = [*visited, template.id]

        if template.parent is None:
            return template.content

        parent = self._loader(template.parent)
        text = self._resolve_wrapped(parent, visited)

        # Innermost overrides go first so an outer override cannot remove a
        # block that is still to be replaced
        spans = self._scan(text, template)
        depths = {span.name: span.depth for span in reversed(spans)}
        blocks = self._child_blocks(template)
        for block in blocks:
            if block.name not in depths:
                raise BlockNotFoundError(
                    f"Block {block.name!r} in template {template.id!r} "
                    f"is not declared by {template.parent!r} or its ancestors",
                    template_id=template.id,
                    block_name=block.name,
                )

        for block in sorted(blocks, key=lambda b: depths[b.name], reverse=True):
            span = self._find_block(text, block.name, template)
            if span is None:
                continue
            replacement = wrap_block(block.name, block.content)
            text = text[: span.start] + replacement + text[span.end :]

        if self._logger is not None:
            self._logger.debug(
                "template_resolved",
                template_id=template.id,
                parent=template.parent,
            )
        return text

    def _child_blocks(self, template: Template) -> list[Block]:
        if template.blocks:
            return template.blocks
        try:
            return extract_blocks(template.content)
        except ValueError as e:
            raise CompileError(
                f"Unbalanced block tags in {template.id}: {e}",
                template_id=template.id,
                cause=e,
            ) from e

    def _scan(self, text: str, template: Template) -> list[BlockSpan]:
        try:
            return scan_blocks(text)
        except ValueError as e:
            raise CompileError(
                f"Unbalanced block tags in ancestors of {template.id}: {e}",
                template_id=template.parent,
                cause=e,
            ) from e

    def _find_block(self, text: str, name: str, template: Template) -> BlockSpan | None:
        for span in self._scan(text, template):
            if span.name == name:
                return span
        return None

    def _cycle(self, template_id: str, chain: list[str]) -> CyclicInheritanceError:
        return CyclicInheritanceError(
            "Cyclic template inheritance: " + " -> ".join(chain),
            template_id=template_id,
            chain=chain,
        )
