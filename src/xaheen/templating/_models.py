"""Template data model and sidecar metadata."""

from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field


class BlockMetadata(BaseModel):
    """Block declaration as it appears in a sidecar file."""

    model_config: ClassVar[ConfigDict] = ConfigDict(extra="ignore")

    name: str = Field(..., min_length=1)
    content: str = ""
    description: str | None = None


class TemplateMetadata(BaseModel):
    """Sidecar ``{id}.json`` describing a template.

    Only ``id`` and ``name`` are required; a sidecar without a matching
    ``.hbs`` file describes a child template whose text lives entirely in its
    blocks.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(extra="ignore")

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    description: str | None = None
    variables: list[str] = Field(default_factory=list)
    partials: list[str] = Field(default_factory=list)
    helpers: list[str] = Field(default_factory=list)
    parent: str | None = None
    blocks: list[BlockMetadata] = Field(default_factory=list)


@dataclass(slots=True)
class Block:
    """A named, overridable region of a template.

    Attributes:
        name: Block name, unique within its template.
        content: Text that replaces the parent's block content.
        description: Optional human-readable description.
    """

    name: str
    content: str
    description: str | None = None


@dataclass(slots=True)
class Template:
    """A unit of generatable text.

    Attributes:
        id: Template identifier, ``/`` separated for sub-directories.
        content: Raw template text.
        path: The ``.hbs`` file the content came from, if any.
        parent: ID of the template this one extends.
        blocks: Block overrides in declaration order.
        variables: Context variables the template expects.
        helpers: Helper names the template requires.
        partials: Partial names the template requires.
        name: Display name.
        description: Human-readable description.
        metadata_path: The sidecar file, if any.
    """

    id: str
    content: str = ""
    path: Path | None = None
    parent: str | None = None
    blocks: list[Block] = field(default_factory=list)
    variables: list[str] = field(default_factory=list)
    helpers: list[str] = field(default_factory=list)
    partials: list[str] = field(default_factory=list)
    name: str = ""
    description: str | None = None
    metadata_path: Path | None = None

    def get_block(self, name: str) -> Block | None:
        """Return the block called ``name``, or None."""
        for block in self.blocks:
            if block.name == name:
                return block
        return None

    def to_metadata(self) -> TemplateMetadata:
        """Build the sidecar model for this template."""
        return TemplateMetadata(
            id=self.id,
            name=self.name or self.id,
            description=self.description,
            variables=list(self.variables),
            partials=list(self.partials),
            helpers=list(self.helpers),
            parent=self.parent,
            blocks=[
                BlockMetadata(
                    name=block.name,
                    content=block.content,
                    description=block.description,
                )
                for block in self.blocks
            ],
        )

    @property
    def source_files(self) -> list[Path]:
        """Files on disk backing this template."""
        return [p for p in (self.path, self.metadata_path) if p is not None]


# A compiled pybars template: called with the render context plus helpers
# and partials keyword arguments
type CompiledTemplate = Callable[..., object]


@dataclass(slots=True, frozen=True)
class CacheEntry:
    """A compiled template and the freshness data needed to expire it.

    Attributes:
        compiled: The compiled template function.
        mtime: Newest modification time among ``paths``.
        paths: Source files of the template and all of its ancestors.
        source: The resolved source that was compiled.
    """

    compiled: CompiledTemplate
    mtime: float
    paths: tuple[Path, ...] = ()
    source: str = ""
