"""Generator types and results."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path


class GeneratorType(StrEnum):
    """Artifacts the ``generate`` command can produce."""

    COMPONENT = "component"
    PAGE = "page"
    SERVICE = "service"
    HOOK = "hook"
    MODEL = "model"


class Stage(StrEnum):
    """Generation stages, in the order they run."""

    MAIN = "main"
    TEST = "test"
    STORY = "story"


@dataclass(frozen=True, slots=True)
class GeneratorSpec:
    """How one generator type maps to templates and target paths.

    Path patterns are ``str.format`` strings over the render context plus
    ``outputDir``.

    Attributes:
        type: The generator type.
        main_path: Target of the main file.
        test_path: Target of the test file, None when the type has no test.
        story_path: Target of the story file, None when the type has no story.
        framework_specific: Whether the main template varies by framework
            family (``component/react``, ``component/vue``, ...).
    """

    type: GeneratorType
    main_path: str
    test_path: str | None = None
    story_path: str | None = None
    framework_specific: bool = False


@dataclass(frozen=True, slots=True)
class GenerateOptions:
    """Per-invocation generator options.

    ``tests``, ``stories`` and ``output_dir`` fall back to the ``generators``
    configuration section when None.
    """

    dry_run: bool = False
    force: bool = False
    tests: bool | None = None
    stories: bool | None = None
    output_dir: str | None = None


@dataclass(frozen=True, slots=True)
class GeneratedFile:
    """One rendered file.

    Attributes:
        path: Absolute target path.
        template_id: Template the content was rendered from.
        stage: Stage that produced the file.
        written: Whether the file was written (False on dry runs).
        content: Rendered content.
    """

    path: Path
    template_id: str
    stage: Stage
    written: bool
    content: str = field(default="", repr=False)


@dataclass(frozen=True, slots=True)
class GenerationResult:
    """Files produced by one ``generate`` invocation, in stage order."""

    type: GeneratorType
    name: str
    files: list[GeneratedFile] = field(default_factory=list)
    dry_run: bool = False

    @property
    def paths(self) -> list[Path]:
        return [f.path for f in self.files]
