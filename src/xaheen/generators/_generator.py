# pyright: reportAny=false, reportExplicitAny=false
"""Code generation from the built-in and project templates.

Each generator type renders a main template and, depending on the options,
a test and a story template. Stages run in order and each one writes its file
before the next starts; a failing stage leaves earlier files in place.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from xaheen.config import Framework
from xaheen.exceptions import GenerationError
from xaheen.utils import (
    FileSystemGateway,
    split_words,
    to_camel_case,
    to_constant_case,
    to_kebab_case,
    to_pascal_case,
    to_snake_case,
)

from ._models import (
    GenerateOptions,
    GeneratedFile,
    GenerationResult,
    GeneratorSpec,
    GeneratorType,
    Stage,
)

if TYPE_CHECKING:
    from pathlib import Path

    from structlog.typing import FilteringBoundLogger

    from xaheen.config import XaheenConfig
    from xaheen.templating import TemplateEngine

GENERATOR_SPECS: dict[GeneratorType, GeneratorSpec] = {
    GeneratorType.COMPONENT: GeneratorSpec(
        type=GeneratorType.COMPONENT,
        main_path="{outputDir}/components/{pascalName}/{pascalName}.{ext}",
        test_path="{outputDir}/components/{pascalName}/{pascalName}.test.{jsxExt}",
        story_path="{outputDir}/components/{pascalName}/{pascalName}.stories.{storyExt}",
        framework_specific=True,
    ),
    GeneratorType.PAGE: GeneratorSpec(
        type=GeneratorType.PAGE,
        main_path="{outputDir}/pages/{kebabName}/{pascalName}Page.{ext}",
        test_path="{outputDir}/pages/{kebabName}/{pascalName}Page.test.{jsxExt}",
        story_path="{outputDir}/pages/{kebabName}/{pascalName}Page.stories.{storyExt}",
        framework_specific=True,
    ),
    GeneratorType.SERVICE: GeneratorSpec(
        type=GeneratorType.SERVICE,
        main_path="{outputDir}/services/{kebabName}.service.{scriptExt}",
        test_path="{outputDir}/services/{kebabName}.service.test.{scriptExt}",
    ),
    GeneratorType.HOOK: GeneratorSpec(
        type=GeneratorType.HOOK,
        main_path="{outputDir}/hooks/{hookName}.{scriptExt}",
        test_path="{outputDir}/hooks/{hookName}.test.{scriptExt}",
    ),
    GeneratorType.MODEL: GeneratorSpec(
        type=GeneratorType.MODEL,
        main_path="{outputDir}/models/{kebabName}.model.{scriptExt}",
    ),
}

# Frameworks sharing one set of UI templates
FRAMEWORK_FAMILIES: dict[Framework, str] = {
    Framework.REACT: "react",
    Framework.NEXTJS: "react",
    Framework.REMIX: "react",
    Framework.SOLID: "react",
    Framework.VUE: "vue",
    Framework.NUXT: "vue",
    Framework.SVELTE: "svelte",
    Framework.SVELTEKIT: "svelte",
}

DEFAULT_FAMILY = "default"


def framework_family(framework: Framework) -> str:
    return FRAMEWORK_FAMILIES.get(framework, DEFAULT_FAMILY)


def _main_extension(family: str, *, typescript: bool) -> str:
    if family == "vue":
        return "vue"
    if family == "svelte":
        return "svelte"
    return "tsx" if typescript else "jsx"


def hook_name(name: str) -> str:
    """Return the ``useX`` name of a hook, without doubling a ``use`` prefix."""
    words = split_words(name)
    if words and words[0].lower() == "use":
        words = words[1:]
    return "use" + to_pascal_case(" ".join(words))


class Generator:
    """Renders generator templates and writes the results.

    Args:
        engine: Template engine to render with.
        config: Loaded project configuration.
        project_root: Directory generated paths are relative to.
        fs: File system gateway.
        logger: Optional logger.
    """

    def __init__(
        self,
        engine: TemplateEngine,
        config: XaheenConfig,
        project_root: Path,
        *,
        fs: FileSystemGateway | None = None,
        logger: FilteringBoundLogger | None = None,
    ) -> None:
        self._engine: TemplateEngine = engine
        self._config: XaheenConfig = config
        self._root: Path = project_root
        self._fs: FileSystemGateway = fs or FileSystemGateway()
        self._logger: FilteringBoundLogger | None = logger

    @property
    def config(self) -> XaheenConfig:
        return self._config

    def build_context(self, generator_type: GeneratorType, name: str) -> dict[str, Any]:
        """Build the render context for one artifact.

        Raises:
            GenerationError: If ``name`` contains no letters or digits.
        """
        if not split_words(name):
            msg = f"Invalid {generator_type} name: {name!r}"
            raise GenerationError(msg)

        project = self._config.project
        compliance = self._config.compliance
        typescript = project.typescript
        family = framework_family(project.framework)
        script_ext = "ts" if typescript else "js"
        jsx_ext = "tsx" if typescript else "jsx"

        return {
            "type": generator_type.value,
            "name": name,
            "pascalName": to_pascal_case(name),
            "camelName": to_camel_case(name),
            "kebabName": to_kebab_case(name),
            "snakeName": to_snake_case(name),
            "constantName": to_constant_case(name),
            "hookName": hook_name(name),
            "framework": project.framework.value,
            "family": family,
            "typescript": typescript,
            "ext": _main_extension(family, typescript=typescript),
            "scriptExt": script_ext,
            "jsxExt": jsx_ext,
            "storyExt": jsx_ext if family in (DEFAULT_FAMILY, "react") else script_ext,
            "projectName": project.name,
            "nsm": compliance.nsm.enabled,
            "classification": compliance.nsm.classification.value,
            "gdpr": compliance.gdpr.enabled,
            "locale": self._config.ui.locale,
            "uiSystem": self._config.ui.system,
            "config": self._config.to_dict(),
        }

    def template_id(self, generator_type: GeneratorType, stage: Stage) -> str:
        """Return the template rendered for ``stage`` of ``generator_type``.

        Framework-specific types try ``<type>/<family>`` first and fall back
        to ``<type>/default``.

        Raises:
            GenerationError: If no candidate template exists.
        """
        spec = GENERATOR_SPECS[generator_type]
        if stage is Stage.MAIN:
            candidates = [f"{generator_type}/{DEFAULT_FAMILY}"]
            if spec.framework_specific:
                family = framework_family(self._config.project.framework)
                candidates.insert(0, f"{generator_type}/{family}")
        else:
            candidates = [f"{stage}/{generator_type}"]

        for candidate in candidates:
            if self._engine.store.exists(candidate):
                return candidate
        msg = f"No template for {generator_type} {stage} (tried {', '.join(candidates)})"
        raise GenerationError(msg, stage=stage.value)

    def stages(
        self, generator_type: GeneratorType, options: GenerateOptions
    ) -> list[tuple[Stage, str]]:
        """Return ``(stage, path pattern)`` pairs enabled for this run."""
        spec = GENERATOR_SPECS[generator_type]
        generators = self._config.generators
        tests = generators.tests if options.tests is None else options.tests
        stories = generators.stories if options.stories is None else options.stories

        stages: list[tuple[Stage, str]] = [(Stage.MAIN, spec.main_path)]
        if tests and spec.test_path is not None:
            stages.append((Stage.TEST, spec.test_path))
        if stories and spec.story_path is not None:
            stages.append((Stage.STORY, spec.story_path))
        return stages

    def generate(
        self,
        generator_type: GeneratorType | str,
        name: str,
        options: GenerateOptions | None = None,
    ) -> GenerationResult:
        """Generate one artifact.

        Args:
            generator_type: What to generate.
            name: Artifact name in any casing.
            options: Run options. Defaults to ``GenerateOptions()``.

        Returns:
            The rendered files in stage order.

        Raises:
            GenerationError: On an unknown type, an existing target without
                ``force``, or a failed write.
            TemplateError: If a template cannot be loaded, compiled or
                rendered.
        """
        options = options or GenerateOptions()
        try:
            kind = GeneratorType(generator_type)
        except ValueError as e:
            valid = ", ".join(t.value for t in GeneratorType)
            msg = f"Unknown generator type: {generator_type} (expected one of {valid})"
            raise GenerationError(msg) from e

        context = self.build_context(kind, name)
        output_dir = options.output_dir or self._config.generators.output_dir
        path_values = {**context, "outputDir": output_dir.rstrip("/")}

        files: list[GeneratedFile] = []
        for stage, pattern in self.stages(kind, options):
            path = self._root / pattern.format(**path_values)
            template_id = self.template_id(kind, stage)
            files.append(self._run_stage(stage, template_id, path, context, options))

        if self._logger is not None:
            self._logger.info(
                "generation_completed",
                type=kind.value,
                name=name,
                files=[str(f.path) for f in files],
                dry_run=options.dry_run,
            )
        return GenerationResult(
            type=kind, name=name, files=files, dry_run=options.dry_run
        )

    def _run_stage(
        self,
        stage: Stage,
        template_id: str,
        path: Path,
        context: dict[str, Any],
        options: GenerateOptions,
    ) -> GeneratedFile:
        if self._fs.exists(path) and not options.force:
            msg = f"File already exists: {path} (use --force to overwrite)"
            raise GenerationError(msg, stage=stage.value, path=path)

        content = self._engine.render(template_id, {**context, "stage": stage.value})
        if options.dry_run:
            return GeneratedFile(
                path=path,
                template_id=template_id,
                stage=stage,
                written=False,
                content=content,
            )

        try:
            self._fs.write_text(path, content)
        except OSError as e:
            msg = f"Failed to write {path}: {e}"
            raise GenerationError(msg, stage=stage.value, path=path) from e

        if self._logger is not None:
            self._logger.debug(
                "generated_file_written",
                stage=stage.value,
                template_id=template_id,
                path=str(path),
            )
        return GeneratedFile(
            path=path, template_id=template_id, stage=stage, written=True, content=content
        )
