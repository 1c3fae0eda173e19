import pytest

from xaheen.config import ConfigManager
from xaheen.services import ServiceCatalog, ServiceInjector
from xaheen.templating import TemplateEngine
from xaheen.utils import CommandResult, get_templates_dir
from tests.conftest import JsProject


class FakeRunner:
    """Records post step commands instead of running them."""

    def __init__(self, result: CommandResult | None = None) -> None:
        self.calls: list[list[str]] = []
        self.result: CommandResult = result or CommandResult(success=True, exit_code=0)

    def __call__(self, argv: list[str], **_kwargs: object) -> CommandResult:
        self.calls.append(list(argv))
        return self.result


@pytest.fixture
def catalog() -> ServiceCatalog:
    return ServiceCatalog.default(environ={})


@pytest.fixture
def runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def injector(
    js_project: JsProject, catalog: ServiceCatalog, runner: FakeRunner
) -> ServiceInjector:
    return ServiceInjector(
        catalog,
        TemplateEngine.from_directories([get_templates_dir()]),
        ConfigManager(js_project.root, environ={}),
        runner=runner,
    )
