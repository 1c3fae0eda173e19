"""Builders for the library components commands work with.

Each builder reads the active CLIContext, so commands never thread the project
root, configuration or logger through by hand.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from xaheen.utils import find_project_root

from ._context import CLIContext

if TYPE_CHECKING:
    from pathlib import Path

    from xaheen.config import ConfigManager
    from xaheen.generators import Generator
    from xaheen.services import ServiceCatalog, ServiceInjector
    from xaheen.templating import TemplateEngine, TemplateSearchPaths


def get_project_root() -> Path:
    ctx = CLIContext.get_current()
    return ctx.project_root if ctx.project_root is not None else find_project_root()


def get_config_manager() -> ConfigManager:
    from xaheen.config import ConfigManager

    return ConfigManager(get_project_root(), logger=CLIContext.get_current().logger)


def get_search_paths() -> TemplateSearchPaths:
    """Template search paths of the current project, highest precedence first."""
    from xaheen.templating import build_search_paths

    config = CLIContext.get_current().config
    return build_search_paths(get_project_root(), config.templates.directories)


def get_template_engine(*, dev_mode: bool | None = None) -> TemplateEngine:
    """Create an engine over the project, user and built-in templates.

    Args:
        dev_mode: Force hot reload on or off. By default it follows
            ``templates.devMode`` and the environment.
    """
    from xaheen.templating import TemplateEngine, is_dev_environment

    ctx = CLIContext.get_current()
    if dev_mode is None:
        dev_mode = ctx.config.templates.dev_mode or is_dev_environment()
    return TemplateEngine.from_directories(
        get_search_paths().paths, dev_mode=dev_mode, logger=ctx.logger
    )


def get_service_catalog() -> ServiceCatalog:
    from xaheen.services import ServiceCatalog

    return ServiceCatalog.default(logger=CLIContext.get_current().logger)


def get_service_injector() -> ServiceInjector:
    from xaheen.services import ServiceInjector

    return ServiceInjector(
        get_service_catalog(),
        get_template_engine(),
        get_config_manager(),
        logger=CLIContext.get_current().logger,
    )


def get_generator() -> Generator:
    from xaheen.generators import Generator

    ctx = CLIContext.get_current()
    return Generator(
        get_template_engine(), ctx.config, get_project_root(), logger=ctx.logger
    )
