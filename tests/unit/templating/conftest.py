import json
from pathlib import Path

import pytest

from xaheen.templating import TemplateEngine, TemplateStore


def write_template(
    directory: Path,
    template_id: str,
    content: str | None = None,
    **metadata: object,
) -> Path:
    """Write ``{id}.hbs`` and, when metadata is given, its ``{id}.json`` sidecar."""
    path = directory / f"{template_id}.hbs"
    path.parent.mkdir(parents=True, exist_ok=True)
    if content is not None:
        _ = path.write_text(content, encoding="utf-8")
    if metadata:
        sidecar = {"id": template_id, "name": template_id, **metadata}
        _ = path.with_suffix(".json").write_text(json.dumps(sidecar), encoding="utf-8")
    return path


@pytest.fixture
def templates_dir(tmp_path: Path) -> Path:
    directory = tmp_path / "templates"
    directory.mkdir()
    return directory


@pytest.fixture
def store(templates_dir: Path) -> TemplateStore:
    return TemplateStore([templates_dir])


@pytest.fixture
def engine(store: TemplateStore) -> TemplateEngine:
    return TemplateEngine(store)
