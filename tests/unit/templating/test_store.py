from pathlib import Path

import pytest
from pytest_mock import MockerFixture

from xaheen.exceptions import TemplateError, TemplateNotFoundError
from xaheen.templating import Block, Template, TemplateStore

from .conftest import write_template


class TestTemplateStoreLoad:
    def test_loads_content_without_sidecar(
        self, templates_dir: Path, store: TemplateStore
    ) -> None:
        path = write_template(templates_dir, "component/react", "<div />")

        template = store.load("component/react")

        assert template.content == "<div />"
        assert template.path == path
        assert template.name == "component/react"
        assert template.parent is None

    def test_reads_sidecar_metadata(
        self, templates_dir: Path, store: TemplateStore
    ) -> None:
        _ = write_template(
            templates_dir,
            "child",
            "",
            name="Child",
            parent="base",
            blocks=[{"name": "x", "content": "2"}],
        )

        template = store.load("child")

        assert template.name == "Child"
        assert template.parent == "base"
        assert [(b.name, b.content) for b in template.blocks] == [("x", "2")]
        assert template.metadata_path == templates_dir / "child.json"

    def test_missing_template_raises_not_found(self, store: TemplateStore) -> None:
        with pytest.raises(TemplateNotFoundError) as exc_info:
            _ = store.load("nope")

        assert exc_info.value.template_id == "nope"

    def test_rejects_path_traversal(self, store: TemplateStore) -> None:
        with pytest.raises(TemplateNotFoundError):
            _ = store.load("../secrets")

    def test_malformed_sidecar_raises(
        self, templates_dir: Path, store: TemplateStore
    ) -> None:
        _ = (templates_dir / "broken.json").write_text("{not json", encoding="utf-8")

        with pytest.raises(TemplateError):
            _ = store.load("broken")

    def test_memoises_loaded_templates(
        self, templates_dir: Path, store: TemplateStore, mocker: MockerFixture
    ) -> None:
        _ = write_template(templates_dir, "page/default", "page")
        spy = mocker.spy(store.fs, "read_text")

        first = store.load("page/default")
        second = store.load("page/default")

        assert first is second
        assert spy.call_count == 1

    def test_earlier_directory_shadows_later(self, tmp_path: Path) -> None:
        project = tmp_path / "project"
        builtin = tmp_path / "builtin"
        _ = write_template(project, "hook/default", "project")
        _ = write_template(builtin, "hook/default", "builtin")
        store = TemplateStore([project, builtin])

        assert store.load("hook/default").content == "project"


class TestTemplateStoreListing:
    def test_list_ids_skips_partials(
        self, templates_dir: Path, store: TemplateStore
    ) -> None:
        _ = write_template(templates_dir, "component/react", "a")
        _ = write_template(templates_dir, "base/layout", None, name="Layout")
        _ = write_template(templates_dir, "partials/header", "h")

        assert store.list_ids() == ["base/layout", "component/react"]

    def test_partial_sources_are_keyed_by_relative_name(
        self, templates_dir: Path, store: TemplateStore
    ) -> None:
        _ = write_template(templates_dir, "partials/header", "H")
        _ = write_template(templates_dir, "partials/forms/field", "F")

        assert store.partial_sources() == {
            "header": "H",
            "forms/field": "F",
            "forms.field": "F",
        }


class TestTemplateStoreWrites:
    def test_save_writes_content_and_sidecar(
        self, templates_dir: Path, store: TemplateStore
    ) -> None:
        template = Template(
            id="custom/card",
            content="{{name}}",
            name="Card",
            parent="base",
            blocks=[Block("body", "x")],
        )

        saved = store.save(template)

        assert saved.path == templates_dir / "custom/card.hbs"
        assert saved.path.read_text(encoding="utf-8") == "{{name}}"
        reloaded = TemplateStore([templates_dir]).load("custom/card")
        assert reloaded.parent == "base"
        assert reloaded.blocks[0].name == "body"

    def test_register_makes_template_loadable(self, store: TemplateStore) -> None:
        store.register(Template(id="mem", content="in memory"))

        assert store.exists("mem") is True
        assert store.load("mem").content == "in memory"

    def test_invalidate_path_forgets_backed_templates(
        self, templates_dir: Path, store: TemplateStore
    ) -> None:
        path = write_template(templates_dir, "a", "1")
        _ = store.load("a")
        _ = path.write_text("2", encoding="utf-8")

        assert store.invalidate_path(path) == ["a"]
        assert store.load("a").content == "2"
