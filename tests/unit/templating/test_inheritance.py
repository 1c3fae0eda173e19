import pytest

from xaheen.exceptions import (
    BlockNotFoundError,
    CompileError,
    CyclicInheritanceError,
    TemplateNotFoundError,
)
from xaheen.templating import (
    Block,
    InheritanceResolver,
    Template,
    extract_blocks,
    scan_blocks,
    strip_blocks,
    wrap_block,
)


def make_loader(*templates: Template):
    by_id = {t.id: t for t in templates}

    def load(template_id: str) -> Template:
        if template_id not in by_id:
            raise TemplateNotFoundError(
                f"Template not found: {template_id}", template_id=template_id
            )
        return by_id[template_id]

    return load


class TestScanBlocks:
    def test_finds_nested_blocks_in_order(self) -> None:
        content = '{{#block "outer"}}a{{#block "inner"}}b{{/block}}{{/block}}'

        spans = scan_blocks(content)

        assert [(s.name, s.depth) for s in spans] == [("outer", 0), ("inner", 1)]

    def test_rejects_unclosed_block(self) -> None:
        with pytest.raises(ValueError, match="never closed"):
            _ = scan_blocks('{{#block "x"}}oops')

    def test_rejects_stray_close(self) -> None:
        with pytest.raises(ValueError, match="Unexpected"):
            _ = scan_blocks("oops{{/block}}")


class TestBlockText:
    def test_extract_returns_top_level_blocks_only(self) -> None:
        content = '{{#block "a"}}1{{#block "b"}}2{{/block}}{{/block}}'

        blocks = extract_blocks(content)

        assert [b.name for b in blocks] == ["a"]
        assert blocks[0].content == '1{{#block "b"}}2{{/block}}'

    def test_wrap_then_strip_keeps_content(self) -> None:
        assert strip_blocks(wrap_block("x", "hello")) == "hello"


class TestInheritanceResolver:
    def test_child_block_replaces_parent_block(self) -> None:
        parent = Template(id="base", content='A{{#block "x"}}1{{/block}}B')
        child = Template(id="child", parent="base", blocks=[Block("x", "2")])
        resolver = InheritanceResolver(make_loader(parent, child))

        assert resolver.resolve(child) == "A2B"

    def test_unoverridden_block_keeps_parent_default(self) -> None:
        parent = Template(
            id="base",
            content=(
                '{{#block "greeting"}}Hello{{/block}} '
                '{{#block "who"}}you{{/block}}'
            ),
        )
        child = Template(id="child", parent="base", blocks=[Block("greeting", "Hi")])
        resolver = InheritanceResolver(make_loader(parent, child))

        result = resolver.resolve(child)

        assert result == "Hi you"
        assert "Hello" not in result

    def test_inline_blocks_are_used_when_sidecar_has_none(self) -> None:
        parent = Template(id="base", content='<{{#block "body"}}{{/block}}>')
        child = Template(
            id="child", parent="base", content='{{#block "body"}}inline{{/block}}'
        )
        resolver = InheritanceResolver(make_loader(parent, child))

        assert resolver.resolve(child) == "<inline>"

    def test_three_level_chain_overrides_nearest_first(self) -> None:
        root = Template(id="root", content='[{{#block "a"}}r{{/block}}]')
        middle = Template(id="middle", parent="root", blocks=[Block("a", "m")])
        leaf = Template(id="leaf", parent="middle", blocks=[Block("a", "l")])
        resolver = InheritanceResolver(make_loader(root, middle, leaf))

        assert resolver.resolve(leaf) == "[l]"
        assert [t.id for t in resolver.lineage(leaf)] == ["leaf", "middle", "root"]

    @pytest.mark.parametrize(
        "order",
        [["outer", "inner"], ["inner", "outer"]],
        ids=["outer-first", "inner-first"],
    )
    def test_nested_overrides_ignore_declaration_order(self, order: list[str]) -> None:
        parent = Template(
            id="base",
            content='{{#block "outer"}}O[{{#block "inner"}}i{{/block}}]{{/block}}',
        )
        contents = {"outer": "X", "inner": "I"}
        child = Template(
            id="child",
            parent="base",
            blocks=[Block(name, contents[name]) for name in order],
        )
        resolver = InheritanceResolver(make_loader(parent, child))

        assert resolver.resolve(child) == "X"

    def test_inner_override_survives_when_outer_is_kept(self) -> None:
        parent = Template(
            id="base",
            content='{{#block "outer"}}O[{{#block "inner"}}i{{/block}}]{{/block}}',
        )
        child = Template(id="child", parent="base", blocks=[Block("inner", "I")])
        resolver = InheritanceResolver(make_loader(parent, child))

        assert resolver.resolve(child) == "O[I]"

    def test_parentless_template_is_returned_unchanged(self) -> None:
        content = '{{#block "x"}}keep{{/block}}'
        template = Template(id="solo", content=content)
        resolver = InheritanceResolver(make_loader(template))

        first = resolver.resolve(template)

        assert first == content
        assert resolver.resolve(template) == first

    def test_cycle_raises(self) -> None:
        a = Template(id="a", parent="b")
        b = Template(id="b", parent="a")
        resolver = InheritanceResolver(make_loader(a, b))

        with pytest.raises(CyclicInheritanceError) as exc_info:
            _ = resolver.resolve(a)

        assert exc_info.value.chain == ["a", "b", "a"]

    def test_lineage_detects_cycle(self) -> None:
        a = Template(id="a", parent="a")
        resolver = InheritanceResolver(make_loader(a))

        with pytest.raises(CyclicInheritanceError):
            _ = resolver.lineage(a)

    def test_undeclared_block_raises(self) -> None:
        parent = Template(id="base", content='{{#block "x"}}1{{/block}}')
        child = Template(id="child", parent="base", blocks=[Block("missing", "2")])
        resolver = InheritanceResolver(make_loader(parent, child))

        with pytest.raises(BlockNotFoundError) as exc_info:
            _ = resolver.resolve(child)

        assert exc_info.value.block_name == "missing"

    def test_missing_parent_raises_not_found(self) -> None:
        child = Template(id="child", parent="ghost", blocks=[Block("x", "1")])
        resolver = InheritanceResolver(make_loader(child))

        with pytest.raises(TemplateNotFoundError):
            _ = resolver.resolve(child)

    def test_unbalanced_parent_raises_compile_error(self) -> None:
        parent = Template(id="base", content='{{#block "x"}}1')
        child = Template(id="child", parent="base", blocks=[Block("x", "2")])
        resolver = InheritanceResolver(make_loader(parent, child))

        with pytest.raises(CompileError):
            _ = resolver.resolve(child)
